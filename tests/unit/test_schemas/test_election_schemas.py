"""Unit tests for election request and response schemas."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from ballot_api.schemas.assistant import ChatRequest, SummarizeRequest
from ballot_api.schemas.election import CandidateCreateRequest, ElectionCreateRequest, VoteRequest

_START = datetime(2026, 5, 1, tzinfo=UTC)


def _candidate(**overrides: object) -> dict:
    data: dict = {"name": "Alice", "party": "Blue", "platform": "Better roads for everyone."}
    data.update(overrides)
    return data


def _election(**overrides: object) -> dict:
    data: dict = {
        "name": "Spring Election",
        "description": "Elects the mayor of the city.",
        "start_date": _START,
        "end_date": _START + timedelta(days=3),
        "candidates": [_candidate()],
    }
    data.update(overrides)
    return data


class TestCandidateCreateRequest:
    def test_valid(self) -> None:
        req = CandidateCreateRequest(**_candidate(image_url="https://example.com/a.png"))
        assert req.image_url == "https://example.com/a.png"

    @pytest.mark.parametrize("url", ["https://cdn.example.com", "http://Example.com/Photo.PNG?size=2"])
    def test_image_url_kept_as_submitted(self, url: str) -> None:
        assert CandidateCreateRequest(**_candidate(image_url=url)).image_url == url

    def test_blank_image_url_is_none(self) -> None:
        assert CandidateCreateRequest(**_candidate(image_url="")).image_url is None

    @pytest.mark.parametrize(
        "override",
        [{"name": "A"}, {"party": "B"}, {"platform": "short"}, {"image_url": "ftp:/bad"}],
    )
    def test_invalid_fields_rejected(self, override: dict) -> None:
        with pytest.raises(ValidationError):
            CandidateCreateRequest(**_candidate(**override))


class TestElectionCreateRequest:
    def test_valid(self) -> None:
        req = ElectionCreateRequest(**_election())
        assert len(req.candidates) == 1

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValidationError, match="End date must be after start date."):
            ElectionCreateRequest(**_election(end_date=_START - timedelta(hours=1)))

    def test_end_equal_start_rejected(self) -> None:
        with pytest.raises(ValidationError, match="End date must be after start date."):
            ElectionCreateRequest(**_election(end_date=_START))

    def test_mixed_naive_and_aware_dates_compared_in_utc(self) -> None:
        req = ElectionCreateRequest(**_election(end_date=datetime(2026, 5, 2)))
        assert req.end_date == datetime(2026, 5, 2)

    def test_no_candidates_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ElectionCreateRequest(**_election(candidates=[]))

    @pytest.mark.parametrize("override", [{"name": "Vote"}, {"description": "Too short"}])
    def test_short_text_rejected(self, override: dict) -> None:
        with pytest.raises(ValidationError):
            ElectionCreateRequest(**_election(**override))


class TestVoteRequest:
    def test_empty_candidate_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VoteRequest(candidate_id="")

    def test_overlong_candidate_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VoteRequest(candidate_id="x" * 37)


class TestAssistantSchemas:
    def test_summarize_requires_text(self) -> None:
        with pytest.raises(ValidationError):
            SummarizeRequest(text="")

    def test_chat_history_defaults_empty(self) -> None:
        assert ChatRequest(query="How do runoffs work?").history == []

    def test_chat_history_turns(self) -> None:
        req = ChatRequest(query="q", history=[{"user": "hi"}, {"model": "hello"}])
        assert req.history[0].user == "hi"
        assert req.history[0].model is None
        assert req.history[1].model == "hello"
