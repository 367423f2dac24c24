"""Unit tests for authentication and signup schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from ballot_api.schemas.auth import (
    CandidateSignupRequest,
    LoginRequest,
    TokenResponse,
    UserCreateRequest,
    VoterSignupRequest,
)


def _candidate_payload(**overrides: object) -> dict:
    payload: dict = {
        "username": "dana",
        "email": "dana@example.com",
        "password": "password123",
        "full_name": "Dana Scully",
        "date_of_birth": date(1980, 2, 23),
        "national_id": "ID-12345",
        "party": "Reform",
        "manifesto": "Transparent budgets and open council meetings.",
    }
    payload.update(overrides)
    return payload


class TestLoginRequest:
    def test_valid(self) -> None:
        req = LoginRequest(username="admin", password="password123")
        assert req.username == "admin"

    def test_short_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(username="admin", password="short")


class TestUserCreateRequest:
    @pytest.mark.parametrize("role", ["admin", "voter", "candidate"])
    def test_valid_roles(self, role: str) -> None:
        req = UserCreateRequest(username="someone", email="s@example.com", password="password123", role=role)
        assert req.role == role

    @pytest.mark.parametrize("role", ["analyst", "viewer", ""])
    def test_invalid_role_rejected(self, role: str) -> None:
        with pytest.raises(ValidationError):
            UserCreateRequest(username="someone", email="s@example.com", password="password123", role=role)


class TestVoterSignupRequest:
    def test_valid(self) -> None:
        req = VoterSignupRequest(username="voter1", email="v@example.com", password="password123")
        assert req.email == "v@example.com"

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VoterSignupRequest(username="voter1", email="not-an-email", password="password123")


class TestCandidateSignupRequest:
    def test_valid(self) -> None:
        req = CandidateSignupRequest(**_candidate_payload())
        assert req.full_name == "Dana Scully"
        assert req.image_url is None

    def test_blank_image_url_is_none(self) -> None:
        req = CandidateSignupRequest(**_candidate_payload(image_url="  "))
        assert req.image_url is None

    def test_image_url_kept_as_submitted(self) -> None:
        req = CandidateSignupRequest(**_candidate_payload(image_url="https://cdn.example.com"))
        assert req.image_url == "https://cdn.example.com"

    def test_image_url_must_be_url(self) -> None:
        with pytest.raises(ValidationError):
            CandidateSignupRequest(**_candidate_payload(image_url="not a url"))

    def test_under_minimum_age_rejected(self) -> None:
        today = date.today()
        with pytest.raises(ValidationError, match="at least 21 years old"):
            CandidateSignupRequest(**_candidate_payload(date_of_birth=date(today.year - 20, 1, 1)))

    def test_short_manifesto_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CandidateSignupRequest(**_candidate_payload(manifesto="Too short"))

    def test_national_id_required(self) -> None:
        payload = _candidate_payload()
        del payload["national_id"]
        with pytest.raises(ValidationError):
            CandidateSignupRequest(**payload)


def test_token_response_defaults() -> None:
    resp = TokenResponse(access_token="a", refresh_token="r", expires_in=1800)
    assert resp.token_type == "bearer"
