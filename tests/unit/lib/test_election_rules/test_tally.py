"""Tests for result tallying."""

from ballot_api.lib.election_rules import TallyEntry, rank_tally, total_votes


def _entry(cid: str, votes: int) -> TallyEntry:
    return TallyEntry(candidate_id=cid, candidate_name=cid.upper(), party="P", vote_count=votes)


class TestRankTally:
    def test_descending_by_votes(self) -> None:
        ranked = rank_tally([_entry("a", 1), _entry("b", 5), _entry("c", 3)])
        assert [e.candidate_id for e in ranked] == ["b", "c", "a"]

    def test_ties_keep_ballot_order(self) -> None:
        ranked = rank_tally([_entry("a", 2), _entry("b", 4), _entry("c", 2), _entry("d", 2)])
        assert [e.candidate_id for e in ranked] == ["b", "a", "c", "d"]

    def test_empty(self) -> None:
        assert rank_tally([]) == []


def test_total_votes() -> None:
    assert total_votes([_entry("a", 2), _entry("b", 3)]) == 5
    assert total_votes([]) == 0
