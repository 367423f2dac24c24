"""Integration tests for the voter, candidate and user CLI commands."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from ballot_api.cli.app import app
from ballot_api.services.errors import DuplicateUserError, VoterNotFoundError

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("JWT_SECRET_KEY", "cli-test-secret-key-that-is-long-enough")
    with patch("ballot_api.cli.app.setup_logging"):
        yield


@pytest.fixture
def mock_db() -> Iterator[MagicMock]:
    with (
        patch("ballot_api.core.database.init_engine"),
        patch("ballot_api.core.database.dispose_engine", new_callable=AsyncMock),
        patch("ballot_api.core.database.get_session_factory") as mock_factory,
    ):
        mock_session = AsyncMock()
        mock_factory.return_value.return_value.__aenter__ = AsyncMock(return_value=mock_session)
        mock_factory.return_value.return_value.__aexit__ = AsyncMock(return_value=False)
        yield mock_factory


class TestVoterCLI:
    def test_verify_default_true(self) -> None:
        with patch("ballot_api.cli.voter_cmd._set_flag_impl", new_callable=AsyncMock) as mock_impl:
            result = runner.invoke(app, ["voter", "verify", "voter-1"])
        assert result.exit_code == 0
        mock_impl.assert_awaited_once_with("voter-1", "is_verified", True)

    def test_ineligible(self) -> None:
        with patch("ballot_api.cli.voter_cmd._set_flag_impl", new_callable=AsyncMock) as mock_impl:
            result = runner.invoke(app, ["voter", "eligible", "voter-1", "--ineligible"])
        assert result.exit_code == 0
        mock_impl.assert_awaited_once_with("voter-1", "is_eligible", False)

    def test_unverify_calls_service(self, mock_db: MagicMock) -> None:
        with patch("ballot_api.services.voter_service.set_verified", new_callable=AsyncMock) as mock_set:
            result = runner.invoke(app, ["voter", "verify", "voter-1", "--unverified"])
        assert result.exit_code == 0
        assert mock_set.call_args.args[1:] == ("voter-1", False)
        assert "Voter voter-1: is_verified = false" in result.output

    def test_unknown_voter(self, mock_db: MagicMock) -> None:
        with patch(
            "ballot_api.services.voter_service.set_eligible",
            new_callable=AsyncMock,
            side_effect=VoterNotFoundError,
        ):
            result = runner.invoke(app, ["voter", "eligible", "ghost"])
        assert result.exit_code == 1


class TestCandidateCLI:
    def test_approve(self) -> None:
        with patch("ballot_api.cli.candidate_cmd._set_approval_impl", new_callable=AsyncMock) as mock_impl:
            result = runner.invoke(app, ["candidate", "approve", "cand-1"])
        assert result.exit_code == 0
        mock_impl.assert_awaited_once_with("cand-1", True)

    def test_revoke_output(self, mock_db: MagicMock) -> None:
        with patch(
            "ballot_api.services.candidate_account_service.set_approval", new_callable=AsyncMock
        ) as mock_set:
            result = runner.invoke(app, ["candidate", "revoke", "cand-1"])
        assert result.exit_code == 0
        assert mock_set.call_args.args[1:] == ("cand-1", False)
        assert "Candidate cand-1 revoked." in result.output


class TestUserCLI:
    _ARGS = [
        "user",
        "create",
        "--username",
        "admin",
        "--email",
        "admin@example.com",
        "--password",
        "password123",
        "--role",
        "admin",
    ]

    def test_create_passes_options(self) -> None:
        with patch("ballot_api.cli.user_cmd._create_user", new_callable=AsyncMock) as mock_impl:
            result = runner.invoke(app, self._ARGS)
        assert result.exit_code == 0
        mock_impl.assert_awaited_once_with(
            "admin", "admin@example.com", "password123", "admin", if_not_exists=False
        )

    def test_duplicate_is_error(self, mock_db: MagicMock) -> None:
        with patch(
            "ballot_api.services.auth_service.create_user",
            new_callable=AsyncMock,
            side_effect=DuplicateUserError,
        ):
            result = runner.invoke(app, self._ARGS)
        assert result.exit_code == 1

    def test_duplicate_skipped_if_not_exists(self, mock_db: MagicMock) -> None:
        with patch(
            "ballot_api.services.auth_service.create_user",
            new_callable=AsyncMock,
            side_effect=DuplicateUserError,
        ):
            result = runner.invoke(app, [*self._ARGS, "--if-not-exists"])
        assert result.exit_code == 0
        assert "already exists, skipping" in result.output
