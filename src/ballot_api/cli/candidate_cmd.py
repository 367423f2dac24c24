"""CLI commands for candidate account approval."""

import asyncio
from typing import Annotated

import typer

candidate_app = typer.Typer()


@candidate_app.command("approve")
def approve(
    candidate_id: Annotated[str, typer.Argument(help="Candidate account subject id")],
) -> None:
    """Approve a candidate account."""
    asyncio.run(_set_approval_impl(candidate_id, True))


@candidate_app.command("revoke")
def revoke(
    candidate_id: Annotated[str, typer.Argument(help="Candidate account subject id")],
) -> None:
    """Revoke a candidate account's approval."""
    asyncio.run(_set_approval_impl(candidate_id, False))


async def _set_approval_impl(candidate_id: str, is_approved: bool) -> None:
    """Async implementation shared by approve and revoke."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services import candidate_account_service
    from ballot_api.services.errors import ServiceError

    settings = get_settings()
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            await candidate_account_service.set_approval(session, candidate_id, is_approved)
            action = "approved" if is_approved else "revoked"
            typer.echo(f"Candidate {candidate_id} {action}.")
    except ServiceError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()
