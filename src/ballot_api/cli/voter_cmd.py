"""CLI commands for voter verification and eligibility."""

import asyncio
from typing import Annotated

import typer

voter_app = typer.Typer()


@voter_app.command("verify")
def verify(
    voter_id: Annotated[str, typer.Argument(help="Voter subject id")],
    verified: Annotated[bool, typer.Option("--verified/--unverified", help="New verification state")] = True,
) -> None:
    """Set or clear a voter's verification flag."""
    asyncio.run(_set_flag_impl(voter_id, "is_verified", verified))


@voter_app.command("eligible")
def eligible(
    voter_id: Annotated[str, typer.Argument(help="Voter subject id")],
    is_eligible: Annotated[bool, typer.Option("--eligible/--ineligible", help="New eligibility state")] = True,
) -> None:
    """Set or clear a voter's eligibility flag."""
    asyncio.run(_set_flag_impl(voter_id, "is_eligible", is_eligible))


async def _set_flag_impl(voter_id: str, flag: str, value: bool) -> None:
    """Async implementation shared by the flag commands."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services import voter_service
    from ballot_api.services.errors import ServiceError

    settings = get_settings()
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    setter = voter_service.set_verified if flag == "is_verified" else voter_service.set_eligible
    try:
        factory = get_session_factory()
        async with factory() as session:
            await setter(session, voter_id, value)
            typer.echo(f"Voter {voter_id}: {flag} = {str(value).lower()}")
    except ServiceError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()
