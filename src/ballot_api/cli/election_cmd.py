"""CLI commands for election administration: listing, results and deletion."""

import asyncio
import uuid
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from ballot_api.lib.election_rules import ElectionPhase

election_app = typer.Typer()


@election_app.command("list")
def list_elections(
    phase: Annotated[
        str | None,
        typer.Option("--phase", help="Filter by phase: upcoming, ongoing, concluded"),
    ] = None,
    page: Annotated[int, typer.Option("--page", min=1, help="Page number")] = 1,
    page_size: Annotated[int, typer.Option("--page-size", min=1, max=100, help="Results per page")] = 20,
) -> None:
    """List elections, newest start date first."""
    from ballot_api.lib.election_rules import ElectionPhase

    try:
        parsed_phase = ElectionPhase(phase) if phase is not None else None
    except ValueError as e:
        typer.echo(f"Error: unknown phase {phase!r}", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_list_impl(parsed_phase, page, page_size))


async def _list_impl(phase: "ElectionPhase | None", page: int, page_size: int) -> None:
    """Async implementation of the list command."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services import election_service

    settings = get_settings()
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            items, total = await election_service.list_elections(
                session,
                phase=phase,
                page=page,
                page_size=page_size,
            )
            typer.echo(f"{'ID':<38} {'Phase':<10} {'Start':<12} {'End':<12} Name")
            typer.echo("-" * 100)
            for item in items:
                typer.echo(
                    f"{item.id!s:<38} {item.phase.value:<10} {item.start_date.date()!s:<12} "
                    f"{item.end_date.date()!s:<12} {item.name}"
                )
            typer.echo(f"\nTotal: {total}")
    finally:
        await dispose_engine()


@election_app.command("results")
def results(
    election_id: Annotated[str, typer.Argument(help="Election UUID")],
) -> None:
    """Show an election's tally, highest vote count first."""
    asyncio.run(_results_impl(_parse_uuid(election_id)))


async def _results_impl(election_id: uuid.UUID) -> None:
    """Async implementation of the results command."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services import election_service
    from ballot_api.services.errors import ServiceError

    settings = get_settings()
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            tally = await election_service.get_results(session, election_id)
            typer.echo(f"{tally.election_name} ({tally.phase.value})")
            for rank, entry in enumerate(tally.results, start=1):
                typer.echo(f"  {rank}. {entry.candidate_name} [{entry.party}]: {entry.vote_count}")
            typer.echo(f"\nTotal votes: {tally.total_votes}")
    except ServiceError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()


@election_app.command("delete")
def delete(
    election_id: Annotated[str, typer.Argument(help="Election UUID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")] = False,
) -> None:
    """Delete an election with its candidates and vote ledger. Irreversible."""
    parsed = _parse_uuid(election_id)
    if not yes:
        typer.confirm(f"Permanently delete election {parsed}?", abort=True)
    asyncio.run(_delete_impl(parsed))


async def _delete_impl(election_id: uuid.UUID) -> None:
    """Async implementation of the delete command."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services import election_service
    from ballot_api.services.errors import ServiceError

    settings = get_settings()
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            await election_service.delete_election(session, election_id)
            typer.echo(f"Election {election_id} deleted.")
    except ServiceError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()


def _parse_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError as e:
        typer.echo(f"Error: invalid election ID {value!r}", err=True)
        raise typer.Exit(code=1) from e
