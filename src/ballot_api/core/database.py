"""Process-wide async engine for the election store.

The FastAPI lifespan and each admin CLI command call :func:`init_engine`
once with ``settings.database_url`` and :func:`dispose_engine` on the way
out. Request handlers get sessions from :func:`get_session_factory` through
the ``get_async_session`` dependency.

Production runs PostgreSQL through asyncpg; local runs and tests use SQLite
through aiosqlite.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the engine created by :func:`init_engine`.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the election store.

    Sessions keep attribute values after commit, so services can return
    committed elections and candidates without reloading them.

    Raises:
        RuntimeError: If the engine has not been initialized.
    """
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def init_engine(database_url: str, *, schema: str | None = None, **kwargs: object) -> AsyncEngine:
    """Create the engine and session factory for the election store.

    Args:
        database_url: Async SQLAlchemy URL, ``postgresql+asyncpg://`` or
            ``sqlite+aiosqlite://``.
        schema: PostgreSQL schema put first on the ``search_path``, so a
            preview deployment can share a database with production.
        **kwargs: Passed through to ``create_async_engine``.

    Returns:
        The new engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    if schema is not None:
        connect_args = kwargs.pop("connect_args", {})
        if not isinstance(connect_args, dict):
            msg = "connect_args must be a dict"
            raise TypeError(msg)
        # asyncpg takes server settings rather than a libpq options string
        server_settings = connect_args.setdefault("server_settings", {})
        server_settings["search_path"] = f"{schema},public"
        kwargs["connect_args"] = connect_args
    # Pool sizing only applies to connection-pooled engines (not SQLite/StaticPool)
    uses_static_pool = kwargs.get("poolclass") is StaticPool or "sqlite" in database_url
    if not uses_static_pool:
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 5)
        kwargs.setdefault("pool_pre_ping", True)
    _engine = create_async_engine(database_url, **kwargs)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine; safe to call when none exists."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
