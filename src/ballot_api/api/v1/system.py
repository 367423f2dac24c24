"""Service liveness and build information.

GET /health: liveness check
GET /info: version, git commit, environment and results poll cadence
"""

import functools
import subprocess
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends

from ballot_api import __version__
from ballot_api.core.config import Settings, get_settings

system_router = APIRouter(tags=["system"])


@functools.cache
def git_commit() -> str:
    """Short SHA of the checked-out source, or "unknown" outside a git checkout."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S603, S607
            capture_output=True,
            text=True,
            timeout=5,
            cwd=Path(__file__).resolve().parent,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    if result.returncode != 0:
        return "unknown"
    return result.stdout.strip() or "unknown"


@system_router.get("/health")
async def health_check() -> dict:
    """Liveness check; no authentication required."""
    return {"status": "healthy"}


@system_router.get("/info")
async def info(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    """Build and deployment details clients may use to tune polling."""
    return {
        "version": __version__,
        "git_commit": git_commit(),
        "environment": settings.environment,
        "results_poll_interval_seconds": settings.results_poll_interval_seconds,
    }
