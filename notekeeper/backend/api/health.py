"""
Health Check Endpoints.

Provides liveness, readiness, and detailed health checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (notes file usable)
- /health/detailed: Component-by-component status (for debugging)
"""

import asyncio
import os
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException

from notekeeper.backend.core.exceptions import PersistenceError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)

READY_TIMEOUT_SECONDS = 5


async def check_storage() -> dict[str, Any]:
    """
    Check that the notes file can be read and its directory written.

    Returns:
        Dict with status, latency, note total, per-view counts, whether the
        file exists yet, and an error message when unhealthy
    """
    from notekeeper.backend.core.dependencies import get_note_repository
    from notekeeper.backend.services.projection import count_notes

    try:
        repo = get_note_repository()

        start = utc_now()
        notes = await repo.load_all()
        latency_ms = int((utc_now() - start).total_seconds() * 1000)

        directory = repo.path.parent
        writable = (
            os.access(directory, os.W_OK)
            if directory.exists()
            else os.access(_nearest_existing(directory), os.W_OK)
        )
        if not writable:
            return {
                "status": "unhealthy",
                "error": f"Data directory not writable: {directory}",
            }

        return {
            "status": "healthy",
            "latency_ms": latency_ms,
            "file_exists": repo.path.exists(),
            "notes": len(notes),
            "counts": count_notes(notes).model_dump(),
        }

    except PersistenceError as e:
        logger.warning("Storage health check failed", extra={"error": e.message})
        return {
            "status": "unhealthy",
            "error": e.message,
        }


def _nearest_existing(path: Path) -> Path:
    """Closest ancestor of ``path`` that exists on disk."""
    while not path.exists() and path != path.parent:
        path = path.parent
    return path


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Readiness check.

    Returns 200 if ready to serve traffic, 503 if the notes file
    cannot be used.
    """
    try:
        async with asyncio.timeout(READY_TIMEOUT_SECONDS):
            storage_result = await check_storage()
    except TimeoutError:
        storage_result = {"status": "unhealthy", "error": "check timed out"}

    checks = {"storage": storage_result}

    if storage_result.get("status") == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health_check() -> dict[str, Any]:
    """
    Detailed health check.

    Returns storage status plus application identity and data file location.
    """
    from notekeeper.backend.core.config import get_app_config, get_data_file, get_environment

    storage_result = await check_storage()

    app_settings = get_app_config().application
    app_info = {
        "name": app_settings.name,
        "env": get_environment(),
        "debug": app_settings.debug,
        "version": app_settings.version,
        "data_file": str(get_data_file()),
    }

    return {
        "status": storage_result.get("status", "unhealthy"),
        "application": app_info,
        "checks": {"storage": storage_result},
        "timestamp": utc_now().isoformat(),
    }
