"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (upstream notes API reachable)
"""

from typing import Any

import httpx
from fastapi import APIRouter, HTTPException

from coldboard.backend.core.config import get_notes_api_url
from coldboard.backend.core.logging import get_logger
from coldboard.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_notes_api() -> dict[str, Any]:
    """
    Check that the notes API answers at all.

    Any HTTP response counts as reachable; only transport failures are
    reported unhealthy.

    Returns:
        Dict with status, latency, and optional error message
    """
    base_url, timeout = get_notes_api_url()
    start = utc_now()
    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
            await client.get("/")
    except httpx.HTTPError as e:
        logger.warning("Notes API health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {"status": "healthy", "latency_ms": latency_ms}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the notes API cannot be reached.
    """
    checks = {"notes_api": await check_notes_api()}

    if checks["notes_api"]["status"] != "healthy":
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
