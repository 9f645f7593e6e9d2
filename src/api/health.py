"""
Health check endpoints
"""

import shutil
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config.settings import settings

router = APIRouter()
logger = structlog.get_logger()

SERVICE_VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def health_check() -> JSONResponse:
    """
    Health check endpoint for monitoring
    """
    return JSONResponse(
        content={
            "status": "healthy",
            "timestamp": _now(),
            "version": SERVICE_VERSION,
            "service": "openhub-ai-backend",
            "port": settings.PORT,
            "debug": settings.DEBUG,
        },
        status_code=200,
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """
    Readiness check endpoint for deployment
    """
    checks = {
        "git": check_git_availability(),
        "llm_api_key": bool(settings.OPENROUTER_API_KEY),
        "github_oauth": bool(settings.GITHUB_CLIENT_ID and settings.GITHUB_CLIENT_SECRET),
    }
    all_ready = all(checks.values())
    if not all_ready:
        logger.warning("Service not ready", checks=checks)

    return JSONResponse(
        content={
            "ready": all_ready,
            "checks": checks,
            "timestamp": _now(),
        },
        status_code=200 if all_ready else 503,
    )


def check_git_availability() -> bool:
    """Check if git is available"""
    return shutil.which("git") is not None
