"""
Request-scoped dependencies shared by the API routers
"""

from typing import AsyncIterator, Optional

import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.services.github_client import GitHubAPIError, GitHubClient

logger = structlog.get_logger()


def get_session_token(request: Request) -> Optional[str]:
    """GitHub access token from the session cookie, if any"""
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def require_session_token(token: Optional[str] = Depends(get_session_token)) -> str:
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated: missing token cookie")
    return token


async def get_github_client(
    token: Optional[str] = Depends(get_session_token),
) -> AsyncIterator[GitHubClient]:
    """GitHub client for this request, authenticated when a session exists"""
    async with GitHubClient(token=token) as client:
        yield client


async def get_anonymous_github_client() -> AsyncIterator[GitHubClient]:
    """GitHub client that never carries the session token"""
    async with GitHubClient() as client:
        yield client


def github_error_response(error: GitHubAPIError, message: str, route: str) -> JSONResponse:
    """Translate an upstream GitHub failure into {error, details}"""
    status_code = error.status_code or 500
    logger.error(
        "GitHub API error",
        route=route,
        status_code=status_code,
        details=error.details,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "details": error.details},
    )
