"""
GitHub OAuth endpoints
"""

from typing import Optional
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from config.settings import settings
from src.api.session import get_anonymous_github_client
from src.services.github_client import GitHubAPIError, GitHubClient

router = APIRouter()
logger = structlog.get_logger()


def authorize_url() -> str:
    query = urlencode(
        {
            "client_id": settings.GITHUB_CLIENT_ID,
            "redirect_uri": settings.oauth_redirect_uri,
            "scope": settings.GITHUB_OAUTH_SCOPE,
        },
        safe=":/,",
    )
    return f"{settings.GITHUB_OAUTH_URL}/login/oauth/authorize?{query}"


@router.get("/github")
async def github_login() -> JSONResponse:
    """
    URL the frontend redirects to for GitHub sign-in
    """
    return JSONResponse(content={"url": authorize_url()})


@router.get("/github/callback")
async def github_callback(
    code: Optional[str] = Query(None, description="OAuth authorization code"),
    github: GitHubClient = Depends(get_anonymous_github_client),
) -> JSONResponse:
    """
    Exchange the OAuth code for a token, store it in the session cookie and
    return the signed-in user
    """
    logger.info("GitHub callback received", has_code=bool(code))
    if not code:
        raise HTTPException(status_code=400, detail="code query param required")

    try:
        token_data = await github.exchange_oauth_code(code, settings.oauth_redirect_uri)
        access_token = token_data.get("access_token")
        if not access_token:
            logger.error(
                "Token exchange returned no access token",
                error=token_data.get("error"),
                description=token_data.get("error_description"),
            )
            raise GitHubAPIError(
                "No access token received from GitHub",
                status_code=401,
                response_data=token_data,
            )

        async with github.with_token(access_token) as authed:
            user = await authed.get_authenticated_user()

    except GitHubAPIError as e:
        status_code = e.status_code or 500
        logger.error("OAuth error", status_code=status_code, details=e.details)
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": "Authentication failed",
                "details": e.details,
            },
        )

    response = JSONResponse(
        content={
            "success": True,
            "user": user,
            "message": "Authentication successful",
        }
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.SESSION_MAX_AGE,
    )
    logger.info("User authenticated", login=user.get("login"))
    return response
