#!/usr/bin/env python3
"""
OpenHub AI backend
Main application entry point
"""

from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from src.api.auth import router as auth_router
from src.api.github import router as github_router
from src.api.health import router as health_router
from src.api.learn import router as learn_router
from config.settings import settings

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Create FastAPI application
app = FastAPI(
    title="OpenHub AI",
    description="GitHub repository explorer with AI-generated summaries",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(github_router, prefix="/api/github", tags=["github"])
app.include_router(learn_router, prefix="/api/learn", tags=["learn"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": ...} like the upstream proxy errors"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/", tags=["root"])
async def root():
    """Welcome endpoint for the OpenHub AI backend"""
    return {
        "message": "OpenHub AI backend",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/test", tags=["root"])
async def connectivity_test():
    """Lets the frontend verify it can reach the backend"""
    return {
        "message": "Backend is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "aiStatus": f"OpenRouter {settings.OPENROUTER_MODEL} integration "
        + ("active" if settings.OPENROUTER_API_KEY else "not configured"),
    }


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info(
        "Starting OpenHub AI backend",
        host=settings.HOST,
        port=settings.PORT,
        environment=settings.ENVIRONMENT,
        llm_configured=bool(settings.OPENROUTER_API_KEY),
        oauth_configured=bool(settings.GITHUB_CLIENT_ID),
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up on shutdown"""
    logger.info("Shutting down OpenHub AI backend")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )
