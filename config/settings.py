"""
Application settings and configuration
"""

from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=5001, description="Server port")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    ENVIRONMENT: str = Field(
        default="development", description="Deployment environment"
    )

    # Frontend / CORS
    FRONTEND_URL: str = Field(
        default="http://localhost:3000", description="Frontend base URL"
    )
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:3001,http://localhost:5001",
        description="Comma-separated list of allowed origins",
    )

    # GitHub Configuration
    GITHUB_CLIENT_ID: str = Field(default="", description="GitHub OAuth app client ID")
    GITHUB_CLIENT_SECRET: str = Field(
        default="", description="GitHub OAuth app client secret"
    )
    GITHUB_API_URL: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )
    GITHUB_OAUTH_URL: str = Field(
        default="https://github.com", description="GitHub OAuth base URL"
    )
    GITHUB_OAUTH_SCOPE: str = Field(
        default="read:user,repo", description="Scopes requested at login"
    )

    # Session Configuration
    SESSION_COOKIE_NAME: str = Field(
        default="github_token", description="Cookie holding the GitHub access token"
    )
    SESSION_MAX_AGE: int = Field(
        default=7 * 24 * 60 * 60, description="Session cookie lifetime in seconds"
    )

    # LLM Configuration
    OPENROUTER_API_KEY: str = Field(default="", description="OpenRouter API key")
    OPENROUTER_BASE_URL: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )
    OPENROUTER_MODEL: str = Field(
        default="openai/gpt-4o", description="Chat completion model"
    )
    OPENROUTER_REFERER: str = Field(
        default="https://openhub.ai", description="HTTP-Referer sent to OpenRouter"
    )
    OPENROUTER_TITLE: str = Field(
        default="OpenHub AI", description="X-Title sent to OpenRouter"
    )
    LLM_TIMEOUT: int = Field(default=60, description="LLM request timeout in seconds")

    # Learning resources
    YOUTUBE_API_KEY: str = Field(default="", description="YouTube Data API key")
    LEARN_RATE_LIMIT: int = Field(
        default=30, description="Contextual resource requests per window"
    )
    LEARN_RATE_WINDOW: int = Field(
        default=60, description="Rate limit window in seconds"
    )
    STREAM_POLL_INTERVAL: float = Field(
        default=2.0, description="Seconds between git HEAD polls"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get allowed origins as a list, frontend URL included"""
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def oauth_redirect_uri(self) -> str:
        return f"{self.FRONTEND_URL.rstrip('/')}/auth/callback"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
