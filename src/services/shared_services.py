"""
Shared service instances to prevent multiple initialization issues
"""

from config.settings import settings
from src.utils.rate_limiter import RateLimiter
from .git_service import ChangeMonitor
from .llm_client import LLMClient

# Global shared instances - initialized once
_llm_client = None
_change_monitor = None

# Route dependency, so it must exist at import time
learn_rate_limiter = RateLimiter(settings.LEARN_RATE_LIMIT, settings.LEARN_RATE_WINDOW)


def get_llm_client() -> LLMClient:
    """Get shared LLMClient instance"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def get_change_monitor() -> ChangeMonitor:
    """Get shared ChangeMonitor instance"""
    global _change_monitor
    if _change_monitor is None:
        _change_monitor = ChangeMonitor()
    return _change_monitor


def reset_services():
    """Reset all shared services (for testing)"""
    global _llm_client, _change_monitor
    _llm_client = None
    _change_monitor = None
    learn_rate_limiter.reset()
