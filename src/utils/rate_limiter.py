"""
In-memory sliding window rate limiting for FastAPI routes
"""

import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

import structlog
from fastapi import HTTPException, Request

logger = structlog.get_logger()

CLEANUP_INTERVAL = 30.0


class RateLimiter:
    """Per-client-IP sliding window, usable as a route dependency"""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_cleanup = clock()

    def _prune(self, window: Deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()

    def cleanup_expired(self) -> None:
        """Drop clients whose window has no requests left"""
        now = self._clock()
        self._last_cleanup = now
        expired = []
        for key, window in self._windows.items():
            self._prune(window, now)
            if not window:
                expired.append(key)
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> bool:
        """Record a request for key; False when the limit is exceeded"""
        now = self._clock()
        if now - self._last_cleanup >= CLEANUP_INTERVAL:
            self.cleanup_expired()

        window = self._windows[key]
        self._prune(window, now)

        if len(window) >= self.max_requests:
            return False
        window.append(now)
        return True

    def tracked_clients(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        self._windows.clear()

    async def __call__(self, request: Request) -> None:
        client_ip = request.client.host if request.client else "unknown"
        if not self.hit(client_ip):
            logger.warning("Rate limit exceeded", client_ip=client_ip, path=request.url.path)
            raise HTTPException(
                status_code=429,
                detail="Too many requests, please try again later.",
                headers={"Retry-After": str(int(self.window_seconds))},
            )
