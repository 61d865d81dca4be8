"""Rate-limited HTTP helpers used for GitHub API calls."""

from __future__ import annotations

import requests as _requests

from .config import get
from .ratelimit import RateLimiter


_limiter: RateLimiter | None = None


def get_limiter() -> RateLimiter:
    global _limiter
    if _limiter is None:
        calls_per_minute = get("api.calls_per_minute", 60)
        _limiter = RateLimiter(calls_per_minute=calls_per_minute)
    return _limiter


def configure(calls_per_minute: int) -> RateLimiter:
    """Replace the shared limiter (used once settings are loaded)."""
    global _limiter
    _limiter = RateLimiter(calls_per_minute=calls_per_minute)
    return _limiter


class _RateLimitedRequests:
    """Drop-in subset of requests module with rate limiting."""

    RequestException = _requests.RequestException

    @staticmethod
    def get(url: str, **kwargs):
        get_limiter().wait_if_needed()
        return _requests.get(url, **kwargs)

    @staticmethod
    def post(url: str, **kwargs):
        get_limiter().wait_if_needed()
        return _requests.post(url, **kwargs)

    @staticmethod
    def delete(url: str, **kwargs):
        get_limiter().wait_if_needed()
        return _requests.delete(url, **kwargs)


requests = _RateLimitedRequests()
