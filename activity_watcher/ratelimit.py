"""Client-side GitHub API rate limiting.

Two limits apply: a sliding window of calls per minute chosen in config, and
the quota GitHub reports on each response (X-RateLimit-Remaining /
X-RateLimit-Reset, or Retry-After on secondary limits). Once the quota is
spent, every worker waits until GitHub says it resets.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Mapping

LOG = logging.getLogger(__name__)


def _header_seconds(headers: Mapping[str, str], name: str) -> float | None:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        LOG.debug("Ignoring non-numeric %s header: %r", name, value)
        return None


class RateLimiter:
    """Calls/minute window plus GitHub quota pauses, shared by worker threads."""

    def __init__(self, calls_per_minute: int = 60):
        self.limit = max(1, int(calls_per_minute))
        self._calls: deque[float] = deque()
        self._paused_until = 0.0
        self._lock = threading.Lock()

    @property
    def paused_until(self) -> float:
        return self._paused_until

    def observe(self, headers: Mapping[str, str]) -> float:
        """Record GitHub's quota headers from a response.

        Returns how long (seconds) the next calls will be held back.
        """
        now = time.time()
        until = None

        retry_after = _header_seconds(headers, "Retry-After")
        if retry_after is not None:
            until = now + retry_after
        elif headers.get("X-RateLimit-Remaining") == "0":
            until = _header_seconds(headers, "X-RateLimit-Reset")

        if until is None or until <= now:
            return 0.0

        with self._lock:
            self._paused_until = max(self._paused_until, until)
        LOG.warning("GitHub API quota exhausted: pausing calls for %.0fs", until - now)
        return until - now

    def wait_if_needed(self) -> float:
        """Block if needed and return the last sleep duration (seconds)."""
        sleep_for = 0.0
        while True:
            with self._lock:
                now = time.time()
                if self._paused_until > now:
                    sleep_for = self._paused_until - now
                else:
                    cutoff = now - 60
                    while self._calls and self._calls[0] < cutoff:
                        self._calls.popleft()

                    if len(self._calls) < self.limit:
                        self._calls.append(now)
                        return sleep_for

                    sleep_for = max(0.0, 60 - (now - self._calls[0]))

            if sleep_for > 0:
                LOG.info("Rate limiting GitHub API calls: sleeping %.2fs (limit=%d/min)", sleep_for, self.limit)
                time.sleep(sleep_for)
