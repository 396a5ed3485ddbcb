"""
Request throttling for external lookups (GIS, geocoding, relay).

City GIS services rate-limit anonymous callers, so every outbound request
goes through a per-host sliding window:
1. At most N requests per host per minute
2. Callers block until a slot frees up (no retry/backoff here)
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from functools import wraps
from typing import Callable, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION
# ============================================================================

RATE_LIMITS = {
    "requests_per_minute": 30,  # Per host
    "window_seconds": 60,
}


# ============================================================================
# SLIDING WINDOW THROTTLE
# ============================================================================

@dataclass
class HostWindow:
    """Recent request timestamps for one host."""
    host: str
    timestamps: deque = field(default_factory=deque)
    total_requests: int = 0
    total_wait_seconds: float = 0.0


class RequestThrottle:
    """Per-host sliding-window request limiter. Thread-safe."""

    def __init__(
        self,
        requests_per_minute: int = RATE_LIMITS["requests_per_minute"],
        window_seconds: float = RATE_LIMITS["window_seconds"],
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self.limit = requests_per_minute
        self.window = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self.hosts: dict[str, HostWindow] = {}

    def _get_window(self, host: str) -> HostWindow:
        if host not in self.hosts:
            self.hosts[host] = HostWindow(host=host)
        return self.hosts[host]

    def _expire(self, window: HostWindow, now: float):
        while window.timestamps and now - window.timestamps[0] >= self.window:
            window.timestamps.popleft()

    def check(self, host: str) -> tuple[bool, float]:
        """
        Check whether a request to host may go out now.

        Returns:
            (allowed, wait_seconds) - wait_seconds is 0 when allowed
        """
        with self._lock:
            now = self._clock()
            window = self._get_window(host)
            self._expire(window, now)
            if len(window.timestamps) < self.limit:
                return (True, 0.0)
            return (False, self.window - (now - window.timestamps[0]))

    def acquire(self, host: str) -> float:
        """Block until a request to host is allowed, then record it.

        Returns:
            Seconds spent waiting
        """
        waited = 0.0
        while True:
            with self._lock:
                now = self._clock()
                window = self._get_window(host)
                self._expire(window, now)
                if len(window.timestamps) < self.limit:
                    window.timestamps.append(now)
                    window.total_requests += 1
                    window.total_wait_seconds += waited
                    return waited
                wait = self.window - (now - window.timestamps[0])

            logger.debug(f"Throttling {host}: waiting {wait:.2f}s")
            self._sleep(wait)
            waited += wait

    def acquire_url(self, url: str) -> float:
        return self.acquire(host_of(url))

    def get_stats(self) -> dict:
        """Request and wait totals per host."""
        with self._lock:
            return {
                host: {
                    "requests": w.total_requests,
                    "wait_seconds": round(w.total_wait_seconds, 3),
                }
                for host, w in self.hosts.items()
            }


def host_of(url: str) -> str:
    return urlparse(url).netloc.lower() or url


# ============================================================================
# DECORATOR FOR EASY USE
# ============================================================================

# Global throttle instance
_throttle: Optional[RequestThrottle] = None


def get_throttle() -> RequestThrottle:
    """Get or create global request throttle."""
    global _throttle
    if _throttle is None:
        _throttle = RequestThrottle()
    return _throttle


def throttled(func=None, *, throttle: Optional[RequestThrottle] = None):
    """
    Decorator to throttle a function that fetches a URL.

    The decorated function must take the URL as its first argument.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(url: str, *args, **kwargs):
            (throttle or get_throttle()).acquire_url(url)
            return fn(url, *args, **kwargs)
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
