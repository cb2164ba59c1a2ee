"""
In-memory attempt limiting for sensitive endpoints (admin login).

Each scope keeps its own fixed window per client IP. Limits come from
Settings; counters live in this process only and reset on restart.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request

from .config import Settings


class AttemptLimiter:
    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()

    def attempt(self, client: str) -> float:
        """Count one attempt; returns 0 when allowed, else seconds until the window reopens."""
        if self.limit <= 0:
            return 0.0
        now = self._clock()
        with self._lock:
            started, used = self._windows.get(client, (now, 0))
            if now - started >= self.window_seconds:
                started, used = now, 0
            if used >= self.limit:
                return max(started + self.window_seconds - now, 0.0) or 1.0
            self._windows[client] = (started, used + 1)
            return 0.0

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


_limiters: Dict[str, AttemptLimiter] = {}
_registry_lock = threading.Lock()


def limiter_for(scope: str, limit: int, window_seconds: int) -> AttemptLimiter:
    """Shared limiter for a scope; rebuilt when its configured limits change."""
    with _registry_lock:
        limiter = _limiters.get(scope)
        if limiter is None or (limiter.limit, limiter.window_seconds) != (limit, window_seconds):
            limiter = _limiters[scope] = AttemptLimiter(limit, window_seconds)
        return limiter


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_login_limit(request: Request, settings: Settings) -> None:
    limiter = limiter_for("admin-login", settings.login_rate_limit, settings.login_rate_window_seconds)
    wait = limiter.attempt(client_ip(request))
    if wait:
        raise HTTPException(
            429,
            "Too many attempts. Try again shortly.",
            headers={"Retry-After": str(math.ceil(wait))},
        )


def reset_rate_limits() -> None:
    with _registry_lock:
        for limiter in _limiters.values():
            limiter.clear()
