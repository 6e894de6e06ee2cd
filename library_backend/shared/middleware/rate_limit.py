# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from threading import Lock

from flask import Request, current_app, request

from library_backend.shared.config import SecurityConfig
from library_backend.shared.errors import RateLimitedError
from library_backend.shared.logging import logger

CONFIG_KEY = "library_backend.security"
LIMITERS_KEY = "library_backend.rate_limiters"


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(self, limit: int, window_seconds: float) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._buckets: dict[str, Bucket] = defaultdict(lambda: Bucket(deque(maxlen=self._limit)))
        self._lock = Lock()

    def allow(self, key: str) -> bool:
        now = time.monotonic()
        with self._lock:
            bucket = self._buckets[key]
            # Drop old
            while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
                bucket.timestamps.popleft()
            if len(bucket.timestamps) >= self._limit:
                return False
            bucket.timestamps.append(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


def _client_key(req: Request) -> str:
    forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or (req.remote_addr or "unknown")


def _security_config() -> SecurityConfig | None:
    return current_app.extensions.get(CONFIG_KEY)


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Per-endpoint, per-client sliding window limit.

    Defaults come from the app's SecurityConfig (RL_LIMIT, RL_WINDOW), read
    on first use so the decorator can be applied at class definition time.
    Explicit limit and window_seconds override them for one endpoint.
    """

    def decorator(f: Callable):
        @wraps(f)
        def wrapper(*args, **kwargs):
            config = _security_config()
            if config is None or not config.enable_rate_limit:
                return f(*args, **kwargs)
            limiters: dict[str, InMemoryRateLimiter] = current_app.extensions.setdefault(
                LIMITERS_KEY, {}
            )
            limiter = limiters.get(f.__qualname__)
            if limiter is None:
                limiter = limiters.setdefault(
                    f.__qualname__,
                    InMemoryRateLimiter(
                        limit or config.rate_limit_requests,
                        window_seconds or config.rate_limit_window,
                    ),
                )
            key = f"{request.path}:{_client_key(request)}"
            if not limiter.allow(key):
                logger.warning(f"rate_limit: rejected {request.method} {request.path}")
                raise RateLimitedError()
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["CONFIG_KEY", "InMemoryRateLimiter", "rate_limit"]
