# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request access lines and correlation ids."""

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from library_backend.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

# Values of these never reach the log, not even truncated.
_SECRET_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
_SECRET_QUERY_HINTS = ("password", "token", "secret")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _who() -> str:
    auth = getattr(g, "auth", None)
    return auth.username if auth is not None else "anonymous"


def _visible_headers() -> dict[str, str]:
    return {
        name: ("<present>" if name.lower() in _SECRET_HEADERS else value)
        for name, value in request.headers.items()
    }


def _visible_query() -> dict[str, str]:
    return {
        key: ("<redacted>" if any(hint in key.lower() for hint in _SECRET_QUERY_HINTS) else value)
        for key, value in request.args.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    @app.before_request
    def _begin() -> None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_urlsafe(8)
        set_correlation_id(request_id)
        g.correlation_id = request_id
        g.request_started = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"--> {request.method} {request.full_path.rstrip('?')} from {_client_ip()} "
                f"query={_visible_query()} headers={_visible_headers()} "
                f"body_size={request.content_length or 0}"
            )
        else:
            logger.info(f"--> {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        logger.info(
            f"<-- {request.method} {request.path} {response.status_code} "
            f"{elapsed_ms:.1f}ms user={_who()}"
        )
        response.headers.setdefault(REQUEST_ID_HEADER, g.get("correlation_id", "-"))
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request aborted: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
