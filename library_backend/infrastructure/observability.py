# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "library_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "library_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
AUDIT_EVENTS = Counter(
    "library_audit_events_total",
    "Audited actions by outcome",
    labelnames=("action", "success"),
)
TOKEN_REJECTIONS = Counter(
    "library_token_rejections_total",
    "Protected requests turned away by the auth gate",
    labelnames=("reason",),
)


def _endpoint_label() -> str:
    rule = request.url_rule
    return rule.rule if rule is not None else "unmatched"


def install_metrics(app: Flask, *, enabled: bool) -> None:
    """Time every request and expose the default registry at /metrics."""

    if not enabled:
        return

    @app.before_request
    def _start_timer() -> None:
        g.metrics_started = time.perf_counter()

    @app.after_request
    def _observe(response: Response) -> Response:
        started = g.get("metrics_started")
        if started is not None:
            endpoint = _endpoint_label()
            REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - started)
            REQUEST_COUNTER.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        return response

    def metrics() -> Response:
        return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)

    app.add_url_rule("/metrics", endpoint="metrics", view_func=metrics, methods=["GET"])


__all__ = [
    "AUDIT_EVENTS",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "TOKEN_REJECTIONS",
    "install_metrics",
]
