"""HTTP handler exposing the collected metrics."""

from __future__ import annotations

import logging

from flask import Response

from .metrics import PrometheusMetrics

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


class MetricsController:
    """Serves the metrics in the text exposition format."""

    def __init__(self, logger: logging.Logger, metrics: PrometheusMetrics) -> None:
        self.logger = logger
        self.metrics_registry = metrics

    def metrics(self) -> Response:
        """Return the current metrics."""
        body = self.metrics_registry.render()
        if isinstance(body, str):
            body = body.encode("utf-8")
        return Response(body, status=200, content_type=CONTENT_TYPE)