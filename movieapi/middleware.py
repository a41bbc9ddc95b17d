"""Request logging and request counting for the Flask application."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from flask import Flask, Response, request

from .config import AppConfig
from .metrics import PrometheusMetrics

IGNORE_PATHS = frozenset(
    {
        "/docs",
        "/assets/redoc.css",
        "/assets/redoc.standalone.js",
        "/assets/swagger.json",
        "/favicon.ico",
    }
)

_SKIPPED_CONTENT_PREFIXES = ("image/", "text/")


@dataclass
class Middleware:
    """Settings and logger shared by request middleware."""

    config: AppConfig
    logger: logging.Logger


def status_class(status_code: int) -> str | None:
    """Return the counter label of a status code, or ``None`` below 200."""
    if 200 <= status_code < 300:
        return "2xx"
    if 300 <= status_code < 400:
        return "3xx"
    if 400 <= status_code < 500:
        return "4xx"
    if status_code >= 500:
        return "5xx"
    return None


def _raw_headers(first_line: str, headers: Any) -> str:
    lines = [first_line, *(f"{name}: {value}" for name, value in headers.items())]
    return "\r\n".join(lines) + "\r\n\r\n"


def _response_body(response: Response) -> str:
    if response.direct_passthrough or response.is_streamed:
        return ""
    return response.get_data().decode("utf-8", "replace")


def _request_fields(response: Response) -> dict[str, Any]:
    protocol = request.environ.get("SERVER_PROTOCOL", "HTTP/1.1")
    request_line = f"{request.method} {request.full_path.rstrip('?')} {protocol}"
    status_line = f"{protocol} {response.status}"
    response_headers = _raw_headers(status_line, response.headers)
    body = _response_body(response)
    authorization = request.authorization
    return {
        "host": request.host.split(":")[0],
        "method": request.method,
        "uri": request.host_url.rstrip("/"),
        "protocol": request.scheme,
        "username": (authorization.username or "") if authorization else "",
        "requestHeaders": _raw_headers(request_line, request.headers),
        "responseHeaders": response_headers,
        "request": request.get_data().decode("utf-8", "replace"),
        "response": response_headers + body,
        "status": response.status_code,
        "size": response.content_length if response.content_length is not None else -1,
    }


def install_log_handler(
    app: Flask, logger: logging.Logger, metrics: PrometheusMetrics
) -> None:
    """Log every handled request and count responses by status class.

    Documentation assets and image or text responses are not logged, but are
    still counted.
    """

    @app.after_request
    def _log_request(response: Response) -> Response:
        content_type = response.content_type or ""
        skipped = request.path in IGNORE_PATHS or content_type.startswith(
            _SKIPPED_CONTENT_PREFIXES
        )
        if not skipped:
            fields = _request_fields(response)
            if 100 <= response.status_code <= 399:
                logger.debug("Handled successful request", extra={"fields": fields})
            else:
                logger.error("handled error request", extra={"fields": fields})

        label = status_class(response.status_code)
        if label is not None:
            metrics.requests_metrics.with_label_values(label).inc()
        return response