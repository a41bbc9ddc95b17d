"""JSend-shaped JSON responses."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

from flask import Response


def _default(obj: Any) -> Any:
    to_json = getattr(obj, "to_json", None)
    if callable(to_json):
        return to_json()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _respond(status_code: int, body: dict[str, Any]) -> Response:
    return Response(
        json.dumps(body, default=_default),
        status=status_code,
        mimetype="application/json",
    )


def json_success(status_code: int, data: Any) -> Response:
    """A ``success`` response carrying ``data``."""
    return _respond(status_code, {"status": "success", "data": data})


def json_fail(status_code: int, data: Any) -> Response:
    """A ``fail`` response, meant for 4xx statuses."""
    return _respond(status_code, {"status": "fail", "data": data})


def json_error(status_code: int, message: str) -> Response:
    """An ``error`` response, meant for 5xx statuses."""
    body: dict[str, Any] = {"status": "error", "message": message}
    if status_code:
        body["code"] = status_code
    return _respond(status_code, body)