"""HTTP handlers for the cast of each movie."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from flask import Response, request

from . import constants
from .cast import CastMember, CastModel
from .movies_controller import MODEL_ERRORS
from .responses import json_error, json_success

_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_CAST_FIELDS: dict[str, type] = {
    "credit_id": str,
    "id": int,
    "character": str,
    "name": str,
}


def _reject_constant(text: str) -> Any:
    raise ValueError(f"invalid JSON value {text}")


def _decode_object(body: bytes, spec: Mapping[str, type]) -> dict[str, Any]:
    """Decode a JSON object into the string and integer fields of ``spec``.

    Keys match case-insensitively, unknown keys are ignored and ``null``
    leaves a field unset. A wrongly typed value raises ``ValueError``.
    """
    try:
        value = json.loads(body, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")

    lowered = {name.lower(): name for name in spec}
    result: dict[str, Any] = {}
    for key, item in value.items():
        name = key if key in spec else lowered.get(key.lower())
        if name is None or item is None:
            continue
        kind = spec[name]
        if kind is str:
            if not isinstance(item, str):
                raise ValueError(f"cannot decode {item!r} into field {name!r}")
        elif isinstance(item, bool) or not isinstance(item, int):
            raise ValueError(f"cannot decode {item!r} into field {name!r}")
        elif not _INT_MIN <= item <= _INT_MAX:
            raise ValueError(f"number {item} overflows field {name!r}")
        result[name] = item
    return result


class CastController:
    """Request handlers backed by a ``CastModel``."""

    def __init__(self, logger: logging.Logger, cast_model: CastModel) -> None:
        self.logger = logger
        self.cast_model = cast_model

    def _log_error(self, message: str, exc: BaseException) -> None:
        self.logger.error(message, extra={"fields": {"error": str(exc)}})

    def list_cast_members(self, movie_id: str) -> Response:
        """Return the cast of one movie."""
        try:
            members = self.cast_model.list_cast_members(movie_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.LOAD_CREDITS_ERROR, exc)
            return json_error(500, constants.LOAD_CREDITS_ERROR)
        return json_success(200, members)

    def list_movies_by_cast_id(self, cast_id: str) -> Response:
        """Return the ids of the movies an actor appears in."""
        try:
            movies = self.cast_model.list_movies_by_cast_id(cast_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.LOAD_CREDITS_ERROR, exc)
            return json_error(500, constants.LOAD_CREDITS_ERROR)
        return json_success(200, movies)

    def update_cast_member(self, movie_id: str, cast_id: str) -> Response:
        """Change a cast member's name and character from the request body."""
        try:
            cast = CastMember(**_decode_object(request.get_data(), _CAST_FIELDS))
        except ValueError as exc:
            self._log_error(constants.INVALID_REQUEST_BODY, exc)
            return json_error(400, constants.INVALID_REQUEST_BODY)
        try:
            self.cast_model.update_cast_member(movie_id, cast_id, cast)
        except MODEL_ERRORS as exc:
            self._log_error(constants.UPDATE_CAST_ERROR, exc)
            return json_error(500, constants.UPDATE_CAST_ERROR)
        return json_success(200, constants.UPDATE_CAST_SUCCESS)