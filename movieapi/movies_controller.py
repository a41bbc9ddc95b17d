"""HTTP handlers for the movie catalogue."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from flask import Response, request

from . import constants
from .csvstore import CSVError
from .movies import Movie, MovieModel
from .ratings import ValidationError
from .responses import json_error, json_fail, json_success

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

MODEL_ERRORS = (LookupError, ValueError, CSVError, OSError)

_MOVIE_FIELDS: dict[str, type] = {
    "id": str,
    "original_language": str,
    "title": str,
    "popularity": str,
    "genres": list,
    "release_date": str,
    "runtime": str,
    "spoken_languages": list,
    "status": str,
}


def _atoi(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer {text!r} out of range")
    return value


def _query(args: Mapping[str, str], key: str, default: str) -> str:
    return args.get(key, "") or default


def pagination_query(args: Mapping[str, str]) -> tuple[int, int]:
    """Read ``page`` (default 1) and ``limit`` (default 10) from query arguments."""
    page = _atoi(_query(args, "page", "1"))
    limit = _atoi(_query(args, "limit", "10"))
    return page, limit


def _reject_constant(text: str) -> Any:
    raise ValueError(f"invalid JSON value {text}")


def _decode_fields(body: bytes, spec: Mapping[str, type]) -> dict[str, Any]:
    """Decode a JSON object, keeping the keys of ``spec`` with the right types.

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
            result[name] = item
        else:
            if not isinstance(item, list) or not all(
                element is None or isinstance(element, str) for element in item
            ):
                raise ValueError(f"cannot decode {item!r} into field {name!r}")
            result[name] = ["" if element is None else element for element in item]
    return result


def _decode_movie(body: bytes) -> Movie:
    return Movie(**_decode_fields(body, _MOVIE_FIELDS))


class MovieController:
    """Request handlers backed by a ``MovieModel``."""

    def __init__(self, logger: logging.Logger, movie_model: MovieModel) -> None:
        self.logger = logger
        self.movie_model = movie_model

    def _log_error(self, message: str, exc: BaseException | None = None) -> None:
        fields = {"error": str(exc)} if exc is not None else {}
        self.logger.error(message, extra={"fields": fields})

    def list_movies(self) -> Response:
        """List one page of movies filtered by name, genre and language."""
        filters = {
            "name": request.args.get("name", ""),
            "genre": request.args.get("genre", ""),
            "language": request.args.get("language", ""),
        }
        try:
            page, limit = pagination_query(request.args)
        except ValueError:
            return json_fail(500, constants.INVALID_PAGE_OR_LIMIT_ERROR)
        try:
            movies = self.movie_model.list_movies(filters, page, limit)
        except MODEL_ERRORS:
            return json_error(500, constants.PAGINATION_ERROR)
        return json_success(200, movies)

    def get_movie_by_id(self, movie_id: str) -> Response:
        """Return one movie."""
        try:
            movie = self.movie_model.get_movie(movie_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.LOAD_MOVIES_ERROR, exc)
            return json_error(500, constants.LOAD_MOVIES_ERROR)
        return json_success(200, movie)

    def add_movie(self) -> Response:
        """Add the movie described by the request body."""
        try:
            movie = _decode_movie(request.get_data())
        except ValueError as exc:
            self._log_error(constants.INVALID_REQUEST_BODY, exc)
            return json_error(400, constants.INVALID_REQUEST_BODY)
        try:
            movie.validate()
        except ValidationError as exc:
            self._log_error(constants.VALIDATION_FAILED, exc)
            return json_error(400, str(exc))
        try:
            self.movie_model.add_movie(movie)
        except MODEL_ERRORS as exc:
            self._log_error(constants.ADD_MOVIE_ERROR, exc)
            return json_error(500, constants.ADD_MOVIE_ERROR)
        return json_success(200, constants.ADD_MOVIE_SUCCESS)

    def delete_movie_by_id(self, movie_id: str) -> Response:
        """Delete a movie with its ratings and credits."""
        if not movie_id:
            return json_error(400, constants.INVALID_REQUEST_BODY)
        try:
            self.movie_model.delete_movie(movie_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.DELETE_MOVIE_ERROR, exc)
            return json_error(500, constants.DELETE_MOVIE_ERROR)
        return json_success(200, constants.DELETE_MOVIE_SUCCESS)

    def update_movie(self, movie_id: str) -> Response:
        """Replace a movie's details with those in the request body."""
        try:
            movie = _decode_movie(request.get_data())
        except ValueError as exc:
            self._log_error(constants.INVALID_REQUEST_BODY, exc)
            return json_error(400, constants.INVALID_REQUEST_BODY)
        if movie.id and movie.id != movie_id:
            self._log_error("Movie ID mismatch")
            return json_error(400, constants.INVALID_REQUEST_BODY)
        try:
            movie.validate()
        except ValidationError as exc:
            self._log_error(constants.VALIDATION_FAILED, exc)
            return json_error(400, str(exc))
        try:
            self.movie_model.update_movie(movie_id, movie)
        except MODEL_ERRORS as exc:
            self._log_error(constants.UPDATE_MOVIE_ERROR, exc)
            return json_error(500, constants.UPDATE_MOVIE_ERROR)
        return json_success(200, constants.UPDATE_MOVIE_SUCCESS)