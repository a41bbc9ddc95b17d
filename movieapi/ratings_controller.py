"""HTTP handlers for movie ratings."""

from __future__ import annotations

import logging
import time

from flask import Response, request

from . import constants
from .movies import MovieModel
from .movies_controller import MODEL_ERRORS, _decode_fields, pagination_query
from .ratings import Rating, RatingModel, ValidationError
from .responses import json_error, json_fail, json_success

_RATING_FIELDS: dict[str, type] = {"userId": str, "movieId": str, "rating": str}
_UPDATE_FIELDS: dict[str, type] = {"rating": str}


class RatingsController:
    """Request handlers backed by a ``RatingModel`` and a ``MovieModel``."""

    def __init__(
        self,
        logger: logging.Logger,
        rating_model: RatingModel,
        movie_model: MovieModel,
    ) -> None:
        self.logger = logger
        self.rating_model = rating_model
        self.movie_model = movie_model

    def _log_error(self, message: str, exc: BaseException) -> None:
        self.logger.error(message, extra={"fields": {"error": str(exc)}})

    def list_all_movie_ratings(self) -> Response:
        """List one page of per-movie average ratings."""
        try:
            page, limit = pagination_query(request.args)
        except ValueError:
            return json_fail(500, constants.INVALID_PAGE_OR_LIMIT_ERROR)
        try:
            ratings = self.rating_model.list_ratings(page, limit)
        except MODEL_ERRORS as exc:
            self._log_error(constants.LOAD_RATINGS_ERROR, exc)
            return json_error(500, constants.LOAD_RATINGS_ERROR)
        return json_success(200, ratings)

    def get_ratings_by_movie_id(self, movie_id: str) -> Response:
        """Return the average rating of one movie."""
        try:
            rating = self.rating_model.get_ratings_by_movie_id(movie_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.LOAD_RATINGS_ERROR, exc)
            return json_error(500, constants.LOAD_RATINGS_ERROR)
        return json_success(200, rating)

    def add_rating(self) -> Response:
        """Record the rating in the request body for an existing movie."""
        try:
            fields = _decode_fields(request.get_data(), _RATING_FIELDS)
        except ValueError as exc:
            self._log_error(constants.INVALID_REQUEST_BODY, exc)
            return json_error(400, constants.INVALID_REQUEST_BODY)
        rating = Rating(
            user_id=fields.get("userId", ""),
            movie_id=fields.get("movieId", ""),
            rating=fields.get("rating", ""),
        )
        try:
            rating.validate()
        except ValidationError as exc:
            self._log_error(constants.VALIDATION_FAILED, exc)
            return json_error(400, str(exc))
        try:
            exists = self.movie_model.movie_exists(rating.movie_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.MOVIE_CHECK_ERROR, exc)
            return json_error(500, constants.MOVIE_CHECK_ERROR)
        if not exists:
            return json_error(404, constants.MOVIE_CHECK_ERROR)
        try:
            self.rating_model.add_ratings(rating)
        except MODEL_ERRORS as exc:
            self._log_error(constants.ADD_RATING_ERROR, exc)
            return json_error(500, constants.ADD_RATING_ERROR)
        return json_success(200, constants.ADD_RATING_SUCCESS)

    def delete_rating(self, movie_id: str, user_id: str) -> Response:
        """Delete one user's rating of a movie."""
        if not movie_id and not user_id:
            return json_error(400, constants.VALIDATION_FAILED)
        try:
            self.rating_model.delete_ratings(movie_id, user_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.DELETE_RATING_ERROR, exc)
            return json_error(500, constants.DELETE_RATING_ERROR)
        return json_success(200, constants.DELETE_RATING_SUCCESS)

    def update_rating(self, movie_id: str, user_id: str) -> Response:
        """Replace one user's rating of a movie, stamping it with the current time."""
        if not movie_id and not user_id:
            return json_error(400, constants.INVALID_REQUEST_BODY)
        try:
            fields = _decode_fields(request.get_data(), _UPDATE_FIELDS)
        except ValueError:
            return json_error(400, constants.INVALID_REQUEST_BODY)
        new_timestamp = str(int(time.time()))
        try:
            self.rating_model.update_ratings(
                user_id, movie_id, fields.get("rating", ""), new_timestamp
            )
        except MODEL_ERRORS as exc:
            self._log_error(constants.UPDATE_RATING_ERROR, exc)
            return json_error(500, constants.UPDATE_RATING_ERROR)
        return json_success(200, constants.UPDATE_RATING_SUCCESS)