"""HTTP handlers for the crew of each movie."""

from __future__ import annotations

import logging

from flask import Response, request

from . import constants
from .cast_controller import _decode_object
from .crew import CrewMember, CrewModel
from .movies_controller import MODEL_ERRORS
from .responses import json_error, json_success

_CREW_FIELDS: dict[str, type] = {
    "credit_id": str,
    "id": int,
    "name": str,
    "department": str,
    "job": str,
}


class CrewController:
    """Request handlers backed by a ``CrewModel``."""

    def __init__(self, logger: logging.Logger, crew_model: CrewModel) -> None:
        self.logger = logger
        self.crew_model = crew_model

    def _log_error(self, message: str, exc: BaseException) -> None:
        self.logger.error(message, extra={"fields": {"error": str(exc)}})

    def list_crew_members(self, movie_id: str) -> Response:
        """Return the crew of one movie."""
        try:
            members = self.crew_model.list_crew_members(movie_id)
        except MODEL_ERRORS as exc:
            self._log_error(constants.LOAD_CREDITS_ERROR, exc)
            return json_error(500, constants.LOAD_CREDITS_ERROR)
        return json_success(200, members)

    def update_crew_member(self, movie_id: str, crew_id: str) -> Response:
        """Change a crew member's name, department and job from the request body."""
        try:
            crew = CrewMember(**_decode_object(request.get_data(), _CREW_FIELDS))
        except ValueError as exc:
            self._log_error(constants.INVALID_REQUEST_BODY, exc)
            return json_error(400, constants.INVALID_REQUEST_BODY)
        try:
            self.crew_model.update_crew_member(movie_id, crew_id, crew)
        except MODEL_ERRORS as exc:
            self._log_error(constants.UPDATE_CREW_ERROR, exc)
            return json_error(500, constants.UPDATE_CREW_ERROR)
        return json_success(200, constants.UPDATE_CREW_SUCCESS)