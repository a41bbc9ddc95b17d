"""Route table of the HTTP API."""

from __future__ import annotations

import html
import json
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from flask import Flask, Response

from . import constants
from .cast import CastModel
from .cast_controller import CastController
from .config import AppConfig
from .crew import CrewModel
from .crew_controller import CrewController
from .metrics import PrometheusMetrics
from .metrics_controller import MetricsController
from .middleware import install_log_handler
from .movies import MovieModel
from .movies_controller import MovieController
from .ratings import RatingModel
from .ratings_controller import RatingsController

SWAGGER_FILE = "./assets/swagger.json"
DOCS_TITLE = "Swagger API Docs"
DOCS_PATH = "/docs"
SPEC_PATH = "/assets/swagger.json"

_setup_lock = threading.Lock()


def _route(
    app: Flask,
    rule: str,
    endpoint: str,
    view: Callable[..., Response],
    method: str,
) -> None:
    app.add_url_rule(
        rule,
        endpoint=endpoint,
        view_func=view,
        methods=[method],
        strict_slashes=False,
    )


def _setup_docs(app: Flask) -> None:
    """Serve the API specification and a page showing it.

    The specification file must exist and hold valid JSON.
    """
    path = Path(SWAGGER_FILE)
    if not path.is_file():
        raise FileNotFoundError(f"swagger: file does not exist: {SWAGGER_FILE}")
    spec_text = path.read_text(encoding="utf-8")
    try:
        json.loads(spec_text)
    except ValueError as exc:
        raise ValueError(f"swagger: invalid specification in {SWAGGER_FILE}: {exc}") from exc

    page = (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        f"<meta charset=\"utf-8\">\n<title>{html.escape(DOCS_TITLE)}</title>\n"
        "</head>\n<body>\n"
        f"<h1>{html.escape(DOCS_TITLE)}</h1>\n"
        f"<p><a href=\"{SPEC_PATH}\">{SPEC_PATH}</a></p>\n"
        f"<pre>{html.escape(spec_text)}</pre>\n"
        "</body>\n</html>\n"
    )

    def docs() -> Response:
        return Response(page, status=200, content_type="text/html; charset=utf-8")

    def spec() -> Response:
        return Response(spec_text, status=200, content_type="application/json")

    _route(app, DOCS_PATH, "docs", docs, "GET")
    _route(app, SPEC_PATH, "swagger_spec", spec, "GET")


def _setup_movies(app: Flask, logger: logging.Logger, config: AppConfig) -> None:
    controller = MovieController(
        logger, MovieModel(config.movies, config.ratings, config.credits)
    )
    item = f"/movies/<{_param(constants.MOVIE_ID)}>"
    _route(app, "/movies/", "list_movies", controller.list_movies, "GET")
    _route(app, item, "get_movie_by_id", controller.get_movie_by_id, "GET")
    _route(app, "/movies/", "add_movie", controller.add_movie, "POST")
    _route(app, item, "delete_movie_by_id", controller.delete_movie_by_id, "DELETE")
    _route(app, item, "update_movie", controller.update_movie, "PUT")


def _setup_ratings(app: Flask, logger: logging.Logger, config: AppConfig) -> None:
    controller = RatingsController(
        logger,
        RatingModel(config.ratings),
        MovieModel(config.movies, config.ratings, config.credits),
    )
    movie = _param(constants.MOVIE_ID)
    user = _param(constants.USER_ID)
    by_movie = f"/ratings/movies/<{movie}>/ratings"
    by_user = f"/ratings/movies/<{movie}>/user/<{user}>/ratings"
    _route(app, "/ratings/", "list_all_movie_ratings", controller.list_all_movie_ratings, "GET")
    _route(app, by_movie, "get_ratings_by_movie_id", controller.get_ratings_by_movie_id, "GET")
    _route(app, "/ratings/", "add_rating", controller.add_rating, "POST")
    _route(app, by_user, "delete_rating", controller.delete_rating, "DELETE")
    _route(app, by_user, "update_rating", controller.update_rating, "PUT")


def _setup_crew(app: Flask, logger: logging.Logger, config: AppConfig) -> None:
    controller = CrewController(logger, CrewModel(config.credits))
    movie = _param(constants.MOVIE_ID)
    crew = _param(constants.CREW_ID)
    _route(app, f"/movies/<{movie}>/crew", "list_crew_members", controller.list_crew_members, "GET")
    _route(
        app,
        f"/movies/<{movie}>/crew/<{crew}>",
        "update_crew_member",
        controller.update_crew_member,
        "PUT",
    )


def _setup_cast(app: Flask, logger: logging.Logger, config: AppConfig) -> None:
    controller = CastController(logger, CastModel(config.credits))
    movie = _param(constants.MOVIE_ID)
    cast = _param(constants.CAST_ID)
    _route(app, f"/movies/<{movie}>/casts", "list_cast_members", controller.list_cast_members, "GET")
    _route(
        app,
        f"/actor/<{cast}>/cast",
        "list_movies_by_cast_id",
        controller.list_movies_by_cast_id,
        "GET",
    )
    _route(
        app,
        f"/movies/<{movie}>/casts/<{cast}>",
        "update_cast_member",
        controller.update_cast_member,
        "PUT",
    )


def _setup_metrics(app: Flask, logger: logging.Logger, metrics: PrometheusMetrics) -> None:
    controller = MetricsController(logger, metrics)
    _route(app, "/metrics", "metrics", controller.metrics, "GET")


_PARAM_NAMES = {
    constants.MOVIE_ID: "movie_id",
    constants.USER_ID: "user_id",
    constants.CAST_ID: "cast_id",
    constants.CREW_ID: "crew_id",
}


def _param(name: str) -> str:
    """Map a path parameter name to the keyword the handlers take."""
    return _PARAM_NAMES[name]


def setup(
    app: Flask,
    logger: logging.Logger,
    config: AppConfig,
    metrics: PrometheusMetrics,
) -> None:
    """Install the middleware, the documentation and every API route on ``app``."""
    with _setup_lock:
        install_log_handler(app, logger, metrics)
        _setup_docs(app)
        _setup_movies(app, logger, config)
        _setup_ratings(app, logger, config)
        _setup_crew(app, logger, config)
        _setup_cast(app, logger, config)
        _setup_metrics(app, logger, metrics)


def create_app(
    config: AppConfig, logger: logging.Logger, metrics: PrometheusMetrics
) -> Flask:
    """Build a Flask application serving the API."""
    app = Flask(__name__)
    setup(app, logger, config, metrics)
    return app