"""HTTP API serving movies, ratings, cast and crew backed by CSV files."""

__version__ = "0.1.0"
__all__ = [
    "cast",
    "cast_controller",
    "cli",
    "config",
    "constants",
    "crew",
    "crew_controller",
    "csvstore",
    "logger",
    "metrics",
    "metrics_controller",
    "middleware",
    "movies",
    "movies_controller",
    "ratings",
    "ratings_controller",
    "responses",
    "routes",
    "routinewrapper",
]