"""Movie ratings kept in a CSV file, with per-movie averages."""

from __future__ import annotations

import csv
import logging
import math
import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path

from .csvstore import CSVError, paginate, parse_data, read_csv_file, save_to_csv

_log = logging.getLogger(__name__)

_MAX_RATING_LENGTH = 5


class ValidationError(ValueError):
    """Raised when a record does not satisfy its field rules."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("\n".join(errors))
        self.errors = list(errors)


def _field_error(struct: str, field: str, tag: str) -> str:
    return (
        f"Key: '{struct}.{field}' Error:Field validation for "
        f"'{field}' failed on the '{tag}' tag"
    )


@dataclass
class Rating:
    """One user's rating of one movie, stored as text."""

    user_id: str = ""
    movie_id: str = ""
    rating: str = ""

    def validate(self) -> None:
        """Check the fields are present; the rating text is at most five characters."""
        errors: list[str] = []
        if not self.user_id:
            errors.append(_field_error("Ratings", "UserId", "required"))
        if not self.movie_id:
            errors.append(_field_error("Ratings", "MovieId", "required"))
        if not self.rating:
            errors.append(_field_error("Ratings", "Rating", "required"))
        elif len(self.rating) > _MAX_RATING_LENGTH:
            errors.append(_field_error("Ratings", "Rating", "lte"))
        if errors:
            raise ValidationError(errors)


@dataclass
class MovieRatings:
    """The average rating of one movie."""

    movie_id: str
    ratings: float

    def to_json(self) -> dict[str, object]:
        return {"MovieId": self.movie_id, "Ratings": self.ratings}


def _round_half_away(value: float) -> float:
    if not math.isfinite(value):
        return value
    whole = math.trunc(value)
    if abs(value - whole) >= 0.5:
        whole += 1 if value > 0 else -1
    return float(whole)


def round_to_two_decimals(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    return _round_half_away(value * 100) / 100


def _parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


def _append_csv_row(path: Path, row: list[str]) -> None:
    fd = os.open(path, os.O_APPEND | os.O_WRONLY)
    with os.fdopen(fd, "a", newline="", encoding="utf-8") as handle:
        csv.writer(handle, lineterminator="\n").writerow(row)


class RatingModel:
    """Ratings loaded lazily from the ratings file."""

    def __init__(self, ratings_path: str | Path) -> None:
        self.ratings_path = ratings_path
        self.ratings: list[Rating] = []
        self._loaded = False
        self._lock = threading.Lock()

    def load_ratings(self) -> None:
        """(Re)load every rating from the ratings file."""
        with self._lock:
            self.ratings = [
                Rating(
                    user_id=row.get("userId", ""),
                    movie_id=row.get("movieId", ""),
                    rating=row.get("rating", ""),
                )
                for row in parse_data(self.ratings_path)
            ]

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load_ratings()
            self._loaded = True

    def calculate_average_ratings(self) -> list[MovieRatings]:
        """Average the ratings of each movie; unparsable ratings count as 0."""
        sums: dict[str, float] = {}
        counts: dict[str, int] = {}
        for rating in self.ratings:
            sums[rating.movie_id] = sums.get(rating.movie_id, 0.0) + _parse_float(rating.rating)
            counts[rating.movie_id] = counts.get(rating.movie_id, 0) + 1
        return [
            MovieRatings(movie_id, round_to_two_decimals(total / counts[movie_id]))
            for movie_id, total in sums.items()
        ]

    def _averages(self) -> list[MovieRatings]:
        self._ensure_loaded()
        if not self.ratings:
            raise LookupError("no ratings loaded, call LoadRatings first")
        return self.calculate_average_ratings()

    def list_ratings(self, page: int, limit: int) -> list[MovieRatings]:
        """Return one page of per-movie average ratings."""
        return paginate(self._averages(), page, limit)

    def get_ratings_by_movie_id(self, movie_id: str) -> MovieRatings:
        """Return the average rating of one movie."""
        for average in self._averages():
            if average.movie_id == movie_id:
                return average
        raise LookupError("movie not found")

    def add_ratings(self, rating: Rating) -> None:
        """Record a rating and append it, timestamped now, to the ratings file."""
        self._ensure_loaded()
        self.ratings.append(rating)
        path = Path.cwd() / self.ratings_path
        row = [rating.user_id, rating.movie_id, rating.rating, str(int(time.time()))]
        try:
            _append_csv_row(path, row)
        except OSError as exc:
            raise CSVError("error in writing record: Failed to open file") from exc
        _log.info("Rating appended successfully!")

    def delete_ratings(self, movie_id: str, user_id: str | None = None) -> None:
        """Delete the ratings of a movie, by one user or by everyone."""
        self.modify_ratings(user_id, movie_id, None, None, "delete")

    def update_ratings(
        self, user_id: str, movie_id: str, new_rating: str, new_timestamp: str
    ) -> None:
        """Replace one user's rating of a movie and its timestamp."""
        self.modify_ratings(user_id, movie_id, new_rating, new_timestamp, "update")

    def modify_ratings(
        self,
        user_id: str | None,
        movie_id: str,
        new_rating: str | None,
        new_timestamp: str | None,
        operation: str,
    ) -> None:
        """Delete or update matching rows and rewrite the ratings file.

        Rows with fewer than four fields are dropped from the file.
        """
        self._ensure_loaded()
        header, *rows = read_csv_file(self.ratings_path)
        updated_rows = [header]
        updated_ratings: list[Rating] = []
        modified = False

        for row in rows:
            if len(row) < 4:
                _log.info("Skipping invalid row: %r", row)
                continue
            if row[1] == movie_id and (user_id is None or row[0] == user_id):
                if operation == "delete":
                    modified = True
                    continue
                if operation == "update" and new_rating is not None and new_timestamp is not None:
                    row[2] = new_rating
                    row[3] = new_timestamp
                    modified = True
            updated_rows.append(row)
            updated_ratings.append(Rating(user_id=row[0], movie_id=row[1], rating=row[2]))

        if not modified:
            raise LookupError("rating not found ")

        self.ratings = updated_ratings
        save_to_csv(self.ratings_path, updated_rows)