"""The movie catalogue kept in the movies metadata CSV file."""

from __future__ import annotations

import csv
import logging
import os
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .crew import delete_credits_for_movie
from .csvstore import CSVError, paginate, parse_data, parse_json_field, read_csv_file, save_to_csv
from .ratings import RatingModel, ValidationError

_log = logging.getLogger(__name__)

_STATUSES = ("Released", "Upcoming", "Cancelled")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_ROW_WIDTH = 24

_COL_GENRES = 3
_COL_ID = 5
_COL_LANGUAGE = 7
_COL_POPULARITY = 10
_COL_RELEASE = 14
_COL_RUNTIME = 16
_COL_SPOKEN = 17
_COL_STATUS = 18
_COL_TITLE = 20


def _field_error(field: str, tag: str) -> str:
    return (
        f"Key: 'Movies.{field}' Error:Field validation for "
        f"'{field}' failed on the '{tag}' tag"
    )


def _is_date(text: str) -> bool:
    if not _DATE_RE.fullmatch(text):
        return False
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        return False
    return True


@dataclass
class Movie:
    """A movie as the API exposes it; numbers are kept as text."""

    id: str = ""
    original_language: str = ""
    title: str = ""
    popularity: str = ""
    genres: list[str] | None = None
    release_date: str = ""
    runtime: str = ""
    spoken_languages: list[str] | None = None
    status: str = ""

    def validate(self) -> None:
        """Check the field rules; every failure is reported in one error."""
        errors: list[str] = []

        def check_names(field: str, names: list[str] | None) -> None:
            if names is None:
                errors.append(_field_error(field, "required"))
                return
            for index, name in enumerate(names):
                if len(name) < 5:
                    errors.append(_field_error(f"{field}[{index}]", "min"))
                elif len(name) > 50:
                    errors.append(_field_error(f"{field}[{index}]", "max"))

        if not self.id:
            errors.append(_field_error("ID", "required"))
        if not self.original_language:
            errors.append(_field_error("OriginalLanguage", "required"))
        elif len(self.original_language) < 2:
            errors.append(_field_error("OriginalLanguage", "min"))
        if not self.title:
            errors.append(_field_error("Title", "required"))
        elif len(self.title) < 2:
            errors.append(_field_error("Title", "min"))
        elif len(self.title) > 100:
            errors.append(_field_error("Title", "max"))
        if len(self.popularity) > 100:
            errors.append(_field_error("Popularity", "lte"))
        check_names("Genres", self.genres)
        if not self.release_date:
            errors.append(_field_error("ReleaseDate", "required"))
        elif not _is_date(self.release_date):
            errors.append(_field_error("ReleaseDate", "datetime"))
        if len(self.runtime) > 100:
            errors.append(_field_error("Runtime", "lte"))
        check_names("SpokenLanguages", self.spoken_languages)
        if not self.status:
            errors.append(_field_error("Status", "required"))
        elif self.status not in _STATUSES:
            errors.append(_field_error("Status", "oneof"))

        if errors:
            raise ValidationError(errors)


def format_data(items: list[str] | None) -> str:
    """Encode names in the single-quoted list-of-objects form of the CSV file."""
    return "[" + ", ".join(f"{{'name': '{item}'}}" for item in items or ()) + "]"


def parse_csv_array(data: str) -> list[str]:
    """Split a bracketed, comma separated list, trimming spaces and quotes."""
    data = data.strip("[]")
    if not data:
        return []
    return [part.strip(" '\"") for part in data.split(",")]


def _append_csv_row(path: Path, row: list[str]) -> None:
    fd = os.open(path, os.O_APPEND | os.O_WRONLY)
    with os.fdopen(fd, "a", newline="", encoding="utf-8") as handle:
        csv.writer(handle, lineterminator="\n").writerow(row)


def _movie_record(movie: Movie) -> list[str]:
    row = [""] * _ROW_WIDTH
    row[_COL_GENRES] = format_data(movie.genres)
    row[_COL_ID] = movie.id
    row[_COL_LANGUAGE] = movie.original_language
    row[_COL_POPULARITY] = movie.popularity
    row[_COL_RELEASE] = movie.release_date
    row[_COL_RUNTIME] = movie.runtime
    row[_COL_SPOKEN] = format_data(movie.spoken_languages)
    row[_COL_STATUS] = movie.status
    row[_COL_TITLE] = movie.title
    return row


class MovieModel:
    """Movies loaded lazily from the movies file.

    Deleting a movie also removes its ratings and credits from their files.
    """

    def __init__(
        self,
        movies_path: str | Path,
        ratings_path: str | Path,
        credits_path: str | Path,
    ) -> None:
        self.movies_path = movies_path
        self.ratings_path = ratings_path
        self.credits_path = credits_path
        self.movies: list[Movie] = []
        self._loaded = False
        self._lock = threading.Lock()

    def load_movies(self) -> None:
        """(Re)load every movie from the movies file."""
        with self._lock:
            self.movies = [
                Movie(
                    id=row.get("id", ""),
                    original_language=row.get("original_language", ""),
                    title=row.get("title", ""),
                    popularity=row.get("popularity", ""),
                    genres=parse_json_field(row.get("genres", ""), "name"),
                    release_date=row.get("release_date", ""),
                    runtime=row.get("runtime", ""),
                    spoken_languages=parse_json_field(row.get("spoken_languages", ""), "name"),
                    status=row.get("status", ""),
                )
                for row in parse_data(self.movies_path)
            ]

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load_movies()
            self._loaded = True

    def list_movies(self, filters: Mapping[str, str], page: int, limit: int) -> list[Movie]:
        """Return one page of the movies matching the name, genre and language filters.

        The name matches any part of the title; genre and spoken language must
        match a whole name. All comparisons ignore case.
        """
        self._ensure_loaded()
        if not self.movies:
            raise LookupError("no movies loaded, call LoadMovies first")

        name = filters.get("name", "").lower()
        genre = filters.get("genre", "").lower()
        language = filters.get("language", "").lower()

        matched = [
            movie
            for movie in self.movies
            if (not name or name in movie.title.lower())
            and (not genre or any(g.lower() == genre for g in movie.genres or ()))
            and (
                not language
                or any(lang.lower() == language for lang in movie.spoken_languages or ())
            )
        ]
        if not matched:
            raise LookupError("no movies found matching the given criteria")
        return paginate(matched, page, limit)

    def get_movie(self, movie_id: str) -> Movie:
        """Return the movie with ``movie_id``."""
        self._ensure_loaded()
        for movie in self.movies:
            if movie.id == movie_id:
                return movie
        raise LookupError("movie not found")

    def add_movie(self, movie: Movie) -> None:
        """Add a movie whose id and title are both new, appending it to the file."""
        self._ensure_loaded()
        if any(m.id == movie.id or m.title == movie.title for m in self.movies):
            raise ValueError("movie with this ID or title already exists")
        self.movies.append(movie)
        path = Path.cwd() / self.movies_path
        try:
            _append_csv_row(path, _movie_record(movie))
        except OSError as exc:
            raise CSVError(f"Failed to open file: {exc}") from exc
        _log.info("Movie appended successfully!")

    def movie_exists(self, movie_id: str) -> bool:
        """Tell whether a movie with ``movie_id`` is in the catalogue."""
        self._ensure_loaded()
        return any(movie.id == movie_id for movie in self.movies)

    def modify_movie(
        self, movie_id: str, updated_movie: Movie | None, operation: str
    ) -> None:
        """Delete or update the movie ``movie_id`` and rewrite the movies file.

        Rows with fewer than 23 fields are dropped. A deletion then removes
        the movie's ratings and credits.
        """
        self._ensure_loaded()
        header, *rows = read_csv_file(self.movies_path)
        updated_rows = [header]
        updated_movies: list[Movie] = []
        modified = False

        for row in rows:
            if len(row) < 23:
                _log.info("Skipping invalid row: %r", row)
                continue
            genres = parse_csv_array(row[_COL_GENRES])
            spoken = parse_csv_array(row[_COL_SPOKEN])

            if row[_COL_ID] == movie_id:
                if operation == "delete":
                    modified = True
                    continue
                if operation == "update" and updated_movie is not None:
                    row[_COL_ID] = movie_id
                    row[_COL_LANGUAGE] = updated_movie.original_language
                    row[_COL_POPULARITY] = updated_movie.popularity
                    row[_COL_RELEASE] = updated_movie.release_date
                    row[_COL_RUNTIME] = updated_movie.runtime
                    row[_COL_STATUS] = updated_movie.status
                    row[_COL_TITLE] = updated_movie.title
                    row[_COL_GENRES] = format_data(updated_movie.genres)
                    row[_COL_SPOKEN] = format_data(updated_movie.spoken_languages)
                    modified = True

            updated_rows.append(row)
            updated_movies.append(
                Movie(
                    id=row[_COL_ID],
                    original_language=row[_COL_LANGUAGE],
                    title=row[_COL_TITLE],
                    popularity=row[_COL_POPULARITY],
                    genres=genres,
                    release_date=row[_COL_RELEASE],
                    runtime=row[_COL_RUNTIME],
                    spoken_languages=spoken,
                    status=row[_COL_STATUS],
                )
            )

        if not modified:
            raise LookupError("movie not found")

        self.movies = updated_movies
        save_to_csv(self.movies_path, updated_rows)

        if operation == "delete":
            RatingModel(self.ratings_path).delete_ratings(movie_id, None)
            delete_credits_for_movie(self.credits_path, movie_id)

    def delete_movie(self, movie_id: str) -> None:
        """Delete a movie together with its ratings and credits."""
        self.modify_movie(movie_id, None, "delete")

    def update_movie(self, movie_id: str, updated_movie: Movie) -> None:
        """Replace the stored details of a movie."""
        self.modify_movie(movie_id, updated_movie, "update")