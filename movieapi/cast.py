"""Cast members of each movie, kept in the cast column of the credits CSV file."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .csvstore import read_csv_file, save_to_csv

_log = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")

_MEMBER_FIELDS: dict[str, type] = {
    "credit_id": str,
    "id": int,
    "character": str,
    "name": str,
}


@dataclass
class CastMember:
    """One actor appearing in a movie."""

    credit_id: str = ""
    id: int = 0
    character: str = ""
    name: str = ""


def _atoi(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} out of range")
    return value


def _reject_constant(text: str) -> Any:
    raise ValueError(f"invalid JSON value {text}")


def _load_list(text: str) -> list[Any]:
    """Decode a JSON array of objects; ``null`` gives an empty list."""
    value = json.loads(text, parse_float=_parse_float, parse_constant=_reject_constant)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("expected a JSON array")
    if not all(item is None or isinstance(item, dict) for item in value):
        raise ValueError("expected an array of JSON objects")
    return value


def _dump(value: Any) -> str:
    text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def _is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _to_member(obj: dict[str, Any] | None, lenient: bool) -> CastMember:
    if obj is None:
        return CastMember()
    values: dict[str, Any] = {}
    for key, kind in _MEMBER_FIELDS.items():
        value = obj.get(key)
        if value is None:
            continue
        if kind is str and isinstance(value, str):
            values[key] = value
        elif kind is int and _is_int(value) and (lenient or isinstance(value, int)):
            values[key] = int(value)
        elif not lenient:
            raise ValueError(f"cannot decode field {key!r} from {value!r}")
    return CastMember(**values)


def parse_casts_data(credits_path: str | Path) -> dict[int, list[CastMember]]:
    """Read the cast of every movie from the credits file, keyed by movie id.

    Rows with too few columns, an invalid movie id or cast JSON that does not
    decode are skipped.
    """
    _header, *rows = read_csv_file(credits_path)
    casts: dict[int, list[CastMember]] = {}
    for row in rows:
        if len(row) < 3:
            continue
        try:
            movie_id = _atoi(row[2].strip())
        except ValueError:
            _log.warning("Invalid movie ID %r", row[2])
            continue
        try:
            members = [
                _to_member(item, lenient=False)
                for item in _load_list(row[0].replace("'", '"'))
            ]
        except ValueError as exc:
            _log.warning("Error parsing cast JSON for movie %d: %s", movie_id, exc)
            continue
        casts[movie_id] = members
    return casts


class CastModel:
    """Cast data loaded lazily from the credits file."""

    def __init__(self, credits_path: str | Path) -> None:
        self.credits_path = credits_path
        self.cast_data: dict[int, list[CastMember]] = {}
        self._loaded = False

    def load_cast(self) -> None:
        """(Re)load the cast of every movie from the credits file."""
        self.cast_data = parse_casts_data(self.credits_path)
        self._loaded = True

    def list_cast_members(self, movie_id: str) -> list[CastMember]:
        """Return the cast of one movie."""
        if not self._loaded:
            self.load_cast()
        try:
            key = _atoi(movie_id)
        except ValueError:
            raise ValueError("invalid movie ID format") from None
        try:
            return self.cast_data[key]
        except KeyError:
            raise LookupError("movie not found") from None

    def list_movies_by_cast_id(self, cast_id: str) -> list[int]:
        """Return the ids of the movies in which the actor ``cast_id`` appears."""
        if not self._loaded:
            self.load_cast()
        try:
            key = _atoi(cast_id)
        except ValueError:
            raise ValueError("invalid cast ID format") from None
        movie_ids = [
            movie_id
            for movie_id, members in self.cast_data.items()
            if any(member.id == key for member in members)
        ]
        if not movie_ids:
            raise LookupError("no movies found for the given cast ID")
        return movie_ids

    def update_cast_member(
        self, movie_id: str, cast_id: str, updated_cast: CastMember
    ) -> None:
        """Change the name and character of the cast member ``cast_id``.

        Empty fields of ``updated_cast`` leave the stored value as it is. The
        first matching member of every row is changed; the re-encoded cast
        list is stored in the second column of each row, and rows that cannot
        be parsed are dropped from the rewritten file.
        """
        header, *rows = read_csv_file(self.credits_path)
        updated_rows = [header]
        updated = False
        cast_map: dict[int, list[CastMember]] = {}

        for row in rows:
            if len(row) < 3:
                _log.info("Skipping row due to insufficient columns: %r", row)
                continue
            try:
                row_movie_id = _atoi(row[2])
            except ValueError:
                _log.info("Skipping row due to invalid movie ID: %s", row[2])
                continue
            row[0] = row[0].replace("'", '"')
            try:
                cast = _load_list(row[0])
            except ValueError as exc:
                _log.warning("Error parsing cast JSON for movie %s: %s", movie_id, exc)
                continue

            for member in cast:
                member_id = member.get("id") if isinstance(member, dict) else None
                if isinstance(member_id, bool) or not isinstance(member_id, (int, float)):
                    raise ValueError("cast member without a numeric id")
                if str(int(member_id)) != cast_id:
                    continue
                if updated_cast.name:
                    member["name"] = updated_cast.name
                if updated_cast.character:
                    member["character"] = updated_cast.character
                updated = True
                break

            row[1] = _dump(cast)
            updated_rows.append(row)
            cast_map[row_movie_id] = [_to_member(member, lenient=True) for member in cast]

        if not updated:
            raise LookupError("cast member not found for the given movie ID")

        self.cast_data = cast_map
        save_to_csv(self.credits_path, updated_rows)