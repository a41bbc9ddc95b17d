"""Crew members of each movie, kept in the crew column of the credits CSV file."""

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
    "name": str,
    "department": str,
    "job": str,
}


@dataclass
class CrewMember:
    """One person working behind the camera on a movie."""

    credit_id: str = ""
    id: int = 0
    name: str = ""
    department: str = ""
    job: str = ""


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


def _to_member(obj: dict[str, Any] | None, lenient: bool) -> CrewMember:
    if obj is None:
        return CrewMember()
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
    return CrewMember(**values)


def parse_crew_data(credits_path: str | Path) -> dict[int, list[CrewMember]]:
    """Read the crew of every movie from the credits file, keyed by movie id.

    Rows with too few columns, an invalid movie id or crew JSON that does not
    decode are skipped.
    """
    _header, *rows = read_csv_file(credits_path)
    crews: dict[int, list[CrewMember]] = {}
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
                for item in _load_list(row[1].replace("'", '"'))
            ]
        except ValueError as exc:
            _log.warning("Error parsing crew JSON for movie %d: %s", movie_id, exc)
            continue
        crews[movie_id] = members
    return crews


def delete_credits_for_movie(credits_path: str | Path, movie_id: str) -> None:
    """Remove every credits row of ``movie_id`` and rewrite the file."""
    header, *rows = read_csv_file(credits_path)
    kept = [header]
    deleted = False
    for row in rows:
        if len(row) < 3:
            _log.info("Skipping row due to insufficient columns: %r", row)
            continue
        if row[2] == movie_id:
            deleted = True
            continue
        kept.append(row)
    if not deleted:
        _log.info("No credits found for movie: %s", movie_id)
    save_to_csv(credits_path, kept)


class CrewModel:
    """Crew data loaded lazily from the credits file."""

    def __init__(self, credits_path: str | Path) -> None:
        self.credits_path = credits_path
        self.crew_data: dict[int, list[CrewMember]] = {}
        self._loaded = False

    def load_crew(self) -> None:
        """(Re)load the crew of every movie from the credits file."""
        self.crew_data = parse_crew_data(self.credits_path)
        self._loaded = True

    def list_crew_members(self, movie_id: str) -> list[CrewMember]:
        """Return the crew of one movie."""
        if not self._loaded:
            self.load_crew()
        try:
            key = _atoi(movie_id)
        except ValueError:
            raise ValueError("invalid movie ID format") from None
        try:
            return self.crew_data[key]
        except KeyError:
            raise LookupError("movie not found") from None

    def update_crew_member(
        self, movie_id: str, crew_id: str, updated_crew: CrewMember
    ) -> None:
        """Change the name, department and job of the crew member ``crew_id``.

        Empty fields of ``updated_crew`` leave the stored value as it is, and
        other keys of the stored member are kept. The first matching member of
        every row is changed; rows that cannot be parsed are dropped from the
        rewritten file.
        """
        header, *rows = read_csv_file(self.credits_path)
        updated_rows = [header]
        updated = False
        crew_map: dict[int, list[CrewMember]] = {}

        for row in rows:
            if len(row) < 3:
                _log.info("Skipping row due to insufficient columns: %r", row)
                continue
            try:
                row_movie_id = _atoi(row[2])
            except ValueError:
                _log.info("Skipping row due to invalid movie ID: %s", row[2])
                continue
            row[1] = row[1].replace("'", '"')
            try:
                crew = _load_list(row[1])
            except ValueError as exc:
                _log.warning("Error parsing crew JSON for movie %s: %s", row[2], exc)
                continue

            for member in crew:
                if not isinstance(member, dict):
                    continue
                member_id = member.get("id")
                if isinstance(member_id, bool) or not isinstance(member_id, (int, float)):
                    continue
                if str(int(member_id)) != crew_id:
                    continue
                if updated_crew.name:
                    member["name"] = updated_crew.name
                if updated_crew.department:
                    member["department"] = updated_crew.department
                if updated_crew.job:
                    member["job"] = updated_crew.job
                updated = True
                break

            row[1] = _dump(crew)
            updated_rows.append(row)
            crew_map[row_movie_id] = [_to_member(member, lenient=True) for member in crew]

        if not updated:
            raise LookupError("crew member not found for the given movie ID")

        self.crew_data = crew_map
        save_to_csv(self.credits_path, updated_rows)