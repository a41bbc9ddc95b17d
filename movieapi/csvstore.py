"""Reading, writing and paging the CSV files that hold the catalogue."""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")

# Cast and crew columns hold long JSON documents.
csv.field_size_limit(2**31 - 1)


class CSVError(Exception):
    """Raised when a CSV file cannot be read or written."""


def _resolve(filename: str | Path) -> Path:
    return Path.cwd() / filename


def read_csv_file(filename: str | Path) -> list[list[str]]:
    """Return every non-empty row of a CSV file relative to the working directory.

    Rows may have differing numbers of fields. At least a header and one
    data row are required.
    """
    path = _resolve(filename)
    try:
        handle = path.open(newline="", encoding="utf-8")
    except OSError as exc:
        raise CSVError(f"error opening file: {exc}") from exc
    with handle:
        try:
            rows = [row for row in csv.reader(handle) if row]
        except (csv.Error, UnicodeDecodeError) as exc:
            raise CSVError(f"error reading CSV: {exc}") from exc
    if len(rows) < 2:
        raise CSVError("no data found in CSV")
    return rows


def update_csv(path: str | Path, data: Sequence[Sequence[str]]) -> None:
    """Overwrite ``path`` with ``data``."""
    with open(path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle, lineterminator="\n").writerows(data)


def save_to_csv(file_name: str | Path, rows: Sequence[Sequence[str]]) -> None:
    """Overwrite a CSV file relative to the working directory."""
    try:
        update_csv(_resolve(file_name), rows)
    except OSError as exc:
        raise CSVError(f"error updating {file_name}: {exc}") from exc


def parse_json_field(json_str: str, key: str) -> list[str]:
    """Collect the string values under ``key`` from a list of JSON-like objects.

    Single quotes are treated as double quotes. Text that is not a list of
    objects comes back unchanged (after the quote swap) as the only element.
    """
    text = json_str.replace("'", '"')
    try:
        items = json.loads(text)
    except json.JSONDecodeError:
        return [text]
    if items is None:
        return []
    if not isinstance(items, list) or not all(
        item is None or isinstance(item, dict) for item in items
    ):
        return [text]
    return [item[key] for item in items if item and isinstance(item.get(key), str)]


def parse_data(filename: str | Path) -> list[dict[str, str]]:
    """Map each data row to its header names, skipping rows of the wrong width."""
    header, *rows = read_csv_file(filename)
    return [dict(zip(header, row)) for row in rows if len(row) == len(header)]


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    """Return one page of ``items``; page defaults to 1 and limit to 10."""
    if page <= 0:
        page = 1
    if limit == 0:
        limit = 10
    if limit < 0:
        raise ValueError("limit cannot be negative")
    start = (page - 1) * limit
    if start > len(items):
        raise ValueError(f"page {page} is out of range")
    return list(items[start:start + limit])