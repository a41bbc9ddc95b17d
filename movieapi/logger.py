"""Structured logging in a JSON or console layout."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "movieapi"

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}

_LEVEL_COLOURS = {
    logging.DEBUG: 35,
    logging.INFO: 34,
    logging.WARNING: 33,
    logging.ERROR: 31,
    logging.CRITICAL: 31,
}


class _Encoder(logging.Formatter):
    def __init__(self, coloured_levels: bool) -> None:
        super().__init__()
        self._coloured = coloured_levels

    def _level(self, record: logging.LogRecord) -> str:
        name = _LEVEL_NAMES.get(record.levelno, record.levelname.lower())
        if not self._coloured:
            return name
        colour = _LEVEL_COLOURS.get(record.levelno, 31)
        return f"\x1b[{colour}m{name.upper()}\x1b[0m"

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        moment = datetime.fromtimestamp(record.created).astimezone()
        offset = moment.strftime("%z")
        if offset in ("+0000", "-0000"):
            offset = "Z"
        return f"{moment:%Y-%m-%dT%H:%M:%S}.{int(record.msecs):03d}{offset}"

    @staticmethod
    def _name(record: logging.LogRecord) -> str:
        if record.name == LOGGER_NAME:
            return ""
        prefix = LOGGER_NAME + "."
        return record.name[len(prefix):] if record.name.startswith(prefix) else record.name

    @staticmethod
    def _caller(record: logging.LogRecord) -> str:
        path = Path(record.pathname)
        return f"{path.parent.name}/{path.name}:{record.lineno}"

    def _stacktrace(self, record: logging.LogRecord) -> str:
        if record.levelno < logging.ERROR:
            return ""
        if record.exc_info:
            return self.formatException(record.exc_info)
        return "".join(traceback.format_stack()).rstrip("\n")

    @staticmethod
    def _fields(record: logging.LogRecord) -> dict[str, Any]:
        fields = getattr(record, "fields", None)
        return dict(fields) if isinstance(fields, dict) else {}


class _JSONEncoder(_Encoder):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": self._level(record),
            "ts": self._timestamp(record),
        }
        name = self._name(record)
        if name:
            entry["logger"] = name
        entry["caller"] = self._caller(record)
        entry["msg"] = record.getMessage()
        entry.update(self._fields(record))
        stack = self._stacktrace(record)
        if stack:
            entry["stacktrace"] = stack
        return json.dumps(entry, default=str)


class _ConsoleEncoder(_Encoder):
    def format(self, record: logging.LogRecord) -> str:
        parts = [self._timestamp(record), self._level(record)]
        name = self._name(record)
        if name:
            parts.append(name)
        parts.append(self._caller(record))
        parts.append(record.getMessage())
        fields = self._fields(record)
        if fields:
            parts.append(json.dumps(fields, default=str))
        line = "\t".join(parts)
        stack = self._stacktrace(record)
        return f"{line}\n{stack}" if stack else line


def new_root_logger(debug: bool, development: bool) -> logging.Logger:
    """Configure and return the application logger writing to stdout.

    Extra structured values are passed as ``extra={"fields": {...}}``.
    """
    if debug:
        formatter: logging.Formatter = _JSONEncoder(coloured_levels=development)
    elif development:
        formatter = _ConsoleEncoder(coloured_levels=True)
    else:
        formatter = _JSONEncoder(coloured_levels=False)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    return logger