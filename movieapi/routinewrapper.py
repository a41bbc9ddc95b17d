"""Run callables under a process-wide failure handler."""

from __future__ import annotations

import threading
from collections.abc import Callable

Handler = Callable[[Exception | None], None]

_lock = threading.Lock()
_initialised = False
_handle: Handler | None = None


def init(fn: Handler) -> None:
    """Install the handler; only the first call has any effect."""
    global _initialised, _handle
    with _lock:
        if not _initialised:
            _initialised = True
            _handle = fn


def routine_generator(fn: Callable[[], object]) -> None:
    """Run ``fn`` and always pass its outcome to the handler.

    The handler receives the exception ``fn`` raised, or ``None``. The
    exception is absorbed once the handler has seen it.
    """
    handle = _handle
    if handle is None:
        raise RuntimeError("routine wrapper is not initialised")
    try:
        fn()
    except Exception as exc:
        handle(exc)
    else:
        handle(None)