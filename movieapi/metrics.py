"""In-process metrics rendered in the Prometheus text exposition format."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

NAMESPACE = "movieapi"


def _format_value(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


class Gauge:
    """A value that can go up and down."""

    def __init__(self, name: str, help_text: str) -> None:
        self.name = name
        self.help = help_text
        self._value = 0.0
        self._lock = threading.Lock()

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    def inc(self) -> None:
        with self._lock:
            self._value += 1.0

    def _lines(self) -> list[str]:
        return [
            f"# HELP {self.name} {_escape_help(self.help)}",
            f"# TYPE {self.name} gauge",
            f"{self.name} {_format_value(self.value)}",
        ]


class _Counter:
    def __init__(self) -> None:
        self._value = 0.0
        self._lock = threading.Lock()

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def inc(self) -> None:
        self.add(1.0)

    def add(self, amount: float) -> None:
        if amount < 0:
            raise ValueError("counter cannot decrease in value")
        with self._lock:
            self._value += amount


class CounterVec:
    """A family of counters keyed by label values."""

    def __init__(self, name: str, help_text: str, label_names: tuple[str, ...]) -> None:
        self.name = name
        self.help = help_text
        self.label_names = tuple(label_names)
        self._children: dict[tuple[str, ...], _Counter] = {}
        self._lock = threading.Lock()

    def with_label_values(self, *args: str) -> _Counter:
        if len(args) != len(self.label_names):
            raise ValueError(
                f"inconsistent label cardinality: expected {len(self.label_names)} "
                f"label values but got {len(args)} in {list(args)!r}"
            )
        key = tuple(str(arg) for arg in args)
        with self._lock:
            return self._children.setdefault(key, _Counter())

    def _lines(self) -> list[str]:
        lines = [
            f"# HELP {self.name} {_escape_help(self.help)}",
            f"# TYPE {self.name} counter",
        ]
        with self._lock:
            children = sorted(self._children.items())
        for values, counter in children:
            labels = ",".join(
                f'{name}="{_escape_label(value)}"'
                for name, value in zip(self.label_names, values)
            )
            lines.append(f"{self.name}{{{labels}}} {_format_value(counter.value)}")
        return lines


@dataclass
class PrometheusMetrics:
    """The metrics the service exposes."""

    movies_metrics: Gauge = field(
        default_factory=lambda: Gauge(f"{NAMESPACE}_movies_total", "Total movies")
    )
    requests_metrics: CounterVec = field(
        default_factory=lambda: CounterVec(
            f"{NAMESPACE}_requests_total", "Total http requests", ("code",)
        )
    )

    def render(self) -> str:
        """Return all metrics in the text exposition format."""
        lines = self.movies_metrics._lines() + self.requests_metrics._lines()
        return "\n".join(lines) + "\n"


_metrics: PrometheusMetrics | None = None
_metrics_lock = threading.Lock()


def init_prometheus_metrics() -> PrometheusMetrics:
    """Return the process-wide metrics, creating them on first use."""
    global _metrics
    with _metrics_lock:
        if _metrics is None:
            _metrics = PrometheusMetrics()
        return _metrics