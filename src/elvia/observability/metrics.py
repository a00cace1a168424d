"""Prometheus-style metrics utilities without external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
import time
from types import TracebackType


@dataclass
class _LabeledCounter:
    value: float = 0.0

    def inc(self, amount: float = 1.0) -> None:
        self.value += amount


@dataclass
class _LabeledHistogram:
    count: int = 0
    total: float = 0.0

    def observe(self, value: float) -> None:
        self.count += 1
        self.total += value

    def time(self) -> _Timer:
        return _Timer(self)


@dataclass
class Counter:
    name: str
    description: str
    label_names: tuple[str, ...] = ()
    values: dict[tuple[str, ...], _LabeledCounter] = field(default_factory=dict)

    def labels(self, **labels: str) -> _LabeledCounter:
        key = tuple(labels[name] for name in self.label_names)
        if key not in self.values:
            self.values[key] = _LabeledCounter()
        return self.values[key]

    def inc(self, amount: float = 1.0) -> None:
        self.labels().inc(amount)

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} counter"]
        for key, counter in self.values.items():
            lines.append(f"{self.name}{_label_str(self.label_names, key)} {counter.value}")
        return lines


@dataclass
class Histogram:
    name: str
    description: str
    label_names: tuple[str, ...] = ()
    values: dict[tuple[str, ...], _LabeledHistogram] = field(default_factory=dict)

    def labels(self, **labels: str) -> _LabeledHistogram:
        key = tuple(labels[name] for name in self.label_names)
        if key not in self.values:
            self.values[key] = _LabeledHistogram()
        return self.values[key]

    def time(self) -> _Timer:
        return self.labels().time()

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} summary"]
        for key, histogram in self.values.items():
            label_str = _label_str(self.label_names, key)
            lines.append(f"{self.name}_count{label_str} {histogram.count}")
            lines.append(f"{self.name}_sum{label_str} {histogram.total}")
        return lines


def _label_str(names: tuple[str, ...], values: tuple[str, ...]) -> str:
    if not names:
        return ""
    pairs = ",".join(f'{name}="{value}"' for name, value in zip(names, values))
    return "{" + pairs + "}"


CONVERSATIONS_STARTED = Counter(
    name="elvia_conversations_started_total",
    description="Conversations opened with graduating students",
)

CONVERSATIONS_FINISHED = Counter(
    name="elvia_conversations_finished_total",
    description="Conversations that reached a terminal outcome",
    label_names=("outcome",),
)

REPLIES_HANDLED = Counter(
    name="elvia_replies_handled_total",
    description="Inbound replies by classification outcome",
    label_names=("outcome",),
)

GRADUATIONS_DETECTED = Counter(
    name="elvia_graduations_detected_total",
    description="Graduation events published by the trigger",
)

GRADUATION_CHECK_DURATION = Histogram(
    name="elvia_graduation_check_duration_seconds",
    description="Duration of graduation checks",
)

REGISTRY: tuple[Counter | Histogram, ...] = (
    CONVERSATIONS_STARTED,
    CONVERSATIONS_FINISHED,
    REPLIES_HANDLED,
    GRADUATIONS_DETECTED,
    GRADUATION_CHECK_DURATION,
)


def render_metrics() -> str:
    lines: list[str] = []
    for metric in REGISTRY:
        lines.extend(metric.render())
    return "\n".join(lines) + "\n"


class _Timer:
    def __init__(self, histogram: _LabeledHistogram) -> None:
        self._histogram = histogram
        self._start: float | None = None

    def __enter__(self) -> _Timer:
        self._start = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._start is None:
            return
        duration = time.perf_counter() - self._start
        self._histogram.observe(duration)
