"""Statistics derived from a metric's observations."""

from __future__ import annotations

from typing import Optional, Protocol

from glserver.metrics.types import DerivedMetric, MetricMessage, MetricType

P25 = 25.0
P50 = 50.0
P75 = 75.0
P90 = 90.0
P95 = 95.0
P99 = 99.0
P999 = 99.9

_PERCENTILE_BASE = 100.0


class _Source(Protocol):
    @property
    def key(self) -> str: ...

    @property
    def metric_type(self) -> Optional[MetricType]: ...

    def tags(self) -> dict[str, str]: ...


def _emit(source: _Source, key: str, value: Optional[float]) -> list[MetricMessage]:
    if value is None:
        return []
    return [
        MetricMessage(
            key=key,
            metric_type=source.metric_type,
            value=value,
            tags=source.tags(),
            sample_rate=1.0,
        )
    ]


class LatestMetric(DerivedMetric):
    """Keeps the most recent value."""

    def __init__(self) -> None:
        self._value: Optional[float] = None

    def key(self) -> str:
        return "latest"

    def handle_message(self, message: MetricMessage) -> None:
        self._value = message.value

    def emit_metrics(self, source: _Source) -> list[MetricMessage]:
        return _emit(source, f"{source.key}.{self.key()}", self._value)

    def reset(self) -> None:
        self._value = None

    def clone(self) -> "LatestMetric":
        return LatestMetric()


class MaxMetric(DerivedMetric):
    """Tracks the largest value seen."""

    def __init__(self) -> None:
        self._value: Optional[float] = None

    def key(self) -> str:
        return "max"

    def handle_message(self, message: MetricMessage) -> None:
        if self._value is None or message.value > self._value:
            self._value = message.value

    def emit_metrics(self, source: _Source) -> list[MetricMessage]:
        return _emit(source, f"{source.key}.{self.key()}", self._value)

    def reset(self) -> None:
        self._value = None

    def clone(self) -> "MaxMetric":
        return MaxMetric()


class MinMetric(DerivedMetric):
    """Tracks the smallest value seen."""

    def __init__(self) -> None:
        self._value: Optional[float] = None

    def key(self) -> str:
        return "min"

    def handle_message(self, message: MetricMessage) -> None:
        if self._value is None or message.value < self._value:
            self._value = message.value

    def emit_metrics(self, source: _Source) -> list[MetricMessage]:
        return _emit(source, f"{source.key}.{self.key()}", self._value)

    def reset(self) -> None:
        self._value = None

    def clone(self) -> "MinMetric":
        return MinMetric()


class MeanMetric(DerivedMetric):
    """Computes the running mean of the values seen."""

    def __init__(self) -> None:
        self._sum: Optional[float] = None
        self._count = 0

    def key(self) -> str:
        return "mean"

    def handle_message(self, message: MetricMessage) -> None:
        self._sum = message.value if self._sum is None else self._sum + message.value
        self._count += 1

    def emit_metrics(self, source: _Source) -> list[MetricMessage]:
        if self._sum is None or self._count == 0:
            return []
        return _emit(source, f"{source.key}.{self.key()}", self._sum / self._count)

    def reset(self) -> None:
        self._sum = None
        self._count = 0

    def clone(self) -> "MeanMetric":
        return MeanMetric()


def calculate_percentile(sorted_values: list[float], percentile: float) -> float:
    """Value at ``percentile`` (0-100) of sorted values, linearly interpolated."""
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return sorted_values[0]
    index = (percentile / _PERCENTILE_BASE) * (len(sorted_values) - 1)
    lower = int(index)
    if lower < 0:
        raise IndexError(f"percentile {percentile} is out of range")
    upper = lower + 1
    if upper >= len(sorted_values):
        return sorted_values[-1]
    weight = index - lower
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def percentile_key(base_key: str, percentile: float) -> str:
    """Key of one percentile, such as ``latency.p95`` or ``latency.p99.9``."""
    if percentile == float(int(percentile)):
        return f"{base_key}.p{percentile:.0f}"
    return f"{base_key}.p{percentile:.1f}"


class PercentileMetric(DerivedMetric):
    """Computes the given percentiles of the values seen."""

    def __init__(self, *percentiles: float) -> None:
        self._percentiles: tuple[float, ...] = tuple(percentiles)
        self._values: list[float] = []

    def key(self) -> str:
        return "percentile"

    def handle_message(self, message: MetricMessage) -> None:
        self._values.append(message.value)

    def emit_metrics(self, source: _Source) -> list[MetricMessage]:
        if not self._values:
            return []
        sorted_values = sorted(self._values)
        return [
            MetricMessage(
                key=percentile_key(source.key, percentile),
                metric_type=source.metric_type,
                value=calculate_percentile(sorted_values, percentile),
                tags=source.tags(),
                sample_rate=1.0,
            )
            for percentile in self._percentiles
        ]

    def reset(self) -> None:
        self._values.clear()

    def clone(self) -> "PercentileMetric":
        return PercentileMetric(*self._percentiles)