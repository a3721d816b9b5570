"""Behaviour shared by all metric kinds, and the state shared by their builders."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable, Mapping, Optional, TypeVar

from glserver.metrics.types import (
    DerivedMetric,
    MetricMessage,
    MetricOperation,
    MetricsProcessor,
    MetricType,
    Sampler,
)

_M = TypeVar("_M", bound="BaseMetric")


def _clone_one(derived: DerivedMetric) -> DerivedMetric:
    clone = getattr(derived, "clone", None)
    if clone is None:
        return derived
    cloned = clone()
    return derived if cloned is None else cloned


def clone_derived_metrics(derived_metrics: Iterable[DerivedMetric]) -> list[DerivedMetric]:
    """Fresh copies of derived metrics for a dimensional variant."""
    return [_clone_one(derived) for derived in derived_metrics]


class BaseMetric:
    """A named, tagged metric that records values and forwards them to a processor.

    A sampler of None records every observation.
    """

    def __init__(
        self,
        key: str,
        metric_type: MetricType,
        tags: Optional[Mapping[str, str]] = None,
        derived_metrics: Optional[Iterable[DerivedMetric]] = None,
        sampler: Optional[Sampler] = None,
        processor: Optional[MetricsProcessor] = None,
    ) -> None:
        self._key = key
        self._metric_type = metric_type
        self._tags: dict[str, str] = dict(tags or {})
        self._derived: list[DerivedMetric] = list(derived_metrics or [])
        self._sampler = sampler
        self._processor = processor
        self._current_value = 0.0
        self._tags_lock = threading.Lock()
        self._value_lock = threading.Lock()

    @property
    def key(self) -> str:
        return self._key

    @property
    def metric_type(self) -> MetricType:
        return self._metric_type

    @property
    def derived_metrics(self) -> list[DerivedMetric]:
        return list(self._derived)

    @property
    def sampler(self) -> Optional[Sampler]:
        return self._sampler

    @property
    def processor(self) -> Optional[MetricsProcessor]:
        return self._processor

    def _sampled(self) -> bool:
        return self._sampler is None or self._sampler.should_sample()

    def current_value(self) -> float:
        """The value accumulated so far."""
        with self._value_lock:
            return self._current_value

    def update_current_value(self, value: float, operation: MetricOperation) -> None:
        """Set or adjust the current value, if the sampler allows it."""
        if not self._sampled():
            return
        with self._value_lock:
            if operation is MetricOperation.SET:
                self._current_value = value
            elif operation is MetricOperation.ADJUST:
                self._current_value += value

    def tags(self) -> dict[str, str]:
        """A copy of the metric's tags."""
        with self._tags_lock:
            return dict(self._tags)

    def set_tag(self, key: str, value: str) -> None:
        """Set one tag."""
        self.set_tags({key: value})

    def set_tags(self, tags: Mapping[str, str]) -> None:
        """Set several tags."""
        with self._tags_lock:
            self._tags.update(tags)

    def remove_tag(self, key: str) -> None:
        """Remove a tag; missing tags are ignored."""
        with self._tags_lock:
            self._tags.pop(key, None)

    def sample_rate(self) -> float:
        """The sampler's rate, or 1.0 when it does not report one."""
        rate = getattr(self._sampler, "sample_rate", None)
        return float(rate()) if callable(rate) else 1.0

    def enqueue_message(self, value: float) -> None:
        """Send an observation to the derived metrics and the processor."""
        if not self._sampled() or self._processor is None:
            return
        message = MetricMessage(
            key=self._key,
            metric_type=self._metric_type,
            value=value,
            tags=self.tags(),
            sample_rate=self.sample_rate(),
            timestamp=datetime.now(),
        )
        for derived in self._derived:
            derived.handle_message(message)
        self._processor.enqueue_metric(message)

    def _spawn(self: _M, extra_tags: Mapping[str, str]) -> _M:
        combined = self.tags()
        combined.update(extra_tags)
        new = BaseMetric.__new__(type(self))
        BaseMetric.__init__(
            new,
            self._key,
            self._metric_type,
            combined,
            clone_derived_metrics(self._derived),
            self._sampler,
            self._processor,
        )
        return new

    def derive_with_tags(self: _M, tags: Mapping[str, str]) -> Optional[_M]:
        """A registered variant with extra tags, or None if this metric was tagged in place.

        When the processor has dimensional metrics disabled, the tags are set
        on this metric and None is returned. Empty tags change nothing.
        """
        if not tags:
            return None
        processor = self._processor
        if processor is not None and not processor.dimensional_metrics_enabled():
            for key, value in tags.items():
                self.set_tag(key, value)
            return None
        new = self._spawn(tags)
        if processor is not None:
            processor.register_metric(new)
        return new

    def create_dimensional_metric(self: _M, tags: Optional[Mapping[str, str]]) -> _M:
        """An unregistered variant with extra tags; this metric itself when tags are empty."""
        if not tags:
            return self
        return self._spawn(tags)


class MetricBuilder:
    """Settings collected before a metric is built."""

    def __init__(self, key: str) -> None:
        self.key = key
        self.tags: dict[str, str] = {}
        self.sampler: Optional[Sampler] = None
        self.processor: Optional[MetricsProcessor] = None
        self.derived_metrics: list[DerivedMetric] = []