"""Counters: metrics that count occurrences of events."""

from __future__ import annotations

from typing import Mapping

from glserver.errors import GameLiftError, GameLiftErrorType
from glserver.metrics.base import BaseMetric, MetricBuilder
from glserver.metrics.types import (
    DerivedMetric,
    MetricOperation,
    MetricsProcessor,
    MetricType,
    Sampler,
)


class Counter(BaseMetric):
    """A metric that accumulates the values added to it."""

    def add(self, value: float) -> None:
        """Add ``value`` to the counter and report the delta."""
        self.update_current_value(value, MetricOperation.ADJUST)
        self.enqueue_message(value)

    def increment(self) -> None:
        """Add one to the counter."""
        self.add(1.0)

    def count(self, condition: bool) -> None:
        """Add one to the counter when ``condition`` holds."""
        if condition:
            self.increment()

    def with_tags(self, tags: Mapping[str, str]) -> "Counter":
        """A registered variant with extra tags.

        With dimensional metrics disabled, the tags are set on this counter
        and the counter itself is returned.
        """
        variant = self.derive_with_tags(tags)
        return self if variant is None else variant

    def with_tag(self, key: str, value: str) -> "Counter":
        """A variant with one extra tag; see ``with_tags``."""
        return self.with_tags({key: value})

    def with_dimensional_tag(self, key: str, value: str) -> "Counter":
        """An unregistered variant with one extra tag, for chaining."""
        return self.with_dimensional_tags({key: value})

    def with_dimensional_tags(self, tags: Mapping[str, str]) -> "Counter":
        """An unregistered variant with extra tags.

        Returns this counter when the tags are empty or dimensional metrics
        are disabled.
        """
        if not tags:
            return self
        processor = self.processor
        if processor is not None and not processor.dimensional_metrics_enabled():
            return self
        return self.create_dimensional_metric(tags)


class CounterBuilder(MetricBuilder):
    """Collects a counter's tags, sampler, derived metrics and processor."""

    def with_tags(self, tags: Mapping[str, str]) -> "CounterBuilder":
        self.tags.update(tags or {})
        return self

    def with_tag(self, key: str, value: str) -> "CounterBuilder":
        self.tags[key] = value
        return self

    def with_sampler(self, sampler: Sampler) -> "CounterBuilder":
        self.sampler = sampler
        return self

    def with_derived_metrics(self, *derived: DerivedMetric) -> "CounterBuilder":
        self.derived_metrics.extend(derived)
        return self

    def with_metrics_processor(self, processor: MetricsProcessor) -> "CounterBuilder":
        self.processor = processor
        return self

    def build(self) -> Counter:
        """Create the counter and register it with the processor."""
        if self.processor is None:
            raise GameLiftError(
                GameLiftErrorType.METRIC_CONFIGURATION_EXCEPTION,
                "Counter processor required",
                "Counter requires a processor - use WithMetricsProcessor() or factory creation",
            )
        counter = Counter(
            self.key,
            MetricType.COUNTER,
            dict(self.tags),
            self.derived_metrics,
            self.sampler,
            self.processor,
        )
        self.processor.register_metric(counter)
        return counter


def new_counter(key: str) -> CounterBuilder:
    """Start building a counter with the given key."""
    return CounterBuilder(key)