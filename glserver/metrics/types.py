"""Core metric types: kinds, operations, messages and the interfaces metrics rely on."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Optional


class MetricType(str, Enum):
    """The kind of a metric."""

    GAUGE = "gauge"
    COUNTER = "counter"
    TIMER = "timer"


class MetricOperation(Enum):
    """How a new value combines with a metric's current value."""

    SET = "set"
    ADJUST = "adjust"


@dataclass
class MetricMessage:
    """A single metric observation on its way to a processor."""

    key: str = ""
    metric_type: Optional[MetricType] = None
    value: float = 0.0
    tags: dict[str, str] = field(default_factory=dict)
    sample_rate: float = 1.0
    timestamp: Optional[datetime] = None


class Sampler(ABC):
    """Decides whether an observation is recorded."""

    @abstractmethod
    def should_sample(self) -> bool:
        """Whether the current observation should be recorded."""

    def sample_rate(self) -> float:
        """The fraction of observations this sampler records."""
        return 1.0


class DerivedMetric(ABC):
    """A statistic computed from the observations of a metric."""

    @abstractmethod
    def key(self) -> str:
        """The suffix appended to the source metric's key."""

    @abstractmethod
    def handle_message(self, message: MetricMessage) -> None:
        """Take a new observation into account."""

    @abstractmethod
    def emit_metrics(self, source: Any) -> list[MetricMessage]:
        """Messages for the current state; empty when nothing was observed."""

    @abstractmethod
    def reset(self) -> None:
        """Forget all observations."""

    def clone(self) -> "DerivedMetric":
        """A copy with fresh state; by default the same instance is shared."""
        return self


class MetricsProcessor(ABC):
    """Receives registered metrics and their observations."""

    #: The processor's logger, if any; subclasses may set one.
    logger: ClassVar[Optional[logging.Logger]] = None

    @abstractmethod
    def enqueue_metric(self, message: MetricMessage) -> None:
        """Queue an observation for sending."""

    @abstractmethod
    def register_metric(self, metric: Any) -> None:
        """Make a metric known to the processor."""

    @abstractmethod
    def dimensional_metrics_enabled(self) -> bool:
        """Whether tagged variants of a metric are separate metrics."""

    @abstractmethod
    def set_global_tag(self, key: str, value: str) -> None:
        """Set a tag applied to every metric."""