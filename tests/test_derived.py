from dataclasses import dataclass, field

import pytest

from glserver.metrics.derived import (
    P25,
    P50,
    P75,
    P95,
    P99,
    P999,
    LatestMetric,
    MaxMetric,
    MeanMetric,
    MinMetric,
    PercentileMetric,
    calculate_percentile,
    percentile_key,
)
from glserver.metrics.types import MetricMessage, MetricType


@dataclass
class Source:
    key: str = "test_metric"
    metric_type: MetricType = MetricType.GAUGE
    tag_values: dict = field(default_factory=dict)

    def tags(self):
        return dict(self.tag_values)


def feed(metric, values):
    for value in values:
        metric.handle_message(MetricMessage(key="test_metric", value=value))


# Clone isolation


def test_max_clone_is_independent():
    original = MaxMetric()
    original.handle_message(MetricMessage(key="test_metric", value=100, tags={"region": "us-east"}))
    cloned = original.clone()
    cloned.handle_message(MetricMessage(key="test_metric", value=200, tags={"region": "us-west"}))
    east = original.emit_metrics(Source(tag_values={"region": "us-east"}))
    west = cloned.emit_metrics(Source(tag_values={"region": "us-west"}))
    assert [m.value for m in east] == [100]
    assert [m.value for m in west] == [200]


def test_latest_clone_is_independent():
    original = LatestMetric()
    cloned = original.clone()
    assert isinstance(cloned, LatestMetric) and cloned is not original
    original.handle_message(MetricMessage(value=100))
    cloned.handle_message(MetricMessage(value=200))
    source = Source(tag_values={"region": "us-east"})
    assert [m.value for m in original.emit_metrics(source)] == [100]
    assert [m.value for m in cloned.emit_metrics(source)] == [200]


def test_mean_clone_is_independent():
    original = MeanMetric()
    cloned = original.clone()
    assert isinstance(cloned, MeanMetric)
    for i in range(1, 4):
        original.handle_message(MetricMessage(value=float(i)))
        cloned.handle_message(MetricMessage(value=float(i * 10)))
    assert [m.value for m in original.emit_metrics(Source())] == [2.0]
    assert [m.value for m in cloned.emit_metrics(Source())] == [20.0]


def test_clone_starts_empty():
    original = MinMetric()
    feed(original, [5.0])
    assert original.clone().emit_metrics(Source()) == []


# Latest


def test_latest_key():
    assert LatestMetric().key() == "latest"


def test_latest_handle_message_keeps_last():
    latest = LatestMetric()
    feed(latest, [10.5])
    assert latest.emit_metrics(Source())[0].value == 10.5
    feed(latest, [20.7])
    assert latest.emit_metrics(Source())[0].value == 20.7


def test_latest_emit_no_values():
    assert LatestMetric().emit_metrics(Source(tag_values={"env": "test"})) == []


def test_latest_emit_with_values():
    latest = LatestMetric()
    feed(latest, [42.0])
    messages = latest.emit_metrics(Source(tag_values={"env": "test"}))
    assert len(messages) == 1
    assert messages[0].key == "test_metric.latest"
    assert messages[0].metric_type == MetricType.GAUGE
    assert messages[0].value == 42.0
    assert messages[0].tags["env"] == "test"
    assert messages[0].sample_rate == 1.0


def test_latest_reset():
    latest = LatestMetric()
    feed(latest, [42.0])
    assert latest.emit_metrics(Source())[0].value == 42.0
    latest.reset()
    assert latest.emit_metrics(Source()) == []


def test_latest_multiple_updates():
    latest = LatestMetric()
    values = [1.0, 5.0, 3.0, 8.0, 2.0]
    feed(latest, values)
    messages = latest.emit_metrics(Source(metric_type=MetricType.COUNTER))
    assert len(messages) == 1
    assert messages[0].value == values[-1]


# Max


def test_max_key():
    assert MaxMetric().key() == "max"


def test_max_handle_message():
    maximum = MaxMetric()
    feed(maximum, [10.5])
    assert maximum.emit_metrics(Source())[0].value == 10.5
    feed(maximum, [20.7])
    assert maximum.emit_metrics(Source())[0].value == 20.7
    feed(maximum, [15.0])
    assert maximum.emit_metrics(Source())[0].value == 20.7


def test_max_emit_no_values():
    assert MaxMetric().emit_metrics(Source(tag_values={"env": "test"})) == []


def test_max_emit_with_values():
    maximum = MaxMetric()
    feed(maximum, [5.0, 15.0, 10.0, 25.0, 8.0])
    messages = maximum.emit_metrics(Source(metric_type=MetricType.TIMER, tag_values={"env": "prod"}))
    assert len(messages) == 1
    assert messages[0].key == "test_metric.max"
    assert messages[0].metric_type == MetricType.TIMER
    assert messages[0].value == 25.0
    assert messages[0].tags["env"] == "prod"
    assert messages[0].sample_rate == 1.0


def test_max_reset():
    maximum = MaxMetric()
    feed(maximum, [42.0])
    assert maximum.emit_metrics(Source())[0].value == 42.0
    maximum.reset()
    assert maximum.emit_metrics(Source()) == []


def test_max_negative_values():
    maximum = MaxMetric()
    values = [-10.0, -5.0, -15.0, -2.0]
    feed(maximum, values)
    assert maximum.emit_metrics(Source())[0].value == values[-1]


def test_max_single_value():
    maximum = MaxMetric()
    feed(maximum, [42.0])
    messages = maximum.emit_metrics(Source(metric_type=MetricType.COUNTER))
    assert [m.value for m in messages] == [42.0]


# Min


def test_min_key():
    assert MinMetric().key() == "min"


def test_min_handle_message():
    minimum = MinMetric()
    feed(minimum, [10.5])
    assert minimum.emit_metrics(Source())[0].value == 10.5
    feed(minimum, [5.2])
    assert minimum.emit_metrics(Source())[0].value == 5.2
    feed(minimum, [15.0])
    assert minimum.emit_metrics(Source())[0].value == 5.2


def test_min_emit_no_values():
    assert MinMetric().emit_metrics(Source(tag_values={"env": "test"})) == []


def test_min_emit_with_values():
    minimum = MinMetric()
    feed(minimum, [15.0, 5.0, 25.0, 8.0, 10.0])
    messages = minimum.emit_metrics(Source(metric_type=MetricType.TIMER, tag_values={"env": "prod"}))
    assert len(messages) == 1
    assert messages[0].key == "test_metric.min"
    assert messages[0].metric_type == MetricType.TIMER
    assert messages[0].value == 5.0
    assert messages[0].tags["env"] == "prod"
    assert messages[0].sample_rate == 1.0


def test_min_reset():
    minimum = MinMetric()
    feed(minimum, [42.0])
    assert minimum.emit_metrics(Source())[0].value == 42.0
    minimum.reset()
    assert minimum.emit_metrics(Source()) == []


def test_min_negative_values():
    minimum = MinMetric()
    values = [-5.0, -10.0, -2.0, -15.0]
    feed(minimum, values)
    assert minimum.emit_metrics(Source())[0].value == values[-1]


def test_min_single_value():
    minimum = MinMetric()
    feed(minimum, [42.0])
    assert [m.value for m in minimum.emit_metrics(Source(metric_type=MetricType.COUNTER))] == [42.0]


def test_min_zero_value():
    minimum = MinMetric()
    feed(minimum, [5.0, 0.0, 10.0, 3.0])
    assert minimum.emit_metrics(Source())[0].value == 0.0


# Mean


def test_mean_key():
    assert MeanMetric().key() == "mean"


def test_mean_handle_message():
    mean = MeanMetric()
    feed(mean, [10.0])
    assert mean.emit_metrics(Source())[0].value == 10.0
    feed(mean, [20.0])
    assert mean.emit_metrics(Source())[0].value == 15.0
    feed(mean, [0.0])
    assert mean.emit_metrics(Source())[0].value == 10.0


def test_mean_emit_no_values():
    assert MeanMetric().emit_metrics(Source(tag_values={"env": "test"})) == []


def test_mean_emit_with_values():
    mean = MeanMetric()
    feed(mean, [10.0, 20.0, 15.0, 15.0])
    messages = mean.emit_metrics(Source(metric_type=MetricType.TIMER, tag_values={"env": "prod"}))
    assert len(messages) == 1
    assert messages[0].key == "test_metric.mean"
    assert messages[0].metric_type == MetricType.TIMER
    assert messages[0].value == 15.0
    assert messages[0].tags["env"] == "prod"
    assert messages[0].sample_rate == 1.0


def test_mean_reset():
    mean = MeanMetric()
    feed(mean, [10.0, 20.0, 30.0])
    assert mean.emit_metrics(Source())[0].value == 20.0
    mean.reset()
    assert mean.emit_metrics(Source()) == []
    feed(mean, [4.0])
    assert mean.emit_metrics(Source())[0].value == 4.0


def test_mean_negative_values():
    mean = MeanMetric()
    feed(mean, [-5.0, -10.0, -15.0])
    assert [m.value for m in mean.emit_metrics(Source())] == [-10.0]


def test_mean_single_value():
    mean = MeanMetric()
    feed(mean, [42.0])
    assert [m.value for m in mean.emit_metrics(Source(metric_type=MetricType.COUNTER))] == [42.0]


def test_mean_mixed_values():
    mean = MeanMetric()
    feed(mean, [-10.0, 5.0, 0.0, 15.0, -5.0])
    assert [m.value for m in mean.emit_metrics(Source())] == [1.0]


def test_mean_decimal_precision():
    mean = MeanMetric()
    feed(mean, [3.0, 3.0, 4.0])
    assert [m.value for m in mean.emit_metrics(Source())] == [10.0 / 3.0]


# Percentile


def test_new_percentile_keys_in_order():
    p = PercentileMetric(50.0, 95.0, 99.0)
    assert p.key() == "percentile"
    assert p.emit_metrics(Source()) == []
    feed(p, [1.0])
    keys = [m.key for m in p.emit_metrics(Source())]
    assert keys == ["test_metric.p50", "test_metric.p95", "test_metric.p99"]


def test_percentile_handle_message():
    p = PercentileMetric(50.0)
    feed(p, [10.0, 20.0, 30.0])
    assert [m.value for m in p.emit_metrics(Source())] == [20.0]


def test_percentile_emit_no_values():
    p = PercentileMetric(P50, P95)
    assert p.emit_metrics(Source(metric_type=MetricType.TIMER, tag_values={"env": "test"})) == []


def test_percentile_single_percentile():
    p = PercentileMetric(P50)
    feed(p, [3.0, 1.0, 5.0, 2.0, 4.0])
    messages = p.emit_metrics(Source(metric_type=MetricType.TIMER, tag_values={"env": "prod"}))
    assert len(messages) == 1
    assert messages[0].key == "test_metric.p50"
    assert messages[0].metric_type == MetricType.TIMER
    assert messages[0].value == 3.0
    assert messages[0].tags["env"] == "prod"
    assert messages[0].sample_rate == 1.0


def test_percentile_multiple_percentiles():
    p = PercentileMetric(P25, P50, P75)
    feed(p, [float(i) for i in range(1, 11)])
    messages = p.emit_metrics(Source())
    assert [(m.key, m.value) for m in messages] == [
        ("test_metric.p25", 3.25),
        ("test_metric.p50", 5.5),
        ("test_metric.p75", 7.75),
    ]


def test_percentile_reset():
    p = PercentileMetric(P50)
    feed(p, [1.0, 2.0, 3.0])
    assert len(p.emit_metrics(Source())) == 1
    p.reset()
    assert p.emit_metrics(Source()) == []


def test_percentile_key_integer():
    assert percentile_key("test_metric", P50) == "test_metric.p50"
    assert percentile_key("test_metric", P95) == "test_metric.p95"


def test_percentile_key_decimal():
    assert percentile_key("test_metric", 99.5) == "test_metric.p99.5"
    assert percentile_key("test_metric", P999) == "test_metric.p99.9"


def test_calculate_percentile_edge_cases():
    assert calculate_percentile([], 50.0) == 0.0
    assert calculate_percentile([42.0], 50.0) == 42.0
    assert calculate_percentile([10.0, 20.0], 50.0) == 15.0


def test_calculate_percentile_extremes():
    values = [1.0, 2.0, 3.0, 4.0, 5.0]
    assert calculate_percentile(values, 0.0) == 1.0
    assert calculate_percentile(values, 100.0) == 5.0


def test_calculate_percentile_out_of_range():
    with pytest.raises(IndexError):
        calculate_percentile([1.0, 2.0, 3.0], -100.0)


def test_percentile_single_value():
    p = PercentileMetric(P50, P95)
    feed(p, [42.0])
    assert [m.value for m in p.emit_metrics(Source(metric_type=MetricType.COUNTER))] == [42.0, 42.0]


def test_percentile_negative_values():
    p = PercentileMetric(P50)
    feed(p, [-1.0, -5.0, -3.0])
    assert [m.value for m in p.emit_metrics(Source())] == [-3.0]


def test_percentile_clone_keeps_percentiles_not_values():
    p = PercentileMetric(P50, P99)
    feed(p, [1.0, 2.0])
    cloned = p.clone()
    assert cloned.emit_metrics(Source()) == []
    feed(cloned, [7.0])
    assert [m.key for m in cloned.emit_metrics(Source())] == ["test_metric.p50", "test_metric.p99"]