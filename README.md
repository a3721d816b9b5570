# glserver

Building blocks for game server processes: structured SDK errors, string
validation, environment configuration helpers, a thread-safe flag, counters
with derived statistics, a client for a local crash reporter service, and
detection of a local telemetry collector.

The package has no third-party dependencies.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Errors

`glserver.errors.GameLiftError` is an exception carrying a `GameLiftErrorType`.
When no name or message is given, it falls back to the standard name and
message for that type.

```python
from glserver.errors import GameLiftError, GameLiftErrorType, error_from_status_code

err = GameLiftError(GameLiftErrorType.PROCESS_NOT_ACTIVE, "", "")
print(err)
# [GameLiftError: ErrorType={13}, ErrorName={Process not activated.},
#  ErrorMessage={The process has not yet been activated.}]

error_from_status_code(429, "slow down").error_type
# GameLiftErrorType.TOO_MANY_REQUESTS_EXCEPTION
```

`error_from_status_code` maps 400, 401, 403, 404, 409 and 429 to their own
types, any other 4xx code to `BAD_REQUEST_EXCEPTION`, and everything else to
`INTERNAL_SERVICE_EXCEPTION`. `error_type_from_message` reads the error type
back from a rendered message, returning `UNKNOWN_EXCEPTION` when it cannot.

`glserver.errors.Outcome` is a small dataclass holding either raw `data` bytes
or an `error`.

## Validation

```python
import re
from glserver.validation import validate_string

validate_string("FieldName", "abc123", re.compile(r"^[a-zA-Z0-9]+$"), 1, 100, True, "")
```

An invalid value raises a `GameLiftError` of type `VALIDATION_EXCEPTION`, with
messages such as `FieldName is required.` or
`FieldName is invalid. Length must be between 1 and 100 characters.`
A `max_length` of `None` means no upper limit; the pattern may be a string or
a compiled regex, and `override_error_message` replaces the pattern-mismatch
message.

## Environment helpers

`glserver.env` provides:

- `env_str(key, default)`: the value, or the default when unset or empty.
  A `GAMELIFT_SDK_PROCESS_ID` set to `ManagedContainerProcess` yields a fresh
  UUID instead.
- `env_int(key, default, logger)` and `env_duration(key, default, logger)`:
  the parsed value, or the default when unset or unparsable (a warning is
  logged to `logger` if one is given).
- `parse_duration(value)`: parses `"300ms"`, `"-1.5h"`, `"2h45m"` and the like
  into a `timedelta`, raising `ValueError` on malformed input. Units are
  `ns`, `us` (or `µs`), `ms`, `s`, `m` and `h`.

## Atomic flag

`glserver.atomic.AtomicBool` is a lock-protected boolean with `load`, `store`,
`swap` and `compare_and_swap`.

## Counters

A counter needs a processor, which receives each recorded value. The package
defines the `MetricsProcessor` interface in `glserver.metrics.types`; you
supply the implementation:

```python
from glserver.metrics.counter import new_counter
from glserver.metrics.derived import MaxMetric, PercentileMetric
from glserver.metrics.types import MetricsProcessor


class PrintingProcessor(MetricsProcessor):
    def enqueue_metric(self, message):
        print(message.key, message.value, message.tags)

    def register_metric(self, metric):
        pass

    def dimensional_metrics_enabled(self):
        return True

    def set_global_tag(self, key, value):
        pass


counter = (
    new_counter("requests_total")
    .with_tag("service", "api")
    .with_derived_metrics(MaxMetric(), PercentileMetric(50.0, 95.0))
    .with_metrics_processor(PrintingProcessor())
    .build()
)
counter.increment()
counter.with_dimensional_tag("region", "us-west").add(5)
print(counter.current_value())
```

`build()` raises a `GameLiftError` of type `METRIC_CONFIGURATION_EXCEPTION`
when no processor is set. Each `add` adjusts the counter's current value and
sends the delta, with the counter's tags and sample rate, to the derived
metrics and then to the processor. A `Sampler` (from
`glserver.metrics.types`) set with `with_sampler` can skip observations.

Tagged variants:

- `with_tags` / `with_tag` return a new counter registered with the
  processor; when the processor reports dimensional metrics as disabled, the
  tags are set on the counter itself and the same counter is returned.
- `with_dimensional_tags` / `with_dimensional_tag` return an unregistered
  variant, or the same counter when the tags are empty or dimensional metrics
  are disabled.

Variants get their own current value and fresh copies of the derived metrics.

## Derived statistics

`glserver.metrics.derived` has `LatestMetric`, `MinMetric`, `MaxMetric`,
`MeanMetric` and `PercentileMetric`. Each sees every value a metric records and,
from `emit_metrics(source)`, returns messages keyed `<metric>.<suffix>`, such
as `requests_total.max`, or for percentiles `requests_total.p95` and
`requests_total.p99.9`. Percentiles are linearly interpolated between sorted
values; the constants `P25` to `P999` name common ones. `reset()` clears the
state and `clone()` gives an independent copy.

## Crash reporter

```python
from glserver.metrics.crash_reporter import new_crash_reporter

reporter = new_crash_reporter().with_host("localhost").with_port("8126").build()
reporter.register_process()
reporter.tag_game_session("session-123")
reporter.deregister_process()
```

Host and port default to the `GAMELIFT_CRASH_REPORTER_HOST` and
`GAMELIFT_CRASH_REPORTER_PORT` environment variables, then to `localhost` and
`8126`. A bad port or empty host makes `build()` raise a `GameLiftError` of
type `METRIC_CONFIGURATION_EXCEPTION`.

The reporter sends HTTP GET requests for `/register`, `/update` and
`/deregister` with the current process id (and the session id) as query
parameters. A failed request or a non-2xx response raises
`glserver.metrics.crash_reporter_client.CrashReporterError`. The client can
also be made directly with `create_client(host, port)` or
`CrashReporterClient(base_url, timeout)`.

## Tool detection

`glserver.tool_detector.MetricsDetector` checks whether the local telemetry
collector service is running (`systemctl is-active gl-otel-collector.service`,
or `sc query GLOTelCollector` on Windows). `set_gamelift_tool()` then records
`GAMELIFT_SDK_TOOL_NAME=Metrics` and `GAMELIFT_SDK_TOOL_VERSION=1.0.0` in the
process environment, unless a tool name is already set.

## What the package does not do

- It provides no metrics processor or transport: recorded values go only to
  the `MetricsProcessor` you supply, and nothing is sent anywhere on its own.
- `Counter` is the only metric kind with an implementation; `MetricType`
  also names `GAUGE` and `TIMER`, but there are no gauge or timer classes.
- There is no connection to a game server hosting service, no game session
  handling and no command-line program.