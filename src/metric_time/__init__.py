"""metric_time.

Represent a time of day in the 24-hour, 12-hour (AM/PM) and metric
(10 h / 100 min / 100 s) bases, convert between them without losing the
instant, and emit the current time on a fixed cadence.
"""

from importlib.metadata import PackageNotFoundError, version

from metric_time._clock import Clock
from metric_time._components import (
    Period,
    TimeBounds,
    TimeComponents,
    TimeKind,
    TimeRotationComponents,
)
from metric_time._conversions import (
    base10_to_base24,
    base12_to_base24,
    base24_to_base10,
    base24_to_base12,
    calc_ns_since_midnight,
    convert_components,
)
from metric_time._emitter import Context, MessageType, OnEmit, Subscription, TimeEmitter
from metric_time._errors import (
    ChannelClosedError,
    ClockError,
    ClockErrorKind,
    ErrorPayload,
    RangeErrorKind,
    TimeRangeError,
    build_error_payload,
)
from metric_time._logging import JsonFormatter, configure_logging
from metric_time._settings import EmitterSettings, LoggingSettings, Settings
from metric_time._source import SystemTimeSource, TimeSourcePort
from metric_time._time import Time
from metric_time._units import Converter, TimeConversions

try:
    __version__ = version("metric-time")
except PackageNotFoundError:
    # Source checkout without installed metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Values
    "Period",
    "Time",
    "TimeBounds",
    "TimeComponents",
    "TimeKind",
    "TimeRotationComponents",
    # Conversions
    "Converter",
    "TimeConversions",
    "base10_to_base24",
    "base12_to_base24",
    "base24_to_base10",
    "base24_to_base12",
    "calc_ns_since_midnight",
    "convert_components",
    # Emission
    "Clock",
    "Context",
    "MessageType",
    "OnEmit",
    "Subscription",
    "TimeEmitter",
    # Sources
    "SystemTimeSource",
    "TimeSourcePort",
    # Errors
    "ChannelClosedError",
    "ClockError",
    "ClockErrorKind",
    "ErrorPayload",
    "RangeErrorKind",
    "TimeRangeError",
    "build_error_payload",
    # Logging
    "JsonFormatter",
    "configure_logging",
    # Settings
    "EmitterSettings",
    "LoggingSettings",
    "Settings",
]
