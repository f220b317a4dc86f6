"""Unit ratios for standard and metric time.

Standard time splits a day into 24 hours of 60 minutes of 60 seconds.
Metric (decimal) time splits the same day into 10 hours of 100 minutes
of 100 seconds.  A second always carries 1e9 nanoseconds, whatever the
base, so one metric second lasts 0.864 standard seconds.

:class:`TimeConversions` answers "how many X per Y" for a base, and
:class:`Converter` rescales a nanosecond count between the standard and
metric number lines.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

METRIC_CONVERSION_RATE = 0.864
"""Standard seconds per metric second (86 400 / 100 000)."""

FULL_CIRCLE_DEGREES = 360.0

NS_PER_MS = 1_000_000
NS_PER_SEC = 1_000_000_000


def _has_fraction(value: float) -> bool:
    return math.trunc(value) != value


@dataclass(frozen=True, slots=True)
class Converter:
    """Rescale nanosecond counts between an origin and a destination base.

    The origin is the standard number line and the destination the
    metric one when built with :meth:`metric`.

    Rounding policy:

    - fractional input → fractional output, untouched;
    - whole input, origin → destination → floored;
    - whole input, destination → origin → ceiled.

    The floor/ceil pair makes integer round trips settle after one hop
    instead of drifting by a nanosecond per hop.
    """

    rate: float

    @classmethod
    def metric(cls) -> Converter:
        """Converter between standard (origin) and metric (destination)."""
        return cls(METRIC_CONVERSION_RATE)

    def to_dest_from(self, origin: float) -> float:
        """Rescale an origin-base count into the destination base."""
        value = float(origin)
        output = value / self.rate
        if _has_fraction(value):
            return output
        return float(math.floor(output))

    def to_origin_from(self, dest: float) -> float:
        """Rescale a destination-base count back into the origin base."""
        value = float(dest)
        output = value * self.rate
        if _has_fraction(value):
            return output
        return float(math.ceil(output))


@dataclass(frozen=True, slots=True)
class TimeConversions:
    """Ratios between the units of one time base.

    Example::

        std = TimeConversions.standard()
        assert std.seconds_per_day == 86_400
        assert TimeConversions.metric().ns_per_hour == 10_000_000_000_000
    """

    hours_per_day: int
    minutes_per_hour: int
    seconds_per_minute: int

    @classmethod
    def standard(cls) -> TimeConversions:
        return cls(24, 60, 60)

    @classmethod
    def metric(cls) -> TimeConversions:
        return cls(10, 100, 100)

    @property
    def minutes_per_day(self) -> int:
        return self.hours_per_day * self.minutes_per_hour

    @property
    def seconds_per_hour(self) -> int:
        return self.minutes_per_hour * self.seconds_per_minute

    @property
    def seconds_per_day(self) -> int:
        return self.seconds_per_minute * self.minutes_per_day

    @property
    def ns_per_ms(self) -> int:
        return NS_PER_MS

    @property
    def ns_per_second(self) -> int:
        return NS_PER_SEC

    @property
    def ns_per_minute(self) -> int:
        return self.seconds_per_minute * NS_PER_SEC

    @property
    def ns_per_hour(self) -> int:
        return self.ns_per_minute * self.minutes_per_hour

    @property
    def ns_per_day(self) -> int:
        return self.ns_per_hour * self.hours_per_day

    def __str__(self) -> str:
        return (
            f"{{ hr/day: {self.hours_per_day}, min/hr: {self.minutes_per_hour}, "
            f"sec/min: {self.seconds_per_minute} }}"
        )
