"""Raw time components, time bases, bounds and hand rotations.

- :class:`Period` — AM/PM half of a 12-hour day.
- :class:`TimeKind` — which base a set of components is expressed in.
- :class:`TimeComponents` — an unvalidated (hours, minutes, seconds,
  nanoseconds) tuple.
- :class:`TimeBounds` — the valid half-open ranges of a base.
- :class:`TimeRotationComponents` — clock-hand angles with fractional
  carry, so hands sweep instead of jumping.

Bounds per base::

    base     hours    minutes   seconds   nanoseconds
    Base10   [0,10)   [0,100)   [0,100)   [0,1e9)
    Base12   [1,13)   [0,60)    [0,60)    [0,1e9)
    Base24   [0,24)   [0,60)    [0,60)    [0,1e9)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from metric_time._errors import RangeErrorKind, TimeRangeError
from metric_time._units import FULL_CIRCLE_DEGREES, NS_PER_SEC


class Period(Enum):
    AM = "AM"
    PM = "PM"

    def __str__(self) -> str:
        return self.value


class TimeKind(Enum):
    """Time base of a value.

    The 12-hour base carries its period, so it is split into
    ``BASE12_AM`` and ``BASE12_PM``.  Declaration order is the
    tie-breaker when ordering times with identical components.
    """

    BASE10 = "base10"
    BASE12_AM = "base12_am"
    BASE12_PM = "base12_pm"
    BASE24 = "base24"

    @classmethod
    def base12(cls, period: Period) -> TimeKind:
        return cls.BASE12_AM if period is Period.AM else cls.BASE12_PM

    @property
    def base(self) -> int:
        """Hours-per-day family of the kind: 10, 12 or 24."""
        return int(self.value[4:6])

    @property
    def period(self) -> Period | None:
        if self is TimeKind.BASE12_AM:
            return Period.AM
        if self is TimeKind.BASE12_PM:
            return Period.PM
        return None

    @property
    def rank(self) -> int:
        return list(TimeKind).index(self)

    @property
    def label(self) -> str:
        if self.period is not None:
            return f"Standard {self.period}"
        return "Metric" if self is TimeKind.BASE10 else "24 hour"


@dataclass(frozen=True, slots=True, order=True)
class TimeComponents:
    """Hours, minutes, seconds and nanoseconds of a time of day.

    Pure data: whether the numbers make sense depends on the base, see
    :class:`TimeBounds`.  Ordering is lexicographic in field order.
    """

    hours: int
    minutes: int
    seconds: int
    nanoseconds: int

    def __str__(self) -> str:
        return f"{self.hours}:{self.minutes:02d}:{self.seconds:02d}.{self.nanoseconds:09d}"


def _check_field(
    value: int,
    bounds: range,
    low: RangeErrorKind,
    high: RangeErrorKind,
) -> None:
    if value in bounds:
        return
    raise TimeRangeError(low if value < bounds.start else high)


@dataclass(frozen=True, slots=True)
class TimeBounds:
    """Valid half-open ranges of each component for one base.

    Example::

        bounds = TimeBounds.for_kind(TimeKind.BASE24)
        bounds.check(TimeComponents(13, 30, 0, 0))       # ok
        bounds.check(TimeComponents(24, 0, 0, 0))        # TimeRangeError
    """

    hours: range
    minutes: range
    seconds: range
    nanoseconds: range

    @classmethod
    def for_kind(cls, kind: TimeKind) -> TimeBounds:
        if kind is TimeKind.BASE10:
            return cls(range(0, 10), range(0, 100), range(0, 100), range(0, NS_PER_SEC))
        if kind.period is not None:
            return cls(range(1, 13), range(0, 60), range(0, 60), range(0, NS_PER_SEC))
        return cls(range(0, 24), range(0, 60), range(0, 60), range(0, NS_PER_SEC))

    def check(self, components: TimeComponents) -> TimeComponents:
        """Return *components* unchanged if every field is in range.

        Fields are checked in order hours, minutes, seconds,
        nanoseconds; the first failure wins.

        Raises:
            TimeRangeError: With the ``*_LOW`` or ``*_HIGH`` kind of the
                first offending field.
        """
        _check_field(
            components.hours, self.hours, RangeErrorKind.HOURS_LOW, RangeErrorKind.HOURS_HIGH
        )
        _check_field(
            components.minutes,
            self.minutes,
            RangeErrorKind.MINUTES_LOW,
            RangeErrorKind.MINUTES_HIGH,
        )
        _check_field(
            components.seconds,
            self.seconds,
            RangeErrorKind.SECONDS_LOW,
            RangeErrorKind.SECONDS_HIGH,
        )
        _check_field(
            components.nanoseconds,
            self.nanoseconds,
            RangeErrorKind.NANOSECONDS_LOW,
            RangeErrorKind.NANOSECONDS_HIGH,
        )
        return components


@dataclass(frozen=True, slots=True)
class TimeRotationComponents:
    """Clock-hand angles in degrees, one per component.

    Each finer hand's fraction of a turn is scaled by 1/100 and carried
    into its parent: nanoseconds into seconds, seconds into minutes,
    minutes into hours.
    """

    hours: float
    minutes: float
    seconds: float
    nanoseconds: float

    @classmethod
    def from_components(
        cls,
        components: TimeComponents,
        kind: TimeKind,
    ) -> TimeRotationComponents:
        bounds = TimeBounds.for_kind(kind)
        nanoseconds_per = components.nanoseconds / len(bounds.nanoseconds)
        seconds_per = components.seconds / len(bounds.seconds) + nanoseconds_per / 100.0
        minutes_per = components.minutes / len(bounds.minutes) + seconds_per / 100.0
        hours_per = components.hours / len(bounds.hours) + minutes_per / 100.0
        return cls(
            hours=FULL_CIRCLE_DEGREES * hours_per,
            minutes=FULL_CIRCLE_DEGREES * minutes_per,
            seconds=FULL_CIRCLE_DEGREES * seconds_per,
            nanoseconds=FULL_CIRCLE_DEGREES * nanoseconds_per,
        )
