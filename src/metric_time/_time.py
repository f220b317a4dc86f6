"""Immutable, validated time-of-day value.

A :class:`Time` bundles :class:`~metric_time.TimeComponents` with the
:class:`~metric_time.TimeKind` they are expressed in.  The components
are checked against the bounds of the kind once, at construction;
every later operation relies on that.

Example::

    time = Time(TimeComponents(9, 23, 56, 9_234_234), TimeKind.BASE24)
    metric = time.to(TimeKind.BASE10)
    str(metric)   # 'Metric: 3:91:62.047724807'

Ordering caveat: comparison is plain field order on
``(components, kind)``.  It is only meaningful between values of the
same kind.  A 12-hour AM value is not normalised against a PM value,
and a metric value is not converted before comparing it with a
standard one; convert both sides to a common kind first.
"""

from __future__ import annotations

import datetime
import functools
from dataclasses import dataclass

from metric_time._components import (
    Period,
    TimeBounds,
    TimeComponents,
    TimeKind,
    TimeRotationComponents,
)
from metric_time._conversions import convert_components
from metric_time._source import SystemTimeSource, TimeSourcePort


@functools.total_ordering
@dataclass(frozen=True, slots=True)
class Time:
    """A time of day in one of the three bases.

    Raises:
        TimeRangeError: If *components* fall outside the bounds of
            *kind*.
    """

    components: TimeComponents
    kind: TimeKind

    def __post_init__(self) -> None:
        TimeBounds.for_kind(self.kind).check(self.components)

    # -- constructors -------------------------------------------------------

    @classmethod
    def base10(cls, components: TimeComponents) -> Time:
        return cls(components, TimeKind.BASE10)

    @classmethod
    def base12(cls, components: TimeComponents, period: Period) -> Time:
        return cls(components, TimeKind.base12(period))

    @classmethod
    def base24(cls, components: TimeComponents) -> Time:
        return cls(components, TimeKind.BASE24)

    @classmethod
    def now(cls, source: TimeSourcePort | None = None) -> Time:
        """Sample the local time of day as a 24-hour value."""
        resolved = source if source is not None else SystemTimeSource()
        return cls(resolved.now(), TimeKind.BASE24)

    @classmethod
    def from_time(cls, value: datetime.time) -> Time:
        """Build a 24-hour value from a :class:`datetime.time` (µs resolution)."""
        components = TimeComponents(
            value.hour, value.minute, value.second, value.microsecond * 1_000
        )
        return cls(components, TimeKind.BASE24)

    # -- accessors ----------------------------------------------------------

    @property
    def hours(self) -> int:
        return self.components.hours

    @property
    def minutes(self) -> int:
        return self.components.minutes

    @property
    def seconds(self) -> int:
        return self.components.seconds

    @property
    def nanoseconds(self) -> int:
        return self.components.nanoseconds

    @property
    def period(self) -> Period | None:
        return self.kind.period

    # -- conversions --------------------------------------------------------

    def to(self, kind: TimeKind) -> Time:
        """Express the same instant in the base of *kind*.

        Converting within a base returns ``self``.  For a 12-hour target
        the period is derived from the instant, so
        ``time.to(TimeKind.BASE12_AM)`` may come back as PM.
        """
        components, target = convert_components(self.components, self.kind, kind)
        if target is self.kind:
            return self
        return Time(components, target)

    def rotations(self) -> TimeRotationComponents:
        """Clock-hand angles for this value, see :class:`TimeRotationComponents`."""
        return TimeRotationComponents.from_components(self.components, self.kind)

    # -- ordering -----------------------------------------------------------

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return (self.components, self.kind.rank) < (other.components, other.kind.rank)

    def __str__(self) -> str:
        if self.kind is TimeKind.BASE10:
            return f"Metric: {self.components}"
        if self.period is not None:
            return f"{self.components} {self.period}"
        return str(self.components)
