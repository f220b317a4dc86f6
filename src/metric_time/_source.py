"""Wall-clock port and host adapter.

Provides :class:`TimeSourcePort` (Protocol) and :class:`SystemTimeSource`
for reading the local time of day.

The rest of the package never touches the host clock directly: a
:class:`~metric_time.Time` is sampled through a source, and tests inject
a deterministic fake (:class:`metric_time.testing.FakeTimeSource`).
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

from metric_time._components import TimeComponents
from metric_time._units import NS_PER_SEC


@runtime_checkable
class TimeSourcePort(Protocol):
    """Local time-of-day reader.

    Implementations return 24-hour components with nanosecond
    resolution.
    """

    def now(self) -> TimeComponents:
        """Return the current local time of day as 24-hour components."""
        ...


class SystemTimeSource:
    """Production source reading the host's local wall clock.

    Satisfies :class:`TimeSourcePort` via structural subtyping (PEP 544).
    Nanoseconds come from ``time.time_ns()``; the broken-down fields
    from ``time.localtime`` of the same instant.
    """

    def now(self) -> TimeComponents:
        """Return the local time of day."""
        epoch_ns = time.time_ns()
        seconds, nanoseconds = divmod(epoch_ns, NS_PER_SEC)
        local = time.localtime(seconds)
        # tm_sec may read 60 during a leap second.
        return TimeComponents(local.tm_hour, local.tm_min, min(local.tm_sec, 59), nanoseconds)
