"""Conversions between the 12-hour, 24-hour and metric bases.

Every conversion pivots through the 24-hour base:

- 12 ↔ 24 is a pure hour remapping (12 AM → 0, 12 PM → 12, other PM
  hours + 12).
- 24 ↔ 10 goes through the count of nanoseconds since midnight,
  rescaled with :class:`~metric_time._units.Converter` and decomposed
  again into hours, minutes, seconds and nanoseconds with truncating
  integer division.
- 12 ↔ 10 is composed as 12 → 24 → 10 and 10 → 24 → 12.
"""

from __future__ import annotations

from metric_time._components import Period, TimeComponents, TimeKind
from metric_time._units import Converter, TimeConversions


def conversions_for(kind: TimeKind) -> TimeConversions:
    """Unit ratios of the base *kind* is expressed in."""
    if kind is TimeKind.BASE10:
        return TimeConversions.metric()
    return TimeConversions.standard()


def base12_to_base24(components: TimeComponents, period: Period) -> TimeComponents:
    """Remap a 12-hour clock reading onto the 24-hour clock.

    Example::

        base12_to_base24(TimeComponents(12, 36, 23, 12345), Period.AM)
        # TimeComponents(0, 36, 23, 12345)
    """
    hours = components.hours
    if period is Period.AM:
        hours = 0 if hours == 12 else hours
    else:
        hours = hours if hours == 12 else hours + 12
    return TimeComponents(hours, components.minutes, components.seconds, components.nanoseconds)


def base24_to_base12(components: TimeComponents) -> tuple[TimeComponents, Period]:
    """Remap a 24-hour reading onto the 12-hour clock, deriving the period."""
    period = Period.AM if components.hours < 12 else Period.PM
    hours = components.hours
    if period is Period.AM:
        hours = 12 if hours == 0 else hours
    else:
        hours = hours if hours == 12 else hours - 12
    converted = TimeComponents(
        hours, components.minutes, components.seconds, components.nanoseconds
    )
    return converted, period


def calc_ns_since_midnight(components: TimeComponents, kind: TimeKind) -> int:
    """Nanoseconds elapsed since midnight on the number line of *kind*.

    12-hour readings are normalised to the 24-hour clock first.  Metric
    readings use metric unit lengths, so the result is a metric count.
    """
    ratios = conversions_for(kind)
    if kind.period is not None:
        components = base12_to_base24(components, kind.period)
    return (
        components.hours * ratios.ns_per_hour
        + components.minutes * ratios.ns_per_minute
        + components.seconds * ratios.ns_per_second
        + components.nanoseconds
    )


def _remainder(value: int, count: int, unit_ns: int) -> int:
    # A zero count keeps the full value for the next unit.
    if count == 0:
        return value
    return value % (count * unit_ns)


def _decompose(total_ns: int, ratios: TimeConversions) -> TimeComponents:
    hours = total_ns // ratios.ns_per_hour
    minutes_ns = _remainder(total_ns, hours, ratios.ns_per_hour)
    minutes = minutes_ns // ratios.ns_per_minute
    seconds_ns = _remainder(minutes_ns, minutes, ratios.ns_per_minute)
    seconds = seconds_ns // ratios.ns_per_second
    nanoseconds = _remainder(seconds_ns, seconds, ratios.ns_per_second)
    return TimeComponents(hours, minutes, seconds, nanoseconds)


def base24_to_base10(components: TimeComponents) -> TimeComponents:
    """Convert a 24-hour reading to metric time.

    Example::

        base24_to_base10(TimeComponents(4, 36, 56, 123_456_789))
        # TimeComponents(1, 92, 31, 624_371_283)
    """
    total_ns_std = calc_ns_since_midnight(components, TimeKind.BASE24)
    metric = TimeConversions.metric()
    total_ns_metric = int(Converter.metric().to_dest_from(total_ns_std)) % metric.ns_per_day
    return _decompose(total_ns_metric, metric)


def base10_to_base24(components: TimeComponents) -> TimeComponents:
    """Convert a metric reading to the 24-hour clock."""
    total_ns_metric = calc_ns_since_midnight(components, TimeKind.BASE10)
    standard = TimeConversions.standard()
    # Ceiling the last metric nanosecond lands on a full day; wrap it to midnight.
    total_ns_std = int(Converter.metric().to_origin_from(total_ns_metric)) % standard.ns_per_day
    return _decompose(total_ns_std, standard)


def convert_components(
    components: TimeComponents,
    source: TimeKind,
    target: TimeKind,
) -> tuple[TimeComponents, TimeKind]:
    """Convert *components* from *source* to the base of *target*.

    Returns the converted components together with the kind they are
    now expressed in.  For a 12-hour target the period is derived from
    the instant, so the returned kind may differ from *target*.  Same
    base in, same components and kind out.
    """
    if source.base == target.base:
        return components, source

    if source.period is not None:
        pivot = base12_to_base24(components, source.period)
    elif source is TimeKind.BASE10:
        pivot = base10_to_base24(components)
    else:
        pivot = components

    if target is TimeKind.BASE10:
        return base24_to_base10(pivot), TimeKind.BASE10
    if target.period is not None:
        converted, period = base24_to_base12(pivot)
        return converted, TimeKind.base12(period)
    return pivot, TimeKind.BASE24
