"""Error taxonomy and structured error reports.

Two disjoint families:

- **Range errors** — raised while constructing a value whose components
  fall outside the bounds of its base.  One of eight kinds (each of the
  four fields, below or above range).
- **Clock errors** — lifecycle failures of a :class:`~metric_time.Clock`:
  a shared cell could not be locked or the control channel is closed.

:func:`build_error_payload` turns either family (or any exception) into
an immutable :class:`ErrorPayload` that serialises to a single JSON
object, which is how the CLI reports failures on stderr.

Payload schema::

    {
        "error_type": "hours_high",
        "message": "Hours over bounds",
        "timestamp": "2026-02-14T12:34:56+00:00",
        "details": {}
    }
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum

# ---------------------------------------------------------------------------
# Range errors
# ---------------------------------------------------------------------------


class RangeErrorKind(Enum):
    """Which component failed a bounds check, and on which side."""

    HOURS_LOW = "hours_low"
    HOURS_HIGH = "hours_high"
    MINUTES_LOW = "minutes_low"
    MINUTES_HIGH = "minutes_high"
    SECONDS_LOW = "seconds_low"
    SECONDS_HIGH = "seconds_high"
    NANOSECONDS_LOW = "nanoseconds_low"
    NANOSECONDS_HIGH = "nanoseconds_high"

    @property
    def description(self) -> str:
        field_name, side = self.value.split("_")
        return f"{field_name.capitalize()} {'under' if side == 'low' else 'over'} bounds"


class TimeRangeError(ValueError):
    """A time component lies outside the bounds of its base."""

    def __init__(self, kind: RangeErrorKind) -> None:
        super().__init__(kind.description)
        self.kind = kind


# ---------------------------------------------------------------------------
# Clock errors
# ---------------------------------------------------------------------------


class ClockErrorKind(Enum):
    NO_TIME_SET = "no_time_set"
    COULD_NOT_SET_TIME = "could_not_set_time"
    COULD_NOT_SET_TIME_EMITTER = "could_not_set_time_emitter"
    COULD_NOT_UNSUBSCRIBE = "could_not_unsubscribe"

    @property
    def description(self) -> str:
        return self.value.replace("_", " ").capitalize()


class ClockError(RuntimeError):
    """The clock could not be controlled.

    Callers usually treat this as "recreate the clock"; the clock never
    retries on its own.
    """

    def __init__(self, kind: ClockErrorKind) -> None:
        super().__init__(kind.description)
        self.kind = kind


class ChannelClosedError(RuntimeError):
    """A message was sent on a control channel whose producer has stopped."""


# ---------------------------------------------------------------------------
# Structured reports
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """A failure flattened to JSON-ready fields.

    ``error_type`` is a stable machine-readable tag (``"hours_high"``,
    ``"could_not_unsubscribe"``, ...); ``message`` is the human text.
    """

    error_type: str
    message: str
    timestamp: str
    details: dict[str, object] = field(default_factory=dict)

    def to_json(self) -> str:
        """One-line JSON rendering of every field."""
        return json.dumps(asdict(self), default=str)


def _error_type(
    error: Exception,
    error_type_map: dict[type[Exception], str] | None,
) -> str:
    mapped = (error_type_map or {}).get(type(error))
    if mapped is not None:
        return mapped
    kind = getattr(error, "kind", None)
    return str(kind.value) if isinstance(kind, Enum) else "error"


def build_error_payload(
    error: Exception,
    *,
    error_type_map: dict[type[Exception], str] | None = None,
    details: dict[str, object] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ErrorPayload:
    """Describe *error* as an :class:`ErrorPayload`.

    The tag is looked up in *error_type_map* by exact exception type
    first, then taken from the error's ``kind`` (range and clock
    errors), and is ``"error"`` otherwise.  *clock* supplies the
    timestamp and defaults to the current UTC time.
    """
    stamp = clock() if clock is not None else datetime.now(UTC)
    return ErrorPayload(
        error_type=_error_type(error, error_type_map),
        message=str(error),
        timestamp=stamp.isoformat(),
        details=dict(details) if details else {},
    )
