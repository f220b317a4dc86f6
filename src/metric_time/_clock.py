"""Stateful clock caching the latest tick of a :class:`TimeEmitter`.

A :class:`Clock` keeps five independent lock-guarded cells: last time,
tick count, subscription, emitter and producer thread.  There is no
combined lock, so ``time()`` and ``count()`` may briefly disagree with
each other; each is consistent on its own.

Lock acquisition is bounded.  Write paths turn a lock that cannot be
acquired into a :class:`~metric_time.ClockError`; the read accessors
``time()`` and ``count()`` treat it as "no value" and return ``None``
and ``0``.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

from metric_time._components import TimeKind
from metric_time._emitter import Context, OnEmit, Subscription, TimeEmitter
from metric_time._errors import ChannelClosedError, ClockError, ClockErrorKind
from metric_time._settings import EmitterSettings
from metric_time._source import SystemTimeSource, TimeSourcePort
from metric_time._time import Time

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_LOCK_TIMEOUT = 0.1
"""Seconds to wait for a cell lock before giving up."""


class _Cell(Generic[_T]):
    """A value guarded by its own lock."""

    def __init__(self, value: _T) -> None:
        self._lock = threading.Lock()
        self.value = value

    @contextlib.contextmanager
    def hold(self, timeout: float = _LOCK_TIMEOUT) -> Iterator[_Cell[_T]]:
        """Hold the lock for the duration of the ``with`` block.

        Raises:
            TimeoutError: If the lock is not acquired within *timeout*.
        """
        if not self._lock.acquire(timeout=timeout):
            msg = f"Lock not acquired within {timeout}s"
            raise TimeoutError(msg)
        try:
            yield self
        finally:
            self._lock.release()

    def read(self, default: _T) -> _T:
        """Return the value, or *default* if the lock is unavailable."""
        try:
            with self.hold() as cell:
                return cell.value
        except TimeoutError:
            return default


class Clock:
    """Start/stop wrapper around :class:`TimeEmitter` with cached state.

    Args:
        settings: Kind, interval and optional max-events cap forwarded
            to every emitter this clock starts.
        source: Wall-clock source, forwarded to the emitter and used by
            :meth:`stop` when no tick has landed yet.

    Example::

        clock = Clock(EmitterSettings(interval=0.1))
        clock.start(lambda time, ctx: print(time))
        ...
        last = clock.stop()
        clock.count()
    """

    def __init__(
        self,
        settings: EmitterSettings | None = None,
        *,
        source: TimeSourcePort | None = None,
    ) -> None:
        self._settings = settings if settings is not None else EmitterSettings()
        self._source = source if source is not None else SystemTimeSource()
        self._time: _Cell[Time | None] = _Cell(None)
        self._count: _Cell[int] = _Cell(0)
        self._subscription: _Cell[Subscription | None] = _Cell(None)
        self._emitter: _Cell[TimeEmitter | None] = _Cell(None)
        self._thread: _Cell[threading.Thread | None] = _Cell(None)

    # -- settings -----------------------------------------------------------

    @property
    def settings(self) -> EmitterSettings:
        return self._settings

    @property
    def kind(self) -> TimeKind:
        return self._settings.kind

    @property
    def interval(self) -> float:
        return self._settings.interval

    @property
    def max_events(self) -> int | None:
        return self._settings.max_events

    # -- shared state -------------------------------------------------------

    def time(self) -> Time | None:
        """Latest emitted time, or ``None`` if none or unreadable."""
        return self._time.read(None)

    def count(self) -> int:
        """Number of ticks recorded so far, or ``0`` if unreadable."""
        return self._count.read(0)

    def last_time(self) -> Time:
        """Latest emitted time.

        Raises:
            ClockError: ``NO_TIME_SET`` if nothing was emitted yet or the
                cell could not be read.
        """
        latest = self.time()
        if latest is None:
            raise ClockError(ClockErrorKind.NO_TIME_SET)
        return latest

    # -- lifecycle ----------------------------------------------------------

    def start(self, on_emit: OnEmit) -> Subscription:
        """Start ticking, calling *on_emit* on the producer thread.

        A clock that is already running is unsubscribed first.  The tick
        count keeps accumulating across restarts.

        Raises:
            ClockError: ``COULD_NOT_SET_TIME_EMITTER`` or
                ``COULD_NOT_SET_TIME`` if a shared cell cannot be locked.
        """
        emitter = TimeEmitter(self._settings, source=self._source)
        try:
            with self._emitter.hold() as cell:
                cell.value = emitter
        except TimeoutError as exc:
            raise ClockError(ClockErrorKind.COULD_NOT_SET_TIME_EMITTER) from exc

        def _record(time: Time, context: Context) -> None:
            on_emit(time, context)
            try:
                with self._time.hold() as time_cell:
                    time_cell.value = time
                    with self._count.hold() as count_cell:
                        count_cell.value += 1
            except TimeoutError:
                logger.warning("Tick %d not recorded: clock state is locked", context.index)

        self._release_previous()
        subscription, thread = emitter.emit(_record)

        try:
            with self._subscription.hold() as cell:
                cell.value = subscription
            with self._thread.hold() as thread_cell:
                thread_cell.value = thread
        except TimeoutError as exc:
            with contextlib.suppress(ChannelClosedError):
                subscription.unsubscribe()
            raise ClockError(ClockErrorKind.COULD_NOT_SET_TIME) from exc

        return subscription

    def stop(self) -> Time:
        """Unsubscribe the producer and return the latest time.

        Falls back to sampling now when no tick has landed yet.  Does
        not wait for the producer; see :meth:`join`.

        Raises:
            ClockError: ``COULD_NOT_UNSUBSCRIBE`` if the clock was never
                started, the producer already stopped, or the
                subscription cell cannot be locked.
        """
        try:
            with self._subscription.hold() as cell:
                subscription = cell.value
                if subscription is None:
                    raise ClockError(ClockErrorKind.COULD_NOT_UNSUBSCRIBE)
                subscription.unsubscribe()
        except (TimeoutError, ChannelClosedError) as exc:
            raise ClockError(ClockErrorKind.COULD_NOT_UNSUBSCRIBE) from exc

        latest = self.time()
        return latest if latest is not None else Time.now(self._source)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the current producer thread to finish.

        Returns:
            ``True`` if no producer is alive afterwards.
        """
        thread = self._thread.read(None)
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _release_previous(self) -> None:
        try:
            with self._subscription.hold() as cell:
                previous = cell.value
                if previous is None or not previous.active:
                    return
                try:
                    previous.unsubscribe()
                except ChannelClosedError:
                    logger.debug("Previous producer already stopped")
        except TimeoutError:
            logger.warning("Previous producer not released: subscription cell is locked")
