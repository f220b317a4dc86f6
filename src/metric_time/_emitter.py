"""Periodic time emission with a subscribe/unsubscribe control channel.

A :class:`TimeEmitter` runs one background thread per :meth:`emit`
call.  The thread and its caller talk over a control channel carrying
three messages::

    START        sent once by emit() to kick off the first tick
    CONTINUE     sent by the producer to itself after every tick
    UNSUBSCRIBE  sent by Subscription.unsubscribe() from any thread

Producer loop, per message received:

1. ``UNSUBSCRIBE`` → stop.
2. Tick index reached ``max_events`` → stop.
3. Sample now, convert to the configured kind, call
   ``on_emit(time, Context(index, settings))``.
4. Sleep ``interval`` seconds, bump the index, send ``CONTINUE``.

Cancellation is cooperative: an unsubscribe is only seen once the
current sleep has elapsed, so stop latency is bounded by ``interval``.
When the loop ends the channel is closed; a later
:meth:`Subscription.unsubscribe` raises
:class:`~metric_time.ChannelClosedError`.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from metric_time._errors import ChannelClosedError
from metric_time._settings import EmitterSettings
from metric_time._source import SystemTimeSource, TimeSourcePort
from metric_time._time import Time

logger = logging.getLogger(__name__)


class MessageType(Enum):
    START = "start"
    CONTINUE = "continue"
    UNSUBSCRIBE = "unsubscribe"


@dataclass(frozen=True, slots=True)
class Context:
    """Per-tick context handed to the emit callback.

    Attributes:
        index: Zero-based tick index; strictly increasing, no gaps.
        settings: The emitter settings in effect.
    """

    index: int
    settings: EmitterSettings


OnEmit = Callable[[Time, Context], None]
"""Emit callback, invoked synchronously on the producer thread."""


class _ControlChannel:
    """Multi-producer, single-consumer message queue that can be closed."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[MessageType] = queue.SimpleQueue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, message: MessageType) -> None:
        if self._closed.is_set():
            msg = f"Cannot send {message.name}: control channel is closed"
            raise ChannelClosedError(msg)
        self._queue.put(message)

    def recv(self) -> MessageType:
        if self._closed.is_set():
            msg = "Cannot receive: control channel is closed"
            raise ChannelClosedError(msg)
        return self._queue.get()

    def close(self) -> None:
        self._closed.set()


class Subscription:
    """Caller-held handle that stops an active producer.

    Safe to share between threads; :meth:`unsubscribe` only enqueues a
    message.
    """

    def __init__(self, channel: _ControlChannel) -> None:
        self._channel = channel

    @property
    def active(self) -> bool:
        """``False`` once the producer has stopped."""
        return not self._channel.closed

    def unsubscribe(self) -> None:
        """Ask the producer to stop after its current sleep.

        Raises:
            ChannelClosedError: If the producer has already stopped.
        """
        self._channel.send(MessageType.UNSUBSCRIBE)


class TimeEmitter:
    """Samples the time on a fixed cadence and pushes it to a callback.

    Args:
        settings: Kind, interval and optional max-events cap.
            Defaults to :class:`EmitterSettings` defaults.
        source: Wall-clock source.  Defaults to
            :class:`~metric_time.SystemTimeSource`.

    Example::

        emitter = TimeEmitter(EmitterSettings(kind=TimeKind.BASE10, interval=0.5))
        subscription, thread = emitter.emit(lambda time, ctx: print(ctx.index, time))
        ...
        subscription.unsubscribe()
        thread.join()
    """

    def __init__(
        self,
        settings: EmitterSettings | None = None,
        *,
        source: TimeSourcePort | None = None,
    ) -> None:
        self._settings = settings if settings is not None else EmitterSettings()
        self._source = source if source is not None else SystemTimeSource()

    @property
    def settings(self) -> EmitterSettings:
        return self._settings

    def emit(self, on_emit: OnEmit) -> tuple[Subscription, threading.Thread]:
        """Start a producer thread delivering ticks to *on_emit*.

        Returns:
            The :class:`Subscription` controlling the producer and the
            producer thread, which callers may join to wait for
            termination.
        """
        channel = _ControlChannel()
        thread = threading.Thread(
            target=self._run,
            args=(channel, on_emit),
            name="time-emitter",
            daemon=True,
        )
        thread.start()
        logger.debug(
            "Emitter started (kind=%s, interval=%ss, max_events=%s)",
            self._settings.kind.value,
            self._settings.interval,
            self._settings.max_events,
        )
        try:
            channel.send(MessageType.START)
        except ChannelClosedError as exc:
            logger.error("Send error: %s", exc)
        return Subscription(channel), thread

    # -- producer -----------------------------------------------------------

    def _run(self, channel: _ControlChannel, on_emit: OnEmit) -> None:
        try:
            self._loop(channel, on_emit)
        finally:
            channel.close()

    def _loop(self, channel: _ControlChannel, on_emit: OnEmit) -> None:
        settings = self._settings
        index = 0
        while True:
            try:
                message = channel.recv()
            except ChannelClosedError as exc:
                logger.warning("Receive error, stopping emitter: %s", exc)
                return

            if message is MessageType.UNSUBSCRIBE:
                logger.debug("Emitter unsubscribed after %d events", index)
                return

            if settings.max_events is not None and index >= settings.max_events:
                logger.debug("Emitter reached max events (%d)", settings.max_events)
                return

            current = Time.now(self._source).to(settings.kind)
            try:
                on_emit(current, Context(index=index, settings=settings))
            except Exception as exc:
                logger.error(
                    "Emit callback error at index %d: %s",
                    index,
                    exc,
                    extra={"tick": index, "kind": settings.kind.value},
                )

            time.sleep(settings.interval)
            index += 1
            try:
                channel.send(MessageType.CONTINUE)
            except ChannelClosedError as exc:
                logger.error("Send error: %s", exc)
