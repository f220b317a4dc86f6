"""Log record formatting and root logger setup.

Library modules only create module loggers.  Where records end up is
decided once, by :func:`configure_logging`, which the CLI calls after
loading :class:`~metric_time.Settings`.

Two formats are available:

``json``
    One object per line via :class:`JsonFormatter`.  Producer-thread
    records carry the thread name and, when the caller passed them as
    ``extra``, the tick index and time kind.
``text``
    ``asctime [LEVEL] logger (thread): message``.

Timestamps in JSON lines are UTC, independent of the local time of day
the clock reports.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import IO, Any

from metric_time._settings import LoggingSettings

_BYTES_PER_MB = 1024 * 1024

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s"

_EXTRA_FIELDS = ("tick", "kind")
"""Record attributes copied into JSON lines when a caller sets them."""


class JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    Always present: ``timestamp``, ``level``, ``logger``, ``thread``,
    ``message``, ``service``.  Added when available: ``version``,
    ``tick``, ``kind``, ``exception``, ``stack_info``.

    Args:
        service: Name stamped on every line.
        version: Version stamped on every line; left out when empty.
    """

    def __init__(self, *, service: str = "", version: str = "") -> None:
        super().__init__()
        self._static: dict[str, str] = {"service": service}
        if version:
            self._static["version"] = version

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
            **self._static,
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(entry, default=str)


def _make_formatter(settings: LoggingSettings, service: str, version: str) -> logging.Formatter:
    if settings.format == "json":
        return JsonFormatter(service=service, version=version)
    return logging.Formatter(_TEXT_FORMAT)


def configure_logging(
    settings: LoggingSettings,
    *,
    service: str,
    version: str = "",
    stream: IO[str] | None = None,
) -> list[logging.Handler]:
    """Replace the root logger's handlers according to *settings*.

    A stream handler on *stream* (``sys.stderr`` by default) is always
    installed.  When ``settings.file`` is set, a size-rotated file
    handler is added with the same formatter.

    Returns:
        The handlers now attached to the root logger.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    formatter = _make_formatter(settings, service, version)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(stream if stream is not None else sys.stderr)
    ]
    if settings.file is not None:
        handlers.append(
            RotatingFileHandler(
                settings.file,
                maxBytes=settings.max_file_size_mb * _BYTES_PER_MB,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(settings.level)
    return handlers
