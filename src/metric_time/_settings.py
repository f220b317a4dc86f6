"""Configuration models (pydantic v2 / pydantic-settings).

:class:`Settings` reads ``METRIC_TIME_``-prefixed environment variables
and an optional ``.env`` file.  Nested fields use ``__``::

    METRIC_TIME_CLOCK__KIND=base10
    METRIC_TIME_CLOCK__INTERVAL=0.5
    METRIC_TIME_LOGGING__FORMAT=json

Durations are seconds.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from metric_time._components import TimeKind

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "text"]

# -------------------------------------------------------------------
# Sections (plain BaseModel, composed into Settings)
# -------------------------------------------------------------------


class EmitterSettings(BaseModel):
    """What a :class:`~metric_time.TimeEmitter` or
    :class:`~metric_time.Clock` emits, and how often.

    Frozen: every tick's :class:`~metric_time.Context` holds the same
    instance.
    """

    model_config = ConfigDict(frozen=True)

    kind: TimeKind = Field(
        default=TimeKind.BASE24,
        description="Base each sampled time is converted to before emission.",
    )
    interval: Annotated[float, Field(gt=0)] = Field(
        default=1.0,
        description="Sleep after each tick, in seconds.",
    )
    max_events: Annotated[int, Field(ge=0)] | None = Field(
        default=None,
        description="Tick cap; the producer stops once it is reached. None = no cap.",
    )


class LoggingSettings(BaseModel):
    """Where log records go and how they look.

    Records always go to stderr.  Setting ``file`` adds a rotating file
    sink of at most ``max_file_size_mb`` per generation.
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root logger level.",
    )
    format: LogFormat = Field(
        default="text",
        description="'text' for terminals, 'json' for log shippers.",
    )
    file: str | None = Field(
        default=None,
        description="Extra log file path, rotated by size.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description="Rotate the log file once it reaches this many megabytes.",
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Rotated generations kept next to the log file.",
    )


# -------------------------------------------------------------------
# Root
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Top-level configuration of the ``metric-time`` tools.

    Example ``.env``::

        METRIC_TIME_CLOCK__KIND=base12_pm
        METRIC_TIME_CLOCK__MAX_EVENTS=60
        METRIC_TIME_LOGGING__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="METRIC_TIME_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    clock: EmitterSettings = Field(
        default_factory=EmitterSettings,
        description="Emission settings used by `watch` and `now`.",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log sinks and format.",
    )
