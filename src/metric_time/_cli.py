"""Command-line interface for metric-time (Typer-based).

Commands::

    metric-time now      [--kind K] [--rotations]
    metric-time convert  VALUE --from K --to K [--rotations]
    metric-time watch    [--kind K] [--interval S] [--max-events N]

Global options (``--version``, ``--log-level``, ``--log-format``,
``--env-file``) are handled by the callback, which loads
:class:`~metric_time.Settings`, applies overrides, configures logging and
hands the settings to the command through ``ctx.obj``.
"""

from __future__ import annotations

import contextlib
import logging
import re
from typing import Annotated, get_args

import typer
from pydantic import ValidationError

from metric_time import __version__
from metric_time._clock import Clock
from metric_time._components import TimeComponents, TimeKind
from metric_time._emitter import Context
from metric_time._errors import ClockError, TimeRangeError, build_error_payload
from metric_time._logging import configure_logging
from metric_time._settings import EmitterSettings, LogFormat, LogLevel, Settings
from metric_time._time import Time

logger = logging.getLogger(__name__)

SERVICE_NAME = "metric-time"

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_RUNTIME_ERROR = 3

_VALID_LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)
_VALID_LOG_FORMATS: tuple[str, ...] = get_args(LogFormat)

_VALUE_PATTERN = re.compile(r"^(\d{1,3}):(\d{1,3}):(\d{1,3})(?:\.(\d{1,9}))?$")

_JOIN_POLL = 0.2

app = typer.Typer(
    help=f"{SERVICE_NAME} v{__version__} — standard, 12-hour and metric time of day",
)


def parse_components(value: str) -> TimeComponents:
    """Parse ``H:MM:SS[.fraction]`` into unvalidated components.

    The fraction is read as a decimal fraction of a second, so ``.5``
    means 500 000 000 ns.

    Raises:
        typer.BadParameter: If *value* does not match the format.
    """
    match = _VALUE_PATTERN.match(value.strip())
    if match is None:
        raise typer.BadParameter(
            f"Invalid time '{value}'. Expected H:MM:SS[.fraction]",
            param_hint="'VALUE'",
        )
    hours, minutes, seconds, fraction = match.groups()
    return TimeComponents(
        int(hours),
        int(minutes),
        int(seconds),
        int((fraction or "0").ljust(9, "0")),
    )


def _echo_time(time: Time, *, rotations: bool) -> None:
    typer.echo(str(time))
    if rotations:
        angles = time.rotations()
        typer.echo(
            f"hours={angles.hours:.2f} minutes={angles.minutes:.2f} "
            f"seconds={angles.seconds:.2f} nanoseconds={angles.nanoseconds:.2f}"
        )


# -- main callback -----------------------------------------------------------


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version_flag: Annotated[
        bool | None,
        typer.Option("--version", is_eager=True, help="Show version and exit."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override log level."),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option("--log-format", help="Override log format."),
    ] = None,
    env_file: Annotated[
        str,
        typer.Option("--env-file", help="Path to .env file."),
    ] = ".env",
) -> None:
    if version_flag:
        typer.echo(f"{SERVICE_NAME} v{__version__}")
        raise typer.Exit()

    if log_level is not None and log_level.upper() not in _VALID_LOG_LEVELS:
        raise typer.BadParameter(
            f"Invalid log level '{log_level}'. Choose from: {', '.join(_VALID_LOG_LEVELS)}",
            param_hint="'--log-level'",
        )

    if log_format is not None and log_format.lower() not in _VALID_LOG_FORMATS:
        raise typer.BadParameter(
            f"Invalid log format '{log_format}'. "
            f"Choose from: {', '.join(_VALID_LOG_FORMATS)}",
            param_hint="'--log-format'",
        )

    try:
        settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    if log_level is not None:
        settings.logging = settings.logging.model_copy(update={"level": log_level.upper()})
    if log_format is not None:
        settings.logging = settings.logging.model_copy(update={"format": log_format.lower()})

    configure_logging(settings.logging, service=SERVICE_NAME, version=__version__)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


# -- commands ----------------------------------------------------------------


@app.command()
def now(
    ctx: typer.Context,
    kind: Annotated[
        TimeKind | None,
        typer.Option("--kind", help="Time base to print in (default from settings)."),
    ] = None,
    rotations: Annotated[
        bool,
        typer.Option("--rotations", help="Also print clock-hand angles."),
    ] = False,
) -> None:
    """Print the current local time."""
    settings: Settings = ctx.obj
    _echo_time(Time.now().to(kind or settings.clock.kind), rotations=rotations)


@app.command()
def convert(
    value: Annotated[str, typer.Argument(help="Time as H:MM:SS[.fraction].")],
    source: Annotated[TimeKind, typer.Option("--from", help="Base VALUE is in.")],
    target: Annotated[TimeKind, typer.Option("--to", help="Base to convert to.")],
    rotations: Annotated[
        bool,
        typer.Option("--rotations", help="Also print clock-hand angles."),
    ] = False,
) -> None:
    """Convert a time of day between bases."""
    components = parse_components(value)
    try:
        time = Time(components, source)
    except TimeRangeError as exc:
        payload = build_error_payload(exc, details={"value": value, "kind": source.value})
        typer.echo(payload.to_json(), err=True)
        raise typer.Exit(EXIT_INPUT_ERROR) from exc
    _echo_time(time.to(target), rotations=rotations)


@app.command()
def watch(
    ctx: typer.Context,
    kind: Annotated[
        TimeKind | None,
        typer.Option("--kind", help="Time base to emit in."),
    ] = None,
    interval: Annotated[
        float | None,
        typer.Option("--interval", help="Seconds between ticks."),
    ] = None,
    max_events: Annotated[
        int | None,
        typer.Option("--max-events", help="Stop after this many ticks."),
    ] = None,
) -> None:
    """Print the time on a fixed cadence until Ctrl+C or --max-events."""
    settings: Settings = ctx.obj
    overrides = {
        key: value
        for key, value in {
            "kind": kind,
            "interval": interval,
            "max_events": max_events,
        }.items()
        if value is not None
    }
    try:
        emitter_settings = EmitterSettings.model_validate(
            {**settings.clock.model_dump(), **overrides},
        )
    except ValidationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    def _print_tick(time: Time, context: Context) -> None:
        typer.echo(f"{context.index}\t{time}")

    clock = Clock(emitter_settings)
    try:
        clock.start(_print_tick)
    except ClockError as exc:
        logger.error("Runtime error: %s", exc)
        raise typer.Exit(EXIT_RUNTIME_ERROR) from exc

    finished = False
    with contextlib.suppress(KeyboardInterrupt):
        while not finished:
            finished = clock.join(timeout=_JOIN_POLL)

    if not finished:
        try:
            clock.stop()
        except ClockError as exc:
            logger.warning("Stop failed: %s", exc)
        clock.join()

    typer.echo(f"ticks: {clock.count()}")


def main() -> None:
    """Console-script entry point."""
    app()
