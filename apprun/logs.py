"""
apprun logging: appender descriptors, levels and the active-logger context.

Overview
- configure(name, appenders): build a stdlib logger from a sequence of appender
  descriptors. Each descriptor is a mapping:
    kind         console | stream | file | null   (default: console)
    destination  file path for "file"; "stdout"/"stderr" for "stream"
    threshold    minimal level handled by this appender (optional)
    format       logging format template (optional)
  None selects the default: one console appender at WARN threshold. An empty
  sequence disables all output.
- level(name): translate TRACE/DEBUG/INFO/WARN/ERROR/FATAL (any case, plus the
  stdlib spellings) into a numeric level.
- using(logger): context manager making `logger` the active logger.
- getlogger(): the active logger for application code; outside of a wrapped
  invocation it is the package logger "apprun".

Console appenders render through rich.logging.RichHandler on stderr.
"""
import contextlib
import contextvars
import logging
import os
import sys
from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.logging import RichHandler

from .faults import LoggerConfigError

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
}

FORMAT = "%(asctime)s %(levelname).1s %(name)s: %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M"

DEFAULT_APPENDERS = ({"kind": "console", "threshold": "WARN"},)

_package = logging.getLogger("apprun")
_package.setLevel(LEVELS.get(os.environ.get("APPRUN_LOGLEVEL", "WARN").strip().upper(), logging.WARNING))

_active = contextvars.ContextVar("apprun.logger", default=None)


def level(name, /):
    """
    Resolve a level name (or a number) to a numeric logging level.
    """
    if isinstance(name, int) and not isinstance(name, bool):
        return name
    if not isinstance(name, str):
        raise LoggerConfigError(f"log level must be a name, got {name!r}")
    try:
        return LEVELS[name.strip().upper()]
    except KeyError:
        raise LoggerConfigError(f"unknown log level {name!r}", hint="use one of " + ", ".join(LEVELS)) from None


def _handler(descriptor):
    if not isinstance(descriptor, Mapping):
        raise LoggerConfigError(f"appender must be a mapping, got {descriptor!r}")

    kind = str(descriptor.get("kind", "console")).lower()
    destination = descriptor.get("destination")
    template = descriptor.get("format")

    match kind:
        case "console":
            handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
            handler.setFormatter(logging.Formatter(template or "%(message)s", DATEFMT))
        case "stream":
            stream = sys.stdout if destination == "stdout" else sys.stderr
            handler = logging.StreamHandler(stream)
            handler.setFormatter(logging.Formatter(template or FORMAT, DATEFMT))
        case "file":
            if not destination:
                raise LoggerConfigError("file appender requires a destination")
            handler = logging.FileHandler(destination, encoding="utf-8")
            handler.setFormatter(logging.Formatter(template or FORMAT, DATEFMT))
        case "null":
            handler = logging.NullHandler()
        case _:
            raise LoggerConfigError(f"unknown appender kind {kind!r}")

    if descriptor.get("threshold") is not None:
        handler.setLevel(level(descriptor["threshold"]))
    return handler


def configure(name, appenders=None, /):
    """
    Build (or rebuild) the logger `name` from appender descriptors.

    Handlers installed by a previous configure() call are closed and replaced,
    so reconfiguring never duplicates output.
    """
    if appenders is None:
        appenders = DEFAULT_APPENDERS
    elif isinstance(appenders, (str, bytes)) or not isinstance(appenders, Sequence):
        raise LoggerConfigError("logger configuration must be a list of appenders")

    handlers = [_handler(descriptor) for descriptor in appenders]

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    if not handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.log(TRACE, "new logger initialized")
    return logger


@contextlib.contextmanager
def using(logger, /):
    """
    Make `logger` the active logger for the duration of the block.
    """
    token = _active.set(logger)
    try:
        yield logger
    finally:
        _active.reset(token)


def getlogger():
    """
    Return the active logger (the wrapped application's logger while it runs).
    """
    return _active.get() or _package


__all__ = (
    "TRACE",
    "LEVELS",
    "level",
    "configure",
    "using",
    "getlogger",
)
