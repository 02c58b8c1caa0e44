"""
apprun dispatching: how a wrapped application is invoked.

Styles (probed once, when the application is wrapped)
- CommandSet:  object exposing a `commands` mapping of name → handler.
               handler(options, *args)
- SingleEntry: object exposing a callable `run`.
               app.run(options, *args)
- Callable:    plain function, closure or other callable.
               app(options, *args)

Probing order is CommandSet, SingleEntry, Callable; anything else is rejected
with WrapperError.

Error capture
- Harness misuse (no command, malformed or unmapped command) raises.
- Any Exception raised by the application is logged at error severity,
  stored as `failure` (an ApplicationRuntimeError) and the call returns None.
"""
import logging
import re
from collections.abc import Mapping
from enum import Enum

from .faults import ApplicationRuntimeError, MissingCommandError, UnknownCommandError, WrapperError
from .logs import TRACE

COMMAND = re.compile(r"[a-z]+")

log = logging.getLogger(__name__)


class Style(Enum):
    COMMAND_SET = "command-set"
    SINGLE_ENTRY = "single-entry"
    CALLABLE = "callable"


def probe(app, /):
    """
    Return the Style of `app`, or raise WrapperError.
    """
    if isinstance(getattr(app, "commands", None), Mapping) and not isinstance(app, type):
        return Style.COMMAND_SET
    if callable(getattr(app, "run", None)) and not isinstance(app, type):
        return Style.SINGLE_ENTRY
    if callable(app):
        return Style.CALLABLE
    raise WrapperError(f"cannot wrap {type(app).__name__!s}: app must be callable or an object with run() or commands")


class Dispatcher:
    """
    Invoke one wrapped application according to its Style.
    """

    def __init__(self, app, /):
        self._style = probe(app)
        self._app = app
        self.failure = None

    @property
    def style(self):
        return self._style

    @property
    def app(self):
        return self._app

    def commands(self):
        """
        Names of the available commands (empty unless CommandSet style).
        """
        if self._style is not Style.COMMAND_SET:
            return ()
        return tuple(sorted(self._app.commands))

    def resolve(self, command, /):
        """
        Return the handler registered for `command` (CommandSet style only).
        """
        if not command:
            raise MissingCommandError("missing command")
        if not isinstance(command, str) or not COMMAND.fullmatch(command):
            raise UnknownCommandError(f"unknown command: {command}", command=command)
        try:
            return self._app.commands[command]
        except KeyError:
            raise UnknownCommandError(f"unknown command: {command}", command=command) from None

    def target(self, command=None, /):
        """
        Return the callable a dispatch would invoke, without invoking it.
        """
        match self._style:
            case Style.COMMAND_SET:
                return self.resolve(command)
            case Style.SINGLE_ENTRY:
                return self._app.run
            case Style.CALLABLE:
                return self._app

    def dispatch(self, options, args, /, command=None, *, logger=None):
        """
        Invoke the application; failures of the application yield None.
        """
        function = self.target(command)
        logger = logger or log
        logger.log(TRACE, "execute %s with args: %s", command or self._style.value, ",".join(map(str, args)))
        self.failure = None
        try:
            return function(options, *args)
        except Exception as error:
            logger.error("%s", error)
            self.failure = ApplicationRuntimeError(str(error), cause=error, command=command)
            return None


__all__ = (
    "Style",
    "probe",
    "Dispatcher",
)
