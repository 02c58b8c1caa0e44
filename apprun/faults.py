"""
apprun faults (harness errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every harness error, grouped by
  domain so log lines stay searchable.
- AppRunError: base type carrying a message plus context options (title, hint,
  source, command, ...). It knows how to render itself with rich.
- Concrete errors for each failure kind of the harness.

Policy
- Misuse of the harness (bad config source, missing/unknown command, a wrapped
  value without any usable capability) raises immediately and propagates.
- Failures raised by the wrapped application are recovered by the dispatcher:
  logged at error severity and kept as ApplicationRuntimeError, never raised.

Rendering
- __rich__ builds "[ prog — code | title ]" followed by the message and a hint
  line. Palette entries can be overridden with a __styles__ mapping in
  __main__; pass colorful=False to drop styling.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - configuration (21xxx): CONFIG_LOAD
    - command line (22xxx): MISSING_VALUE
    - routing (23xxx): MISSING_COMMAND, UNKNOWN_COMMAND
    - wiring (24xxx): BAD_WRAPPER, BAD_LOGGER
    - application (25xxx): APPLICATION_RUNTIME
    """
    # --- configuration ---
    CONFIG_LOAD                 = 21101

    # --- command line ---
    MISSING_VALUE               = 22101

    # --- routing ---
    MISSING_COMMAND             = 23101
    UNKNOWN_COMMAND             = 23102

    # --- wiring ---
    BAD_WRAPPER                 = 24101
    BAD_LOGGER                  = 24102

    # --- application (recovered) ---
    APPLICATION_RUNTIME         = 25101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        relabel numeric ids; otherwise the number is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class AppRunError(Exception):
    """
    base class of all harness errors.

    class attributes `code`, `title` and `hint` provide defaults; any of them can
    be overridden per instance through keyword options.
    """
    code = FaultCode.BAD_WRAPPER
    title = "harness error"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message if message is not Unset else self.title
        self.options = MappingProxyType({
            "code": type(self).code,
            "title": type(self).title,
            "hint": type(self).hint,
        } | options)
        super().__init__(self.message)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(self.options.get("prog", getattr(main, "__prog__", "apprun")), "prog-name"),
            " — ",
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]",
        )
        message = text(self.message, "error-message")
        renders = [message]
        if self.options["hint"]:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.options["hint"], "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigLoadError(AppRunError):
    """
    a config source was given (or discovered) but could not be read or parsed.

    options: source (attempted path or stem), cause (underlying exception).
    """
    code = FaultCode.CONFIG_LOAD
    title = "config not loaded"
    hint = "check the path given with -c/--config and the file syntax"


class MissingValueError(AppRunError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"
    hint = "pass the value after the flag, e.g. '--config app.yaml'"


class MissingCommandError(AppRunError):
    code = FaultCode.MISSING_COMMAND
    title = "missing command"
    hint = "name a command as first argument, or set command=<name>"


class UnknownCommandError(AppRunError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"
    hint = "command names are lowercase letters only; run with --help to list them"


class WrapperError(AppRunError, TypeError):
    code = FaultCode.BAD_WRAPPER
    title = "bad application"
    hint = "wrap a callable, an object with run(), or an object with a commands mapping"


class LoggerConfigError(AppRunError, TypeError):
    code = FaultCode.BAD_LOGGER
    title = "bad logger configuration"
    hint = "logger must be a list of appender mappings with a known kind"


class ApplicationRuntimeError(AppRunError):
    """
    failure raised by the wrapped application during one invocation.

    never raised by the harness: the dispatcher logs it and stores it as the
    last failure. options: cause (the original exception), command (if any).
    """
    code = FaultCode.APPLICATION_RUNTIME
    title = "application failed"


__all__ = (
    "FaultCode",
    "AppRunError",
    "ConfigLoadError",
    "MissingValueError",
    "MissingCommandError",
    "UnknownCommandError",
    "WrapperError",
    "LoggerConfigError",
    "ApplicationRuntimeError",
)
