r"""
apprun application layer: wrap, configure and run applications.

What this module provides
- App: wraps an application (function, object with run(), or command set)
  with option parsing, config-file loading, logger setup and dispatch.
- Application: base class for sub-command applications. Commands are an
  explicit name → handler mapping, filled at construction time.
- main(app, tokens): run from the command line and return an exit code.
- script(): the shortest form; parse the process arguments and return
  (options, args).

Precedence of option sources (strongest first)
1. options= passed to App.execute() (applied to a per-call copy only);
2. command-line flags and key=value pairs, and options given to App();
3. the config file (fills absent keys only).

Quick start
    from apprun import App, Application, getlogger

    # a function
    def main(options, *args):
        getlogger().info("running with %s", args)
        return len(args)

    App(main, context=__name__).run_with_args()

    # sub-commands
    tool = Application(name="tool", version="1.0")

    @tool.command
    def greet(options, *names):
        print("hello", *names)

    App(tool).run_with_args("greet world")
"""
import logging
import shlex
import sys
from collections.abc import Iterable, Mapping

from rich.console import Console

from .dispatch import COMMAND, Dispatcher, Style
from .faults import AppRunError, LoggerConfigError
from .lifecycle import Lifecycle
from .loader import ConfigLoader
from .logs import configure, level, using
from .parsing import ArgParser, Terminate, DEFAULT_FLAGS
from .tree import ConfigTree
from .usage import documentation, render_help, render_version, resolve_name, resolve_version
from .utils import Unset, rename


def _tokens(prompt):
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("tokens must be a string or an iterable of strings")
        return tokens
    raise TypeError("tokens must be a string or an iterable of strings")


class Application:
    """
    Base for applications made of named commands.

    Parameters
    - commands: mapping of command name → handler(options, *args).
    - name, version, usage: optional metadata used by help and version output.

    Subclasses may override init(options), called once before the first
    command runs, and register their own methods in __init__:

        class Tool(Application):
            def __init__(self):
                super().__init__(name="tool")
                self.register("sync", self.sync)

            def sync(self, options, *args):
                ...
    """

    def __init__(self, commands=None, /, *, name=None, version=None, usage=None):
        self.commands = {}
        self.name = name
        self.version = version
        self.usage = usage
        for command, handler in (commands or {}).items():
            self.register(command, handler)

    def register(self, name, handler, /):
        if not isinstance(name, str) or not COMMAND.fullmatch(name):
            raise ValueError(f"command names must be lowercase letters only, got {name!r}")
        if not callable(handler):
            raise TypeError(f"handler of command {name!r} must be callable")
        self.commands[name] = handler
        return handler

    def command(self, source=Unset, /, *, name=Unset):
        """
        Decorator registering a handler, named after the function by default.

            @app.command
            def sync(options, *args): ...

            @app.command(name="ls")
            def listing(options, *args): ...
        """
        @rename("command")
        def wrapper(handler, /):
            return self.register(handler.__name__ if name is Unset else name, handler)

        return wrapper(source) if source is not Unset else wrapper

    def init(self, options):
        pass

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, commands={sorted(self.commands)!r})"


class App:
    """
    Wrapper running one application.

    Parameters
    - app: function, object with run(), or object with a `commands` mapping.
    - context: module (or module name) of the embedding code; used as version
      fallback for plain functions.
    - flags: extra parsing.Flag specs recognized on the command line.
    - loader: ConfigLoader used for config files.
    - console: rich Console for help/version output.
    - colorful: style help/version output.
    - **options: initial options.
    """

    def __init__(self, app, /, context=None, *, flags=(), loader=None, console=None, colorful=True, **options):
        self._dispatcher = Dispatcher(app)
        self._context = context
        self._parser = ArgParser(DEFAULT_FLAGS, *flags)
        self._loader = loader if loader is not None else ConfigLoader()
        self._console = console
        self._colorful = colorful
        self._name = None
        self._version = Unset
        self._logger = None
        self.options = ConfigTree(options)
        self.lifecycle = Lifecycle(self)

    @property
    def app(self):
        return self._dispatcher.app

    @property
    def style(self):
        return self._dispatcher.style

    @property
    def failure(self):
        """
        ApplicationRuntimeError of the last execution, or None.
        """
        return self._dispatcher.failure

    @property
    def name(self):
        if self._name is None:
            self._name = resolve_name(self.app)
        return self._name

    @property
    def version(self):
        if self._version is Unset:
            self._version = resolve_version(self.app, self._context)
        return self._version

    def logger(self, config=Unset, /):
        """
        Get the logger, or configure it.

        - logger(): current logger (None before enable_logger()).
        - logger(logging.Logger): use this logger as-is.
        - logger(None): default appenders (console at WARN threshold).
        - logger([{...}, ...]): appender descriptors; [] disables output.
        """
        if config is Unset:
            return self._logger
        if isinstance(config, logging.Logger):
            self._logger = config
            return config
        if config is not None and (isinstance(config, (str, bytes, Mapping)) or not isinstance(config, Iterable)):
            raise LoggerConfigError("logger configuration must be a list of appenders")
        self._logger = configure(f"apprun.app.{self.name}", None if config is None else list(config))
        return self._logger

    def enable_logger(self):
        """
        Configure the logger from options `logger` and `loglevel` (default WARN).
        """
        if self.options.get("logger") is None and self._logger is not None:
            logger = self._logger
        else:
            logger = self.logger(self.options.get("logger"))
        logger.setLevel(level(self.options.get("loglevel") or "WARN"))
        return logger

    def parse_options(self, tokens=Unset, /):
        """
        Parse command-line tokens into this wrapper's options.

        Returns the remaining positional arguments, or a Terminate after help
        or version output was printed.
        """
        parsed = self._parser.parse(_tokens(tokens), into=self.options)
        if isinstance(parsed.outcome, Terminate):
            self._terminate(parsed.outcome)
            return parsed.outcome
        return parsed.args

    def load_config(self, source=""):
        """
        Fill absent options from a config file without initializing the
        application. An empty source auto-discovers "<name>.<ext>".
        """
        return self._loader.load(self.options, source, name=self.name)

    def execute(self, *args, options=None, command=None):
        """
        Run the application once.

        The application receives a copy of the merged options (without
        `config`) updated with `options`; its changes never reach this
        wrapper. For command sets, `command` defaults to the `command` option.
        Returns the application's result, or None when it failed.
        """
        with self.lifecycle.executing():
            effective = self.options.isolated()
            effective.pop("config", None)
            if options is not None:
                effective.override(options)
            if self.style is Style.COMMAND_SET and command is None:
                command = effective.get("command")

            logger = self._logger or self.enable_logger()
            with using(logger):
                return self._dispatcher.dispatch(effective, list(args), command, logger=logger)

    def run_with_args(self, tokens=Unset, /):
        """
        Parse `tokens` (default: sys.argv[1:]) and execute.

        For command sets the first positional argument names the command, and
        the commands "help" and "version" behave like the flags.
        """
        args = self.parse_options(tokens)
        if isinstance(args, Terminate):
            return args

        command = None
        if self.style is Style.COMMAND_SET and args:
            command, *args = args
            if command in ("help", "version"):
                outcome = Terminate(0, command)
                self._terminate(outcome)
                return outcome

        return self.execute(*args, command=command)

    def _terminate(self, outcome):
        console = self._console or Console()
        if outcome.reason == "help":
            render_help(
                self.name,
                documentation(self.app),
                flags=self._parser.flags,
                commands=self._dispatcher.commands(),
                console=console,
                colorful=self._colorful,
            )
        else:
            render_version(self.name, self.version, console=console, colorful=self._colorful)

    def __repr__(self):
        return f"App({self.name!r}, style={self.style.value!r}, prepared={self.lifecycle.prepared!r})"


def main(app, tokens=Unset, /, context=None, **options):
    """
    Run `app` from the command line and return a process exit code.

    - Terminate (help/version): its code.
    - harness error (AppRunError): rendered on stderr, 1.
    - otherwise 0, including when the application itself failed (it was logged).
    """
    try:
        wrapper = app if isinstance(app, App) else App(app, context, **options)
        result = wrapper.run_with_args(tokens)
    except AppRunError as error:
        Console(stderr=True).print(error.__replace__(prog=resolve_name(app)))
        return 1
    if isinstance(result, Terminate):
        return result.code
    return 0


def script(context=None, tokens=Unset, /, **options):
    """
    Shortest form of a script: parse the process arguments, load config and
    enable logging, then hand back (options, args).

        options, args = apprun.script(__name__)

    Help and version requests print their output and exit the process.
    """
    captured = {}

    @rename("script")
    def collect(options, *args):
        captured["options"] = options
        captured["args"] = list(args)

    wrapper = App(collect, context, **options)
    args = wrapper.parse_options(tokens)
    if isinstance(args, Terminate):
        sys.exit(args.code)
    wrapper.execute(*args)
    return captured["options"], captured["args"]


__all__ = (
    "App",
    "Application",
    "main",
    "script",
)
