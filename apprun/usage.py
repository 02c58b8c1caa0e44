"""
apprun usage and version output.

- resolve_name(app): the application's own `name`, else basename(sys.argv[0]).
- resolve_version(app, context): version lookup, first hit wins:
    1. the application's `version` (attribute or zero-argument method) or
       `__version__` attribute;
    2. objects: `__version__` of the module defining the object's class, then
       of its top-level package;
       callables: `__version__` of the embedding context module, then the
       installed distribution version of the context's top-level package;
    3. None (shown as "(unknown version)").
- render_help(...): usage line, documentation and command table.
- render_version(...): "<name> <version>".

Palette entries can be overridden with a __styles__ mapping in __main__;
colorful=False drops styling, fancy=True wraps output in a panel.
"""
import importlib
import importlib.metadata
import inspect
import sys
import types
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import basename

UNKNOWN = "(unknown version)"


def _attribute(object, name):
    value = getattr(object, name, None)
    if callable(value) and not isinstance(value, type):
        try:
            value = value()
        except TypeError:
            return None
    return value if isinstance(value, str) and value else None


def _module(context):
    if context is None:
        return None
    if isinstance(context, types.ModuleType):
        return context
    if isinstance(context, str):
        try:
            return sys.modules.get(context) or importlib.import_module(context)
        except ImportError:
            return None
    raise TypeError("context must be a module or a module name")


def _package_version(module):
    for candidate in dict.fromkeys((module, _module(module.__name__.partition(".")[0]))):
        if candidate is not None and isinstance(getattr(candidate, "__version__", None), str):
            return candidate.__version__
    return None


def _internal(owner):
    return str(owner.__module__).partition(".")[0] == "apprun"


def _plain(app):
    return isinstance(app, (types.FunctionType, types.MethodType, types.BuiltinFunctionType))


def resolve_name(app, /):
    """
    Return the application name.
    """
    if not _plain(app) and (name := _attribute(app, "name")):
        return name
    return basename(sys.argv[0] if sys.argv else "")


def resolve_version(app, /, context=None):
    """
    Return the application version string, or None when it cannot be found.
    """
    if not _plain(app):
        for attribute in ("version", "__version__"):
            if version := _attribute(app, attribute):
                return version
        module = None if _internal(type(app)) else _module(type(app).__module__)
        if module is not None and (version := _package_version(module)):
            return version

    module = _module(context)
    if module is None:
        return None
    if version := _package_version(module):
        return version
    try:
        return importlib.metadata.version(module.__name__.partition(".")[0])
    except importlib.metadata.PackageNotFoundError:
        return None


def _styles():
    return defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "program-version": "bold #00E6FF",
        "usage-section": "bold #36C5F0",
        "description-section": "#A3A3A3",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",
        "children": "bold #36C5F0",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _texter(colorful):
    styles = _styles()

    def text(fragment, style=""):
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    return text


def documentation(app, /):
    """
    Return the help text of `app`.

    Lookup: the object's `usage` string, the docstring of the function or of
    the application's own class, then the docstring of __main__.
    """
    doc = None if _plain(app) else getattr(app, "usage", None)
    if not isinstance(doc, str) or not doc:
        owner = app if _plain(app) else type(app)
        doc = None if _internal(owner) else owner.__doc__
    return inspect.cleandoc(doc or getattr(__import__("__main__"), "__doc__", None) or "")


def render_help(name, /, doc="", *, flags=(), commands=(), console=None, colorful=True, fancy=False):
    """
    Print the usage of `name` to `console` (stdout by default).

    - flags: Flag specs to list (names and whether a value is taken).
    - commands: command names, for CommandSet applications.
    """
    console = console or Console()
    text = _texter(colorful)

    usage = Text.assemble(
        text("usage", "usage-label"), ": ",
        text(name, "program-name"), " ",
        text("[OPTIONS] " + ("<command> " if commands else "") + "[key=value ...] [args ...]", "usage-section"),
    )
    renders = [usage]

    if doc:
        renders.append(Text(""))
        renders.append(text(doc, "description-section"))

    if flags:
        table = Table.grid(padding=(0, 2))
        for flag in flags:
            names = Text(", ").join(text(alias, "option-name") for alias in flag.names)
            if flag.value:
                names.append(" ").append(text("<value>", "metavar"))
            table.add_row(names, text(flag.key, "argument-description"))
        renders.extend((Text(""), text("options:", "group-label"), table))

    if commands:
        renders.extend((Text(""), text("commands:", "group-label")))
        renders.extend(Text.assemble("  ", text(command, "children")) for command in commands)

    renderable = Group(*renders)
    if fancy:
        renderable = Panel(renderable, title=text(f"[ {name.upper()} HELP ]", "panel-title"), title_align="left")
    console.print(renderable)


def render_version(name, version, /, *, console=None, colorful=True):
    """
    Print "<name> <version>" to `console` (stdout by default).
    """
    console = console or Console()
    text = _texter(colorful)
    console.print(Text.assemble(text(name, "program-name"), " ", text(version or UNKNOWN, "program-version")))


__all__ = (
    "UNKNOWN",
    "resolve_name",
    "resolve_version",
    "documentation",
    "render_help",
    "render_version",
)
