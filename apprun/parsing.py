r"""
apprun command-line parsing.

Overview
- Flag: named switch with one or more aliases (e.g. -c/--config). A flag either
  takes no value or exactly one value (spaced "-c FILE" or inline
  "--config=FILE"). Its action receives (options, value).
- ArgParser: splits a token stream into
  • recognized flags (applied to the options tree as they are met),
  • dotted key=value options (doz.bar=2 → {"doz": {"bar": "2"}}),
  • positional arguments, in their original relative order.
- Parsed: (options, args, flags, outcome) where outcome is Continue() or
  Terminate(code, reason) for the help/version short-circuit. Parsing never
  exits the process; the caller decides.

Rules
- Flag names are case-sensitive and matched exactly; there is no bundling.
- Unknown flags pass through untouched into the positional stream so the
  wrapped application can interpret them.
- "--" ends flag recognition; the following tokens are positional verbatim.
- Tokens starting with "-" are never read as key=value pairs.
- A key=value token needs a non-empty key without "=" and a non-empty value;
  the value is everything after the first "=". "key=" stays positional.
- When no config source was given, option `config` is set to "" (meaning:
  auto-discover a config file named after the application).

Example
    >>> parsed = ArgParser().parse(["foo", "bar=1", "-q", "doz"])
    >>> parsed.options
    ConfigTree({'loglevel': 'ERROR', 'bar': '1', 'config': ''})
    >>> parsed.args
    ['foo', 'doz']
"""
import re
from collections import deque
from typing import NamedTuple

from .faults import MissingValueError
from .tree import ConfigTree
from .utils import Unset, rename

PAIR = re.compile(r"([^=]+)=(.+)", re.DOTALL)


class Continue(NamedTuple):
    """proceed with execution."""


class Terminate(NamedTuple):
    """stop before execution (help or version was requested)."""
    code: int
    reason: str


class Parsed(NamedTuple):
    options: ConfigTree
    args: list
    flags: dict
    outcome: Continue | Terminate


class Flag:
    """
    A recognized command-line switch.

    Parameters
    - *names: aliases, each starting with "-" (e.g. "-c", "--config").
    - key: identifier reported in Parsed.flags (defaults to the longest alias
      without dashes).
    - value: True when the flag consumes one value.
    - action: callable(options, value) applied when the flag is met; value is
      True for flags without a value.
    """

    __slots__ = ("names", "key", "value", "action")

    def __init__(self, *names, key=Unset, value=False, action=Unset):
        if not names:
            raise ValueError("Flag() requires at least one name")
        for name in names:
            if not isinstance(name, str) or not name.startswith("-") or len(name) < 2 or "=" in name:
                raise ValueError(f"invalid flag name {name!r}")
        self.names = tuple(names)
        self.key = key if key is not Unset else max(names, key=len).lstrip("-")
        self.value = bool(value)
        self.action = action if action is not Unset else None

    def __repr__(self):
        return f"flag({' | '.join(self.names)}{' <value>' if self.value else ''})"


def _setter(key, constant=Unset):
    @rename(f"set_{key}")
    def action(options, value):
        options[key] = value if constant is Unset else constant
    return action


HELP = Flag("-h", "-?", "--help", key="help")
VERSION = Flag("-v", "--version", key="version")
CONFIG = Flag("-c", "--config", key="config", value=True, action=_setter("config"))
QUIET = Flag("-q", "--quiet", key="quiet", action=_setter("loglevel", "ERROR"))

DEFAULT_FLAGS = (HELP, VERSION, CONFIG, QUIET)


class ArgParser:
    """
    Permissive parser for the built-in flags plus caller-supplied ones.

    Later flags sharing an alias with an earlier one replace it, so an
    application can rebind e.g. "-v" to its own verbose switch.
    """

    def __init__(self, flags=DEFAULT_FLAGS, /, *extra):
        self._flags = {}
        for flag in (*flags, *extra):
            if not isinstance(flag, Flag):
                raise TypeError(f"ArgParser() expects Flag instances, got {flag!r}")
            for name in flag.names:
                self._flags[name] = flag

    @property
    def flags(self):
        return tuple(dict.fromkeys(self._flags.values()))

    def _match(self, token):
        if token in self._flags:
            return self._flags[token], Unset
        if token.startswith("--") and "=" in token:
            name, _, inline = token.partition("=")
            flag = self._flags.get(name)
            if flag is not None and flag.value:
                return flag, inline
        return None, Unset

    def parse(self, tokens, /, into=None):
        """
        Parse `tokens` into `into` (a fresh ConfigTree by default).
        """
        options = into if into is not None else ConfigTree()
        tokens = deque(tokens)
        seen = {}
        rest = []

        while tokens:
            token = tokens.popleft()
            if not isinstance(token, str):
                raise TypeError(f"tokens must be strings, got {token!r}")
            if token == "--":
                rest.append(token)
                rest.extend(tokens)
                break
            flag, inline = self._match(token)
            if flag is None:
                rest.append(token)
                continue
            if flag.value:
                if inline is Unset:
                    if not tokens:
                        raise MissingValueError(f"option {token} requires a value", flag=token)
                    inline = tokens.popleft()
                value = inline
            else:
                value = True
            seen[flag.key] = value
            if flag.action is not None:
                flag.action(options, value)

        args = []
        rest = deque(rest)
        while rest:
            token = rest.popleft()
            if token == "--":
                args.extend(rest)
                break
            if not token.startswith("-") and (match := PAIR.fullmatch(token)):
                options.assign(match.group(1), match.group(2))
            else:
                args.append(token)

        if "config" not in options:
            options["config"] = ""

        if seen.get("help"):
            outcome = Terminate(0, "help")
        elif seen.get("version"):
            outcome = Terminate(0, "version")
        else:
            outcome = Continue()

        return Parsed(options, args, seen, outcome)


__all__ = (
    "Flag",
    "ArgParser",
    "Parsed",
    "Continue",
    "Terminate",
    "DEFAULT_FLAGS",
    "HELP",
    "VERSION",
    "CONFIG",
    "QUIET",
)
