r"""
apprun configuration tree.

Overview
- ConfigTree: a nested mapping from string keys to scalar values or further
  mappings. It is the single options container shared by the parser, the config
  file loader and the application wrapper.

Operations
- assign("a.b.c", value): dotted-path assignment. Intermediate mappings are
  created on demand. When an intermediate segment already holds a scalar, the
  assignment is dropped and False is returned (the existing value is kept).
- lookup("a.b.c", default): dotted-path read.
- fill(mapping): top-level merge that only sets absent keys (file-based and
  default values). A key holding None counts as absent.
- override(mapping): top-level merge where the given mapping always wins
  (runtime options).
- isolated(): a deep copy handed to the application for one invocation.

Example
    >>> tree = ConfigTree()
    >>> tree.assign("doz.bar", "2")
    True
    >>> tree
    ConfigTree({'doz': ConfigTree({'bar': '2'})})
"""
import copy
import logging
from collections.abc import Mapping, MutableMapping

log = logging.getLogger(__name__)


def _split(path, /):
    if not isinstance(path, str):
        raise TypeError("dotted path must be a string")
    if not path:
        raise ValueError("dotted path must be a non-empty string")
    return path.split(".")


class ConfigTree(dict):
    """
    Nested, insertion-ordered option mapping.

    Nodes created by assign() are ConfigTree instances; mappings merged in from
    config files are kept as the file format produced them.
    """

    def assign(self, path, value, /):
        """
        Set `value` at the dotted `path`.

        Returns True when the value was stored and False when the path runs
        through an existing scalar (in which case nothing changes).
        """
        *parents, last = _split(path)
        node = self
        for segment in parents:
            if segment not in node or node[segment] is None:
                node[segment] = ConfigTree()
            node = node[segment]
            if not isinstance(node, MutableMapping):
                log.debug("dropped %s=%r: %r holds a scalar", path, value, segment)
                return False
        node[last] = value
        return True

    def lookup(self, path, default=None, /):
        """
        Read the value at the dotted `path`, or `default` when any segment is
        missing or runs through a scalar.
        """
        node = self
        for segment in _split(path):
            if not isinstance(node, Mapping) or segment not in node:
                return default
            node = node[segment]
        return node

    def fill(self, other, /):
        """
        Merge `other` into this tree without replacing present keys.

        Returns the list of keys that were actually filled.
        """
        if not isinstance(other, Mapping):
            raise TypeError("fill() argument must be a mapping")
        filled = []
        for key, value in other.items():
            if self.get(key) is None:
                self[key] = value
                filled.append(key)
        return filled

    def override(self, other, /):
        """
        Merge `other` into this tree; keys of `other` always win (top level only).
        """
        if not isinstance(other, Mapping):
            raise TypeError("override() argument must be a mapping")
        for key, value in other.items():
            self[key] = value
        return self

    def isolated(self):
        """
        Return a deep copy; mutations on the copy never reach this tree.
        """
        return copy.deepcopy(self)

    def __repr__(self):
        return f"{type(self).__name__}({dict.__repr__(self)})"


__all__ = (
    "ConfigTree",
)
