"""
apprun config file loading.

Overview
- Readers turn one file into a mapping. They are selected by file extension:
    yaml, yml   PyYAML safe_load
    json        json
    toml        tomllib
    ini         configparser (sections → nested mappings, DEFAULT → top level
                and inherited by every section)
    conf        dotted key=value lines, "#" and ";" start a comment
- ConfigLoader.load(tree, source, name)
  • source non-empty: load exactly that file; every failure is a ConfigLoadError.
  • source empty: look for "<name>.<ext>" in the search directories, trying the
    extensions in registry order; the first hit wins and no hit is a no-op.
  • the loaded mapping fills the tree without replacing present keys.

Custom formats
    loader = ConfigLoader()
    loader.register("properties", read_conf)
"""
import configparser
import json
import logging
import os.path
import tomllib
from collections.abc import Mapping

import yaml

from .faults import ConfigLoadError
from .tree import ConfigTree
from .utils import coalesce, Unset

log = logging.getLogger(__name__)


def read_yaml(path, /):
    with open(path, encoding="utf-8") as stream:
        return yaml.safe_load(stream)


def read_json(path, /):
    with open(path, encoding="utf-8") as stream:
        return json.load(stream)


def read_toml(path, /):
    with open(path, "rb") as stream:
        return tomllib.load(stream)


def read_ini(path, /):
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    with open(path, encoding="utf-8") as stream:
        parser.read_file(stream)
    data = dict(parser.defaults())
    for section in parser.sections():
        data[section] = dict(parser.items(section))
    return data


def read_conf(path, /):
    tree = ConfigTree()
    with open(path, encoding="utf-8") as stream:
        for number, line in enumerate(stream, 1):
            line = line.strip()
            if not line or line.startswith(("#", ";")):
                continue
            key, sep, value = line.partition("=")
            if not sep or not key.strip():
                raise ValueError(f"line {number}: expected key=value, got {line!r}")
            tree.assign(key.strip(), value.strip())
    return tree


DEFAULT_FORMATS = {
    "yaml": read_yaml,
    "yml": read_yaml,
    "json": read_json,
    "toml": read_toml,
    "ini": read_ini,
    "conf": read_conf,
}


class ConfigLoader:
    """
    Resolve and read config files into a ConfigTree.

    Parameters
    - formats: mapping of extension (without dot) to reader(path) -> mapping.
    - directories: search directories for auto-discovery (default: the current
      working directory).
    """

    def __init__(self, formats=Unset, directories=(".",)):
        self._formats = dict(coalesce(formats, DEFAULT_FORMATS))
        self._directories = tuple(directories)

    @property
    def extensions(self):
        return tuple(self._formats)

    def register(self, extension, reader, /):
        if not callable(reader):
            raise TypeError("register() reader must be callable")
        self._formats[extension.lstrip(".").lower()] = reader

    def _read(self, path, source):
        extension = os.path.splitext(path)[1].lstrip(".").lower()
        try:
            reader = self._formats[extension]
        except KeyError:
            raise ConfigLoadError(
                f"failed to load config file {source}: unsupported format {extension or '(none)'!r}",
                source=source,
                cause=None,
            ) from None
        try:
            data = reader(path)
        except Exception as error:
            raise ConfigLoadError(
                f"failed to load config file {source}: {error}",
                source=source,
                cause=error,
            ) from error
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ConfigLoadError(
                f"failed to load config file {source}: top level must be a mapping, got {type(data).__name__}",
                source=source,
                cause=None,
            )
        return data

    def discover(self, name, /):
        """
        Return the first "<name>.<ext>" found in the search directories, or None.
        """
        for directory in self._directories:
            for extension in self._formats:
                path = os.path.join(directory, f"{name}.{extension}")
                if os.path.isfile(path):
                    return path
        return None

    def load(self, tree, source, /, name=None):
        """
        Fill `tree` from the config source; return the loaded path or None.
        """
        if source:
            if not os.path.isfile(source):
                raise ConfigLoadError(
                    f"failed to load config file {source}: no such file",
                    source=source,
                    cause=FileNotFoundError(source),
                )
            path = source
        else:
            if not name:
                return None
            path = self.discover(name)
            if path is None:
                log.debug("no config file found for %s.*", name)
                return None

        data = self._read(path, source or path)
        filled = ConfigTree.fill(tree, data)
        log.debug("loaded config %s (%d new keys)", path, len(filled))
        return path


__all__ = (
    "ConfigLoader",
    "DEFAULT_FORMATS",
    "read_yaml",
    "read_json",
    "read_toml",
    "read_ini",
    "read_conf",
)
