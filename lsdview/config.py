"""Reading the YAML configuration file and locating it on disk."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from lsdview.color import ThemeOption

CONF_DIR = "lsd"
CONF_FILE_NAME = "config.yaml"

WHEN_VALUES = ("always", "auto", "never")
ICON_THEMES = ("fancy", "unicode")
DISPLAY_VALUES = ("all", "almost-all", "directory-only")
LAYOUT_VALUES = ("grid", "tree", "oneline")
SIZE_VALUES = ("default", "short", "bytes")
PERMISSION_VALUES = ("rwx", "octal")
SORT_COLUMNS = ("extension", "name", "time", "size", "version")
DIR_GROUPINGS = ("first", "last", "none")


class ConfigError(ValueError):
    """The configuration text is not valid YAML or holds a bad value."""


def _print_error(message: str) -> None:
    print(f"lsd: {message}", file=sys.stderr)


def _bool(value: Any, key: str) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ConfigError(f"{key}: invalid type: {value!r}, expected a boolean")
    return value


def _str(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key}: invalid type: {value!r}, expected a string")
    return value


def _choice(value: Any, key: str, choices: tuple[str, ...]) -> Optional[str]:
    text = _str(value, key)
    if text is None:
        return None
    if text not in choices:
        raise ConfigError(
            f"{key}: unknown variant `{text}`, expected one of {', '.join(choices)}"
        )
    return text


def _str_list(value: Any, key: str) -> Optional[list[str]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ConfigError(f"{key}: invalid type: {value!r}, expected a sequence")
    return [_str(item, key) for item in value]  # type: ignore[misc]


def _depth(value: Any, key: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key}: invalid value: {value!r}, expected a non-negative integer")
    return value


def _mapping(value: Any, key: str) -> Optional[dict]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"{key}: invalid type: {value!r}, expected a mapping")
    return value


@dataclass
class ColorConfig:
    when: Optional[str] = None
    theme: Optional[ThemeOption] = None

    @classmethod
    def _load(cls, value: Any) -> Optional["ColorConfig"]:
        data = _mapping(value, "color")
        if data is None:
            return None
        theme = _str(data.get("theme"), "color.theme")
        return cls(
            when=_choice(data.get("when"), "color.when", WHEN_VALUES),
            theme=ThemeOption.parse(theme) if theme is not None else None,
        )


@dataclass
class IconsConfig:
    when: Optional[str] = None
    theme: Optional[str] = None
    separator: Optional[str] = None

    @classmethod
    def _load(cls, value: Any) -> Optional["IconsConfig"]:
        data = _mapping(value, "icons")
        if data is None:
            return None
        return cls(
            when=_choice(data.get("when"), "icons.when", WHEN_VALUES),
            theme=_choice(data.get("theme"), "icons.theme", ICON_THEMES),
            separator=_str(data.get("separator"), "icons.separator"),
        )


@dataclass
class RecursionConfig:
    enabled: Optional[bool] = None
    depth: Optional[int] = None

    @classmethod
    def _load(cls, value: Any) -> Optional["RecursionConfig"]:
        data = _mapping(value, "recursion")
        if data is None:
            return None
        return cls(
            enabled=_bool(data.get("enabled"), "recursion.enabled"),
            depth=_depth(data.get("depth"), "recursion.depth"),
        )


@dataclass
class SortingConfig:
    column: Optional[str] = None
    reverse: Optional[bool] = None
    dir_grouping: Optional[str] = None

    @classmethod
    def _load(cls, value: Any) -> Optional["SortingConfig"]:
        data = _mapping(value, "sorting")
        if data is None:
            return None
        return cls(
            column=_choice(data.get("column"), "sorting.column", SORT_COLUMNS),
            reverse=_bool(data.get("reverse"), "sorting.reverse"),
            dir_grouping=_choice(
                data.get("dir-grouping"), "sorting.dir-grouping", DIR_GROUPINGS
            ),
        )


_LOADERS = {
    "classic": _bool,
    "blocks": _str_list,
    "color": lambda v, k: ColorConfig._load(v),
    "date": _str,
    "dereference": _bool,
    "display": lambda v, k: _choice(v, k, DISPLAY_VALUES),
    "icons": lambda v, k: IconsConfig._load(v),
    "ignore_globs": _str_list,
    "indicators": _bool,
    "layout": lambda v, k: _choice(v, k, LAYOUT_VALUES),
    "recursion": lambda v, k: RecursionConfig._load(v),
    "size": lambda v, k: _choice(v, k, SIZE_VALUES),
    "permission": lambda v, k: _choice(v, k, PERMISSION_VALUES),
    "sorting": lambda v, k: SortingConfig._load(v),
    "no_symlink": _bool,
    "total_size": _bool,
    "symlink_arrow": _str,
    "hyperlink": lambda v, k: _choice(v, k, WHEN_VALUES),
    "header": _bool,
}


@dataclass
class Config:
    """Optional settings read from a configuration file; None where a key is absent."""

    classic: Optional[bool] = None
    blocks: Optional[list[str]] = None
    color: Optional[ColorConfig] = None
    date: Optional[str] = None
    dereference: Optional[bool] = None
    display: Optional[str] = None
    icons: Optional[IconsConfig] = None
    ignore_globs: Optional[list[str]] = None
    indicators: Optional[bool] = None
    layout: Optional[str] = None
    recursion: Optional[RecursionConfig] = None
    size: Optional[str] = None
    permission: Optional[str] = None
    sorting: Optional[SortingConfig] = None
    no_symlink: Optional[bool] = None
    total_size: Optional[bool] = None
    symlink_arrow: Optional[str] = None
    hyperlink: Optional[str] = None
    header: Optional[bool] = None

    @classmethod
    def with_none(cls) -> "Config":
        """A configuration with every setting unset."""
        return cls()

    @classmethod
    def from_yaml(cls, text: str) -> "Config":
        """Parse YAML text; raise ConfigError on bad syntax, keys or values."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as err:
            raise ConfigError(str(err)) from err
        if data is None:
            return cls.with_none()
        if not isinstance(data, dict):
            raise ConfigError(f"invalid type: {data!r}, expected a mapping")
        names = {item.name.replace("_", "-"): item.name for item in fields(cls)}
        values = {}
        for key, value in data.items():
            name = names.get(str(key))
            if name is None:
                raise ConfigError(
                    f"unknown field `{key}`, expected one of {', '.join(names)}"
                )
            values[name] = _LOADERS[name](value, str(key))
        return cls(**values)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> Optional["Config"]:
        """Read a configuration file; report problems on stderr and return None."""
        path = Path(path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as err:
            _print_error(f"Can not open config file {path}: {err}.")
            return None
        try:
            return cls.from_yaml(raw.decode("utf-8", errors="replace"))
        except ConfigError as err:
            _print_error(f"Configuration file {path} format error, {err}.")
            return None

    @classmethod
    def builtin(cls) -> "Config":
        """The configuration shipped with the program."""
        return cls.from_yaml(DEFAULT_CONFIG)

    @classmethod
    def default(cls) -> "Config":
        """The user's configuration file if it loads, otherwise the built-in one."""
        directory = config_file_path()
        if directory is not None:
            config = cls.from_file(directory / CONF_FILE_NAME)
            if config is not None:
                return config
        return cls.builtin()


def config_file_path() -> Optional[Path]:
    """The directory holding the configuration file."""
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) / CONF_DIR if appdata else None
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg) / CONF_DIR
    try:
        return Path.home() / ".config" / CONF_DIR
    except (RuntimeError, KeyError) as err:
        _print_error(f"Can not open config file: {err}.")
        return None


def _home_dir() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def expand_home(path: Union[str, Path]) -> Optional[Path]:
    """Replace a leading ``~`` component with the home directory; None if it is unknown."""
    path = Path(path)
    if not path.parts or path.parts[0] != "~":
        return path
    home = _home_dir()
    if home is None:
        return None
    rest = path.parts[1:]
    if not rest:
        return home
    if home == Path("/"):
        return Path(*rest)
    return home.joinpath(*rest)


# Settings used when no user configuration file can be loaded.
# Keys left out here (date, display, ignore-globs, recursion depth, header)
# stay unset so that the built-in behaviour applies.
DEFAULT_CONFIG = """\
classic: false
blocks: [permission, user, group, size, date, name]
color:
  when: auto
  theme: default
dereference: false
icons:
  when: auto
  theme: fancy
  separator: " "
indicators: false
layout: grid
recursion:
  enabled: false
size: default
permission: rwx
sorting:
  column: name
  reverse: false
  dir-grouping: none
no-symlink: false
total-size: false
hyperlink: never
symlink-arrow: "\u21d2"
"""