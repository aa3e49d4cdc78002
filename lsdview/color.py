"""Colour themes, LS_COLORS parsing and the styling of output text."""

from __future__ import annotations

import enum
import fnmatch
import os
import re
import stat
from dataclasses import dataclass, field, fields, is_dataclass, replace
from operator import attrgetter
from pathlib import Path
from typing import Any, ClassVar, Optional, Union

import yaml

Color = Union[int, str, "tuple[int, int, int]"]

_NAMED_COLORS = {
    "black": 0,
    "dark_red": 1,
    "dark_green": 2,
    "dark_yellow": 3,
    "dark_blue": 4,
    "dark_magenta": 5,
    "dark_cyan": 6,
    "grey": 7,
    "dark_grey": 8,
    "red": 9,
    "green": 10,
    "yellow": 11,
    "blue": 12,
    "magenta": 13,
    "cyan": 14,
    "white": 15,
}
_BASIC_COLORS = ("black", "dark_red", "dark_green", "dark_yellow",
                 "dark_blue", "dark_magenta", "dark_cyan", "grey")
_BRIGHT_COLORS = ("dark_grey", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

# Attribute names with their SGR codes, in the order they are emitted.
_ATTRIBUTE_CODES = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underlined": 4,
    "slow_blink": 5,
    "rapid_blink": 6,
    "reverse": 7,
    "hidden": 8,
    "crossed_out": 9,
}

_SUID_BACKGROUND = 124  # Red3

_DEFAULT_LS_COLORS = (
    "rs=0:lc=\x1b[:rc=m:cl=\x1b[K:ex=01;32:sg=30;43:su=37;41:di=01;34:st=37;44:"
    "ow=34;42:tw=30;42:ln=01;36:bd=01;33:cd=01;33:do=01;35:pi=33:so=01;35:"
)


def _color_sgr(color: Color) -> str:
    if isinstance(color, tuple):
        red, green, blue = color
        return f"2;{red};{green};{blue}"
    if isinstance(color, str):
        return f"5;{_NAMED_COLORS[color]}"
    return f"5;{color}"


def _parse_color(value: Any) -> Color:
    """Read a colour from a theme file value."""
    if isinstance(value, bool):
        raise ValueError(f"invalid color: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 255:
            return value
        raise ValueError(f"invalid color: {value!r}")
    if isinstance(value, (list, tuple)) and len(value) == 3:
        if all(isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255 for v in value):
            return (value[0], value[1], value[2])
        raise ValueError(f"invalid color: {value!r}")
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _NAMED_COLORS:
            return text
        squashed = {name.replace("_", ""): name for name in _NAMED_COLORS}
        if text in squashed:
            return squashed[text]
        match = re.fullmatch(r"ansi_\((\d{1,3})\)", text)
        if match and int(match.group(1)) <= 255:
            return int(match.group(1))
        match = re.fullmatch(r"rgb_\((\d{1,3}),\s*(\d{1,3}),\s*(\d{1,3})\)", text)
        if match and all(int(g) <= 255 for g in match.groups()):
            red, green, blue = (int(g) for g in match.groups())
            return (red, green, blue)
        match = re.fullmatch(r"#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", text)
        if match:
            red, green, blue = (int(g, 16) for g in match.groups())
            return (red, green, blue)
    raise ValueError(f"invalid color: {value!r}")


@dataclass(frozen=True)
class ThemeOption:
    """Which colour theme to use: none, the default, default without LS_COLORS, or a file."""

    kind: str = "default"
    file: Optional[str] = None

    NO_COLOR: ClassVar["ThemeOption"]
    DEFAULT: ClassVar["ThemeOption"]
    NO_LSCOLORS: ClassVar["ThemeOption"]

    @classmethod
    def custom(cls, file: str) -> "ThemeOption":
        return cls("custom", file)

    @classmethod
    def parse(cls, value: str) -> "ThemeOption":
        """Read a theme option as written in a configuration file."""
        known = {"default": cls.DEFAULT, "no-color": cls.NO_COLOR, "no-lscolors": cls.NO_LSCOLORS}
        return known.get(value, cls.custom(value))


ThemeOption.NO_COLOR = ThemeOption("no-color")
ThemeOption.DEFAULT = ThemeOption("default")
ThemeOption.NO_LSCOLORS = ThemeOption("no-lscolors")


class ElemKind(enum.Enum):
    """The kinds of output element that have a colour of their own."""

    FILE = "file"
    SYMLINK = "symlink"
    BROKEN_SYMLINK = "broken-symlink"
    MISSING_SYMLINK_TARGET = "missing-symlink-target"
    DIR = "dir"
    PIPE = "pipe"
    BLOCK_DEVICE = "block-device"
    CHAR_DEVICE = "char-device"
    SOCKET = "socket"
    SPECIAL = "special"
    READ = "read"
    WRITE = "write"
    EXEC = "exec"
    EXEC_STICKY = "exec-sticky"
    NO_ACCESS = "no-access"
    OCTAL = "octal"
    ACL = "acl"
    CONTEXT = "context"
    DAY_OLD = "day-old"
    HOUR_OLD = "hour-old"
    OLDER = "older"
    USER = "user"
    GROUP = "group"
    NON_FILE = "non-file"
    FILE_LARGE = "file-large"
    FILE_MEDIUM = "file-medium"
    FILE_SMALL = "file-small"
    INODE = "inode"
    LINKS = "links"
    TREE_EDGE = "tree-edge"


_SIMPLE_COLORS = {
    ElemKind.SYMLINK: attrgetter("file_type.symlink.default"),
    ElemKind.BROKEN_SYMLINK: attrgetter("file_type.symlink.broken"),
    ElemKind.MISSING_SYMLINK_TARGET: attrgetter("file_type.symlink.missing_target"),
    ElemKind.PIPE: attrgetter("file_type.pipe"),
    ElemKind.BLOCK_DEVICE: attrgetter("file_type.block_device"),
    ElemKind.CHAR_DEVICE: attrgetter("file_type.char_device"),
    ElemKind.SOCKET: attrgetter("file_type.socket"),
    ElemKind.SPECIAL: attrgetter("file_type.special"),
    ElemKind.READ: attrgetter("permission.read"),
    ElemKind.WRITE: attrgetter("permission.write"),
    ElemKind.EXEC: attrgetter("permission.execute"),
    ElemKind.EXEC_STICKY: attrgetter("permission.exec_sticky"),
    ElemKind.NO_ACCESS: attrgetter("permission.no_access"),
    ElemKind.OCTAL: attrgetter("permission.octal"),
    ElemKind.ACL: attrgetter("permission.acl"),
    ElemKind.CONTEXT: attrgetter("permission.context"),
    ElemKind.DAY_OLD: attrgetter("date.day_old"),
    ElemKind.HOUR_OLD: attrgetter("date.hour_old"),
    ElemKind.OLDER: attrgetter("date.older"),
    ElemKind.USER: attrgetter("user"),
    ElemKind.GROUP: attrgetter("group"),
    ElemKind.NON_FILE: attrgetter("size.none"),
    ElemKind.FILE_LARGE: attrgetter("size.large"),
    ElemKind.FILE_MEDIUM: attrgetter("size.medium"),
    ElemKind.FILE_SMALL: attrgetter("size.small"),
    ElemKind.TREE_EDGE: attrgetter("tree_edge"),
}

_ELEM_INDICATORS = {
    ElemKind.SYMLINK: "ln",
    ElemKind.PIPE: "pi",
    ElemKind.SOCKET: "so",
    ElemKind.BLOCK_DEVICE: "bd",
    ElemKind.CHAR_DEVICE: "cd",
    ElemKind.BROKEN_SYMLINK: "or",
    ElemKind.MISSING_SYMLINK_TARGET: "mi",
}


@dataclass(frozen=True)
class Elem:
    """An element to colour; files and dirs carry exec/suid bits, inodes and links validity."""

    kind: ElemKind
    executable: bool = False
    uid: bool = False
    valid: bool = False

    def has_suid(self) -> bool:
        return self.uid and self.kind in (ElemKind.FILE, ElemKind.DIR)

    def get_color(self, theme: "ColorTheme") -> Color:
        kind = self.kind
        if kind is ElemKind.FILE:
            colors = theme.file_type.file
            if self.uid:
                return colors.exec_uid if self.executable else colors.uid_no_exec
            return colors.exec_no_uid if self.executable else colors.no_exec_no_uid
        if kind is ElemKind.DIR:
            return theme.file_type.dir.uid if self.uid else theme.file_type.dir.no_uid
        if kind is ElemKind.INODE:
            return theme.inode.valid if self.valid else theme.inode.invalid
        if kind is ElemKind.LINKS:
            return theme.links.valid if self.valid else theme.links.invalid
        return _SIMPLE_COLORS[kind](theme)

    def indicator(self) -> Optional[str]:
        """The LS_COLORS indicator code for this element, if it has one."""
        if self.kind is ElemKind.FILE:
            if self.uid:
                return None
            return "ex" if self.executable else "fi"
        if self.kind is ElemKind.DIR:
            return None if self.uid else "di"
        return _ELEM_INDICATORS.get(self.kind)


@dataclass(frozen=True)
class Style:
    """Foreground, background and text attributes applied to a piece of text."""

    foreground: Optional[Color] = None
    background: Optional[Color] = None
    attributes: frozenset = field(default_factory=frozenset)

    def apply(self, text: str) -> str:
        """Wrap the text in the escape sequences of this style."""
        prefix = []
        if self.background is not None:
            prefix.append(f"\x1b[48;{_color_sgr(self.background)}m")
        if self.foreground is not None:
            prefix.append(f"\x1b[38;{_color_sgr(self.foreground)}m")
        prefix.extend(
            f"\x1b[{code}m" for name, code in _ATTRIBUTE_CODES.items() if name in self.attributes
        )
        if self.attributes:
            suffix = "\x1b[0m"
        else:
            suffix = ("\x1b[49m" if self.background is not None else "") + (
                "\x1b[39m" if self.foreground is not None else ""
            )
        return "".join(prefix) + text + suffix


@dataclass(frozen=True)
class Permission:
    read: Color = "green"
    write: Color = "yellow"
    execute: Color = "red"
    exec_sticky: Color = "magenta"
    no_access: Color = 245
    octal: Color = 6
    acl: Color = "dark_cyan"
    context: Color = "cyan"


@dataclass(frozen=True)
class File:
    exec_uid: Color = 40
    uid_no_exec: Color = 184
    exec_no_uid: Color = 40
    no_exec_no_uid: Color = 184


@dataclass(frozen=True)
class Dir:
    uid: Color = 33
    no_uid: Color = 33


@dataclass(frozen=True)
class Symlink:
    default: Color = 44
    broken: Color = 124
    missing_target: Color = 124


@dataclass(frozen=True)
class FileType:
    file: File = field(default_factory=File)
    dir: Dir = field(default_factory=Dir)
    pipe: Color = 44
    symlink: Symlink = field(default_factory=Symlink)
    block_device: Color = 44
    char_device: Color = 172
    socket: Color = 44
    special: Color = 44


@dataclass(frozen=True)
class Date:
    hour_old: Color = 40
    day_old: Color = 42
    older: Color = 36


@dataclass(frozen=True)
class Size:
    none: Color = 245
    small: Color = 229
    medium: Color = 216
    large: Color = 172


@dataclass(frozen=True)
class INode:
    valid: Color = 13
    invalid: Color = 245


@dataclass(frozen=True)
class Links:
    valid: Color = 13
    invalid: Color = 245


_FIELD_ALIASES = {"exec": "execute"}


def _merge(default: Any, data: Any, where: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping at {where or 'top level'}")
    known = {}
    for item in fields(default):
        known[item.name] = item.name
        known[item.name.replace("_", "-")] = item.name
    for alias, name in _FIELD_ALIASES.items():
        if name in known:
            known[alias] = name
    changes = {}
    for key, value in data.items():
        name = known.get(str(key))
        if name is None:
            raise ValueError(f"unknown field `{where}{key}`")
        current = getattr(default, name)
        if is_dataclass(current):
            changes[name] = _merge(current, value, f"{where}{key}.")
        else:
            changes[name] = _parse_color(value)
    return replace(default, **changes)


@dataclass(frozen=True)
class ColorTheme:
    """The colour of every kind of element."""

    user: Color = 230
    group: Color = 187
    permission: Permission = field(default_factory=Permission)
    file_type: FileType = field(default_factory=FileType)
    date: Date = field(default_factory=Date)
    size: Size = field(default_factory=Size)
    inode: INode = field(default_factory=INode)
    links: Links = field(default_factory=Links)
    tree_edge: Color = 245

    @classmethod
    def default_dark(cls) -> "ColorTheme":
        return cls()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ColorTheme":
        """Load a YAML theme; keys left out keep their default colour."""
        text = Path(path).read_text(encoding="utf-8", errors="replace")
        data = yaml.safe_load(text)
        if data is None:
            return cls.default_dark()
        return _merge(cls.default_dark(), data, "")


def _parse_ansi(code: str) -> Optional[Style]:
    if not code.strip():
        return None
    try:
        numbers = [int(part) if part else 0 for part in code.split(";")]
    except ValueError:
        return None
    foreground: Optional[Color] = None
    background: Optional[Color] = None
    attributes: set[str] = set()
    by_code = {value: name for name, value in _ATTRIBUTE_CODES.items()}
    numbers_iter = iter(numbers)

    def extended() -> Optional[Color]:
        mode = next(numbers_iter, None)
        if mode == 5:
            return next(numbers_iter, None)
        if mode == 2:
            red, green, blue = (next(numbers_iter, None) for _ in range(3))
            if None in (red, green, blue):
                return None
            return (red, green, blue)
        return None

    for number in numbers_iter:
        if number == 0:
            foreground, background = None, None
            attributes.clear()
        elif number in by_code:
            attributes.add(by_code[number])
        elif 30 <= number <= 37:
            foreground = _BASIC_COLORS[number - 30]
        elif number == 38:
            foreground = extended()
        elif number == 39:
            foreground = None
        elif 40 <= number <= 47:
            background = _BASIC_COLORS[number - 40]
        elif number == 48:
            background = extended()
        elif number == 49:
            background = None
        elif 90 <= number <= 97:
            foreground = _BRIGHT_COLORS[number - 90]
        elif 100 <= number <= 107:
            background = _BRIGHT_COLORS[number - 100]
    return Style(foreground, background, frozenset(attributes))


def parse_ls_colors(value: str) -> dict[str, Style]:
    """Parse an LS_COLORS string into styles keyed by indicator code or glob pattern."""
    styles: dict[str, Style] = {}
    for entry in value.split(":"):
        key, sep, code = entry.partition("=")
        if not sep or not key:
            continue
        style = _parse_ansi(code)
        if style is not None:
            styles[key] = style
    return styles


class Colors:
    """Applies the chosen theme, and LS_COLORS where it applies, to output text."""

    def __init__(
        self,
        theme_option: ThemeOption,
        ls_colors: Optional[str] = None,
        theme_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        if theme_option.kind == "no-color":
            self.theme: Optional[ColorTheme] = None
        elif theme_option.kind == "custom":
            base = Path(theme_dir) if theme_dir is not None else Path("themes")
            try:
                self.theme = ColorTheme.from_file(base / (theme_option.file or ""))
            except (OSError, ValueError, yaml.YAMLError):
                self.theme = ColorTheme.default_dark()
        else:
            self.theme = ColorTheme.default_dark()

        self.ls_colors: Optional[dict[str, Style]] = None
        if theme_option.kind in ("default", "custom"):
            if ls_colors is None:
                ls_colors = os.environ.get("LS_COLORS", _DEFAULT_LS_COLORS)
            self.ls_colors = parse_ls_colors(ls_colors)

    def colorize(self, text: str, elem: Elem) -> str:
        return self._style(elem).apply(text)

    def colorize_using_path(self, text: str, path: Union[str, Path], elem: Elem) -> str:
        style = self._style_from_path(Path(path))
        if style is not None:
            return style.apply(text)
        return self.colorize(text, elem)

    @staticmethod
    def default_style() -> Style:
        return Style()

    def _style(self, elem: Elem) -> Style:
        if self.ls_colors is not None:
            indicator = elem.indicator()
            if indicator is not None:
                return self.ls_colors.get(indicator, Style())
        return self._style_default(elem)

    def _style_default(self, elem: Elem) -> Style:
        if self.theme is None:
            return Style()
        style = Style(foreground=elem.get_color(self.theme))
        if elem.has_suid():
            return replace(style, background=_SUID_BACKGROUND)
        return style

    def _pattern_style(self, name: str) -> Optional[Style]:
        assert self.ls_colors is not None
        lowered = name.lower()
        for pattern, style in reversed(list(self.ls_colors.items())):
            if not pattern.startswith("*"):
                continue
            tail = pattern[1:]
            if not any(c in tail for c in "*?["):
                if lowered.endswith(tail.lower()):
                    return style
            elif fnmatch.fnmatchcase(lowered, pattern.lower()):
                return style
        return None

    def _style_from_path(self, path: Path) -> Optional[Style]:
        if self.ls_colors is None:
            return None
        styles = self.ls_colors
        try:
            info = os.lstat(path)
        except OSError:
            return self._pattern_style(path.name)
        mode = info.st_mode
        if stat.S_ISLNK(mode):
            return styles.get("ln" if path.exists() else "or")
        if stat.S_ISDIR(mode):
            sticky = bool(mode & stat.S_ISVTX)
            writable = bool(mode & stat.S_IWOTH)
            if sticky and writable and "tw" in styles:
                return styles["tw"]
            if writable and "ow" in styles:
                return styles["ow"]
            if sticky and "st" in styles:
                return styles["st"]
            return styles.get("di")
        for test, code in ((stat.S_ISFIFO, "pi"), (stat.S_ISSOCK, "so"),
                           (stat.S_ISBLK, "bd"), (stat.S_ISCHR, "cd")):
            if test(mode):
                return styles.get(code)
        if mode & stat.S_ISUID and "su" in styles:
            return styles["su"]
        if mode & stat.S_ISGID and "sg" in styles:
            return styles["sg"]
        if mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH) and "ex" in styles:
            return styles["ex"]
        if info.st_nlink > 1 and "mh" in styles:
            return styles["mh"]
        pattern_style = self._pattern_style(path.name)
        if pattern_style is not None:
            return pattern_style
        return styles.get("fi")