"""Command-line options, their defaults and the validation of their values."""

from __future__ import annotations

import argparse
import os
from typing import Iterator, Optional, Sequence

DESCRIPTION = "An ls command with a lot of pretty colors and some other stuff."
_VERSION = "1.0.0"

WHEN_CHOICES = ("always", "auto", "never")
BLOCK_CHOICES = (
    "permission",
    "user",
    "group",
    "context",
    "size",
    "date",
    "name",
    "inode",
    "links",
)
SORT_CHOICES = ("size", "time", "version", "extension", "none")

_PLAIN_SPECIFIERS = frozenset("AaBbCcDdeFfGgHhIjklMmnPpRrSsTtUuVvWwXxYyZz+%")
_PADDED_SPECIFIERS = frozenset("CdefGgHIjklMmSsUuVWwYy")
_NANOS = "369"

_SORT_FLAGS = ("timesort", "sizesort", "extensionsort", "versionsort", "sort", "no_sort")


def _next_specifier(chars: Iterator[str]) -> str:
    char = next(chars, None)
    if char is None:
        raise ValueError("missing format specifier")
    return char


def validate_time_format(formatter: str) -> None:
    """Check every ``%`` specifier of a strftime-like format; raise ValueError if one is bad."""
    chars = iter(formatter)
    for char in chars:
        if char != "%":
            continue
        spec = _next_specifier(chars)
        if spec == ".":
            digits = _next_specifier(chars)
            if digits in _NANOS:
                tail = _next_specifier(chars)
                if tail != "f":
                    raise ValueError(f"invalid format specifier: %.{digits}{tail}")
            elif digits != "f":
                raise ValueError(f"invalid format specifier: %.{digits}")
        elif spec in ":#":
            tail = _next_specifier(chars)
            if tail != "z":
                raise ValueError(f"invalid format specifier: %{spec}{tail}")
        elif spec in "-_0":
            tail = _next_specifier(chars)
            if tail not in _PADDED_SPECIFIERS:
                raise ValueError(f"invalid format specifier: %{spec}{tail}")
        elif spec in _PLAIN_SPECIFIERS:
            continue
        elif spec in _NANOS:
            tail = _next_specifier(chars)
            if tail != "f":
                raise ValueError(f"invalid format specifier: %{spec}{tail}")
        else:
            raise ValueError(f"invalid format specifier: %{spec}")


def validate_date_argument(arg: str) -> None:
    """Accept ``date``, ``relative`` or ``+<format>``; raise ValueError otherwise."""
    if arg.startswith("+"):
        validate_time_format(arg)
    elif arg not in ("date", "relative"):
        raise ValueError("possible values: date, relative, +date-time-format")


def _date_type(value: str) -> str:
    try:
        validate_date_argument(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err
    return value


def _blocks_type(value: str) -> list[str]:
    blocks = value.split(",")
    for block in blocks:
        if block not in BLOCK_CHOICES:
            raise argparse.ArgumentTypeError(
                f"invalid value '{block}' (possible values: {', '.join(BLOCK_CHOICES)})"
            )
    return blocks


def _clear(parser: argparse.ArgumentParser, namespace: argparse.Namespace, dests) -> None:
    for dest in dests:
        setattr(namespace, dest, parser.get_default(dest))


class _Flag(argparse.Action):
    """A switch that counts its occurrences and resets the options it overrides."""

    def __init__(self, option_strings, dest, overrides=(), **kwargs):
        kwargs.setdefault("default", 0)
        super().__init__(option_strings, dest, nargs=0, **kwargs)
        self.overrides = tuple(overrides)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, (getattr(namespace, self.dest, 0) or 0) + 1)
        _clear(parser, namespace, self.overrides)


class _Switch(argparse.Action):
    """A switch that may be given only once."""

    def __init__(self, option_strings, dest, **kwargs):
        kwargs.setdefault("default", False)
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, False):
            parser.error(f"the argument '{option_string}' cannot be used multiple times")
        setattr(namespace, self.dest, True)


class _Value(argparse.Action):
    """An option whose last value wins and which resets the options it overrides."""

    def __init__(self, option_strings, dest, overrides=(), **kwargs):
        super().__init__(option_strings, dest, **kwargs)
        self.overrides = tuple(overrides)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        _clear(parser, namespace, self.overrides)


def _others(name: str) -> tuple[str, ...]:
    return tuple(flag for flag in _SORT_FLAGS if flag != name)


def build() -> argparse.ArgumentParser:
    """Build the parser for the command line."""
    parser = argparse.ArgumentParser(prog="lsd", description=DESCRIPTION, add_help=False)
    add = parser.add_argument

    add("files", metavar="FILE", nargs="*", default=["."])
    add("--help", action="help", help="Print help information")
    add("-V", "--version", action="version", version=f"lsd {_VERSION}")
    add("-a", "--all", action=_Flag, overrides=("almost_all",),
        help="Do not ignore entries starting with .")
    add("-A", "--almost-all", dest="almost_all", action=_Flag, overrides=("all",),
        help="Do not list implied . and ..")
    add("--color", action=_Value, choices=WHEN_CHOICES, help="When to use terminal colours")
    add("--icon", action=_Value, choices=WHEN_CHOICES, help="When to print the icons")
    add("--icon-theme", dest="icon_theme", action=_Value, choices=("fancy", "unicode"),
        help="Whether to use fancy or unicode icons")
    add("-F", "--classify", dest="indicators", action=_Flag,
        help="Append indicator (one of */=>@|) at the end of the file names")
    add("-l", "--long", action=_Flag, help="Display extended file metadata as a table")
    add("--ignore-config", dest="ignore_config", action=_Switch,
        help="Ignore the configuration file")
    add("--config-file", dest="config_file", metavar="config-file", action=_Value,
        help="Provide a custom lsd configuration file")
    add("-1", "--oneline", action=_Flag, help="Display one entry per line")
    add("-R", "--recursive", action=_Flag, help="Recurse into directories")
    add("-h", "--human-readable", dest="human_readable", action=_Flag,
        help="For ls compatibility purposes ONLY, currently set by default")
    add("--tree", action=_Flag,
        help="Recurse into directories and present the result as a tree")
    add("--depth", metavar="num", action=_Value,
        help="Stop recursing into directories after reaching specified depth")
    add("-d", "--directory-only", dest="directory_only", action=_Switch,
        help="Display directories themselves, and not their contents "
             "(recursively when used with --tree)")
    add("--permission", action=_Value, choices=("rwx", "octal"), help="How to display permissions")
    add("--size", action=_Value, choices=("default", "short", "bytes"), help="How to display size")
    add("--total-size", dest="total_size", action=_Flag,
        help="Display the total size of directories")
    add("--date", action=_Value, type=_date_type,
        help="How to display date [possible values: date, relative, +date-time-format]")
    add("-t", "--timesort", action=_Flag, overrides=_others("timesort"),
        help="Sort by time modified")
    add("-S", "--sizesort", action=_Flag, overrides=_others("sizesort"), help="Sort by size")
    add("-X", "--extensionsort", action=_Flag, overrides=_others("extensionsort"),
        help="Sort by file extension")
    add("-v", "--versionsort", action=_Flag, overrides=_others("versionsort"),
        help="Natural sort of (version) numbers within text")
    add("--sort", metavar="WORD", action=_Value, choices=SORT_CHOICES,
        overrides=_others("sort"), help="sort by WORD instead of name")
    add("-U", "--no-sort", dest="no_sort", action=_Flag, overrides=_others("no_sort"),
        help="Do not sort. List entries in directory order")
    add("-r", "--reverse", action=_Flag, help="Reverse the order of the sort")
    add("--group-dirs", dest="group_dirs", action=_Value, choices=("none", "first", "last"),
        help="Sort the directories then the files")
    add("--group-directories-first", dest="group_directories_first", action=_Switch,
        help="Groups the directories at the top before the files. Same as --group-dirs=first")
    add("--blocks", action="extend", type=_blocks_type,
        help="Specify the blocks that will be displayed and in what order")
    add("--classic", action=_Switch, help="Enable classic mode (display output similar to ls)")
    add("--no-symlink", dest="no_symlink", action=_Flag, help="Do not display symlink target")
    add("-I", "--ignore-glob", dest="ignore_glob", metavar="pattern", action="append",
        help="Do not display files/directories with names matching the glob pattern(s). "
             "More than one can be specified by repeating the argument")
    add("-i", "--inode", action=_Flag, help="Display the index number of each file")
    add("-L", "--dereference", action=_Flag,
        help="When showing file information for a symbolic link, show information for the "
             "file the link references rather than for the link itself")
    add("-Z", "--context", action=_Switch, help="Print security context (label) of each file")
    add("--hyperlink", action=_Value, choices=WHEN_CHOICES, help="Attach hyperlink to filenames")
    add("--header", action=_Switch, help="Display block headers")
    add("--system-protected", dest="system_protected", action=_Switch,
        help="Includes files with the windows system protection flag set. "
             "This is the same as --all on other platforms"
        if os.name == "nt" else argparse.SUPPRESS)
    return parser


_CONFLICTS = (
    ("recursive", "--recursive", "tree", "--tree"),
    ("directory_only", "--directory-only", "depth", "--depth"),
    ("directory_only", "--directory-only", "recursive", "--recursive"),
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse the command line; options not given are left at None, 0 or False."""
    parser = build()
    namespace = parser.parse_intermixed_args(argv)
    for first, first_opt, second, second_opt in _CONFLICTS:
        if getattr(namespace, first) and getattr(namespace, second):
            parser.error(f"the argument '{first_opt}' cannot be used with '{second_opt}'")
    return namespace