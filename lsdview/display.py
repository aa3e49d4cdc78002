"""Tree prefixes, block headers and folder titles used when laying out a listing."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, Union

from lsdview.color import Style
from lsdview.grid import Cell, Grid, get_visible_width

EDGE = "\u251c\u2500\u2500"  # "├──"
LINE = "\u2502  "  # "│  "
CORNER = "\u2514\u2500\u2500"  # "└──"
BLANK = "   "

_UNDERLINED = Style(attributes=frozenset({"underlined"}))


def tree_prefix(parent_prefix: str, depth: int, is_last: bool) -> str:
    """The prefix drawn before an entry at the given tree depth."""
    if depth <= 0:
        return parent_prefix
    return f"{parent_prefix}{CORNER if is_last else EDGE} "


def tree_child_prefix(parent_prefix: str, depth: int, is_last: bool) -> str:
    """The prefix handed down to the contents of an entry at the given tree depth."""
    if depth <= 0:
        return parent_prefix
    return f"{parent_prefix}{BLANK if is_last else LINE} "


def _center(text: str, width: int) -> str:
    padding = max(width - len(text), 0)
    left = padding // 2
    return " " * left + text + " " * (padding - left)


def add_header(
    headers: Sequence[str],
    cells: Sequence[Cell],
    grid: Grid,
    hyperlink: bool = False,
) -> None:
    """Add one centred, underlined header cell per block, as wide as its widest column cell."""
    if not headers:
        return
    widths = [get_visible_width(header, hyperlink) for header in headers]
    for index, cell in enumerate(cells):
        column = index % len(headers)
        widths[column] = max(widths[column], cell.width)
    for header, width in zip(headers, widths):
        grid.add(Cell(contents=_UNDERLINED.apply(_center(header, width)), width=width))


def should_display_folder_path(depth: int, is_dirs: Iterable[bool]) -> bool:
    """Whether folder titles are shown, given which of the listed entries count as folders."""
    if depth > 0:
        return True
    flags = list(is_dirs)
    folders = sum(1 for is_dir in flags if is_dir)
    return folders > 1 or folders < len(flags)


def display_folder_path(path: Union[str, Path]) -> str:
    """The title line shown above the contents of a folder."""
    return f"\n{path}:\n"