"""Laying out text cells in columns, measuring text as it appears on a terminal."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union

from wcwidth import wcwidth

_SGR_OPEN = "\x1b["
_SGR_CLOSE = "m"
_LINK_OPEN = "\x1b]8;;"
_LINK_CLOSE = "\x1b\\"


def _text_width(text: str) -> int:
    """Terminal columns taken by the text; control characters take none."""
    return sum(max(wcwidth(char), 0) for char in text)


def _invisible_length(text: str, opener: str, closer: str) -> int:
    total = 0
    start = text.find(opener)
    while start != -1:
        end = text.find(closer, start)
        if end != -1:
            total += len(text[start:end].encode("utf-8", "surrogatepass"))
        start = text.find(opener, start + len(opener))
    return total


def get_visible_width(text: str, hyperlink: bool = False) -> int:
    """Columns the text occupies once colour (and hyperlink) escapes are left out."""
    invisible = _invisible_length(text, _SGR_OPEN, _SGR_CLOSE)
    if hyperlink:
        invisible += _invisible_length(text, _LINK_OPEN, _LINK_CLOSE)
    return _text_width(text) - invisible


class Direction(enum.Enum):
    """The order in which cells fill the grid."""

    LEFT_TO_RIGHT = "left-to-right"
    TOP_TO_BOTTOM = "top-to-bottom"


@dataclass
class Cell:
    """A piece of text together with the number of columns it takes."""

    contents: str
    width: Optional[int] = field(default=None)

    def __post_init__(self) -> None:
        if self.width is None:
            self.width = _text_width(self.contents)


@dataclass
class _Dimensions:
    num_lines: int
    widths: list[int]


class Grid:
    """Cells arranged into columns, separated by spaces or by a fixed text."""

    def __init__(
        self,
        filling: Union[int, str] = 1,
        direction: Direction = Direction.LEFT_TO_RIGHT,
    ) -> None:
        self.filling = filling
        self.direction = direction
        self.cells: list[Cell] = []

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def _separator_width(self) -> int:
        if isinstance(self.filling, str):
            return _text_width(self.filling)
        return self.filling

    def add(self, cell: Cell) -> None:
        self.cells.append(cell)

    def _column_widths(self, num_lines: int, num_columns: int) -> _Dimensions:
        widths = [0] * num_columns
        for index, cell in enumerate(self.cells):
            if self.direction is Direction.LEFT_TO_RIGHT:
                column = index % num_columns
            else:
                column = index // num_lines
            widths[column] = max(widths[column], cell.width)
        return _Dimensions(num_lines, widths)

    def _theoretical_max_num_lines(self, maximum_width: int) -> int:
        count = len(self.cells)
        min_columns = 0
        used = 0
        for cell in sorted(self.cells, key=lambda c: c.width, reverse=True):
            if cell.width + used <= maximum_width:
                min_columns += 1
                used += cell.width
            else:
                return -(-count // min_columns)
            used += self._separator_width
        return 1

    def _width_dimensions(self, maximum_width: int) -> Optional[_Dimensions]:
        count = len(self.cells)
        if count == 0:
            return _Dimensions(0, [])
        if max(cell.width for cell in self.cells) > maximum_width:
            return None
        if count == 1:
            return _Dimensions(1, [self.cells[0].width])
        max_lines = self._theoretical_max_num_lines(maximum_width)
        if max_lines == 1:
            return _Dimensions(1, [cell.width for cell in self.cells])
        best: Optional[_Dimensions] = None
        for num_lines in range(max_lines, 0, -1):
            num_columns = -(-count // num_lines)
            separators = (num_columns - 1) * self._separator_width
            if maximum_width < separators:
                continue
            candidate = self._column_widths(num_lines, num_columns)
            if sum(candidate.widths) < maximum_width - separators:
                best = candidate
            else:
                return best
        return best

    def _render(self, dimensions: _Dimensions) -> str:
        columns = len(dimensions.widths)
        lines = []
        for y in range(dimensions.num_lines):
            parts = []
            for x, column_width in enumerate(dimensions.widths):
                if self.direction is Direction.LEFT_TO_RIGHT:
                    index = y * columns + x
                else:
                    index = y + dimensions.num_lines * x
                if index >= len(self.cells):
                    continue
                cell = self.cells[index]
                if x == columns - 1:
                    parts.append(cell.contents)
                elif isinstance(self.filling, str):
                    parts.append(cell.contents + " " * (column_width - cell.width) + self.filling)
                else:
                    parts.append(cell.contents + " " * (column_width - cell.width + self.filling))
            lines.append("".join(parts) + "\n")
        return "".join(lines)

    def fit_into_width(self, width: int) -> Optional[str]:
        """Render in as few lines as fit within the width, or None if the cells cannot fit."""
        dimensions = self._width_dimensions(width)
        if dimensions is None:
            return None
        return self._render(dimensions)

    def fit_into_columns(self, columns: int) -> str:
        """Render with a fixed number of columns."""
        if columns < 1:
            raise ValueError("a grid needs at least one column")
        num_lines = -(-len(self.cells) // columns)
        return self._render(self._column_widths(num_lines, columns))