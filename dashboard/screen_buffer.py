"""
Fixed-size character grid with per-cell styling.

The buffer keeps two frames: the one being composed and the one last flushed
to the terminal. A delta draw writes only the cells that differ between them;
a full draw clears the screen and writes every cell. The bottom-right cell is
never written, and double-width characters span two cells.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from rich.cells import get_character_cell_size
from rich.console import Console
from rich.control import Control
from rich.style import Style
from rich.text import Text


@dataclass(frozen=True)
class Cell:
    char: str = " "
    style: Style = Style()


BLANK = Cell()

# Second column of a double-width character; prints as nothing
WIDE_FILLER = ""

Grid = list[list[Cell]]


def _blank_grid(width: int, height: int) -> Grid:
    return [[BLANK] * width for _ in range(height)]


def _is_wide(cell: Cell) -> bool:
    return len(cell.char) == 1 and get_character_cell_size(cell.char) == 2


class ScreenBuffer:
    """Character grid bound to a Rich console."""

    def __init__(self, console: Console, width: Optional[int] = None, height: Optional[int] = None):
        self.console = console
        size = console.size
        self.width = max(0, width if width is not None else size.width)
        self.height = max(0, height if height is not None else size.height)
        self._cells: Grid = _blank_grid(self.width, self.height)
        self._drawn: Optional[Grid] = None

    # Geometry

    def resize(self, width: int, height: int) -> None:
        """Recreate the grid at new dimensions; the next draw is always full."""
        self.width = max(0, width)
        self.height = max(0, height)
        self._cells = _blank_grid(self.width, self.height)
        self._drawn = None

    def invalidate(self) -> None:
        """Forget what the terminal shows so the next draw repaints everything."""
        self._drawn = None

    # Composition

    def fill(self, cell: Cell = BLANK) -> None:
        for row in self._cells:
            row[:] = [cell] * self.width

    def put(self, x: int, y: int, text: str, style: Optional[Style] = None, max_width: Optional[int] = None) -> int:
        """
        Write text starting at (x, y), clipped to the grid. Returns cells written.

        Widths are terminal columns: a double-width character takes its own cell
        plus a trailing filler cell, and zero-width characters are dropped.
        """
        if y < 0 or y >= self.height or x >= self.width:
            return 0
        style = style or Style()
        end = self._writable_end(y)
        if max_width is not None:
            end = min(end, x + max(0, max_width))
        written = 0
        col = x
        for char in text:
            if col >= end:
                break
            # Control characters would move the real cursor
            if not char.isprintable():
                char = " "
            size = get_character_cell_size(char)
            if size == 0:
                continue
            if col < 0:
                # A wide character straddling the left edge leaves a blank behind
                if col + size > 0 and end > 0:
                    self._set(0, y, Cell(" ", style))
                    written += 1
                col += size
                continue
            if size == 2 and col + 1 >= end:
                self._set(col, y, Cell(" ", style))
                written += 1
                break
            self._set(col, y, Cell(char, style))
            written += 1
            if size == 2:
                self._set(col + 1, y, Cell(WIDE_FILLER, style))
                written += 1
            col += size
        return written

    def _set(self, x: int, y: int, cell: Cell) -> None:
        row = self._cells[y]
        # Never leave half of a double-width character behind
        if cell.char != WIDE_FILLER and row[x].char == WIDE_FILLER and x > 0 and _is_wide(row[x - 1]):
            row[x - 1] = Cell(" ", row[x - 1].style)
        if _is_wide(row[x]) and x + 1 < self.width and row[x + 1].char == WIDE_FILLER:
            row[x + 1] = Cell(" ", row[x + 1].style)
        row[x] = cell

    def _writable_end(self, y: int) -> int:
        # Printing into the bottom-right corner scrolls terminals without deferred wrap
        if y == self.height - 1:
            return self.width - 1
        return self.width

    def get(self, x: int, y: int) -> Cell:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        return "".join(cell.char for cell in self._cells[y])

    def lines(self) -> list[str]:
        return [self.row_text(y) for y in range(self.height)]

    # Output

    def changed_cells(self) -> int:
        """Number of cells a delta draw would write right now."""
        if self._drawn is None:
            return self.width * self.height
        return sum(len(run) for _, _, run in self._delta_runs())

    def draw(self, delta: bool = True) -> int:
        """Flush to the terminal. Returns the number of cells written."""
        if not delta or self._drawn is None:
            written = self._draw_full()
        else:
            written = self._draw_delta()
        self._drawn = [row[:] for row in self._cells]
        return written

    def move_cursor(self, x: int, y: int) -> None:
        self.console.control(Control.move_to(x, y))

    def _draw_full(self) -> int:
        with self.console:
            self.console.control(Control.clear(), Control.home())
            for y in range(self.height):
                for x, run in self._row_runs(y, 0, self._writable_end(y)):
                    self._write_run(x, y, run)
        return self.width * self.height

    def _draw_delta(self) -> int:
        written = 0
        with self.console:
            for x, y, run in self._delta_runs():
                self._write_run(x, y, run)
                written += len(run)
        return written

    def _delta_runs(self) -> Iterator[tuple[int, int, list[Cell]]]:
        drawn = self._drawn or []
        for y, row in enumerate(self._cells):
            previous = drawn[y] if y < len(drawn) else []
            x = 0
            while x < self.width:
                if x < len(previous) and previous[x] == row[x]:
                    x += 1
                    continue
                start = x
                while x < self.width and not (x < len(previous) and previous[x] == row[x]):
                    x += 1
                for run_x, run in self._row_runs(y, start, x):
                    yield run_x, y, run

    def _row_runs(self, y: int, start: int, end: int) -> Iterator[tuple[int, list[Cell]]]:
        """Split row[start:end] into runs of identically styled cells."""
        row = self._cells[y]
        x = start
        while x < end:
            run_start = x
            style = row[x].style
            while x < end and row[x].style == style:
                x += 1
            yield run_start, row[run_start:x]

    def _write_run(self, x: int, y: int, run: list[Cell]) -> None:
        # Filler cells join to nothing; the wide character before them covers both columns
        self.console.control(Control.move_to(x, y))
        text = Text("".join(cell.char for cell in run), style=run[0].style, end="")
        self.console.print(text, end="", soft_wrap=True, highlight=False)
