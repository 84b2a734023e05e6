"""
Main Dashboard Display - participant table for a live session.

Layout is fixed:
- row 0: title and wall-clock time
- row 2: column headers, row 3: separator rule
- row 4 onward: one row per participant with a non-blank name
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from rich.console import Console
from rich.style import Style

from core.config import settings
from core.instruments import instrument_label
from core.logging_utils import get_logger
from core.state import DashboardSnapshot
from dashboard.screen_buffer import ScreenBuffer

logger = get_logger(__name__)

TITLE_X, TITLE_Y = 2, 0
CLOCK_X, CLOCK_Y = 20, 0
HEADER_Y = 2
SEPARATOR_Y = 3
FIRST_ROW_Y = 4
EMPTY_MESSAGE_Y = 5
CURSOR_REST = (0, 0)

NAME_X = 0
LEVEL_X = 20
INSTRUMENT_X = 40
SEPARATOR_WIDTH = 60
SEPARATOR_GLYPH = "─"

MAX_LEVEL = 8
BAR_WIDTH = 16
BAR_GLYPH = "|"

NO_USERS_MESSAGE = "No users connected."

TITLE_STYLE = Style(color="yellow", bold=True)
CLOCK_STYLE = Style(color="white")
HEADER_STYLE = Style(color="cyan", bold=True)
SEPARATOR_STYLE = Style(color="cyan")
PLAIN_STYLE = Style()

# (upper bound inclusive, color); anything above the last bound is "hot"
LEVEL_COLORS = ((3, "green"), (6, "yellow"))
HOT_COLOR = "red"


class RenderMode(Enum):
    FULL = "full"
    DELTA = "delta"


def _level_value(level: Any) -> float:
    """Numeric view of a level reading; unusable values read as 0."""
    if isinstance(level, bool):
        return float(level)
    try:
        value = float(level)
    except OverflowError:
        # Integers beyond float range
        return math.inf if level > 0 else -math.inf
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return value


def bar_length(level: Any) -> int:
    """floor(level / 8 * 16), clamped to [0, 16]."""
    value = _level_value(level)
    if math.isinf(value):
        return BAR_WIDTH if value > 0 else 0
    return max(0, min(BAR_WIDTH, math.floor(value / MAX_LEVEL * BAR_WIDTH)))


def bar_color(level: Any) -> str:
    value = _level_value(level)
    for bound, color in LEVEL_COLORS:
        if value <= bound:
            return color
    return HOT_COLOR


def level_bar(level: Any) -> str:
    return BAR_GLYPH * bar_length(level)


class DisplayRenderer:
    """Paints a DashboardSnapshot into a ScreenBuffer and flushes it."""

    def __init__(
        self,
        console: Optional[Console] = None,
        title: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.console = console or Console()
        self.title = title if title is not None else settings.dashboard_title
        self._clock = clock or datetime.now
        self.buffer = ScreenBuffer(self.console)
        self._pending_size: Optional[tuple[int, int]] = None
        self.rows_rendered = 0
        self.last_mode: Optional[RenderMode] = None
        self.last_cells_written = 0

    def resize(self, width: int, height: int) -> None:
        """Adopt new terminal dimensions; takes effect on the next full render."""
        self._pending_size = (width, height)
        self.buffer.resize(width, height)

    def render(self, snapshot: DashboardSnapshot, mode: RenderMode = RenderMode.DELTA) -> int:
        """Compose the table and flush it. Returns the number of cells written."""
        if mode is RenderMode.FULL:
            if self._pending_size is not None:
                width, height = self._pending_size
                self._pending_size = None
            else:
                size = self.console.size
                width, height = size.width, size.height
            self.buffer.resize(width, height)

        self.buffer.fill()
        self.rows_rendered = self._compose(snapshot)
        written = self.buffer.draw(delta=mode is RenderMode.DELTA)
        self.buffer.move_cursor(*CURSOR_REST)

        self.last_mode = mode
        self.last_cells_written = written
        logger.debug("[DASH] %s render: %s rows, %s cells", mode.value, self.rows_rendered, written)
        return written

    def clear_screen(self) -> None:
        self.console.clear()
        self.console.show_cursor(True)
        self.buffer.invalidate()

    def _compose(self, snapshot: DashboardSnapshot) -> int:
        buf = self.buffer

        buf.put(TITLE_X, TITLE_Y, self.title, TITLE_STYLE)
        buf.put(CLOCK_X, CLOCK_Y, self._clock().strftime("%X"), CLOCK_STYLE)

        buf.put(NAME_X, HEADER_Y, "Name", HEADER_STYLE)
        buf.put(LEVEL_X, HEADER_Y, "Level", HEADER_STYLE)
        buf.put(INSTRUMENT_X, HEADER_Y, "Instrument", HEADER_STYLE)
        buf.put(0, SEPARATOR_Y, SEPARATOR_GLYPH * SEPARATOR_WIDTH, SEPARATOR_STYLE)

        visible = snapshot.visible_participants
        if not visible:
            buf.put(0, EMPTY_MESSAGE_Y, NO_USERS_MESSAGE, PLAIN_STYLE)
            return 0

        y = FIRST_ROW_Y
        for index, participant in visible:
            # Levels are positional against the unfiltered participant list
            level = snapshot.level_for(index)
            buf.put(NAME_X, y, participant.display_name, PLAIN_STYLE, max_width=LEVEL_X - NAME_X - 1)
            buf.put(LEVEL_X, y, level_bar(level), Style(color=bar_color(level)))
            buf.put(INSTRUMENT_X, y, instrument_label(participant.instrument), PLAIN_STYLE)
            y += 1
        return len(visible)
