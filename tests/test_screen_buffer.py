"""Tests for the character grid and its full/delta flushing."""

from rich.cells import cell_len
from rich.style import Style

from conftest import make_console
from dashboard.screen_buffer import BLANK, WIDE_FILLER, Cell, ScreenBuffer


def test_buffer_takes_console_dimensions():
    buf = ScreenBuffer(make_console(width=40, height=10))

    assert (buf.width, buf.height) == (40, 10)
    assert buf.row_text(0) == " " * 40


def test_put_clips_at_edges():
    buf = ScreenBuffer(make_console(width=10, height=3))

    assert buf.put(7, 0, "abcdef") == 3
    assert buf.row_text(0) == "       abc"
    assert buf.put(-2, 1, "xyz") == 1
    assert buf.row_text(1) == "z         "
    assert buf.put(0, 5, "off-grid") == 0
    assert buf.put(0, -1, "off-grid") == 0


def test_put_replaces_control_characters():
    buf = ScreenBuffer(make_console(width=10, height=1))
    buf.put(0, 0, "a\x1b[2Jb")

    assert buf.row_text(0).startswith("a [2Jb")


def test_put_applies_style_and_max_width():
    buf = ScreenBuffer(make_console(width=10, height=1))
    style = Style(color="cyan", bold=True)
    buf.put(0, 0, "abcdef", style, max_width=3)

    assert buf.row_text(0) == "abc       "
    assert buf.get(0, 0) == Cell("a", style)
    assert buf.get(3, 0) == BLANK


def test_first_draw_is_full_then_deltas_track_changes():
    buf = ScreenBuffer(make_console(width=20, height=4))
    buf.put(0, 0, "hello")

    assert buf.draw(delta=True) == 20 * 4
    assert buf.changed_cells() == 0

    buf.fill()
    buf.put(0, 0, "help")
    # "lo" -> "p " : two cells differ
    assert buf.changed_cells() == 2
    assert buf.draw(delta=True) == 2
    assert buf.draw(delta=True) == 0


def test_style_change_alone_counts_as_changed():
    buf = ScreenBuffer(make_console(width=10, height=1))
    buf.put(0, 0, "||", Style(color="green"))
    buf.draw(delta=False)

    buf.put(0, 0, "||", Style(color="red"))
    assert buf.draw(delta=True) == 2


def test_resize_discards_previous_frame():
    buf = ScreenBuffer(make_console(width=10, height=2))
    buf.put(0, 0, "abc")
    buf.draw()

    buf.resize(12, 3)

    assert (buf.width, buf.height) == (12, 3)
    assert buf.row_text(0) == " " * 12
    assert buf.draw(delta=True) == 12 * 3


def test_full_draw_writes_text_to_console():
    console = make_console(width=20, height=2)
    buf = ScreenBuffer(console)
    buf.put(3, 1, "grid")
    buf.draw(delta=False)

    assert "grid" in console.file.getvalue()


def test_wide_characters_take_two_cells():
    buf = ScreenBuffer(make_console(width=10, height=2))

    assert buf.put(0, 0, "日本a") == 5
    assert buf.get(0, 0).char == "日"
    assert buf.get(1, 0).char == WIDE_FILLER
    assert buf.get(4, 0).char == "a"
    assert cell_len(buf.row_text(0)) == 10


def test_wide_character_that_does_not_fit_becomes_blank():
    buf = ScreenBuffer(make_console(width=10, height=2))
    buf.put(0, 0, "abc日本", max_width=4)

    assert buf.row_text(0) == "abc " + " " * 6
    buf.put(8, 0, "xy語")
    assert cell_len(buf.row_text(0)) == 10


def test_overwriting_half_a_wide_character_blanks_the_other_half():
    buf = ScreenBuffer(make_console(width=10, height=2))
    buf.put(0, 0, "日本")
    buf.put(1, 0, "x")

    assert buf.row_text(0).startswith(" x本")
    assert cell_len(buf.row_text(0)) == 10

    buf.put(2, 0, "y")
    assert buf.row_text(0).startswith(" xy ")
    assert cell_len(buf.row_text(0)) == 10


def test_bottom_right_cell_is_never_written():
    console = make_console(width=5, height=2)
    buf = ScreenBuffer(console)

    assert buf.put(0, 1, "abcdef") == 4
    assert buf.row_text(1) == "abcd "
    assert buf.put(0, 0, "abcdef") == 5

    buf.draw(delta=False)
    out = console.file.getvalue()
    assert "abcd" in out
    assert "abcde" in out
