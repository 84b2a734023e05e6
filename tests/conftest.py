import io
import os
import sys
from datetime import datetime

import pytest
from rich.console import Console

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from dashboard.display import DisplayRenderer, RenderMode  # noqa: E402

FIXED_NOW = datetime(2025, 3, 14, 12, 34, 56)


def make_console(width: int = 80, height: int = 24) -> Console:
    return Console(
        file=io.StringIO(),
        width=width,
        height=height,
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )


class RecordingRenderer(DisplayRenderer):
    """Renderer that remembers which modes it was asked to draw with."""

    def __init__(self, *args, events=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.modes = []
        self.events = events if events is not None else []

    def render(self, snapshot, mode=None):
        mode = mode or RenderMode.DELTA
        self.modes.append(mode)
        return super().render(snapshot, mode)

    def clear_screen(self):
        self.events.append("clear")
        super().clear_screen()


class FakeKeyboard:
    def __init__(self, events=None):
        self.events = events if events is not None else []
        self.released = 0
        self.on_key = None

    def capture(self, loop, on_key):
        self.on_key = on_key
        return True

    def release(self):
        self.released += 1
        self.events.append("release")


@pytest.fixture
def console():
    return make_console()


@pytest.fixture
def renderer(console):
    return DisplayRenderer(console, title="Jamulus stream", clock=lambda: FIXED_NOW)
