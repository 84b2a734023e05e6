"""Raw keyboard capture for the dashboard (POSIX terminals)."""

from __future__ import annotations

import asyncio
import os
import sys
import termios
import tty
from typing import Any, Callable, Optional, TextIO

from core.logging_utils import get_logger

logger = get_logger(__name__)

CONTROL_KEYS = {
    "\x03": "CTRL_C",
    "\x04": "CTRL_D",
    "\x09": "TAB",
    "\x0a": "ENTER",
    "\x0d": "ENTER",
    "\x0c": "CTRL_L",
    "\x7f": "BACKSPACE",
}

ESCAPE_SEQUENCES = {
    "\x1b[A": "UP",
    "\x1b[B": "DOWN",
    "\x1b[C": "RIGHT",
    "\x1b[D": "LEFT",
    "\x1b[H": "HOME",
    "\x1b[F": "END",
    "\x1bOA": "UP",
    "\x1bOB": "DOWN",
    "\x1bOC": "RIGHT",
    "\x1bOD": "LEFT",
    "\x1bOH": "HOME",
    "\x1bOF": "END",
}


def decode_keys(raw: str) -> list[str]:
    """Split a chunk of terminal input into key names."""
    keys: list[str] = []
    i = 0
    while i < len(raw):
        if raw[i] == "\x1b":
            for seq, name in ESCAPE_SEQUENCES.items():
                if raw.startswith(seq, i):
                    keys.append(name)
                    i += len(seq)
                    break
            else:
                keys.append("ESCAPE")
                i += 1
            continue
        char = raw[i]
        if char in CONTROL_KEYS:
            keys.append(CONTROL_KEYS[char])
        elif char.isprintable():
            keys.append(char)
        i += 1
    return keys


class KeyboardInput:
    """
    Puts stdin into cbreak mode and delivers decoded keys through the event loop.

    Capture is skipped when stdin is not a terminal; release() is safe to call
    any number of times.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdin
        self._fd: Optional[int] = None
        self._saved_attrs: Optional[list[Any]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._on_key: Optional[Callable[[str], None]] = None

    @property
    def is_capturing(self) -> bool:
        return self._fd is not None

    def capture(self, loop: asyncio.AbstractEventLoop, on_key: Callable[[str], None]) -> bool:
        if self._fd is not None:
            return True
        if not self._stream.isatty():
            logger.info("[KEYS] stdin is not a terminal, keyboard controls disabled")
            return False

        fd = self._stream.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._fd = fd
        self._loop = loop
        self._on_key = on_key
        loop.add_reader(fd, self._on_readable)
        return True

    def release(self) -> None:
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        if self._loop is not None:
            self._loop.remove_reader(fd)
        if self._saved_attrs is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_attrs)
        self._saved_attrs = None
        self._loop = None
        self._on_key = None

    def _on_readable(self) -> None:
        if self._fd is None:
            return
        raw = os.read(self._fd, 1024)
        for key in decode_keys(raw.decode("utf-8", errors="ignore")):
            # A quit key releases capture mid-chunk
            if self._on_key is None:
                break
            self._on_key(key)
