"""Tests for key decoding and keyboard capture fallbacks."""

import io

import pytest

from dashboard.terminal_input import KeyboardInput, decode_keys


@pytest.mark.parametrize(
    "raw, keys",
    [
        ("q", ["q"]),
        ("\x03", ["CTRL_C"]),
        ("rq", ["r", "q"]),
        ("\x1b[A", ["UP"]),
        ("\x1bOD", ["LEFT"]),
        ("\x1b", ["ESCAPE"]),
        ("\x1bx", ["ESCAPE", "x"]),
        ("\r", ["ENTER"]),
        ("\x01", []),
        ("é", ["é"]),
    ],
)
def test_decode_keys(raw, keys):
    assert decode_keys(raw) == keys


def test_capture_skipped_without_tty():
    keyboard = KeyboardInput(stream=io.StringIO())

    assert keyboard.capture(loop=None, on_key=lambda key: None) is False
    assert not keyboard.is_capturing
    keyboard.release()
    keyboard.release()
