from __future__ import annotations

import types

import pytest

from eq_controller.keys import Direction, Key, KeyEvent, arrow_direction
from eq_controller.widgets.common import format_decibels, shift_modifier_active


def test_parse_accepts_plain_and_shifted_chords() -> None:
    assert KeyEvent.parse("Tab") == KeyEvent(Key.TAB)
    assert KeyEvent.parse("Shift+F6") == KeyEvent(Key.F6, shift=True)
    assert KeyEvent.parse("shift+tab").chord == "Shift+Tab"
    assert KeyEvent.parse("Esc").key is Key.ESCAPE
    assert KeyEvent.parse("spacebar").key is Key.SPACE


def test_parse_rejects_unknown_chord() -> None:
    with pytest.raises(ValueError):
        KeyEvent.parse("Ctrl+Q")


def test_from_tk_maps_keysyms() -> None:
    assert KeyEvent.from_tk("Up") == KeyEvent(Key.ARROW_UP)
    assert KeyEvent.from_tk("Prior").key is Key.PAGE_UP
    # X11 reports Shift+Tab as ISO_Left_Tab with or without the state bit.
    assert KeyEvent.from_tk("ISO_Left_Tab") == KeyEvent(Key.TAB, shift=True)
    assert KeyEvent.from_tk("F6", shift=True) == KeyEvent(Key.F6, shift=True)
    assert KeyEvent.from_tk("q") is None


def test_arrow_direction() -> None:
    assert arrow_direction(Key.ARROW_RIGHT) is Direction.NEXT
    assert arrow_direction(Key.ARROW_DOWN) is Direction.NEXT
    assert arrow_direction(Key.ARROW_LEFT) is Direction.PREV
    assert arrow_direction(Key.ARROW_UP) is Direction.PREV
    assert arrow_direction(Key.TAB) is None


def test_shift_modifier_reads_event_state() -> None:
    assert shift_modifier_active(types.SimpleNamespace(state=0x0001))
    assert not shift_modifier_active(types.SimpleNamespace(state=0x0004))
    assert not shift_modifier_active(types.SimpleNamespace(state="bogus"))
    assert not shift_modifier_active(None)


def test_format_decibels_is_signed() -> None:
    assert format_decibels(3) == "+3 dB"
    assert format_decibels(0) == "0 dB"
    assert format_decibels(-5) == "-5 dB"
