"""Key identifiers understood by the focus engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Key(str, Enum):
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    TAB = "Tab"
    ESCAPE = "Escape"
    ENTER = "Enter"
    SPACE = "Space"
    F6 = "F6"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    HOME = "Home"
    END = "End"


class Direction(Enum):
    NEXT = 1
    PREV = -1


ARROW_DIRECTIONS = {
    Key.ARROW_RIGHT: Direction.NEXT,
    Key.ARROW_DOWN: Direction.NEXT,
    Key.ARROW_LEFT: Direction.PREV,
    Key.ARROW_UP: Direction.PREV,
}

# Tk keysyms -> engine keys. ISO_Left_Tab is what X11 reports for Shift+Tab.
TK_KEYSYMS = {
    "Up": Key.ARROW_UP,
    "Down": Key.ARROW_DOWN,
    "Left": Key.ARROW_LEFT,
    "Right": Key.ARROW_RIGHT,
    "Tab": Key.TAB,
    "ISO_Left_Tab": Key.TAB,
    "Escape": Key.ESCAPE,
    "Return": Key.ENTER,
    "KP_Enter": Key.ENTER,
    "space": Key.SPACE,
    "F6": Key.F6,
    "Prior": Key.PAGE_UP,
    "Next": Key.PAGE_DOWN,
    "Home": Key.HOME,
    "End": Key.END,
}

_ALIASES = {
    "spacebar": Key.SPACE,
    "return": Key.ENTER,
    "esc": Key.ESCAPE,
    "up": Key.ARROW_UP,
    "down": Key.ARROW_DOWN,
    "left": Key.ARROW_LEFT,
    "right": Key.ARROW_RIGHT,
}


@dataclass(frozen=True)
class KeyEvent:
    """A single key press as seen by the dialog."""

    key: Key
    shift: bool = False

    @property
    def chord(self) -> str:
        return f"Shift+{self.key.value}" if self.shift else self.key.value

    @classmethod
    def parse(cls, chord: str) -> "KeyEvent":
        """Parse ``"Tab"``, ``"Shift+F6"`` and friends; raises ValueError when unknown."""

        token = chord.strip()
        shift = False
        if token.lower().startswith("shift+"):
            shift = True
            token = token[len("shift+"):]
        key = _lookup_key(token)
        if key is None:
            raise ValueError(f"Unknown key chord '{chord}'")
        return cls(key, shift)

    @classmethod
    def from_tk(cls, keysym: str, *, shift: bool = False) -> Optional["KeyEvent"]:
        key = TK_KEYSYMS.get(keysym)
        if key is None:
            return None
        return cls(key, shift or keysym == "ISO_Left_Tab")


def _lookup_key(token: str) -> Optional[Key]:
    stripped = token.strip()
    for key in Key:
        if key.value.lower() == stripped.lower():
            return key
    return _ALIASES.get(stripped.lower())


def arrow_direction(key: Key) -> Optional[Direction]:
    return ARROW_DIRECTIONS.get(key)


__all__ = ["Direction", "Key", "KeyEvent", "TK_KEYSYMS", "arrow_direction"]
