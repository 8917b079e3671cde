from __future__ import annotations

import math
from typing import Callable, Optional

from eq_controller.keys import Key, KeyEvent
from eq_controller.services.dialog_timers import DialogTimers
from eq_controller.widgets.common import format_decibels
from eq_controller.widgets.focusable import FocusableWidget

DEFAULT_READOUT_MS = 1500
STEP = 1
PAGE_STEP = 5


class ValueControl(FocusableWidget):
    """Bounded integer slider with keyboard step/page/home/end semantics.

    Value-changing keys show a transient readout that hides after
    ``readout_ms`` of inactivity or on blur. The readout is a plain
    visibility flag driven by ``timers``; it never blocks input.
    """

    def __init__(
        self,
        widget_id: str,
        *,
        minimum: int,
        maximum: int,
        value: int = 0,
        label: str = "",
        timers: Optional[DialogTimers] = None,
        readout_ms: int = DEFAULT_READOUT_MS,
        on_change: Optional[Callable[["ValueControl", int], None]] = None,
        on_readout: Optional[Callable[["ValueControl", bool], None]] = None,
    ) -> None:
        if minimum > maximum:
            raise ValueError(f"minimum {minimum} exceeds maximum {maximum} for {widget_id}")
        super().__init__(widget_id, label=label)
        self.minimum = int(minimum)
        self.maximum = int(maximum)
        self._value = self._clamp(value)
        self._timers = timers
        self.readout_ms = max(0, int(readout_ms))
        self._on_change = on_change
        self._on_readout = on_readout
        self.readout_visible = False

    @property
    def value(self) -> int:
        return self._value

    @property
    def readout_text(self) -> str:
        return format_decibels(self._value)

    @property
    def readout_key(self) -> str:
        return f"readout:{self.widget_id}"

    def set_change_callback(self, callback: Optional[Callable[["ValueControl", int], None]]) -> None:
        self._on_change = callback

    def set_readout_callback(self, callback: Optional[Callable[["ValueControl", bool], None]]) -> None:
        self._on_readout = callback

    def get_value(self) -> int:
        return self._value

    def set_value(self, value: float) -> int:
        if math.isnan(value):
            return self._value
        clamped = self._clamp(value)
        if clamped != self._value:
            self._value = clamped
            if self._on_change is not None:
                self._on_change(self, clamped)
        return self._value

    def set_value_from_normalized_position(self, position: float) -> int:
        """Map a pointer position in [0, 1] (0 = minimum) onto the value range."""

        try:
            p = float(position)
        except (TypeError, ValueError):
            return self._value
        if math.isnan(p):
            return self._value
        p = max(0.0, min(1.0, p))
        raw = self.minimum + p * (self.maximum - self.minimum)
        return self.set_value(math.floor(raw + 0.5))

    def handle_key(self, event: KeyEvent) -> bool:
        target = self._target_for(event.key)
        if target is None:
            return False
        self.set_value(target)
        self.show_readout()
        return True

    def show_readout(self) -> None:
        if self._timers is None or self._timers.closed:
            return
        self._set_readout(True)
        self._timers.schedule(self.readout_key, self.hide_readout, delay_ms=self.readout_ms)

    def hide_readout(self) -> None:
        if self._timers is not None:
            self._timers.cancel(self.readout_key)
        self._set_readout(False)

    def on_blur(self) -> None:
        self.hide_readout()

    def _target_for(self, key: Key) -> Optional[int]:
        if key in (Key.ARROW_UP, Key.ARROW_RIGHT):
            return self._value + STEP
        if key in (Key.ARROW_DOWN, Key.ARROW_LEFT):
            return self._value - STEP
        if key is Key.PAGE_UP:
            return self._value + PAGE_STEP
        if key is Key.PAGE_DOWN:
            return self._value - PAGE_STEP
        if key is Key.HOME:
            return self.maximum
        if key is Key.END:
            return self.minimum
        return None

    def _set_readout(self, visible: bool) -> None:
        if visible == self.readout_visible:
            return
        self.readout_visible = visible
        if self._on_readout is not None:
            self._on_readout(self, visible)

    def _clamp(self, value: float) -> int:
        return round(max(self.minimum, min(self.maximum, value)))


__all__ = ["DEFAULT_READOUT_MS", "PAGE_STEP", "STEP", "ValueControl"]
