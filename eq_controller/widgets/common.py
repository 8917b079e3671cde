from __future__ import annotations

SHIFT_MASK = 0x0001


def shift_modifier_active(event: object | None) -> bool:
    """Return True when the Tk event state reports Shift held down."""

    state = getattr(event, "state", 0) or 0
    try:
        return bool(int(state) & SHIFT_MASK)
    except (TypeError, ValueError):
        return False


def format_decibels(value: int) -> str:
    """Signed readout text used by faders, e.g. ``+3 dB``."""

    return f"+{value} dB" if value > 0 else f"{value} dB"


__all__ = ["SHIFT_MASK", "format_decibels", "shift_modifier_active"]
