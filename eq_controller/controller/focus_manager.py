from __future__ import annotations

from typing import Callable, Optional

from eq_controller.controller.dialog_controller import EqualizerDialog
from eq_controller.keys import KeyEvent
from eq_controller.widgets.common import shift_modifier_active


class FocusManager:
    """Routes bound key chords into the dialog and reports host focus changes."""

    def __init__(self, dialog: EqualizerDialog, binding_manager, *, logger: Optional[Callable[..., None]] = None) -> None:
        self.dialog = dialog
        self.binding_manager = binding_manager
        self._logger = logger

    def register_key_bindings(self, chords=None, *, widgets=None) -> list[str]:
        """Register one action per chord of the active scheme; returns the chords registered.

        ``widgets`` limits the Tk widgets each chord is bound on; by default the
        binding manager binds on its root widget.
        """

        if chords is None:
            chords = self.binding_manager.config.get_scheme().bindings.keys()
        registered: list[str] = []
        for chord in chords:
            try:
                event = KeyEvent.parse(chord)
            except ValueError:
                self._log("Ignoring binding for unknown chord %s", chord)
                continue
            self.binding_manager.register_action(chord, self._make_handler(event), widgets=widgets)
            registered.append(chord)
        return registered

    def _make_handler(self, event: KeyEvent) -> Callable[..., Optional[str]]:
        def _handler(tk_event: object = None) -> Optional[str]:
            return "break" if self.dialog.handle_key(resolve_event(event, tk_event)) else None

        return _handler

    def widget_focused(self, widget_id: str) -> None:
        self.dialog.notify_focus_in(widget_id)

    def _log(self, message: str, *args: object) -> None:
        if self._logger is None:
            return
        try:
            self._logger(message, *args)
        except Exception:
            pass


def resolve_event(registered: KeyEvent, tk_event: object = None) -> KeyEvent:
    """Merge the chord a binding was registered for with the live Tk modifier state.

    A bare ``<Up>`` binding also fires for Shift+Up, and X11 reports
    Shift+Tab as ``ISO_Left_Tab``; both should reach the dialog shifted.
    """

    if tk_event is None:
        return registered
    keysym = str(getattr(tk_event, "keysym", "") or "")
    live = KeyEvent.from_tk(keysym, shift=shift_modifier_active(tk_event))
    if live is None or live.key is not registered.key:
        return registered
    return KeyEvent(registered.key, registered.shift or live.shift)
