from __future__ import annotations

import types

from eq_controller.controller.focus_manager import FocusManager, resolve_event
from eq_controller.input_bindings import BindingConfig
from eq_controller.keys import Key, KeyEvent


class DummyBindingManager:
    def __init__(self) -> None:
        self.config = BindingConfig.default()
        self.actions = {}

    def register_action(self, name, func, widgets=None):
        self.actions[name] = {"func": func, "widgets": widgets or []}


class RecordingDialog:
    def __init__(self, consumed: bool = True) -> None:
        self.consumed = consumed
        self.events: list[KeyEvent] = []
        self.focused: list[str] = []

    def handle_key(self, event: KeyEvent) -> bool:
        self.events.append(event)
        return self.consumed

    def notify_focus_in(self, widget_id: str) -> None:
        self.focused.append(widget_id)


def test_registers_every_chord_of_active_scheme() -> None:
    bindings = DummyBindingManager()
    fm = FocusManager(RecordingDialog(), bindings)

    chords = fm.register_key_bindings()

    assert set(chords) == set(bindings.config.get_scheme().bindings)
    assert "Shift+F6" in bindings.actions


def test_handler_returns_break_only_when_consumed() -> None:
    bindings = DummyBindingManager()
    dialog = RecordingDialog()
    fm = FocusManager(dialog, bindings)
    targets = [object(), object()]
    fm.register_key_bindings(["Tab", "Shift+F6"], widgets=targets)

    assert bindings.actions["Tab"]["widgets"] == targets
    assert bindings.actions["Tab"]["func"]() == "break"
    assert bindings.actions["Shift+F6"]["func"]() == "break"
    assert dialog.events == [KeyEvent(Key.TAB), KeyEvent(Key.F6, shift=True)]

    dialog.consumed = False
    assert bindings.actions["Tab"]["func"]() is None


def test_unknown_chords_are_skipped_and_logged() -> None:
    messages: list[str] = []
    bindings = DummyBindingManager()
    fm = FocusManager(RecordingDialog(), bindings, logger=lambda msg, *args: messages.append(msg % args))

    chords = fm.register_key_bindings(["Tab", "Ctrl+Q"])

    assert chords == ["Tab"]
    assert "Ctrl+Q" not in bindings.actions
    assert messages == ["Ignoring binding for unknown chord Ctrl+Q"]


def test_live_shift_state_reaches_dialog() -> None:
    bindings = DummyBindingManager()
    dialog = RecordingDialog()
    fm = FocusManager(dialog, bindings)
    fm.register_key_bindings(["ArrowUp", "Tab"])

    bindings.actions["ArrowUp"]["func"](types.SimpleNamespace(keysym="Up", state=0x0001))
    bindings.actions["Tab"]["func"](types.SimpleNamespace(keysym="ISO_Left_Tab", state=0))

    assert dialog.events == [KeyEvent(Key.ARROW_UP, shift=True), KeyEvent(Key.TAB, shift=True)]


def test_resolve_event_keeps_registered_key() -> None:
    registered = KeyEvent(Key.F6, shift=True)
    assert resolve_event(registered) is registered
    assert resolve_event(registered, types.SimpleNamespace(keysym="F6", state=0)) == registered
    assert resolve_event(KeyEvent(Key.HOME), types.SimpleNamespace(keysym="??", state=1)) == KeyEvent(Key.HOME)


def test_widget_focused_forwards_to_dialog() -> None:
    dialog = RecordingDialog()
    fm = FocusManager(dialog, DummyBindingManager())
    fm.widget_focused("apply")
    assert dialog.focused == ["apply"]
