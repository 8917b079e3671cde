from __future__ import annotations

from eq_controller.controller.focus_context import FocusContext
from eq_controller.keys import Key, KeyEvent
from eq_controller.widgets import ActionButton, FocusableWidget, NestedActivatableGroup, ValueControl


class FakeHost:
    def __init__(self) -> None:
        self.requests: list[str] = []

    def focus(self, widget: FocusableWidget) -> bool:
        self.requests.append(widget.widget_id)
        return True

    def list_focusable_descendants(self, container) -> list[FocusableWidget]:
        return []


def _build(count: int = 3):
    context = FocusContext(FakeHost())
    faders = [ValueControl(f"fader-{idx}", minimum=-20, maximum=20) for idx in range(count)]
    group = NestedActivatableGroup("faders", faders, context=context, label="EQ fader controls")
    context.request_focus(group.handle)
    return context, group, faders


def test_collapsed_group_exposes_only_the_handle() -> None:
    _context, group, faders = _build()

    assert group.tab_stop() is group.handle
    assert group.handle.widget_id == "faders-handle"
    assert group.handle.label == "EQ fader controls"
    assert group.owns(group.handle)
    assert group.owns(faders[1])
    assert not group.activated


def test_enter_activates_onto_first_member() -> None:
    context, group, faders = _build()

    assert group.handle_key(KeyEvent(Key.ENTER)) is True

    assert group.activated
    assert context.focused is faders[0]


def test_space_activates_but_shift_enter_does_not() -> None:
    context, group, faders = _build()

    assert group.handle_key(KeyEvent(Key.ENTER, shift=True)) is False
    assert not group.activated
    assert group.handle_key(KeyEvent(Key.SPACE)) is True
    assert context.focused is faders[0]


def test_tab_wraps_inside_activated_group() -> None:
    context, group, faders = _build()
    group.activate()

    group.handle_key(KeyEvent(Key.TAB))
    group.handle_key(KeyEvent(Key.TAB))
    assert context.focused is faders[2]
    assert group.handle_key(KeyEvent(Key.TAB)) is True
    assert context.focused is faders[0]
    assert group.handle_key(KeyEvent(Key.TAB, shift=True)) is True
    assert context.focused is faders[2]


def test_escape_collapses_back_to_handle() -> None:
    context, group, faders = _build()
    group.activate()
    group.handle_key(KeyEvent(Key.ARROW_UP))

    assert group.handle_key(KeyEvent(Key.ESCAPE)) is True

    assert not group.activated
    assert context.focused is group.handle
    assert faders[0].get_value() == 1


def test_value_keys_reach_the_focused_fader() -> None:
    _context, group, faders = _build()
    group.activate()
    group.handle_key(KeyEvent(Key.TAB))

    assert group.handle_key(KeyEvent(Key.PAGE_UP)) is True
    assert faders[1].get_value() == 5
    assert faders[0].get_value() == 0


def test_focus_leaving_collapses_without_refocus() -> None:
    context, group, _faders = _build()
    group.activate()
    outsider = ActionButton("apply")
    requests_before = len(context.host.requests)

    context.notify_focus_in(outsider)

    assert not group.activated
    assert context.focused is outsider
    assert len(context.host.requests) == requests_before


def test_pointer_focus_on_handle_collapses() -> None:
    context, group, _faders = _build()
    group.activate()

    context.notify_focus_in(group.handle)

    assert not group.activated


def test_collapse_when_already_collapsed_is_a_noop() -> None:
    context, group, _faders = _build()
    requests_before = list(context.host.requests)

    assert group.collapse() is False
    assert context.host.requests == requests_before


def test_keys_other_than_activation_pass_through_when_collapsed() -> None:
    context, group, faders = _build()

    assert group.handle_key(KeyEvent(Key.TAB)) is False
    assert group.handle_key(KeyEvent(Key.ARROW_UP)) is False
    assert faders[0].get_value() == 0
    assert context.focused is group.handle


def test_empty_group_stays_collapsed() -> None:
    context = FocusContext(FakeHost())
    group = NestedActivatableGroup("faders", [], context=context)
    context.request_focus(group.handle)

    assert group.activate() is False
    group.handle_key(KeyEvent(Key.ENTER))

    assert not group.activated
    assert context.focused is group.handle
