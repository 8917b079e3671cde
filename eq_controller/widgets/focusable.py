from __future__ import annotations

from typing import Callable, Optional, Sequence

from eq_controller.keys import Key, KeyEvent


class FocusableWidget:
    """Leaf control that can hold input focus.

    The engine only ever compares widgets by identity; ``widget_id`` is the
    stable name hosts use to map a handle back to their own toolkit object.
    """

    def __init__(self, widget_id: str, *, label: str = "", can_focus: bool = True, disabled: bool = False) -> None:
        self.widget_id = widget_id
        self.label = label or widget_id
        self.can_focus = can_focus
        self.disabled = disabled
        self.attached = True

    def is_focusable(self) -> bool:
        return self.can_focus and not self.disabled and self.attached

    def set_enabled(self, enabled: bool) -> None:
        self.disabled = not enabled

    def detach(self) -> None:
        self.attached = False

    def attach(self) -> None:
        self.attached = True

    def handle_key(self, event: KeyEvent) -> bool:
        return False

    def on_focus(self) -> None:
        return None

    def on_blur(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.widget_id!r})"


class ActionButton(FocusableWidget):
    """Push button; Enter/Space invoke the command."""

    def __init__(self, widget_id: str, *, label: str = "", command: Optional[Callable[[], None]] = None) -> None:
        super().__init__(widget_id, label=label)
        self._command = command

    def set_command(self, command: Optional[Callable[[], None]]) -> None:
        self._command = command

    def invoke(self) -> bool:
        if self.disabled or self._command is None:
            return False
        self._command()
        return True

    def handle_key(self, event: KeyEvent) -> bool:
        if event.shift or event.key not in (Key.ENTER, Key.SPACE):
            return False
        self.invoke()
        return True


class PresetDropdown(FocusableWidget):
    """Preset selector. Arrow keys belong to the surrounding toolbar; Enter/Space open the picker."""

    def __init__(
        self,
        widget_id: str,
        options: Sequence[str],
        *,
        label: str = "",
        selected: Optional[str] = None,
        on_open: Optional[Callable[["PresetDropdown"], None]] = None,
        on_select: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__(widget_id, label=label)
        self.options = list(options)
        if not self.options:
            raise ValueError("PresetDropdown requires at least one option")
        self.selected = selected if selected in self.options else self.options[0]
        self._on_open = on_open
        self._on_select = on_select

    def set_open_callback(self, callback: Optional[Callable[["PresetDropdown"], None]]) -> None:
        self._on_open = callback

    def select(self, name: str) -> bool:
        if name not in self.options:
            return False
        if name == self.selected:
            return True
        self.selected = name
        if self._on_select is not None:
            self._on_select(name)
        return True

    def handle_key(self, event: KeyEvent) -> bool:
        if event.key not in (Key.ENTER, Key.SPACE):
            return False
        if self._on_open is not None:
            self._on_open(self)
        return True


class GroupHandle(FocusableWidget):
    """The container itself, used as the single tab stop of a collapsed nested group."""

    def __init__(self, widget_id: str, *, label: str = "") -> None:
        super().__init__(widget_id, label=label)


__all__ = ["ActionButton", "FocusableWidget", "GroupHandle", "PresetDropdown"]
