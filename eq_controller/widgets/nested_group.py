from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Optional

from eq_controller.keys import Direction, Key, KeyEvent
from eq_controller.widgets.focusable import FocusableWidget, GroupHandle
from eq_controller.widgets.roving_group import FocusGroup

if TYPE_CHECKING:
    from eq_controller.controller.focus_context import FocusContext


class NestedActivatableGroup(FocusGroup):
    """Single tab stop (the handle) until Enter/Space opens it into a Tab-navigable region.

    Collapsed: only ``handle`` is reachable. Activated: Tab/Shift+Tab wrap
    inside ``members`` and Escape collapses back onto the handle. Focus
    leaving the subtree collapses the group without moving focus.
    """

    def __init__(
        self,
        name: str,
        members: Iterable[FocusableWidget] = (),
        *,
        context: "FocusContext",
        handle: Optional[GroupHandle] = None,
        label: str = "",
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        self.handle = handle or GroupHandle(f"{name}-handle", label=label or name)
        self.activated = False
        super().__init__(name, members, context=context, logger=logger)

    def owns(self, widget: Optional[FocusableWidget]) -> bool:
        return widget is not None and (widget is self.handle or self.contains(widget))

    def tab_stop(self) -> FocusableWidget:
        return self.handle

    def is_tab_stop(self, widget: Optional[FocusableWidget]) -> bool:
        return widget is not None and widget is self.handle

    def activate(self) -> bool:
        if not self._members:
            self._log("Group %s has no members; staying collapsed", self.name)
            return False
        self.activated = True
        self._current_index = 0
        if not self.focus_member(0):
            self.activated = False
            return False
        self._log("Group %s activated", self.name)
        return True

    def collapse(self, *, refocus: bool = True) -> bool:
        """Return to the single-stop state; no-op when already collapsed."""

        if not self.activated:
            return False
        self.activated = False
        self._log("Group %s collapsed (refocus=%s)", self.name, refocus)
        if refocus:
            self.context.request_focus(self.handle)
        return True

    def handle_key(self, event: KeyEvent) -> bool:
        focused = self.context.focused
        if not self.activated:
            if focused is self.handle and event.key in (Key.ENTER, Key.SPACE) and not event.shift:
                self.activate()
                return True
            return False
        if not self.contains(focused):
            return False
        if event.key is Key.TAB:
            self.move(Direction.PREV if event.shift else Direction.NEXT)
            return True
        if event.key is Key.ESCAPE:
            self.collapse()
            return True
        return self._forward_to_member(event)

    def _handle_focus_change(self, previous: Optional[FocusableWidget], current: FocusableWidget) -> None:
        if not self.activated:
            return
        if current is self.handle or not self.contains(current):
            self.activated = False
            self._log("Group %s collapsed: focus moved to %s", self.name, current)
            return
        super()._handle_focus_change(previous, current)


__all__ = ["NestedActivatableGroup"]
