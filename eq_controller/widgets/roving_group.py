from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from eq_controller.keys import Direction, KeyEvent, arrow_direction
from eq_controller.widgets.focusable import FocusableWidget

if TYPE_CHECKING:
    from eq_controller.controller.focus_context import FocusContext


def _noop_log(message: str, *args: object) -> None:
    return None


class FocusGroup:
    """Ordered member list with a wrapping ``current_index``."""

    def __init__(
        self,
        name: str,
        members: Iterable[FocusableWidget] = (),
        *,
        context: "FocusContext",
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        self.name = name
        self.context = context
        self._members: List[FocusableWidget] = list(members)
        self._current_index = 0
        self._logger = logger or _noop_log
        context.add_listener(self._handle_focus_change)

    @property
    def members(self) -> List[FocusableWidget]:
        return list(self._members)

    @property
    def current_index(self) -> int:
        # Clamp on access: the member list may have shrunk under us.
        count = len(self._members)
        if count == 0:
            self._current_index = 0
        elif not 0 <= self._current_index < count:
            self._current_index = max(0, min(self._current_index, count - 1))
        return self._current_index

    @property
    def current_member(self) -> Optional[FocusableWidget]:
        if not self._members:
            return None
        return self._members[self.current_index]

    def contains(self, widget: Optional[FocusableWidget]) -> bool:
        return widget is not None and any(member is widget for member in self._members)

    def index_of(self, widget: Optional[FocusableWidget]) -> int:
        for idx, member in enumerate(self._members):
            if member is widget:
                return idx
        return -1

    def owns(self, widget: Optional[FocusableWidget]) -> bool:
        """True when ``widget`` lives anywhere in this group's subtree."""

        return self.contains(widget)

    def rebuild_members(self, members: Optional[Iterable[FocusableWidget]] = None) -> None:
        """Replace the member list, re-deriving it from the host when none is given."""

        if members is None:
            members = self.context.list_focusable_descendants(self)
        current = self.current_member
        self._members = list(members)
        idx = self.index_of(current)
        if idx >= 0:
            self._current_index = idx
        self._log(
            "Group %s rebuilt: members=%d current=%d",
            self.name,
            len(self._members),
            self.current_index,
        )

    def focus_member(self, index: int) -> bool:
        count = len(self._members)
        if count == 0:
            return False
        target = ((index % count) + count) % count
        if not self.context.request_focus(self._members[target]):
            return False
        self._current_index = target
        return True

    def focus_first(self) -> bool:
        return self.focus_member(0)

    def focus_current(self) -> bool:
        return self.focus_member(self.current_index)

    def move(self, direction: Direction) -> bool:
        count = len(self._members)
        if count == 0:
            return False
        origin = self.index_of(self.context.focused)
        if origin < 0:
            origin = self.current_index
        return self.focus_member((origin + direction.value + count) % count)

    def _handle_focus_change(self, previous: Optional[FocusableWidget], current: FocusableWidget) -> None:
        idx = self.index_of(current)
        if idx >= 0:
            self._current_index = idx

    def _forward_to_member(self, event: KeyEvent) -> bool:
        focused = self.context.focused
        if not self.contains(focused):
            return False
        return bool(focused.handle_key(event))  # type: ignore[union-attr]

    def _log(self, message: str, *args: object) -> None:
        try:
            self._logger(message, *args)
        except Exception:
            pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, members={len(self._members)})"


class RovingGroup(FocusGroup):
    """One logical tab stop over N members; arrow keys move inside with wraparound."""

    def tab_stop(self) -> Optional[FocusableWidget]:
        return self.current_member

    def is_tab_stop(self, widget: Optional[FocusableWidget]) -> bool:
        return widget is not None and widget is self.tab_stop()

    def on_arrow_key(self, direction: Direction) -> bool:
        if not self._members:
            return False
        self.move(direction)
        return True

    def handle_key(self, event: KeyEvent) -> bool:
        if not self.contains(self.context.focused):
            return False
        direction = arrow_direction(event.key)
        if direction is not None and not event.shift:
            return self.on_arrow_key(direction)
        return self._forward_to_member(event)


__all__ = ["FocusGroup", "RovingGroup"]
