from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from eq_controller.controller.focus_context import FocusContext
from eq_controller.keys import Key, KeyEvent
from eq_controller.widgets.focusable import FocusableWidget
from eq_controller.widgets.nested_group import NestedActivatableGroup
from eq_controller.widgets.roving_group import RovingGroup

GroupType = Union[RovingGroup, NestedActivatableGroup]


class SectionKind(Enum):
    SINGLE = "single"
    ROVING = "roving"
    NESTED = "nested"


@dataclass
class Section:
    """One top-level entry of the dialog's tab order."""

    name: str
    kind: SectionKind
    order: int
    widget: Optional[FocusableWidget] = None
    group: Optional[GroupType] = None

    @property
    def members(self) -> List[FocusableWidget]:
        if self.kind is SectionKind.SINGLE:
            return [self.widget] if self.widget is not None else []
        return self.group.members if self.group is not None else []

    def owns(self, widget: Optional[FocusableWidget]) -> bool:
        if widget is None:
            return False
        if self.kind is SectionKind.SINGLE:
            return widget is self.widget
        return self.group is not None and self.group.owns(widget)

    def tab_stop(self) -> Optional[FocusableWidget]:
        """Where sequential navigation lands when entering this section."""

        if self.kind is SectionKind.SINGLE:
            return self.widget
        if self.group is None:
            return None
        return self.group.tab_stop()

    def first_position(self) -> Optional[FocusableWidget]:
        """Landing point when Tab wraps into this section from the end of the dialog."""

        if self.kind is SectionKind.ROVING:
            members = self.members
            return members[0] if members else None
        return self.tab_stop()

    def last_position(self) -> Optional[FocusableWidget]:
        if self.kind is SectionKind.ROVING:
            members = self.members
            return members[-1] if members else None
        return self.tab_stop()

    def at_outer_position(self, widget: Optional[FocusableWidget]) -> bool:
        """True when ``widget`` occupies this section's stop in the dialog order.

        Any member of a roving group sits at the group's single stop; an
        activated nested group exposes no outer position at all.
        """

        if widget is None:
            return False
        if self.kind is SectionKind.SINGLE:
            return widget is self.widget
        if self.kind is SectionKind.ROVING:
            return self.group is not None and self.group.contains(widget)
        group = self.group
        return isinstance(group, NestedActivatableGroup) and not group.activated and widget is group.handle


@dataclass(frozen=True)
class JumpTarget:
    """A landing point of the coarse jump cycle, resolved by identifier."""

    name: str
    section: str
    member: Optional[str] = None
    match_section: bool = False


class SectionSequencer:
    """Dialog-level controller: circular Tab edges, Escape, and the jump cycle."""

    def __init__(
        self,
        sections: Sequence[Section],
        jump_cycle: Sequence[JumpTarget],
        *,
        context: FocusContext,
        default_forward: str,
        default_backward: str,
        on_close: Optional[Callable[[], None]] = None,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        self.sections: List[Section] = sorted(sections, key=lambda section: section.order)
        self.jump_cycle: List[JumpTarget] = list(jump_cycle)
        self.context = context
        self.default_forward = default_forward
        self.default_backward = default_backward
        self._on_close = on_close
        self._logger = logger
        self._by_name: Dict[str, Section] = {section.name: section for section in self.sections}
        self._jump_by_name: Dict[str, JumpTarget] = {target.name: target for target in self.jump_cycle}
        context.sections = self.sections
        context.active_section_order = self.sections[0].order if self.sections else 0
        context.add_listener(self._track_active_section)

        # Structural keys get first refusal; everything else reaches the owning container.
        self._decision_table: Dict[tuple[Key, bool], Callable[[], bool]] = {
            (Key.TAB, False): lambda: self.handle_tab(False),
            (Key.TAB, True): lambda: self.handle_tab(True),
            (Key.ESCAPE, False): self.handle_escape,
            (Key.ESCAPE, True): self.handle_escape,
            (Key.F6, False): lambda: self.handle_jump(True),
            (Key.F6, True): lambda: self.handle_jump(False),
        }

    # ------------------------------------------------------------------ lookup

    def section(self, name: str) -> Optional[Section]:
        return self._by_name.get(name)

    def section_for(self, widget: Optional[FocusableWidget]) -> Optional[Section]:
        for section in self.sections:
            if section.owns(widget):
                return section
        return None

    @property
    def active_section(self) -> Optional[Section]:
        for section in self.sections:
            if section.order == self.context.active_section_order:
                return section
        return None

    def activated_group(self) -> Optional[NestedActivatableGroup]:
        for section in self.sections:
            group = section.group
            if isinstance(group, NestedActivatableGroup) and group.activated:
                return group
        return None

    def is_structural(self, event: KeyEvent) -> bool:
        return (event.key, event.shift) in self._decision_table

    # ---------------------------------------------------------------- commands

    def handle_key(self, event: KeyEvent) -> bool:
        action = self._decision_table.get((event.key, event.shift))
        if action is None:
            return False
        return action()

    def handle_tab(self, shift: bool) -> bool:
        """Handle only the two wraparound edges; return False to defer."""

        if not self.sections:
            return False
        focused = self.context.focused
        first, last = self.sections[0], self.sections[-1]
        if not shift and last.at_outer_position(focused):
            self._log("Tab wraparound: %s -> %s", last.name, first.name)
            self._enter(first, wrap=True, forward=True)
            return True
        if shift and first.at_outer_position(focused):
            self._log("Shift+Tab wraparound: %s -> %s", first.name, last.name)
            self._enter(last, wrap=True, forward=False)
            return True
        return False

    def handle_escape(self) -> bool:
        group = self.activated_group()
        if group is not None:
            group.collapse()
            return True
        self._log("Escape: closing dialog")
        if self._on_close is not None:
            self._on_close()
        return True

    def handle_jump(self, forward: bool) -> bool:
        if not self.jump_cycle:
            return True
        current = self.current_jump_index()
        if current < 0:
            target_name = self.default_forward if forward else self.default_backward
        else:
            step = 1 if forward else -1
            target_name = self.jump_cycle[(current + step) % len(self.jump_cycle)].name
        if self.focus_jump_target(target_name):
            return True
        fallback = self.default_forward if forward else self.default_backward
        if fallback != target_name:
            self._log("Jump to %s failed; falling back to %s", target_name, fallback)
            self.focus_jump_target(fallback)
        return True

    def advance_default(self, shift: bool) -> bool:
        """Emulate the platform's native sequential order between section stops."""

        if not self.sections:
            return False
        section = self.section_for(self.context.focused)
        if section is None:
            return self._enter(self.sections[-1 if shift else 0], forward=not shift)
        idx = self.sections.index(section)
        step = -1 if shift else 1
        for offset in range(1, len(self.sections) + 1):
            candidate = self.sections[(idx + step * offset) % len(self.sections)]
            if self._enter(candidate, forward=not shift):
                return True
        return False

    # ------------------------------------------------------------------- jumps

    def current_jump_index(self) -> int:
        focused = self.context.focused
        if focused is None:
            return -1
        for idx, target in enumerate(self.jump_cycle):
            if self.resolve_jump_target(target) is focused:
                return idx
        for idx, target in enumerate(self.jump_cycle):
            section = self._by_name.get(target.section)
            if target.match_section and section is not None and section.owns(focused):
                return idx
        return -1

    def resolve_jump_target(self, target: JumpTarget) -> Optional[FocusableWidget]:
        section = self._by_name.get(target.section)
        if section is None:
            return None
        if target.member is None:
            if isinstance(section.group, NestedActivatableGroup):
                return section.group.handle
            return section.tab_stop()
        for member in section.members:
            if member.widget_id == target.member:
                return member
        return None

    def focus_jump_target(self, name: str) -> bool:
        target = self._jump_by_name.get(name)
        if target is None:
            return False
        widget = self.resolve_jump_target(target)
        if widget is None or not widget.is_focusable():
            self._log("Jump target %s has no live widget", name)
            return False
        self._log("Jump -> %s (%s)", name, widget.widget_id)
        return self.context.request_focus(widget)

    # ----------------------------------------------------------------- helpers

    def _enter(self, section: Section, *, forward: bool, wrap: bool = False) -> bool:
        if wrap:
            target = section.first_position() if forward else section.last_position()
        else:
            target = section.tab_stop()
        if target is None:
            return False
        return self.context.request_focus(target)

    def _track_active_section(self, previous: Optional[FocusableWidget], current: FocusableWidget) -> None:
        section = self.section_for(current)
        if section is not None:
            self.context.active_section_order = section.order

    def _log(self, message: str, *args: object) -> None:
        if self._logger is None:
            return
        try:
            self._logger(message, *args)
        except Exception:
            pass


__all__ = ["JumpTarget", "Section", "SectionKind", "SectionSequencer"]
