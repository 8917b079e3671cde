"""Declared section tables and jump cycles for the graphic EQ dialog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from eq_controller.controller.focus_context import FocusContext
from eq_controller.controller.sequencer import JumpTarget, Section, SectionKind
from eq_controller.services.dialog_timers import DialogTimers
from eq_controller.widgets.focusable import ActionButton, FocusableWidget, PresetDropdown
from eq_controller.widgets.nested_group import NestedActivatableGroup
from eq_controller.widgets.roving_group import RovingGroup
from eq_controller.widgets.value_control import DEFAULT_READOUT_MS, ValueControl

FREQUENCY_LABELS = (
    "20", "25", "31", "40", "50", "63", "80", "100", "125", "160",
    "200", "250", "315", "400", "500", "630", "800", "1K", "1.25K", "1.6K",
    "2K", "2.5K", "3.15K", "4K", "5K", "6.3K", "8K", "10K", "12.5K", "16K", "20K", "25K",
)
DECIBEL_SCALE = (20, 18, 12, 6, 0, -6, -12, -18, -20)
PRESET_NAMES = ("Default", "Rock", "Pop", "Jazz", "Classical")

LAYOUTS = ("grouped", "standard")
FADER_MODES = ("nested", "roving", "flat")

JUMP_PRESET = "preset"
JUMP_FADERS = "faders"
JUMP_INVERT = "invert"
JUMP_PREVIEW = "preview"


class LayoutError(ValueError):
    """Raised when a declared section table or jump cycle is inconsistent."""


@dataclass
class DialogWidgets:
    preset_dropdown: PresetDropdown
    save_preset: ActionButton
    reset_preset: ActionButton
    more_options: ActionButton
    faders: List[ValueControl]
    flatten: ActionButton
    invert: ActionButton
    preview: ActionButton
    cancel: ActionButton
    apply: ActionButton

    @property
    def toolbar(self) -> List[FocusableWidget]:
        return [self.preset_dropdown, self.save_preset, self.reset_preset, self.more_options]

    @property
    def actions(self) -> List[ActionButton]:
        return [self.flatten, self.invert]

    def all_widgets(self) -> List[FocusableWidget]:
        return [
            *self.toolbar,
            *self.faders,
            *self.actions,
            self.preview,
            self.cancel,
            self.apply,
        ]

    def by_id(self) -> Dict[str, FocusableWidget]:
        return {widget.widget_id: widget for widget in self.all_widgets()}


@dataclass
class DialogLayout:
    sections: List[Section]
    jump_cycle: List[JumpTarget]
    default_forward: str
    default_backward: str
    fader_group: Optional[RovingGroup | NestedActivatableGroup] = None
    groups: List[RovingGroup | NestedActivatableGroup] = field(default_factory=list)


def build_widgets(
    *,
    fader_min: int = -20,
    fader_max: int = 20,
    fader_values: Optional[Sequence[int]] = None,
    selected_preset: Optional[str] = None,
    timers: Optional[DialogTimers] = None,
    readout_ms: int = DEFAULT_READOUT_MS,
) -> DialogWidgets:
    values = list(fader_values or [])
    faders = [
        ValueControl(
            f"fader-{idx}",
            minimum=fader_min,
            maximum=fader_max,
            value=values[idx] if idx < len(values) else 0,
            label=f"{freq} Hz frequency band",
            timers=timers,
            readout_ms=readout_ms,
        )
        for idx, freq in enumerate(FREQUENCY_LABELS)
    ]
    return DialogWidgets(
        preset_dropdown=PresetDropdown("preset-dropdown", PRESET_NAMES, label="Preset", selected=selected_preset),
        save_preset=ActionButton("save-preset", label="Save preset"),
        reset_preset=ActionButton("reset-preset", label="Reset preset"),
        more_options=ActionButton("more-options", label="More options"),
        faders=faders,
        flatten=ActionButton("flatten", label="Flatten"),
        invert=ActionButton("invert", label="Invert"),
        preview=ActionButton("preview", label="Preview"),
        cancel=ActionButton("cancel", label="Cancel"),
        apply=ActionButton("apply", label="Apply"),
    )


def build_layout(
    widgets: DialogWidgets,
    *,
    context: FocusContext,
    layout: str = "grouped",
    fader_mode: str = "nested",
    logger: Optional[Callable[..., None]] = None,
) -> DialogLayout:
    """Declare sections in dialog order plus the jump cycle for one variant."""

    if layout not in LAYOUTS:
        raise LayoutError(f"Unknown layout '{layout}' (expected one of {', '.join(LAYOUTS)})")
    if fader_mode not in FADER_MODES:
        raise LayoutError(f"Unknown fader mode '{fader_mode}' (expected one of {', '.join(FADER_MODES)})")

    sections: List[Section] = []
    groups: List[RovingGroup | NestedActivatableGroup] = []

    def _single(name: str, widget: FocusableWidget) -> None:
        sections.append(Section(name, SectionKind.SINGLE, len(sections), widget=widget))

    def _group(name: str, kind: SectionKind, group: RovingGroup | NestedActivatableGroup) -> None:
        groups.append(group)
        sections.append(Section(name, kind, len(sections), group=group))

    if layout == "grouped":
        _group("presets", SectionKind.ROVING, RovingGroup("presets", widgets.toolbar, context=context, logger=logger))
        preset_target = JumpTarget(JUMP_PRESET, "presets", member=widgets.preset_dropdown.widget_id)
    else:
        for widget in widgets.toolbar:
            _single(widget.widget_id, widget)
        preset_target = JumpTarget(JUMP_PRESET, widgets.preset_dropdown.widget_id)

    fader_group: Optional[RovingGroup | NestedActivatableGroup] = None
    if fader_mode == "nested":
        fader_group = NestedActivatableGroup(
            "faders",
            widgets.faders,
            context=context,
            label="EQ fader controls",
            logger=logger,
        )
        _group("faders", SectionKind.NESTED, fader_group)
        faders_target = JumpTarget(JUMP_FADERS, "faders")
    elif fader_mode == "roving":
        fader_group = RovingGroup("faders", widgets.faders, context=context, logger=logger)
        _group("faders", SectionKind.ROVING, fader_group)
        faders_target = JumpTarget(JUMP_FADERS, "faders")
    else:
        for fader in widgets.faders:
            _single(fader.widget_id, fader)
        faders_target = JumpTarget(JUMP_FADERS, widgets.faders[0].widget_id)

    if layout == "grouped":
        _group("eq-actions", SectionKind.ROVING, RovingGroup("eq-actions", widgets.actions, context=context, logger=logger))
        invert_target = JumpTarget(JUMP_INVERT, "eq-actions", member=widgets.invert.widget_id, match_section=True)
    else:
        _single(widgets.flatten.widget_id, widgets.flatten)
        _single(widgets.invert.widget_id, widgets.invert)
        invert_target = JumpTarget(JUMP_INVERT, widgets.invert.widget_id)

    _single(widgets.preview.widget_id, widgets.preview)
    _single(widgets.cancel.widget_id, widgets.cancel)
    _single(widgets.apply.widget_id, widgets.apply)

    declared = DialogLayout(
        sections=sections,
        jump_cycle=[
            preset_target,
            faders_target,
            invert_target,
            JumpTarget(JUMP_PREVIEW, widgets.preview.widget_id),
        ],
        default_forward=JUMP_PRESET,
        default_backward=JUMP_PREVIEW,
        fader_group=fader_group,
        groups=groups,
    )
    validate_layout(declared.sections, declared.jump_cycle, declared.default_forward, declared.default_backward)
    return declared


def validate_layout(
    sections: Sequence[Section],
    jump_cycle: Sequence[JumpTarget],
    default_forward: str,
    default_backward: str,
) -> None:
    """Reject declarations that could only fail later at keypress time."""

    if not sections:
        raise LayoutError("At least one section is required")
    orders = sorted(section.order for section in sections)
    if orders != list(range(len(sections))):
        raise LayoutError(f"Section orders must be contiguous from 0, got {orders}")
    names = [section.name for section in sections]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise LayoutError(f"Duplicate section names: {', '.join(duplicates)}")

    by_name = {section.name: section for section in sections}
    for section in sections:
        if section.kind is SectionKind.SINGLE:
            if section.widget is None or section.group is not None:
                raise LayoutError(f"Single section '{section.name}' must hold exactly one widget")
            continue
        expected = NestedActivatableGroup if section.kind is SectionKind.NESTED else RovingGroup
        if not isinstance(section.group, expected) or section.widget is not None:
            raise LayoutError(f"Section '{section.name}' must hold a {expected.__name__}")
        if not section.group.members:
            raise LayoutError(f"Group section '{section.name}' has no members")

    if not jump_cycle:
        raise LayoutError("Jump cycle must declare at least one target")
    target_names = [target.name for target in jump_cycle]
    if len(set(target_names)) != len(target_names):
        raise LayoutError(f"Duplicate jump targets in {target_names}")
    for target in jump_cycle:
        section = by_name.get(target.section)
        if section is None:
            raise LayoutError(f"Jump target '{target.name}' names unknown section '{target.section}'")
        if target.member is not None and all(m.widget_id != target.member for m in section.members):
            raise LayoutError(
                f"Jump target '{target.name}' names unknown member '{target.member}' of '{target.section}'"
            )
    for default in (default_forward, default_backward):
        if default not in target_names:
            raise LayoutError(f"Default jump target '{default}' is not in the jump cycle")


__all__ = [
    "DECIBEL_SCALE",
    "DialogLayout",
    "DialogWidgets",
    "FADER_MODES",
    "FREQUENCY_LABELS",
    "LAYOUTS",
    "LayoutError",
    "PRESET_NAMES",
    "build_layout",
    "build_widgets",
    "validate_layout",
]
