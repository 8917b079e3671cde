from .common import format_decibels, shift_modifier_active
from .focusable import ActionButton, FocusableWidget, GroupHandle, PresetDropdown
from .nested_group import NestedActivatableGroup
from .roving_group import FocusGroup, RovingGroup
from .value_control import ValueControl

__all__ = [
    "ActionButton",
    "FocusGroup",
    "FocusableWidget",
    "GroupHandle",
    "NestedActivatableGroup",
    "PresetDropdown",
    "RovingGroup",
    "ValueControl",
    "format_decibels",
    "shift_modifier_active",
]
