from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from eq_controller.controller.dialog_config import DialogConfig
from eq_controller.controller.focus_context import FocusContext, FocusHost
from eq_controller.controller.layouts import DialogLayout, DialogWidgets, build_layout, build_widgets
from eq_controller.controller.sequencer import SectionSequencer
from eq_controller.keys import Key, KeyEvent
from eq_controller.services.dialog_timers import DialogTimers
from eq_controller.widgets.focusable import FocusableWidget
from eq_controller.widgets.nested_group import NestedActivatableGroup
from eq_controller.widgets.value_control import ValueControl

INITIAL_FOCUS_TIMER = "initial-focus"

ValuesCallback = Callable[[List[int]], None]


def _noop_log(message: str, *args: object) -> None:
    return None


class EqualizerDialog:
    """Focus-order controller for one open graphic EQ dialog.

    Owns the dialog's ``FocusContext``, the declared sections and the
    ``SectionSequencer``. Key events run through an explicit priority chain:
    sequencer, then the container owning focus, then the focused widget,
    then (optionally) emulation of the platform's sequential order.
    """

    def __init__(
        self,
        host: FocusHost,
        timers: DialogTimers,
        *,
        config: Optional[DialogConfig] = None,
        fader_values: Optional[Sequence[int]] = None,
        selected_preset: Optional[str] = None,
        on_close: Optional[Callable[[], None]] = None,
        on_preview: Optional[ValuesCallback] = None,
        on_apply: Optional[ValuesCallback] = None,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        self.config = config or DialogConfig()
        self.timers = timers
        self._logger = logger or _noop_log
        self._on_close = on_close
        self._on_preview = on_preview
        self._on_apply = on_apply
        self._opened = False
        self._closed = False

        self.context = FocusContext(host, logger=self._logger)
        self.widgets: DialogWidgets = build_widgets(
            fader_min=self.config.fader_min,
            fader_max=self.config.fader_max,
            fader_values=fader_values,
            selected_preset=selected_preset,
            timers=timers,
            readout_ms=self.config.readout_ms,
        )
        self.layout: DialogLayout = build_layout(
            self.widgets,
            context=self.context,
            layout=self.config.layout,
            fader_mode=self.config.fader_mode,
            logger=self._logger,
        )
        self.sequencer = SectionSequencer(
            self.layout.sections,
            self.layout.jump_cycle,
            context=self.context,
            default_forward=self.layout.default_forward,
            default_backward=self.layout.default_backward,
            on_close=self.close,
            logger=self._logger,
        )
        self._registry = self.widgets.by_id()
        for group in self.layout.groups:
            if isinstance(group, NestedActivatableGroup):
                self._registry[group.handle.widget_id] = group.handle
        self._wire_actions()

    # --------------------------------------------------------------- lifecycle

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    def open(self) -> None:
        """Schedule initial focus on the preset control once the host UI is attached."""

        if self._opened:
            return
        self._opened = True
        self._log(
            "Dialog opened: layout=%s fader_mode=%s sections=%d",
            self.config.layout,
            self.config.fader_mode,
            len(self.sequencer.sections),
        )
        self.timers.schedule(
            INITIAL_FOCUS_TIMER,
            self.focus_initial,
            delay_ms=self.config.initial_focus_delay_ms,
        )

    def focus_initial(self) -> bool:
        return self.sequencer.focus_jump_target(self.layout.default_forward)

    def close(self) -> None:
        """Tear down timers and listeners; no transition fires afterwards."""

        if self._closed:
            return
        self._closed = True
        self.timers.close()
        self.context.close()
        self._log("Dialog closed")
        if self._on_close is not None:
            self._on_close()

    # ------------------------------------------------------------------ input

    def handle_key(self, event: KeyEvent) -> bool:
        """Dispatch one key press; True means consumed (suppress the platform default)."""

        if not self.is_open:
            return False
        if self.sequencer.handle_key(event):
            return True
        owner = self.sequencer.section_for(self.context.focused)
        if owner is not None and owner.group is not None:
            if owner.group.handle_key(event):
                return True
        elif owner is not None and owner.widget is not None:
            if owner.widget.handle_key(event):
                return True
        if event.key is Key.TAB and self.config.emulate_platform_tab:
            return self.sequencer.advance_default(event.shift)
        return False

    def handle_chord(self, chord: str) -> bool:
        return self.handle_key(KeyEvent.parse(chord))

    def notify_focus_in(self, widget_id: str) -> None:
        widget = self.widget(widget_id)
        if widget is None or not self.is_open:
            return
        self.context.notify_focus_in(widget)

    def handle_pointer(self, widget_id: str, position: float) -> bool:
        widget = self.widget(widget_id)
        if not isinstance(widget, ValueControl) or not self.is_open:
            return False
        widget.set_value_from_normalized_position(position)
        return True

    # ---------------------------------------------------------------- queries

    @property
    def focused(self) -> Optional[FocusableWidget]:
        return self.context.focused

    def widget(self, widget_id: str) -> Optional[FocusableWidget]:
        return self._registry.get(widget_id)

    def focus_targets(self) -> List[FocusableWidget]:
        """Every widget the host must be able to focus, group handles included."""

        return list(self._registry.values())

    def fader_values(self) -> List[int]:
        return [fader.get_value() for fader in self.widgets.faders]

    @property
    def selected_preset(self) -> str:
        return self.widgets.preset_dropdown.selected

    # ---------------------------------------------------------------- actions

    def select_preset(self, name: str) -> bool:
        return self.widgets.preset_dropdown.select(name)

    def flatten(self) -> None:
        for fader in self.widgets.faders:
            fader.set_value(0)
        self._log("Faders flattened")

    def invert(self) -> None:
        for fader in self.widgets.faders:
            fader.set_value(-fader.get_value())
        self._log("Faders inverted")

    def preview(self) -> None:
        if self._on_preview is not None:
            self._on_preview(self.fader_values())

    def apply(self) -> None:
        if self._on_apply is not None:
            self._on_apply(self.fader_values())

    def _wire_actions(self) -> None:
        self.widgets.flatten.set_command(self.flatten)
        self.widgets.invert.set_command(self.invert)
        self.widgets.preview.set_command(self.preview)
        self.widgets.apply.set_command(self.apply)
        self.widgets.cancel.set_command(self.close)

    def _log(self, message: str, *args: object) -> None:
        try:
            self._logger(message, *args)
        except Exception:
            pass


__all__ = ["EqualizerDialog", "INITIAL_FOCUS_TIMER"]
