"""Tkinter scaffolding for the graphic EQ dialog."""

from __future__ import annotations

import os
import sys
import tkinter as tk
from pathlib import Path
from tkinter import ttk
from typing import Dict, List, Optional

from eq_controller.controller import EqualizerDialog, FocusManager, build_app_context, log_exception
from eq_controller.controller.logging_setup import controller_debug, ensure_controller_logger
from eq_controller.controller.layouts import DECIBEL_SCALE, FREQUENCY_LABELS
from eq_controller.input_bindings import BindingManager
from eq_controller.services import DialogTimers
from eq_controller.widgets import FocusableWidget, PresetDropdown, ValueControl, format_decibels

HOME_ENV_VAR = "EQ_FOCUS_HOME"
SLIDER_LENGTH = 160


def resolve_home() -> Path:
    raw = os.environ.get(HOME_ENV_VAR)
    home = Path(raw).expanduser() if raw else Path.home() / ".config" / "eq-focus"
    home.mkdir(parents=True, exist_ok=True)
    return home


class TkFocusHost:
    """Maps engine widget handles onto Tk widgets."""

    def __init__(self) -> None:
        self._tk_widgets: Dict[str, tk.Misc] = {}
        self._containers: Dict[str, tk.Misc] = {}
        self._by_tk_name: Dict[str, FocusableWidget] = {}

    def register(self, widget: FocusableWidget, tk_widget: tk.Misc) -> None:
        self._tk_widgets[widget.widget_id] = tk_widget
        self._by_tk_name[str(tk_widget)] = widget

    def register_container(self, name: str, tk_widget: tk.Misc) -> None:
        self._containers[name] = tk_widget

    def tk_widget(self, widget_id: str) -> Optional[tk.Misc]:
        return self._tk_widgets.get(widget_id)

    def focus(self, widget: FocusableWidget) -> bool:
        target = self._tk_widgets.get(widget.widget_id)
        if target is None:
            return False
        try:
            if not target.winfo_exists():
                return False
            target.focus_set()
        except tk.TclError:
            return False
        return True

    def list_focusable_descendants(self, container: object) -> List[FocusableWidget]:
        frame = self._containers.get(getattr(container, "name", ""))
        if frame is None:
            return []
        found: List[FocusableWidget] = []
        pending = list(frame.winfo_children())
        while pending:
            child = pending.pop(0)
            widget = self._by_tk_name.get(str(child))
            if widget is not None:
                found.append(widget)
            pending.extend(child.winfo_children())
        return found


class EqualizerWindow(tk.Tk):
    """Graphic EQ dialog rendered with Tk; all traversal is owned by the focus engine."""

    def __init__(self, *, root_path: Optional[Path] = None) -> None:
        super().__init__()
        self.title("Graphic EQ")
        self.resizable(False, False)
        self.app_context = build_app_context(root=root_path or resolve_home(), logger=controller_debug)
        self.host = TkFocusHost()
        self.timers = DialogTimers(after=self.after, after_cancel=self.after_cancel, logger=controller_debug)
        self.dialog = EqualizerDialog(
            self.host,
            self.timers,
            config=self.app_context.dialog_config,
            on_close=self._handle_dialog_closed,
            on_preview=lambda values: controller_debug("Preview requested: %s", values),
            on_apply=lambda values: controller_debug("Apply requested: %s", values),
            logger=controller_debug,
        )
        self._scales: Dict[str, tk.Scale] = {}
        self._readouts: Dict[str, tk.Label] = {}
        self._preset_var = tk.StringVar(value=self.dialog.selected_preset)
        self._build()
        self.binding_manager = BindingManager(self, self.app_context.binding_config)
        self.focus_manager = FocusManager(self.dialog, self.binding_manager, logger=controller_debug)
        self._bind_keys()
        self.protocol("WM_DELETE_WINDOW", self.dialog.close)
        self.dialog.open()

    # ------------------------------------------------------------------ build

    def _build(self) -> None:
        widgets = self.dialog.widgets
        body = tk.Frame(self, padx=12, pady=12)
        body.pack(fill="both", expand=True)

        toolbar = tk.Frame(body)
        toolbar.pack(fill="x", pady=(0, 8))
        self.host.register_container("presets", toolbar)
        combo = ttk.Combobox(
            toolbar,
            textvariable=self._preset_var,
            values=widgets.preset_dropdown.options,
            state="readonly",
            width=14,
        )
        combo.bind("<<ComboboxSelected>>", lambda _e: self.dialog.select_preset(self._preset_var.get()), add="+")
        combo.pack(side="left")
        widgets.preset_dropdown.set_open_callback(self._post_dropdown)
        self._register(widgets.preset_dropdown, combo)
        for button, text in (
            (widgets.save_preset, "Save"),
            (widgets.reset_preset, "Reset"),
            (widgets.more_options, "..."),
        ):
            tk_button = tk.Button(toolbar, text=text, command=button.invoke, width=4)
            tk_button.pack(side="left", padx=(4, 0))
            self._register(button, tk_button)

        grid = tk.Frame(body)
        grid.pack(fill="x")
        scale_labels = tk.Frame(grid)
        scale_labels.pack(side="left", fill="y")
        for db in DECIBEL_SCALE:
            tk.Label(scale_labels, text=f"+{db}" if db > 0 else str(db), font=("TkDefaultFont", 7)).pack(expand=True)

        faders = tk.Frame(grid, highlightthickness=2, takefocus=0)
        faders.pack(side="left", fill="x")
        self.host.register_container("faders", faders)
        handle = self.dialog.widget("faders-handle")
        if handle is not None:
            self._register(handle, faders)
        for fader, freq in zip(widgets.faders, FREQUENCY_LABELS):
            column = tk.Frame(faders)
            column.pack(side="left")
            readout = tk.Label(column, text="", font=("TkDefaultFont", 7), width=6)
            readout.pack()
            scale = tk.Scale(
                column,
                from_=fader.maximum,
                to=fader.minimum,
                orient="vertical",
                length=SLIDER_LENGTH,
                showvalue=False,
                width=10,
            )
            scale.set(fader.get_value())
            scale.pack()
            tk.Label(column, text=freq, font=("TkDefaultFont", 7)).pack()
            scale.bind("<Button-1>", lambda e, f=fader: self._pointer(f, e), add="+")
            scale.bind("<B1-Motion>", lambda e, f=fader: self._pointer(f, e), add="+")
            fader.set_change_callback(self._sync_scale)
            fader.set_readout_callback(self._sync_readout)
            self._scales[fader.widget_id] = scale
            self._readouts[fader.widget_id] = readout
            self._register(fader, scale)

        actions = tk.Frame(body)
        actions.pack(fill="x", pady=8)
        self.host.register_container("eq-actions", actions)
        for button in widgets.actions:
            tk_button = tk.Button(actions, text=button.label, command=button.invoke)
            tk_button.pack(side="left", padx=(0, 4))
            self._register(button, tk_button)

        footer = tk.Frame(body)
        footer.pack(fill="x")
        preview = tk.Button(footer, text="Preview", command=widgets.preview.invoke)
        preview.pack(side="left")
        self._register(widgets.preview, preview)
        for button in (widgets.apply, widgets.cancel):
            tk_button = tk.Button(footer, text=button.label, command=button.invoke)
            tk_button.pack(side="right", padx=(4, 0))
            self._register(button, tk_button)

    def _register(self, widget: FocusableWidget, tk_widget: tk.Misc) -> None:
        self.host.register(widget, tk_widget)
        try:
            tk_widget.configure(takefocus=0)
        except tk.TclError:
            pass
        tk_widget.bind("<FocusIn>", lambda e, w=widget: self._focus_in(w, e), add="+")

    def _bind_keys(self) -> None:
        targets = [self.host.tk_widget(widget.widget_id) for widget in self.dialog.focus_targets()]
        # Widget-level bindings run before class bindings, so "break" keeps Tk defaults out.
        self.focus_manager.register_key_bindings(widgets=[target for target in targets if target is not None])
        self.binding_manager.activate()

    # -------------------------------------------------------------- callbacks

    def _focus_in(self, widget: FocusableWidget, event: object) -> None:
        if getattr(event, "widget", None) is not self.host.tk_widget(widget.widget_id):
            return
        self.focus_manager.widget_focused(widget.widget_id)

    def _pointer(self, fader: ValueControl, event: tk.Event) -> str:  # type: ignore[type-arg]
        scale = self._scales.get(fader.widget_id)
        if scale is None:
            return "break"
        height = max(1, scale.winfo_height())
        position = 1.0 - (float(getattr(event, "y", 0)) / height)
        try:
            self.dialog.handle_pointer(fader.widget_id, position)
        except Exception as exc:
            log_exception(controller_debug, "Pointer update failed", exc)
        return "break"

    def _sync_scale(self, fader: ValueControl, value: int) -> None:
        scale = self._scales.get(fader.widget_id)
        if scale is not None:
            scale.set(value)
        readout = self._readouts.get(fader.widget_id)
        if readout is not None and fader.readout_visible:
            readout.configure(text=format_decibels(value))

    def _sync_readout(self, fader: ValueControl, visible: bool) -> None:
        readout = self._readouts.get(fader.widget_id)
        if readout is not None:
            readout.configure(text=fader.readout_text if visible else "")

    def _post_dropdown(self, dropdown: PresetDropdown) -> None:
        combo = self.host.tk_widget(dropdown.widget_id)
        if combo is None:
            return
        try:
            combo.tk.call("ttk::combobox::Post", combo)
        except tk.TclError as exc:
            controller_debug("Preset picker unavailable: %s", exc)

    def _handle_dialog_closed(self) -> None:
        self.binding_manager.deactivate()
        try:
            self.destroy()
        except tk.TclError:
            pass


def launch() -> None:
    """Entry point used by the console script."""

    controller_debug("Launching EQ dialog: python=%s cwd=%s", sys.executable, Path.cwd())
    ensure_controller_logger()
    try:
        app = EqualizerWindow()
        app.mainloop()
    except Exception as exc:
        controller_debug("EQ dialog launch failed: %s", exc)
        raise


if __name__ == "__main__":
    launch()
