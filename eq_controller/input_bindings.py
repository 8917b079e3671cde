"""Infrastructure for configurable control schemes and key bindings."""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Tuple

if TYPE_CHECKING:
    import tkinter as tk

LOGGER = logging.getLogger("EQFocus.Controller")

DEFAULT_CONFIG_PATH = Path(__file__).with_name("keybindings.json")

# Actions are the engine's key chords; values are the Tk sequences that produce them.
DEFAULT_CONFIG = {
    "active_scheme": "keyboard_default",
    "schemes": {
        "keyboard_default": {
            "bindings": {
                "Tab": ["<Tab>"],
                "Shift+Tab": ["<Shift-Tab>", "<ISO_Left_Tab>"],
                "Escape": ["<Escape>"],
                "F6": ["<F6>"],
                "Shift+F6": ["<Shift-F6>"],
                "Enter": ["<Return>", "<KP_Enter>"],
                "Space": ["<space>"],
                "ArrowUp": ["<Up>"],
                "ArrowDown": ["<Down>"],
                "ArrowLeft": ["<Left>"],
                "ArrowRight": ["<Right>"],
                "PageUp": ["<Prior>"],
                "PageDown": ["<Next>"],
                "Home": ["<Home>"],
                "End": ["<End>"],
            },
        }
    },
}


@dataclass
class ControlScheme:
    """Named set of bindings, keyed by engine chord."""

    name: str
    bindings: Dict[str, List[str]]


@dataclass
class BindingConfig:
    """Representation of the configuration file contents."""

    schemes: Dict[str, ControlScheme]
    active_scheme: str
    source_path: Path

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "BindingConfig":
        """Load config from disk, creating the default file if missing."""

        path = path or DEFAULT_CONFIG_PATH
        if not path.exists():
            path.write_text(json.dumps(DEFAULT_CONFIG, indent=2))

        payload = json.loads(path.read_text())
        return cls.from_payload(payload, source_path=path)

    @classmethod
    def from_payload(cls, payload: dict, *, source_path: Path) -> "BindingConfig":
        schemes = {
            name: ControlScheme(
                name=name,
                bindings={
                    action: list(inputs or [])
                    for action, inputs in (spec.get("bindings") or {}).items()
                },
            )
            for name, spec in payload.get("schemes", {}).items()
        }

        active = payload.get("active_scheme")
        if active not in schemes:
            raise ValueError(
                f"Active scheme '{active}' is not defined in keybindings file {source_path}"
            )

        return cls(schemes=schemes, active_scheme=active, source_path=source_path)

    @classmethod
    def default(cls) -> "BindingConfig":
        return cls.from_payload(DEFAULT_CONFIG, source_path=DEFAULT_CONFIG_PATH)

    def get_scheme(self, name: Optional[str] = None) -> ControlScheme:
        """Return the requested scheme or the currently active one."""

        scheme_name = name or self.active_scheme
        try:
            return self.schemes[scheme_name]
        except KeyError as exc:
            raise ValueError(f"Unknown control scheme '{scheme_name}'") from exc


class BindingManager:
    """Handles applying bindings for the active scheme to a Tk widget."""

    def __init__(self, widget: "tk.Misc", config: BindingConfig) -> None:  # type: ignore[name-defined]  # noqa: F821
        self.widget = widget
        self.config = config
        self._handlers: Dict[str, Callable] = {}
        self._action_widgets: Dict[str, List["tk.Misc"]] = {}
        self._bound_sequences: List[Tuple["tk.Misc", str]] = []
        self._cached_wrappers: Dict[str, Callable] = {}

    def register_action(
        self,
        action_name: str,
        handler: Callable,
        *,
        widget: Optional["tk.Misc"] = None,
        widgets: Optional[Iterable["tk.Misc"]] = None,
    ) -> None:
        """Associate an action identifier with a callable."""

        self._handlers[action_name] = handler
        targets: List["tk.Misc"] = []
        if widget is not None:
            targets.append(widget)
        if widgets is not None:
            targets.extend(widgets)
        if targets:
            self._action_widgets[action_name] = targets
        elif action_name in self._action_widgets:
            del self._action_widgets[action_name]
        # Drop cached wrapper so a future activate() re-evaluates the signature.
        self._cached_wrappers.pop(action_name, None)

    def activate(self, scheme_name: Optional[str] = None) -> None:
        """Apply the bindings for the currently active scheme."""

        self.deactivate()

        scheme = self.config.get_scheme(scheme_name)
        for action, sequences in scheme.bindings.items():
            if action not in self._handlers:
                continue
            target_widgets = self._action_widgets.get(action)
            if not target_widgets:
                target_widgets = [self.widget]
            callback = self._get_wrapped_handler(action)
            for sequence in sequences:
                try:
                    normalized = self._normalize_sequence(sequence)
                except ValueError as exc:
                    LOGGER.warning("Skipping invalid binding for %s: %s", action, exc)
                    continue
                for target_widget in target_widgets:
                    try:
                        target_widget.bind(normalized, callback, add="+")
                    except Exception as exc:
                        LOGGER.warning("Skipping invalid binding %s for %s: %s", normalized, action, exc)
                        continue
                    self._bound_sequences.append((target_widget, normalized))

    def deactivate(self) -> None:
        self._unbind_sequences(self._bound_sequences)
        self._bound_sequences.clear()

    def _unbind_sequences(self, sequences: Iterable[Tuple["tk.Misc", str]]) -> None:
        for widget, sequence in sequences:
            try:
                widget.unbind(sequence)
            except Exception:
                # Some widgets do not implement unbind; ignore in that case.
                pass

    def _get_wrapped_handler(self, action: str) -> Callable:
        if action in self._cached_wrappers:
            return self._cached_wrappers[action]

        handler = self._handlers[action]
        takes_event = self._handler_accepts_event(handler)

        def _callback(event: object) -> Optional[str]:
            # Tk stops further processing (and the default traversal) on "break".
            if takes_event:
                return handler(event)
            return handler()

        self._cached_wrappers[action] = _callback
        return _callback

    @staticmethod
    def _handler_accepts_event(handler: Callable) -> bool:
        try:
            signature = inspect.signature(handler)
        except (TypeError, ValueError):
            return False
        params = list(signature.parameters.values())
        return len(params) >= 1

    @staticmethod
    def _normalize_sequence(sequence: str) -> str:
        seq = sequence.strip()
        if not seq:
            raise ValueError("Binding sequence cannot be empty")
        if not seq.startswith("<"):
            seq = f"<{seq}>"
        return seq
