from __future__ import annotations

from typing import Callable, List, Optional, Protocol

from eq_controller.widgets.focusable import FocusableWidget

FocusListener = Callable[[Optional[FocusableWidget], FocusableWidget], None]


class FocusHost(Protocol):
    """Outbound surface the engine needs from the rendering layer."""

    def focus(self, widget: FocusableWidget) -> bool: ...

    def list_focusable_descendants(self, container: object) -> List[FocusableWidget]: ...


def _noop_log(message: str, *args: object) -> None:
    return None


class FocusContext:
    """Dialog-scoped focus state passed explicitly to every container.

    Holds the one widget that is the current focus target, the ordered
    sections of the dialog and the order of the section owning focus.
    Nothing here is global, so several dialogs can coexist.
    """

    def __init__(self, host: FocusHost, *, logger: Optional[Callable[..., None]] = None) -> None:
        self.host = host
        self.focused: Optional[FocusableWidget] = None
        self.sections: list = []
        self.active_section_order = 0
        self._listeners: list[FocusListener] = []
        self._logger = logger or _noop_log
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: FocusListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def request_focus(self, widget: Optional[FocusableWidget]) -> bool:
        """Ask the host to move focus; returns False when focus did not move."""

        if self._closed or widget is None:
            return False
        if not widget.is_focusable():
            self._log("Focus request skipped: %s is not focusable", widget)
            return False
        try:
            accepted = bool(self.host.focus(widget))
        except Exception as exc:
            self._log("Focus request for %s failed: %s", widget, exc)
            accepted = False
        if not accepted:
            self._log("Focus request rejected by host: %s", widget)
            return False
        self._set_focused(widget)
        return True

    def notify_focus_in(self, widget: FocusableWidget) -> None:
        """Record a focus change the host made on its own (pointer, native traversal)."""

        if self._closed:
            return
        self._set_focused(widget)

    def list_focusable_descendants(self, container: object) -> List[FocusableWidget]:
        try:
            widgets = list(self.host.list_focusable_descendants(container))
        except Exception as exc:
            self._log("Descendant query failed for %s: %s", container, exc)
            return []
        return [widget for widget in widgets if widget.is_focusable()]

    def close(self) -> None:
        previous = self.focused
        self._closed = True
        self._listeners.clear()
        self.focused = None
        if previous is not None:
            previous.on_blur()

    def _set_focused(self, widget: FocusableWidget) -> None:
        previous = self.focused
        if previous is widget:
            return
        self.focused = widget
        if previous is not None:
            previous.on_blur()
        widget.on_focus()
        for listener in list(self._listeners):
            listener(previous, widget)

    def _log(self, message: str, *args: object) -> None:
        try:
            self._logger(message, *args)
        except Exception:
            pass
