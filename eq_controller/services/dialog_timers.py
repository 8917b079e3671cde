from __future__ import annotations

from typing import Callable, Optional

AfterFn = Callable[[int, Callable[[], None]], object]
AfterCancelFn = Callable[[object], None]
LoggerFn = Callable[[str, object], None] | Callable[[str], None]


def _noop_log(message: str, *args: object) -> None:
    return None


class DialogTimers:
    """Owns every delayed callback of one dialog instance (readouts, deferred focus)."""

    def __init__(
        self,
        *,
        after: AfterFn,
        after_cancel: AfterCancelFn,
        logger: Optional[LoggerFn] = None,
    ) -> None:
        self._after = after
        self._after_cancel = after_cancel
        self._logger = logger or _noop_log

        self._handles: dict[str, object] = {}
        self._tokens: dict[str, object] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, key: str, callback: Callable[[], None], *, delay_ms: int) -> object | None:
        """Schedule ``callback`` under ``key``, replacing any pending callback for that key."""

        if self._closed:
            self._log("Timer %s ignored: dialog closed", key)
            return None
        self.cancel(key)
        delay = max(0, int(delay_ms))

        token = object()

        def _fire() -> None:
            # A cancelled or superseded callback may still be delivered by the host loop.
            if self._tokens.get(key) is not token:
                return
            self._tokens.pop(key, None)
            self._handles.pop(key, None)
            if self._closed:
                return
            callback()

        self._tokens[key] = token
        handle = self._after(delay, _fire)
        if self._tokens.get(key) is token:
            self._handles[key] = handle
        return handle

    def cancel(self, key: str) -> None:
        self._tokens.pop(key, None)
        handle = self._handles.pop(key, None)
        if handle is None:
            return
        try:
            self._after_cancel(handle)
        except Exception:
            pass

    def pending(self, key: str) -> bool:
        return key in self._handles

    def pending_keys(self) -> list[str]:
        return sorted(self._handles)

    def cancel_all(self) -> None:
        for key in list(self._handles):
            self.cancel(key)

    def close(self) -> None:
        """Cancel everything and refuse later schedules; late callbacks become no-ops."""

        count = len(self._handles)
        self.cancel_all()
        self._closed = True
        self._log("Dialog timers closed: cancelled=%d", count)

    def _log(self, message: str, *args: object) -> None:
        try:
            self._logger(message, *args)
        except TypeError:
            try:
                self._logger(message % args if args else message)
            except Exception:
                pass
        except Exception:
            pass
