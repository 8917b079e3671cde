from eq_controller.services.dialog_timers import DialogTimers


class AfterHarness:
    def __init__(self) -> None:
        self.scheduled: list[tuple[str, int, object]] = []
        self.cancelled: list[object] = []

    def after(self, ms: int, cb) -> str:
        handle = f"h{len(self.scheduled) + 1}"
        self.scheduled.append((handle, ms, cb))
        return handle

    def cancel(self, handle: object) -> None:
        self.cancelled.append(handle)

    def run(self, handle: str) -> None:
        for h, _ms, cb in list(self.scheduled):
            if h == handle:
                cb()
                return
        raise AssertionError(f"Handle {handle} not found")


def test_schedule_replaces_pending_callback_for_key() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = DialogTimers(after=harness.after, after_cancel=harness.cancel)

    first = timers.schedule("readout:fader-0", lambda: calls.append("first"), delay_ms=1500)
    second = timers.schedule("readout:fader-0", lambda: calls.append("second"), delay_ms=1500)

    assert harness.cancelled == [first]
    assert timers.pending_keys() == ["readout:fader-0"]
    # The host loop may still deliver the superseded callback.
    harness.run(first)
    assert calls == []
    harness.run(second)
    assert calls == ["second"]
    assert not timers.pending("readout:fader-0")


def test_cancel_suppresses_late_delivery() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = DialogTimers(after=harness.after, after_cancel=harness.cancel)

    handle = timers.schedule("initial-focus", lambda: calls.append("focus"), delay_ms=100)
    timers.cancel("initial-focus")
    harness.run(handle)

    assert harness.cancelled == [handle]
    assert calls == []


def test_close_cancels_everything_and_refuses_new_work() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = DialogTimers(after=harness.after, after_cancel=harness.cancel)

    a = timers.schedule("a", lambda: calls.append("a"), delay_ms=10)
    b = timers.schedule("b", lambda: calls.append("b"), delay_ms=20)
    timers.close()

    assert timers.closed
    assert sorted(harness.cancelled) == sorted([a, b])
    assert timers.schedule("c", lambda: calls.append("c"), delay_ms=5) is None
    harness.run(a)
    harness.run(b)
    assert calls == []
    assert timers.pending_keys() == []


def test_fired_callback_clears_pending_key() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = DialogTimers(after=harness.after, after_cancel=harness.cancel)

    handle = timers.schedule("readout:fader-3", lambda: calls.append("hide"), delay_ms=1500)
    assert harness.scheduled[-1][1] == 1500
    assert timers.pending("readout:fader-3")

    harness.run(handle)

    assert calls == ["hide"]
    assert timers.pending_keys() == []
    timers.cancel("readout:fader-3")
    assert harness.cancelled == []


def test_negative_delay_is_clamped_and_synchronous_after_is_safe() -> None:
    calls: list[str] = []

    def _immediate(ms: int, cb):
        assert ms == 0
        cb()
        return "sync"

    timers = DialogTimers(after=_immediate, after_cancel=lambda _h: None)
    timers.schedule("now", lambda: calls.append("ran"), delay_ms=-50)

    assert calls == ["ran"]
    assert not timers.pending("now")


def test_logger_failures_are_swallowed() -> None:
    harness = AfterHarness()

    def _bad_logger(*_args):
        raise RuntimeError("boom")

    timers = DialogTimers(after=harness.after, after_cancel=harness.cancel, logger=_bad_logger)
    timers.close()
    assert timers.closed
