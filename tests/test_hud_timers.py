from __future__ import annotations

import pytest

from teammate_hud.hud_cache import HudCache
from teammate_hud.hud_timers import HudTimers


class TimeStub:
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def now(self) -> float:
        return self.value


class AfterHarness:
    def __init__(self) -> None:
        self.scheduled: list[tuple[str, float, object]] = []
        self.cancelled: list[object] = []

    def after(self, seconds: float, cb) -> str:
        handle = f"h{len(self.scheduled) + 1}"
        self.scheduled.append((handle, seconds, cb))
        return handle

    def cancel(self, handle: object) -> None:
        self.cancelled.append(handle)

    def run(self, handle: str) -> None:
        for h, _delay, cb in list(self.scheduled):
            if h == handle:
                cb()
                return
        raise AssertionError(f"Handle {handle} not found")


def test_tick_reschedules_after_callback() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel)

    handle = timers.start_tick(lambda: calls.append("tick"))
    assert harness.scheduled[-1][1] == pytest.approx(0.7)
    harness.run(handle)

    assert calls == ["tick"]
    assert len(harness.scheduled) == 2
    assert timers.active is True


def test_tick_reschedules_even_when_callback_raises() -> None:
    harness = AfterHarness()
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel)

    def boom() -> None:
        raise RuntimeError("tick failed")

    handle = timers.start_tick(boom)
    with pytest.raises(RuntimeError):
        harness.run(handle)

    assert len(harness.scheduled) == 2


def test_stop_tick_cancels_and_prevents_reschedule() -> None:
    harness = AfterHarness()
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel)
    handle = timers.start_tick(lambda: None)

    timers.stop_tick()
    harness.run(handle)

    assert harness.cancelled == [handle]
    assert len(harness.scheduled) == 1
    assert timers.active is False


def test_stop_from_inside_tick_leaves_loop_stopped() -> None:
    harness = AfterHarness()
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel)
    handle = timers.start_tick(lambda: timers.stop_tick())

    harness.run(handle)

    assert len(harness.scheduled) == 1


def test_interval_is_clamped() -> None:
    harness = AfterHarness()
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel, interval=0.0)

    timers.start_tick(lambda: None)

    assert harness.scheduled[-1][1] == pytest.approx(0.05)


def test_cancel_all_cancels_pending_delayed_callbacks() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel)
    tick_handle = timers.start_tick(lambda: None)
    first = timers.call_later(0.5, lambda: calls.append("first"))
    second = timers.call_later(0.5, lambda: calls.append("second"))
    assert timers.pending_count == 2

    timers.cancel_all()
    # a host that still delivers a cancelled callback must not run it
    harness.run(first)

    assert calls == []
    assert set(harness.cancelled) == {tick_handle, first, second}
    assert timers.pending_count == 0


def test_call_later_runs_once_and_forgets_handle() -> None:
    harness = AfterHarness()
    calls: list[str] = []
    timers = HudTimers(after=harness.after, after_cancel=harness.cancel)

    handle = timers.call_later(0.5, lambda: calls.append("ran"))
    harness.run(handle)
    harness.run(handle)

    assert calls == ["ran"]
    assert timers.pending_count == 0


def test_cancel_errors_are_swallowed() -> None:
    harness = AfterHarness()

    def broken_cancel(handle: object) -> None:
        raise RuntimeError("host refused")

    timers = HudTimers(after=harness.after, after_cancel=broken_cancel)
    timers.start_tick(lambda: None)
    timers.call_later(0.5, lambda: None)

    timers.cancel_all()

    assert timers.active is False
    assert timers.pending_count == 0


def test_cache_refreshes_before_display_expires() -> None:
    clock = TimeStub()
    cache = HudCache(clock.now)
    player = object()

    assert cache.needs_push(player, "text", force=False, duration=2.0) is True
    cache.record(player, "text")
    assert cache.needs_push(player, "text", force=False, duration=2.0) is False
    assert cache.needs_push(player, "other", force=False, duration=2.0) is True
    assert cache.needs_push(player, "text", force=True, duration=2.0) is True

    clock.value = 1.6
    assert cache.needs_push(player, "text", force=False, duration=2.0) is False
    clock.value = 1.61
    assert cache.needs_push(player, "text", force=False, duration=2.0) is True


def test_cache_blank_discard_and_identity_keys() -> None:
    cache = HudCache(lambda: 0.0)

    class Handle:
        def __eq__(self, other: object) -> bool:
            return True

        __hash__ = object.__hash__

    first, second = Handle(), Handle()
    cache.record(first, "one")
    cache.record(second, "two")
    assert len(cache) == 2

    cache.blank(first)
    assert cache.get(first).text == ""
    assert cache.non_empty_players() == [second]

    cache.discard(first)
    assert first not in cache
    assert cache.players() == [second]

    cache.blank(first)
    assert first not in cache

    cache.clear()
    assert len(cache) == 0
