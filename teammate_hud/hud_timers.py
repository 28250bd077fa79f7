from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

AfterFn = Callable[[float, Callable[[], None]], object]
AfterCancelFn = Callable[[object], None]

DEFAULT_TICK_INTERVAL = 0.7


class HudTimers:
    """Owns the periodic HUD tick and one-shot delayed callbacks.

    Scheduling goes through the host's ``after``/``after_cancel`` pair, which
    runs callbacks on the host update thread.
    """

    def __init__(
        self,
        *,
        after: AfterFn,
        after_cancel: AfterCancelFn,
        interval: float = DEFAULT_TICK_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._after = after
        self._after_cancel = after_cancel
        self.interval = max(0.05, float(interval))
        self._logger = logger or logging.getLogger("SCPTeammateHUD.Timers")
        self._tick_handle: object | None = None
        self._tick_callback: Callable[[], None] | None = None
        self._pending: Dict[int, object] = {}
        self._next_token = 0

    @property
    def active(self) -> bool:
        return self._tick_callback is not None

    def start_tick(self, callback: Callable[[], None]) -> object:
        self.stop_tick()
        self._tick_callback = callback
        self._tick_handle = self._after(self.interval, self._run_tick)
        return self._tick_handle

    def stop_tick(self) -> None:
        handle = self._tick_handle
        self._tick_handle = None
        self._tick_callback = None
        if handle is not None:
            self._cancel(handle)

    def _run_tick(self) -> None:
        self._tick_handle = None
        callback = self._tick_callback
        if callback is None:
            return
        try:
            callback()
        finally:
            # stop_tick() inside the callback leaves the loop stopped
            if self._tick_callback is not None:
                self._tick_handle = self._after(self.interval, self._run_tick)

    def call_later(self, delay: float, callback: Callable[[], None]) -> object:
        token = self._next_token
        self._next_token += 1

        def _fire() -> None:
            if self._pending.pop(token, None) is None:
                return
            callback()

        handle = self._after(max(0.0, float(delay)), _fire)
        self._pending[token] = handle
        return handle

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def cancel_all(self) -> None:
        self.stop_tick()
        pending = list(self._pending.values())
        self._pending.clear()
        for handle in pending:
            self._cancel(handle)

    def _cancel(self, handle: object) -> None:
        try:
            self._after_cancel(handle)
        except Exception as exc:
            self._logger.debug("Failed to cancel scheduled callback %r: %s", handle, exc)
