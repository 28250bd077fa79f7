"""Periodic, cache-gated teammate HUD for SCP players."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional

from .hud_cache import HudCache
from .hud_timers import DEFAULT_TICK_INTERVAL, HudTimers
from .host import ChangingRoleEvent, DiedEvent, HostLike, LeftEvent, PlayerLike, Team, team_of
from .rendering import CLEAR_DURATION, HUD_DURATION, render_hud, safe_nickname

ROLE_SETTLE_DELAY = 0.5


class HudRefresher:
    """Pushes teammate status overlays and keeps them in sync with the round.

    All entry points run on the host update thread; the cache is only touched
    from there.
    """

    def __init__(
        self,
        host: HostLike,
        *,
        show_emojis: bool = True,
        debug: bool = False,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic,
        interval: float = DEFAULT_TICK_INTERVAL,
        target_team: Team = Team.SCPS,
    ) -> None:
        self._host = host
        self._logger = logger or logging.getLogger("SCPTeammateHUD")
        self._clock = clock
        self.show_emojis = show_emojis
        self.debug = debug
        self.target_team = target_team
        self._cache = HudCache(clock)
        self._timers = HudTimers(
            after=host.after,
            after_cancel=host.after_cancel,
            interval=interval,
            logger=self._logger,
        )
        self._enabled = False
        self._generation = 0
        # Bound methods compare equal but are new objects each access; keep the
        # exact references handed to the host so removal is symmetric.
        self._handlers = {
            "changing_role": self.on_changing_role,
            "died": self.on_died,
            "left": self.on_left,
        }

    # Lifecycle ------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def cache(self) -> HudCache:
        return self._cache

    @property
    def timers(self) -> HudTimers:
        return self._timers

    def enable(self) -> None:
        if self._enabled:
            return
        self._cache = HudCache(self._clock)
        self._generation += 1
        events = self._host.events
        for event_name, handler in self._handlers.items():
            getattr(events, event_name).add(handler)
        self._enabled = True
        self._timers.start_tick(self.tick)
        self._logger.debug("HUD refresher enabled (interval=%.2fs)", self._timers.interval)

    def disable(self) -> None:
        if not self._enabled:
            return
        self._enabled = False
        self._generation += 1
        events = self._host.events
        for event_name, handler in self._handlers.items():
            try:
                getattr(events, event_name).remove(handler)
            except Exception as exc:
                self._logger.warning("Failed to unregister %s handler: %s", event_name, exc)
        self._timers.cancel_all()
        for player in self._cache.players():
            self.clear_player(player)
        self._cache.clear()
        self._logger.debug("HUD refresher disabled")

    def tracked_players(self) -> List[PlayerLike]:
        return self._cache.players()

    # Periodic update --------------------------------------------------------

    def _alive_members(self) -> List[PlayerLike]:
        return [player for player in self._host.players_on(self.target_team) if player.is_alive]

    def tick(self) -> None:
        try:
            alive = self._alive_members()
            for player in alive:
                self.update_player(player, False)

            alive_ids = {id(player) for player in alive}
            stale = [
                player
                for player in self._cache.players()
                if id(player) not in alive_ids or not player.is_alive
            ]
            for player in stale:
                self.clear_player(player, forget=True)
        except Exception:
            self._logger.exception("Error while updating teammate HUD")

    def _qualifies(self, player: PlayerLike) -> bool:
        role = player.role
        return role is not None and role.team == self.target_team and bool(player.is_alive)

    def update_player(self, player: PlayerLike, force_update: bool) -> bool:
        """Render and push one player's overlay. Returns True when the host was called."""
        try:
            if not self._qualifies(player):
                return False

            teammates = [other for other in self._alive_members() if other is not player]
            text = render_hud(teammates, self.show_emojis) if teammates else ""
            if not text:
                entry = self._cache.get(player)
                if entry is not None and entry.text:
                    self.clear_player(player)
                return False

            if not self._cache.needs_push(player, text, force=force_update, duration=HUD_DURATION):
                return False

            player.show_hint(text, HUD_DURATION)
            self._cache.record(player, text)
            if self.debug:
                self._logger.debug("Updated HUD for %s:\n%s", safe_nickname(player), text)
            return True
        except Exception:
            nickname = safe_nickname(player) if player is not None else "null"
            self._logger.exception("Error while updating HUD for player %s", nickname)
            return False

    def clear_player(self, player: PlayerLike, *, forget: bool = False) -> None:
        try:
            player.show_hint("", CLEAR_DURATION)
        except Exception as exc:
            self._logger.error("Failed to clear HUD for player %s: %s", safe_nickname(player), exc)
        if forget:
            self._cache.discard(player)
        else:
            self._cache.blank(player)

    # Host events ------------------------------------------------------------

    def on_changing_role(self, ev: ChangingRoleEvent) -> None:
        player = ev.player
        self.clear_player(player)
        if team_of(ev.new_role) != self.target_team:
            return
        generation = self._generation

        def _refresh_after_settle() -> None:
            if not self._enabled or generation != self._generation:
                return
            self.update_player(player, True)

        self._timers.call_later(ROLE_SETTLE_DELAY, _refresh_after_settle)

    def on_died(self, ev: DiedEvent) -> None:
        self.clear_player(ev.player)

    def on_left(self, ev: LeftEvent) -> None:
        self.clear_player(ev.player, forget=True)


def build_refresher(host: HostLike, config: Any, logger: Optional[logging.Logger] = None) -> HudRefresher:
    """Create a refresher from plugin config, using the host clock when it has one."""
    host_clock = getattr(host, "now", None)
    return HudRefresher(
        host,
        show_emojis=bool(getattr(config, "show_emojis", True)),
        debug=bool(getattr(config, "debug", False)),
        logger=logger,
        clock=host_clock if callable(host_clock) else time.monotonic,
    )
