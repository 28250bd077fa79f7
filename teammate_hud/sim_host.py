"""In-memory game server host.

Implements the host protocols from :mod:`teammate_hud.host` with a virtual
clock so rounds can be scripted deterministically by tests and the preview
tool.
"""
from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .host import ChangingRoleEvent, DiedEvent, LeftEvent, RoleType, Team, team_of


@dataclass
class SimulatedRole:
    type: RoleType

    @property
    def team(self) -> Team:
        return team_of(self.type)


@dataclass
class ShieldStat:
    cur_value: float = 0.0


class SimulatedStats:
    def __init__(self, shield: Optional[float] = None) -> None:
        self._modules: Dict[str, object] = {}
        if shield is not None:
            self._modules["HumeShieldStat"] = ShieldStat(shield)

    def get_module(self, name: str) -> Optional[object]:
        return self._modules.get(name)

    def set_shield(self, value: float) -> None:
        module = self._modules.get("HumeShieldStat")
        if isinstance(module, ShieldStat):
            module.cur_value = value
        else:
            self._modules["HumeShieldStat"] = ShieldStat(value)


@dataclass(eq=False)
class SimulatedPlayer:
    nickname: Optional[str]
    role: Optional[SimulatedRole] = None
    health: float = 100.0
    is_alive: bool = True
    stats: Optional[SimulatedStats] = field(default_factory=SimulatedStats)
    hints: List[Tuple[str, float]] = field(default_factory=list)

    def show_hint(self, text: str, duration: float) -> None:
        self.hints.append((text, duration))

    @property
    def last_hint(self) -> Optional[Tuple[str, float]]:
        return self.hints[-1] if self.hints else None


class EventHook:
    """Ordered handler list with symmetric add/remove."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None) -> None:
        self.name = name
        self._handlers: List[Callable[[Any], None]] = []
        self._logger = logger or logging.getLogger("SCPTeammateHUD.SimHost")

    def __len__(self) -> int:
        return len(self._handlers)

    def add(self, handler: Callable[[Any], None]) -> None:
        self._handlers.append(handler)

    def remove(self, handler: Callable[[Any], None]) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            self._logger.debug("Handler %r was not registered on %s", handler, self.name)

    def fire(self, ev: Any) -> None:
        for handler in list(self._handlers):
            try:
                handler(ev)
            except Exception:
                self._logger.exception("Handler %r failed for %s", handler, self.name)


class SimulatedEvents:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.changing_role = EventHook("changing_role", logger)
        self.died = EventHook("died", logger)
        self.left = EventHook("left", logger)


class ManualScheduler:
    """``after``/``after_cancel`` over a virtual clock advanced by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._cancelled: set = set()
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def after(self, seconds: float, callback: Callable[[], None]) -> int:
        handle = next(self._seq)
        heapq.heappush(self._queue, (self._now + max(0.0, float(seconds)), handle, callback))
        return handle

    def after_cancel(self, handle: object) -> None:
        self._cancelled.add(handle)

    @property
    def pending(self) -> int:
        return sum(1 for _due, handle, _cb in self._queue if handle not in self._cancelled)

    def advance(self, seconds: float) -> None:
        target = self._now + max(0.0, float(seconds))
        while self._queue and self._queue[0][0] <= target:
            due, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()
        self._now = target


class SimulatedServer:
    """Minimal server exposing players, events and cooperative scheduling."""

    def __init__(
        self,
        *,
        logger: Optional[logging.Logger] = None,
        config_dir: Optional[Path] = None,
        scheduler: Optional[ManualScheduler] = None,
    ) -> None:
        self.logger = logger
        self.config_dir = config_dir
        self.scheduler = scheduler or ManualScheduler()
        self.events = SimulatedEvents(logger)
        self._players: List[SimulatedPlayer] = []

    @property
    def players(self) -> List[SimulatedPlayer]:
        return list(self._players)

    def players_on(self, team: Team) -> List[SimulatedPlayer]:
        return [player for player in self._players if player.role is not None and player.role.team == team]

    def after(self, seconds: float, callback: Callable[[], None]) -> int:
        return self.scheduler.after(seconds, callback)

    def after_cancel(self, handle: object) -> None:
        self.scheduler.after_cancel(handle)

    def now(self) -> float:
        return self.scheduler.now()

    def advance(self, seconds: float) -> None:
        self.scheduler.advance(seconds)

    # Round scripting ------------------------------------------------------

    def connect(
        self,
        nickname: Optional[str],
        role: RoleType = RoleType.SPECTATOR,
        *,
        health: float = 100.0,
        shield: Optional[float] = None,
    ) -> SimulatedPlayer:
        player = SimulatedPlayer(
            nickname=nickname,
            role=SimulatedRole(role),
            health=health,
            is_alive=team_of(role) != Team.DEAD,
            stats=SimulatedStats(shield),
        )
        self._players.append(player)
        return player

    def set_role(self, player: SimulatedPlayer, role: RoleType, *, health: float = 100.0) -> None:
        old_role = player.role.type if player.role is not None else None
        self.events.changing_role.fire(ChangingRoleEvent(player, old_role, role))
        player.role = SimulatedRole(role)
        player.health = health
        player.is_alive = team_of(role) != Team.DEAD

    def kill(self, player: SimulatedPlayer) -> None:
        player.is_alive = False
        player.health = 0.0
        self.events.died.fire(DiedEvent(player))
        player.role = SimulatedRole(RoleType.SPECTATOR)

    def disconnect(self, player: SimulatedPlayer) -> None:
        self.events.left.fire(LeftEvent(player))
        if player in self._players:
            self._players.remove(player)
        player.is_alive = False
