"""Types describing the game server host the plugin runs inside."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Protocol


class Team(Enum):
    SCPS = "SCPs"
    FOUNDATION_FORCES = "FoundationForces"
    CHAOS_INSURGENCY = "ChaosInsurgency"
    SCIENTISTS = "Scientists"
    CLASS_D = "ClassD"
    DEAD = "Dead"
    OTHER_ALIVE = "OtherAlive"


class RoleType(Enum):
    NONE = "None"
    SCP049 = "Scp049"
    SCP0492 = "Scp0492"
    SCP079 = "Scp079"
    SCP096 = "Scp096"
    SCP106 = "Scp106"
    SCP173 = "Scp173"
    SCP939 = "Scp939"
    SCP3114 = "Scp3114"
    CLASS_D = "ClassD"
    SCIENTIST = "Scientist"
    FACILITY_GUARD = "FacilityGuard"
    NTF_SERGEANT = "NtfSergeant"
    CHAOS_RIFLEMAN = "ChaosRifleman"
    TUTORIAL = "Tutorial"
    SPECTATOR = "Spectator"


ROLE_TEAMS = {
    RoleType.SCP049: Team.SCPS,
    RoleType.SCP0492: Team.SCPS,
    RoleType.SCP079: Team.SCPS,
    RoleType.SCP096: Team.SCPS,
    RoleType.SCP106: Team.SCPS,
    RoleType.SCP173: Team.SCPS,
    RoleType.SCP939: Team.SCPS,
    RoleType.SCP3114: Team.SCPS,
    RoleType.CLASS_D: Team.CLASS_D,
    RoleType.SCIENTIST: Team.SCIENTISTS,
    RoleType.FACILITY_GUARD: Team.FOUNDATION_FORCES,
    RoleType.NTF_SERGEANT: Team.FOUNDATION_FORCES,
    RoleType.CHAOS_RIFLEMAN: Team.CHAOS_INSURGENCY,
    RoleType.SPECTATOR: Team.DEAD,
    RoleType.NONE: Team.DEAD,
}


def team_of(role_type: Any) -> Team:
    """Resolve the team a role type belongs to; unknown roles count as other-alive."""
    return ROLE_TEAMS.get(role_type, Team.OTHER_ALIVE)


class RoleLike(Protocol):
    type: RoleType
    team: Team


class StatusLike(Protocol):
    def get_module(self, name: str) -> Optional[object]: ...


class PlayerLike(Protocol):
    nickname: Optional[str]
    is_alive: bool
    health: float
    role: Optional[RoleLike]
    stats: Optional[StatusLike]

    def show_hint(self, text: str, duration: float) -> None: ...


@dataclass(frozen=True, eq=False)
class ChangingRoleEvent:
    player: PlayerLike
    old_role: Optional[RoleType]
    new_role: RoleType


@dataclass(frozen=True, eq=False)
class DiedEvent:
    player: PlayerLike


@dataclass(frozen=True, eq=False)
class LeftEvent:
    player: PlayerLike


class HookLike(Protocol):
    def add(self, handler: Callable[[Any], None]) -> None: ...
    def remove(self, handler: Callable[[Any], None]) -> None: ...


class EventSource(Protocol):
    changing_role: HookLike
    died: HookLike
    left: HookLike


class HostLike(Protocol):
    """What the plugin needs from the server it is loaded into."""

    events: EventSource
    logger: Optional[logging.Logger]
    config_dir: Optional[Path]

    @property
    def players(self) -> Iterable[PlayerLike]: ...

    def players_on(self, team: Team) -> Iterable[PlayerLike]: ...

    def after(self, seconds: float, callback: Callable[[], None]) -> object: ...

    def after_cancel(self, handle: object) -> None: ...
