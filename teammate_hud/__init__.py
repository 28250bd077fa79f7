"""SCP teammate HUD: periodic teammate status overlay for SCP players."""
from __future__ import annotations

from .config import PluginConfig
from .host import ChangingRoleEvent, DiedEvent, LeftEvent, RoleType, Team
from .refresher import HudRefresher

__all__ = [
    "ChangingRoleEvent",
    "DiedEvent",
    "HudRefresher",
    "LeftEvent",
    "PluginConfig",
    "RoleType",
    "Team",
]
