"""Builds the overlay text shown to SCP players."""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List

from .roles import role_tag

_LOGGER = logging.getLogger("SCPTeammateHUD.Rendering")

HUD_DURATION = 2.0
CLEAR_DURATION = 0.1
HUD_TEMPLATE = "<voffset=1em><align=left><size=50%>{0}</size></align></voffset>"
SHIELD_MODULE = "HumeShieldStat"
NICKNAME_PLACEHOLDER = "(unknown)"

_MARKUP_RE = re.compile(r"<[^<>]*>")


def _truncate(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def read_shield(player: Any) -> int:
    """Current shield value, truncated; 0 when the stat cannot be read."""
    try:
        stats = getattr(player, "stats", None)
        if stats is None:
            return 0
        module = stats.get_module(SHIELD_MODULE)
        if module is None:
            return 0
        return _truncate(getattr(module, "cur_value", 0))
    except Exception as exc:
        _LOGGER.error("Failed to read shield value: %s", exc)
    return 0


def safe_nickname(player: Any) -> str:
    try:
        nickname = getattr(player, "nickname", None)
    except Exception:
        return NICKNAME_PLACEHOLDER
    if not isinstance(nickname, str) or not nickname:
        return NICKNAME_PLACEHOLDER
    return nickname


def render_line(teammate: Any, show_emojis: bool = True) -> str:
    tag = role_tag(teammate.role, show_emojis)
    health = _truncate(getattr(teammate, "health", 0))
    shield = read_shield(teammate)
    return (
        f"[<color=white>{safe_nickname(teammate)}</color>] "
        f"{tag} | "
        f"<color=red>{health}HP</color>  "
        f"<color=#00FFFF>{shield}HS</color>"
    )


def render_hud(teammates: Iterable[Any], show_emojis: bool = True) -> str:
    """Render one line per teammate and wrap it in the display template.

    Teammates whose role cannot be resolved, or whose state cannot be read,
    are skipped. Returns an empty string when nothing was rendered.
    """
    lines: List[str] = []
    for teammate in teammates:
        try:
            if teammate.role is None:
                continue
            lines.append(render_line(teammate, show_emojis))
        except Exception as exc:
            _LOGGER.error("Skipping teammate %s: %s", safe_nickname(teammate), exc)
    if not lines:
        return ""
    return HUD_TEMPLATE.format("\n".join(lines))


def strip_markup(text: str) -> str:
    """Remove rich-text tags and collapse double spaces, for logs and previews."""
    plain = _MARKUP_RE.sub("", text or "")
    return re.sub(r" {2,}", " ", plain)
