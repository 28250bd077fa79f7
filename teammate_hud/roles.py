"""Role icon and label lookup for teammate lines."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .host import RoleType

UNKNOWN_TAG = ("❓", "UNKNOWN")
FALLBACK_ICON = "🔷"

_ROLE_TAGS: Dict[RoleType, Tuple[str, str]] = {
    RoleType.SCP049: ("🧪", "049"),
    RoleType.SCP0492: ("🧟", "049-2"),
    RoleType.SCP079: ("💻", "079"),
    RoleType.SCP096: ("😢", "096"),
    RoleType.SCP106: ("👴", "106"),
    RoleType.SCP173: ("🗿", "173"),
    RoleType.SCP939: ("🐺", "939"),
}


def _raw_role_name(role_type: Any) -> str:
    if isinstance(role_type, RoleType):
        return role_type.value
    name = getattr(role_type, "name", None)
    return str(name if isinstance(name, str) else role_type)


def role_icon_and_label(role: Optional[Any]) -> Tuple[str, str]:
    if role is None:
        return UNKNOWN_TAG
    role_type = getattr(role, "type", None)
    if role_type is None:
        return UNKNOWN_TAG
    known = _ROLE_TAGS.get(role_type)
    if known is not None:
        return known
    # Scp3114 -> 3114, anything without the prefix keeps its name
    label = _raw_role_name(role_type).replace("Scp", "").replace("SCP", "")
    return FALLBACK_ICON, label or "UNKNOWN"


def role_tag(role: Optional[Any], show_emojis: bool = True) -> str:
    """Return ``"<icon> <label>"`` for a role, or just the label without emojis."""
    icon, label = role_icon_and_label(role)
    if not show_emojis:
        return label
    return f"{icon} {label}"
