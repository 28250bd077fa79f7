"""YAML-backed configuration for the SCP teammate HUD."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILE = "scp_teammate_hud.yml"

_LOGGER = logging.getLogger("SCPTeammateHUD.Config")

# Keys as written by older configs that used the framework's camelCase names.
_ALIASES = {
    "enabled": "is_enabled",
    "isEnabled": "is_enabled",
    "IsEnabled": "is_enabled",
    "Debug": "debug",
    "showEmojis": "show_emojis",
    "ShowEmojis": "show_emojis",
}


def _coerce_bool(raw: Any, default: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        token = raw.strip().lower()
        if token in {"1", "true", "yes", "on"}:
            return True
        if token in {"0", "false", "no", "off"}:
            return False
    return default


@dataclass
class PluginConfig:
    """Flat key/value settings, read once when the plugin starts."""

    path: Optional[Path] = None
    is_enabled: bool = True
    debug: bool = False
    show_emojis: bool = True
    _loaded_from_disk: bool = field(default=False, init=False, repr=False)

    @classmethod
    def load(cls, path: Path) -> "PluginConfig":
        config = cls(path=Path(path))
        config._load()
        return config

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], path: Optional[Path] = None) -> "PluginConfig":
        config = cls(path=path)
        config._apply(data)
        return config

    # Persistence ---------------------------------------------------------

    def _load(self) -> None:
        if self.path is None:
            return
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _LOGGER.info("Config %s not found; writing defaults", self.path)
            self._write_defaults()
            return
        except OSError as exc:
            _LOGGER.warning("Failed to read config %s: %s; using defaults", self.path, exc)
            return
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            _LOGGER.warning("Malformed config %s: %s; using defaults", self.path, exc)
            return
        if data is None:
            return
        if not isinstance(data, Mapping):
            _LOGGER.warning("Config %s is not a mapping; using defaults", self.path)
            return
        self._apply(data)
        self._loaded_from_disk = True

    def _apply(self, data: Mapping[str, Any]) -> None:
        normalised: Dict[str, Any] = {}
        for key, value in data.items():
            normalised[_ALIASES.get(str(key), str(key))] = value
        self.is_enabled = _coerce_bool(normalised.get("is_enabled"), True)
        self.debug = _coerce_bool(normalised.get("debug"), False)
        self.show_emojis = _coerce_bool(normalised.get("show_emojis"), True)

    def _write_defaults(self) -> None:
        try:
            self.save()
        except OSError as exc:
            _LOGGER.warning("Failed to write default config %s: %s", self.path, exc)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "is_enabled": bool(self.is_enabled),
            "debug": bool(self.debug),
            "show_emojis": bool(self.show_emojis),
        }

    def save(self) -> None:
        if self.path is None:
            raise ValueError("PluginConfig has no path to save to")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(self.as_dict(), sort_keys=False), encoding="utf-8")

    @property
    def loaded_from_disk(self) -> bool:
        return self._loaded_from_disk


def resolve_config_path(root: Path) -> Path:
    return Path(root) / CONFIG_FILE
