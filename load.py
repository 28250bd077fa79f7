"""Primary entry point for the SCP teammate HUD plugin."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Optional

from teammate_hud.config import PluginConfig, resolve_config_path
from teammate_hud.host import HostLike
from teammate_hud.logging_utils import LOGGER_NAME, configure_logger
from teammate_hud.refresher import HudRefresher, build_refresher
from version import __version__ as TEAMMATE_HUD_VERSION

PLUGIN_NAME = "SCPTeammateHUD"
PLUGIN_AUTHOR = "SCPTeammateHUD contributors"
PLUGIN_VERSION = TEAMMATE_HUD_VERSION
PLUGIN_PRIORITY = "low"

LOGGER = logging.getLogger(LOGGER_NAME)


class _PluginRuntime:
    """Encapsulates plugin state so module globals stay tidy."""

    def __init__(self, host: HostLike, config: PluginConfig) -> None:
        self.host = host
        self.config = config
        self._lock = threading.Lock()
        self._running = False
        self.refresher: HudRefresher = build_refresher(host, config, LOGGER)

    @property
    def running(self) -> bool:
        return self._running

    # Lifecycle ------------------------------------------------------------

    def start(self) -> str:
        with self._lock:
            if self._running:
                return PLUGIN_NAME
            if not self.config.is_enabled:
                LOGGER.info("SCP teammate HUD disabled by config; not starting")
                return PLUGIN_NAME
            self.refresher.enable()
            self._running = True
        LOGGER.info("SCP teammate HUD enabled")
        return PLUGIN_NAME

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
        self.refresher.disable()
        LOGGER.info("SCP teammate HUD disabled")


# Host hook functions ------------------------------------------------------

_plugin: Optional[_PluginRuntime] = None
_config: Optional[PluginConfig] = None
_plugin_dir: Optional[Path] = None


def _config_root(plugin_dir: Path, host: Any) -> Path:
    config_dir = getattr(host, "config_dir", None)
    return Path(config_dir) if config_dir else plugin_dir


def plugin_start(plugin_dir: str, host: HostLike) -> str:
    global _plugin, _config, _plugin_dir
    if _plugin is not None:
        return _plugin.start()
    _plugin_dir = Path(plugin_dir)
    _config = PluginConfig.load(resolve_config_path(_config_root(_plugin_dir, host)))
    configure_logger(getattr(host, "logger", None), debug=_config.debug)
    LOGGER.debug(
        "Initialising %s %s from %s: is_enabled=%s debug=%s show_emojis=%s",
        PLUGIN_NAME,
        PLUGIN_VERSION,
        plugin_dir,
        _config.is_enabled,
        _config.debug,
        _config.show_emojis,
    )
    _plugin = _PluginRuntime(host, _config)
    return _plugin.start()


def plugin_stop() -> None:
    global _plugin, _config
    if _plugin:
        try:
            _plugin.stop()
        finally:
            _plugin = None
    _config = None


def plugin_reload() -> str:
    """Re-read configuration and restart against the same host."""
    if _plugin is None or _plugin_dir is None:
        LOGGER.debug("plugin_reload invoked before plugin_start; ignoring")
        return PLUGIN_NAME
    host = _plugin.host
    plugin_dir = _plugin_dir
    plugin_stop()
    return plugin_start(str(plugin_dir), host)


# Metadata expected by some plugin loaders
name = PLUGIN_NAME
version = PLUGIN_VERSION
author = PLUGIN_AUTHOR
priority = PLUGIN_PRIORITY
