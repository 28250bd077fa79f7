"""Per-player record of the last overlay pushed."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


@dataclass
class HudCacheEntry:
    text: str
    pushed_at: float


class HudCache:
    """Ownership map from player handle to the last pushed overlay.

    Players are keyed by identity, so two handles that compare equal are still
    tracked separately.
    """

    REFRESH_FRACTION = 0.8

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[int, HudCacheEntry] = {}
        self._players: Dict[int, Any] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, player: object) -> bool:
        return id(player) in self._entries

    def get(self, player: Any) -> Optional[HudCacheEntry]:
        return self._entries.get(id(player))

    def players(self) -> List[Any]:
        return list(self._players.values())

    def non_empty_players(self) -> List[Any]:
        return [self._players[key] for key, entry in self._entries.items() if entry.text]

    def needs_push(self, player: Any, text: str, *, force: bool, duration: float) -> bool:
        if force:
            return True
        entry = self.get(player)
        if entry is None:
            return True
        if entry.text != text:
            return True
        return (self._clock() - entry.pushed_at) > duration * self.REFRESH_FRACTION

    def record(self, player: Any, text: str) -> HudCacheEntry:
        entry = HudCacheEntry(text=text, pushed_at=self._clock())
        self._entries[id(player)] = entry
        self._players[id(player)] = player
        return entry

    def blank(self, player: Any) -> None:
        entry = self._entries.get(id(player))
        if entry is not None:
            entry.text = ""

    def discard(self, player: Any) -> None:
        self._entries.pop(id(player), None)
        self._players.pop(id(player), None)

    def clear(self) -> None:
        self._entries.clear()
        self._players.clear()
