#!/usr/bin/env python3
"""Play a scripted round against the in-memory server and print every HUD push."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from teammate_hud.config import PluginConfig  # noqa: E402
from teammate_hud.host import RoleType  # noqa: E402
from teammate_hud.refresher import build_refresher  # noqa: E402
from teammate_hud.rendering import strip_markup  # noqa: E402
from teammate_hud.sim_host import SimulatedPlayer, SimulatedServer  # noqa: E402


def _print_step(message: str) -> None:
    print(f"[hud-preview] {message}")


def _dump_hints(players: Sequence[SimulatedPlayer], seen: dict, *, raw: bool, now: float) -> None:
    for player in players:
        start = seen.get(id(player), 0)
        for text, duration in player.hints[start:]:
            shown = text if raw else strip_markup(text)
            if not text:
                _print_step(f"t={now:5.1f}s {player.nickname}: <clear> ({duration:.1f}s)")
                continue
            _print_step(f"t={now:5.1f}s {player.nickname} ({duration:.1f}s):")
            for line in shown.splitlines():
                print(f"    {line}")
        seen[id(player)] = len(player.hints)


def run_preview(*, raw: bool = False, show_emojis: bool = True, ticks: int = 3) -> List[SimulatedPlayer]:
    server = SimulatedServer()
    config = PluginConfig(show_emojis=show_emojis)
    refresher = build_refresher(server, config)

    doctor = server.connect("Doctor", RoleType.SCP049, health=1800.4, shield=250.9)
    peanut = server.connect("Peanut", RoleType.SCP173, health=3200.0, shield=63.7)
    guard = server.connect("Guard", RoleType.FACILITY_GUARD)
    players = [doctor, peanut, guard]
    seen: dict = {}

    refresher.enable()
    _print_step("Round started: Doctor (049), Peanut (173), Guard")
    for _ in range(max(1, ticks)):
        server.advance(refresher.timers.interval)
        _dump_hints(players, seen, raw=raw, now=server.now())

    _print_step("Guard becomes SCP-939")
    server.set_role(guard, RoleType.SCP939, health=2700.0)
    _dump_hints(players, seen, raw=raw, now=server.now())
    server.advance(0.7)
    _dump_hints(players, seen, raw=raw, now=server.now())

    _print_step("Peanut dies")
    server.kill(peanut)
    _dump_hints(players, seen, raw=raw, now=server.now())
    server.advance(0.7)
    _dump_hints(players, seen, raw=raw, now=server.now())

    _print_step("Plugin disabled")
    refresher.disable()
    _dump_hints(players, seen, raw=raw, now=server.now())
    return players


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--raw", action="store_true", help="Print rich-text markup instead of plain text")
    parser.add_argument("--no-emojis", action="store_true", help="Render role labels without icons")
    parser.add_argument("--ticks", type=int, default=3, help="Ticks to run before the role change (default: 3)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    run_preview(raw=args.raw, show_emojis=not args.no_emojis, ticks=args.ticks)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
