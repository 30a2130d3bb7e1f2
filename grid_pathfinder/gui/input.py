"""Handle ``pygame`` input events and forward them to the :class:`Session`."""

from __future__ import annotations

from typing import Any, Dict

import pygame

from ..core.session import EditMode

_MODE_KEYS = {
    pygame.K_s: EditMode.PLACING_START,
    pygame.K_e: EditMode.PLACING_END,
    pygame.K_w: EditMode.PLACING_WALLS,
}

_SPEED_KEYS = {
    pygame.K_f: "fast",
    pygame.K_a: "average",
    pygame.K_l: "slow",
}

_ALGORITHM_KEYS = {
    pygame.K_1: 0,
    pygame.K_2: 1,
}


def handle_events(session: Any, renderer: Any, state: Dict[str, Any]) -> None:
    """Process ``pygame`` events: grid clicks, edit modes and run controls."""

    for ev in pygame.event.get():
        if ev.type == pygame.QUIT:
            state["running"] = False
            return

        if ev.type == pygame.MOUSEBUTTONDOWN:
            if ev.button != 1:
                continue
            cell = renderer.cell_at(ev.pos)
            if cell is not None:
                session.on_node_clicked(*cell)

        elif ev.type == pygame.KEYDOWN:
            if ev.key in _MODE_KEYS:
                session.set_mode(_MODE_KEYS[ev.key])
            elif ev.key in _SPEED_KEYS:
                session.set_speed(_SPEED_KEYS[ev.key])
            elif ev.key in _ALGORITHM_KEYS:
                session.set_algorithm(_ALGORITHM_KEYS[ev.key])
            elif ev.key in (pygame.K_g, pygame.K_RETURN):
                session.generate_path()
            elif ev.key == pygame.K_SPACE:
                state["paused"] = session.toggle_pause()
            elif ev.key == pygame.K_x:
                session.cancel()
            elif ev.key == pygame.K_c:
                session.clear_walls()
            elif ev.key == pygame.K_ESCAPE:
                state["running"] = False
                return


__all__ = ["handle_events"]
