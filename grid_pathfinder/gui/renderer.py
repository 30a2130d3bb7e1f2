# grid_pathfinder/gui/renderer.py
"""Renderer for drawing a :class:`Session` grid to a :class:`Window`."""

from __future__ import annotations
from typing import Any

from .window import Window

# Colours per cell role
CELL_COLOR_MAP = {
    "empty": (255, 255, 255),
    "wall": (40, 40, 40),
    "open": (120, 200, 120),
    "closed": (230, 120, 120),
    "path": (90, 140, 240),
    "start": (0, 200, 0),
    "end": (220, 0, 0),
}
BACKGROUND_COLOR = (30, 30, 30)
TEXT_COLOR = (230, 230, 230)
STATUS_BAR_HEIGHT = 48


class Renderer:
    """Lay the grid out inside the window and draw each cell by role."""

    def __init__(self, window: Window, cell_size: int = 24, spacing: int = 2) -> None:
        self.window = window
        self.cell_size = cell_size
        self.spacing = spacing
        self.origin: tuple[int, int] = (0, 0)

    @property
    def pitch(self) -> int:
        return self.cell_size + self.spacing

    def layout(self, grid_size: tuple[int, int]) -> tuple[int, int]:
        """Centre a grid of ``grid_size`` cells in the area above the status bar."""

        width = grid_size[0] * self.pitch
        height = grid_size[1] * self.pitch
        area_w, area_h = self.window.size[0], self.window.size[1] - STATUS_BAR_HEIGHT
        self.origin = (max(0, (area_w - width) // 2), max(0, (area_h - height) // 2))
        return self.origin

    def cell_rect(self, x: int, y: int) -> tuple[int, int, int, int]:
        ox, oy = self.origin
        return (ox + x * self.pitch, oy + y * self.pitch, self.cell_size, self.cell_size)

    def cell_at(self, screen_pos: tuple[int, int]) -> tuple[int, int] | None:
        """Return the cell under ``screen_pos`` or ``None`` for gaps and margins."""

        dx = screen_pos[0] - self.origin[0]
        dy = screen_pos[1] - self.origin[1]
        if dx < 0 or dy < 0:
            return None
        x, rx = divmod(dx, self.pitch)
        y, ry = divmod(dy, self.pitch)
        if rx >= self.cell_size or ry >= self.cell_size:
            return None
        return int(x), int(y)

    def update(self, session: Any) -> None:
        self.window.clear(BACKGROUND_COLOR)
        self.layout(session.grid.size)

        roles = session.cell_roles()
        width, height = session.grid.size
        for x in range(width):
            for y in range(height):
                role = roles.get((x, y), "empty")
                self.window.draw_rect(self.cell_rect(x, y), CELL_COLOR_MAP[role])

        bar_y = self.window.size[1] - STATUS_BAR_HEIGHT + 4
        self.window.draw_text(session.status, 8, bar_y, TEXT_COLOR)
        info = (
            f"{session.algorithm_name} | speed: {session.speed_name}"
            f" | [Space] {session.pause_label}"
        )
        self.window.draw_text(info, 8, bar_y + 22, TEXT_COLOR)


__all__ = ["Renderer", "CELL_COLOR_MAP"]
