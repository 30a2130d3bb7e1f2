# grid_pathfinder/gui/window.py
"""Simple ``pygame`` window for rendering cells and text."""

from __future__ import annotations

import pygame


class Window:
    """``pygame`` backed drawing surface."""

    def __init__(self, size: tuple[int, int] = (800, 600), *, resizable: bool = False,
                 caption: str = "Grid Pathfinder") -> None:
        self.size = size
        flags = pygame.RESIZABLE if resizable else 0

        if not pygame.get_init(): pygame.init()
        if not pygame.font.get_init(): pygame.font.init()
        if not pygame.display.get_init(): pygame.display.init()

        self._surface = pygame.display.set_mode(self.size, flags)
        pygame.display.set_caption(caption)

        try:
            self._font = pygame.font.SysFont(None, 24)
        except pygame.error:
            self._font = pygame.font.Font(None, 24)

    def draw_rect(self, rect: tuple[int, int, int, int], colour: tuple[int, int, int]) -> None:
        pygame.draw.rect(self._surface, colour, rect)

    def draw_text(
        self, text: str, x: int, y: int, colour: tuple[int, int, int] = (255, 255, 255)
    ) -> None:
        if not self._font: return
        text_surf = self._font.render(text, True, colour)
        self._surface.blit(text_surf, (x, y))

    def refresh(self) -> None:
        pygame.display.flip()

    def clear(self, color: tuple[int, int, int] = (0, 0, 0)) -> None:
        self._surface.fill(color)


__all__ = ["Window"]
