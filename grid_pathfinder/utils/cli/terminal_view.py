"""ASCII terminal renderer for the search grid."""

from __future__ import annotations

import sys
from typing import Any, TextIO


# Basic ANSI colour codes used by :class:`TerminalView`
_COLOURS = {
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
    "reset": "\x1b[0m",
}

# Glyph and colour per cell role reported by ``Session.cell_roles``
_ROLE_STYLE = {
    "empty": (".", "reset"),
    "wall": ("#", "white"),
    "open": ("o", "cyan"),
    "closed": ("x", "blue"),
    "path": ("*", "yellow"),
    "start": ("S", "green"),
    "end": ("E", "red"),
}


class TerminalView:
    """Minimal grid viewer using ANSI colours."""

    def __init__(self, colour: bool = True, stream: TextIO | None = None) -> None:
        self.colour = colour
        self.enabled: bool = False
        self._stream = stream

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def render_lines(self, session: Any) -> list[str]:
        """Return one string per grid row plus a trailing status line."""

        roles = session.cell_roles()
        width, height = session.grid.size
        lines: list[str] = []
        for y in range(height):
            row: list[str] = []
            for x in range(width):
                glyph, colour = _ROLE_STYLE[roles.get((x, y), "empty")]
                if self.colour:
                    row.append(f"{_COLOURS[colour]}{glyph}")
                else:
                    row.append(glyph)
            if self.colour:
                row.append(_COLOURS["reset"])
            lines.append("".join(row))
        lines.append(f"[{session.algorithm_name} | {session.speed_name}] {session.status}")
        return lines

    def render(self, session: Any) -> None:
        """Draw ``session`` to the output stream if the view is enabled."""

        if not self.enabled:
            return
        out = self._stream if self._stream is not None else sys.stdout
        if self.colour:
            out.write("\x1b[H\x1b[2J")  # clear screen
        out.write("\n".join(self.render_lines(session)) + "\n")
        out.flush()


_view = TerminalView()


def get_view() -> TerminalView:
    """Return the shared :class:`TerminalView` instance."""

    return _view


def install_snapshot_hook(session: Any, view: TerminalView | None = None) -> None:
    """Redraw ``view`` after every search tick of ``session``."""

    target = view if view is not None else _view
    if getattr(session, "_terminal_view_hooked", False):
        return
    session.controller.subscribe(lambda _snap: target.render(session))
    setattr(session, "_terminal_view_hooked", True)


__all__ = ["TerminalView", "get_view", "install_snapshot_hook"]
