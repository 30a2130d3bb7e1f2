"""Implementations of development CLI commands."""

from __future__ import annotations

from typing import Any, Dict, List, TYPE_CHECKING
import logging

from ...core.errors import PathfinderError
from ...core.session import EditMode
from ..observer import install_tick_observer, print_stats, toggle_live_stats
from . import terminal_view

if TYPE_CHECKING:
    from ...core.session import Session

logger = logging.getLogger(__name__)


def _parse_xy(args: List[str]) -> tuple[int, int] | None:
    if len(args) < 2:
        return None
    try:
        return int(args[0]), int(args[1])
    except ValueError:
        return None


def _place(session: Session, mode: EditMode, args: List[str], usage: str) -> bool:
    xy = _parse_xy(args)
    if xy is None:
        logger.info("Usage: %s", usage)
        return False
    if not session.grid.in_range(*xy):
        logger.error("(%s, %s) is outside the %sx%s grid.", xy[0], xy[1], *session.grid.size)
        return False
    if not session.set_mode(mode):
        return False
    return session.on_node_clicked(*xy)


def place_start(session: Session, args: List[str]) -> bool:
    return _place(session, EditMode.PLACING_START, args, "/start <x> <y>")


def place_end(session: Session, args: List[str]) -> bool:
    return _place(session, EditMode.PLACING_END, args, "/end <x> <y>")


def toggle_wall(session: Session, args: List[str]) -> bool:
    return _place(session, EditMode.PLACING_WALLS, args, "/wall <x> <y>")


def algorithm(session: Session, name: str | None) -> None:
    if name is None:
        logger.info("Current algorithm: %s", session.algorithm_name)
        return
    try:
        session.set_algorithm(name)
    except ValueError as e:
        logger.error("%s. Known: astar, greedy.", e)


def speed(session: Session, value: str | None) -> None:
    if value is None:
        logger.info("Current speed: %s", session.speed_name)
        return
    try:
        session.set_speed(value)
    except ValueError as e:
        logger.error("%s. Use fast, average, slow or seconds.", e)


def go(session: Session) -> None:
    if not session.generate_path():
        logger.info("Path generation not started: %s", session.status)


def pause(session: Session, state: Dict[str, Any]) -> None:
    state["paused"] = session.toggle_pause()
    logger.info("Search %s.", "paused" if state["paused"] else "running")


def step(session: Session) -> None:
    if not session.controller.is_paused:
        logger.info("Search is not paused. Use /pause first.")
        return
    session.controller.step()


def cancel(session: Session) -> None:
    session.cancel()


def regenerate(session: Session, args: List[str]) -> None:
    size = _parse_xy(args) if args else None
    if args and (size is None or size[0] <= 0 or size[1] <= 0):
        logger.info("Usage: /regen [width height]")
        return
    try:
        session.regenerate(size)
    except (PathfinderError, ValueError) as e:
        logger.error("Cannot regenerate grid: %s", e)


def view(session: Session, state: Dict[str, Any]) -> None:
    v = terminal_view.get_view()
    state["view"] = v.toggle()
    terminal_view.install_snapshot_hook(session, v)
    v.render(session)


def stats(session: Session, state: Dict[str, Any]) -> None:
    install_tick_observer(session.controller)
    state["stats"] = toggle_live_stats()
    if state["stats"]:
        print_stats()


def help_command(state: Dict[str, Any]) -> None:
    help_lines = [
        "\nAvailable commands:",
        "  /help                - Show this help message.",
        "  /start <x> <y>       - Place the start node.",
        "  /end <x> <y>         - Place the end node.",
        "  /wall <x> <y>        - Toggle a wall.",
        "  /clear               - Remove every wall.",
        "  /algo [astar|greedy] - Show or select the algorithm.",
        "  /speed [fast|average|slow|<seconds>] - Show or set the tick delay.",
        "  /go                  - Generate the path.",
        "  /pause               - Pause or resume the search.",
        "  /step                - Expand one node while paused.",
        "  /cancel              - Stop the search.",
        "  /regen [w] [h]       - Rebuild the grid, optionally resized.",
        "  /view                - Toggle the terminal grid view.",
        "  /stats               - Toggle live tick timing output.",
        "  /quit                - Exit the application.\n",
    ]
    for line in help_lines:
        logger.info(line)


def execute(command: str, args: list[str], session: Session, state: Dict[str, Any]) -> Any:
    if "running" not in state:
        state["running"] = True
    cmd_lower = command.lower()

    if cmd_lower == "help":
        help_command(state)
    elif cmd_lower == "start":
        return place_start(session, args)
    elif cmd_lower == "end":
        return place_end(session, args)
    elif cmd_lower == "wall":
        return toggle_wall(session, args)
    elif cmd_lower == "clear":
        return session.clear_walls()
    elif cmd_lower in ("algo", "algorithm"):
        algorithm(session, args[0] if args else None)
    elif cmd_lower == "speed":
        speed(session, args[0] if args else None)
    elif cmd_lower in ("go", "generate"):
        go(session)
    elif cmd_lower == "pause":
        pause(session, state)
    elif cmd_lower == "step":
        step(session)
    elif cmd_lower == "cancel":
        cancel(session)
    elif cmd_lower == "regen":
        regenerate(session, args)
    elif cmd_lower == "view":
        view(session, state)
    elif cmd_lower == "stats":
        stats(session, state)
    elif cmd_lower == "quit":
        state["running"] = False
        logger.info("Quit command received. Shutting down...")
    else:
        logger.error("Unknown command: /%s. Type /help for available commands.", command)
    return None


__all__ = [
    "place_start", "place_end", "toggle_wall", "algorithm", "speed", "go",
    "pause", "step", "cancel", "regenerate", "view", "stats", "help_command",
    "execute",
]
