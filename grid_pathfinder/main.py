# grid_pathfinder/main.py
"""Session bootstrap and main loop."""

from __future__ import annotations

from pathlib import Path
from typing import Any
import argparse
import logging
import os
import time

from dotenv import load_dotenv
import pygame

from .config import CONFIG_PATH, Config, load_config
from .core.session import Session
from .gui import input as gui_input
from .gui.renderer import Renderer
from .gui.window import Window
from .utils import observer
from .utils.cli import terminal_view
from .utils.cli.command_parser import poll_command, start_cli_thread, stop_cli_thread
from .utils.cli.commands import execute

logger = logging.getLogger(__name__)

HEADLESS_FRAME_SECONDS = 0.016


def configure_logging(cfg: Config) -> None:
    numeric_level = getattr(logging, cfg.logging.global_level, logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )
    for module_name, level_str in cfg.logging.module_levels.items():
        module_numeric_level = getattr(logging, level_str.upper(), None)
        if isinstance(module_numeric_level, int):
            logging.getLogger(module_name).setLevel(module_numeric_level)
        else:
            logger.warning("Invalid log level '%s' for module '%s' in config.", level_str, module_name)


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Explicit path, then ``PATHFINDER_CONFIG``, then ``./config.yaml``, then the project default."""

    if config_path is not None:
        return Path(config_path)
    env_path = os.getenv("PATHFINDER_CONFIG")
    if env_path:
        return Path(env_path)
    local = Path("config.yaml")
    return local if local.is_file() else CONFIG_PATH


def bootstrap(cfg: Config) -> Session:
    session = Session(cfg.grid.size, algorithm=cfg.search.algorithm, speed=cfg.search.speed)
    observer.install_tick_observer(session.controller)
    observer.install_lifecycle_log(session.controller)
    logger.info(
        "[Bootstrap] %sx%s grid, %s at %s speed",
        cfg.grid.size[0],
        cfg.grid.size[1],
        session.algorithm_name,
        session.speed_name,
    )
    return session


def _poll_cli(session: Session, state: dict[str, Any]) -> None:
    cmd = poll_command()
    while cmd is not None:
        execute(cmd.name, cmd.args, session, state)
        if not state["running"]:
            return
        cmd = poll_command()


def run_headless(session: Session, state: dict[str, Any]) -> None:
    """Drive the session from CLI commands only, drawing with the terminal view."""

    terminal_view.install_snapshot_hook(session)
    while state["running"]:
        _poll_cli(session, state)
        session.update()
        time.sleep(HEADLESS_FRAME_SECONDS)


def run_gui(session: Session, cfg: Config, state: dict[str, Any]) -> None:
    window = Window(cfg.gui.window_size)
    renderer = Renderer(window, cfg.grid.cell_size, cfg.grid.spacing)
    clock = pygame.time.Clock()
    while state["running"]:
        gui_input.handle_events(session, renderer, state)
        if not state["running"]:
            break
        _poll_cli(session, state)
        session.update()
        renderer.update(session)
        window.refresh()
        clock.tick(cfg.gui.frame_rate)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Interactive A* / Greedy Best-First grid visualizer")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--headless", action="store_true", help="Run without the pygame window")
    args = parser.parse_args(argv)

    env_path = Path(".env")
    if env_path.exists(): load_dotenv(env_path)

    cfg = load_config(resolve_config_path(args.config))
    configure_logging(cfg)
    session = bootstrap(cfg)

    headless = args.headless or not cfg.gui.enabled or os.getenv("PATHFINDER_HEADLESS") == "1"
    cli_input_thread = start_cli_thread()
    state: dict[str, Any] = {"running": True, "paused": False}
    logger.info("Application started. CLI is active. Type /help for commands.")

    try:
        if headless:
            run_headless(session, state)
        else:
            pygame.init()
            pygame.font.init()
            run_gui(session, cfg, state)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt caught. Shutting down...")
    finally:
        logger.info("Application shutting down...")
        session.cancel()
        stop_cli_thread()
        if cli_input_thread.is_alive():
            cli_input_thread.join(timeout=0.1)
        if pygame.get_init():
            pygame.quit()


if __name__ == "__main__":
    main()
