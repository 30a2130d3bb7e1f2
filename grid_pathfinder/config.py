"""Simple configuration loader for grid_pathfinder."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict
import logging

import yaml

from .core.time_manager import resolve_delay
from .systems.search.engine import resolve_algorithm

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"


@dataclass
class GridConfig:
    """Grid geometry."""

    size: tuple[int, int] = (30, 20)
    cell_size: int = 24
    spacing: int = 2


@dataclass
class SearchConfig:
    """Default algorithm and tick speed."""

    algorithm: str = "astar"
    speed: str | float = "fast"


@dataclass
class GUIConfig:
    """Window settings for the pygame front-end."""

    enabled: bool = True
    window_size: tuple[int, int] = (800, 600)
    frame_rate: int = 60


@dataclass
class LoggingConfig:
    """Global and per-module log levels."""

    global_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """Top level configuration dataclass."""

    grid: GridConfig = field(default_factory=GridConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    gui: GUIConfig = field(default_factory=GUIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _pair(value: Any, default: tuple[int, int], name: str) -> tuple[int, int]:
    if isinstance(value, (list, tuple)) and len(value) >= 2:
        try:
            pair = (int(value[0]), int(value[1]))
        except (TypeError, ValueError):
            pair = (0, 0)
        if pair[0] > 0 and pair[1] > 0:
            return pair
    if value is not None:
        logger.warning("Invalid %s %r in config; using %s", name, value, default)
    return default


def _positive_int(value: Any, default: int, name: str) -> int:
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = -1
    if number < 0:
        logger.warning("Invalid %s %r in config; using %s", name, value, default)
        return default
    return number


def _parse_config(data: dict[str, Any]) -> Config:
    """Convert raw ``data`` into :class:`Config`."""

    defaults = Config()

    grid_data = data.get("grid") or {}
    grid = GridConfig(
        size=_pair(grid_data.get("size"), defaults.grid.size, "grid.size"),
        cell_size=_positive_int(grid_data.get("cell_size"), defaults.grid.cell_size, "grid.cell_size"),
        spacing=_positive_int(grid_data.get("spacing"), defaults.grid.spacing, "grid.spacing"),
    )

    search_data = data.get("search") or {}
    algorithm = search_data.get("algorithm", defaults.search.algorithm)
    try:
        algorithm = resolve_algorithm(algorithm)
    except ValueError:
        logger.warning("Unknown algorithm %r in config; using %s", algorithm, defaults.search.algorithm)
        algorithm = defaults.search.algorithm
    speed = search_data.get("speed", defaults.search.speed)
    try:
        resolve_delay(speed)
    except (TypeError, ValueError):
        logger.warning("Invalid speed %r in config; using %s", speed, defaults.search.speed)
        speed = defaults.search.speed
    search = SearchConfig(algorithm=algorithm, speed=speed)

    gui_data = data.get("gui") or {}
    gui = GUIConfig(
        enabled=bool(gui_data.get("enabled", defaults.gui.enabled)),
        window_size=_pair(gui_data.get("window_size"), defaults.gui.window_size, "gui.window_size"),
        frame_rate=_positive_int(gui_data.get("frame_rate"), defaults.gui.frame_rate, "gui.frame_rate"),
    )

    log_data = data.get("logging") or {}
    logging_cfg = LoggingConfig(
        global_level=str(log_data.get("global_level", defaults.logging.global_level)).upper(),
        module_levels={
            str(k): str(v) for k, v in (log_data.get("module_levels") or {}).items()
        },
    )

    return Config(grid=grid, search=search, gui=gui, logging=logging_cfg)


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load configuration from ``path`` and return a :class:`Config`."""

    path = Path(path)
    if path.is_file():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            logger.warning("Config %s is not a mapping; using defaults", path)
            raw = {}
    else:
        raw = {}
    return _parse_config(raw)


__all__ = [
    "CONFIG_PATH",
    "Config",
    "GridConfig",
    "SearchConfig",
    "GUIConfig",
    "LoggingConfig",
    "load_config",
]
