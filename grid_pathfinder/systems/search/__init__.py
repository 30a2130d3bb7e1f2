"""search package."""

from .controller import ExecutionController
from .engine import AStarSearch, GreedyBestFirstSearch, SearchState, StepSnapshot, create_engine
from .path import reconstruct_path

__all__ = [
    "ExecutionController",
    "AStarSearch",
    "GreedyBestFirstSearch",
    "SearchState",
    "StepSnapshot",
    "create_engine",
    "reconstruct_path",
]
