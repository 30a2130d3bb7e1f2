"""Exceptions raised by the grid and search layers."""

from __future__ import annotations


class PathfinderError(Exception):
    """Base error for grid and search operations."""


class InvalidInputError(PathfinderError, ValueError):
    """Raised when a search is started without valid start/end nodes."""


class BusyError(PathfinderError):
    """Raised when searched state is mutated while a search is active."""


class InternalInconsistencyError(PathfinderError, RuntimeError):
    """Raised when a backlink chain does not lead back to the start node."""


__all__ = [
    "PathfinderError",
    "InvalidInputError",
    "BusyError",
    "InternalInconsistencyError",
]
