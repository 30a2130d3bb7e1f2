"""Runtime observability helpers."""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List
import time


# Rolling history of the last 1000 intervals between search ticks, in seconds
_TICK_HISTORY_LEN = 1000
_tick_durations: Deque[float] = deque(maxlen=_TICK_HISTORY_LEN)

# Whether to log tick timing every time one is recorded
_live_stats: bool = False

# Global in-memory list for logged events when no destination is supplied
_events: List[Dict[str, Any]] = []


def record_tick(duration: float) -> None:
    """Append a tick interval ``duration`` in seconds to the rolling history."""

    _tick_durations.append(duration)
    if _live_stats:
        print_stats()


def average_tick_ms() -> float | None:
    """Mean recorded tick interval in milliseconds, or ``None`` without data."""

    if not _tick_durations:
        return None
    return sum(_tick_durations) / len(_tick_durations) * 1000.0


def print_stats() -> None:
    avg = average_tick_ms()
    if avg is None:
        print("Ticks: --")
        return
    print(f"{len(_tick_durations)} ticks, avg {avg:.1f} ms between expansions")


def toggle_live_stats() -> bool:
    """Toggle live tick timing output. Returns ``True`` if enabled after toggle."""

    global _live_stats
    _live_stats = not _live_stats
    return _live_stats


def install_tick_observer(controller: Any) -> None:
    """Subscribe to ``controller`` snapshots and record the time between them."""

    if controller is None or getattr(controller, "_observer_wrapped", False):
        return

    last = time.perf_counter()

    def on_snapshot(_snapshot: Any) -> None:
        nonlocal last
        now = time.perf_counter()
        record_tick(now - last)
        last = now

    controller.subscribe(on_snapshot)
    setattr(controller, "_observer_wrapped", True)


def log_event(
    event_type: str,
    data: Dict[str, Any],
    log: List[Dict[str, Any]] | None = None,
) -> None:
    """Append an event dict to ``log`` or the internal event buffer."""

    event = {"type": event_type}
    event.update(data)
    if log is None:
        _events.append(event)
    else:
        log.append(event)


def install_lifecycle_log(controller: Any, log: List[Dict[str, Any]] | None = None) -> None:
    """Record every lifecycle change of ``controller`` with :func:`log_event`."""

    def on_change(old: Any, new: Any) -> None:
        engine = getattr(controller, "engine", None)
        log_event(
            "search_state",
            {
                "from": old.value,
                "to": new.value,
                "algorithm": getattr(engine, "name", None),
                "ticks": getattr(engine, "tick_count", 0),
            },
            log,
        )

    controller.subscribe_lifecycle(on_change)


__all__ = [
    "record_tick",
    "average_tick_ms",
    "print_stats",
    "toggle_live_stats",
    "install_tick_observer",
    "install_lifecycle_log",
    "log_event",
    "_tick_durations",
    "_events",
]
