"""Inter-tick timing helpers."""

from __future__ import annotations

from typing import Callable, Dict
import time

SPEED_PRESETS: Dict[str, float] = {
    "fast": 0.1,
    "average": 0.25,
    "slow": 0.55,
}

# Index order used by numeric speed selectors.
SPEED_ORDER = ("fast", "average", "slow")


def resolve_delay(speed: str | int | float) -> float:
    """Return the delay in seconds for a preset name, dropdown index or number."""

    if isinstance(speed, str):
        key = speed.strip().lower()
        if key in SPEED_PRESETS:
            return SPEED_PRESETS[key]
        try:
            value = float(key)
        except ValueError:
            raise ValueError(f"Unknown speed preset: {speed!r}") from None
    elif isinstance(speed, bool):
        raise ValueError(f"Invalid speed: {speed!r}")
    elif isinstance(speed, int):
        if 0 <= speed < len(SPEED_ORDER):
            return SPEED_PRESETS[SPEED_ORDER[speed]]
        raise ValueError(f"Speed index out of range: {speed}")
    else:
        value = float(speed)

    if value < 0 or value != value:
        raise ValueError(f"Tick delay must be non-negative, got {value}")
    return value


class TimeManager:
    """Re-armed timer deciding when the next search tick is due."""

    def __init__(
        self,
        tick_delay: float = SPEED_PRESETS["fast"],
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.tick_delay: float = resolve_delay(tick_delay)
        self.tick_counter: int = 0
        self._clock = clock
        self._sleep = sleep
        self._next_tick: float | None = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_speed(self, speed: str | int | float) -> float:
        self.tick_delay = resolve_delay(speed)
        return self.tick_delay

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------
    def now(self) -> float:
        return self._clock()

    def reset(self) -> None:
        """Make the next tick due immediately."""

        self.tick_counter = 0
        self._next_tick = None

    def is_due(self, now: float | None = None) -> bool:
        if self._next_tick is None:
            return True
        current = self._clock() if now is None else now
        return current >= self._next_tick

    def mark_tick(self, now: float | None = None) -> None:
        """Record that a tick ran and arm the timer for the next one."""

        current = self._clock() if now is None else now
        self._next_tick = current + self.tick_delay
        self.tick_counter += 1

    def sleep_until_next_tick(self) -> None:
        """Block until the armed timer elapses."""

        if self._next_tick is None:
            return
        remaining = self._next_tick - self._clock()
        if remaining > 0:
            self._sleep(remaining)


__all__ = ["SPEED_PRESETS", "SPEED_ORDER", "TimeManager", "resolve_delay"]
