# src/studyhouse/focus/timer.py

from __future__ import annotations

import time
from collections.abc import Callable
from enum import StrEnum


class TimerMode(StrEnum):
    FOCUS = "focus"
    SHORT = "short"
    LONG = "long"


MODE_SECONDS: dict[TimerMode, int] = {
    TimerMode.FOCUS: 25 * 60,
    TimerMode.SHORT: 5 * 60,
    TimerMode.LONG: 15 * 60,
}


def format_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class FocusTimer:
    """
    Pomodoro-style countdown (focus / short break / long break).

    Time is read from an injected monotonic clock when asked, so there is
    no background tick.
    """

    def __init__(self, mode: TimerMode = TimerMode.FOCUS, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.mode = mode
        self._remaining = float(MODE_SECONDS[mode])
        self._started_at: float | None = None

    @property
    def total_seconds(self) -> int:
        return MODE_SECONDS[self.mode]

    @property
    def is_active(self) -> bool:
        return self._started_at is not None and self.remaining() > 0

    def remaining(self) -> int:
        left = self._remaining
        if self._started_at is not None:
            left -= self._clock() - self._started_at
        return max(0, int(round(left)))

    def progress(self) -> float:
        """Elapsed fraction of the current mode, 0.0 .. 1.0."""
        return 1.0 - self.remaining() / self.total_seconds

    def start(self) -> None:
        if self._started_at is None and self.remaining() > 0:
            self._started_at = self._clock()

    def pause(self) -> None:
        if self._started_at is not None:
            self._remaining = float(self.remaining())
            self._started_at = None

    def reset(self) -> None:
        self.switch_mode(self.mode)

    def switch_mode(self, mode: TimerMode | str) -> None:
        self.mode = TimerMode(mode)
        self._remaining = float(MODE_SECONDS[self.mode])
        self._started_at = None
