# src/studyhouse/stats/aggregator.py

from __future__ import annotations

"""
Derived statistics.

Everything here is a pure function of a ScheduleSnapshot (plus the active
strategy for the variant-specific daily metric). Nothing is cached.
"""

import calendar
import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from ..core.ports import SchedulingStrategy
from ..scheduling.days import format_day, local_day
from ..scheduling.strategy import ScheduleSnapshot
from ..tasks.task_models import Task, TaskSource


def percentage(part: int, whole: int) -> int:
    """Half-up rounded percentage; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def total_percentage(tasks: Iterable[Task]) -> int:
    items = list(tasks)
    return percentage(sum(1 for t in items if t.completed), len(items))


def daily_percentage(snapshot: ScheduleSnapshot, strategy: SchedulingStrategy) -> int:
    done, total = strategy.daily_progress(snapshot)
    return percentage(done, total)


def due_today_count(snapshot: ScheduleSnapshot, strategy: SchedulingStrategy) -> int:
    return len(strategy.due_today(snapshot))


def completion_histogram(tasks: Iterable[Task]) -> dict[str, int]:
    """Completed tasks per local calendar day of completed_at."""
    counts: Counter[str] = Counter()
    for t in tasks:
        if t.completed and t.completed_at is not None:
            counts[format_day(local_day(t.completed_at))] += 1
    return dict(counts)


def intensity_level(count: int) -> int:
    """Heat-map bucket: 0, 1, 2 or 3 (three or more)."""
    if count <= 0:
        return 0
    return min(count, 3)


@dataclass(frozen=True, slots=True)
class CalendarCell:
    day: str
    count: int
    level: int


@dataclass(frozen=True, slots=True)
class MonthGrid:
    year: int
    month: int
    leading_blanks: int  # Sunday-first week layout
    cells: list[CalendarCell]

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"


def month_grid(year: int, month: int, histogram: dict[str, int]) -> MonthGrid:
    first_weekday, ndays = calendar.monthrange(year, month)  # Monday == 0
    leading = (first_weekday + 1) % 7
    cells = []
    for d in range(1, ndays + 1):
        key = f"{year:04d}-{month:02d}-{d:02d}"
        count = histogram.get(key, 0)
        cells.append(CalendarCell(day=key, count=count, level=intensity_level(count)))
    return MonthGrid(year=year, month=month, leading_blanks=leading, cells=cells)


@dataclass(frozen=True, slots=True)
class StudySummary:
    total: int
    completed: int
    urgent: int
    questions: int
    drive_synced: int
    total_percentage: int
    daily_percentage: int
    due_today: int


def summarize(snapshot: ScheduleSnapshot, strategy: SchedulingStrategy) -> StudySummary:
    tasks = snapshot.tasks
    return StudySummary(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.completed),
        urgent=sum(1 for t in tasks if t.is_urgent),
        questions=sum(1 for t in tasks if t.is_question),
        drive_synced=sum(1 for t in tasks if t.source is TaskSource.DRIVE),
        total_percentage=total_percentage(tasks),
        daily_percentage=daily_percentage(snapshot, strategy),
        due_today=due_today_count(snapshot, strategy),
    )
