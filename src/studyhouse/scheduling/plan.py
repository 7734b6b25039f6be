# src/studyhouse/scheduling/plan.py

from __future__ import annotations

"""
Plan distributor.

Spreads every material across the plan range [start_date, target_end_date]:
- a pinned material (manual_date inside the range) lands on its pinned day
- everything else is placed round-robin by its position in the collection

Placement is a pure function of collection order, so reordering or inserting
materials moves later automatic placements.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Sequence

from .days import add_days, format_day, parse_day

if TYPE_CHECKING:
    from ..tasks.task_models import StudyPlanConfig, Task
    from .strategy import ScheduleSnapshot

logger = logging.getLogger(__name__)

# Upper bound on the walk; guards against absurd ranges.
MAX_PLAN_DAYS = 366


def days_in_range(config: StudyPlanConfig | None) -> list[str]:
    """
    Inclusive list of YYYY-MM-DD days from start to end.

    Empty when either bound is missing, unparseable, or end < start.
    Silently truncated to MAX_PLAN_DAYS entries.
    """
    if config is None or not config.start_date or not config.target_end_date:
        return []
    try:
        start = parse_day(config.start_date)
        end = parse_day(config.target_end_date)
    except ValueError:
        logger.debug("Ignoring malformed plan range %s..%s", config.start_date, config.target_end_date)
        return []

    days: list[str] = []
    current = start
    while current <= end and len(days) < MAX_PLAN_DAYS:
        days.append(format_day(current))
        current = add_days(current, 1)
    return days


def distribute(tasks: Sequence[Task], days: Sequence[str]) -> dict[str, list[Task]]:
    """
    Map every day of `days` to the tasks placed on it (collection order kept).

    Each task lands in exactly one bucket when `days` is non-empty.
    """
    if not days:
        return {}

    buckets: dict[str, list[Task]] = {d: [] for d in days}
    n = len(days)
    for index, task in enumerate(tasks):
        if task.manual_date and task.manual_date in buckets:
            day = task.manual_date
        else:
            day = days[index % n]
        buckets[day].append(task)
    return buckets


def tasks_on_day(tasks: Sequence[Task], days: Sequence[str], day: str) -> list[Task]:
    return distribute(tasks, days).get(day, [])


class PlanStrategy:
    name = "plan"
    dedupe_imports = False

    def prepare_new(self, task: Task, snapshot: ScheduleSnapshot) -> Task:
        days = days_in_range(snapshot.plan)
        return replace(task, repetition_level=0, manual_date=days[-1] if days else None)

    def on_complete(self, task: Task, today: date, now_ts: float) -> Task:
        return task

    def on_uncomplete(self, task: Task) -> Task:
        return task

    def roll_over(self, task: Task, today: date) -> Task:
        return task

    def _placed_today(self, snapshot: ScheduleSnapshot) -> list[Task]:
        return tasks_on_day(snapshot.tasks, days_in_range(snapshot.plan), snapshot.today_str)

    def is_due(self, task: Task, snapshot: ScheduleSnapshot) -> bool:
        if task.completed:
            return False
        return any(t.id == task.id for t in self._placed_today(snapshot))

    def due_today(self, snapshot: ScheduleSnapshot) -> list[Task]:
        return [t for t in self._placed_today(snapshot) if not t.completed]

    def assign_to_day(self, snapshot: ScheduleSnapshot) -> dict[str, list[Task]]:
        return distribute(snapshot.tasks, days_in_range(snapshot.plan))

    def daily_progress(self, snapshot: ScheduleSnapshot) -> tuple[int, int]:
        """(completed, placed on today)."""
        placed = self._placed_today(snapshot)
        return sum(1 for t in placed if t.completed), len(placed)
