# src/studyhouse/scheduling/review.py

from __future__ import annotations

"""
Spaced-repetition scheduler.

Intervals are a fixed lookup table indexed by mastery level; any level past
the end of the table reuses the last (longest) interval.

Lifecycle of a material:
- new: no next_review_at -> due immediately
- completed: level += 1, next_review_at = midnight(today + interval[level])
- un-completed: only completed_at is cleared (the level is never rolled back)
- once next_review_at arrives, a completed material is reopened for review
"""

from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Iterable

from .days import add_days, format_day, local_day, midnight

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from .strategy import ScheduleSnapshot

REVIEW_INTERVALS_DAYS: tuple[int, ...] = (0, 1, 3, 7, 14, 30, 90)


def interval_days(level: int) -> int:
    idx = min(max(0, int(level)), len(REVIEW_INTERVALS_DAYS) - 1)
    return REVIEW_INTERVALS_DAYS[idx]


def next_review_date(level: int, today: date) -> float:
    """Local midnight of today + interval(level) days, as epoch seconds."""
    return midnight(add_days(today, interval_days(level)))


def is_due(task: Task, today: date) -> bool:
    if task.completed:
        return False
    return task.next_review_at is None or task.next_review_at <= midnight(today)


def due_tasks(tasks: Iterable[Task], today: date) -> list[Task]:
    return [t for t in tasks if is_due(t, today)]


def completed_on(task: Task, day: date) -> bool:
    return task.completed_at is not None and local_day(task.completed_at) == day


def level_label(level: int) -> str:
    return "New" if level <= 0 else f"Level {level}"


class ReviewStrategy:
    name = "review"
    dedupe_imports = True

    def prepare_new(self, task: Task, snapshot: ScheduleSnapshot) -> Task:
        return replace(task, repetition_level=0, next_review_at=snapshot.today_start)

    def on_complete(self, task: Task, today: date, now_ts: float) -> Task:
        level = task.repetition_level + 1
        return replace(
            task,
            repetition_level=level,
            last_reviewed_at=now_ts,
            next_review_at=next_review_date(level, today),
        )

    def on_uncomplete(self, task: Task) -> Task:
        return task

    def roll_over(self, task: Task, today: date) -> Task:
        """
        Reopen a completed task once its review day has come.

        completed_at is cleared, so the earlier completion drops out of the
        completion histogram and the completion percentage.
        """
        if not task.completed or task.next_review_at is None:
            return task
        if task.next_review_at > midnight(today):
            return task
        return replace(task, completed=False, completed_at=None)

    def is_due(self, task: Task, snapshot: ScheduleSnapshot) -> bool:
        return is_due(task, snapshot.today)

    def due_today(self, snapshot: ScheduleSnapshot) -> list[Task]:
        return due_tasks(snapshot.tasks, snapshot.today)

    def assign_to_day(self, snapshot: ScheduleSnapshot) -> dict[str, list[Task]]:
        """Agenda view: open tasks bucketed by review day (overdue -> today)."""
        today_start = snapshot.today_start
        buckets: dict[str, list[Task]] = defaultdict(list)
        for task in snapshot.tasks:
            if task.completed and task.next_review_at is None:
                continue
            ts = task.next_review_at
            if ts is None or ts <= today_start:
                buckets[snapshot.today_str].append(task)
            else:
                buckets[format_day(local_day(ts))].append(task)
        return dict(sorted(buckets.items()))

    def daily_progress(self, snapshot: ScheduleSnapshot) -> tuple[int, int]:
        """(done today, due today + done today)."""
        due = len(self.due_today(snapshot))
        done = sum(1 for t in snapshot.tasks if completed_on(t, snapshot.today))
        return done, due + done
