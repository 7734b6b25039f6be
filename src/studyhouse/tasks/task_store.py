# src/studyhouse/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date

from ..core.ports import KeyValueStore, SchedulingStrategy
from ..scheduling.days import local_day, parse_day
from ..scheduling.strategy import ScheduleSnapshot
from .task_models import StudyPlanConfig, Task, TaskDraft, TaskNotFoundError, TaskSource, ToggleField

logger = logging.getLogger(__name__)

TASKS_KEY = "studyhouse_tasks"
PLAN_KEY = "studyhouse_plan_config"


class TaskStore:
    """
    Authoritative in-memory task collection.

    - newest tasks first (add/import prepend)
    - every mutation goes through _commit(), which persists the whole
      collection as one JSON blob
    - the plan range is persisted next to it under its own key
    - scheduling side effects (levels, review dates, default pins) are
      delegated to the injected SchedulingStrategy
    """

    def __init__(
        self,
        kv: KeyValueStore,
        strategy: SchedulingStrategy,
        *,
        clock: Callable[[], float] = time.time,
        tasks_key: str = TASKS_KEY,
        plan_key: str = PLAN_KEY,
    ) -> None:
        self._kv = kv
        self._strategy = strategy
        self._clock = clock
        self._tasks_key = tasks_key
        self._plan_key = plan_key

        self._tasks: list[Task] = self._load_tasks()
        self._plan: StudyPlanConfig = self._load_plan()
        logger.info(
            "TaskStore ready strategy=%s total=%d plan=%s..%s",
            strategy.name,
            len(self._tasks),
            self._plan.start_date or "-",
            self._plan.target_end_date or "-",
        )

    # ---- persistence ----

    def _load_tasks(self) -> list[Task]:
        raw = self._kv.get(self._tasks_key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Saved tasks are not valid JSON; starting empty.")
            return []
        if not isinstance(data, list):
            logger.warning("Saved tasks blob is not a list; starting empty.")
            return []

        out: list[Task] = []
        seen: set[str] = set()
        skipped = 0
        for item in data:
            task = Task.from_dict(item) if isinstance(item, dict) else None
            if task is None or task.id in seen:
                skipped += 1
                continue
            seen.add(task.id)
            out.append(task)
        if skipped:
            logger.warning("Skipped %d unreadable saved task(s).", skipped)
        return out

    def _load_plan(self) -> StudyPlanConfig:
        raw = self._kv.get(self._plan_key)
        if not raw:
            return StudyPlanConfig()
        try:
            return StudyPlanConfig.from_dict(json.loads(raw))
        except json.JSONDecodeError:
            logger.warning("Saved plan config is not valid JSON; using defaults.")
            return StudyPlanConfig()

    def _commit(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        try:
            blob = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
            self._kv.set(self._tasks_key, blob)
        except Exception:
            logger.exception("Failed to persist tasks (count=%d)", len(tasks))

    # ---- reads ----

    @property
    def strategy(self) -> SchedulingStrategy:
        return self._strategy

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def plan(self) -> StudyPlanConfig:
        return self._plan

    def __len__(self) -> int:
        return len(self._tasks)

    def today(self) -> date:
        return local_day(self._clock())

    def get(self, task_id: str) -> Task:
        return self._tasks[self._index_of(task_id)]

    def snapshot(self, today: date | None = None) -> ScheduleSnapshot:
        day = today or self.today()
        self._roll_over(day)
        return ScheduleSnapshot(tasks=tuple(self._tasks), today=day, plan=self._plan)

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def _roll_over(self, today: date) -> None:
        rolled = [self._strategy.roll_over(t, today) for t in self._tasks]
        changed = sum(1 for old, new in zip(self._tasks, rolled) if old is not new)
        if changed:
            logger.info("Reopened %d task(s) due for review on %s", changed, today)
            self._commit(rolled)

    # ---- mutations ----

    def add(
        self,
        title: str,
        *,
        source: TaskSource = TaskSource.MANUAL,
        category: str | None = None,
    ) -> Task:
        return self.add_many([TaskDraft(title=title, source=source, category=category)])[0]

    def add_many(self, drafts: Iterable[TaskDraft]) -> list[Task]:
        """Create tasks from drafts and prepend them as one batch (draft order kept)."""
        snapshot = self.snapshot()
        now = self._clock()

        created: list[Task] = []
        for draft in drafts:
            title = (draft.title or "").strip()
            if not title:
                raise ValueError("title is required")
            task = Task(
                id=uuid.uuid4().hex,
                title=title,
                source=draft.source,
                category=(draft.category or "").strip() or None,
                created_at=now,
            )
            created.append(self._strategy.prepare_new(task, snapshot))

        if created:
            self._commit(created + self._tasks)
            logger.debug("Added %d task(s) source=%s", len(created), created[0].source.value)
        return created

    def toggle(self, task_id: str, field: ToggleField | str) -> Task:
        field = ToggleField(field)
        idx = self._index_of(task_id)
        task = self._tasks[idx]

        if field is ToggleField.COMPLETED:
            now = self._clock()
            if task.completed:
                updated = self._strategy.on_uncomplete(replace(task, completed=False, completed_at=None))
            else:
                updated = self._strategy.on_complete(
                    replace(task, completed=True, completed_at=now),
                    local_day(now),
                    now,
                )
        elif field is ToggleField.URGENT:
            updated = replace(task, is_urgent=not task.is_urgent)
        else:
            updated = replace(task, is_question=not task.is_question)

        tasks = list(self._tasks)
        tasks[idx] = updated
        self._commit(tasks)
        logger.debug("Toggled %s on task %s -> %s", field.value, task_id, getattr(updated, field.value))
        return updated

    def remove(self, task_id: str) -> Task:
        idx = self._index_of(task_id)
        tasks = list(self._tasks)
        removed = tasks.pop(idx)
        self._commit(tasks)
        logger.debug("Removed task %s", task_id)
        return removed

    def set_manual_date(self, task_id: str, day: str | None) -> Task:
        """
        Pin a task to a day (YYYY-MM-DD) or clear the pin with None.

        Pins outside the current plan range are kept but have no effect
        until the range covers them.
        """
        if day is not None:
            day = parse_day(day).isoformat()
        idx = self._index_of(task_id)
        updated = replace(self._tasks[idx], manual_date=day)
        tasks = list(self._tasks)
        tasks[idx] = updated
        self._commit(tasks)
        return updated

    def move(self, task_id: str, to_index: int) -> Task:
        """Reorder: take the task out and reinsert it at to_index (clamped)."""
        idx = self._index_of(task_id)
        tasks = list(self._tasks)
        task = tasks.pop(idx)
        target = max(0, min(int(to_index), len(tasks)))
        tasks.insert(target, task)
        self._commit(tasks)
        return task

    def set_plan(self, start_date: str, target_end_date: str) -> StudyPlanConfig:
        """Set the plan range. Empty strings are allowed and mean "no plan"."""
        start = parse_day(start_date).isoformat() if start_date else ""
        end = parse_day(target_end_date).isoformat() if target_end_date else ""
        self._plan = StudyPlanConfig(start_date=start, target_end_date=end)
        try:
            self._kv.set(self._plan_key, json.dumps(self._plan.to_dict()))
        except Exception:
            logger.exception("Failed to persist plan config")
        logger.info("Plan range set to %s..%s", start or "-", end or "-")
        return self._plan
