# src/studyhouse/scheduling/strategy.py

from __future__ import annotations

"""
Scheduling strategy seam.

A ScheduleSnapshot is an immutable view of everything a scheduler may look at:
the ordered task collection, "today", and the plan range. Strategies never
read anything else, so every view (due list, distribution, stats) is a pure
function of the snapshot and is recomputed on each read.
"""

import logging
from dataclasses import dataclass
from datetime import date

from ..core.ports import SchedulingStrategy
from ..tasks.task_models import StudyPlanConfig, Task
from .days import format_day, midnight
from .plan import PlanStrategy
from .review import ReviewStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScheduleSnapshot:
    tasks: tuple[Task, ...]
    today: date
    plan: StudyPlanConfig = StudyPlanConfig()

    @property
    def today_str(self) -> str:
        return format_day(self.today)

    @property
    def today_start(self) -> float:
        return midnight(self.today)


def build_strategy(mode: str) -> SchedulingStrategy:
    """Pick the scheduling philosophy once, at composition time."""
    key = (mode or "").strip().lower()
    if key == "plan":
        return PlanStrategy()
    if key != "review":
        logger.warning("Unknown scheduling mode %r; falling back to 'review'", mode)
    return ReviewStrategy()
