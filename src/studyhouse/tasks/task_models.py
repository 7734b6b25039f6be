# src/studyhouse/tasks/task_models.py

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class TaskSource(StrEnum):
    """Where a material came from. Set at creation, never changed."""

    MANUAL = "manual"
    AI = "ai"  # extracted from an uploaded document
    DRIVE = "drive"  # imported from a cloud-folder crawl

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskSource:
        if not raw:
            return cls.MANUAL
        try:
            return cls(raw)
        except ValueError:
            return cls.MANUAL


class ToggleField(StrEnum):
    COMPLETED = "completed"
    URGENT = "is_urgent"
    QUESTION = "is_question"


class TaskNotFoundError(KeyError):
    pass


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    source: TaskSource
    created_at: float

    completed: bool = False
    completed_at: float | None = None

    is_urgent: bool = False
    is_question: bool = False
    category: str | None = None

    # Spaced repetition fields
    repetition_level: int = 0
    last_reviewed_at: float | None = None
    next_review_at: float | None = None

    # Plan distribution override (YYYY-MM-DD)
    manual_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task | None:
        """Best-effort decode of a persisted record. Returns None if unusable."""
        task_id = data.get("id")
        title = data.get("title")
        if not isinstance(task_id, str) or not task_id:
            return None
        if not isinstance(title, str) or not title.strip():
            return None

        completed = bool(data.get("completed", False))
        completed_at = _opt_float(data.get("completed_at"))
        if not completed:
            completed_at = None

        category = data.get("category")
        manual_date = data.get("manual_date")

        try:
            level = max(0, int(data.get("repetition_level") or 0))
        except (TypeError, ValueError):
            level = 0

        return cls(
            id=task_id,
            title=title.strip(),
            source=TaskSource.from_raw(data.get("source")),
            created_at=_opt_float(data.get("created_at")) or 0.0,
            completed=completed,
            completed_at=completed_at,
            is_urgent=bool(data.get("is_urgent", False)),
            is_question=bool(data.get("is_question", False)),
            category=category if isinstance(category, str) and category else None,
            repetition_level=level,
            last_reviewed_at=_opt_float(data.get("last_reviewed_at")),
            next_review_at=_opt_float(data.get("next_review_at")),
            manual_date=manual_date if isinstance(manual_date, str) and manual_date else None,
        )


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """A task-to-be, as produced by manual entry or an import adapter."""

    title: str
    source: TaskSource = TaskSource.MANUAL
    category: str | None = None


@dataclass(frozen=True, slots=True)
class StudyPlanConfig:
    start_date: str = ""
    target_end_date: str = ""

    @property
    def is_set(self) -> bool:
        return bool(self.start_date and self.target_end_date)

    def to_dict(self) -> dict[str, str]:
        return {"start_date": self.start_date, "target_end_date": self.target_end_date}

    @classmethod
    def from_dict(cls, data: Any) -> StudyPlanConfig:
        if not isinstance(data, dict):
            return cls()
        start = data.get("start_date")
        end = data.get("target_end_date")
        return cls(
            start_date=start if isinstance(start, str) else "",
            target_end_date=end if isinstance(end, str) else "",
        )


def _opt_float(v: Any) -> float | None:
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None
