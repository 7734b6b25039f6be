# src/studyhouse/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/AI providers/crawlers swappable and makes testing easier.
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..scheduling.strategy import ScheduleSnapshot
    from ..tasks.task_models import Task


@dataclass(frozen=True, slots=True)
class ExtractedRecord:
    """One course/class found in an uploaded document."""

    class_name: str
    category: str | None = None


class KeyValueStore(Protocol):
    """String-keyed blob storage (the app's only persistence)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class DocumentExtractor(Protocol):
    """
    Raw document bytes in, records out.

    Implementations are best-effort: any failure (network, parse, schema)
    yields an empty list instead of raising.
    """

    def extract(self, data: bytes) -> list[ExtractedRecord]: ...


class FolderCrawler(Protocol):
    def crawl(self, link: str) -> Awaitable[list[str]]: ...


class SchedulingStrategy(Protocol):
    """
    One scheduling philosophy (spaced repetition or plan distribution).

    Chosen once at composition time. Read methods are pure functions of a
    ScheduleSnapshot; write hooks return replaced Task copies.
    """

    name: str
    dedupe_imports: bool

    def prepare_new(self, task: Task, snapshot: ScheduleSnapshot) -> Task: ...
    def on_complete(self, task: Task, today: date, now_ts: float) -> Task: ...
    def on_uncomplete(self, task: Task) -> Task: ...

    def is_due(self, task: Task, snapshot: ScheduleSnapshot) -> bool: ...
    def due_today(self, snapshot: ScheduleSnapshot) -> list[Task]: ...
    def assign_to_day(self, snapshot: ScheduleSnapshot) -> dict[str, list[Task]]: ...
    def daily_progress(self, snapshot: ScheduleSnapshot) -> tuple[int, int]: ...
    def roll_over(self, task: Task, today: date) -> Task: ...
