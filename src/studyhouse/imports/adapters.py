# src/studyhouse/imports/adapters.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.ports import ExtractedRecord
from ..tasks.task_models import Task, TaskDraft, TaskSource
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

DRIVE_CATEGORY = "Drive Crawl"


def _normalize(title: str) -> str:
    return title.strip().lower()


def _merge(store: TaskStore, drafts: list[TaskDraft]) -> list[Task]:
    """
    Add drafts to the store as one batch.

    Blank titles are dropped. When the active strategy dedupes imports, any
    draft whose lower-cased title already exists in the store is dropped too
    (only existing titles are checked, not the batch against itself).
    """
    drafts = [d for d in drafts if d.title and d.title.strip()]
    if store.strategy.dedupe_imports:
        existing = {_normalize(t.title) for t in store.tasks}
        kept = [d for d in drafts if _normalize(d.title) not in existing]
        if len(kept) != len(drafts):
            logger.info("Import: skipped %d duplicate title(s)", len(drafts) - len(kept))
        drafts = kept
    return store.add_many(drafts)


def import_from_document(store: TaskStore, records: Iterable[ExtractedRecord]) -> list[Task]:
    drafts = [
        TaskDraft(title=r.class_name, source=TaskSource.AI, category=r.category)
        for r in records
    ]
    created = _merge(store, drafts)
    logger.info("Imported %d task(s) from document", len(created))
    return created


def import_from_crawl(store: TaskStore, titles: Iterable[str]) -> list[Task]:
    drafts = [TaskDraft(title=t, source=TaskSource.DRIVE, category=DRIVE_CATEGORY) for t in titles]
    created = _merge(store, drafts)
    logger.info("Imported %d task(s) from folder crawl", len(created))
    return created
