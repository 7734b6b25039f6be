# src/studyhouse/imports/sync.py

from __future__ import annotations

"""
Async import orchestration.

Each call is single-shot (no retry) and bounded by import_timeout_seconds:
- state.is_processing is set for the duration and always cleared
- a failing collaborator is logged and results in no new tasks
- imported tasks are merged in one store mutation
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from ..core.state import AppState
from ..tasks.task_models import Task
from .adapters import import_from_crawl, import_from_document

logger = logging.getLogger(__name__)


def _timeout(state: AppState) -> float:
    return max(1.0, float(getattr(state.settings, "import_timeout_seconds", 60.0)))


async def sync_document(state: AppState, data: bytes) -> list[Task]:
    state.is_processing = True
    # Own pool: a timed-out extraction must not hold up asyncio.run() shutdown.
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="studyhouse-extract")
    loop = asyncio.get_running_loop()
    try:
        records = await asyncio.wait_for(
            loop.run_in_executor(executor, state.extractor.extract, data),
            timeout=_timeout(state),
        )
    except Exception:
        logger.exception("Document extraction failed (%d bytes)", len(data))
        records = []
    finally:
        executor.shutdown(wait=False)
        state.is_processing = False

    created = import_from_document(state.task_store, records)
    if records:
        state.sync_popup_pending = True
    return created


async def sync_folder(state: AppState, link: str) -> list[Task]:
    state.is_processing = True
    try:
        titles = await asyncio.wait_for(state.crawler.crawl(link), timeout=_timeout(state))
    except Exception:
        logger.exception("Folder crawl failed link=%s", link)
        titles = []
    finally:
        state.is_processing = False

    created = import_from_crawl(state.task_store, titles)
    if titles:
        state.sync_popup_pending = True
    return created
