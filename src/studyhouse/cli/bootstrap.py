# src/studyhouse/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the scheduling strategy,
- wires concrete implementations into AppState (storage/extractor/crawler).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import get_settings
from ..core.ports import DocumentExtractor, FolderCrawler, KeyValueStore
from ..core.state import AppState, load_sync_phase
from ..imports.crawler import MockFolderCrawler
from ..imports.extractor import OpenRouterDocumentExtractor
from ..imports.offline import OfflineDocumentExtractor
from ..scheduling.strategy import build_strategy
from ..tasks.kv_store import SqliteKeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.state_db_path.parent.mkdir(parents=True, exist_ok=True)


def _build_extractor(settings) -> DocumentExtractor:
    try:
        return OpenRouterDocumentExtractor(settings)
    except Exception as e:
        # Fallback for demos / local runs without external services.
        logger.info("Document extraction disabled: %s", e)
        return OfflineDocumentExtractor()


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    extractor: DocumentExtractor | None = None,
    crawler: FolderCrawler | None = None,
    clock: Callable[[], float] = time.time,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and collaborators) injectable makes the app easier to
    test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SqliteKeyValueStore(settings.state_db_path)

    strategy = build_strategy(getattr(settings, "scheduling_mode", "review"))

    state = AppState(
        settings=settings,
        kv=kv,
        task_store=TaskStore(kv, strategy, clock=clock),
        extractor=extractor if extractor is not None else _build_extractor(settings),
        crawler=crawler if crawler is not None else MockFolderCrawler(
            getattr(settings, "crawl_delay_seconds", 3.0)
        ),
        sync_phase=load_sync_phase(kv),
    )
    return state
