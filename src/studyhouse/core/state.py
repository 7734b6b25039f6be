# src/studyhouse/core/state.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from ..focus.timer import FocusTimer
from ..tasks.task_store import TaskStore
from .ports import DocumentExtractor, FolderCrawler, KeyValueStore, SchedulingStrategy

logger = logging.getLogger(__name__)

SYNC_PHASE_KEY = "studyhouse_sync_phase"


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    kv: KeyValueStore
    task_store: TaskStore
    extractor: DocumentExtractor
    crawler: FolderCrawler

    # Session/UI state; never read by the schedulers.
    sync_phase: bool = True
    is_processing: bool = False
    sync_popup_pending: bool = False
    timer: FocusTimer = field(default_factory=FocusTimer)

    @property
    def strategy(self) -> SchedulingStrategy:
        return self.task_store.strategy


def load_sync_phase(kv: KeyValueStore, default: bool = True) -> bool:
    """Read the persisted sync-phase flag (best-effort)."""
    raw = kv.get(SYNC_PHASE_KEY)
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Saved sync phase is not valid JSON; using %s", default)
        return default
    return value if isinstance(value, bool) else default


def set_sync_phase(state: AppState, value: bool) -> None:
    state.sync_phase = bool(value)
    try:
        state.kv.set(SYNC_PHASE_KEY, json.dumps(state.sync_phase))
    except Exception:
        logger.exception("Failed to persist sync phase")


def finish_sync(state: AppState) -> None:
    """Leave the sync phase and move on to studying."""
    state.sync_popup_pending = False
    set_sync_phase(state, False)
