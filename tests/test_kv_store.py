# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

from studyhouse.scheduling.plan import PlanStrategy
from studyhouse.tasks.kv_store import SqliteKeyValueStore
from studyhouse.tasks.task_models import ToggleField
from studyhouse.tasks.task_store import TaskStore


def test_get_set_overwrite(tmp_path: Path) -> None:
    kv = SqliteKeyValueStore(tmp_path / "state.sqlite3")
    assert kv.get("missing") is None

    kv.set("k", "v1")
    kv.set("k", "v2")
    kv.set("other", "")
    assert kv.get("k") == "v2"
    assert kv.get("other") == ""

    reopened = SqliteKeyValueStore(tmp_path / "state.sqlite3")
    assert reopened.get("k") == "v2"


def test_task_store_survives_restart(tmp_path: Path, clock) -> None:
    db = tmp_path / "nested" / "state.sqlite3"
    store = TaskStore(SqliteKeyValueStore(db), PlanStrategy(), clock=clock)
    store.set_plan("2024-05-06", "2024-05-12")
    task = store.add("Thermodynamics")
    store.toggle(task.id, ToggleField.QUESTION)

    restarted = TaskStore(SqliteKeyValueStore(db), PlanStrategy(), clock=clock)
    assert restarted.tasks == store.tasks
    assert restarted.get(task.id).is_question
    assert restarted.plan == store.plan
