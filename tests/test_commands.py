# tests/test_commands.py

from __future__ import annotations

import json
import time

import pytest

from studyhouse.cli.bootstrap import create_initial_state
from studyhouse.cli.commands import CommandRegistry, resolve_task
from studyhouse.cli.commands import registry as default_registry
from studyhouse.tasks.task_models import Task, TaskNotFoundError, TaskSource

from .fakes import BlockingExtractor, MemoryKeyValueStore


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_review_flow_through_commands(state) -> None:
    run = lambda line: default_registry.handle(state, line)  # noqa: E731

    assert run("/add Physics 101") == "Added: Physics 101"
    assert "Physics 101" in run("/due")
    assert "New" in run("/list")

    assert "Level 1" in run("/done 1")
    assert "Nothing due" in run("/due")
    assert "No such material" in run("/done 9")
    assert "Daily goal: 100%" in run("/stats")


def test_plan_flow_through_commands(plan_state) -> None:
    run = lambda line: default_registry.handle(plan_state, line)  # noqa: E731

    assert "No plan yet" in run("/plan")
    assert "YYYY-MM-DD" in run("/plan tomorrow later")
    assert "2024-05-06 .. 2024-05-08" in run("/plan 2024-05-06 2024-05-08")

    run("/add Essay")
    assert "pinned 2024-05-08" in run("/list")
    assert "Pinned Essay to 2024-05-06" in run("/pin 1 2024-05-06")
    assert "Essay" in run("/due")
    assert "Reset assignment" in run("/unpin 1")


def test_sync_phase_gates_imports(state, kv) -> None:
    run = lambda line: default_registry.handle(state, line)  # noqa: E731

    assert "Imported 6" in run("/crawl https://drive.example.com/folders/abc")
    assert "/sync done" in run("/crawl https://drive.example.com/folders/abc")
    assert "Entering Study phase" in run("/sync done")
    assert kv.data["studyhouse_sync_phase"] == "false"
    assert "Sync phase is closed" in run("/crawl https://drive.example.com/folders/abc")
    run("/sync reopen")
    assert state.sync_phase is True


def test_import_reads_file(state, extractor, tmp_path) -> None:
    from studyhouse.core.ports import ExtractedRecord

    pdf = tmp_path / "curriculum.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    extractor.records = [ExtractedRecord("Ethics", "Humanities")]

    notes: list[str] = []
    reply = default_registry.handle(state, f"/import {pdf}", emit=notes.append)
    assert "Imported 1 material(s) from curriculum.pdf" in (reply or "")
    assert notes and "curriculum.pdf" in notes[0]
    assert "Cannot read" in (default_registry.handle(state, f"/import {tmp_path / 'missing.pdf'}") or "")


def test_import_gives_up_at_the_timeout(state, settings, tmp_path) -> None:
    settings.import_timeout_seconds = 1.0
    slow = BlockingExtractor()
    state.extractor = slow
    pdf = tmp_path / "slow.pdf"
    pdf.write_bytes(b"%PDF-1.4")

    started = time.monotonic()
    try:
        reply = default_registry.handle(state, f"/import {pdf}")
        elapsed = time.monotonic() - started
    finally:
        slow.release.set()

    assert elapsed < 3.0
    assert "Imported 0 material(s) from slow.pdf" in (reply or "")
    assert len(state.task_store) == 0
    assert state.is_processing is False
    assert state.sync_popup_pending is False


def test_timer_command(state) -> None:
    assert default_registry.handle(state, "/timer") == "[focus] 25:00 (paused)"
    assert default_registry.handle(state, "/timer short") == "[short] 05:00 (paused)"


def test_resolve_task_falls_back_to_numeric_id_prefix(settings, clock, extractor) -> None:
    tasks = [
        Task(id="73a0", title="Algebra", source=TaskSource.MANUAL, created_at=0.0),
        Task(id="4815", title="Botany", source=TaskSource.MANUAL, created_at=0.0),
    ]
    kv = MemoryKeyValueStore({"studyhouse_tasks": json.dumps([t.to_dict() for t in tasks])})
    state = create_initial_state(settings=settings, kv=kv, extractor=extractor, clock=clock)

    assert resolve_task(state, "2").title == "Botany"
    assert resolve_task(state, "48").title == "Botany"
    assert resolve_task(state, "73a").title == "Algebra"
    with pytest.raises(TaskNotFoundError):
        resolve_task(state, "99")
