# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from studyhouse.cli.bootstrap import create_initial_state
from studyhouse.core.state import AppState
from studyhouse.imports.crawler import MockFolderCrawler
from studyhouse.scheduling.plan import PlanStrategy
from studyhouse.scheduling.review import ReviewStrategy
from studyhouse.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeExtractor, MemoryKeyValueStore


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def review_store(kv: MemoryKeyValueStore, clock: FakeClock) -> TaskStore:
    return TaskStore(kv, ReviewStrategy(), clock=clock)


@pytest.fixture()
def plan_store(kv: MemoryKeyValueStore, clock: FakeClock) -> TaskStore:
    return TaskStore(kv, PlanStrategy(), clock=clock)


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="Study House (test)",
        scheduling_mode="review",
        import_timeout_seconds=5.0,
        crawl_delay_seconds=0.0,
    )


@pytest.fixture()
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture()
def state(settings: SimpleNamespace, kv: MemoryKeyValueStore, clock: FakeClock, extractor: FakeExtractor) -> AppState:
    """AppState wired with in-memory storage and deterministic fakes."""
    return create_initial_state(
        settings=settings,
        kv=kv,
        extractor=extractor,
        crawler=MockFolderCrawler(delay_seconds=0.0),
        clock=clock,
    )


@pytest.fixture()
def plan_state(settings: SimpleNamespace, kv: MemoryKeyValueStore, clock: FakeClock, extractor: FakeExtractor) -> AppState:
    settings.scheduling_mode = "plan"
    return create_initial_state(
        settings=settings,
        kv=kv,
        extractor=extractor,
        crawler=MockFolderCrawler(delay_seconds=0.0),
        clock=clock,
    )
