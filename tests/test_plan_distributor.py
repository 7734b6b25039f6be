# tests/test_plan_distributor.py

from __future__ import annotations

from studyhouse.scheduling.plan import MAX_PLAN_DAYS, days_in_range, distribute
from studyhouse.stats.aggregator import daily_percentage
from studyhouse.tasks.task_models import StudyPlanConfig, Task, TaskSource, ToggleField


def make_tasks(n: int) -> list[Task]:
    return [Task(id=f"t{i}", title=f"Task {i}", source=TaskSource.MANUAL, created_at=0.0) for i in range(n)]


def test_days_in_range_inclusive() -> None:
    days = days_in_range(StudyPlanConfig("2024-02-27", "2024-03-02"))
    assert days == ["2024-02-27", "2024-02-28", "2024-02-29", "2024-03-01", "2024-03-02"]


def test_days_in_range_empty_when_unset_or_invalid() -> None:
    assert days_in_range(None) == []
    assert days_in_range(StudyPlanConfig()) == []
    assert days_in_range(StudyPlanConfig("2024-05-01", "")) == []
    assert days_in_range(StudyPlanConfig("", "2024-05-01")) == []
    assert days_in_range(StudyPlanConfig("2024-05-10", "2024-05-01")) == []
    assert days_in_range(StudyPlanConfig("not-a-day", "2024-05-01")) == []


def test_days_in_range_is_capped() -> None:
    days = days_in_range(StudyPlanConfig("2020-01-01", "2030-01-01"))
    assert len(days) == MAX_PLAN_DAYS == 366
    assert days[0] == "2020-01-01"
    assert days[-1] == "2020-12-31"


def test_distribution_is_total() -> None:
    tasks = make_tasks(10)
    tasks[4] = Task(id="t4", title="Pinned", source=TaskSource.MANUAL, created_at=0.0, manual_date="2024-05-02")
    days = ["2024-05-01", "2024-05-02", "2024-05-03"]

    buckets = distribute(tasks, days)

    assert list(buckets) == days
    placed = [t.id for ts in buckets.values() for t in ts]
    assert sorted(placed) == sorted(t.id for t in tasks)
    assert len(placed) == len(set(placed))


def test_round_robin_by_collection_index() -> None:
    tasks = make_tasks(5)
    days = ["d1", "d2"]
    buckets = distribute(tasks, days)
    assert [t.id for t in buckets["d1"]] == ["t0", "t2", "t4"]
    assert [t.id for t in buckets["d2"]] == ["t1", "t3"]


def test_no_days_means_no_plan() -> None:
    assert distribute(make_tasks(3), []) == {}


def test_manual_pin_precedence_and_reset(plan_store) -> None:
    plan_store.set_plan("2024-05-06", "2024-05-08")
    plan_store.add("C")
    plan_store.add("B")
    first = plan_store.add("A")

    # new tasks default to the last day of the range
    assert first.manual_date == "2024-05-08"
    strategy = plan_store.strategy
    buckets = strategy.assign_to_day(plan_store.snapshot())
    assert [t.title for t in buckets["2024-05-08"]] == ["A", "B", "C"]

    plan_store.set_manual_date(first.id, "2024-05-07")
    buckets = strategy.assign_to_day(plan_store.snapshot())
    assert [t.title for t in buckets["2024-05-07"]] == ["A"]

    # reset -> round-robin slot of index 0
    plan_store.set_manual_date(first.id, None)
    buckets = strategy.assign_to_day(plan_store.snapshot())
    assert "A" in [t.title for t in buckets["2024-05-06"]]


def test_pin_outside_range_is_kept_but_ignored(plan_store) -> None:
    plan_store.set_plan("2024-05-06", "2024-05-07")
    task = plan_store.add("Outlier")
    task = plan_store.set_manual_date(task.id, "2024-06-01")
    assert task.manual_date == "2024-06-01"

    buckets = plan_store.strategy.assign_to_day(plan_store.snapshot())
    assert [t.title for t in buckets["2024-05-06"]] == ["Outlier"]

    plan_store.set_plan("2024-05-06", "2024-06-01")
    buckets = plan_store.strategy.assign_to_day(plan_store.snapshot())
    assert [t.title for t in buckets["2024-06-01"]] == ["Outlier"]


def test_add_without_plan_has_no_pin(plan_store) -> None:
    assert plan_store.add("Loose").manual_date is None


def test_plan_due_today_and_daily_progress(plan_store, clock) -> None:
    today = clock.today.isoformat()  # 2024-05-06
    plan_store.set_plan(today, "2024-05-07")
    a = plan_store.add("A")
    b = plan_store.add("B")
    plan_store.add("C")
    plan_store.set_manual_date(a.id, today)
    plan_store.set_manual_date(b.id, today)
    plan_store.toggle(a.id, ToggleField.COMPLETED)

    snap = plan_store.snapshot()
    strategy = plan_store.strategy
    assert [t.title for t in strategy.due_today(snap)] == ["B"]
    assert strategy.daily_progress(snap) == (1, 2)
    assert daily_percentage(snap, strategy) == 50


def test_plan_completion_has_no_level_effect(plan_store) -> None:
    task = plan_store.add("Essay")
    task = plan_store.toggle(task.id, ToggleField.COMPLETED)
    assert task.completed and task.completed_at is not None
    assert task.repetition_level == 0
    assert task.next_review_at is None
