# src/studyhouse/scheduling/days.py

"""
Local calendar-day helpers.

Scheduling works on local calendar days, never on instants:
- day strings are "YYYY-MM-DD"
- timestamps are epoch seconds (time.time() style)
- "midnight" always means local midnight
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

DAY_FORMAT = "%Y-%m-%d"


def midnight(day: date) -> float:
    """Epoch seconds of local midnight at the start of `day`."""
    return datetime.combine(day, time.min).timestamp()


def local_day(ts: float) -> date:
    return datetime.fromtimestamp(ts).date()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def parse_day(raw: str) -> date:
    """Parse a strict YYYY-MM-DD string. Raises ValueError on anything else."""
    s = (raw or "").strip()
    if len(s) != 10:
        raise ValueError(f"Expected YYYY-MM-DD, got {raw!r}")
    return datetime.strptime(s, DAY_FORMAT).date()

