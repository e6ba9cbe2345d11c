"""Working-hour and completion statistics derived from task collections."""

from __future__ import annotations

import calendar
import math
from collections import defaultdict


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def working_hours(tasks) -> int:
    return sum(t["end_hour"] - t["start_hour"] for t in tasks)


def working_hours_by_staff(tasks) -> dict[str, int]:
    hours: dict[str, int] = defaultdict(int)
    for t in tasks:
        hours[t["staff_name"]] += t["end_hour"] - t["start_hour"]
    return dict(hours)


def completion_rate(tasks) -> int:
    """Percentage of completed tasks, rounded half-up; 0 for an empty list."""
    total = len(tasks)
    if not total:
        return 0
    completed = sum(1 for t in tasks if t["status"] == "completed")
    return _round_half_up(completed / total * 100)


def task_stats(tasks) -> dict:
    counts = defaultdict(int)
    for t in tasks:
        counts[t["status"]] += 1
    return {
        "total": len(tasks),
        "completed": counts["completed"],
        "in_progress": counts["progress"],
        "not_started": counts["not-started"],
        "pending": counts["pending"],
        "completion_rate": completion_rate(tasks),
    }


# ---------------------------------------------------------------------------
# Work history
# ---------------------------------------------------------------------------

def dates_in_month(month: str) -> list[str]:
    """All ``YYYY-MM-DD`` dates of a ``YYYY-MM`` month."""
    year, month_num = (int(p) for p in month.split("-"))
    days = calendar.monthrange(year, month_num)[1]
    return [f"{year:04d}-{month_num:02d}-{d:02d}" for d in range(1, days + 1)]


def day_records(tasks, staff_name: str | None = None, user_id: str | None = None) -> list[dict]:
    """Group one person's tasks into per-day records, newest day first.

    A task belongs to the person when its ``staff_name`` matches or when they
    created it.
    """
    by_day: dict[str, list[dict]] = defaultdict(list)
    for t in tasks:
        mine = (staff_name and t["staff_name"] == staff_name) or (user_id and t.get("created_by") == user_id)
        if mine:
            by_day[t["date"]].append(t)

    records = []
    for day, day_tasks in by_day.items():
        completed = sum(1 for t in day_tasks if t["status"] == "completed")
        records.append({
            "date": day,
            "total_hours": working_hours(day_tasks),
            "total_tasks": len(day_tasks),
            "completed_tasks": completed,
            "completion_rate": completion_rate(day_tasks),
            "tasks": day_tasks,
        })
    records.sort(key=lambda r: r["date"], reverse=True)
    return records


def monthly_stats(month: str, records: list[dict]) -> dict | None:
    if not records:
        return None
    total_hours = sum(r["total_hours"] for r in records)
    total_tasks = sum(r["total_tasks"] for r in records)
    total_completed = sum(r["completed_tasks"] for r in records)
    return {
        "month": month,
        "total_days": len(records),
        "total_hours": total_hours,
        "average_hours": total_hours / len(records),
        "total_tasks": total_tasks,
        "completion_rate": _round_half_up(total_completed / total_tasks * 100) if total_tasks else 0,
    }
