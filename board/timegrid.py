"""Fixed hourly grid (08:00-22:00) that tasks are scheduled on."""

from __future__ import annotations

from dataclasses import dataclass

FIRST_HOUR = 8
LAST_HOUR = 22


@dataclass(frozen=True)
class Slot:
    start: int
    end: int

    @property
    def label(self) -> str:
        return f"{self.start}:00-{self.end}:00"

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "label": self.label}


TIME_SLOTS: tuple[Slot, ...] = tuple(Slot(h, h + 1) for h in range(FIRST_HOUR, LAST_HOUR))


def is_valid_hour(hour) -> bool:
    """True for an integer hour inside the grid (bools excluded)."""
    return isinstance(hour, int) and not isinstance(hour, bool) and FIRST_HOUR <= hour <= LAST_HOUR


def clamp_hour(hour: int) -> int:
    return max(FIRST_HOUR, min(LAST_HOUR, hour))


def _field(task, name):
    if isinstance(task, dict):
        return task.get(name)
    return getattr(task, name, None)


def task_at(tasks, staff_name: str, hour: int):
    """Return the task occupying ``hour`` for ``staff_name``, or ``None``."""
    for task in tasks:
        if (
            _field(task, "staff_name") == staff_name
            and _field(task, "start_hour") <= hour < _field(task, "end_hour")
        ):
            return task
    return None


def resize_interval(start: int, end: int, edge: str, hour: int) -> tuple[int, int]:
    """Apply a drag on one edge of ``[start, end)`` and return the new interval.

    The dragged edge never crosses the other one, so the result always keeps
    at least one slot.
    """
    hour = clamp_hour(hour)
    if edge == "start":
        return min(hour, end - 1), end
    if edge == "end":
        return start, max(hour, start + 1)
    raise ValueError(f"Unknown edge: {edge!r}")
