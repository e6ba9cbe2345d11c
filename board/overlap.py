"""Half-open interval overlap check for one staff member's day."""

from __future__ import annotations


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # [9, 10) and [10, 11) touch but do not overlap.
    return a_start < b_end and a_end > b_start


def has_overlap(candidate, existing_tasks, exclude_id=None) -> bool:
    """Return True if ``candidate`` collides with another task of the same staff.

    Args:
        candidate: Mapping or object with ``staff_name``, ``start_hour`` and
            ``end_hour``.
        existing_tasks: Tasks already on the board for that day.
        exclude_id: Id of the task being edited, ignored during the check.
    """
    staff_name = _field(candidate, "staff_name")
    start = _field(candidate, "start_hour")
    end = _field(candidate, "end_hour")

    for task in existing_tasks:
        if exclude_id is not None and _field(task, "id") == exclude_id:
            continue
        if _field(task, "staff_name") != staff_name:
            continue
        if intervals_overlap(start, end, _field(task, "start_hour"), _field(task, "end_hour")):
            return True
    return False
