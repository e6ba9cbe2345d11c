# tests/test_lifecycle.py
#
# Every scenario here runs once against the local (mock-mode) tables and once
# against the Supabase fake; both must behave the same.

from __future__ import annotations

import pytest

from board.lifecycle import (
    MSG_OVERLAP,
    MSG_TASK_NAME_REQUIRED,
    MSG_TIME_ORDER,
    STATUS_ORDER,
    DayBoard,
    next_status,
)
from board.results import ErrorKind

DAY = "2025-09-01"


def _form(start: int, end: int, staff: str = "Taro", name: str = "作業", **extra) -> dict:
    return {"staff_name": staff, "task_name": name, "start_hour": start, "end_hour": end, **extra}


def _board(case, day: str = DAY) -> DayBoard:
    board = DayBoard(day, case.tasks, owner_id=case.identity.user_id)
    assert board.load().ok
    return board


def test_next_status_cycles_and_restarts_on_unknown() -> None:
    assert [next_status(s) for s in STATUS_ORDER] == ["progress", "completed", "pending", "not-started"]
    assert next_status("bogus") == "not-started"


def test_overlap_scenario(case) -> None:
    board = _board(case)

    assert board.create(_form(9, 11)).ok

    rejected = board.create(_form(10, 12))
    assert not rejected.ok
    assert rejected.kind is ErrorKind.VALIDATION
    assert rejected.message == MSG_OVERLAP

    assert board.create(_form(11, 12)).ok
    assert [(t["start_hour"], t["end_hour"]) for t in case.tasks.list_by_date(DAY)] == [(9, 11), (11, 12)]


def test_rejected_create_persists_nothing(case) -> None:
    board = _board(case)
    assert board.create(_form(9, 11)).ok
    board.create(_form(10, 12))
    assert len(case.tasks.list_by_date(DAY)) == 1


def test_other_staff_may_share_the_slot(case) -> None:
    board = _board(case)
    assert board.create(_form(9, 11)).ok
    assert board.create(_form(9, 11, staff="Hanako")).ok


@pytest.mark.parametrize(
    ("form", "message"),
    [
        (_form(9, 11, name="   "), MSG_TASK_NAME_REQUIRED),
        ({"staff_name": "Taro", "start_hour": 9, "end_hour": 11}, MSG_TASK_NAME_REQUIRED),
        (_form(11, 11), MSG_TIME_ORDER),
        (_form(12, 10), MSG_TIME_ORDER),
    ],
)
def test_create_validation(case, form: dict, message: str) -> None:
    result = _board(case).create(form)
    assert result.kind is ErrorKind.VALIDATION
    assert result.message == message
    assert case.tasks.list_by_date(DAY) == []


@pytest.mark.parametrize(
    "form",
    [_form(7, 9), _form(21, 23), _form("9", 11), _form(9, 11, staff=""), _form(9, 11, status="done")],
)
def test_create_rejects_out_of_domain_values(case, form: dict) -> None:
    assert _board(case).create(form).kind is ErrorKind.VALIDATION


def test_create_then_read_round_trip(case) -> None:
    data = _form(13, 15, name="仕様書レビュー", status="progress", wbs_code="SYS-001")
    created = _board(case).create(data)
    assert created.ok

    [stored] = case.tasks.list_by_date(DAY)
    for key, value in data.items():
        assert stored[key] == value
    assert stored["date"] == DAY
    assert stored["created_by"] == case.identity.user_id
    assert stored["id"] == created.value["id"]
    assert stored["created_at"]
    assert stored["updated_at"]


def test_create_defaults_status_and_updates_collection(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 10)).value
    assert task["status"] == "not-started"
    assert task["wbs_code"] is None
    assert board.find(task["id"]) == task
    assert board.tasks_for_staff("Taro") == [task]


def test_update_rechecks_overlap_excluding_itself(case) -> None:
    board = _board(case)
    first = board.create(_form(9, 11)).value
    board.create(_form(13, 15))

    assert board.update(first["id"], {"start_hour": 10, "end_hour": 12}).ok

    moved = board.update(first["id"], {"end_hour": 14})
    assert moved.kind is ErrorKind.VALIDATION
    assert moved.message == MSG_OVERLAP

    backwards = board.update(first["id"], {"start_hour": 12})
    assert backwards.message == MSG_TIME_ORDER


def test_update_moving_to_another_staff_checks_their_day(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 11)).value
    board.create(_form(10, 11, staff="Hanako"))

    assert board.update(task["id"], {"staff_name": "Hanako"}).message == MSG_OVERLAP
    assert board.update(task["id"], {"staff_name": "Jiro"}).ok


def test_partial_update_without_timing(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 11, wbs_code="A-1")).value

    result = board.update(task["id"], {"task_name": "名前変更", "wbs_code": "B-2", "date": "2030-01-01"})

    assert result.ok
    stored = case.tasks.get(task["id"])
    assert stored["task_name"] == "名前変更"
    assert stored["wbs_code"] == "B-2"
    assert stored["date"] == DAY
    assert board.find(task["id"])["task_name"] == "名前変更"


def test_update_blank_name_is_rejected(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 11)).value
    assert board.update(task["id"], {"task_name": ""}).message == MSG_TASK_NAME_REQUIRED


def test_update_unknown_task_is_not_found(case) -> None:
    assert _board(case).update("00000000-0000-0000-0000-000000000000", {"task_name": "x"}).kind is ErrorKind.NOT_FOUND


def test_cycle_status_returns_to_start_after_four_steps(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 10)).value

    seen = []
    for _ in range(4):
        result = board.cycle_status(task["id"])
        assert result.ok
        seen.append(result.value["status"])

    assert seen == ["progress", "completed", "pending", "not-started"]
    assert case.tasks.get(task["id"])["status"] == "not-started"


def test_update_status(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 10)).value
    assert board.update_status(task["id"], "completed").value["status"] == "completed"
    assert board.update_status(task["id"], "finished").kind is ErrorKind.VALIDATION


def test_delete_removes_from_store_and_collection(case) -> None:
    board = _board(case)
    task = board.create(_form(9, 10)).value

    assert board.delete(task["id"]).ok
    assert board.tasks == []
    assert case.tasks.list_by_date(DAY) == []


def test_resize_moves_one_edge_and_respects_overlap(case) -> None:
    board = _board(case)
    task = board.create(_form(10, 12)).value
    board.create(_form(14, 16))

    assert board.resize(task["id"], "end", 14).value["end_hour"] == 14
    assert board.resize(task["id"], "end", 15).message == MSG_OVERLAP
    assert board.resize(task["id"], "start", 20).value["start_hour"] == 13
    unchanged = board.resize(task["id"], "start", 13)
    assert unchanged.ok
    assert (unchanged.value["start_hour"], unchanged.value["end_hour"]) == (13, 14)


def test_stats_follow_mutations(case) -> None:
    board = _board(case)
    a = board.create(_form(9, 10)).value
    board.create(_form(10, 11))
    board.update_status(a["id"], "completed")

    stats = board.stats()
    assert stats["total"] == 2
    assert stats["completed"] == 1
    assert stats["completion_rate"] == 50


def test_tasks_on_other_days_are_not_listed(case) -> None:
    _board(case, "2025-09-02").create(_form(9, 10))
    board = _board(case)
    assert board.tasks == []
    assert board.create(_form(9, 10)).ok


# ---------------------------------------------------------------------------
# Concurrency limitations
# ---------------------------------------------------------------------------

def test_concurrent_updates_last_write_wins(case) -> None:
    task = _board(case).create(_form(9, 11)).value
    first, second = _board(case), _board(case)

    assert first.update(task["id"], {"task_name": "from first"}).ok
    assert second.update(task["id"], {"task_name": "from second", "status": "pending"}).ok

    stored = case.tasks.get(task["id"])
    assert stored["task_name"] == "from second"
    assert stored["status"] == "pending"


def test_overlap_race_between_stale_snapshots_is_not_prevented(case) -> None:
    first, second = _board(case), _board(case)

    assert first.create(_form(9, 11)).ok
    # The second board never saw the first task, so its check passes.
    assert second.create(_form(10, 12)).ok

    assert len(case.tasks.list_by_date(DAY)) == 2
    # A freshly loaded board does see the conflict.
    assert _board(case).create(_form(10, 11)).message == MSG_OVERLAP
