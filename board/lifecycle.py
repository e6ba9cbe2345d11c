"""Task lifecycle for one day's board: create, update, delete, status cycling.

A ``DayBoard`` holds the tasks of a single date as loaded from the
repository. Overlap checks run against that snapshot, not against the store,
so two boards loaded at the same moment can both accept overlapping tasks for
the same staff member; the last write to a task simply wins.
"""

from __future__ import annotations

import logging

from board.overlap import has_overlap
from board.repositories import BACKEND_ERRORS, TaskRepository
from board.results import Err, Ok, backend_error, not_found, validation_error
from board.stats import task_stats
from board.timegrid import is_valid_hour, resize_interval

logger = logging.getLogger("board.lifecycle")

STATUS_ORDER = ("not-started", "progress", "completed", "pending")
DEFAULT_STATUS = "not-started"

# Fields of the task form; anything else in a request body is ignored.
FORM_FIELDS = ("staff_name", "task_name", "start_hour", "end_hour", "status", "wbs_code")
TIME_FIELDS = ("staff_name", "start_hour", "end_hour")

MSG_TASK_NAME_REQUIRED = "タスク名を入力してください"
MSG_STAFF_REQUIRED = "スタッフを選択してください"
MSG_TIME_RANGE = "時間は8時から22時の範囲で指定してください"
MSG_TIME_ORDER = "終了時間は開始時間より後に設定してください"
MSG_OVERLAP = "この時間帯には既に別のタスクが登録されています"
MSG_BAD_STATUS = "不正なステータスです"
MSG_BAD_EDGE = "不正な操作です"
MSG_NOT_FOUND = "タスクが見つかりません"


def next_status(status: str) -> str:
    """Return the status after ``status``; unknown values restart the cycle."""
    try:
        idx = STATUS_ORDER.index(status)
    except ValueError:
        idx = -1
    return STATUS_ORDER[(idx + 1) % len(STATUS_ORDER)]


def _blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def _check_fields(form: dict) -> Err | None:
    """Field-level checks on whatever form fields are present."""
    if "task_name" in form and _blank(form["task_name"]):
        return validation_error(MSG_TASK_NAME_REQUIRED)
    if "staff_name" in form and _blank(form["staff_name"]):
        return validation_error(MSG_STAFF_REQUIRED)
    for key in ("start_hour", "end_hour"):
        if key in form and not is_valid_hour(form[key]):
            return validation_error(MSG_TIME_RANGE)
    if "status" in form and form["status"] not in STATUS_ORDER:
        return validation_error(MSG_BAD_STATUS)
    return None


def _check_interval(record: dict) -> Err | None:
    if record["start_hour"] >= record["end_hour"]:
        return validation_error(MSG_TIME_ORDER)
    return None


class DayBoard:
    """The task collection for one date plus the operations that change it."""

    def __init__(self, date: str, repo: TaskRepository, owner_id: str | None = None) -> None:
        self.date = date
        self.repo = repo
        self.owner_id = owner_id
        self.tasks: list[dict] = []

    # -- reading ---------------------------------------------------------

    def load(self) -> Ok | Err:
        try:
            tasks = self.repo.list_by_date(self.date)
        except BACKEND_ERRORS as exc:
            logger.error("Failed to load tasks for %s: %s", self.date, exc)
            return backend_error(str(exc))
        self.tasks = sorted(tasks, key=lambda t: (t["staff_name"], t["start_hour"]))
        return Ok(self.tasks)

    refetch = load

    def find(self, task_id: str) -> dict | None:
        return next((t for t in self.tasks if t["id"] == task_id), None)

    def tasks_for_staff(self, staff_name: str) -> list[dict]:
        return [t for t in self.tasks if t["staff_name"] == staff_name]

    def stats(self) -> dict:
        return task_stats(self.tasks)

    # -- writing ---------------------------------------------------------

    def create(self, data: dict) -> Ok | Err:
        """Validate and store a new task for this board's date."""
        form = {k: data[k] for k in FORM_FIELDS if k in data and data[k] is not None}
        if _blank(form.get("task_name")):
            return validation_error(MSG_TASK_NAME_REQUIRED)
        if _blank(form.get("staff_name")):
            return validation_error(MSG_STAFF_REQUIRED)
        if "start_hour" not in form or "end_hour" not in form:
            return validation_error(MSG_TIME_RANGE)
        err = _check_fields(form) or _check_interval(form)
        if err:
            return err
        if has_overlap(form, self.tasks):
            return validation_error(MSG_OVERLAP)

        record = {
            "date": self.date,
            **form,
            "status": form.get("status") or DEFAULT_STATUS,
            "wbs_code": form.get("wbs_code"),
            "created_by": self.owner_id,
        }
        try:
            stored = self.repo.add(record)
        except BACKEND_ERRORS as exc:
            logger.error("Failed to create task %r: %s", form.get("task_name"), exc)
            return backend_error(str(exc))

        if stored["date"] == self.date:
            self.tasks.append(stored)
        logger.info(
            "Created task %s for %s %s-%s on %s",
            stored["id"], stored["staff_name"], stored["start_hour"], stored["end_hour"], self.date,
        )
        return Ok(stored)

    def update(self, task_id: str, data: dict) -> Ok | Err:
        """Apply a partial update, re-running the overlap check when timing moves."""
        changes = {k: data[k] for k in FORM_FIELDS if k in data}
        err = _check_fields(changes)
        if err:
            return err

        try:
            current = self.find(task_id) or self.repo.get(task_id)
        except BACKEND_ERRORS as exc:
            logger.error("Failed to read task %s: %s", task_id, exc)
            return backend_error(str(exc))
        if current is None:
            return not_found(MSG_NOT_FOUND)
        task_id = current["id"]

        if any(k in changes for k in TIME_FIELDS):
            merged = {**current, **changes}
            err = _check_interval(merged)
            if err:
                return err
            try:
                peers = self.tasks if current["date"] == self.date else self.repo.list_by_date(current["date"])
            except BACKEND_ERRORS as exc:
                logger.error("Failed to load tasks for %s: %s", current["date"], exc)
                return backend_error(str(exc))
            if has_overlap(merged, peers, exclude_id=task_id):
                return validation_error(MSG_OVERLAP)

        try:
            stored = self.repo.update(task_id, changes)
        except BACKEND_ERRORS as exc:
            logger.error("Failed to update task %s: %s", task_id, exc)
            return backend_error(str(exc))
        if stored is None:
            self._forget(task_id)
            return not_found(MSG_NOT_FOUND)

        self._forget(task_id)
        if stored["date"] == self.date:
            self.tasks.append(stored)
            self.tasks.sort(key=lambda t: (t["staff_name"], t["start_hour"]))
        logger.info("Updated task %s: %s", task_id, sorted(changes))
        return Ok(stored)

    def update_status(self, task_id: str, status: str) -> Ok | Err:
        return self.update(task_id, {"status": status})

    def delete(self, task_id: str) -> Ok | Err:
        try:
            self.repo.delete(task_id)
        except BACKEND_ERRORS as exc:
            logger.error("Failed to delete task %s: %s", task_id, exc)
            return backend_error(str(exc))
        self._forget(task_id)
        logger.info("Deleted task %s", task_id)
        return Ok(None)

    def cycle_status(self, task_id: str) -> Ok | Err:
        """Advance not-started -> progress -> completed -> pending -> not-started."""
        current = self.find(task_id)
        if current is None:
            return not_found(MSG_NOT_FOUND)
        return self.update_status(task_id, next_status(current["status"]))

    def resize(self, task_id: str, edge: str, hour: int) -> Ok | Err:
        """Move one edge of a task to ``hour`` the way a grid drag does."""
        current = self.find(task_id)
        if current is None:
            return not_found(MSG_NOT_FOUND)
        if not isinstance(hour, int) or isinstance(hour, bool):
            return validation_error(MSG_TIME_RANGE)
        try:
            start, end = resize_interval(current["start_hour"], current["end_hour"], edge, hour)
        except ValueError:
            return validation_error(MSG_BAD_EDGE)
        if (start, end) == (current["start_hour"], current["end_hour"]):
            return Ok(current)
        return self.update(task_id, {"start_hour": start, "end_hour": end})

    def _forget(self, task_id: str) -> None:
        self.tasks = [t for t in self.tasks if t["id"] != task_id]
