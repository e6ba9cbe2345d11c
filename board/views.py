"""View functions for the task board, staff roster, history, and attendance API."""

import logging
import re
from datetime import date

from django.http import JsonResponse
from django.utils import timezone
from rest_framework.decorators import api_view
from rest_framework.response import Response

from board.attendance import load_selection, save_selection
from board.backends import IdentityError, get_backend
from board.formatting import format_display_date, format_working_hours, status_label
from board.lifecycle import MSG_NOT_FOUND, DayBoard
from board.repositories import BACKEND_ERRORS, canonical_id
from board.results import Err, ErrorKind, backend_error, not_found
from board.roster import (
    MSG_STAFF_NOT_FOUND,
    add_staff,
    cleanup_duplicates,
    delete_staff,
    list_staff,
    provision_staff,
    rename_staff,
)
from board.stats import (
    dates_in_month,
    day_records,
    monthly_stats,
    task_stats,
    working_hours,
    working_hours_by_staff,
)
from board.timegrid import TIME_SLOTS

logger = logging.getLogger("board.views")

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

_STATUS_FOR_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BACKEND_ERROR: 502,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(err: Err) -> Response:
    return Response({"error": err.to_dict()}, status=_STATUS_FOR_KIND[err.kind])


def _bad_request(message: str) -> Response:
    return Response({"error": {"kind": ErrorKind.VALIDATION.value, "message": message}}, status=400)


def _resolve_identity(request):
    """Identify the caller through the configured backend.

    Returns:
        A tuple of (Identity, None) on success, or (None, Response) on failure.
    """
    auth_header = request.headers.get("Authorization", "")
    token = auth_header[len("Bearer "):] if auth_header.startswith("Bearer ") else None

    try:
        identity = get_backend().resolve_identity(token)
    except IdentityError as e:
        return None, Response({"error": {"kind": "AUTH", "message": str(e)}}, status=401)
    return identity, None


def _parse_day(value: str | None) -> str | None:
    """Return ``value`` as ``YYYY-MM-DD`` (today when empty), or None if malformed."""
    if not value:
        return timezone.localdate().isoformat()
    try:
        return date.fromisoformat(value).isoformat()
    except (TypeError, ValueError):
        return None


def _json_body(request) -> dict | None:
    """The request body when it is a JSON object (or empty), else None."""
    data = request.data
    if not data:
        return {}
    return data if isinstance(data, dict) else None


def _present_task(task: dict) -> dict:
    return {**task, "status_label": status_label(task["status"])}


def _board_for_task(identity, task_id):
    """Load the board of the day the task is on.

    ``task_id`` must already be in canonical form (see ``canonical_id``).

    Returns:
        A tuple of (DayBoard, None) on success, or (None, Response) on failure.
    """
    repo = get_backend().tasks(identity)
    try:
        current = repo.get(task_id)
    except BACKEND_ERRORS as e:
        logger.error("Backend error reading task %s: %s", task_id, e)
        return None, _error(backend_error(str(e)))
    if current is None:
        return None, _error(not_found(MSG_NOT_FOUND))

    board = DayBoard(current["date"], repo, owner_id=identity.user_id)
    result = board.load()
    if not result.ok:
        return None, _error(result)
    return board, None


# ---------------------------------------------------------------------------
# Core views
# ---------------------------------------------------------------------------

def health_check(request):
    """Return a simple health-check response."""
    return JsonResponse({"status": "ok", "backend": get_backend().name})


@api_view(["GET"])
def time_slots(request):
    """Return the hourly grid."""
    return Response({"slots": [s.to_dict() for s in TIME_SLOTS]})


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

@api_view(["GET", "POST"])
def tasks_for_day(request):
    """GET lists a day's tasks with stats; POST creates a task on that day."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    data = _json_body(request)
    if data is None:
        return _bad_request("request body must be a JSON object")

    day = _parse_day(request.query_params.get("date") or data.get("date"))
    if day is None:
        return _bad_request("date must be YYYY-MM-DD")

    board = DayBoard(day, get_backend().tasks(identity), owner_id=identity.user_id)
    result = board.load()
    if not result.ok:
        return _error(result)

    if request.method == "POST":
        result = board.create(data)
        if not result.ok:
            return _error(result)
        return Response({"task": _present_task(result.value)}, status=201)

    staff = request.query_params.get("staff")
    tasks = board.tasks_for_staff(staff) if staff else board.tasks
    return Response({
        "date": day,
        "tasks": [_present_task(t) for t in tasks],
        "stats": board.stats(),
    })


@api_view(["GET", "PATCH", "DELETE"])
def task_detail(request, task_id):
    """GET returns one task; PATCH applies a partial update; DELETE removes it."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    task_id = canonical_id(task_id)
    if task_id is None:
        return _error(not_found(MSG_NOT_FOUND))

    if request.method == "DELETE":
        board = DayBoard(timezone.localdate().isoformat(), get_backend().tasks(identity))
        result = board.delete(task_id)
        if not result.ok:
            return _error(result)
        return Response(status=204)

    data = _json_body(request)
    if data is None:
        return _bad_request("request body must be a JSON object")

    board, err = _board_for_task(identity, task_id)
    if err:
        return err

    if request.method == "GET":
        return Response({"task": _present_task(board.find(task_id))})

    result = board.update(task_id, data)
    if not result.ok:
        return _error(result)
    return Response({"task": _present_task(result.value)})


@api_view(["POST"])
def task_cycle_status(request, task_id):
    """Advance a task to its next status."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    task_id = canonical_id(task_id)
    if task_id is None:
        return _error(not_found(MSG_NOT_FOUND))

    board, err = _board_for_task(identity, task_id)
    if err:
        return err

    result = board.cycle_status(task_id)
    if not result.ok:
        return _error(result)
    return Response({"task": _present_task(result.value)})


@api_view(["POST"])
def task_resize(request, task_id):
    """Move the start or end edge of a task, as dragging it on the grid does."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    task_id = canonical_id(task_id)
    if task_id is None:
        return _error(not_found(MSG_NOT_FOUND))

    data = _json_body(request)
    if data is None:
        return _bad_request("request body must be a JSON object")
    edge = data.get("edge")
    hour = data.get("hour")
    if edge not in ("start", "end") or not isinstance(hour, int):
        return _bad_request("edge must be 'start' or 'end' and hour an integer")

    board, err = _board_for_task(identity, task_id)
    if err:
        return err

    result = board.resize(task_id, edge, hour)
    if not result.ok:
        return _error(result)
    return Response({"task": _present_task(result.value)})


@api_view(["GET"])
def day_stats(request):
    """Working hours and completion stats for a day, optionally limited to some staff."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    day = _parse_day(request.query_params.get("date"))
    if day is None:
        return _bad_request("date must be YYYY-MM-DD")

    board = DayBoard(day, get_backend().tasks(identity))
    result = board.load()
    if not result.ok:
        return _error(result)

    staff = request.query_params.getlist("staff")
    tasks = [t for t in board.tasks if t["staff_name"] in staff] if staff else board.tasks
    total = working_hours(tasks)
    by_staff = working_hours_by_staff(tasks)

    return Response({
        "date": day,
        "display_date": format_display_date(day),
        "stats": task_stats(tasks),
        "working_hours": total,
        "working_hours_display": format_working_hours(total),
        "by_staff": [
            {"staff_name": name, "hours": hours, "display": format_working_hours(hours)}
            for name, hours in by_staff.items()
        ],
    })


@api_view(["GET"])
def work_history(request):
    """Monthly work history for the caller (or for ``staff`` when given)."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    month = request.query_params.get("month") or timezone.localdate().strftime("%Y-%m")
    if not _MONTH_RE.match(month):
        return _bad_request("month must be YYYY-MM")

    staff_name = request.query_params.get("staff") or identity.display_name
    user_id = None if request.query_params.get("staff") else identity.user_id

    dates = dates_in_month(month)
    try:
        tasks = get_backend().tasks(identity).list_between(dates[0], dates[-1])
    except BACKEND_ERRORS as e:
        logger.error("Backend error fetching history for %s: %s", month, e)
        return _error(backend_error(str(e)))

    records = day_records(tasks, staff_name=staff_name, user_id=user_id)
    summary = monthly_stats(month, records)
    if summary:
        summary["total_hours_display"] = format_working_hours(summary["total_hours"])
        summary["average_hours_display"] = format_working_hours(summary["average_hours"])

    return Response({
        "month": month,
        "staff_name": staff_name,
        "records": [
            {
                **r,
                "display_date": format_display_date(r["date"]),
                "total_hours_display": format_working_hours(r["total_hours"]),
                "tasks": [_present_task(t) for t in r["tasks"]],
            }
            for r in records
        ],
        "stats": summary,
    })


# ---------------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------------

@api_view(["GET", "POST"])
def staff_list(request):
    """GET returns the active roster; POST adds a member by name."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    repo = get_backend().staff(identity)
    if request.method == "POST":
        data = _json_body(request)
        if data is None:
            return _bad_request("request body must be a JSON object")
        result = add_staff(repo, data.get("name", ""), email=data.get("email") or None)
        if not result.ok:
            return _error(result)
        return Response({"staff": result.value}, status=201)

    result = list_staff(repo)
    if not result.ok:
        return _error(result)
    return Response({"staff": result.value})


@api_view(["PATCH", "DELETE"])
def staff_detail(request, staff_id):
    """PATCH renames a member; DELETE deactivates them and removes their tasks."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    staff_id = canonical_id(staff_id)
    if staff_id is None:
        return _error(not_found(MSG_STAFF_NOT_FOUND))

    backend = get_backend()
    if request.method == "PATCH":
        data = _json_body(request)
        if data is None:
            return _bad_request("request body must be a JSON object")
        result = rename_staff(backend.staff(identity), staff_id, data.get("name", ""))
        if not result.ok:
            return _error(result)
        return Response({"staff": result.value})

    result = delete_staff(backend.staff(identity), backend.tasks(identity), staff_id)
    if not result.ok:
        return _error(result)

    selection = load_selection(request.session)
    selection.remove(result.value["name"])
    save_selection(request.session, selection)
    return Response(status=204)


@api_view(["POST"])
def staff_provision(request):
    """Register the caller as a staff member (idempotent)."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    result = provision_staff(get_backend().staff(identity), identity)
    if not result.ok:
        return _error(result)
    member, created = result.value
    return Response({"staff": member, "created": created}, status=201 if created else 200)


@api_view(["POST"])
def staff_cleanup(request):
    """Deactivate duplicate roster entries."""
    identity, err = _resolve_identity(request)
    if err:
        return err

    result = cleanup_duplicates(get_backend().staff(identity))
    if not result.ok:
        return _error(result)
    return Response({"success": True, **result.value})


# ---------------------------------------------------------------------------
# Attendance selection
# ---------------------------------------------------------------------------

@api_view(["GET", "POST", "DELETE"])
def attendance(request):
    """Read or change who is marked as working; kept in the caller's session.

    POST accepts any of ``toggle`` (a staff name), ``date``, or ``selected``
    (a full name -> bool mapping).
    """
    selection = load_selection(request.session)

    if request.method == "DELETE":
        selection.clear()
    elif request.method == "POST":
        data = _json_body(request)
        if data is None:
            return _bad_request("request body must be a JSON object")
        if "date" in data:
            day = _parse_day(data["date"])
            if day is None:
                return _bad_request("date must be YYYY-MM-DD")
            selection.set_date(day)
        if isinstance(data.get("selected"), dict):
            selection.selected = {str(k): bool(v) for k, v in data["selected"].items()}
        if data.get("toggle"):
            selection.toggle(str(data["toggle"]))

    if request.method != "GET":
        save_selection(request.session, selection)

    return Response({**selection.to_dict(), "selected_names": selection.selected_names()})
