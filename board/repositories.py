"""Task and staff repositories: one interface, a local and a Supabase implementation.

Records cross this boundary as plain dicts shaped like the hosted ``tasks``
and ``staff_members`` rows, so the rest of the app never knows which
backend is in use.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date as date_cls
from typing import Protocol

import httpx
from django.db import DatabaseError
from django.utils import timezone

from board.models import StaffMember, Task
from integrations.supabase import SupabaseAPIError, SupabaseClient, eq, in_, order

logger = logging.getLogger("board.repositories")

# Anything a repository may raise when the store itself fails.
BACKEND_ERRORS = (SupabaseAPIError, httpx.HTTPError, DatabaseError)

TASK_FIELDS = (
    "date",
    "staff_name",
    "task_name",
    "start_hour",
    "end_hour",
    "status",
    "wbs_code",
    "created_by",
)


class TaskRepository(Protocol):
    def list_by_date(self, day: str) -> list[dict]: ...

    def list_between(self, first: str, last: str) -> list[dict]: ...

    def get(self, task_id: str) -> dict | None: ...

    def add(self, record: dict) -> dict: ...

    def update(self, task_id: str, fields: dict) -> dict | None: ...

    def delete(self, task_id: str) -> None: ...

    def delete_by_staff(self, staff_name: str) -> None: ...


class StaffRepository(Protocol):
    def list_active(self) -> list[dict]: ...

    def get(self, staff_id: str) -> dict | None: ...

    def add(self, name: str, email: str | None = None, user_id: str | None = None) -> dict: ...

    def rename(self, staff_id: str, name: str) -> dict | None: ...

    def deactivate(self, staff_id: str) -> None: ...

    def deactivate_many(self, staff_ids: list[str]) -> None: ...


def _parse_uuid(value) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def canonical_id(value) -> str | None:
    """Return ``value`` in the stored UUID form (lower-case, hyphenated), or None."""
    pk = _parse_uuid(value)
    return str(pk) if pk is not None else None


# ---------------------------------------------------------------------------
# Local (mock mode)
# ---------------------------------------------------------------------------

class LocalTaskRepository:
    """Tasks stored in the service's own database.

    Stands in for the hosted backend; there is no ownership model, so every
    caller may change every task.
    """

    def list_by_date(self, day: str) -> list[dict]:
        rows = Task.objects.filter(date=day).order_by("staff_name", "start_hour")
        return [t.to_record() for t in rows]

    def list_between(self, first: str, last: str) -> list[dict]:
        rows = Task.objects.filter(date__range=(first, last)).order_by("date", "staff_name", "start_hour")
        return [t.to_record() for t in rows]

    def get(self, task_id: str) -> dict | None:
        pk = _parse_uuid(task_id)
        if pk is None:
            return None
        task = Task.objects.filter(pk=pk).first()
        return task.to_record() if task else None

    def add(self, record: dict) -> dict:
        fields = {k: record[k] for k in TASK_FIELDS if k in record}
        fields["date"] = date_cls.fromisoformat(fields["date"])
        return Task.objects.create(**fields).to_record()

    def update(self, task_id: str, fields: dict) -> dict | None:
        pk = _parse_uuid(task_id)
        if pk is None:
            return None
        changes = {k: v for k, v in fields.items() if k in TASK_FIELDS}
        if "date" in changes:
            changes["date"] = date_cls.fromisoformat(changes["date"])
        updated = Task.objects.filter(pk=pk).update(**changes, updated_at=timezone.now())
        if not updated:
            return None
        return Task.objects.get(pk=pk).to_record()

    def delete(self, task_id: str) -> None:
        pk = _parse_uuid(task_id)
        if pk is not None:
            Task.objects.filter(pk=pk).delete()

    def delete_by_staff(self, staff_name: str) -> None:
        deleted, _ = Task.objects.filter(staff_name=staff_name).delete()
        logger.info("Removed %d local task(s) for %s", deleted, staff_name)


class LocalStaffRepository:
    def list_active(self) -> list[dict]:
        return [s.to_record() for s in StaffMember.objects.filter(is_active=True).order_by("created_at")]

    def get(self, staff_id: str) -> dict | None:
        pk = _parse_uuid(staff_id)
        if pk is None:
            return None
        member = StaffMember.objects.filter(pk=pk).first()
        return member.to_record() if member else None

    def add(self, name: str, email: str | None = None, user_id: str | None = None) -> dict:
        return StaffMember.objects.create(name=name, email=email, user_id=user_id).to_record()

    def rename(self, staff_id: str, name: str) -> dict | None:
        pk = _parse_uuid(staff_id)
        if pk is None:
            return None
        if not StaffMember.objects.filter(pk=pk).update(name=name, updated_at=timezone.now()):
            return None
        return StaffMember.objects.get(pk=pk).to_record()

    def deactivate(self, staff_id: str) -> None:
        self.deactivate_many([staff_id])

    def deactivate_many(self, staff_ids: list[str]) -> None:
        pks = [pk for pk in (_parse_uuid(s) for s in staff_ids) if pk is not None]
        StaffMember.objects.filter(pk__in=pks).update(is_active=False, updated_at=timezone.now())


# ---------------------------------------------------------------------------
# Supabase (live mode)
# ---------------------------------------------------------------------------

class SupabaseTaskRepository:
    """Tasks in the hosted ``tasks`` table; ownership is enforced by Supabase."""

    table = "tasks"

    def __init__(self, client: SupabaseClient) -> None:
        self.client = client

    def list_by_date(self, day: str) -> list[dict]:
        return self.client.select(self.table, [eq("date", day), order("staff_name", "start_hour")])

    def list_between(self, first: str, last: str) -> list[dict]:
        return self.client.select(
            self.table,
            [("date", f"gte.{first}"), ("date", f"lte.{last}"), order("date", "staff_name", "start_hour")],
        )

    def get(self, task_id: str) -> dict | None:
        rows = self.client.select(self.table, [eq("id", task_id)])
        return rows[0] if rows else None

    def add(self, record: dict) -> dict:
        return self.client.insert(self.table, {k: record[k] for k in TASK_FIELDS if k in record})

    def update(self, task_id: str, fields: dict) -> dict | None:
        changes = {k: v for k, v in fields.items() if k in TASK_FIELDS}
        changes["updated_at"] = timezone.now().isoformat()
        rows = self.client.update(self.table, [eq("id", task_id)], changes)
        return rows[0] if rows else None

    def delete(self, task_id: str) -> None:
        self.client.delete(self.table, [eq("id", task_id)])

    def delete_by_staff(self, staff_name: str) -> None:
        self.client.delete(self.table, [eq("staff_name", staff_name)])


class SupabaseStaffRepository:
    table = "staff_members"

    def __init__(self, client: SupabaseClient) -> None:
        self.client = client

    def list_active(self) -> list[dict]:
        return self.client.select(self.table, [eq("is_active", True), order("created_at")])

    def get(self, staff_id: str) -> dict | None:
        rows = self.client.select(self.table, [eq("id", staff_id)])
        return rows[0] if rows else None

    def add(self, name: str, email: str | None = None, user_id: str | None = None) -> dict:
        row: dict = {"name": name}
        if email:
            row["email"] = email
        if user_id:
            row["user_id"] = user_id
        return self.client.insert(self.table, row)

    def rename(self, staff_id: str, name: str) -> dict | None:
        rows = self.client.update(
            self.table, [eq("id", staff_id)], {"name": name, "updated_at": timezone.now().isoformat()},
        )
        return rows[0] if rows else None

    def deactivate(self, staff_id: str) -> None:
        self.client.update(
            self.table, [eq("id", staff_id)], {"is_active": False, "updated_at": timezone.now().isoformat()},
        )

    def deactivate_many(self, staff_ids: list[str]) -> None:
        if staff_ids:
            self.client.update(
                self.table, [in_("id", staff_ids)], {"is_active": False, "updated_at": timezone.now().isoformat()},
            )
