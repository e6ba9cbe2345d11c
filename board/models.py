"""Local tables used when the service runs in mock mode."""

import uuid

from django.db import models

TASK_STATUS_CHOICES = [
    ("not-started", "未着手"),
    ("progress", "進行中"),
    ("completed", "完了"),
    ("pending", "保留"),
]


class StaffMember(models.Model):
    """A person who can be marked as working and own tasks on the grid."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    email = models.CharField(max_length=254, blank=True, null=True)
    user_id = models.CharField(max_length=64, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        db_table = "staff_members"

    def __str__(self) -> str:
        return self.name

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "user_id": self.user_id,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class Task(models.Model):
    """One time block ``[start_hour, end_hour)`` for a staff member on a date."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date = models.DateField(db_index=True)
    staff_name = models.CharField(max_length=100, db_index=True)
    task_name = models.CharField(max_length=200)
    start_hour = models.PositiveSmallIntegerField()
    end_hour = models.PositiveSmallIntegerField()
    status = models.CharField(max_length=20, choices=TASK_STATUS_CHOICES, default="not-started")
    wbs_code = models.CharField(max_length=100, blank=True, null=True)
    created_by = models.CharField(max_length=64, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["staff_name", "start_hour"]
        db_table = "tasks"

    def __str__(self) -> str:
        return f"{self.date} {self.staff_name} {self.start_hour}-{self.end_hour} {self.task_name}"

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "date": self.date.isoformat() if hasattr(self.date, "isoformat") else str(self.date),
            "staff_name": self.staff_name,
            "task_name": self.task_name,
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "status": self.status,
            "wbs_code": self.wbs_code,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
