"""Who is marked as working, kept per browser session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

SESSION_KEY = "attendance"


@dataclass
class AttendanceSelection:
    selected_date: str = field(default_factory=lambda: date.today().isoformat())
    selected: dict[str, bool] = field(default_factory=dict)

    def toggle(self, staff_name: str) -> bool:
        self.selected[staff_name] = not self.selected.get(staff_name, False)
        return self.selected[staff_name]

    def selected_names(self) -> list[str]:
        return [name for name, on in self.selected.items() if on]

    def remove(self, staff_name: str) -> None:
        self.selected.pop(staff_name, None)

    def clear(self) -> None:
        self.selected = {}

    def set_date(self, value: str) -> None:
        self.selected_date = value

    def to_dict(self) -> dict:
        return {"selected_date": self.selected_date, "selected": dict(self.selected)}

    @classmethod
    def from_dict(cls, data: dict) -> "AttendanceSelection":
        sel = cls()
        if data.get("selected_date"):
            sel.selected_date = data["selected_date"]
        sel.selected = {str(k): bool(v) for k, v in (data.get("selected") or {}).items()}
        return sel


def load_selection(session) -> AttendanceSelection:
    return AttendanceSelection.from_dict(session.get(SESSION_KEY) or {})


def save_selection(session, selection: AttendanceSelection) -> None:
    session[SESSION_KEY] = selection.to_dict()
