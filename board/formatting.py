"""Display strings for hours, statuses, and dates (Japanese UI)."""

from __future__ import annotations

import math
from datetime import date

STATUS_LABELS = {
    "not-started": "未着手",
    "progress": "進行中",
    "completed": "完了",
    "pending": "保留",
}


def format_working_hours(hours: float) -> str:
    """Render hours as ``H時間M分``; under an hour is shown in minutes only."""
    if hours == 0:
        return "0時間"
    if hours < 1:
        return f"{math.floor(hours * 60 + 0.5)}分"

    whole = math.floor(hours)
    minutes = math.floor((hours - whole) * 60 + 0.5)
    if minutes == 0:
        return f"{whole}時間"
    return f"{whole}時間{minutes}分"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, "不明")


def format_display_date(value: str | date) -> str:
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return value.strftime("%Y年%m月%d日")
