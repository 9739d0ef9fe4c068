"""
attendance_metrics.py — Attendance rates, status tokens and the weekly grid.
"""

import datetime as dt
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from core.dates import format_date, to_day
from core.helpers import field_value, record_id, round_half_up, same_id


STATUSES = ("present", "absent", "late")

STATUS_COLORS = {
    "present": "text-green-600",
    "absent": "text-red-600",
    "late": "text-yellow-600",
}
DEFAULT_STATUS_COLOR = "text-gray-400"

STATUS_BADGES = {
    "present": "status-present",
    "absent": "status-absent",
    "late": "status-late",
}
DEFAULT_STATUS_BADGE = "status-badge bg-gray-100 text-gray-400"


def _present_count(records: Sequence[Mapping[str, Any]]) -> int:
    return sum(1 for r in records if r.get("status") == "present")


def attendance_percentage(records: Sequence[Mapping[str, Any]]) -> int:
    """Share of records marked present, as a whole percentage; 0 for no records."""
    if not records:
        return 0
    return int(round_half_up(_present_count(records) / len(records) * 100))


def student_attendance_rate(student_id: Any, records: Sequence[Mapping[str, Any]]) -> float:
    """Unrounded present-rate for one student, 0 when nothing is recorded."""
    own = [r for r in records or [] if same_id(field_value(r, "student_id"), student_id)]
    if not own:
        return 0.0
    return _present_count(own) / len(own) * 100


def status_color_token(status: Any) -> str:
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR) if isinstance(status, str) else DEFAULT_STATUS_COLOR


def status_badge_token(status: Any) -> str:
    return STATUS_BADGES.get(status, DEFAULT_STATUS_BADGE) if isinstance(status, str) else DEFAULT_STATUS_BADGE


def format_attendance_date(value: Any) -> str:
    """e.g. "Mar 04, 2024"; empty string when the date is unusable."""
    return format_date(value, "%b %d, %Y")


def weekdays_of(reference_date: Any = None) -> List[dt.date]:
    """
    Monday to Friday of the ISO week containing `reference_date`.

    Defaults to today; an unusable date also falls back to today.
    """
    day = to_day(reference_date) if reference_date is not None else None
    if day is None:
        day = dt.date.today()
    monday = day - dt.timedelta(days=day.weekday())
    week = pd.date_range(monday, periods=7, freq="D")
    return [d.date() for d in week if d.dayofweek < 5]


def records_for_date(records: Sequence[Mapping[str, Any]], day: Any) -> List[Mapping[str, Any]]:
    target = to_day(day)
    if target is None:
        return []
    return [r for r in records or [] if to_day(r.get("date")) == target]


def today_snapshot(
    students: Sequence[Mapping[str, Any]],
    records: Sequence[Mapping[str, Any]],
    today: Any = None,
) -> Dict[str, int]:
    """
    Counts for today's attendance against the whole roster.

    total is the number of students, not the number of records taken, so
    unmarked students lower the percentage.
    """
    day = to_day(today) if today is not None else dt.date.today()
    todays = records_for_date(records, day)

    counts = {status: sum(1 for r in todays if r.get("status") == status) for status in STATUSES}
    total = len(students or [])

    return {
        **counts,
        "total": total,
        "percentage": int(round_half_up(counts["present"] / total * 100)) if total else 0,
    }


def week_grid(
    students: Sequence[Mapping[str, Any]],
    records: Sequence[Mapping[str, Any]],
    reference_date: Any = None,
) -> Dict[str, Any]:
    """Per-student status for each weekday of the week; unmarked cells are None."""
    days = weekdays_of(reference_date)
    lookup: Dict[tuple, Optional[str]] = {}
    for r in records or []:
        day = to_day(r.get("date"))
        sid = record_id(r.get("student_id"))
        if day is not None and sid is not None:
            lookup[(sid, day)] = r.get("status")

    rows = []
    for student in students or []:
        sid = record_id(student.get("id"))
        cells = []
        for day in days:
            status = lookup.get((sid, day))
            cells.append({
                "date": day.isoformat(),
                "status": status,
                "badge": status_badge_token(status),
            })
        rows.append({
            "student_id": sid,
            "name": f"{student.get('first_name', '')} {student.get('last_name', '')}".strip(),
            "days": cells,
        })

    return {"days": [d.isoformat() for d in days], "rows": rows}
