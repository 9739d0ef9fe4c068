"""
dashboard.py — Class-wide roll-up for the dashboard landing page.
"""

from typing import Any, Dict, List, Mapping, Sequence

from core.attendance_metrics import format_attendance_date, today_snapshot
from core.dates import date_sort_key
from core.grade_metrics import average_of
from core.helpers import record_id, sanitize

RECENT_LIMIT = 5


def _student_names(students: Sequence[Mapping[str, Any]]) -> Dict[int, str]:
    return {
        record_id(s.get("id")): f"{s.get('first_name', '')} {s.get('last_name', '')}".strip()
        for s in students
    }


def _most_recent(records: Sequence[Mapping[str, Any]], date_field: str) -> List[Mapping[str, Any]]:
    return sorted(records, key=lambda r: date_sort_key(r.get(date_field)), reverse=True)[:RECENT_LIMIT]


def dashboard_summary(
    students: Sequence[Mapping[str, Any]],
    assignments: Sequence[Mapping[str, Any]],
    grades: Sequence[Mapping[str, Any]],
    attendance: Sequence[Mapping[str, Any]],
    today: Any = None,
) -> Dict[str, Any]:
    """Totals, class average, today's attendance and the latest grades/absences."""
    students = list(students or [])
    assignments = list(assignments or [])
    grades = list(grades or [])
    attendance = list(attendance or [])

    names = _student_names(students)
    titles = {record_id(a.get("id")): a.get("title") for a in assignments}

    recent_grades = [
        {
            "id": g.get("id"),
            "student_id": record_id(g.get("student_id")),
            "student_name": names.get(record_id(g.get("student_id"))) or "Unknown",
            "assignment_id": record_id(g.get("assignment_id")),
            "assignment_title": titles.get(record_id(g.get("assignment_id"))) or "Unknown Assignment",
            "score": g.get("score"),
            "submitted_date": g.get("submitted_date"),
        }
        for g in _most_recent(grades, "submitted_date")
    ]

    absences = [r for r in attendance if r.get("status") != "present"]
    recent_absences = [
        {
            "id": r.get("id"),
            "student_id": record_id(r.get("student_id")),
            "student_name": names.get(record_id(r.get("student_id"))) or "Unknown",
            "status": r.get("status"),
            "date": r.get("date"),
            "date_label": format_attendance_date(r.get("date")),
        }
        for r in _most_recent(absences, "date")
    ]

    return sanitize({
        "total_students": len(students),
        "active_students": sum(1 for s in students if (s.get("status") or "active") == "active"),
        "total_assignments": len(assignments),
        "class_average": average_of(grades),
        "today": today_snapshot(students, attendance, today=today),
        "recent_grades": recent_grades,
        "recent_absences": recent_absences,
    })
