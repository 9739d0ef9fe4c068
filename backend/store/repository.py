"""
repository.py — Classroom data access on top of any RecordStore.

Upserts keep one grade per (student, assignment) and one attendance
record per (student, date); the store itself does not enforce either.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from core.dates import to_day
from core.helpers import record_id, same_id
from core.records import search_students
from store.base import ASSIGNMENTS, ATTENDANCE, GRADES, STUDENTS, RecordStore

_LOGGER = logging.getLogger(__name__)


class ClassroomRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def students(self) -> List[Dict[str, Any]]:
        return self.store.get_all(STUDENTS)

    def assignments(self) -> List[Dict[str, Any]]:
        return self.store.get_all(ASSIGNMENTS, order_by=[("due_date", "desc")])

    def grades(self, student_id: Any = None, assignment_id: Any = None) -> List[Dict[str, Any]]:
        where = {}
        if student_id is not None:
            where["student_id"] = record_id(student_id)
        if assignment_id is not None:
            where["assignment_id"] = record_id(assignment_id)
        return self.store.get_all(GRADES, where=where or None, order_by=[("submitted_date", "desc")])

    def attendance(self, on: Any = None) -> List[Dict[str, Any]]:
        if on is None:
            return self.store.get_all(ATTENDANCE, order_by=[("date", "desc")])
        day = to_day(on)
        if day is None:
            return []
        return [r for r in self.store.get_all(ATTENDANCE) if to_day(r.get("date")) == day]

    def attendance_range(self, start: Any, end: Any) -> List[Dict[str, Any]]:
        """Records dated within [start, end], inclusive on both ends."""
        first, last = to_day(start), to_day(end)
        if first is None or last is None:
            return []
        return [
            r for r in self.store.get_all(ATTENDANCE, order_by=[("date", "asc")])
            if (day := to_day(r.get("date"))) is not None and first <= day <= last
        ]

    def search_students(self, query: Optional[str]) -> List[Dict[str, Any]]:
        return search_students(self.students(), query)

    def upsert_grade(
        self,
        student_id: Any,
        assignment_id: Any,
        score: float,
        comments: str = "",
        today: Optional[dt.date] = None,
    ) -> Dict[str, Any]:
        """
        Create or update the grade for (student, assignment).

        Updating an existing grade re-stamps its submitted date with today.
        """
        data = {
            "student_id": record_id(student_id),
            "assignment_id": record_id(assignment_id),
            "score": float(score),
            "comments": comments,
        }
        existing = next(
            (g for g in self.grades(student_id=student_id) if same_id(g.get("assignment_id"), assignment_id)),
            None,
        )
        if existing:
            data["submitted_date"] = (today or dt.date.today()).isoformat()
            _LOGGER.info("Updating grade %s for student %s", existing["id"], student_id)
            return self.store.update(GRADES, existing["id"], data)
        _LOGGER.info("Creating grade for student %s on assignment %s", student_id, assignment_id)
        return self.store.create(GRADES, data)

    def mark_attendance(self, student_id: Any, day: Any, status: str, notes: str = "") -> Dict[str, Any]:
        """Create or update the attendance record for (student, day)."""
        target = to_day(day)
        if target is None:
            raise ValueError(f"Cannot mark attendance for unusable date {day!r}.")
        data = {
            "student_id": record_id(student_id),
            "date": target.isoformat(),
            "status": status,
            "notes": notes,
        }
        existing = next(
            (r for r in self.attendance(on=target) if same_id(r.get("student_id"), student_id)),
            None,
        )
        if existing:
            return self.store.update(ATTENDANCE, existing["id"], data)
        return self.store.create(ATTENDANCE, data)
