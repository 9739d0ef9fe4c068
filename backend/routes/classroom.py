"""
Classroom routes — metrics computed over the configured record store.

The repository lives on app.state (see main.py); tests swap in a seeded
in-memory store.
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from core.dashboard import dashboard_summary
from core.grade_metrics import chart_series, performance_stats, performance_summary
from core.records import sort_records
from store.base import RecordNotFoundError, RecordStore, RecordStoreError, STUDENTS
from store.memory import InMemoryRecordStore
from store.remote import RemoteRecordStore
from store.repository import ClassroomRepository

_LOGGER = logging.getLogger(__name__)

router = APIRouter()


def build_store() -> RecordStore:
    """memory (default) or remote, configured from the environment."""
    kind = os.getenv("RECORD_STORE", "memory").strip().lower()
    if kind == "remote":
        return RemoteRecordStore(
            base_url=os.getenv("RECORD_STORE_URL", ""),
            project_id=os.getenv("RECORD_STORE_PROJECT_ID", ""),
            public_key=os.getenv("RECORD_STORE_PUBLIC_KEY", ""),
            timeout_s=float(os.getenv("RECORD_STORE_TIMEOUT_SECONDS", "20")),
        )
    if kind != "memory":
        raise RecordStoreError(f"Unknown RECORD_STORE {kind!r}; expected 'memory' or 'remote'.")
    return InMemoryRecordStore(delay_ms=int(os.getenv("RECORD_STORE_DELAY_MS", "0")))


def get_repository(request: Request) -> ClassroomRepository:
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        raise HTTPException(503, "Record store is not configured.")
    return repo


def _store_error(exc: RecordStoreError) -> HTTPException:
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(404, str(exc))
    _LOGGER.error("Record store request failed: %s", exc)
    return HTTPException(502, f"Record store error: {exc}")


@router.get("/dashboard")
def dashboard(today: Optional[str] = None, repo: ClassroomRepository = Depends(get_repository)):
    """Totals, class average, today's attendance and recent activity."""
    try:
        return dashboard_summary(
            repo.students(), repo.assignments(), repo.grades(), repo.attendance(), today=today
        )
    except RecordStoreError as exc:
        raise _store_error(exc)


@router.get("/students")
def students(
    q: Optional[str] = None,
    sort: str = "first_name",
    direction: str = "asc",
    repo: ClassroomRepository = Depends(get_repository),
):
    """Roster filtered by `q` and sorted by a plain or derived field."""
    try:
        roster = repo.search_students(q)
        needs_grades = sort in ("gradeAverage", "grade_average")
        needs_attendance = sort == "attendance"
        return {
            "students": sort_records(
                roster,
                sort,
                direction,
                grades=repo.grades() if needs_grades else None,
                attendance=repo.attendance() if needs_attendance else None,
            )
        }
    except ValueError as exc:
        raise HTTPException(422, str(exc))
    except RecordStoreError as exc:
        raise _store_error(exc)


@router.get("/students/{student_id}/performance")
def student_performance(student_id: int, repo: ClassroomRepository = Depends(get_repository)):
    try:
        student = repo.store.get_by_id(STUDENTS, student_id)
        # Oldest first so the trend reads left to right.
        grades = list(reversed(repo.grades(student_id=student_id)))
        assignments = repo.assignments()
    except RecordStoreError as exc:
        raise _store_error(exc)
    try:
        return {
            "student": student,
            "summary": performance_summary(grades),
            "stats": performance_stats(grades),
            "chart": chart_series(grades, assignments),
        }
    except ValueError as exc:
        raise HTTPException(422, str(exc))


@router.put("/grades")
def upsert_grade(payload: dict, repo: ClassroomRepository = Depends(get_repository)):
    """Expects: { "student_id": 1, "assignment_id": 2, "score": 88, "comments": "" }"""
    missing = [k for k in ("student_id", "assignment_id", "score") if payload.get(k) is None]
    if missing:
        raise HTTPException(400, f"Missing fields: {', '.join(missing)}.")
    try:
        return repo.upsert_grade(
            payload["student_id"], payload["assignment_id"], payload["score"], payload.get("comments", "")
        )
    except (TypeError, ValueError) as exc:
        raise HTTPException(422, str(exc))
    except RecordStoreError as exc:
        raise _store_error(exc)


@router.put("/attendance")
def mark_attendance(payload: dict, repo: ClassroomRepository = Depends(get_repository)):
    """Expects: { "student_id": 1, "date": "2024-03-04", "status": "late", "notes": "" }"""
    missing = [k for k in ("student_id", "date", "status") if not payload.get(k)]
    if missing:
        raise HTTPException(400, f"Missing fields: {', '.join(missing)}.")
    try:
        return repo.mark_attendance(
            payload["student_id"], payload["date"], payload["status"], payload.get("notes", "")
        )
    except ValueError as exc:
        raise HTTPException(422, str(exc))
    except RecordStoreError as exc:
        raise _store_error(exc)


@router.get("/attendance")
def attendance(date: Optional[str] = None, repo: ClassroomRepository = Depends(get_repository)):
    try:
        return {"records": repo.attendance(on=date)}
    except RecordStoreError as exc:
        raise _store_error(exc)
