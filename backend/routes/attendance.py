"""
Attendance routes — attendance rates, today's snapshot and the weekly grid.
"""

from typing import Optional

from fastapi import APIRouter

from core.attendance_metrics import (
    attendance_percentage,
    status_badge_token,
    status_color_token,
    today_snapshot,
    week_grid,
    weekdays_of,
)
from routes.payload import records_from_payload

router = APIRouter()


@router.post("/percentage")
async def percentage(payload: dict):
    return {"percentage": attendance_percentage(records_from_payload(payload, "records"))}


@router.post("/today")
async def today(payload: dict):
    """
    Today's present/absent/late counts against the full roster.
    Expects: { "students": [...], "records": [...], "today": "2024-03-04" (optional) }
    """
    students = records_from_payload(payload, "students")
    records = records_from_payload(payload, "records")
    return today_snapshot(students, records, today=payload.get("today"))


@router.post("/week")
async def week(payload: dict):
    students = records_from_payload(payload, "students")
    records = records_from_payload(payload, "records")
    return week_grid(students, records, payload.get("date"))


@router.get("/weekdays")
async def weekdays(date: Optional[str] = None):
    """Monday-Friday of the week containing `date` (defaults to today)."""
    return {"days": [d.isoformat() for d in weekdays_of(date)]}


@router.get("/status/{status}")
async def status_tokens(status: str):
    return {
        "status": status,
        "color": status_color_token(status),
        "badge": status_badge_token(status),
    }
