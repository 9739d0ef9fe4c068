"""
Grade routes — grade averages, banding, trend line and performance chart.
"""

from fastapi import APIRouter, HTTPException

from core.grade_metrics import (
    assignment_stats,
    average_of,
    chart_series,
    filter_grades_by_assignment,
    filter_grades_by_period,
    performance_stats,
    performance_summary,
    trend_line,
)
from core.grading import badge_class, grade_color, grade_thresholds, letter_grade
from routes.payload import records_from_payload

router = APIRouter()


def _band(average) -> dict:
    letter = letter_grade(average)
    return {"letter": letter, "badge": badge_class(letter), "color": grade_color(average)}


def _filtered_grades(payload: dict) -> list:
    grades = records_from_payload(payload, "grades")
    grades = filter_grades_by_period(grades, payload.get("period", "all"), now=payload.get("now"))
    return filter_grades_by_assignment(grades, payload.get("assignment_id", "all"))


@router.post("/average")
async def average(payload: dict):
    """Mean score (one decimal) with its letter grade and display tokens."""
    value = average_of(records_from_payload(payload, "grades"))
    return {"average": value, **_band(value)}


@router.post("/letter")
async def letter(payload: dict):
    if "average" not in payload:
        raise HTTPException(400, "No average provided.")
    return _band(payload["average"])


@router.get("/scale")
async def scale():
    return {"grade_scale": grade_thresholds()}


@router.post("/stats")
async def stats(payload: dict):
    """Submission stats for one assignment's grades."""
    grades = records_from_payload(payload, "grades")
    return assignment_stats(grades, payload.get("total_points"))


@router.post("/trend")
async def trend(payload: dict):
    points = records_from_payload(payload, "points")
    try:
        return {"trend": trend_line(points)}
    except ValueError as exc:
        raise HTTPException(422, str(exc))


@router.post("/summary")
async def summary(payload: dict):
    """Average, trend direction and consistency; null summary for no grades."""
    return {"summary": performance_summary(records_from_payload(payload, "grades"))}


@router.post("/chart")
async def chart(payload: dict):
    """
    Scatter + trend series for the performance chart.
    Expects: { "grades": [...], "assignments": [...], "period": "last30", "assignment_id": 3 }
    """
    grades = _filtered_grades(payload)
    assignments = payload.get("assignments") or []
    try:
        return chart_series(grades, assignments)
    except ValueError as exc:
        raise HTTPException(422, str(exc))


@router.post("/performance")
async def performance(payload: dict):
    """Header stats for the performance chart under the same filters."""
    return {"stats": performance_stats(_filtered_grades(payload))}
