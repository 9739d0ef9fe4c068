"""
grade_metrics.py — Grade aggregation for the gradebook and performance chart.

Computes:
- Grade averages (one decimal, no weighting by assignment points)
- Per-assignment submission stats
- Least-squares trend line over submission order
- Chart series and header stats for the performance chart
- Qualitative performance summary (trend + consistency)

Scores are 0-100 percentages and are never rescaled by totalPoints.
"""

from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from core.dates import date_sort_key, format_date, parse_date
from core.helpers import (
    field_value,
    numeric_score,
    numeric_scores,
    record_id,
    round_half_up,
    safe_float,
    same_id,
    sanitize,
)


DEFAULT_TOTAL_POINTS = 100

# Consistency buckets on (max - min) score spread.
HIGH_CONSISTENCY_SPREAD = 15
MEDIUM_CONSISTENCY_SPREAD = 30


# ── Averages ────────────────────────────────────────────────────────

def average_of(grades: Sequence[Mapping[str, Any]]) -> float:
    """Mean score rounded to one decimal; 0 for no grades."""
    scores = numeric_scores(grades)
    if not scores:
        return 0
    return round_half_up(float(np.mean(scores)), 1)


def student_grade_average(student_id: Any, grades: Sequence[Mapping[str, Any]]) -> float:
    """Unrounded mean of one student's scores, 0 when the student has none."""
    scores = numeric_scores([g for g in grades or [] if same_id(field_value(g, "student_id"), student_id)])
    return float(np.mean(scores)) if scores else 0.0


def assignment_stats(
    grades: Sequence[Mapping[str, Any]], total_points: Optional[float] = None
) -> Dict[str, Any]:
    """Submission count, average score and point total for one assignment's grades."""
    total = total_points or DEFAULT_TOTAL_POINTS
    if not grades:
        return {"submitted": 0, "average": 0, "total": total}
    return {
        "submitted": len(grades),
        "average": average_of(grades),
        "total": total,
    }


# ── Trend Line ──────────────────────────────────────────────────────

def _require_number(value: Any, index: int) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"trend point {index} has non-numeric y value: {value!r}")
    value = float(value)
    if np.isnan(value) or np.isinf(value):
        raise ValueError(f"trend point {index} has non-finite y value: {value!r}")
    return value


def trend_line(points: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Ordinary least-squares fit of y against the 0-based point index.

    The caller's x values are labels only; they are carried through to the
    output untouched. Fitted values are clamped into [0, 100]. Fewer than
    two points yields an empty list.
    """
    if not points or len(points) < 2:
        return []

    y = np.array([_require_number(p.get("y"), i) for i, p in enumerate(points)], dtype=float)
    fitted = _fitted(y)
    return [
        {"x": p.get("x"), "y": float(v)}
        for p, v in zip(points, fitted)
    ]


def _fitted(y: np.ndarray) -> np.ndarray:
    n = len(y)
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_xx = (x * x).sum()

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x ** 2)
    intercept = (sum_y - slope * sum_x) / n

    return np.clip(intercept + slope * x, 0, 100)


def _trend_direction(scores: List[float]) -> bool:
    """True when the fitted line ends strictly above where it starts."""
    if len(scores) < 2:
        return False
    fitted = _fitted(np.array(scores, dtype=float))
    return bool(fitted[-1] > fitted[0])


# ── Summaries ───────────────────────────────────────────────────────

def performance_summary(grades: Sequence[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Qualitative analysis of a grade history, in the order given.

    trend is "improving" only when the fitted trend rises; a flat line
    counts as "declining". consistency buckets the max-min spread.
    """
    if not grades:
        return None

    scores = numeric_scores(grades)
    spread = (max(scores) - min(scores)) if scores else 0

    if spread < HIGH_CONSISTENCY_SPREAD:
        consistency = "high"
    elif spread < MEDIUM_CONSISTENCY_SPREAD:
        consistency = "medium"
    else:
        consistency = "low"

    return {
        "average": average_of(grades),
        "trend": "improving" if _trend_direction(scores) else "declining",
        "consistency": consistency,
        "total_assignments": len(grades),
    }


def performance_stats(grades: Sequence[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Header cards for the performance chart: average, highest, lowest, count, direction."""
    scores = numeric_scores(grades)
    if not grades or not scores:
        return None
    return sanitize({
        "average": safe_float(np.mean(scores)),
        "highest": max(scores),
        "lowest": min(scores),
        "total": len(grades),
        "trend": "up" if _trend_direction(scores) else "down",
    })


# ── Filters ─────────────────────────────────────────────────────────

def _period_bounds(period: str, now: pd.Timestamp):
    month_start = now.normalize().replace(day=1)
    if period == "last30":
        return now - pd.DateOffset(months=1), now
    if period == "last60":
        return now - pd.DateOffset(months=2), now
    if period == "last90":
        return now - pd.DateOffset(months=3), now
    if period == "thisMonth":
        return month_start, month_start + pd.DateOffset(months=1) - pd.Timedelta(milliseconds=1)
    if period == "lastMonth":
        start = month_start - pd.DateOffset(months=1)
        return start, month_start - pd.Timedelta(milliseconds=1)
    return None


def filter_grades_by_period(
    grades: Sequence[Mapping[str, Any]], period: str = "all", now: Any = None
) -> List[Mapping[str, Any]]:
    """
    Keep grades submitted strictly inside the chosen window.

    Undated grades drop out of every window except "all"; an unknown
    period behaves like "all".
    """
    now_ts = parse_date(now) if now is not None else pd.Timestamp.now()
    if now_ts is None:
        now_ts = pd.Timestamp.now()
    bounds = _period_bounds(period, now_ts)
    if bounds is None:
        return list(grades or [])

    start, end = bounds
    kept = []
    for grade in grades or []:
        submitted = parse_date(grade.get("submitted_date"))
        if submitted is not None and start < submitted < end:
            kept.append(grade)
    return kept


def filter_grades_by_assignment(
    grades: Sequence[Mapping[str, Any]], assignment_id: Any = "all"
) -> List[Mapping[str, Any]]:
    if assignment_id is None or assignment_id == "all":
        return list(grades or [])
    return [g for g in grades or [] if same_id(g.get("assignment_id"), assignment_id)]


# ── Chart Series ────────────────────────────────────────────────────

def chart_series(
    grades: Sequence[Mapping[str, Any]],
    assignments: Sequence[Mapping[str, Any]] = (),
) -> Dict[str, Any]:
    """
    Scatter of scores by submission date plus the fitted trend line.

    Grades are ordered by submitted date with undated grades first. Grades
    whose score does not coerce to a number are left off the chart.
    """
    scored = [g for g in grades or [] if numeric_score(g.get("score")) is not None]
    if not scored:
        return {"series": [], "points": []}

    by_id = {record_id(field_value(a, "id")): a for a in assignments or []}
    ordered = sorted(scored, key=lambda g: date_sort_key(field_value(g, "submitted_date")))

    points = []
    for grade in ordered:
        assignment = by_id.get(record_id(field_value(grade, "assignment_id"))) or {}
        points.append({
            "x": format_date(field_value(grade, "submitted_date"), "%b %d", fallback="Invalid Date"),
            "y": numeric_score(grade.get("score")),
            "assignment": assignment.get("title") or "Unknown Assignment",
            "category": assignment.get("category") or "N/A",
        })

    return sanitize({
        "series": [
            {
                "name": "Grades",
                "type": "scatter",
                "data": [{"x": p["x"], "y": p["y"]} for p in points],
            },
            {
                "name": "Trend",
                "type": "line",
                "data": trend_line(points),
            },
        ],
        "points": points,
    })
