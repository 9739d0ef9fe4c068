"""
grading.py — Letter-grade banding and presentation tokens.

Bands are inclusive on their lower bound:
  A >= 90, B >= 80, C >= 70, D >= 60, otherwise F
"""

from typing import Any, Dict, List, Optional


# Grade bands (min_score, label, badge token, colour token), ordered high to low.
LETTER_GRADES = [
    (90.0, "A", "grade-a", "text-green-600"),
    (80.0, "B", "grade-b", "text-blue-600"),
    (70.0, "C", "grade-c", "text-yellow-600"),
    (60.0, "D", "grade-d", "text-orange-600"),
    (0.0, "F", "grade-f", "text-red-600"),
]

DEFAULT_BADGE = "status-badge bg-gray-100 text-gray-800"

BADGE_CLASSES = {label: badge for _, label, badge, _ in LETTER_GRADES}


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _band(average: Any):
    value = _to_float(average)
    if value is not None:
        for band in LETTER_GRADES:
            if value >= band[0]:
                return band
    return LETTER_GRADES[-1]


def letter_grade(average: Any) -> str:
    """Return the letter (A-F) for a 0-100 average."""
    return _band(average)[1]


def badge_class(letter: Any) -> str:
    """Map a letter grade to its badge token; anything else gets the neutral badge."""
    return BADGE_CLASSES.get(letter, DEFAULT_BADGE) if isinstance(letter, str) else DEFAULT_BADGE


def grade_color(average: Any) -> str:
    return _band(average)[3]


def grade_thresholds() -> List[Dict[str, Any]]:
    """Return the full A-F scale for legend/reference."""
    thresholds = []
    for idx, (min_score, label, badge, color) in enumerate(LETTER_GRADES):
        max_score = 100.0 if idx == 0 else LETTER_GRADES[idx - 1][0] - 0.01
        thresholds.append(
            {
                "min": min_score,
                "max": round(max_score, 2),
                "label": label,
                "badge": badge,
                "color": color,
            }
        )
    return thresholds
