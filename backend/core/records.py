"""
records.py — Client-side sorting and search over record lists.

Sort keys are either a SortKey (derived values such as a student's grade
average) or the name of a plain record field. Sorting is stable in both
directions, so equal keys keep their input order.
"""

from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

from core.attendance_metrics import student_attendance_rate
from core.dates import date_sort_key
from core.grade_metrics import student_grade_average
from core.helpers import field_value, record_id, snake_case


class SortKey(Enum):
    NAME = "name"
    GRADE_AVERAGE = "gradeAverage"
    ATTENDANCE = "attendance"
    DUE_DATE = "dueDate"


DIRECTIONS = ("asc", "desc")

DATE_FIELDS = {"date", "due_date", "submitted_date", "enrollment_date", "created_at"}

STUDENT_SEARCH_FIELDS = ["first_name", "last_name", "email", "grade_level"]


def resolve_sort_key(field: Union[SortKey, str]) -> Union[SortKey, str]:
    """Map legacy string names ("gradeAverage", "grade_average") onto SortKey members."""
    if isinstance(field, SortKey):
        return field
    for key in SortKey:
        if field in (key.value, key.name.lower()):
            return key
    return field


def _ordered(value: Any):
    # None < numbers < strings, so mixed columns still sort without TypeError.
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, str(value))


def _full_name(record: Mapping[str, Any]) -> str:
    first = field_value(record, "first_name") or ""
    last = field_value(record, "last_name") or ""
    return f"{first} {last}"


def _key_function(
    key: Union[SortKey, str],
    grades: Sequence[Mapping[str, Any]],
    attendance: Sequence[Mapping[str, Any]],
) -> Callable[[Mapping[str, Any]], Any]:
    if key is SortKey.NAME:
        return lambda r: _full_name(r).casefold()
    if key is SortKey.GRADE_AVERAGE:
        return lambda r: student_grade_average(record_id(r), grades)
    if key is SortKey.ATTENDANCE:
        return lambda r: student_attendance_rate(record_id(r), attendance)
    if key is SortKey.DUE_DATE:
        return lambda r: date_sort_key(field_value(r, "due_date"))
    if snake_case(key) in DATE_FIELDS:
        return lambda r: date_sort_key(field_value(r, key))
    return lambda r: _ordered(field_value(r, key))


def sort_records(
    records: Iterable[Mapping[str, Any]],
    field: Union[SortKey, str],
    direction: str = "asc",
    grades: Optional[Sequence[Mapping[str, Any]]] = None,
    attendance: Optional[Sequence[Mapping[str, Any]]] = None,
) -> List[Mapping[str, Any]]:
    """
    Return a new list ordered by `field`.

    grades / attendance are only consulted for the GRADE_AVERAGE and
    ATTENDANCE keys, which are computed per student id.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown sort direction {direction!r}; expected 'asc' or 'desc'.")
    key = resolve_sort_key(field)
    return sorted(
        records or [],
        key=_key_function(key, grades or [], attendance or []),
        reverse=direction == "desc",
    )


def search_records(
    records: Iterable[Mapping[str, Any]],
    query: Optional[str],
    fields: Sequence[str],
) -> List[Mapping[str, Any]]:
    """Case-insensitive substring match on any of `fields`; a blank query keeps everything."""
    records = list(records or [])
    if query is None or not str(query).strip():
        return records

    needle = str(query).strip().casefold()

    def matches(record: Mapping[str, Any]) -> bool:
        for f in fields:
            value = field_value(record, f)
            if value is not None and needle in str(value).casefold():
                return True
        return False

    return [r for r in records if matches(r)]


def search_students(students: Iterable[Mapping[str, Any]], query: Optional[str]) -> List[Mapping[str, Any]]:
    return search_records(students, query, STUDENT_SEARCH_FIELDS)
