"""
base.py — Record store interface and entity field mapping.

One table per entity kind. Records are plain dicts with snake_case keys
and an integer "id" assigned by the store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


STUDENTS = "students"
ASSIGNMENTS = "assignments"
GRADES = "grades"
ATTENDANCE = "attendance"

TABLES = (STUDENTS, ASSIGNMENTS, GRADES, ATTENDANCE)

# snake_case record field -> accepted aliases (camelCase, hosted "_c" columns).
FIELDS: Dict[str, Dict[str, List[str]]] = {
    STUDENTS: {
        "first_name": ["firstName", "first_name_c"],
        "last_name": ["lastName", "last_name_c"],
        "email": ["email_c"],
        "grade_level": ["gradeLevel", "grade_level_c"],
        "status": ["status_c"],
        "enrollment_date": ["enrollmentDate", "enrollment_date_c"],
    },
    ASSIGNMENTS: {
        "title": ["title_c"],
        "description": ["description_c"],
        "category": ["category_c"],
        "total_points": ["totalPoints", "total_points_c"],
        "due_date": ["dueDate", "due_date_c"],
        "created_at": ["createdAt", "created_at_c"],
    },
    GRADES: {
        "student_id": ["studentId", "student_id_c"],
        "assignment_id": ["assignmentId", "assignment_id_c"],
        "score": ["score_c"],
        "submitted_date": ["submittedDate", "submitted_date_c"],
        "comments": ["comments_c"],
    },
    ATTENDANCE: {
        "student_id": ["studentId", "student_id_c"],
        "date": ["date_c"],
        "status": ["status_c"],
        "notes": ["notes_c"],
    },
}

LOOKUP_FIELDS = {"student_id", "assignment_id"}

# Equality filters: {"student_id": 3}. Ordering: [("submitted_date", "desc")].
Where = Mapping[str, Any]
OrderBy = Sequence[Tuple[str, str]]


class RecordStoreError(Exception):
    """The backing store failed or rejected a request."""


class RecordNotFoundError(RecordStoreError):
    def __init__(self, table: str, record_id: Any):
        super().__init__(f"No record {record_id!r} in {table}.")
        self.table = table
        self.record_id = record_id


def check_table(table: str):
    if table not in FIELDS:
        raise RecordStoreError(f"Unknown table {table!r}.")


def normalize_record(table: str, raw: Mapping[str, Any], defaults: bool = True) -> Dict[str, Any]:
    """Translate camelCase or hosted-column keys into the snake_case record shape."""
    check_table(table)
    record: Dict[str, Any] = {}
    if "Id" in raw or "id" in raw:
        record["id"] = raw.get("Id", raw.get("id"))
    for field, aliases in FIELDS[table].items():
        for key in [field] + aliases:
            if key in raw:
                value = raw[key]
                # Hosted lookups arrive as {"Id": 3, "Name": "..."}.
                if field in LOOKUP_FIELDS and isinstance(value, Mapping):
                    value = value.get("Id")
                record[field] = value
                break
    if defaults and table == STUDENTS and not record.get("status"):
        record["status"] = "active"
    return record


def to_remote(table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
    """snake_case record -> hosted "_c" columns; unknown keys are dropped."""
    check_table(table)
    out: Dict[str, Any] = {}
    for field, aliases in FIELDS[table].items():
        if field in record:
            remote = next((a for a in aliases if a.endswith("_c")), field)
            out[remote] = record[field]
    return out


class RecordStore(ABC):
    """CRUD over entity tables, keyed by an integer id the store assigns."""

    @abstractmethod
    def get_all(
        self, table: str, where: Optional[Where] = None, order_by: Optional[OrderBy] = None
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_by_id(self, table: str, record_id: int) -> Dict[str, Any]:
        ...

    @abstractmethod
    def create(self, table: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def update(self, table: str, record_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def delete(self, table: str, record_id: int) -> bool:
        ...

    def close(self):
        pass
