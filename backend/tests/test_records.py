"""
Tests for core/records.py — sorting by plain and derived keys, substring search.
"""

import os
import sys
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.records import SortKey, search_records, search_students, sort_records


@pytest.fixture
def students():
    return [
        {"id": 1, "first_name": "emma", "last_name": "Johnson", "email": "emma@school.edu", "grade_level": 10, "status": "active"},
        {"id": 2, "first_name": "Liam", "last_name": "Smith", "email": "liam@school.edu", "grade_level": 9, "status": "inactive"},
        {"id": 3, "first_name": "Olivia", "last_name": "Brown", "email": "olivia@school.edu", "grade_level": 11, "status": "active"},
    ]


@pytest.fixture
def grades():
    return [
        {"student_id": 1, "score": 70},
        {"student_id": 2, "score": 95},
        {"student_id": 2, "score": 85},
        {"student_id": 3, "score": 80},
    ]


@pytest.fixture
def attendance():
    return [
        {"student_id": 1, "status": "present"},
        {"student_id": 1, "status": "present"},
        {"student_id": 2, "status": "absent"},
        {"student_id": 3, "status": "present"},
        {"student_id": 3, "status": "late"},
    ]


def _ids(records):
    return [r["id"] for r in records]


class TestSortRecords:
    def test_name_is_case_insensitive(self, students):
        assert _ids(sort_records(students, "name", "asc")) == [1, 2, 3]

    def test_name_descending(self, students):
        assert _ids(sort_records(students, SortKey.NAME, "desc")) == [3, 2, 1]

    def test_grade_average(self, students, grades):
        ordered = sort_records(students, "gradeAverage", "desc", grades=grades)
        assert _ids(ordered) == [2, 3, 1]

    def test_enum_and_legacy_name_agree(self, students, grades):
        assert _ids(sort_records(students, SortKey.GRADE_AVERAGE, "asc", grades=grades)) == \
            _ids(sort_records(students, "gradeAverage", "asc", grades=grades))

    def test_student_without_grades_sorts_as_zero(self, students, grades):
        students = students + [{"id": 4, "first_name": "Noah", "last_name": "Davis"}]
        assert _ids(sort_records(students, "gradeAverage", "asc", grades=grades))[0] == 4

    def test_attendance(self, students, attendance):
        assert _ids(sort_records(students, "attendance", "desc", attendance=attendance)) == [1, 3, 2]

    def test_plain_field_camel_case(self, students):
        assert _ids(sort_records(students, "gradeLevel", "asc")) == [2, 1, 3]

    def test_plain_field_with_missing_values(self, students):
        students[1]["grade_level"] = None
        assert _ids(sort_records(students, "grade_level", "asc")) == [2, 1, 3]

    def test_due_date_with_invalid_dates_first(self):
        assignments = [
            {"id": 1, "due_date": "2024-10-18"},
            {"id": 2, "due_date": None},
            {"id": 3, "due_date": "2024-09-13"},
            {"id": 4, "due_date": "1970-01-01"},
        ]
        assert _ids(sort_records(assignments, "dueDate", "asc")) == [2, 4, 3, 1]
        assert _ids(sort_records(assignments, "dueDate", "desc"))[:2] == [1, 3]

    def test_ties_keep_input_order(self, students):
        assert _ids(sort_records(students, "status", "asc")) == [1, 3, 2]
        assert _ids(sort_records(students, "status", "desc")) == [2, 1, 3]

    def test_desc_of_asc_is_reverse(self, students):
        ascending = sort_records(students, "email", "asc")
        assert sort_records(ascending, "email", "desc") == list(reversed(ascending))

    def test_does_not_mutate_input(self, students):
        before = _ids(students)
        sort_records(students, "name", "desc")
        assert _ids(students) == before

    def test_unknown_direction_raises(self, students):
        with pytest.raises(ValueError):
            sort_records(students, "name", "sideways")

    def test_empty(self):
        assert sort_records([], "name", "asc") == []


class TestSearchRecords:
    def test_blank_query_returns_all(self, students):
        assert search_records(students, "", ["first_name"]) == students
        assert search_records(students, "   ", ["first_name"]) == students
        assert search_records(students, None, ["first_name"]) == students

    def test_case_insensitive_substring(self, students):
        assert _ids(search_records(students, "OLI", ["first_name", "last_name"])) == [3]

    def test_numbers_are_string_coerced(self, students):
        assert _ids(search_records(students, "11", ["grade_level"])) == [3]

    def test_only_listed_fields_are_searched(self, students):
        assert search_records(students, "school.edu", ["first_name"]) == []

    def test_search_students_default_fields(self, students):
        assert _ids(search_students(students, "smith")) == [2]
        assert _ids(search_students(students, "school.edu")) == [1, 2, 3]
        assert _ids(search_students(students, "9")) == [2]


class TestStoredShapeRecords:
    """Records as the hosted service returns them: "Id" and camelCase keys."""

    @pytest.fixture
    def roster(self):
        return [
            {"Id": 1, "firstName": "Zed", "lastName": "Young"},
            {"Id": 2, "firstName": "Amy", "lastName": "Adams"},
        ]

    def _ids(self, records):
        return [r["Id"] for r in records]

    def test_name(self, roster):
        assert self._ids(sort_records(roster, "name", "asc")) == [2, 1]

    def test_grade_average(self, roster):
        grades = [{"studentId": 1, "score": 50}, {"studentId": 2, "score": 95}]
        assert self._ids(sort_records(roster, "gradeAverage", "desc", grades=grades)) == [2, 1]

    def test_attendance(self, roster):
        attendance = [{"studentId": 1, "status": "absent"}, {"studentId": 2, "status": "present"}]
        assert self._ids(sort_records(roster, "attendance", "desc", attendance=attendance)) == [2, 1]

    def test_snake_case_field_on_camel_case_record(self, roster):
        assert self._ids(sort_records(roster, "first_name", "asc")) == [2, 1]

    def test_search_student_fields(self, roster):
        assert self._ids(search_students(roster, "adams")) == [2]
