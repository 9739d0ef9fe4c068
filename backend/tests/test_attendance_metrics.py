"""
Tests for core/attendance_metrics.py — percentages, tokens, week days, today's snapshot.
"""

import datetime as dt
import os
import sys
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.attendance_metrics import (
    DEFAULT_STATUS_BADGE,
    DEFAULT_STATUS_COLOR,
    attendance_percentage,
    format_attendance_date,
    records_for_date,
    status_badge_token,
    status_color_token,
    student_attendance_rate,
    today_snapshot,
    week_grid,
    weekdays_of,
)

TODAY = dt.date(2024, 10, 16)


@pytest.fixture
def students():
    return [
        {"id": i, "first_name": name, "last_name": "Test", "status": "active"}
        for i, name in enumerate(["Emma", "Liam", "Olivia", "Noah", "Ava"], start=1)
    ]


def _record(student_id, status, day=TODAY):
    return {"student_id": student_id, "date": day.isoformat(), "status": status}


class TestAttendancePercentage:
    def test_empty_is_zero(self):
        assert attendance_percentage([]) == 0

    def test_three_of_four(self):
        records = [_record(1, "present"), _record(2, "present"), _record(3, "present"), _record(4, "absent")]
        assert attendance_percentage(records) == 75

    def test_rounds_half_up(self):
        records = [_record(1, "present")] + [_record(1, "absent")] * 7
        assert attendance_percentage(records) == 13

    def test_late_is_not_present(self):
        assert attendance_percentage([_record(1, "late"), _record(1, "present")]) == 50

    def test_always_in_range(self):
        for present in range(0, 7):
            records = [_record(1, "present")] * present + [_record(1, "absent")] * (6 - present)
            assert 0 <= attendance_percentage(records) <= 100


class TestStudentAttendanceRate:
    def test_rate_for_one_student(self):
        records = [_record(1, "present"), _record(1, "absent"), _record(1, "present"), _record(2, "absent")]
        assert student_attendance_rate(1, records) == pytest.approx(200 / 3)

    def test_no_records_is_zero(self):
        assert student_attendance_rate(5, []) == 0.0


class TestStatusTokens:
    def test_colors(self):
        assert status_color_token("present") == "text-green-600"
        assert status_color_token("absent") == "text-red-600"
        assert status_color_token("late") == "text-yellow-600"
        assert status_color_token("excused") == DEFAULT_STATUS_COLOR
        assert status_color_token(None) == DEFAULT_STATUS_COLOR

    def test_badges(self):
        assert status_badge_token("present") == "status-present"
        assert status_badge_token("absent") == "status-absent"
        assert status_badge_token("late") == "status-late"
        assert status_badge_token("") == DEFAULT_STATUS_BADGE


class TestWeekdaysOf:
    def test_saturday_maps_to_same_week(self):
        days = weekdays_of(dt.date(2024, 10, 19))
        assert days == [dt.date(2024, 10, d) for d in range(14, 19)]
        assert all(d.weekday() < 5 for d in days)

    def test_sunday_belongs_to_preceding_monday(self):
        assert weekdays_of(dt.date(2024, 10, 20))[0] == dt.date(2024, 10, 14)

    def test_accepts_strings(self):
        assert weekdays_of("2024-10-16")[0] == dt.date(2024, 10, 14)

    def test_monday_start(self):
        assert weekdays_of(dt.date(2024, 10, 14))[0] == dt.date(2024, 10, 14)


class TestTodaySnapshot:
    def test_three_present_of_five(self, students):
        records = [_record(1, "present"), _record(2, "present"), _record(3, "present")]
        assert today_snapshot(students, records, today=TODAY) == {
            "present": 3, "absent": 0, "late": 0, "total": 5, "percentage": 60,
        }

    def test_only_today_counts(self, students):
        yesterday = TODAY - dt.timedelta(days=1)
        records = [_record(1, "present"), _record(2, "absent"), _record(3, "late"), _record(4, "present", yesterday)]
        result = today_snapshot(students, records, today=TODAY)
        assert (result["present"], result["absent"], result["late"]) == (1, 1, 1)
        assert result["percentage"] == 20

    def test_timestamps_match_their_day(self, students):
        records = [{"student_id": 1, "date": "2024-10-16T08:30:00", "status": "present"}]
        assert today_snapshot(students, records, today=TODAY)["present"] == 1

    def test_empty_roster_is_zero_percent(self):
        result = today_snapshot([], [_record(1, "present")], today=TODAY)
        assert result["total"] == 0
        assert result["percentage"] == 0


class TestWeekGrid:
    def test_cells(self, students):
        records = [_record(1, "present"), _record(2, "late", dt.date(2024, 10, 14))]
        grid = week_grid(students[:2], records, TODAY)

        assert grid["days"][0] == "2024-10-14"
        emma, liam = grid["rows"]
        assert emma["days"][2]["status"] == "present"
        assert emma["days"][0]["status"] is None
        assert liam["days"][0]["status"] == "late"
        assert liam["days"][0]["badge"] == "status-late"


class TestHelpers:
    def test_records_for_date(self):
        records = [_record(1, "present"), _record(2, "absent", dt.date(2024, 1, 1))]
        assert len(records_for_date(records, "2024-10-16")) == 1
        assert records_for_date(records, "nonsense") == []

    def test_format_attendance_date(self):
        assert format_attendance_date("2024-03-04") == "Mar 04, 2024"
        assert format_attendance_date(None) == ""
