"""
Tests for core/grading.py — letter bands, badge and colour tokens.
"""

import os
import sys
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.grading import DEFAULT_BADGE, badge_class, grade_color, grade_thresholds, letter_grade


class TestLetterGrade:
    @pytest.mark.parametrize(
        "average, expected",
        [(100, "A"), (90, "A"), (89.99, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F"), (0, "F")],
    )
    def test_bands_inclusive_on_lower_bound(self, average, expected):
        assert letter_grade(average) == expected

    def test_monotonic(self):
        order = "ABCDF"
        letters = [letter_grade(x) for x in range(100, -1, -1)]
        ranks = [order.index(l) for l in letters]
        assert ranks == sorted(ranks)

    def test_missing_average_is_f(self):
        assert letter_grade(None) == "F"
        assert letter_grade("n/a") == "F"


class TestBadgeClass:
    def test_each_letter(self):
        assert [badge_class(l) for l in "ABCDF"] == ["grade-a", "grade-b", "grade-c", "grade-d", "grade-f"]

    def test_unknown_letter_gets_default(self):
        assert badge_class("E") == DEFAULT_BADGE
        assert badge_class(None) == DEFAULT_BADGE


class TestGradeColor:
    def test_colors_follow_bands(self):
        assert grade_color(95) == "text-green-600"
        assert grade_color(85) == "text-blue-600"
        assert grade_color(75) == "text-yellow-600"
        assert grade_color(65) == "text-orange-600"
        assert grade_color(10) == "text-red-600"


class TestGradeThresholds:
    def test_scale(self):
        scale = grade_thresholds()
        assert [s["label"] for s in scale] == ["A", "B", "C", "D", "F"]
        assert scale[0]["max"] == 100.0
        assert scale[1]["max"] == 89.99
        assert scale[-1]["min"] == 0.0
