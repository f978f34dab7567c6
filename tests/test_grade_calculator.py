"""
Tests for services/grade_calculator.py: scale parsing, range lookup and the fixed 9-point ladder.
"""

import json
import math

import pytest

from schemas.grading import InvalidScale, ValidScale
from services.grade_calculator import (
    DEFAULT_SCALE_RANGES,
    calculate_grade_from_scale,
    default_grade,
    parse_scale,
)


def _scale(ranges):
    return json.dumps(ranges)


STANDARD = _scale([
    {"grade": 1, "minPercent": 80, "maxPercent": 100, "remark": "Excellent"},
    {"grade": 2, "minPercent": 70, "maxPercent": 79.999, "remark": "Very Good"},
    {"grade": 3, "minPercent": 60, "maxPercent": 69.999, "remark": "Good"},
    {"grade": 9, "minPercent": 0, "maxPercent": 59.999, "remark": "Fail"},
])


class TestParseScale:
    """Tests for parse_scale."""

    def test_valid_json(self):
        parsed = parse_scale(STANDARD)
        assert isinstance(parsed, ValidScale)
        assert len(parsed.ranges) == 4

    def test_numeric_grade_becomes_string(self):
        parsed = parse_scale(STANDARD)
        assert parsed.ranges[0].grade == "1"

    def test_broken_json_is_invalid(self):
        assert isinstance(parse_scale("[{not json"), InvalidScale)

    def test_wrong_shape_is_invalid(self):
        assert isinstance(parse_scale(json.dumps({"grade": 1})), InvalidScale)
        assert isinstance(parse_scale(json.dumps([{"grade": "A"}])), InvalidScale)

    def test_empty_list_is_invalid(self):
        assert isinstance(parse_scale("[]"), InvalidScale)

    def test_none_is_invalid(self):
        assert isinstance(parse_scale(None), InvalidScale)

    def test_accepts_python_list(self):
        assert isinstance(parse_scale(DEFAULT_SCALE_RANGES), ValidScale)


class TestCalculateGradeFromScale:
    """Tests for calculate_grade_from_scale."""

    def test_inclusive_lower_bound(self):
        assert calculate_grade_from_scale(80, STANDARD).grade == "1"

    def test_just_below_boundary(self):
        result = calculate_grade_from_scale(79.999, STANDARD)
        assert result.grade == "2"
        assert result.remark == "Very Good"

    def test_inclusive_upper_bound(self):
        assert calculate_grade_from_scale(100, STANDARD).grade == "1"

    def test_first_match_wins_on_shared_boundary(self):
        overlapping = _scale([
            {"grade": "B", "minPercent": 70, "maxPercent": 80, "remark": "Second"},
            {"grade": "A", "minPercent": 80, "maxPercent": 100, "remark": "First"},
        ])
        assert calculate_grade_from_scale(80, overlapping).grade == "B"

    def test_no_match_returns_last_listed_range(self):
        # deliberately out of order: the lowest band is NOT last
        unsorted = _scale([
            {"grade": "F", "minPercent": 40, "maxPercent": 49, "remark": "Weak"},
            {"grade": "A", "minPercent": 80, "maxPercent": 100, "remark": "Top"},
            {"grade": "C", "minPercent": 50, "maxPercent": 79, "remark": "Middle"},
        ])
        result = calculate_grade_from_scale(10, unsorted)
        assert result.grade == "C"
        assert result.remark == "Middle"

    def test_gap_between_ranges_falls_back_to_last(self):
        gappy = _scale([
            {"grade": 1, "minPercent": 80, "maxPercent": 100, "remark": "Excellent"},
            {"grade": 2, "minPercent": 70, "maxPercent": 79, "remark": "Very Good"},
        ])
        assert calculate_grade_from_scale(79.5, gappy).grade == "2"

    def test_reads_grades_attribute_of_scale_row(self):
        class Row:
            grades = STANDARD
        assert calculate_grade_from_scale(65, Row()).grade == "3"

    @pytest.mark.parametrize("percentage,grade,remark", [
        (85, "1", "Excellent"),
        (72, "2", "Very Good"),
        (66, "3", "Good"),
        (61, "4", "High Average"),
        (56, "5", "Average"),
        (51, "6", "Low Average"),
        (46, "7", "Pass"),
        (41, "8", "Pass"),
        (10, "9", "Fail"),
    ])
    def test_malformed_scale_uses_fixed_ladder(self, percentage, grade, remark):
        result = calculate_grade_from_scale(percentage, "{{{ definitely not json")
        assert (result.grade, result.remark) == (grade, remark)

    def test_missing_scale_uses_fixed_ladder(self):
        assert calculate_grade_from_scale(72, None).grade == "2"

    def test_empty_scale_uses_fixed_ladder(self):
        assert calculate_grade_from_scale(45, "[]").grade == "7"

    def test_out_of_bounds_percentage_is_not_rejected(self):
        assert calculate_grade_from_scale(130, STANDARD).grade == "9"
        assert calculate_grade_from_scale(-5, STANDARD).grade == "9"


class TestDefaultGrade:
    """Tests for default_grade."""

    def test_thresholds_are_inclusive(self):
        assert default_grade(80).grade == "1"
        assert default_grade(40).grade == "8"
        assert default_grade(39.99).grade == "9"

    def test_nan_is_fail(self):
        assert default_grade(math.nan).grade == "9"

    def test_default_scale_matches_ladder(self):
        for pct in (95, 75, 67, 62, 57, 52, 47, 42, 12):
            assert calculate_grade_from_scale(pct, _scale(DEFAULT_SCALE_RANGES)) == default_grade(pct)
