"""
Test: rubric weight validation and rubric-to-grade conversion.
"""
from types import SimpleNamespace

import pytest

from app.services.rubric import (
    all_criteria_scored,
    calculate_grade,
    is_balanced,
    rubric_feedback,
    validate_weight_change,
)


def _criteria(*weights):
    return [
        SimpleNamespace(
            id=f"c{i}", criteria=f"Criterion {i}", weight=w,
            level1="weak", level2="basic", level3="good", level4="excellent",
        )
        for i, w in enumerate(weights, start=1)
    ]


class TestValidateWeightChange:
    def test_raising_over_100_is_rejected(self):
        check = validate_weight_change(_criteria(40, 30, 30), "c1", 50)
        assert check.ok is False
        assert check.total == 110

    def test_lowering_is_accepted(self):
        check = validate_weight_change(_criteria(40, 30, 30), "c1", 20)
        assert check.ok is True
        assert check.total == 80

    def test_empty_project(self):
        check = validate_weight_change([], "c1", 70)
        assert check.ok is True
        assert check.total == 0

    def test_new_criterion_adds_to_total(self):
        assert validate_weight_change(_criteria(40, 30), None, 30).total == 100
        assert validate_weight_change(_criteria(40, 30), None, 31).ok is False

    def test_pending_edits_are_counted(self):
        check = validate_weight_change(_criteria(40, 30, 30), "c1", 40, pending={"c2": 35})
        assert check.total == 105
        assert check.ok is False

    def test_exactly_100_is_ok_and_balanced(self):
        criteria = _criteria(40, 30, 30)
        assert validate_weight_change(criteria, "c3", 30).ok is True
        assert is_balanced(criteria) is True
        assert is_balanced(_criteria(40, 30)) is False


class TestCalculateGrade:
    def test_all_level_four_is_100(self):
        criteria = _criteria(40, 30, 30)
        assert calculate_grade(criteria, {"c1": 4, "c2": 4, "c3": 4}) == 100

    def test_all_level_one_is_25(self):
        criteria = _criteria(40, 30, 30)
        assert calculate_grade(criteria, {"c1": 1, "c2": 1, "c3": 1}) == 25

    def test_nothing_scored_is_zero(self):
        assert calculate_grade(_criteria(40, 30, 30), {}) == 0
        assert calculate_grade([], {}) == 0

    def test_partial_rubric_is_not_renormalized(self):
        criteria = _criteria(40, 30, 30)
        # only the 40% criterion scored at full marks
        assert calculate_grade(criteria, {"c1": 4}) == 40
        assert all_criteria_scored(criteria, {"c1": 4}) is False

    def test_mixed_levels(self):
        criteria = _criteria(40, 30, 30)
        # 75*0.4 + 50*0.3 + 100*0.3 = 30 + 15 + 30
        assert calculate_grade(criteria, {"c1": 3, "c2": 2, "c3": 4}) == 75

    def test_rounds_half_up(self):
        criteria = _criteria(50, 50)
        # 12.5 + 25 = 37.5
        assert calculate_grade(criteria, {"c1": 1, "c2": 2}) == 38

    @pytest.mark.parametrize("level", [0, 5, -1])
    def test_invalid_level_raises(self, level):
        with pytest.raises(ValueError):
            calculate_grade(_criteria(100), {"c1": level})

    def test_all_scored_flag(self):
        criteria = _criteria(50, 50)
        assert all_criteria_scored(criteria, {"c1": 1, "c2": 3}) is True
        assert all_criteria_scored([], {}) is True


class TestRubricFeedback:
    def test_breakdown_appended(self):
        criteria = _criteria(60, 40)
        text = rubric_feedback(criteria, {"c1": 4, "c2": 2}, "Nice work")
        assert text.startswith("Nice work")
        assert "Criterion 1: Level 4 - excellent" in text
        assert "Criterion 2: Level 2 - basic" in text

    def test_no_levels_keeps_feedback(self):
        assert rubric_feedback(_criteria(100), {}, "as is") == "as is"
