"""
Test: coordinator overview helpers.
"""
from types import SimpleNamespace

from app.services.analytics import (
    calculate_average_grade,
    calculate_submission_rate,
    is_student_at_risk,
)


def _subs(*grades):
    return [SimpleNamespace(grade=g) for g in grades]


class TestAverageGrade:
    def test_ignores_ungraded(self):
        assert calculate_average_grade(_subs(80, None, 91)) == 86

    def test_nothing_graded(self):
        assert calculate_average_grade(_subs(None)) == 0
        assert calculate_average_grade([]) == 0


class TestSubmissionRate:
    def test_rate(self):
        assert calculate_submission_rate(3, 2, 4) == 38

    def test_capped_at_100(self):
        assert calculate_submission_rate(9, 2, 2) == 100

    def test_no_students_or_projects(self):
        assert calculate_submission_rate(5, 0, 3) == 0
        assert calculate_submission_rate(5, 3, 0) == 0


class TestAtRisk:
    def test_low_xp(self):
        assert is_student_at_risk(SimpleNamespace(xp=50), 3) is True

    def test_no_submissions(self):
        assert is_student_at_risk(SimpleNamespace(xp=500), 0) is True

    def test_engaged_student(self):
        assert is_student_at_risk(SimpleNamespace(xp=100), 1) is False
