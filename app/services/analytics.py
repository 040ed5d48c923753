"""
Helpers for the coordinator overview: grade averages, submission rate
and the at-risk flag.
"""
from typing import Any, Dict, Iterable

from app.models.store import Store
from app.services.rubric import round_half_up

AT_RISK_MIN_XP = 100
AT_RISK_MIN_SUBMISSIONS = 1


def calculate_average_grade(submissions: Iterable[Any]) -> int:
    """Mean of graded submissions, 0 when nothing has been graded."""
    grades = [s.grade for s in submissions if s.grade is not None]
    if not grades:
        return 0
    return round_half_up(sum(grades) / len(grades))


def calculate_submission_rate(total_submissions: int, total_students: int, total_projects: int) -> int:
    if total_students == 0 or total_projects == 0:
        return 0
    rate = total_submissions / (total_students * total_projects) * 100
    return min(round_half_up(rate), 100)


def is_student_at_risk(
    student: Any,
    submission_count: int,
    *,
    min_xp: int = AT_RISK_MIN_XP,
    min_submissions: int = AT_RISK_MIN_SUBMISSIONS,
) -> bool:
    return (student.xp or 0) < min_xp or submission_count < min_submissions


def overview(store: Store) -> Dict[str, Any]:
    students = store.list_students()
    submissions = store.list_submissions()
    per_student: Dict[str, int] = {}
    for s in submissions:
        per_student[s.student_id] = per_student.get(s.student_id, 0) + 1

    at_risk = [
        {"id": st.id, "name": st.name, "xp": st.xp, "submissions": per_student.get(st.id, 0)}
        for st in students
        if is_student_at_risk(st, per_student.get(st.id, 0))
    ]
    return {
        "total_students": len(students),
        "total_projects": store.count_projects(),
        "total_submissions": len(submissions),
        "average_grade": calculate_average_grade(submissions),
        "submission_rate": calculate_submission_rate(
            len(submissions), len(students), store.count_projects()
        ),
        "at_risk_students": at_risk,
    }
