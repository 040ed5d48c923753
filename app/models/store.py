"""
Persistence gateway over the relational schema.

Every method works on the wrapped ``Session`` and only flushes; commit
boundaries belong to the caller (see ``app.models.db.transaction``):

    with transaction(db):
        store.update_student(student_id, xp=1010, level=11)
        store.upsert_student_achievement(row)
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
import logging

from sqlalchemy import delete, exists, select
from sqlalchemy.orm import Session

from app.utils.dates import as_utc

from .db import transaction
from .entities import (
    Achievement,
    Competency,
    Event,
    Project,
    ProjectCompetency,
    ProjectPlanning,
    RubricCriteria,
    Student,
    StudentAchievement,
    Submission,
    Teacher,
)

log = logging.getLogger(__name__)


class Store:
    """Simple CRUD contracts per entity."""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, row):
        self.db.add(row)
        self.db.flush()
        return row

    @staticmethod
    def _assign(row, fields: Dict[str, Any]):
        for key, value in fields.items():
            if value is not None and hasattr(row, key):
                setattr(row, key, value)
        return row

    # ------------------------------------------------------------------
    # Teachers
    # ------------------------------------------------------------------

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return self.db.get(Teacher, teacher_id)

    def create_teacher(self, **fields) -> Teacher:
        return self._add(Teacher(**fields))

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    def get_student(self, student_id: str, *, for_update: bool = False) -> Optional[Student]:
        stmt = select(Student).where(Student.id == student_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.scalar(stmt)

    def list_students(self) -> Sequence[Student]:
        return self.db.scalars(select(Student).order_by(Student.name)).all()

    def create_student(self, **fields) -> Student:
        return self._add(Student(**fields))

    def update_student(
        self,
        student_id: str,
        *,
        xp: Optional[int] = None,
        level: Optional[int] = None,
        **fields,
    ) -> Optional[Student]:
        student = self.db.get(Student, student_id)
        if student is None:
            return None
        self._assign(student, dict(fields, xp=xp, level=level))
        self.db.flush()
        return student

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    def get_achievement(self, achievement_id: str) -> Optional[Achievement]:
        return self.db.get(Achievement, achievement_id)

    def list_achievements(self) -> Sequence[Achievement]:
        return self.db.scalars(select(Achievement).order_by(Achievement.title)).all()

    def count_achievements(self) -> int:
        return len(self.db.scalars(select(Achievement.id)).all())

    def create_achievement(self, **fields) -> Achievement:
        return self._add(Achievement(**fields))

    def update_achievement(self, achievement_id: str, **fields) -> Optional[Achievement]:
        achievement = self.db.get(Achievement, achievement_id)
        if achievement is None:
            return None
        self._assign(achievement, fields)
        self.db.flush()
        return achievement

    # ------------------------------------------------------------------
    # Student achievements
    # ------------------------------------------------------------------

    def find_student_achievement(
        self, student_id: str, achievement_id: str, *, for_update: bool = False
    ) -> Optional[StudentAchievement]:
        stmt = select(StudentAchievement).where(
            StudentAchievement.student_id == student_id,
            StudentAchievement.achievement_id == achievement_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.scalar(stmt)

    def upsert_student_achievement(self, row: StudentAchievement) -> StudentAchievement:
        if row not in self.db:
            self.db.add(row)
        self.db.flush()
        return row

    def list_student_achievements(self, student_id: str) -> List[Dict[str, Any]]:
        rows = self.db.execute(
            select(StudentAchievement, Achievement)
            .join(Achievement, Achievement.id == StudentAchievement.achievement_id, isouter=True)
            .where(StudentAchievement.student_id == student_id)
        ).all()
        out: List[Dict[str, Any]] = []
        for sa, ach in rows:
            out.append({
                "id": sa.id,
                "student_id": sa.student_id,
                "achievement_id": sa.achievement_id,
                "progress": sa.progress,
                "total": sa.total,
                "unlocked": bool(sa.unlocked),
                "achievement_title": ach.title if ach else "",
                "achievement_description": ach.description if ach else "",
                "achievement_xp": ach.xp if ach else 0,
                "achievement_icon": ach.icon if ach else "award",
            })
        return out

    # ------------------------------------------------------------------
    # Projects, planning & competencies
    # ------------------------------------------------------------------

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.db.get(Project, project_id)

    def create_project(self, **fields) -> Project:
        return self._add(Project(**fields))

    def list_projects_by_teacher(self, teacher_id: str) -> Sequence[Project]:
        return self.db.scalars(select(Project).where(Project.teacher_id == teacher_id)).all()

    def count_projects(self) -> int:
        return len(self.db.scalars(select(Project.id)).all())

    def project_has_planning(self, project_id: str) -> bool:
        return bool(self.db.scalar(select(exists().where(ProjectPlanning.project_id == project_id))))

    def project_has_competencies(self, project_id: str) -> bool:
        return bool(self.db.scalar(select(exists().where(ProjectCompetency.project_id == project_id))))

    def planned_project_ids(self, project_ids: Sequence[str]) -> set:
        if not project_ids:
            return set()
        return set(self.db.scalars(
            select(ProjectPlanning.project_id).where(ProjectPlanning.project_id.in_(project_ids))
        ).all())

    def linked_project_ids(self, project_ids: Sequence[str]) -> set:
        if not project_ids:
            return set()
        return set(self.db.scalars(
            select(ProjectCompetency.project_id)
            .where(ProjectCompetency.project_id.in_(project_ids))
            .distinct()
        ).all())

    def upsert_planning(self, project_id: str, **fields) -> ProjectPlanning:
        planning = self.db.scalar(select(ProjectPlanning).where(ProjectPlanning.project_id == project_id))
        if planning is None:
            return self._add(ProjectPlanning(project_id=project_id, **fields))
        self._assign(planning, fields)
        self.db.flush()
        return planning

    def create_competency(self, **fields) -> Competency:
        return self._add(Competency(**fields))

    def list_project_competencies(self, project_id: str) -> Sequence[ProjectCompetency]:
        return self.db.scalars(
            select(ProjectCompetency).where(ProjectCompetency.project_id == project_id)
        ).all()

    def replace_project_competencies(
        self, project_id: str, links: List[Dict[str, Any]]
    ) -> List[ProjectCompetency]:
        with transaction(self.db):
            self.db.execute(delete(ProjectCompetency).where(ProjectCompetency.project_id == project_id))
            rows = [
                ProjectCompetency(
                    project_id=project_id,
                    competency_id=link["competency_id"],
                    coverage=int(link.get("coverage", 0) or 0),
                )
                for link in links
            ]
            self.db.add_all(rows)
            self.db.flush()
        log.info("[Store] replaced competencies of project %s (%d links)", project_id, len(rows))
        return rows

    # ------------------------------------------------------------------
    # Rubric criteria
    # ------------------------------------------------------------------

    def get_rubric_criterion(self, criteria_id: str) -> Optional[RubricCriteria]:
        return self.db.get(RubricCriteria, criteria_id)

    def list_rubric_criteria(self, project_id: str) -> Sequence[RubricCriteria]:
        return self.db.scalars(
            select(RubricCriteria).where(RubricCriteria.project_id == project_id)
        ).all()

    def create_rubric_criterion(self, **fields) -> RubricCriteria:
        return self._add(RubricCriteria(**fields))

    def update_rubric_criterion(self, criteria_id: str, **fields) -> Optional[RubricCriteria]:
        row = self.db.get(RubricCriteria, criteria_id)
        if row is None:
            return None
        self._assign(row, fields)
        self.db.flush()
        return row

    def delete_rubric_criterion(self, criteria_id: str) -> bool:
        row = self.db.get(RubricCriteria, criteria_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    def get_submission(self, submission_id: str) -> Optional[Submission]:
        return self.db.get(Submission, submission_id)

    def list_submissions(self, project_id: Optional[str] = None) -> Sequence[Submission]:
        stmt = select(Submission)
        if project_id is not None:
            stmt = stmt.where(Submission.project_id == project_id)
        return self.db.scalars(stmt.order_by(Submission.submitted_at)).all()

    def count_submissions_by_student(self, student_id: str) -> int:
        return len(self.db.scalars(select(Submission.id).where(Submission.student_id == student_id)).all())

    def create_submission(self, **fields) -> Submission:
        return self._add(Submission(**fields))

    def grade_submission(
        self, submission_id: str, grade: int, feedback: Optional[str] = None
    ) -> Optional[Submission]:
        submission = self.db.get(Submission, submission_id)
        if submission is None:
            return None
        submission.grade = grade
        submission.teacher_feedback = feedback
        self.db.flush()
        return submission

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def create_event(self, **fields) -> Event:
        when = fields.get("date")
        if isinstance(when, datetime):
            # stored as naive UTC
            fields["date"] = as_utc(when).replace(tzinfo=None)
        return self._add(Event(**fields))

    def list_events_by_teacher(self, teacher_id: str) -> Sequence[Event]:
        return self.db.scalars(
            select(Event).where(Event.teacher_id == teacher_id).order_by(Event.date)
        ).all()
