# app/models/entities.py
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint
from .db import Base


def _uuid() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Teacher(Base):
    __tablename__ = "teachers"
    id = Column(String(64), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    subject = Column(String, nullable=False, default="")


class Project(Base):
    __tablename__ = "projects"
    id = Column(String(64), primary_key=True, default=_uuid)
    title = Column(String, nullable=False)
    subject = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="Planejamento")
    teacher_id = Column(String(64), index=True, nullable=False)
    # Free-form date string ("2024-11-12" or full ISO timestamp)
    next_deadline = Column(String, nullable=True)
    deadline_label = Column(String, nullable=True)
    description = Column(Text, nullable=True)


class ProjectPlanning(Base):
    __tablename__ = "project_planning"
    id = Column(String(64), primary_key=True, default=_uuid)
    project_id = Column(String(64), unique=True, index=True, nullable=False)
    objectives = Column(Text, nullable=True)
    methodology = Column(Text, nullable=True)


class Competency(Base):
    __tablename__ = "bncc_competencies"
    id = Column(String(64), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="Geral")
    description = Column(Text, nullable=True)


class ProjectCompetency(Base):
    __tablename__ = "project_competencies"
    id = Column(String(64), primary_key=True, default=_uuid)
    project_id = Column(String(64), index=True, nullable=False)
    competency_id = Column(String(64), index=True, nullable=False)
    coverage = Column(Integer, nullable=False, default=0)


class RubricCriteria(Base):
    __tablename__ = "rubric_criteria"
    id = Column(String(64), primary_key=True, default=_uuid)
    project_id = Column(String(64), index=True, nullable=False)
    criteria = Column(String, nullable=False)
    weight = Column(Integer, nullable=False)
    level1 = Column(Text, nullable=False, default="")
    level2 = Column(Text, nullable=False, default="")
    level3 = Column(Text, nullable=False, default="")
    level4 = Column(Text, nullable=False, default="")


class Student(Base):
    __tablename__ = "students"
    id = Column(String(64), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    xp = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)


class Achievement(Base):
    __tablename__ = "achievements"
    id = Column(String(64), primary_key=True, default=_uuid)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    xp = Column(Integer, nullable=False)
    icon = Column(String, nullable=False, default="award")


class StudentAchievement(Base):
    __tablename__ = "student_achievements"
    __table_args__ = (
        UniqueConstraint("student_id", "achievement_id", name="uq_student_achievement"),
    )
    id = Column(String(64), primary_key=True, default=_uuid)
    student_id = Column(String(64), index=True, nullable=False)
    achievement_id = Column(String(64), index=True, nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=1)
    unlocked = Column(Boolean, nullable=False, default=False)


class Submission(Base):
    __tablename__ = "submissions"
    id = Column(String(64), primary_key=True, default=_uuid)
    project_id = Column(String(64), index=True, nullable=False)
    student_id = Column(String(64), index=True, nullable=False)
    type = Column(String, nullable=False, default="link")
    content = Column(Text, nullable=False)
    comment = Column(Text, nullable=True)
    grade = Column(Integer, nullable=True)
    teacher_feedback = Column(Text, nullable=True)
    submitted_at = Column(DateTime, nullable=False, default=_utcnow)


class Event(Base):
    __tablename__ = "events"
    id = Column(String(64), primary_key=True, default=_uuid)
    teacher_id = Column(String(64), index=True, nullable=False)
    project_id = Column(String(64), nullable=True)
    title = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
