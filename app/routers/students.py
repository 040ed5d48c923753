# app/routers/students.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.db import get_db, transaction
from app.models.entities import Student
from app.models.schemas import (
    StudentIn,
    StudentPatch,
    StudentOut,
    StudentAchievementOut,
    ProgressIn,
    ProgressOut,
)
from app.models.store import Store
from app.services.gamification import AchievementTracker, set_xp

router = APIRouter(prefix="/students", tags=["students"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ensure_student(store: Store, student_id: str) -> Student:
    student = store.get_student(student_id)
    if not student:
        raise NotFoundError("student", student_id)
    return student


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------

@router.get("", response_model=List[StudentOut])
def list_students(db: Session = Depends(get_db)):
    return Store(db).list_students()


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: str, db: Session = Depends(get_db)):
    return _ensure_student(Store(db), student_id)


@router.post("", response_model=StudentOut, status_code=201)
def create_student(payload: StudentIn, db: Session = Depends(get_db)):
    store = Store(db)
    with transaction(db):
        student = store.create_student(name=payload.name, email=payload.email)
        set_xp(store, student, payload.xp)
    db.refresh(student)
    return student


@router.patch("/{student_id}", response_model=StudentOut)
def update_student(student_id: str, payload: StudentPatch, db: Session = Depends(get_db)):
    store = Store(db)
    student = _ensure_student(store, student_id)
    with transaction(db):
        store.update_student(student_id, name=payload.name, email=payload.email)
        # level is never written directly; it follows xp
        if payload.xp is not None:
            set_xp(store, student, payload.xp)
    db.refresh(student)
    return student


# ---------------------------------------------------------------------------
# Achievements of a student
# ---------------------------------------------------------------------------

@router.get("/{student_id}/achievements", response_model=List[StudentAchievementOut])
def student_achievements(student_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_student(store, student_id)
    return store.list_student_achievements(student_id)


@router.post("/{student_id}/achievements/{achievement_id}/progress", response_model=ProgressOut)
def track_progress(
    student_id: str,
    achievement_id: str,
    payload: ProgressIn | None = None,
    db: Session = Depends(get_db),
):
    store = Store(db)
    _ensure_student(store, student_id)
    payload = payload or ProgressIn()
    result = AchievementTracker(store).track_progress(
        student_id, achievement_id, payload.increment, payload.total
    )
    return {
        "unlocked": result.unlocked,
        "xp_awarded": result.xp_awarded,
        "status": result.status.value,
        "cascaded": result.cascaded,
    }
