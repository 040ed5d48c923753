# app/routers/teachers.py
from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.db import get_db, transaction
from app.models.schemas import (
    TeacherIn,
    TeacherOut,
    ProjectOut,
    EventIn,
    EventOut,
    PendingActionsOut,
)
from app.models.store import Store
from app.services.pending import get_pending_actions

router = APIRouter(prefix="/teachers", tags=["teachers"])
events_router = APIRouter(prefix="/events", tags=["events"])


def _ensure_teacher(store: Store, teacher_id: str):
    teacher = store.get_teacher(teacher_id)
    if not teacher:
        raise NotFoundError("teacher", teacher_id)
    return teacher


@router.post("", response_model=TeacherOut, status_code=201)
def create_teacher(payload: TeacherIn, db: Session = Depends(get_db)):
    with transaction(db):
        teacher = Store(db).create_teacher(**payload.model_dump())
    return teacher


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(teacher_id: str, db: Session = Depends(get_db)):
    return _ensure_teacher(Store(db), teacher_id)


@router.get("/{teacher_id}/projects", response_model=List[ProjectOut])
def teacher_projects(teacher_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_teacher(store, teacher_id)
    return store.list_projects_by_teacher(teacher_id)


@router.get("/{teacher_id}/pending-actions", response_model=PendingActionsOut)
def pending_actions(teacher_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_teacher(store, teacher_id)
    result = get_pending_actions(store, teacher_id)
    return {
        "projects_without_planning": result.projects_without_planning,
        "projects_without_competencies": result.projects_without_competencies,
        "upcoming_deadlines": result.upcoming_deadlines,
        "upcoming_events": result.upcoming_events,
        "total": result.total,
    }


@router.get("/{teacher_id}/events", response_model=List[EventOut])
def teacher_events(teacher_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_teacher(store, teacher_id)
    return store.list_events_by_teacher(teacher_id)


@events_router.post("", response_model=EventOut, status_code=201)
def create_event(payload: EventIn, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_teacher(store, payload.teacher_id)
    with transaction(db):
        event = store.create_event(**payload.model_dump())
    return event
