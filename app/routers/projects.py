# app/routers/projects.py
from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.db import get_db, transaction
from app.models.entities import Project
from app.models.schemas import (
    ProjectIn,
    ProjectOut,
    ProjectDetailOut,
    PlanningIn,
    PlanningOut,
    CompetencyIn,
    CompetencyOut,
    CompetencyLinkIn,
    CompetencyLinkOut,
    SubmissionOut,
)
from app.models.store import Store

router = APIRouter(prefix="/projects", tags=["projects"])


def _ensure_project(store: Store, project_id: str) -> Project:
    project = store.get_project(project_id)
    if not project:
        raise NotFoundError("project", project_id)
    return project


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(payload: ProjectIn, db: Session = Depends(get_db)):
    store = Store(db)
    if not store.get_teacher(payload.teacher_id):
        raise NotFoundError("teacher", payload.teacher_id)
    with transaction(db):
        project = store.create_project(**payload.model_dump())
    return project


@router.get("/{project_id}", response_model=ProjectDetailOut)
def get_project(project_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    project = _ensure_project(store, project_id)
    out = ProjectOut.model_validate(project).model_dump()
    out["has_planning"] = store.project_has_planning(project_id)
    out["has_competencies"] = store.project_has_competencies(project_id)
    return out


@router.put("/{project_id}/planning", response_model=PlanningOut)
def upsert_planning(project_id: str, payload: PlanningIn, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_project(store, project_id)
    with transaction(db):
        planning = store.upsert_planning(project_id, **payload.model_dump())
    return planning


@router.post("/competencies", response_model=CompetencyOut, status_code=201)
def create_competency(payload: CompetencyIn, db: Session = Depends(get_db)):
    with transaction(db):
        competency = Store(db).create_competency(**payload.model_dump())
    return competency


@router.get("/{project_id}/competencies", response_model=List[CompetencyLinkOut])
def list_competencies(project_id: str, db: Session = Depends(get_db)):
    return Store(db).list_project_competencies(project_id)


@router.put("/{project_id}/competencies", response_model=List[CompetencyLinkOut])
def replace_competencies(project_id: str, payload: List[CompetencyLinkIn], db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_project(store, project_id)
    return store.replace_project_competencies(project_id, [link.model_dump() for link in payload])


@router.get("/{project_id}/submissions", response_model=List[SubmissionOut])
def list_submissions(project_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    _ensure_project(store, project_id)
    return store.list_submissions(project_id)
