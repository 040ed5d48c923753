# app/routers/rubrics.py
from fastapi import APIRouter, Depends, HTTPException
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, RubricWeightExceededError
from app.models.db import get_db, transaction
from app.models.schemas import (
    RubricCriteriaIn,
    RubricCriteriaPatch,
    RubricCriteriaOut,
    WeightCheckIn,
    WeightCheckOut,
    GradePreviewIn,
    GradePreviewOut,
)
from app.models.store import Store
from app.services.rubric import all_criteria_scored, calculate_grade, validate_weight_change

router = APIRouter(prefix="/rubrics", tags=["rubrics"])


@router.get("/{project_id}", response_model=List[RubricCriteriaOut])
def list_criteria(project_id: str, db: Session = Depends(get_db)):
    return Store(db).list_rubric_criteria(project_id)


@router.post("", response_model=RubricCriteriaOut, status_code=201)
def create_criterion(payload: RubricCriteriaIn, db: Session = Depends(get_db)):
    store = Store(db)
    if not store.get_project(payload.project_id):
        raise NotFoundError("project", payload.project_id)
    check = validate_weight_change(store.list_rubric_criteria(payload.project_id), None, payload.weight)
    if not check.ok:
        raise RubricWeightExceededError(payload.project_id, check.total)
    with transaction(db):
        row = store.create_rubric_criterion(**payload.model_dump())
    return row


@router.patch("/{criteria_id}", response_model=RubricCriteriaOut)
def update_criterion(criteria_id: str, payload: RubricCriteriaPatch, db: Session = Depends(get_db)):
    store = Store(db)
    row = store.get_rubric_criterion(criteria_id)
    if not row:
        raise NotFoundError("rubric criteria", criteria_id)
    if payload.weight is not None:
        check = validate_weight_change(store.list_rubric_criteria(row.project_id), criteria_id, payload.weight)
        if not check.ok:
            raise RubricWeightExceededError(row.project_id, check.total)
    with transaction(db):
        row = store.update_rubric_criterion(criteria_id, **payload.model_dump(exclude_none=True))
    return row


@router.delete("/{criteria_id}", status_code=204)
def delete_criterion(criteria_id: str, db: Session = Depends(get_db)):
    store = Store(db)
    with transaction(db):
        deleted = store.delete_rubric_criterion(criteria_id)
    if not deleted:
        raise NotFoundError("rubric criteria", criteria_id)


@router.post("/{project_id}/validate", response_model=WeightCheckOut)
def validate_weights(project_id: str, payload: WeightCheckIn, db: Session = Depends(get_db)):
    """Dry-run of a weight edit; nothing is written."""
    criteria = Store(db).list_rubric_criteria(project_id)
    if payload.criteria_id and payload.criteria_id not in {c.id for c in criteria}:
        raise HTTPException(status_code=404, detail="criteria_id not in project")
    check = validate_weight_change(criteria, payload.criteria_id, payload.weight, payload.pending)
    return {"ok": check.ok, "total": check.total}


@router.post("/{project_id}/grade-preview", response_model=GradePreviewOut)
def grade_preview(project_id: str, payload: GradePreviewIn, db: Session = Depends(get_db)):
    criteria = Store(db).list_rubric_criteria(project_id)
    try:
        grade = calculate_grade(criteria, payload.levels)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"grade": grade, "all_criteria_scored": all_criteria_scored(criteria, payload.levels)}
