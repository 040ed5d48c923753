# app/routers/submissions.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging
from sqlalchemy.orm import Session

from app.core.exceptions import IncompleteRubricError, NotFoundError
from app.models.db import get_db, transaction
from app.models.entities import Submission
from app.models.schemas import (
    SubmissionIn,
    SubmissionCreatedOut,
    GradeIn,
    RubricGradeIn,
    GradedOut,
)
from app.models.store import Store
from app.services.gamification import (
    AchievementTracker,
    track_submission_created,
    track_submission_graded,
)
from app.services.rubric import all_criteria_scored, calculate_grade, rubric_feedback

log = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["submissions"])


def _unlocked_titles(store: Store, keys: List[str]) -> List[str]:
    titles = []
    for key in keys:
        ach = store.get_achievement(key)
        titles.append(ach.title if ach else key)
    return titles


def _grade_and_track(store: Store, submission: Submission, grade: int, feedback: str | None) -> dict:
    with transaction(store.db):
        store.grade_submission(submission.id, grade, feedback)
    unlocked = track_submission_graded(AchievementTracker(store), submission.student_id, grade)
    store.db.refresh(submission)
    return {"submission": submission, "achievements_unlocked": _unlocked_titles(store, unlocked)}


@router.post("", response_model=SubmissionCreatedOut, status_code=201)
def create_submission(payload: SubmissionIn, db: Session = Depends(get_db)):
    store = Store(db)
    if not store.get_project(payload.project_id):
        raise NotFoundError("project", payload.project_id)
    if not store.get_student(payload.student_id):
        raise NotFoundError("student", payload.student_id)
    with transaction(db):
        submission = store.create_submission(**payload.model_dump())
    unlocked = track_submission_created(AchievementTracker(store), submission.student_id)
    db.refresh(submission)
    return {"submission": submission, "achievements_unlocked": _unlocked_titles(store, unlocked)}


@router.post("/{submission_id}/grade", response_model=GradedOut)
def grade_submission(submission_id: str, payload: GradeIn, db: Session = Depends(get_db)):
    """Direct grading: any integer 0-100 is accepted, no rubric involved."""
    store = Store(db)
    submission = store.get_submission(submission_id)
    if not submission:
        raise NotFoundError("submission", submission_id)
    return _grade_and_track(store, submission, payload.grade, payload.feedback)


@router.post("/{submission_id}/rubric-grade", response_model=GradedOut)
def rubric_grade_submission(submission_id: str, payload: RubricGradeIn, db: Session = Depends(get_db)):
    """Rubric grading: refuses to save until every criterion has a level."""
    store = Store(db)
    submission = store.get_submission(submission_id)
    if not submission:
        raise NotFoundError("submission", submission_id)

    criteria = store.list_rubric_criteria(submission.project_id)
    if not criteria:
        raise HTTPException(status_code=400, detail="project has no rubric criteria")
    if not all_criteria_scored(criteria, payload.levels):
        raise IncompleteRubricError([c.id for c in criteria if c.id not in payload.levels])
    try:
        grade = calculate_grade(criteria, payload.levels)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    log.info("[Rubric] submission %s graded %d via rubric", submission_id, grade)
    feedback = rubric_feedback(criteria, payload.levels, payload.feedback)
    return _grade_and_track(store, submission, grade, feedback)
