from fastapi import APIRouter, Depends, HTTPException
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.db import get_db, transaction
from app.models.schemas import AchievementIn, AchievementPatch, AchievementOut
from app.models.store import Store

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=List[AchievementOut])
def list_achievements(db: Session = Depends(get_db)):
    return Store(db).list_achievements()


@router.get("/{achievement_id}", response_model=AchievementOut)
def get_achievement(achievement_id: str, db: Session = Depends(get_db)):
    achievement = Store(db).get_achievement(achievement_id)
    if not achievement:
        raise NotFoundError("achievement", achievement_id)
    return achievement


@router.post("", response_model=AchievementOut, status_code=201)
def create_achievement(payload: AchievementIn, db: Session = Depends(get_db)):
    store = Store(db)
    fields = payload.model_dump(exclude_none=True)
    if payload.id and store.get_achievement(payload.id):
        raise HTTPException(status_code=409, detail="achievement id already exists")
    with transaction(db):
        achievement = store.create_achievement(**fields)
    return achievement


@router.patch("/{achievement_id}", response_model=AchievementOut)
def update_achievement(achievement_id: str, payload: AchievementPatch, db: Session = Depends(get_db)):
    store = Store(db)
    with transaction(db):
        achievement = store.update_achievement(achievement_id, **payload.model_dump(exclude_none=True))
    if not achievement:
        raise NotFoundError("achievement", achievement_id)
    return achievement
