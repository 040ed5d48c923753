from fastapi import APIRouter, Depends
from typing import Any, Dict
from sqlalchemy.orm import Session

from app.models.db import get_db
from app.models.store import Store
from app.services.analytics import overview

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/overview")
def analytics_overview(db: Session = Depends(get_db)) -> Dict[str, Any]:
    return overview(Store(db))
