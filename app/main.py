# app/main.py
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.models.db import engine, SessionLocal, Base
from app.models import entities  # noqa: F401  Ensure models are registered
from app.models.store import Store
from app.utils.csv_loader import bootstrap_achievements_from_csv
from app.routers import achievements, analytics, projects, rubrics, students, submissions, teachers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "achievements.csv"

app = FastAPI(title=settings.APP_NAME)

# --------------------------- CORS ---------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------------------------- DB init & seed ---------------------------

def _init_db() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        if Store(db).count_achievements() == 0:
            csv_path = Path(settings.ACHIEVEMENTS_CSV) if settings.ACHIEVEMENTS_CSV else DEFAULT_CATALOG
            bootstrap_achievements_from_csv(db, csv_path)


@app.on_event("startup")
def startup_event() -> None:
    _init_db()
    log.info("[App] %s ready (db=%s)", settings.APP_NAME, "sqlite" if settings.DB_IS_SQLITE else "server")


# --------------------------- Routers ---------------------------
app.include_router(students.router)
app.include_router(achievements.router)
app.include_router(projects.router)
app.include_router(rubrics.router)
app.include_router(submissions.router)
app.include_router(teachers.router)
app.include_router(teachers.events_router)
app.include_router(analytics.router)


# --------------------------- Health ---------------------------
@app.get("/healthz")
def health():
    return {"ok": True, "app": settings.APP_NAME}
