"""
Shared test fixtures.
Every test runs against a fresh in-memory SQLite database; the HTTP client
has its session dependency pointed at the same database.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.db import Base, get_db
from app.models import entities  # noqa: F401
from app.models.store import Store
from app.utils.csv_loader import bootstrap_achievements_from_csv

CATALOG_CSV = Path(__file__).resolve().parent.parent / "data" / "achievements.csv"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    """A session bound to the in-memory database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return Store(db)


@pytest.fixture
def catalog(db):
    """Load the shipped achievement catalog (all well-known keys)."""
    bootstrap_achievements_from_csv(db, CATALOG_CSV)
    return {a.id: a for a in Store(db).list_achievements()}


@pytest.fixture
def make_student(store, db):
    def _make(xp=0, name="Lucas Alves", email=None):
        from app.services.gamification import level_for_xp
        student = store.create_student(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}.{xp}@aluno.com",
            xp=xp,
            level=level_for_xp(xp),
        )
        db.commit()
        return student
    return _make


@pytest.fixture
def client(engine):
    from app.main import app

    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client, engine):
    """HTTP client with the achievement catalog already loaded."""
    session = sessionmaker(bind=engine)()
    try:
        bootstrap_achievements_from_csv(session, CATALOG_CSV)
    finally:
        session.close()
    return client
