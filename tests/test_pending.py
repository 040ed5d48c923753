"""
Test: pending-actions aggregation for a teacher's dashboard.
"""
from datetime import datetime, timedelta, timezone

import pytest

from app.services.pending import get_pending_actions

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def teacher(store, db):
    t = store.create_teacher(name="Ana Silva", subject="Biologia")
    db.commit()
    return t


@pytest.fixture
def project(store, db, teacher):
    def _make(title, deadline=None):
        p = store.create_project(title=title, teacher_id=teacher.id, next_deadline=deadline)
        db.commit()
        return p
    return _make


def _iso(dt):
    return dt.isoformat()


class TestPendingActions:
    def test_teacher_without_projects(self, store, teacher):
        store.create_event(teacher_id=teacher.id, title="Reunião", date=NOW + timedelta(days=1))
        result = get_pending_actions(store, teacher.id, now=NOW)
        assert result.projects_without_planning == 0
        assert result.projects_without_competencies == 0
        assert result.upcoming_deadlines == []
        assert result.upcoming_events == []
        assert result.total == 0

    def test_planning_and_competency_counts(self, store, db, project):
        planned = project("Horta Sustentável")
        linked = project("Jornal Digital")
        project("Robótica Sucata")
        store.upsert_planning(planned.id, objectives="Cultivar")
        comp = store.create_competency(name="Comunicação")
        store.replace_project_competencies(linked.id, [{"competency_id": comp.id, "coverage": 60}])
        db.commit()

        result = get_pending_actions(store, planned.teacher_id, now=NOW)
        assert result.projects_without_planning == 2
        assert result.projects_without_competencies == 2

    def test_deadline_window(self, store, project):
        inside = project("Inside", _iso(NOW + timedelta(days=6, hours=23)))
        project("Too far", _iso(NOW + timedelta(days=8)))
        project("Past", _iso(NOW - timedelta(hours=1)))
        edge = project("Edge", _iso(NOW + timedelta(days=7)))
        project("No deadline")
        project("Garbage", "someday")

        result = get_pending_actions(store, inside.teacher_id, now=NOW)
        assert [d["project_id"] for d in result.upcoming_deadlines] == [inside.id, edge.id]
        assert result.upcoming_deadlines[0]["title"] == "Inside"

    def test_date_only_deadline(self, store, project):
        p = project("Date only", "2025-03-15")
        result = get_pending_actions(store, p.teacher_id, now=NOW)
        assert result.upcoming_deadlines == [{"project_id": p.id, "title": "Date only", "deadline": "2025-03-15"}]

    def test_event_window(self, store, db, project, teacher):
        p = project("Feira de Ciências")
        soon = store.create_event(teacher_id=teacher.id, project_id=p.id, title="Ensaio", date=NOW + timedelta(days=2))
        store.create_event(teacher_id=teacher.id, title="Later", date=NOW + timedelta(days=3, minutes=1))
        store.create_event(teacher_id=teacher.id, title="Yesterday", date=NOW - timedelta(days=1))
        store.create_event(teacher_id="someone-else", title="Other", date=NOW + timedelta(days=1))
        db.commit()

        result = get_pending_actions(store, teacher.id, now=NOW)
        assert len(result.upcoming_events) == 1
        ev = result.upcoming_events[0]
        assert ev["id"] == soon.id
        assert ev["project_id"] == p.id
        assert ev["title"] == "Ensaio"
