# app/services/pending.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import logging

from app.core.config import settings
from app.models.store import Store
from app.utils.dates import as_utc, parse_datetime

log = logging.getLogger(__name__)


@dataclass
class PendingActions:
    projects_without_planning: int = 0
    projects_without_competencies: int = 0
    upcoming_deadlines: List[Dict[str, Any]] = field(default_factory=list)
    upcoming_events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            self.projects_without_planning
            + self.projects_without_competencies
            + len(self.upcoming_deadlines)
            + len(self.upcoming_events)
        )


def _in_window(when: datetime, start: datetime, end: datetime) -> bool:
    return start <= when <= end


def get_pending_actions(
    store: Store,
    teacher_id: str,
    now: Optional[datetime] = None,
    *,
    deadline_days: Optional[int] = None,
    event_days: Optional[int] = None,
) -> PendingActions:
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    deadline_days = settings.DEADLINE_WINDOW_DAYS if deadline_days is None else deadline_days
    event_days = settings.EVENT_WINDOW_DAYS if event_days is None else event_days

    projects = store.list_projects_by_teacher(teacher_id)
    if not projects:
        return PendingActions()

    project_ids = [p.id for p in projects]
    planned = store.planned_project_ids(project_ids)
    linked = store.linked_project_ids(project_ids)

    result = PendingActions(
        projects_without_planning=sum(1 for pid in project_ids if pid not in planned),
        projects_without_competencies=sum(1 for pid in project_ids if pid not in linked),
    )

    deadline_end = now + timedelta(days=deadline_days)
    for p in projects:
        deadline = parse_datetime(p.next_deadline)
        if deadline is None:
            if p.next_deadline:
                log.debug("[Pending] unparseable deadline %r on project %s", p.next_deadline, p.id)
            continue
        if _in_window(deadline, now, deadline_end):
            result.upcoming_deadlines.append({
                "project_id": p.id,
                "title": p.title,
                "deadline": p.next_deadline,
            })

    event_end = now + timedelta(days=event_days)
    for ev in store.list_events_by_teacher(teacher_id):
        if _in_window(as_utc(ev.date), now, event_end):
            result.upcoming_events.append({
                "id": ev.id,
                "title": ev.title,
                "date": ev.date,
                "project_id": ev.project_id,
            })

    return result
