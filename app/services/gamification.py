from __future__ import annotations

"""
app/services/gamification.py

Achievement progress & XP engine:
- progress tracking with a one-way unlock gate
- single XP writer keeping ``level`` derived from ``xp``
- level/XP threshold rules processed through a worklist
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterable, List, Optional, Tuple
import logging

from app.models.db import transaction
from app.models.entities import Student, StudentAchievement
from app.models.store import Store

log = logging.getLogger(__name__)

XP_PER_LEVEL = 100


class AchievementKey(str, Enum):
    # Level / XP thresholds
    INICIANTE_MOTIVADO = "ach-iniciante-motivado"
    ESTUDANTE_DEDICADO = "ach-estudante-dedicado"
    EXPERT = "ach-expert"
    COLETOR_XP = "ach-coletor-xp"
    # Submission milestones
    PRIMEIRA_ENTREGA = "ach-primeira-entrega"
    MESTRE_PROJETOS = "ach-mestre-projetos"
    # Grade milestones
    PERFECCIONISTA = "ach-perfeccionista"
    EXCELENCIA = "ach-excelencia"
    BOM_ALUNO = "ach-bom-aluno"


@dataclass(frozen=True)
class LevelRule:
    achievement_id: str
    min_level: Optional[int] = None
    min_xp: Optional[int] = None

    def applies(self, level: int, xp: int) -> bool:
        if self.min_level is not None and level < self.min_level:
            return False
        if self.min_xp is not None and xp < self.min_xp:
            return False
        return self.min_level is not None or self.min_xp is not None


LEVEL_RULES: Tuple[LevelRule, ...] = (
    LevelRule(AchievementKey.INICIANTE_MOTIVADO.value, min_level=5),
    LevelRule(AchievementKey.ESTUDANTE_DEDICADO.value, min_level=10),
    LevelRule(AchievementKey.EXPERT.value, min_level=20),
    LevelRule(AchievementKey.COLETOR_XP.value, min_xp=1000),
)


class TrackStatus(str, Enum):
    UNLOCKED = "unlocked"
    IN_PROGRESS = "in_progress"
    ALREADY_UNLOCKED = "already_unlocked"
    ACHIEVEMENT_NOT_FOUND = "achievement_not_found"


@dataclass
class TrackResult:
    unlocked: bool
    xp_awarded: int
    status: TrackStatus
    cascaded: List[str] = field(default_factory=list)


def level_for_xp(xp: int) -> int:
    return max(0, int(xp)) // XP_PER_LEVEL + 1


def apply_xp(store: Store, student: Student, delta: int) -> Student:
    """Add ``delta`` XP and rederive the level. The only XP writer."""
    new_xp = max(0, (student.xp or 0) + int(delta))
    return set_xp(store, student, new_xp)


def set_xp(store: Store, student: Student, xp: int) -> Student:
    xp = max(0, int(xp))
    return store.update_student(student.id, xp=xp, level=level_for_xp(xp))


_Step = Tuple[str, str, int, Optional[int]]


class AchievementTracker:
    """Tracks achievement progress and drains the threshold cascade.

    Each ``track_progress`` / ``check_level_achievements`` call runs in a single
    transaction; progress and student rows are read ``FOR UPDATE`` so that
    concurrent increments on the same pair serialize instead of overwriting
    each other.
    """

    def __init__(self, store: Store, rules: Iterable[LevelRule] = LEVEL_RULES):
        self.store = store
        self.rules = tuple(rules)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def track_progress(
        self,
        student_id: str,
        achievement_id: str,
        increment: int = 1,
        total: Optional[int] = None,
    ) -> TrackResult:
        with transaction(self.store.db):
            result, queue = self._step(student_id, achievement_id, increment, total)
            result.cascaded = self._drain(queue)
        return result

    def check_level_achievements(self, student_id: str, level: int, xp: int) -> List[str]:
        with transaction(self.store.db):
            unlocked = self._drain(deque(self._rule_steps(student_id, level, xp)))
        return unlocked

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rule_steps(self, student_id: str, level: int, xp: int) -> List[_Step]:
        return [
            (student_id, rule.achievement_id, 1, 1)
            for rule in self.rules
            if rule.applies(level, xp)
        ]

    def _drain(self, queue: Deque[_Step]) -> List[str]:
        unlocked: List[str] = []
        while queue:
            student_id, achievement_id, increment, total = queue.popleft()
            result, follow_ups = self._step(student_id, achievement_id, increment, total)
            if result.unlocked:
                unlocked.append(achievement_id)
            queue.extend(follow_ups)
        return unlocked

    def _step(
        self,
        student_id: str,
        achievement_id: str,
        increment: int,
        total: Optional[int],
    ) -> Tuple[TrackResult, Deque[_Step]]:
        follow_ups: Deque[_Step] = deque()

        achievement = self.store.get_achievement(achievement_id)
        if achievement is None:
            log.debug("[XP] achievement %s not in catalog; skipping", achievement_id)
            return TrackResult(False, 0, TrackStatus.ACHIEVEMENT_NOT_FOUND), follow_ups

        existing = self.store.find_student_achievement(student_id, achievement_id, for_update=True)
        if existing is not None and existing.unlocked:
            return TrackResult(False, 0, TrackStatus.ALREADY_UNLOCKED), follow_ups

        if total is not None:
            effective_total = total
        elif existing is not None:
            effective_total = existing.total
        else:
            effective_total = 1
        new_progress = (existing.progress if existing is not None else 0) + increment
        now_unlocked = new_progress >= effective_total

        row = existing or StudentAchievement(student_id=student_id, achievement_id=achievement_id)
        row.progress = new_progress
        row.total = effective_total
        row.unlocked = now_unlocked
        self.store.upsert_student_achievement(row)

        if not now_unlocked:
            return TrackResult(False, 0, TrackStatus.IN_PROGRESS), follow_ups

        student = self.store.get_student(student_id, for_update=True)
        if student is None:
            log.warning(
                "[XP] student %s missing after unlocking %s; unlock kept, no XP awarded",
                student_id, achievement_id,
            )
            return TrackResult(True, 0, TrackStatus.UNLOCKED), follow_ups

        reward = achievement.xp or 0
        student = apply_xp(self.store, student, reward)
        log.info(
            "[XP] %s unlocked %s (+%d xp -> xp=%d level=%d)",
            student_id, achievement_id, reward, student.xp, student.level,
        )
        follow_ups.extend(self._rule_steps(student_id, student.level, student.xp))
        return TrackResult(True, reward, TrackStatus.UNLOCKED), follow_ups


# ---------------------------------------------------------------------------
# Triggers from the submission workflow
# ---------------------------------------------------------------------------

GRADE_TRIGGERS: Tuple[Tuple[str, int, int, bool], ...] = (
    # (achievement, min grade, total, exact match)
    (AchievementKey.PERFECCIONISTA.value, 100, 1, True),
    (AchievementKey.EXCELENCIA.value, 90, 5, False),
    (AchievementKey.BOM_ALUNO.value, 80, 3, False),
)


def track_submission_created(tracker: AchievementTracker, student_id: str) -> List[str]:
    unlocked: List[str] = []
    for key, total in (
        (AchievementKey.PRIMEIRA_ENTREGA.value, 1),
        (AchievementKey.MESTRE_PROJETOS.value, 10),
    ):
        if tracker.track_progress(student_id, key, 1, total).unlocked:
            unlocked.append(key)
    return unlocked


def track_submission_graded(
    tracker: AchievementTracker, student_id: str, grade: Optional[int]
) -> List[str]:
    if grade is None:
        return []
    unlocked: List[str] = []
    for key, threshold, total, exact in GRADE_TRIGGERS:
        hit = grade == threshold if exact else grade >= threshold
        if hit and tracker.track_progress(student_id, key, 1, total).unlocked:
            unlocked.append(key)
    return unlocked
