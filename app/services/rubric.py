"""
Rubric weight validation and rubric-to-grade conversion.

Criteria may be ORM rows or any object exposing ``id`` and ``weight``;
``selected_levels`` maps criterion id -> performance level (1..4), where
level 1..4 means 25/50/75/100% attainment of that criterion.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional
import logging
import math

log = logging.getLogger(__name__)

MAX_TOTAL_WEIGHT = 100
LEVEL_PERCENT = 25
VALID_LEVELS = (1, 2, 3, 4)


@dataclass(frozen=True)
class WeightCheck:
    ok: bool
    total: int


def _weight(criterion: Any) -> int:
    return int(getattr(criterion, "weight", 0) or 0)


def total_weight(criteria: Iterable[Any]) -> int:
    return sum(_weight(c) for c in criteria)


def is_balanced(criteria: Iterable[Any]) -> bool:
    return total_weight(criteria) == MAX_TOTAL_WEIGHT


def validate_weight_change(
    criteria: Iterable[Any],
    criteria_id: Optional[str],
    proposed_weight: int,
    pending: Optional[Mapping[str, int]] = None,
) -> WeightCheck:
    """Pre-commit check of a project's total weight.

    ``criteria_id`` None means a new criterion is being added. ``pending``
    holds other unsaved edits the caller is tracking.
    """
    pending = pending or {}
    total = 0
    for c in criteria:
        if criteria_id is not None and c.id == criteria_id:
            total += int(proposed_weight)
        elif c.id in pending:
            total += int(pending[c.id])
        else:
            total += _weight(c)
    if criteria_id is None:
        total += int(proposed_weight)

    ok = total <= MAX_TOTAL_WEIGHT
    if not ok:
        log.info("[Rubric] weight change on %s rejected: total=%d", criteria_id or "<new>", total)
    return WeightCheck(ok=ok, total=total)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_grade(criteria: Iterable[Any], selected_levels: Mapping[str, int]) -> int:
    score = 0.0
    weight_seen = 0
    for c in criteria:
        level = selected_levels.get(c.id)
        if level is None:
            continue
        if level not in VALID_LEVELS:
            raise ValueError(f"Invalid level {level!r} for criterion {c.id}; expected 1-4")
        weight = _weight(c)
        score += (level * LEVEL_PERCENT) * weight / 100
        weight_seen += weight

    if weight_seen == 0:
        return 0
    # Not renormalized: unscored criteria simply contribute nothing
    return round_half_up(score)


def all_criteria_scored(criteria: Iterable[Any], selected_levels: Mapping[str, int]) -> bool:
    return all(c.id in selected_levels for c in criteria)


def rubric_feedback(criteria: Iterable[Any], selected_levels: Mapping[str, int], feedback: str = "") -> str:
    lines = []
    for c in criteria:
        level = selected_levels.get(c.id)
        if level is None:
            continue
        text = getattr(c, f"level{level}", "") or ""
        lines.append(f"{c.criteria}: Level {level} - {text}")
    if not lines:
        return feedback
    return f"{feedback}\n\n--- Rubric Evaluation Details ---\n" + "\n".join(lines)
