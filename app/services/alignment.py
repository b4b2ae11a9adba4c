"""
Goal-alignment matcher: links a proposed checklist item to at most one goal.

A goal is a hit when any label, case-insensitively, is a substring of its
title or description. Goals are scanned in the order given (the goal store
supplies priority ASC, created_at DESC) and the first hit wins.

Plain substring matching, no semantic search. Blank labels are ignored,
otherwise "" would match every goal.
"""
from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, TypeVar


class GoalLike(Protocol):
    title: str
    description: Optional[str]


G = TypeVar("G", bound=GoalLike)


def _normalize(labels: Iterable[str]) -> list[str]:
    return [label.lower() for label in labels if label and label.strip()]


def _hit(normalized: list[str], goal: GoalLike) -> bool:
    title = (goal.title or "").lower()
    description = (goal.description or "").lower()
    return any(label in title or label in description for label in normalized)


def goal_matches(labels: Sequence[str], goal: GoalLike) -> bool:
    return _hit(_normalize(labels), goal)


def match_goal(labels: Sequence[str], goals: Sequence[G]) -> Optional[G]:
    """Return the first goal (input order) hit by any label, else None."""
    normalized = _normalize(labels)
    if not normalized or not goals:
        return None
    for goal in goals:
        if _hit(normalized, goal):
            return goal
    return None
