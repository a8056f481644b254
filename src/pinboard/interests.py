"""Category affinity bookkeeping driven by like and save actions."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .config import InterestPoints


class InterestAction(str, Enum):
    LIKE = "like"
    SAVE = "save"


def interest_delta(
    action: InterestAction | str,
    undo: bool = False,
    points: Optional[InterestPoints] = None,
) -> int:
    points = points or InterestPoints()
    try:
        action = InterestAction(action)
    except ValueError:
        raise ValueError(f"Unknown interest action: {action!r}") from None
    if undo:
        return points.undo
    if action is InterestAction.SAVE:
        return points.save
    return points.like


def apply_interest_action(
    interests: Mapping[str, int],
    category: str,
    action: InterestAction | str,
    undo: bool = False,
    points: Optional[InterestPoints] = None,
) -> Dict[str, int]:
    """
    Return a copy of ``interests`` updated for one like/save (or its undo).

    Pins without a category leave the mapping unchanged. Scores never go
    below zero.
    """
    delta = interest_delta(action, undo=undo, points=points)
    updated = dict(interests)
    if not category:
        return updated
    updated[category] = max(0, updated.get(category, 0) + delta)
    return updated


def clamp_interests(raw: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Coerce a stored mapping into category -> non-negative int."""
    if not raw:
        return {}
    cleaned: Dict[str, int] = {}
    for category, value in raw.items():
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(number):
            continue
        cleaned[str(category)] = max(0, int(number))
    return cleaned
