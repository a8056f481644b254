"""
Interest-weighted reordering of the home feed.

The feed arrives newest first. Pins are pulled forward by the user's affinity
for their category; pins of equal affinity keep their recency order.
"""

from __future__ import annotations

from typing import Mapping, Sequence, List

from .models import Pin


def interest_weight(pin: Pin, interests: Mapping[str, int]) -> int:
    return interests.get(pin.category, 0)


def rank_feed(pins: Sequence[Pin], interests: Mapping[str, int]) -> List[Pin]:
    """
    Return ``pins`` reordered by descending category interest.

    ``sorted`` is stable, so equal-weight pins stay in input order and an
    empty mapping gives back the input order unchanged.
    """
    if not interests:
        return list(pins)
    return sorted(pins, key=lambda pin: interest_weight(pin, interests), reverse=True)
