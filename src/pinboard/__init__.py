"""
Pin ranking and similarity scoring for the pinboard service.

The package provides utilities for:
    * reordering a user's home feed by per-category interest,
    * scoring pins against a target pin (IDF-weighted tags, category, color,
      title words and capped engagement) to answer "find similar pins",
    * accumulating category interest from like/save actions,
    * precomputing similar-pin lists and ranked feeds from a CSV snapshot.

The scoring functions are pure and take every input explicitly, so they run
without a Supabase connection.
"""

from __future__ import annotations

from typing import Any

from .models import Pin, ScoredPin
from .ranking import rank_feed
from .similarity import find_similar_pins

__all__ = ["Pin", "ScoredPin", "find_similar_pins", "rank_feed", "run_pipeline"]


def run_pipeline(*args: Any, **kwargs: Any):
    """Lazy wrapper so importing pinboard doesn't pull pandas immediately."""

    from .pipeline import run_pipeline as _run_pipeline

    return _run_pipeline(*args, **kwargs)
