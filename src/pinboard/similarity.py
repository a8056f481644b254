"""
Multi-factor pin similarity.

A candidate's score against a target pin is the sum of:
    * shared tags, each weighted by an inverse-document-frequency term so that
      rare tags count for more than ubiquitous ones,
    * a flat bonus for the same category and another for the same color,
    * a bonus per shared title word,
    * a capped engagement boost from the candidate's likes and saves.

The tag-frequency table is rebuilt from the corpus on every call.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .config import (
    DEFAULT_SIMILAR_TOP_N,
    MIN_TITLE_TOKEN_LENGTH,
    SELF_SCORE,
    TITLE_STOP_WORDS,
    SimilarityWeights,
)
from .models import Pin, ScoredPin

LOGGER = logging.getLogger(__name__)

_TITLE_SPLIT = re.compile(r"[\s,._-]+")


def normalize(value: Optional[str]) -> str:
    return (value or "").lower().strip()


def pin_tag_set(pin: Pin) -> Set[str]:
    tags = {normalize(t) for t in pin.tags}
    tags.discard("")
    return tags


def tag_document_frequencies(corpus: Iterable[Pin]) -> Counter:
    """Number of pins carrying each tag, counting every pin at most once per tag."""
    freqs: Counter = Counter()
    for pin in corpus:
        freqs.update(pin_tag_set(pin))
    return freqs


def inverse_document_frequencies(corpus: Sequence[Pin]) -> Dict[str, float]:
    """
    ``idf(tag) = ln(total_pins / doc_freq) + 1``.

    The ``+ 1`` keeps a tag present on every pin at weight 1 instead of 0.
    """
    total = len(corpus)
    freqs = tag_document_frequencies(corpus)
    return {tag: math.log(total / max(count, 1)) + 1.0 for tag, count in freqs.items()}


def tag_weight(idf: Mapping[str, float], tag: str) -> float:
    return idf.get(tag, 1.0)


def title_tokens(text: Optional[str]) -> Set[str]:
    if not text:
        return set()
    return {
        token
        for token in _TITLE_SPLIT.split(text.lower())
        if len(token) >= MIN_TITLE_TOKEN_LENGTH and token not in TITLE_STOP_WORDS
    }


def engagement_boost(pin: Pin, weights: SimilarityWeights) -> float:
    raw = pin.like_count * weights.like + pin.save_count * weights.save
    return min(raw, weights.engagement_cap)


def score_candidate(
    target: Pin,
    candidate: Pin,
    idf: Mapping[str, float],
    weights: Optional[SimilarityWeights] = None,
) -> float:
    weights = weights or SimilarityWeights()
    if candidate.pin_id == target.pin_id:
        return SELF_SCORE

    score = 0.0

    for tag in pin_tag_set(candidate) & pin_tag_set(target):
        score += tag_weight(idf, tag) * weights.tag

    target_category = normalize(target.category)
    if target_category and normalize(candidate.category) == target_category:
        score += weights.category

    target_color = normalize(target.color)
    if target_color and normalize(candidate.color) == target_color:
        score += weights.color

    shared_words = title_tokens(target.title) & title_tokens(candidate.title)
    score += len(shared_words) * weights.title_token

    score += engagement_boost(candidate, weights)
    return score


def score_corpus(
    target: Pin,
    corpus: Sequence[Pin],
    weights: Optional[SimilarityWeights] = None,
) -> List[ScoredPin]:
    """
    Score every corpus pin against ``target`` and keep the positive ones.

    Results are ordered by descending score; equal scores keep corpus order.
    """
    weights = weights or SimilarityWeights()
    idf = inverse_document_frequencies(corpus)
    scored = [
        ScoredPin(pin=pin, score=score_candidate(target, pin, idf, weights))
        for pin in corpus
    ]
    scored = [item for item in scored if item.score > 0]
    return sorted(scored, key=lambda item: item.score, reverse=True)


def find_similar_pins(
    target: Pin,
    corpus: Sequence[Pin],
    top_n: int = DEFAULT_SIMILAR_TOP_N,
    weights: Optional[SimilarityWeights] = None,
) -> List[ScoredPin]:
    if top_n <= 0 or not corpus:
        return []
    ranked = score_corpus(target, corpus, weights)
    LOGGER.debug(
        "Pin %s: %d positive matches in corpus of %d", target.pin_id, len(ranked), len(corpus)
    )
    return ranked[:top_n]
