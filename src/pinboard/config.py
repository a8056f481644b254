from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

TITLE_STOP_WORDS: FrozenSet[str] = frozenset(
    {"a", "the", "an", "is", "are", "in", "on", "at", "to", "for", "with", "of", "and"}
)
MIN_TITLE_TOKEN_LENGTH = 3

DEFAULT_SIMILAR_TOP_N = 10
MAX_SIMILAR_TOP_N = 100

# Score assigned to the target pin so it can never pass the positivity filter.
SELF_SCORE = -1.0


@dataclass(frozen=True)
class SimilarityWeights:
    """Weights used when scoring a candidate pin against a target pin."""

    tag: float = 10.0
    category: float = 15.0
    color: float = 5.0
    title_token: float = 2.0
    like: float = 2.0
    save: float = 3.0
    engagement_cap: float = 20.0


@dataclass(frozen=True)
class InterestPoints:
    """Points added to a user's category affinity for each action."""

    like: int = 1
    save: int = 2
    undo: int = -1


@dataclass
class PipelinePaths:
    """Input/output paths required by the offline scoring pipeline."""

    data_dir: Path = Path("data/raw")
    output_dir: Path = Path("output/pinboard")
    pins_csv: Optional[Path] = None
    user_interests_csv: Optional[Path] = None

    def resolved_pins_csv(self) -> Path:
        return self.pins_csv or self.data_dir / "pins.csv"

    def resolved_user_interests_csv(self) -> Path:
        return self.user_interests_csv or self.data_dir / "user_interests.csv"


@dataclass
class PipelineConfig:
    paths: PipelinePaths = field(default_factory=PipelinePaths)
    weights: SimilarityWeights = field(default_factory=SimilarityWeights)
    top_n_similar: int = DEFAULT_SIMILAR_TOP_N


@dataclass
class ApiSettings:
    """Runtime settings for the HTTP service, read from the environment."""

    similar_top_n: int = DEFAULT_SIMILAR_TOP_N
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ApiSettings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            similar_top_n=_similar_top_n_from_env(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def _similar_top_n_from_env() -> int:
    raw = os.getenv("SIMILAR_TOP_N")
    if raw is None or not raw.strip():
        return DEFAULT_SIMILAR_TOP_N
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-integer SIMILAR_TOP_N=%r", raw)
        return DEFAULT_SIMILAR_TOP_N
    if not 1 <= value <= MAX_SIMILAR_TOP_N:
        LOGGER.warning(
            "SIMILAR_TOP_N=%d outside 1..%d, clamping", value, MAX_SIMILAR_TOP_N
        )
    return min(max(value, 1), MAX_SIMILAR_TOP_N)
