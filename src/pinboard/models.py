from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    return str(value)


def _tags(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, float) and value != value:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(t) for t in value if t is not None]
    # Comma-separated form used by the upload form and CSV exports.
    return [t.strip() for t in str(value).split(",") if t.strip()]


def _count(record: Mapping[str, Any], counter_keys: List[str], list_keys: List[str]) -> int:
    for key in list_keys:
        value = record.get(key)
        if isinstance(value, (list, tuple)):
            return len(value)
    for key in counter_keys:
        value = record.get(key)
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        # CSV exports write integer counters as "3.0" once the column held a NaN.
        if not math.isfinite(number):
            continue
        return max(0, int(number))
    return 0


@dataclass(frozen=True)
class Pin:
    """A posted image with the metadata the scoring core reads."""

    pin_id: str
    title: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    category: str = ""
    color: str = ""
    like_count: int = 0
    save_count: int = 0
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Pin":
        """
        Build a Pin from a storage row or JSON object.

        Missing or null text fields become empty strings and missing tags an
        empty list, so the scoring functions never have to branch on absence.
        Engagement counts prefer association lists (``likes``, ``savedPins``)
        over stored counters.
        """
        pin_id = record.get("pin_id")
        if pin_id is None:
            pin_id = record.get("id", record.get("_id"))
        user = record.get("user_id", record.get("user"))
        if isinstance(user, Mapping):
            user = user.get("id", user.get("_id"))
        created_at = record.get("created_at", record.get("createdAt"))
        return cls(
            pin_id=_text(pin_id),
            title=_text(record.get("title")),
            description=_text(record.get("description")),
            tags=_tags(record.get("tags")),
            category=_text(record.get("category")),
            color=_text(record.get("color")),
            like_count=_count(record, ["like_count", "likesCount"], ["likes"]),
            save_count=_count(record, ["save_count", "savedCount"], ["savedPins", "saves"]),
            user_id=_text(user) or None,
            created_at=_text(created_at) or None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "pin_id": self.pin_id,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "category": self.category,
            "color": self.color,
            "like_count": self.like_count,
            "save_count": self.save_count,
            "user_id": self.user_id,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class ScoredPin:
    pin: Pin
    score: float
