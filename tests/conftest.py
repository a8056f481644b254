from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from pinboard.interests import clamp_interests
from pinboard.models import Pin


def make_pin(pin_id, **kwargs) -> Pin:
    return Pin(pin_id=str(pin_id), **kwargs)


class FakePinStore:
    """In-memory stand-in for SupabaseService."""

    def __init__(self, pins: List[Pin], users: Optional[Dict[str, Dict[str, int]]] = None):
        self.pins = list(pins)
        self.users = {user_id: dict(interests) for user_id, interests in (users or {}).items()}
        self.updates: List[tuple] = []

    def get_pin_models(self) -> List[Pin]:
        return list(self.pins)

    def get_pin_model(self, pin_id: str) -> Optional[Pin]:
        return next((p for p in self.pins if p.pin_id == pin_id), None)

    def get_user(self, user_id: str):
        if user_id not in self.users:
            return None
        return {"user_id": user_id, "interests": self.users[user_id]}

    def get_user_interests(self, user_id: str) -> Dict[str, int]:
        return clamp_interests(self.users.get(user_id))

    def update_user_interests(self, user_id: str, interests: Dict[str, int]) -> Dict[str, int]:
        self.updates.append((user_id, dict(interests)))
        self.users[user_id] = dict(interests)
        return dict(interests)


@pytest.fixture
def beach_corpus() -> List[Pin]:
    return [
        make_pin("target", title="Golden Sunset", tags=["sunset", "beach"], category="nature"),
        make_pin("p1", title="Sunset Walk", tags=["Sunset", "beach "], category="Nature"),
        make_pin("p2", title="Office desk", tags=["desk"], category="work"),
    ]
