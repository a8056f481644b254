"""
FastAPI service for the pin feed and "find similar pins".
Pins and interest mappings are fetched from the store on every request and
scored in-process; nothing is cached between calls.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import MAX_SIMILAR_TOP_N, ApiSettings
from ..interests import InterestAction, apply_interest_action
from ..models import Pin
from ..ranking import rank_feed
from ..similarity import find_similar_pins
from ..supabase_client.supabase_service import get_supabase_service

LOGGER = logging.getLogger(__name__)

SETTINGS = ApiSettings.from_env()


# Pydantic models for request/response
class PinResponse(BaseModel):
    pin_id: str
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    category: str = ""
    color: str = ""
    like_count: int = 0
    save_count: int = 0
    user_id: Optional[str] = None
    created_at: Optional[str] = None


class ScoredPinResponse(BaseModel):
    pin: PinResponse
    score: float
    rank: int


class InterestUpdateRequest(BaseModel):
    pin_id: str = Field(..., description="Pin that was liked or saved")
    action: InterestAction = Field(..., description="'like' or 'save'")
    undo: bool = Field(False, description="True when the like/save is being removed")


class InterestsResponse(BaseModel):
    user_id: str
    interests: Dict[str, int]


class HealthResponse(BaseModel):
    status: str
    timestamp: str


# Initialize FastAPI app
app = FastAPI(
    title="Pinboard Ranking API",
    description="Personalized pin feed and similar-pin recommendations",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_pin_store():
    return get_supabase_service()


def _pin_response(pin: Pin) -> PinResponse:
    return PinResponse(**pin.to_record())


@app.on_event("startup")
async def startup_event():
    logging.basicConfig(
        level=SETTINGS.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    LOGGER.info("Pinboard ranking API started (similar top-n=%d)", SETTINGS.similar_top_n)


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint."""
    return {
        "message": "Pinboard Ranking API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", timestamp=datetime.utcnow().isoformat())


@app.get("/pins", response_model=List[PinResponse])
def list_pins(
    user_id: Optional[str] = Query(None, alias="userId"),
    store=Depends(get_pin_store),
):
    """
    All pins, newest first. When ``userId`` has category interests the feed
    is reordered so preferred categories come first.
    """
    try:
        pins = store.get_pin_models()
        interests = store.get_user_interests(user_id) if user_id else {}
    except Exception:
        LOGGER.exception("Failed to fetch pins")
        raise HTTPException(status_code=500, detail="Failed to fetch pins")

    if interests:
        pins = rank_feed(pins, interests)
    return [_pin_response(pin) for pin in pins]


def _similar(pin_id: str, limit: int, store) -> List:
    try:
        target = store.get_pin_model(pin_id)
        corpus = store.get_pin_models() if target is not None else []
    except Exception:
        LOGGER.exception("Similar-pin lookup failed for %s", pin_id)
        raise HTTPException(status_code=500, detail="Similar-pin search failed")

    if target is None:
        raise HTTPException(status_code=404, detail="Pin not found")
    return find_similar_pins(target, corpus, top_n=limit)


@app.get("/pins/{pin_id}/similar", response_model=List[PinResponse])
def similar_pins(
    pin_id: str,
    limit: int = Query(SETTINGS.similar_top_n, ge=1, le=MAX_SIMILAR_TOP_N),
    store=Depends(get_pin_store),
):
    """Pins most similar to ``pin_id``, best match first."""
    return [_pin_response(item.pin) for item in _similar(pin_id, limit, store)]


@app.get("/pins/{pin_id}/similar/scores", response_model=List[ScoredPinResponse])
def similar_pin_scores(
    pin_id: str,
    limit: int = Query(SETTINGS.similar_top_n, ge=1, le=MAX_SIMILAR_TOP_N),
    store=Depends(get_pin_store),
):
    """Same ranking as ``/similar`` with the scores included."""
    return [
        ScoredPinResponse(pin=_pin_response(item.pin), score=item.score, rank=rank)
        for rank, item in enumerate(_similar(pin_id, limit, store), start=1)
    ]


@app.get("/users/{user_id}/interests", response_model=InterestsResponse)
def get_interests(user_id: str, store=Depends(get_pin_store)):
    try:
        user = store.get_user(user_id)
        interests = store.get_user_interests(user_id) if user else {}
    except Exception:
        LOGGER.exception("Failed to fetch interests for %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch interests")
    if not user:
        raise HTTPException(status_code=404, detail=f"User '{user_id}' not found")
    return InterestsResponse(user_id=user_id, interests=interests)


@app.post("/users/{user_id}/interests", response_model=InterestsResponse)
def update_interests(
    user_id: str,
    request: InterestUpdateRequest,
    store=Depends(get_pin_store),
):
    """Record a like/save (or its removal) against the pin's category."""
    try:
        user = store.get_user(user_id)
        pin = store.get_pin_model(request.pin_id) if user else None
        current = store.get_user_interests(user_id) if pin else {}
    except Exception:
        LOGGER.exception("Interest update lookup failed for %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update interests")
    if not user:
        raise HTTPException(status_code=404, detail=f"User '{user_id}' not found")
    if pin is None:
        raise HTTPException(status_code=404, detail="Pin not found")

    updated = apply_interest_action(current, pin.category, request.action, undo=request.undo)
    if updated == current:
        return InterestsResponse(user_id=user_id, interests=current)
    try:
        saved = store.update_user_interests(user_id, updated)
    except Exception:
        LOGGER.exception("Failed to persist interests for %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update interests")
    return InterestsResponse(user_id=user_id, interests=saved)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
