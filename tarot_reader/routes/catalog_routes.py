"""FastAPI routes for the interpretation catalog.

Endpoints:
- GET /catalog/meta
- GET /catalog/cards
- GET /catalog/cards/{card_id}
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..catalog import Position
from ..errors import NotFound
from ..narrative import HIGH_INTENSITY_CARDS, Theme, theme_of
from .session_routes import SessionHandle, get_session

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/meta")
def meta(session: SessionHandle = Depends(get_session)) -> Dict[str, Any]:
    catalog = session.engine.catalog
    return {
        "card_count": catalog.loaded_count,
        "ready": catalog.is_ready(),
        "positions": [p.value for p in Position],
        "themes": [t.value for t in Theme],
    }


@router.get("/cards")
def cards(session: SessionHandle = Depends(get_session)) -> Dict[str, Any]:
    catalog = session.engine.catalog
    return {"cards": [e.model_dump(by_alias=True) for e in catalog.entries()]}


@router.get("/cards/{card_id}")
def card(card_id: int, session: SessionHandle = Depends(get_session)) -> Dict[str, Any]:
    try:
        entry = session.engine.catalog.entry(card_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    theme = theme_of(card_id)
    return {
        "card": entry.model_dump(by_alias=True),
        "theme": theme.value if theme is not None else None,
        "high_intensity": card_id in HIGH_INTENSITY_CARDS,
    }
