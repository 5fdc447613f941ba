"""FastAPI routes for the reading session.

Endpoints:
- POST /session/reading
- POST /session/readings?count=N
- POST /session/interpret
- POST /session/deck/reset
- POST /session/deck/new
- POST /session/recover
- POST /session/shutdown
- GET /session/history
- GET /session/history/{index}
- DELETE /session/history
- GET /session/stats
- GET /session/status

One engine serves the whole process; every request takes its lock first.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..catalog import InterpretationCatalog
from ..config import Settings
from ..errors import InvalidArgument, NotFound, NotReady
from ..models import OperationResult, Reading, SessionStats
from ..session import SessionOrchestrator

log = logging.getLogger("tarot_reader.routes.session")

router = APIRouter(prefix="/session", tags=["session"])


class SessionHandle:
    def __init__(self, engine: SessionOrchestrator) -> None:
        self.engine = engine
        self.lock = threading.Lock()


_handle: Optional[SessionHandle] = None
_handle_lock = threading.Lock()


def create_engine(settings: Optional[Settings] = None) -> SessionOrchestrator:
    settings = settings or Settings.from_env()
    catalog = InterpretationCatalog.load(settings.meanings_path)
    return SessionOrchestrator(
        catalog,
        seed=settings.seed,
        reversal_probability=settings.reversal_probability,
    )


def get_session() -> SessionHandle:
    global _handle
    with _handle_lock:
        if _handle is None:
            try:
                _handle = SessionHandle(create_engine())
            except NotReady as e:
                log.error("Session engine unavailable: %s", e)
                raise HTTPException(status_code=503, detail=str(e))
        return _handle


class Placement(BaseModel):
    card_id: int = Field(..., description="Major Arcana number, 0-21.")
    reversed: bool = Field(False, description="Interpret the card reversed.")


class InterpretRequest(BaseModel):
    placements: List[Placement] = Field(..., description="Past, Present and Future, in that order.")


@router.post("/reading", response_model=OperationResult)
def perform_reading(session: SessionHandle = Depends(get_session)) -> OperationResult:
    with session.lock:
        return session.engine.perform_reading()


@router.post("/readings", response_model=List[OperationResult])
def perform_readings(count: int = 1, session: SessionHandle = Depends(get_session)) -> List[OperationResult]:
    with session.lock:
        try:
            return session.engine.perform_readings(count)
        except InvalidArgument as e:
            raise HTTPException(status_code=400, detail=str(e))


@router.post("/interpret", response_model=Reading)
def interpret(req: InterpretRequest, session: SessionHandle = Depends(get_session)) -> Reading:
    with session.lock:
        engine = session.engine
        try:
            cards = []
            for p in req.placements:
                card = engine.catalog.card_for(p.card_id)
                card.set_orientation(p.reversed)
                cards.append(card)
            return engine.interpret_cards(cards)
        except NotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidArgument as e:
            raise HTTPException(status_code=400, detail=str(e))
        except NotReady as e:
            raise HTTPException(status_code=503, detail=str(e))


@router.post("/deck/reset", response_model=OperationResult)
def reset_deck(session: SessionHandle = Depends(get_session)) -> OperationResult:
    with session.lock:
        return session.engine.reset_deck()


@router.post("/deck/new", response_model=OperationResult)
def create_new_deck(session: SessionHandle = Depends(get_session)) -> OperationResult:
    with session.lock:
        return session.engine.create_new_deck()


@router.post("/recover", response_model=OperationResult)
def recover(session: SessionHandle = Depends(get_session)) -> OperationResult:
    with session.lock:
        return session.engine.recover_from_error()


@router.post("/shutdown")
def shutdown(session: SessionHandle = Depends(get_session)) -> Dict[str, Any]:
    with session.lock:
        session.engine.shutdown()
        return {"ok": True, "state": session.engine.state.value}


@router.get("/history", response_model=List[Reading])
def history(session: SessionHandle = Depends(get_session)) -> List[Reading]:
    with session.lock:
        return list(session.engine.session_readings())


@router.get("/history/{index}", response_model=Reading)
def history_item(index: int, session: SessionHandle = Depends(get_session)) -> Reading:
    with session.lock:
        reading = session.engine.get_reading(index)
    if reading is None:
        raise HTTPException(status_code=404, detail=f"No reading at index {index}")
    return reading


@router.delete("/history", response_model=OperationResult)
def clear_history(session: SessionHandle = Depends(get_session)) -> OperationResult:
    with session.lock:
        return session.engine.clear_history()


@router.get("/stats", response_model=SessionStats)
def stats(session: SessionHandle = Depends(get_session)) -> SessionStats:
    with session.lock:
        return session.engine.session_stats()


@router.get("/status")
def status(session: SessionHandle = Depends(get_session)) -> Dict[str, Any]:
    with session.lock:
        engine = session.engine
        deck = engine.deck
        return {
            "state": engine.state.value,
            "description": engine.state.description,
            "ready": engine.is_ready(),
            "has_error": engine.has_error(),
            "last_error": engine.last_error,
            "deck": {
                "available": deck.size() if deck is not None else 0,
                "capacity": deck.capacity if deck is not None else 0,
                "status": deck.status() if deck is not None else "No deck available",
            },
            "quick_status": engine.quick_status(),
        }
