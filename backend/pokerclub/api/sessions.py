from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from ..core.config import settings
from ..core.deps import get_db, require_admin
from ..dal import repository
from ..models.schemas import HistoricSessionIn, ParticipantOut, SessionOut
from ..services import history_service
from ..services.history_service import HistoricEntry
from .serializers import session_out

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _entries(db: DBSession, payload: HistoricSessionIn) -> list[HistoricEntry]:
    players = {p.id: p for p in repository.get_players(db, [e.player_id for e in payload.entries])}
    return [
        HistoricEntry(player=players[e.player_id], total_invested=e.total_invested, final_chips=e.final_chips)
        for e in payload.entries
    ]


@router.get("", response_model=list[SessionOut])
def list_sessions(db: DBSession = Depends(get_db)):
    return [session_out(s) for s in repository.list_sessions(db)]


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: str, db: DBSession = Depends(get_db)) -> SessionOut:
    return session_out(repository.get_session(db, session_id))


@router.post("", response_model=SessionOut, dependencies=[Depends(require_admin)])
def record_session(payload: HistoricSessionIn, db: DBSession = Depends(get_db)) -> SessionOut:
    session = history_service.record_session(
        payload.name, _entries(db, payload), enforce_date=settings.ENFORCE_DATE_NAMES
    )
    repository.save_session(db, session)
    repository.commit(db)
    return session_out(session)


@router.put("/{session_id}", response_model=SessionOut, dependencies=[Depends(require_admin)])
def edit_session(session_id: str, payload: HistoricSessionIn, db: DBSession = Depends(get_db)) -> SessionOut:
    session = repository.get_session(db, session_id)
    history_service.edit_session(
        session, payload.name, _entries(db, payload), enforce_date=settings.ENFORCE_DATE_NAMES
    )
    repository.save_session(db, session)
    repository.commit(db)
    return session_out(session)


@router.delete("/{session_id}", dependencies=[Depends(require_admin)])
def delete_session(session_id: str, db: DBSession = Depends(get_db)):
    repository.delete_session(db, session_id)
    repository.commit(db)
    return {"ok": True}


@router.post(
    "/{session_id}/players/{player_id}/payment",
    response_model=ParticipantOut,
    dependencies=[Depends(require_admin)],
)
def toggle_payment(session_id: str, player_id: str, db: DBSession = Depends(get_db)) -> ParticipantOut:
    session = repository.get_session(db, session_id)
    participant = history_service.toggle_payment(session, player_id)
    repository.save_session(db, session)
    repository.commit(db)
    return ParticipantOut.model_validate(participant)
