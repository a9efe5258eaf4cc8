from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from ..core.config import settings
from ..core.deps import get_db, require_admin
from ..core.exceptions import ErrorCode, ErrorMessages, PreconditionError
from ..dal import repository
from ..models.entities import LiveGameEntity
from ..models.schemas import (
    AddPlayerIn,
    FinalChipsIn,
    LiveGameOut,
    ParticipantOut,
    RebuyOut,
    RenameIn,
    SessionOut,
    StartGameIn,
)
from ..services.live_game_service import LiveGameService
from .serializers import live_game_out, session_out

router = APIRouter(prefix="/api/live-game", tags=["live-game"])


def _require_live(db: DBSession) -> LiveGameEntity:
    game = repository.get_live_game(db)
    if game is None:
        raise PreconditionError(ErrorCode.NO_ACTIVE_GAME)
    return game


@router.get("", response_model=LiveGameOut | None)
def get_live_game(db: DBSession = Depends(get_db)):
    game = repository.get_live_game(db)
    return live_game_out(game) if game else None


@router.post("", response_model=LiveGameOut, dependencies=[Depends(require_admin)])
def start_game(payload: StartGameIn, db: DBSession = Depends(get_db)) -> LiveGameOut:
    current = repository.get_live_game(db)
    players = repository.get_players(db, payload.player_ids)

    minimum = settings.MIN_PLAYERS_TO_START
    if current is None and players and len(players) < minimum:
        raise PreconditionError(
            ErrorCode.NOT_ENOUGH_PLAYERS,
            ErrorMessages.NOT_ENOUGH_PLAYERS.format(count=minimum),
        )

    game = LiveGameService.start_game(current, players, repository.get_defaults(db), name=payload.name)
    repository.save_live_game(db, game)
    repository.commit(db)
    return live_game_out(game)


@router.post("/cancel", dependencies=[Depends(require_admin)])
def cancel_game(db: DBSession = Depends(get_db)):
    game = _require_live(db)
    LiveGameService.cancel(game)
    repository.delete_live_game(db, game)
    repository.commit(db)
    return {"ok": True}


@router.post("/end", response_model=SessionOut, dependencies=[Depends(require_admin)])
def end_game(db: DBSession = Depends(get_db)) -> SessionOut:
    game = _require_live(db)
    session = LiveGameService.end_game(game, enforce_date=settings.ENFORCE_DATE_NAMES)
    # same row: the live game becomes the closed session
    repository.save_session(db, session)
    repository.commit(db)
    return session_out(session)


@router.put("/name", response_model=LiveGameOut, dependencies=[Depends(require_admin)])
def rename_game(payload: RenameIn, db: DBSession = Depends(get_db)) -> LiveGameOut:
    game = _require_live(db)
    LiveGameService.rename_game(game, payload.name, enforce_date=settings.ENFORCE_DATE_NAMES)
    repository.save_live_game(db, game)
    repository.commit(db)
    return live_game_out(game)


@router.post("/players", response_model=LiveGameOut, dependencies=[Depends(require_admin)])
def add_player(payload: AddPlayerIn, db: DBSession = Depends(get_db)) -> LiveGameOut:
    game = _require_live(db)
    player = repository.get_player(db, payload.player_id)
    LiveGameService.add_player(game, player, repository.get_defaults(db))
    repository.save_live_game(db, game)
    repository.commit(db)
    return live_game_out(game)


@router.post("/players/{player_id}/rebuy", response_model=ParticipantOut, dependencies=[Depends(require_admin)])
def add_rebuy(player_id: str, db: DBSession = Depends(get_db)) -> ParticipantOut:
    game = _require_live(db)
    participant = LiveGameService.add_rebuy(game, player_id)
    repository.save_live_game(db, game)
    repository.commit(db)
    return ParticipantOut.model_validate(participant)


@router.delete("/players/{player_id}/rebuy", response_model=RebuyOut, dependencies=[Depends(require_admin)])
def remove_rebuy(player_id: str, db: DBSession = Depends(get_db)) -> RebuyOut:
    game = _require_live(db)
    changed = LiveGameService.remove_rebuy(game, player_id)
    if changed:
        repository.save_live_game(db, game)
        repository.commit(db)
    participant = LiveGameService.require_participant(game, player_id)
    return RebuyOut(changed=changed, participant=ParticipantOut.model_validate(participant))


@router.put("/players/{player_id}/chips", response_model=ParticipantOut, dependencies=[Depends(require_admin)])
def set_final_chips(player_id: str, payload: FinalChipsIn, db: DBSession = Depends(get_db)) -> ParticipantOut:
    game = _require_live(db)
    participant = LiveGameService.set_final_chips(game, player_id, payload.final_chips)
    repository.save_live_game(db, game)
    repository.commit(db)
    return ParticipantOut.model_validate(participant)
