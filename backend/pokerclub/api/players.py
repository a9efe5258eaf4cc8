from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db, require_admin
from ..dal import repository
from ..models.schemas import PlayerCreateIn, PlayerOut, PlayerStatsOut, PlayerUpdateIn
from ..services import player_service, ranking_service

router = APIRouter(prefix="/api/players", tags=["players"])


@router.get("", response_model=list[PlayerOut])
def list_players(
    active_only: bool = Query(default=False),
    db: DBSession = Depends(get_db),
):
    players = repository.list_players(db)
    if active_only:
        players = [p for p in players if p.is_active]
    return [PlayerOut.model_validate(p) for p in players]


@router.post("", response_model=PlayerOut, dependencies=[Depends(require_admin)])
def create_player(payload: PlayerCreateIn, db: DBSession = Depends(get_db)) -> PlayerOut:
    player = player_service.create_player(payload.name, payload.whatsapp, payload.pix_key)
    repository.save_player(db, player)
    repository.commit(db)
    return PlayerOut.model_validate(player)


@router.put("/{player_id}", response_model=PlayerOut, dependencies=[Depends(require_admin)])
def update_player(player_id: str, payload: PlayerUpdateIn, db: DBSession = Depends(get_db)) -> PlayerOut:
    player = repository.get_player(db, player_id)
    player_service.update_player(
        player,
        name=payload.name,
        whatsapp=payload.whatsapp,
        pix_key=payload.pix_key,
        is_active=payload.is_active,
    )
    repository.save_player(db, player)
    repository.commit(db)
    return PlayerOut.model_validate(player)


@router.post("/{player_id}/toggle-active", response_model=PlayerOut, dependencies=[Depends(require_admin)])
def toggle_player_status(player_id: str, db: DBSession = Depends(get_db)) -> PlayerOut:
    player = player_service.toggle_active(repository.get_player(db, player_id))
    repository.save_player(db, player)
    repository.commit(db)
    return PlayerOut.model_validate(player)


@router.delete("/{player_id}", dependencies=[Depends(require_admin)])
def delete_player(player_id: str, db: DBSession = Depends(get_db)):
    repository.get_player(db, player_id)

    # games and dinners, live or past
    referencing: list = [*repository.list_sessions(db), *repository.list_dinner_history(db)]
    for live in (repository.get_live_game(db), repository.get_live_dinner(db)):
        if live is not None:
            referencing.append(live)
    player_service.ensure_deletable(referencing, player_id)

    repository.delete_player(db, player_id)
    repository.commit(db)
    return {"ok": True}


@router.get("/{player_id}/stats", response_model=PlayerStatsOut)
def player_stats(player_id: str, db: DBSession = Depends(get_db)) -> PlayerStatsOut:
    repository.get_player(db, player_id)
    stats = ranking_service.player_stats(repository.list_sessions(db), player_id)
    return PlayerStatsOut.model_validate(stats)
