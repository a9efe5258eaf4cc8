from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db
from ..dal import repository
from ..models.schemas import (
    BiggestWinOut,
    ConsistentWinnerOut,
    HighlightsOut,
    RankingEntryOut,
    RankingOut,
)
from ..services import ranking_service

router = APIRouter(prefix="/api/ranking", tags=["ranking"])


@router.get("/years", response_model=list[int])
def available_years(db: DBSession = Depends(get_db)):
    return ranking_service.available_years(repository.list_sessions(db))


@router.get("/annual", response_model=RankingOut)
def annual_ranking(
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: DBSession = Depends(get_db),
) -> RankingOut:
    sessions = repository.list_sessions(db)
    if year is None:
        # most recent year with games, else the current one
        years = ranking_service.available_years(sessions)
        year = years[0] if years else dt.date.today().year

    entries = ranking_service.annual_ranking(sessions, year)
    return RankingOut(label=str(year), entries=[RankingEntryOut.model_validate(e) for e in entries])


@router.get("/last-game", response_model=RankingOut)
def last_game_ranking(db: DBSession = Depends(get_db)) -> RankingOut:
    sessions = repository.list_sessions(db)
    last = ranking_service.latest_session(sessions)
    entries = ranking_service.last_game_ranking(sessions)
    return RankingOut(
        label=last.name if last else None,
        entries=[RankingEntryOut.model_validate(e) for e in entries],
    )


@router.get("/highlights", response_model=HighlightsOut)
def highlights(db: DBSession = Depends(get_db)) -> HighlightsOut:
    h = ranking_service.compute_highlights(repository.list_sessions(db))
    consistent = None
    if h.most_consistent_winner is not None:
        consistent = ConsistentWinnerOut(
            player_id=h.most_consistent_winner.player_id,
            name=h.most_consistent_winner.name,
            wins=h.most_consistent_winner.profit,
        )
    return HighlightsOut(
        total_pot=h.total_pot,
        biggest_single_win=BiggestWinOut.model_validate(h.biggest_single_win) if h.biggest_single_win else None,
        top_cumulative_winner=(
            RankingEntryOut.model_validate(h.top_cumulative_winner) if h.top_cumulative_winner else None
        ),
        most_consistent_winner=consistent,
    )
