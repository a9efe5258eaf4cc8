from __future__ import annotations

from ..models.entities import DinnerEntity, LiveGameEntity, SessionEntity
from ..models.schemas import DinnerOut, DinnerShareOut, LiveGameOut, ParticipantOut, SessionOut
from ..services import dinner_service, ledger


def live_game_out(game: LiveGameEntity) -> LiveGameOut:
    invested = ledger.total_invested(game.participants)
    distributed = ledger.total_distributed(game.participants)
    return LiveGameOut(
        id=game.id,
        name=game.name,
        created_at=game.created_at,
        participants=[ParticipantOut.model_validate(p) for p in game.participants],
        total_invested=invested,
        total_distributed=distributed,
        difference=distributed - invested,
        is_balanced=ledger.is_balanced(game.participants),
    )


def session_out(session: SessionEntity) -> SessionOut:
    ranked = sorted(session.participants, key=lambda p: (-ledger.profit(p), p.player_id))
    return SessionOut(
        id=session.id,
        name=session.name,
        game_date=session.game_date,
        created_at=session.created_at,
        participants=[ParticipantOut.model_validate(p) for p in ranked],
        total_pot=ledger.total_invested(session.participants),
    )


def dinner_out(dinner: DinnerEntity) -> DinnerOut:
    result = dinner_service.split(dinner)
    return DinnerOut(
        id=dinner.id,
        name=dinner.name,
        dinner_date=dinner.dinner_date,
        status=dinner.status,
        total_food_cost=dinner.total_food_cost,
        total_drink_cost=dinner.total_drink_cost,
        total_cost=result.total_cost,
        eating_count=result.eating_count,
        drinking_count=result.drinking_count,
        food_per_person=result.food_per_person,
        drink_per_person=result.drink_per_person,
        participants=[DinnerShareOut.model_validate(s) for s in result.shares],
    )
