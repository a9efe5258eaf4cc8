"""Dinner cost splitting: food and drink pools shared by whoever opted in."""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from ..core.exceptions import ErrorCode, PreconditionError, ValidationError
from ..models.entities import DinnerEntity, DinnerParticipant, PlayerEntity
from . import ledger

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
# Numeric(12, 2) upper bound
MAX_COST = Decimal("9999999999.99")


@dataclass
class DinnerShare:
    player_id: str
    name: str
    is_eating: bool
    is_drinking: bool
    amount_owed: Decimal


@dataclass
class DinnerSplit:
    eating_count: int = 0
    drinking_count: int = 0
    food_per_person: Decimal = Decimal("0")
    drink_per_person: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    shares: list[DinnerShare] = field(default_factory=list)


def clamp_cost(value: Any) -> Decimal:
    """Costs follow the same clamping policy as chips, but keep cents and cap at MAX_COST."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    if not amount.is_finite() or amount < 0:
        return Decimal("0")
    if amount > MAX_COST:
        return MAX_COST
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def per_person_cost(total_cost: Decimal, opted_in_count: int) -> Decimal:
    if opted_in_count <= 0:
        return Decimal("0")
    return (Decimal(total_cost) / opted_in_count).quantize(CENTS, rounding=ROUND_HALF_UP)


def amount_owed(participant: DinnerParticipant, food_per_person: Decimal, drink_per_person: Decimal) -> Decimal:
    owed = Decimal("0")
    if participant.is_eating:
        owed += food_per_person
    if participant.is_drinking:
        owed += drink_per_person
    return owed


def split(dinner: DinnerEntity) -> DinnerSplit:
    eating = sum(1 for p in dinner.participants if p.is_eating)
    drinking = sum(1 for p in dinner.participants if p.is_drinking)
    food_pp = per_person_cost(dinner.total_food_cost, eating)
    drink_pp = per_person_cost(dinner.total_drink_cost, drinking)
    return DinnerSplit(
        eating_count=eating,
        drinking_count=drinking,
        food_per_person=food_pp,
        drink_per_person=drink_pp,
        total_cost=dinner.total_food_cost + dinner.total_drink_cost,
        shares=[
            DinnerShare(p.player_id, p.name, p.is_eating, p.is_drinking, amount_owed(p, food_pp, drink_pp))
            for p in dinner.participants
        ],
    )


class DinnerService:
    @staticmethod
    def start_dinner(
        current: DinnerEntity | None,
        players: Iterable[PlayerEntity],
        name: str | None = None,
        dinner_date: dt.date | None = None,
    ) -> DinnerEntity:
        if current is not None:
            raise PreconditionError(ErrorCode.DINNER_ALREADY_ACTIVE)

        unique: dict[str, PlayerEntity] = {}
        for p in players:
            unique.setdefault(p.id, p)
        if not unique:
            raise PreconditionError(ErrorCode.NO_PLAYERS)

        day = dinner_date or dt.date.today()
        dinner = DinnerEntity(
            name=(name or "").strip() or f"Jantar {ledger.format_session_name(day)}",
            dinner_date=day,
            participants=[DinnerParticipant(player_id=p.id, name=p.name) for p in unique.values()],
        )
        logger.info(f"Dinner '{dinner.name}' started with {len(dinner.participants)} participants")
        return dinner

    @staticmethod
    def set_costs(dinner: DinnerEntity, food: Any = None, drink: Any = None) -> DinnerEntity:
        if food is not None:
            dinner.total_food_cost = clamp_cost(food)
        if drink is not None:
            dinner.total_drink_cost = clamp_cost(drink)
        return dinner

    @staticmethod
    def require_participant(dinner: DinnerEntity, player_id: str) -> DinnerParticipant:
        p = dinner.participant(player_id)
        if p is None:
            raise PreconditionError(ErrorCode.PLAYER_NOT_IN_GAME)
        return p

    @staticmethod
    def toggle_eating(dinner: DinnerEntity, player_id: str) -> DinnerParticipant:
        p = DinnerService.require_participant(dinner, player_id)
        p.is_eating = not p.is_eating
        return p

    @staticmethod
    def toggle_drinking(dinner: DinnerEntity, player_id: str) -> DinnerParticipant:
        p = DinnerService.require_participant(dinner, player_id)
        p.is_drinking = not p.is_drinking
        return p

    @staticmethod
    def rename(dinner: DinnerEntity, name: str) -> DinnerEntity:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError(ErrorCode.EMPTY_NAME)
        dinner.name = cleaned
        return dinner

    @staticmethod
    def cancel(dinner: DinnerEntity | None) -> None:
        if dinner is not None:
            logger.info(f"Dinner '{dinner.name}' cancelled")
        return None

    @staticmethod
    def finalize(dinner: DinnerEntity | None) -> DinnerEntity:
        if dinner is None:
            raise PreconditionError(ErrorCode.NO_ACTIVE_DINNER)
        dinner.status = "closed"
        logger.info(f"Dinner '{dinner.name}' finalized, total {dinner.total_food_cost + dinner.total_drink_cost}")
        return dinner
