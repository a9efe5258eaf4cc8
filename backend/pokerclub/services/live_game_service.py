from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Iterable

from ..core.exceptions import ErrorCode, PreconditionError
from ..models.entities import (
    GameDefaults,
    LiveGameEntity,
    PaymentStatus,
    PlayerEntity,
    SessionEntity,
    SessionParticipant,
)
from . import ledger

logger = logging.getLogger(__name__)


def _new_participant(player: PlayerEntity, defaults: GameDefaults) -> SessionParticipant:
    return SessionParticipant(
        player_id=player.id,
        name=player.name,
        buy_in=defaults.buy_in_amount,
        rebuys=0,
        total_invested=defaults.buy_in_amount,
        final_chips=0,
        payment_status=PaymentStatus.UNSETTLED,
    )


class LiveGameService:
    """Operations on the single in-progress game.

    The live game is passed in explicitly (``None`` when no game is running)
    and every operation validates before it mutates.
    """

    @staticmethod
    def start_game(
        current: LiveGameEntity | None,
        players: Iterable[PlayerEntity],
        defaults: GameDefaults,
        name: str | None = None,
        today: dt.date | None = None,
    ) -> LiveGameEntity:
        if current is not None:
            raise PreconditionError(ErrorCode.GAME_ALREADY_ACTIVE)

        # keep first occurrence, a player can only sit once
        unique: dict[str, PlayerEntity] = {}
        for p in players:
            unique.setdefault(p.id, p)
        if not unique:
            raise PreconditionError(ErrorCode.NO_PLAYERS)

        game_name = (name or "").strip() or ledger.format_session_name(today or dt.date.today())
        game = LiveGameEntity(
            name=game_name,
            participants=[_new_participant(p, defaults) for p in unique.values()],
            rebuy_amount=defaults.rebuy_amount,
        )
        logger.info(f"Live game '{game.name}' started with {len(game.participants)} players")
        return game

    @staticmethod
    def require_participant(game: LiveGameEntity, player_id: str) -> SessionParticipant:
        participant = game.participant(player_id)
        if participant is None:
            raise PreconditionError(ErrorCode.PLAYER_NOT_IN_GAME)
        return participant

    @staticmethod
    def add_rebuy(game: LiveGameEntity, player_id: str) -> SessionParticipant:
        p = LiveGameService.require_participant(game, player_id)
        p.rebuys += 1
        p.total_invested += game.rebuy_amount
        return p

    @staticmethod
    def remove_rebuy(game: LiveGameEntity, player_id: str) -> bool:
        """Undo one rebuy at the price it was charged.

        Returns False, changing nothing, when there is none to undo.
        """
        p = LiveGameService.require_participant(game, player_id)
        if p.rebuys <= 0:
            logger.warning(f"Refused rebuy removal for {player_id}: no rebuys")
            return False
        p.rebuys -= 1
        p.total_invested -= game.rebuy_amount
        return True

    @staticmethod
    def set_final_chips(game: LiveGameEntity, player_id: str, value: Any) -> SessionParticipant:
        p = LiveGameService.require_participant(game, player_id)
        p.final_chips = ledger.clamp_to_non_negative(value)
        return p

    @staticmethod
    def rename_game(game: LiveGameEntity, new_name: str, enforce_date: bool = True) -> LiveGameEntity:
        game.name = ledger.normalize_session_name(new_name, enforce_date)
        return game

    @staticmethod
    def add_player(game: LiveGameEntity, player: PlayerEntity, defaults: GameDefaults) -> SessionParticipant:
        if game.participant(player.id) is not None:
            raise PreconditionError(ErrorCode.PLAYER_ALREADY_IN_GAME)
        p = _new_participant(player, defaults)
        game.participants.append(p)
        return p

    @staticmethod
    def cancel(game: LiveGameEntity | None) -> None:
        if game is not None:
            logger.info(f"Live game '{game.name}' cancelled")
        return None

    @staticmethod
    def end_game(game: LiveGameEntity | None, enforce_date: bool = True) -> SessionEntity:
        """
        Freeze the live game into a historical session.

        Nothing on ``game`` changes; the caller stores the returned session
        and clears the live game in the same transaction.

        Raises:
            PreconditionError: no game, or zero total investment
            ValidationError: bad name or unbalanced totals
        """
        if game is None:
            raise PreconditionError(ErrorCode.NO_ACTIVE_GAME)

        name = ledger.normalize_session_name(game.name, enforce_date)
        ledger.require_balanced(game.participants)

        participants = [
            SessionParticipant(
                player_id=p.player_id,
                name=p.name,
                buy_in=p.buy_in,
                rebuys=p.rebuys,
                total_invested=p.total_invested,
                final_chips=p.final_chips,
                payment_status=PaymentStatus.SETTLED if ledger.profit(p) == 0 else PaymentStatus.UNSETTLED,
            )
            for p in game.participants
        ]
        session = SessionEntity(
            id=game.id,
            name=name,
            participants=participants,
            game_date=ledger.parse_session_date(name),
        )
        logger.info(
            f"Live game '{name}' ended: pot {ledger.total_invested(participants)}, "
            f"{len(participants)} players"
        )
        return session
