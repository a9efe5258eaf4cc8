"""Manual entry and correction of finalized sessions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..core.exceptions import ErrorCode, PreconditionError
from ..models.entities import PaymentStatus, PlayerEntity, SessionEntity, SessionParticipant
from . import ledger

logger = logging.getLogger(__name__)


@dataclass
class HistoricEntry:
    player: PlayerEntity
    total_invested: Any = 0
    final_chips: Any = 0


def _participants(entries: Iterable[HistoricEntry]) -> list[SessionParticipant]:
    out: dict[str, SessionParticipant] = {}
    for e in entries:
        invested = ledger.clamp_to_non_negative(e.total_invested)
        chips = ledger.clamp_to_non_negative(e.final_chips)
        # an all-zero row means the player did not take part
        if invested == 0 and chips == 0:
            continue
        out[e.player.id] = SessionParticipant(
            player_id=e.player.id,
            name=e.player.name,
            buy_in=0,
            rebuys=0,
            total_invested=invested,
            final_chips=chips,
        )
    return list(out.values())


def record_session(name: str, entries: Iterable[HistoricEntry], enforce_date: bool = True) -> SessionEntity:
    clean_name = ledger.normalize_session_name(name, enforce_date)
    participants = _participants(entries)
    ledger.require_balanced(participants)

    for p in participants:
        p.payment_status = PaymentStatus.SETTLED if ledger.profit(p) == 0 else PaymentStatus.UNSETTLED

    session = SessionEntity(
        name=clean_name,
        participants=participants,
        game_date=ledger.parse_session_date(clean_name),
    )
    logger.info(f"Historic session '{clean_name}' recorded with pot {ledger.total_invested(participants)}")
    return session


def edit_session(
    session: SessionEntity,
    name: str,
    entries: Iterable[HistoricEntry],
    enforce_date: bool = True,
) -> SessionEntity:
    """Replace name and participants; returning players keep their payment status."""
    clean_name = ledger.normalize_session_name(name, enforce_date)
    participants = _participants(entries)
    ledger.require_balanced(participants)

    for p in participants:
        previous = session.participant(p.player_id)
        if previous is not None:
            p.payment_status = previous.payment_status
            p.buy_in = previous.buy_in
            p.rebuys = previous.rebuys
        elif ledger.profit(p) == 0:
            p.payment_status = PaymentStatus.SETTLED

    session.name = clean_name
    session.game_date = ledger.parse_session_date(clean_name)
    session.participants = participants
    logger.info(f"Session {session.id} edited")
    return session


def toggle_payment(session: SessionEntity, player_id: str) -> SessionParticipant:
    p = session.participant(player_id)
    if p is None:
        raise PreconditionError(ErrorCode.PLAYER_NOT_IN_GAME)
    p.payment_status = PaymentStatus.UNSETTLED if p.is_settled else PaymentStatus.SETTLED
    return p
