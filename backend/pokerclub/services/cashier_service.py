"""Club cashier: outstanding balances per player and settlement.

Positive balance means the club owes the player; negative means the player
owes the club.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..models.entities import PaymentStatus, PlayerEntity, SessionEntity
from . import ledger

logger = logging.getLogger(__name__)


@dataclass
class UnpaidEntry:
    session_id: str
    session_name: str
    amount: int


@dataclass
class PlayerBalance:
    player: PlayerEntity
    balance: int = 0
    unpaid_sessions: list[UnpaidEntry] = field(default_factory=list)


@dataclass
class CashierTotals:
    total_to_receive: int
    total_to_pay_out: int


def _is_outstanding(participant) -> bool:
    return participant.payment_status is not PaymentStatus.SETTLED and ledger.profit(participant) != 0


def _entry_sort_key(entry: UnpaidEntry) -> tuple[int, int]:
    # newest first; names that are not dates go last
    day = ledger.parse_session_date(entry.session_name)
    if day is None:
        return (1, 0)
    return (0, -day.toordinal())


def compute_balances(sessions: Iterable[SessionEntity], players: Iterable[PlayerEntity]) -> list[PlayerBalance]:
    players_by_id = {p.id: p for p in players}
    balances: dict[str, PlayerBalance] = {}

    for session in sessions:
        for p in session.participants:
            if not _is_outstanding(p):
                continue
            player = players_by_id.get(p.player_id)
            if player is None:
                continue
            item = balances.setdefault(p.player_id, PlayerBalance(player=player))
            amount = ledger.profit(p)
            item.balance += amount
            item.unpaid_sessions.append(UnpaidEntry(session.id, session.name, amount))

    for player in players_by_id.values():
        if player.is_active and player.id not in balances:
            balances[player.id] = PlayerBalance(player=player)

    for item in balances.values():
        item.unpaid_sessions.sort(key=_entry_sort_key)

    return sorted(balances.values(), key=lambda b: (-b.balance, b.player.name, b.player.id))


def cashier_totals(balances: Iterable[PlayerBalance]) -> CashierTotals:
    to_receive = 0
    to_pay_out = 0
    for b in balances:
        if b.balance < 0:
            to_receive += -b.balance
        elif b.balance > 0:
            to_pay_out += b.balance
    return CashierTotals(total_to_receive=to_receive, total_to_pay_out=to_pay_out)


def player_balance(sessions: Iterable[SessionEntity], player_id: str) -> int:
    return sum(
        ledger.profit(p)
        for s in sessions
        for p in s.participants
        if p.player_id == player_id and _is_outstanding(p)
    )


def settle(sessions: Iterable[SessionEntity], player_id: str) -> list[SessionEntity]:
    """
    Mark every outstanding entry of ``player_id`` as settled.

    Returns the sessions that changed, to be written in one batch. A second
    call finds nothing to change and returns an empty list.
    """
    changed: list[SessionEntity] = []
    total = 0
    for session in sessions:
        touched = False
        for p in session.participants:
            if p.player_id == player_id and _is_outstanding(p):
                total += ledger.profit(p)
                p.payment_status = PaymentStatus.SETTLED
                touched = True
        if touched:
            changed.append(session)

    if changed:
        logger.info(f"Settled player {player_id}: {total} across {len(changed)} sessions")
    return changed
