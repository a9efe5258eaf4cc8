from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db, require_admin
from ..dal import repository
from ..models.schemas import CashierOut, PlayerBalanceOut, SettleOut
from ..services import cashier_service

router = APIRouter(prefix="/api/cashier", tags=["cashier"])


@router.get("", response_model=CashierOut)
def get_cashier(db: DBSession = Depends(get_db)) -> CashierOut:
    balances = cashier_service.compute_balances(repository.list_sessions(db), repository.list_players(db))
    totals = cashier_service.cashier_totals(balances)
    return CashierOut(
        balances=[PlayerBalanceOut.model_validate(b) for b in balances],
        total_to_receive=totals.total_to_receive,
        total_to_pay_out=totals.total_to_pay_out,
    )


@router.post("/{player_id}/settle", response_model=SettleOut, dependencies=[Depends(require_admin)])
def settle_player(player_id: str, db: DBSession = Depends(get_db)) -> SettleOut:
    repository.get_player(db, player_id)
    sessions = repository.list_sessions(db)

    changed = cashier_service.settle(sessions, player_id)
    if changed:
        repository.save_sessions(db, changed)
        repository.commit(db)

    return SettleOut(
        player_id=player_id,
        settled_sessions=len(changed),
        balance=cashier_service.player_balance(sessions, player_id),
    )
