"""Load and store ledger entities through SQLAlchemy.

Services work on plain entities; this module converts rows to entities and
back. Nothing is committed here except through ``commit``, so a whole flow
(ending a game, settling a player) lands in one transaction.
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import Any, Iterable, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession, selectinload

from ..core.config import settings
from ..core.exceptions import ErrorCode, NotFoundError, PersistenceError
from ..models.db import Dinner, DinnerGuest, GameDefaultsRow, GameSession, Participant, Player
from ..models.entities import (
    DinnerEntity,
    DinnerParticipant,
    GameDefaults,
    LiveGameEntity,
    PaymentStatus,
    PlayerEntity,
    SessionEntity,
    SessionParticipant,
)

logger = logging.getLogger(__name__)

LIVE = "live"
CLOSED = "closed"


def _as_int(v: Any, default: int = 0) -> int:
    if v is None:
        return int(default)
    return int(cast(int, v))


def commit(db: DBSession) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Commit failed: {e}")
        raise PersistenceError() from e


# Players


def _to_player(row: Player) -> PlayerEntity:
    return PlayerEntity(
        id=cast(str, row.id),
        name=cast(str, row.name),
        whatsapp=cast(str, row.whatsapp or ""),
        pix_key=cast(str, row.pix_key or ""),
        is_active=bool(row.is_active),
    )


def list_players(db: DBSession) -> list[PlayerEntity]:
    rows = db.query(Player).order_by(Player.name.asc(), Player.id.asc()).all()
    return [_to_player(r) for r in rows]


def get_player(db: DBSession, player_id: str) -> PlayerEntity:
    row = db.get(Player, player_id)
    if row is None:
        raise NotFoundError(ErrorCode.PLAYER_NOT_FOUND)
    return _to_player(row)


def get_players(db: DBSession, player_ids: Iterable[str]) -> list[PlayerEntity]:
    """Players in the order requested; unknown ids are an error."""
    ids = list(dict.fromkeys(player_ids))
    rows = {cast(str, r.id): r for r in db.query(Player).filter(Player.id.in_(ids)).all()} if ids else {}
    missing = [pid for pid in ids if pid not in rows]
    if missing:
        raise NotFoundError(ErrorCode.PLAYER_NOT_FOUND, f"Player not found: {', '.join(missing)}")
    return [_to_player(rows[pid]) for pid in ids]


def save_player(db: DBSession, player: PlayerEntity) -> None:
    row = db.get(Player, player.id)
    if row is None:
        row = Player(id=player.id)
        db.add(row)
    row.name = player.name
    row.whatsapp = player.whatsapp
    row.pix_key = player.pix_key
    row.is_active = player.is_active


def delete_player(db: DBSession, player_id: str) -> None:
    row = db.get(Player, player_id)
    if row is None:
        raise NotFoundError(ErrorCode.PLAYER_NOT_FOUND)
    db.delete(row)


# Game defaults


def get_defaults(db: DBSession) -> GameDefaults:
    row = db.get(GameDefaultsRow, 1)
    if row is None:
        return GameDefaults(buy_in_amount=settings.DEFAULT_BUY_IN, rebuy_amount=settings.DEFAULT_REBUY)
    return GameDefaults(buy_in_amount=_as_int(row.buy_in_amount), rebuy_amount=_as_int(row.rebuy_amount))


def save_defaults(db: DBSession, defaults: GameDefaults) -> None:
    row = db.get(GameDefaultsRow, 1)
    if row is None:
        row = GameDefaultsRow(id=1)
        db.add(row)
    row.buy_in_amount = defaults.buy_in_amount
    row.rebuy_amount = defaults.rebuy_amount


# Sessions and the live game


def _to_participant(row: Participant) -> SessionParticipant:
    return SessionParticipant(
        player_id=cast(str, row.player_id),
        name=cast(str, row.player_name),
        buy_in=_as_int(row.buy_in),
        rebuys=_as_int(row.rebuys),
        total_invested=_as_int(row.total_invested),
        final_chips=_as_int(row.final_chips),
        payment_status=PaymentStatus.from_flag(cast(str, row.payment_status) or None),
    )


def _to_session(row: GameSession) -> SessionEntity:
    return SessionEntity(
        id=cast(str, row.id),
        name=cast(str, row.name),
        game_date=cast(dt.date, row.game_date) if row.game_date is not None else None,
        created_at=cast(dt.datetime, row.created_at),
        participants=[_to_participant(p) for p in row.participants],
    )


def _to_live_game(row: GameSession, fallback_rebuy: int) -> LiveGameEntity:
    return LiveGameEntity(
        id=cast(str, row.id),
        name=cast(str, row.name),
        rebuy_amount=_as_int(row.rebuy_amount, fallback_rebuy),
        created_at=cast(dt.datetime, row.created_at),
        participants=[_to_participant(p) for p in row.participants],
    )


def _sync_participants(row: GameSession, participants: list[SessionParticipant]) -> None:
    # update rows in place so the (session, player) unique key never collides mid-flush
    existing = {cast(str, p.player_id): p for p in row.participants}
    keep = []
    for p in participants:
        prow = existing.get(p.player_id)
        if prow is None:
            prow = Participant(player_id=p.player_id)
        prow.player_name = p.name
        prow.buy_in = p.buy_in
        prow.rebuys = p.rebuys
        prow.total_invested = p.total_invested
        prow.final_chips = p.final_chips
        prow.payment_status = p.payment_status.value
        keep.append(prow)
    row.participants = keep


def _session_query(db: DBSession):
    return db.query(GameSession).options(selectinload(GameSession.participants))


def list_sessions(db: DBSession) -> list[SessionEntity]:
    """Finalized sessions, newest first."""
    rows = (
        _session_query(db)
        .filter(GameSession.status == CLOSED)
        .order_by(GameSession.game_date.desc(), GameSession.created_at.desc())
        .all()
    )
    return [_to_session(r) for r in rows]


def _closed_row(db: DBSession, session_id: str) -> GameSession:
    row = _session_query(db).filter(GameSession.id == session_id, GameSession.status == CLOSED).first()
    if row is None:
        raise NotFoundError(ErrorCode.SESSION_NOT_FOUND)
    return row


def get_session(db: DBSession, session_id: str) -> SessionEntity:
    return _to_session(_closed_row(db, session_id))


def save_session(db: DBSession, session: SessionEntity) -> None:
    """Insert or update a finalized session (also closes the live row with the same id)."""
    row = db.get(GameSession, session.id)
    if row is None:
        row = GameSession(id=session.id, created_at=session.created_at)
        db.add(row)
    if row.status != CLOSED:
        row.closed_at = dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)
    row.name = session.name
    row.game_date = session.game_date
    row.status = CLOSED
    _sync_participants(row, session.participants)


def save_sessions(db: DBSession, sessions: Iterable[SessionEntity]) -> None:
    for s in sessions:
        save_session(db, s)


def delete_session(db: DBSession, session_id: str) -> None:
    db.delete(_closed_row(db, session_id))


def get_live_game(db: DBSession) -> LiveGameEntity | None:
    row = (
        _session_query(db)
        .filter(GameSession.status == LIVE)
        .order_by(GameSession.created_at.desc())
        .first()
    )
    if row is None:
        return None
    # games started before the amount was stored charge the current default
    fallback = get_defaults(db).rebuy_amount if row.rebuy_amount is None else 0
    return _to_live_game(row, fallback)


def save_live_game(db: DBSession, game: LiveGameEntity) -> None:
    row = db.get(GameSession, game.id)
    if row is None:
        row = GameSession(id=game.id, created_at=game.created_at, status=LIVE)
        db.add(row)
    row.name = game.name
    row.rebuy_amount = game.rebuy_amount
    _sync_participants(row, game.participants)


def delete_live_game(db: DBSession, game: LiveGameEntity) -> None:
    row = db.get(GameSession, game.id)
    if row is not None and row.status == LIVE:
        db.delete(row)


# Dinners


def _to_dinner(row: Dinner) -> DinnerEntity:
    return DinnerEntity(
        id=cast(str, row.id),
        name=cast(str, row.name),
        dinner_date=cast(dt.date, row.dinner_date),
        total_food_cost=Decimal(row.total_food_cost or 0),
        total_drink_cost=Decimal(row.total_drink_cost or 0),
        status=cast(str, row.status),
        created_at=cast(dt.datetime, row.created_at),
        participants=[
            DinnerParticipant(
                player_id=cast(str, g.player_id),
                name=cast(str, g.player_name),
                is_eating=bool(g.is_eating),
                is_drinking=bool(g.is_drinking),
            )
            for g in row.participants
        ],
    )


def _dinner_query(db: DBSession):
    return db.query(Dinner).options(selectinload(Dinner.participants))


def get_live_dinner(db: DBSession) -> DinnerEntity | None:
    row = _dinner_query(db).filter(Dinner.status == LIVE).order_by(Dinner.created_at.desc()).first()
    return _to_dinner(row) if row else None


def list_dinner_history(db: DBSession) -> list[DinnerEntity]:
    rows = (
        _dinner_query(db)
        .filter(Dinner.status == CLOSED)
        .order_by(Dinner.dinner_date.desc(), Dinner.created_at.desc())
        .all()
    )
    return [_to_dinner(r) for r in rows]


def save_dinner(db: DBSession, dinner: DinnerEntity) -> None:
    row = db.get(Dinner, dinner.id)
    if row is None:
        row = Dinner(id=dinner.id, created_at=dinner.created_at)
        db.add(row)
    row.name = dinner.name
    row.dinner_date = dinner.dinner_date
    row.total_food_cost = dinner.total_food_cost
    row.total_drink_cost = dinner.total_drink_cost
    row.status = dinner.status

    existing = {cast(str, g.player_id): g for g in row.participants}
    keep = []
    for p in dinner.participants:
        g = existing.get(p.player_id) or DinnerGuest(player_id=p.player_id)
        g.player_name = p.name
        g.is_eating = p.is_eating
        g.is_drinking = p.is_drinking
        keep.append(g)
    row.participants = keep


def delete_dinner(db: DBSession, dinner: DinnerEntity) -> None:
    row = db.get(Dinner, dinner.id)
    if row is not None:
        db.delete(row)
