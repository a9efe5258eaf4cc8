from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from ..core.deps import Actor, get_current_actor, get_db, require_admin
from ..dal import repository
from ..models.entities import GameDefaults
from ..models.schemas import GameDefaultsIn, GameDefaultsOut

router = APIRouter(prefix="/api", tags=["admin"])

logger = logging.getLogger(__name__)


@router.get("/defaults", response_model=GameDefaultsOut)
def get_defaults(db: DBSession = Depends(get_db)) -> GameDefaultsOut:
    return GameDefaultsOut.model_validate(repository.get_defaults(db))


@router.put("/defaults", response_model=GameDefaultsOut)
def save_defaults(
    payload: GameDefaultsIn,
    db: DBSession = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> GameDefaultsOut:
    defaults = GameDefaults(buy_in_amount=payload.buy_in_amount, rebuy_amount=payload.rebuy_amount)
    repository.save_defaults(db, defaults)
    repository.commit(db)
    logger.info(f"Game defaults set to buy-in {defaults.buy_in_amount}, rebuy {defaults.rebuy_amount} by {actor.uid}")
    return GameDefaultsOut.model_validate(defaults)


@router.get("/me")
def me(actor: Actor = Depends(get_current_actor)):
    return {"uid": actor.uid, "role": actor.role, "name": actor.name, "is_admin": actor.is_admin}
