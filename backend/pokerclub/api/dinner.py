from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db, require_admin
from ..core.exceptions import ErrorCode, PreconditionError
from ..dal import repository
from ..models.entities import DinnerEntity
from ..models.schemas import DinnerCostsIn, DinnerOut, DinnerRenameIn, DinnerStartIn
from ..services.dinner_service import DinnerService
from .serializers import dinner_out

router = APIRouter(prefix="/api/dinner", tags=["dinner"])


def _require_live(db: DBSession) -> DinnerEntity:
    dinner = repository.get_live_dinner(db)
    if dinner is None:
        raise PreconditionError(ErrorCode.NO_ACTIVE_DINNER)
    return dinner


def _store(db: DBSession, dinner: DinnerEntity) -> DinnerOut:
    repository.save_dinner(db, dinner)
    repository.commit(db)
    return dinner_out(dinner)


@router.get("", response_model=DinnerOut | None)
def get_live_dinner(db: DBSession = Depends(get_db)):
    dinner = repository.get_live_dinner(db)
    return dinner_out(dinner) if dinner else None


@router.get("/history", response_model=list[DinnerOut])
def dinner_history(db: DBSession = Depends(get_db)):
    return [dinner_out(d) for d in repository.list_dinner_history(db)]


@router.post("", response_model=DinnerOut, dependencies=[Depends(require_admin)])
def start_dinner(payload: DinnerStartIn, db: DBSession = Depends(get_db)) -> DinnerOut:
    current = repository.get_live_dinner(db)
    players = repository.get_players(db, payload.player_ids)
    dinner = DinnerService.start_dinner(current, players, name=payload.name, dinner_date=payload.dinner_date)
    return _store(db, dinner)


@router.put("/costs", response_model=DinnerOut, dependencies=[Depends(require_admin)])
def set_costs(payload: DinnerCostsIn, db: DBSession = Depends(get_db)) -> DinnerOut:
    dinner = _require_live(db)
    DinnerService.set_costs(dinner, food=payload.total_food_cost, drink=payload.total_drink_cost)
    return _store(db, dinner)


@router.put("/name", response_model=DinnerOut, dependencies=[Depends(require_admin)])
def rename_dinner(payload: DinnerRenameIn, db: DBSession = Depends(get_db)) -> DinnerOut:
    dinner = _require_live(db)
    DinnerService.rename(dinner, payload.name)
    return _store(db, dinner)


@router.post("/participants/{player_id}/eating", response_model=DinnerOut, dependencies=[Depends(require_admin)])
def toggle_eating(player_id: str, db: DBSession = Depends(get_db)) -> DinnerOut:
    dinner = _require_live(db)
    DinnerService.toggle_eating(dinner, player_id)
    return _store(db, dinner)


@router.post("/participants/{player_id}/drinking", response_model=DinnerOut, dependencies=[Depends(require_admin)])
def toggle_drinking(player_id: str, db: DBSession = Depends(get_db)) -> DinnerOut:
    dinner = _require_live(db)
    DinnerService.toggle_drinking(dinner, player_id)
    return _store(db, dinner)


@router.post("/cancel", dependencies=[Depends(require_admin)])
def cancel_dinner(db: DBSession = Depends(get_db)):
    dinner = _require_live(db)
    DinnerService.cancel(dinner)
    repository.delete_dinner(db, dinner)
    repository.commit(db)
    return {"ok": True}


@router.post("/finalize", response_model=DinnerOut, dependencies=[Depends(require_admin)])
def finalize_dinner(db: DBSession = Depends(get_db)) -> DinnerOut:
    dinner = DinnerService.finalize(repository.get_live_dinner(db))
    return _store(db, dinner)
