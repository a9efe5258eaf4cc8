from __future__ import annotations

import logging
from typing import Iterable

from ..core.exceptions import ErrorCode, ReferentialIntegrityError, ValidationError
from ..models.entities import PlayerEntity, SessionEntity

logger = logging.getLogger(__name__)


def _normalize_name(v: str | None) -> str:
    name = (v or "").strip()
    if not name:
        raise ValidationError(ErrorCode.EMPTY_NAME)
    return name


def create_player(name: str, whatsapp: str = "", pix_key: str = "") -> PlayerEntity:
    return PlayerEntity(name=_normalize_name(name), whatsapp=whatsapp.strip(), pix_key=pix_key.strip())


def update_player(
    player: PlayerEntity,
    name: str | None = None,
    whatsapp: str | None = None,
    pix_key: str | None = None,
    is_active: bool | None = None,
) -> PlayerEntity:
    if name is not None:
        player.name = _normalize_name(name)
    if whatsapp is not None:
        player.whatsapp = whatsapp.strip()
    if pix_key is not None:
        player.pix_key = pix_key.strip()
    if is_active is not None:
        player.is_active = is_active
    return player


def toggle_active(player: PlayerEntity) -> PlayerEntity:
    player.is_active = not player.is_active
    return player


def player_in_any_session(sessions: Iterable[SessionEntity], player_id: str) -> bool:
    return any(s.participant(player_id) is not None for s in sessions)


def ensure_deletable(sessions: Iterable[SessionEntity], player_id: str) -> None:
    if player_in_any_session(sessions, player_id):
        logger.warning(f"Refused delete of player {player_id}: referenced by session history")
        raise ReferentialIntegrityError(ErrorCode.PLAYER_HAS_HISTORY)
