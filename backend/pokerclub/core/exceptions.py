"""Ledger error taxonomy.

Every error carries a machine-readable ``code`` and a human message. The
HTTP layer maps each class to a status code in ``main.create_app``.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNBALANCED_SESSION = "unbalanced_session"
    INVALID_DATE_FORMAT = "invalid_date_format"
    EMPTY_NAME = "empty_name"
    ZERO_INVESTMENT = "zero_investment"
    GAME_ALREADY_ACTIVE = "game_already_active"
    NO_ACTIVE_GAME = "no_active_game"
    DINNER_ALREADY_ACTIVE = "dinner_already_active"
    NO_ACTIVE_DINNER = "no_active_dinner"
    NO_PLAYERS = "no_players"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    PLAYER_ALREADY_IN_GAME = "player_already_in_game"
    PLAYER_NOT_IN_GAME = "player_not_in_game"
    PLAYER_HAS_HISTORY = "player_has_history"
    PLAYER_NOT_FOUND = "player_not_found"
    SESSION_NOT_FOUND = "session_not_found"
    PERSISTENCE_FAILED = "persistence_failed"


class ErrorMessages:
    UNBALANCED_SESSION = "Total invested must be greater than zero and equal to total final chips"
    INVALID_DATE_FORMAT = "Session name must be a valid date in DD/MM/YY format"
    EMPTY_NAME = "Name is required"
    ZERO_INVESTMENT = "Cannot save a session with zero total investment"
    GAME_ALREADY_ACTIVE = "A live game is already in progress"
    NO_ACTIVE_GAME = "No live game in progress"
    DINNER_ALREADY_ACTIVE = "A live dinner is already in progress"
    NO_ACTIVE_DINNER = "No live dinner in progress"
    NO_PLAYERS = "Select at least one player"
    NOT_ENOUGH_PLAYERS = "Select at least {count} players to start a game"
    PLAYER_ALREADY_IN_GAME = "Player is already in the game"
    PLAYER_NOT_IN_GAME = "Player is not part of this game"
    PLAYER_HAS_HISTORY = "Player has session history and cannot be deleted; deactivate instead"
    PLAYER_NOT_FOUND = "Player not found"
    SESSION_NOT_FOUND = "Session not found"
    PERSISTENCE_FAILED = "Could not save changes, please retry"


class LedgerError(Exception):
    """Base class for all accounting-core errors."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        self.code = code
        self.message = message or getattr(ErrorMessages, code.name)
        super().__init__(self.message)


class ValidationError(LedgerError):
    """User-correctable input problem; the call is refused, state unchanged."""


class PreconditionError(LedgerError):
    """Operation not allowed in the current state."""


class ReferentialIntegrityError(LedgerError):
    pass


class NotFoundError(LedgerError):
    pass


class PersistenceError(LedgerError):
    """The store rejected a write after the logical operation succeeded."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ErrorCode.PERSISTENCE_FAILED, message)
