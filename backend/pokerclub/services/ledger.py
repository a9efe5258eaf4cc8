"""Session ledger rules shared by every flow that saves a session.

Pure functions over participants; no database access.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Any, Iterable

from ..core.exceptions import ErrorCode, ErrorMessages, PreconditionError, ValidationError
from ..models.entities import SessionParticipant

SESSION_NAME_FORMAT = "%d/%m/%y"
# largest amount a chip column (32-bit INTEGER) can store
MAX_CHIPS = 2**31 - 1
_SESSION_NAME_RE = re.compile(r"^\d{2}/\d{2}/\d{2}$")


def profit(participant: SessionParticipant) -> int:
    return participant.final_chips - participant.total_invested


def total_invested(participants: Iterable[SessionParticipant]) -> int:
    return sum(p.total_invested for p in participants)


def total_distributed(participants: Iterable[SessionParticipant]) -> int:
    return sum(p.final_chips for p in participants)


def is_balanced(participants: Iterable[SessionParticipant]) -> bool:
    """Chips handed back equal cash collected, and something was collected."""
    participants = list(participants)
    invested = total_invested(participants)
    return invested > 0 and invested == total_distributed(participants)


def require_balanced(participants: Iterable[SessionParticipant]) -> None:
    """
    Raise unless the participants form a saveable session.

    Raises:
        PreconditionError: nothing was invested and nothing distributed
        ValidationError: invested and distributed totals differ
    """
    participants = list(participants)
    invested = total_invested(participants)
    distributed = total_distributed(participants)

    if invested == 0 and distributed == 0:
        raise PreconditionError(ErrorCode.ZERO_INVESTMENT)

    if invested <= 0 or invested != distributed:
        raise ValidationError(
            ErrorCode.UNBALANCED_SESSION,
            f"{ErrorMessages.UNBALANCED_SESSION} (invested {invested}, distributed {distributed})",
        )


def parse_session_date(name: str | None) -> dt.date | None:
    """Return the date encoded in a DD/MM/YY session name, or None."""
    if not name or not _SESSION_NAME_RE.match(name.strip()):
        return None
    try:
        day, month, year = (int(x) for x in name.strip().split("/"))
        return dt.date(2000 + year, month, day)
    except ValueError:
        return None


def validate_date_name(name: str) -> dt.date:
    day = parse_session_date(name)
    if day is None:
        raise ValidationError(ErrorCode.INVALID_DATE_FORMAT)
    return day


def normalize_session_name(name: str | None, enforce_date: bool = True) -> str:
    """Strip the name and apply the date rule when the calling flow enforces it."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(ErrorCode.EMPTY_NAME)
    if enforce_date:
        validate_date_name(cleaned)
    return cleaned


def format_session_name(day: dt.date) -> str:
    return day.strftime(SESSION_NAME_FORMAT)


def clamp_to_non_negative(value: Any) -> int:
    """
    ClampToNonNegative policy for numeric ledger fields.

    Bad input never raises: anything that is not a finite number becomes 0,
    negatives become 0, fractional values are truncated and anything
    above MAX_CHIPS is capped to it.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
        try:
            value = float(value)
        except ValueError:
            return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return min(MAX_CHIPS, max(0, int(number)))
