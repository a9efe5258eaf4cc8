from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import HTTPException
from jose import ExpiredSignatureError, JWTError, jwt

from .config import settings

ROLES = ("owner", "admin", "pending", "visitor")


def create_access_token(
    subject: str,
    role: str,
    name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Mint a token the way the identity provider does (used by tooling and tests)."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=int(settings.JWT_EXPIRES_MINUTES))
    )

    payload: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "name": name,
        "exp": expire,
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid token")

    role = payload.get("role")
    if role not in ROLES:
        role = "visitor"

    return {
        "sub": str(sub),
        "role": role,
        "name": payload.get("name"),
    }
