from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .db import SessionLocal
from .security import decode_token

bearer = HTTPBearer(auto_error=False)


@dataclass
class Actor:
    uid: str
    role: str
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ("owner", "admin")


VISITOR = Actor(uid="", role="visitor")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> Actor:
    """The caller as asserted by the identity provider; anonymous callers are visitors."""
    if creds is None or not creds.credentials:
        return VISITOR

    payload = decode_token(creds.credentials)
    return Actor(uid=payload["sub"], role=payload["role"], name=payload.get("name"))


def require_roles(*roles: str) -> Callable[[Actor], Actor]:
    allowed = set(roles)

    def _dep(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor is VISITOR:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        if actor.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return actor

    return _dep


require_admin = require_roles("owner", "admin")
