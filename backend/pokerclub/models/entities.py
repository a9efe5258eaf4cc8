from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import uuid4


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class PaymentStatus(str, Enum):
    UNSETTLED = "unsettled"
    SETTLED = "settled"

    @classmethod
    def from_flag(cls, paid: bool | str | None) -> PaymentStatus:
        """Map a legacy ``paid`` flag (absent / False / True) to a status."""
        if isinstance(paid, str):
            return cls(paid)
        return cls.SETTLED if paid is True else cls.UNSETTLED


@dataclass
class PlayerEntity:
    name: str
    whatsapp: str = ""
    pix_key: str = ""
    is_active: bool = True
    id: str = field(default_factory=_new_id)


@dataclass
class SessionParticipant:
    player_id: str
    name: str
    buy_in: int = 0
    rebuys: int = 0
    total_invested: int = 0
    final_chips: int = 0
    payment_status: PaymentStatus = PaymentStatus.UNSETTLED

    @property
    def profit(self) -> int:
        return self.final_chips - self.total_invested

    @property
    def is_settled(self) -> bool:
        return self.payment_status is PaymentStatus.SETTLED


@dataclass
class SessionEntity:
    name: str
    participants: list[SessionParticipant] = field(default_factory=list)
    game_date: dt.date | None = None
    created_at: dt.datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    def participant(self, player_id: str) -> SessionParticipant | None:
        for p in self.participants:
            if p.player_id == player_id:
                return p
        return None


@dataclass
class LiveGameEntity:
    name: str
    participants: list[SessionParticipant] = field(default_factory=list)
    # rebuy price fixed when the game starts
    rebuy_amount: int = 0
    created_at: dt.datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    def participant(self, player_id: str) -> SessionParticipant | None:
        for p in self.participants:
            if p.player_id == player_id:
                return p
        return None


@dataclass
class GameDefaults:
    buy_in_amount: int
    rebuy_amount: int


@dataclass
class DinnerParticipant:
    player_id: str
    name: str
    is_eating: bool = False
    is_drinking: bool = False


@dataclass
class DinnerEntity:
    name: str
    dinner_date: dt.date
    total_food_cost: Decimal = Decimal("0")
    total_drink_cost: Decimal = Decimal("0")
    participants: list[DinnerParticipant] = field(default_factory=list)
    status: str = "live"  # live|closed
    created_at: dt.datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    def participant(self, player_id: str) -> DinnerParticipant | None:
        for p in self.participants:
            if p.player_id == player_id:
                return p
        return None
