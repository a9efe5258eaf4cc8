from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

from .entities import PaymentStatus


class PlayerOut(BaseModel):
    id: str
    name: str
    whatsapp: str
    pix_key: str
    is_active: bool

    class Config:
        from_attributes = True


class PlayerCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    whatsapp: str = Field(default="", max_length=64)
    pix_key: str = Field(default="", max_length=255)


class PlayerUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    whatsapp: str | None = Field(default=None, max_length=64)
    pix_key: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class GameDefaultsIn(BaseModel):
    buy_in_amount: int = Field(ge=0, le=2**31 - 1)
    rebuy_amount: int = Field(ge=0, le=2**31 - 1)


class GameDefaultsOut(BaseModel):
    buy_in_amount: int
    rebuy_amount: int

    class Config:
        from_attributes = True


class ParticipantOut(BaseModel):
    player_id: str
    name: str
    buy_in: int
    rebuys: int
    total_invested: int
    final_chips: int
    payment_status: PaymentStatus
    profit: int

    class Config:
        from_attributes = True


class LiveGameOut(BaseModel):
    id: str
    name: str
    created_at: dt.datetime
    participants: list[ParticipantOut]
    total_invested: int
    total_distributed: int
    # distributed minus invested; zero when chips match
    difference: int
    is_balanced: bool


class StartGameIn(BaseModel):
    player_ids: list[str]
    name: str | None = Field(default=None, max_length=64)


class RenameIn(BaseModel):
    name: str = Field(max_length=64)


class AddPlayerIn(BaseModel):
    player_id: str


class FinalChipsIn(BaseModel):
    # any value is accepted and clamped to a non-negative integer
    final_chips: Any = None


class RebuyOut(BaseModel):
    changed: bool
    participant: ParticipantOut


class SessionOut(BaseModel):
    id: str
    name: str
    game_date: dt.date | None = None
    created_at: dt.datetime
    participants: list[ParticipantOut]
    total_pot: int = 0

    class Config:
        from_attributes = True


class HistoricEntryIn(BaseModel):
    player_id: str
    total_invested: Any = 0
    final_chips: Any = 0


class HistoricSessionIn(BaseModel):
    name: str = Field(max_length=64)
    entries: list[HistoricEntryIn]


class UnpaidEntryOut(BaseModel):
    session_id: str
    session_name: str
    amount: int

    class Config:
        from_attributes = True


class PlayerBalanceOut(BaseModel):
    player: PlayerOut
    balance: int
    unpaid_sessions: list[UnpaidEntryOut]

    class Config:
        from_attributes = True


class CashierOut(BaseModel):
    balances: list[PlayerBalanceOut]
    total_to_receive: int
    total_to_pay_out: int


class SettleOut(BaseModel):
    player_id: str
    settled_sessions: int
    balance: int


class RankingEntryOut(BaseModel):
    player_id: str
    name: str
    profit: int

    class Config:
        from_attributes = True


class RankingOut(BaseModel):
    """Leaderboard for one window (a year or the last game)."""
    label: str | None = None
    entries: list[RankingEntryOut]


class BiggestWinOut(BaseModel):
    player_id: str
    name: str
    profit: int
    session_id: str
    session_name: str

    class Config:
        from_attributes = True


class ConsistentWinnerOut(BaseModel):
    player_id: str
    name: str
    wins: int


class HighlightsOut(BaseModel):
    total_pot: int
    biggest_single_win: BiggestWinOut | None = None
    top_cumulative_winner: RankingEntryOut | None = None
    most_consistent_winner: ConsistentWinnerOut | None = None


class ProfitPointOut(BaseModel):
    session_id: str
    session_name: str
    profit: int
    cumulative: int

    class Config:
        from_attributes = True


class PlayerStatsOut(BaseModel):
    player_id: str
    total_profit: int
    games_played: int
    wins: int
    win_rate: float
    total_invested: int
    biggest_win: int
    history: list[ProfitPointOut]

    class Config:
        from_attributes = True


class DinnerStartIn(BaseModel):
    player_ids: list[str]
    name: str | None = Field(default=None, max_length=120)
    dinner_date: dt.date | None = None


class DinnerCostsIn(BaseModel):
    total_food_cost: Any = None
    total_drink_cost: Any = None


class DinnerRenameIn(BaseModel):
    name: str = Field(max_length=120)


class DinnerShareOut(BaseModel):
    player_id: str
    name: str
    is_eating: bool
    is_drinking: bool
    amount_owed: float

    class Config:
        from_attributes = True


class DinnerOut(BaseModel):
    id: str
    name: str
    dinner_date: dt.date
    status: str
    total_food_cost: float
    total_drink_cost: float
    total_cost: float
    eating_count: int
    drinking_count: int
    food_per_person: float
    drink_per_person: float
    participants: list[DinnerShareOut]
