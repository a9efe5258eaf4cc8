from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Player(Base):
    __tablename__ = "players"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(120), nullable=False, index=True)
    whatsapp = Column(String(64), nullable=False, default="")
    pix_key = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)


class GameSession(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(64), nullable=False)
    game_date = Column(Date, nullable=True, index=True)
    status = Column(String(16), nullable=False, default="closed", index=True)  # live|closed
    created_at = Column(DateTime, nullable=False, default=_utcnow)
    closed_at = Column(DateTime, nullable=True)
    rebuy_amount = Column(Integer, nullable=True)  # set while live

    participants = relationship(
        "Participant",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Participant.id",
    )

    # at most one live game
    __table_args__ = (
        Index(
            "uq_sessions_single_live",
            "status",
            unique=True,
            sqlite_where=text("status = 'live'"),
            postgresql_where=text("status = 'live'"),
        ),
    )


class Participant(Base):
    __tablename__ = "session_participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(36), ForeignKey("sessions.id"), nullable=False, index=True)
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False, index=True)
    player_name = Column(String(120), nullable=False)
    buy_in = Column(Integer, nullable=False, default=0)
    rebuys = Column(Integer, nullable=False, default=0)
    total_invested = Column(Integer, nullable=False, default=0)
    final_chips = Column(Integer, nullable=False, default=0)
    payment_status = Column(String(16), nullable=False, default="unsettled")  # unsettled|settled

    session = relationship("GameSession", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("session_id", "player_id", name="uq_participant_session_player"),
    )


class GameDefaultsRow(Base):
    __tablename__ = "game_defaults"

    id = Column(Integer, primary_key=True, default=1)
    buy_in_amount = Column(Integer, nullable=False)
    rebuy_amount = Column(Integer, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class Dinner(Base):
    __tablename__ = "dinners"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(120), nullable=False)
    dinner_date = Column(Date, nullable=False, index=True)
    total_food_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total_drink_cost = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(16), nullable=False, default="live", index=True)  # live|closed
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    participants = relationship(
        "DinnerGuest",
        back_populates="dinner",
        cascade="all, delete-orphan",
        order_by="DinnerGuest.id",
    )

    __table_args__ = (
        Index(
            "uq_dinners_single_live",
            "status",
            unique=True,
            sqlite_where=text("status = 'live'"),
            postgresql_where=text("status = 'live'"),
        ),
    )


class DinnerGuest(Base):
    __tablename__ = "dinner_participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dinner_id = Column(String(36), ForeignKey("dinners.id"), nullable=False, index=True)
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False)
    player_name = Column(String(120), nullable=False)
    is_eating = Column(Boolean, nullable=False, default=False)
    is_drinking = Column(Boolean, nullable=False, default=False)

    dinner = relationship("Dinner", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("dinner_id", "player_id", name="uq_dinner_participant_player"),
    )
