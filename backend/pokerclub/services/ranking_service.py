"""Leaderboards and statistics over finalized sessions.

Ties are broken by player id (ascending) so results do not depend on the
order sessions come back from storage.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable

from ..models.entities import SessionEntity
from . import ledger


@dataclass
class RankingEntry:
    player_id: str
    name: str
    profit: int


@dataclass
class BiggestWin:
    player_id: str
    name: str
    profit: int
    session_id: str
    session_name: str


@dataclass
class Highlights:
    total_pot: int = 0
    biggest_single_win: BiggestWin | None = None
    top_cumulative_winner: RankingEntry | None = None
    # profit holds the count of winning sessions here
    most_consistent_winner: RankingEntry | None = None


@dataclass
class ProfitPoint:
    session_id: str
    session_name: str
    profit: int
    cumulative: int


@dataclass
class PlayerStats:
    player_id: str
    total_profit: int = 0
    games_played: int = 0
    wins: int = 0
    win_rate: float = 0.0
    total_invested: int = 0
    biggest_win: int = 0
    history: list[ProfitPoint] = field(default_factory=list)


def session_day(session: SessionEntity) -> dt.date:
    if session.game_date is not None:
        return session.game_date
    parsed = ledger.parse_session_date(session.name)
    return parsed if parsed is not None else session.created_at.date()


def chronological(sessions: Iterable[SessionEntity]) -> list[SessionEntity]:
    """Oldest first, by game date then creation time."""
    return sorted(sessions, key=lambda s: (session_day(s), s.created_at))


def _ranked(profits: dict[str, int], names: dict[str, str]) -> list[RankingEntry]:
    return [
        RankingEntry(player_id=pid, name=names[pid], profit=total)
        for pid, total in sorted(profits.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def _accumulate(sessions: Iterable[SessionEntity]) -> tuple[dict[str, int], dict[str, str]]:
    profits: dict[str, int] = {}
    names: dict[str, str] = {}
    for session in chronological(sessions):
        for p in session.participants:
            profits[p.player_id] = profits.get(p.player_id, 0) + ledger.profit(p)
            names[p.player_id] = p.name
    return profits, names


def available_years(sessions: Iterable[SessionEntity]) -> list[int]:
    return sorted({session_day(s).year for s in sessions}, reverse=True)


def annual_ranking(sessions: Iterable[SessionEntity], year: int) -> list[RankingEntry]:
    in_year = [s for s in sessions if session_day(s).year == year]
    return _ranked(*_accumulate(in_year))


def latest_session(sessions: Iterable[SessionEntity]) -> SessionEntity | None:
    ordered = chronological(sessions)
    return ordered[-1] if ordered else None


def last_game_ranking(sessions: Iterable[SessionEntity]) -> list[RankingEntry]:
    last = latest_session(sessions)
    if last is None:
        return []
    return _ranked(*_accumulate([last]))


def compute_highlights(sessions: Iterable[SessionEntity]) -> Highlights:
    ordered = chronological(sessions)
    out = Highlights()
    if not ordered:
        return out

    win_counts: dict[str, int] = {}
    best_key: tuple[int, str, int] | None = None

    for idx, session in enumerate(ordered):
        for p in session.participants:
            out.total_pot += p.total_invested
            gain = ledger.profit(p)
            if gain > 0:
                win_counts[p.player_id] = win_counts.get(p.player_id, 0) + 1
            key = (-gain, p.player_id, idx)
            if best_key is None or key < best_key:
                best_key = key
                out.biggest_single_win = BiggestWin(p.player_id, p.name, gain, session.id, session.name)

    profits, names = _accumulate(ordered)
    ranked = _ranked(profits, names)
    if ranked:
        out.top_cumulative_winner = ranked[0]

    if win_counts:
        pid, count = min(win_counts.items(), key=lambda kv: (-kv[1], kv[0]))
        out.most_consistent_winner = RankingEntry(player_id=pid, name=names[pid], profit=count)

    return out


def player_stats(sessions: Iterable[SessionEntity], player_id: str) -> PlayerStats:
    stats = PlayerStats(player_id=player_id)
    cumulative = 0
    for session in chronological(sessions):
        p = session.participant(player_id)
        if p is None:
            continue
        gain = ledger.profit(p)
        stats.games_played += 1
        stats.total_profit += gain
        stats.total_invested += p.total_invested
        if gain > 0:
            stats.wins += 1
        stats.biggest_win = max(stats.biggest_win, gain)
        cumulative += gain
        stats.history.append(ProfitPoint(session.id, session.name, gain, cumulative))

    if stats.games_played:
        stats.win_rate = stats.wins / stats.games_played * 100
    return stats
