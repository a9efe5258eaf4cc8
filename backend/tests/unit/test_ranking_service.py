import datetime as dt

import pytest

from builders import make_participant, make_session
from pokerclub.services import ranking_service


@pytest.fixture
def two_sessions():
    # stored newest first, as the repository returns them
    return [
        make_session(
            "10/03/24",
            make_participant("ana", 100, 80),
            make_participant("bia", 100, 120),
            sid="second",
        ),
        make_session(
            "03/03/24",
            make_participant("ana", 100, 150),
            make_participant("bia", 100, 50),
            sid="first",
        ),
    ]


class TestRankings:
    def test_annual_ranking_is_cumulative(self, two_sessions):
        ranking = ranking_service.annual_ranking(two_sessions, 2024)
        assert [(e.player_id, e.profit) for e in ranking] == [("ana", 30), ("bia", -30)]

    def test_last_game_uses_latest_session_only(self, two_sessions):
        ranking = ranking_service.last_game_ranking(two_sessions)
        assert [(e.player_id, e.profit) for e in ranking] == [("bia", 20), ("ana", -20)]

    def test_year_window(self, two_sessions):
        older = make_session("20/12/23", make_participant("ana", 100, 0), make_participant("bia", 100, 200))
        sessions = [*two_sessions, older]

        assert [(e.player_id, e.profit) for e in ranking_service.annual_ranking(sessions, 2023)] == [
            ("bia", 100),
            ("ana", -100),
        ]
        assert ranking_service.annual_ranking(sessions, 2022) == []
        assert ranking_service.available_years(sessions) == [2024, 2023]

    def test_latest_name_wins(self):
        sessions = [
            make_session("01/03/24", make_participant("ana", 100, 100, name="Ana")),
            make_session("08/03/24", make_participant("ana", 100, 100, name="Ana Paula")),
        ]
        assert ranking_service.annual_ranking(sessions, 2024)[0].name == "Ana Paula"

    def test_ties_break_by_player_id(self):
        sessions = [
            make_session(
                "01/03/24",
                make_participant("zeca", 100, 150),
                make_participant("ana", 100, 150),
                make_participant("bia", 100, 0),
            )
        ]
        ranking = ranking_service.last_game_ranking(sessions)
        assert [e.player_id for e in ranking] == ["ana", "zeca", "bia"]

    def test_empty_history(self):
        assert ranking_service.last_game_ranking([]) == []
        assert ranking_service.latest_session([]) is None
        assert ranking_service.available_years([]) == []

    def test_session_without_date_name_falls_back_to_created_at(self):
        s = make_session("Friday", make_participant("ana", 100, 100), created_at=dt.datetime(2022, 6, 1, 20, 0))
        assert ranking_service.session_day(s) == dt.date(2022, 6, 1)
        assert ranking_service.available_years([s]) == [2022]

    def test_same_day_sessions_order_by_creation(self):
        early = make_session("01/03/24", make_participant("ana", 100, 0), created_at=dt.datetime(2024, 3, 1, 18))
        late = make_session("01/03/24", make_participant("ana", 100, 200), created_at=dt.datetime(2024, 3, 1, 23))
        assert ranking_service.latest_session([late, early]) is late


class TestHighlights:
    def test_highlights(self, two_sessions):
        h = ranking_service.compute_highlights(two_sessions)

        assert h.total_pot == 400
        assert h.biggest_single_win.player_id == "ana"
        assert h.biggest_single_win.profit == 50
        assert h.biggest_single_win.session_id == "first"
        assert (h.top_cumulative_winner.player_id, h.top_cumulative_winner.profit) == ("ana", 30)
        # one winning session each; id breaks the tie
        assert (h.most_consistent_winner.player_id, h.most_consistent_winner.profit) == ("ana", 1)

    def test_biggest_win_tie_prefers_lower_id_then_older_session(self):
        sessions = [
            make_session("08/03/24", make_participant("bia", 100, 200), make_participant("ana", 100, 0), sid="new"),
            make_session("01/03/24", make_participant("bia", 100, 200), make_participant("ana", 100, 0), sid="old"),
        ]
        h = ranking_service.compute_highlights(sessions)
        assert (h.biggest_single_win.player_id, h.biggest_single_win.session_id) == ("bia", "old")

    def test_most_consistent_counts_winning_sessions(self):
        sessions = [
            make_session("01/03/24", make_participant("ana", 100, 500), make_participant("bia", 400, 0)),
            make_session("08/03/24", make_participant("ana", 100, 0), make_participant("bia", 100, 200)),
            make_session("15/03/24", make_participant("ana", 100, 50), make_participant("bia", 100, 150)),
        ]
        h = ranking_service.compute_highlights(sessions)
        assert h.top_cumulative_winner.player_id == "ana"
        assert (h.most_consistent_winner.player_id, h.most_consistent_winner.profit) == ("bia", 2)

    def test_empty_history(self):
        h = ranking_service.compute_highlights([])
        assert h.total_pot == 0
        assert h.biggest_single_win is None
        assert h.top_cumulative_winner is None
        assert h.most_consistent_winner is None

    def test_no_winners(self):
        h = ranking_service.compute_highlights([make_session("01/03/24", make_participant("ana", 100, 100))])
        assert h.most_consistent_winner is None
        assert h.biggest_single_win.profit == 0


class TestPlayerStats:
    def test_stats(self, two_sessions):
        stats = ranking_service.player_stats(two_sessions, "ana")

        assert stats.games_played == 2
        assert stats.total_profit == 30
        assert stats.wins == 1
        assert stats.win_rate == 50.0
        assert stats.total_invested == 200
        assert stats.biggest_win == 50
        assert [(h.session_id, h.profit, h.cumulative) for h in stats.history] == [("first", 50, 50), ("second", -20, 30)]

    def test_player_without_games(self, two_sessions):
        stats = ranking_service.player_stats(two_sessions, "zeca")
        assert stats.games_played == 0
        assert stats.win_rate == 0.0
        assert stats.history == []
