import pytest


def _entries(*rows):
    return [{"player_id": pid, "total_invested": inv, "final_chips": chips} for pid, inv, chips in rows]


class TestPlayerEndpoints:
    def test_create_and_list(self, client, admin_headers):
        response = client.post(
            "/api/players", json={"name": " Ana ", "whatsapp": "5511", "pix_key": "ana@pix"}, headers=admin_headers
        )
        assert response.status_code == 200
        player = response.json()
        assert player["name"] == "Ana"
        assert player["is_active"] is True

        assert [p["id"] for p in client.get("/api/players").json()] == [player["id"]]

    def test_blank_name_is_rejected(self, client, admin_headers):
        response = client.post("/api/players", json={"name": "   "}, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["code"] == "empty_name"

    def test_update_and_toggle(self, client, admin_headers, create_players):
        (ana,) = create_players("Ana")

        response = client.put(f"/api/players/{ana}", json={"whatsapp": "999"}, headers=admin_headers)
        assert response.json()["whatsapp"] == "999"
        assert response.json()["name"] == "Ana"

        response = client.post(f"/api/players/{ana}/toggle-active", headers=admin_headers)
        assert response.json()["is_active"] is False
        assert client.get("/api/players", params={"active_only": True}).json() == []
        assert len(client.get("/api/players").json()) == 1

    def test_delete_player_without_history(self, client, admin_headers, create_players):
        (ana,) = create_players("Ana")
        assert client.delete(f"/api/players/{ana}", headers=admin_headers).status_code == 200
        assert client.get("/api/players").json() == []

    def test_delete_player_with_history_is_refused(self, client, admin_headers, create_players):
        ana, bia = create_players("Ana", "Bia")
        client.post(
            "/api/sessions", json={"name": "05/03/24", "entries": _entries((ana, 100, 100))}, headers=admin_headers
        )

        response = client.delete(f"/api/players/{ana}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "player_has_history"
        assert len(client.get("/api/players").json()) == 2

    def test_delete_player_in_live_game_is_refused(self, client, admin_headers, create_players):
        ids = create_players("Ana", "Bia")
        client.post("/api/live-game", json={"player_ids": ids}, headers=admin_headers)

        response = client.delete(f"/api/players/{ids[0]}", headers=admin_headers)
        assert response.status_code == 409

    def test_delete_player_at_dinner_is_refused(self, client, admin_headers, create_players):
        ana, bia = create_players("Ana", "Bia")
        client.post("/api/dinner", json={"player_ids": [ana]}, headers=admin_headers)

        response = client.delete(f"/api/players/{ana}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "player_has_history"

        client.post("/api/dinner/finalize", headers=admin_headers)
        assert client.delete(f"/api/players/{ana}", headers=admin_headers).status_code == 409
        assert client.delete(f"/api/players/{bia}", headers=admin_headers).status_code == 200

    def test_unknown_player(self, client, admin_headers):
        assert client.put("/api/players/ghost", json={"name": "X"}, headers=admin_headers).status_code == 404
        assert client.delete("/api/players/ghost", headers=admin_headers).status_code == 404
        assert client.get("/api/players/ghost/stats").status_code == 404

    def test_stats(self, client, admin_headers, create_players):
        ana, bia = create_players("Ana", "Bia")
        client.post(
            "/api/sessions",
            json={"name": "01/03/24", "entries": _entries((ana, 100, 150), (bia, 100, 50))},
            headers=admin_headers,
        )
        client.post(
            "/api/sessions",
            json={"name": "08/03/24", "entries": _entries((ana, 100, 80), (bia, 100, 120))},
            headers=admin_headers,
        )

        stats = client.get(f"/api/players/{ana}/stats").json()
        assert stats["games_played"] == 2
        assert stats["total_profit"] == 30
        assert stats["win_rate"] == 50.0
        assert [h["cumulative"] for h in stats["history"]] == [50, 30]


class TestSessionEndpoints:
    @pytest.fixture
    def ids(self, create_players):
        return create_players("Ana", "Bia", "Caio")

    def test_record_session(self, client, admin_headers, ids):
        ana, bia, caio = ids
        response = client.post(
            "/api/sessions",
            json={"name": "05/03/24", "entries": _entries((ana, 100, 50), (bia, "100", "150"), (caio, 0, 0))},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        session = response.json()
        assert session["game_date"] == "2024-03-05"
        assert session["total_pot"] == 200
        assert {p["player_id"] for p in session["participants"]} == {ana, bia}

        assert client.get(f"/api/sessions/{session['id']}").json() == session

    @pytest.mark.parametrize(
        ("name", "rows", "status", "code"),
        [
            ("05/03/24", [(0, 100, 50), (1, 100, 140)], 422, "unbalanced_session"),
            ("Friday", [(0, 100, 100)], 422, "invalid_date_format"),
            ("05/03/24", [(0, 0, 0)], 409, "zero_investment"),
            ("", [(0, 100, 100)], 422, "empty_name"),
        ],
    )
    def test_invalid_sessions_are_rejected(self, client, admin_headers, ids, name, rows, status, code):
        entries = _entries(*((ids[i], inv, chips) for i, inv, chips in rows))
        response = client.post("/api/sessions", json={"name": name, "entries": entries}, headers=admin_headers)

        assert response.status_code == status
        assert response.json()["code"] == code
        assert client.get("/api/sessions").json() == []

    def test_unknown_player_in_entries(self, client, admin_headers, ids):
        response = client.post(
            "/api/sessions", json={"name": "05/03/24", "entries": _entries(("ghost", 100, 100))}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_edit_session_keeps_payment_status(self, client, admin_headers, ids):
        ana, bia, caio = ids
        session = client.post(
            "/api/sessions",
            json={"name": "05/03/24", "entries": _entries((ana, 100, 50), (bia, 100, 150))},
            headers=admin_headers,
        ).json()
        client.post(f"/api/sessions/{session['id']}/players/{bia}/payment", headers=admin_headers)

        response = client.put(
            f"/api/sessions/{session['id']}",
            json={"name": "06/03/24", "entries": _entries((ana, 100, 40), (bia, 100, 140), (caio, 50, 70))},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        edited = response.json()
        assert edited["name"] == "06/03/24"
        status = {p["player_id"]: p["payment_status"] for p in edited["participants"]}
        assert status == {ana: "unsettled", bia: "settled", caio: "unsettled"}

        # a dropped player leaves the session entirely
        response = client.put(
            f"/api/sessions/{session['id']}",
            json={"name": "06/03/24", "entries": _entries((ana, 100, 100))},
            headers=admin_headers,
        )
        assert [p["player_id"] for p in response.json()["participants"]] == [ana]

    def test_rejected_edit_keeps_session(self, client, admin_headers, ids):
        ana, bia, _ = ids
        session = client.post(
            "/api/sessions",
            json={"name": "05/03/24", "entries": _entries((ana, 100, 50), (bia, 100, 150))},
            headers=admin_headers,
        ).json()

        response = client.put(
            f"/api/sessions/{session['id']}",
            json={"name": "05/03/24", "entries": _entries((ana, 100, 0))},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert client.get(f"/api/sessions/{session['id']}").json() == session

    def test_delete_session(self, client, admin_headers, ids):
        ana, _, _ = ids
        session = client.post(
            "/api/sessions", json={"name": "05/03/24", "entries": _entries((ana, 100, 100))}, headers=admin_headers
        ).json()

        assert client.delete(f"/api/sessions/{session['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/sessions/{session['id']}").status_code == 404
        assert client.delete(f"/api/sessions/{session['id']}", headers=admin_headers).status_code == 404

    def test_sessions_listed_newest_first(self, client, admin_headers, ids):
        ana, _, _ = ids
        for name in ("01/03/24", "15/03/24", "08/03/24"):
            client.post("/api/sessions", json={"name": name, "entries": _entries((ana, 100, 100))}, headers=admin_headers)
        assert [s["name"] for s in client.get("/api/sessions").json()] == ["15/03/24", "08/03/24", "01/03/24"]

    def test_live_game_is_not_listed_as_history(self, client, admin_headers, ids):
        client.post("/api/live-game", json={"player_ids": ids}, headers=admin_headers)
        assert client.get("/api/sessions").json() == []


class TestRankingEndpoints:
    @pytest.fixture
    def ids(self, client, admin_headers, create_players):
        ana, bia = create_players("Ana", "Bia")
        for name, rows in (
            ("20/12/23", _entries((ana, 100, 0), (bia, 100, 200))),
            ("03/03/24", _entries((ana, 100, 150), (bia, 100, 50))),
            ("10/03/24", _entries((ana, 100, 80), (bia, 100, 120))),
        ):
            client.post("/api/sessions", json={"name": name, "entries": rows}, headers=admin_headers)
        return ana, bia

    def test_years(self, client, ids):
        assert client.get("/api/ranking/years").json() == [2024, 2023]

    def test_annual_defaults_to_latest_year(self, client, ids):
        ana, bia = ids
        data = client.get("/api/ranking/annual").json()
        assert data["label"] == "2024"
        assert [(e["player_id"], e["profit"]) for e in data["entries"]] == [(ana, 30), (bia, -30)]

    def test_annual_for_given_year(self, client, ids):
        ana, bia = ids
        data = client.get("/api/ranking/annual", params={"year": 2023}).json()
        assert [(e["player_id"], e["profit"]) for e in data["entries"]] == [(bia, 100), (ana, -100)]

    def test_last_game(self, client, ids):
        ana, bia = ids
        data = client.get("/api/ranking/last-game").json()
        assert data["label"] == "10/03/24"
        assert [(e["player_id"], e["profit"]) for e in data["entries"]] == [(bia, 20), (ana, -20)]

    def test_highlights(self, client, ids):
        ana, bia = ids
        data = client.get("/api/ranking/highlights").json()
        assert data["total_pot"] == 600
        assert data["biggest_single_win"]["player_id"] == bia
        assert data["biggest_single_win"]["profit"] == 100
        assert data["top_cumulative_winner"]["player_id"] == bia
        assert data["top_cumulative_winner"]["profit"] == 70
        assert data["most_consistent_winner"]["wins"] == 2
        assert data["most_consistent_winner"]["player_id"] == bia

    def test_empty_highlights(self, client):
        data = client.get("/api/ranking/highlights").json()
        assert data == {
            "total_pot": 0,
            "biggest_single_win": None,
            "top_cumulative_winner": None,
            "most_consistent_winner": None,
        }


class TestAdminEndpoints:
    def test_defaults_fall_back_to_settings(self, client):
        assert client.get("/api/defaults").json() == {"buy_in_amount": 50, "rebuy_amount": 50}

    def test_save_defaults(self, client, admin_headers):
        response = client.put("/api/defaults", json={"buy_in_amount": 200, "rebuy_amount": 100}, headers=admin_headers)
        assert response.status_code == 200
        assert client.get("/api/defaults").json() == {"buy_in_amount": 200, "rebuy_amount": 100}

    def test_negative_defaults_are_rejected(self, client, admin_headers):
        response = client.put("/api/defaults", json={"buy_in_amount": -1, "rebuy_amount": 100}, headers=admin_headers)
        assert response.status_code == 422

    def test_me(self, client, admin_headers):
        assert client.get("/api/me").json()["role"] == "visitor"
        me = client.get("/api/me", headers=admin_headers).json()
        assert me == {"uid": "admin-1", "role": "admin", "name": "Admin", "is_admin": True}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
