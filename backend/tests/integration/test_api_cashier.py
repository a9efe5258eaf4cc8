import pytest


def _record(client, headers, name, rows):
    payload = {
        "name": name,
        "entries": [{"player_id": pid, "total_invested": inv, "final_chips": chips} for pid, inv, chips in rows],
    }
    response = client.post("/api/sessions", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestCashierEndpoints:
    @pytest.fixture
    def ids(self, client, admin_headers, create_players):
        ana, bia, caio = create_players("Ana", "Bia", "Caio")
        _record(client, admin_headers, "01/03/24", [(ana, 100, 130), (bia, 100, 70), (caio, 100, 100)])
        _record(client, admin_headers, "08/03/24", [(ana, 100, 120), (bia, 100, 80)])
        return ana, bia, caio

    def _balances(self, client):
        data = client.get("/api/cashier").json()
        return data, {b["player"]["id"]: b for b in data["balances"]}

    def test_cashier_view(self, client, ids):
        ana, bia, caio = ids
        data, balances = self._balances(client)

        assert [b["player"]["id"] for b in data["balances"]] == [ana, caio, bia]
        assert balances[bia]["balance"] == -50
        assert [(e["session_name"], e["amount"]) for e in balances[bia]["unpaid_sessions"]] == [
            ("08/03/24", -20),
            ("01/03/24", -30),
        ]
        assert balances[caio]["balance"] == 0
        assert balances[caio]["unpaid_sessions"] == []
        assert data["total_to_receive"] == 50
        assert data["total_to_pay_out"] == 50

    def test_settle_is_persisted_and_idempotent(self, client, admin_headers, ids):
        _, bia, _ = ids

        response = client.post(f"/api/cashier/{bia}/settle", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"player_id": bia, "settled_sessions": 2, "balance": 0}

        data, balances = self._balances(client)
        assert balances[bia]["balance"] == 0
        assert balances[bia]["unpaid_sessions"] == []
        assert data["total_to_receive"] == 0
        assert data["total_to_pay_out"] == 50

        response = client.post(f"/api/cashier/{bia}/settle", headers=admin_headers)
        assert response.json()["settled_sessions"] == 0
        assert self._balances(client)[0] == data

    def test_settled_entries_show_in_sessions(self, client, admin_headers, ids):
        _, bia, _ = ids
        client.post(f"/api/cashier/{bia}/settle", headers=admin_headers)

        for session in client.get("/api/sessions").json():
            status = {p["player_id"]: p["payment_status"] for p in session["participants"]}
            assert status[bia] == "settled"

    def test_toggle_single_payment(self, client, admin_headers, ids):
        ana, _, _ = ids
        session = client.get("/api/sessions").json()[0]

        response = client.post(f"/api/sessions/{session['id']}/players/{ana}/payment", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["payment_status"] == "settled"
        assert self._balances(client)[1][ana]["balance"] == 30

    def test_settle_unknown_player(self, client, admin_headers, ids):
        response = client.post("/api/cashier/ghost/settle", headers=admin_headers)
        assert response.status_code == 404

    def test_settle_requires_admin(self, client, ids):
        _, bia, _ = ids
        assert client.post(f"/api/cashier/{bia}/settle").status_code == 401
        assert self._balances(client)[1][bia]["balance"] == -50

    def test_cashier_is_public(self, client):
        response = client.get("/api/cashier")
        assert response.status_code == 200
        assert response.json() == {"balances": [], "total_to_receive": 0, "total_to_pay_out": 0}
