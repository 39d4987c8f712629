"""End-to-end tests for the HTTP API."""

from unittest.mock import patch

from jose import jwt
from sqlalchemy.exc import OperationalError

from backend.services.errors import TransportError
from backend.services.users import create_user


# ---------------------------------------------------------------------------
# 1. Auth
# ---------------------------------------------------------------------------

def test_login_and_profile(client, session):
    create_user(session, "dave", "s3cret-pass", "trader", currency="php")

    resp = client.post("/api/auth/login", json={"username": "dave", "password": "s3cret-pass"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert set(jwt.get_unverified_claims(token)) == {"sub", "exp"}

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    body = me.json()
    assert body["role"] == "trader"
    assert body["currency"] == "PHP"
    assert len(body["trader_uid"]) == 8


def test_login_wrong_password(client, session):
    create_user(session, "dave", "s3cret-pass", "investor")
    resp = client.post("/api/auth/login", json={"username": "dave", "password": "nope"})
    assert resp.status_code == 401


def test_bad_token_rejected(client):
    resp = client.get("/api/bindings/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_health(client):
    resp = client.get("/api/system/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# 2. Binding flow
# ---------------------------------------------------------------------------

def test_full_binding_flow(client, trader, investor, auth_headers, add_trades):
    inv, trd = auth_headers(investor), auth_headers(trader)

    resp = client.get("/api/dashboard/investor", headers=inv)
    assert resp.json()["status"] == "none"

    resp = client.post("/api/bindings", json={"trader_uid": "abc12345"}, headers=inv)
    assert resp.status_code == 201
    binding_id = resp.json()["id"]
    assert resp.json()["status"] == "pending"

    state = client.get("/api/bindings/me", headers=inv).json()
    assert state["status"] == "pending"
    assert state["trader"]["username"] == "alice"

    # pending investors see no stats
    dash = client.get("/api/dashboard/investor", headers=inv).json()
    assert dash["status"] == "pending"
    assert dash["stats"]["total_trades"] == 0
    assert client.get("/api/trades", headers=inv).status_code == 404

    requests = client.get("/api/bindings/requests", params={"status": "pending"}, headers=trd).json()
    assert [r["investor_username"] for r in requests] == ["bob"]

    resp = client.post(f"/api/bindings/{binding_id}/approve", headers=trd)
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"

    add_trades(trader.id, [
        {"price": 100, "quantity": 2, "profit_loss": 10},
        {"price": 50, "quantity": 1, "profit_loss": -5},
    ])
    dash = client.get("/api/dashboard/investor", headers=inv).json()
    assert dash["status"] == "approved"
    assert dash["currency_symbol"] == "$"
    assert dash["stats"] == {"total_trades": 2, "total_value": 250.0, "total_pnl": 5.0}
    assert len(dash["recent_trades"]) == 2
    assert dash["stats_available"] is True

    trades = client.get("/api/trades", headers=inv).json()
    assert len(trades) == 2


def test_request_error_statuses(client, trader, investor, auth_headers):
    inv = auth_headers(investor)

    assert client.post("/api/bindings", json={"trader_uid": "  "}, headers=inv).status_code == 422
    assert client.post("/api/bindings", json={"trader_uid": "SHORT"}, headers=inv).status_code == 422

    resp = client.post("/api/bindings", json={"trader_uid": "NOPE0000"}, headers=inv)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Trader not found"

    assert client.post("/api/bindings", json={"trader_uid": "ABC12345"}, headers=inv).status_code == 201
    resp = client.post("/api/bindings", json={"trader_uid": "ABC12345"}, headers=inv)
    assert resp.status_code == 409


def test_roles_enforced(client, trader, investor, auth_headers):
    resp = client.post("/api/bindings", json={"trader_uid": "ABC12345"}, headers=auth_headers(trader))
    assert resp.status_code == 403
    assert client.get("/api/bindings/requests", headers=auth_headers(investor)).status_code == 403


def test_double_approve_conflict(client, trader, investor, auth_headers):
    binding_id = client.post(
        "/api/bindings", json={"trader_uid": "ABC12345"}, headers=auth_headers(investor)
    ).json()["id"]
    trd = auth_headers(trader)
    assert client.post(f"/api/bindings/{binding_id}/approve", headers=trd).status_code == 200
    assert client.post(f"/api/bindings/{binding_id}/approve", headers=trd).status_code == 409


def test_dashboard_degrades_on_transport_error(client, trader, investor, auth_headers):
    inv = auth_headers(investor)
    binding_id = client.post("/api/bindings", json={"trader_uid": "ABC12345"}, headers=inv).json()["id"]
    client.post(f"/api/bindings/{binding_id}/approve", headers=auth_headers(trader))

    with patch("backend.api.dashboard.compute_trader_stats", side_effect=TransportError()):
        resp = client.get("/api/dashboard/investor", headers=inv)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "approved"
    assert body["stats_available"] is False
    assert body["stats"]["total_trades"] == 0
    assert body["recent_trades"] == []


def test_trader_reads_own_ledger(client, trader, auth_headers, add_trades):
    trades = add_trades(trader.id, [{"price": 1, "quantity": 1} for _ in range(3)])
    resp = client.get("/api/trades", params={"limit": 2}, headers=auth_headers(trader))
    assert [t["id"] for t in resp.json()] == [trades[2].id, trades[1].id]

    resp = client.get(f"/api/trades/{trades[0].id}", headers=auth_headers(trader))
    assert resp.status_code == 200


def test_trade_paging_bounds_rejected(client, trader, auth_headers, add_trades):
    add_trades(trader.id, [{"price": 1, "quantity": 1} for _ in range(3)])
    trd = auth_headers(trader)

    assert client.get("/api/trades", params={"limit": -1}, headers=trd).status_code == 422
    assert client.get("/api/trades", params={"limit": 0}, headers=trd).status_code == 422
    assert client.get("/api/trades", params={"limit": 501}, headers=trd).status_code == 422
    assert client.get("/api/trades", params={"offset": -1}, headers=trd).status_code == 422
    assert len(client.get("/api/trades", params={"offset": 2}, headers=trd).json()) == 1


def test_trade_ledger_store_failure_is_503(client, session, trader, auth_headers):
    real_exec = session.exec

    def failing_ledger_exec(statement, *args, **kwargs):
        if "FROM trade" in str(statement):
            raise OperationalError("SELECT", {}, Exception("connection reset"))
        return real_exec(statement, *args, **kwargs)

    with patch.object(session, "exec", side_effect=failing_ledger_exec):
        resp = client.get("/api/trades", headers=auth_headers(trader))

    assert resp.status_code == 503
    assert resp.json()["detail"] == "data store unavailable"
