from .conftest import auth_header


def _seed(client, token):
    client.post("/api/incomes", json={"source": "Salary", "amount": 100, "date": "2024-06-15"}, headers=auth_header(token))
    client.post("/api/incomes", json={"source": "Bonus", "amount": 50, "date": "2024-01-01"}, headers=auth_header(token))
    client.post("/api/expenses", json={"description": "Rent", "amount": 30, "category": "Bills", "date": "2024-06-20"},
                headers=auth_header(token))
    client.post("/api/investments", json={"name": "ETF", "amount": 20, "type": "Stocks", "date": "2024-06-21"},
                headers=auth_header(token))


def test_summary_all_time(client, register):
    token, _ = register()
    _seed(client, token)

    resp = client.get("/api/summary", headers=auth_header(token))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["window"] == "all_time"
    assert body["total_income"] == 150
    assert body["total_expenses"] == 30
    assert body["total_investments"] == 20
    assert body["net_worth"] == 100
    assert body["expenses_by_category"] == {"Bills": 30.0}
    assert body["investments_by_type"] == {"Stocks": 20.0}
    assert body["chart"]["labels"] == ["2024-01-01", "2024-06-15", "2024-06-20", "2024-06-21"]


def test_summary_custom_range(client, register):
    token, _ = register()
    _seed(client, token)

    resp = client.get("/api/summary?window=custom&start=2024-06-01&end=2024-06-30", headers=auth_header(token))
    body = resp.get_json()
    assert body["window"] == "custom"
    assert body["total_income"] == 100
    assert body["net_worth"] == 50


def test_summary_only_counts_own_records(client, register):
    alice, _ = register("alice", "alice@example.com")
    bob, _ = register("bob", "bob@example.com")
    _seed(client, alice)

    body = client.get("/api/summary", headers=auth_header(bob)).get_json()
    assert body["net_worth"] == 0
    assert body["chart"]["labels"] == []


def test_summary_rejects_unknown_window(client, register):
    token, _ = register()
    resp = client.get("/api/summary?window=fortnight", headers=auth_header(token))
    assert resp.status_code == 400
    assert "fortnight" in resp.get_json()["message"]

    bad_date = client.get("/api/summary?window=custom&start=someday", headers=auth_header(token))
    assert bad_date.status_code == 400


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_summary_all_time_includes_pre_1970_records(client, register):
    token, _ = register()
    resp = client.post("/api/incomes", json={"source": "Old", "amount": 100, "date": "1969-12-31"},
                       headers=auth_header(token))
    assert resp.status_code == 201

    body = client.get("/api/summary?window=all_time", headers=auth_header(token)).get_json()
    assert body["total_income"] == 100
    assert body["counts"]["incomes"] == 1
    assert body["chart"]["labels"] == ["1969-12-31"]


def test_root_path_is_not_routed(client):
    resp = client.get("/")
    assert resp.status_code == 404
    assert "msg" not in resp.get_json()
