from finance_tracker.backend import db, users


def test_register_returns_token_and_public_user(client):
    resp = client.post("/api/register", json={
        "username": "alice", "email": " Alice@Example.com ", "password": "secret123",
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert "password_hash" not in body["user"]


def test_password_is_hashed_and_login_checks_it(app, client, register):
    register(password="secret123")

    with app.app_context():
        row = db.query_db("SELECT password_hash FROM users WHERE email=?", ("alice@example.com",), one=True)
        assert row["password_hash"] != "secret123"
        assert "secret123" not in row["password_hash"]

    ok = client.post("/api/login", json={"email": "alice@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.get_json()["token"]
    assert ok.get_json()["user"]["username"] == "alice"

    bad = client.post("/api/login", json={"email": "alice@example.com", "password": "secret124"})
    assert bad.status_code == 400
    assert bad.get_json()["message"] == users.INVALID_CREDENTIALS


def test_login_unknown_email_looks_like_wrong_password(client, register):
    register()
    resp = client.post("/api/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == users.INVALID_CREDENTIALS


def test_duplicate_email_conflicts(client, register):
    register(username="alice", email="alice@example.com")
    resp = client.post("/api/register", json={
        "username": "alice2", "email": "ALICE@example.com", "password": "secret123",
    })
    assert resp.status_code == 400
    assert "email" in resp.get_json()["message"]


def test_duplicate_username_conflicts(client, register):
    register(username="alice", email="alice@example.com")
    resp = client.post("/api/register", json={
        "username": "alice", "email": "other@example.com", "password": "secret123",
    })
    assert resp.status_code == 400
    assert "username" in resp.get_json()["message"]


def test_register_validation(client):
    missing = client.post("/api/register", json={"username": "bob", "password": "secret123"})
    assert missing.status_code == 400

    bad_email = client.post("/api/register", json={"username": "bob", "email": "bob", "password": "secret123"})
    assert bad_email.status_code == 400

    short = client.post("/api/register", json={"username": "bob", "email": "bob@example.com", "password": "123"})
    assert short.status_code == 400


def test_register_rejects_non_json_body(client):
    resp = client.post("/api/register", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["message"]


def test_credential_store_directly(app):
    with app.app_context():
        user = users.register("carol", "carol@example.com", "hunter22")
        assert users.find_by_email("CAROL@example.com") == user
        assert users.get_user(user.id) == user
        assert users.find_by_email("nobody@example.com") is None
        assert users.authenticate("carol@example.com", "hunter22") == user
