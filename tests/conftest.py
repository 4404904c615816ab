import pytest

from finance_tracker.backend import create_app

SECRET = "test-signing-secret-with-enough-bytes-for-hs256"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "JWT_SECRET_KEY": SECRET,
        "DB_PATH": str(tmp_path / "finance.db"),
        "TESTING": True,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Register a user and return (token, user) from the response."""
    def _register(username="alice", email="alice@example.com", password="secret123"):
        resp = client.post("/api/register", json={"username": username, "email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return body["token"], body["user"]
    return _register


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}
