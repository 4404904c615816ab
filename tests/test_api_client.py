from unittest import mock

import pytest
import requests

from finance_tracker.frontend import api_client
from finance_tracker.frontend.api_client import ApiError, SessionExpired

BASE = "http://backend.test/api"


def fake_response(status, payload=None):
    resp = mock.Mock()
    resp.status_code = status
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


@mock.patch("finance_tracker.frontend.api_client.requests.request")
def test_bearer_header_is_attached(request):
    request.return_value = fake_response(200, [])
    api_client.fetch_records("expenses", "tok", base=BASE)

    args, kwargs = request.call_args
    assert args == ("GET", f"{BASE}/expenses")
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}


@mock.patch("finance_tracker.frontend.api_client.requests.request")
def test_fetch_all_returns_three_lists(request):
    def respond(method, url, **kwargs):
        return fake_response(200, [{"url": url}])

    request.side_effect = respond
    data = api_client.fetch_all("tok", base=BASE)
    assert set(data) == {"expenses", "incomes", "investments"}
    assert data["incomes"] == [{"url": f"{BASE}/incomes"}]
    assert request.call_count == 3


@mock.patch("finance_tracker.frontend.api_client.requests.request")
def test_401_on_authenticated_call_means_session_expired(request):
    request.return_value = fake_response(401, {"message": "Please authenticate."})
    with pytest.raises(SessionExpired):
        api_client.fetch_records("incomes", "stale", base=BASE)


@mock.patch("finance_tracker.frontend.api_client.requests.request")
def test_error_message_is_surfaced(request):
    request.return_value = fake_response(400, {"message": "Invalid credentials"})
    with pytest.raises(ApiError) as exc:
        api_client.login("a@example.com", "nope", base=BASE)
    assert exc.value.message == "Invalid credentials"
    assert exc.value.status_code == 400
    assert not isinstance(exc.value, SessionExpired)


@mock.patch("finance_tracker.frontend.api_client.requests.request")
def test_connection_failure_is_api_error(request):
    request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(ApiError):
        api_client.add_record("expenses", "tok", {"amount": 1}, base=BASE)


@mock.patch("finance_tracker.frontend.api_client.requests.request")
def test_delete_uses_record_path(request):
    request.return_value = fake_response(200, {"message": "Expense deleted"})
    assert api_client.delete_record("expenses", 12, "tok", base=BASE) == {"message": "Expense deleted"}
    assert request.call_args[0] == ("DELETE", f"{BASE}/expenses/12")
