import pytest
import requests

from dashboard.data import api_client
from dashboard.data.api_client import ApiError

SECRETS = {
    ("app", "API_BASE_URL"): "http://backend.test",
    ("app", "BACKEND_SESSION_SECRET"): "s3cret",
}


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(api_client, "_SECRET_GETTER", lambda path, default=None: SECRETS.get(tuple(path), default))
    monkeypatch.setattr(api_client, "_USER_GETTER", lambda: "owner@example.com")
    calls = []

    def respond_with(response=None, error=None):
        def fake_request(method, url, **kwargs):
            calls.append((method, url, kwargs))
            if error is not None:
                raise error
            return response

        monkeypatch.setattr(api_client._SESSION, "request", fake_request)
        return calls

    return respond_with


@pytest.mark.parametrize(
    "error",
    [requests.exceptions.ConnectionError("backend down"), requests.exceptions.Timeout("slow")],
)
def test_transport_failures_surface_as_api_error(configured, error):
    configured(error=error)
    with pytest.raises(ApiError) as excinfo:
        api_client.insert("people", {"name": "Ana"})
    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value, RuntimeError)


def test_missing_record_raises_record_not_found(configured):
    configured(FakeResponse(404, {"detail": "Record not found"}))
    with pytest.raises(api_client.RecordNotFound):
        api_client.get("people", "missing")


def test_requests_carry_account_headers(configured):
    calls = configured(FakeResponse(200, {"items": [{"id": "1"}]}))
    assert api_client.select("people", eq={"role": "Friend"}, order=["name.asc"]) == [{"id": "1"}]
    method, url, kwargs = calls[0]
    assert (method, url) == ("GET", "http://backend.test/v1/tables/people")
    assert kwargs["headers"] == {"X-User-Email": "owner@example.com", "X-Backend-Token": "s3cret"}
    assert kwargs["params"] == [("role", "eq.Friend"), ("order", "name.asc")]

