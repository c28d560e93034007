import logging
import os
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

_SECRET_GETTER = None
_USER_GETTER = None


class ApiError(RuntimeError):
    def __init__(self, status_code, detail):
        super().__init__(f"API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class RecordNotFound(ApiError):
    pass


def _build_session():
    session = requests.Session()
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET", "POST", "PUT", "PATCH", "DELETE"),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_SESSION = _build_session()


def configure(secret_getter, user_getter):
    global _SECRET_GETTER, _USER_GETTER
    _SECRET_GETTER = secret_getter
    _USER_GETTER = user_getter


def _get_secret(path, default=None):
    if _SECRET_GETTER is None:
        return default
    return _SECRET_GETTER(path, default)


def api_base_url():
    return (
        _get_secret(("app", "API_BASE_URL"))
        or _get_secret(("API_BASE_URL",))
        or os.getenv("API_BASE_URL")
        or ""
    )


def backend_token():
    return (
        _get_secret(("app", "BACKEND_SESSION_SECRET"))
        or _get_secret(("BACKEND_SESSION_SECRET",))
        or os.getenv("BACKEND_SESSION_SECRET")
        or ""
    )


def is_enabled():
    return bool(api_base_url() and backend_token())


def _send(method: str, path: str, params=None, json: dict | None = None, timeout: int = 10):
    base = api_base_url().rstrip("/")
    if not base:
        raise RuntimeError("API_BASE_URL not configured")
    token = backend_token()
    if not token:
        raise RuntimeError("BACKEND_SESSION_SECRET not configured")
    user_email = _USER_GETTER() if _USER_GETTER else None
    if not user_email:
        raise RuntimeError("Missing user email for API request")
    headers = {
        "X-User-Email": user_email,
        "X-Backend-Token": token,
    }
    url = f"{base}{path}"
    try:
        response = _SESSION.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("%s %s did not reach the backend: %s", method, path, exc)
        raise ApiError(None, str(exc)) from exc
    if not response.ok:
        try:
            detail = response.json().get("detail")
        except Exception:
            detail = response.text
        logger.warning("%s %s failed with %s: %s", method, path, response.status_code, detail)
        error_cls = RecordNotFound if response.status_code == 404 else ApiError
        raise error_cls(response.status_code, detail)
    return response


def request(method: str, path: str, params=None, json: dict | None = None, timeout: int = 10) -> Any:
    response = _send(method, path, params=params, json=json, timeout=timeout)
    if response.status_code == 204:
        return None
    return response.json()


def download(path: str, params=None, timeout: int = 30) -> tuple[bytes, str | None]:
    response = _send("GET", path, params=params, timeout=timeout)
    disposition = response.headers.get("Content-Disposition") or ""
    filename = None
    if "filename=" in disposition:
        filename = disposition.split("filename=", 1)[1].strip().strip('"')
    return response.content, filename


# Table query helpers. Filters are PostgREST-style: ``eq.<value>`` for
# equality and ``cs.<value>`` for list membership.

def _table_path(table, row_id=None):
    if row_id is None:
        return f"/v1/tables/{table}"
    return f"/v1/tables/{table}/{row_id}"


def _query_params(eq=None, contains=None, order=None):
    params = []
    for column, value in (eq or {}).items():
        params.append((column, f"eq.{value}"))
    for column, value in (contains or {}).items():
        params.append((column, f"cs.{value}"))
    for item in order or []:
        params.append(("order", item))
    return params


def select(table, eq=None, contains=None, order=None) -> list[dict]:
    payload = request("GET", _table_path(table), params=_query_params(eq, contains, order))
    return list((payload or {}).get("items") or [])


def get(table, row_id) -> dict:
    return request("GET", _table_path(table, row_id))


def insert(table, rows) -> list[dict]:
    if isinstance(rows, dict):
        rows = [rows]
    payload = request("POST", _table_path(table), json={"rows": list(rows)})
    return list((payload or {}).get("items") or [])


def update(table, row_id, values) -> dict:
    return request("PATCH", _table_path(table, row_id), json={"values": dict(values)})


def delete(table, row_id) -> None:
    request("DELETE", _table_path(table, row_id))


def delete_where(table, eq) -> int:
    if not eq:
        raise ValueError("delete_where requires at least one filter")
    payload = request("DELETE", _table_path(table), params=_query_params(eq=eq))
    return int((payload or {}).get("deleted") or 0)
