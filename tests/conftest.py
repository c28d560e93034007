"""
Pytest configuration and shared fixtures
"""
import os
import re
from uuid import uuid4

import pytest

# backend.main builds the app at import time and the settings require a secret.
os.environ.setdefault("BACKEND_SESSION_SECRET", "test-backend-secret")

TEST_SECRET = os.environ["BACKEND_SESSION_SECRET"]
TEST_EMAIL = "owner@example.com"


@pytest.fixture
def backend_env(tmp_path, monkeypatch):
    """Point the backend at a fresh SQLite file and drop cached settings/engine."""
    from backend import db, settings

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", TEST_SECRET)
    monkeypatch.setenv("ALLOWED_EMAILS", "")
    settings.reset_settings()
    db._engine = None
    db._session_factory = None
    yield
    settings.reset_settings()
    db._engine = None
    db._session_factory = None


@pytest.fixture
def client(backend_env):
    from fastapi.testclient import TestClient

    from backend.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def auth_headers(email=TEST_EMAIL, token=TEST_SECRET):
    return {"X-User-Email": email, "X-Backend-Token": token}


@pytest.fixture
def headers():
    return auth_headers()


class FakeTableStore:
    """In-memory stand-in for the backend table API behind ``api_client.request``."""

    def __init__(self):
        self.tables = {}
        self.calls = []

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def seed(self, table, **values):
        row = {"id": values.pop("id", uuid4().hex), "created_at": "2025-01-01T00:00:00", **values}
        self.rows(table).append(row)
        return row

    def writes(self):
        return [call for call in self.calls if call[0] != "GET"]

    @staticmethod
    def _matches(row, params):
        for column, raw in params or []:
            if column == "order":
                continue
            operator, _, value = raw.partition(".")
            if operator == "eq" and str(row.get(column)) != value:
                return False
            if operator == "cs" and value not in (row.get(column) or []):
                return False
        return True

    def request(self, method, path, params=None, json=None, timeout=10):
        from dashboard.data.api_client import RecordNotFound

        self.calls.append((method, path, params, json))
        match = re.fullmatch(r"/v1/tables/(\w+)(?:/(\w+))?", path)
        if not match:
            raise AssertionError(f"Unexpected path {path}")
        table, row_id = match.groups()
        rows = self.rows(table)
        if method == "GET" and row_id:
            for row in rows:
                if row["id"] == row_id:
                    return dict(row)
            raise RecordNotFound(404, "Record not found")
        if method == "GET":
            return {"items": [dict(row) for row in rows if self._matches(row, params)]}
        if method == "POST":
            inserted = [self.seed(table, **dict(values)) for values in json["rows"]]
            return {"items": [dict(row) for row in inserted]}
        if method == "PATCH":
            for row in rows:
                if row["id"] == row_id:
                    row.update(json["values"])
                    return dict(row)
            raise RecordNotFound(404, "Record not found")
        if method == "DELETE" and row_id:
            before = len(rows)
            rows[:] = [row for row in rows if row["id"] != row_id]
            if len(rows) == before:
                raise RecordNotFound(404, "Record not found")
            return {"ok": True}
        if method == "DELETE":
            kept = [row for row in rows if not self._matches(row, params)]
            deleted = len(rows) - len(kept)
            rows[:] = kept
            return {"ok": True, "deleted": deleted}
        raise AssertionError(f"Unexpected {method} {path}")


@pytest.fixture
def table_store(monkeypatch):
    from dashboard.data import api_client, repositories

    store = FakeTableStore()
    monkeypatch.setattr(api_client, "request", store.request)
    repositories.configure(invalidate_callback=None)
    return store
