"""
Shared fixtures: settings and an in-memory fake of the managed backend.

FakeBackend stands in for ``requests.Session``: it answers the auth
(token / user / logout) and REST table (materials) endpoints the hub
uses, so no test touches the network.
"""

import itertools
import threading
from urllib.parse import urlparse

import pytest
import requests

from materials_hub.config import Settings
from materials_hub.models import Material

BASE_URL = "https://backend.test"
EMAIL = "owner@example.com"
USERNAME = "admin"
PASSWORD = "s3cret"
USER_ID = "user-1"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))
        self.headers = {}

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


def _eq(value):
    return value[3:] if value and value.startswith("eq.") else value


class FakeBackend:
    def __init__(self):
        self.rows = []
        self.calls = []
        self.access = set()
        self.refresh = set()
        self.fail_ids = set()
        self.fail_list = False
        self.network_down = False
        self._ids = itertools.count(1)
        self._tokens = itertools.count(1)
        self._clock = itertools.count(1)
        self._lock = threading.Lock()

    # ---- helpers for tests ----
    def seed(self, title, type_, sort_order=None, user_id=USER_ID, created_at=None):
        row = {
            "id": f"m{next(self._ids)}",
            "title": title,
            "type": type_,
            "link": f"https://example.com/{title.lower()}",
            "created_at": created_at or self._now(),
            "sort_order": sort_order,
            "user_id": user_id,
        }
        self.rows.append(row)
        return row

    def row(self, mid):
        return next(r for r in self.rows if r["id"] == mid)

    def issue_tokens(self):
        n = next(self._tokens)
        at, rt = f"at-{n}", f"rt-{n}"
        self.access.add(at)
        self.refresh.add(rt)
        return {"access_token": at, "refresh_token": rt, "user": {"id": USER_ID}}

    def expire_access(self):
        self.access.clear()

    def calls_to(self, method, path):
        return [c for c in self.calls if c[0] == method and c[1] == path]

    def _now(self):
        return f"2024-01-01T00:{next(self._clock):02d}:00+00:00"

    # ---- requests.Session surface ----
    def request(self, method, url, headers=None, timeout=None, params=None, json=None, **kwargs):
        headers = headers or {}
        params = dict(params or {})
        path = urlparse(url).path
        with self._lock:
            self.calls.append((method, path, params, json))
            if self.network_down:
                raise requests.ConnectionError("connection refused")
            token = headers.get("Authorization", "").replace("Bearer ", "")
            if path.startswith("/auth/v1"):
                return self._auth(method, path[len("/auth/v1"):], params, json or {}, token)
            if path == "/rest/v1/materials":
                if token not in self.access:
                    return FakeResponse(401, {"message": "JWT expired"})
                return self._materials(method, params, json)
        return FakeResponse(404, {"message": "not found"})

    def _auth(self, method, endpoint, params, body, token):
        if endpoint == "/token" and params.get("grant_type") == "password":
            if body.get("email") == EMAIL and body.get("password") == PASSWORD:
                return FakeResponse(200, self.issue_tokens())
            return FakeResponse(400, {"error_description": "Invalid login credentials"})
        if endpoint == "/token" and params.get("grant_type") == "refresh_token":
            rt = body.get("refresh_token")
            if rt in self.refresh:
                self.refresh.discard(rt)
                return FakeResponse(200, self.issue_tokens())
            return FakeResponse(400, {"error_description": "Invalid Refresh Token"})
        if endpoint == "/user" and method == "GET":
            if token in self.access:
                return FakeResponse(200, {"id": USER_ID, "email": EMAIL})
            return FakeResponse(401, {"msg": "invalid JWT"})
        if endpoint == "/logout":
            self.access.discard(token)
            return FakeResponse(204)
        return FakeResponse(404, {"message": "not found"})

    def _materials(self, method, params, body):
        user = _eq(params.get("user_id"))
        mid = _eq(params.get("id"))
        if method == "GET":
            if self.fail_list:
                return FakeResponse(503, {"message": "service unavailable"})
            rows = [r for r in self.rows if r["user_id"] == user]
            rows.sort(key=lambda r: r["created_at"], reverse=True)
            rows.sort(key=lambda r: (r["sort_order"] is None, r["sort_order"] or 0))
            cols = params.get("select", "").split(",")
            return FakeResponse(200, [{k: r[k] for k in cols} for r in rows])
        if method == "POST":
            row = dict(body)
            row["id"] = f"m{next(self._ids)}"
            row["created_at"] = self._now()
            self.rows.append(row)
            return FakeResponse(201, [{k: v for k, v in row.items() if k != "user_id"}])
        matched = [r for r in self.rows if r["id"] == mid and r["user_id"] == user]
        if method == "PATCH":
            if mid in self.fail_ids:
                return FakeResponse(500, {"message": f"update failed for {mid}"})
            for r in matched:
                r.update(body)
            return FakeResponse(200, [{"id": r["id"]} for r in matched])
        if method == "DELETE":
            self.rows = [r for r in self.rows if r not in matched]
            return FakeResponse(204)
        return FakeResponse(405, {"message": "method not allowed"})


@pytest.fixture
def settings():
    return Settings(
        login_email=EMAIL,
        login_username=USERNAME,
        backend_url=BASE_URL,
        backend_key="anon-key",
        secret_key="test-secret",
        max_columns=8,
        http_timeout=1.0,
    )


@pytest.fixture
def backend():
    return FakeBackend()


def make_material(mid, category="Docs", sort_order=None, created_at="2024-01-01T00:00:00+00:00", title=None):
    return Material(id=mid, title=title or mid, category=category, link=f"https://x/{mid}",
                    created_at=created_at, sort_order=sort_order)
