"""
Shared fixtures: an in-memory stand-in for the Supabase client and a
TestClient wired to it through FastAPI dependency overrides.
"""

import itertools
import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from admin_panel.core.rate_limit import limiter
from admin_panel.database.supabase_client import get_supabase, get_auth_client
from admin_panel.main import app
from admin_panel.modules.auth.service import clear_auth_cache


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query builder covering the calls the services make."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.columns = "*"
        self.filters = []
        self.order_by = None
        self.row_limit = None
        self.count_mode = None
        self.head = False
        self.one = None

    def select(self, *columns, count=None, head=None):
        self.op = "select"
        self.columns = ",".join(columns) or "*"
        self.count_mode = count
        self.head = bool(head)
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def maybe_single(self):
        self.one = "maybe"
        return self

    def single(self):
        self.one = "single"
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.failures:
            raise FakeAPIError(self.db.failures[(self.table, self.op)])
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            stored = [self.db.store(self.table, item) for item in items]
            return FakeResult([dict(row) for row in stored])

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult([dict(row) for row in matched])

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResult([dict(row) for row in matched])

        result = [dict(row) for row in matched]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda row: (row.get(column) is not None, row.get(column) or ""), reverse=desc)
        total = len(result)
        if self.row_limit is not None:
            result = result[:self.row_limit]
        if self.columns != "*":
            wanted = [c.strip() for c in self.columns.split(",")]
            result = [{c: row.get(c) for c in wanted} for row in result]
        if self.one == "maybe":
            return FakeResult(result[0]) if result else None
        if self.one == "single":
            if len(result) != 1:
                raise FakeAPIError("JSON object requested, multiple (or no) rows returned")
            return FakeResult(result[0])
        count = total if self.count_mode else None
        return FakeResult([] if self.head else result, count)


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        user = self.auth.tokens.get(jwt)
        if user is None:
            raise FakeAPIError("invalid JWT: token is expired")
        if scope == "local":
            self.auth.revoke_session(jwt)
        else:
            self.auth.revoke_user(user)
        self.auth.sign_outs.append((user.id, scope))


class FakeAuth:
    """Supabase Auth stand-in. Like gotrue, the client keeps the last session it created."""

    def __init__(self):
        self.accounts = {}
        self.tokens = {}
        self.refresh_tokens = {}
        self.session_pairs = {}
        self.current_session = None
        self.sign_outs = []
        self.sign_up_error = None
        self.admin = FakeAuthAdmin(self)

    def add_account(self, email, password, user_id=None, full_name=None):
        user = SimpleNamespace(
            id=user_id or str(uuid.uuid4()),
            email=email,
            user_metadata={"full_name": full_name} if full_name else {},
        )
        self.accounts[email] = (password, user)
        return user

    def _session_for(self, user):
        access = f"access-{uuid.uuid4().hex}"
        refresh = f"refresh-{uuid.uuid4().hex}"
        self.tokens[access] = user
        self.refresh_tokens[refresh] = user
        self.session_pairs[access] = refresh
        self.current_session = SimpleNamespace(access_token=access, refresh_token=refresh, user=user)
        return SimpleNamespace(access_token=access, refresh_token=refresh)

    def expire_access(self, user_id):
        for token in [t for t, u in self.tokens.items() if u.id == user_id]:
            del self.tokens[token]

    def revoke_session(self, access_token):
        self.tokens.pop(access_token, None)
        self.refresh_tokens.pop(self.session_pairs.pop(access_token, None), None)

    def revoke_user(self, user):
        for token in [t for t, u in self.tokens.items() if u.id == user.id]:
            self.revoke_session(token)
        for token in [t for t, u in self.refresh_tokens.items() if u.id == user.id]:
            del self.refresh_tokens[token]

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        user = account[1]
        return SimpleNamespace(user=user, session=self._session_for(user))

    def sign_up(self, credentials):
        if self.sign_up_error:
            raise FakeAPIError(self.sign_up_error)
        if credentials["email"] in self.accounts:
            raise FakeAPIError("User already registered")
        user = self.add_account(
            credentials["email"],
            credentials["password"],
            full_name=credentials.get("options", {}).get("data", {}).get("full_name"),
        )
        return SimpleNamespace(user=user, session=None)

    def get_user(self, jwt=None):
        user = self.tokens.get(jwt)
        if user is None:
            raise FakeAPIError("invalid JWT: token is expired")
        return SimpleNamespace(user=user)

    def refresh_session(self, refresh_token=None):
        user = self.refresh_tokens.pop(refresh_token, None)
        if user is None:
            raise FakeAPIError("Invalid Refresh Token")
        return SimpleNamespace(user=user, session=self._session_for(user))

    def sign_out(self):
        """Global sign-out of whichever user owns the stored session."""
        if self.current_session is not None:
            self.revoke_user(self.current_session.user)
            self.sign_outs.append((self.current_session.user.id, "global"))
            self.current_session = None


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self.auth = FakeAuth()
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)
        self._epoch = datetime(2024, 1, 1, 12, 0, 0)

    def table(self, name):
        return FakeQuery(self, name)

    def store(self, table, item):
        row = dict(item)
        row.setdefault("id", next(self._ids))
        row.setdefault("created_at", (self._epoch + timedelta(minutes=next(self._clock))).isoformat())
        self.tables.setdefault(table, []).append(row)
        return row

    def seed(self, table, *rows):
        return [dict(self.store(table, row)) for row in rows]

    def fail(self, table, op, message="connection refused"):
        self.failures[(table, op)] = message


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_auth_client] = lambda: fake_supabase
    limiter.enabled = False
    clear_auth_cache()
    yield TestClient(app)
    app.dependency_overrides.clear()
    limiter.enabled = True
    clear_auth_cache()


@pytest.fixture
def admin(fake_supabase):
    user = fake_supabase.auth.add_account("boss@truescan.app", "secret123")
    fake_supabase.seed("admin_users", {
        "id": user.id,
        "email": user.email,
        "full_name": "Boss",
        "role": "super_admin",
        "gemini_api_key": None,
        "is_active": True,
    })
    return {"id": user.id, "email": user.email, "password": "secret123"}


@pytest.fixture
def logged_in(client, fake_supabase, admin):
    response = client.post(
        "/login",
        data={"email": admin["email"], "password": admin["password"]},
        follow_redirects=False,
    )
    assert response.status_code == 303
    fake_supabase.calls.clear()
    return client
