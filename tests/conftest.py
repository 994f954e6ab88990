"""
Shared fixtures.

The hosted Supabase client is replaced by ``FakeSupabase``, an in-memory
stand-in for the parts of the postgrest query builder and auth client the
services use. Tables are plain lists of dicts keyed by table name.
"""

import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from onboarding.core.rate_limit import limiter
from onboarding.database.supabase_client import get_service_supabase, get_supabase
from onboarding.main import app
from onboarding.modules.auth.service import clear_auth_cache
from onboarding.modules.notifications.service import EmailService, get_email_service

OWNER_ID = "00000000-0000-0000-0000-0000000000aa"
USER_ID = "00000000-0000-0000-0000-0000000000bb"
OWNER_TOKEN = "owner-token"
USER_TOKEN = "user-token"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Fake query builder
# =============================================================================


class FakeResponse:
    def __init__(self, data: Any):
        self.data = data


class _Negation:
    def __init__(self, query: "FakeQuery"):
        self.query = query

    def is_(self, column: str, value: str) -> "FakeQuery":
        if value == "null":
            self.query._filters.append(lambda row: row.get(column) is not None)
        else:
            self.query._filters.append(lambda row: row.get(column) != value)
        return self.query


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._op = "select"
        self._payload: Any = None
        self._on_conflict: Optional[str] = None
        self._order: List[tuple] = []
        self._limit: Optional[int] = None
        self._single: Optional[str] = None

    # operations

    def select(self, *columns: str) -> "FakeQuery":
        self._op = "select"
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self._op, self._payload = "insert", payload
        return self

    def upsert(self, payload: Any, on_conflict: str = "id") -> "FakeQuery":
        self._op, self._payload, self._on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self._op, self._payload = "update", payload
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # filters

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    @property
    def not_(self) -> _Negation:
        return _Negation(self)

    # modifiers

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def maybe_single(self) -> "FakeQuery":
        self._single = "maybe"
        return self

    def single(self) -> "FakeQuery":
        self._single = "single"
        return self

    # execution

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(f(row) for f in self._filters)

    def _new_row(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(values)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", _now_iso())
        return row

    def execute(self) -> Optional[FakeResponse]:
        self.db.calls.append((self.table, self._op))
        if self.table in self.db.failing_tables:
            raise APIError({"message": f"{self.table} is unavailable", "code": "XX000", "hint": None, "details": None})
        rows = self.db.tables.setdefault(self.table, [])

        if self._op == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            created = [self._new_row(p) for p in payload]
            rows.extend(created)
            return FakeResponse(copy.deepcopy(created))

        if self._op == "upsert":
            keys = [k.strip() for k in (self._on_conflict or "id").split(",")]
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            written = []
            for values in payload:
                existing = next((r for r in rows if all(r.get(k) == values.get(k) for k in keys)), None)
                if existing is not None:
                    existing.update(copy.deepcopy(values))
                    written.append(existing)
                else:
                    row = self._new_row(values)
                    rows.append(row)
                    written.append(row)
            return FakeResponse(copy.deepcopy(written))

        if self._op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self._payload))
                    updated.append(row)
            return FakeResponse(copy.deepcopy(updated))

        if self._op == "delete":
            deleted = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(copy.deepcopy(deleted))

        selected = [copy.deepcopy(r) for r in rows if self._matches(r)]
        for column, desc in reversed(self._order):
            present = [r for r in selected if r.get(column) is not None]
            missing = [r for r in selected if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            selected = present + missing
        if self._limit is not None:
            selected = selected[: self._limit]
        if self._single == "maybe":
            if not selected:
                return None
            return FakeResponse(selected[0])
        if self._single == "single":
            if len(selected) != 1:
                raise APIError({"message": "JSON object requested, multiple (or no) rows returned", "code": "PGRST116", "hint": None, "details": None})
            return FakeResponse(selected[0])
        return FakeResponse(selected)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict[str, Any]):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.name, "rpc"))
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            raise APIError({"message": f"function {self.name} does not exist", "code": "42883", "hint": None, "details": None})
        return FakeResponse(handler(self.params))


# =============================================================================
# Fake auth client
# =============================================================================


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, Any] = {}
        self.codes: Dict[str, Any] = {}
        self.signed_out = 0

    def add_user(self, token: str, user_id: str, email: str, github_username: str):
        user = SimpleNamespace(
            id=user_id,
            email=email,
            user_metadata={"user_name": github_username},
            app_metadata={"provider": "github"},
            created_at=_now_iso(),
            updated_at=_now_iso(),
        )
        self.tokens[token] = user
        return user

    def add_code(self, code: str, token: str):
        self.codes[code] = token

    def get_user(self, jwt: Optional[str] = None):
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def sign_in_with_oauth(self, credentials: Dict[str, Any]):
        redirect_to = credentials.get("options", {}).get("redirect_to", "")
        return SimpleNamespace(
            provider=credentials["provider"],
            url=f"https://example.supabase.co/auth/v1/authorize?provider={credentials['provider']}&redirect_to={redirect_to}",
        )

    def exchange_code_for_session(self, params: Dict[str, Any]):
        token = self.codes.get(params["auth_code"])
        if token is None:
            raise Exception("invalid flow state, no valid flow state found")
        session = SimpleNamespace(access_token=token, refresh_token=f"refresh-{token}", expires_in=3600)
        return SimpleNamespace(user=self.tokens[token], session=session)

    def sign_out(self):
        self.signed_out += 1


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.rpc_handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {}
        self.failing_tables: set = set()
        self.calls: List[tuple] = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> FakeRpc:
        return FakeRpc(self, name, params or {})

    def seed(self, table: str, *rows: Dict[str, Any]) -> List[Dict[str, Any]]:
        created = []
        for values in rows:
            row = copy.deepcopy(values)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", _now_iso())
            self.tables.setdefault(table, []).append(row)
            created.append(row)
        return created

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])


class RecordingEmailService(EmailService):
    """EmailService that records messages instead of calling the provider"""

    def __init__(self, configured: bool = True):
        super().__init__(api_key="re_test" if configured else "", from_address="no-reply@masterfabric.co")
        self.sent: List[Dict[str, Any]] = []

    def send(self, to, subject: str, html: str) -> str:
        if not self.is_configured:
            return super().send(to, subject, html)
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"msg_{len(self.sent)}"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_db() -> FakeSupabase:
    db = FakeSupabase()
    db.seed("users", {
        "id": OWNER_ID,
        "github_username": "octo-owner",
        "first_name": "Ayşe",
        "last_name": "Yılmaz",
        "is_owner": True,
        "is_verified": True,
        "is_store_user": False,
        "store_points": 0,
        "master_email": "ayse@masterfabric.co",
    }, {
        "id": USER_ID,
        "github_username": "octo-dev",
        "first_name": "Deniz",
        "last_name": "Kaya",
        "is_owner": False,
        "is_verified": False,
        "is_store_user": True,
        "store_points": 100,
    })
    db.auth.add_user(OWNER_TOKEN, OWNER_ID, "owner@example.com", "octo-owner")
    db.auth.add_user(USER_TOKEN, USER_ID, "dev@example.com", "octo-dev")
    return db


@pytest.fixture
def email_service() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def client(fake_db, email_service):
    clear_auth_cache()
    limiter.enabled = False
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db
    app.dependency_overrides[get_email_service] = lambda: email_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.enabled = True
    clear_auth_cache()


@pytest.fixture
def owner_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {OWNER_TOKEN}"}


@pytest.fixture
def user_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {USER_TOKEN}"}
