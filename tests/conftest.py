"""Shared fixtures: an in-memory stand-in for the Supabase query builder."""

from __future__ import annotations

import itertools
import uuid
from typing import Any, Optional

import pytest
from faker import Faker
from postgrest.exceptions import APIError

from config import AppConfig
from data.auth import ANONYMOUS, AuthState
from data.fallback_store import FallbackCompanionStore
from data.models import COMPANION_RELATION, COMPANIONS, CompanionDraft
from data.policy import CompanionLimitPolicy
from data.service import DataContext


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.count_mode = None
        self.filters = []
        self.range_args = None
        self.order_args = None
        self.limit_n = None
        self.payload = None

    def select(self, *columns, count=None):
        self.columns = columns[0] if columns else "*"
        self.count_mode = count
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = row
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda r, c=column, v=value: r.get(c) == v)
        return self

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        self.filters.append(lambda r, c=column, n=needle: n in str(r.get(c) or "").lower())
        return self

    def or_(self, expr):
        parts = []
        for clause in expr.split(","):
            column, op, pattern = clause.split(".", 2)
            assert op == "ilike"
            parts.append((column, pattern.strip("%").lower()))
        self.filters.append(lambda r, ps=tuple(parts): any(n in str(r.get(c) or "").lower() for c, n in ps))
        return self

    def range(self, start, end):
        self.range_args = (start, end)
        return self

    def order(self, column, desc=False):
        self.order_args = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def execute(self):
        self.db.executed.append(self)
        if self.db.fail_with is not None:
            raise self.db.fail_with
        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", f"{next(self.db.clock):010d}")
            rows.append(row)
            return FakeResponse([dict(row)])

        matching = [r for r in rows if all(f(r) for f in self.filters)]

        if self.op == "delete":
            self.db.tables[self.table_name] = [r for r in rows if r not in matching]
            return FakeResponse([dict(r) for r in matching])

        if self.order_args:
            column, desc = self.order_args
            matching = sorted(matching, key=lambda r: r.get(column) or "", reverse=desc)
        if self.range_args:
            start, end = self.range_args
            matching = matching[start : end + 1]
        if self.limit_n is not None:
            matching = matching[: self.limit_n]

        if self.columns == COMPANION_RELATION:
            by_id = {c["id"]: c for c in self.db.tables.get(COMPANIONS, [])}
            out = [{"companions": dict(by_id[r["companion_id"]]) if r["companion_id"] in by_id else None} for r in matching]
        else:
            out = [dict(r) for r in matching]
        count = len(out) if self.count_mode == "exact" else None
        return FakeResponse(out, count=count)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.executed: list[FakeQuery] = []
        self.fail_with: Optional[Exception] = None
        self.clock = itertools.count(1)
        self.factory_calls: list[AuthState] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add_companion(self, **fields) -> dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "name": "Unnamed",
            "subject": "science",
            "topic": "Topic",
            "voice": "female",
            "style": "casual",
            "duration": 15,
            "author": "system",
            "created_at": f"{next(self.clock):010d}",
        }
        row.update(fields)
        self.tables.setdefault(COMPANIONS, []).append(row)
        return row

    def fail_reported(self, message: str = "relation does not exist"):
        self.fail_with = APIError({"message": message, "code": "42P01"})

    def fail_raised(self):
        self.fail_with = ConnectionError("network unreachable")


@pytest.fixture
def cfg() -> AppConfig:
    return AppConfig(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon",
        supabase_jwt_template="supabase",
        clerk_secret_key=None,
        clerk_api_url="https://api.clerk.com/v1",
        clerk_jwks_url=None,
        clerk_session_cookie="__session",
        dev_user_id=None,
        dev_plans=(),
        dev_features=(),
        default_use_fallback=False,
        permission_fail_open=True,
        log_level="INFO",
    )


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def revalidated() -> list[str]:
    return []


@pytest.fixture
def make_ctx(cfg, db, revalidated):
    def _make(
        auth: AuthState = ANONYMOUS,
        use_fallback: bool = False,
        store: Optional[FallbackCompanionStore] = None,
        policy: Optional[CompanionLimitPolicy] = None,
    ) -> DataContext:
        def factory(_cfg, caller):
            db.factory_calls.append(caller)
            return db

        return DataContext(
            cfg=cfg,
            use_fallback=use_fallback,
            auth=lambda: auth,
            store=store if store is not None else FallbackCompanionStore(),
            policy=policy or CompanionLimitPolicy(),
            revalidate=revalidated.append,
            client_factory=factory,
        )

    return _make


@pytest.fixture
def user() -> AuthState:
    return AuthState(user_id="user_123", session_id="sess_1", claims={"sub": "user_123"})


@pytest.fixture
def fake() -> Faker:
    f = Faker()
    Faker.seed(1234)
    return f


@pytest.fixture
def draft_factory(fake):
    def _make(**overrides) -> CompanionDraft:
        fields = {
            "name": f"{fake.first_name()} the {fake.word().title()}",
            "subject": fake.random_element(["science", "maths", "language", "coding", "history", "economics"]),
            "topic": fake.sentence(nb_words=4).rstrip("."),
            "voice": fake.random_element(["female", "male"]),
            "style": fake.random_element(["casual", "formal"]),
            "duration": fake.random_int(min=5, max=60),
        }
        fields.update(overrides)
        return CompanionDraft(**fields)

    return _make
