"""Tests for caller identity, capability claims and Clerk token minting."""

from dataclasses import replace
from types import SimpleNamespace

import pytest
import requests

from data import auth, clerk_client
from data.auth import ANONYMOUS, AuthState, _claim_values, _dev_auth, auth_from_session_token
from data.clerk_client import ClerkClient


class StubClerk:
    def __init__(self, claims=None, token="minted.jwt"):
        self.claims = claims
        self.token = token
        self.token_calls = []

    def verify_session_token(self, token):
        return self.claims

    def get_session_token(self, session_id, template):
        self.token_calls.append((session_id, template))
        return self.token


class TestClaims:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("u:pro", {"pro"}),
            ("u:3_companion_limit,o:team_feature", {"3_companion_limit", "team_feature"}),
            ("pro", {"pro"}),
            (["u:pro", "basic"], {"pro", "basic"}),
            ("", set()),
            (None, set()),
        ],
    )
    def test_claim_values(self, raw, expected):
        assert _claim_values(raw) == expected

    def test_has_plan_and_feature(self):
        state = AuthState(user_id="u", claims={"pla": "u:pro", "fea": "u:10_companion_limit"})
        assert state.has(plan="pro")
        assert state.has(feature="10_companion_limit")
        assert not state.has(feature="3_companion_limit")
        assert not state.has()


class TestAuthState:
    def test_anonymous(self):
        assert not ANONYMOUS.is_signed_in
        assert ANONYMOUS.get_token() is None

    def test_token_is_fetched_on_every_call(self):
        calls = []
        state = AuthState(user_id="u", token_getter=lambda template: calls.append(template) or f"tok-{len(calls)}")
        assert state.get_token("supabase") == "tok-1"
        assert state.get_token("supabase") == "tok-2"
        assert calls == ["supabase", "supabase"]


class TestSessionToken:
    def test_verified_session_becomes_auth_state(self):
        clerk = StubClerk(claims={"sub": "user_1", "sid": "sess_9", "pla": "u:pro"})
        state = auth_from_session_token("cookie.jwt", clerk)
        assert state.user_id == "user_1"
        assert state.has(plan="pro")
        assert state.get_token("supabase") == "minted.jwt"
        assert clerk.token_calls == [("sess_9", "supabase")]

    def test_invalid_session_is_anonymous(self):
        assert auth_from_session_token("bad", StubClerk(claims=None)) is ANONYMOUS
        assert auth_from_session_token(None, StubClerk(claims={"sub": "x"})) is ANONYMOUS


class TestDevIdentity:
    def test_without_dev_user_is_anonymous(self, cfg):
        assert _dev_auth(cfg) is ANONYMOUS

    def test_dev_user_carries_capabilities(self, cfg):
        dev = _dev_auth(replace(cfg, dev_user_id="dev_1", dev_features=("3_companion_limit",)))
        assert dev.user_id == "dev_1"
        assert dev.has(feature="3_companion_limit")
        assert dev.get_token() is None


class TestGetAuth:
    @pytest.fixture
    def cookies(self, monkeypatch):
        jar = {}
        monkeypatch.setattr(auth, "st", SimpleNamespace(context=SimpleNamespace(cookies=jar)))
        return jar

    def test_session_cookie_is_verified_with_clerk(self, cfg, cookies):
        cookies["__session"] = "cookie.jwt"
        clerk = StubClerk(claims={"sub": "user_7", "sid": "sess_7", "fea": "u:10_companion_limit"})
        caller = auth.get_auth(cfg, clerk=clerk)
        assert caller.user_id == "user_7"
        assert caller.session_id == "sess_7"
        assert caller.has(feature="10_companion_limit")

    def test_rejected_cookie_is_anonymous(self, cfg, cookies):
        cookies["__session"] = "forged.jwt"
        assert auth.get_auth(replace(cfg, dev_user_id="dev_1"), clerk=StubClerk(claims=None)) is ANONYMOUS

    def test_no_cookie_uses_dev_identity(self, cfg, cookies):
        clerk = StubClerk(claims={"sub": "never"})
        caller = auth.get_auth(replace(cfg, dev_user_id="dev_1", dev_plans=("pro",)), clerk=clerk)
        assert caller.user_id == "dev_1"
        assert caller.has(plan="pro")

    def test_no_cookie_and_no_dev_user_is_anonymous(self, cfg, cookies):
        assert auth.get_auth(cfg, clerk=StubClerk()) is ANONYMOUS

    def test_missing_request_context_falls_back_to_dev_identity(self, cfg, monkeypatch):
        class NoContext:
            @property
            def cookies(self):
                raise RuntimeError("no script run context")

        monkeypatch.setattr(auth, "st", SimpleNamespace(context=NoContext()))
        assert auth.get_auth(replace(cfg, dev_user_id="dev_1"), clerk=StubClerk()).user_id == "dev_1"


class FakeHttpResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class TestClerkClient:
    @pytest.fixture
    def clerk_cfg(self, cfg):
        return replace(cfg, clerk_secret_key="sk_test", clerk_jwks_url="https://clerk.example/.well-known/jwks.json")

    def test_unconfigured_client_returns_none(self, cfg):
        client = ClerkClient(cfg)
        assert not client.is_configured()
        assert client.get_session_token("sess", "supabase") is None
        assert client.verify_session_token("x.y.z") is None

    def test_mints_template_token(self, clerk_cfg, monkeypatch):
        seen = {}

        def fake_post(url, headers=None, timeout=None):
            seen["url"] = url
            seen["headers"] = headers
            return FakeHttpResponse(200, {"object": "token", "jwt": "abc.def.ghi"})

        monkeypatch.setattr(clerk_client.requests, "post", fake_post)
        token = ClerkClient(clerk_cfg).get_session_token("sess_1", "supabase")

        assert token == "abc.def.ghi"
        assert seen["url"] == "https://api.clerk.com/v1/sessions/sess_1/tokens/supabase"
        assert seen["headers"] == {"Authorization": "Bearer sk_test"}

    def test_http_error_returns_none(self, clerk_cfg, monkeypatch):
        monkeypatch.setattr(clerk_client.requests, "post", lambda *a, **kw: FakeHttpResponse(404, {}))
        assert ClerkClient(clerk_cfg).get_session_token("sess_1", "supabase") is None

    def test_network_error_returns_none(self, clerk_cfg, monkeypatch):
        def fail(*a, **kw):
            raise requests.ConnectionError("down")

        monkeypatch.setattr(clerk_client.requests, "post", fail)
        assert ClerkClient(clerk_cfg).get_session_token("sess_1", "supabase") is None

    def test_garbage_token_is_rejected(self, clerk_cfg):
        assert ClerkClient(clerk_cfg).verify_session_token("not-a-jwt") is None
