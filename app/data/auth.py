"""
Caller identity for the current request.

`AuthState` is the only shape the data layer sees: an optional user id, a
token getter parameterised by template name, and a capability check
(`has(plan=...)` / `has(feature=...)`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import streamlit as st

from config import AppConfig
from data.clerk_client import ClerkClient, get_clerk_client


logger = logging.getLogger(__name__)

TokenGetter = Callable[[str], Optional[str]]


def _claim_values(raw: Any) -> set[str]:
    """
    Session claims list plans/features as "u:pro,o:team" (scope prefix optional).
    Lists are accepted too.
    """
    if not raw:
        return set()
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    out = set()
    for item in items:
        item = str(item).strip()
        if not item:
            continue
        _, sep, name = item.partition(":")
        out.add(name if sep else item)
    return out


@dataclass(frozen=True)
class AuthState:
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    claims: dict[str, Any] = field(default_factory=dict)
    token_getter: Optional[TokenGetter] = None

    @property
    def is_signed_in(self) -> bool:
        return bool(self.user_id)

    @property
    def plans(self) -> set[str]:
        return _claim_values(self.claims.get("pla"))

    @property
    def features(self) -> set[str]:
        return _claim_values(self.claims.get("fea"))

    def get_token(self, template: str = "supabase") -> Optional[str]:
        # Called per operation; nothing is cached here
        if self.token_getter is None:
            return None
        return self.token_getter(template)

    def has(self, plan: Optional[str] = None, feature: Optional[str] = None) -> bool:
        if plan is not None and plan in self.plans:
            return True
        if feature is not None and feature in self.features:
            return True
        return False


ANONYMOUS = AuthState()


def _dev_auth(cfg: AppConfig) -> AuthState:
    if not cfg.dev_user_id:
        return ANONYMOUS
    return AuthState(
        user_id=cfg.dev_user_id,
        claims={"sub": cfg.dev_user_id, "pla": ",".join(cfg.dev_plans), "fea": ",".join(cfg.dev_features)},
    )


def auth_from_session_token(token: Optional[str], clerk: ClerkClient) -> AuthState:
    claims = clerk.verify_session_token(token) if token else None
    if not claims or not claims.get("sub"):
        return ANONYMOUS
    session_id = claims.get("sid")
    return AuthState(
        user_id=claims["sub"],
        session_id=session_id,
        claims=claims,
        token_getter=lambda template: clerk.get_session_token(session_id, template),
    )


def get_auth(cfg: AppConfig, clerk: Optional[ClerkClient] = None) -> AuthState:
    """
    Resolve the caller from the current Streamlit request.
    - Session cookie present: verified with Clerk
    - No cookie: development identity from config, else anonymous
    """
    try:
        token = st.context.cookies.get(cfg.clerk_session_cookie)
    except Exception as e:
        # Outside a script run there is no request context
        logger.debug("No request context for auth: %s", e)
        token = None

    if token:
        return auth_from_session_token(token, clerk or get_clerk_client(cfg))
    return _dev_auth(cfg)
