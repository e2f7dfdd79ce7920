"""
Clerk Client - identity provider integration
=============================================
Verifies the caller's session token and mints per-request JWTs from a named
template (the "supabase" template carries the claims row-level security needs).

API Reference: https://clerk.com/docs/reference/backend-api
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

import jwt
import requests

from config import AppConfig


logger = logging.getLogger(__name__)


class ClerkClient:
    """
    Thin Clerk Backend API client.

    Every method returns None on failure rather than raising; the caller
    decides whether a missing identity means anonymous or an error.
    """

    def __init__(self, cfg: AppConfig, timeout: float = 10):
        self.cfg = cfg
        self.timeout = timeout
        self._base_url = cfg.clerk_api_url
        self._headers = {"Authorization": f"Bearer {cfg.clerk_secret_key}"} if cfg.clerk_secret_key else {}
        self._jwks: Optional[jwt.PyJWKClient] = None

    def is_configured(self) -> bool:
        return bool(self.cfg.clerk_secret_key and self.cfg.clerk_jwks_url)

    def _jwks_client(self) -> jwt.PyJWKClient:
        if self._jwks is None:
            self._jwks = jwt.PyJWKClient(self.cfg.clerk_jwks_url, headers=self._headers or None)
        return self._jwks

    def verify_session_token(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify a session JWT against the instance JWKS.
        Returns the decoded claims or None if the token is invalid/expired.
        """
        if not self.is_configured() or not token:
            return None
        try:
            signing_key = self._jwks_client().get_signing_key_from_jwt(token)
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                options={"verify_aud": False},
                leeway=5,
            )
        except jwt.PyJWTError as e:
            logger.warning("Rejected session token: %s", e)
            return None

    def get_session_token(self, session_id: str, template: str) -> Optional[str]:
        """
        Mint a fresh JWT for the session from a named template.
        Never cached: template tokens are short-lived and tied to the request.
        """
        if not self.is_configured() or not session_id:
            return None
        try:
            resp = requests.post(
                f"{self._base_url}/sessions/{session_id}/tokens/{template}",
                headers=self._headers,
                timeout=self.timeout,
            )
            if resp.status_code >= 300:
                logger.warning("Token request for template %r failed: HTTP %s", template, resp.status_code)
                return None
            return resp.json().get("jwt")
        except (requests.RequestException, ValueError) as e:
            logger.warning("Token request for template %r failed: %s", template, e)
            return None


@lru_cache(maxsize=4)
def get_clerk_client(cfg: AppConfig) -> ClerkClient:
    """Factory function to get a Clerk client instance (shared so JWKS keys are reused)."""
    return ClerkClient(cfg)
