from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, ClientOptions, create_client

from config import AppConfig
from data.auth import AuthState


logger = logging.getLogger(__name__)


def create_supabase_client(cfg: AppConfig, auth: AuthState) -> Client:
    """
    Supabase client scoped to the current caller.

    The bearer token is fetched from the identity provider on every call, never
    cached: template tokens are short-lived and tied to the calling request.
    Missing URL/key surfaces as an exception from `create_client`, which the
    service layer turns into fallback data.
    """
    token: Optional[str] = auth.get_token(cfg.supabase_jwt_template) if auth.is_signed_in else None
    options = ClientOptions(headers={"Authorization": f"Bearer {token}"}) if token else None
    if auth.is_signed_in and not token:
        logger.debug("No %r token for %s; using the public key only", cfg.supabase_jwt_template, auth.user_id)
    return create_client(cfg.supabase_url or "", cfg.supabase_anon_key or "", options=options)
