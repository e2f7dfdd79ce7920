from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


#
# Shared theme tokens
# - Centralized here so components never hard-code colors.
#
THEME = {
    "bg_primary": "#FFFFFF",
    "bg_secondary": "#FAFAF7",
    "bg_card": "#FFFFFF",
    "accent_primary": "#FE5933",    # CTA orange
    "accent_secondary": "#FF7A57",
    "ink_900": "#0F0F10",
    "ink_700": "#2A2A2E",
    "text_primary": "#0F0F10",
    "text_secondary": "rgba(15, 15, 16, 0.64)",
    "border_color": "#0F0F10",
    "grid": "rgba(15, 15, 16, 0.10)",
    "radius_px": 16,
}

# Card background per subject
SUBJECT_COLORS = {
    "science": "#E5D0FF",
    "maths": "#FFDA6E",
    "language": "#BDE7FF",
    "coding": "#FFC8E4",
    "history": "#FFECC8",
    "economics": "#C8FFDF",
}

SUBJECTS = list(SUBJECT_COLORS)
VOICES = ["female", "male"]
STYLES = ["casual", "formal"]


@dataclass(frozen=True)
class AppConfig:
    # Required for live data (Supabase / PostgREST)
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    supabase_jwt_template: str

    # Identity provider (Clerk). If unset, callers are anonymous unless a dev identity is configured.
    clerk_secret_key: Optional[str]
    clerk_api_url: str
    clerk_jwks_url: Optional[str]
    clerk_session_cookie: str

    # Local development identity (used only when no session cookie is present)
    dev_user_id: Optional[str]
    dev_plans: tuple[str, ...]
    dev_features: tuple[str, ...]

    # Defaults
    default_use_fallback: bool
    permission_fail_open: bool
    log_level: str

    @property
    def is_backend_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getbool(name: str, default: bool) -> bool:
    return (_getenv(name, "true" if default else "false") or "").lower() in ("1", "true", "yes", "on")


def _getlist(name: str) -> tuple[str, ...]:
    raw = _getenv(name) or ""
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def get_config() -> AppConfig:
    """
    Centralized config: this is the ONLY place env vars are read.
    - Loads `.env` if present (local dev)
    - Real environment variables always win over `.env`
    """
    load_dotenv(override=False)

    return AppConfig(
        supabase_url=_getenv("SUPABASE_URL"),
        supabase_anon_key=_getenv("SUPABASE_ANON_KEY"),
        supabase_jwt_template=_getenv("SUPABASE_JWT_TEMPLATE", "supabase") or "supabase",
        clerk_secret_key=_getenv("CLERK_SECRET_KEY"),
        clerk_api_url=(_getenv("CLERK_API_URL", "https://api.clerk.com/v1") or "").rstrip("/"),
        clerk_jwks_url=_getenv("CLERK_JWKS_URL"),
        clerk_session_cookie=_getenv("CLERK_SESSION_COOKIE", "__session") or "__session",
        dev_user_id=_getenv("DEV_USER_ID"),
        dev_plans=_getlist("DEV_PLANS"),
        dev_features=_getlist("DEV_FEATURES"),
        default_use_fallback=_getbool("USE_FALLBACK_DATA", False),
        permission_fail_open=_getbool("COMPANION_PERMISSION_FAIL_OPEN", True),
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )


_LOGGING_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger. Safe to call on every rerun."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _LOGGING_CONFIGURED = True
