"""
Routing only.

All view logic lives in app/views/.
All env reads happen ONLY in config.py.
"""

from __future__ import annotations

import os
import sys

# Make `app/` importable as a flat module path when running:
#   streamlit run app/app.py
APP_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(APP_DIR, ".."))
for p in [APP_DIR, REPO_ROOT]:
    if p not in sys.path:
        sys.path.insert(0, p)

import streamlit as st  # noqa: E402

from components.styles import apply_theme  # noqa: E402
from components.sidebar import render_sidebar  # noqa: E402
from components.header import render_header  # noqa: E402
from config import configure_logging, get_config  # noqa: E402
from data.auth import get_auth  # noqa: E402
from data.service import get_data_context  # noqa: E402

from views import home, companions, companion_session, new_companion, journey  # noqa: E402


def main() -> None:
    apply_theme()
    cfg = get_config()
    configure_logging(cfg.log_level)
    auth = get_auth(cfg)
    state = render_sidebar(cfg, auth)
    ctx = get_data_context(cfg, state.use_fallback)

    render_header(
        app_name="Companion Library",
        subtitle="Real-time voice tutors for every subject",
        right_pill=f"Data: {'Local fallback' if state.use_fallback else 'Supabase (fallback on error)'}",
        live=not state.use_fallback,
    )

    # A selected companion takes over the page until closed
    companion_id = companion_session.selected_companion_id()
    if companion_id:
        companion_session.render(ctx, auth, companion_id)
        return

    # Routing only
    if state.view == "home":
        home.render(ctx, auth)
    elif state.view == "companions":
        companions.render(ctx, auth)
    elif state.view == "new_companion":
        new_companion.render(ctx, auth)
    elif state.view == "journey":
        journey.render(ctx, auth)
    else:
        st.error("Unknown view")


if __name__ == "__main__":
    main()
