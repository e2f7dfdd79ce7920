from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from config import AppConfig
from data.auth import AuthState


@dataclass(frozen=True)
class SidebarState:
    view: str
    use_fallback: bool


NAV_ITEMS = [
    ("🏠 Home", "home"),
    ("📚 Companions", "companions"),
    ("✨ New Companion", "new_companion"),
    ("🧭 My Journey", "journey"),
]

VIEW_LABELS = {view: label for label, view in NAV_ITEMS}


def navigate(view: str) -> None:
    """Switch the sidebar selection from inside a view (takes effect on rerun)."""
    st.session_state["nav_label"] = VIEW_LABELS[view]


def render_sidebar(cfg: AppConfig, auth: AuthState) -> SidebarState:
    with st.sidebar:
        st.markdown("### 🎓 Companions")
        st.caption("Voice tutors for every subject")

        labels = [l for l, _ in NAV_ITEMS]
        default_label = st.session_state.get("nav_label", labels[0])
        idx = labels.index(default_label) if default_label in labels else 0

        label = st.radio(
            "Nav",
            labels,
            index=idx,
            label_visibility="collapsed",
        )
        st.session_state["nav_label"] = label
        view = dict(NAV_ITEMS)[label]

        if auth.is_signed_in:
            st.caption(f"Signed in as `{auth.user_id}`")
        else:
            st.caption("Signed out")

        with st.expander("⚙️ Settings", expanded=False):
            use_fallback = st.toggle(
                "Use local fallback data",
                value=st.session_state.get("use_fallback", cfg.default_use_fallback),
                help="When off, the app queries Supabase. Any failure falls back to local data.",
            )
            st.session_state["use_fallback"] = use_fallback

            if not cfg.is_backend_configured:
                st.info("Live data needs `SUPABASE_URL` and `SUPABASE_ANON_KEY`.")
    use_fallback = st.session_state.get("use_fallback", cfg.default_use_fallback)

    return SidebarState(view=view, use_fallback=use_fallback)
