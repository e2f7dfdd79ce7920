from __future__ import annotations

import streamlit as st

from components.companion_card import render_companion_card
from components.header import render_source_notice
from config import STYLES, SUBJECTS, VOICES
from data.auth import AuthState
from data.models import CompanionDraft
from data.service import DataContext, DataResult, create_companion, new_companion_permissions
from views.companion_session import open_companion


# Pages whose cached loaders list companions
REFRESHED_PATHS = ("/", "/companions", "/journey")


def build_companion(ctx: DataContext, draft: CompanionDraft) -> DataResult:
    created = create_companion(ctx, draft)
    for path in REFRESHED_PATHS:
        ctx.revalidate(path)
    return created


def render(ctx: DataContext, auth: AuthState) -> None:
    st.title("Companion Builder")

    if not auth.is_signed_in:
        st.info("Sign in to build your own companion.")
        return

    allowed = new_companion_permissions(ctx)
    render_source_notice(allowed)
    if not allowed.value:
        st.warning("You've reached your companion limit. Upgrade your plan to create more companions.")
        return

    last = st.session_state.get("last_created")
    if last is not None:
        render_source_notice(last)
        st.success(f"Created **{last.value.name}** ({last.source}).")
        render_companion_card(last.value, key_prefix="created", on_launch=open_companion)
        if st.button("Build another"):
            st.session_state.pop("last_created", None)
            st.rerun()
        return

    with st.form("new_companion", clear_on_submit=False):
        name = st.text_input("Companion name", placeholder="Enter the companion name - ex: Calculus King")
        subject = st.selectbox("Subject", SUBJECTS)
        topic = st.text_area("What should the companion help with?", placeholder="Ex. Derivatives & Integrals")
        voice = st.selectbox("Voice", VOICES)
        style = st.selectbox("Style", STYLES)
        duration = st.number_input("Estimated session duration in minutes", min_value=1, max_value=120, value=15, step=1)
        submitted = st.form_submit_button("Build Your Companion", type="primary")

    if not submitted:
        return

    if not name.strip() or not topic.strip():
        st.error("Name and topic are required.")
        return

    draft = CompanionDraft(
        name=name.strip(),
        subject=subject,
        topic=topic.strip(),
        voice=voice,
        style=style,
        duration=int(duration),
    )
    st.session_state["last_created"] = build_companion(ctx, draft)
    st.rerun()
