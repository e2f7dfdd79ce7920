from __future__ import annotations

from html import escape

import streamlit as st

from components.companion_card import subject_color
from components.header import render_source_notice
from data.auth import AuthState
from data.models import Companion
from data.service import DataContext, add_to_session_history, get_companion


QUERY_PARAM = "companion_id"


def open_companion(companion: Companion) -> None:
    st.query_params[QUERY_PARAM] = companion.id
    st.rerun()


def selected_companion_id() -> str | None:
    return st.query_params.get(QUERY_PARAM)


def close_companion() -> None:
    st.query_params.pop(QUERY_PARAM, None)
    st.rerun()


def render(ctx: DataContext, auth: AuthState, companion_id: str) -> None:
    res = get_companion(ctx, companion_id)
    render_source_notice(res)
    companion: Companion | None = res.value

    if st.button("← Back"):
        close_companion()

    if companion is None:
        st.info("Companion not found.")
        return
    if companion.id != companion_id:
        st.caption(f"Companion `{companion_id}` is unavailable; showing `{companion.name}` instead.")

    st.markdown(
        f"""
<div class="companion-card" style="background:{subject_color(companion.subject)}">
  <span class="subject-badge">{escape(companion.subject)}</span>
  <div class="card-name">{escape(companion.name)}</div>
  <div class="card-topic">{escape(companion.topic)}</div>
  <div class="card-duration">⏱ {companion.duration} minutes · {escape(companion.voice)} voice · {escape(companion.style)}</div>
</div>
        """,
        unsafe_allow_html=True,
    )
    st.caption(f"Data source: **{res.source}**")

    if not auth.is_signed_in:
        st.info("Sign in to start a session with this companion.")
        return

    if st.button("🎙️ Start session", type="primary"):
        started = add_to_session_history(ctx, companion.id)
        render_source_notice(started)
        if started.is_live and started.value is not None:
            ctx.revalidate("/")
            ctx.revalidate("/journey")
            st.success("Session saved to your history.")
        else:
            st.info("Session started, but it could not be saved to your history.")
