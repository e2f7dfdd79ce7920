from __future__ import annotations

import streamlit as st

from components.companion_card import render_companions_list
from components.header import render_source_notice
from components.metrics import Kpi, minutes_by_subject, render_kpi_row, subject_bar_chart
from data.auth import AuthState
from data.revalidation import cached_for_path
from data.service import DataContext, get_bookmarked_companions, get_user_companions, get_user_sessions


PATH = "/journey"


@cached_for_path(PATH)
def _load_journey(_ctx: DataContext, user_id: str, use_fallback: bool):
    return (
        get_user_sessions(_ctx, user_id, 50),
        get_user_companions(_ctx, user_id),
        get_bookmarked_companions(_ctx, user_id),
    )


def render(ctx: DataContext, auth: AuthState) -> None:
    st.title("My Journey")

    if not auth.is_signed_in:
        st.info("Sign in to see your sessions, companions and bookmarks.")
        return

    sessions, companions, bookmarks = _load_journey(ctx, auth.user_id, ctx.use_fallback)
    render_source_notice(sessions, companions, bookmarks)

    stats = minutes_by_subject(sessions.value)
    render_kpi_row(
        [
            Kpi("Lessons completed", f"{len(sessions.value)}"),
            Kpi("Minutes learned", f"{int(stats['minutes'].sum()) if len(stats) else 0}"),
            Kpi("Companions created", f"{len(companions.value)}"),
            Kpi("Bookmarks", f"{len(bookmarks.value)}"),
        ]
    )

    if len(stats):
        subject_bar_chart(stats, y="minutes", title="Minutes by subject")

    tab1, tab2, tab3 = st.tabs(["Completed lessons", "My companions", "Bookmarked"])
    with tab1:
        render_companions_list("Completed lessons", sessions.value, empty_text="No lessons completed yet.")
    with tab2:
        render_companions_list("My companions", companions.value, empty_text="You haven't built a companion yet.")
    with tab3:
        render_companions_list("Bookmarked companions", bookmarks.value, empty_text="No bookmarks yet.")
    st.caption(f"Data source: **{sessions.source}**")
