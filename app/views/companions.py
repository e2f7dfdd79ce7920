from __future__ import annotations

import streamlit as st

from components.companion_card import render_card_grid
from components.header import render_source_notice
from config import SUBJECTS
from data.auth import AuthState
from data.models import Companion
from data.revalidation import cached_for_path, consume_stale
from data.service import (
    DataContext,
    add_bookmark,
    get_all_companions,
    get_bookmarked_companions,
    mark_bookmarked,
    remove_bookmark,
)
from views.companion_session import open_companion


PATH = "/companions"
JOURNEY_PATH = "/journey"
PAGE_SIZE = 9


@cached_for_path(PATH)
def _load_library(_ctx: DataContext, user_id: str | None, use_fallback: bool, subject: str | None, topic: str | None, page: int):
    return get_all_companions(_ctx, limit=PAGE_SIZE, page=page, subject=subject, topic=topic)


@cached_for_path(PATH)
def _load_bookmarks(_ctx: DataContext, user_id: str, use_fallback: bool):
    return get_bookmarked_companions(_ctx, user_id)


def toggle_bookmark(ctx: DataContext, companion: Companion):
    """Flip the caller's bookmark; the journey page lists bookmarks too."""
    if companion.bookmarked:
        res = remove_bookmark(ctx, companion.id, PATH)
    else:
        res = add_bookmark(ctx, companion.id, PATH)
    ctx.revalidate(JOURNEY_PATH)
    return res


def render(ctx: DataContext, auth: AuthState) -> None:
    st.title("Companion Library")

    c1, c2 = st.columns([2, 1])
    topic = c1.text_input("Search", placeholder="Search by topic or name...").strip() or None
    subject_choice = c2.selectbox("Subject", ["All subjects"] + SUBJECTS)
    subject = None if subject_choice == "All subjects" else subject_choice

    filters = (subject, topic)
    if st.session_state.get("library_filters") != filters:
        st.session_state["library_filters"] = filters
        st.session_state["library_page"] = 1
    page = int(st.session_state.get("library_page", 1))

    res = _load_library(ctx, auth.user_id, ctx.use_fallback, subject, topic, page)
    bookmarks = _load_bookmarks(ctx, auth.user_id, ctx.use_fallback) if auth.is_signed_in else None
    render_source_notice(res, bookmarks)
    if consume_stale(PATH):
        st.toast("Library refreshed")

    companions = res.value
    if bookmarks is not None:
        companions = mark_bookmarked(companions, [c.id for c in bookmarks.value])

    def toggle(companion: Companion) -> None:
        toggle_bookmark(ctx, companion)
        st.rerun()

    if not companions:
        st.info("No companions match those filters.")
    else:
        render_card_grid(
            companions,
            key_prefix="library",
            on_launch=open_companion,
            on_toggle_bookmark=toggle if auth.is_signed_in else None,
        )
    st.caption(f"Data source: **{res.source}** · page {page}")

    prev_col, _, next_col = st.columns([1, 4, 1])
    if prev_col.button("← Previous", disabled=page <= 1):
        st.session_state["library_page"] = page - 1
        st.rerun()
    if next_col.button("Next →", disabled=len(companions) < PAGE_SIZE):
        st.session_state["library_page"] = page + 1
        st.rerun()
