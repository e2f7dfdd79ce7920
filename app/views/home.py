from __future__ import annotations

import streamlit as st

from components.companion_card import render_card_grid, render_companions_list
from components.header import render_source_notice
from components.narrative import render_cta, render_section_title
from components.sidebar import navigate
from data.auth import AuthState
from data.revalidation import cached_for_path
from data.service import DataContext, get_all_companions, get_recent_sessions, popular_companions
from views.companion_session import open_companion


PATH = "/"


@cached_for_path(PATH)
def _load_home(_ctx: DataContext, user_id: str, use_fallback: bool):
    # user_id/use_fallback only key the cache; _ctx is not hashed
    return get_all_companions(_ctx, limit=3), get_recent_sessions(_ctx, 10)


def render(ctx: DataContext, auth: AuthState) -> None:
    popular = popular_companions()

    # Signed out: skip the backend and show seeded content immediately
    if auth.is_signed_in:
        companions_res, recent_res = _load_home(ctx, auth.user_id, ctx.use_fallback)
        render_source_notice(companions_res, recent_res)
        companions = companions_res.value
        recent = recent_res.value
    else:
        companions = []
        recent = popular

    render_section_title("Popular Companions")
    render_card_grid(popular, key_prefix="popular", on_launch=open_companion)

    if companions:
        render_section_title("Fresh in the library")
        render_card_grid(companions, key_prefix="fresh", on_launch=open_companion)

    left, right = st.columns([2, 1])
    with left:
        render_companions_list("Recently completed sessions", recent, empty_text="No sessions yet.")
    with right:
        if render_cta():
            navigate("new_companion")
            st.rerun()
