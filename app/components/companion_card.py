from __future__ import annotations

from html import escape
from typing import Callable, Iterable, Optional

import streamlit as st

from config import SUBJECT_COLORS
from data.models import Companion


def subject_color(subject: str) -> str:
    return SUBJECT_COLORS.get((subject or "").lower(), "#F1F1F1")


def render_companion_card(
    companion: Companion,
    key_prefix: str,
    on_launch: Optional[Callable[[Companion], None]] = None,
    on_toggle_bookmark: Optional[Callable[[Companion], None]] = None,
) -> None:
    st.markdown(
        f"""
<div class="companion-card" style="background:{subject_color(companion.subject)}">
  <span class="subject-badge">{escape(companion.subject)}</span>
  <div class="card-name">{escape(companion.name)}</div>
  <div class="card-topic">{escape(companion.topic)}</div>
  <div class="card-duration">⏱ {companion.duration} minutes</div>
</div>
        """,
        unsafe_allow_html=True,
    )
    c1, c2 = st.columns([3, 1])
    if on_launch is not None and c1.button("Launch Lesson", key=f"{key_prefix}_launch_{companion.id}", use_container_width=True):
        on_launch(companion)
    if on_toggle_bookmark is not None:
        icon = "★" if companion.bookmarked else "☆"
        if c2.button(icon, key=f"{key_prefix}_bm_{companion.id}", help="Bookmark", use_container_width=True):
            on_toggle_bookmark(companion)


def render_card_grid(
    companions: Iterable[Companion],
    key_prefix: str,
    columns: int = 3,
    on_launch: Optional[Callable[[Companion], None]] = None,
    on_toggle_bookmark: Optional[Callable[[Companion], None]] = None,
) -> None:
    companions = list(companions)
    for start in range(0, len(companions), columns):
        cols = st.columns(columns)
        for col, companion in zip(cols, companions[start : start + columns]):
            with col:
                render_companion_card(companion, key_prefix, on_launch=on_launch, on_toggle_bookmark=on_toggle_bookmark)


def render_companions_list(title: str, companions: Iterable[Companion], empty_text: str = "Nothing here yet.") -> None:
    st.markdown(f"#### {escape(title)}")
    companions = list(companions)
    if not companions:
        st.info(empty_text)
        return
    rows = []
    for c in companions:
        initial = escape(c.subject[:1].upper() or "?")
        rows.append(
            f"""
<div class="companion-row">
  <div style="display:flex; gap:12px; align-items:center;">
    <div class="companion-icon" style="background:{subject_color(c.subject)}">{initial}</div>
    <div>
      <div style="font-weight:700;">{escape(c.name)}</div>
      <div style="font-size:.85rem;">{escape(c.topic)}</div>
    </div>
  </div>
  <span class="subject-badge" style="background:#0F0F10;color:#fff;border-radius:999px;padding:2px 10px;font-size:.75rem;">{escape(c.subject)}</span>
  <div style="font-size:.85rem;">{c.duration} mins</div>
</div>
            """
        )
    st.markdown("".join(rows), unsafe_allow_html=True)
