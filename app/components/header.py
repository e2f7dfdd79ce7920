from __future__ import annotations

from html import escape

import streamlit as st


def render_header(app_name: str, subtitle: str, right_pill: str, live: bool = False) -> None:
    pill_cls = "pill live" if live else "pill"
    st.markdown(
        f"""
<div class="app-header">
  <div>
    <div class="app-title">{escape(app_name)}</div>
    <div class="app-subtitle">{escape(subtitle)}</div>
  </div>
  <div class="{pill_cls}"><span class="dot"></span>{escape(right_pill)}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_source_notice(*results) -> None:
    """Surface fallback warnings once per distinct message."""
    seen = set()
    for res in results:
        if res is not None and res.warning and res.warning not in seen:
            seen.add(res.warning)
            st.warning(res.warning)
