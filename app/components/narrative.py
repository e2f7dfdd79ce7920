from __future__ import annotations

from html import escape

import streamlit as st


def render_section_title(title: str) -> None:
    st.markdown(f'<div class="section-title">{escape(title)}</div>', unsafe_allow_html=True)


def render_cta(on_click_key: str = "cta_build") -> bool:
    """
    Call-to-action card used on the home page.
    Returns True when the build button was pressed.
    """
    st.markdown(
        """
<div class="cta">
  <span class="cta-badge">Start learning your way.</span>
  <div class="cta-title">Build and Personalize Learning Companion</div>
  <div class="cta-body">Pick a name, subject, voice, &amp; personality, and start learning through voice conversations that feel natural and fun.</div>
</div>
        """,
        unsafe_allow_html=True,
    )
    return st.button("➕ Build a New Companion", key=on_click_key, type="primary", use_container_width=True)
