from __future__ import annotations

import streamlit as st

from config import THEME


APP_TITLE = "Companion Library"


def apply_theme() -> None:
    st.set_page_config(
        page_title=APP_TITLE,
        page_icon="",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Centralized theme tokens (config.py) -> CSS variables
    radius = int(THEME["radius_px"])
    css = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Bricolage+Grotesque:wght@400;600;700&display=swap');

:root{
  --accent: __ACCENT__;
  --accent-hover: __ACCENT_HOVER__;
  --ink-900: __INK_900__;
  --ink-700: __INK_700__;

  --bg-primary: __BG_PRIMARY__;
  --bg-secondary: __BG_SECONDARY__;
  --card-bg: __CARD_BG__;
  --card-border: __CARD_BORDER__;

  --text-primary: __TEXT_PRIMARY__;
  --text-secondary: __TEXT_SECONDARY__;
  --radius: __RADIUS_PX__px;
}

#MainMenu { visibility: hidden; }
footer { visibility: hidden; }

html, body, [data-testid="stAppViewContainer"]{
  background: var(--bg-primary) !important;
  font-family: "Bricolage Grotesque", system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif !important;
  color: var(--text-primary) !important;
}

[data-testid="stSidebar"]{
  background: var(--bg-secondary) !important;
  border-right: 1px solid var(--grid, #e5e5e5) !important;
}

.app-header{
  display:flex; align-items:center; justify-content:space-between;
  padding: 8px 0 16px 0;
}
.app-title{ font-size: 1.6rem; font-weight: 700; }
.app-subtitle{ color: var(--text-secondary); }
.pill{
  border: 1px solid var(--card-border); border-radius: 999px;
  padding: 4px 12px; font-size: .85rem;
}
.pill .dot{ display:inline-block; width:8px; height:8px; border-radius:50%; background: var(--accent); margin-right:6px; }
.pill.live .dot{ background: #12B76A; }

.section-title{ font-size: 1.5rem; font-weight: 700; margin: 24px 0 12px 0; }

.companion-card{
  border-radius: var(--radius);
  border: 1px solid var(--card-border);
  padding: 16px 18px;
  min-height: 180px;
  margin-bottom: 8px;
}
.companion-card .subject-badge{
  display:inline-block; background: var(--ink-900); color:#fff;
  border-radius: 999px; padding: 2px 10px; font-size: .75rem;
}
.companion-card .card-name{ font-size: 1.3rem; font-weight: 700; margin-top: 10px; }
.companion-card .card-topic{ font-size: .9rem; margin-top: 4px; }
.companion-card .card-duration{ font-size: .85rem; color: var(--ink-700); margin-top: 10px; }

.companion-row{
  display:flex; align-items:center; justify-content:space-between;
  border-bottom: 1px solid rgba(0,0,0,.08); padding: 10px 0;
}
.companion-icon{
  width: 44px; height: 44px; border-radius: 10px;
  display:flex; align-items:center; justify-content:center; font-weight:700;
}

.cta{
  background: var(--ink-900); color: #fff; border-radius: var(--radius);
  padding: 24px; text-align:center;
}
.cta .cta-badge{ background: #FCCC41; color: var(--ink-900); border-radius: 4px; padding: 2px 8px; font-size:.8rem; }
.cta .cta-title{ font-size: 1.5rem; font-weight: 700; margin-top: 12px; }
.cta .cta-body{ font-size: .9rem; opacity: .85; margin-top: 6px; }

.metric-card{
  border: 1px solid var(--card-border); border-radius: var(--radius);
  padding: 14px 16px; background: var(--card-bg);
}
.metric-label{ font-size: .85rem; color: var(--text-secondary); }
.metric-value{ font-size: 1.6rem; font-weight: 700; }

.stButton > button{
  border-radius: 8px !important;
}
.stButton > button[kind="primary"]{
  background: var(--accent) !important; border-color: var(--accent) !important;
}
.stButton > button[kind="primary"]:hover{
  background: var(--accent-hover) !important;
}
</style>
"""

    tokens = {
        "__ACCENT__": str(THEME["accent_primary"]),
        "__ACCENT_HOVER__": str(THEME["accent_secondary"]),
        "__INK_900__": str(THEME["ink_900"]),
        "__INK_700__": str(THEME["ink_700"]),
        "__BG_PRIMARY__": str(THEME["bg_primary"]),
        "__BG_SECONDARY__": str(THEME["bg_secondary"]),
        "__CARD_BG__": str(THEME["bg_card"]),
        "__CARD_BORDER__": str(THEME["border_color"]),
        "__TEXT_PRIMARY__": str(THEME["text_primary"]),
        "__TEXT_SECONDARY__": str(THEME["text_secondary"]),
        "__RADIUS_PX__": str(radius),
    }
    for k, v in tokens.items():
        css = css.replace(k, v)

    st.markdown(css, unsafe_allow_html=True)
