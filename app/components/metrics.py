from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from config import SUBJECT_COLORS, THEME
from data.models import Companion


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str
    help: Optional[str] = None


def render_kpi_row(kpis: list[Kpi]) -> None:
    cols = st.columns(len(kpis))
    for c, k in zip(cols, kpis):
        with c:
            st.markdown(
                f"""
<div class="metric-card" title="{k.help or ''}">
  <div class="metric-label">{k.label}</div>
  <div class="metric-value">{k.value}</div>
</div>
                """,
                unsafe_allow_html=True,
            )


def companions_frame(companions: Iterable[Companion]) -> pd.DataFrame:
    rows = [
        {"id": c.id, "name": c.name, "subject": c.subject, "topic": c.topic, "duration": c.duration}
        for c in companions
    ]
    return pd.DataFrame(rows, columns=["id", "name", "subject", "topic", "duration"])


def minutes_by_subject(companions: Iterable[Companion]) -> pd.DataFrame:
    """One row per subject: number of sessions and total minutes, busiest first."""
    df = companions_frame(companions)
    if df.empty:
        return pd.DataFrame(columns=["subject", "sessions", "minutes"])
    out = (
        df.groupby("subject", as_index=False)
        .agg(sessions=("id", "count"), minutes=("duration", "sum"))
        .sort_values(["minutes", "subject"], ascending=[False, True])
        .reset_index(drop=True)
    )
    return out


def apply_plotly_theme(fig: go.Figure, x_title: str, y_title: str) -> go.Figure:
    fig.update_layout(
        margin=dict(l=10, r=10, t=44, b=10),
        font=dict(color=THEME["text_primary"]),
        paper_bgcolor=THEME["bg_card"],
        plot_bgcolor=THEME["bg_card"],
        showlegend=False,
    )
    fig.update_xaxes(title_text=x_title, gridcolor=THEME["grid"], zeroline=False)
    fig.update_yaxes(title_text=y_title, gridcolor=THEME["grid"], zeroline=False)
    return fig


def subject_bar_chart(df: pd.DataFrame, y: str = "minutes", title: str = "") -> None:
    fig = px.bar(df, x="subject", y=y, color="subject", color_discrete_map=SUBJECT_COLORS, title=title)
    fig = apply_plotly_theme(fig, x_title="subject", y_title=y)
    fig.update_traces(marker_line_color=THEME["ink_900"], marker_line_width=1)
    st.plotly_chart(fig, use_container_width=True)
