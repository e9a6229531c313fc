"""
Plotly charts for the progress page.

Returns Plotly JSON for client-side rendering.
"""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from ..core.model import ProgressMetrics, Session
from ..core.reporting import completed_sessions
from ..core.scoring import length_score

METRIC_LABELS = ["Engagement", "Structure", "Thoroughness"]


def create_score_trend_chart(
    sessions: Sequence[Session],
    title: str = "Score Trend",
) -> str:
    """
    Line chart of final scores across completed sessions, oldest first.

    Args:
        sessions: Any of the user's sessions; non-completed ones are skipped
        title: Chart title

    Returns:
        JSON string for Plotly.js rendering
    """
    done = completed_sessions(sessions)
    x = [(s.completed_at or s.started_at).isoformat() for s in done]
    y = [s.score or 0 for s in done]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=x,
        y=y,
        mode="lines+markers",
        name="Score",
        line=dict(color="#4A90D9", width=2),
        marker=dict(size=8),
        hovertemplate="%{x}: %{y:.0f}/100<extra></extra>",
    ))

    # Strong / Good rating bands
    for level, color in ((70, "rgba(46, 204, 113, 0.4)"), (50, "rgba(241, 196, 15, 0.4)")):
        fig.add_hline(y=level, line=dict(color=color, width=1, dash="dot"))

    fig.update_layout(
        yaxis=dict(range=[0, 100], title="Score"),
        xaxis=dict(title="Completed"),
        title=dict(text=title, x=0.5, font=dict(size=16)),
        showlegend=False,
        paper_bgcolor="rgba(0, 0, 0, 0)",
        plot_bgcolor="rgba(0, 0, 0, 0)",
        margin=dict(t=60, b=60, l=60, r=30),
        height=350,
    )
    return fig.to_json()


def create_progress_radar(
    progress: ProgressMetrics,
    title: str = "Session Progress",
) -> str:
    """Radar of engagement, structure and thoroughness (0-100 each) for one session."""
    values = [
        progress.engagement,
        progress.structure,
        length_score(progress.message_count),
    ]
    labels_closed = METRIC_LABELS + [METRIC_LABELS[0]]
    values_closed = values + [values[0]]

    fig = go.Figure()
    fig.add_trace(go.Scatterpolar(
        r=values_closed,
        theta=labels_closed,
        fill="toself",
        name="This session",
        line=dict(color="#4A90D9", width=2),
        fillcolor="rgba(74, 144, 217, 0.25)",
        hovertemplate="%{theta}: %{r:.0f}/100<extra></extra>",
    ))

    fig.update_layout(
        polar=dict(
            radialaxis=dict(
                visible=True,
                range=[0, 100],
                tickvals=[20, 40, 60, 80, 100],
                gridcolor="rgba(200, 200, 200, 0.3)",
            ),
            bgcolor="rgba(0, 0, 0, 0)",
        ),
        showlegend=False,
        title=dict(text=title, x=0.5, font=dict(size=16)),
        paper_bgcolor="rgba(0, 0, 0, 0)",
        margin=dict(t=60, b=40, l=60, r=60),
        height=400,
        width=450,
    )
    return fig.to_json()
