from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from dashboard.constants import MOOD_META, PROJECT_STATUS_META, Mood, ProjectStatus
from dashboard.filters import parse_record_datetime
from dashboard.metrics import logs_by_day
from dashboard.theme import get_active_theme


def _active_theme():
    return get_active_theme()[1]


def apply_common_plot_style(fig, title, show_xgrid=True, show_ygrid=True):
    theme = _active_theme()
    fig.update_layout(
        title=title,
        title_font=dict(color=theme["text_main"], size=15),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=theme["text_main"]),
        margin=dict(l=40, r=20, t=40, b=30),
        xaxis=dict(
            showgrid=show_xgrid,
            gridcolor=theme["plot_grid"],
            tickfont=dict(color=theme["text_soft"]),
            zeroline=False,
            showline=True,
            linecolor=theme["border"],
        ),
        yaxis=dict(
            showgrid=show_ygrid,
            gridcolor=theme["plot_grid"],
            zeroline=False,
            tickfont=dict(color=theme["text_soft"]),
            showline=True,
            linecolor=theme["border"],
        ),
    )
    return fig


def mood_frame(logs):
    """One row per log day: the mean mood score of that day's logs."""
    grouped = logs_by_day(logs)
    return pd.DataFrame(
        [{"date": day, "mood": sum(scores) / len(scores)} for day, scores in grouped.items()],
        columns=["date", "mood"],
    )


def mood_trend_chart(logs, height=260):
    frame = mood_frame(logs)
    theme = _active_theme()
    fig = go.Figure(
        data=go.Scatter(
            x=frame["date"],
            y=frame["mood"],
            mode="lines+markers",
            line=dict(color=MOOD_META[Mood.GOOD]["color"], width=2),
            marker=dict(size=8, color=MOOD_META[Mood.GOOD]["color"], line=dict(width=1, color=theme["plot_marker_line"])),
        )
    )
    apply_common_plot_style(fig, "Mood over time")
    fig.update_layout(height=height)
    fig.update_yaxes(
        range=[0.5, 5.5],
        tickmode="array",
        tickvals=[1, 2, 3, 4, 5],
        ticktext=[MOOD_META[mood]["label"] for mood in Mood],
    )
    return fig


def project_status_chart(by_status, height=260):
    statuses = list(ProjectStatus)
    fig = go.Figure(
        data=go.Bar(
            x=[PROJECT_STATUS_META[status]["label"] for status in statuses],
            y=[by_status.get(status.value, 0) for status in statuses],
            marker_color=[PROJECT_STATUS_META[status]["color"] for status in statuses],
        )
    )
    apply_common_plot_style(fig, "Projects by status", show_xgrid=False)
    fig.update_layout(height=height)
    return fig


def hours_by_day_chart(logs, height=260):
    totals = {}
    for log in logs:
        moment = parse_record_datetime(log.get("log_date"))
        if moment is None:
            continue
        totals[moment.date()] = totals.get(moment.date(), 0) + int(log.get("duration_minutes") or 0)
    days = sorted(totals)
    fig = go.Figure(
        data=go.Bar(
            x=days,
            y=[round(totals[day] / 60, 2) for day in days],
            marker_color=_active_theme()["accent"],
        )
    )
    apply_common_plot_style(fig, "Hours logged", show_xgrid=False)
    fig.update_layout(height=height)
    return fig
