"""Plotly charts for the dashboard."""

from decimal import Decimal
from typing import Mapping

import plotly.graph_objects as go


# Cycled across bars
BAR_COLORS = ("#6366f1", "#f43f5e", "#10b981", "#f59e0b", "#0ea5e9", "#8b5cf6")


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#6c757d"),
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def category_bar_chart(
    totals: Mapping[str, Decimal],
    currency: str = "EGP",
) -> go.Figure:
    """Bar per expense category, as returned by category_totals()."""
    if not totals:
        return _empty_figure("No expenses recorded yet.")

    names = list(totals.keys())
    values = [float(amount) for amount in totals.values()]
    colors = [BAR_COLORS[i % len(BAR_COLORS)] for i in range(len(names))]

    fig = go.Figure(
        go.Bar(
            x=names,
            y=values,
            marker_color=colors,
            hovertemplate="%{x}: %{y:,.2f} " + currency + "<extra></extra>",
        )
    )
    fig.update_layout(
        title="Expenses by category",
        xaxis_title="Category",
        yaxis_title=f"Amount ({currency})",
        margin=dict(l=0, r=0, t=40, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig
