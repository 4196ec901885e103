from typing import Dict, Optional

import plotly.graph_objects as go

from .datasets import (
    AgeChartDataset,
    FineTypeChartDataset,
    RateChartDataset,
    TrendChartDataset,
)


# ============================================================
# Configuration / constants
# ============================================================

JURISDICTION_COLORS: Dict[str, str] = {
    "ACT": "#FF6B6B",
    "NSW": "#4ECDC4",
    "NT": "#FFE66D",
    "QLD": "#95E1D3",
    "SA": "#C7CEEA",
    "TAS": "#FF9F1C",
    "VIC": "#2E86AB",
    "WA": "#A23B72",
}

BAR_COLORS = [
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
]

CAMERA_COLOR = "#E74C3C"
POLICE_COLOR = "#3498db"
TOTAL_COLOR = "#90EE90"
HIGHLIGHT_COLOR = "#E74C3C"
OTHER_COLOR = "#3498db"

# Headroom above the tallest point, matching the shared-scale charts
Y_PADDING = 1.1
TREND_Y_PADDING = 1.15

HOVER_TEMPLATE = "%{customdata}<extra></extra>"


# ============================================================
# Helper functions
# ============================================================


def _resolve_color(jurisdiction: str, palette: Optional[Dict[str, str]]) -> Optional[str]:
    """
    Get color for a jurisdiction (user overrides default).
    """
    return {**JURISDICTION_COLORS, **(palette or {})}.get(jurisdiction)


def _tooltips(texts):
    # plotly hover labels use <br> for line breaks
    return [t.replace("\n", "<br>") for t in texts]


def _base_layout(fig: go.Figure, title: str, x_title: str, y_title: str) -> None:
    fig.update_layout(
        title=dict(text=f"<b>{title}</b>", x=0.5, xanchor="center"),
        xaxis_title=x_title,
        yaxis_title=y_title,
        plot_bgcolor="#f5f7fb",
        margin=dict(t=80, l=70, r=40, b=60),
        legend=dict(
            bordercolor="#c7c7c7",
            borderwidth=1,
            bgcolor="#f9f9f9",
            font=dict(size=12),
        ),
    )
    fig.update_yaxes(tickformat=",", rangemode="tozero", gridcolor="#ddd")


# ============================================================
# Main plotting functions
# ============================================================


def create_age_plot(
    dataset: AgeChartDataset,
    *,
    line_colors: Optional[Dict[str, str]] = None,
) -> go.Figure:
    """
    Line chart of fines across age bands, one line per jurisdiction.

    Parameters
    ----------
    dataset : AgeChartDataset
        Output of :func:`road_fines.datasets.build_age_dataset`.
    line_colors : dict[str, str] | None, default None
        Optional mapping of jurisdiction -> hex color. Overrides defaults.

    Returns
    -------
    go.Figure
        All series share one y range spanning the maximum across every
        selected jurisdiction.
    """
    fig = go.Figure()
    if dataset.is_empty:
        return fig

    df = dataset.to_frame()
    band_positions = {band: i for i, band in enumerate(dataset.age_bands)}

    for jurisdiction in dataset.jurisdictions:
        sub = df[df["jurisdiction"] == jurisdiction]
        color = _resolve_color(jurisdiction, line_colors)
        fig.add_trace(
            go.Scatter(
                x=[band_positions[band] for band in sub["age_group"]],
                y=sub["fines"],
                mode="lines+markers",
                line=dict(width=3, color=color),
                marker=dict(size=8, color=color, line=dict(width=2, color="#333")),
                name=jurisdiction,
                customdata=_tooltips(sub["tooltip"]),
                hovertemplate=HOVER_TEMPLATE,
            )
        )

    _base_layout(fig, dataset.title, dataset.x_title, "Number of Fines")
    granular = dataset.mode == "granular"
    fig.update_xaxes(
        tickmode="array",
        tickvals=list(band_positions.values()) if granular else [],
        ticktext=list(dataset.age_bands) if granular else [],
    )
    fig.update_yaxes(range=[0, dataset.y_max * Y_PADDING or 1])
    fig.add_annotation(
        text=f"<i>{dataset.note}</i>",
        xref="paper",
        yref="paper",
        x=0.5,
        y=1.06,
        showarrow=False,
        font=dict(size=12, color="#4ECDC4" if granular else "#FF9F1C"),
    )
    return fig


def create_rate_plot(dataset: RateChartDataset) -> go.Figure:
    """Bar chart of fines per 10,000 licences, sorted highest first."""
    fig = go.Figure()
    if dataset.is_empty:
        return fig

    df = dataset.to_frame()
    fig.add_trace(
        go.Bar(
            x=df["jurisdiction"],
            y=df["rate"],
            marker_color=[BAR_COLORS[i % len(BAR_COLORS)] for i in range(len(df))],
            text=df["rate"],
            textposition="outside",
            customdata=_tooltips(df["tooltip"]),
            hovertemplate=HOVER_TEMPLATE,
            showlegend=False,
        )
    )
    _base_layout(fig, f"Year {dataset.year}", "Jurisdiction", "Fines per 10,000 Licenses")
    fig.update_yaxes(range=[0, dataset.y_max * Y_PADDING or 1])
    return fig


def create_fine_type_plot(dataset: FineTypeChartDataset) -> go.Figure:
    """Horizontal bars per offence class, mobile phone use highlighted."""
    fig = go.Figure()
    if dataset.is_empty:
        return fig

    df = dataset.to_frame()
    fig.add_trace(
        go.Bar(
            x=df["total"],
            y=df["label"],
            orientation="h",
            marker_color=[HIGHLIGHT_COLOR if h else OTHER_COLOR for h in df["highlight"]],
            opacity=0.8,
            text=[f"{v:,}" for v in df["total"]],
            textposition="outside",
            customdata=_tooltips(df["tooltip"]),
            hovertemplate=HOVER_TEMPLATE,
            showlegend=False,
        )
    )
    # Legend-only entries
    for label, color in (("Mobile Phone Use", HIGHLIGHT_COLOR), ("Other Offenses", OTHER_COLOR)):
        fig.add_trace(
            go.Bar(
                x=[0],
                y=[df["label"].iloc[0]],
                name=label,
                marker_color=color,
                opacity=0.8,
                hoverinfo="skip",
            )
        )

    _base_layout(
        fig,
        "Comparison of Fine Types: Mobile Phone Use vs Other Offenses",
        "Total Number of Fines",
        "",
    )
    fig.update_yaxes(autorange="reversed")
    fig.update_xaxes(tickformat=".2s")
    fig.update_layout(height=max(400, len(df) * 50), barmode="overlay")
    return fig


def create_trend_plot(dataset: TrendChartDataset) -> go.Figure:
    """Camera-based vs police-issued fines per year, with the cutoff marked."""
    fig = go.Figure()
    if dataset.is_empty:
        return fig

    df = dataset.to_frame()
    points = dataset.points
    cutoff = dataset.comparison.cutoff

    fig.add_trace(
        go.Scatter(
            x=df["year"],
            y=df["camera"],
            mode="lines+markers",
            name="Camera-Based Detection",
            line=dict(width=3, color=CAMERA_COLOR),
            marker=dict(size=9, color=CAMERA_COLOR),
            customdata=_tooltips(p.camera_tooltip for p in points),
            hovertemplate=HOVER_TEMPLATE,
        )
    )
    fig.add_trace(
        go.Scatter(
            x=df["year"],
            y=df["police"],
            mode="lines+markers",
            name="Police-Issued Fines",
            line=dict(width=3, color=POLICE_COLOR),
            marker=dict(size=9, color=POLICE_COLOR),
            customdata=_tooltips(p.police_tooltip for p in points),
            hovertemplate=HOVER_TEMPLATE,
        )
    )
    total_points = [p for p in points if p.show_total]
    fig.add_trace(
        go.Scatter(
            x=[p.year for p in total_points],
            y=[p.total for p in total_points],
            mode="lines+markers",
            name="Total Fines Level",
            line=dict(width=3, color=TOTAL_COLOR),
            marker=dict(size=9, color=TOTAL_COLOR),
            customdata=_tooltips(p.total_tooltip for p in total_points),
            hovertemplate=HOVER_TEMPLATE,
        )
    )

    first_year, last_year = points[0].year, points[-1].year
    fig.add_vrect(
        x0=first_year - 0.5,
        x1=cutoff - 0.5,
        fillcolor="rgba(149, 165, 166, 0.05)",
        line_width=0,
    )
    fig.add_vrect(
        x0=cutoff - 0.5,
        x1=last_year + 0.5,
        fillcolor="rgba(243, 156, 18, 0.05)",
        line_width=0,
    )
    fig.add_vline(
        x=cutoff - 0.5,
        line_width=2,
        line_dash="dash",
        line_color="#e74c3c",
        opacity=0.7,
        annotation_text="<b>Camera Detection Introduced</b>",
        annotation_position="top",
        annotation_font=dict(color="#e74c3c", size=11),
    )

    _base_layout(
        fig,
        f"Impact of Camera-Based Detection on Enforcement Levels ({first_year}-{last_year})",
        "Year",
        "Number of Fines",
    )
    fig.update_xaxes(tickmode="linear", dtick=1, range=[first_year - 0.5, last_year + 0.5])
    fig.update_yaxes(range=[0, dataset.y_max * TREND_Y_PADDING or 1])
    return fig
