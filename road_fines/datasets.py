"""Finalized chart payloads handed to the plotting layer.

Each builder takes coerced records (plus a :class:`FilterSelection` for the
age charts), runs the filter and aggregation steps, and freezes the result
into an immutable dataclass of rounded points.  Tooltip and narrative
strings are computed here so the plotting layer only has to draw.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import pandas as pd

from .aggregate import (
    AgeMode,
    PeriodComparison,
    age_distribution,
    enforcement_trend,
    fine_type_totals,
    per_capita_rates,
    period_comparison,
    safe_percentage,
)
from .config import (
    AGE_BANDS,
    CAMERA_CUTOFF_YEAR,
    GRANULAR_NOTE,
    PROPORTIONAL_NOTE,
)
from .filters import AgeGroupPolicy, FilterSelection, filter_records


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def format_count(value: float) -> str:
    """Thousands separators, no decimals: ``12345.6 -> "12,346"``."""
    return f"{value:,.0f}"


def format_pct(value: float) -> str:
    return f"{value:.1f}%"


# ---------------------------------------------------------------------------
# Age / jurisdiction line chart
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AgePoint:
    jurisdiction: str
    age_group: str
    fines: int
    tooltip: str


@dataclass(frozen=True)
class AgeChartDataset:
    year: Optional[int]
    jurisdictions: Tuple[str, ...]
    age_bands: Tuple[str, ...]
    mode: Optional[AgeMode]
    points: Tuple[AgePoint, ...]
    y_max: int
    note: str
    x_title: str

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def title(self) -> str:
        return f"Year {self.year}"

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(p.jurisdiction, p.age_group, p.fines, p.tooltip) for p in self.points],
            columns=["jurisdiction", "age_group", "fines", "tooltip"],
        )


def _age_labels(selection: FilterSelection) -> Tuple[str, str]:
    if selection.age_group_policy is AgeGroupPolicy.AGE_BANDS:
        return GRANULAR_NOTE, "Age Group"
    return PROPORTIONAL_NOTE, "Across All Ages"


def build_age_dataset(
    records: pd.DataFrame,
    selection: FilterSelection,
    *,
    age_bands: Tuple[str, ...] = AGE_BANDS,
) -> AgeChartDataset:
    """Line-chart payload: fines per age band for every selected jurisdiction."""
    note, x_title = _age_labels(selection)
    jurisdictions = selection.ordered_jurisdictions()
    filtered = filter_records(records, selection, age_bands=age_bands)

    if filtered.empty:
        return AgeChartDataset(
            year=selection.year,
            jurisdictions=tuple(jurisdictions),
            age_bands=age_bands,
            mode=None,
            points=(),
            y_max=0,
            note=note,
            x_title=x_title,
        )

    dist = age_distribution(filtered, jurisdictions, age_bands=age_bands)
    points = tuple(
        AgePoint(
            jurisdiction=code,
            age_group=band,
            fines=int(dist.table.at[code, band]),
            tooltip=f"{code} - {band}: {format_count(dist.table.at[code, band])} fines",
        )
        for code in jurisdictions
        for band in age_bands
    )
    return AgeChartDataset(
        year=selection.year,
        jurisdictions=tuple(jurisdictions),
        age_bands=age_bands,
        mode=dist.mode,
        points=points,
        y_max=dist.y_max,
        note=note,
        x_title=x_title,
    )


# ---------------------------------------------------------------------------
# Per-capita bar chart
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateBar:
    jurisdiction: str
    total_fines: int
    rate: int
    tooltip: str


@dataclass(frozen=True)
class RateChartDataset:
    year: Optional[int]
    bars: Tuple[RateBar, ...]

    @property
    def is_empty(self) -> bool:
        return not self.bars

    @property
    def y_max(self) -> int:
        return max((bar.rate for bar in self.bars), default=0)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(b.jurisdiction, b.total_fines, b.rate, b.tooltip) for b in self.bars],
            columns=["jurisdiction", "total_fines", "rate", "tooltip"],
        )


def build_rate_dataset(records: pd.DataFrame, selection: FilterSelection) -> RateChartDataset:
    """Bar-chart payload: fines per 10,000 licence holders, highest first."""
    filtered = filter_records(records, selection)
    if filtered.empty:
        return RateChartDataset(year=selection.year, bars=())

    rates = per_capita_rates(filtered, selection.ordered_jurisdictions())
    bars = tuple(
        RateBar(
            jurisdiction=row.jurisdiction,
            total_fines=int(row.total_fines),
            rate=int(row.rate),
            tooltip=f"{row.jurisdiction}: {row.rate} per 10k",
        )
        for row in rates.itertuples(index=False)
    )
    return RateChartDataset(year=selection.year, bars=bars)


# ---------------------------------------------------------------------------
# Fine-type comparison
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FineTypeBar:
    metric: str
    label: str
    total: int
    highlight: bool
    tooltip: str


@dataclass(frozen=True)
class FineTypeChartDataset:
    bars: Tuple[FineTypeBar, ...]

    @property
    def is_empty(self) -> bool:
        return not self.bars

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(b.metric, b.label, b.total, b.highlight, b.tooltip) for b in self.bars],
            columns=["metric", "label", "total", "highlight", "tooltip"],
        )


def build_fine_type_dataset(records: pd.DataFrame) -> FineTypeChartDataset:
    totals = fine_type_totals(records)
    bars = tuple(
        FineTypeBar(
            metric=row.metric,
            label=row.label,
            total=int(row.total),
            highlight=bool(row.highlight),
            tooltip=f"{row.label}\nTotal Fines: {format_count(row.total)}",
        )
        for row in totals.itertuples(index=False)
    )
    return FineTypeChartDataset(bars=bars)


# ---------------------------------------------------------------------------
# Camera vs police trend
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrendPoint:
    year: int
    camera: int
    police: int
    total: int
    camera_share_pct: float
    police_share_pct: float
    show_total: bool
    camera_tooltip: str
    police_tooltip: str
    total_tooltip: str


@dataclass(frozen=True)
class TrendChartDataset:
    points: Tuple[TrendPoint, ...]
    comparison: PeriodComparison
    insights: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def y_max(self) -> int:
        return max((p.total for p in self.points), default=0)

    def to_frame(self) -> pd.DataFrame:
        columns = [
            "year",
            "camera",
            "police",
            "total",
            "camera_share_pct",
            "police_share_pct",
            "show_total",
        ]
        return pd.DataFrame(
            [tuple(getattr(p, col) for col in columns) for p in self.points],
            columns=columns,
        )


def _trend_point(row, cutoff: int) -> TrendPoint:
    year, camera, police, total = int(row.year), int(row.camera), int(row.police), int(row.total)
    camera_share = safe_percentage(camera, total)
    police_share = safe_percentage(police, total)
    # The total line starts one year early to show the transition
    if year < cutoff:
        total_tooltip = f"{year}\nPolice-issued: {format_count(police)}"
    else:
        total_tooltip = f"{year}\nTotal Fines: {format_count(total)}"
    return TrendPoint(
        year=year,
        camera=camera,
        police=police,
        total=total,
        camera_share_pct=camera_share,
        police_share_pct=police_share,
        show_total=year >= cutoff - 1,
        camera_tooltip=f"{year}\nCamera-based: {format_count(camera)}\n({camera_share:.1f}% of total)",
        police_tooltip=f"{year}\nPolice-issued: {format_count(police)}\n({police_share:.1f}% of total)",
        total_tooltip=total_tooltip,
    )


def describe_period_comparison(comparison: PeriodComparison) -> Tuple[str, ...]:
    """Narrative summary lines for the insights panel."""
    if comparison.peak_year is None:
        return ()

    def _span(years: Tuple[int, ...]) -> str:
        return f"{years[0]}-{years[-1]}" if years else "no data"

    c = comparison
    return (
        f"Before camera detection ({_span(c.years_before)}): "
        f"{format_count(c.before_mean_total)} fines/year on average; "
        f"primary method police-issued ({format_count(c.before_mean_police)} fines/year).",
        f"After camera detection introduction ({_span(c.years_after)}): "
        f"{format_count(c.after_mean_total)} fines/year on average.",
        f"Camera-based: {format_count(c.after_mean_camera)} fines/year "
        f"({format_pct(c.camera_share_pct)}).",
        f"Police-issued: {format_count(c.after_mean_police)} fines/year "
        f"({format_pct(c.police_share_pct)}).",
        f"Overall enforcement change: average fines changed by "
        f"{format_pct(c.total_change_pct)} after camera detection was introduced.",
        f"Peak activity: {c.peak_year} with {format_count(c.peak_total)} total fines.",
    )


def build_trend_dataset(records: pd.DataFrame, cutoff: int = CAMERA_CUTOFF_YEAR) -> TrendChartDataset:
    """Timeline payload with per-year points and before/after insights."""
    trend = enforcement_trend(records)
    comparison = period_comparison(trend, cutoff)
    points = tuple(_trend_point(row, cutoff) for row in trend.itertuples(index=False))
    return TrendChartDataset(
        points=points,
        comparison=comparison,
        insights=describe_period_comparison(comparison),
    )
