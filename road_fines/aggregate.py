"""Aggregation strategies feeding the chart datasets.

Every function here is pure: it takes already coerced (and, where
relevant, filtered) records and returns a new DataFrame or a small result
object.  Nothing is shared between strategies.

* :func:`age_distribution` - jurisdiction x age-band totals, with the
  "All ages" total spread evenly over the bands for pre-2023 years.
* :func:`per_capita_rates` - fines per 10,000 licence holders.
* :func:`enforcement_trend` / :func:`period_comparison` - camera vs
  police counts per year and before/after statistics.
* :func:`fine_type_totals` - total fines per offence class.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Optional, Tuple

import pandas as pd

from .config import (
    AGE_BANDS,
    ALL_AGES,
    CAMERA_CUTOFF_YEAR,
    DEFAULT_LICENCE_HOLDERS,
    HIGHLIGHT_METRIC,
    LICENCE_HOLDERS,
    RATE_SCALE,
    UNKNOWN_AGE,
)
from .filters import Period, period_for

AgeMode = Literal["proportional", "granular"]


# ---------------------------------------------------------------------------
# Numeric guards
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up."""
    return int(math.floor(value + 0.5))


def safe_mean(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for an empty input."""
    items = list(values)
    if not items:
        return 0.0
    return float(sum(items)) / len(items)


def safe_percentage(value: float, base: float) -> float:
    """``value / base * 100`` to one decimal, 0.0 when ``base`` is zero."""
    if not base or not math.isfinite(base) or not math.isfinite(value):
        return 0.0
    return round(value / base * 100, 1)


# ---------------------------------------------------------------------------
# (a) Jurisdiction x age band
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AgeDistribution:
    """Fines per jurisdiction (rows) and age band (columns)."""

    table: pd.DataFrame
    mode: AgeMode
    y_max: int


def age_distribution(
    filtered: pd.DataFrame,
    jurisdictions: List[str],
    *,
    age_bands: Tuple[str, ...] = AGE_BANDS,
    all_ages: str = ALL_AGES,
) -> AgeDistribution:
    """Group fines by jurisdiction and age band.

    Parameters
    ----------
    filtered : pd.DataFrame
        Output of :func:`road_fines.filters.filter_records`.
    jurisdictions : List[str]
        Selected codes, in display order.  Codes without records get zeros.
    age_bands : Tuple[str, ...], optional
        Band labels, in axis order.
    all_ages : str, optional
        The non-granular sentinel label.

    Returns
    -------
    AgeDistribution
        If ``all_ages`` occurs anywhere in ``filtered`` the whole result is
        in proportional mode: each jurisdiction's "All ages" total is
        divided evenly over the bands and rounded.  Otherwise per-band sums
        are used as-is.  ``y_max`` is the largest cell across every
        selected jurisdiction so all series share one scale.
    """
    has_all_ages = not filtered.empty and bool((filtered["age_group"] == all_ages).any())

    if has_all_ages:
        mode: AgeMode = "proportional"
        totals = (
            filtered[filtered["age_group"] == all_ages]
            .groupby("jurisdiction")["fines"]
            .sum()
            .reindex(jurisdictions, fill_value=0)
        )
        share = totals.map(lambda total: round_half_up(total / len(age_bands)))
        table = pd.DataFrame(
            {band: share for band in age_bands}, index=pd.Index(jurisdictions, name="jurisdiction")
        )
    else:
        mode = "granular"
        if filtered.empty:
            table = pd.DataFrame(0, index=jurisdictions, columns=list(age_bands))
        else:
            table = filtered.pivot_table(
                index="jurisdiction",
                columns="age_group",
                values="fines",
                aggfunc="sum",
                fill_value=0,
            ).reindex(index=jurisdictions, columns=list(age_bands), fill_value=0)
        table.index.name = "jurisdiction"

    table = table.astype("int64")
    table.columns.name = "age_group"
    y_max = int(table.to_numpy().max()) if table.size else 0
    return AgeDistribution(table=table, mode=mode, y_max=y_max)


# ---------------------------------------------------------------------------
# (b) Per-capita rate
# ---------------------------------------------------------------------------


def per_capita_rates(
    filtered: pd.DataFrame,
    jurisdictions: List[str],
    *,
    denominators: Dict[str, int] = LICENCE_HOLDERS,
    default_denominator: int = DEFAULT_LICENCE_HOLDERS,
    scale: int = RATE_SCALE,
    all_ages: str = ALL_AGES,
    unknown: str = UNKNOWN_AGE,
) -> pd.DataFrame:
    """Fines per ``scale`` licence holders for each jurisdiction.

    A jurisdiction with "All ages" rows is totalled from those rows only;
    otherwise every row except the "Unknown" band is summed.  The result
    has columns ``jurisdiction``, ``total_fines``, ``denominator`` and
    ``rate`` (rounded), sorted by ``rate`` descending.
    """
    rows = []
    for code in jurisdictions:
        subset = filtered[filtered["jurisdiction"] == code]
        if (subset["age_group"] == all_ages).any():
            total = int(subset.loc[subset["age_group"] == all_ages, "fines"].sum())
        else:
            total = int(subset.loc[subset["age_group"] != unknown, "fines"].sum())

        denominator = denominators.get(code) or default_denominator
        rate = total / denominator * scale if denominator > 0 else 0.0
        rows.append(
            {
                "jurisdiction": code,
                "total_fines": total,
                "denominator": denominator,
                "rate": round_half_up(rate),
            }
        )

    result = pd.DataFrame(rows, columns=["jurisdiction", "total_fines", "denominator", "rate"])
    return result.sort_values("rate", ascending=False, kind="stable").reset_index(drop=True)


# ---------------------------------------------------------------------------
# (c) Camera vs police trend
# ---------------------------------------------------------------------------


def enforcement_trend(records: pd.DataFrame) -> pd.DataFrame:
    """Sum camera and police counts per year.

    Returns columns ``year``, ``camera``, ``police`` and ``total`` in
    ascending year order.
    """
    if records.empty:
        return pd.DataFrame(
            {col: pd.Series(dtype="int64") for col in ("year", "camera", "police", "total")}
        )
    yearly = (
        records.groupby("year", as_index=False)[["camera", "police"]]
        .sum()
        .sort_values("year", ignore_index=True)
    )
    yearly["total"] = yearly["camera"] + yearly["police"]
    return yearly[["year", "camera", "police", "total"]].astype("int64")


@dataclass(frozen=True)
class PeriodComparison:
    """Before/after statistics around the camera-detection cutoff."""

    cutoff: int
    years_before: Tuple[int, ...]
    years_after: Tuple[int, ...]
    before_mean_total: float
    before_mean_police: float
    after_mean_total: float
    after_mean_camera: float
    after_mean_police: float
    total_change_pct: float
    camera_share_pct: float
    police_share_pct: float
    peak_year: Optional[int]
    peak_total: int


def period_comparison(trend: pd.DataFrame, cutoff: int = CAMERA_CUTOFF_YEAR) -> PeriodComparison:
    """Compare the yearly trend before and at/after ``cutoff``.

    Means over an empty window are 0.0, and percentages against a zero
    base are 0.0.  The peak is the first year (chronologically) holding
    the maximum total.
    """
    is_before = (
        trend["year"].map(lambda y: period_for(int(y), cutoff) is Period.BEFORE).astype(bool)
    )
    before = trend[is_before]
    after = trend[~is_before]

    before_mean_total = safe_mean(before["total"])
    after_mean_total = safe_mean(after["total"])
    after_mean_camera = safe_mean(after["camera"])
    after_mean_police = safe_mean(after["police"])

    if trend.empty:
        peak_year, peak_total = None, 0
    else:
        ordered = trend.sort_values("year", kind="stable", ignore_index=True)
        peak = ordered.loc[ordered["total"].idxmax()]
        peak_year, peak_total = int(peak["year"]), int(peak["total"])

    return PeriodComparison(
        cutoff=cutoff,
        years_before=tuple(int(y) for y in before["year"]),
        years_after=tuple(int(y) for y in after["year"]),
        before_mean_total=before_mean_total,
        before_mean_police=safe_mean(before["police"]),
        after_mean_total=after_mean_total,
        after_mean_camera=after_mean_camera,
        after_mean_police=after_mean_police,
        total_change_pct=safe_percentage(after_mean_total - before_mean_total, before_mean_total),
        camera_share_pct=safe_percentage(after_mean_camera, after_mean_total),
        police_share_pct=safe_percentage(after_mean_police, after_mean_total),
        peak_year=peak_year,
        peak_total=peak_total,
    )


# ---------------------------------------------------------------------------
# (d) Fine types
# ---------------------------------------------------------------------------


def format_metric_name(metric: str) -> str:
    """``"mobile_phone_use"`` -> ``"Mobile Phone Use"``."""
    return " ".join(word[:1].upper() + word[1:] for word in metric.split("_"))


def fine_type_totals(records: pd.DataFrame, highlight: str = HIGHLIGHT_METRIC) -> pd.DataFrame:
    """Total fines per offence class, largest first.

    Returns columns ``metric``, ``label``, ``total`` and ``highlight``.
    """
    if records.empty:
        return pd.DataFrame(columns=["metric", "label", "total", "highlight"])
    totals = (
        records.groupby("metric", as_index=False, sort=False)["fines"]
        .sum()
        .rename(columns={"fines": "total"})
    )
    totals["label"] = totals["metric"].map(format_metric_name)
    totals["highlight"] = totals["metric"] == highlight
    totals = totals.sort_values("total", ascending=False, kind="stable", ignore_index=True)
    return totals[["metric", "label", "total", "highlight"]]
