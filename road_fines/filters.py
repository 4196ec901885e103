"""Record selection for the age / jurisdiction charts.

The data source changed its reporting methodology in 2023: earlier years
only publish an "All ages" total per jurisdiction, later years publish
five age bands.  :func:`age_group_policy_for` is the single place that
decides which rows a given year admits; :func:`period_for` does the same
for the camera-detection split used by the trend chart.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

import pandas as pd

from .config import (
    AGE_BAND_CUTOFF_YEAR,
    AGE_BANDS,
    ALL_AGES,
    CAMERA_CUTOFF_YEAR,
    JURISDICTIONS,
)


class AgeGroupPolicy(Enum):
    ALL_AGES = "all_ages"
    AGE_BANDS = "age_bands"


class Period(Enum):
    BEFORE = "before"
    AFTER = "after"


def age_group_policy_for(year: int, cutoff: int = AGE_BAND_CUTOFF_YEAR) -> AgeGroupPolicy:
    """Return which age-group rows are admissible for ``year``."""
    return AgeGroupPolicy.ALL_AGES if year < cutoff else AgeGroupPolicy.AGE_BANDS


def period_for(year: int, cutoff: int = CAMERA_CUTOFF_YEAR) -> Period:
    """Return whether ``year`` falls before or at/after the camera cutoff."""
    return Period.BEFORE if year < cutoff else Period.AFTER


@dataclass(frozen=True)
class FilterSelection:
    """Current state of the year selector and jurisdiction checkboxes."""

    year: Optional[int] = None
    jurisdictions: FrozenSet[str] = frozenset(JURISDICTIONS)

    @property
    def age_group_policy(self) -> Optional[AgeGroupPolicy]:
        if self.year is None:
            return None
        return age_group_policy_for(self.year)

    def with_year(self, year: Optional[int]) -> "FilterSelection":
        return replace(self, year=year)

    def with_jurisdictions(self, codes: Iterable[str]) -> "FilterSelection":
        return replace(self, jurisdictions=frozenset(codes))

    def ordered_jurisdictions(
        self, order: Tuple[str, ...] = JURISDICTIONS
    ) -> List[str]:
        """Selected codes in the fixed enumeration order."""
        known = [code for code in order if code in self.jurisdictions]
        extra = sorted(self.jurisdictions.difference(order))
        return known + extra


def available_years(records: pd.DataFrame) -> List[int]:
    """Distinct years present in ``records``, most recent first."""
    if records.empty:
        return []
    return sorted({int(y) for y in records["year"].unique()}, reverse=True)


def default_selection(
    records: pd.DataFrame, jurisdictions: Tuple[str, ...] = JURISDICTIONS
) -> FilterSelection:
    """Latest year with every jurisdiction selected."""
    years = available_years(records)
    return FilterSelection(
        year=years[0] if years else None,
        jurisdictions=frozenset(jurisdictions),
    )


def filter_records(
    records: pd.DataFrame,
    selection: FilterSelection,
    *,
    age_bands: Tuple[str, ...] = AGE_BANDS,
    all_ages: str = ALL_AGES,
    cutoff: int = AGE_BAND_CUTOFF_YEAR,
) -> pd.DataFrame:
    """Return the records matching ``selection``.

    A row matches when its year equals the selected year, its
    jurisdiction is selected, and its age group is admissible under the
    policy for that year ("All ages" only before ``cutoff``, the
    enumerated bands only from ``cutoff`` on).  No selected year, or no
    matching rows, yields an empty frame with the input columns.
    """
    if selection.year is None or records.empty:
        return records.iloc[0:0].copy()

    if age_group_policy_for(selection.year, cutoff) is AgeGroupPolicy.ALL_AGES:
        age_mask = records["age_group"] == all_ages
    else:
        age_mask = records["age_group"].isin(age_bands)

    mask = (
        (records["year"] == selection.year)
        & records["jurisdiction"].isin(selection.jurisdictions)
        & age_mask
    )
    return records.loc[mask].reset_index(drop=True)
