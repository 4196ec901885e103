"""
Unit tests for the year-switched record filter
"""
import pandas as pd

from road_fines.config import AGE_BANDS, JURISDICTIONS
from road_fines.filters import (
    AgeGroupPolicy,
    FilterSelection,
    Period,
    age_group_policy_for,
    available_years,
    default_selection,
    filter_records,
    period_for,
)


class TestPolicies:
    """Test the cutoff policies."""

    def test_age_policy_switches_at_2023(self):
        assert age_group_policy_for(2022) is AgeGroupPolicy.ALL_AGES
        assert age_group_policy_for(2023) is AgeGroupPolicy.AGE_BANDS
        assert age_group_policy_for(2008) is AgeGroupPolicy.ALL_AGES

    def test_period_switches_at_2020(self):
        assert period_for(2019) is Period.BEFORE
        assert period_for(2020) is Period.AFTER
        assert period_for(2024) is Period.AFTER

    def test_selection_policy_follows_year(self):
        assert FilterSelection().age_group_policy is None
        assert FilterSelection(year=2015).age_group_policy is AgeGroupPolicy.ALL_AGES


class TestFilterRecords:
    """Test record selection."""

    def test_pre_cutoff_year_keeps_only_all_ages(self, age_records):
        result = filter_records(age_records, FilterSelection(year=2015))

        assert set(result["age_group"]) == {"All ages"}
        assert sorted(result["jurisdiction"]) == ["NSW", "QLD", "VIC"]

    def test_2022_boundary_excludes_unknown(self, age_records):
        result = filter_records(age_records, FilterSelection(year=2022))

        assert result["age_group"].tolist() == ["All ages"]
        assert result["fines"].tolist() == [2000]

    def test_2023_boundary_keeps_only_bands(self, age_records):
        result = filter_records(age_records, FilterSelection(year=2023))

        assert set(result["age_group"]) <= set(AGE_BANDS)
        assert "All ages" not in set(result["age_group"])
        assert "Unknown" not in set(result["age_group"])
        assert len(result) == 7

    def test_jurisdictions_restrict_rows(self, age_records):
        selection = FilterSelection(year=2023, jurisdictions=frozenset({"VIC"}))
        result = filter_records(age_records, selection)

        assert set(result["jurisdiction"]) == {"VIC"}
        assert result["fines"].sum() == 200

    def test_no_match_is_empty_not_error(self, age_records):
        result = filter_records(age_records, FilterSelection(year=1999))

        assert result.empty
        assert list(result.columns) == list(age_records.columns)

    def test_no_year_selected(self, age_records):
        assert filter_records(age_records, FilterSelection()).empty

    def test_no_jurisdiction_selected(self, age_records):
        selection = FilterSelection(year=2023, jurisdictions=frozenset())

        assert filter_records(age_records, selection).empty


class TestSelection:
    """Test selection defaults and updates."""

    def test_available_years_descending(self, age_records):
        assert available_years(age_records) == [2023, 2022, 2015]

    def test_available_years_empty(self):
        assert available_years(pd.DataFrame(columns=["year"])) == []

    def test_default_selection(self, age_records):
        selection = default_selection(age_records)

        assert selection.year == 2023
        assert selection.jurisdictions == frozenset(JURISDICTIONS)

    def test_updates_return_new_selection(self):
        original = FilterSelection(year=2015)
        updated = original.with_year(2023).with_jurisdictions(["WA", "ACT"])

        assert original.year == 2015
        assert original.jurisdictions == frozenset(JURISDICTIONS)
        assert updated.year == 2023
        assert updated.ordered_jurisdictions() == ["ACT", "WA"]
