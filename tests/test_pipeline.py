"""
Unit tests for CSV ingestion
"""
import pytest

from road_fines.pipeline import AGE_MANIFEST, MANIFESTS, TREND_MANIFEST, ingest


class TestIngest:
    def test_age_dataset(self, age_csv_text):
        result = ingest(age_csv_text, AGE_MANIFEST)

        assert len(result.records) == 11
        assert result.skipped_lines == 1
        assert result.discarded_rows == 1
        assert result.dropped == 2

    def test_quoted_thousands_value(self, age_csv_text):
        records = ingest(age_csv_text, AGE_MANIFEST).records
        vic = records[(records["jurisdiction"] == "VIC") & (records["age_group"] == "All ages")]

        assert vic["fines"].tolist() == [12345]

    def test_trend_dataset(self, trend_csv_text):
        result = ingest(trend_csv_text, TREND_MANIFEST)

        assert result.discarded_rows == 1
        assert result.records["camera"].sum() == 190
        assert result.records["police"].sum() == 290

    def test_wrong_dataset_raises(self, trend_csv_text):
        with pytest.raises(KeyError):
            ingest(trend_csv_text, AGE_MANIFEST)

    def test_manifests_per_module(self):
        assert set(MANIFESTS) == {"age", "fine_types", "trend"}
