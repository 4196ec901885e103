"""
Unit tests for dataset fetching
"""
from unittest.mock import Mock, patch

import pytest
import requests

from road_fines import data_manager
from road_fines.data_manager import (
    DataFetchError,
    fetch_text,
    load_dataset,
    resolve_source,
    try_load_dataset,
)


@pytest.fixture(autouse=True)
def clear_cache():
    load_dataset.cache_clear()
    yield
    load_dataset.cache_clear()


class TestResolveSource:
    def test_url_root(self):
        assert resolve_source("trend", "https://example.org/data/") == (
            "https://example.org/data/Q3.csv"
        )

    def test_directory_root(self, tmp_path):
        assert resolve_source("age", str(tmp_path)) == str(tmp_path / "Q4.csv")

    def test_unknown_module(self):
        with pytest.raises(KeyError):
            resolve_source("weather")


class TestFetchText:
    def test_local_file(self, tmp_path):
        path = tmp_path / "Q4.csv"
        path.write_text("YEAR\n2020\n", encoding="utf-8")

        assert fetch_text(str(path)) == "YEAR\n2020\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFetchError, match="Error loading data"):
            fetch_text(str(tmp_path / "missing.csv"))

    def test_invalid_utf8_file(self, tmp_path):
        path = tmp_path / "Q4.csv"
        path.write_bytes(b"\xff\xfe\x00broken")

        with pytest.raises(DataFetchError, match="not valid UTF-8"):
            fetch_text(str(path))

    def test_http_success(self):
        response = Mock(text="YEAR\n2020\n")
        response.raise_for_status.return_value = None
        with patch("road_fines.data_manager.requests.get", return_value=response) as mock_get:
            assert fetch_text("https://example.org/Q3.csv", timeout=5) == "YEAR\n2020\n"
        mock_get.assert_called_once_with("https://example.org/Q3.csv", timeout=5)

    def test_http_error_status(self):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        with patch("road_fines.data_manager.requests.get", return_value=response):
            with pytest.raises(DataFetchError, match="404"):
                fetch_text("https://example.org/Q3.csv")

    def test_network_error(self):
        with patch(
            "road_fines.data_manager.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with pytest.raises(DataFetchError):
                fetch_text("https://example.org/Q3.csv")


class TestLoadDataset:
    def test_loads_once(self, tmp_path, monkeypatch, trend_csv_text):
        path = tmp_path / "Q3.csv"
        path.write_text(trend_csv_text, encoding="utf-8")
        monkeypatch.setattr(data_manager, "resolve_source", lambda module: str(path))

        with patch.object(data_manager, "fetch_text", wraps=data_manager.fetch_text) as spy:
            first = load_dataset("trend")
            second = load_dataset("trend")

        assert first is second
        spy.assert_called_once()
        assert list(first.records.columns) == ["year", "camera", "police"]

    def test_try_load_reports_fetch_failure(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            data_manager, "resolve_source", lambda module: str(tmp_path / "nope.csv")
        )
        result, error = try_load_dataset("age")

        assert result is None
        assert error.startswith("Error loading data")

    def test_try_load_reports_missing_header(self, tmp_path, monkeypatch):
        path = tmp_path / "Q4.csv"
        path.write_text("YEAR,FINES\n2020,1\n", encoding="utf-8")
        monkeypatch.setattr(data_manager, "resolve_source", lambda module: str(path))
        result, error = try_load_dataset("age")

        assert result is None
        assert "Missing expected columns" in error

    def test_try_load_reports_undecodable_file(self, tmp_path, monkeypatch):
        path = tmp_path / "Q4.csv"
        path.write_bytes(b"\xff\xfeYEAR,JURISDICTION\n")
        monkeypatch.setattr(data_manager, "resolve_source", lambda module: str(path))
        result, error = try_load_dataset("age")

        assert result is None
        assert error.startswith("Error loading data")
