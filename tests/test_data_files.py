"""
Tests for the JSON file forecast source.
"""

import json
from pathlib import Path

import pytest

from weather_oracle.core import ForecastParseError, ForecastSource, ModelName
from weather_oracle.core.serialization import to_json
from weather_oracle.data import JsonFileForecastSource

from tests.factories import single_slot_forecasts


class TestJsonFileForecastSource:
    """Tests for loading forecasts from disk."""

    def test_is_a_forecast_source(self, tmp_path):
        assert isinstance(JsonFileForecastSource(tmp_path / "f.json"), ForecastSource)

    def test_path_is_normalized(self):
        source = JsonFileForecastSource("forecasts.json")
        assert source.path == Path("forecasts.json")

    def test_loads_every_forecast(self, tmp_path):
        path = tmp_path / "forecasts.json"
        original = single_slot_forecasts(temperature=[15, 16, 17])
        path.write_text(to_json(original), encoding="utf-8")

        forecasts = JsonFileForecastSource(path).fetch_forecasts()

        assert [f.model for f in forecasts] == [ModelName.ECMWF, ModelName.GFS, ModelName.ICON]
        assert forecasts == original

    def test_wrapped_document(self, tmp_path):
        path = tmp_path / "forecasts.json"
        wrapped = {"forecasts": json.loads(to_json(single_slot_forecasts(temperature=[15])))}
        path.write_text(json.dumps(wrapped), encoding="utf-8")

        assert len(JsonFileForecastSource(path).fetch_forecasts()) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            JsonFileForecastSource(tmp_path / "missing.json").fetch_forecasts()

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(ForecastParseError):
            JsonFileForecastSource(path).fetch_forecasts()

    def test_each_fetch_rereads_the_file(self, tmp_path):
        path = tmp_path / "forecasts.json"
        source = JsonFileForecastSource(path)

        path.write_text(to_json(single_slot_forecasts(temperature=[15])), encoding="utf-8")
        assert len(source.fetch_forecasts()) == 1

        path.write_text(to_json(single_slot_forecasts(temperature=[15, 16])), encoding="utf-8")
        assert len(source.fetch_forecasts()) == 2
