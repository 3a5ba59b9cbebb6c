"""
Tests for the serialization boundary.
"""

import json
from datetime import date, datetime, timedelta, timezone

import pytest

from weather_oracle.core import ForecastParseError, ModelName
from weather_oracle.core.serialization import (
    coerce_date,
    coerce_datetime,
    model_forecast_from_dict,
    model_forecasts_from_json,
    to_dict,
    to_json,
)
from weather_oracle.engine.aggregator import aggregate_forecasts

from tests.factories import BASE_DATE, BASE_TIME, single_slot_forecasts


# =============================================================================
# TEST DATA HELPERS
# =============================================================================


def producer_payload(**overrides):
    """A forecast as an external fetcher writes it, dates as strings."""
    payload = {
        "model": "gfs",
        "coordinates": {"latitude": 40.71, "longitude": -74.01},
        "generatedAt": "2026-01-20T06:00:00Z",
        "validFrom": "2026-01-20T12:00:00Z",
        "validTo": "2026-01-27T12:00:00Z",
        "hourly": [
            {
                "timestamp": "2026-01-20T12:00:00Z",
                "metrics": {
                    "temperature": 3.2,
                    "feelsLike": 0.5,
                    "humidity": 81,
                    "pressure": 1012.4,
                    "windSpeed": 4.1,
                    "windDirection": 250,
                    "precipitation": 0.2,
                    "precipitationProbability": 40,
                    "cloudCover": 90,
                    "visibility": 8000,
                    "uvIndex": 1,
                    "weatherCode": 61,
                },
            },
        ],
        "daily": [
            {
                "date": "2026-01-20",
                "temperature": {"min": -1.0, "max": 4.5},
                "humidity": {"min": 70, "max": 95},
                "pressure": {"min": 1009, "max": 1015},
                "precipitation": {"total": 3.4, "probability": 80, "hours": 5},
                "wind": {"avgSpeed": 3.5, "maxSpeed": 7.2, "dominantDirection": 245},
                "cloudCover": {"avg": 85, "max": 100},
                "uvIndex": {"max": 1.5},
                "weatherCode": 63,
                "sun": {
                    "sunrise": "2026-01-20T07:12:00Z",
                    "sunset": "2026-01-20T16:51:00Z",
                    "daylightHours": 9.65,
                },
            },
        ],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# DATE COERCION TESTS
# =============================================================================


class TestCoerceDatetime:
    """Tests for timestamp normalization."""

    def test_zulu_string(self):
        assert coerce_datetime("2026-01-20T12:00:00Z") == BASE_TIME

    def test_offset_string_is_converted(self):
        result = coerce_datetime("2026-01-20T13:00:00+01:00")
        assert result == BASE_TIME
        assert result.utcoffset() == timedelta(0)

    def test_naive_datetime_assumed_utc(self):
        assert coerce_datetime(datetime(2026, 1, 20, 12, 0)) == BASE_TIME

    def test_date_is_midnight(self):
        assert coerce_datetime(BASE_DATE) == datetime(2026, 1, 20, tzinfo=timezone.utc)

    def test_invalid_string(self):
        with pytest.raises(ForecastParseError, match="Invalid timestamp"):
            coerce_datetime("yesterday")

    def test_wrong_type(self):
        with pytest.raises(ForecastParseError):
            coerce_datetime(1737374400)


class TestCoerceDate:
    def test_from_datetime(self):
        assert coerce_date(BASE_TIME) == BASE_DATE

    def test_from_strings(self):
        assert coerce_date("2026-01-20") == BASE_DATE
        assert coerce_date("2026-01-20T23:00:00Z") == BASE_DATE

    def test_date_passes_through(self):
        assert coerce_date(BASE_DATE) is BASE_DATE

    def test_invalid(self):
        with pytest.raises(ForecastParseError, match="Invalid date"):
            coerce_date("20/01/2026")


# =============================================================================
# DECODING TESTS
# =============================================================================


class TestModelForecastFromDict:
    """Tests for building forecasts from their JSON shape."""

    def test_producer_payload(self):
        forecast = model_forecast_from_dict(producer_payload())

        assert forecast.model == ModelName.GFS
        assert forecast.coordinates.latitude == 40.71
        assert forecast.valid_from == BASE_TIME
        assert forecast.hourly[0].timestamp == BASE_TIME
        assert forecast.hourly[0].metrics.weather_code == 61
        assert forecast.hourly[0].metrics.wind_gust is None

    def test_daily_fields(self):
        day = model_forecast_from_dict(producer_payload()).daily[0]

        assert day.date == date(2026, 1, 20)
        assert day.temperature.min == -1.0
        assert day.precipitation.hours == 5
        assert day.wind.dominant_direction == 245
        assert day.uv_index_max == 1.5
        assert day.sun.daylight_hours == 9.65
        assert day.sun.sunrise == datetime(2026, 1, 20, 7, 12, tzinfo=timezone.utc)
        assert day.hourly == []

    def test_feels_like_defaults_to_temperature(self):
        payload = producer_payload()
        del payload["hourly"][0]["metrics"]["feelsLike"]
        forecast = model_forecast_from_dict(payload)
        assert forecast.hourly[0].metrics.feels_like == 3.2

    def test_missing_field(self):
        payload = producer_payload()
        del payload["coordinates"]
        with pytest.raises(ForecastParseError, match="Missing field"):
            model_forecast_from_dict(payload)

    def test_unknown_model(self):
        with pytest.raises(ForecastParseError, match="Invalid forecast payload"):
            model_forecast_from_dict(producer_payload(model="hrrr"))

    def test_invalid_value(self):
        payload = producer_payload()
        payload["hourly"][0]["metrics"]["precipitation"] = -2
        with pytest.raises(ForecastParseError):
            model_forecast_from_dict(payload)

    def test_bad_timestamp(self):
        with pytest.raises(ForecastParseError, match="Invalid timestamp"):
            model_forecast_from_dict(producer_payload(validFrom="soon"))


class TestModelForecastsFromJson:
    def test_list(self):
        text = json.dumps([producer_payload(), producer_payload(model="icon")])
        forecasts = model_forecasts_from_json(text)
        assert [f.model for f in forecasts] == [ModelName.GFS, ModelName.ICON]

    def test_wrapped_object(self):
        text = json.dumps({"forecasts": [producer_payload()]})
        assert len(model_forecasts_from_json(text)) == 1

    def test_invalid_json(self):
        with pytest.raises(ForecastParseError, match="Invalid JSON"):
            model_forecasts_from_json("[{")

    def test_not_a_list(self):
        with pytest.raises(ForecastParseError, match="Expected a list"):
            model_forecasts_from_json('{"model": "gfs"}')


# =============================================================================
# ENCODING TESTS
# =============================================================================


class TestToDict:
    """Tests for JSON-safe encoding."""

    def test_forecast_keys_are_camel_case(self):
        data = to_dict(model_forecast_from_dict(producer_payload()))

        assert data["model"] == "gfs"
        assert data["validFrom"] == "2026-01-20T12:00:00+00:00"
        assert data["hourly"][0]["metrics"]["feelsLike"] == 0.5
        assert data["daily"][0]["uvIndexMax"] == 1.5
        assert data["daily"][0]["date"] == "2026-01-20"

    def test_plain_types(self):
        data = to_dict(model_forecast_from_dict(producer_payload()))
        metrics = data["hourly"][0]["metrics"]

        assert type(metrics["temperature"]) is float
        assert type(metrics["weatherCode"]) is int

    def test_encoded_forecast_decodes(self):
        original = model_forecast_from_dict(producer_payload())
        assert model_forecast_from_dict(to_dict(original)) == original

    def test_aggregate_to_json(self):
        aggregated = aggregate_forecasts(single_slot_forecasts(temperature=[15, 16, 17]))
        data = json.loads(to_json(aggregated))

        assert data["models"] == ["ecmwf", "gfs", "icon"]
        assert data["overallConfidence"]["level"] == "high"
        assert data["consensus"]["hourly"][0]["modelAgreement"]["agreementScore"] == 1.0
        assert data["modelWeights"][0]["reason"] == "Equal weighting"

    def test_missing_run_time_is_allowed(self):
        payload = producer_payload()
        del payload["generatedAt"]
        assert model_forecast_from_dict(payload).generated_at is None
