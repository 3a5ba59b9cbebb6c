"""
Serialization boundary for Weather Oracle.

Forecasts that pass through a cache or a JSON file come back with their
dates as strings. Everything here turns such payloads into the typed
data model (and back), so the engine only ever sees one timestamp type.
"""

import dataclasses
import json
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Union

from weather_oracle.core.exceptions import ForecastParseError
from weather_oracle.core.models import (
    CloudCoverSummary,
    Coordinates,
    DailyForecast,
    HourlyForecast,
    HumidityRange,
    ModelForecast,
    ModelName,
    PrecipitationSummary,
    PressureRange,
    SunTimes,
    TemperatureRange,
    WeatherMetrics,
    WindSummary,
)
from weather_oracle.core.units import (
    Celsius,
    CloudCover,
    Humidity,
    MetersPerSecond,
    Millimeters,
    Percentage,
    Pressure,
    UnitValue,
    UVIndex,
    Visibility,
    WeatherCode,
    WindDirection,
)


# =============================================================================
# DATE COERCION
# =============================================================================

def coerce_datetime(value: Union[datetime, date, str]) -> datetime:
    """
    Return a timezone-aware UTC datetime.

    Accepts a datetime, a date (taken as midnight UTC) or an ISO-8601
    string. Naive values are assumed to be UTC.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise ForecastParseError(f"Invalid timestamp: {value!r}") from e
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    elif not isinstance(value, datetime):
        raise ForecastParseError(f"Expected a datetime or ISO string, got {type(value).__name__}")

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_date(value: Union[datetime, date, str]) -> date:
    """Return the calendar date of a date, datetime or ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as e:
            raise ForecastParseError(f"Invalid date: {value!r}") from e
    raise ForecastParseError(f"Expected a date or ISO string, got {type(value).__name__}")


# =============================================================================
# DECODING
# =============================================================================

def _metrics_from_dict(data: Dict[str, Any]) -> WeatherMetrics:
    gust = data.get("windGust")
    return WeatherMetrics(
        temperature=Celsius(data["temperature"]),
        feels_like=Celsius(data.get("feelsLike", data["temperature"])),
        humidity=Humidity(data["humidity"]),
        pressure=Pressure(data["pressure"]),
        wind_speed=MetersPerSecond(data["windSpeed"]),
        wind_direction=WindDirection(data["windDirection"]),
        precipitation=Millimeters(data["precipitation"]),
        precipitation_probability=Percentage(data.get("precipitationProbability", 0)),
        cloud_cover=CloudCover(data["cloudCover"]),
        visibility=Visibility(data["visibility"]),
        uv_index=UVIndex(data["uvIndex"]),
        weather_code=WeatherCode(data["weatherCode"]),
        wind_gust=MetersPerSecond(gust) if gust is not None else None,
    )


def _hourly_from_dict(data: Dict[str, Any]) -> HourlyForecast:
    return HourlyForecast(
        timestamp=coerce_datetime(data["timestamp"]),
        metrics=_metrics_from_dict(data["metrics"]),
    )


def _daily_from_dict(data: Dict[str, Any]) -> DailyForecast:
    sun = data.get("sun")
    # Producers nest the UV maximum; our own to_dict output flattens it
    uv_max = data["uvIndexMax"] if "uvIndexMax" in data else data["uvIndex"]["max"]
    return DailyForecast(
        date=coerce_date(data["date"]),
        temperature=TemperatureRange(
            min=Celsius(data["temperature"]["min"]),
            max=Celsius(data["temperature"]["max"]),
        ),
        humidity=HumidityRange(
            min=Humidity(data["humidity"]["min"]),
            max=Humidity(data["humidity"]["max"]),
        ),
        pressure=PressureRange(
            min=Pressure(data["pressure"]["min"]),
            max=Pressure(data["pressure"]["max"]),
        ),
        precipitation=PrecipitationSummary(
            total=Millimeters(data["precipitation"]["total"]),
            probability=Percentage(data["precipitation"].get("probability", 0)),
            hours=int(data["precipitation"].get("hours", 0)),
        ),
        wind=WindSummary(
            avg_speed=MetersPerSecond(data["wind"]["avgSpeed"]),
            max_speed=MetersPerSecond(data["wind"]["maxSpeed"]),
            dominant_direction=WindDirection(data["wind"]["dominantDirection"]),
        ),
        cloud_cover=CloudCoverSummary(
            avg=CloudCover(data["cloudCover"]["avg"]),
            max=CloudCover(data["cloudCover"]["max"]),
        ),
        uv_index_max=UVIndex(uv_max),
        weather_code=WeatherCode(data["weatherCode"]),
        sun=SunTimes(
            sunrise=coerce_datetime(sun["sunrise"]),
            sunset=coerce_datetime(sun["sunset"]),
            daylight_hours=float(sun["daylightHours"]),
        ) if sun else None,
        hourly=[_hourly_from_dict(h) for h in data.get("hourly", [])],
    )


def model_forecast_from_dict(payload: Dict[str, Any]) -> ModelForecast:
    """
    Build a ModelForecast from its JSON wire shape.

    Args:
        payload: Dict with camelCase keys (model, coordinates, generatedAt,
                 validFrom, validTo, hourly, daily)

    Returns:
        ModelForecast with every scalar wrapped in its unit type

    Raises:
        ForecastParseError: If the payload is missing keys or holds invalid values
    """
    try:
        coords = payload["coordinates"]
        generated_at = payload.get("generatedAt")
        return ModelForecast(
            model=ModelName(payload["model"]),
            coordinates=Coordinates(
                latitude=float(coords["latitude"]),
                longitude=float(coords["longitude"]),
            ),
            generated_at=coerce_datetime(generated_at) if generated_at is not None else None,
            valid_from=coerce_datetime(payload["validFrom"]),
            valid_to=coerce_datetime(payload["validTo"]),
            hourly=[_hourly_from_dict(h) for h in payload.get("hourly", [])],
            daily=[_daily_from_dict(d) for d in payload.get("daily", [])],
        )
    except ForecastParseError:
        raise
    except KeyError as e:
        raise ForecastParseError(f"Missing field in forecast payload: {e}") from e
    except (TypeError, ValueError) as e:
        raise ForecastParseError(f"Invalid forecast payload: {e}") from e


def model_forecasts_from_json(text: str) -> List[ModelForecast]:
    """Parse a JSON array of model forecasts (or {"forecasts": [...]})."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ForecastParseError(f"Invalid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("forecasts")
    if not isinstance(data, list):
        raise ForecastParseError("Expected a list of model forecasts")

    return [model_forecast_from_dict(item) for item in data]


# =============================================================================
# ENCODING
# =============================================================================

def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_dict(obj: Any) -> Any:
    """
    Convert a core dataclass (or list of them) into JSON-safe data.

    Enums become their values, dates become ISO strings, unit values
    become plain numbers and field names become camelCase.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            _camel(f.name): to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, WeatherCode):
        return int(obj)
    if isinstance(obj, UnitValue):
        return float(obj)
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): to_dict(v) for k, v in obj.items()}
    return obj


def to_json(obj: Any, indent: int = 2) -> str:
    """Serialize a core dataclass to a JSON string."""
    return json.dumps(to_dict(obj), indent=indent, ensure_ascii=False)
