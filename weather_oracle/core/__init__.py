"""Core data models, unit types and interfaces."""

from weather_oracle.core.models import (
    # Enums
    ModelName,
    ConfidenceLevelName,
    MetricType,
    NarrativeType,
    # Data classes
    Coordinates,
    WeatherMetrics,
    HourlyForecast,
    TemperatureRange,
    HumidityRange,
    PressureRange,
    PrecipitationSummary,
    WindSummary,
    CloudCoverSummary,
    SunTimes,
    DailyForecast,
    ModelForecast,
    MetricStatistics,
    ModelConsensus,
    ValueRange,
    HourlyRange,
    DailyRange,
    ConfidenceFactor,
    ConfidenceResult,
    AggregatedHourlyForecast,
    AggregatedDailyForecast,
    ForecastConsensus,
    ModelWeight,
    AggregatedForecast,
    OutlierInfo,
    NarrativeSummary,
    # Abstract interfaces
    ModelWeightingStrategy,
    ForecastSource,
)

from weather_oracle.core.units import (
    Celsius,
    Millimeters,
    MetersPerSecond,
    WindDirection,
    Humidity,
    Pressure,
    CloudCover,
    UVIndex,
    Visibility,
    Percentage,
    WeatherCode,
    to_fahrenheit,
    to_km_per_hour,
    to_mph,
    to_cardinal_direction,
)

from weather_oracle.core.exceptions import (
    WeatherOracleError,
    EmptyForecastError,
    ForecastParseError,
)

__all__ = [
    "ModelName",
    "ConfidenceLevelName",
    "MetricType",
    "NarrativeType",
    "Coordinates",
    "WeatherMetrics",
    "HourlyForecast",
    "TemperatureRange",
    "HumidityRange",
    "PressureRange",
    "PrecipitationSummary",
    "WindSummary",
    "CloudCoverSummary",
    "SunTimes",
    "DailyForecast",
    "ModelForecast",
    "MetricStatistics",
    "ModelConsensus",
    "ValueRange",
    "HourlyRange",
    "DailyRange",
    "ConfidenceFactor",
    "ConfidenceResult",
    "AggregatedHourlyForecast",
    "AggregatedDailyForecast",
    "ForecastConsensus",
    "ModelWeight",
    "AggregatedForecast",
    "OutlierInfo",
    "NarrativeSummary",
    "ModelWeightingStrategy",
    "ForecastSource",
    "Celsius",
    "Millimeters",
    "MetersPerSecond",
    "WindDirection",
    "Humidity",
    "Pressure",
    "CloudCover",
    "UVIndex",
    "Visibility",
    "Percentage",
    "WeatherCode",
    "to_fahrenheit",
    "to_km_per_hour",
    "to_mph",
    "to_cardinal_direction",
    "WeatherOracleError",
    "EmptyForecastError",
    "ForecastParseError",
]
