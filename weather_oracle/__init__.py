"""
Weather Oracle - Multi-model weather forecast consensus.

Fuses forecasts from several numerical weather prediction models into a
consensus forecast, scores how far that consensus can be trusted, and
explains it in a short plain-language brief.
"""

__version__ = "0.1.0"

from weather_oracle.core import (
    # Enums
    ModelName,
    ConfidenceLevelName,
    MetricType,
    NarrativeType,
    # Data classes
    Coordinates,
    WeatherMetrics,
    HourlyForecast,
    DailyForecast,
    ModelForecast,
    AggregatedForecast,
    ConfidenceResult,
    NarrativeSummary,
    OutlierInfo,
    # Errors
    WeatherOracleError,
    EmptyForecastError,
    ForecastParseError,
)

from weather_oracle.config import (
    ModelInfo,
    get_model_info,
    list_models,
)

from weather_oracle.engine import (
    ForecastAggregator,
    aggregate_forecasts,
    identify_outliers,
    calculate_confidence,
    generate_narrative,
)

__all__ = [
    # Version
    "__version__",
    # Enums
    "ModelName",
    "ConfidenceLevelName",
    "MetricType",
    "NarrativeType",
    # Data classes
    "Coordinates",
    "WeatherMetrics",
    "HourlyForecast",
    "DailyForecast",
    "ModelForecast",
    "AggregatedForecast",
    "ConfidenceResult",
    "NarrativeSummary",
    "OutlierInfo",
    # Errors
    "WeatherOracleError",
    "EmptyForecastError",
    "ForecastParseError",
    # Config
    "ModelInfo",
    "get_model_info",
    "list_models",
    # Engine
    "ForecastAggregator",
    "aggregate_forecasts",
    "identify_outliers",
    "calculate_confidence",
    "generate_narrative",
]
