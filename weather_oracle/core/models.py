"""
Core data models for Weather Oracle.

ALL MODULES IMPORT FROM HERE.
Every entity is immutable: the engine builds fresh objects on each call
and never mutates its inputs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union

from weather_oracle.core.units import (
    Celsius,
    CloudCover,
    Humidity,
    MetersPerSecond,
    Millimeters,
    Percentage,
    Pressure,
    UVIndex,
    Visibility,
    WeatherCode,
    WindDirection,
)


# =============================================================================
# ENUMS
# =============================================================================

class ModelName(Enum):
    """Supported numerical weather prediction models."""
    ECMWF = "ecmwf"
    GFS = "gfs"
    ICON = "icon"
    METEOFRANCE = "meteofrance"
    UKMO = "ukmo"
    JMA = "jma"
    GEM = "gem"


class ConfidenceLevelName(Enum):
    """Coarse confidence classification."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MetricType(Enum):
    """Metrics the confidence calculator can score."""
    TEMPERATURE = "temperature"
    PRECIPITATION = "precipitation"
    WIND = "wind"
    HUMIDITY = "humidity"
    OVERALL = "overall"


class NarrativeType(Enum):
    """Overall character of a forecast brief."""
    AGREEMENT = "agreement"
    DISAGREEMENT = "disagreement"
    TRANSITION = "transition"


# =============================================================================
# DATA CLASSES - LOCATION
# =============================================================================

@dataclass(frozen=True)
class Coordinates:
    """Geographic coordinates in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude must be between -180 and 180, got {self.longitude}")


# =============================================================================
# DATA CLASSES - WEATHER
# =============================================================================

@dataclass(frozen=True)
class WeatherMetrics:
    """Core weather measurements at one instant."""
    temperature: Celsius
    feels_like: Celsius
    humidity: Humidity
    pressure: Pressure
    wind_speed: MetersPerSecond
    wind_direction: WindDirection
    precipitation: Millimeters
    precipitation_probability: Percentage
    cloud_cover: CloudCover
    visibility: Visibility
    uv_index: UVIndex
    weather_code: WeatherCode
    wind_gust: Optional[MetersPerSecond] = None


@dataclass(frozen=True)
class HourlyForecast:
    """A single hour's forecast."""
    timestamp: datetime
    metrics: WeatherMetrics


@dataclass(frozen=True)
class TemperatureRange:
    min: Celsius
    max: Celsius


@dataclass(frozen=True)
class HumidityRange:
    min: Humidity
    max: Humidity


@dataclass(frozen=True)
class PressureRange:
    min: Pressure
    max: Pressure


@dataclass(frozen=True)
class PrecipitationSummary:
    total: Millimeters
    probability: Percentage
    hours: int


@dataclass(frozen=True)
class WindSummary:
    avg_speed: MetersPerSecond
    max_speed: MetersPerSecond
    dominant_direction: WindDirection


@dataclass(frozen=True)
class CloudCoverSummary:
    avg: CloudCover
    max: CloudCover


@dataclass(frozen=True)
class SunTimes:
    sunrise: datetime
    sunset: datetime
    daylight_hours: float


@dataclass(frozen=True)
class DailyForecast:
    """A full day's forecast summary."""
    date: date
    temperature: TemperatureRange
    humidity: HumidityRange
    pressure: PressureRange
    precipitation: PrecipitationSummary
    wind: WindSummary
    cloud_cover: CloudCoverSummary
    uv_index_max: UVIndex
    weather_code: WeatherCode
    sun: Optional[SunTimes] = None
    hourly: List[HourlyForecast] = field(default_factory=list)


@dataclass(frozen=True)
class ModelForecast:
    """
    One model's complete forecast for a location.

    Owned by the caller and echoed verbatim into the aggregate.
    """
    model: ModelName
    coordinates: Coordinates
    generated_at: Optional[datetime]       # None when the producer did not stamp its run
    valid_from: datetime
    valid_to: datetime
    hourly: List[HourlyForecast] = field(default_factory=list)
    daily: List[DailyForecast] = field(default_factory=list)


# =============================================================================
# DATA CLASSES - CONSENSUS
# =============================================================================

@dataclass(frozen=True)
class MetricStatistics:
    """Spread of one metric across models at one time slot."""
    mean: float
    median: float
    min: float
    max: float
    std_dev: float
    range: float


@dataclass(frozen=True)
class ModelConsensus:
    """Agreement diagnostics for one time slot."""
    agreement_score: float                 # 0.0 to 1.0
    models_in_agreement: List[ModelName]
    outlier_models: List[ModelName]
    temperature_stats: MetricStatistics
    precipitation_stats: MetricStatistics
    wind_stats: MetricStatistics


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float


@dataclass(frozen=True)
class HourlyRange:
    """Cross-model min/max for the key hourly metrics."""
    temperature: ValueRange
    precipitation: ValueRange
    wind_speed: ValueRange


@dataclass(frozen=True)
class DailyRange:
    """Cross-model min/max for the key daily metrics."""
    temperature_max: ValueRange
    temperature_min: ValueRange
    precipitation: ValueRange


@dataclass(frozen=True)
class ConfidenceFactor:
    """One weighted input to a confidence score."""
    name: str
    weight: float
    score: float
    contribution: float                    # weight * score
    detail: str


@dataclass(frozen=True)
class ConfidenceResult:
    """
    Leveled, explainable confidence score.

    Factor weights for a single result always sum to 1.0.
    """
    level: ConfidenceLevelName
    score: float
    factors: List[ConfidenceFactor]
    explanation: str


@dataclass(frozen=True)
class AggregatedHourlyForecast:
    timestamp: datetime
    metrics: WeatherMetrics
    confidence: ConfidenceResult
    model_agreement: ModelConsensus
    range: HourlyRange


@dataclass(frozen=True)
class AggregatedDailyForecast:
    date: date
    forecast: DailyForecast
    confidence: ConfidenceResult
    model_agreement: ModelConsensus
    range: DailyRange


@dataclass(frozen=True)
class ForecastConsensus:
    """Ascending, de-duplicated consensus sequences."""
    hourly: List[AggregatedHourlyForecast] = field(default_factory=list)
    daily: List[AggregatedDailyForecast] = field(default_factory=list)


@dataclass(frozen=True)
class ModelWeight:
    model: ModelName
    weight: float
    reason: str


@dataclass(frozen=True)
class AggregatedForecast:
    """
    Consensus of several model forecasts for one location.

    `models` preserves input order and `model_forecasts` is the input
    list itself, for drill-down by consumers.
    """
    coordinates: Coordinates
    generated_at: datetime
    valid_from: datetime
    valid_to: datetime
    models: List[ModelName]
    model_forecasts: List[ModelForecast]
    consensus: ForecastConsensus
    model_weights: List[ModelWeight]
    overall_confidence: ConfidenceResult


@dataclass(frozen=True)
class OutlierInfo:
    """A single (model, metric) outlier flag at one slot."""
    model: ModelName
    metric: str                            # "temperature", "precipitation" or "windSpeed"
    value: float
    z_score: float
    timestamp: Union[datetime, date]


@dataclass(frozen=True)
class NarrativeSummary:
    headline: str
    body: str
    alerts: List[str] = field(default_factory=list)
    model_notes: List[str] = field(default_factory=list)


# =============================================================================
# ABSTRACT INTERFACES
# =============================================================================

class ModelWeightingStrategy(ABC):
    """Interface for assigning per-model weights in an aggregate."""

    @abstractmethod
    def weigh(self, models: List[ModelName]) -> List[ModelWeight]:
        """Return one weight per model, in input order."""
        pass


class ForecastSource(ABC):
    """Interface for whatever hands a complete set of model forecasts to the engine."""

    @abstractmethod
    def fetch_forecasts(self) -> List[ModelForecast]:
        """Return every available model forecast."""
        pass
