"""
Forecast engine for Weather Oracle.

Contains the statistics library, temporal alignment, the aggregation
engine, the confidence calculator and the narrative generator.
"""

from weather_oracle.engine.statistics import (
    mean,
    median,
    std_dev,
    trimmed_mean,
    metric_statistics,
    z_score,
    find_outlier_indices,
    ensemble_probability,
    confidence_from_spread,
    confidence_from_range,
)

from weather_oracle.engine.alignment import (
    SlotEntry,
    group_by_timestamp,
    group_by_date,
)

from weather_oracle.engine.weighting import EqualWeighting

from weather_oracle.engine.aggregator import (
    ForecastAggregator,
    aggregate_forecasts,
    identify_outliers,
)

from weather_oracle.engine.confidence import (
    calculate_confidence,
    calculate_hourly_confidence,
    calculate_daily_confidence,
    format_confidence_summary,
    confidence_indicator,
)

from weather_oracle.engine.templates import WeatherCondition

from weather_oracle.engine.narrative import (
    TransitionInfo,
    classify_narrative_type,
    get_dominant_condition,
    find_transition_day,
    identify_outlier_models,
    get_average_confidence_level,
    generate_narrative,
)

__all__ = [
    # Statistics
    "mean",
    "median",
    "std_dev",
    "trimmed_mean",
    "metric_statistics",
    "z_score",
    "find_outlier_indices",
    "ensemble_probability",
    "confidence_from_spread",
    "confidence_from_range",
    # Alignment
    "SlotEntry",
    "group_by_timestamp",
    "group_by_date",
    # Aggregation
    "EqualWeighting",
    "ForecastAggregator",
    "aggregate_forecasts",
    "identify_outliers",
    # Confidence
    "calculate_confidence",
    "calculate_hourly_confidence",
    "calculate_daily_confidence",
    "format_confidence_summary",
    "confidence_indicator",
    # Narrative
    "WeatherCondition",
    "TransitionInfo",
    "classify_narrative_type",
    "get_dominant_condition",
    "find_transition_day",
    "identify_outlier_models",
    "get_average_confidence_level",
    "generate_narrative",
]
