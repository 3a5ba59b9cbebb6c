"""
Confidence Calculator

Turns the spread and agreement diagnostics of an aggregated forecast
into a leveled, explainable confidence score. Three weighted factors
are combined:

    score = 0.5 * spread + 0.3 * agreement + 0.2 * timeHorizon

- spread: how tightly the models cluster, mapped through
  confidence_from_spread with per-metric thresholds
- agreement: 0.3 + 0.7 * (models in agreement / total models)
- timeHorizon: 1.0 minus 5% per day ahead, capped at 10 days, floored at 0.5

calculate_confidence works on a whole AggregatedForecast and reads the
first hourly slot only. calculate_hourly_confidence and
calculate_daily_confidence score one slot from its own consensus.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Union

from weather_oracle.config.settings import (
    AGREEMENT_FLOOR,
    DEFAULT_AGREEMENT_SCORE,
    FACTOR_WEIGHTS,
    HUMIDITY_STD_DEV_PLACEHOLDER,
    LEVEL_HIGH,
    LEVEL_MEDIUM,
    MAX_TIME_DECAY_DAYS,
    SLOT_LEVEL_HIGH,
    SLOT_LEVEL_MEDIUM,
    SPREAD_SPLIT,
    TIME_DECAY_PER_DAY,
    TIME_HORIZON_FLOOR,
)
from weather_oracle.core.models import (
    AggregatedDailyForecast,
    AggregatedForecast,
    AggregatedHourlyForecast,
    ConfidenceFactor,
    ConfidenceLevelName,
    ConfidenceResult,
    MetricType,
    ModelConsensus,
)
from weather_oracle.engine.statistics import confidence_from_spread, mean

logger = logging.getLogger(__name__)


# =============================================================================
# THRESHOLDS
# =============================================================================


@dataclass(frozen=True)
class SpreadThresholds:
    """Spread at or below `high` is full confidence; at or above `low` is the floor."""
    high: float
    low: float
    unit: str


METRIC_THRESHOLDS: Dict[MetricType, SpreadThresholds] = {
    MetricType.TEMPERATURE: SpreadThresholds(high=1.5, low=4.0, unit="C"),
    MetricType.PRECIPITATION: SpreadThresholds(high=2.0, low=10.0, unit="mm"),
    # ~10 km/h and ~25 km/h
    MetricType.WIND: SpreadThresholds(high=2.78, low=6.94, unit="m/s"),
    MetricType.HUMIDITY: SpreadThresholds(high=10.0, low=30.0, unit="%"),
    MetricType.OVERALL: SpreadThresholds(high=0.7, low=0.4, unit=""),
}

LEVEL_PHRASES = {
    ConfidenceLevelName.HIGH: "High confidence",
    ConfidenceLevelName.MEDIUM: "Moderate confidence",
    ConfidenceLevelName.LOW: "Low confidence",
}

LEVEL_INDICATORS = {
    ConfidenceLevelName.HIGH: "✅",
    ConfidenceLevelName.MEDIUM: "⚠️",
    ConfidenceLevelName.LOW: "❓",
}


# =============================================================================
# FACTOR SCORES
# =============================================================================


def score_from_spread(std_dev: float, thresholds: SpreadThresholds) -> float:
    """Map a stdDev onto [0.3, 1.0] using the metric's thresholds."""
    return confidence_from_spread(std_dev, thresholds.high, thresholds.low)


def score_from_agreement(models_in_agreement: int, total_models: int) -> float:
    """0.3 with no agreement up to 1.0 with full agreement; 0.5 if there are no models."""
    if total_models == 0:
        return DEFAULT_AGREEMENT_SCORE
    ratio = models_in_agreement / total_models
    return AGREEMENT_FLOOR + ratio * (1.0 - AGREEMENT_FLOOR)


def score_from_time_horizon(days_ahead: int) -> float:
    """Decay 5% per day ahead, flat after 10 days, never below 0.5; negative days count as 0."""
    effective_days = min(max(0, days_ahead), MAX_TIME_DECAY_DAYS)
    return max(TIME_HORIZON_FLOOR, 1.0 - effective_days * TIME_DECAY_PER_DAY)


def score_to_level(score: float) -> ConfidenceLevelName:
    """Level for calculator results: >=0.8 high, >=0.5 medium, else low."""
    if score >= LEVEL_HIGH:
        return ConfidenceLevelName.HIGH
    if score >= LEVEL_MEDIUM:
        return ConfidenceLevelName.MEDIUM
    return ConfidenceLevelName.LOW


def confidence_level_for_score(score: float) -> ConfidenceLevelName:
    """Coarser level used for the aggregator's slot and overall confidence."""
    if score >= SLOT_LEVEL_HIGH:
        return ConfidenceLevelName.HIGH
    if score >= SLOT_LEVEL_MEDIUM:
        return ConfidenceLevelName.MEDIUM
    return ConfidenceLevelName.LOW


def generate_explanation(
    models_in_agreement: int,
    total_models: int,
    level: ConfidenceLevelName,
    metric: MetricType,
) -> str:
    """
    Build the one-line explanation for a result.

    >>> generate_explanation(4, 5, ConfidenceLevelName.HIGH, MetricType.TEMPERATURE)
    'High confidence: 4 of 5 models agree on temperature predictions'
    """
    if models_in_agreement == total_models:
        agreement = f"All {total_models} models agree"
    else:
        agreement = f"{models_in_agreement} of {total_models} models agree"

    if metric == MetricType.OVERALL:
        subject = "on the forecast"
    else:
        subject = f"on {metric.value} predictions"

    return f"{LEVEL_PHRASES[level]}: {agreement} {subject}"


def _days_detail(days_ahead: int) -> str:
    return f"{days_ahead} day{'' if days_ahead == 1 else 's'} ahead"


def _factor(name: str, weight: float, score: float, detail: str) -> ConfidenceFactor:
    return ConfidenceFactor(
        name=name,
        weight=weight,
        score=score,
        contribution=weight * score,
        detail=detail,
    )


def _agreement_and_time_factors(
    models_in_agreement: int,
    total_models: int,
    days_ahead: int,
) -> List[ConfidenceFactor]:
    return [
        _factor(
            "agreement",
            FACTOR_WEIGHTS["agreement"],
            score_from_agreement(models_in_agreement, total_models),
            f"{models_in_agreement}/{total_models} models agree",
        ),
        _factor(
            "timeHorizon",
            FACTOR_WEIGHTS["timeHorizon"],
            score_from_time_horizon(days_ahead),
            _days_detail(days_ahead),
        ),
    ]


def _result(
    factors: List[ConfidenceFactor],
    models_in_agreement: int,
    total_models: int,
    metric: MetricType,
) -> ConfidenceResult:
    score = sum(f.contribution for f in factors)
    level = score_to_level(score)
    return ConfidenceResult(
        level=level,
        score=score,
        factors=factors,
        explanation=generate_explanation(models_in_agreement, total_models, level, metric),
    )


# =============================================================================
# WHOLE-FORECAST CONFIDENCE
# =============================================================================


def calculate_confidence(
    aggregated: AggregatedForecast,
    metric: Union[MetricType, str],
    days_ahead: int = 0,
) -> ConfidenceResult:
    """
    Calculate confidence for one metric of an aggregated forecast.

    For a specific metric the spread comes from the FIRST hourly slot
    only, whichever slot the caller cares about. Humidity has no
    cross-model statistics yet and uses a fixed stdDev of 5. For
    "overall" the spread score is the mean of every hourly slot's own
    confidence score.

    Args:
        aggregated: Output of aggregate_forecasts
        metric: MetricType or its string value
        days_ahead: Lead time in days, for time decay

    Returns:
        ConfidenceResult with spread, agreement and timeHorizon factors

    Raises:
        ValueError: If metric is not a known metric name
    """
    metric = MetricType(metric)
    thresholds = METRIC_THRESHOLDS[metric]
    total_models = len(aggregated.models)
    hourly = aggregated.consensus.hourly

    spread_score = 1.0
    spread_value = 0.0
    models_in_agreement = total_models

    if metric == MetricType.OVERALL:
        if hourly:
            average = mean([h.confidence.score for h in hourly])
            spread_score = average
            spread_value = 1.0 - average
            agreeing = mean([len(h.model_agreement.models_in_agreement) for h in hourly])
            models_in_agreement = math.floor(agreeing + 0.5)
    elif hourly:
        consensus = hourly[0].model_agreement
        if metric == MetricType.TEMPERATURE:
            spread_value = consensus.temperature_stats.std_dev
        elif metric == MetricType.PRECIPITATION:
            spread_value = consensus.precipitation_stats.std_dev
        elif metric == MetricType.WIND:
            spread_value = consensus.wind_stats.std_dev
        else:
            spread_value = HUMIDITY_STD_DEV_PLACEHOLDER
        spread_score = score_from_spread(spread_value, thresholds)
        models_in_agreement = len(consensus.models_in_agreement)
    else:
        logger.debug(f"No hourly consensus; {metric.value} spread defaults to full confidence")

    factors = [
        _factor(
            "spread",
            FACTOR_WEIGHTS["spread"],
            spread_score,
            f"Spread: {spread_value:.1f}{thresholds.unit}",
        ),
    ]
    factors.extend(_agreement_and_time_factors(models_in_agreement, total_models, days_ahead))

    return _result(factors, models_in_agreement, total_models, metric)


# =============================================================================
# PER-SLOT CONFIDENCE
# =============================================================================


def _slot_confidence(
    consensus: ModelConsensus,
    total_models: int,
    days_ahead: int,
) -> ConfidenceResult:
    spread_weight = FACTOR_WEIGHTS["spread"]
    temp_sd = consensus.temperature_stats.std_dev
    precip_sd = consensus.precipitation_stats.std_dev
    wind_sd = consensus.wind_stats.std_dev

    factors = [
        _factor(
            "temperatureSpread",
            spread_weight * SPREAD_SPLIT["temperature"],
            score_from_spread(temp_sd, METRIC_THRESHOLDS[MetricType.TEMPERATURE]),
            f"Temp spread: {temp_sd:.1f}C",
        ),
        _factor(
            "precipitationSpread",
            spread_weight * SPREAD_SPLIT["precipitation"],
            score_from_spread(precip_sd, METRIC_THRESHOLDS[MetricType.PRECIPITATION]),
            f"Precip spread: {precip_sd:.1f}mm",
        ),
        _factor(
            "windSpread",
            spread_weight * SPREAD_SPLIT["wind"],
            score_from_spread(wind_sd, METRIC_THRESHOLDS[MetricType.WIND]),
            f"Wind spread: {wind_sd:.1f}m/s",
        ),
    ]
    models_in_agreement = len(consensus.models_in_agreement)
    factors.extend(_agreement_and_time_factors(models_in_agreement, total_models, days_ahead))

    return _result(factors, models_in_agreement, total_models, MetricType.OVERALL)


def calculate_hourly_confidence(
    hourly: AggregatedHourlyForecast,
    total_models: int,
    days_ahead: int = 0,
) -> ConfidenceResult:
    """Confidence for one aggregated hour, from that hour's own consensus."""
    return _slot_confidence(hourly.model_agreement, total_models, days_ahead)


def calculate_daily_confidence(
    daily: AggregatedDailyForecast,
    total_models: int,
    days_ahead: int = 0,
) -> ConfidenceResult:
    """Confidence for one aggregated day (temperature spread uses daily max temps)."""
    return _slot_confidence(daily.model_agreement, total_models, days_ahead)


# =============================================================================
# DISPLAY HELPERS
# =============================================================================


def format_confidence_summary(result: ConfidenceResult) -> str:
    """Short summary such as "High (85%)"."""
    percentage = math.floor(result.score * 100 + 0.5)
    return f"{result.level.value.capitalize()} ({percentage}%)"


def confidence_indicator(level: ConfidenceLevelName) -> str:
    """Emoji marker for a confidence level."""
    return LEVEL_INDICATORS[level]
