"""
Aggregation Engine

Fuses several model forecasts into one consensus forecast.

Per time slot every metric gets its own fusion strategy:
- temperature, feels-like: trimmed mean (robust to a single wild model)
- wind speed, wind gust: median
- humidity, pressure, cloud cover, visibility, precipitation: mean
- wind direction: mean of raw degrees, rounded (no circular correction)
- precipitation probability: ensemble probability, the percentage of
  models predicting more than 0.1mm, not an average of the models'
  own stated probabilities
- UV index, weather code: median, rounded

Alongside the fused values each slot carries a ModelConsensus (spread
statistics and z-score outliers for temperature, precipitation and
wind), the cross-model min/max range, and a slot confidence.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence, Tuple, Union

from weather_oracle.config.settings import (
    DEFAULT_OVERALL_SCORE,
    PRECIPITATION_THRESHOLD_MM,
    SLOT_PRECIP_STRONG_HIGH,
    SLOT_PRECIP_STRONG_LOW,
    SLOT_PRECIP_WEAK_SCORE,
    SLOT_TEMPERATURE_STD_HIGH,
    SLOT_TEMPERATURE_STD_LOW,
    SLOT_WEIGHTS,
    SLOT_WIND_RANGE_HIGH_KMH,
    SLOT_WIND_RANGE_LOW_KMH,
)
from weather_oracle.core.exceptions import EmptyForecastError
from weather_oracle.core.models import (
    AggregatedDailyForecast,
    AggregatedForecast,
    AggregatedHourlyForecast,
    CloudCoverSummary,
    ConfidenceFactor,
    ConfidenceResult,
    DailyForecast,
    DailyRange,
    ForecastConsensus,
    HourlyForecast,
    HourlyRange,
    HumidityRange,
    MetricType,
    ModelConsensus,
    ModelForecast,
    ModelName,
    ModelWeightingStrategy,
    OutlierInfo,
    PrecipitationSummary,
    PressureRange,
    TemperatureRange,
    ValueRange,
    WeatherMetrics,
    WindSummary,
)
from weather_oracle.core.serialization import coerce_datetime
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
    to_km_per_hour,
)
from weather_oracle.engine.alignment import SlotEntry, group_by_date, group_by_timestamp
from weather_oracle.engine.confidence import (
    LEVEL_PHRASES,
    confidence_level_for_score,
    generate_explanation,
)
from weather_oracle.engine.statistics import (
    confidence_from_range,
    confidence_from_spread,
    ensemble_probability,
    find_outlier_indices,
    mean,
    median,
    metric_statistics,
    trimmed_mean,
    z_score,
)
from weather_oracle.engine.weighting import EqualWeighting

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 upwards (2.5 -> 3, -2.5 -> -2) instead of to even."""
    return math.floor(value + 0.5)


def _value_range(values: Sequence[float]) -> ValueRange:
    return ValueRange(min=float(min(values)), max=float(max(values)))


# =============================================================================
# CONSENSUS
# =============================================================================


def _slot_consensus(
    models: List[ModelName],
    temperatures: List[float],
    precipitations: List[float],
    wind_speeds: List[float],
    timestamp: Union[datetime, date],
) -> Tuple[ModelConsensus, List[OutlierInfo]]:
    """
    Run z-score outlier detection on the three core distributions.

    A model flagged on any metric is an outlier for the slot; one
    OutlierInfo is emitted per (model, metric) flag.
    """
    outliers: List[OutlierInfo] = []
    outlier_models: List[ModelName] = []

    for metric, values in (
        ("temperature", temperatures),
        ("precipitation", precipitations),
        ("windSpeed", wind_speeds),
    ):
        for idx in find_outlier_indices(values):
            model = models[idx]
            if model not in outlier_models:
                outlier_models.append(model)
            outliers.append(OutlierInfo(
                model=model,
                metric=metric,
                value=float(values[idx]),
                z_score=z_score(values[idx], values),
                timestamp=timestamp,
            ))

    in_agreement = [m for m in models if m not in outlier_models]
    agreement_score = len(in_agreement) / len(models) if models else 0.0

    if outliers:
        logger.debug(
            f"Slot {timestamp}: outliers "
            + ", ".join(f"{o.model.value}/{o.metric} (z={o.z_score:.2f})" for o in outliers)
        )

    consensus = ModelConsensus(
        agreement_score=agreement_score,
        models_in_agreement=in_agreement,
        outlier_models=outlier_models,
        temperature_stats=metric_statistics(temperatures),
        precipitation_stats=metric_statistics(precipitations),
        wind_stats=metric_statistics(wind_speeds),
    )
    return consensus, outliers


def _hourly_consensus(
    timestamp: datetime,
    entries: List[SlotEntry[HourlyForecast]],
) -> Tuple[ModelConsensus, List[OutlierInfo]]:
    return _slot_consensus(
        [e.model for e in entries],
        [e.entry.metrics.temperature for e in entries],
        [e.entry.metrics.precipitation for e in entries],
        [e.entry.metrics.wind_speed for e in entries],
        timestamp,
    )


def _daily_consensus(
    day: date,
    entries: List[SlotEntry[DailyForecast]],
) -> Tuple[ModelConsensus, List[OutlierInfo]]:
    # Max temperature stands in for the day's temperature distribution
    return _slot_consensus(
        [e.model for e in entries],
        [e.entry.temperature.max for e in entries],
        [e.entry.precipitation.total for e in entries],
        [e.entry.wind.max_speed for e in entries],
        day,
    )


# =============================================================================
# SLOT CONFIDENCE
# =============================================================================


def slot_confidence(
    consensus: ModelConsensus,
    precipitations: Sequence[float],
    total_models: int,
) -> ConfidenceResult:
    """
    Blend temperature spread, precipitation ensemble signal and wind range.

    The precipitation score is 1.0 when at least 80% or at most 20% of
    the models predict measurable rain, and 0.5 otherwise.
    """
    temp_sd = consensus.temperature_stats.std_dev
    temp_score = confidence_from_spread(temp_sd, SLOT_TEMPERATURE_STD_HIGH, SLOT_TEMPERATURE_STD_LOW)

    rain_pct = ensemble_probability(precipitations, PRECIPITATION_THRESHOLD_MM, "gt")
    if rain_pct >= SLOT_PRECIP_STRONG_HIGH or rain_pct <= SLOT_PRECIP_STRONG_LOW:
        precip_score = 1.0
    else:
        precip_score = SLOT_PRECIP_WEAK_SCORE

    wind_range_kmh = to_km_per_hour(consensus.wind_stats.range)
    wind_score = confidence_from_range(wind_range_kmh, SLOT_WIND_RANGE_HIGH_KMH, SLOT_WIND_RANGE_LOW_KMH)

    factors = [
        ConfidenceFactor(
            name="temperature",
            weight=SLOT_WEIGHTS["temperature"],
            score=temp_score,
            contribution=SLOT_WEIGHTS["temperature"] * temp_score,
            detail=f"Temp stdDev: {temp_sd:.1f}C",
        ),
        ConfidenceFactor(
            name="precipitation",
            weight=SLOT_WEIGHTS["precipitation"],
            score=precip_score,
            contribution=SLOT_WEIGHTS["precipitation"] * precip_score,
            detail=f"{rain_pct:.0f}% of models predict rain",
        ),
        ConfidenceFactor(
            name="wind",
            weight=SLOT_WEIGHTS["wind"],
            score=wind_score,
            contribution=SLOT_WEIGHTS["wind"] * wind_score,
            detail=f"Wind range: {wind_range_kmh:.1f}km/h",
        ),
    ]
    score = sum(f.contribution for f in factors)
    level = confidence_level_for_score(score)

    return ConfidenceResult(
        level=level,
        score=score,
        factors=factors,
        explanation=generate_explanation(
            len(consensus.models_in_agreement), total_models, level, MetricType.OVERALL
        ),
    )


def overall_confidence(scores: Sequence[float]) -> ConfidenceResult:
    """Mean of every slot score; 0.5 (medium) when there are no slots."""
    if scores:
        score = mean(scores)
        detail = f"Mean of {len(scores)} slot scores"
    else:
        score = DEFAULT_OVERALL_SCORE
        detail = "No forecast slots"

    level = confidence_level_for_score(score)
    if scores:
        explanation = f"{LEVEL_PHRASES[level]}: averaged over {len(scores)} forecast slots"
    else:
        explanation = f"{LEVEL_PHRASES[level]}: no forecast slots to assess"

    return ConfidenceResult(
        level=level,
        score=score,
        factors=[
            ConfidenceFactor(
                name="slotAverage",
                weight=1.0,
                score=score,
                contribution=score,
                detail=detail,
            ),
        ],
        explanation=explanation,
    )


# =============================================================================
# METRIC FUSION
# =============================================================================


def fuse_hourly_metrics(entries: Sequence[SlotEntry[HourlyForecast]]) -> WeatherMetrics:
    """Fuse one slot's WeatherMetrics using the per-metric strategies."""
    metrics = [e.entry.metrics for e in entries]
    precipitations = [m.precipitation for m in metrics]
    gusts = [m.wind_gust for m in metrics if m.wind_gust is not None]

    return WeatherMetrics(
        temperature=Celsius(trimmed_mean([m.temperature for m in metrics])),
        feels_like=Celsius(trimmed_mean([m.feels_like for m in metrics])),
        humidity=Humidity(round_half_up(mean([m.humidity for m in metrics]))),
        pressure=Pressure(mean([m.pressure for m in metrics])),
        wind_speed=MetersPerSecond(median([m.wind_speed for m in metrics])),
        wind_direction=WindDirection(round_half_up(mean([m.wind_direction for m in metrics]))),
        precipitation=Millimeters(mean(precipitations)),
        precipitation_probability=Percentage(
            ensemble_probability(precipitations, PRECIPITATION_THRESHOLD_MM, "gt")
        ),
        cloud_cover=CloudCover(round_half_up(mean([m.cloud_cover for m in metrics]))),
        visibility=Visibility(mean([m.visibility for m in metrics])),
        uv_index=UVIndex(round_half_up(median([m.uv_index for m in metrics]))),
        weather_code=WeatherCode(round_half_up(median([m.weather_code for m in metrics]))),
        wind_gust=MetersPerSecond(median(gusts)) if gusts else None,
    )


def fuse_daily_forecast(day: date, entries: Sequence[SlotEntry[DailyForecast]]) -> DailyForecast:
    """Fuse one day's summaries. Sun times come from the first contributing model."""
    days = [e.entry for e in entries]
    totals = [d.precipitation.total for d in days]

    return DailyForecast(
        date=day,
        temperature=TemperatureRange(
            min=Celsius(trimmed_mean([d.temperature.min for d in days])),
            max=Celsius(trimmed_mean([d.temperature.max for d in days])),
        ),
        humidity=HumidityRange(
            min=Humidity(round_half_up(mean([d.humidity.min for d in days]))),
            max=Humidity(round_half_up(mean([d.humidity.max for d in days]))),
        ),
        pressure=PressureRange(
            min=Pressure(mean([d.pressure.min for d in days])),
            max=Pressure(mean([d.pressure.max for d in days])),
        ),
        precipitation=PrecipitationSummary(
            total=Millimeters(mean(totals)),
            probability=Percentage(ensemble_probability(totals, PRECIPITATION_THRESHOLD_MM, "gt")),
            hours=round_half_up(mean([d.precipitation.hours for d in days])),
        ),
        wind=WindSummary(
            avg_speed=MetersPerSecond(mean([d.wind.avg_speed for d in days])),
            max_speed=MetersPerSecond(median([d.wind.max_speed for d in days])),
            dominant_direction=WindDirection(
                round_half_up(mean([d.wind.dominant_direction for d in days]))
            ),
        ),
        cloud_cover=CloudCoverSummary(
            avg=CloudCover(round_half_up(mean([d.cloud_cover.avg for d in days]))),
            max=CloudCover(round_half_up(mean([d.cloud_cover.max for d in days]))),
        ),
        uv_index_max=UVIndex(round_half_up(median([d.uv_index_max for d in days]))),
        weather_code=WeatherCode(round_half_up(median([d.weather_code for d in days]))),
        sun=days[0].sun,
        hourly=[],
    )


# =============================================================================
# FORECAST AGGREGATOR
# =============================================================================


class ForecastAggregator:
    """
    Combines model forecasts into an AggregatedForecast.

    Stateless apart from the weighting strategy, so one instance can be
    shared across threads.
    """

    def __init__(self, weighting: Optional[ModelWeightingStrategy] = None):
        """
        Initialize the aggregator.

        Args:
            weighting: Strategy that assigns per-model weights.
                       If None, every model is weighted equally.
        """
        self.weighting = weighting or EqualWeighting()

    def aggregate_hourly(self, forecasts: Sequence[ModelForecast]) -> List[AggregatedHourlyForecast]:
        """Consensus for every hourly slot, ascending by timestamp."""
        result = []
        for timestamp, entries in sorted(group_by_timestamp(forecasts).items()):
            consensus, _ = _hourly_consensus(timestamp, entries)
            temperatures = [e.entry.metrics.temperature for e in entries]
            precipitations = [e.entry.metrics.precipitation for e in entries]
            wind_speeds = [e.entry.metrics.wind_speed for e in entries]

            result.append(AggregatedHourlyForecast(
                timestamp=timestamp,
                metrics=fuse_hourly_metrics(entries),
                confidence=slot_confidence(consensus, precipitations, len(entries)),
                model_agreement=consensus,
                range=HourlyRange(
                    temperature=_value_range(temperatures),
                    precipitation=_value_range(precipitations),
                    wind_speed=_value_range(wind_speeds),
                ),
            ))
        return result

    def aggregate_daily(self, forecasts: Sequence[ModelForecast]) -> List[AggregatedDailyForecast]:
        """Consensus for every daily slot, ascending by date."""
        result = []
        for day, entries in sorted(group_by_date(forecasts).items()):
            consensus, _ = _daily_consensus(day, entries)
            totals = [e.entry.precipitation.total for e in entries]

            result.append(AggregatedDailyForecast(
                date=day,
                forecast=fuse_daily_forecast(day, entries),
                confidence=slot_confidence(consensus, totals, len(entries)),
                model_agreement=consensus,
                range=DailyRange(
                    temperature_max=_value_range([e.entry.temperature.max for e in entries]),
                    temperature_min=_value_range([e.entry.temperature.min for e in entries]),
                    precipitation=_value_range(totals),
                ),
            ))
        return result

    def aggregate(self, forecasts: Sequence[ModelForecast]) -> AggregatedForecast:
        """
        Aggregate model forecasts into one consensus forecast.

        Args:
            forecasts: One forecast per model, all for the same location

        Returns:
            AggregatedForecast. `models` keeps input order and
            `model_forecasts` holds the input forecasts themselves.

        Raises:
            EmptyForecastError: If forecasts is empty
        """
        if not forecasts:
            raise EmptyForecastError()

        reference = forecasts[0]
        models = [f.model for f in forecasts]

        unstamped = [f.model.value for f in forecasts if f.generated_at is None]
        if unstamped:
            logger.warning(f"Forecasts without a model run time: {', '.join(unstamped)}")

        hourly = self.aggregate_hourly(forecasts)
        daily = self.aggregate_daily(forecasts)

        if not hourly and not daily:
            logger.warning(f"No hourly or daily slots in {len(forecasts)} forecasts")

        if hourly:
            valid_from, valid_to = hourly[0].timestamp, hourly[-1].timestamp
        elif daily:
            valid_from = coerce_datetime(daily[0].date)
            valid_to = coerce_datetime(daily[-1].date)
        else:
            valid_from = coerce_datetime(reference.valid_from)
            valid_to = coerce_datetime(reference.valid_to)

        overall = overall_confidence(
            [h.confidence.score for h in hourly] + [d.confidence.score for d in daily]
        )

        logger.info(
            f"Aggregated {len(forecasts)} forecasts: "
            f"{len(hourly)} hourly, {len(daily)} daily slots, "
            f"overall confidence {overall.score:.2f} ({overall.level.value})"
        )

        return AggregatedForecast(
            coordinates=reference.coordinates,
            generated_at=datetime.now(timezone.utc),
            valid_from=valid_from,
            valid_to=valid_to,
            models=models,
            model_forecasts=forecasts if isinstance(forecasts, list) else list(forecasts),
            consensus=ForecastConsensus(hourly=hourly, daily=daily),
            model_weights=self.weighting.weigh(models),
            overall_confidence=overall,
        )

    def identify_outliers(self, forecasts: Sequence[ModelForecast]) -> List[OutlierInfo]:
        """
        Every per-slot outlier flag across hourly and daily slots.

        Needs at least three models; slots with fewer than three
        contributors are skipped.
        """
        if len(forecasts) <= 2:
            return []

        outliers: List[OutlierInfo] = []
        for timestamp, entries in group_by_timestamp(forecasts).items():
            if len(entries) <= 2:
                continue
            outliers.extend(_hourly_consensus(timestamp, entries)[1])

        for day, entries in group_by_date(forecasts).items():
            if len(entries) <= 2:
                continue
            outliers.extend(_daily_consensus(day, entries)[1])

        return outliers


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def aggregate_forecasts(
    forecasts: Sequence[ModelForecast],
    weighting: Optional[ModelWeightingStrategy] = None,
) -> AggregatedForecast:
    """
    Convenience function to aggregate model forecasts.

    Args:
        forecasts: Model forecasts for one location
        weighting: Optional weighting strategy (equal weights by default)

    Returns:
        AggregatedForecast
    """
    return ForecastAggregator(weighting=weighting).aggregate(forecasts)


def identify_outliers(forecasts: Sequence[ModelForecast]) -> List[OutlierInfo]:
    """Convenience function listing every per-slot outlier flag."""
    return ForecastAggregator().identify_outliers(forecasts)
