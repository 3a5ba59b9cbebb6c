"""
Narrative Generator

Writes a short plain-language brief for an aggregated forecast.

The forecast is first classified, in this order:
1. disagreement: mean of the supplied confidence scores is below 0.5
2. transition: the first and last days differ in dry/wet character
3. agreement: everything else

The classification picks the headline template. The body names the
diverging models with their raw values. Alerts flag extended-range
uncertainty and model disagreement. Model notes call out each model
whose daily value sits 2+ standard deviations from that day's mean.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from weather_oracle.config.settings import (
    DISAGREEMENT_SCORE,
    OUTLIER_CALLOUT_THRESHOLD,
    PRECIPITATION_DISAGREEMENT_RANGE,
    PRECIPITATION_THRESHOLD_MM,
    TEMPERATURE_DISAGREEMENT_RANGE,
    TRANSITION_PRECIP_SPREAD,
    UNCERTAINTY_DAYS_THRESHOLD,
)
from weather_oracle.core.models import (
    AggregatedDailyForecast,
    AggregatedForecast,
    ConfidenceLevelName,
    ConfidenceResult,
    DailyForecast,
    ModelName,
    NarrativeSummary,
    NarrativeType,
    OutlierInfo,
)
from weather_oracle.core.serialization import coerce_date, coerce_datetime
from weather_oracle.engine.confidence import score_to_level
from weather_oracle.engine.statistics import mean, std_dev
from weather_oracle.engine.templates import (
    AGREEMENT_TEMPLATES,
    CONFIDENCE_TEMPLATES,
    TRANSITION_TEMPLATES,
    UNCERTAINTY_TEMPLATES,
    WeatherCondition,
    condition_to_description,
    fill_template,
    format_model_list,
    format_model_name,
    format_precipitation,
    format_relative_day,
    format_temperature,
    format_time_period,
    is_dry_condition,
    is_precipitation,
    select_template,
    weather_code_to_condition,
)

logger = logging.getLogger(__name__)

NO_DATA_HEADLINE = "No forecast data available."
DISAGREEMENT_ALERT = "Significant model disagreement - consider multiple scenarios."
DEFAULT_TRANSITION_PERIOD = "afternoon"


@dataclass(frozen=True)
class TransitionInfo:
    """The first day whose dry/wet character differs from the first day's."""
    day: AggregatedDailyForecast
    condition: WeatherCondition
    period: str = DEFAULT_TRANSITION_PERIOD


# =============================================================================
# CLASSIFICATION
# =============================================================================


def _average_score(confidence: Sequence[ConfidenceResult]) -> float:
    if not confidence:
        return 0.5
    return mean([c.score for c in confidence])


def _condition(day: AggregatedDailyForecast) -> WeatherCondition:
    return weather_code_to_condition(day.forecast.weather_code)


def classify_narrative_type(
    aggregated: AggregatedForecast,
    confidence: Sequence[ConfidenceResult],
) -> NarrativeType:
    """Disagreement beats transition, which beats agreement."""
    if _average_score(confidence) < DISAGREEMENT_SCORE:
        return NarrativeType.DISAGREEMENT

    daily = aggregated.consensus.daily
    if len(daily) >= 2:
        if is_dry_condition(_condition(daily[0])) != is_dry_condition(_condition(daily[-1])):
            return NarrativeType.TRANSITION

    return NarrativeType.AGREEMENT


def get_dominant_condition(aggregated: AggregatedForecast) -> WeatherCondition:
    """Most frequent condition across the daily series; ties go to the earliest."""
    daily = aggregated.consensus.daily
    if not daily:
        return WeatherCondition.UNKNOWN
    counts = Counter(_condition(d) for d in daily)
    return counts.most_common(1)[0][0]


def _transition_period(aggregated: AggregatedForecast, day: AggregatedDailyForecast) -> str:
    """Part of day of the first consensus hour with measurable rain on that day."""
    target = coerce_date(day.date)
    for hour in aggregated.consensus.hourly:
        timestamp = coerce_datetime(hour.timestamp)
        if timestamp.date() == target and hour.metrics.precipitation > PRECIPITATION_THRESHOLD_MM:
            return format_time_period(timestamp.hour)
    return DEFAULT_TRANSITION_PERIOD


def find_transition_day(aggregated: AggregatedForecast) -> Optional[TransitionInfo]:
    """
    Only a single dry/wet switch relative to day 0 is detected.

    When the switch brings rain, the period comes from the hourly consensus;
    it falls back to "afternoon" when no hour on that day is wet.
    """
    daily = aggregated.consensus.daily
    if len(daily) < 2:
        return None

    first_is_dry = is_dry_condition(_condition(daily[0]))
    for day in daily[1:]:
        condition = _condition(day)
        if is_dry_condition(condition) != first_is_dry:
            if not is_precipitation(condition):
                return TransitionInfo(day=day, condition=condition)
            return TransitionInfo(day=day, condition=condition, period=_transition_period(aggregated, day))
    return None


def get_average_confidence_level(confidence: Sequence[ConfidenceResult]) -> ConfidenceLevelName:
    if not confidence:
        return ConfidenceLevelName.MEDIUM
    return score_to_level(_average_score(confidence))


# =============================================================================
# PER-MODEL VALUES
# =============================================================================


def _model_days(aggregated: AggregatedForecast, day: date) -> List[Tuple[ModelName, DailyForecast]]:
    """Each model's own daily entry for a date, in input order."""
    found = []
    for forecast in aggregated.model_forecasts:
        for entry in forecast.daily:
            if coerce_date(entry.date) == day:
                found.append((forecast.model, entry))
                break
    return found


def _divergent(
    values: List[Tuple[ModelName, float]],
    metric: str,
    day: date,
) -> List[OutlierInfo]:
    numbers = [v for _, v in values]
    sd = std_dev(numbers)
    if sd == 0:
        return []

    avg = mean(numbers)
    flagged = []
    for model, value in values:
        z = (value - avg) / sd
        if abs(z) >= OUTLIER_CALLOUT_THRESHOLD:
            flagged.append(OutlierInfo(model=model, metric=metric, value=value, z_score=z, timestamp=day))
    return flagged


def identify_outlier_models(aggregated: AggregatedForecast) -> List[OutlierInfo]:
    """
    Models whose daily max temperature or precipitation total diverges.

    Each day's mean and stdDev are computed here from the models' raw
    values. The aggregator's own outlier flags are not consulted. The
    z-score keeps its sign: positive means warmer or wetter.
    """
    outliers: List[OutlierInfo] = []
    for daily in aggregated.consensus.daily:
        day = coerce_date(daily.date)
        entries = _model_days(aggregated, day)
        outliers.extend(_divergent(
            [(model, float(entry.temperature.max)) for model, entry in entries], "temperature", day
        ))
        outliers.extend(_divergent(
            [(model, float(entry.precipitation.total)) for model, entry in entries], "precipitation", day
        ))
    return outliers


# =============================================================================
# HEADLINES
# =============================================================================


def _agreement_headline(
    aggregated: AggregatedForecast,
    dominant: WeatherCondition,
    reference: date,
) -> str:
    daily = aggregated.consensus.daily
    end_day = format_relative_day(daily[-1].date, reference) if daily else "the forecast period"
    return fill_template(select_template(AGREEMENT_TEMPLATES["strong"]), {
        "condition": condition_to_description(dominant),
        "endDay": end_day,
    })


def _disagreement_headline(aggregated: AggregatedForecast) -> str:
    daily = aggregated.consensus.daily
    if not daily:
        return "Models show significant uncertainty in the forecast."

    first = daily[0].range
    if first.temperature_max.max - first.temperature_max.min > TEMPERATURE_DISAGREEMENT_RANGE:
        return "Models disagree significantly on temperatures this period."
    if first.precipitation.max - first.precipitation.min > PRECIPITATION_DISAGREEMENT_RANGE:
        return "Precipitation amounts uncertain - models show different scenarios."
    return "Model disagreement creates forecast uncertainty."


def _transition_headline(
    aggregated: AggregatedForecast,
    transition: TransitionInfo,
    reference: date,
) -> str:
    first_condition = _condition(aggregated.consensus.daily[0])
    day_label = format_relative_day(transition.day.date, reference)

    if is_dry_condition(first_condition) and is_precipitation(transition.condition):
        return fill_template(select_template(TRANSITION_TEMPLATES["dry_to_wet"]), {
            "condition": condition_to_description(transition.condition).capitalize(),
            "day": day_label,
            "period": transition.period,
        })

    return fill_template(select_template(TRANSITION_TEMPLATES["wet_to_dry"]), {
        "condition": condition_to_description(transition.condition),
        "day": day_label,
    })


# =============================================================================
# BODY
# =============================================================================


def _temperature_split_sentence(aggregated: AggregatedForecast) -> Optional[str]:
    first = aggregated.consensus.daily[0]
    if first.model_agreement.temperature_stats.range <= TEMPERATURE_DISAGREEMENT_RANGE:
        return None

    values = [(m, float(e.temperature.max)) for m, e in _model_days(aggregated, coerce_date(first.date))]
    avg = mean([v for _, v in values])
    high = [(m, v) for m, v in values if v > avg]
    low = [(m, v) for m, v in values if v <= avg]
    if not high or not low:
        return None

    return (
        f"{format_model_list([m for m, _ in high])} "
        f"{'predicts' if len(high) == 1 else 'predict'} "
        f"{format_temperature(max(v for _, v in high))} while "
        f"{format_model_list([m for m, _ in low])} "
        f"{'shows' if len(low) == 1 else 'show'} only "
        f"{format_temperature(min(v for _, v in low))}."
    )


def _transition_sentence(aggregated: AggregatedForecast) -> Optional[str]:
    transition = find_transition_day(aggregated)
    if transition is None or not is_precipitation(transition.condition):
        return None

    amounts = [
        (m, float(e.precipitation.total))
        for m, e in _model_days(aggregated, coerce_date(transition.day.date))
    ]
    if len(amounts) < 2:
        return None

    ordered = sorted(amounts, key=lambda item: item[1], reverse=True)
    wettest, driest = ordered[0], ordered[-1]
    if wettest[1] - driest[1] <= TRANSITION_PRECIP_SPREAD:
        return None

    heavy = [m for m, _ in ordered[:2]] if len(ordered) >= 3 else [wettest[0]]
    return (
        f"{format_model_list(heavy)} {'shows' if len(heavy) == 1 else 'show'} heavier rain "
        f"({format_precipitation(wettest[1])}) while {format_model_name(driest[0])} "
        f"predicts a lighter system ({format_precipitation(driest[1])})."
    )


def _body(
    aggregated: AggregatedForecast,
    confidence: Sequence[ConfidenceResult],
    narrative_type: NarrativeType,
) -> str:
    sentences: List[str] = []

    if narrative_type == NarrativeType.DISAGREEMENT:
        detail = _temperature_split_sentence(aggregated)
    elif narrative_type == NarrativeType.TRANSITION:
        detail = _transition_sentence(aggregated)
    else:
        detail = None
    if detail:
        sentences.append(detail)

    if confidence:
        period = "the dry period" if narrative_type == NarrativeType.TRANSITION else "this forecast period"
        level = get_average_confidence_level(confidence)
        sentences.append(fill_template(CONFIDENCE_TEMPLATES[level], {"period": period}))

    return " ".join(sentences)


# =============================================================================
# ALERTS AND NOTES
# =============================================================================


def _alerts(
    aggregated: AggregatedForecast,
    confidence: Sequence[ConfidenceResult],
    reference: date,
) -> List[str]:
    alerts = []

    daily = aggregated.consensus.daily
    if daily:
        days_ahead = (coerce_date(daily[-1].date) - reference).days
        if days_ahead >= UNCERTAINTY_DAYS_THRESHOLD:
            check_day = format_relative_day(reference + timedelta(days=2), reference)
            alerts.append(fill_template(select_template(UNCERTAINTY_TEMPLATES), {
                "days": str(UNCERTAINTY_DAYS_THRESHOLD),
                "checkDay": check_day,
            }))

    if _average_score(confidence) < DISAGREEMENT_SCORE:
        alerts.append(DISAGREEMENT_ALERT)

    return alerts


def _model_notes(aggregated: AggregatedForecast) -> List[str]:
    by_model: Dict[ModelName, List[OutlierInfo]] = {}
    for outlier in identify_outlier_models(aggregated):
        by_model.setdefault(outlier.model, []).append(outlier)

    notes = []
    for model, flagged in by_model.items():
        name = format_model_name(model)
        temperature = next((o for o in flagged if o.metric == "temperature"), None)
        precipitation = next((o for o in flagged if o.metric == "precipitation"), None)

        if temperature is not None:
            direction = "warmer" if temperature.z_score > 0 else "cooler"
            notes.append(f"{name} is notably {direction} at {format_temperature(temperature.value)}.")
        if precipitation is not None:
            direction = "wetter" if precipitation.z_score > 0 else "drier"
            notes.append(f"{name} shows a {direction} scenario ({format_precipitation(precipitation.value)}).")

    return notes


# =============================================================================
# NARRATIVE
# =============================================================================


def generate_narrative(
    aggregated: AggregatedForecast,
    confidence: Sequence[ConfidenceResult],
    reference_date: Optional[date] = None,
) -> NarrativeSummary:
    """
    Generate a plain-language summary of an aggregated forecast.

    Args:
        aggregated: Output of aggregate_forecasts
        confidence: Confidence results for the forecast periods of interest
        reference_date: Day that relative labels ("tomorrow", "Friday") and
                        the extended-range alert count from. Defaults to today.

    Returns:
        NarrativeSummary with headline, body, alerts and model notes
    """
    if not aggregated.consensus.daily:
        return NarrativeSummary(headline=NO_DATA_HEADLINE, body="", alerts=[], model_notes=[])

    reference = coerce_date(reference_date) if reference_date is not None else date.today()
    narrative_type = classify_narrative_type(aggregated, confidence)
    dominant = get_dominant_condition(aggregated)

    if narrative_type == NarrativeType.DISAGREEMENT:
        headline = _disagreement_headline(aggregated)
    elif narrative_type == NarrativeType.TRANSITION:
        transition = find_transition_day(aggregated)
        if transition is not None:
            headline = _transition_headline(aggregated, transition, reference)
        else:
            headline = _agreement_headline(aggregated, dominant, reference)
    else:
        headline = _agreement_headline(aggregated, dominant, reference)

    summary = NarrativeSummary(
        headline=headline,
        body=_body(aggregated, confidence, narrative_type),
        alerts=_alerts(aggregated, confidence, reference),
        model_notes=_model_notes(aggregated),
    )
    logger.debug(f"Narrative ({narrative_type.value}): {summary.headline}")
    return summary
