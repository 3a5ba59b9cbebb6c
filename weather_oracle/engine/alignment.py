"""
Temporal Alignment

Buckets every model's hourly and daily entries by time slot. Models do
not need identical coverage: a slot holds whichever models report it,
so the slot set is the union across models.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Generic, List, Sequence, TypeVar

from weather_oracle.core.models import DailyForecast, HourlyForecast, ModelForecast, ModelName
from weather_oracle.core.serialization import coerce_date, coerce_datetime

T = TypeVar("T")


@dataclass(frozen=True)
class SlotEntry(Generic[T]):
    """One model's entry at one time slot."""
    model: ModelName
    entry: T


def group_by_timestamp(
    forecasts: Sequence[ModelForecast],
) -> Dict[datetime, List[SlotEntry[HourlyForecast]]]:
    """
    Group hourly entries by timestamp across all models.

    Keys are normalized to timezone-aware UTC datetimes, so the same
    instant given as a string or a datetime lands in one slot. Within a
    slot, entries keep the order of the input forecasts.
    """
    slots: Dict[datetime, List[SlotEntry[HourlyForecast]]] = {}
    for forecast in forecasts:
        for hour in forecast.hourly:
            key = coerce_datetime(hour.timestamp)
            slots.setdefault(key, []).append(SlotEntry(forecast.model, hour))
    return slots


def group_by_date(
    forecasts: Sequence[ModelForecast],
) -> Dict[date, List[SlotEntry[DailyForecast]]]:
    """Group daily entries by calendar date across all models."""
    slots: Dict[date, List[SlotEntry[DailyForecast]]] = {}
    for forecast in forecasts:
        for day in forecast.daily:
            key = coerce_date(day.date)
            slots.setdefault(key, []).append(SlotEntry(forecast.model, day))
    return slots
