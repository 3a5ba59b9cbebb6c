"""
Narrative vocabulary, formatters and template tables.

Templates come in groups of phrasing variants. select_template always
returns the first variant, so narratives are deterministic.
"""

import math
import re
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Sequence, TypeVar, Union

from weather_oracle.config.models import get_model_info
from weather_oracle.core.models import ConfidenceLevelName, ModelName
from weather_oracle.core.serialization import coerce_date

T = TypeVar("T")


class WeatherCondition(Enum):
    """Coarse condition categories used in narrative text."""
    SUNNY = "sunny"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    OVERCAST = "overcast"
    FOG = "fog"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    HEAVY_RAIN = "heavy_rain"
    THUNDERSTORM = "thunderstorm"
    SNOW = "snow"
    SLEET = "sleet"
    UNKNOWN = "unknown"


CONDITION_DESCRIPTIONS: Dict[WeatherCondition, str] = {
    WeatherCondition.SUNNY: "sunny",
    WeatherCondition.PARTLY_CLOUDY: "partly cloudy",
    WeatherCondition.CLOUDY: "cloudy",
    WeatherCondition.OVERCAST: "overcast",
    WeatherCondition.FOG: "foggy",
    WeatherCondition.DRIZZLE: "light rain",
    WeatherCondition.RAIN: "rain",
    WeatherCondition.HEAVY_RAIN: "heavy rain",
    WeatherCondition.THUNDERSTORM: "thunderstorms",
    WeatherCondition.SNOW: "snow",
    WeatherCondition.SLEET: "sleet",
    WeatherCondition.UNKNOWN: "mixed conditions",
}

PRECIPITATING_CONDITIONS = frozenset({
    WeatherCondition.DRIZZLE,
    WeatherCondition.RAIN,
    WeatherCondition.HEAVY_RAIN,
    WeatherCondition.THUNDERSTORM,
    WeatherCondition.SNOW,
    WeatherCondition.SLEET,
})

DRY_CONDITIONS = frozenset({
    WeatherCondition.SUNNY,
    WeatherCondition.PARTLY_CLOUDY,
    WeatherCondition.CLOUDY,
    WeatherCondition.OVERCAST,
    WeatherCondition.FOG,
})


# =============================================================================
# CONDITIONS
# =============================================================================


def weather_code_to_condition(code: int) -> WeatherCondition:
    """Map a WMO weather interpretation code to a condition category."""
    code = int(code)
    if code == 0:
        return WeatherCondition.SUNNY
    if 1 <= code <= 2:
        return WeatherCondition.PARTLY_CLOUDY
    if code == 3:
        return WeatherCondition.CLOUDY
    if 45 <= code <= 48:
        return WeatherCondition.FOG
    if 51 <= code <= 57:
        return WeatherCondition.DRIZZLE
    if 61 <= code <= 65:
        return WeatherCondition.RAIN
    # Freezing rain
    if 66 <= code <= 67:
        return WeatherCondition.SLEET
    if 71 <= code <= 77 or 85 <= code <= 86:
        return WeatherCondition.SNOW
    # Rain showers
    if 80 <= code <= 82:
        return WeatherCondition.RAIN
    if 95 <= code <= 99:
        return WeatherCondition.THUNDERSTORM
    return WeatherCondition.UNKNOWN


def condition_to_description(condition: WeatherCondition) -> str:
    return CONDITION_DESCRIPTIONS[condition]


def is_precipitation(condition: WeatherCondition) -> bool:
    return condition in PRECIPITATING_CONDITIONS


def is_dry_condition(condition: WeatherCondition) -> bool:
    return condition in DRY_CONDITIONS


# =============================================================================
# FORMATTERS
# =============================================================================


def format_confidence_level(level: ConfidenceLevelName) -> str:
    return level.value.upper()


def format_model_name(model: ModelName) -> str:
    """Name of a model as it appears in narrative text (e.g., "ARPEGE")."""
    return get_model_info(model).short_name


def format_model_list(models: Sequence[ModelName]) -> str:
    """
    Join model names into an English list.

    >>> format_model_list([ModelName.ECMWF, ModelName.GFS, ModelName.ICON])
    'ECMWF, GFS, and ICON'
    """
    names = [format_model_name(m) for m in models]
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def format_temperature(temp: float) -> str:
    """Whole degrees Celsius, rounding .5 up (e.g., "21°C")."""
    return f"{math.floor(float(temp) + 0.5)}°C"


def format_precipitation(mm: float) -> str:
    """Whole millimetres rounding .5 up (e.g., "12mm"), "trace amounts" below 1mm."""
    if mm < 1:
        return "trace amounts"
    return f"{math.floor(float(mm) + 0.5)}mm"


def format_day_name(day: Union[date, datetime, str]) -> str:
    return f"{coerce_date(day):%A}"


def format_relative_day(
    day: Union[date, datetime, str],
    reference: Optional[Union[date, datetime, str]] = None,
) -> str:
    """
    Describe a day relative to a reference day (today by default).

    Returns "today", "tomorrow", a weekday name for 2-6 days ahead,
    and "Monday, Jan 5" style otherwise.
    """
    target = coerce_date(day)
    ref = coerce_date(reference) if reference is not None else date.today()
    diff = (target - ref).days

    if diff == 0:
        return "today"
    if diff == 1:
        return "tomorrow"
    if 2 <= diff <= 6:
        return format_day_name(target)
    return f"{target:%A}, {target:%b} {target.day}"


def format_time_period(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "overnight"


# =============================================================================
# TEMPLATES
# =============================================================================

AGREEMENT_TEMPLATES = {
    "strong": [
        "Models agree on {condition} conditions through {endDay}.",
        "All models are in agreement: {condition} through {endDay}.",
        "Strong model consensus shows {condition} conditions through {endDay}.",
    ],
    "moderate": [
        "Most models agree on {condition} conditions through {endDay}.",
        "Models generally show {condition} through {endDay}.",
        "There's good agreement on {condition} conditions through {endDay}.",
    ],
}

TRANSITION_TEMPLATES = {
    "dry_to_wet": [
        "{condition} arriving {day} {period}.",
        "Expect {condition} to move in {day} {period}.",
        "{condition} expected {day} {period}.",
    ],
    "wet_to_dry": [
        "{condition} clearing by {day}.",
        "Drier conditions returning {day}.",
        "Expect clearing skies by {day}.",
    ],
}

UNCERTAINTY_TEMPLATES = [
    "This uncertainty is common at {days}+ days out. Check back {checkDay} for a clearer picture.",
    "Extended range forecasts beyond {days} days carry increased uncertainty.",
    "Consider this a general trend - details may change as we get closer.",
]

CONFIDENCE_TEMPLATES = {
    ConfidenceLevelName.HIGH: "Confidence is HIGH for {period}.",
    ConfidenceLevelName.MEDIUM: "Confidence is MEDIUM for {period}.",
    ConfidenceLevelName.LOW: "Confidence is LOW for {period} - significant model disagreement.",
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def select_template(templates: Sequence[T]) -> T:
    """Pick a variant. Always the first one."""
    return templates[0]


def fill_template(template: str, values: Dict[str, str]) -> str:
    """Replace {name} placeholders; unknown placeholders are left as-is."""
    return _PLACEHOLDER.sub(lambda m: str(values.get(m.group(1), m.group(0))), template)
