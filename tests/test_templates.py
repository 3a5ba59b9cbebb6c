"""
Tests for narrative vocabulary, formatters and templates.
"""

from datetime import date, datetime, timezone

import pytest

from weather_oracle.core import ConfidenceLevelName, ModelName
from weather_oracle.engine.templates import (
    AGREEMENT_TEMPLATES,
    TRANSITION_TEMPLATES,
    WeatherCondition,
    condition_to_description,
    fill_template,
    format_confidence_level,
    format_day_name,
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

from tests.factories import BASE_DATE


# =============================================================================
# CONDITION TESTS
# =============================================================================


class TestWeatherCodeToCondition:
    """Tests for WMO code mapping."""

    @pytest.mark.parametrize("code,expected", [
        (0, WeatherCondition.SUNNY),
        (1, WeatherCondition.PARTLY_CLOUDY),
        (2, WeatherCondition.PARTLY_CLOUDY),
        (3, WeatherCondition.CLOUDY),
        (45, WeatherCondition.FOG),
        (48, WeatherCondition.FOG),
        (51, WeatherCondition.DRIZZLE),
        (57, WeatherCondition.DRIZZLE),
        (61, WeatherCondition.RAIN),
        (65, WeatherCondition.RAIN),
        (66, WeatherCondition.SLEET),
        (71, WeatherCondition.SNOW),
        (77, WeatherCondition.SNOW),
        (80, WeatherCondition.RAIN),
        (82, WeatherCondition.RAIN),
        (85, WeatherCondition.SNOW),
        (95, WeatherCondition.THUNDERSTORM),
        (99, WeatherCondition.THUNDERSTORM),
    ])
    def test_known_codes(self, code, expected):
        assert weather_code_to_condition(code) == expected

    def test_unmapped_codes(self):
        assert weather_code_to_condition(4) == WeatherCondition.UNKNOWN
        assert weather_code_to_condition(100) == WeatherCondition.UNKNOWN

    def test_heavy_rain_is_not_produced(self):
        conditions = {weather_code_to_condition(code) for code in range(100)}
        assert WeatherCondition.HEAVY_RAIN not in conditions


class TestConditionClassification:
    def test_descriptions(self):
        assert condition_to_description(WeatherCondition.FOG) == "foggy"
        assert condition_to_description(WeatherCondition.DRIZZLE) == "light rain"
        assert condition_to_description(WeatherCondition.UNKNOWN) == "mixed conditions"

    def test_wet_conditions(self):
        assert is_precipitation(WeatherCondition.RAIN)
        assert is_precipitation(WeatherCondition.SNOW)
        assert not is_dry_condition(WeatherCondition.THUNDERSTORM)

    def test_dry_conditions(self):
        assert is_dry_condition(WeatherCondition.SUNNY)
        assert is_dry_condition(WeatherCondition.FOG)
        assert not is_precipitation(WeatherCondition.OVERCAST)

    def test_unknown_is_neither(self):
        assert not is_dry_condition(WeatherCondition.UNKNOWN)
        assert not is_precipitation(WeatherCondition.UNKNOWN)


# =============================================================================
# FORMATTER TESTS
# =============================================================================


class TestModelFormatting:
    """Tests for model names in narrative text."""

    def test_short_names(self):
        assert format_model_name(ModelName.ECMWF) == "ECMWF"
        assert format_model_name(ModelName.METEOFRANCE) == "ARPEGE"
        assert format_model_name(ModelName.UKMO) == "UK Met Office"
        assert format_model_name(ModelName.JMA) == "JMA"

    def test_list_of_one_and_two(self):
        assert format_model_list([]) == ""
        assert format_model_list([ModelName.GFS]) == "GFS"
        assert format_model_list([ModelName.GFS, ModelName.ICON]) == "GFS and ICON"

    def test_list_uses_serial_comma(self):
        models = [ModelName.ECMWF, ModelName.GFS, ModelName.ICON]
        assert format_model_list(models) == "ECMWF, GFS, and ICON"


class TestValueFormatting:
    def test_temperature_rounds_half_up(self):
        assert format_temperature(21.4) == "21°C"
        assert format_temperature(21.5) == "22°C"
        assert format_temperature(-0.5) == "0°C"

    def test_precipitation(self):
        assert format_precipitation(0.4) == "trace amounts"
        assert format_precipitation(1) == "1mm"
        assert format_precipitation(12.3) == "12mm"

    def test_precipitation_rounds_half_up(self):
        assert format_precipitation(2.5) == "3mm"
        assert format_precipitation(4.5) == "5mm"
        assert format_precipitation(2.4) == "2mm"

    def test_confidence_level(self):
        assert format_confidence_level(ConfidenceLevelName.MEDIUM) == "MEDIUM"

    @pytest.mark.parametrize("hour,period", [
        (5, "morning"),
        (11, "morning"),
        (12, "afternoon"),
        (17, "evening"),
        (21, "overnight"),
        (2, "overnight"),
    ])
    def test_time_period(self, hour, period):
        assert format_time_period(hour) == period


class TestRelativeDays:
    """Tests for day labels relative to a reference date (a Tuesday)."""

    def test_today_and_tomorrow(self):
        assert format_relative_day(BASE_DATE, BASE_DATE) == "today"
        assert format_relative_day(date(2026, 1, 21), BASE_DATE) == "tomorrow"

    def test_weekday_within_a_week(self):
        assert format_relative_day(date(2026, 1, 23), BASE_DATE) == "Friday"
        assert format_relative_day(date(2026, 1, 26), BASE_DATE) == "Monday"

    def test_further_out(self):
        assert format_relative_day(date(2026, 1, 27), BASE_DATE) == "Tuesday, Jan 27"

    def test_past_days(self):
        assert format_relative_day(date(2026, 1, 5), BASE_DATE) == "Monday, Jan 5"

    def test_accepts_strings_and_datetimes(self):
        assert format_relative_day("2026-01-21", BASE_DATE) == "tomorrow"
        moment = datetime(2026, 1, 21, 18, 0, tzinfo=timezone.utc)
        assert format_relative_day(moment, BASE_DATE) == "tomorrow"

    def test_day_name(self):
        assert format_day_name(BASE_DATE) == "Tuesday"


# =============================================================================
# TEMPLATE TESTS
# =============================================================================


class TestTemplates:
    """Tests for template selection and filling."""

    def test_selection_is_deterministic(self):
        templates = AGREEMENT_TEMPLATES["strong"]
        assert select_template(templates) == templates[0]
        assert select_template(templates) == select_template(templates)

    def test_fill(self):
        text = fill_template(AGREEMENT_TEMPLATES["strong"][0], {
            "condition": "sunny",
            "endDay": "Friday",
        })
        assert text == "Models agree on sunny conditions through Friday."

    def test_missing_value_left_in_place(self):
        text = fill_template(TRANSITION_TEMPLATES["dry_to_wet"][0], {"condition": "Rain"})
        assert text == "Rain arriving {day} {period}."

    def test_repeated_placeholder(self):
        assert fill_template("{a} and {a}", {"a": "x"}) == "x and x"
