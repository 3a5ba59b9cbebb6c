"""Forecast sources for Weather Oracle."""

from weather_oracle.data.files import JsonFileForecastSource

__all__ = ["JsonFileForecastSource"]
