"""
Unit-tagged scalar types for weather measurements.

Each unit is a thin float subclass that validates on construction.
Arithmetic on unit values returns a plain float, so any computed
result has to be wrapped again explicitly before it goes back into
a WeatherMetrics or DailyForecast.

    >>> t = Celsius(21.5)
    >>> type(t + 1.0)
    <class 'float'>
"""

import math
from typing import Optional


class UnitValue(float):
    """Base class for a float tagged with a physical unit."""

    symbol: str = ""
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def __new__(cls, value: float):
        value = float(value)
        if math.isnan(value):
            raise ValueError(f"{cls.__name__} cannot be NaN")
        if cls.minimum is not None and value < cls.minimum:
            raise ValueError(f"{cls.__name__} cannot be below {cls.minimum}, got {value}")
        if cls.maximum is not None and value > cls.maximum:
            raise ValueError(f"{cls.__name__} cannot be above {cls.maximum}, got {value}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({float(self)!r})"

    def __str__(self) -> str:
        return f"{float(self):g}{self.symbol}"


class Celsius(UnitValue):
    """Temperature in degrees Celsius."""
    symbol = "°C"


class Millimeters(UnitValue):
    """Precipitation amount in millimeters."""
    symbol = "mm"
    minimum = 0.0


class MetersPerSecond(UnitValue):
    """Wind speed in meters per second."""
    symbol = "m/s"
    minimum = 0.0


class Humidity(UnitValue):
    """Relative humidity in percent."""
    symbol = "%"
    minimum = 0.0
    maximum = 100.0


class Pressure(UnitValue):
    """Atmospheric pressure in hectopascals."""
    symbol = "hPa"
    minimum = 0.0


class CloudCover(UnitValue):
    """Cloud cover in percent."""
    symbol = "%"
    minimum = 0.0
    maximum = 100.0


class UVIndex(UnitValue):
    """UV index (0-11+)."""
    minimum = 0.0


class Visibility(UnitValue):
    """Visibility in meters."""
    symbol = "m"
    minimum = 0.0


class Percentage(UnitValue):
    """A probability expressed in percent (0-100)."""
    symbol = "%"
    minimum = 0.0
    maximum = 100.0


class WindDirection(UnitValue):
    """Wind direction in degrees, normalized into [0, 360)."""
    symbol = "°"

    def __new__(cls, degrees: float):
        return super().__new__(cls, float(degrees) % 360.0)


class WeatherCode(int):
    """WMO weather interpretation code."""

    def __new__(cls, code: int):
        return super().__new__(cls, int(code))

    def __repr__(self) -> str:
        return f"WeatherCode({int(self)})"


# =============================================================================
# CONVERSIONS
# =============================================================================

CARDINAL_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def to_fahrenheit(temp: Celsius) -> float:
    """Convert Celsius to Fahrenheit."""
    return float(temp) * 9.0 / 5.0 + 32.0


def to_km_per_hour(speed: MetersPerSecond) -> float:
    """Convert meters per second to km/h."""
    return float(speed) * 3.6


def to_mph(speed: MetersPerSecond) -> float:
    """Convert meters per second to mph."""
    return float(speed) * 2.237


def to_cardinal_direction(direction: WindDirection) -> str:
    """Return the 16-point compass label for a wind direction."""
    index = math.floor(float(direction) / 22.5 + 0.5) % 16
    return CARDINAL_DIRECTIONS[index]
