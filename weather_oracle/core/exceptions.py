"""Exception types raised by Weather Oracle."""


class WeatherOracleError(Exception):
    """Base class for all Weather Oracle errors."""


class EmptyForecastError(WeatherOracleError, ValueError):
    """Raised when aggregation is attempted with no model forecasts."""

    def __init__(self, message: str = "Cannot aggregate empty forecast array"):
        super().__init__(message)


class ForecastParseError(WeatherOracleError, ValueError):
    """Raised when a serialized forecast payload cannot be turned into model objects."""
