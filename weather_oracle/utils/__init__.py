"""Utility modules for Weather Oracle."""

from weather_oracle.utils.logging import setup_logging

__all__ = ["setup_logging"]
