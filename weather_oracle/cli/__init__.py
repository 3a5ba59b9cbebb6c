"""Command-line interface for Weather Oracle."""

from weather_oracle.cli.commands import main

__all__ = ["main"]
