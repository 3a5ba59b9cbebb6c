"""Command-line interface for Weather Oracle."""

import json
import sys
from typing import Optional

import click

from weather_oracle import __version__
from weather_oracle.core import MetricType, WeatherOracleError
from weather_oracle.core.serialization import to_dict
from weather_oracle.cli.display import ForecastReport
from weather_oracle.data import JsonFileForecastSource
from weather_oracle.engine import (
    aggregate_forecasts,
    calculate_confidence,
    generate_narrative,
    identify_outliers,
)
from weather_oracle.utils import setup_logging


def _fail(error: Exception):
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also append logs to this file")
def main(debug: bool, log_file: Optional[str]):
    """Weather Oracle - Multi-model weather forecast consensus."""
    setup_logging(level="DEBUG" if debug else None, log_file=log_file)


@main.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--days-ahead", "-d", default=0, type=click.IntRange(min=0), help="Lead time in days for confidence decay")
@click.option(
    "--metric",
    "-m",
    default=MetricType.OVERALL.value,
    type=click.Choice([m.value for m in MetricType]),
    help="Metric to score confidence for",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a report")
def aggregate(file: str, days_ahead: int, metric: str, as_json: bool):
    """Aggregate the model forecasts in FILE into a consensus brief."""
    try:
        forecasts = JsonFileForecastSource(file).fetch_forecasts()
        aggregated = aggregate_forecasts(forecasts)
    except (WeatherOracleError, OSError) as e:
        _fail(e)

    confidence = calculate_confidence(aggregated, metric, days_ahead)
    narrative = generate_narrative(aggregated, [confidence])

    if as_json:
        document = {
            "aggregated": to_dict(aggregated),
            "confidence": to_dict(confidence),
            "narrative": to_dict(narrative),
        }
        click.echo(json.dumps(document, indent=2, ensure_ascii=False))
        return

    ForecastReport().render(aggregated, confidence, narrative)


@main.command()
@click.argument("file", type=click.Path(dir_okay=False))
def outliers(file: str):
    """List every model flagged as an outlier in FILE."""
    try:
        forecasts = JsonFileForecastSource(file).fetch_forecasts()
    except (WeatherOracleError, OSError) as e:
        _fail(e)

    report = ForecastReport()
    report.console.print(report.generate_outlier_table(identify_outliers(forecasts)))


@main.command()
def models():
    """List supported weather models."""
    report = ForecastReport()
    report.console.print(report.generate_models_table())


if __name__ == "__main__":
    main()
