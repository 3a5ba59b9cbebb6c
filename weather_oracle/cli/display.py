"""
Terminal report for Weather Oracle.

Uses Rich to render the aggregated forecast, its confidence and the
narrative brief.
"""

from typing import List, Optional

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from weather_oracle.config.models import MODEL_INFO
from weather_oracle.core.models import (
    AggregatedForecast,
    ConfidenceLevelName,
    ConfidenceResult,
    NarrativeSummary,
    OutlierInfo,
)
from weather_oracle.core.units import to_cardinal_direction
from weather_oracle.engine.confidence import format_confidence_summary
from weather_oracle.engine.templates import (
    condition_to_description,
    format_model_list,
    weather_code_to_condition,
)

LEVEL_STYLES = {
    ConfidenceLevelName.HIGH: "green",
    ConfidenceLevelName.MEDIUM: "yellow",
    ConfidenceLevelName.LOW: "red",
}


class ForecastReport:
    """
    Renders the core's output types to a Rich console.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _level_text(self, result: ConfidenceResult) -> Text:
        return Text(format_confidence_summary(result), style=LEVEL_STYLES[result.level])

    def generate_header(self, aggregated: AggregatedForecast) -> Panel:
        """Create header panel."""
        coords = aggregated.coordinates
        grid = Table.grid(expand=True)
        grid.add_column(justify="center", ratio=1)
        grid.add_row(f"[b]Weather Oracle - {coords.latitude:.2f}, {coords.longitude:.2f}[/b]")
        grid.add_row(
            f"[dim]{aggregated.valid_from:%Y-%m-%d %H:%M} to {aggregated.valid_to:%Y-%m-%d %H:%M} UTC"
            f" | Models: {format_model_list(aggregated.models)}[/dim]"
        )
        return Panel(grid, style="bold white on blue")

    def generate_narrative_panel(self, narrative: NarrativeSummary) -> Panel:
        """Create the headline / body / alerts panel."""
        parts = [Text(narrative.headline, style="bold")]
        if narrative.body:
            parts.append(Text(narrative.body))
        for alert in narrative.alerts:
            parts.append(Text(f"! {alert}", style="bold yellow"))
        for note in narrative.model_notes:
            parts.append(Text(f"- {note}", style="dim"))
        return Panel(Group(*parts), title="Forecast Brief", border_style="cyan")

    def generate_daily_table(self, aggregated: AggregatedForecast) -> Panel:
        """Create the daily consensus table with model spread."""
        daily = aggregated.consensus.daily
        if not daily:
            return Panel("No daily consensus available", title="Daily Consensus", border_style="white")

        table = Table(box=box.SIMPLE, expand=True)
        table.add_column("Date")
        table.add_column("Conditions")
        table.add_column("High", justify="right")
        table.add_column("Low", justify="right")
        table.add_column("High Spread", justify="right")
        table.add_column("Precip", justify="right")
        table.add_column("Wind", justify="right")
        table.add_column("Agreement", justify="right")
        table.add_column("Confidence", justify="right")

        for day in daily:
            forecast = day.forecast
            spread = day.range.temperature_max
            table.add_row(
                f"{day.date:%a %b %d}",
                condition_to_description(weather_code_to_condition(forecast.weather_code)),
                f"{forecast.temperature.max:.1f}°C",
                f"{forecast.temperature.min:.1f}°C",
                f"{spread.min:.1f} - {spread.max:.1f}",
                f"{forecast.precipitation.total:.1f}mm ({forecast.precipitation.probability:.0f}%)",
                f"{forecast.wind.max_speed:.1f}m/s {to_cardinal_direction(forecast.wind.dominant_direction)}",
                f"{day.model_agreement.agreement_score:.0%}",
                self._level_text(day.confidence),
            )

        return Panel(table, title="Daily Consensus", border_style="blue")

    def generate_confidence_table(self, result: ConfidenceResult, title: str = "Confidence") -> Panel:
        """Create the factor breakdown for a confidence result."""
        table = Table(box=box.SIMPLE, expand=True)
        table.add_column("Factor")
        table.add_column("Weight", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Contribution", justify="right")
        table.add_column("Detail")

        for factor in result.factors:
            table.add_row(
                factor.name,
                f"{factor.weight:.2f}",
                f"{factor.score:.2f}",
                f"{factor.contribution:.2f}",
                factor.detail,
            )
        table.add_section()
        table.add_row("[b]Total[/b]", "", "", f"[b]{result.score:.2f}[/b]", self._level_text(result))

        return Panel(
            Group(table, Text(result.explanation, style="dim")),
            title=title,
            border_style=LEVEL_STYLES[result.level],
        )

    def generate_outlier_table(self, outliers: List[OutlierInfo]) -> Panel:
        """Create the outlier listing."""
        if not outliers:
            return Panel("[dim]No outliers detected[/dim]", title="Outliers", border_style="white")

        table = Table(box=box.SIMPLE, expand=True)
        table.add_column("Slot")
        table.add_column("Model")
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_column("Z-Score", justify="right")

        for outlier in outliers:
            table.add_row(
                outlier.timestamp.isoformat(),
                MODEL_INFO[outlier.model].display_name,
                outlier.metric,
                f"{outlier.value:.1f}",
                f"{outlier.z_score:+.2f}",
                style="bold red" if abs(outlier.z_score) >= 3 else None,
            )

        return Panel(table, title=f"Outliers ({len(outliers)})", border_style="magenta")

    def generate_models_table(self) -> Table:
        """Create the supported-models listing."""
        table = Table(box=box.SIMPLE)
        table.add_column("ID")
        table.add_column("Name")
        table.add_column("Provider")
        table.add_column("Resolution", justify="right")
        table.add_column("Updates", justify="right")

        for info in MODEL_INFO.values():
            table.add_row(
                info.name.value,
                info.display_name,
                info.provider,
                info.resolution,
                info.update_frequency,
            )
        return table

    def render(
        self,
        aggregated: AggregatedForecast,
        confidence: ConfidenceResult,
        narrative: NarrativeSummary,
    ):
        """Print the full report."""
        self.console.print(self.generate_header(aggregated))
        self.console.print(self.generate_narrative_panel(narrative))
        self.console.print(self.generate_daily_table(aggregated))
        self.console.print(self.generate_confidence_table(confidence))
        self.console.print(
            Text.assemble("Overall: ", self._level_text(aggregated.overall_confidence))
        )
