"""
Local-file forecast source for Weather Oracle.

Reads a complete set of model forecasts that some fetch collaborator
has already written to disk. No network access and no caching happen
here; the file is read once per fetch_forecasts call.
"""

import logging
from pathlib import Path
from typing import List, Union

from weather_oracle.core import ForecastSource, ModelForecast
from weather_oracle.core.serialization import model_forecasts_from_json

logger = logging.getLogger(__name__)


class JsonFileForecastSource(ForecastSource):
    """Loads model forecasts from a JSON file."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize with the file location.

        Args:
            path: JSON file holding a list of model forecasts, or an
                  object with a "forecasts" list
        """
        self.path = Path(path)

    def fetch_forecasts(self) -> List[ModelForecast]:
        """
        Read and decode every forecast in the file.

        Raises:
            OSError: If the file cannot be read
            ForecastParseError: If the content is not a valid forecast list
        """
        text = self.path.read_text(encoding="utf-8")
        forecasts = model_forecasts_from_json(text)
        logger.info(
            f"Loaded {len(forecasts)} forecasts from {self.path}: "
            f"{', '.join(f.model.value for f in forecasts)}"
        )
        return forecasts
