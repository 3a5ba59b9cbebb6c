"""
Weather model registry for Weather Oracle.

Every place that branches on the model enum reads from here, so a new
provider only needs a ModelName member and an entry below.
"""

from dataclasses import dataclass
from typing import Dict, Union

from weather_oracle.core.models import ModelName


@dataclass(frozen=True)
class ModelInfo:
    """Display metadata for a supported model."""
    name: ModelName
    display_name: str          # e.g., "ECMWF IFS"
    short_name: str            # Name used in narrative text, e.g., "ECMWF"
    provider: str              # Issuing agency
    resolution: str            # Grid spacing, e.g., "9km"
    update_frequency: str      # e.g., "6 hours"


# =============================================================================
# MODEL DEFINITIONS
# =============================================================================

ECMWF = ModelInfo(
    name=ModelName.ECMWF,
    display_name="ECMWF IFS",
    short_name="ECMWF",
    provider="European Centre for Medium-Range Weather Forecasts",
    resolution="9km",
    update_frequency="6 hours",
)

GFS = ModelInfo(
    name=ModelName.GFS,
    display_name="GFS",
    short_name="GFS",
    provider="NOAA/NCEP",
    resolution="13km",
    update_frequency="6 hours",
)

ICON = ModelInfo(
    name=ModelName.ICON,
    display_name="ICON",
    short_name="ICON",
    provider="Deutscher Wetterdienst",
    resolution="7km",
    update_frequency="6 hours",
)

METEOFRANCE = ModelInfo(
    name=ModelName.METEOFRANCE,
    display_name="ARPEGE",
    short_name="ARPEGE",
    provider="Météo-France",
    resolution="10km",
    update_frequency="6 hours",
)

UKMO = ModelInfo(
    name=ModelName.UKMO,
    display_name="UK Met Office",
    short_name="UK Met Office",
    provider="UK Meteorological Office",
    resolution="10km",
    update_frequency="6 hours",
)

JMA = ModelInfo(
    name=ModelName.JMA,
    display_name="JMA GSM",
    short_name="JMA",
    provider="Japan Meteorological Agency",
    resolution="20km",
    update_frequency="6 hours",
)

GEM = ModelInfo(
    name=ModelName.GEM,
    display_name="GEM",
    short_name="GEM",
    provider="Environment Canada",
    resolution="15km",
    update_frequency="12 hours",
)

# =============================================================================
# MODEL REGISTRY
# =============================================================================

MODEL_INFO: Dict[ModelName, ModelInfo] = {
    info.name: info for info in (ECMWF, GFS, ICON, METEOFRANCE, UKMO, JMA, GEM)
}


def get_model_info(name: Union[ModelName, str]) -> ModelInfo:
    """
    Get model metadata by enum member or identifier.

    Args:
        name: ModelName or its string value (e.g., "ecmwf")

    Returns:
        ModelInfo for the requested model

    Raises:
        KeyError: If the model is not supported
    """
    if isinstance(name, str):
        try:
            name = ModelName(name.lower())
        except ValueError:
            available = ", ".join(m.value for m in MODEL_INFO)
            raise KeyError(f"Model '{name}' not found. Available: {available}")
    return MODEL_INFO[name]


def list_models() -> list[str]:
    """Return list of supported model identifiers."""
    return [m.value for m in MODEL_INFO]
