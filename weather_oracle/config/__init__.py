"""Configuration module for Weather Oracle."""

from weather_oracle.config.models import (
    ModelInfo,
    MODEL_INFO,
    get_model_info,
    list_models,
)

from weather_oracle.config.settings import (
    # Statistics
    TRIM_FRACTION,
    OUTLIER_Z_THRESHOLD,
    PRECIPITATION_THRESHOLD_MM,
    # Confidence
    FACTOR_WEIGHTS,
    SLOT_WEIGHTS,
    TIME_DECAY_PER_DAY,
    MAX_TIME_DECAY_DAYS,
    # Narrative
    UNCERTAINTY_DAYS_THRESHOLD,
    OUTLIER_CALLOUT_THRESHOLD,
    # Logging
    LOG_LEVEL,
    LOG_FORMAT,
    LOG_FILE,
)

__all__ = [
    # Models
    "ModelInfo",
    "MODEL_INFO",
    "get_model_info",
    "list_models",
    # Statistics
    "TRIM_FRACTION",
    "OUTLIER_Z_THRESHOLD",
    "PRECIPITATION_THRESHOLD_MM",
    # Confidence
    "FACTOR_WEIGHTS",
    "SLOT_WEIGHTS",
    "TIME_DECAY_PER_DAY",
    "MAX_TIME_DECAY_DAYS",
    # Narrative
    "UNCERTAINTY_DAYS_THRESHOLD",
    "OUTLIER_CALLOUT_THRESHOLD",
    # Logging
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
]
