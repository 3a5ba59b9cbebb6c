"""
Global settings and constants for Weather Oracle.

Engine thresholds are fixed; only logging can be tuned from the environment.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# =============================================================================
# STATISTICS
# =============================================================================

TRIM_FRACTION = 0.1               # Fraction trimmed from each end for temperature
OUTLIER_Z_THRESHOLD = 2.0         # |z| above this flags a model as an outlier
PRECIPITATION_THRESHOLD_MM = 0.1  # "Measurable precipitation"

# Floor returned by spread/range confidence mappings
SPREAD_CONFIDENCE_FLOOR = 0.3


# =============================================================================
# PER-SLOT CONFIDENCE (AGGREGATION ENGINE)
# =============================================================================

SLOT_TEMPERATURE_STD_HIGH = 1.5   # °C stdDev at or below = full confidence
SLOT_TEMPERATURE_STD_LOW = 4.0    # °C stdDev at or above = floor
SLOT_WIND_RANGE_HIGH_KMH = 10.0   # km/h
SLOT_WIND_RANGE_LOW_KMH = 25.0    # km/h
SLOT_PRECIP_STRONG_HIGH = 80.0    # % of models predicting rain
SLOT_PRECIP_STRONG_LOW = 20.0     # % of models predicting rain
SLOT_PRECIP_WEAK_SCORE = 0.5

SLOT_WEIGHTS = {
    "temperature": 0.4,
    "precipitation": 0.3,
    "wind": 0.3,
}

# Coarse level boundaries for slot and overall aggregate confidence
SLOT_LEVEL_HIGH = 0.7
SLOT_LEVEL_MEDIUM = 0.4

# Overall confidence when there are no slots at all
DEFAULT_OVERALL_SCORE = 0.5


# =============================================================================
# CONFIDENCE CALCULATOR
# =============================================================================

FACTOR_WEIGHTS = {
    "spread": 0.5,
    "agreement": 0.3,
    "timeHorizon": 0.2,
}

# How the spread weight is split in per-slot calculations
SPREAD_SPLIT = {
    "temperature": 0.5,
    "precipitation": 0.3,
    "wind": 0.2,
}

TIME_DECAY_PER_DAY = 0.05
MAX_TIME_DECAY_DAYS = 10
TIME_HORIZON_FLOOR = 0.5

AGREEMENT_FLOOR = 0.3
DEFAULT_AGREEMENT_SCORE = 0.5     # Used when there are no models

# Stand-in stdDev for humidity; consensus carries no humidity statistics yet
HUMIDITY_STD_DEV_PLACEHOLDER = 5.0

LEVEL_HIGH = 0.8
LEVEL_MEDIUM = 0.5


# =============================================================================
# NARRATIVE
# =============================================================================

OUTLIER_CALLOUT_THRESHOLD = 2.0
UNCERTAINTY_DAYS_THRESHOLD = 5
DISAGREEMENT_SCORE = 0.5          # Mean confidence below this = disagreement
TEMPERATURE_DISAGREEMENT_RANGE = 5.0    # °C
PRECIPITATION_DISAGREEMENT_RANGE = 10.0  # mm
TRANSITION_PRECIP_SPREAD = 5.0    # mm


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")          # Unset = stderr only
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
