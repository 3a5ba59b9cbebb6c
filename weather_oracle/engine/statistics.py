"""
Statistics Library

Pure numeric primitives shared by the aggregation, confidence and
narrative layers. Every function takes plain floats (unit values are
float subclasses, so they pass straight through) and returns plain
floats; callers re-wrap results in their unit type.

Degenerate input never raises: empty sequences give 0 and a zero
standard deviation disables z-scores instead of producing NaN.
"""

import math
from typing import List, Sequence

import numpy as np

from weather_oracle.config.settings import (
    OUTLIER_Z_THRESHOLD,
    SPREAD_CONFIDENCE_FLOOR,
    TRIM_FRACTION,
)
from weather_oracle.core.models import MetricStatistics


COMPARISONS = ("gt", "gte", "lt", "lte")


# =============================================================================
# CENTRAL TENDENCY AND SPREAD
# =============================================================================


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def median(values: Sequence[float]) -> float:
    """Median (average of the two middle values for even length); 0 for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.median(np.asarray(values, dtype=float)))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N); 0 for N <= 1."""
    if len(values) <= 1:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def trimmed_mean(values: Sequence[float], trim_fraction: float = TRIM_FRACTION) -> float:
    """
    Mean after discarding the most extreme values at both ends.

    For four or more values at least one value is trimmed from each end,
    even when trim_fraction * N rounds down to zero, and at least two
    values always survive. Three values collapse to their median.

    Args:
        values: Sample values
        trim_fraction: Fraction of N to trim from each end

    Returns:
        Trimmed mean (0 for empty input)
    """
    n = len(values)
    if n == 0:
        return 0.0
    if n <= 2:
        return mean(values)

    ordered = np.sort(np.asarray(values, dtype=float))
    if n == 3:
        return float(ordered[1])

    trim_count = math.floor(n * trim_fraction)
    if trim_count == 0:
        trim_count = 1
    max_trim = (n - 2) // 2
    trim_count = min(trim_count, max_trim)

    return float(np.mean(ordered[trim_count:n - trim_count]))


def metric_statistics(values: Sequence[float]) -> MetricStatistics:
    """Summarize one metric across models; all zeros for empty input."""
    if len(values) == 0:
        return MetricStatistics(mean=0.0, median=0.0, min=0.0, max=0.0, std_dev=0.0, range=0.0)

    low = float(min(values))
    high = float(max(values))
    return MetricStatistics(
        mean=mean(values),
        median=median(values),
        min=low,
        max=high,
        std_dev=std_dev(values),
        range=high - low,
    )


# =============================================================================
# OUTLIERS
# =============================================================================


def z_score(value: float, values: Sequence[float]) -> float:
    """Standard score of value against values; 0 when their stdDev is 0."""
    sd = std_dev(values)
    if sd == 0:
        return 0.0
    return (float(value) - mean(values)) / sd


def find_outlier_indices(
    values: Sequence[float],
    z_threshold: float = OUTLIER_Z_THRESHOLD,
) -> List[int]:
    """
    Indices whose |z-score| exceeds z_threshold.

    The z-scores are computed against the same array, outliers included.
    Returns [] for two or fewer values or when all values are identical.
    """
    if len(values) <= 2:
        return []

    arr = np.asarray(values, dtype=float)
    sd = float(np.std(arr))
    # Identical values can leave a rounding-noise stdDev instead of exact zero
    if sd == 0 or np.ptp(arr) == 0:
        return []

    scores = np.abs((arr - float(np.mean(arr))) / sd)
    return [int(i) for i in np.flatnonzero(scores > z_threshold)]


# =============================================================================
# ENSEMBLE PROBABILITY
# =============================================================================


def ensemble_probability(
    values: Sequence[float],
    threshold: float,
    comparison: str = "gt",
) -> float:
    """
    Percentage (0-100) of values satisfying the comparison against threshold.

    Args:
        values: One value per model
        threshold: Value to compare against
        comparison: One of "gt", "gte", "lt", "lte"

    Returns:
        Percentage of models meeting the condition (0 for empty input)

    Raises:
        ValueError: If comparison is not recognized
    """
    if comparison not in COMPARISONS:
        raise ValueError(f"Unknown comparison '{comparison}'. Expected one of: {', '.join(COMPARISONS)}")
    if len(values) == 0:
        return 0.0

    arr = np.asarray(values, dtype=float)
    if comparison == "gt":
        hits = arr > threshold
    elif comparison == "gte":
        hits = arr >= threshold
    elif comparison == "lt":
        hits = arr < threshold
    else:
        hits = arr <= threshold

    return float(np.count_nonzero(hits)) / len(arr) * 100.0


# =============================================================================
# SPREAD -> CONFIDENCE
# =============================================================================


def confidence_from_spread(value: float, high_threshold: float, low_threshold: float) -> float:
    """
    Map a spread measure onto a confidence score in [0.3, 1.0].

    value <= high_threshold gives 1.0, value >= low_threshold gives the
    0.3 floor, and values in between interpolate linearly.
    """
    if value <= high_threshold:
        return 1.0
    if value >= low_threshold:
        return SPREAD_CONFIDENCE_FLOOR

    position = (value - high_threshold) / (low_threshold - high_threshold)
    return 1.0 - position * (1.0 - SPREAD_CONFIDENCE_FLOOR)


def confidence_from_range(value_range: float, high_threshold: float, low_threshold: float) -> float:
    """Same mapping as confidence_from_spread, applied to a max-min range."""
    return confidence_from_spread(value_range, high_threshold, low_threshold)
