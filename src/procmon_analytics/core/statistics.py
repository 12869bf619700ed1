"""
Descriptive statistics used by anomaly detection.

All functions are stateless and accept any sequence of numbers.
"""

import math
from typing import Sequence, Union

import pandas as pd

Number = Union[int, float]


def mean(values: Sequence[Number]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(pd.Series(values, dtype='float64').mean())


def stddev(values: Sequence[Number]) -> float:
    """Population standard deviation, 0.0 for fewer than two samples."""
    if len(values) < 2:
        return 0.0
    return float(pd.Series(values, dtype='float64').std(ddof=0))


def z_score(value: Number, mean_value: float, std_value: float) -> float:
    """Standard score of a value; 0.0 when the deviation is zero."""
    if std_value == 0:
        return 0.0
    return (value - mean_value) / std_value


def percentile(values: Sequence[Number], p: float) -> float:
    """
    Nearest-rank percentile.

    Args:
        values: Samples in any order
        p: Percentile in the 0-100 range

    Returns:
        The sample at rank ceil(p/100 * N), 0.0 for an empty sequence
    """
    if len(values) == 0:
        return 0.0
    ordered = sorted(values)
    index = math.ceil(p / 100 * len(ordered)) - 1
    index = min(max(index, 0), len(ordered) - 1)
    return float(ordered[index])
