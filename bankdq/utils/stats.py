"""
Small numeric helpers shared by the checks.

`percentile_cont` implements continuous percentiles the same way SQL
`PERCENTILE_CONT` does: sort the values, take the fractional position
h = (n - 1) * p and interpolate linearly between the two neighbouring order
statistics. Standard deviation is the sample (n - 1) estimator, matching SQL
`STDEV`/`stddev_samp`.
"""

from __future__ import annotations

import math
import statistics
from typing import Iterable, List, Optional, Sequence

from bankdq.domain.errors import EmptyInputError, UndefinedRatioError


def _materialize(values: Iterable[float]) -> List[float]:
    data = [float(v) for v in values if v is not None]
    if not data:
        raise EmptyInputError("cannot summarize an empty sequence")
    return data


def mean(values: Iterable[float]) -> float:
    return statistics.mean(_materialize(values))


def sample_stdev(values: Iterable[float]) -> Optional[float]:
    """Sample standard deviation, or None for a single value."""
    data = _materialize(values)
    if len(data) < 2:
        return None
    return statistics.stdev(data)


def percentile_cont(values: Iterable[float], fraction: float) -> float:
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be within [0, 1], got {fraction}")
    data = sorted(_materialize(values))
    position = (len(data) - 1) * fraction
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return data[lower]
    weight = position - lower
    return data[lower] + (data[upper] - data[lower]) * weight


def quartiles(values: Sequence[float]) -> tuple[float, float]:
    """Return (Q1, Q3)."""
    return percentile_cont(values, 0.25), percentile_cont(values, 0.75)


def ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        raise UndefinedRatioError(f"ratio {numerator}/{denominator} is undefined")
    return numerator / denominator


def percentage(
    numerator: float, denominator: float, decimals: Optional[int] = None, strict: bool = False
) -> Optional[float]:
    """
    Return 100 * numerator / denominator.

    With a zero denominator the result is None, or UndefinedRatioError is raised
    when `strict` is set. Pass `decimals` to round (reports use 2).
    """
    try:
        value = 100.0 * ratio(numerator, denominator)
    except UndefinedRatioError:
        if strict:
            raise
        return None
    return round(value, decimals) if decimals is not None else value


__all__ = [
    "mean",
    "sample_stdev",
    "percentile_cont",
    "quartiles",
    "ratio",
    "percentage",
]
