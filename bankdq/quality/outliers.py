"""
IQR-based outlier detection over one numeric column.

Bounds are Q1 - k*IQR and Q3 + k*IQR (k = `QualityConfig.outlier_multiplier`,
1.5 by default) with quartiles from `percentile_cont`, i.e. linear
interpolation between order statistics at position (n - 1) * p. Other
percentile conventions give different bounds, so this one is fixed.
"""

from __future__ import annotations

from typing import Iterable, Optional

from bankdq.config import QualityConfig
from bankdq.domain.models import OutlierBound, OutlierReport, OutlierRow, OutlierType
from bankdq.domain.relation import Relation
from bankdq.quality.evaluator import ID_FIELDS
from bankdq.utils.logging import get_logger
from bankdq.utils.stats import mean, quartiles, sample_stdev

log = get_logger(__name__)


def compute_bounds(values: Iterable[float], multiplier: float = 1.5) -> OutlierBound:
    """
    Raises EmptyInputError when `values` holds no non-null number.
    """
    data = [float(v) for v in values if v is not None]
    q1, q3 = quartiles(data)
    iqr = q3 - q1
    return OutlierBound(
        q1=q1,
        q3=q3,
        iqr=iqr,
        lower_bound=q1 - multiplier * iqr,
        upper_bound=q3 + multiplier * iqr,
        mean=mean(data),
        std_dev=sample_stdev(data),
    )


def classify(value: float, bound: OutlierBound) -> OutlierType:
    if value < bound.lower_bound:
        return OutlierType.BELOW_LOWER_BOUND
    if value > bound.upper_bound:
        return OutlierType.ABOVE_UPPER_BOUND
    return OutlierType.NORMAL


def detect_outliers(
    relation: Relation, field: str = "amount", config: Optional[QualityConfig] = None
) -> OutlierReport:
    """
    Classify every non-null value of `field` and return the non-Normal rows,
    most extreme (largest |value - mean|) first.
    """
    config = config or QualityConfig()
    values = relation.values(field)
    present = [v for v in values if v is not None]
    if not present:
        log.info(f"No values to bound in {relation.name}.{field}", extra={"field": field})
        return OutlierReport(relation=relation.name, field=field)

    bound = compute_bounds(present, config.outlier_multiplier)
    id_field = ID_FIELDS.get(relation.name)
    outliers = []
    for row in relation.rows:
        value = row.get(field)
        if value is None:
            continue
        kind = classify(float(value), bound)
        if kind is OutlierType.NORMAL:
            continue
        outliers.append(
            OutlierRow(
                row_id=row.get(id_field) if id_field else None,
                value=float(value),
                outlier_type=kind,
                deviation=float(value) - bound.mean,
                lower_bound=bound.lower_bound,
                upper_bound=bound.upper_bound,
                row=dict(row),
            )
        )
    outliers.sort(key=lambda o: abs(o.deviation), reverse=True)
    return OutlierReport(relation=relation.name, field=field, bound=bound, outliers=outliers)


__all__ = ["compute_bounds", "classify", "detect_outliers"]
