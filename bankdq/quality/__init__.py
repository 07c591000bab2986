"""
Quality package: rule evaluation, outlier detection and the composite scorecard.
"""

from bankdq.quality.evaluator import (
    QualityRuleEvaluator,
    ValidityRule,
    age_rule,
    amount_rule,
    transaction_date_rule,
)
from bankdq.quality.outliers import classify, compute_bounds, detect_outliers
from bankdq.quality.scorecard import band_for, build_scorecard, score_dataset

__all__ = [
    "QualityRuleEvaluator",
    "ValidityRule",
    "age_rule",
    "amount_rule",
    "transaction_date_rule",
    "classify",
    "compute_bounds",
    "detect_outliers",
    "band_for",
    "build_scorecard",
    "score_dataset",
]
