"""
Banking Data Quality - quality scoring and reconciliation for a two-table
banking dataset (`customers`, `transactions`).

This package provides:

- Rule-based quality checks (completeness, uniqueness, validity, referential integrity)
- IQR outlier detection
- A composite quality scorecard with qualitative bands
- Reconciliation: period-over-period, system-to-system (set) comparison and
  daily exception flagging

Every check is a pure function of one loaded snapshot; thresholds are passed
explicitly through `QualityConfig`.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from bankdq.config import QualityConfig, Settings, get_settings
from bankdq.domain import (
    Customer,
    Dataset,
    EmptyInputError,
    QualityCheckError,
    Relation,
    SchemaMismatchError,
    Transaction,
    UndefinedRatioError,
)
from bankdq.orchestrator import CheckResult, available_checks, run_checks
from bankdq.quality import (
    QualityRuleEvaluator,
    build_scorecard,
    detect_outliers,
    score_dataset,
)
from bankdq.reconciliation import (
    daily_exceptions,
    period_over_period,
    reconcile_partitions,
    reconcile_relations,
    reconcile_sets,
    reconciliation_summary,
)
from bankdq.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "QualityConfig",
    "Settings",
    "get_settings",
    # Domain
    "Customer",
    "Transaction",
    "Relation",
    "Dataset",
    # Errors
    "QualityCheckError",
    "SchemaMismatchError",
    "EmptyInputError",
    "UndefinedRatioError",
    # Orchestration
    "CheckResult",
    "available_checks",
    "run_checks",
    # Quality
    "QualityRuleEvaluator",
    "build_scorecard",
    "detect_outliers",
    "score_dataset",
    # Reconciliation
    "daily_exceptions",
    "period_over_period",
    "reconcile_partitions",
    "reconcile_relations",
    "reconcile_sets",
    "reconciliation_summary",
    # Logging
    "configure_logging",
    "get_logger",
]
