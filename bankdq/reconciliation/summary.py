"""
One-screen reconciliation summary: volume, value, orphaned transactions and a
data quality score (completeness of the customer reference on transactions).
"""

from __future__ import annotations

from typing import List, Optional

from bankdq.config import QualityConfig
from bankdq.domain.models import SummaryMetric
from bankdq.domain.relation import Dataset
from bankdq.quality.evaluator import QualityRuleEvaluator


def reconciliation_summary(
    dataset: Dataset, config: Optional[QualityConfig] = None
) -> List[SummaryMetric]:
    config = config or QualityConfig()
    transactions = dataset.transactions
    amounts = [float(v) for v in transactions.values("amount") if v is not None]

    evaluator = QualityRuleEvaluator(config)
    integrity = evaluator.referential_integrity(transactions, dataset.customers)
    orphaned = integrity.orphaned_rows

    score = evaluator.completeness(transactions, "customer_id").score
    if score is None:
        quality_status = "No Data"
    elif score >= config.summary_good_threshold:
        quality_status = "Good"
    else:
        quality_status = "Needs Improvement"

    return [
        SummaryMetric(metric="Total Transactions", value=len(transactions)),
        SummaryMetric(metric="Total Transaction Value", value=round(sum(amounts), 2)),
        SummaryMetric(
            metric="Transactions with Issues",
            value=orphaned,
            status="Review Required" if orphaned > 0 else "OK",
        ),
        SummaryMetric(
            metric="Data Quality Score",
            value=round(score, 2) if score is not None else None,
            status=quality_status,
        ),
    ]


__all__ = ["reconciliation_summary"]
