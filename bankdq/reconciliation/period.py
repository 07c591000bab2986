"""
Period-over-period (month over month) reconciliation.

Transactions are grouped by calendar month; each month is compared with the
month before it in chronological order (the previous month that has data, like
SQL `LAG`). The first month has no predecessor and is not reported.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from bankdq.config import QualityConfig
from bankdq.domain.models import PeriodComparison, PeriodStatus
from bankdq.domain.relation import Relation
from bankdq.utils.stats import percentage


@dataclass
class MonthlyTotal:
    year: int
    month: int
    transaction_count: int = 0
    total_amount: float = 0.0
    amount_count: int = 0

    @property
    def avg_amount(self) -> Optional[float]:
        return self.total_amount / self.amount_count if self.amount_count else None


def monthly_totals(transactions: Relation) -> List[MonthlyTotal]:
    """Chronologically ordered monthly count/total. Undated rows are skipped."""
    transactions.require("transaction_date", "amount")
    buckets: Dict[Tuple[int, int], MonthlyTotal] = {}
    for row in transactions.rows:
        booked = row.get("transaction_date")
        if booked is None:
            continue
        key = (booked.year, booked.month)
        bucket = buckets.setdefault(key, MonthlyTotal(year=key[0], month=key[1]))
        bucket.transaction_count += 1
        amount = row.get("amount")
        if amount is not None:
            bucket.total_amount += float(amount)
            bucket.amount_count += 1
    return [buckets[key] for key in sorted(buckets)]


def _period_status(variance_pct: Optional[float], config: QualityConfig) -> PeriodStatus:
    # An undefined percentage never exceeds the threshold.
    if variance_pct is None:
        return PeriodStatus.NORMAL
    if abs(variance_pct) > config.variance_threshold_pct:
        return PeriodStatus.SIGNIFICANT_CHANGE
    return PeriodStatus.NORMAL


def period_over_period(
    transactions: Relation, config: Optional[QualityConfig] = None
) -> List[PeriodComparison]:
    """
    Compare each month's total amount with the previous month, newest first.

    Variance% is 100 * (current - previous) / previous and None when the
    previous total is zero.
    """
    config = config or QualityConfig()
    months = monthly_totals(transactions)
    comparisons: List[PeriodComparison] = []
    for previous, current in zip(months, months[1:]):
        variance = current.total_amount - previous.total_amount
        variance_pct = percentage(variance, previous.total_amount)
        comparisons.append(
            PeriodComparison(
                partition_key=f"{current.year:04d}-{current.month:02d}",
                observed_value=current.total_amount,
                expected_value=previous.total_amount,
                variance=variance,
                variance_percentage=variance_pct,
                status=_period_status(variance_pct, config).value,
                year=current.year,
                month=current.month,
                month_name=calendar.month_name[current.month],
                transaction_count=current.transaction_count,
                total_amount=current.total_amount,
                avg_amount=current.avg_amount,
                previous_count=previous.transaction_count,
                count_variance=current.transaction_count - previous.transaction_count,
            )
        )
    comparisons.reverse()
    return comparisons


__all__ = ["MonthlyTotal", "monthly_totals", "period_over_period"]
