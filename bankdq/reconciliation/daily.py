"""
Daily reconciliation with exception flagging.

Each (day, category) total is compared with that category's mean daily total
across all of its days. Deviations beyond `exception_sigma` standard deviations
are exceptions, beyond `warning_sigma` warnings. A category whose daily totals
are constant has a zero standard deviation; any nonzero deviation there is an
exception.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from bankdq.config import QualityConfig
from bankdq.domain.models import DailyException, ExceptionStatus
from bankdq.domain.relation import Relation
from bankdq.utils.stats import mean, percentage, sample_stdev


@dataclass
class DailyTotal:
    day: date
    category: str
    transaction_count: int = 0
    total_amount: float = 0.0


def _as_day(value: Any) -> date:
    return value.date() if isinstance(value, datetime) else value


def daily_totals(
    transactions: Relation, category_field: str = "transaction_type"
) -> List[DailyTotal]:
    transactions.require("transaction_date", "amount", category_field)
    buckets: Dict[Tuple[date, str], DailyTotal] = {}
    for row in transactions.rows:
        booked, category = row.get("transaction_date"), row.get(category_field)
        if booked is None or category is None:
            continue
        day = _as_day(booked)
        bucket = buckets.setdefault((day, category), DailyTotal(day=day, category=category))
        bucket.transaction_count += 1
        amount = row.get("amount")
        if amount is not None:
            bucket.total_amount += float(amount)
    return [buckets[key] for key in sorted(buckets)]


def flag_deviation(deviation: float, std_dev: float, config: QualityConfig) -> ExceptionStatus:
    """Strict comparisons: exactly 1 sigma is OK, exactly 2 sigma a warning."""
    magnitude = abs(deviation)
    if std_dev == 0:
        return ExceptionStatus.EXCEPTION if magnitude > 0 else ExceptionStatus.OK
    if magnitude > config.exception_sigma * std_dev:
        return ExceptionStatus.EXCEPTION
    if magnitude > config.warning_sigma * std_dev:
        return ExceptionStatus.WARNING
    return ExceptionStatus.OK


def daily_exceptions(
    transactions: Relation,
    config: Optional[QualityConfig] = None,
    category_field: str = "transaction_type",
) -> List[DailyException]:
    """
    Non-OK (day, category) rows ordered by descending absolute deviation.

    A category seen on a single day has no sample deviation; its only total
    equals its mean, so it is never flagged.
    """
    config = config or QualityConfig()
    totals = daily_totals(transactions, category_field)

    by_category: Dict[str, List[float]] = defaultdict(list)
    for total in totals:
        by_category[total.category].append(total.total_amount)
    baselines = {
        category: (mean(amounts), sample_stdev(amounts) or 0.0)
        for category, amounts in by_category.items()
    }

    flagged: List[DailyException] = []
    for total in totals:
        expected, std_dev = baselines[total.category]
        deviation = total.total_amount - expected
        status = flag_deviation(deviation, std_dev, config)
        if status is ExceptionStatus.OK:
            continue
        flagged.append(
            DailyException(
                partition_key=f"{total.day.isoformat()}|{total.category}",
                observed_value=total.total_amount,
                expected_value=expected,
                variance=deviation,
                variance_percentage=percentage(deviation, expected),
                status=status.value,
                day=total.day,
                category=total.category,
                transaction_count=total.transaction_count,
                std_dev=std_dev,
            )
        )
    flagged.sort(key=lambda r: abs(r.variance), reverse=True)
    return flagged


__all__ = ["DailyTotal", "daily_totals", "flag_deviation", "daily_exceptions"]
