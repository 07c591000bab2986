"""
Reconciliation package: period-over-period, two-sided set reconciliation,
daily exception flagging and the summary report.
"""

from bankdq.reconciliation.daily import daily_exceptions, flag_deviation
from bankdq.reconciliation.partitions import (
    PartitionAggregate,
    aggregate_by,
    reconcile_partitions,
    reconcile_relations,
    reconcile_sets,
)
from bankdq.reconciliation.period import monthly_totals, period_over_period
from bankdq.reconciliation.summary import reconciliation_summary

__all__ = [
    "daily_exceptions",
    "flag_deviation",
    "PartitionAggregate",
    "aggregate_by",
    "reconcile_partitions",
    "reconcile_relations",
    "reconcile_sets",
    "monthly_totals",
    "period_over_period",
    "reconciliation_summary",
]
