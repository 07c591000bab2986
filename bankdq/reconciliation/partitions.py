"""
Two-sided set reconciliation (full outer join + variance).

`reconcile_sets` only sees two `{key: PartitionAggregate}` mappings, so it does
not care whether the sides come from two systems (`reconcile_relations`) or
from one relation split by category (`reconcile_partitions`, the simulated
system-to-system comparison).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from bankdq.config import QualityConfig
from bankdq.domain.models import MatchStatus, PartitionComparison
from bankdq.domain.relation import Relation
from bankdq.utils.logging import get_logger
from bankdq.utils.stats import percentage

log = get_logger(__name__)

RowFilter = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class PartitionAggregate:
    count: int = 0
    total: float = 0.0


_ABSENT = PartitionAggregate()


def aggregate_by(
    relation: Relation,
    key_field: str,
    value_field: str = "amount",
    include: Optional[RowFilter] = None,
) -> Dict[Any, PartitionAggregate]:
    """Count rows and sum `value_field` per non-null `key_field` value."""
    relation.require(key_field, value_field)
    counts: Dict[Any, int] = {}
    totals: Dict[Any, float] = {}
    for row in relation.rows:
        if include is not None and not include(row):
            continue
        key = row.get(key_field)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
        value = row.get(value_field)
        totals[key] = totals.get(key, 0.0) + (float(value) if value is not None else 0.0)
    return {key: PartitionAggregate(count=counts[key], total=totals[key]) for key in counts}


def reconcile_sets(
    side_a: Mapping[Any, PartitionAggregate], side_b: Mapping[Any, PartitionAggregate]
) -> List[PartitionComparison]:
    """
    Full outer join of two aggregated sides on their keys.

    A key missing on one side contributes zero count and amount there; the
    variance is still computed. Variance% is relative to side B and None when
    side B's amount is zero.
    """
    records: List[PartitionComparison] = []
    for key in sorted(set(side_a) | set(side_b), key=str):
        a = side_a.get(key, _ABSENT)
        b = side_b.get(key, _ABSENT)
        if key not in side_b:
            status = MatchStatus.ONLY_IN_A
        elif key not in side_a:
            status = MatchStatus.ONLY_IN_B
        else:
            status = MatchStatus.IN_BOTH
        variance = a.total - b.total
        records.append(
            PartitionComparison(
                partition_key=str(key),
                observed_value=a.total,
                expected_value=b.total,
                variance=variance,
                variance_percentage=percentage(variance, b.total),
                status=status.value,
                system_a_count=a.count,
                system_b_count=b.count,
                system_a_amount=a.total,
                system_b_amount=b.total,
                count_variance=a.count - b.count,
            )
        )
    return records


def _member_of(key_field: str, members: Iterable[Any]) -> RowFilter:
    allowed = frozenset(members)
    return lambda row: row.get(key_field) in allowed


def reconcile_partitions(
    transactions: Relation,
    config: Optional[QualityConfig] = None,
    key_field: str = "transaction_type",
    value_field: str = "amount",
) -> List[PartitionComparison]:
    """
    Simulated system-to-system reconciliation: system A holds the
    `config.system_a_types` rows, system B the `config.system_b_types` rows.
    """
    config = config or QualityConfig()
    overlap = set(config.system_a_types) & set(config.system_b_types)
    if overlap:
        raise ValueError(f"partitions must be disjoint, both contain: {sorted(overlap)}")
    side_a = aggregate_by(
        transactions, key_field, value_field, _member_of(key_field, config.system_a_types)
    )
    side_b = aggregate_by(
        transactions, key_field, value_field, _member_of(key_field, config.system_b_types)
    )
    log.debug(
        f"Reconciling {len(side_a)} key(s) in system A against {len(side_b)} in system B",
        extra={"key_field": key_field},
    )
    return reconcile_sets(side_a, side_b)


def reconcile_relations(
    relation_a: Relation,
    relation_b: Relation,
    key_field: str,
    value_field: str = "amount",
) -> List[PartitionComparison]:
    """Reconcile two independently sourced relations on `key_field`."""
    return reconcile_sets(
        aggregate_by(relation_a, key_field, value_field),
        aggregate_by(relation_b, key_field, value_field),
    )


__all__ = [
    "PartitionAggregate",
    "aggregate_by",
    "reconcile_sets",
    "reconcile_partitions",
    "reconcile_relations",
]
