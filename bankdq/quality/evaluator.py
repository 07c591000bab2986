"""
Rule-based quality checks: completeness, uniqueness, validity and referential
integrity.

Every score is 100 * passed_rows / total_rows, so it always lies in [0, 100].
An empty relation yields `score=None` rather than a computed zero. A field the
relation does not carry raises `SchemaMismatchError`.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from bankdq.config import QualityConfig
from bankdq.domain.models import (
    Dimension,
    DuplicateKey,
    ExactDuplicate,
    FieldProfile,
    OrphanedTransaction,
    QualityMetric,
    ReferentialIntegrityReport,
    ValidityViolation,
)
from bankdq.domain.relation import CUSTOMERS, TRANSACTIONS, Relation
from bankdq.utils.logging import get_logger
from bankdq.utils.stats import percentage

log = get_logger(__name__)

ID_FIELDS: Dict[str, str] = {
    CUSTOMERS: "customer_id",
    TRANSACTIONS: "transaction_id",
}


def is_missing(value: Any) -> bool:
    """Null marker, or a blank string."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


@dataclass(frozen=True)
class ValidityRule:
    """
    A per-value rule. `check` returns an issue label for an invalid value and
    None for a valid one; it is never called with a missing value.
    """

    name: str
    field: str
    check: Callable[[Any], Optional[str]]


def age_rule(config: QualityConfig) -> ValidityRule:
    def _check(age: Any) -> Optional[str]:
        if age < config.min_age:
            return "Too Young"
        if age > config.max_age:
            return "Unrealistic Age"
        return None

    return ValidityRule(name="age_range", field="age", check=_check)


def amount_rule(config: QualityConfig) -> ValidityRule:
    def _check(amount: Any) -> Optional[str]:
        if amount <= 0:
            return "Invalid Amount"
        if amount > config.amount_ceiling:
            return "Suspiciously High"
        return None

    return ValidityRule(name="amount_range", field="amount", check=_check)


def _aligned_now(now: datetime, value: datetime) -> datetime:
    if (now.tzinfo is None) == (value.tzinfo is None):
        return now
    if value.tzinfo is None:
        return now.astimezone(UTC).replace(tzinfo=None)
    return now.replace(tzinfo=UTC)


def transaction_date_rule(now: Optional[datetime] = None) -> ValidityRule:
    """
    Dates after `now` are invalid. `now` is fixed when the rule is built and
    defaults to the current UTC time; naive timestamps are read as UTC.
    """
    reference = now or datetime.now(UTC)

    def _check(value: Any) -> Optional[str]:
        if value > _aligned_now(reference, value):
            return "Future Date"
        return None

    return ValidityRule(name="not_future", field="transaction_date", check=_check)


def _newest_first_key(row: Dict[str, Any]) -> tuple:
    booked = row.get("transaction_date")
    return (booked is not None, booked or datetime.min)


class QualityRuleEvaluator:
    """
    Stateless evaluator for per-field quality dimensions.

    Parameters
    ----------
    config : QualityConfig | None
        Thresholds for the built-in validity rules and listing limits.
    """

    def __init__(self, config: Optional[QualityConfig] = None) -> None:
        self.config = config or QualityConfig()

    # ------------------------------------------------------------------
    # Completeness
    # ------------------------------------------------------------------

    def profile_field(self, relation: Relation, field: str) -> FieldProfile:
        values = relation.values(field)
        total = len(values)
        present = [v for v in values if not is_missing(v)]
        non_null = len(present)
        return FieldProfile(
            relation=relation.name,
            field=field,
            total_rows=total,
            non_null_count=non_null,
            null_count=total - non_null,
            distinct_count=len(set(present)),
            null_percentage=percentage(total - non_null, total),
            score=percentage(non_null, total),
        )

    def completeness(self, relation: Relation, field: str) -> QualityMetric:
        profile = self.profile_field(relation, field)
        return QualityMetric(
            dimension=Dimension.COMPLETENESS,
            relation=relation.name,
            field=field,
            total_rows=profile.total_rows,
            passed_rows=profile.non_null_count,
            failed_rows=profile.null_count,
            score=profile.score,
        )

    # ------------------------------------------------------------------
    # Uniqueness
    # ------------------------------------------------------------------

    def duplicate_keys(self, relation: Relation, key: str) -> List[DuplicateKey]:
        """
        Key values occurring more than once, most frequent first. Null is a key
        value like any other, so repeated nulls form one group.
        """
        counts = Counter(relation.values(key))
        return [
            DuplicateKey(
                relation=relation.name, field=key, value=value, occurrence_count=count
            )
            for value, count in counts.most_common()
            if count > 1
        ]

    def uniqueness(self, relation: Relation, key: str) -> QualityMetric:
        """
        Score = 100 * (1 - duplicate_groups / total_rows), where a duplicate
        group is a key value that occurs more than once.
        """
        duplicate_groups = len(self.duplicate_keys(relation, key))
        total = len(relation)
        if duplicate_groups:
            log.debug(
                f"{duplicate_groups} duplicate key group(s) in {relation.name}.{key}",
                extra={"relation": relation.name, "field": key},
            )
        return QualityMetric(
            dimension=Dimension.UNIQUENESS,
            relation=relation.name,
            field=key,
            total_rows=total,
            passed_rows=total - duplicate_groups,
            failed_rows=duplicate_groups,
            score=percentage(total - duplicate_groups, total),
        )

    def exact_duplicates(
        self, relation: Relation, columns: Optional[Sequence[str]] = None
    ) -> List[ExactDuplicate]:
        """Rows repeated verbatim over `columns` (all columns by default)."""
        columns = list(columns or relation.columns)
        relation.require(*columns)
        counts = Counter(tuple(row.get(c) for c in columns) for row in relation.rows)
        return [
            ExactDuplicate(row=dict(zip(columns, values)), duplicate_count=count)
            for values, count in counts.most_common()
            if count > 1
        ]

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def violations(self, relation: Relation, rule: ValidityRule) -> List[ValidityViolation]:
        relation.require(rule.field)
        id_field = ID_FIELDS.get(relation.name)
        found: List[ValidityViolation] = []
        for row in relation.rows:
            value = row.get(rule.field)
            if is_missing(value):
                continue
            issue = rule.check(value)
            if issue is not None:
                found.append(
                    ValidityViolation(
                        row_id=row.get(id_field) if id_field else None,
                        field=rule.field,
                        value=value,
                        issue=issue,
                        row=dict(row),
                    )
                )
        return found

    def validity(self, relation: Relation, rule: ValidityRule) -> QualityMetric:
        """
        Share of rows not violating `rule`. Missing values are not violations;
        completeness accounts for them.
        """
        failed = len(self.violations(relation, rule))
        total = len(relation)
        return QualityMetric(
            dimension=Dimension.VALIDITY,
            relation=relation.name,
            field=rule.field,
            total_rows=total,
            passed_rows=total - failed,
            failed_rows=failed,
            score=percentage(total - failed, total),
        )

    # ------------------------------------------------------------------
    # Referential integrity
    # ------------------------------------------------------------------

    def referential_integrity(
        self,
        child: Relation,
        parent: Relation,
        foreign_key: str = "customer_id",
        primary_key: str = "customer_id",
    ) -> ReferentialIntegrityReport:
        """A null foreign key never resolves, so it counts as orphaned."""
        parent_keys = {v for v in parent.values(primary_key) if v is not None}
        references = child.values(foreign_key)
        total = len(references)
        matched = sum(1 for v in references if v is not None and v in parent_keys)
        orphaned = total - matched
        return ReferentialIntegrityReport(
            relation=child.name,
            parent=parent.name,
            foreign_key=foreign_key,
            total_rows=total,
            matched_rows=matched,
            orphaned_rows=orphaned,
            orphaned_percentage=percentage(orphaned, total),
            score=percentage(matched, total),
        )

    def orphaned_transactions(
        self,
        transactions: Relation,
        customers: Relation,
        limit: Optional[int] = None,
    ) -> List[OrphanedTransaction]:
        """
        Transactions whose customer does not exist, newest first (undated
        rows last). `limit` defaults to `config.orphan_listing_limit`; 0 lists
        everything.
        """
        transactions.require(
            "transaction_id", "customer_id", "transaction_date", "amount", "transaction_type"
        )
        parent_keys = {v for v in customers.values("customer_id") if v is not None}
        orphans = [
            row
            for row in transactions.rows
            if row.get("customer_id") is None or row.get("customer_id") not in parent_keys
        ]
        orphans.sort(key=_newest_first_key, reverse=True)
        limit = self.config.orphan_listing_limit if limit is None else limit
        if limit > 0:
            orphans = orphans[:limit]
        return [
            OrphanedTransaction(
                transaction_id=row.get("transaction_id"),
                customer_id=row.get("customer_id"),
                transaction_date=row.get("transaction_date"),
                amount=row.get("amount"),
                transaction_type=row.get("transaction_type"),
            )
            for row in orphans
        ]


__all__ = [
    "ID_FIELDS",
    "QualityRuleEvaluator",
    "ValidityRule",
    "age_rule",
    "amount_rule",
    "transaction_date_rule",
    "is_missing",
]
