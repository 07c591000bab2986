"""
Domain models for the banking data quality toolkit.

Defines the two source row schemas (aligned with `db/init.sql`) and the derived
records every check returns. Source fields are all optional: missing and
malformed values are exactly what the quality checks measure, so they must be
representable rather than rejected at load time.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

_FROZEN = {"frozen": True, "populate_by_name": True}


class Customer(BaseModel):
    """
    Representation of a single row in the `customers` table.
    """

    customer_id: Optional[int] = Field(None, description="Customer identifier (should be unique).")
    name: Optional[str] = Field(None, description="Full name; empty counts as missing.")
    age: Optional[int] = Field(None, description="Age in years.")
    city: Optional[str] = Field(None, description="City of residence.")
    account_type: Optional[str] = Field(None, description="Account product, e.g. Savings.")

    model_config = _FROZEN


class Transaction(BaseModel):
    """
    Representation of a single row in the `transactions` table.
    """

    transaction_id: Optional[int] = Field(None, description="Transaction identifier.")
    customer_id: Optional[int] = Field(None, description="Reference to customers.customer_id.")
    transaction_date: Optional[datetime] = Field(None, description="Booking timestamp.")
    amount: Optional[float] = Field(None, description="Transaction amount.")
    transaction_type: Optional[str] = Field(
        None, description="Deposit, Withdrawal, Transfer, Payment, ..."
    )

    model_config = _FROZEN


class Dimension(str, Enum):
    COMPLETENESS = "Completeness"
    UNIQUENESS = "Uniqueness"
    VALIDITY = "Validity"
    REFERENTIAL_INTEGRITY = "Referential Integrity"


class Band(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class EntryStatus(str, Enum):
    """Outcome of a single scorecard dimension."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class OutlierType(str, Enum):
    BELOW_LOWER_BOUND = "Below Lower Bound"
    ABOVE_UPPER_BOUND = "Above Upper Bound"
    NORMAL = "Normal"


class PeriodStatus(str, Enum):
    SIGNIFICANT_CHANGE = "Significant Change"
    NORMAL = "Normal"


class MatchStatus(str, Enum):
    ONLY_IN_A = "Only in System A"
    ONLY_IN_B = "Only in System B"
    IN_BOTH = "In Both Systems"


class ExceptionStatus(str, Enum):
    EXCEPTION = "Exception"
    WARNING = "Warning"
    OK = "OK"


# ---------------------------------------------------------------------------
# Quality records
# ---------------------------------------------------------------------------


class FieldProfile(BaseModel):
    """
    Completeness profile of one field. `score` is None for an empty relation.
    """

    relation: str
    field: str
    total_rows: int
    non_null_count: int
    null_count: int
    distinct_count: int
    null_percentage: Optional[float] = None
    score: Optional[float] = None

    model_config = _FROZEN

    @property
    def is_empty(self) -> bool:
        return self.total_rows == 0


class QualityMetric(BaseModel):
    """
    Score of one quality dimension for one field, in [0, 100].

    `score` is None when the relation had no rows to measure, which is distinct
    from a computed 0.
    """

    dimension: Dimension
    relation: str
    field: str
    total_rows: int
    passed_rows: int
    failed_rows: int
    score: Optional[float] = None

    model_config = _FROZEN

    @property
    def is_empty(self) -> bool:
        return self.total_rows == 0


class DuplicateKey(BaseModel):
    relation: str
    field: str
    value: Any
    occurrence_count: int

    model_config = _FROZEN


class ExactDuplicate(BaseModel):
    row: Dict[str, Any]
    duplicate_count: int

    model_config = _FROZEN


class ValidityViolation(BaseModel):
    row_id: Any = None
    field: str
    value: Any = None
    issue: str
    row: Dict[str, Any] = Field(default_factory=dict)

    model_config = _FROZEN


class ReferentialIntegrityReport(BaseModel):
    relation: str
    parent: str
    foreign_key: str
    total_rows: int
    matched_rows: int
    orphaned_rows: int
    orphaned_percentage: Optional[float] = None
    score: Optional[float] = None

    model_config = _FROZEN


class OrphanedTransaction(BaseModel):
    transaction_id: Optional[int] = None
    customer_id: Optional[int] = None
    transaction_date: Optional[datetime] = None
    amount: Optional[float] = None
    transaction_type: Optional[str] = None
    issue: str = "Orphaned - No Customer"

    model_config = _FROZEN


# ---------------------------------------------------------------------------
# Outliers
# ---------------------------------------------------------------------------


class OutlierBound(BaseModel):
    q1: float
    q3: float
    iqr: float
    lower_bound: float
    upper_bound: float
    mean: float
    std_dev: Optional[float] = None

    model_config = _FROZEN


class OutlierRow(BaseModel):
    row_id: Any = None
    value: float
    outlier_type: OutlierType
    deviation: float
    lower_bound: float
    upper_bound: float
    row: Dict[str, Any] = Field(default_factory=dict)

    model_config = _FROZEN


class OutlierReport(BaseModel):
    relation: str
    field: str
    bound: Optional[OutlierBound] = None
    outliers: List[OutlierRow] = Field(default_factory=list)

    model_config = _FROZEN


# ---------------------------------------------------------------------------
# Scorecard
# ---------------------------------------------------------------------------


class ScorecardEntry(BaseModel):
    dimension: str
    score: Optional[float] = None
    band: Optional[Band] = None
    status: EntryStatus = EntryStatus.OK
    error: Optional[str] = None

    model_config = _FROZEN


class Scorecard(BaseModel):
    entries: List[ScorecardEntry]
    overall_score: Optional[float] = None
    overall_band: Optional[Band] = None

    model_config = _FROZEN

    @property
    def failed(self) -> List[ScorecardEntry]:
        return [e for e in self.entries if e.status is EntryStatus.FAILED]


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


class ReconciliationRecord(BaseModel):
    """
    Observed vs expected value for one partition.

    `variance_percentage` is None when the expected value is zero (undefined
    ratio), never a silent 0.
    """

    partition_key: str
    observed_value: float
    expected_value: float
    variance: float
    variance_percentage: Optional[float] = None
    status: str

    model_config = _FROZEN


class PeriodComparison(ReconciliationRecord):
    year: int
    month: int
    month_name: str
    transaction_count: int
    total_amount: float
    avg_amount: Optional[float] = None
    previous_count: int
    count_variance: int


class PartitionComparison(ReconciliationRecord):
    system_a_count: int
    system_b_count: int
    system_a_amount: float
    system_b_amount: float
    count_variance: int


class DailyException(ReconciliationRecord):
    day: date
    category: str
    transaction_count: int
    std_dev: float


class SummaryMetric(BaseModel):
    metric: str
    value: Optional[float] = None
    status: str = ""

    model_config = _FROZEN


__all__ = [
    "Customer",
    "Transaction",
    "Dimension",
    "Band",
    "EntryStatus",
    "OutlierType",
    "PeriodStatus",
    "MatchStatus",
    "ExceptionStatus",
    "FieldProfile",
    "QualityMetric",
    "DuplicateKey",
    "ExactDuplicate",
    "ValidityViolation",
    "ReferentialIntegrityReport",
    "OrphanedTransaction",
    "OutlierBound",
    "OutlierRow",
    "OutlierReport",
    "ScorecardEntry",
    "Scorecard",
    "ReconciliationRecord",
    "PeriodComparison",
    "PartitionComparison",
    "DailyException",
    "SummaryMetric",
]
