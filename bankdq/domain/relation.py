"""
Tabular relations read by the quality and reconciliation checks.

A `Relation` is a named list of rows with read access by column name. The checks
never mutate a relation; a `Dataset` pairs the two relations of one snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from bankdq.domain.errors import SchemaMismatchError

CUSTOMERS = "customers"
TRANSACTIONS = "transactions"

CUSTOMER_COLUMNS: Dict[str, type] = {
    "customer_id": int,
    "name": str,
    "age": int,
    "city": str,
    "account_type": str,
}

TRANSACTION_COLUMNS: Dict[str, type] = {
    "transaction_id": int,
    "customer_id": int,
    "transaction_date": datetime,
    "amount": float,
    "transaction_type": str,
}

COLUMN_TYPES: Dict[str, Dict[str, type]] = {
    CUSTOMERS: CUSTOMER_COLUMNS,
    TRANSACTIONS: TRANSACTION_COLUMNS,
}


def _parse_datetime(raw: str) -> datetime:
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return datetime.strptime(raw, "%Y-%m-%d %H:%M:%S")


_PARSERS: Dict[type, Callable[[str], Any]] = {
    int: lambda raw: int(float(raw)),
    float: float,
    datetime: _parse_datetime,
}


def coerce_value(raw: Any, kind: type) -> Any:
    """
    Convert a raw (usually CSV text) value into `kind`.

    Empty text becomes None for non-string kinds. Strings are kept verbatim,
    including "", so completeness checks can tell empty names apart from nulls
    at the source.
    """
    if raw is None:
        return None
    if kind is str:
        return raw if isinstance(raw, str) else str(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        return _PARSERS[kind](text)
    if kind is float and not isinstance(raw, float):
        return float(raw)
    return raw


def coerce_row(row: Mapping[str, Any], column_types: Mapping[str, type]) -> Dict[str, Any]:
    """Coerce the known columns of `row`; unknown columns pass through untouched."""
    return {
        name: coerce_value(value, column_types[name]) if name in column_types else value
        for name, value in row.items()
    }


@dataclass(frozen=True)
class Relation:
    """
    Read-only named relation.

    Attributes
    ----------
    name : str
        Table name, used in error messages and reports.
    columns : tuple[str, ...]
        Column names in source order.
    rows : list[dict]
        Row values keyed by column name.
    """

    name: str
    columns: Tuple[str, ...]
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def require(self, *columns: str) -> None:
        """Raise SchemaMismatchError if any of `columns` is absent."""
        missing = [c for c in columns if c not in self.columns]
        if missing:
            raise SchemaMismatchError(self.name, missing)

    def values(self, column: str) -> List[Any]:
        self.require(column)
        return [row.get(column) for row in self.rows]

    @classmethod
    def from_rows(
        cls,
        name: str,
        rows: Iterable[Mapping[str, Any]],
        columns: Optional[Sequence[str]] = None,
    ) -> "Relation":
        materialized = [dict(r) for r in rows]
        if columns is None:
            seen: Dict[str, None] = {}
            for row in materialized:
                seen.update(dict.fromkeys(row))
            columns = list(seen) or list(COLUMN_TYPES.get(name, {}))
        return cls(name=name, columns=tuple(columns), rows=materialized)

    @classmethod
    def from_records(cls, name: str, records: Iterable[BaseModel]) -> "Relation":
        """Build a relation from pydantic source models (e.g. Customer)."""
        records = list(records)
        if records:
            columns = list(type(records[0]).model_fields)
        else:
            columns = list(COLUMN_TYPES.get(name, {}))
        return cls.from_rows(name, (r.model_dump() for r in records), columns=columns)


@dataclass(frozen=True)
class Dataset:
    """One snapshot of the two source relations."""

    customers: Relation
    transactions: Relation


__all__ = [
    "CUSTOMERS",
    "TRANSACTIONS",
    "CUSTOMER_COLUMNS",
    "TRANSACTION_COLUMNS",
    "COLUMN_TYPES",
    "Relation",
    "Dataset",
    "coerce_row",
    "coerce_value",
]
