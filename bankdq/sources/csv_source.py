"""
CSV source: one file per relation (`customers.csv`, `transactions.csv`).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Optional

from bankdq.domain.relation import COLUMN_TYPES, CUSTOMERS, TRANSACTIONS, Relation, coerce_row
from bankdq.sources.abstract import AbstractRelationSource
from bankdq.utils.logging import get_logger

log = get_logger(__name__)


class CsvSource(AbstractRelationSource):
    """
    Read relations from CSV files with a header row.

    Known columns are coerced to their types; empty cells become None except in
    text columns, where "" is kept for completeness checks.
    """

    name: str = "csv"
    description: str = "customers.csv / transactions.csv from a data directory."

    def __init__(
        self,
        data_dir: Path | str,
        file_names: Optional[Dict[str, str]] = None,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.file_names = {
            CUSTOMERS: "customers.csv",
            TRANSACTIONS: "transactions.csv",
            **(file_names or {}),
        }

    def path_for(self, relation: str) -> Path:
        return self.data_dir / self.file_names.get(relation, f"{relation}.csv")

    def load_relation(self, relation: str) -> Relation:
        path = self.path_for(relation)
        column_types = COLUMN_TYPES.get(relation, {})
        with path.open("r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            rows = [coerce_row(row, column_types) for row in reader]
            columns = tuple(reader.fieldnames or ())
        log.info(
            f"Loaded {len(rows)} row(s) from {path}",
            extra={"relation": relation, "rows": len(rows)},
        )
        return Relation(name=relation, columns=columns, rows=rows)


__all__ = ["CsvSource"]
