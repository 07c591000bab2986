"""
Sources package for the banking data quality toolkit.

Re-exports the source interfaces and concrete sources so downstream code can
import from `bankdq.sources` directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from bankdq.sources.abstract import AbstractRelationSource, RelationSource
from bankdq.sources.csv_source import CsvSource
from bankdq.sources.memory import InMemorySource
from bankdq.sources.postgres import PostgresSource

_SOURCE_KINDS: Dict[str, str] = {
    CsvSource.name: CsvSource.description,
    PostgresSource.name: PostgresSource.description,
}


def available_sources() -> List[str]:
    """List source kinds selectable by name."""
    return sorted(_SOURCE_KINDS)


def build_source(
    kind: str,
    data_dir: Optional[Path | str] = None,
    dsn: Optional[str] = None,
) -> RelationSource:
    if kind == CsvSource.name:
        if data_dir is None:
            raise ValueError("The csv source needs a data directory")
        return CsvSource(data_dir)
    if kind == PostgresSource.name:
        return PostgresSource(dsn_override=dsn)
    raise ValueError(f"Unknown source '{kind}'. Available: {', '.join(available_sources())}")


__all__ = [
    # Abstracts
    "AbstractRelationSource",
    "RelationSource",
    # Concrete sources
    "CsvSource",
    "InMemorySource",
    "PostgresSource",
    # Registry
    "available_sources",
    "build_source",
]
