"""
Source interfaces for the banking data quality toolkit.

Concrete sources (CSV files, Postgres tables, in-memory records) implement the
RelationSource protocol so the orchestrator can load a `Dataset` snapshot
without knowing where the rows come from.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from bankdq.domain.relation import CUSTOMERS, TRANSACTIONS, Dataset, Relation


@runtime_checkable
class RelationSource(Protocol):
    """
    Common interface all relation sources must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of where rows come from.
    """

    name: str
    description: str

    def load_dataset(self) -> Dataset:
        """
        Load the `customers` and `transactions` relations as one snapshot.
        """
        ...


class AbstractRelationSource(abc.ABC):
    """
    ABC helper for class-based sources.

    Subclasses set `name` and `description` and implement `load_relation`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def load_relation(self, relation: str) -> Relation:  # pragma: no cover - interface only
        """Load a single relation by table name."""
        raise NotImplementedError

    def load_dataset(self) -> Dataset:
        return Dataset(
            customers=self.load_relation(CUSTOMERS),
            transactions=self.load_relation(TRANSACTIONS),
        )


__all__ = ["RelationSource", "AbstractRelationSource"]
