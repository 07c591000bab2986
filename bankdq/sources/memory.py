"""
In-memory source for generated data and tests.
"""

from __future__ import annotations

from typing import Iterable, Union

from bankdq.domain.models import Customer, Transaction
from bankdq.domain.relation import CUSTOMERS, TRANSACTIONS, Relation
from bankdq.sources.abstract import AbstractRelationSource


class InMemorySource(AbstractRelationSource):
    name: str = "memory"
    description: str = "Relations held in process memory."

    def __init__(
        self,
        customers: Union[Relation, Iterable[Customer]],
        transactions: Union[Relation, Iterable[Transaction]],
    ) -> None:
        self._relations = {
            CUSTOMERS: customers
            if isinstance(customers, Relation)
            else Relation.from_records(CUSTOMERS, customers),
            TRANSACTIONS: transactions
            if isinstance(transactions, Relation)
            else Relation.from_records(TRANSACTIONS, transactions),
        }

    def load_relation(self, relation: str) -> Relation:
        return self._relations[relation]


__all__ = ["InMemorySource"]
