"""
Domain package for the banking data quality toolkit.

Exports the source row schemas, relation containers, derived check records and
the error taxonomy. Keep this package focused on data definitions.
"""

from bankdq.domain.errors import (
    EmptyInputError,
    QualityCheckError,
    SchemaMismatchError,
    UndefinedRatioError,
)
from bankdq.domain.models import Customer, Transaction
from bankdq.domain.relation import CUSTOMERS, TRANSACTIONS, Dataset, Relation

__all__ = [
    "CUSTOMERS",
    "TRANSACTIONS",
    "Customer",
    "Dataset",
    "EmptyInputError",
    "QualityCheckError",
    "Relation",
    "SchemaMismatchError",
    "Transaction",
    "UndefinedRatioError",
]
