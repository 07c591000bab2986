"""
Error taxonomy for quality and reconciliation checks.

Each error is fatal to the single evaluation that raised it, never to the run:
the orchestrator and the composite scorer record the failure and move on to
sibling evaluations.
"""

from __future__ import annotations

from typing import Iterable


class QualityCheckError(Exception):
    """Base exception for quality and reconciliation evaluation failures."""


class SchemaMismatchError(QualityCheckError):
    """Raised when a relation lacks a column an evaluation requires."""

    def __init__(self, relation: str, missing: Iterable[str]) -> None:
        self.relation = relation
        self.missing = tuple(missing)
        super().__init__(
            f"Relation '{relation}' is missing required column(s): {', '.join(self.missing)}"
        )


class EmptyInputError(QualityCheckError):
    """Raised by numeric helpers when asked to summarize zero values."""


class UndefinedRatioError(QualityCheckError, ZeroDivisionError):
    """Raised when a ratio or percentage has a zero denominator."""


__all__ = [
    "QualityCheckError",
    "SchemaMismatchError",
    "EmptyInputError",
    "UndefinedRatioError",
]
