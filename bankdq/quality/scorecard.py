"""
Composite data quality scorecard.

Each dimension score is produced by a zero-argument callable so one failing
dimension is reported as a `failed` entry while its siblings still score.
"""

from __future__ import annotations

import statistics
from typing import Callable, Dict, List, Mapping, Optional

from bankdq.config import QualityConfig
from bankdq.domain.models import Band, Dimension, EntryStatus, Scorecard, ScorecardEntry
from bankdq.domain.relation import Dataset
from bankdq.quality.evaluator import QualityRuleEvaluator, amount_rule
from bankdq.utils.logging import get_logger

log = get_logger(__name__)

ScoreSource = Callable[[], Optional[float]]

REQUIRED_DIMENSIONS = (
    Dimension.COMPLETENESS.value,
    Dimension.UNIQUENESS.value,
    Dimension.REFERENTIAL_INTEGRITY.value,
)


def band_for(score: float, config: Optional[QualityConfig] = None) -> Band:
    """Cutoffs are inclusive lower bounds: 95 is Excellent, 85 Good, 70 Fair."""
    config = config or QualityConfig()
    if score >= config.band_excellent:
        return Band.EXCELLENT
    if score >= config.band_good:
        return Band.GOOD
    if score >= config.band_fair:
        return Band.FAIR
    return Band.POOR


def _score_entry(name: str, source: ScoreSource, config: QualityConfig) -> ScorecardEntry:
    try:
        score = source()
    except Exception as exc:  # noqa: BLE001 - broad catch to record the failed dimension
        log.exception(f"[DIMENSION FAILED] {name}", extra={"dimension": name})
        return ScorecardEntry(dimension=name, status=EntryStatus.FAILED, error=str(exc))
    if score is None:
        return ScorecardEntry(dimension=name, status=EntryStatus.EMPTY)
    return ScorecardEntry(dimension=name, score=score, band=band_for(score, config))


def build_scorecard(
    dimensions: Mapping[str, ScoreSource], config: Optional[QualityConfig] = None
) -> Scorecard:
    """
    Evaluate every dimension and assemble the scorecard.

    Required dimensions absent from `dimensions` are reported as failed.
    Entries are sorted by descending score; unscored entries go last. The
    overall score is the mean of the scored entries (None if there are none).
    """
    config = config or QualityConfig()
    entries: List[ScorecardEntry] = [
        _score_entry(name, source, config) for name, source in dimensions.items()
    ]
    for name in REQUIRED_DIMENSIONS:
        if name not in dimensions:
            entries.append(
                ScorecardEntry(
                    dimension=name, status=EntryStatus.FAILED, error="dimension was not evaluated"
                )
            )

    entries.sort(key=lambda e: (e.score is not None, e.score or 0.0), reverse=True)
    scores = [e.score for e in entries if e.score is not None]
    overall = statistics.fmean(scores) if scores else None
    return Scorecard(
        entries=entries,
        overall_score=overall,
        overall_band=band_for(overall, config) if overall is not None else None,
    )


def score_dataset(
    dataset: Dataset,
    config: Optional[QualityConfig] = None,
    include_validity: bool = True,
) -> Scorecard:
    """
    Standard transaction scorecard: completeness of `customer_id`, uniqueness of
    `transaction_id`, referential integrity against customers and, optionally,
    validity of `amount`.
    """
    config = config or QualityConfig()
    evaluator = QualityRuleEvaluator(config)
    transactions, customers = dataset.transactions, dataset.customers

    dimensions: Dict[str, ScoreSource] = {
        Dimension.COMPLETENESS.value: lambda: evaluator.completeness(
            transactions, "customer_id"
        ).score,
        Dimension.UNIQUENESS.value: lambda: evaluator.uniqueness(
            transactions, "transaction_id"
        ).score,
        Dimension.REFERENTIAL_INTEGRITY.value: lambda: evaluator.referential_integrity(
            transactions, customers
        ).score,
    }
    if include_validity:
        dimensions[Dimension.VALIDITY.value] = lambda: evaluator.validity(
            transactions, amount_rule(config)
        ).score
    return build_scorecard(dimensions, config)


__all__ = ["REQUIRED_DIMENSIONS", "band_for", "build_scorecard", "score_dataset"]
