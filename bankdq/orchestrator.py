"""
Orchestrator for running quality and reconciliation checks, profiling execution,
and persisting results.

Usage (example from CLI):
    from bankdq.orchestrator import run_checks
    from bankdq.sources import CsvSource

    results = run_checks(["scorecard", "period_over_period"], source=CsvSource("data"))
    print(results)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
- `results/<check>.csv` per check when CSV export is requested
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypedDict

from pydantic import BaseModel

from bankdq.config import QualityConfig, get_settings
from bankdq.domain.models import EntryStatus, ScorecardEntry
from bankdq.domain.relation import Dataset
from bankdq.export import records_to_rows, write_csv, write_json
from bankdq.quality.evaluator import (
    QualityRuleEvaluator,
    age_rule,
    amount_rule,
    transaction_date_rule,
)
from bankdq.quality.outliers import detect_outliers
from bankdq.quality.scorecard import score_dataset
from bankdq.reconciliation.daily import daily_exceptions
from bankdq.reconciliation.partitions import reconcile_partitions
from bankdq.reconciliation.period import period_over_period
from bankdq.reconciliation.summary import reconciliation_summary
from bankdq.sources.abstract import RelationSource
from bankdq.sources.csv_source import CsvSource
from bankdq.utils.logging import get_logger
from bankdq.utils.profiler import profile_block

log = get_logger(__name__)

CheckFn = Callable[[Dataset, QualityConfig], Sequence[BaseModel]]

EXACT_DUPLICATE_COLUMNS = ("customer_id", "name", "age", "city")


class CheckResult(TypedDict, total=False):
    """
    Result contract for one executed check.

    `error` is set (and `records` empty) when the check failed; sibling checks
    are unaffected.
    """

    check: str
    description: str
    rows: int
    records: List[Dict[str, Any]]
    error: Optional[str]
    profile: Dict[str, Any]


# ---------------------------------------------------------------------------
# Check adapters: Dataset + config -> records
# ---------------------------------------------------------------------------


def _completeness(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    evaluator = QualityRuleEvaluator(config)
    return [
        evaluator.profile_field(relation, column)
        for relation in (dataset.customers, dataset.transactions)
        for column in relation.columns
    ]


def _uniqueness(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    evaluator = QualityRuleEvaluator(config)
    return [
        evaluator.uniqueness(dataset.customers, "customer_id"),
        evaluator.uniqueness(dataset.transactions, "transaction_id"),
    ]


def _duplicates(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    evaluator = QualityRuleEvaluator(config)
    return [
        *evaluator.duplicate_keys(dataset.customers, "customer_id"),
        *evaluator.duplicate_keys(dataset.transactions, "transaction_id"),
    ]


def _exact_duplicates(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    return list(
        QualityRuleEvaluator(config).exact_duplicates(dataset.customers, EXACT_DUPLICATE_COLUMNS)
    )


def _validity_rules(dataset: Dataset, config: QualityConfig):
    return [
        (dataset.customers, age_rule(config)),
        (dataset.transactions, amount_rule(config)),
        (dataset.transactions, transaction_date_rule()),
    ]


def _validity(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    evaluator = QualityRuleEvaluator(config)
    return [
        evaluator.validity(relation, rule) for relation, rule in _validity_rules(dataset, config)
    ]


def _violations(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    evaluator = QualityRuleEvaluator(config)
    return [
        violation
        for relation, rule in _validity_rules(dataset, config)
        for violation in evaluator.violations(relation, rule)
    ]


def _referential_integrity(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    return [
        QualityRuleEvaluator(config).referential_integrity(dataset.transactions, dataset.customers)
    ]


def _orphans(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    return list(
        QualityRuleEvaluator(config).orphaned_transactions(dataset.transactions, dataset.customers)
    )


def _outliers(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    return list(detect_outliers(dataset.transactions, "amount", config).outliers)


def _scorecard(dataset: Dataset, config: QualityConfig) -> List[BaseModel]:
    scorecard = score_dataset(dataset, config)
    overall = ScorecardEntry(
        dimension="Overall",
        score=scorecard.overall_score,
        band=scorecard.overall_band,
        status=EntryStatus.OK if scorecard.overall_score is not None else EntryStatus.EMPTY,
    )
    return [*scorecard.entries, overall]


def _check_registry() -> Dict[str, Tuple[str, CheckFn]]:
    """Registry of available checks: name -> (description, adapter)."""
    return {
        "completeness": ("Null/empty profile of every column.", _completeness),
        "uniqueness": ("Uniqueness of customer and transaction ids.", _uniqueness),
        "duplicates": ("Id values occurring more than once.", _duplicates),
        "exact_duplicates": ("Customers repeated verbatim.", _exact_duplicates),
        "validity": ("Age, amount and booking-date validity scores.", _validity),
        "violations": ("Rows breaking a validity rule.", _violations),
        "referential_integrity": ("Transactions resolving to a customer.", _referential_integrity),
        "orphans": ("Transactions without a customer, newest first.", _orphans),
        "outliers": ("IQR outliers in transaction amounts.", _outliers),
        "scorecard": ("Composite quality scorecard.", _scorecard),
        "period_over_period": (
            "Month-over-month totals.",
            lambda ds, cfg: period_over_period(ds.transactions, cfg),
        ),
        "cross_partition": (
            "Simulated system A vs system B by transaction type.",
            lambda ds, cfg: reconcile_partitions(ds.transactions, cfg),
        ),
        "daily_exceptions": (
            "Daily totals deviating from the category mean.",
            lambda ds, cfg: daily_exceptions(ds.transactions, cfg),
        ),
        "summary": ("Reconciliation summary report.", reconciliation_summary),
    }


def available_checks() -> List[str]:
    """List available check names."""
    return sorted(_check_registry().keys())


def describe_checks() -> Dict[str, str]:
    return {name: description for name, (description, _) in sorted(_check_registry().items())}


def _resolve_names(check_names: Optional[Iterable[str]]) -> List[str]:
    names = list(check_names) if check_names is not None else ["all"]
    if len(names) == 1 and names[0] == "all":
        return available_checks()
    registry = _check_registry()
    unknown = [n for n in names if n not in registry]
    if unknown:
        raise ValueError(
            f"Unknown check(s) {', '.join(unknown)}. Available: {', '.join(sorted(registry))}"
        )
    return names


def _persist_results(payload: dict, results_dir: Path) -> None:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    latest_path = write_json(results_dir / "latest.json", payload)
    archive_path = write_json(results_dir / f"run-{timestamp}.json", payload)
    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _profiled_execute(name: str, dataset: Dataset, config: QualityConfig) -> CheckResult:
    description, check = _check_registry()[name]
    log.info(f"[CHECK START] {name}", extra={"check": name})
    with profile_block(name) as stats:
        try:
            records = records_to_rows(check(dataset, config))
            error = None
            log.info(f"[CHECK SUCCESS] {name}", extra={"check": name, "rows": len(records)})
        except Exception as exc:  # noqa: BLE001 - intentional broad catch to record failures
            log.exception(f"[CHECK FAILED] {name}", extra={"check": name})
            records, error = [], str(exc)

    return CheckResult(
        check=name,
        description=description,
        rows=len(records),
        records=records,
        error=error,
        profile=stats.as_dict(),
    )


def run_checks(
    check_names: Optional[Iterable[str]] = None,
    source: Optional[RelationSource] = None,
    config: Optional[QualityConfig] = None,
    results_dir: Path | str | None = None,
    persist: bool = True,
    export_csv: bool = False,
    dataset: Optional[Dataset] = None,
) -> List[CheckResult]:
    """
    Load one snapshot and run the requested checks against it.

    Parameters
    ----------
    check_names : iterable[str] | None
        Check names to execute. If None or ["all"], executes all available.
    source : RelationSource | None
        Where to load the relations from. Defaults to a CsvSource over
        settings.data_dir. Ignored when `dataset` is given.
    config : QualityConfig | None
        Thresholds. Defaults to settings.quality.
    results_dir : Path | str | None
        Directory for JSON/CSV artifacts. Defaults to settings.results_dir.
    persist : bool
        Whether to write results to disk.
    export_csv : bool
        Whether to also write one CSV per check (requires persist).
    dataset : Dataset | None
        A pre-loaded snapshot to evaluate instead of loading from `source`.

    Returns
    -------
    List[CheckResult]
        One result per check, in execution order. A failing check carries
        `error` and does not stop the others.
    """
    settings = get_settings()
    config = config or settings.quality
    names = _resolve_names(check_names)

    if dataset is None:
        source = source or CsvSource(settings.data_dir)
        with profile_block("load") as load_stats:
            dataset = source.load_dataset()
        log.info(
            f"[LOAD COMPLETE] {source.name}",
            extra={
                "source": source.name,
                "customers": len(dataset.customers),
                "transactions": len(dataset.transactions),
                "duration": round(load_stats.duration_seconds, 4),
            },
        )

    results: List[CheckResult] = [_profiled_execute(name, dataset, config) for name in names]
    failed = [r["check"] for r in results if r.get("error")]

    if persist:
        out_dir = Path(results_dir or settings.results_dir)
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source": source.name if source is not None else "dataset",
            "checks": names,
            "config": config.model_dump(mode="json"),
            "results": results,
        }
        _persist_results(payload, out_dir)
        if export_csv:
            for result in results:
                if not result.get("error"):
                    write_csv(out_dir / f"{result['check']}.csv", result["records"])

    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(names) - len(failed)}/{len(names)} check(s) succeeded",
        extra={"checks": names, "failed": failed},
    )
    return results


__all__ = [
    "CheckResult",
    "available_checks",
    "describe_checks",
    "run_checks",
]
