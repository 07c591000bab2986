from __future__ import annotations

import json
from pathlib import Path

import pytest

from bankdq.domain.relation import Dataset, Relation
from bankdq.orchestrator import available_checks, describe_checks, run_checks
from bankdq.sources import CsvSource
from scripts import generate_data


def _records(results):
    return [(r["check"], r["records"], r["error"]) for r in results]


def test_describe_checks_covers_every_check():
    descriptions = describe_checks()
    assert sorted(descriptions) == available_checks()
    assert all(descriptions.values())


def test_run_checks_persists_latest_and_archive(dataset, tmp_path: Path):
    results = run_checks(["scorecard", "summary"], dataset=dataset, results_dir=tmp_path)

    assert [r["check"] for r in results] == ["scorecard", "summary"]
    assert all(r["error"] is None for r in results)
    assert results[0]["records"][-1]["dimension"] == "Overall"
    assert results[0]["records"][-1]["status"] == "ok"
    assert results[0]["profile"]["duration_seconds"] >= 0

    latest = json.loads((tmp_path / "latest.json").read_text(encoding="utf-8"))
    assert latest["checks"] == ["scorecard", "summary"]
    assert latest["config"]["min_age"] == 18
    assert len(latest["results"]) == 2
    assert len(list(tmp_path.glob("run-*.json"))) == 1


def test_overall_entry_is_empty_without_scores(make_customers, make_transactions):
    empty = Dataset(customers=make_customers([]), transactions=make_transactions([]))

    [result] = run_checks(["scorecard"], dataset=empty, persist=False)

    assert result["error"] is None
    overall = result["records"][-1]
    assert overall["dimension"] == "Overall"
    assert overall["score"] is None
    assert overall["status"] == "empty"
    assert all(entry["status"] == "empty" for entry in result["records"])


def test_run_all_checks_on_sample_dataset(dataset, tmp_path: Path):
    results = run_checks(["all"], dataset=dataset, results_dir=tmp_path)

    assert [r["check"] for r in results] == available_checks()
    assert [r["check"] for r in results if r["error"]] == []
    rows = {r["check"]: r["rows"] for r in results}
    assert rows["orphans"] == 2
    assert rows["uniqueness"] == 2
    assert rows["summary"] == 4


def test_failing_check_does_not_stop_siblings(transactions, customers, tmp_path: Path):
    without_amount = Relation.from_rows(
        "transactions",
        [{k: v for k, v in row.items() if k != "amount"} for row in transactions.rows],
    )
    dataset = Dataset(customers=customers, transactions=without_amount)

    results = {
        r["check"]: r
        for r in run_checks(
            ["outliers", "referential_integrity", "scorecard"], dataset=dataset, persist=False
        )
    }

    assert "amount" in results["outliers"]["error"]
    assert results["outliers"]["records"] == []
    assert results["referential_integrity"]["error"] is None
    assert results["referential_integrity"]["records"][0]["orphaned_rows"] == 2

    scorecard = {e["dimension"]: e for e in results["scorecard"]["records"]}
    assert scorecard["Validity"]["status"] == "failed"
    assert scorecard["Uniqueness"]["status"] == "ok"


def test_unknown_check_raises(dataset):
    with pytest.raises(ValueError, match="nope"):
        run_checks(["nope"], dataset=dataset, persist=False)


def test_no_persist_writes_nothing(dataset, tmp_path: Path):
    run_checks(["completeness"], dataset=dataset, results_dir=tmp_path, persist=False)
    assert list(tmp_path.iterdir()) == []


def test_export_csv_writes_one_file_per_check(dataset, tmp_path: Path):
    run_checks(
        ["violations", "period_over_period"],
        dataset=dataset,
        results_dir=tmp_path,
        export_csv=True,
    )
    assert (tmp_path / "violations.csv").exists()
    assert (tmp_path / "period_over_period.csv").exists()


def test_runs_are_idempotent(dataset):
    checks = ["completeness", "outliers", "cross_partition", "daily_exceptions", "summary"]
    first = run_checks(checks, dataset=dataset, persist=False)
    second = run_checks(checks, dataset=dataset, persist=False)
    assert _records(first) == _records(second)


def test_run_checks_loads_from_source(tmp_path: Path):
    generate_data.generate_dataset(tmp_path / "data", customers=20, transactions=80, seed=5)

    results = run_checks(
        ["referential_integrity"],
        source=CsvSource(tmp_path / "data"),
        results_dir=tmp_path / "results",
    )

    assert results[0]["records"][0]["total_rows"] == 80
    latest = json.loads((tmp_path / "results" / "latest.json").read_text(encoding="utf-8"))
    assert latest["source"] == "csv"
