"""
Integration tests for the Postgres source.

These tests run against a real PostgreSQL instance and verify that:
1. Generated CSVs load into `customers` / `transactions` with COPY
2. PostgresSource reads both tables as one snapshot with the expected types
3. A full check run over Postgres matches the same run over the CSV files

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os
from datetime import datetime

import pytest

from bankdq.orchestrator import run_checks
from bankdq.sources import CsvSource, PostgresSource
from scripts.generate_data import generate_dataset

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("RUN_INTEGRATION_TESTS") != "1",
        reason="Set RUN_INTEGRATION_TESTS=1 to run integration tests",
    ),
]


def test_postgres_source_loads_seeded_tables(seeded_db_small: dict, test_dsn: str):
    dataset = PostgresSource(dsn_override=test_dsn).load_dataset()

    assert len(dataset.customers) == seeded_db_small["customers"]
    assert len(dataset.transactions) == seeded_db_small["transactions"] == 200
    row = dataset.transactions.rows[0]
    assert isinstance(row["transaction_date"], datetime)
    assert isinstance(row["amount"], float)


def test_checks_over_postgres_match_checks_over_csv(
    seeded_db_small: dict, test_dsn: str, tmp_path
):
    generate_dataset(tmp_path, customers=50, transactions=200, seed=42)
    checks = ["uniqueness", "referential_integrity", "cross_partition"]

    over_db = run_checks(checks, source=PostgresSource(dsn_override=test_dsn), persist=False)
    over_csv = run_checks(checks, source=CsvSource(tmp_path), persist=False)

    assert [r["error"] for r in over_db] == [None] * len(checks)
    for db_result, csv_result in zip(over_db, over_csv):
        assert db_result["rows"] == csv_result["rows"]
    db_integrity = over_db[1]["records"][0]
    csv_integrity = over_csv[1]["records"][0]
    assert db_integrity["orphaned_rows"] == csv_integrity["orphaned_rows"]
