from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from bankdq.domain.errors import SchemaMismatchError
from bankdq.domain.models import Customer
from bankdq.domain.relation import coerce_value
from bankdq.sources import (
    CsvSource,
    InMemorySource,
    PostgresSource,
    available_sources,
    build_source,
)
from bankdq.sources.abstract import RelationSource
from scripts import generate_data


def _write(path: Path, text: str) -> None:
    path.write_text(text.strip() + "\n", encoding="utf-8")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    _write(
        tmp_path / "customers.csv",
        """
customer_id,name,age,city,account_type
1,Ana Silva,34,Lisbon,Savings
2,,,Porto,Checking
""",
    )
    _write(
        tmp_path / "transactions.csv",
        """
transaction_id,customer_id,transaction_date,amount,transaction_type
10,1,2024-01-05 10:00:00,100.50,Deposit
11,,2024-01-06T08:00:00,,Payment
""",
    )
    return tmp_path


def test_csv_source_coerces_types(data_dir):
    dataset = CsvSource(data_dir).load_dataset()

    ana, blank = dataset.customers.rows
    assert ana == {
        "customer_id": 1,
        "name": "Ana Silva",
        "age": 34,
        "city": "Lisbon",
        "account_type": "Savings",
    }
    assert blank["name"] == ""
    assert blank["age"] is None

    first, second = dataset.transactions.rows
    assert first["transaction_date"] == datetime(2024, 1, 5, 10, 0)
    assert first["amount"] == 100.5
    assert second["customer_id"] is None
    assert second["amount"] is None
    assert dataset.transactions.columns[0] == "transaction_id"


def test_csv_source_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CsvSource(tmp_path).load_dataset()


def test_csv_source_custom_file_names(data_dir):
    (data_dir / "customers.csv").rename(data_dir / "clients.csv")
    source = CsvSource(data_dir, file_names={"customers": "clients.csv"})
    assert len(source.load_relation("customers")) == 2


def test_csv_source_keeps_unknown_columns_and_reports_missing_ones(tmp_path):
    _write(tmp_path / "customers.csv", "customer_id,nickname\n1,ana")
    relation = CsvSource(tmp_path).load_relation("customers")

    assert relation.rows == [{"customer_id": 1, "nickname": "ana"}]
    with pytest.raises(SchemaMismatchError):
        relation.require("age")


def test_generated_dataset_loads(tmp_path):
    generate_data.generate_dataset(tmp_path, customers=30, transactions=100, seed=1)

    dataset = CsvSource(tmp_path).load_dataset()

    assert len(dataset.transactions) == 100
    assert len(dataset.customers) >= 30
    assert all(isinstance(v, datetime) for v in dataset.transactions.values("transaction_date"))


def test_in_memory_source_accepts_models_or_relations(transactions):
    source = InMemorySource([Customer(customer_id=1, name="Ana")], transactions)
    dataset = source.load_dataset()

    assert dataset.customers.rows[0]["customer_id"] == 1
    assert dataset.transactions is transactions
    assert isinstance(source, RelationSource)


@pytest.mark.parametrize(
    "raw, kind, expected",
    [
        ("", int, None),
        ("  ", float, None),
        ("42", int, 42),
        ("42.0", int, 42),
        ("", str, ""),
        (7, float, 7.0),
        (None, str, None),
    ],
)
def test_coerce_value(raw, kind, expected):
    assert coerce_value(raw, kind) == expected


def test_build_source(data_dir):
    assert available_sources() == ["csv", "postgres"]
    assert isinstance(build_source("csv", data_dir=data_dir), CsvSource)
    assert isinstance(build_source("postgres", dsn="postgresql://x@y/z"), PostgresSource)
    with pytest.raises(ValueError):
        build_source("excel")
    with pytest.raises(ValueError):
        build_source("csv")
