"""
Pytest configuration for the banking data quality toolkit.

Provides fixtures for:
- Settings and DSN for integration tests
- Database connection management and seeding
- Small in-memory relations for unit tests
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator, Iterable, Optional, Sequence, Tuple

import psycopg
import pytest

from bankdq.config import QualityConfig, Settings
from bankdq.domain.models import Customer, Transaction
from bankdq.domain.relation import CUSTOMERS, TRANSACTIONS, Dataset, Relation

CustomerRow = Tuple[Optional[int], Optional[str], Optional[int], Optional[str], Optional[str]]
TransactionRow = Tuple[
    Optional[int], Optional[int], Optional[str], Optional[float], Optional[str]
]


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "banking"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the customers and transactions tables exist.
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    with db_connection.cursor() as cur:
        cur.execute(init_sql_path.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="function")
def seeded_db_small(
    db_connection: psycopg.Connection,
    db_schema_initialized: bool,
    test_dsn: str,
) -> Generator[dict, None, None]:
    """
    Seed a small generated dataset (50 customers, 200 transactions).

    Returns relation name -> row count.
    """
    from scripts.generate_data import _copy_into_db, generate_dataset

    with tempfile.TemporaryDirectory() as tmpdir:
        paths = generate_dataset(Path(tmpdir), customers=50, transactions=200, seed=42)
        counts = {
            relation: _copy_into_db(test_dsn, relation, path) for relation, path in paths.items()
        }

    yield counts

    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.customers, public.transactions;")
    db_connection.commit()


# ---------------------------------------------------------------------------
# In-memory relations
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> QualityConfig:
    return QualityConfig()


@pytest.fixture
def make_customers() -> Callable[[Iterable[CustomerRow]], Relation]:
    """Factory: tuples of (customer_id, name, age, city, account_type) -> relation."""

    def _make(rows: Iterable[CustomerRow]) -> Relation:
        fields = list(Customer.model_fields)
        return Relation.from_records(
            CUSTOMERS, [Customer(**dict(zip(fields, row))) for row in rows]
        )

    return _make


@pytest.fixture
def make_transactions() -> Callable[[Iterable[TransactionRow]], Relation]:
    """
    Factory: tuples of (transaction_id, customer_id, transaction_date, amount,
    transaction_type) -> relation. Dates are ISO strings.
    """

    def _make(rows: Iterable[TransactionRow]) -> Relation:
        fields = list(Transaction.model_fields)
        return Relation.from_records(
            TRANSACTIONS, [Transaction(**dict(zip(fields, row))) for row in rows]
        )

    return _make


CUSTOMER_ROWS: Sequence[CustomerRow] = (
    (1, "Ana Silva", 34, "Lisbon", "Savings"),
    (2, "", 17, "Porto", "Checking"),
    (3, "Chen Nguyen", 130, "Madrid", "Business"),
    (3, "Chen Nguyen", 130, "Madrid", "Business"),
    (4, None, None, "Lyon", "Savings"),
)

TRANSACTION_ROWS: Sequence[TransactionRow] = (
    (1, 1, "2024-01-05T10:00:00", 100.0, "Deposit"),
    (2, 2, "2024-01-20T09:30:00", 50.0, "Withdrawal"),
    (3, 99, "2024-02-03T12:00:00", 75.0, "Transfer"),
    (4, 1, "2024-02-10T08:15:00", -5.0, "Payment"),
    (5, 3, "2024-03-01T16:45:00", 2_000_000.0, "Deposit"),
    (6, None, "2024-03-15T11:00:00", 20.0, "Payment"),
)


@pytest.fixture
def customers(make_customers) -> Relation:
    """Five rows: a blank name, out-of-range ages, a verbatim duplicate and nulls."""
    return make_customers(CUSTOMER_ROWS)


@pytest.fixture
def transactions(make_transactions) -> Relation:
    """
    Six rows over three months: one unknown customer, one null customer, a
    negative amount and one above the default ceiling.
    """
    return make_transactions(TRANSACTION_ROWS)


@pytest.fixture
def dataset(customers: Relation, transactions: Relation) -> Dataset:
    return Dataset(customers=customers, transactions=transactions)
