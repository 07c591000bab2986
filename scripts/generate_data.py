"""
Synthetic banking dataset generator.

Writes `customers.csv` and `transactions.csv` from a seeded RNG, sprinkled with
the defects the checks are meant to find (blank names, implausible ages,
duplicate ids, orphaned transactions, future dates, non-positive and huge
amounts), and optionally loads both files into Postgres with COPY.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path

import psycopg
import typer
from psycopg import sql

from bankdq.domain.relation import CUSTOMER_COLUMNS, CUSTOMERS, TRANSACTION_COLUMNS, TRANSACTIONS
from bankdq.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Generate synthetic banking data and load it into Postgres (CSV + COPY).")

FIRST_NAMES = ["Ana", "Bruno", "Chen", "Dara", "Elif", "Farid", "Grace", "Hugo", "Ines", "Jon"]
LAST_NAMES = ["Silva", "Okafor", "Nguyen", "Larsen", "Haddad", "Moreau", "Kowalski", "Reyes"]
CITIES = ["Lisbon", "Porto", "Madrid", "Lyon", "Berlin", "Oslo", "Dublin"]
ACCOUNT_TYPES = ["Checking", "Savings", "Business"]
TRANSACTION_TYPES = ["Deposit", "Transfer", "Withdrawal", "Payment"]

# Per-row defect rates
BLANK_NAME_RATE = 0.03
BAD_AGE_RATE = 0.02
DUPLICATE_CUSTOMER_RATE = 0.01
ORPHAN_RATE = 0.02
FUTURE_DATE_RATE = 0.01
BAD_AMOUNT_RATE = 0.01
HUGE_AMOUNT_RATE = 0.005


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _customer_row(rng: random.Random, customer_id: int) -> list[str]:
    roll = rng.random()
    if roll < BLANK_NAME_RATE / 2:
        name = ""
    elif roll < BLANK_NAME_RATE:
        name = "   "
    else:
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"

    if rng.random() < BAD_AGE_RATE:
        age = rng.choice([rng.randint(0, 17), rng.randint(121, 150)])
    else:
        age = rng.randint(18, 90)

    return [str(customer_id), name, str(age), rng.choice(CITIES), rng.choice(ACCOUNT_TYPES)]


def _generate_customers_csv(csv_path: Path, customers: int, seed: int) -> int:
    """Write the customers file; returns the number of rows written (duplicates included)."""
    rng = random.Random(seed)
    written = 0
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(list(CUSTOMER_COLUMNS))
        for customer_id in range(1, customers + 1):
            row = _customer_row(rng, customer_id)
            writer.writerow(row)
            written += 1
            if rng.random() < DUPLICATE_CUSTOMER_RATE:
                # Half verbatim copies, half an id reused for a different person.
                writer.writerow(row if rng.random() < 0.5 else _customer_row(rng, customer_id))
                written += 1
    return written


def _amount(rng: random.Random) -> float:
    roll = rng.random()
    if roll < BAD_AMOUNT_RATE:
        return rng.choice([0.0, -round(rng.uniform(1, 500), 2)])
    if roll < BAD_AMOUNT_RATE + HUGE_AMOUNT_RATE:
        return round(rng.uniform(1_000_001, 5_000_000), 2)
    return round(rng.lognormvariate(5, 1), 2)


def _generate_transactions_csv(
    csv_path: Path,
    transactions: int,
    customers: int,
    seed: int,
    days: int = 180,
) -> int:
    """Write the transactions file; dates span the `days` before now."""
    rng = random.Random(seed + 1)
    now = datetime.now(UTC).replace(tzinfo=None, microsecond=0)
    start = now - timedelta(days=days)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(list(TRANSACTION_COLUMNS))
        for transaction_id in range(1, transactions + 1):
            if rng.random() < ORPHAN_RATE:
                customer_id = customers + rng.randint(1, 1_000)
            else:
                customer_id = rng.randint(1, customers)

            if rng.random() < FUTURE_DATE_RATE:
                booked = now + timedelta(days=rng.randint(1, 60))
            else:
                booked = start + timedelta(seconds=rng.randint(0, days * 86_400))

            writer.writerow(
                [
                    transaction_id,
                    customer_id,
                    booked.isoformat(sep=" "),
                    f"{_amount(rng):.2f}",
                    rng.choice(TRANSACTION_TYPES),
                ]
            )
    return transactions


def generate_dataset(
    out_dir: Path, customers: int, transactions: int, seed: int
) -> dict[str, Path]:
    """Generate both CSV files under `out_dir`; returns relation name -> path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        CUSTOMERS: out_dir / "customers.csv",
        TRANSACTIONS: out_dir / "transactions.csv",
    }
    _generate_customers_csv(paths[CUSTOMERS], customers=customers, seed=seed)
    _generate_transactions_csv(
        paths[TRANSACTIONS], transactions=transactions, customers=customers, seed=seed
    )
    return paths


def _copy_into_db(dsn: str, relation: str, csv_path: Path, truncate: bool = True) -> int:
    """COPY a generated CSV into `public.<relation>`; returns the table's row count."""
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            table = sql.Identifier("public", relation)
            if truncate:
                cur.execute(sql.SQL("TRUNCATE TABLE {}").format(table))
            with cur.copy(
                sql.SQL("COPY {} FROM STDIN WITH (FORMAT csv, HEADER TRUE)").format(table)
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            cur.execute(sql.SQL("SELECT COUNT(*) FROM {}").format(table))
            count = cur.fetchone()[0]
            conn.commit()
    return count


@app.command()
def main(
    customers: int = typer.Option(
        1_000,
        "--customers",
        help="Number of distinct customer ids to generate.",
    ),
    transactions: int = typer.Option(
        10_000,
        "--transactions",
        "-t",
        help="Number of transactions to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("data"),
        "--output",
        "-o",
        help="Directory for customers.csv and transactions.csv.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate CSV; skip loading into Postgres.",
    ),
) -> None:
    """
    Generate the synthetic dataset and optionally load it into Postgres using COPY.
    """
    start = time.perf_counter()
    typer.echo(
        f"Generating {customers:,} customers / {transactions:,} transactions -> {output} "
        f"(seed={seed})"
    )
    paths = generate_dataset(output, customers=customers, transactions=transactions, seed=seed)
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    load_start = time.perf_counter()
    conn_dsn = _build_dsn(dsn)
    for relation, path in paths.items():
        count = _copy_into_db(conn_dsn, relation, path)
        typer.echo(f"Loaded {count:,} row(s) into public.{relation}")
    typer.echo(f"Load completed in {time.perf_counter() - load_start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
