"""
Postgres source: reads `customers` and `transactions` with psycopg.

`load_dataset` reads both tables over a single read-only connection that is
released when loading finishes, so a run never holds a connection while checks
execute.
"""

from __future__ import annotations

from typing import Optional

from psycopg import Connection, sql
from psycopg.rows import dict_row

from bankdq.config import get_settings
from bankdq.domain.relation import (
    COLUMN_TYPES,
    CUSTOMERS,
    TRANSACTIONS,
    Dataset,
    Relation,
    coerce_row,
)
from bankdq.infrastructure.db_factory import apply_statement_timeout, connection_scope
from bankdq.sources.abstract import AbstractRelationSource
from bankdq.utils.logging import get_logger

log = get_logger(__name__)


class PostgresSource(AbstractRelationSource):
    """
    Read relations as `SELECT * FROM <schema>.<relation>`.
    """

    name: str = "postgres"
    description: str = "public.customers / public.transactions over psycopg."

    def __init__(
        self,
        dsn_override: Optional[str] = None,
        schema: str = "public",
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        self._dsn_override = dsn_override
        self.schema = schema
        if statement_timeout_ms is None:
            statement_timeout_ms = get_settings().db_statement_timeout_ms
        self.statement_timeout_ms = statement_timeout_ms

    def _fetch(self, conn: Connection, relation: str) -> Relation:
        query = sql.SQL("SELECT * FROM {}.{}").format(
            sql.Identifier(self.schema), sql.Identifier(relation)
        )
        with conn.cursor(row_factory=dict_row) as cur:
            apply_statement_timeout(cur, self.statement_timeout_ms)
            cur.execute(query)
            columns = tuple(column.name for column in cur.description or ())
            records = cur.fetchall()
        column_types = COLUMN_TYPES.get(relation, {})
        log.info(
            f"Loaded {len(records)} row(s) from {self.schema}.{relation}",
            extra={"relation": relation, "rows": len(records)},
        )
        return Relation(
            name=relation,
            columns=columns,
            rows=[coerce_row(record, column_types) for record in records],
        )

    def load_relation(self, relation: str) -> Relation:
        with connection_scope(self._dsn_override) as conn:
            return self._fetch(conn, relation)

    def load_dataset(self) -> Dataset:
        with connection_scope(self._dsn_override) as conn:
            return Dataset(
                customers=self._fetch(conn, CUSTOMERS),
                transactions=self._fetch(conn, TRANSACTIONS),
            )


__all__ = ["PostgresSource"]
