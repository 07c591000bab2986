"""
Database connection factory utilities for the banking data quality toolkit.

Checks only ever read, and each evaluation run opens its own connection through
`connection_scope`, which guarantees the connection is closed when the run
finishes or fails.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

import psycopg
from psycopg import Connection, sql
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bankdq.config import Settings, get_settings
from bankdq.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Parameters
    ----------
    dsn : str | None
        Explicit DSN; defaults to the one built from settings.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


def apply_statement_timeout(cursor: psycopg.Cursor, timeout_ms: int) -> None:
    """Bound every statement issued on `cursor`'s session. 0 disables the limit."""
    cursor.execute(
        sql.SQL("SET statement_timeout = {}").format(sql.Literal(int(timeout_ms)))
    )


@contextmanager
def connection_scope(
    dsn: Optional[str] = None, read_only: bool = True
) -> Generator[Connection, None, None]:
    """
    Open one connection for an evaluation run and always release it.

    Example
    -------
        with connection_scope() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
    """
    conn = get_sync_connection(dsn)
    try:
        if read_only:
            conn.read_only = True
        yield conn
    finally:
        conn.close()
        log.debug("Connection released")


__all__ = [
    "apply_statement_timeout",
    "build_dsn",
    "connection_scope",
    "get_sync_connection",
]
