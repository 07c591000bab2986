"""
Infrastructure package for the banking data quality toolkit.

Centralizes database connectivity concerns (DSN composition, retrying
connection factory, per-run connection scope). Keep this layer focused on I/O
and resource management, decoupled from check logic.
"""

from bankdq.infrastructure.db_factory import (
    apply_statement_timeout,
    build_dsn,
    connection_scope,
    get_sync_connection,
)

__all__ = [
    "apply_statement_timeout",
    "build_dsn",
    "connection_scope",
    "get_sync_connection",
]
