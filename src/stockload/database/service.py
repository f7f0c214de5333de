"""Abstract DatabaseService interface and the per-transaction handle."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

from stockload.database.types import Params, Row


class DatabaseError(Exception):
    """Any failure reported by the driver or the connection pool."""


class Transaction(ABC):
    """Handle bound to one pooled connection for the life of a transaction.

    Obtained from ``DatabaseService.transaction()``; never constructed by callers.
    """

    placeholder = "?"

    def __init__(self, conn: Any):
        self._conn = conn

    @abstractmethod
    def _run(self, sql: str, params: Params) -> tuple[list[Row], int]:
        """Execute one statement, returning (result rows, rowcount)."""

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Execute a single SQL statement and return rows as dicts."""
        rows, _ = self._run(sql, params or ())
        return rows

    def insert(self, table: str, columns: list[str], row: tuple) -> int:
        """Insert one row. Returns the number of rows written."""
        cols = ", ".join(columns)
        placeholders = ", ".join(self.placeholder for _ in columns)
        sql = f"INSERT INTO {table} ({cols}) VALUES ({placeholders})"
        _, rowcount = self._run(sql, row)
        return rowcount

    def insert_ignore(
        self,
        table: str,
        columns: list[str],
        row: tuple,
        conflict_columns: list[str],
    ) -> int:
        """Insert one row unless its conflict key already exists.

        Returns 1 when the row was written, 0 when it was skipped.
        """
        cols = ", ".join(columns)
        placeholders = ", ".join(self.placeholder for _ in columns)
        conflict_cols = ", ".join(conflict_columns)
        sql = (
            f"INSERT INTO {table} ({cols}) VALUES ({placeholders}) "
            f"ON CONFLICT ({conflict_cols}) DO NOTHING"
        )
        _, rowcount = self._run(sql, row)
        return rowcount


class DatabaseService(ABC):
    """Database-agnostic interface for all DB operations.

    Design principles:
    - Stateless: no mutable state beyond the connection pool
    - Explicit handles: each transaction() yields its own Transaction bound
      to one connection, so nothing is looked up implicitly
    - DB-agnostic: callers program against this ABC, never a concrete backend
    """

    dialect: str = ""

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Context manager: acquires a connection, commits on success, rolls back on error."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""

    def ping(self) -> bool:
        """Return True if a pooled connection can run a trivial query."""
        try:
            with self.transaction() as tx:
                tx.execute("SELECT 1")
        except DatabaseError:
            return False
        return True
