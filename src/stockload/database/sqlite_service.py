"""SQLite implementation of DatabaseService."""

import logging
import sqlite3
from contextlib import contextmanager
from decimal import Decimal
from queue import Empty, Queue
from typing import Iterator

from stockload.database.service import DatabaseError, DatabaseService, Transaction
from stockload.database.types import Params, Row

logger = logging.getLogger(__name__)

# NUMERIC columns convert the text form back to a number on storage.
sqlite3.register_adapter(Decimal, str)


class SQLiteTransaction(Transaction):
    placeholder = "?"

    def _run(self, sql: str, params: Params) -> tuple[list[Row], int]:
        try:
            cursor = self._conn.execute(sql, params)
            if cursor.description is None:
                return [], cursor.rowcount
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()], cursor.rowcount
        except (sqlite3.Error, OverflowError) as e:
            raise DatabaseError(str(e)) from e


class SQLiteDatabaseService(DatabaseService):
    """SQLite backend using stdlib sqlite3.

    Thread-safe via a connection pool (Queue). Each transaction() call
    acquires a dedicated connection and returns it on exit.
    """

    dialect = "sqlite"

    def __init__(self, db_path: str, pool_size: int = 4):
        self._db_path = db_path
        self._pool_size = pool_size
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=pool_size)

    def connect(self) -> None:
        try:
            for _ in range(self._pool_size):
                conn = sqlite3.connect(self._db_path, check_same_thread=False)
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA foreign_keys=ON")
                self._pool.put(conn)
        except sqlite3.Error as e:
            raise DatabaseError(f"Cannot open {self._db_path}: {e}") from e

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self) -> sqlite3.Connection:
        try:
            return self._pool.get(timeout=30)
        except Empty as e:
            raise DatabaseError("Timed out waiting for a database connection") from e

    def _release(self, conn: sqlite3.Connection) -> None:
        self._pool.put(conn)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        conn = self._acquire()
        try:
            yield SQLiteTransaction(conn)
            try:
                conn.commit()
            except sqlite3.Error as e:
                raise DatabaseError(f"Commit failed: {e}") from e
        except BaseException:
            try:
                conn.rollback()
            except sqlite3.Error:
                logger.warning("Rollback failed on %s", self._db_path, exc_info=True)
            raise
        finally:
            self._release(conn)

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            conn.executescript(sql)
            conn.commit()
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e
        finally:
            self._release(conn)
