"""PostgreSQL implementation of DatabaseService."""

import logging
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Iterator

import psycopg2
import psycopg2.extras

from stockload.database.service import DatabaseError, DatabaseService, Transaction
from stockload.database.types import Params, Row

logger = logging.getLogger(__name__)


class PostgresTransaction(Transaction):
    placeholder = "%s"

    def _run(self, sql: str, params: Params) -> tuple[list[Row], int]:
        try:
            with self._conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                if cur.description is None:
                    return [], cur.rowcount
                return [dict(row) for row in cur.fetchall()], cur.rowcount
        except psycopg2.Error as e:
            raise DatabaseError(str(e)) from e


class PostgresDatabaseService(DatabaseService):
    """PostgreSQL backend using psycopg2.

    Thread-safe via a connection pool (Queue). Each transaction() call
    acquires a dedicated connection and returns it on exit. Connections
    that were closed underneath us are replaced on release.
    """

    dialect = "postgresql"

    def __init__(self, dsn: str, pool_size: int = 4):
        self._dsn = dsn
        self._pool_size = pool_size
        self._pool: Queue = Queue(maxsize=pool_size)

    def _open(self):
        conn = psycopg2.connect(self._dsn)
        conn.autocommit = False
        return conn

    def connect(self) -> None:
        try:
            for _ in range(self._pool_size):
                self._pool.put(self._open())
        except psycopg2.Error as e:
            raise DatabaseError(f"Cannot connect to PostgreSQL: {e}") from e

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self):
        try:
            return self._pool.get(timeout=30)
        except Empty as e:
            raise DatabaseError("Timed out waiting for a database connection") from e

    def _release(self, conn) -> None:
        if conn.closed:
            try:
                conn = self._open()
            except psycopg2.Error:
                logger.error("Could not replace a dropped connection", exc_info=True)
                return
        self._pool.put(conn)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        conn = self._acquire()
        try:
            yield PostgresTransaction(conn)
            try:
                conn.commit()
            except psycopg2.Error as e:
                raise DatabaseError(f"Commit failed: {e}") from e
        except BaseException:
            if not conn.closed:
                try:
                    conn.rollback()
                except psycopg2.Error:
                    logger.warning("Rollback failed", exc_info=True)
            raise
        finally:
            self._release(conn)

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            with conn.cursor() as cur:
                for statement in sql.split(";"):
                    statement = statement.strip()
                    if statement:
                        cur.execute(statement)
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            raise DatabaseError(str(e)) from e
        finally:
            self._release(conn)
