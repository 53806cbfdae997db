"""SQLite implementation of DatabaseService."""

import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Iterator

from cotacao.deadline import Deadline, DeadlineExceeded
from cotacao.errors import DatabaseError
from cotacao.service import DatabaseService
from cotacao.types import Params, Row

BUSY_TIMEOUT_MS = 5000
# VM instructions between deadline checks while a statement runs.
PROGRESS_STEPS = 100


class SQLiteDatabaseService(DatabaseService):
    """SQLite backend using stdlib sqlite3.

    Thread-safe via a connection pool (Queue). Each transaction() call
    acquires a dedicated connection and returns it on exit. Concurrent
    writers are serialized by SQLite's own locking.
    """

    def __init__(self, db_path: str, pool_size: int = 4):
        self._db_path = db_path
        self._pool_size = pool_size
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=pool_size)
        self._local = threading.local()

    def connect(self) -> None:
        try:
            for _ in range(self._pool_size):
                conn = sqlite3.connect(
                    self._db_path, timeout=BUSY_TIMEOUT_MS / 1000, check_same_thread=False
                )
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA foreign_keys=ON")
                self._pool.put(conn)
        except sqlite3.Error as e:
            self.close()
            raise DatabaseError(f"cannot open {self._db_path}: {e}") from e

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self, deadline: Deadline | None = None) -> sqlite3.Connection:
        if deadline is None:
            return self._pool.get(timeout=30)
        try:
            conn = self._pool.get(timeout=deadline.remaining())
        except Empty:
            raise DeadlineExceeded("waiting for a database connection: deadline exceeded")
        if deadline.expired():
            self._release(conn)
            raise DeadlineExceeded("database transaction: deadline exceeded")
        return conn

    def _release(self, conn: sqlite3.Connection) -> None:
        self._pool.put(conn)

    def _bind_deadline(self, conn: sqlite3.Connection, deadline: Deadline | None) -> None:
        """Bound lock waits and running statements by the deadline, or clear the bound."""
        if deadline is None:
            conn.set_progress_handler(None, 0)
            conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
            return
        conn.execute(f"PRAGMA busy_timeout = {int(deadline.remaining() * 1000)}")
        # A truthy return from the handler interrupts the statement in flight.
        conn.set_progress_handler(deadline.expired, PROGRESS_STEPS)

    def _get_conn(self) -> sqlite3.Connection:
        """Get the connection for the current transaction."""
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            return conn
        raise RuntimeError(
            "No active transaction. Wrap calls in a `with service.transaction():` block."
        )

    @contextmanager
    def transaction(self, deadline: Deadline | None = None) -> Iterator[None]:
        conn = self._acquire(deadline)
        self._local.conn = conn
        try:
            if deadline is not None:
                self._bind_deadline(conn, deadline)
            yield
            if deadline is not None:
                deadline.check("database commit")
                self._bind_deadline(conn, None)
            conn.commit()
        except Exception as e:
            if deadline is not None:
                self._bind_deadline(conn, None)
            conn.rollback()
            if isinstance(e, sqlite3.Error):
                if deadline is not None and deadline.expired():
                    raise DeadlineExceeded(f"database operation interrupted: {e}") from e
                raise DatabaseError(str(e)) from e
            raise
        finally:
            self._local.conn = None
            self._release(conn)

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        cursor = conn.execute(sql, params or ())
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            conn.executescript(sql)
            conn.commit()
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e
        finally:
            self._release(conn)

    def insert(self, table: str, columns: list[str], row: tuple) -> int:
        cols = ", ".join(columns)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({cols}) VALUES ({placeholders})"
        cursor = self._get_conn().execute(sql, row)
        return cursor.lastrowid
