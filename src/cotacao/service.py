"""Abstract DatabaseService interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from cotacao.deadline import Deadline
from cotacao.types import Params, Row


class DatabaseService(ABC):
    """Database-agnostic interface for all DB operations.

    Design principles:
    - Stateless: no mutable state beyond the connection pool
    - Thread-safe: each transaction() acquires its own connection
    - DB-agnostic: callers program against this ABC, never a concrete backend
    """

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    @contextmanager
    def transaction(self, deadline: Deadline | None = None) -> Iterator[None]:
        """Context manager: acquires a connection, commits on success, rolls back on error.

        When a deadline is given, waiting for a pooled connection, lock waits and
        statements in flight are all bounded by it. Running past it rolls the
        transaction back and raises DeadlineExceeded.
        """

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""

    @abstractmethod
    def insert(self, table: str, columns: list[str], row: tuple) -> int:
        """Insert a single row and return its row id."""
