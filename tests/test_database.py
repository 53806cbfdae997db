"""Tests for DatabaseService (SQLite backend)."""

import threading

import pytest

from cotacao import create_service
from cotacao.deadline import Deadline, DeadlineExceeded
from cotacao.errors import DatabaseError

LONG_QUERY = """
WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM c WHERE x < 1000000000)
SELECT count(*) AS n FROM c
"""


class TestDatabaseService:
    def test_execute_ddl_and_insert(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        with db_service.transaction():
            db_service.execute("INSERT INTO t (id, name) VALUES (?, ?)", (1, "alice"))
            rows = db_service.execute("SELECT * FROM t")
        assert rows == [{"id": 1, "name": "alice"}]

    def test_insert_returns_row_id(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with db_service.transaction():
            first = db_service.insert("t", ["val"], ("a",))
            second = db_service.insert("t", ["val"], ("b",))
        assert (first, second) == (1, 2)

    def test_transaction_rollback_on_error(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with pytest.raises(ValueError):
            with db_service.transaction():
                db_service.execute("INSERT INTO t (id, val) VALUES (?, ?)", (1, "x"))
                raise ValueError("simulated failure")

        with db_service.transaction():
            rows = db_service.execute("SELECT * FROM t")
        assert rows == []

    def test_driver_error_wrapped(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT NOT NULL)")
        with pytest.raises(DatabaseError, match="NOT NULL"):
            with db_service.transaction():
                db_service.insert("t", ["val"], (None,))

    def test_requires_transaction(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        with pytest.raises(RuntimeError, match="No active transaction"):
            db_service.execute("SELECT 1")

    def test_concurrent_transactions(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val INTEGER)")
        errors = []

        def worker(n):
            try:
                with db_service.transaction():
                    db_service.execute("INSERT INTO t (id, val) VALUES (?, ?)", (n, n * 10))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        with db_service.transaction():
            rows = db_service.execute("SELECT * FROM t ORDER BY id")
        assert len(rows) == 4

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported database URL"):
            create_service("postgresql://localhost/db")

    def test_in_memory_shares_one_database(self):
        service = create_service("sqlite:///:memory:")
        service.connect()
        try:
            service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
            for val in ("a", "b", "c"):
                with service.transaction():
                    service.insert("t", ["val"], (val,))
            with service.transaction():
                rows = service.execute("SELECT val FROM t ORDER BY id")
            assert [r["val"] for r in rows] == ["a", "b", "c"]
        finally:
            service.close()

    def test_connect_failure_wrapped(self, tmp_path):
        service = create_service(f"sqlite:///{tmp_path / 'missing' / 'x.db'}")
        with pytest.raises(DatabaseError, match="cannot open"):
            service.connect()


class TestTransactionDeadline:
    def test_expired_deadline_writes_nothing(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with pytest.raises(DeadlineExceeded):
            with db_service.transaction(Deadline(0)):
                db_service.insert("t", ["val"], ("x",))

        with db_service.transaction():
            assert db_service.execute("SELECT * FROM t") == []

    def test_long_statement_interrupted(self, db_service):
        with pytest.raises(DeadlineExceeded, match="interrupted"):
            with db_service.transaction(Deadline(0.05)):
                db_service.execute(LONG_QUERY)

    def test_connection_usable_after_interrupt(self, db_service):
        with pytest.raises(DeadlineExceeded):
            with db_service.transaction(Deadline(0.05)):
                db_service.execute(LONG_QUERY)

        # Every pooled connection must have its progress handler cleared.
        for _ in range(4):
            with db_service.transaction():
                assert db_service.execute("SELECT 1 AS one") == [{"one": 1}]

    def test_pool_wait_bounded_by_deadline(self, tmp_path):
        service = create_service(f"sqlite:///{tmp_path / 'pool.db'}", pool_size=1)
        service.connect()
        try:
            with service.transaction():
                with pytest.raises(DeadlineExceeded, match="waiting for a database connection"):
                    with service.transaction(Deadline(0.02)):
                        pass
        finally:
            service.close()

    def test_commit_within_deadline(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with db_service.transaction(Deadline(5)):
            db_service.insert("t", ["val"], ("x",))

        with db_service.transaction():
            rows = db_service.execute("SELECT val FROM t")
        assert rows == [{"val": "x"}]
