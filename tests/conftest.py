"""Shared test fixtures."""

import pytest

from cotacao import create_service
from fx.store import ensure_exchange_schema


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def exchange_service(db_service):
    """DatabaseService with the exchange table already created."""
    ensure_exchange_schema(db_service)
    return db_service
