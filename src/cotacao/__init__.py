"""cotacao — database service factory and public API."""

from cotacao.service import DatabaseService
from cotacao.sqlite_service import SQLiteDatabaseService

MEMORY_PATH = ":memory:"


def create_service(db_url: str, pool_size: int = 4) -> DatabaseService:
    """Create a DatabaseService from a connection URL.

    Supported schemes:
    - sqlite:///path/to/db  or  sqlite:///:memory:

    Every SQLite connection to :memory: opens its own private database, so an
    in-memory service is pooled over a single connection.
    """
    if db_url.startswith("sqlite"):
        # Extract path: sqlite:///foo.db -> foo.db, sqlite:///:memory: -> :memory:
        path = db_url.split(":///", 1)[1] if ":///" in db_url else MEMORY_PATH
        if path == MEMORY_PATH:
            pool_size = 1
        return SQLiteDatabaseService(path, pool_size)
    raise ValueError(f"Unsupported database URL scheme: {db_url}")
