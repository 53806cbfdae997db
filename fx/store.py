"""Exchange rate persistence and schema."""

import logging

from cotacao.deadline import Deadline, DeadlineExceeded
from cotacao.errors import DatabaseError, PersistError
from cotacao.service import DatabaseService

logger = logging.getLogger(__name__)

EXCHANGE_DDL = """
CREATE TABLE IF NOT EXISTS exchange (
    id          INTEGER       PRIMARY KEY,
    created_at  DATETIME      NOT NULL DEFAULT CURRENT_TIMESTAMP,
    value       NUMERIC(8,4)  NOT NULL
);
"""

EXCHANGE_TABLE = "exchange"
EXCHANGE_COLUMNS = ["value"]


def ensure_exchange_schema(service: DatabaseService) -> None:
    """Create the exchange table if it doesn't exist."""
    service.execute_ddl(EXCHANGE_DDL)


def store_rate(service: DatabaseService, value: float, deadline: Deadline) -> int:
    """Append one exchange row and return its id.

    Append-only: rows are never updated or deleted. A failure or an exceeded
    deadline rolls the insert back, so no partial row is left behind.
    """
    try:
        with service.transaction(deadline):
            row_id = service.insert(EXCHANGE_TABLE, EXCHANGE_COLUMNS, (value,))
    except (DatabaseError, DeadlineExceeded) as e:
        raise PersistError(f"storing rate {value}: {e}") from e
    logger.info("Stored rate %s as exchange row %d", value, row_id)
    return row_id


def latest_rates(service: DatabaseService, limit: int = 10) -> list[dict]:
    """Most recent exchange rows, newest first."""
    with service.transaction():
        return service.execute(
            f"SELECT id, created_at, value FROM {EXCHANGE_TABLE} ORDER BY id DESC LIMIT ?",
            (limit,),
        )
