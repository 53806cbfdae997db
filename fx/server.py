"""Flask app serving the USD-BRL bid on GET /cotacao.

Each request fetches the bid upstream, appends it to the exchange table and
returns it as {"value": <float>}. Any stage failing short-circuits into a
500 with the error text; nothing is retried.
"""

import logging
from dataclasses import dataclass

from flask import Flask, Response, json

from cotacao import create_service
from cotacao.deadline import Deadline
from cotacao.errors import CotacaoError, DatabaseError, EncodeError, StartupError
from cotacao.service import DatabaseService
from fx.client import AwesomeApiClient, RateClient
from fx.store import ensure_exchange_schema, store_rate

logger = logging.getLogger(__name__)

# Per-request deadlines in seconds. Not user-configurable.
FETCH_TIMEOUT = 0.200
PERSIST_TIMEOUT = 0.010


@dataclass(frozen=True)
class ServerConfig:
    db_url: str = "sqlite:///exchange.db"
    host: str = "0.0.0.0"
    port: int = 8080
    pool_size: int = 4


@dataclass
class ServerContext:
    """Everything a request handler needs, built once at startup."""

    config: ServerConfig
    service: DatabaseService
    rate_client: RateClient

    def close(self) -> None:
        self.service.close()


def init_server(config: ServerConfig, rate_client: RateClient | None = None) -> ServerContext:
    """Open the database and create the exchange table.

    Raises:
        StartupError: If the database cannot be opened or the schema created.
    """
    try:
        service = create_service(config.db_url, config.pool_size)
    except ValueError as e:
        raise StartupError(str(e)) from e

    try:
        service.connect()
        ensure_exchange_schema(service)
    except DatabaseError as e:
        service.close()
        raise StartupError(f"database {config.db_url}: {e}") from e

    logger.info("Database ready at %s", config.db_url)
    return ServerContext(config, service, rate_client or AwesomeApiClient())


def encode_quote(value: float) -> str:
    """Serialize the quote with the active app's JSON provider."""
    try:
        return json.dumps({"value": value}, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"encoding value {value!r}: {e}") from e


def create_app(context: ServerContext) -> Flask:
    app = Flask(__name__)

    @app.errorhandler(CotacaoError)
    def handle_error(e: CotacaoError):
        logger.warning("GET /cotacao failed: %s", e)
        return Response(str(e), status=500, mimetype="text/plain")

    @app.route("/cotacao", methods=["GET"])
    def cotacao():
        # Both deadlines start when their stage starts; persist needs the fetched value.
        value = context.rate_client.fetch_bid(Deadline(FETCH_TIMEOUT))
        store_rate(context.service, value, Deadline(PERSIST_TIMEOUT))
        return Response(encode_quote(value), status=200, mimetype="application/json")

    return app
