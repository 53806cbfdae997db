"""CLI entry point for the quote server.

Usage:
    python -m scripts.serve [--db-url sqlite:///exchange.db] [--host 0.0.0.0] [--port 8080] [--mock]
"""

import argparse
import logging
import sys

from cotacao.errors import StartupError
from fx.client import AwesomeApiClient, MockAwesomeApiClient
from fx.server import ServerConfig, create_app, init_server

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    defaults = ServerConfig()
    parser = argparse.ArgumentParser(description="Serve the USD-BRL quote on /cotacao")
    parser.add_argument("--db-url", default=defaults.db_url, help="Database URL")
    parser.add_argument("--host", default=defaults.host, help="Interface to listen on")
    parser.add_argument("--port", type=int, default=defaults.port, help="TCP port")
    parser.add_argument("--mock", action="store_true", help="Use mock upstream client (for testing)")
    args = parser.parse_args()

    config = ServerConfig(db_url=args.db_url, host=args.host, port=args.port)
    rate_client = MockAwesomeApiClient() if args.mock else AwesomeApiClient()

    try:
        context = init_server(config, rate_client)
    except StartupError as e:
        logger.error("Startup failed: %s", e)
        sys.exit(1)

    try:
        logger.info("Listening on %s:%d", config.host, config.port)
        create_app(context).run(host=config.host, port=config.port, threaded=True)
    finally:
        context.close()
        logger.info("Done.")


if __name__ == "__main__":
    main()
