"""CLI entry point for the quote client.

Usage:
    python -m scripts.fetch_quote [--url http://localhost:8080/cotacao] [--output cotacao.txt]
"""

import argparse
import logging
import sys

from cotacao.errors import ClientError
from fx.quote_client import OUTPUT_PATH, SERVER_URL, run_client

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch the quote from the local server into a file")
    parser.add_argument("--url", default=SERVER_URL, help="Quote server endpoint")
    parser.add_argument("--output", default=OUTPUT_PATH, help="File to write the quote to")
    args = parser.parse_args()

    try:
        run_client(args.url, args.output)
    except ClientError as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
