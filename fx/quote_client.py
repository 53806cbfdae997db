"""Polls the local quote server once and writes the result to a file."""

import logging
from pathlib import Path

import requests

from cotacao.deadline import Deadline, DeadlineExceeded
from cotacao.errors import ClientError

logger = logging.getLogger(__name__)

SERVER_URL = "http://localhost:8080/cotacao"
OUTPUT_PATH = "cotacao.txt"
CLIENT_TIMEOUT = 0.300
QUOTE_FORMAT = "Dólar: {value:.4f}"


def fetch_quote(url: str, deadline: Deadline) -> float:
    """GET the server and decode {"value": <number>}.

    Raises:
        ClientError: On connection failure, timeout, non-200 status or a bad body.
    """
    try:
        deadline.check("quote request")
        resp = requests.get(url, timeout=deadline.remaining())
    except (requests.RequestException, DeadlineExceeded) as e:
        raise ClientError(f"request to {url} failed: {e}") from e

    if resp.status_code != 200:
        raise ClientError(f"{url} returned {resp.status_code}: {resp.text.strip()}")

    try:
        payload = resp.json()
    except ValueError as e:
        raise ClientError(f"{url} returned invalid JSON: {e}") from e

    value = payload.get("value") if isinstance(payload, dict) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ClientError(f"{url} response has no numeric 'value': {payload!r}")
    return float(value)


def write_quote(path: str | Path, value: float) -> None:
    """Write the formatted quote, replacing any previous content."""
    try:
        Path(path).write_text(QUOTE_FORMAT.format(value=value), encoding="utf-8")
    except OSError as e:
        raise ClientError(f"writing {path}: {e}") from e


def run_client(
    url: str = SERVER_URL,
    output: str | Path = OUTPUT_PATH,
    timeout: float = CLIENT_TIMEOUT,
) -> float:
    """Fetch the quote once and write it. Nothing is written if the fetch fails."""
    value = fetch_quote(url, Deadline(timeout))
    write_quote(output, value)
    logger.info("Wrote %s to %s", QUOTE_FORMAT.format(value=value), output)
    return value
