"""AwesomeAPI client for the USD-BRL bid, with mock support."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import requests

from cotacao.deadline import Deadline, DeadlineExceeded
from cotacao.errors import FetchError

logger = logging.getLogger(__name__)

AWESOMEAPI_URL = "https://economia.awesomeapi.com.br/json/last/USD-BRL"
QUOTE_KEY = "USDBRL"


@dataclass(frozen=True)
class AwesomeApiQuote:
    """One USDBRL entry of the AwesomeAPI payload. All fields arrive as strings."""

    code: str
    codein: str
    name: str
    high: str
    low: str
    var_bid: str
    pct_change: str
    bid: str
    ask: str
    timestamp: str
    create_date: str

    @classmethod
    def from_payload(cls, payload: object) -> "AwesomeApiQuote":
        """Build a quote from the decoded response body.

        Raises:
            FetchError: If the body has no USDBRL object.
        """
        if not isinstance(payload, dict) or not isinstance(payload.get(QUOTE_KEY), dict):
            raise FetchError(f"AwesomeAPI response missing '{QUOTE_KEY}' object")
        entry = payload[QUOTE_KEY]
        return cls(
            code=str(entry.get("code", "")),
            codein=str(entry.get("codein", "")),
            name=str(entry.get("name", "")),
            high=str(entry.get("high", "")),
            low=str(entry.get("low", "")),
            var_bid=str(entry.get("varBid", "")),
            pct_change=str(entry.get("pctChange", "")),
            bid=str(entry.get("bid", "")),
            ask=str(entry.get("ask", "")),
            timestamp=str(entry.get("timestamp", "")),
            create_date=str(entry.get("create_date", "")),
        )

    def bid_value(self) -> float:
        try:
            return float(self.bid)
        except ValueError as e:
            raise FetchError(f"AwesomeAPI bid is not numeric: {self.bid!r}") from e


class RateClient(ABC):
    """Abstract interface for fetching the USD-BRL bid."""

    @abstractmethod
    def fetch_bid(self, deadline: Deadline) -> float:
        """Fetch the current bid, giving up once the deadline passes.

        Raises:
            FetchError: On any network, decoding or parsing failure.
        """


class AwesomeApiClient(RateClient):
    """Real AwesomeAPI client. One attempt per call, no retries."""

    def __init__(self, url: str = AWESOMEAPI_URL):
        self._url = url

    def fetch_quote(self, deadline: Deadline) -> AwesomeApiQuote:
        try:
            deadline.check("AwesomeAPI request")
            resp = requests.get(self._url, timeout=deadline.remaining())
            resp.raise_for_status()
            deadline.check("AwesomeAPI response")
        except (requests.RequestException, DeadlineExceeded) as e:
            raise FetchError(f"AwesomeAPI request failed: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise FetchError(f"AwesomeAPI returned invalid JSON: {e}") from e

        return AwesomeApiQuote.from_payload(payload)

    def fetch_bid(self, deadline: Deadline) -> float:
        quote = self.fetch_quote(deadline)
        value = quote.bid_value()
        logger.info("Fetched %s bid %s (created %s)", quote.code or QUOTE_KEY, value, quote.create_date)
        return value


class MockAwesomeApiClient(RateClient):
    """Mock client returning a fixed bid for local runs and testing."""

    MOCK_BID = "5.1234"

    def fetch_bid(self, deadline: Deadline) -> float:
        deadline.check("mock request")
        return float(self.MOCK_BID)
