"""Error taxonomy shared by the quote server and client.

Nothing here is retried: server-side errors become an HTTP 500 carrying the
error text, client-side errors terminate the process.
"""


class CotacaoError(Exception):
    """Base exception for quote server and client failures."""


class DatabaseError(CotacaoError):
    """Raised by the database layer when the driver reports an error."""


class StartupError(CotacaoError):
    """Raised when the server cannot open its database or create its schema."""


class FetchError(CotacaoError):
    """Upstream quote API unreachable, malformed, or timed out."""


class PersistError(CotacaoError):
    """Storing the fetched quote failed or ran past its deadline."""


class EncodeError(CotacaoError):
    """The JSON response body could not be produced."""


class ClientError(CotacaoError):
    """Any failure in the client's request/parse/write sequence."""
