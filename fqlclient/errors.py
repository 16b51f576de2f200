"""Exception taxonomy for fqlclient.

Two families:
- Local errors raised while encoding values, parsing dates or building
  queries (PrecisionLossError, DateTimeFormatError, DocumentFormatError,
  QueryTemplateError). These also subclass ValueError.
- Request errors raised by Client.query: NetworkError when the request never
  got a response, ProtocolError when the response is not understood, and a
  ServiceError subclass when the server reported a failure.

Usage:
    try:
        result = await client.query(fql("Authors.all()"))
    except QueryCheckError as e:
        print(e.code, e.summary)
    except ServiceError as e:
        print(e.http_status, e.code)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

if TYPE_CHECKING:
    from fqlclient.wire.protocol import QueryFailure


class FqlError(Exception):
    """Base class for every error raised by fqlclient."""
    pass


# =============================================================================
# LOCAL ERRORS
# =============================================================================

class PrecisionLossError(FqlError, ValueError):
    """A number cannot be represented by any wire numeric tag."""
    pass


class DateTimeFormatError(FqlError, ValueError):
    """A date or time string does not follow the strict ISO-8601 grammar."""
    pass


class DocumentFormatError(FqlError, ValueError):
    """A document reference payload is structurally invalid."""
    pass


class QueryTemplateError(FqlError, ValueError):
    """Fragment and interpolation counts of a query template do not line up."""
    pass


class ClientError(FqlError):
    """The client was misused or misconfigured."""
    pass


# =============================================================================
# REQUEST ERRORS
# =============================================================================

class NetworkError(FqlError):
    """The request did not complete at the network level."""

    def __init__(self, message: str = "The network connection encountered a problem."):
        super().__init__(message)


class ProtocolError(FqlError):
    """The response could not be interpreted as a query success or failure."""

    def __init__(self, message: str, http_status: int):
        self.http_status = http_status
        super().__init__(message)


class ServiceError(FqlError):
    """The database reported a failure for the query.

    Attributes:
        code: Wire error code, e.g. "invalid_query"
        http_status: HTTP status of the response
        summary: Optional human readable summary of the failure
        query_tags: Tags echoed back by the server
        stats: Query statistics, when present
        txn_ts: Transaction timestamp, when present
    """

    def __init__(self, failure: "QueryFailure", http_status: int):
        self.code = failure.error.code
        self.http_status = http_status
        self.summary = failure.summary
        self.query_tags = failure.query_tags
        self.stats = failure.stats
        self.txn_ts = failure.txn_ts
        super().__init__(failure.error.message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"http_status={self.http_status}, message={str(self)!r})"
        )


class QueryRuntimeError(ServiceError):
    """The query failed while running."""
    pass


class QueryCheckError(ServiceError):
    """The query failed validation before it ran."""
    pass


class QueryTimeoutError(ServiceError):
    """The query exceeded its client-supplied timeout."""
    pass


class AuthenticationError(ServiceError):
    """The secret was not accepted."""
    pass


class AuthorizationError(ServiceError):
    """The secret lacks permission for the query."""
    pass


class ThrottlingError(ServiceError):
    """The request was rate limited."""
    pass


class ServiceInternalError(ServiceError):
    """The service failed unexpectedly."""
    pass


class ServiceTimeoutError(ServiceError):
    """The service timed out before completing the query."""
    pass


# =============================================================================
# CLASSIFICATION
# =============================================================================

QUERY_CHECK_FAILURE_CODES = frozenset({
    "invalid_function_definition",
    "invalid_identifier",
    "invalid_query",
    "invalid_syntax",
    "invalid_type",
})

_STATUS_ERRORS: Dict[int, Type[ServiceError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    429: ThrottlingError,
    440: QueryTimeoutError,
    500: ServiceInternalError,
    503: ServiceTimeoutError,
}


def classify_failure(failure: "QueryFailure", http_status: int) -> ServiceError:
    """Map an HTTP status and wire error code onto a ServiceError subclass."""
    if http_status == 400:
        if failure.error.code in QUERY_CHECK_FAILURE_CODES:
            return QueryCheckError(failure, http_status)
        return QueryRuntimeError(failure, http_status)
    error_cls = _STATUS_ERRORS.get(http_status, ServiceError)
    return error_cls(failure, http_status)


__all__ = [
    "FqlError",
    "PrecisionLossError",
    "DateTimeFormatError",
    "DocumentFormatError",
    "QueryTemplateError",
    "ClientError",
    "NetworkError",
    "ProtocolError",
    "ServiceError",
    "QueryRuntimeError",
    "QueryCheckError",
    "QueryTimeoutError",
    "AuthenticationError",
    "AuthorizationError",
    "ThrottlingError",
    "ServiceInternalError",
    "ServiceTimeoutError",
    "QUERY_CHECK_FAILURE_CODES",
    "classify_failure",
]
