"""fqlclient - async client for a document database with a tagged JSON wire format.

Sub-packages and modules:
- wire/          - tagged-type codec and query endpoint request/response shapes
- values         - DateStub, TimeStub, DocumentReference, Module
- query_builder  - fql() templates with literal and sub-query interpolation
- client         - Client.query(): render, send, decode, classify
- http_client    - httpx transport
- errors         - exception taxonomy and failure classification
- settings       - pydantic-settings configuration (FAUNA_* env vars)
- logging        - structlog-backed loggers

Usage:
    from fqlclient import Client, fql

    async with Client(secret="...") as client:
        result = await client.query(fql(["Authors.create(", ")"], {"firstName": "a"}))
"""

from fqlclient.client import Client
from fqlclient.errors import (
    AuthenticationError,
    AuthorizationError,
    ClientError,
    DateTimeFormatError,
    DocumentFormatError,
    FqlError,
    NetworkError,
    PrecisionLossError,
    ProtocolError,
    QueryCheckError,
    QueryRuntimeError,
    QueryTemplateError,
    QueryTimeoutError,
    ServiceError,
    ServiceInternalError,
    ServiceTimeoutError,
    ThrottlingError,
)
from fqlclient.query_builder import QueryBuilder, fql, fql_template
from fqlclient.settings import ENDPOINTS, ClientSettings
from fqlclient.values import DateStub, DocumentReference, Module, TimeStub
from fqlclient.wire import QueryOptions, QueryRequest, QuerySuccess, TaggedTypeFormat

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientSettings",
    "ENDPOINTS",
    "QueryBuilder",
    "QueryOptions",
    "QueryRequest",
    "QuerySuccess",
    "TaggedTypeFormat",
    "fql",
    "fql_template",
    "DateStub",
    "DocumentReference",
    "Module",
    "TimeStub",
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
]
