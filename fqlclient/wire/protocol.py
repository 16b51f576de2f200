"""Request and response shapes of the query endpoint.

Request body:
    {"query": {"fql": [...]}, "arguments": {...}}

Response body (success):
    {"data": ..., "summary"?: str, "txn_ts"?: int, "query_tags"?: ..., "stats"?: {...}}

Response body (failure):
    {"error": {"code": str, "message": str}, "summary"?: ..., "txn_ts"?: ...,
     "query_tags"?: ..., "stats"?: {...}}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional, Union

QUERY_PATH = "/query/1"


# =============================================================================
# REQUEST
# =============================================================================

@dataclass(frozen=True)
class QueryOptions:
    """Per-query settings sent as request headers.

    Attributes:
        last_txn_ts: Highest transaction timestamp already observed
        timeout_ms: Server-side query timeout
        linearized: Force strictly serialized reads
        max_contention_retries: Retries the server may make on contention
        query_tags: Tags echoed back in the response and in logs
        traceparent: W3C trace context header
    """
    last_txn_ts: Optional[int] = None
    timeout_ms: Optional[int] = None
    linearized: Optional[bool] = None
    max_contention_retries: Optional[int] = None
    query_tags: Optional[Dict[str, str]] = None
    traceparent: Optional[str] = None

    def merged(self, overrides: Optional["QueryOptions"]) -> "QueryOptions":
        """Return a copy where every field set on ``overrides`` wins."""
        if overrides is None:
            return self
        changes = {
            f.name: getattr(overrides, f.name)
            for f in fields(overrides)
            if getattr(overrides, f.name) is not None
        }
        return replace(self, **changes)


def _header_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_query_tags(tags: Dict[str, str]) -> str:
    return ",".join(f"{key}={value}" for key, value in tags.items())


def parse_query_tags(raw: Union[str, Dict[str, str], None]) -> Dict[str, str]:
    """Normalize ``k=v,k=v`` strings and mappings to a dict."""
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items()}
    tags: Dict[str, str] = {}
    for pair in raw.split(","):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        tags[key] = value
    return tags


def build_headers(options: QueryOptions) -> Dict[str, str]:
    """Translate query options into request headers. Unset options are omitted."""
    headers: Dict[str, str] = {}
    if options.last_txn_ts is not None:
        headers["x-last-txn-ts"] = _header_value(options.last_txn_ts)
    if options.timeout_ms is not None:
        headers["x-timeout-ms"] = _header_value(options.timeout_ms)
    if options.linearized is not None:
        headers["x-linearized"] = _header_value(options.linearized)
    if options.max_contention_retries is not None:
        headers["x-max-contention-retries"] = _header_value(
            options.max_contention_retries
        )
    if options.query_tags:
        headers["x-query-tags"] = format_query_tags(options.query_tags)
    if options.traceparent is not None:
        headers["traceparent"] = options.traceparent
    return headers


@dataclass(frozen=True)
class QueryRequest:
    """A rendered query ready for the transport."""
    query: Dict[str, Any]
    arguments: Dict[str, Any] = field(default_factory=dict)
    options: QueryOptions = field(default_factory=QueryOptions)

    def to_body(self) -> Dict[str, Any]:
        return {"query": self.query, "arguments": self.arguments}


# =============================================================================
# RESPONSE
# =============================================================================

@dataclass(frozen=True)
class QueryStats:
    """Cost and timing figures reported with every response."""
    compute_ops: int = 0
    read_ops: int = 0
    write_ops: int = 0
    query_time_ms: int = 0
    storage_bytes_read: int = 0
    storage_bytes_written: int = 0
    contention_retries: int = 0

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> Optional["QueryStats"]:
        if d is None:
            return None
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})


@dataclass(frozen=True)
class ErrorInfo:
    code: str
    message: str


@dataclass(frozen=True)
class QuerySuccess:
    """Decoded successful response."""
    data: Any
    summary: Optional[str] = None
    txn_ts: Optional[int] = None
    query_tags: Dict[str, str] = field(default_factory=dict)
    stats: Optional[QueryStats] = None


@dataclass(frozen=True)
class QueryFailure:
    """Decoded failure response."""
    error: ErrorInfo
    summary: Optional[str] = None
    txn_ts: Optional[int] = None
    query_tags: Dict[str, str] = field(default_factory=dict)
    stats: Optional[QueryStats] = None


def is_query_failure(body: Any) -> bool:
    return (
        isinstance(body, dict)
        and isinstance(body.get("error"), dict)
        and isinstance(body["error"].get("code"), str)
        and isinstance(body["error"].get("message"), str)
    )


def is_query_success(body: Any) -> bool:
    return isinstance(body, dict) and "data" in body


def _info_fields(body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "summary": body.get("summary"),
        "txn_ts": body.get("txn_ts"),
        "query_tags": parse_query_tags(body.get("query_tags")),
        "stats": QueryStats.from_dict(body.get("stats")),
    }


def success_from_dict(body: Dict[str, Any]) -> QuerySuccess:
    return QuerySuccess(data=body["data"], **_info_fields(body))


def failure_from_dict(body: Dict[str, Any]) -> QueryFailure:
    error = ErrorInfo(code=body["error"]["code"], message=body["error"]["message"])
    return QueryFailure(error=error, **_info_fields(body))


__all__ = [
    "QUERY_PATH",
    "QueryOptions",
    "QueryRequest",
    "QueryStats",
    "ErrorInfo",
    "QuerySuccess",
    "QueryFailure",
    "build_headers",
    "format_query_tags",
    "parse_query_tags",
    "is_query_failure",
    "is_query_success",
    "success_from_dict",
    "failure_from_dict",
]
