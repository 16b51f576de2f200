"""HTTP transport for the query endpoint.

The transport only moves bytes: it never interprets status codes or bodies.
Non-2xx responses are returned like any other; the client classifies them.
Any failure to obtain a response is raised as NetworkError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, runtime_checkable

import httpx

from fqlclient.errors import NetworkError
from fqlclient.logging import get_component_logger
from fqlclient.protocols import LoggerProtocol


@dataclass(frozen=True)
class HTTPRequest:
    url: str
    data: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HTTPResponse:
    status: int
    headers: Dict[str, str]
    body: str


@runtime_checkable
class HTTPClient(Protocol):
    """Anything that can send an HTTPRequest and return an HTTPResponse."""

    async def request(self, req: HTTPRequest) -> HTTPResponse: ...

    async def close(self) -> None: ...


class HttpxClient:
    """HTTPClient backed by a shared ``httpx.AsyncClient``.

    The underlying client is opened on first use and reused until
    ``close()``.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        max_conns: int = 10,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._logger = get_component_logger("HttpxClient", logger)
        self._timeout = timeout
        self._limits = httpx.Limits(max_connections=max_conns)
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, limits=self._limits)
        return self._client

    async def request(self, req: HTTPRequest) -> HTTPResponse:
        """POST ``req``.

        Raises:
            NetworkError: The request failed before a response arrived.
        """
        client = self._get_client()
        try:
            response = await client.post(req.url, content=req.data, headers=req.headers)
        except httpx.HTTPError as e:
            self._logger.warning(
                "http_request_failed",
                url=req.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NetworkError() from e

        return HTTPResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def __repr__(self) -> str:
        return f"HttpxClient(timeout={self._timeout})"


__all__ = [
    "HTTPClient",
    "HTTPRequest",
    "HTTPResponse",
    "HttpxClient",
]
