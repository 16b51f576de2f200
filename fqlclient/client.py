"""Async client for the query endpoint.

Usage:
    from fqlclient import Client, fql

    async with Client(secret="...") as client:
        result = await client.query(fql(["Authors.byGenre(", ")"], "sci-fi"))
        print(result.data, result.stats)
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from fqlclient.errors import ClientError, ProtocolError, classify_failure
from fqlclient.http_client import HTTPClient, HTTPRequest, HttpxClient
from fqlclient.logging import get_component_logger
from fqlclient.protocols import LoggerProtocol
from fqlclient.query_builder import QueryBuilder
from fqlclient.settings import ClientSettings, get_settings
from fqlclient.wire.protocol import (
    QUERY_PATH,
    QueryOptions,
    QueryRequest,
    QuerySuccess,
    build_headers,
    failure_from_dict,
    is_query_failure,
    is_query_success,
    success_from_dict,
)
from fqlclient.wire.tagged import TaggedTypeFormat


class Client:
    """Sends queries and decodes their responses.

    The client remembers the highest transaction timestamp it has seen and
    sends it with later queries, so reads never observe a state older than
    one this client already saw.

    Args:
        settings: Settings to use; defaults to the global settings
        secret: Overrides ``settings.secret``
        endpoint: Overrides ``settings.endpoint``
        http_client: Transport; defaults to an HttpxClient
        logger: Logger to bind; defaults to the context logger

    Raises:
        ClientError: No secret was supplied or configured.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        secret: Optional[str] = None,
        endpoint: Optional[str] = None,
        http_client: Optional[HTTPClient] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._settings = settings or get_settings()
        self._logger = get_component_logger("Client", logger)

        self._secret = secret or self._settings.secret
        if not self._secret:
            raise ClientError(
                "You must provide a secret to the driver. Set it in an "
                "environment variable named FAUNA_SECRET or pass it to the "
                "Client constructor."
            )
        self._endpoint = (endpoint or self._settings.endpoint).rstrip("/")

        self._http_client = http_client or HttpxClient(
            timeout=self._settings.timeout_ms / 1000.0,
            max_conns=self._settings.max_conns,
            logger=logger,
        )
        self._defaults = QueryOptions(
            timeout_ms=self._settings.timeout_ms,
            linearized=self._settings.linearized,
            max_contention_retries=self._settings.max_contention_retries,
            query_tags=self._settings.query_tags,
            traceparent=self._settings.traceparent,
        )
        self._last_txn_ts: Optional[int] = None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def last_txn_ts(self) -> Optional[int]:
        return self._last_txn_ts

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http_client.close()

    def build_headers(self, options: Optional[QueryOptions] = None) -> Dict[str, str]:
        """Headers for a query: auth, format, client defaults, then ``options``."""
        effective = self._defaults.merged(options)
        if effective.last_txn_ts is None and self._last_txn_ts is not None:
            effective = effective.merged(QueryOptions(last_txn_ts=self._last_txn_ts))
        return {
            "Authorization": f"Bearer {self._secret}",
            "Content-Type": "application/json",
            "X-Format": "tagged",
            **build_headers(effective),
        }

    async def query(
        self,
        request: Union[QueryBuilder, QueryRequest],
        options: Optional[QueryOptions] = None,
    ) -> QuerySuccess:
        """Run a query.

        Args:
            request: A QueryBuilder (rendered here) or an already rendered
                QueryRequest
            options: Per-query options; override the request's own options

        Returns:
            QuerySuccess with decoded data.

        Raises:
            NetworkError: No response was obtained.
            ProtocolError: The response body is not a query response.
            ServiceError: The database reported a failure (a subclass is
                chosen by status and error code).
        """
        if isinstance(request, QueryBuilder):
            request = request.to_query(options)
        effective_options = request.options.merged(options)

        url = f"{self._endpoint}{QUERY_PATH}"
        http_request = HTTPRequest(
            url=url,
            data=json.dumps(request.to_body()),
            headers=self.build_headers(effective_options),
        )

        self._logger.debug("query_sending", url=url, arguments=len(request.arguments))
        response = await self._http_client.request(http_request)

        body = self._decode_body(response.body, response.status)
        self._observe_txn_ts(body)

        if is_query_failure(body):
            failure = failure_from_dict(body)
            error = classify_failure(failure, response.status)
            self._logger.warning(
                "query_failed",
                code=failure.error.code,
                http_status=response.status,
                error_type=type(error).__name__,
            )
            raise error

        if response.status >= 400 or not is_query_success(body):
            raise ProtocolError(
                f"Response is neither a query success nor a query failure "
                f"(status {response.status})",
                http_status=response.status,
            )

        success = success_from_dict(body)
        self._logger.debug(
            "query_succeeded",
            txn_ts=success.txn_ts,
            summary=success.summary,
            query_tags=success.query_tags,
        )
        return success

    def _decode_body(self, text: str, http_status: int) -> Any:
        try:
            return TaggedTypeFormat.decode(text)
        except json.JSONDecodeError as e:
            raise ProtocolError(
                f"Response body is not valid JSON (status {http_status})",
                http_status=http_status,
            ) from e

    def _observe_txn_ts(self, body: Any) -> None:
        if not isinstance(body, dict):
            return
        txn_ts = body.get("txn_ts")
        if isinstance(txn_ts, int) and not isinstance(txn_ts, bool):
            if self._last_txn_ts is None or txn_ts > self._last_txn_ts:
                self._last_txn_ts = txn_ts

    def __repr__(self) -> str:
        return f"Client(endpoint={self._endpoint!r})"


__all__ = ["Client"]
