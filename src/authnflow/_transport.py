"""Transport adapter for authnflow.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Protocol
from urllib.parse import urljoin

import httpx

from .exceptions import MalformedResponseError, TransportError, TransportTimeoutError
from .models.link_models import Operation

logger = logging.getLogger(__name__)

USER_AGENT = "authnflow-python/1.0.0"


class RawResponse(NamedTuple):
    """Undecorated server reply handed back to the state machine."""

    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] | None = None


class Transport(Protocol):
    """What the state machine needs from the network layer.

    ``submit`` issues exactly one request. It must not retry, must raise
    ``TransportError`` when no response arrives, and must return (not raise)
    non-2xx responses.
    """

    async def submit(
        self, operation: Operation, payload: dict[str, Any] | None
    ) -> RawResponse: ...


class HttpTransport:
    """``httpx`` implementation of ``Transport``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        api_key: str | None = None,
        user_agent: str = USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the HTTP transport.

        Args:
            base_url: Org URL that relative hrefs resolve against
            timeout: Request timeout in seconds
            api_key: Optional API token, sent as an SSWS authorization header
            user_agent: User-Agent header value
            client: Pre-built ``httpx.AsyncClient``; the transport will not close it

        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }
        if api_key:
            headers["Authorization"] = f"SSWS {api_key}"

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers)
        if client is not None:
            self._client.headers.update(headers)

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    def resolve(self, href: str) -> str:
        """Resolve an href against the org URL; absolute hrefs are kept."""
        if href.startswith(("http://", "https://")):
            return href
        return urljoin(self.base_url + "/", href.lstrip("/"))

    async def submit(
        self, operation: Operation, payload: dict[str, Any] | None
    ) -> RawResponse:
        """Issue one request for ``operation``.

        Returns:
            The status code, decoded JSON body and headers.

        Raises:
            TransportTimeoutError: For timeouts
            TransportError: For other network-level failures
            MalformedResponseError: If a successful response body is not a
                JSON object

        """
        url = self.resolve(operation.href)
        logger.debug("%s %s (%s)", operation.method, url, operation.name)
        try:
            response = await self._client.request(
                operation.method,
                url,
                json=payload if operation.method != "GET" else None,
                params=operation.query or None,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError("Request timeout") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}") from e

        return RawResponse(
            response.status_code,
            self._parse_body(response),
            {key.lower(): value for key, value in response.headers.items()},
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body; an empty body decodes to ``{}``.

        Error responses that are not a JSON object (gateway pages and the
        like) decode to an error body carrying the raw text.
        """
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            if response.is_error:
                return {"errorSummary": response.text}
            msg = f"Response body is not JSON (HTTP {response.status_code})"
            raise MalformedResponseError(msg, details=response.text) from e
        if not isinstance(body, dict):
            if response.is_error:
                return {"errorSummary": response.text}
            raise MalformedResponseError("Response body is not a JSON object", details=body)
        return body
