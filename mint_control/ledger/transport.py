"""
Transport protocol for JSON-RPC calls.

Defines the seam where the HTTP implementation plugs in. The read
client and the wallet session depend on this protocol, not on httpx
directly, so tests can swap in canned responses.

Concrete implementations:
    - HttpxTransport (default, uses httpx.AsyncClient)
    - FakeTransport (tests, returns canned responses)

HttpxTransport maps every transport-level failure to LedgerReadError
with a stable code:
    - TIMEOUT: request exceeded the timeout
    - CONNECTION_FAILED: could not connect
    - HTTP_ERROR: any other httpx error, or a >= 400 status
    - INVALID_JSON: body was not a JSON object
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from mint_control.errors import LedgerReadError

logger = logging.getLogger(__name__)


@runtime_checkable
class JsonRpcTransport(Protocol):
    """Async transport for JSON-RPC POST requests."""

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a JSON-RPC request and return the parsed response.

        Args:
            url: The JSON-RPC endpoint URL.
            payload: The JSON-RPC request body (jsonrpc, method, params, id).

        Returns:
            Parsed JSON response as a dict.

        Raises:
            LedgerReadError: On transport-level failures.
        """
        ...


class HttpxTransport:
    """Default transport using httpx.AsyncClient."""

    def __init__(self, timeout: float = 30.0, headers: dict[str, str] | None = None) -> None:
        self._timeout = timeout
        self._headers = headers or {}

    @property
    def timeout(self) -> float:
        return self._timeout

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send JSON-RPC request via httpx."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={
                        "Content-Type": "application/json",
                        "Accept": "application/json",
                        **self._headers,
                    },
                )
        except httpx.TimeoutException as e:
            raise LedgerReadError(
                f"request timed out after {self._timeout}s",
                code="TIMEOUT",
                details={"url": url, "timeout_s": self._timeout},
            ) from e
        except httpx.ConnectError as e:
            raise LedgerReadError(
                f"failed to connect to {url}",
                code="CONNECTION_FAILED",
                details={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise LedgerReadError(
                f"HTTP error: {e}",
                code="HTTP_ERROR",
                details={"url": url, "error": str(e)},
            ) from e

        if response.status_code >= 400:
            raise LedgerReadError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                code="HTTP_ERROR",
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "reason": response.reason_phrase,
                },
            )

        try:
            result = response.json()
        except json.JSONDecodeError as e:
            raise LedgerReadError(
                "response was not valid JSON",
                code="INVALID_JSON",
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "body_preview": response.text[:200] if response.text else "",
                },
            ) from e

        if not isinstance(result, dict):
            raise LedgerReadError(
                "response JSON was not an object",
                code="INVALID_JSON",
                details={"url": url, "type": type(result).__name__},
            )

        logger.debug("%s %s -> %s", url, payload.get("method"), response.status_code)
        return result
