"""Base JSON-RPC client for Browser Use Cloud communication"""

import json
import time
from typing import Any, Optional

import httpx
import structlog

from ..errors import (
    BrowserUseAPIError,
    MalformedResponseError,
    MissingCredentialError,
    ProviderError,
    TransportError,
)

logger = structlog.get_logger()

API_KEY_HEADER = "X-Browser-Use-API-Key"


class BaseAPIClient:
    """Shared JSON-RPC over HTTP functionality for Browser Use clients"""

    def __init__(self, base_url: str, api_key: str, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.client: Optional[httpx.AsyncClient] = None
        logger.debug("API client initialized", base_url=self.base_url)

    async def __aenter__(self):
        """Async context manager entry"""
        if not self.api_key:
            raise MissingCredentialError()
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={
                "Content-Type": "application/json",
                API_KEY_HEADER: self.api_key,
            },
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self.client:
            await self.client.aclose()
            self.client = None

    def _build_request(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "method": method,
            "id": int(time.time() * 1000),
            "params": params,
        }

    async def _rpc(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        """Make one JSON-RPC call and return the decoded JSON envelope"""
        if not self.client:
            raise BrowserUseAPIError(
                "API client not initialized. Use async context manager."
            )

        payload = self._build_request(method, params)

        try:
            logger.debug("API request", method=method, url=self.base_url)
            response = await self.client.request("POST", self.base_url, json=payload)
            response.raise_for_status()
            envelope = response.json()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("HTTP error", status=status, url=self.base_url)
            raise TransportError(
                f"API request failed: {status}", status_code=status
            ) from e

        except httpx.RequestError as e:
            logger.error("Request error", error=str(e), url=self.base_url)
            raise TransportError(f"Request failed: {str(e)}") from e

        except ValueError as e:
            raise MalformedResponseError(
                "Invalid JSON response from API", details={"error": str(e)}
            ) from e

        if not isinstance(envelope, dict):
            raise MalformedResponseError("Invalid response from API")

        error = envelope.get("error")
        if error:
            message = (
                error.get("message", "Unknown error")
                if isinstance(error, dict)
                else str(error)
            )
            logger.error("Provider error", method=method, error=message)
            raise ProviderError(message, details=envelope)

        logger.debug("API response", status=response.status_code)
        return envelope

    async def _call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """
        Call a remote tool and decode its text content as JSON.

        The provider answers ``tools/call`` with
        ``{"result": {"content": [{"type": "text", "text": "<json>"}]}}``.

        Raises:
            MalformedResponseError: If the content is missing or not JSON
        """
        envelope = await self._rpc(
            "tools/call", {"name": name, "arguments": arguments}
        )
        return self._extract_content(envelope)

    def _extract_content(self, envelope: dict[str, Any]) -> dict[str, Any]:
        result = envelope.get("result") or {}
        content = result.get("content") if isinstance(result, dict) else None
        text = None
        if isinstance(content, list) and content and isinstance(content[0], dict):
            text = content[0].get("text")

        if not text:
            raise MalformedResponseError("Empty response from API", details=envelope)

        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedResponseError(
                "Invalid response from API", details={"text": text}
            ) from e

        if not isinstance(data, dict):
            raise MalformedResponseError(
                "Invalid response from API", details={"text": text}
            )
        return data
