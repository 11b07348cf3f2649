"""Anthropic Messages API client adapter."""

import logging

import httpx

from quota_proxy.adapters.upstream.base import AbstractUpstreamClient, UpstreamResponse
from quota_proxy.core.errors import UpstreamAppError

logger = logging.getLogger(__name__)

# Upstream response headers worth relaying to the caller
_RELAYED_HEADERS = ("content-type", "request-id", "retry-after")


class AnthropicMessagesClient(AbstractUpstreamClient):
    """Relay request bodies to the Messages endpoint over HTTPS.

    The body is sent as-is; the client only adds authentication and the
    protocol version header. No retries are attempted.
    """

    def __init__(
        self,
        api_key: str,
        url: str,
        version: str = "2023-06-01",
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Anthropic API key sent in the x-api-key header.
            url: Full URL of the Messages endpoint.
            version: Value of the anthropic-version header.
            timeout_seconds: Timeout for the whole upstream call.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._headers = {
            "x-api-key": api_key,
            "anthropic-version": version,
            "content-type": "application/json",
        }

    async def send(self, body: bytes) -> UpstreamResponse:
        """POST ``body`` to the Messages endpoint.

        Args:
            body: Raw JSON request body from the caller.

        Returns:
            UpstreamResponse for any HTTP status the upstream returns.

        Raises:
            UpstreamAppError: On transport failures (connection, DNS, timeout).
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.url, content=body, headers=self._headers)
        except httpx.HTTPError as exc:
            logger.error(
                "upstream.transport_error",
                extra={
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                    "upstream_url": self.url,
                },
            )
            raise UpstreamAppError(
                code="upstream_transport_error",
                message=str(exc) or "Internal server error",
                details={"error_type": type(exc).__name__},
            ) from exc

        headers = {
            name: response.headers[name]
            for name in _RELAYED_HEADERS
            if name in response.headers
        }
        return UpstreamResponse(
            status_code=response.status_code,
            content=response.content,
            headers=headers,
        )
