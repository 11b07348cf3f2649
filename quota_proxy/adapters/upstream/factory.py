"""Factory for the upstream API client."""

from quota_proxy.adapters.upstream.anthropic_client import AnthropicMessagesClient
from quota_proxy.adapters.upstream.base import AbstractUpstreamClient
from quota_proxy.core.config import settings
from quota_proxy.core.errors import ConfigurationAppError


def create_upstream_client() -> AbstractUpstreamClient:
    """Build the upstream client from settings.

    Called per request, so a missing credential surfaces as an error on each
    proxied call rather than at startup.

    Returns:
        AbstractUpstreamClient: Client configured for the Messages endpoint.

    Raises:
        ConfigurationAppError: If ANTHROPIC_API_KEY is not set.
    """
    upstream = settings.upstream

    if not upstream.api_key:
        raise ConfigurationAppError(
            code="upstream_not_configured",
            message="Server not configured. Please set ANTHROPIC_API_KEY environment variable.",
            details={"setting": "ANTHROPIC_API_KEY"},
        )

    return AnthropicMessagesClient(
        api_key=upstream.api_key,
        url=upstream.messages_url,
        version=upstream.version,
        timeout_seconds=upstream.timeout_seconds,
    )
