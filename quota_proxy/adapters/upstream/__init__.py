"""Upstream adapter layer - abstracts the proxied generative-AI API."""

from quota_proxy.adapters.upstream.anthropic_client import AnthropicMessagesClient
from quota_proxy.adapters.upstream.base import AbstractUpstreamClient, UpstreamResponse
from quota_proxy.adapters.upstream.factory import create_upstream_client

__all__ = [
    "AbstractUpstreamClient",
    "AnthropicMessagesClient",
    "UpstreamResponse",
    "create_upstream_client",
]
