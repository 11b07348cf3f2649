"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from quota_proxy.core.logging import (
    JsonFormatter,
    SensitiveDataFilter,
    clear_request_id,
    hash_client_id,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired with the redaction filter and JSON formatter."""
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()


def test_redacts_upstream_credentials(capture):
    logger, stream = capture

    logger.info(
        "upstream.call",
        extra={
            "api_key": "sk-ant-secret-123",
            "x-api-key": "another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "sk-ant-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_redacts_proxied_conversation(capture):
    logger, stream = capture

    logger.info(
        "proxy.debug",
        extra={
            "body": '{"messages":[{"role":"user","content":"my secret plan"}]}',
            "payload": {"messages": [{"role": "user", "content": "hi"}], "max_tokens": 16},
        },
    )

    output = stream.getvalue()
    assert "my secret plan" not in output
    assert '"max_tokens": 16' in output


def test_allows_quota_fields(capture):
    logger, stream = capture

    logger.info(
        "quota.allowed",
        extra={
            "client_hash": hash_client_id("abc"),
            "limit": 10,
            "remaining": 7,
            "reset_hours": 23.5,
        },
    )

    record = json.loads(stream.getvalue())
    assert record["message"] == "quota.allowed"
    assert record["remaining"] == 7
    assert record["reset_hours"] == 23.5
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context(capture):
    logger, stream = capture

    set_request_id("req-ctx-1")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-ctx-1"


def test_hash_client_id_is_stable_and_opaque():
    digest = hash_client_id("abc")

    assert digest == hash_client_id("abc")
    assert digest != hash_client_id("abd")
    assert len(digest) == 16
    assert "abc" not in digest
