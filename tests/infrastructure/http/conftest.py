"""Fixtures for HTTP transport tests."""

import ssl

import pytest

from resumable_fetch.infrastructure.http import create_ssl_context


@pytest.fixture
def ssl_context() -> ssl.SSLContext:
    """Certifi-backed context, loaded outside the event loop."""
    return create_ssl_context()
