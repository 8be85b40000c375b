"""Factories for TLS-verified aiohttp transport pieces."""

import ssl as ssl_module
import typing as t

import aiohttp
import certifi


def create_ssl_context() -> ssl_module.SSLContext:
    """Create an SSL context trusting certifi's CA bundle.

    The system store is unreliable across platforms (notably macOS
    framework builds), certifi ships a maintained bundle.
    """
    return ssl_module.create_default_context(cafile=certifi.where())


def create_secure_connector(
    ssl: ssl_module.SSLContext | None = None, **connector_kwargs: t.Any
) -> aiohttp.TCPConnector:
    """Create a TCPConnector verifying certificates against certifi.

    Args:
        ssl: SSL context to use instead of the certifi default
        **connector_kwargs: Extra TCPConnector options (limit, ttl_dns_cache, ...)
    """
    return aiohttp.TCPConnector(ssl=ssl or create_ssl_context(), **connector_kwargs)
