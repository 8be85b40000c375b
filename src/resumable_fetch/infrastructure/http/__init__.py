"""HTTP transport - client boundary and aiohttp implementation."""

from .base import BaseHttpClient
from .client import AiohttpClient
from .factories import create_secure_connector, create_ssl_context

__all__ = [
    "AiohttpClient",
    "BaseHttpClient",
    "create_secure_connector",
    "create_ssl_context",
]
