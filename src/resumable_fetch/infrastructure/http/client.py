"""aiohttp implementation of the transport boundary."""

import ssl as ssl_module
import typing as t

import aiohttp

from ...domain.exceptions import ClientNotInitialisedError
from ..logging import get_logger
from .base import BaseHttpClient
from .factories import create_secure_connector

if t.TYPE_CHECKING:
    import loguru


class AiohttpClient(BaseHttpClient):
    """HTTP client backed by an aiohttp ClientSession.

    Either owns its session (created on open() with a certifi-verified
    connector) or wraps one supplied by the caller. A supplied session is
    never closed by this client.

    Usage:
        async with AiohttpClient() as client:
            async with client.get("https://example.com/file.bin") as response:
                ...
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        ssl: ssl_module.SSLContext | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        **session_kwargs: t.Any,
    ) -> None:
        """Initialise the client.

        Args:
            session: Existing session to wrap. Ownership stays with the caller.
            ssl: SSL context for the owned session. Defaults to certifi's CA
                bundle.
            logger: Logger instance for session lifecycle messages
            **session_kwargs: Options for the owned ClientSession (timeout,
                            headers, ...). Ignored when a session is supplied.
        """
        self._session = session
        self._owns_session = session is None
        self._ssl = ssl
        self._session_kwargs = session_kwargs
        self._logger = logger

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def open(self) -> None:
        """Create the owned session. Calling it again is a no-op."""
        if self._session is not None:
            return
        self._session = aiohttp.ClientSession(
            connector=create_secure_connector(ssl=self._ssl), **self._session_kwargs
        )
        self._owns_session = True
        self._logger.debug("Opened aiohttp session")

    async def close(self) -> None:
        """Close the session if this client owns it."""
        if self._session is None or not self._owns_session:
            return
        if not self._session.closed:
            await self._session.close()
            self._logger.debug("Closed aiohttp session")
        self._session = None

    def get(self, url: str, **kwargs: t.Any) -> t.Any:
        if self._session is None:
            raise ClientNotInitialisedError(
                "HTTP client not initialised; use 'async with' or call open()"
            )
        return self._session.get(url, **kwargs)

    async def __aenter__(self) -> "AiohttpClient":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.close()
