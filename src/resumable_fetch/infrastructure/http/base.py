"""Transport boundary required by the transfer engine."""

import typing as t
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

import aiohttp


class BaseHttpClient(ABC):
    """Abstract HTTP client the transfer engine issues requests through.

    Implementations return an async context manager around an
    aiohttp-compatible response: status, headers, content_length,
    content_type, raise_for_status() and a streaming body exposing
    content.iter_chunked(). Cancellation is cooperative through asyncio
    task cancellation.
    """

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Whether the client can no longer issue requests."""
        pass

    @abstractmethod
    def get(
        self, url: str, **kwargs: t.Any
    ) -> AbstractAsyncContextManager[aiohttp.ClientResponse]:
        """Issue a GET request.

        Args:
            url: Request target
            **kwargs: Request options (headers, params, cookies, ...)
        """
        pass

    async def __aenter__(self) -> t.Self:
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        return None
