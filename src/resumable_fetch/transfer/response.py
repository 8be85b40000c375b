"""Logical response reassembled from buffered chunks."""

from collections.abc import AsyncIterator, Sequence
from http import HTTPStatus
from pathlib import Path

import aiofiles
from multidict import CIMultiDict, CIMultiDictProxy


class ResumableResponse:
    """Caller-visible result of a transfer, however many times it was resumed.

    Mirrors the parts of a one-shot aiohttp response a consumer reads:
    status, case-insensitive headers and a streaming body. The body is
    replayed from the in-memory chunks, so it can be consumed any number of
    times without touching the network again.
    """

    def __init__(
        self,
        url: str,
        chunks: Sequence[bytes],
        *,
        content_type: str | None = None,
        content_length: int | None = None,
        status: int = HTTPStatus.OK,
    ) -> None:
        self.url = url
        self.status = status
        self._chunks = tuple(chunks)

        headers: CIMultiDict[str] = CIMultiDict()
        if content_type is not None:
            headers["Content-Type"] = content_type
        # Fall back to what we hold when the server never sent a length
        length = content_length if content_length is not None else self.size
        headers["Content-Length"] = str(length)
        self._headers = CIMultiDictProxy(headers)

    @property
    def headers(self) -> CIMultiDictProxy[str]:
        return self._headers

    @property
    def content_type(self) -> str | None:
        return self._headers.get("Content-Type")

    @property
    def content_length(self) -> int:
        return int(self._headers["Content-Length"])

    @property
    def size(self) -> int:
        """Number of body bytes held."""
        return sum(len(chunk) for chunk in self._chunks)

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.iter_chunks()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Yield the body in the order chunks were received."""
        for chunk in self._chunks:
            yield chunk

    async def iter_chunked(self, n: int) -> AsyncIterator[bytes]:
        """Yield the body re-cut into pieces of at most n bytes.

        Raises:
            ValueError: If n is not positive
        """
        if n <= 0:
            raise ValueError(f"Chunk size must be positive, got {n}")
        buffer = bytearray()
        for chunk in self._chunks:
            buffer.extend(chunk)
            while len(buffer) >= n:
                yield bytes(buffer[:n])
                del buffer[:n]
        if buffer:
            yield bytes(buffer)

    async def read(self) -> bytes:
        """Return the whole body."""
        return b"".join(self._chunks)

    async def text(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        """Return the body decoded as text."""
        return (await self.read()).decode(encoding, errors)

    async def save(self, path: Path | str) -> Path:
        """Write the body to path without blocking the event loop.

        Returns:
            The path written to
        """
        destination = Path(path)
        async with aiofiles.open(destination, "wb") as file_handle:
            for chunk in self._chunks:
                await file_handle.write(chunk)
        return destination

    def __repr__(self) -> str:
        return (
            f"<ResumableResponse [{self.status}] {self.url} "
            f"{self.content_type or 'unknown type'}, {self.size} bytes>"
        )
