"""Chunked transfer engine: request issuance, chunk drain and bookkeeping.

The engine performs the network side effects behind each state machine
transition. Each activation (fresh fetch or resume) runs in its own asyncio
task guarded by a CancellationHandle. The task only mutates engine state
while its handle is uncancelled, so a superseded task can never append
chunks, report progress or drive a transition.
"""

import asyncio
import re
import typing as t
from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType

import aiohttp
from aiohttp import hdrs
from multidict import CIMultiDict

from ..config.settings import DEFAULT_CHUNK_SIZE
from ..domain.exceptions import RangeNotSupportedError
from ..domain.transfer import TransferProgress
from ..events import (
    BaseEmitter,
    ErrorInfo,
    EventEmitter,
    TransferCompletedEvent,
    TransferFailedEvent,
    TransferProgressEvent,
    TransferStartedEvent,
)
from ..infrastructure.http.base import BaseHttpClient
from ..infrastructure.logging import get_logger
from .response import ResumableResponse

if t.TYPE_CHECKING:
    import loguru

ProgressCallback = t.Callable[[TransferProgress], None]

# "bytes 500-999/1000" -> 1000; "bytes 500-999/*" has no known total
_CONTENT_RANGE_TOTAL = re.compile(r"/(\d+)\s*$")


class CancellationHandle:
    """Owned capability for cooperatively stopping one activation.

    Cancelling sets a flag the drain loop checks before accepting each
    chunk, and cancels the task so any network await is interrupted.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._task: asyncio.Task[t.Any] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def attach(self, task: asyncio.Task[t.Any]) -> None:
        self._task = task

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()


class ChunkedTransferEngine:
    """Owns the cancellation handle, accumulated chunks and progress protocol.

    Implementation decisions:
    - Chunks stay in memory; the logical response replays them
    - total_length/content_type are captured from the first response only
    - A resume must be answered with 206, otherwise appending the reply would
      duplicate bytes, so it is treated as a transport failure. At offset 0
      a 200 carries exactly the bytes asked for and is accepted.
    - A 416 to a resume whose Content-Range total (if any) is the offset
      means nothing is left, so the activation finishes
    - Cancelling the pending task directly, even before it first runs,
      interrupts the transfer while that task still holds the live handle
    - Transport errors are logged, emitted and re-raised through the task;
      cancellation is re-raised without being logged as an error
    """

    def __init__(
        self,
        url: str,
        client: BaseHttpClient,
        options: Mapping[str, t.Any] | None = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
        on_finished: t.Callable[[], None] | None = None,
        on_interrupted: t.Callable[[], None] | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            url: Request target
            client: HTTP client used to issue requests
            options: Request keyword options passed to client.get(). Copied,
                    never mutated.
            chunk_size: Maximum bytes pulled from the body per read
            timeout: Seconds allowed for one activation (None = no limit)
            logger: Logger instance for transfer events and errors
            emitter: Event emitter for transfer.* events. If None, a new
                    EventEmitter is created.
            on_finished: Called when the body is fully drained, before the
                        response is built
            on_interrupted: Called when a transport failure, or cancelling the
                           pending task directly, ends an activation
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.url = url
        self._client = client
        self._options: Mapping[str, t.Any] = MappingProxyType(dict(options or {}))
        self._chunk_size = chunk_size
        self._timeout = timeout
        self._logger = logger
        self._emitter = emitter or EventEmitter(logger)
        self._on_finished = on_finished
        self._on_interrupted = on_interrupted

        self.progress_callback: ProgressCallback | None = None

        self._chunks: list[bytes] = []
        self._downloaded_length = 0
        self._total_length: int | None = None
        self._content_type: str | None = None
        self._metadata_captured = False
        self._handle: CancellationHandle | None = None
        self._pending: asyncio.Task[ResumableResponse] | None = None

    @property
    def options(self) -> Mapping[str, t.Any]:
        return self._options

    @property
    def emitter(self) -> BaseEmitter:
        return self._emitter

    @property
    def chunks(self) -> tuple[bytes, ...]:
        return tuple(self._chunks)

    @property
    def downloaded_length(self) -> int:
        return self._downloaded_length

    @property
    def total_length(self) -> int | None:
        return self._total_length

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @property
    def cancellation_handle(self) -> CancellationHandle | None:
        return self._handle

    @property
    def pending(self) -> "asyncio.Task[ResumableResponse] | None":
        return self._pending

    def build_request_options(self, resume: bool) -> dict[str, t.Any]:
        """Options for the next request.

        A fresh fetch passes the caller's options through unchanged. A resume
        adds an open-ended Range header starting at the bytes already held.
        """
        options = dict(self._options)
        if resume:
            headers: CIMultiDict[str] = CIMultiDict(options.get("headers") or {})
            headers[hdrs.RANGE] = f"bytes={self._downloaded_length}-"
            options["headers"] = headers
        return options

    def begin(self, *, resume: bool) -> "asyncio.Task[ResumableResponse]":
        """Issue a fresh or range-continuation request in a new task.

        Must be called with a running event loop.
        """
        handle = CancellationHandle()
        offset = self._downloaded_length if resume else 0
        task = asyncio.get_running_loop().create_task(
            self._run(handle, self.build_request_options(resume), resume, offset),
            name=f"resumable-fetch {self.url}",
        )
        handle.attach(task)
        task.add_done_callback(lambda done: self._on_task_done(handle, done))
        self._handle = handle
        self._pending = task
        return task

    def _on_task_done(
        self, handle: CancellationHandle, task: "asyncio.Task[t.Any]"
    ) -> None:
        # Runs even when the task was cancelled before its first step
        if not task.cancelled() or handle.cancelled or handle is not self._handle:
            return
        self._logger.debug(f"Pending task cancelled directly: {self.url}")
        if self._on_interrupted is not None:
            self._on_interrupted()

    def cancel(self) -> None:
        """Cancel the outstanding request, keeping everything received."""
        if self._handle is not None:
            self._handle.cancel()
            self._logger.debug(
                f"Suspended {self.url} at byte {self._downloaded_length}"
            )
        self.release()

    def release(self) -> None:
        """Drop the handle and pending task without signalling cancellation."""
        self._handle = None
        self._pending = None

    def clear(self) -> None:
        """Cancel any outstanding request and discard all data and metadata."""
        if self._handle is not None:
            self._handle.cancel()
        self.release()
        self._chunks = []
        self._downloaded_length = 0
        self._total_length = None
        self._content_type = None
        self._metadata_captured = False
        self._logger.debug(f"Cleared transfer state for {self.url}")

    def build_response(self) -> ResumableResponse:
        """Logical response replaying the accumulated chunks."""
        return ResumableResponse(
            self.url,
            self._chunks,
            content_type=self._content_type,
            content_length=self._total_length,
        )

    async def _run(
        self,
        handle: CancellationHandle,
        options: dict[str, t.Any],
        resume: bool,
        offset: int,
    ) -> ResumableResponse:
        try:
            if resume and self._holds_whole_resource():
                # Nothing left to ask for; a range past the end would get a 416
                self._logger.debug(f"Already holding all of {self.url}")
            else:
                await self._fetch(handle, options, resume, offset)

        except asyncio.CancelledError:
            self._logger.debug(
                f"Transfer cancelled: {self.url} "
                f"({self._downloaded_length} bytes held)"
            )
            raise

        except Exception as transfer_error:
            # A superseded task must not suspend the transfer that replaced it
            if handle.cancelled or handle is not self._handle:
                raise
            self._log_and_categorize_error(transfer_error)
            if self._on_interrupted is not None:
                self._on_interrupted()
            await self._emitter.emit(
                "transfer.failed",
                TransferFailedEvent(
                    url=self.url,
                    error=ErrorInfo.from_exception(transfer_error),
                    bytes_downloaded=self._downloaded_length,
                ),
            )
            raise

        self._ensure_active(handle)
        self._logger.debug(
            f"Transfer completed: {self.url} ({self._downloaded_length} bytes)"
        )
        if self._on_finished is not None:
            self._on_finished()
        response_out = self.build_response()
        await self._emitter.emit(
            "transfer.completed",
            TransferCompletedEvent(url=self.url, total_bytes=self._downloaded_length),
        )
        return response_out

    async def _fetch(
        self,
        handle: CancellationHandle,
        options: dict[str, t.Any],
        resume: bool,
        offset: int,
    ) -> None:
        """Issue the request and drain its body within the configured timeout."""
        if resume:
            self._logger.debug(f"Resuming {self.url} from byte {offset}")
        else:
            self._logger.debug(f"Starting fetch: {self.url}")

        async with asyncio.timeout(self._timeout):
            async with self._client.get(self.url, **options) as response:
                if resume and self._range_exhausted(response, offset):
                    self._logger.debug(
                        f"Nothing left to fetch from {self.url} past byte {offset}"
                    )
                    return
                # Validate HTTP status - raises ClientResponseError for 4xx/5xx
                response.raise_for_status()
                partial = response.status == HTTPStatus.PARTIAL_CONTENT
                if resume and not partial and offset > 0:
                    raise RangeNotSupportedError(
                        url=self.url, status=response.status, offset=offset
                    )
                self._ensure_active(handle)
                self._capture_metadata(response, from_range=partial)

                await self._emitter.emit(
                    "transfer.started",
                    TransferStartedEvent(
                        url=self.url,
                        resumed=resume,
                        offset=offset,
                        total_bytes=self._total_length,
                    ),
                )
                await self._drain(handle, response)

    async def _drain(
        self, handle: CancellationHandle, response: aiohttp.ClientResponse
    ) -> None:
        """Pull chunks until end of stream, accumulating and reporting progress."""
        async for chunk in response.content.iter_chunked(self._chunk_size):
            self._ensure_active(handle)
            self._chunks.append(chunk)
            self._downloaded_length += len(chunk)
            await self._report_progress(handle, len(chunk))

    async def _report_progress(
        self, handle: CancellationHandle, chunk_size: int
    ) -> None:
        if self.progress_callback is not None:
            self.progress_callback(
                TransferProgress(
                    total=self._total_length, loaded=self._downloaded_length
                )
            )
        # The callback may have aborted or reset the transfer
        if handle.cancelled:
            return
        await self._emitter.emit(
            "transfer.progress",
            TransferProgressEvent(
                url=self.url,
                chunk_size=chunk_size,
                bytes_downloaded=self._downloaded_length,
                total_bytes=self._total_length,
            ),
        )

    def _holds_whole_resource(self) -> bool:
        return (
            self._total_length is not None
            and self._downloaded_length >= self._total_length
        )

    def _range_exhausted(
        self, response: aiohttp.ClientResponse, offset: int
    ) -> bool:
        """True for a 416 whose Content-Range total, if given, is the offset."""
        if response.status != HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE:
            return False
        total = self._content_range_total(response)
        return total is None or total == offset

    def _content_range_total(self, response: aiohttp.ClientResponse) -> int | None:
        match = _CONTENT_RANGE_TOTAL.search(
            response.headers.get(hdrs.CONTENT_RANGE, "")
        )
        return int(match.group(1)) if match else None

    def _ensure_active(self, handle: CancellationHandle) -> None:
        if handle.cancelled:
            raise asyncio.CancelledError()

    def _capture_metadata(
        self, response: aiohttp.ClientResponse, *, from_range: bool
    ) -> None:
        """Record total length and content type once per lifecycle.

        Normally taken from the fresh response. If that never arrived (the
        first request failed before headers), the first resume reply supplies
        them instead, taking the total from Content-Range when it is a 206.
        """
        if self._metadata_captured:
            return
        self._content_type = response.headers.get(hdrs.CONTENT_TYPE)
        if from_range:
            self._total_length = self._content_range_total(response)
        else:
            self._total_length = response.content_length
        self._metadata_captured = True

    def _log_and_categorize_error(self, exception: Exception) -> None:
        """Log transport failures with a category describing what went wrong."""
        match exception:
            # Connection errors - issues establishing connection
            case aiohttp.ClientSSLError():
                error_category = "SSL/TLS error connecting to"
            case aiohttp.ClientConnectorError():
                error_category = "Failed to connect to"

            # Response errors - server responded but with error
            case aiohttp.ClientResponseError():
                error_category = f"HTTP {exception.status} error from"
            case aiohttp.ClientPayloadError():
                error_category = "Invalid response payload from"
            case RangeNotSupportedError():
                error_category = "Range request not honoured by"

            # Timeout errors - operation took too long
            case TimeoutError():
                error_category = "Timeout fetching"

            case aiohttp.ClientError():
                error_category = "Network error fetching"

            # Generic fallback - unexpected errors
            case _:
                error_category = "Unexpected error fetching"
                self._logger.debug(
                    f"Uncaught exception of type {type(exception).__name__}: {exception}"
                )

        self._logger.error(f"{error_category} {self.url}: {exception}")
