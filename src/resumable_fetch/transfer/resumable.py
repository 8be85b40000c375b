"""Pausable, resumable HTTP fetch.

ResumableFetch presents the contract of a one-shot fetch (start() gives a
pending response) but can be aborted and resumed later from the byte offset
reached, using an HTTP range request. Legality of start/abort/reset is
decided by TransferStateMachine; the network work is done by
ChunkedTransferEngine.
"""

import asyncio
import typing as t
from collections.abc import Mapping

from ..config.settings import DEFAULT_CHUNK_SIZE, Settings
from ..domain.transfer import TransferProgress, TransferState, Transition
from ..events import BaseEmitter
from ..infrastructure.http.base import BaseHttpClient
from ..infrastructure.logging import get_logger
from .engine import CancellationHandle, ChunkedTransferEngine, ProgressCallback
from .response import ResumableResponse
from .state_machine import TransferStateMachine

if t.TYPE_CHECKING:
    import loguru


class ResumableFetch:
    """A single resumable transfer of one resource.

    Operations that are not legal in the current state are ignored with a
    warning rather than raising:

    - start(): idle -> active (fresh request), suspended -> active (range
      request from the bytes already held)
    - abort(): active -> suspended, keeping every byte received
    - reset(): active/suspended/complete -> idle, discarding everything

    A transport failure while active suspends the transfer, so start() can
    resume it.

    Usage:
        async with AiohttpClient() as client:
            fetch = ResumableFetch("https://example.com/video.mp4", client)
            fetch.on_progress = lambda p: print(f"{p.percent:.0f}%")

            pending = fetch.start()
            ...
            fetch.abort()            # pending is cancelled, bytes kept
            response = await fetch.start()
            body = await response.read()
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
    ) -> None:
        """Initialise an idle transfer.

        Args:
            url: Resource to fetch
            client: HTTP client requests are issued through
            options: Request keyword options (headers, params, cookies, ...)
                    sent with every request. The Range header is computed.
            chunk_size: Maximum bytes pulled from the body per read
            timeout: Seconds allowed for each request/drain cycle
                    (None = no limit)
            logger: Logger instance for transitions and transfer errors
            emitter: Event emitter for transfer.* events. If None, a new
                    EventEmitter is created.
        """
        self._logger = logger
        self._engine = ChunkedTransferEngine(
            url,
            client,
            options,
            chunk_size=chunk_size,
            timeout=timeout,
            logger=logger,
            emitter=emitter,
            on_finished=self._finish,
            on_interrupted=self._interrupt,
        )
        self._machine = TransferStateMachine(logger=logger)
        self._machine.on(Transition.FETCH, self._begin_fetch)
        self._machine.on(Transition.RESUME, self._begin_resume)
        self._machine.on(Transition.ABORT, self._engine.cancel)
        self._machine.on(Transition.FINISH, self._engine.release)
        self._machine.on(Transition.FAIL, self._engine.release)
        self._machine.on(Transition.RESET, self._engine.clear)

    @classmethod
    def from_settings(
        cls,
        url: str,
        client: BaseHttpClient,
        settings: Settings,
        options: Mapping[str, t.Any] | None = None,
        **kwargs: t.Any,
    ) -> "ResumableFetch":
        """Create a transfer using chunk size and timeout from settings."""
        return cls(
            url,
            client,
            options,
            chunk_size=settings.chunk_size,
            timeout=settings.timeout,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return self._engine.url

    @property
    def options(self) -> Mapping[str, t.Any]:
        """Caller-supplied request options (read-only)."""
        return self._engine.options

    @property
    def state(self) -> TransferState:
        return self._machine.state

    @property
    def chunks(self) -> tuple[bytes, ...]:
        """Chunks received so far, in arrival order."""
        return self._engine.chunks

    @property
    def downloaded_length(self) -> int:
        return self._engine.downloaded_length

    @property
    def total_length(self) -> int | None:
        return self._engine.total_length

    @property
    def content_type(self) -> str | None:
        return self._engine.content_type

    @property
    def cancellation_handle(self) -> CancellationHandle | None:
        """Handle for the outstanding request; None unless active."""
        return self._engine.cancellation_handle

    @property
    def pending(self) -> "asyncio.Task[ResumableResponse] | None":
        """Task of the outstanding request; None unless active."""
        return self._engine.pending

    @property
    def emitter(self) -> BaseEmitter:
        """Event emitter for subscribing to transfer.* events."""
        return self._engine.emitter

    @property
    def on_progress(self) -> ProgressCallback | None:
        """Callback invoked with a TransferProgress after each chunk."""
        return self._engine.progress_callback

    @on_progress.setter
    def on_progress(self, callback: ProgressCallback | None) -> None:
        self._engine.progress_callback = callback

    @property
    def progress(self) -> TransferProgress:
        """Current progress snapshot."""
        return TransferProgress(total=self.total_length, loaded=self.downloaded_length)

    def start(self) -> "asyncio.Task[ResumableResponse] | None":
        """Fetch the resource, or resume it if suspended.

        Returns:
            Task resolving to the complete response, or None if the transfer
            is already active or complete. If the transfer is aborted or
            reset meanwhile, the task is cancelled.

        Raises:
            RuntimeError: If called without a running event loop
        """
        # Fail before committing a transition we could not act on
        asyncio.get_running_loop()

        if self._machine.can(Transition.FETCH):
            self._machine.fire(Transition.FETCH)
        elif self._machine.can(Transition.RESUME):
            self._machine.fire(Transition.RESUME)
        else:
            self._warn_illegal("start")
            return None
        return self._engine.pending

    def abort(self) -> None:
        """Suspend an active transfer, keeping the bytes received so far."""
        if self._machine.can(Transition.ABORT):
            self._machine.fire(Transition.ABORT)
        else:
            self._warn_illegal("abort")

    def reset(self) -> None:
        """Cancel any request and discard all data, returning to idle."""
        if self._machine.can(Transition.RESET):
            self._machine.fire(Transition.RESET)
        else:
            self._warn_illegal("reset")

    def _begin_fetch(self) -> None:
        self._engine.begin(resume=False)

    def _begin_resume(self) -> None:
        self._engine.begin(resume=True)

    def _finish(self) -> None:
        self._machine.fire(Transition.FINISH)

    def _interrupt(self) -> None:
        if self._machine.can(Transition.FAIL):
            self._machine.fire(Transition.FAIL)

    def _warn_illegal(self, operation: str) -> None:
        self._logger.warning(
            f'Cannot perform "{operation}" on "{self.state.value}" state'
        )

    def __repr__(self) -> str:
        total = self.total_length if self.total_length is not None else "?"
        return (
            f"<ResumableFetch {self.url} [{self.state.value}] "
            f"{self.downloaded_length}/{total} bytes>"
        )
