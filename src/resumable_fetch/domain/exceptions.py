"""Custom exceptions for resumable fetch."""

import typing as t

if t.TYPE_CHECKING:
    from .transfer import TransferState, Transition


class ResumableFetchError(Exception):
    """Base exception for resumable fetch errors."""

    pass


class IllegalTransitionError(ResumableFetchError):
    """Raised when a transition is fired from a state that does not allow it.

    The public ResumableFetch operations never let this escape; they check
    legality first and log a warning instead. It surfaces only when the
    state machine is driven directly.
    """

    def __init__(self, transition: "Transition", state: "TransferState") -> None:
        self.transition = transition
        self.state = state
        super().__init__(
            f'Cannot perform "{transition.value}" on "{state.value}" state'
        )


class ClientNotInitialisedError(ResumableFetchError):
    """Raised when the HTTP client is used before it has been opened."""

    pass


class TransferError(ResumableFetchError):
    """Base exception for failures of the transfer itself."""

    pass


class RangeNotSupportedError(TransferError):
    """Raised when a range-continuation request is not answered with 206.

    A server that ignores the Range header replies with the whole resource,
    which cannot be appended to the bytes already held.
    """

    def __init__(self, *, url: str, status: int, offset: int) -> None:
        self.url = url
        self.status = status
        self.offset = offset
        super().__init__(
            f"Server ignored range request for {url} from byte {offset} "
            f"(status {status}, expected 206)"
        )
