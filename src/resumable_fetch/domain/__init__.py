"""Domain models and exceptions."""

from .exceptions import (
    ClientNotInitialisedError,
    IllegalTransitionError,
    RangeNotSupportedError,
    ResumableFetchError,
    TransferError,
)
from .transfer import (
    TRANSITIONS,
    TransferProgress,
    TransferState,
    Transition,
    TransitionRule,
)

__all__ = [
    "TRANSITIONS",
    "TransferProgress",
    "TransferState",
    "Transition",
    "TransitionRule",
    "ResumableFetchError",
    "IllegalTransitionError",
    "ClientNotInitialisedError",
    "TransferError",
    "RangeNotSupportedError",
]
