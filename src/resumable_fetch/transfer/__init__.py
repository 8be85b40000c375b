"""Resumable transfers - state machine, engine and logical response."""

from .engine import CancellationHandle, ChunkedTransferEngine, ProgressCallback
from .response import ResumableResponse
from .resumable import ResumableFetch
from .state_machine import TransferStateMachine

__all__ = [
    "CancellationHandle",
    "ChunkedTransferEngine",
    "ProgressCallback",
    "ResumableFetch",
    "ResumableResponse",
    "TransferStateMachine",
]
