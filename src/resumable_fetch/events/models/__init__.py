"""Event data models."""

from .base import BaseEvent
from .error_info import ErrorInfo
from .transfer import (
    TransferCompletedEvent,
    TransferEvent,
    TransferFailedEvent,
    TransferProgressEvent,
    TransferStartedEvent,
)

__all__ = [
    "BaseEvent",
    "ErrorInfo",
    "TransferEvent",
    "TransferStartedEvent",
    "TransferProgressEvent",
    "TransferCompletedEvent",
    "TransferFailedEvent",
]
