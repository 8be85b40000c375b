"""Event infrastructure - event emitter and event types."""

from .base import BaseEmitter
from .emitter import EventEmitter
from .models import (
    BaseEvent,
    ErrorInfo,
    TransferCompletedEvent,
    TransferEvent,
    TransferFailedEvent,
    TransferProgressEvent,
    TransferStartedEvent,
)
from .null import NullEmitter

__all__ = [
    # Base and implementations
    "BaseEmitter",
    "EventEmitter",
    "NullEmitter",
    # Models
    "BaseEvent",
    "ErrorInfo",
    "TransferEvent",
    "TransferStartedEvent",
    "TransferProgressEvent",
    "TransferCompletedEvent",
    "TransferFailedEvent",
]
