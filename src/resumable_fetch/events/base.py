"""Emitter interface transfers publish their lifecycle through."""

import typing as t
from abc import ABC, abstractmethod

EventHandler = t.Callable[[t.Any], t.Any]


class BaseEmitter(ABC):
    """Publish/subscribe interface keyed by event type.

    Event types are dotted names in the transfer.* namespace
    ("transfer.started", "transfer.progress", "transfer.completed",
    "transfer.failed").
    """

    @abstractmethod
    def on(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe handler to event_type."""

    @abstractmethod
    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe handler from event_type."""

    @abstractmethod
    async def emit(self, event_type: str, event_data: t.Any) -> None:
        """Deliver event_data to every handler subscribed to event_type."""
