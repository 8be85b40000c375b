"""Emitter that drops every event."""

import typing as t

from .base import BaseEmitter, EventHandler


class NullEmitter(BaseEmitter):
    """For transfers nobody observes: subscriptions are ignored, emits are free."""

    def on(self, event_type: str, handler: EventHandler) -> None:
        return None

    def off(self, event_type: str, handler: EventHandler) -> None:
        return None

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        return None
