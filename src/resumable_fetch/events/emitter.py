"""In-process event emitter supporting sync and async handlers."""

import inspect
import typing as t
from collections import defaultdict

from ..infrastructure.logging import get_logger
from .base import BaseEmitter, EventHandler

if t.TYPE_CHECKING:
    import loguru


class EventEmitter(BaseEmitter):
    """Dispatches events to subscribed handlers in subscription order.

    Handlers may be plain functions, coroutine functions, or callables
    returning an awaitable. A failing handler is logged and skipped so one
    bad subscriber cannot break the transfer that emitted the event.

    Usage:
        emitter = EventEmitter()
        emitter.on("transfer.progress", lambda e: print(e.percent))
        await emitter.emit("transfer.progress", event)
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._logger = logger

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe a handler. Unknown handlers are logged, not raised."""
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            self._logger.warning(f"Handler {handler} not found for event {event_type}")

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        """Call every handler subscribed to event_type with event_data."""
        # Copy so handlers may unsubscribe while we iterate
        for handler in list(self._handlers.get(event_type, [])):
            if inspect.iscoroutinefunction(handler):
                try:
                    await handler(event_data)
                except Exception as exc:
                    self._logger.opt(exception=exc).error(
                        f"Async handler {handler} failed for event {event_type}"
                    )
                continue

            try:
                result = handler(event_data)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                self._logger.exception(
                    f"Handler {handler} failed for event {event_type}"
                )
