"""resumable_fetch - pausable, resumable HTTP downloads over aiohttp."""

from .app import App, create_app
from .config import Environment, LogLevel, Settings, build_settings
from .domain import (
    ClientNotInitialisedError,
    IllegalTransitionError,
    RangeNotSupportedError,
    ResumableFetchError,
    TransferError,
    TransferProgress,
    TransferState,
    Transition,
)
from .infrastructure.http import AiohttpClient, BaseHttpClient
from .transfer import (
    ChunkedTransferEngine,
    ResumableFetch,
    ResumableResponse,
    TransferStateMachine,
)

__all__ = [
    # App
    "App",
    "create_app",
    "Environment",
    "LogLevel",
    "Settings",
    "build_settings",
    # Transfers
    "ResumableFetch",
    "ResumableResponse",
    "ChunkedTransferEngine",
    "TransferStateMachine",
    "TransferProgress",
    "TransferState",
    "Transition",
    # HTTP
    "AiohttpClient",
    "BaseHttpClient",
    # Errors
    "ResumableFetchError",
    "IllegalTransitionError",
    "ClientNotInitialisedError",
    "TransferError",
    "RangeNotSupportedError",
]
