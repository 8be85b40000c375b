"""Events emitted while a transfer is draining."""

from pydantic import Field, computed_field

from .base import BaseEvent
from .error_info import ErrorInfo


class TransferEvent(BaseEvent):
    """Base class for transfer lifecycle events."""

    url: str = Field(description="The URL being fetched")
    event_type: str = Field(default="transfer.base")


class TransferStartedEvent(TransferEvent):
    """Emitted once response headers arrive for a fresh or resumed request."""

    event_type: str = Field(default="transfer.started")
    resumed: bool = Field(default=False, description="Whether this is a range request")
    offset: int = Field(default=0, ge=0, description="First byte requested")
    total_bytes: int | None = Field(
        default=None, ge=0, description="Total resource size if known"
    )


class TransferProgressEvent(TransferEvent):
    """Emitted after each chunk is accepted."""

    event_type: str = Field(default="transfer.progress")
    chunk_size: int = Field(default=0, ge=0, description="Size of the last chunk")
    bytes_downloaded: int = Field(default=0, ge=0, description="Bytes held so far")
    total_bytes: int | None = Field(
        default=None, ge=0, description="Total resource size if known"
    )

    @computed_field  # type: ignore [prop-decorator]
    @property
    def fraction(self) -> float:
        """Get progress as a fraction (0.0 to 1.0)."""
        if self.total_bytes is None or self.total_bytes == 0:
            return 0.0
        return min(self.bytes_downloaded / self.total_bytes, 1.0)

    @computed_field  # type: ignore [prop-decorator]
    @property
    def percent(self) -> float:
        """Get progress as a percentage (0.0 to 100.0)."""
        return self.fraction * 100.0


class TransferCompletedEvent(TransferEvent):
    """Emitted when the body has been fully drained."""

    event_type: str = Field(default="transfer.completed")
    total_bytes: int = Field(default=0, ge=0, description="Bytes held at completion")


class TransferFailedEvent(TransferEvent):
    """Emitted when the request or stream fails. Never emitted for cancellation."""

    event_type: str = Field(default="transfer.failed")
    error: ErrorInfo = Field(description="What went wrong")
    bytes_downloaded: int = Field(
        default=0, ge=0, description="Bytes retained for a later resume"
    )
