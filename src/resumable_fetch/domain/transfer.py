"""Core domain models for resumable transfers."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class TransferState(Enum):
    """Transfer lifecycle states.

    Flow: IDLE -> ACTIVE -> (SUSPENDED -> ACTIVE)* -> COMPLETE
    RESET returns any non-idle state to IDLE.
    """

    IDLE = "idle"  # No data, no request
    ACTIVE = "active"  # Request outstanding, draining the body
    SUSPENDED = "suspended"  # Request cancelled, bytes retained
    COMPLETE = "complete"  # Body fully drained


class Transition(Enum):
    """Named edges of the transfer state machine."""

    FETCH = "fetch"
    ABORT = "abort"
    RESUME = "resume"
    FINISH = "finish"
    FAIL = "fail"
    RESET = "reset"


@dataclass(frozen=True)
class TransitionRule:
    """A transition's legal source states and its target state."""

    sources: frozenset[TransferState]
    target: TransferState


TRANSITIONS: dict[Transition, TransitionRule] = {
    Transition.FETCH: TransitionRule(
        frozenset({TransferState.IDLE}), TransferState.ACTIVE
    ),
    Transition.ABORT: TransitionRule(
        frozenset({TransferState.ACTIVE}), TransferState.SUSPENDED
    ),
    Transition.RESUME: TransitionRule(
        frozenset({TransferState.SUSPENDED}), TransferState.ACTIVE
    ),
    Transition.FINISH: TransitionRule(
        frozenset({TransferState.ACTIVE}), TransferState.COMPLETE
    ),
    # Transport failure keeps the bytes and leaves the transfer resumable
    Transition.FAIL: TransitionRule(
        frozenset({TransferState.ACTIVE}), TransferState.SUSPENDED
    ),
    Transition.RESET: TransitionRule(
        frozenset(
            {TransferState.ACTIVE, TransferState.SUSPENDED, TransferState.COMPLETE}
        ),
        TransferState.IDLE,
    ),
}


class TransferProgress(BaseModel):
    """Snapshot handed to the progress callback after each accepted chunk."""

    total: int | None = Field(
        default=None, ge=0, description="Total resource size if known"
    )
    loaded: int = Field(default=0, ge=0, description="Bytes held so far")

    @computed_field  # type: ignore [prop-decorator]
    @property
    def fraction(self) -> float:
        """Get progress as a fraction (0.0 to 1.0)."""
        if self.total is None or self.total == 0:
            return 0.0
        return min(self.loaded / self.total, 1.0)

    @computed_field  # type: ignore [prop-decorator]
    @property
    def percent(self) -> float:
        """Get progress as a percentage (0.0 to 100.0)."""
        return self.fraction * 100.0
