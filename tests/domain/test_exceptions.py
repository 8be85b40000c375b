"""Tests for domain exceptions."""

from resumable_fetch.domain.exceptions import (
    IllegalTransitionError,
    RangeNotSupportedError,
    ResumableFetchError,
    TransferError,
)
from resumable_fetch.domain.transfer import TransferState, Transition


def test_illegal_transition_message() -> None:
    error = IllegalTransitionError(Transition.RESUME, TransferState.COMPLETE)

    assert isinstance(error, ResumableFetchError)
    assert str(error) == 'Cannot perform "resume" on "complete" state'


def test_range_not_supported_carries_context() -> None:
    error = RangeNotSupportedError(
        url="https://example.com/a.bin", status=200, offset=512
    )

    assert isinstance(error, TransferError)
    assert (error.url, error.status, error.offset) == (
        "https://example.com/a.bin",
        200,
        512,
    )
    assert "from byte 512" in str(error)
    assert "status 200" in str(error)
