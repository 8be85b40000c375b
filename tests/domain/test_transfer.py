"""Tests for transfer domain models."""

import pytest
from pydantic import ValidationError

from resumable_fetch.domain.transfer import (
    TRANSITIONS,
    TransferProgress,
    TransferState,
    Transition,
)


class TestTransitionTable:
    """The static table every transfer is driven by."""

    def test_every_transition_has_a_rule(self) -> None:
        assert set(TRANSITIONS) == set(Transition)

    @pytest.mark.parametrize(
        "transition,sources,target",
        [
            (Transition.FETCH, {TransferState.IDLE}, TransferState.ACTIVE),
            (Transition.ABORT, {TransferState.ACTIVE}, TransferState.SUSPENDED),
            (Transition.RESUME, {TransferState.SUSPENDED}, TransferState.ACTIVE),
            (Transition.FINISH, {TransferState.ACTIVE}, TransferState.COMPLETE),
            (Transition.FAIL, {TransferState.ACTIVE}, TransferState.SUSPENDED),
            (
                Transition.RESET,
                {
                    TransferState.ACTIVE,
                    TransferState.SUSPENDED,
                    TransferState.COMPLETE,
                },
                TransferState.IDLE,
            ),
        ],
    )
    def test_rule(self, transition, sources, target) -> None:
        rule = TRANSITIONS[transition]

        assert rule.sources == sources
        assert rule.target is target

    def test_nothing_leaves_complete_except_reset(self) -> None:
        leaving = {
            transition
            for transition, rule in TRANSITIONS.items()
            if TransferState.COMPLETE in rule.sources
        }
        assert leaving == {Transition.RESET}

    def test_state_values(self) -> None:
        assert [state.value for state in TransferState] == [
            "idle",
            "active",
            "suspended",
            "complete",
        ]


class TestTransferProgress:
    def test_defaults(self) -> None:
        progress = TransferProgress()

        assert progress.total is None
        assert progress.loaded == 0
        assert progress.fraction == 0.0

    def test_fraction_and_percent(self) -> None:
        progress = TransferProgress(total=1000, loaded=250)

        assert progress.fraction == 0.25
        assert progress.percent == 25.0

    def test_fraction_capped_at_one(self) -> None:
        assert TransferProgress(total=100, loaded=150).fraction == 1.0

    def test_zero_total(self) -> None:
        assert TransferProgress(total=0, loaded=0).percent == 0.0

    def test_rejects_negative_loaded(self) -> None:
        with pytest.raises(ValidationError):
            TransferProgress(loaded=-1)

    def test_computed_fields_serialised(self) -> None:
        data = TransferProgress(total=4, loaded=1).model_dump()

        assert data == {"total": 4, "loaded": 1, "fraction": 0.25, "percent": 25.0}
