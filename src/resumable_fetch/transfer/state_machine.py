"""Finite state machine gating which transfer operations are legal."""

import typing as t
from collections.abc import Mapping

from ..domain.exceptions import IllegalTransitionError
from ..domain.transfer import TRANSITIONS, TransferState, Transition, TransitionRule
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru

TransitionHook = t.Callable[[], None]


class TransferStateMachine:
    """Explicit state machine over the static transition table.

    Firing a transition checks legality, commits the target state and only
    then runs the after-hook registered for that transition, so a hook
    always observes the post-transition state.

    Usage:
        machine = TransferStateMachine()
        machine.on(Transition.FETCH, engine.begin_fetch)

        if machine.can(Transition.FETCH):
            machine.fire(Transition.FETCH)
    """

    def __init__(
        self,
        initial: TransferState = TransferState.IDLE,
        transitions: Mapping[Transition, TransitionRule] = TRANSITIONS,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self._state = initial
        self._transitions = transitions
        self._hooks: dict[Transition, list[TransitionHook]] = {}
        self._logger = logger

    @property
    def state(self) -> TransferState:
        return self._state

    def can(self, transition: Transition) -> bool:
        """Whether transition is legal from the current state."""
        rule = self._transitions.get(transition)
        return rule is not None and self._state in rule.sources

    def on(self, transition: Transition, hook: TransitionHook) -> None:
        """Register a hook run after transition commits."""
        self._hooks.setdefault(transition, []).append(hook)

    def fire(self, transition: Transition) -> None:
        """Perform transition and run its hooks.

        Raises:
            IllegalTransitionError: If transition is not legal from the
                current state. State is left unchanged.
        """
        if not self.can(transition):
            raise IllegalTransitionError(transition, self._state)

        previous = self._state
        self._state = self._transitions[transition].target
        self._logger.debug(
            f"Transition {transition.value}: {previous.value} -> {self._state.value}"
        )

        for hook in self._hooks.get(transition, []):
            hook()
