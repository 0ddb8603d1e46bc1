"""
Conversation state machine for the CallScript dialogue engine.

The transition table is pure configuration read from the catalog; the
per-call :class:`ConversationStateMachine` owns the authoritative state
of one call and is the only thing that mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from cs_common.models import ConversationState, Intent, TurnAction

from dialogue.catalog import PatternCatalog

logger = structlog.get_logger()

TERMINAL_STATE = ConversationState.CLOSING


class TransitionTable:
    """Static ``(state, intent) -> next state`` rules.

    Resolution order: ``closing`` absorbs everything; forced-closing
    intents go to ``closing`` from any state; then the current state's
    entry; then the intent's state-independent entry; otherwise the
    state is unchanged.

    Args:
        catalog: Catalog snapshot providing the transition configuration.
    """

    def __init__(self, catalog: PatternCatalog) -> None:
        self._forced = catalog.forced_closing_intents
        self._by_state = catalog.state_transitions
        self._by_intent = catalog.intent_transitions

    def next_state(
        self,
        current: ConversationState | str,
        intent: Intent | str,
    ) -> ConversationState:
        """Return the state that follows *current* after *intent*.

        Unknown states and intents never raise: an unrecognized state is
        treated as ``initial`` and an unrecognized intent as ``unknown``.
        """
        try:
            state = ConversationState(current)
        except ValueError:
            logger.warning("transition_unknown_state", state=str(current))
            state = ConversationState.INITIAL
        try:
            key = Intent(intent)
        except ValueError:
            key = Intent.UNKNOWN

        if state == TERMINAL_STATE:
            return TERMINAL_STATE
        if key in self._forced:
            return TERMINAL_STATE

        target = self._by_state.get(state, {}).get(key)
        if target is None:
            target = self._by_intent.get(key)
        return target if target is not None else state


def action_for(intent: Intent, next_state: ConversationState) -> TurnAction:
    """Follow-up hint for the orchestrator after a transition."""
    if intent == Intent.ABSENT:
        return TurnAction.SCHEDULE_CALLBACK
    if next_state == TERMINAL_STATE:
        return TurnAction.END_CALL
    if intent == Intent.TRANSFER_AGREEMENT:
        return TurnAction.TRANSFER
    return TurnAction.CONTINUE


@dataclass(frozen=True)
class Transition:
    """One applied transition."""

    from_state: ConversationState
    intent: Intent
    to_state: ConversationState


@dataclass
class ConversationStateMachine:
    """Authoritative conversation state of a single call.

    Attributes:
        call_id: Identifier of the owning call, for log lines.
        state: Current state (``initial`` on call start).
        history: Applied transitions, oldest first.
    """

    call_id: str = ""
    state: ConversationState = ConversationState.INITIAL
    history: list[Transition] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        """Whether the script has reached the terminal state."""
        return self.state == TERMINAL_STATE

    def apply(self, intent: Intent, table: TransitionTable) -> ConversationState:
        """Advance the state for *intent* using *table* and return it."""
        previous = self.state
        self.state = table.next_state(previous, intent)
        self.history.append(Transition(from_state=previous, intent=intent, to_state=self.state))
        if self.state != previous:
            logger.info(
                "conversation_state_changed",
                call_id=self.call_id,
                from_state=previous.value,
                to_state=self.state.value,
                intent=intent.value,
            )
        return self.state
