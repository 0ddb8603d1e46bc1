"""
Tests for the conversation state machine.

Validates forced closing, the absorbing terminal state, per-state and
state-independent transitions, tolerance of invalid input, the
orchestrator action hints, and the per-call history.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from cs_common.models import ConversationState, Intent, TurnAction

from dialogue.state_machine import (
    TERMINAL_STATE,
    ConversationStateMachine,
    Transition,
    TransitionTable,
    action_for,
)

S = ConversationState


class TestTransitionTable:

    @pytest.mark.parametrize("state", list(S))
    @pytest.mark.parametrize(
        "intent",
        [Intent.REJECTION, Intent.ABSENT, Intent.WEBSITE_REDIRECT, Intent.CLOSING],
    )
    def test_forced_closing_from_every_state(
        self,
        transitions: TransitionTable,
        state: ConversationState,
        intent: Intent,
    ) -> None:
        assert transitions.next_state(state, intent) == S.CLOSING

    @pytest.mark.parametrize("intent", list(Intent))
    def test_closing_is_absorbing(self, transitions: TransitionTable, intent: Intent) -> None:
        assert transitions.next_state(S.CLOSING, intent) == S.CLOSING

    @pytest.mark.parametrize(
        ("state", "intent", "expected"),
        [
            (S.INITIAL, Intent.INITIAL, S.AFTER_INITIAL_QUESTION),
            (S.AFTER_INITIAL_QUESTION, Intent.PURPOSE_INQUIRY, S.AFTER_COMPANY_CONFIRMATION),
            (S.AFTER_INITIAL_QUESTION, Intent.COMPANY_INQUIRY, S.AFTER_COMPANY_CONFIRMATION),
            (S.AFTER_INITIAL_QUESTION, Intent.NORMAL_RESPONSE, S.WAITING_FOR_TRANSFER),
            (S.AFTER_INITIAL_QUESTION, Intent.TRANSFER_WAIT, S.WAITING_FOR_TRANSFER),
            (S.AFTER_INITIAL_QUESTION, Intent.TRANSFER_CONFIRM, S.WAITING_FOR_TRANSFER),
            (S.AFTER_INITIAL_QUESTION, Intent.TRANSFER_HANDOVER, S.WAITING_FOR_TRANSFER),
            (S.AFTER_COMPANY_CONFIRMATION, Intent.NORMAL_RESPONSE, S.AFTER_PURPOSE_EXPLANATION),
            (S.AFTER_COMPANY_CONFIRMATION, Intent.TRANSFER_HANDOVER, S.WAITING_FOR_TRANSFER),
            (S.AFTER_PURPOSE_EXPLANATION, Intent.TRANSFER_AGREEMENT, S.WAITING_FOR_TRANSFER),
            (S.WAITING_FOR_TRANSFER, Intent.PERSON_CHANGED, S.AFTER_PURPOSE_EXPLANATION),
        ],
    )
    def test_state_entries(
        self,
        transitions: TransitionTable,
        state: ConversationState,
        intent: Intent,
        expected: ConversationState,
    ) -> None:
        assert transitions.next_state(state, intent) == expected

    def test_intent_level_entry_applies_in_any_open_state(self, transitions: TransitionTable) -> None:
        assert transitions.next_state(S.AFTER_INITIAL_QUESTION, Intent.TRANSFER_AGREEMENT) == (
            S.WAITING_FOR_TRANSFER
        )

    @pytest.mark.parametrize("state", [s for s in S if s != S.CLOSING])
    def test_unknown_keeps_state(self, transitions: TransitionTable, state: ConversationState) -> None:
        assert transitions.next_state(state, Intent.UNKNOWN) == state

    def test_clarification_keeps_state(self, transitions: TransitionTable) -> None:
        assert transitions.next_state(S.AFTER_PURPOSE_EXPLANATION, Intent.CLARIFICATION_REQUEST) == (
            S.AFTER_PURPOSE_EXPLANATION
        )

    def test_unmapped_pair_keeps_state(self, transitions: TransitionTable) -> None:
        assert transitions.next_state(S.WAITING_FOR_TRANSFER, Intent.NORMAL_RESPONSE) == S.WAITING_FOR_TRANSFER

    def test_accepts_plain_strings(self, transitions: TransitionTable) -> None:
        assert transitions.next_state("afterPurposeExplanation", "transfer_agreement") == S.WAITING_FOR_TRANSFER

    def test_unknown_state_treated_as_initial(self, transitions: TransitionTable) -> None:
        with patch("dialogue.state_machine.logger") as mock_logger:
            assert transitions.next_state("afterSmallTalk", Intent.INITIAL) == S.AFTER_INITIAL_QUESTION
        mock_logger.warning.assert_called_once_with("transition_unknown_state", state="afterSmallTalk")

    def test_unknown_intent_treated_as_unknown(self, transitions: TransitionTable) -> None:
        assert transitions.next_state(S.AFTER_INITIAL_QUESTION, "small_talk") == S.AFTER_INITIAL_QUESTION

    def test_idempotent(self, transitions: TransitionTable) -> None:
        first = transitions.next_state(S.AFTER_INITIAL_QUESTION, Intent.COMPANY_INQUIRY)
        second = transitions.next_state(S.AFTER_INITIAL_QUESTION, Intent.COMPANY_INQUIRY)
        assert first == second == S.AFTER_COMPANY_CONFIRMATION


class TestActionFor:

    def test_absent_schedules_callback(self) -> None:
        assert action_for(Intent.ABSENT, S.CLOSING) == TurnAction.SCHEDULE_CALLBACK

    @pytest.mark.parametrize("intent", [Intent.REJECTION, Intent.WEBSITE_REDIRECT, Intent.CLOSING])
    def test_closing_ends_call(self, intent: Intent) -> None:
        assert action_for(intent, S.CLOSING) == TurnAction.END_CALL

    def test_transfer_agreement_transfers(self) -> None:
        assert action_for(Intent.TRANSFER_AGREEMENT, S.WAITING_FOR_TRANSFER) == TurnAction.TRANSFER

    def test_other_intents_continue(self) -> None:
        assert action_for(Intent.NORMAL_RESPONSE, S.WAITING_FOR_TRANSFER) == TurnAction.CONTINUE
        assert action_for(Intent.UNKNOWN, S.AFTER_INITIAL_QUESTION) == TurnAction.CONTINUE


class TestConversationStateMachine:

    def test_starts_initial(self, machine: ConversationStateMachine) -> None:
        assert machine.state == S.INITIAL
        assert machine.history == []
        assert not machine.is_closed

    def test_apply_advances_and_records(
        self,
        machine: ConversationStateMachine,
        transitions: TransitionTable,
    ) -> None:
        assert machine.apply(Intent.INITIAL, transitions) == S.AFTER_INITIAL_QUESTION
        assert machine.apply(Intent.UNKNOWN, transitions) == S.AFTER_INITIAL_QUESTION
        assert machine.history == [
            Transition(S.INITIAL, Intent.INITIAL, S.AFTER_INITIAL_QUESTION),
            Transition(S.AFTER_INITIAL_QUESTION, Intent.UNKNOWN, S.AFTER_INITIAL_QUESTION),
        ]

    def test_logs_only_real_changes(
        self,
        machine: ConversationStateMachine,
        transitions: TransitionTable,
    ) -> None:
        with patch("dialogue.state_machine.logger") as mock_logger:
            machine.apply(Intent.INITIAL, transitions)
            machine.apply(Intent.UNKNOWN, transitions)
        mock_logger.info.assert_called_once_with(
            "conversation_state_changed",
            call_id="CA-test-0001",
            from_state="initial",
            to_state="afterInitialQuestion",
            intent="initial",
        )

    def test_closed_after_rejection(
        self,
        machine: ConversationStateMachine,
        transitions: TransitionTable,
    ) -> None:
        machine.apply(Intent.INITIAL, transitions)
        machine.apply(Intent.REJECTION, transitions)
        assert machine.is_closed
        assert machine.state == TERMINAL_STATE
        machine.apply(Intent.NORMAL_RESPONSE, transitions)
        assert machine.state == TERMINAL_STATE

    def test_machines_are_independent(self, transitions: TransitionTable) -> None:
        first = ConversationStateMachine(call_id="a")
        second = ConversationStateMachine(call_id="b")
        first.apply(Intent.INITIAL, transitions)
        assert second.state == S.INITIAL
        assert second.history == []
