"""
Closed enumerations for the CallScript conversation model.

Defines the intent tags the classifier can emit, the conversation
states of the outbound call script, the built-in response template
names, and the action hints handed back to the call orchestrator.
"""

from __future__ import annotations

import enum


class Intent(str, enum.Enum):
    """What the caller meant by a single utterance."""

    # positive replies
    NORMAL_RESPONSE = "normal_response"
    POSITIVE_RESPONSE = "positive_response"

    # person change / transfer
    PERSON_CHANGED = "person_changed"
    TRANSFER_EXPLANATION = "transfer_explanation"
    PREPARE_TRANSFER = "prepare_transfer"
    TRANSFER_WAIT = "transfer_wait"
    TRANSFER_CONFIRM = "transfer_confirm"
    TRANSFER_HANDOVER = "transfer_handover"
    TRANSFER_AGREEMENT = "transfer_agreement"
    TRANSFER_CONFIRMED = "transfer_confirmed"

    # inquiries
    PURPOSE_INQUIRY = "purpose_inquiry"
    COMPANY_INQUIRY = "company_inquiry"
    CLARIFICATION_REQUEST = "clarification_request"

    # call enders
    ABSENT = "absent"
    REJECTION = "rejection"
    WEBSITE_REDIRECT = "website_redirect"
    CLOSING = "closing"

    # system
    INITIAL = "initial"
    UNKNOWN = "unknown"


class ConversationState(str, enum.Enum):
    """Where in the call script the conversation currently stands."""

    INITIAL = "initial"
    AFTER_INITIAL_QUESTION = "afterInitialQuestion"
    AFTER_COMPANY_CONFIRMATION = "afterCompanyConfirmation"
    AFTER_PURPOSE_EXPLANATION = "afterPurposeExplanation"
    WAITING_FOR_TRANSFER = "waitingForTransfer"
    CLOSING = "closing"


class TemplateName(str, enum.Enum):
    """Names of the built-in response templates."""

    INITIAL = "initial"
    CLARIFICATION = "clarification"
    COMPANY_CONFIRMATION = "company_confirmation"
    POSITIVE_RESPONSE = "positive_response"
    TRANSFER_ACCEPTED = "transfer_accepted"
    TRANSFER_EXPLANATION = "transfer_explanation"
    PREPARE_TRANSFER = "prepare_transfer"
    TRANSFER_CONFIRMED = "transfer_confirmed"
    ABSENT = "absent"
    REJECTION = "rejection"
    WEBSITE_REDIRECT = "website_redirect"
    CLOSING = "closing"
    UNKNOWN = "unknown"


class TurnAction(str, enum.Enum):
    """What the orchestrator should do after speaking the response."""

    CONTINUE = "continue"
    TRANSFER = "transfer"
    SCHEDULE_CALLBACK = "schedule_callback"
    END_CALL = "end_call"


REQUIRED_TEMPLATES: tuple[TemplateName, ...] = (
    TemplateName.POSITIVE_RESPONSE,
    TemplateName.TRANSFER_EXPLANATION,
    TemplateName.PREPARE_TRANSFER,
    TemplateName.COMPANY_CONFIRMATION,
    TemplateName.CLARIFICATION,
    TemplateName.ABSENT,
    TemplateName.REJECTION,
    TemplateName.WEBSITE_REDIRECT,
    TemplateName.CLOSING,
    TemplateName.UNKNOWN,
)
"""Templates that must always resolve to non-empty text."""

TENANT_EDITABLE_TEMPLATES: tuple[TemplateName, ...] = (
    TemplateName.INITIAL,
    TemplateName.CLARIFICATION,
    TemplateName.COMPANY_CONFIRMATION,
    TemplateName.ABSENT,
    TemplateName.REJECTION,
    TemplateName.WEBSITE_REDIRECT,
    TemplateName.CLOSING,
    TemplateName.POSITIVE_RESPONSE,
    TemplateName.TRANSFER_EXPLANATION,
    TemplateName.PREPARE_TRANSFER,
    TemplateName.TRANSFER_CONFIRMED,
)
"""Templates a company may override through its conversation profile."""
