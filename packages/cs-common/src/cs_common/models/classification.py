"""
Per-utterance result models for CallScript.

Defines the transient classification result produced for every caller
utterance and the turn result that bundles it with the resolved
response text and the state transition.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from cs_common.models.conversation import (
    ConversationState,
    Intent,
    TemplateName,
    TurnAction,
)


class MatchSource(str, enum.Enum):
    """Which rule catalog produced a match."""

    GLOBAL = "global"
    CONTEXTUAL = "contextual"


class ClassificationResult(BaseModel):
    """The best intent found for one utterance.

    Attributes:
        intent: Detected intent (``unknown`` when nothing matched).
        confidence: Confidence of the winning rule (0 for ``unknown``).
        matched_keyword: First declared keyword of the winning rule found
            in the utterance.
        source: Catalog the winning rule came from (``None`` for ``unknown``).
    """

    intent: Intent = Field(..., description="Detected intent.")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Match confidence.")
    matched_keyword: str | None = Field(default=None, description="Keyword that matched.")
    source: MatchSource | None = Field(default=None, description="Originating catalog.")

    @classmethod
    def unknown(cls) -> ClassificationResult:
        """Return the result used when no rule matches."""
        return cls(intent=Intent.UNKNOWN, confidence=0.0)

    @property
    def is_unknown(self) -> bool:
        """Whether no rule matched."""
        return self.intent == Intent.UNKNOWN


class TurnResult(BaseModel):
    """Everything the orchestrator needs after one caller turn.

    Attributes:
        classification: Classifier output for the utterance.
        previous_state: State before the turn.
        next_state: State after applying the intent.
        template: Template name the response was rendered from.
        text: Rendered response text to speak.
        action: Follow-up hint for the orchestrator.
    """

    classification: ClassificationResult
    previous_state: ConversationState
    next_state: ConversationState
    template: TemplateName
    text: str
    action: TurnAction = TurnAction.CONTINUE
