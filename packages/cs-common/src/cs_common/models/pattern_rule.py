"""
Keyword pattern rule model for CallScript.

A pattern rule ties an intent to an ordered set of keywords. A rule
matches an utterance when any of its keywords occurs in it; the
confidence and optional priority decide between competing matches.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cs_common.models.conversation import Intent


class PatternRule(BaseModel):
    """A lexical intent-detection rule.

    Attributes:
        intent: Intent emitted when the rule matches.
        keywords: Keywords in declaration order; any one matching is enough.
        confidence: Confidence reported for a match, in (0, 1].
        priority: Optional precedence, lower wins. Only global rules
            carry one; ``None`` ranks after every explicit priority.
    """

    model_config = ConfigDict(frozen=True)

    intent: Intent = Field(..., description="Intent emitted on match.")
    keywords: tuple[str, ...] = Field(
        default=(),
        description="Keywords in declaration order.",
    )
    confidence: float = Field(
        ...,
        gt=0.0,
        le=1.0,
        description="Confidence reported for a match.",
    )
    priority: int | None = Field(
        default=None,
        ge=0,
        description="Precedence among matching rules (lower wins).",
    )
