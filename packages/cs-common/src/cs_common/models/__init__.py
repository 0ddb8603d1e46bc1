"""
Shared Pydantic data models for CallScript.

This package contains the conversation enumerations, keyword pattern
rules, classification and turn results, and company profiles.
"""

from cs_common.models.classification import (
    ClassificationResult,
    MatchSource,
    TurnResult,
)
from cs_common.models.conversation import (
    REQUIRED_TEMPLATES,
    TENANT_EDITABLE_TEMPLATES,
    ConversationState,
    Intent,
    TemplateName,
    TurnAction,
)
from cs_common.models.pattern_rule import PatternRule
from cs_common.models.profile import ConversationProfile

__all__ = [
    "REQUIRED_TEMPLATES",
    "TENANT_EDITABLE_TEMPLATES",
    "ClassificationResult",
    "ConversationProfile",
    "ConversationState",
    "Intent",
    "MatchSource",
    "PatternRule",
    "TemplateName",
    "TurnAction",
    "TurnResult",
]
