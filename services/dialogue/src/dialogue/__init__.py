"""
CallScript Dialogue Engine.

Classifies transcribed caller utterances into intents with keyword
pattern rules, resolves each intent to a scripted response template,
and advances the per-call conversation state.
"""

from dialogue.catalog import PatternCatalog, TemplateNotFound
from dialogue.engine import DialogueEngine
from dialogue.state_machine import ConversationStateMachine

__all__ = [
    "ConversationStateMachine",
    "DialogueEngine",
    "PatternCatalog",
    "TemplateNotFound",
]
