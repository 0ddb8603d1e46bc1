"""
Intent classifier for the CallScript dialogue engine.

Matches a transcribed utterance against the catalog's global rules and
then against the contextual rules of the current conversation state.
Global matches always preempt contextual ones. Among several matching
rules the winner is chosen by priority, then confidence, then
declaration order.
"""

from __future__ import annotations

import sys

import structlog

from cs_common.models import ClassificationResult, ConversationState, MatchSource

from dialogue.catalog import PatternCatalog
from dialogue.keyword_index import KeywordIndex, RuleHit, normalize_text

logger = structlog.get_logger()

# rules without an explicit priority rank after every explicit one
_NO_PRIORITY: int = sys.maxsize


def _rank(hit: RuleHit) -> tuple[int, float, int]:
    """Sort key: lowest priority, highest confidence, earliest declaration."""
    priority = hit.rule.priority if hit.rule.priority is not None else _NO_PRIORITY
    return (priority, -hit.rule.confidence, hit.position)


class IntentClassifier:
    """Deterministic lexical intent classifier.

    Keyword indexes are built once from the catalog at construction time;
    the classifier holds no per-call state and may be shared across any
    number of concurrently handled calls.

    Args:
        catalog: Catalog snapshot to classify against.
    """

    def __init__(self, catalog: PatternCatalog) -> None:
        self._catalog = catalog
        self._global_index = KeywordIndex(catalog.get_global_patterns(), name="global")
        self._contextual_indexes: dict[ConversationState, KeywordIndex] = {
            state: KeywordIndex(catalog.get_contextual_patterns(state), name=state.value)
            for state in catalog.contextual_states
        }

    @property
    def catalog(self) -> PatternCatalog:
        """The catalog snapshot this classifier was built from."""
        return self._catalog

    def classify(self, utterance: str | None, state: ConversationState | str) -> ClassificationResult:
        """Return the best intent for *utterance* in *state*.

        Args:
            utterance: Transcribed caller utterance.
            state: Current conversation state of the call.

        Returns:
            The winning :class:`ClassificationResult`, or the ``unknown``
            result when no rule matches.
        """
        text = normalize_text(utterance or "")
        if not text:
            return ClassificationResult.unknown()

        best = self._best(self._global_index.search(text))
        if best is not None:
            return self._result(best, MatchSource.GLOBAL)

        index = self._contextual_index(state)
        if index is not None:
            best = self._best(index.search(text))
            if best is not None:
                return self._result(best, MatchSource.CONTEXTUAL)

        logger.debug("utterance_unclassified", state=str(getattr(state, "value", state)))
        return ClassificationResult.unknown()

    # ── internal ──

    def _contextual_index(self, state: ConversationState | str) -> KeywordIndex | None:
        try:
            key = ConversationState(state)
        except ValueError:
            logger.debug("classifier_unmapped_state", state=str(state))
            return None
        return self._contextual_indexes.get(key)

    @staticmethod
    def _best(hits: list[RuleHit]) -> RuleHit | None:
        if not hits:
            return None
        return min(hits, key=_rank)

    @staticmethod
    def _result(hit: RuleHit, source: MatchSource) -> ClassificationResult:
        return ClassificationResult(
            intent=hit.rule.intent,
            confidence=hit.rule.confidence,
            matched_keyword=hit.keyword,
            source=source,
        )
