"""
Dialogue engine facade for CallScript.

Bundles the classifier, template resolver, and transition table built
from one catalog snapshot behind the three calls the call orchestrator
makes on every caller utterance (``classify``, ``resolve_template``,
``next_state``) plus the combined ``handle_turn`` and ``open_call``.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from cs_common.metrics import CATALOG_RELOADS, CLASSIFICATION_SECONDS, CLASSIFICATIONS
from cs_common.models import (
    ClassificationResult,
    ConversationProfile,
    ConversationState,
    Intent,
    TurnResult,
)

from dialogue.catalog import PatternCatalog
from dialogue.classifier import IntentClassifier
from dialogue.state_machine import ConversationStateMachine, TransitionTable, action_for
from dialogue.templates import TemplateResolver

logger = structlog.get_logger()


class CatalogRejected(ValueError):
    """Raised when a replacement catalog leaves required templates without text."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Required templates without text: {', '.join(missing)}")
        self.missing = missing


@dataclass(frozen=True)
class _Snapshot:
    """Everything derived from one catalog, swapped as a unit."""

    catalog: PatternCatalog
    classifier: IntentClassifier
    transitions: TransitionTable


def _build_snapshot(catalog: PatternCatalog) -> _Snapshot:
    return _Snapshot(
        catalog=catalog,
        classifier=IntentClassifier(catalog),
        transitions=TransitionTable(catalog),
    )


def _context_and_overrides(
    profile: ConversationProfile | Mapping[str, str] | None,
    overrides: Mapping[str, str] | None,
) -> tuple[Mapping[str, str], Mapping[str, str]]:
    if isinstance(profile, ConversationProfile):
        merged = profile.template_overrides()
        merged.update(overrides or {})
        return profile.to_context(), merged
    return profile or {}, overrides or {}


class DialogueEngine:
    """Per-process dialogue engine over an immutable catalog snapshot.

    The engine keeps no per-call state: each call's state lives in its
    own :class:`ConversationStateMachine`. :meth:`reload` swaps the whole
    snapshot at once, so a turn that already read the snapshot finishes
    against a consistent rule set.

    Args:
        catalog: Initial catalog (defaults to :meth:`PatternCatalog.builtin`).
    """

    def __init__(self, catalog: PatternCatalog | None = None) -> None:
        catalog = catalog if catalog is not None else PatternCatalog.builtin()
        catalog.validate()
        self._snapshot = _build_snapshot(catalog)

    @property
    def catalog(self) -> PatternCatalog:
        """The catalog currently in use."""
        return self._snapshot.catalog

    def reload(self, catalog: PatternCatalog) -> list[str]:
        """Swap in a new catalog snapshot.

        Args:
            catalog: Fully built replacement catalog.

        Returns:
            Integrity problems reported by :meth:`PatternCatalog.validate`.

        Raises:
            CatalogRejected: If a required template has no default text;
                the current snapshot stays in place.
        """
        problems = catalog.validate()
        missing = catalog.find_missing_templates()
        if missing:
            logger.error("catalog_reload_rejected", missing_templates=missing)
            raise CatalogRejected(missing)
        self._snapshot = _build_snapshot(catalog)
        CATALOG_RELOADS.inc()
        logger.info("catalog_snapshot_swapped", problems=len(problems))
        return problems

    # ── collaborator API ──

    def classify(self, utterance: str | None, state: ConversationState | str) -> ClassificationResult:
        """Classify one caller utterance in the given state."""
        return self._classify(self._snapshot, utterance, state)

    def resolve_template(
        self,
        intent: Intent | str,
        context: Mapping[str, str] | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> str:
        """Render the response text for *intent*.

        Raises:
            TemplateNotFound: If the mapped template cannot be found.
        """
        resolver = TemplateResolver(self._snapshot.catalog, overrides)
        return resolver.resolve(intent, context)

    def next_state(self, current: ConversationState | str, intent: Intent | str) -> ConversationState:
        """Return the state following *current* after *intent*."""
        return self._snapshot.transitions.next_state(current, intent)

    # ── orchestration helpers ──

    def open_call(
        self,
        machine: ConversationStateMachine,
        profile: ConversationProfile | Mapping[str, str] | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> str:
        """Render the opening greeting and move the call past ``initial``.

        Args:
            machine: State machine of the call being opened.
            profile: Company profile, or a raw substitution context.
            overrides: Extra template overrides (win over the profile's).

        Returns:
            The rendered ``initial`` template.
        """
        snapshot = self._snapshot
        context, merged = _context_and_overrides(profile, overrides)
        resolver = TemplateResolver(snapshot.catalog, merged)
        text = resolver.resolve(Intent.INITIAL, context)
        machine.apply(Intent.INITIAL, snapshot.transitions)
        return text

    def handle_turn(
        self,
        utterance: str | None,
        machine: ConversationStateMachine,
        profile: ConversationProfile | Mapping[str, str] | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> TurnResult:
        """Classify, answer, and advance one caller turn.

        Args:
            utterance: Transcribed caller utterance.
            machine: State machine of the call; advanced in place.
            profile: Company profile, or a raw substitution context.
            overrides: Extra template overrides (win over the profile's).

        Returns:
            The :class:`TurnResult` for the turn.

        Raises:
            TemplateNotFound: If the mapped template cannot be found.
        """
        snapshot = self._snapshot
        previous = machine.state
        classification = self._classify(snapshot, utterance, previous)

        context, merged = _context_and_overrides(profile, overrides)
        resolver = TemplateResolver(snapshot.catalog, merged)
        template = resolver.template_name(classification.intent)
        text = resolver.resolve_name(template, context)

        next_state = machine.apply(classification.intent, snapshot.transitions)
        result = TurnResult(
            classification=classification,
            previous_state=previous,
            next_state=next_state,
            template=template,
            text=text,
            action=action_for(classification.intent, next_state),
        )
        logger.info(
            "dialogue_turn_handled",
            call_id=machine.call_id,
            intent=classification.intent.value,
            confidence=classification.confidence,
            template=template.value,
            from_state=previous.value,
            to_state=next_state.value,
            action=result.action.value,
        )
        return result

    # ── internal ──

    @staticmethod
    def _classify(
        snapshot: _Snapshot,
        utterance: str | None,
        state: ConversationState | str,
    ) -> ClassificationResult:
        started = time.perf_counter()
        result = snapshot.classifier.classify(utterance, state)
        CLASSIFICATION_SECONDS.observe(time.perf_counter() - started)
        CLASSIFICATIONS.labels(
            intent=result.intent.value,
            source=result.source.value if result.source is not None else "none",
        ).inc()
        return result
