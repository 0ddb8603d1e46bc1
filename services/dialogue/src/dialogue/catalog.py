"""
Pattern catalog for the CallScript dialogue engine.

An immutable snapshot of everything the engine reads while handling a
turn: global and per-state keyword rules, default template texts, the
intent-to-template mapping, and the transition configuration. The
catalog is built once and injected; a reload builds a new snapshot
instead of mutating the current one.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

import structlog

from cs_common.models import (
    REQUIRED_TEMPLATES,
    ConversationState,
    Intent,
    PatternRule,
    TemplateName,
)

from dialogue import builtin_catalog

logger = structlog.get_logger()


class TemplateNotFound(KeyError):
    """Raised when a template name has neither an override nor a default."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Template not found: {self.name!r}"


def _template_key(name: str | TemplateName) -> TemplateName:
    """Coerce *name* to a :class:`TemplateName` or raise ``TemplateNotFound``."""
    try:
        return TemplateName(name)
    except ValueError:
        raise TemplateNotFound(str(name)) from None


class PatternCatalog:
    """Read-only registry of rules, templates, and transitions.

    Args:
        global_patterns: State-independent rules in evaluation order.
        contextual_patterns: Rules keyed by the state they apply in.
        default_templates: Default template text by name.
        intent_to_template: Template used to answer each intent.
        forced_closing_intents: Intents that end the script from any state.
        state_transitions: Per-state ``intent -> next state`` entries.
        intent_transitions: State-independent ``intent -> next state`` entries.
    """

    def __init__(
        self,
        global_patterns: Sequence[PatternRule],
        contextual_patterns: Mapping[ConversationState, Sequence[PatternRule]],
        default_templates: Mapping[TemplateName, str],
        intent_to_template: Mapping[Intent, TemplateName],
        forced_closing_intents: frozenset[Intent] = builtin_catalog.FORCED_CLOSING_INTENTS,
        state_transitions: Mapping[ConversationState, Mapping[Intent, ConversationState]] | None = None,
        intent_transitions: Mapping[Intent, ConversationState] | None = None,
    ) -> None:
        self._global = tuple(global_patterns)
        self._contextual = MappingProxyType(
            {state: tuple(rules) for state, rules in contextual_patterns.items()}
        )
        self._templates = MappingProxyType(dict(default_templates))
        self._intent_to_template = MappingProxyType(dict(intent_to_template))
        self._forced_closing = frozenset(forced_closing_intents)
        self._state_transitions = MappingProxyType(
            {
                state: MappingProxyType(dict(entries))
                for state, entries in (state_transitions or {}).items()
            }
        )
        self._intent_transitions = MappingProxyType(dict(intent_transitions or {}))

    @classmethod
    def builtin(cls) -> PatternCatalog:
        """Return a catalog holding the built-in script data."""
        return cls(
            global_patterns=builtin_catalog.GLOBAL_PATTERNS,
            contextual_patterns=builtin_catalog.CONTEXTUAL_PATTERNS,
            default_templates=builtin_catalog.DEFAULT_TEMPLATES,
            intent_to_template=builtin_catalog.INTENT_TO_TEMPLATE,
            forced_closing_intents=builtin_catalog.FORCED_CLOSING_INTENTS,
            state_transitions=builtin_catalog.STATE_TRANSITIONS,
            intent_transitions=builtin_catalog.INTENT_TRANSITIONS,
        )

    # ── rules ──

    def get_global_patterns(self) -> tuple[PatternRule, ...]:
        """Global rules in declaration order."""
        return self._global

    def get_contextual_patterns(self, state: ConversationState | str) -> tuple[PatternRule, ...]:
        """Rules registered for *state*; empty for an unmapped or unknown state."""
        try:
            key = ConversationState(state)
        except ValueError:
            return ()
        return self._contextual.get(key, ())

    @property
    def contextual_states(self) -> tuple[ConversationState, ...]:
        """States that have contextual rules."""
        return tuple(self._contextual)

    # ── templates ──

    def get_default_template(self, name: str | TemplateName) -> str:
        """Return the default text for template *name*.

        Raises:
            TemplateNotFound: If *name* is not a known template or has no
                default in this catalog.
        """
        key = _template_key(name)
        try:
            return self._templates[key]
        except KeyError:
            raise TemplateNotFound(key.value) from None

    def template_for(self, intent: Intent | str) -> TemplateName:
        """Template used to answer *intent*; ``unknown`` when unmapped."""
        try:
            key = Intent(intent)
        except ValueError:
            return TemplateName.UNKNOWN
        return self._intent_to_template.get(key, TemplateName.UNKNOWN)

    @property
    def default_templates(self) -> Mapping[TemplateName, str]:
        """Read-only view of the default template texts."""
        return self._templates

    @property
    def intent_to_template(self) -> Mapping[Intent, TemplateName]:
        """Read-only view of the intent-to-template mapping."""
        return self._intent_to_template

    # ── transitions ──

    @property
    def forced_closing_intents(self) -> frozenset[Intent]:
        """Intents that move any state to ``closing``."""
        return self._forced_closing

    @property
    def state_transitions(self) -> Mapping[ConversationState, Mapping[Intent, ConversationState]]:
        """Read-only per-state transition entries."""
        return self._state_transitions

    @property
    def intent_transitions(self) -> Mapping[Intent, ConversationState]:
        """Read-only state-independent transition entries."""
        return self._intent_transitions

    # ── validation ──

    def validate(self) -> list[str]:
        """Check catalog integrity.

        Returns:
            Human-readable problems; empty when the catalog is sound.
        """
        problems: list[str] = []
        rule_sets: list[tuple[str, tuple[PatternRule, ...]]] = [("global", self._global)]
        rule_sets.extend((state.value, rules) for state, rules in self._contextual.items())

        for set_name, rules in rule_sets:
            for position, rule in enumerate(rules):
                if not any(keyword.strip() for keyword in rule.keywords):
                    problems.append(
                        f"Rule {rule.intent.value!r} at {set_name}[{position}] has no keywords"
                    )
                template = self.template_for(rule.intent)
                if template not in self._templates:
                    problems.append(
                        f"Rule {rule.intent.value!r} at {set_name}[{position}] resolves to "
                        f"template {template.value!r} which has no default"
                    )

        for name in REQUIRED_TEMPLATES:
            if not self._templates.get(name, "").strip():
                problems.append(f"Required template {name.value!r} has no default text")

        for problem in problems:
            logger.warning("catalog_integrity_problem", problem=problem)
        return problems

    def find_missing_templates(self, overrides: Mapping[str, str] | None = None) -> list[str]:
        """Return required template names that resolve to no text.

        Args:
            overrides: Company template overrides keyed by template name.

        Returns:
            Names of required templates missing from both *overrides* and
            the defaults.
        """
        overrides = overrides or {}
        missing: list[str] = []
        for name in REQUIRED_TEMPLATES:
            if (overrides.get(name.value) or "").strip():
                continue
            if self._templates.get(name, "").strip():
                continue
            missing.append(name.value)
        return missing
