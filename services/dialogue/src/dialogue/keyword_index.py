"""
Aho-Corasick keyword index for the CallScript dialogue engine.

Builds one pyahocorasick automaton over every keyword of an ordered
rule set so that a single O(n) pass over an utterance reports which
rules matched and which of their keywords occurred.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass

import ahocorasick
import structlog

from cs_common.models import PatternRule

logger = structlog.get_logger()


def normalize_text(text: str) -> str:
    """Fold width and case so keywords and utterances compare equally.

    NFKC turns full-width forms into their canonical width (``？`` becomes
    ``?``, half-width katakana becomes full-width); punctuation is kept.
    """
    return unicodedata.normalize("NFKC", text).strip().lower()


@dataclass(frozen=True)
class RuleHit:
    """A rule that matched an utterance.

    Attributes:
        position: Declaration index of the rule within its rule set.
        rule: The matching rule.
        keyword: First keyword of the rule, in declared order, that occurs
            in the utterance.
    """

    position: int
    rule: PatternRule
    keyword: str


class KeywordIndex:
    """Immutable Aho-Corasick index over an ordered set of pattern rules.

    Keywords are normalized with :func:`normalize_text` at build time; the
    utterance passed to :meth:`search` must already be normalized. Rules
    without usable keywords are logged and never match.

    Args:
        rules: Rules in declaration order.
        name: Label used in log lines (``global`` or a state name).
    """

    def __init__(self, rules: Sequence[PatternRule], name: str = "rules") -> None:
        self._rules: tuple[PatternRule, ...] = tuple(rules)
        self._name = name
        # per rule: normalized keyword -> declared index, for first-declared lookup
        self._keyword_order: list[dict[str, int]] = []
        self._automaton: ahocorasick.Automaton | None = None
        self._pattern_count = 0
        self._build()

    def _build(self) -> None:
        owners: dict[str, list[int]] = {}
        for position, rule in enumerate(self._rules):
            order: dict[str, int] = {}
            for declared, keyword in enumerate(rule.keywords):
                key = normalize_text(keyword)
                if key and key not in order:
                    order[key] = declared
                    owners.setdefault(key, []).append(position)
            if not order:
                logger.warning(
                    "pattern_rule_without_keywords",
                    rule_set=self._name,
                    intent=rule.intent.value,
                    position=position,
                )
            self._keyword_order.append(order)

        if owners:
            automaton = ahocorasick.Automaton()
            for key, positions in owners.items():
                automaton.add_word(key, (key, tuple(positions)))
            automaton.make_automaton()
            self._automaton = automaton
        self._pattern_count = len(owners)
        logger.debug(
            "keyword_index_built",
            rule_set=self._name,
            rule_count=len(self._rules),
            pattern_count=self._pattern_count,
        )

    # ── public API ──

    def search(self, text: str) -> list[RuleHit]:
        """Return every rule with at least one keyword in *text*.

        Args:
            text: Normalized utterance.

        Returns:
            One :class:`RuleHit` per matching rule, in declaration order.
        """
        if self._automaton is None or not text:
            return []
        found: dict[int, set[str]] = {}
        for _end, (key, positions) in self._automaton.iter(text):
            for position in positions:
                found.setdefault(position, set()).add(key)

        hits: list[RuleHit] = []
        for position in sorted(found):
            order = self._keyword_order[position]
            keyword = min(found[position], key=order.__getitem__)
            rule = self._rules[position]
            hits.append(
                RuleHit(
                    position=position,
                    rule=rule,
                    keyword=rule.keywords[order[keyword]],
                )
            )
        return hits

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        """Rules in declaration order."""
        return self._rules

    @property
    def pattern_count(self) -> int:
        """Number of distinct normalized keywords loaded."""
        return self._pattern_count

    @property
    def is_ready(self) -> bool:
        """Whether the automaton has been built and contains patterns."""
        return self._automaton is not None
