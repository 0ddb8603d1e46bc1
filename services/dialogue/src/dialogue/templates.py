"""
Template resolution for the CallScript dialogue engine.

Maps an intent to its response template, prefers the company's
override over the catalog default, and substitutes ``{{placeholder}}``
values from the call context. A placeholder missing from the context
degrades to an empty string so the call can always continue.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

import structlog

from cs_common.metrics import PLACEHOLDERS_MISSING, TEMPLATES_RESOLVED
from cs_common.models import Intent, TemplateName

from dialogue.catalog import PatternCatalog, TemplateNotFound

logger = structlog.get_logger()

PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def render(template: str, context: Mapping[str, str], *, template_name: str = "") -> str:
    """Substitute every ``{{name}}`` in *template* from *context*.

    Args:
        template: Template text.
        context: Substitution values by placeholder name.
        template_name: Template label for log lines and metrics.

    Returns:
        The rendered text; missing placeholders become empty strings.
    """
    missing: list[str] = []

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        value = context.get(key)
        if value is None:
            missing.append(key)
            return ""
        return str(value)

    rendered = PLACEHOLDER_RE.sub(_substitute, template)
    if missing:
        PLACEHOLDERS_MISSING.labels(template=template_name or "inline").inc(len(missing))
        logger.warning(
            "template_placeholder_missing",
            template=template_name,
            placeholders=sorted(set(missing)),
        )
    return rendered


def placeholders(template: str) -> list[str]:
    """Return the placeholder names used in *template*, in order of appearance."""
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_RE.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)


class TemplateResolver:
    """Resolves intents to rendered response text for one company.

    Args:
        catalog: Catalog snapshot providing the mapping and defaults.
        overrides: Company template texts keyed by template name; empty or
            whitespace-only texts are ignored.
    """

    def __init__(
        self,
        catalog: PatternCatalog,
        overrides: Mapping[str, str] | None = None,
    ) -> None:
        self._catalog = catalog
        self._overrides: dict[str, str] = {
            str(getattr(name, "value", name)): text
            for name, text in (overrides or {}).items()
            if text and text.strip()
        }

    def template_name(self, intent: Intent | str) -> TemplateName:
        """Template used to answer *intent* (``unknown`` when unmapped)."""
        return self._catalog.template_for(intent)

    def lookup(self, name: str | TemplateName) -> str:
        """Return the raw (unrendered) text for template *name*.

        Raises:
            TemplateNotFound: If neither an override nor a default exists.
        """
        key = str(getattr(name, "value", name))
        text = self._overrides.get(key)
        if text:
            TEMPLATES_RESOLVED.labels(template=key, origin="override").inc()
            return text
        try:
            text = self._catalog.get_default_template(key)
        except TemplateNotFound:
            logger.error("template_not_found", template=key)
            raise
        TEMPLATES_RESOLVED.labels(template=key, origin="default").inc()
        return text

    def resolve_name(self, name: str | TemplateName, context: Mapping[str, str] | None = None) -> str:
        """Render template *name* with *context*."""
        key = str(getattr(name, "value", name))
        return render(self.lookup(key), context or {}, template_name=key)

    def resolve(self, intent: Intent | str, context: Mapping[str, str] | None = None) -> str:
        """Render the response template for *intent*.

        Args:
            intent: Resolved caller intent.
            context: Placeholder values (company name, representative, ...).

        Returns:
            The rendered response text.

        Raises:
            TemplateNotFound: If the mapped template has neither an override
                nor a default.
        """
        return self.resolve_name(self.template_name(intent), context)
