"""
Catalog document loading and hot reload for CallScript.

Reads a JSON catalog document that overrides sections of the built-in
catalog and, optionally, watches the file for changes: every change
builds a complete new :class:`PatternCatalog` and swaps it into the
engine, so classifiers never observe a half-updated rule set.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError, model_validator

from cs_common.config import get_settings
from cs_common.models import ConversationState, Intent, PatternRule, TemplateName

from dialogue import builtin_catalog
from dialogue.catalog import PatternCatalog
from dialogue.engine import CatalogRejected, DialogueEngine

logger = structlog.get_logger()


class CatalogLoadError(Exception):
    """Raised when a catalog document cannot be read or validated."""


class CatalogDocument(BaseModel):
    """On-disk catalog document.

    Every section is optional. A missing section keeps the built-in data;
    ``templates`` is merged per name over the built-in defaults.

    Attributes:
        global_patterns: Replacement global rules.
        contextual_patterns: Replacement contextual rules by state.
        templates: Default template texts to add or replace.
        intent_to_template: Replacement intent-to-template mapping.
    """

    model_config = {"extra": "forbid"}

    global_patterns: list[PatternRule] | None = Field(default=None)
    contextual_patterns: dict[ConversationState, list[PatternRule]] | None = Field(default=None)
    templates: dict[TemplateName, str] = Field(default_factory=dict)
    intent_to_template: dict[Intent, TemplateName] | None = Field(default=None)

    @model_validator(mode="after")
    def _reject_blank_templates(self) -> CatalogDocument:
        """A template entry must carry speakable text."""
        blank = sorted(name.value for name, text in self.templates.items() if not text.strip())
        if blank:
            raise ValueError(f"Templates without text: {', '.join(blank)}")
        return self

    def to_catalog(self) -> PatternCatalog:
        """Build a catalog from this document layered over the built-in data."""
        templates = dict(builtin_catalog.DEFAULT_TEMPLATES)
        templates.update(self.templates)
        return PatternCatalog(
            global_patterns=(
                self.global_patterns
                if self.global_patterns is not None
                else builtin_catalog.GLOBAL_PATTERNS
            ),
            contextual_patterns=(
                self.contextual_patterns
                if self.contextual_patterns is not None
                else builtin_catalog.CONTEXTUAL_PATTERNS
            ),
            default_templates=templates,
            intent_to_template=(
                self.intent_to_template
                if self.intent_to_template is not None
                else builtin_catalog.INTENT_TO_TEMPLATE
            ),
            forced_closing_intents=builtin_catalog.FORCED_CLOSING_INTENTS,
            state_transitions=builtin_catalog.STATE_TRANSITIONS,
            intent_transitions=builtin_catalog.INTENT_TRANSITIONS,
        )


def builtin_document() -> CatalogDocument:
    """Return the built-in catalog expressed as a full document."""
    return CatalogDocument(
        global_patterns=list(builtin_catalog.GLOBAL_PATTERNS),
        contextual_patterns={
            state: list(rules) for state, rules in builtin_catalog.CONTEXTUAL_PATTERNS.items()
        },
        templates=dict(builtin_catalog.DEFAULT_TEMPLATES),
        intent_to_template=dict(builtin_catalog.INTENT_TO_TEMPLATE),
    )


def parse_catalog(raw: bytes | str) -> PatternCatalog:
    """Parse a JSON catalog document.

    Raises:
        CatalogLoadError: If the JSON or its contents are invalid.
    """
    try:
        document = CatalogDocument.model_validate_json(raw)
    except ValidationError as exc:
        raise CatalogLoadError(f"Invalid catalog document: {exc}") from exc
    return document.to_catalog()


def load_catalog(path: str | Path) -> PatternCatalog:
    """Read and parse the catalog document at *path*.

    Raises:
        CatalogLoadError: If the file cannot be read or is invalid.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise CatalogLoadError(f"Cannot read catalog {path}: {exc}") from exc
    return parse_catalog(raw)


def dump_catalog(document: CatalogDocument) -> str:
    """Serialize *document* as pretty-printed JSON."""
    payload = document.model_dump(mode="json", exclude_none=True)
    return json.dumps(payload, ensure_ascii=False, indent=2)


class CatalogLoader:
    """Watches a catalog file and hot-reloads the engine on change.

    Args:
        engine: The :class:`DialogueEngine` to reload.
        path: Catalog document path (defaults to ``CS_CATALOG_PATH``).
        poll_interval_s: Seconds between change checks.
    """

    def __init__(
        self,
        engine: DialogueEngine,
        path: str | Path | None = None,
        poll_interval_s: float | None = None,
    ) -> None:
        settings = get_settings()
        self._engine = engine
        self._path = Path(path or settings.catalog_path)
        self._poll_interval = poll_interval_s or settings.catalog_poll_interval_s
        self._catalog_hash: str = ""
        self._running = False
        self._task: asyncio.Task[None] | None = None

    # ── lifecycle ──

    async def start(self) -> None:
        """Load the catalog once, then begin the background polling loop."""
        self.reload_if_changed()
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("catalog_loader_started", path=str(self._path), poll_interval_s=self._poll_interval)

    async def stop(self) -> None:
        """Stop the background polling loop."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("catalog_loader_stopped")

    # ── polling ──

    async def _poll_loop(self) -> None:
        """Check the catalog file at the configured interval."""
        while self._running:
            await asyncio.sleep(self._poll_interval)
            try:
                self.reload_if_changed()
            except CatalogLoadError as exc:
                logger.error("catalog_reload_failed", path=str(self._path), error=str(exc))
            except Exception:
                logger.exception("catalog_loader_poll_error", path=str(self._path))

    def reload_if_changed(self) -> bool:
        """Reload the engine if the catalog file content changed.

        Returns:
            ``True`` when a new snapshot was swapped in.

        Raises:
            CatalogLoadError: If the file cannot be read or is invalid;
                the engine keeps its current snapshot.
        """
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            raise CatalogLoadError(f"Cannot read catalog {self._path}: {exc}") from exc

        new_hash = hashlib.sha256(raw).hexdigest()
        if new_hash == self._catalog_hash:
            return False

        catalog = parse_catalog(raw)
        try:
            problems = self._engine.reload(catalog)
        except CatalogRejected as exc:
            raise CatalogLoadError(f"Rejected catalog {self._path}: {exc}") from exc
        self._catalog_hash = new_hash
        logger.info("catalog_hot_reloaded", path=str(self._path), problems=len(problems))
        return True
