"""
Dialogue engine entry point for CallScript.

Configures logging from the environment and builds the process-wide
:class:`DialogueEngine`, loading the catalog document named by
``CS_CATALOG_PATH`` when one is configured.
"""

from __future__ import annotations

import structlog

from cs_common.config import Settings, get_settings
from cs_common.logging import configure_logging

from dialogue.catalog import PatternCatalog
from dialogue.catalog_loader import load_catalog
from dialogue.engine import DialogueEngine

logger = structlog.get_logger()


def build_engine(settings: Settings | None = None) -> DialogueEngine:
    """Create a dialogue engine from *settings*.

    Args:
        settings: Settings to use (defaults to :func:`get_settings`).

    Returns:
        An engine over the configured catalog, or the built-in one.

    Raises:
        CatalogLoadError: If a configured catalog document is invalid.
    """
    settings = settings or get_settings()
    if settings.catalog_path:
        catalog = load_catalog(settings.catalog_path)
        logger.info("catalog_loaded", path=settings.catalog_path)
    else:
        catalog = PatternCatalog.builtin()
        logger.info("catalog_builtin_loaded")
    return DialogueEngine(catalog)


def startup(settings: Settings | None = None) -> DialogueEngine:
    """Configure logging and build the engine."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json=settings.log_json)
    engine = build_engine(settings)
    logger.info("dialogue_engine_ready")
    return engine
