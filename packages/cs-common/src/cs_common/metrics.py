"""
Prometheus metrics helpers for CallScript.

Provides the shared metric definitions exposed by the dialogue engine:
classification counters by intent and match source, template
resolution counters, and a classification latency histogram.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# ── Prometheus metrics ──
CLASSIFICATIONS = Counter(
    "dialogue_classifications_total",
    "Total number of utterances classified, by intent and match source.",
    ["intent", "source"],
)
CLASSIFICATION_SECONDS = Histogram(
    "dialogue_classification_seconds",
    "Time spent classifying a single utterance.",
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)
TEMPLATES_RESOLVED = Counter(
    "dialogue_templates_resolved_total",
    "Total number of templates rendered, by template name and origin.",
    ["template", "origin"],
)
PLACEHOLDERS_MISSING = Counter(
    "dialogue_template_placeholders_missing_total",
    "Total number of placeholders substituted with an empty string.",
    ["template"],
)
CATALOG_RELOADS = Counter(
    "dialogue_catalog_reloads_total",
    "Total number of catalog snapshot swaps.",
)
