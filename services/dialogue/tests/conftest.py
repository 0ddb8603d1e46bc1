"""Shared fixtures for dialogue engine tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Make helpers in this module importable from test files
# (needed with --import-mode=importlib).
# Use *append* (not insert-0) to avoid shadowing other packages' conftests.
sys.path.append(str(Path(__file__).resolve().parent))

# Set env vars before any cs_common import.
os.environ.setdefault("CS_LOG_LEVEL", "DEBUG")
os.environ.setdefault("CS_LOG_JSON", "false")

from cs_common.models import ConversationProfile  # noqa: E402

from dialogue.catalog import PatternCatalog  # noqa: E402
from dialogue.classifier import IntentClassifier  # noqa: E402
from dialogue.engine import DialogueEngine  # noqa: E402
from dialogue.state_machine import ConversationStateMachine, TransitionTable  # noqa: E402

# ─── Fixtures ────────────────────────────────────────────────


@pytest.fixture()
def catalog() -> PatternCatalog:
    """The built-in catalog."""
    return PatternCatalog.builtin()


@pytest.fixture()
def classifier(catalog: PatternCatalog) -> IntentClassifier:
    """A classifier over the built-in catalog."""
    return IntentClassifier(catalog)


@pytest.fixture()
def transitions(catalog: PatternCatalog) -> TransitionTable:
    """The built-in transition table."""
    return TransitionTable(catalog)


@pytest.fixture()
def engine(catalog: PatternCatalog) -> DialogueEngine:
    """A dialogue engine over the built-in catalog."""
    return DialogueEngine(catalog)


@pytest.fixture()
def machine() -> ConversationStateMachine:
    """A fresh per-call state machine."""
    return ConversationStateMachine(call_id="CA-test-0001")


@pytest.fixture()
def profile() -> ConversationProfile:
    """A fully populated company profile."""
    return ConversationProfile(
        company_name="AIコールシステム株式会社",
        service_name="AIアシスタントサービス",
        representative_name="佐藤",
        service_description="営業電話を生成AIが代行するサービスを提供している",
    )
