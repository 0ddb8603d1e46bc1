"""Shared pytest fixtures for integration tests.

Provides a dialogue engine over the built-in catalog, a company
profile, and a helper that opens a fresh call.
"""

from __future__ import annotations

import os

import pytest

os.environ.setdefault("CS_LOG_LEVEL", "DEBUG")
os.environ.setdefault("CS_LOG_JSON", "false")

from cs_common.models import ConversationProfile  # noqa: E402

from dialogue import ConversationStateMachine, DialogueEngine  # noqa: E402


@pytest.fixture(scope="session")
def engine() -> DialogueEngine:
    """Process-wide engine shared by every simulated call."""
    return DialogueEngine()


@pytest.fixture(scope="session")
def profile() -> ConversationProfile:
    """Profile of the calling company."""
    return ConversationProfile(
        company_name="AIコールシステム株式会社",
        service_name="AIアシスタントサービス",
        representative_name="佐藤",
        service_description="営業電話を生成AIが代行するサービスを提供している",
    )


@pytest.fixture()
def call(engine: DialogueEngine, profile: ConversationProfile) -> ConversationStateMachine:
    """A call that has already spoken its opening greeting."""
    machine = ConversationStateMachine(call_id="CA-integration")
    engine.open_call(machine, profile)
    return machine
