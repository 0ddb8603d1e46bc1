"""
Tests for template resolution.

Validates override precedence, placeholder substitution, missing
placeholder degradation, and the not-found error path.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from cs_common.models import ConversationProfile, Intent, TemplateName

from dialogue import builtin_catalog
from dialogue.catalog import PatternCatalog, TemplateNotFound
from dialogue.templates import TemplateResolver, placeholders, render


class TestRender:

    def test_substitutes_all_placeholders(self) -> None:
        text = render("{{companyName}}の{{representativeName}}です。", {
            "companyName": "A社",
            "representativeName": "佐藤",
        })
        assert text == "A社の佐藤です。"

    def test_repeated_placeholder(self) -> None:
        assert render("{{x}}と{{x}}", {"x": "a"}) == "aとa"

    def test_whitespace_inside_braces(self) -> None:
        assert render("{{ companyName }}です", {"companyName": "A社"}) == "A社です"

    def test_text_without_placeholders_unchanged(self) -> None:
        assert render("本日はありがとうございました。", {}) == "本日はありがとうございました。"

    def test_missing_placeholder_becomes_empty(self) -> None:
        with patch("dialogue.templates.logger") as mock_logger:
            text = render("{{companyName}}の{{representativeName}}です。", {"companyName": "A社"},
                          template_name="company_confirmation")
        assert text == "A社のです。"
        mock_logger.warning.assert_called_once_with(
            "template_placeholder_missing",
            template="company_confirmation",
            placeholders=["representativeName"],
        )

    def test_empty_string_value_is_not_missing(self) -> None:
        with patch("dialogue.templates.logger") as mock_logger:
            assert render("[{{x}}]", {"x": ""}) == "[]"
        mock_logger.warning.assert_not_called()

    def test_single_braces_left_alone(self) -> None:
        assert render("{companyName}", {"companyName": "A社"}) == "{companyName}"

    def test_placeholders_in_order(self) -> None:
        template = builtin_catalog.DEFAULT_TEMPLATES[TemplateName.INITIAL]
        assert placeholders(template) == [
            "selfIntroduction",
            "serviceDescription",
            "serviceName",
            "targetDepartment",
            "targetPerson",
        ]


class TestTemplateResolver:

    def test_default_used_without_override(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog)
        assert resolver.resolve(Intent.CLOSING) == "本日はありがとうございました。失礼いたします。"

    def test_override_wins(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog, {"rejection": "失礼いたしました。"})
        assert resolver.resolve(Intent.REJECTION) == "失礼いたしました。"

    def test_override_keyed_by_enum(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog, {TemplateName.ABSENT: "また改めます。"})
        assert resolver.resolve(Intent.ABSENT) == "また改めます。"

    def test_empty_override_ignored(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog, {"closing": ""})
        assert resolver.resolve(Intent.CLOSING) == catalog.get_default_template("closing")

    @pytest.mark.parametrize("blank", ["  ", "\n", "　"])
    def test_whitespace_override_ignored(self, catalog: PatternCatalog, blank: str) -> None:
        resolver = TemplateResolver(catalog, {"unknown": blank})
        assert resolver.resolve(Intent.UNKNOWN) == catalog.get_default_template("unknown")

    def test_whitespace_override_agrees_with_missing_check(self) -> None:
        catalog = PatternCatalog(
            global_patterns=(),
            contextual_patterns={},
            default_templates={},
            intent_to_template=builtin_catalog.INTENT_TO_TEMPLATE,
        )
        overrides = {"unknown": "  "}
        assert "unknown" in catalog.find_missing_templates(overrides)
        with pytest.raises(TemplateNotFound):
            TemplateResolver(catalog, overrides).resolve(Intent.UNKNOWN)

    def test_override_is_rendered(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog, {"closing": "{{companyName}}でした。"})
        assert resolver.resolve(Intent.CLOSING, {"companyName": "A社"}) == "A社でした。"

    def test_intent_mapping(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog)
        assert resolver.template_name(Intent.TRANSFER_HANDOVER) == TemplateName.POSITIVE_RESPONSE
        assert resolver.template_name(Intent.PERSON_CHANGED) == TemplateName.TRANSFER_ACCEPTED
        assert resolver.template_name("small_talk") == TemplateName.UNKNOWN

    def test_unmapped_intent_uses_unknown_template(self, catalog: PatternCatalog) -> None:
        resolver = TemplateResolver(catalog)
        assert resolver.resolve(Intent.UNKNOWN) == "申し訳ございません。もう一度お聞きしてもよろしいでしょうか？"

    def test_profile_context(self, catalog: PatternCatalog, profile: ConversationProfile) -> None:
        resolver = TemplateResolver(catalog)
        text = resolver.resolve(Intent.COMPANY_INQUIRY, profile.to_context())
        assert text.startswith("失礼しました。AIコールシステム株式会社の佐藤です。")
        assert "AIアシスタントサービス" in text

    def test_missing_default_raises(self) -> None:
        templates = dict(builtin_catalog.DEFAULT_TEMPLATES)
        del templates[TemplateName.ABSENT]
        catalog = PatternCatalog(
            global_patterns=builtin_catalog.GLOBAL_PATTERNS,
            contextual_patterns=builtin_catalog.CONTEXTUAL_PATTERNS,
            default_templates=templates,
            intent_to_template=builtin_catalog.INTENT_TO_TEMPLATE,
        )
        resolver = TemplateResolver(catalog)
        with patch("dialogue.templates.logger") as mock_logger:
            with pytest.raises(TemplateNotFound):
                resolver.resolve(Intent.ABSENT)
        mock_logger.error.assert_called_once_with("template_not_found", template="absent")

    def test_override_rescues_missing_default(self) -> None:
        catalog = PatternCatalog(
            global_patterns=(),
            contextual_patterns={},
            default_templates={},
            intent_to_template=builtin_catalog.INTENT_TO_TEMPLATE,
        )
        resolver = TemplateResolver(catalog, {"absent": "また改めます。"})
        assert resolver.resolve(Intent.ABSENT) == "また改めます。"

    def test_resolve_name_unknown_raises(self, catalog: PatternCatalog) -> None:
        with pytest.raises(TemplateNotFound):
            TemplateResolver(catalog).resolve_name("sales_pitch")

    @pytest.mark.parametrize("intent", list(Intent))
    def test_every_intent_resolves_with_empty_context(self, catalog: PatternCatalog, intent: Intent) -> None:
        assert TemplateResolver(catalog).resolve(intent, {})
