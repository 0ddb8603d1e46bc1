"""
Built-in pattern, template, and transition data for the CallScript
dialogue engine.

Global rules are always active; contextual rules are only consulted in
the conversation state they are registered under. Declaration order is
significant: it breaks ties between equally ranked matches.
"""

from __future__ import annotations

from cs_common.models import ConversationState, Intent, PatternRule, TemplateName

# ── keyword groups shared by several contextual rules ──

_PURPOSE_KEYWORDS: tuple[str, ...] = (
    "ご用件", "用件は", "用件を", "どういった", "なんの用", "何の件",
    "どのような", "どんな", "何のお話", "用事は", "どちらの件",
)
_COMPANY_KEYWORDS: tuple[str, ...] = (
    "社名", "どちら様", "会社名", "お名前", "どこの", "どちらから",
    "もう一度社名を", "社名をもう一度", "会社名をもう一度",
)
_HEARBACK_KEYWORDS: tuple[str, ...] = (
    "はい？", "もしもし？", "えっ？", "聞こえない", "聞き取れない",
    "聞こえませんでした", "聞こえません",
)
_REEXPLAIN_KEYWORDS: tuple[str, ...] = (
    "なんでしょう", "何でしょうか",
    "もう一度教えて", "もう一度説明", "再度教えて",
    "もう一度お聞かせ願えますか", "もう一度お願いします",
    "用件教えて", "用件を教えて", "教えてください", "教えて",
)
_HANDOVER_KEYWORDS: tuple[str, ...] = (
    "担当者に代わります", "担当者に変わります", "担当の者に代わります", "担当の者に変わります",
    "代わります", "変わります", "替わります", "代わりますので", "変わりますので",
    "担当者を", "担当の者に", "呼んできます", "呼びます", "呼んでき",
    "お取り次ぎします", "お取り次ぎいたします", "お繋ぎします",
    "確認してみます", "聞いてみます", "確認します",
    "担当がおりますので", "担当がいますので", "詳しい者がおりますので",
    "詳しい者に", "わかる者に", "上司に", "責任者に",
)

GLOBAL_PATTERNS: tuple[PatternRule, ...] = (
    PatternRule(
        intent=Intent.REJECTION,
        keywords=(
            "お断り", "必要ない", "いらない", "結構です", "営業お断り", "間に合って",
            "受け付けない", "遠慮します", "お断りします", "今回は見送ります", "興味ない",
            "必要ありません", "迷惑", "間に合っています",
        ),
        confidence=0.9,
        priority=1,
    ),
    PatternRule(
        intent=Intent.ABSENT,
        keywords=(
            "不在", "いない", "いません", "席を外し", "出張", "会議", "休み", "外出",
            "他の電話", "おりません",
        ),
        confidence=0.85,
        priority=1,
    ),
    PatternRule(
        intent=Intent.WEBSITE_REDIRECT,
        keywords=(
            "ホームページ", "HP", "Web", "メール", "サイト", "フォーム", "問い合わせフォーム",
            "ウェブ", "新規のご提案", "ホームページから", "サイトから", "ウェブから",
        ),
        confidence=0.85,
        priority=1,
    ),
)

CONTEXTUAL_PATTERNS: dict[ConversationState, tuple[PatternRule, ...]] = {
    # answer to "is the person in charge available?"
    ConversationState.AFTER_INITIAL_QUESTION: (
        PatternRule(
            intent=Intent.CLARIFICATION_REQUEST,
            keywords=_HEARBACK_KEYWORDS + _REEXPLAIN_KEYWORDS,
            confidence=0.85,
        ),
        PatternRule(intent=Intent.PURPOSE_INQUIRY, keywords=_PURPOSE_KEYWORDS, confidence=0.85),
        PatternRule(intent=Intent.COMPANY_INQUIRY, keywords=_COMPANY_KEYWORDS, confidence=0.8),
        PatternRule(
            intent=Intent.NORMAL_RESPONSE,
            keywords=("はい", "います", "おります"),
            confidence=0.5,
        ),
        PatternRule(
            intent=Intent.TRANSFER_WAIT,
            keywords=("少々お待ち", "お待ちください", "少しお待ち"),
            confidence=0.6,
        ),
        PatternRule(
            intent=Intent.TRANSFER_CONFIRM,
            keywords=("確認します", "確認いたします"),
            confidence=0.6,
        ),
        PatternRule(intent=Intent.TRANSFER_HANDOVER, keywords=_HANDOVER_KEYWORDS, confidence=0.6),
    ),
    ConversationState.AFTER_COMPANY_CONFIRMATION: (
        PatternRule(
            intent=Intent.CLARIFICATION_REQUEST,
            keywords=_PURPOSE_KEYWORDS + _COMPANY_KEYWORDS + _HEARBACK_KEYWORDS + _REEXPLAIN_KEYWORDS,
            confidence=0.85,
        ),
        PatternRule(
            intent=Intent.NORMAL_RESPONSE,
            keywords=("はい", "お世話になります", "どうぞ"),
            confidence=0.8,
        ),
        PatternRule(intent=Intent.TRANSFER_HANDOVER, keywords=_HANDOVER_KEYWORDS, confidence=0.8),
    ),
    ConversationState.AFTER_PURPOSE_EXPLANATION: (
        PatternRule(
            intent=Intent.TRANSFER_AGREEMENT,
            keywords=(
                "わかりました", "分かりました", "お願いします", "はい、お願いします",
                "よろしくお願いします", "お話聞かせてください", "進めてください",
                "いいですよ", "大丈夫です",
            ),
            confidence=0.9,
        ),
        PatternRule(
            intent=Intent.CLARIFICATION_REQUEST,
            keywords=_PURPOSE_KEYWORDS + _COMPANY_KEYWORDS + _HEARBACK_KEYWORDS + _REEXPLAIN_KEYWORDS,
            confidence=0.85,
        ),
    ),
    # transfer accepted, waiting for the person in charge
    ConversationState.WAITING_FOR_TRANSFER: (
        PatternRule(
            intent=Intent.CLARIFICATION_REQUEST,
            keywords=_HEARBACK_KEYWORDS,
            confidence=0.85,
        ),
        PatternRule(
            intent=Intent.TRANSFER_CONFIRMED,
            keywords=("確認します", "確認いたします"),
            confidence=0.8,
        ),
        PatternRule(
            intent=Intent.PERSON_CHANGED,
            keywords=("変わりました", "代わりました", "担当の", "です", "と申します", "もしもし"),
            confidence=0.7,
        ),
    ),
}

INTENT_TO_TEMPLATE: dict[Intent, TemplateName] = {
    Intent.NORMAL_RESPONSE: TemplateName.POSITIVE_RESPONSE,
    Intent.POSITIVE_RESPONSE: TemplateName.POSITIVE_RESPONSE,
    Intent.PERSON_CHANGED: TemplateName.TRANSFER_ACCEPTED,
    Intent.TRANSFER_EXPLANATION: TemplateName.TRANSFER_EXPLANATION,
    Intent.PREPARE_TRANSFER: TemplateName.PREPARE_TRANSFER,
    Intent.TRANSFER_WAIT: TemplateName.POSITIVE_RESPONSE,
    Intent.TRANSFER_CONFIRM: TemplateName.POSITIVE_RESPONSE,
    Intent.TRANSFER_HANDOVER: TemplateName.POSITIVE_RESPONSE,
    Intent.TRANSFER_AGREEMENT: TemplateName.TRANSFER_CONFIRMED,
    Intent.TRANSFER_CONFIRMED: TemplateName.TRANSFER_CONFIRMED,
    Intent.PURPOSE_INQUIRY: TemplateName.CLARIFICATION,
    Intent.COMPANY_INQUIRY: TemplateName.CLARIFICATION,
    Intent.CLARIFICATION_REQUEST: TemplateName.CLARIFICATION,
    Intent.ABSENT: TemplateName.ABSENT,
    Intent.REJECTION: TemplateName.REJECTION,
    Intent.WEBSITE_REDIRECT: TemplateName.WEBSITE_REDIRECT,
    Intent.CLOSING: TemplateName.CLOSING,
    Intent.INITIAL: TemplateName.INITIAL,
}

DEFAULT_TEMPLATES: dict[TemplateName, str] = {
    TemplateName.COMPANY_CONFIRMATION: "{{companyName}}でございます。{{representativeName}}です。",
    TemplateName.CLARIFICATION: (
        "失礼しました。{{companyName}}の{{representativeName}}です。"
        "{{serviceName}}についてご担当者さまにご案内の可否を伺っております。"
    ),
    TemplateName.POSITIVE_RESPONSE: "ありがとうございます。よろしくお願いいたします。",
    TemplateName.TRANSFER_ACCEPTED: "ありがとうございます。お待ちしております。",
    TemplateName.TRANSFER_EXPLANATION: (
        "お忙しいところすみません。{{selfIntroduction}}。弊社は{{serviceDescription}}会社でございます。\n\n"
        "これより直接担当者から詳細をご説明させて頂いてもよろしいでしょうか？\n"
        "お構いなければAIコールシステムから弊社の担当者に取り次ぎのうえご説明申し上げます。"
    ),
    TemplateName.PREPARE_TRANSFER: "ありがとうございます。よろしくお願いいたします。",
    TemplateName.ABSENT: "承知しました。では、また改めてお電話いたします。ありがとうございました。",
    TemplateName.REJECTION: "承知いたしました。本日は突然のご連絡、失礼いたしました。よろしくお願いいたします。",
    TemplateName.WEBSITE_REDIRECT: (
        "承知しました。御社ホームページの問い合わせフォームからご連絡いたします。ありがとうございました。"
    ),
    TemplateName.CLOSING: "本日はありがとうございました。失礼いたします。",
    TemplateName.TRANSFER_CONFIRMED: "ありがとうございます。転送いたしますので少々お待ち下さい。",
    TemplateName.INITIAL: (
        "お世話になります。{{selfIntroduction}}。弊社は{{serviceDescription}}会社でございます。"
        "{{serviceName}}について、是非御社の{{targetDepartment}}にご案内できればと思いお電話をさせていただきました。"
        "本日、{{targetPerson}}はいらっしゃいますでしょうか？"
    ),
    TemplateName.UNKNOWN: "申し訳ございません。もう一度お聞きしてもよろしいでしょうか？",
}

# ── transitions ──

FORCED_CLOSING_INTENTS: frozenset[Intent] = frozenset({
    Intent.REJECTION,
    Intent.ABSENT,
    Intent.WEBSITE_REDIRECT,
    Intent.CLOSING,
})
"""Intents that end the script from any state."""

STATE_TRANSITIONS: dict[ConversationState, dict[Intent, ConversationState]] = {
    ConversationState.INITIAL: {
        Intent.INITIAL: ConversationState.AFTER_INITIAL_QUESTION,
    },
    ConversationState.AFTER_INITIAL_QUESTION: {
        Intent.PURPOSE_INQUIRY: ConversationState.AFTER_COMPANY_CONFIRMATION,
        Intent.COMPANY_INQUIRY: ConversationState.AFTER_COMPANY_CONFIRMATION,
        Intent.NORMAL_RESPONSE: ConversationState.WAITING_FOR_TRANSFER,
        Intent.TRANSFER_WAIT: ConversationState.WAITING_FOR_TRANSFER,
        Intent.TRANSFER_CONFIRM: ConversationState.WAITING_FOR_TRANSFER,
        Intent.TRANSFER_HANDOVER: ConversationState.WAITING_FOR_TRANSFER,
    },
    ConversationState.AFTER_COMPANY_CONFIRMATION: {
        Intent.NORMAL_RESPONSE: ConversationState.AFTER_PURPOSE_EXPLANATION,
        Intent.TRANSFER_HANDOVER: ConversationState.WAITING_FOR_TRANSFER,
    },
    ConversationState.AFTER_PURPOSE_EXPLANATION: {
        Intent.TRANSFER_AGREEMENT: ConversationState.WAITING_FOR_TRANSFER,
    },
    ConversationState.WAITING_FOR_TRANSFER: {
        Intent.PERSON_CHANGED: ConversationState.AFTER_PURPOSE_EXPLANATION,
    },
}

INTENT_TRANSITIONS: dict[Intent, ConversationState] = {
    Intent.TRANSFER_AGREEMENT: ConversationState.WAITING_FOR_TRANSFER,
}
"""State-independent targets used when the current state has no entry."""
