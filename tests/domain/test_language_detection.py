"""Tests for conversation language detection.

Pure functions: only user turns are sampled, the CJK share threshold is
injectable, and empty input falls back to English without dividing by zero.
"""

import pytest

from angelic.domain.language import DEFAULT_LANGUAGE, cjk_ratio, detect_language, detect_text_language
from angelic.schemas.report import ConversationMessage

pytestmark = pytest.mark.unit


def test_cjk_ratio_empty_text_is_zero():
    assert cjk_ratio("") == 0.0


def test_cjk_ratio_counts_ideographs_only():
    assert cjk_ratio("ab你好") == pytest.approx(0.5)


def test_empty_text_defaults_to_english():
    assert detect_text_language("", 0.2) == DEFAULT_LANGUAGE == "en"


def test_chinese_text_detected():
    assert detect_text_language("一个连接本地农民和餐厅的平台", 0.2) == "zh"


def test_threshold_is_exclusive():
    """Exactly 20% CJK is still English; the share must exceed the threshold."""
    assert detect_text_language("你abcd", 0.2) == "en"
    assert detect_text_language("你好abc", 0.2) == "zh"


def test_threshold_is_tunable():
    assert detect_text_language("你abcd", 0.1) == "zh"


def test_zero_cjk_conversation_is_english():
    messages = [
        {"role": "user", "content": "A marketplace for local farmers"},
        {"role": "assistant", "content": "Who pays?"},
        {"role": "user", "content": "Restaurants do"},
    ]
    assert detect_language(messages, 0.2) == "en"


def test_assistant_turns_are_ignored():
    """A Chinese assistant reply cannot flip an English founder's conversation."""
    messages = [
        ConversationMessage(role="user", content="A marketplace for local farmers"),
        ConversationMessage(role="assistant", content="谁会为这个服务付费？请详细说明你的目标客户群体。"),
    ]
    assert detect_language(messages, 0.2) == "en"


def test_conversation_without_user_turns_defaults_to_english():
    messages = [ConversationMessage(role="assistant", content="你好，请介绍一下你的创业想法")]
    assert detect_language(messages, 0.2) == "en"


def test_three_turn_chinese_transcript():
    messages = [
        ConversationMessage(role="user", content="一个连接本地农民和餐厅的平台"),
        ConversationMessage(role="assistant", content="你的第一批客户是谁？"),
        ConversationMessage(role="user", content="城市里的独立餐厅"),
    ]
    assert detect_language(messages, 0.2) == "zh"


def test_threshold_defaults_to_settings():
    assert detect_text_language("一个连接本地农民和餐厅的平台") == "zh"
