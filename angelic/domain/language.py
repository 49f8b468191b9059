"""Conversation language detection.

Pure functions. A conversation is Chinese when the share of CJK unified
ideographs in the user's own messages exceeds a tunable threshold
(Settings.cjk_language_threshold, 0.2 by default). Only user turns are sampled
since the assistant always answers in the UI language.
"""

import re
from collections.abc import Iterable
from typing import Literal

Language = Literal["zh", "en"]

DEFAULT_LANGUAGE: Language = "en"
SUPPORTED_LANGUAGES: tuple[Language, ...] = ("zh", "en")

CJK_PATTERN = re.compile(r"[\u4e00-\u9fa5]")


def cjk_ratio(text: str) -> float:
    """Share of CJK characters in ``text``; 0.0 for empty text."""
    if not text:
        return 0.0
    return len(CJK_PATTERN.findall(text)) / len(text)


def contains_cjk(text: str) -> bool:
    return bool(text) and CJK_PATTERN.search(text) is not None


def detect_text_language(text: str, threshold: float | None = None) -> Language:
    """Classify a single piece of text as "zh" or "en".

    Empty text returns DEFAULT_LANGUAGE.
    """
    if threshold is None:
        from angelic.core.config import get_settings

        threshold = get_settings().cjk_language_threshold
    if not text:
        return DEFAULT_LANGUAGE
    return "zh" if cjk_ratio(text) > threshold else "en"


def detect_language(messages: Iterable, threshold: float | None = None) -> Language:
    """Detect the language of a conversation from its user turns.

    Args:
        messages: Objects with ``role`` and ``content`` attributes, or dicts
            with those keys
        threshold: CJK share above which the result is "zh"

    Returns:
        "zh" or "en"; DEFAULT_LANGUAGE when there is no user text at all
    """
    user_text = " ".join(
        _field(message, "content") for message in messages if _field(message, "role") == "user"
    )
    return detect_text_language(user_text, threshold)


def _field(message, name: str) -> str:
    if isinstance(message, dict):
        return message.get(name) or ""
    return getattr(message, name, "") or ""
