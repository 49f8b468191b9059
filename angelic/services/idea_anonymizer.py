"""Idea anonymizer: privacy-preserving paraphrase + category for the leaderboard.

Best-effort. Any call or parse failure, or a reply missing a field, yields the
localized fallback for that field. This function never raises.
"""

import re
from dataclasses import dataclass

import structlog

from angelic.agent.llm import LLMClient
from angelic.agent.llm_helpers import _parse_json_object
from angelic.core.config import get_settings
from angelic.domain.language import DEFAULT_LANGUAGE, Language
from angelic.prompts.anonymizer import ANONYMIZER_SYSTEM_PROMPT

logger = structlog.get_logger(__name__)

ANONYMIZER_TEMPERATURE = 0.3
ANONYMIZER_MAX_TOKENS = 300
MAX_SUMMARY_WORDS = 50

FALLBACK_SUMMARY: dict[Language, str] = {"zh": "创业项目", "en": "Startup Project"}
FALLBACK_CATEGORY: dict[Language, str] = {"zh": "其他", "en": "Other"}


@dataclass(frozen=True)
class AnonymizationResult:
    ai_summary: str
    category: str


def fallback_result(language: Language) -> AnonymizationResult:
    lang = language if language in FALLBACK_SUMMARY else DEFAULT_LANGUAGE
    return AnonymizationResult(ai_summary=FALLBACK_SUMMARY[lang], category=FALLBACK_CATEGORY[lang])


# One ideograph or one whitespace-delimited run of other text
_SUMMARY_UNIT = re.compile(r"[\u4e00-\u9fa5]|[^\s\u4e00-\u9fa5]+")


def _truncate_summary(summary: str) -> str:
    """Cap at MAX_SUMMARY_WORDS units, counting each CJK character as one."""
    units = list(_SUMMARY_UNIT.finditer(summary))
    if len(units) <= MAX_SUMMARY_WORDS:
        return summary
    return summary[: units[MAX_SUMMARY_WORDS - 1].end()]


def _clean(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


async def generate_anonymous_summary(
    idea_text: str,
    language: Language,
    llm: LLMClient,
) -> AnonymizationResult:
    """Paraphrase ``idea_text`` for public display.

    Args:
        idea_text: Raw idea as submitted
        language: Output language; also selects the fallback pair
        llm: LLMClient for the single call

    Returns:
        AnonymizationResult, never raising
    """
    lang: Language = language if language in ANONYMIZER_SYSTEM_PROMPT else DEFAULT_LANGUAGE
    fallback = fallback_result(lang)

    try:
        raw = await llm.complete(
            ANONYMIZER_SYSTEM_PROMPT[lang],
            [{"role": "user", "content": idea_text}],
            max_tokens=ANONYMIZER_MAX_TOKENS,
            temperature=ANONYMIZER_TEMPERATURE,
            model=get_settings().utility_model,
        )
        data = _parse_json_object(raw)
    except Exception as exc:
        logger.warning("idea_anonymization_failed", error=str(exc), error_type=type(exc).__name__, language=lang)
        return fallback

    summary = _clean(data.get("summary"))
    category = _clean(data.get("category"))
    if summary is None or category is None:
        logger.info("idea_anonymization_partial", has_summary=summary is not None, has_category=category is not None)

    return AnonymizationResult(
        ai_summary=_truncate_summary(summary) if summary else fallback.ai_summary,
        category=category or fallback.category,
    )
