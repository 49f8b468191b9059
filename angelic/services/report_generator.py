"""Report generator: conversation transcript in, validated DetailedReport out.

Pipeline:
1. Detect the conversation language from the user's turns
2. Build the language-specific prompt (idea + full transcript + optional
   market insights + JSON skeleton)
3. One LLM call, low temperature, bounded output (no automatic retry)
4. Parse the reply as a JSON object, else ReportFormatError
5. Require ``idea`` and a numeric ``overallScore``, else IncompleteReportError
6. Validate into DetailedReport, reading off-shape sections leniently, and
   back-fill empty required lists from REPORT_FALLBACKS so the caller always
   gets a structurally complete report
7. Drop citations that point at placeholder domains (example.com, ...)
"""

import math
from dataclasses import dataclass
from urllib.parse import urlsplit

import structlog
from pydantic import TypeAdapter
from pydantic.alias_generators import to_snake

from angelic.agent.llm import LLMClient
from angelic.agent.llm_helpers import _parse_json_object
from angelic.core.config import get_settings
from angelic.core.exceptions import AIServiceUnavailableError, IncompleteReportError, ReportFormatError
from angelic.domain.language import Language, detect_language
from angelic.domain.report_defaults import REPORT_FALLBACKS, fallback_for
from angelic.integrations.market_insights import MarketInsights
from angelic.prompts.report import REPORT_SYSTEM_PROMPT, ROLE_LABELS, build_report_prompt
from angelic.schemas.report import ConversationData, DetailedReport

logger = structlog.get_logger(__name__)

REPORT_MAX_TOKENS = 6000
REPORT_TEMPERATURE = 0.3

# Hosts the model uses for made-up citations
PLACEHOLDER_DOMAINS = (
    "example.com",
    "example.org",
    "example.net",
    "localhost",
    "test.com",
    "dummy.com",
    "placeholder.com",
    "sample.com",
)


@dataclass
class GeneratedReport:
    report: DetailedReport
    language: Language


def format_transcript(conversation: ConversationData, language: Language) -> str:
    labels = ROLE_LABELS[language]
    return "\n\n".join(f"{labels[message.role]}: {message.content}" for message in conversation.messages)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_report(raw: str) -> DetailedReport:
    """Parse and validate model output, before back-filling.

    Raises:
        ReportFormatError: Output is not a JSON object
        IncompleteReportError: ``idea`` is missing/blank or ``overallScore`` is not a number
    """
    try:
        data = _parse_json_object(raw)
    except ValueError as exc:
        logger.error("report_json_parse_failed", error=str(exc), preview=raw[:500])
        raise ReportFormatError("Report generation returned malformed output, please retry") from exc

    idea = data.get("idea")
    if not isinstance(idea, str) or not idea.strip() or not _is_number(data.get("overallScore")):
        logger.error("report_incomplete", preview=str(data)[:200])
        raise IncompleteReportError("Report data is incomplete, please retry")

    return DetailedReport.model_validate(data)


def _is_real_url(url: str) -> bool:
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    host = (parts.hostname or "").lower()
    if parts.scheme not in ("http", "https") or not host:
        return False
    return not any(host == domain or host.endswith("." + domain) for domain in PLACEHOLDER_DOMAINS)


def clean_fake_data_sources(report: DetailedReport) -> int:
    """Drop citations with placeholder or unparseable URLs.

    A section left with no sources loses the field entirely.

    Returns:
        Number of sources removed
    """
    removed = 0
    for section in (report.market_analysis, report.competitive_analysis):
        if section.data_sources is None:
            continue
        valid = [source for source in section.data_sources if _is_real_url(source.url)]
        removed += len(section.data_sources) - len(valid)
        section.data_sources = valid or None
    return removed


def backfill_required_lists(report: DetailedReport, language: Language) -> list[str]:
    """Replace empty required list fields with fallback entries.

    Returns:
        The field paths that were back-filled
    """
    filled: list[str] = []
    for path in REPORT_FALLBACKS:
        *parents, leaf = path.split(".")
        owner = report
        for parent in parents:
            owner = getattr(owner, to_snake(parent))
        attr = to_snake(leaf)
        if getattr(owner, attr):
            continue
        annotation = type(owner).model_fields[attr].annotation
        setattr(owner, attr, TypeAdapter(annotation).validate_python(fallback_for(path, language)))
        filled.append(path)
    return filled


async def generate_detailed_report(
    conversation: ConversationData,
    llm: LLMClient,
    market_insights: MarketInsights | None = None,
) -> GeneratedReport:
    """Generate a DetailedReport for ``conversation``.

    Args:
        conversation: Idea plus the persisted transcript
        llm: LLMClient used for the single generation call
        market_insights: Optional web-search context added to the prompt

    Returns:
        GeneratedReport with the validated report and the detected language

    Raises:
        AIServiceUnavailableError: The LLM call failed
        ReportFormatError: Reply was empty or not a usable JSON object
        IncompleteReportError: Reply lacked ``idea`` or a numeric ``overallScore``
    """
    settings = get_settings()
    language = detect_language(conversation.messages, settings.cjk_language_threshold)
    logger.info("report_generation_started", language=language, turns=len(conversation.messages))

    prompt = build_report_prompt(
        language,
        conversation.idea,
        format_transcript(conversation, language),
        market_insights,
    )

    try:
        raw = await llm.complete(
            REPORT_SYSTEM_PROMPT[language],
            [{"role": "user", "content": prompt}],
            max_tokens=REPORT_MAX_TOKENS,
            temperature=REPORT_TEMPERATURE,
            model=settings.report_model,
        )
    except Exception as exc:
        logger.error("report_llm_call_failed", error=str(exc), error_type=type(exc).__name__)
        raise AIServiceUnavailableError("AI report service temporarily unavailable") from exc

    if not raw or not raw.strip():
        logger.error("report_llm_empty_reply")
        raise ReportFormatError("Report generation returned malformed output, please retry")

    report = parse_report(raw)
    filled = backfill_required_lists(report, language)
    if filled:
        logger.warning("report_fields_backfilled", fields=filled, language=language)
    removed = clean_fake_data_sources(report)
    if removed:
        logger.warning("report_fake_sources_removed", count=removed)

    logger.info(
        "report_generation_completed",
        language=language,
        overall_score=report.overall_score,
        market_score=report.market_analysis.score,
        competition_score=report.competitive_analysis.score,
        business_model_score=report.business_model.score,
    )
    return GeneratedReport(report=report, language=language)
