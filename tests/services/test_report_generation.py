"""Tests for the report generator.

Covers:
- Language detection feeds the prompt, the result and the fallback table
- Required list fields are always non-empty after back-fill
- Non-JSON / incomplete output fails the call without a partial report
- Score coercion into [0, 100]
"""

import json

import pytest

from angelic.agent.llm_fake import LLMFake, sample_report, sample_report_json
from angelic.core.exceptions import (
    AIServiceUnavailableError,
    ErrorKind,
    IncompleteReportError,
    ReportFormatError,
)
from angelic.domain.report_defaults import REPORT_FALLBACKS, fallback_for
from angelic.integrations.market_insights import MarketInsights
from angelic.schemas.report import ConversationData, ConversationMessage
from angelic.services.report_generator import (
    REPORT_MAX_TOKENS,
    REPORT_TEMPERATURE,
    backfill_required_lists,
    clean_fake_data_sources,
    format_transcript,
    generate_detailed_report,
    parse_report,
)

pytestmark = pytest.mark.unit

REQUIRED_LISTS = [
    "strengths",
    "improvements",
    "competitiveAnalysis.competitors",
    "executionPlan.phases",
    "riskAssessment.riskMatrix",
]


def _conversation(*turns: tuple[str, str]) -> ConversationData:
    messages = [ConversationMessage(role=role, content=content) for role, content in turns]
    idea = next(m.content for m in messages if m.role == "user")
    return ConversationData(idea=idea, messages=messages)


@pytest.fixture
def english_conversation():
    return _conversation(
        ("user", "A marketplace connecting local farmers with restaurants"),
        ("assistant", "Who is your first customer?"),
        ("user", "Independent restaurants in Austin"),
    )


@pytest.fixture
def chinese_conversation():
    return _conversation(
        ("user", "一个连接本地农民和餐厅的平台"),
        ("assistant", "你的第一批客户是谁？"),
        ("user", "城市里的独立餐厅，他们想要新鲜的本地食材"),
    )


def _path_value(data: dict, path: str):
    for part in path.split("."):
        data = data[part]
    return data


async def test_generates_english_report(english_conversation):
    llm = LLMFake(responses=[sample_report_json("en")])

    generated = await generate_detailed_report(english_conversation, llm)

    assert generated.language == "en"
    assert generated.report.overall_score == 72
    assert generated.report.market_analysis.score == 78
    call = llm.calls[0]
    assert call["max_tokens"] == REPORT_MAX_TOKENS
    assert call["temperature"] == REPORT_TEMPERATURE
    assert "Independent restaurants in Austin" in call["messages"][0]["content"]


async def test_chinese_example_scores_in_range(chinese_conversation):
    llm = LLMFake(responses=[sample_report_json("zh")])

    generated = await generate_detailed_report(chinese_conversation, llm)
    report = generated.report

    assert generated.language == "zh"
    assert isinstance(report.overall_score, int)
    for score in (
        report.overall_score,
        report.market_analysis.score,
        report.competitive_analysis.score,
        report.business_model.score,
    ):
        assert 0 <= score <= 100


async def test_empty_required_lists_are_backfilled(chinese_conversation):
    payload = sample_report("zh", strengths=[], improvements=None)
    payload["competitiveAnalysis"]["competitors"] = []
    del payload["executionPlan"]
    payload["riskAssessment"] = {"riskMatrix": []}
    llm = LLMFake(responses=[json.dumps(payload, ensure_ascii=False)])

    generated = await generate_detailed_report(chinese_conversation, llm)
    stored = generated.report.to_json_dict()

    for path in REQUIRED_LISTS:
        assert _path_value(stored, path) == fallback_for(path, "zh"), path


async def test_fallbacks_follow_detected_language(english_conversation):
    llm = LLMFake(responses=[sample_report_json("en", strengths=[])])

    generated = await generate_detailed_report(english_conversation, llm)

    assert generated.report.strengths == REPORT_FALLBACKS["strengths"]["en"]


async def test_present_lists_are_kept(english_conversation):
    llm = LLMFake(responses=[sample_report_json("en")])

    generated = await generate_detailed_report(english_conversation, llm)

    assert generated.report.strengths == ["Real pain point", "Differentiated supply"]
    assert generated.report.competitive_analysis.competitors[0].name == "Choco"


def test_backfill_reports_filled_paths():
    report = parse_report(json.dumps({"idea": "x", "overallScore": 50}))

    filled = backfill_required_lists(report, "en")

    assert set(filled) == set(REPORT_FALLBACKS)


async def test_non_json_reply_is_format_error(english_conversation):
    llm = LLMFake(responses=["Sorry, I cannot produce a report for this idea."])

    with pytest.raises(ReportFormatError) as exc_info:
        await generate_detailed_report(english_conversation, llm)

    assert exc_info.value.kind == ErrorKind.MALFORMED_AI_OUTPUT


async def test_json_array_reply_is_format_error(english_conversation):
    llm = LLMFake(responses=["[1, 2, 3]"])

    with pytest.raises(ReportFormatError):
        await generate_detailed_report(english_conversation, llm)


async def test_empty_reply_is_format_error(english_conversation):
    llm = LLMFake(responses=["   "])

    with pytest.raises(ReportFormatError):
        await generate_detailed_report(english_conversation, llm)


async def test_missing_overall_score_is_incomplete(english_conversation):
    payload = sample_report("en")
    del payload["overallScore"]
    llm = LLMFake(responses=[json.dumps(payload)])

    with pytest.raises(IncompleteReportError) as exc_info:
        await generate_detailed_report(english_conversation, llm)

    assert exc_info.value.kind == ErrorKind.INCOMPLETE_REPORT


async def test_blank_idea_is_incomplete(english_conversation):
    llm = LLMFake(responses=[sample_report_json("en", idea="  ")])

    with pytest.raises(IncompleteReportError):
        await generate_detailed_report(english_conversation, llm)


async def test_llm_failure_is_service_unavailable(english_conversation, llm_fake_failing):
    with pytest.raises(AIServiceUnavailableError):
        await generate_detailed_report(english_conversation, llm_fake_failing)


async def test_fenced_json_is_accepted(english_conversation):
    llm = LLMFake(responses=["```json\n" + sample_report_json("en") + "\n```"])

    generated = await generate_detailed_report(english_conversation, llm)

    assert generated.report.idea.startswith("Marketplace")


def test_scores_are_clamped_and_rounded():
    payload = sample_report("en", overallScore=99.6)
    payload["marketAnalysis"]["score"] = "150"
    payload["competitiveAnalysis"]["score"] = -20
    payload["businessModel"]["score"] = "n/a"

    report = parse_report(json.dumps(payload))

    assert report.overall_score == 100
    assert report.market_analysis.score == 100
    assert report.competitive_analysis.score == 0
    assert report.business_model.score == 0


def test_bare_string_list_items_are_accepted():
    payload = sample_report("en")
    payload["competitiveAnalysis"]["competitors"] = ["Choco", "Pepper"]

    report = parse_report(json.dumps(payload))

    assert [c.name for c in report.competitive_analysis.competitors] == ["Choco", "Pepper"]


def test_transcript_uses_localized_role_labels(chinese_conversation, english_conversation):
    assert format_transcript(english_conversation, "en") != format_transcript(chinese_conversation, "zh")
    assert "一个连接本地农民和餐厅的平台" in format_transcript(chinese_conversation, "zh")


async def test_object_trend_items_are_flattened_to_text(english_conversation):
    payload = sample_report("en")
    payload["marketAnalysis"]["industryTrends"] = [{"trend": "Farm-to-table", "impact": "High"}, "Digital procurement"]
    llm = LLMFake(responses=[json.dumps(payload)])

    generated = await generate_detailed_report(english_conversation, llm)

    assert generated.report.market_analysis.industry_trends == ["Farm-to-table; High", "Digital procurement"]


async def test_string_competitors_fall_back_to_defaults(english_conversation):
    payload = sample_report("en")
    payload["competitiveAnalysis"]["competitors"] = "No direct competitors identified"
    llm = LLMFake(responses=[json.dumps(payload)])

    generated = await generate_detailed_report(english_conversation, llm)

    stored = generated.report.to_json_dict()
    assert stored["competitiveAnalysis"]["competitors"] == fallback_for("competitiveAnalysis.competitors", "en")
    assert generated.report.competitive_analysis.score == 64


async def test_object_strength_entries_are_kept_as_text(english_conversation):
    payload = sample_report("en")
    payload["strengths"] = [{"point": "Real pain point"}, {"point": "Differentiated supply", "note": None}]
    llm = LLMFake(responses=[json.dumps(payload)])

    generated = await generate_detailed_report(english_conversation, llm)

    assert generated.report.strengths == ["Real pain point", "Differentiated supply"]


def test_unreadable_sections_become_empty_defaults():
    payload = sample_report("en")
    payload["marketAnalysis"]["userPersona"] = "Restaurant owners"
    payload["executionPlan"]["phases"] = {"phase": "MVP"}
    payload["riskAssessment"]["riskMatrix"] = [42, {"risk": "Cold-chain cost"}]

    report = parse_report(json.dumps(payload))

    assert report.market_analysis.user_persona.demographics == ""
    assert report.execution_plan.phases == []
    assert [r.risk for r in report.risk_assessment.risk_matrix] == ["42", "Cold-chain cost"]


async def test_placeholder_sources_are_removed(english_conversation):
    payload = sample_report("en")
    payload["marketAnalysis"]["dataSources"] = [
        {"title": "Farm report", "url": "https://www.usda.gov/farm-report"},
        {"title": "Made up", "url": "https://example.com/market"},
        {"title": "Relative", "url": "/reports/2024"},
    ]
    payload["competitiveAnalysis"]["dataSources"] = [{"title": "Fake", "url": "http://sub.example.org/x"}]
    llm = LLMFake(responses=[json.dumps(payload)])

    generated = await generate_detailed_report(english_conversation, llm)

    stored = generated.report.to_json_dict()
    assert stored["marketAnalysis"]["dataSources"] == [
        {"title": "Farm report", "url": "https://www.usda.gov/farm-report"}
    ]
    assert "dataSources" not in stored["competitiveAnalysis"]


def test_lookalike_domains_are_kept():
    payload = sample_report("en")
    payload["marketAnalysis"]["dataSources"] = [
        {"title": "Trends", "url": "https://latest.com/trends"},
        {"title": "Local", "url": "http://localhost:5000/r"},
    ]
    report = parse_report(json.dumps(payload))

    assert clean_fake_data_sources(report) == 1
    assert [s.url for s in report.market_analysis.data_sources] == ["https://latest.com/trends"]


async def test_market_insights_are_added_to_prompt(english_conversation):
    llm = LLMFake(responses=[sample_report_json("en")])
    insights = MarketInsights(competitor_analysis="Choco raised a Series B in 2023.")

    await generate_detailed_report(english_conversation, llm, insights)

    prompt = llm.calls[0]["messages"][0]["content"]
    assert "## Market Insights (from web search)" in prompt
    assert "Choco raised a Series B in 2023." in prompt
    assert "### Social Media Feedback" not in prompt


async def test_empty_market_insights_leave_prompt_unchanged(english_conversation):
    plain = LLMFake(responses=[sample_report_json("en")])
    empty = LLMFake(responses=[sample_report_json("en")])

    await generate_detailed_report(english_conversation, plain)
    await generate_detailed_report(english_conversation, empty, MarketInsights())

    assert empty.calls[0]["messages"] == plain.calls[0]["messages"]
    assert "Market Insights" not in plain.calls[0]["messages"][0]["content"]
