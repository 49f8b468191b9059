"""Tests for market insights: Serper search, summaries, caching and provider selection."""

import asyncio
import json

import httpx
import pytest

from angelic.agent.llm_fake import LLMFake
from angelic.integrations.market_insights import (
    CACHE_TTL_SECONDS,
    MarketInsights,
    NoopProvider,
    SerperProvider,
    gather_market_insights,
    get_market_insights_provider,
)

pytestmark = pytest.mark.unit


def _organic(query: str) -> list[dict]:
    return [
        {"title": f"Result for {query[:20]}", "link": "https://news.ycombinator.com/item?id=1", "snippet": "Chefs want it"},
        {"title": "Second", "link": "https://techcrunch.com/farm", "snippet": "Funding round"},
    ]


class SerperStub:
    """MockTransport handler answering every search; ``fail_on`` queries get a 500."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        if self.fail_on and self.fail_on in body["q"]:
            return httpx.Response(500, json={"message": "upstream error"})
        return httpx.Response(200, json={"organic": _organic(body["q"])})


def _provider(stub: SerperStub, llm: LLMFake, **kwargs) -> SerperProvider:
    return SerperProvider(
        "serper-key",
        llm,
        api_url="https://serper.test/search",
        transport=httpx.MockTransport(stub),
        cache={},
        **kwargs,
    )


async def test_serper_summarizes_each_category():
    stub = SerperStub()
    llm = LLMFake()

    insights = await _provider(stub, llm).get_insights("farm marketplace", "en")

    assert insights.has_content
    assert insights.social_media_feedback == LLMFake.DEFAULT_REPLY
    assert insights.user_reviews == LLMFake.DEFAULT_REPLY
    assert len(insights.search_sources) == 8
    assert {s.category for s in insights.search_sources} == {"socialMedia", "competitors", "industry", "userReviews"}
    assert len(stub.requests) == 4
    request = stub.requests[0]
    assert request.headers["X-API-KEY"] == "serper-key"
    body = json.loads(request.content)
    assert body["num"] == 5
    assert (body["gl"], body["hl"]) == ("us", "en")
    assert len(llm.calls) == 4
    assert llm.calls[0]["max_tokens"] == 500


async def test_chinese_searches_use_chinese_locale():
    stub = SerperStub()

    await _provider(stub, LLMFake()).get_insights("农场直供平台", "zh")

    bodies = [json.loads(r.content) for r in stub.requests]
    assert all((b["gl"], b["hl"]) == ("cn", "zh-cn") for b in bodies)
    assert any("竞争对手" in b["q"] for b in bodies)


async def test_failed_search_leaves_its_category_empty():
    stub = SerperStub(fail_on="competitors")
    llm = LLMFake()

    insights = await _provider(stub, llm).get_insights("farm marketplace", "en")

    assert insights.competitor_analysis == ""
    assert insights.industry_trends == LLMFake.DEFAULT_REPLY
    assert "competitors" not in {s.category for s in insights.search_sources}
    assert len(llm.calls) == 3


async def test_summary_failure_leaves_its_category_empty():
    insights = await _provider(SerperStub(), LLMFake(scenario="llm_failure")).get_insights("farm marketplace", "en")

    assert not insights.has_content
    assert len(insights.search_sources) == 8


async def test_insights_are_cached_per_idea_and_language():
    stub = SerperStub()
    now = [1000.0]
    provider = _provider(stub, LLMFake(), clock=lambda: now[0])

    first = await provider.get_insights("farm marketplace", "en")
    second = await provider.get_insights("farm marketplace", "en")
    assert second is first
    assert len(stub.requests) == 4

    await provider.get_insights("farm marketplace", "zh")
    assert len(stub.requests) == 8

    now[0] += CACHE_TTL_SECONDS + 1
    await provider.get_insights("farm marketplace", "en")
    assert len(stub.requests) == 12


async def test_gather_returns_none_on_timeout():
    class SlowProvider:
        async def get_insights(self, idea, language):
            await asyncio.sleep(5)
            return MarketInsights(industry_trends="late")

    assert await gather_market_insights(SlowProvider(), "idea", "en", timeout=0.01) is None


async def test_gather_returns_none_on_error():
    class BrokenProvider:
        async def get_insights(self, idea, language):
            raise httpx.ConnectError("unreachable")

    assert await gather_market_insights(BrokenProvider(), "idea", "en", timeout=1) is None


async def test_noop_provider_has_no_content():
    insights = await gather_market_insights(NoopProvider(), "idea", "en", timeout=1)

    assert insights == MarketInsights()
    assert not insights.has_content


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ({}, NoopProvider),
        ({"MARKET_INSIGHTS_PROVIDER": "serper"}, NoopProvider),
        ({"MARKET_INSIGHTS_PROVIDER": "serper", "SERPER_API_KEY": "k"}, SerperProvider),
        ({"MARKET_INSIGHTS_PROVIDER": "serper", "SERPER_API_KEY": "k", "MARKET_INSIGHTS_ENABLED": "false"}, NoopProvider),
    ],
)
def test_provider_selection(settings_env, env, expected):
    settings_env(**{"SERPER_API_KEY": "", **env})

    assert isinstance(get_market_insights_provider(LLMFake()), expected)
