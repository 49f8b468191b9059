"""Market insights providers: optional web-search context for reports.

- NoopProvider: no external search (the default)
- SerperProvider: four Serper.dev searches (social media, competitors,
  industry trends, user reviews), each summarized by the LLM and cached per
  idea for a day

Insights are best-effort. ``gather_market_insights`` bounds the lookup with a
timeout and returns None on any failure, so report generation never waits on
or fails because of search.
"""

import asyncio
import json
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import httpx
import structlog

from angelic.agent.llm import LLMClient
from angelic.core.config import get_settings
from angelic.prompts.market_insights import (
    CATEGORY_TOPICS,
    SEARCH_CATEGORIES,
    SEARCH_LOCALE,
    SEARCH_QUERIES,
    SUMMARY_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
)

logger = structlog.get_logger(__name__)

RESULTS_PER_SEARCH = 5
CACHE_TTL_SECONDS = 24 * 60 * 60


@dataclass
class SearchSource:
    title: str
    url: str
    snippet: str
    category: str


@dataclass
class MarketInsights:
    social_media_feedback: str = ""
    competitor_analysis: str = ""
    industry_trends: str = ""
    user_reviews: str = ""
    search_sources: list[SearchSource] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return any((self.social_media_feedback, self.competitor_analysis, self.industry_trends, self.user_reviews))


class MarketInsightsProvider(Protocol):
    async def get_insights(self, idea: str, language: str) -> MarketInsights:
        """Return insights for ``idea``; an empty MarketInsights when nothing was found."""
        ...


class NoopProvider:
    async def get_insights(self, idea: str, language: str) -> MarketInsights:
        return MarketInsights()


# Shared across SerperProvider instances, which are built per request.
_insights_cache: dict[str, tuple[float, MarketInsights]] = {}


class SerperProvider:
    """Search Serper.dev and summarize each category with the LLM."""

    def __init__(
        self,
        api_key: str,
        llm: LLMClient,
        *,
        api_url: str | None = None,
        search_timeout: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
        cache: dict[str, tuple[float, MarketInsights]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_key = api_key
        self.llm = llm
        self.api_url = api_url or get_settings().serper_api_url
        self.search_timeout = search_timeout
        self._transport = transport
        self._cache = _insights_cache if cache is None else cache
        self._clock = clock

    async def get_insights(self, idea: str, language: str) -> MarketInsights:
        key = f"{language}:{idea[:100]}"
        cached = self._cache.get(key)
        if cached is not None and self._clock() - cached[0] < CACHE_TTL_SECONDS:
            logger.info("market_insights_cache_hit", language=language)
            return cached[1]

        async with httpx.AsyncClient(transport=self._transport, timeout=self.search_timeout) as client:
            results = await asyncio.gather(
                *(self._search_category(client, idea, language, category) for category in SEARCH_CATEGORIES)
            )

        summaries = [summary for summary, _ in results]
        insights = MarketInsights(
            social_media_feedback=summaries[0],
            competitor_analysis=summaries[1],
            industry_trends=summaries[2],
            user_reviews=summaries[3],
            search_sources=[source for _, sources in results for source in sources],
        )
        self._cache[key] = (self._clock(), insights)
        logger.info("market_insights_gathered", language=language, sources=len(insights.search_sources))
        return insights

    async def _search_category(
        self, client: httpx.AsyncClient, idea: str, language: str, category: str
    ) -> tuple[str, list[SearchSource]]:
        query = SEARCH_QUERIES[category][language].format(idea=idea)
        try:
            organic = await self._search(client, query, language)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("market_search_failed", category=category, error=str(exc), error_type=type(exc).__name__)
            return "", []

        top = organic[:RESULTS_PER_SEARCH]
        sources = [
            SearchSource(
                title=item.get("title", ""),
                url=item.get("link", ""),
                snippet=item.get("snippet", ""),
                category=category,
            )
            for item in top
        ]
        return await self._summarize(top, category, language), sources

    async def _search(self, client: httpx.AsyncClient, query: str, language: str) -> list[dict]:
        response = await client.post(
            self.api_url,
            headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
            json={"q": query, "num": RESULTS_PER_SEARCH, **SEARCH_LOCALE[language]},
        )
        response.raise_for_status()
        return response.json().get("organic") or []

    async def _summarize(self, results: list[dict], category: str, language: str) -> str:
        if not results:
            return ""
        items = [{"title": r.get("title"), "snippet": r.get("snippet"), "link": r.get("link")} for r in results]
        prompt = SUMMARY_PROMPT[language].format(
            topic=CATEGORY_TOPICS[category],
            results=json.dumps(items, ensure_ascii=False, indent=2),
        )
        try:
            summary = await self.llm.complete(
                SUMMARY_SYSTEM_PROMPT[language],
                [{"role": "user", "content": prompt}],
                max_tokens=500,
                temperature=0.3,
                model=get_settings().utility_model,
            )
        except Exception as exc:
            logger.warning("market_summary_failed", category=category, error=str(exc), error_type=type(exc).__name__)
            return ""
        return summary.strip()


def get_market_insights_provider(llm: LLMClient) -> MarketInsightsProvider:
    """Provider selected by MARKET_INSIGHTS_ENABLED / MARKET_INSIGHTS_PROVIDER."""
    settings = get_settings()
    if not settings.market_insights_enabled:
        return NoopProvider()
    if settings.market_insights_provider.lower() == "serper":
        if not settings.serper_api_key:
            logger.warning("market_insights_unconfigured", provider="serper", reason="serper_api_key_missing")
            return NoopProvider()
        return SerperProvider(settings.serper_api_key, llm)
    return NoopProvider()


async def gather_market_insights(
    provider: MarketInsightsProvider,
    idea: str,
    language: str,
    timeout: float,
) -> MarketInsights | None:
    """Run ``provider`` within ``timeout`` seconds; None on timeout or any error."""
    try:
        return await asyncio.wait_for(provider.get_insights(idea, language), timeout)
    except Exception as exc:
        logger.warning(
            "market_insights_failed",
            error=str(exc),
            error_type=type(exc).__name__,
            timeout_seconds=timeout,
        )
        return None
