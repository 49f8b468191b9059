"""Idea ranking routes: evaluate, compare, top list."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from angelic.agent.llm import LLMClient
from angelic.api.deps import get_llm
from angelic.core.auth import AuthUser, optional_auth
from angelic.db.base import get_session_factory
from angelic.schemas.ranking import (
    CompareRequest,
    CompareResponse,
    EvaluateRequest,
    EvaluateResponse,
    TopIdeasResponse,
)
from angelic.services.auto_matcher import auto_schedule_matches
from angelic.services.ranking_service import RankingService

router = APIRouter()


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(
    body: EvaluateRequest,
    background_tasks: BackgroundTasks,
    user: AuthUser | None = Depends(optional_auth),
    llm: LLMClient = Depends(get_llm),
):
    """Evaluate an idea; ideas eligible for ranking are auto-matched in the background."""
    factory = get_session_factory()
    result = await RankingService(llm, factory).evaluate(body, user.user_id if user else None)
    if result.eligible_for_ranking:
        background_tasks.add_task(auto_schedule_matches, llm, factory, result.idea_id)
    return result


@router.post("/compare", response_model=CompareResponse)
async def compare(body: CompareRequest, llm: LLMClient = Depends(get_llm)):
    return await RankingService(llm, get_session_factory()).compare(body.idea_a_id, body.idea_b_id)


@router.get("/top", response_model=TopIdeasResponse)
async def top_ideas(
    limit: int = Query(20),
    user: AuthUser | None = Depends(optional_auth),
):
    if limit < 1 or limit > 100:
        raise HTTPException(status_code=400, detail="Invalid limit (must be 1-100)")
    return await RankingService(None, get_session_factory()).top_ideas(limit, user.user_id if user else None)
