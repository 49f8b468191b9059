"""RankingService: evaluation, pairwise comparison and the public leaderboard.

Responsibilities:
- Evaluate an idea, anonymise it when public, store idea + evaluation
- Seed an ELO rating for ideas that clear the viability threshold
- Run a comparison and apply the ELO update to both ratings atomically
- Build the privacy-filtered top list
"""

from dataclasses import dataclass

import structlog
from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from angelic.agent.llm import LLMClient
from angelic.core.config import get_settings
from angelic.db.models.idea import Idea, IdeaEval, Match, Rating
from angelic.domain.ranking import (
    MIN_RANKED_MATCHES,
    calculate_badge,
    calculate_new_elo,
    display_text,
    outcome_for,
    percentile_rank,
)
from angelic.schemas.ranking import (
    CompareResponse,
    ComparisonResult,
    EloChange,
    EvaluateRequest,
    EvaluateResponse,
    LeaderboardEntry,
    TopIdeasResponse,
)
from angelic.services.idea_anonymizer import generate_anonymous_summary
from angelic.services.idea_comparer import compare_ideas
from angelic.services.idea_evaluator import evaluate_idea

logger = structlog.get_logger(__name__)


@dataclass
class MatchOutcome:
    comparison: ComparisonResult
    elo_a: EloChange
    elo_b: EloChange


async def latest_eval(session: AsyncSession, idea_id: str) -> IdeaEval | None:
    result = await session.execute(
        select(IdeaEval).where(IdeaEval.idea_id == idea_id).order_by(IdeaEval.id.desc()).limit(1)
    )
    return result.scalar_one_or_none()


class RankingService:
    """Service layer for idea evaluation and ELO ranking.

    ``llm`` may be None for read-only use (the top list).
    """

    def __init__(self, llm: LLMClient | None, session_factory: async_sessionmaker[AsyncSession]):
        self.llm = llm
        self.session_factory = session_factory

    async def evaluate(self, body: EvaluateRequest, user_id: str | None) -> EvaluateResponse:
        """Evaluate and store an idea.

        Raises:
            AIServiceUnavailableError: The evaluation call failed
            HTTPException(404): ``idea_id`` was given but does not exist
        """
        settings = get_settings()
        result = await evaluate_idea(self.llm, body.text, body.category, body.stage)

        ai_summary = None
        category = body.category
        if body.is_public:
            anonymized = await generate_anonymous_summary(body.text, body.language, self.llm)
            ai_summary = anonymized.ai_summary
            category = anonymized.category

        eligible = result.viability_score >= settings.ranking_viability_threshold

        async with self.session_factory() as session:
            if body.idea_id:
                idea = await session.get(Idea, body.idea_id)
                if idea is None:
                    raise HTTPException(status_code=404, detail="Idea not found")
            else:
                idea = Idea(
                    text=body.text,
                    category=category,
                    stage=body.stage,
                    user_id=user_id or body.user_id,
                    conversation_id=body.conversation_id,
                    is_public=body.is_public,
                    ai_summary=ai_summary,
                )
                session.add(idea)
                await session.flush()

            session.add(
                IdeaEval(
                    idea_id=idea.id,
                    viability_score=result.viability_score,
                    excellence_score=result.excellence_score,
                    decision=result.decision,
                    uncertainty=result.uncertainty,
                    top_risks=result.top_risks,
                    key_enablers=result.key_enablers,
                )
            )

            if eligible:
                rating = await session.get(Rating, idea.id)
                if rating is None:
                    session.add(Rating(idea_id=idea.id, elo_score=settings.initial_elo, match_count=0))
                else:
                    rating.elo_score = settings.initial_elo
                    rating.match_count = 0

            await session.commit()
            idea_id = idea.id

        logger.info("idea_stored", idea_id=idea_id, eligible_for_ranking=eligible, is_public=body.is_public)
        return EvaluateResponse(
            idea_id=idea_id,
            viability=result.viability_score,
            excellence=result.excellence_score,
            decision=result.decision,
            uncertainty=result.uncertainty,
            top_risks=result.top_risks,
            key_enablers=result.key_enablers,
            eligible_for_ranking=eligible,
        )

    async def play_match(self, idea_a_id: str, idea_b_id: str) -> MatchOutcome:
        """Compare two rated ideas, update both ratings and record the match.

        Raises:
            HTTPException(404): Either idea is missing
            HTTPException(400): Either idea lacks an evaluation or a rating
        """
        async with self.session_factory() as session:
            idea_a = await session.get(Idea, idea_a_id)
            idea_b = await session.get(Idea, idea_b_id)
            if idea_a is None or idea_b is None:
                raise HTTPException(status_code=404, detail="One or both ideas not found")

            eval_a = await latest_eval(session, idea_a_id)
            eval_b = await latest_eval(session, idea_b_id)
            if eval_a is None or eval_b is None:
                raise HTTPException(status_code=400, detail="Both ideas must be evaluated first")

            rating_a = await session.get(Rating, idea_a_id)
            rating_b = await session.get(Rating, idea_b_id)
            if rating_a is None or rating_b is None:
                raise HTTPException(
                    status_code=400,
                    detail="Both ideas must have ELO ratings (viability >= 60 required)",
                )

            comparison = await compare_ideas(self.llm, idea_a, eval_a, idea_b, eval_b)

            old_a, old_b = rating_a.elo_score, rating_b.elo_score
            new_a, new_b = calculate_new_elo(
                old_a, old_b, outcome_for(comparison.winner), k=get_settings().elo_k_factor
            )
            rating_a.elo_score = new_a
            rating_a.match_count += 1
            rating_b.elo_score = new_b
            rating_b.match_count += 1

            session.add(
                Match(
                    idea_a_id=idea_a_id,
                    idea_b_id=idea_b_id,
                    winner=comparison.winner,
                    reasons=comparison.reasons,
                    confidence=comparison.confidence,
                )
            )
            await session.commit()

        logger.info(
            "match_recorded",
            idea_a_id=idea_a_id,
            idea_b_id=idea_b_id,
            winner=comparison.winner,
            elo_a=f"{old_a}->{new_a}",
            elo_b=f"{old_b}->{new_b}",
        )
        return MatchOutcome(
            comparison=comparison,
            elo_a=EloChange(old=old_a, new=new_a, change=new_a - old_a),
            elo_b=EloChange(old=old_b, new=new_b, change=new_b - old_b),
        )

    async def compare(self, idea_a_id: str, idea_b_id: str) -> CompareResponse:
        outcome = await self.play_match(idea_a_id, idea_b_id)
        return CompareResponse(
            winner=outcome.comparison.winner,
            reasons=outcome.comparison.reasons,
            confidence=outcome.comparison.confidence,
            elo_changes={"idea_a": outcome.elo_a, "idea_b": outcome.elo_b},
        )

    async def top_ideas(self, limit: int, viewer_id: str | None) -> TopIdeasResponse:
        """Ideas with enough matches, best rating first, with privacy-filtered text."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Idea, Rating)
                .join(Rating, Rating.idea_id == Idea.id)
                .where(Rating.match_count >= MIN_RANKED_MATCHES)
                .order_by(Rating.elo_score.desc(), Rating.match_count.desc())
                .limit(limit)
            )
            rows = result.all()

            idea_ids = [idea.id for idea, _ in rows]
            evals: dict[str, IdeaEval] = {}
            if idea_ids:
                eval_result = await session.execute(
                    select(IdeaEval).where(IdeaEval.idea_id.in_(idea_ids)).order_by(IdeaEval.id)
                )
                for evaluation in eval_result.scalars():
                    evals[evaluation.idea_id] = evaluation

        entries = []
        for index, (idea, rating) in enumerate(rows):
            rank = index + 1
            is_own = bool(viewer_id) and idea.user_id == viewer_id
            text, is_anonymized = display_text(
                rank=rank,
                text=idea.text,
                category=idea.category,
                ai_summary=idea.ai_summary,
                is_public=idea.is_public,
                is_own=is_own,
            )
            badge = calculate_badge(rating.elo_score, rating.match_count)
            evaluation = evals.get(idea.id)
            entries.append(
                LeaderboardEntry(
                    rank=rank,
                    idea_id=idea.id,
                    text=text,
                    category=idea.category,
                    stage=idea.stage,
                    elo_score=rating.elo_score,
                    match_count=rating.match_count,
                    viability_score=evaluation.viability_score if evaluation else None,
                    excellence_score=evaluation.excellence_score if evaluation else None,
                    decision=evaluation.decision if evaluation else None,
                    badge=badge.badge,
                    badge_color=badge.color,
                    badge_description=badge.description,
                    is_own=is_own,
                    is_anonymized=is_anonymized,
                    is_public=bool(idea.is_public),
                    percentile=percentile_rank(rating.elo_score),
                )
            )

        return TopIdeasResponse(total=len(entries), ideas=entries)

    async def nearest_opponents(self, elo: int, exclude: set[str], limit: int) -> list[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Rating.idea_id)
                .where(Rating.idea_id.not_in(sorted(exclude)))
                .order_by(func.abs(Rating.elo_score - elo), Rating.idea_id)
                .limit(limit)
            )
            return list(result.scalars())

    async def opponents_met(self, idea_id: str) -> set[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Match.idea_a_id, Match.idea_b_id).where(
                    (Match.idea_a_id == idea_id) | (Match.idea_b_id == idea_id)
                )
            )
            return {b if a == idea_id else a for a, b in result.all()}
