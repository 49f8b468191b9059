"""Background auto-matching for newly rated ideas.

A new idea plays up to ``target_matches`` comparisons against the ideas whose
rating is closest to its own, skipping itself and anyone it already met. Each
match uses the rating produced by the previous one. One failed match is
logged and skipped; the routine itself never raises.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from angelic.agent.llm import LLMClient
from angelic.core.config import get_settings
from angelic.db.models.idea import Rating
from angelic.services.ranking_service import RankingService

logger = structlog.get_logger(__name__)


async def auto_schedule_matches(
    llm: LLMClient,
    session_factory: async_sessionmaker[AsyncSession],
    idea_id: str,
    target_matches: int | None = None,
) -> int:
    """Run matches for ``idea_id`` until it reaches ``target_matches``.

    Returns:
        Number of matches played
    """
    target = target_matches or get_settings().auto_match_target
    service = RankingService(llm, session_factory)
    played = 0

    try:
        async with session_factory() as session:
            rating = await session.get(Rating, idea_id)
            if rating is None:
                logger.info("auto_match_skipped", idea_id=idea_id, reason="no_rating")
                return 0
            elo, match_count = rating.elo_score, rating.match_count

        if match_count >= target:
            logger.info("auto_match_skipped", idea_id=idea_id, reason="target_reached", matches=match_count)
            return 0

        needed = target - match_count
        exclude = {idea_id} | await service.opponents_met(idea_id)
        candidates = await service.nearest_opponents(elo, exclude, needed * 2)
        if not candidates:
            logger.info("auto_match_skipped", idea_id=idea_id, reason="no_candidates")
            return 0

        logger.info("auto_match_started", idea_id=idea_id, needed=needed, candidates=len(candidates))

        for opponent_id in candidates:
            if played >= needed:
                break
            try:
                outcome = await service.play_match(idea_id, opponent_id)
            except Exception as exc:
                logger.warning(
                    "auto_match_failed",
                    idea_id=idea_id,
                    opponent_id=opponent_id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                continue
            played += 1
            logger.info(
                "auto_match_played",
                idea_id=idea_id,
                opponent_id=opponent_id,
                match=f"{played}/{needed}",
                winner=outcome.comparison.winner,
                elo=outcome.elo_a.new,
            )
    except Exception as exc:
        logger.error("auto_match_error", idea_id=idea_id, error=str(exc), error_type=type(exc).__name__, exc_info=True)

    logger.info("auto_match_completed", idea_id=idea_id, played=played)
    return played
