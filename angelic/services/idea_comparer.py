"""Head-to-head comparison of two evaluated ideas."""

import structlog
from pydantic import ValidationError

from angelic.agent.llm import LLMClient
from angelic.agent.llm_helpers import _parse_json_object
from angelic.core.config import get_settings
from angelic.core.exceptions import AIServiceUnavailableError, AngelicError, ErrorKind
from angelic.db.models.idea import Idea, IdeaEval
from angelic.prompts.ranking import COMPARER_SYSTEM_PROMPT, COMPARER_USER_PROMPT, IDEA_BLOCK
from angelic.schemas.ranking import ComparisonResult

logger = structlog.get_logger(__name__)

COMPARER_TEMPERATURE = 0.2
COMPARER_MAX_TOKENS = 600


def _idea_block(label: str, idea: Idea, evaluation: IdeaEval) -> str:
    return IDEA_BLOCK.format(
        label=label,
        text=idea.text,
        category=idea.category or "N/A",
        stage=idea.stage or "N/A",
        viability=evaluation.viability_score,
        excellence=evaluation.excellence_score,
        decision=evaluation.decision,
        uncertainty=evaluation.uncertainty,
        top_risks=", ".join(evaluation.top_risks or []),
        key_enablers=", ".join(evaluation.key_enablers or []),
    )


def build_comparison_prompt(idea_a: Idea, eval_a: IdeaEval, idea_b: Idea, eval_b: IdeaEval) -> str:
    return COMPARER_USER_PROMPT.format(
        idea_a=_idea_block("A", idea_a, eval_a),
        idea_b=_idea_block("B", idea_b, eval_b),
    )


async def compare_ideas(
    llm: LLMClient,
    idea_a: Idea,
    eval_a: IdeaEval,
    idea_b: Idea,
    eval_b: IdeaEval,
) -> ComparisonResult:
    """Ask the model which of two ideas is stronger.

    Raises:
        AIServiceUnavailableError: The model call failed or returned nothing
        AngelicError(MALFORMED_AI_OUTPUT): The reply did not match ComparisonResult
    """
    try:
        raw = await llm.complete(
            COMPARER_SYSTEM_PROMPT,
            [{"role": "user", "content": build_comparison_prompt(idea_a, eval_a, idea_b, eval_b)}],
            max_tokens=COMPARER_MAX_TOKENS,
            temperature=COMPARER_TEMPERATURE,
            model=get_settings().utility_model,
        )
    except Exception as exc:
        logger.error("idea_comparison_failed", error=str(exc), error_type=type(exc).__name__)
        raise AIServiceUnavailableError("Failed to compare ideas") from exc

    if not raw or not raw.strip():
        raise AIServiceUnavailableError("Failed to compare ideas")

    try:
        return ComparisonResult.model_validate(_parse_json_object(raw))
    except (ValueError, ValidationError) as exc:
        logger.error("idea_comparison_unparseable", error=str(exc)[:300])
        raise AngelicError("Idea comparison returned malformed output", ErrorKind.MALFORMED_AI_OUTPUT) from exc
