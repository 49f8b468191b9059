"""Single-idea evaluation: viability, excellence, decision, risks and enablers."""

import structlog
from pydantic import ValidationError

from angelic.agent.llm import LLMClient
from angelic.agent.llm_helpers import _parse_json_object
from angelic.core.config import get_settings
from angelic.core.exceptions import AIServiceUnavailableError, AngelicError, ErrorKind
from angelic.prompts.ranking import EVALUATOR_SYSTEM_PROMPT, EVALUATOR_USER_PROMPT
from angelic.schemas.ranking import EvaluationResult

logger = structlog.get_logger(__name__)

EVALUATOR_TEMPERATURE = 0.3
EVALUATOR_MAX_TOKENS = 800


def build_evaluation_prompt(text: str, category: str | None = None, stage: str | None = None) -> str:
    details = ""
    if category:
        details += f"Category: {category}\n"
    if stage:
        details += f"Stage: {stage}\n"
    return EVALUATOR_USER_PROMPT.format(text=text, details=details)


async def evaluate_idea(
    llm: LLMClient,
    text: str,
    category: str | None = None,
    stage: str | None = None,
) -> EvaluationResult:
    """Score an idea.

    Raises:
        AIServiceUnavailableError: The model call failed or returned nothing
        AngelicError(MALFORMED_AI_OUTPUT): The reply did not match EvaluationResult
    """
    try:
        raw = await llm.complete(
            EVALUATOR_SYSTEM_PROMPT,
            [{"role": "user", "content": build_evaluation_prompt(text, category, stage)}],
            max_tokens=EVALUATOR_MAX_TOKENS,
            temperature=EVALUATOR_TEMPERATURE,
            model=get_settings().utility_model,
        )
    except Exception as exc:
        logger.error("idea_evaluation_failed", error=str(exc), error_type=type(exc).__name__)
        raise AIServiceUnavailableError("Failed to evaluate idea") from exc

    if not raw or not raw.strip():
        raise AIServiceUnavailableError("Failed to evaluate idea")

    try:
        result = EvaluationResult.model_validate(_parse_json_object(raw))
    except (ValueError, ValidationError) as exc:
        logger.error("idea_evaluation_unparseable", error=str(exc)[:300])
        raise AngelicError("Idea evaluation returned malformed output", ErrorKind.MALFORMED_AI_OUTPUT) from exc

    logger.info(
        "idea_evaluated",
        viability=result.viability_score,
        excellence=result.excellence_score,
        decision=result.decision,
    )
    return result
