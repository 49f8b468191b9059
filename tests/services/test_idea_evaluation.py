"""Tests for single-idea evaluation and head-to-head comparison."""

import json

import pytest

from angelic.agent.llm_fake import LLMFake
from angelic.core.exceptions import AIServiceUnavailableError, AngelicError, ErrorKind
from angelic.db.models.idea import Idea, IdeaEval
from angelic.services.idea_comparer import compare_ideas
from angelic.services.idea_evaluator import build_evaluation_prompt, evaluate_idea

pytestmark = pytest.mark.unit

EVALUATION = {
    "viability_score": 72,
    "excellence_score": 65,
    "decision": "Go",
    "uncertainty": "Low",
    "top_risks": ["Cold chain"],
    "key_enablers": ["Farmer network"],
}


def _idea(idea_id: str, text: str) -> tuple[Idea, IdeaEval]:
    idea = Idea(id=idea_id, text=text, category="FoodTech", stage="MVP")
    evaluation = IdeaEval(
        idea_id=idea_id,
        viability_score=70,
        excellence_score=60,
        decision="Go",
        uncertainty="Med",
        top_risks=["Logistics"],
        key_enablers=["Demand"],
    )
    return idea, evaluation


async def test_evaluate_idea_parses_result():
    llm = LLMFake(responses=[json.dumps(EVALUATION)])

    result = await evaluate_idea(llm, "Farm marketplace", "FoodTech", "Idea")

    assert result.viability_score == 72
    assert result.decision == "Go"
    assert result.top_risks == ["Cold chain"]
    assert llm.calls[0]["temperature"] == 0.3


def test_evaluation_prompt_includes_details():
    prompt = build_evaluation_prompt("Farm marketplace", "FoodTech", "MVP")
    assert "Category: FoodTech" in prompt
    assert "Stage: MVP" in prompt


async def test_evaluate_idea_call_failure(llm_fake_failing):
    with pytest.raises(AIServiceUnavailableError):
        await evaluate_idea(llm_fake_failing, "Farm marketplace")


async def test_evaluate_idea_bad_decision_is_malformed():
    llm = LLMFake(responses=[json.dumps({**EVALUATION, "decision": "Maybe"})])

    with pytest.raises(AngelicError) as exc_info:
        await evaluate_idea(llm, "Farm marketplace")

    assert exc_info.value.kind == ErrorKind.MALFORMED_AI_OUTPUT


async def test_compare_ideas_parses_winner():
    llm = LLMFake(responses=[json.dumps({"winner": "B", "reasons": ["Bigger market"], "confidence": "High"})])
    idea_a, eval_a = _idea("a", "Farm marketplace")
    idea_b, eval_b = _idea("b", "AI tutor")

    result = await compare_ideas(llm, idea_a, eval_a, idea_b, eval_b)

    assert result.winner == "B"
    assert result.reasons == ["Bigger market"]
    prompt = llm.calls[0]["messages"][0]["content"]
    assert "Farm marketplace" in prompt and "AI tutor" in prompt


async def test_compare_ideas_non_json_is_malformed():
    llm = LLMFake(responses=["A is better"])
    idea_a, eval_a = _idea("a", "Farm marketplace")
    idea_b, eval_b = _idea("b", "AI tutor")

    with pytest.raises(AngelicError) as exc_info:
        await compare_ideas(llm, idea_a, eval_a, idea_b, eval_b)

    assert exc_info.value.kind == ErrorKind.MALFORMED_AI_OUTPUT
