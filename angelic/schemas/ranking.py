"""Pydantic schemas for idea evaluation, comparison and the leaderboard."""

from typing import Literal

from pydantic import BaseModel, Field

from angelic.schemas.report import Score, TextList

Decision = Literal["Go", "Conditional Go", "Drop"]
Uncertainty = Literal["Low", "Med", "High"]
Winner = Literal["A", "B", "Tie"]
Confidence = Literal["High", "Med", "Low"]


# ── LLM output ──────────────────────────────────────────────────────


class EvaluationResult(BaseModel):
    viability_score: Score
    excellence_score: Score
    decision: Decision
    uncertainty: Uncertainty = "Med"
    top_risks: TextList = Field(default_factory=list)
    key_enablers: TextList = Field(default_factory=list)


class ComparisonResult(BaseModel):
    winner: Winner
    reasons: TextList = Field(default_factory=list)
    confidence: Confidence = "Med"


# ── Requests ────────────────────────────────────────────────────────


class EvaluateRequest(BaseModel):
    idea_id: str | None = None
    text: str = Field(min_length=1)
    category: str | None = None
    stage: str | None = None
    user_id: str | None = None
    conversation_id: str | None = None
    is_public: bool = False
    language: Literal["zh", "en"] = "zh"


class CompareRequest(BaseModel):
    idea_a_id: str
    idea_b_id: str


# ── Responses ───────────────────────────────────────────────────────


class EvaluateResponse(BaseModel):
    idea_id: str
    viability: int
    excellence: int
    decision: Decision
    uncertainty: Uncertainty
    top_risks: list[str]
    key_enablers: list[str]
    eligible_for_ranking: bool


class EloChange(BaseModel):
    old: int
    new: int
    change: int


class CompareResponse(BaseModel):
    winner: Winner
    reasons: list[str]
    confidence: Confidence
    elo_changes: dict[str, EloChange]


class LeaderboardEntry(BaseModel):
    rank: int
    idea_id: str
    text: str
    category: str | None
    stage: str | None
    elo_score: int
    match_count: int
    viability_score: int | None
    excellence_score: int | None
    decision: str | None
    badge: str | None
    badge_color: str
    badge_description: str
    is_own: bool
    is_anonymized: bool
    is_public: bool
    percentile: int


class TopIdeasResponse(BaseModel):
    total: int
    ideas: list[LeaderboardEntry]
