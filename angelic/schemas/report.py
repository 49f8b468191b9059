"""Pydantic schemas for report generation: ConversationData and DetailedReport.

DetailedReport mirrors the JSON the model is asked to produce. Wire names are
camelCase; Python attributes are snake_case. Parsing is lenient about what
LLMs commonly get wrong: nulls, numeric strings, objects where text was
asked for, a bare string where a list or object was asked for. A shape that
cannot be read becomes the field's empty default, which the generator then
back-fills.
"""

import math
from datetime import datetime
from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _coerce_text(value: Any) -> str:
    """Flatten anything the model put in a text slot into a string.

    Objects and arrays are joined by their non-empty values, so
    ``{"trend": "Farm-to-table", "impact": "High"}`` reads ``Farm-to-table; High``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        return "; ".join(part for part in map(_coerce_text, value) if part)
    return str(value)


def _coerce_score(value: Any) -> Any:
    """Clamp a 0-100 score to an int; unusable values become 0."""
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, min(100, int(round(value))))


def _coerce_text_list(value: Any) -> list:
    if isinstance(value, str):
        return [value] if value.strip() else []
    return _coerce_list(value)


def _coerce_list(value: Any) -> list:
    """Non-list values become an empty list for the back-fill table to cover."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


Text = Annotated[str, BeforeValidator(_coerce_text)]
Score = Annotated[int, BeforeValidator(_coerce_score)]
TextList = Annotated[list[Text], BeforeValidator(_coerce_text_list)]
LenientList = BeforeValidator(_coerce_list)


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    # Set on list items that may arrive as a bare string (or number).
    label_field: ClassVar[str | None] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        if isinstance(data, BaseModel):
            return data
        if cls.label_field and isinstance(data, (str, int, float)) and not isinstance(data, bool):
            return {cls.label_field: str(data)}
        return {}


class LabelledItem(ReportModel):
    label_field: ClassVar[str | None] = "name"


class DataSource(LabelledItem):
    label_field: ClassVar[str | None] = "url"

    title: Text = ""
    url: Text = ""


# ── Market ──────────────────────────────────────────────────────────


class UserPersona(ReportModel):
    demographics: Text = ""
    pain_points: TextList = Field(default_factory=list)
    behaviors: Text = ""


class MarketAnalysis(ReportModel):
    target_market: Text = ""
    market_size: Text = ""
    market_growth_rate: Text = ""
    demand_analysis: Text = ""
    industry_trends: TextList = Field(default_factory=list)
    user_persona: UserPersona = Field(default_factory=UserPersona)
    score: Score = 0
    data_sources: Annotated[list[DataSource], LenientList] | None = None


# ── Competition ─────────────────────────────────────────────────────


class Competitor(LabelledItem):
    name: Text = ""
    strengths: TextList = Field(default_factory=list)
    weaknesses: TextList = Field(default_factory=list)
    market_share: Text = ""
    pricing: Text = ""


class CompetitiveAnalysis(ReportModel):
    competitors: Annotated[list[Competitor], LenientList] = Field(default_factory=list)
    competitive_landscape: Text = ""
    differentiation: Text = ""
    competitive_advantage: Text = ""
    barrier_to_entry: Text = ""
    threats: TextList = Field(default_factory=list)
    score: Score = 0
    data_sources: Annotated[list[DataSource], LenientList] | None = None


# ── Business model ──────────────────────────────────────────────────


class RevenueStream(LabelledItem):
    label_field: ClassVar[str | None] = "source"

    source: Text = ""
    description: Text = ""
    potential: Text = ""


class FinancialProjection(ReportModel):
    year1: Text = ""
    year2: Text = ""
    year3: Text = ""


class BusinessModel(ReportModel):
    revenue_streams: Annotated[list[RevenueStream], LenientList] = Field(default_factory=list)
    monetization_strategy: Text = ""
    pricing_model: Text = ""
    unit_economics: Text = ""
    profitability_analysis: Text = ""
    financial_projection: FinancialProjection = Field(default_factory=FinancialProjection)
    score: Score = 0


# ── Execution ───────────────────────────────────────────────────────


class ExecutionPhase(LabelledItem):
    label_field: ClassVar[str | None] = "phase"

    phase: Text = ""
    duration: Text = ""
    objectives: TextList = Field(default_factory=list)
    key_activities: TextList = Field(default_factory=list)
    success_metrics: TextList = Field(default_factory=list)


class ResourceRequirement(LabelledItem):
    label_field: ClassVar[str | None] = "category"

    category: Text = ""
    items: TextList = Field(default_factory=list)
    estimated_cost: Text = ""


class TeamRequirement(LabelledItem):
    label_field: ClassVar[str | None] = "role"

    role: Text = ""
    responsibilities: Text = ""
    timeline: Text = ""


class FundingAllocation(LabelledItem):
    label_field: ClassVar[str | None] = "category"

    category: Text = ""
    percentage: Text = ""
    amount: Text = ""


class ExecutionPlan(ReportModel):
    phases: Annotated[list[ExecutionPhase], LenientList] = Field(default_factory=list)
    resource_requirements: Annotated[list[ResourceRequirement], LenientList] = Field(default_factory=list)
    team_requirements: Annotated[list[TeamRequirement], LenientList] = Field(default_factory=list)
    funding_needs: Text = ""
    funding_allocation: Annotated[list[FundingAllocation], LenientList] = Field(default_factory=list)


# ── Risk ────────────────────────────────────────────────────────────


class RiskItem(LabelledItem):
    label_field: ClassVar[str | None] = "risk"

    risk: Text = ""
    impact: Text = "medium"
    probability: Text = "medium"
    mitigation: Text = ""
    contingency: Text = ""


class RiskAssessment(ReportModel):
    risk_matrix: Annotated[list[RiskItem], LenientList] = Field(default_factory=list)
    major_risks: TextList = Field(default_factory=list)
    mitigation_strategies: TextList = Field(default_factory=list)


# ── Summary ─────────────────────────────────────────────────────────


class NextStep(LabelledItem):
    label_field: ClassVar[str | None] = "action"

    action: Text = ""
    priority: Text = "short-term"
    timeline: Text = ""


class SuggestedVC(LabelledItem):
    name: Text = ""
    focus: Text = ""
    typical_check: Text = ""
    reason: Text = ""


class VCInsights(ReportModel):
    funding_readiness: Text = ""
    funding_stage: Text = ""
    attractiveness_to_vcs: Text = Field(default="", alias="attractivenessToVCs")
    investment_highlights: TextList = Field(default_factory=list)
    red_flags: TextList = Field(default_factory=list)
    suggested_vcs: Annotated[list[SuggestedVC], LenientList] = Field(default_factory=list, alias="suggestedVCs")
    pitch_key_points: TextList = Field(default_factory=list)


class DetailedReport(ReportModel):
    idea: Text
    conversation_summary: Text = ""
    market_analysis: MarketAnalysis = Field(default_factory=MarketAnalysis)
    competitive_analysis: CompetitiveAnalysis = Field(default_factory=CompetitiveAnalysis)
    business_model: BusinessModel = Field(default_factory=BusinessModel)
    execution_plan: ExecutionPlan = Field(default_factory=ExecutionPlan)
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment)
    overall_score: Score
    recommendation: Text = ""
    strengths: TextList = Field(default_factory=list)
    improvements: TextList = Field(default_factory=list)
    next_steps: Annotated[list[NextStep], LenientList] = Field(default_factory=list)
    vc_insights: VCInsights = Field(default_factory=VCInsights)

    def to_json_dict(self) -> dict:
        """Wire/storage form: camelCase keys, JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Conversation input ──────────────────────────────────────────────


class ConversationMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime | None = None


class ConversationData(BaseModel):
    """Transcript handed to the report generator; the idea is the first user turn."""

    idea: str
    messages: list[ConversationMessage]
