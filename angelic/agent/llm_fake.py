"""LLMFake: scripted test double for the LLMClient protocol.

Scenarios:
- happy_path: replies are popped from the scripted ``responses`` queue; when
  the queue is empty a short conversational reply is returned
- llm_failure: every call raises, as a rate-limited or unreachable API would

All calls are recorded in ``calls`` so tests can assert on prompts and
sampling parameters.
"""

import copy
import json


class LLMFake:
    """Deterministic LLMClient for tests and local development without an API key."""

    VALID_SCENARIOS = {"happy_path", "llm_failure"}

    DEFAULT_REPLY = "Who exactly is your first customer, and what do they use today to solve this?"

    def __init__(self, scenario: str = "happy_path", responses: list[str] | None = None):
        if scenario not in self.VALID_SCENARIOS:
            raise ValueError(f"Unknown scenario: {scenario}. Valid scenarios: {self.VALID_SCENARIOS}")
        self.scenario = scenario
        self.responses = list(responses or [])
        self.calls: list[dict] = []

    def queue(self, *responses: str) -> "LLMFake":
        self.responses.extend(responses)
        return self

    async def complete(
        self,
        system: str,
        messages: list[dict],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        model: str | None = None,
    ) -> str:
        self.calls.append(
            {
                "system": system,
                "messages": copy.deepcopy(messages),
                "max_tokens": max_tokens,
                "temperature": temperature,
                "model": model,
            }
        )
        if self.scenario == "llm_failure":
            raise RuntimeError("Anthropic API rate limit exceeded. Retry after 60 seconds.")
        if self.responses:
            return self.responses.pop(0)
        return self.DEFAULT_REPLY


def sample_report(language: str = "en", **overrides) -> dict:
    """A complete DetailedReport payload as a model would return it."""
    zh = language == "zh"
    report = {
        "idea": "连接本地农民和餐厅的平台" if zh else "Marketplace connecting local farmers with restaurants",
        "conversationSummary": "用户希望缩短农产品供应链。" if zh else "The founder wants to shorten the produce supply chain.",
        "marketAnalysis": {
            "targetMarket": "一二线城市的独立餐厅" if zh else "Independent restaurants in large cities",
            "marketSize": "约500亿元" if zh else "About $12B",
            "marketGrowthRate": "年复合增长率8%" if zh else "8% CAGR",
            "demandAnalysis": "餐厅希望获得新鲜、可追溯的食材" if zh else "Restaurants want fresh, traceable produce",
            "industryTrends": ["农场直供", "数字化采购"] if zh else ["Farm-to-table", "Digital procurement"],
            "userPersona": {
                "demographics": "餐厅主厨与采购经理" if zh else "Head chefs and purchasing managers",
                "painPoints": ["价格波动", "品质不稳定", "配送不准时"] if zh else ["Price swings", "Inconsistent quality", "Late deliveries"],
                "behaviors": "每周多次采购" if zh else "Orders several times a week",
            },
            "score": 78,
        },
        "competitiveAnalysis": {
            "competitors": [
                {
                    "name": "美菜网" if zh else "Choco",
                    "strengths": ["规模大", "资金雄厚", "品类全"] if zh else ["Scale", "Funding", "Breadth"],
                    "weaknesses": ["本地农户少", "服务标准化"] if zh else ["Few local farms", "Generic service"],
                    "marketShare": "约15%" if zh else "~15%",
                    "pricing": "按单加价" if zh else "Per-order markup",
                }
            ],
            "competitiveLandscape": "分散" if zh else "Fragmented",
            "differentiation": "本地可追溯货源" if zh else "Traceable local sourcing",
            "competitiveAdvantage": "农户网络" if zh else "Farmer network",
            "barrierToEntry": "中等" if zh else "Moderate",
            "threats": ["大型平台下沉"] if zh else ["Large platforms moving in"],
            "score": 64,
        },
        "businessModel": {
            "revenueStreams": [
                {
                    "source": "交易佣金" if zh else "Transaction fee",
                    "description": "每单收取8%" if zh else "8% of each order",
                    "potential": "高" if zh else "High",
                }
            ],
            "monetizationStrategy": "佣金加订阅" if zh else "Commission plus subscription",
            "pricingModel": "阶梯佣金" if zh else "Tiered commission",
            "unitEconomics": "CAC 800元，LTV 9000元" if zh else "CAC $120, LTV $1,400",
            "profitabilityAnalysis": "第三年盈亏平衡" if zh else "Break-even in year three",
            "financialProjection": {"year1": "200万", "year2": "900万", "year3": "2500万"}
            if zh
            else {"year1": "$0.3M", "year2": "$1.2M", "year3": "$3.5M"},
            "score": 70,
        },
        "executionPlan": {
            "phases": [
                {
                    "phase": "MVP验证" if zh else "MVP validation",
                    "duration": "0-3个月" if zh else "0-3 months",
                    "objectives": ["签约10家餐厅"] if zh else ["Sign 10 restaurants"],
                    "keyActivities": ["农户走访"] if zh else ["Farm visits"],
                    "successMetrics": ["周复购率"] if zh else ["Weekly repeat orders"],
                }
            ],
            "resourceRequirements": [],
            "teamRequirements": [],
            "fundingNeeds": "300万元" if zh else "$500k",
            "fundingAllocation": [],
        },
        "riskAssessment": {
            "riskMatrix": [
                {
                    "risk": "冷链成本高" if zh else "Cold-chain cost",
                    "impact": "high",
                    "probability": "medium",
                    "mitigation": "区域集中配送" if zh else "Dense delivery zones",
                    "contingency": "与第三方物流合作" if zh else "Partner with 3PL",
                }
            ],
            "majorRisks": ["冷链成本"] if zh else ["Logistics cost"],
            "mitigationStrategies": ["先做单一城市"] if zh else ["Start with one city"],
        },
        "overallScore": 72,
        "recommendation": "值得以单城试点推进" if zh else "Worth a single-city pilot",
        "strengths": ["真实痛点", "差异化货源"] if zh else ["Real pain point", "Differentiated supply"],
        "improvements": ["验证餐厅付费意愿"] if zh else ["Validate willingness to pay"],
        "nextSteps": [
            {"action": "访谈20家餐厅" if zh else "Interview 20 restaurants", "priority": "immediate", "timeline": "2周" if zh else "2 weeks"}
        ],
        "vcInsights": {
            "fundingReadiness": "早期" if zh else "Early",
            "fundingStage": "天使轮" if zh else "Pre-seed",
            "attractivenessToVCs": "中等" if zh else "Moderate",
            "investmentHighlights": ["供应链效率"] if zh else ["Supply-chain efficiency"],
            "redFlags": ["利润率薄"] if zh else ["Thin margins"],
            "suggestedVCs": [
                {
                    "name": "Example Ventures",
                    "focus": "FoodTech",
                    "typicalCheck": "$250k",
                    "reason": "领域匹配" if zh else "Sector fit",
                }
            ],
            "pitchKeyPoints": ["痛点", "方案", "团队"] if zh else ["Problem", "Solution", "Team"],
        },
    }
    report.update(overrides)
    return report


def sample_report_json(language: str = "en", **overrides) -> str:
    return json.dumps(sample_report(language, **overrides), ensure_ascii=False)
