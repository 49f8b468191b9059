"""Fallback entries for report list fields the model left empty.

Keyed by report field path (camelCase, dotted for nested sections) and then
by language. Values are JSON-shaped, exactly as they appear in a stored report.
"""

import copy

from angelic.domain.language import DEFAULT_LANGUAGE, Language

REPORT_FALLBACKS: dict[str, dict[Language, list]] = {
    "strengths": {
        "zh": ["项目具有创新性", "解决了真实痛点", "市场前景广阔"],
        "en": ["The idea is innovative", "It addresses a real pain point", "The market outlook is promising"],
    },
    "improvements": {
        "zh": ["需要进一步验证市场需求", "完善商业模式细节", "加强团队建设"],
        "en": ["Validate market demand further", "Refine the business model details", "Strengthen the team"],
    },
    "competitiveAnalysis.competitors": {
        "zh": [
            {
                "name": "行业领先者",
                "strengths": ["品牌知名度高", "资源充足", "技术成熟"],
                "weaknesses": ["创新速度慢", "决策流程复杂"],
                "marketShare": "市场份额待分析",
                "pricing": "定价策略待研究",
            }
        ],
        "en": [
            {
                "name": "Industry leader",
                "strengths": ["Strong brand recognition", "Ample resources", "Mature technology"],
                "weaknesses": ["Slow to innovate", "Complex decision-making"],
                "marketShare": "Market share to be analyzed",
                "pricing": "Pricing strategy to be researched",
            }
        ],
    },
    "executionPlan.phases": {
        "zh": [
            {
                "phase": "MVP验证阶段",
                "duration": "0-3个月",
                "objectives": ["完成产品原型", "获得初始用户", "验证核心假设"],
                "keyActivities": ["产品开发", "用户测试", "数据收集"],
                "successMetrics": ["用户反馈积极度", "核心功能使用率"],
            }
        ],
        "en": [
            {
                "phase": "MVP validation",
                "duration": "0-3 months",
                "objectives": ["Build a product prototype", "Acquire initial users", "Validate core assumptions"],
                "keyActivities": ["Product development", "User testing", "Data collection"],
                "successMetrics": ["Positive user feedback", "Core feature usage rate"],
            }
        ],
    },
    "riskAssessment.riskMatrix": {
        "zh": [
            {
                "risk": "市场需求不足",
                "impact": "high",
                "probability": "medium",
                "mitigation": "深入市场调研，快速迭代产品",
                "contingency": "调整目标市场或产品方向",
            }
        ],
        "en": [
            {
                "risk": "Insufficient market demand",
                "impact": "high",
                "probability": "medium",
                "mitigation": "Run in-depth market research and iterate quickly",
                "contingency": "Adjust the target market or product direction",
            }
        ],
    },
}


def fallback_for(field: str, language: Language) -> list:
    """Return a fresh copy of the fallback entries for ``field``.

    Raises:
        KeyError: If ``field`` has no fallback entry.
    """
    by_language = REPORT_FALLBACKS[field]
    return copy.deepcopy(by_language.get(language, by_language[DEFAULT_LANGUAGE]))
