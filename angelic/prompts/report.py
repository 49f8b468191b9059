"""Prompts for the detailed startup report.

Each language has a system prompt, an instruction header (formatted with the
idea, the transcript and any market insights gathered by web search), the
JSON skeleton the model must fill, and a closing checklist. The skeleton is
kept out of the formatted header so it needs no brace escaping.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from angelic.integrations.market_insights import MarketInsights

REPORT_SYSTEM_PROMPT = {
    "zh": (
        "你是一位世界顶级的创业分析师，拥有丰富的投资银行、咨询公司和创业孵化器经验。"
        "你的分析以数据驱动、深度专业、实用可行著称。你擅长通过有限的信息进行深度推理和专业判断，"
        "生成具有投资级别质量的分析报告。请严格按照JSON格式返回完整报告。"
    ),
    "en": (
        "You are a world-class startup analyst with extensive experience in investment banking, consulting "
        "firms, and startup incubators. Your analysis is data-driven, deeply professional, and practically "
        "actionable. You excel at drawing sound conclusions from limited information and produce "
        "investment-grade reports. Return the complete report strictly as JSON."
    ),
}

ROLE_LABELS = {
    "zh": {"user": "用户", "assistant": "AI助手"},
    "en": {"user": "User", "assistant": "AI Assistant"},
}

REPORT_HEADER = {
    "zh": """你是一位顶级创业分析师和投资顾问，拥有15年的行业经验，专注于深度市场调研、竞争分析和商业模式设计。请基于以下对话内容，生成一份专业、全面的创业分析报告。

创业想法：{idea}

对话历史：
{conversation_history}

---
{market_insights}
# 报告要求

## 1. 市场分析
- 目标市场：精确定义细分市场，包括地理位置、人口规模、特定需求
- 市场规模与增长率：提供具体数据和近3-5年CAGR，注明数据来源
- 行业趋势：3-5个关键趋势，每个配以案例或数据
- 用户画像：人口特征、至少3个痛点、行为模式

## 2. 竞争分析
- 竞争格局、市场集中度
- 至少3个直接竞争对手：优势（至少3个）、劣势（至少2个）、市场份额、定价策略
- 差异化优势、进入壁垒、威胁分析

## 3. 商业模式
- 至少3个收入来源（名称、描述、收入潜力）
- 定价模式、单位经济学（CAC、LTV、毛利率）、盈利能力
- 3年财务预测

## 4. 执行计划
- 3-4个阶段，每个包括名称、持续时间、核心目标、关键活动、可量化的成功指标
- 资源需求（含预估成本）、3-5个关键岗位、融资需求与资金分配

## 5. 风险评估
- 至少5个风险：描述、影响程度（high/medium/low）、发生概率（high/medium/low）、缓解措施、应急预案
- 综合应对策略

## 6. 投资人视角
- 融资阶段、融资准备度、投资吸引力
- 3-5个投资亮点、2-3个风险警示
- 至少3家匹配的投资机构（名称、投资方向、典型投资金额、推荐理由）
- 5-7个Pitch要点

## 7. 综合评估
- 3-5个核心优势、3-4个改进方向
- 5-8个下一步行动，按优先级分为 immediate / short-term / long-term

---

# 输出格式

请以JSON格式返回完整报告，严格遵循以下结构（score 与 overallScore 为0-100的整数）：
""",
    "en": """You are a top-tier startup analyst and investment advisor with 15 years of industry experience, specializing in market research, competitive analysis, and business model design. Based on the following conversation, generate a professional and comprehensive startup analysis report.

Startup Idea: {idea}

Conversation History:
{conversation_history}

---
{market_insights}
# Report Requirements

## 1. Market Analysis
- Target market: precise segment, geography, population size, specific needs
- Market size and growth: concrete figures and 3-5 year CAGR with sources
- Industry trends: 3-5 key trends, each with a case or data point
- User persona: demographics, at least 3 pain points, behavioral patterns

## 2. Competitive Analysis
- Landscape and market concentration
- At least 3 direct competitors: strengths (3+), weaknesses (2+), market share, pricing
- Differentiation, barriers to entry, threats

## 3. Business Model
- At least 3 revenue streams (source, description, potential)
- Pricing model, unit economics (CAC, LTV, gross margin), profitability
- 3-year financial projection

## 4. Execution Plan
- 3-4 phases, each with name, duration, objectives, key activities and quantifiable success metrics
- Resource requirements with estimated costs, 3-5 key hires, funding needs and allocation

## 5. Risk Assessment
- At least 5 risks: description, impact (high/medium/low), probability (high/medium/low), mitigation, contingency
- Overall response strategy

## 6. VC Insights
- Funding stage, funding readiness, attractiveness to VCs
- 3-5 investment highlights, 2-3 red flags
- At least 3 matching VCs (name, focus, typical check size, reason)
- 5-7 pitch key points

## 7. Overall Assessment
- 3-5 core strengths, 3-4 improvement areas
- 5-8 next steps, prioritized as immediate / short-term / long-term

---

# Output Format

Return the complete report as JSON, strictly following this structure (score and overallScore are integers from 0 to 100):
""",
}

REPORT_SCHEMA = {
    "zh": """{
  "idea": "创业想法的简洁描述",
  "conversationSummary": "对话核心要点总结（150-200字）",
  "marketAnalysis": {
    "targetMarket": "目标市场描述",
    "marketSize": "市场规模数据",
    "marketGrowthRate": "增长率数据（含数据来源）",
    "demandAnalysis": "需求分析",
    "industryTrends": ["趋势1", "趋势2", "趋势3"],
    "userPersona": {"demographics": "人口特征", "painPoints": ["痛点1", "痛点2", "痛点3"], "behaviors": "行为模式"},
    "score": 0
  },
  "competitiveAnalysis": {
    "competitors": [{"name": "竞争对手名称", "strengths": ["优势1", "优势2", "优势3"], "weaknesses": ["劣势1", "劣势2"], "marketShare": "市场份额", "pricing": "定价策略"}],
    "competitiveLandscape": "竞争格局分析",
    "differentiation": "差异化优势",
    "competitiveAdvantage": "核心竞争力",
    "barrierToEntry": "进入壁垒分析",
    "threats": ["威胁1", "威胁2", "威胁3"],
    "score": 0
  },
  "businessModel": {
    "revenueStreams": [{"source": "收入来源名称", "description": "详细描述", "potential": "收入潜力评估"}],
    "monetizationStrategy": "盈利模式详述",
    "pricingModel": "定价策略",
    "unitEconomics": "单位经济学分析",
    "profitabilityAnalysis": "盈利能力分析",
    "financialProjection": {"year1": "第一年", "year2": "第二年", "year3": "第三年"},
    "score": 0
  },
  "executionPlan": {
    "phases": [{"phase": "阶段名称", "duration": "持续时间", "objectives": ["目标1"], "keyActivities": ["活动1"], "successMetrics": ["指标1"]}],
    "resourceRequirements": [{"category": "资源类别", "items": ["需求1"], "estimatedCost": "预估成本"}],
    "teamRequirements": [{"role": "岗位名称", "responsibilities": "职责描述", "timeline": "招聘时间"}],
    "fundingNeeds": "总融资需求",
    "fundingAllocation": [{"category": "分配类别", "percentage": "百分比", "amount": "金额"}]
  },
  "riskAssessment": {
    "riskMatrix": [{"risk": "风险描述", "impact": "high/medium/low", "probability": "high/medium/low", "mitigation": "缓解措施", "contingency": "应急预案"}],
    "majorRisks": ["主要风险1", "主要风险2"],
    "mitigationStrategies": ["应对策略1", "应对策略2"]
  },
  "overallScore": 0,
  "recommendation": "总体建议（100字内）",
  "strengths": ["优势1", "优势2", "优势3"],
  "improvements": ["改进1", "改进2", "改进3"],
  "nextSteps": [{"action": "行动描述", "priority": "immediate/short-term/long-term", "timeline": "时间表"}],
  "vcInsights": {
    "fundingReadiness": "融资准备度评估",
    "fundingStage": "适合的融资轮次",
    "attractivenessToVCs": "投资吸引力分析",
    "investmentHighlights": ["亮点1", "亮点2", "亮点3"],
    "redFlags": ["问题1", "问题2"],
    "suggestedVCs": [{"name": "投资机构名称", "focus": "投资方向", "typicalCheck": "典型投资金额", "reason": "推荐理由"}],
    "pitchKeyPoints": ["要点1", "要点2", "要点3", "要点4", "要点5"]
  }
}
""",
    "en": """{
  "idea": "Brief description of the startup idea",
  "conversationSummary": "Summary of key conversation points (150-200 words)",
  "marketAnalysis": {
    "targetMarket": "Target market description",
    "marketSize": "Market size data",
    "marketGrowthRate": "Growth rate data (with source)",
    "demandAnalysis": "Demand analysis",
    "industryTrends": ["Trend 1", "Trend 2", "Trend 3"],
    "userPersona": {"demographics": "Demographics", "painPoints": ["Pain point 1", "Pain point 2", "Pain point 3"], "behaviors": "Behavioral patterns"},
    "score": 0
  },
  "competitiveAnalysis": {
    "competitors": [{"name": "Competitor name", "strengths": ["Strength 1", "Strength 2", "Strength 3"], "weaknesses": ["Weakness 1", "Weakness 2"], "marketShare": "Market share", "pricing": "Pricing strategy"}],
    "competitiveLandscape": "Competitive landscape analysis",
    "differentiation": "Differentiation advantage",
    "competitiveAdvantage": "Core competitive advantage",
    "barrierToEntry": "Barrier to entry analysis",
    "threats": ["Threat 1", "Threat 2", "Threat 3"],
    "score": 0
  },
  "businessModel": {
    "revenueStreams": [{"source": "Revenue source", "description": "Detailed description", "potential": "Revenue potential"}],
    "monetizationStrategy": "Monetization model",
    "pricingModel": "Pricing strategy",
    "unitEconomics": "Unit economics (CAC, LTV, etc.)",
    "profitabilityAnalysis": "Profitability analysis",
    "financialProjection": {"year1": "Year 1", "year2": "Year 2", "year3": "Year 3"},
    "score": 0
  },
  "executionPlan": {
    "phases": [{"phase": "Phase name", "duration": "Duration", "objectives": ["Objective 1"], "keyActivities": ["Activity 1"], "successMetrics": ["Metric 1"]}],
    "resourceRequirements": [{"category": "Resource category", "items": ["Need 1"], "estimatedCost": "Estimated cost"}],
    "teamRequirements": [{"role": "Position", "responsibilities": "Responsibilities", "timeline": "Hiring timeline"}],
    "fundingNeeds": "Total funding needs",
    "fundingAllocation": [{"category": "Allocation category", "percentage": "Percentage", "amount": "Amount"}]
  },
  "riskAssessment": {
    "riskMatrix": [{"risk": "Risk description", "impact": "high/medium/low", "probability": "high/medium/low", "mitigation": "Mitigation", "contingency": "Contingency plan"}],
    "majorRisks": ["Major risk 1", "Major risk 2"],
    "mitigationStrategies": ["Strategy 1", "Strategy 2"]
  },
  "overallScore": 0,
  "recommendation": "Overall recommendation (within 100 words)",
  "strengths": ["Strength 1", "Strength 2", "Strength 3"],
  "improvements": ["Improvement 1", "Improvement 2", "Improvement 3"],
  "nextSteps": [{"action": "Action", "priority": "immediate/short-term/long-term", "timeline": "Timeline"}],
  "vcInsights": {
    "fundingReadiness": "Funding readiness",
    "fundingStage": "Appropriate funding round",
    "attractivenessToVCs": "Investment attractiveness",
    "investmentHighlights": ["Highlight 1", "Highlight 2", "Highlight 3"],
    "redFlags": ["Issue 1", "Issue 2"],
    "suggestedVCs": [{"name": "VC name", "focus": "Investment focus", "typicalCheck": "Typical check size", "reason": "Reason"}],
    "pitchKeyPoints": ["Point 1", "Point 2", "Point 3", "Point 4", "Point 5"]
  }
}
""",
}

REPORT_CLOSING = {
    "zh": """
---

# 重要提示

1. 数据真实性：尽可能引用真实市场数据、行业报告、案例研究
2. 专业深度：分析要深入、具体、可操作，避免泛泛而谈
3. 逻辑严密：结论要有数据支撑
4. 完整性：确保所有字段都有内容，数组至少包含最低要求数量的元素
5. 数据来源：marketAnalysis 和 competitiveAnalysis 可选提供 dataSources 数组（每项包括 title、url）。只在有真实可验证来源时才提供，严禁编造虚假链接（如example.com），没有真实URL时直接省略该字段

请现在开始生成报告，以纯JSON格式输出，不要有其他说明文字。""",
    "en": """
---

# Important Notes

1. Data authenticity: reference real market data, industry reports and case studies whenever possible
2. Professional depth: be specific and actionable, avoid generalities
3. Logical rigor: support conclusions with data
4. Completeness: fill every field; arrays must contain at least the minimum number of elements
5. Data sources: marketAnalysis and competitiveAnalysis may include a dataSources array (each item has title and url). Only provide it for real, verifiable sources. NEVER use example.com or any fake links; omit the field when there is no real URL

Generate the report now as pure JSON, with no other text.""",
}


MARKET_INSIGHTS_SECTION = {
    "zh": {
        "title": "## 市场洞察数据（基于网络搜索）",
        "social_media_feedback": "### 社交媒体反馈",
        "competitor_analysis": "### 竞争对手分析",
        "industry_trends": "### 行业趋势",
        "user_reviews": "### 用户评价",
        "note": "**注意：请将这些市场洞察数据作为客观参考，结合对话内容进行综合分析。**",
    },
    "en": {
        "title": "## Market Insights (from web search)",
        "social_media_feedback": "### Social Media Feedback",
        "competitor_analysis": "### Competitor Analysis",
        "industry_trends": "### Industry Trends",
        "user_reviews": "### User Reviews",
        "note": "**Note: treat these market insights as objective reference and combine them with the conversation in your analysis.**",
    },
}


def format_market_insights(language: str, insights: "MarketInsights | None") -> str:
    """Prompt section for gathered insights; empty when there is nothing to add."""
    if insights is None or not insights.has_content:
        return ""
    labels = MARKET_INSIGHTS_SECTION[language]
    parts = [labels["title"]]
    for attr in ("social_media_feedback", "competitor_analysis", "industry_trends", "user_reviews"):
        text = getattr(insights, attr)
        if text:
            parts.append(f"{labels[attr]}\n{text}")
    parts.append(labels["note"])
    return "\n" + "\n\n".join(parts) + "\n\n---\n"


def build_report_prompt(
    language: str,
    idea: str,
    conversation_history: str,
    insights: "MarketInsights | None" = None,
) -> str:
    header = REPORT_HEADER[language].format(
        idea=idea,
        conversation_history=conversation_history,
        market_insights=format_market_insights(language, insights),
    )
    return header + REPORT_SCHEMA[language] + REPORT_CLOSING[language]
