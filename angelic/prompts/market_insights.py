"""Prompts and search queries for market insights.

Four searches per idea, one per category. Each query is formatted with the
idea; results are summarized by the utility model.
"""

SEARCH_CATEGORIES = ("socialMedia", "competitors", "industry", "userReviews")

SEARCH_QUERIES = {
    "socialMedia": {
        "zh": "{idea} site:zhihu.com OR site:xiaohongshu.com OR site:weixin.qq.com",
        "en": "{idea} site:reddit.com OR site:producthunt.com OR site:medium.com",
    },
    "competitors": {
        "zh": "{idea} 竞争对手 市场分析",
        "en": "{idea} competitors market analysis site:crunchbase.com OR site:techcrunch.com",
    },
    "industry": {
        "zh": "{idea} 行业趋势 市场报告",
        "en": "{idea} industry trends market report site:techcrunch.com OR site:theverge.com OR site:wired.com",
    },
    "userReviews": {
        "zh": "{idea} 用户评价 使用体验",
        "en": "{idea} user reviews feedback site:ycombinator.com OR site:reddit.com",
    },
}

# Serper locale parameters per language
SEARCH_LOCALE = {
    "zh": {"gl": "cn", "hl": "zh-cn"},
    "en": {"gl": "us", "hl": "en"},
}

CATEGORY_TOPICS = {
    "socialMedia": "social media feedback",
    "competitors": "competitor analysis",
    "industry": "industry trends",
    "userReviews": "user reviews",
}

SUMMARY_SYSTEM_PROMPT = {
    "zh": "你是一位专业的市场研究分析师。总结搜索结果时要客观、具体，引用真实链接。",
    "en": (
        "You are a professional market research analyst. Summarize search results objectively "
        "and specifically, citing real links."
    ),
}

SUMMARY_PROMPT = {
    "zh": '基于以下搜索结果，总结关于"{topic}"的关键洞察（2-3段，每段2-3句话）。包含具体数据和观点，引用来源链接：\n\n{results}',
    "en": (
        'Based on the following search results, summarize key insights about "{topic}" '
        "(2-3 paragraphs, 2-3 sentences each). Include specific data and viewpoints, cite source links:\n\n{results}"
    ),
}
