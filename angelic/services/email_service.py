"""Report-ready notification emails."""

from html import escape

from angelic.core.config import get_settings
from angelic.integrations.brevo import BrevoClient

SUBJECTS = {
    "zh": "您的 Angelic 创业分析报告已生成",
    "en": "Your Angelic startup report is ready",
}

BODIES = {
    "zh": {
        "greeting": "您好！",
        "intro": "我们已经根据您与 Angelic 的对话，为您的创业想法生成了详细的分析报告。",
        "idea": "创业想法",
        "score": "综合评分",
        "cta": "查看完整报告",
        "footer": "感谢您使用 Angelic。",
    },
    "en": {
        "greeting": "Hello!",
        "intro": "We have generated a detailed analysis of your startup idea based on your conversation with Angelic.",
        "idea": "Idea",
        "score": "Overall score",
        "cta": "View the full report",
        "footer": "Thank you for using Angelic.",
    },
}


def report_view_url(report_id: str) -> str:
    return f"{get_settings().frontend_url.rstrip('/')}/reports/{report_id}"


def render_report_email(report: dict, report_id: str, language: str) -> tuple[str, str, str]:
    """Build (subject, html, text) for a finished report."""
    copy = BODIES.get(language, BODIES["en"])
    url = report_view_url(report_id)
    idea = str(report.get("idea", ""))
    score = report.get("overallScore", "")

    html = (
        f"<p>{copy['greeting']}</p>"
        f"<p>{copy['intro']}</p>"
        f"<p><strong>{copy['idea']}:</strong> {escape(idea)}</p>"
        f"<p><strong>{copy['score']}:</strong> {score}/100</p>"
        f'<p><a href="{escape(url)}">{copy["cta"]}</a></p>'
        f"<p>{copy['footer']}</p>"
    )
    text = "\n\n".join(
        [
            copy["greeting"],
            copy["intro"],
            f"{copy['idea']}: {idea}",
            f"{copy['score']}: {score}/100",
            f"{copy['cta']}: {url}",
            copy["footer"],
        ]
    )
    return SUBJECTS.get(language, SUBJECTS["en"]), html, text


async def send_report_email(
    to: str,
    report: dict,
    report_id: str,
    language: str,
    client: BrevoClient | None = None,
) -> bool:
    subject, html, text = render_report_email(report, report_id, language)
    return await (client or BrevoClient()).send(to, subject, html, text)
