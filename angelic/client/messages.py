"""Localized toast messages keyed by (ErrorKind, language)."""

from dataclasses import dataclass

from angelic.core.exceptions import ErrorKind


@dataclass(frozen=True)
class Toast:
    title: str
    description: str


GENERAL_ERROR = {
    "zh": Toast("对话失败", "对话过程中出现未知错误，请重试"),
    "en": Toast("Chat Failed", "An unknown error occurred during the conversation, please try again"),
}

ERROR_TOASTS: dict[tuple[ErrorKind, str], Toast] = {
    (ErrorKind.NETWORK, "zh"): Toast("网络连接错误", "无法连接到服务器，请检查网络连接后重试"),
    (ErrorKind.NETWORK, "en"): Toast(
        "Network Connection Error",
        "Unable to connect to server, please check your network connection and try again",
    ),
    (ErrorKind.SERVER, "zh"): Toast("服务器错误", "服务器暂时不可用，请稍后重试"),
    (ErrorKind.SERVER, "en"): Toast("Server Error", "Server is temporarily unavailable, please try again later"),
    (ErrorKind.CLIENT_INPUT, "zh"): Toast("输入错误", "请检查您的输入是否符合要求"),
    (ErrorKind.CLIENT_INPUT, "en"): Toast("Input Error", "Please check if your input meets the requirements"),
    (ErrorKind.AI_UNAVAILABLE, "zh"): Toast("AI服务不可用", "AI对话服务暂时维护中，请稍后重试"),
    (ErrorKind.AI_UNAVAILABLE, "en"): Toast(
        "AI Service Unavailable",
        "AI chat service is temporarily under maintenance, please try again later",
    ),
    (ErrorKind.MALFORMED_AI_OUTPUT, "zh"): Toast("报告生成失败", "报告生成失败，请重试"),
    (ErrorKind.MALFORMED_AI_OUTPUT, "en"): Toast("Report Generation Failed", "Report generation failed, please retry"),
    (ErrorKind.INCOMPLETE_REPORT, "zh"): Toast("报告生成失败", "报告数据不完整，请重试"),
    (ErrorKind.INCOMPLETE_REPORT, "en"): Toast("Report Generation Failed", "The report came back incomplete, please retry"),
    (ErrorKind.PAYMENT_NOT_CONFIGURED, "zh"): Toast("功能未配置", "支付功能尚未配置，暂时无法购买报告"),
    (ErrorKind.PAYMENT_NOT_CONFIGURED, "en"): Toast(
        "Feature Not Configured",
        "Payments are not configured yet, reports cannot be purchased right now",
    ),
    (ErrorKind.PAYMENT_REQUIRED, "zh"): Toast("需要付款", "请先完成付款再生成报告"),
    (ErrorKind.PAYMENT_REQUIRED, "en"): Toast("Payment Required", "Please complete payment before generating the report"),
}


def toast_for(kind: ErrorKind, language: str) -> Toast:
    return ERROR_TOASTS.get((kind, language)) or GENERAL_ERROR.get(language, GENERAL_ERROR["en"])
