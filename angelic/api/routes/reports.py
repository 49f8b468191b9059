"""Report routes: generate, request by email, view and list."""

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Query

from angelic.agent.llm import LLMClient
from angelic.api.deps import get_llm
from angelic.api.schemas.reports import GenerateReportRequest, RequestReportRequest
from angelic.core.auth import AuthUser, optional_auth, require_auth
from angelic.core.rate_limit import report_rate_limit
from angelic.db.base import get_session_factory
from angelic.services.conversation_service import ConversationService, to_conversation_data
from angelic.services.report_service import ReportService

logger = structlog.get_logger(__name__)

router = APIRouter()

GENERATED_MESSAGE = {"zh": "报告生成成功", "en": "Report generated successfully"}


@router.post("/generate-angelic-report", dependencies=[Depends(report_rate_limit)])
async def generate_angelic_report(
    body: GenerateReportRequest,
    user: AuthUser | None = Depends(optional_auth),
    llm: LLMClient = Depends(get_llm),
):
    """Generate a report for the caller's conversation and return it inline."""
    factory = get_session_factory()
    conversation, messages = await ConversationService(factory).resolve_for_report(
        user=user, session_id=body.session_id, conversation_id=body.conversation_id
    )

    service = ReportService(llm, factory)
    report = await service.generate_for_conversation(conversation, messages, report_id=body.report_id)
    await service.notify(report, conversation.email or (user.email if user else None))

    language = report.language or "en"
    return {
        "message": GENERATED_MESSAGE.get(language, GENERATED_MESSAGE["en"]),
        "reportId": report.id,
        "report": report.full_report,
        "language": language,
    }


@router.post("/request-report")
async def request_report(
    body: RequestReportRequest,
    background_tasks: BackgroundTasks,
    user: AuthUser | None = Depends(optional_auth),
    llm: LLMClient = Depends(get_llm),
):
    """Queue report generation; the report link is emailed when ready."""
    factory = get_session_factory()
    conversations = ConversationService(factory)
    conversation, messages = await conversations.resolve_for_report(
        user=user, session_id=body.session_id, conversation_id=body.conversation_id
    )
    # 400 on an empty transcript or one without a user message
    to_conversation_data(messages)

    await conversations.request_report(conversation.id, body.email)
    background_tasks.add_task(ReportService(llm, factory).generate_and_send, conversation.id, body.email)
    logger.info("report_requested", conversation_id=conversation.id)

    return {
        "message": "Report requested. We will email you when it is ready.",
        "conversationId": conversation.id,
    }


@router.get("/reports/{report_id}")
async def get_report(
    report_id: str,
    admin: bool = Query(False),
    token: str | None = Query(None),
    user: AuthUser | None = Depends(optional_auth),
):
    view = await ReportService(None, get_session_factory()).view(report_id, user=user, admin=admin, token=token)
    return {
        "report": view.report,
        "language": view.language,
        "shareToken": view.share_token,
        "reportId": view.report_id,
    }


@router.get("/my-reports")
async def my_reports(user: AuthUser = Depends(require_auth)):
    reports = await ReportService(None, get_session_factory()).list_for_user(user.user_id)
    return [report.to_summary_dict() for report in reports]
