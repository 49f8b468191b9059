"""Admin API routes: feedback review, users, dashboard stats, report scores."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select

from angelic.api.schemas.feedback import FeedbackNotesRequest
from angelic.core.auth import AuthUser, require_admin
from angelic.db.base import get_session_factory
from angelic.db.models.conversation import ChatMessage, Conversation
from angelic.db.models.feedback import Feedback
from angelic.db.models.report import Report
from angelic.db.models.user import User

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------- Feedback ----------


@router.get("/feedbacks")
async def list_feedbacks(_: AuthUser = Depends(require_admin)):
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(Feedback).order_by(Feedback.created_at.desc()))
        return [feedback.to_dict() for feedback in result.scalars()]


async def _get_feedback(session, feedback_id: str) -> Feedback:
    feedback = await session.get(Feedback, feedback_id)
    if feedback is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return feedback


@router.patch("/feedbacks/{feedback_id}/read")
async def mark_feedback_read(feedback_id: str, _: AuthUser = Depends(require_admin)):
    factory = get_session_factory()
    async with factory() as session:
        feedback = await _get_feedback(session, feedback_id)
        feedback.is_read = True
        await session.commit()
    return {"message": "Feedback marked as read"}


@router.patch("/feedbacks/{feedback_id}/notes")
async def update_feedback_notes(
    feedback_id: str,
    body: FeedbackNotesRequest,
    _: AuthUser = Depends(require_admin),
):
    factory = get_session_factory()
    async with factory() as session:
        feedback = await _get_feedback(session, feedback_id)
        feedback.admin_notes = body.notes or ""
        await session.commit()
    return {"message": "Feedback notes updated"}


# ---------- Users ----------


@router.get("/users")
async def list_users(_: AuthUser = Depends(require_admin)):
    """All accounts, newest first; password hashes are never included."""
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(User).order_by(User.created_at.desc()))
        return [user.to_public_dict() for user in result.scalars()]


# ---------- Dashboard ----------


@router.get("/stats")
async def dashboard_stats(_: AuthUser = Depends(require_admin)):
    """Headline counts for the admin dashboard."""
    factory = get_session_factory()
    async with factory() as session:

        async def count(column, *where) -> int:
            return (await session.execute(select(func.count(column)).where(*where))).scalar_one()

        return {
            "totalUsers": await count(User.id),
            "totalConversations": await count(Conversation.id),
            "totalMessages": await count(ChatMessage.id),
            "totalReports": await count(Report.id),
            "paidReports": await count(Report.id, Report.payment_status == "paid"),
            "totalFeedback": await count(Feedback.id),
            "unreadFeedback": await count(Feedback.id, Feedback.is_read.is_(False)),
        }


@router.get("/report-scores")
async def report_scores(_: AuthUser = Depends(require_admin)):
    """Reports that carry an overall score, highest first."""
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(Report).where(Report.full_report.is_not(None)))
        reports = list(result.scalars())

    scores = []
    for report in reports:
        overall = report.full_report.get("overallScore")
        if not isinstance(overall, (int, float)):
            continue
        scores.append(
            {
                "id": report.id,
                "conversationId": report.conversation_id,
                "reportType": report.report_type,
                "createdAt": report.created_at.isoformat() if report.created_at else None,
                "idea": report.full_report.get("idea", ""),
                "overallScore": overall,
                "dimensions": {
                    "market": report.full_report.get("marketAnalysis", {}).get("score"),
                    "competition": report.full_report.get("competitiveAnalysis", {}).get("score"),
                    "businessModel": report.full_report.get("businessModel", {}).get("score"),
                },
            }
        )
    scores.sort(key=lambda row: row["overallScore"], reverse=True)
    return scores
