import structlog
from fastapi import APIRouter, Depends

from angelic.api.schemas.feedback import FeedbackRequest
from angelic.core.auth import AuthUser, optional_auth
from angelic.db.base import get_session_factory
from angelic.db.models.feedback import Feedback

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/feedback")
async def submit_feedback(body: FeedbackRequest, user: AuthUser | None = Depends(optional_auth)):
    """Accept feedback from signed-in and anonymous users."""
    factory = get_session_factory()
    async with factory() as session:
        feedback = Feedback(
            user_id=user.user_id if user else None,
            email=body.email,
            feedback_type=body.feedback_type,
            subject=body.subject,
            content=body.content,
            rating=body.rating,
            report_id=body.report_id,
            conversation_id=body.conversation_id,
        )
        session.add(feedback)
        await session.commit()

    logger.info("feedback_received", feedback_id=feedback.id, feedback_type=body.feedback_type)
    return {"message": "Thank you for your feedback!", "feedbackId": feedback.id}
