"""Chat route: one advisory turn, persisted to the caller's conversation."""

import structlog
from fastapi import APIRouter, Depends

from angelic.agent.llm import LLMClient
from angelic.api.deps import get_llm
from angelic.api.schemas.chat import ChatRequest
from angelic.core.auth import AuthUser, optional_auth
from angelic.core.rate_limit import chat_rate_limit
from angelic.db.base import get_session_factory
from angelic.services.chat_service import chat_with_ai
from angelic.services.conversation_service import ConversationService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/chat", dependencies=[Depends(chat_rate_limit)])
async def chat(
    body: ChatRequest,
    user: AuthUser | None = Depends(optional_auth),
    llm: LLMClient = Depends(get_llm),
):
    """Send a message and get the advisor's reply.

    History comes from storage; ``conversationHistory`` in the body is ignored.
    """
    service = ConversationService(get_session_factory())
    conversation, history = await service.resolve_for_chat(
        user=user,
        session_id=body.session_id,
        conversation_id=body.conversation_id,
        message=body.message,
        persona=body.ai_persona,
    )

    turn = await chat_with_ai(
        llm,
        body.message,
        [{"role": message.role, "content": message.content} for message in history],
        language=body.ui_language,
        persona_id=body.ai_persona,
    )

    messages = await service.record_turn(conversation.id, body.message, turn.response, body.ai_persona)
    logger.info("chat_message_stored", conversation_id=conversation.id, turns=len(messages))

    payload = {
        "response": turn.response,
        "conversationId": conversation.id,
        "messages": [message.to_dict() for message in messages],
        "analysisData": turn.analysis_data,
    }
    if turn.follow_up_questions:
        payload["followUpQuestions"] = turn.follow_up_questions
    return payload
