"""Conversation routes: list, read messages, associate with an account."""

from fastapi import APIRouter, Depends, Query

from angelic.api.schemas.chat import AssociateRequest
from angelic.core.auth import AuthUser, optional_auth, require_auth
from angelic.db.base import get_session_factory
from angelic.services.conversation_service import ConversationService

router = APIRouter()


@router.get("/conversations")
async def list_conversations(user: AuthUser = Depends(require_auth)):
    conversations = await ConversationService(get_session_factory()).list_for_user(user.user_id)
    return [conversation.to_dict() for conversation in conversations]


@router.get("/conversations/{conversation_id}/messages")
async def conversation_messages(
    conversation_id: str,
    session_id: str | None = Query(None, alias="sessionId"),
    user: AuthUser | None = Depends(optional_auth),
):
    conversation, messages = await ConversationService(get_session_factory()).messages_for(
        conversation_id, user, session_id
    )
    return {
        "conversation": conversation.to_dict(),
        "messages": [message.to_dict() for message in messages],
    }


@router.post("/conversations/associate")
async def associate_conversation(body: AssociateRequest, user: AuthUser = Depends(require_auth)):
    await ConversationService(get_session_factory()).associate(user.user_id, body.conversation_id, body.session_id)
    return {"success": True, "message": "Conversation linked to your account"}
