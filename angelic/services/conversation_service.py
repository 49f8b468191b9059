"""ConversationService: conversation resolution, ownership and message storage.

Ownership rules:
- Authenticated caller: owns a conversation by user id or by a matching session id
- Anonymous caller: must present the conversation's session id
- Neither identity: 401
"""

from datetime import UTC, datetime

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from angelic.core.auth import AuthUser
from angelic.db.models.conversation import ChatMessage, Conversation
from angelic.schemas.report import ConversationData, ConversationMessage

TITLE_LENGTH = 50


def check_access(conversation: Conversation, user: AuthUser | None, session_id: str | None) -> None:
    """Raise unless the caller may read or write ``conversation``.

    Raises:
        HTTPException(403): Caller is identified but does not own it
        HTTPException(401): Caller is neither authenticated nor carries a session id
    """
    if user is not None:
        owns_by_user = conversation.user_id == user.user_id
        owns_by_session = bool(session_id) and conversation.session_id == session_id
        if not (owns_by_user or owns_by_session):
            raise HTTPException(status_code=403, detail="Access to this conversation is denied")
        return
    if session_id:
        if conversation.session_id != session_id:
            raise HTTPException(status_code=403, detail="Access to this conversation is denied")
        return
    raise HTTPException(status_code=401, detail="Login or a session id is required")


def to_conversation_data(messages: list[ChatMessage]) -> ConversationData:
    """Report-generator input; the idea is the first user turn.

    Raises:
        HTTPException(400): Empty transcript or no user message
    """
    if not messages:
        raise HTTPException(status_code=400, detail="Conversation is empty, cannot generate a report")
    first_user = next((message for message in messages if message.role == "user"), None)
    if first_user is None:
        raise HTTPException(status_code=400, detail="No startup idea found in the conversation")
    return ConversationData(
        idea=first_user.content,
        messages=[
            ConversationMessage(role=message.role, content=message.content, timestamp=message.created_at)
            for message in messages
        ],
    )


class ConversationService:
    """Service layer for conversations and their messages."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _messages(self, session: AsyncSession, conversation_id: str) -> list[ChatMessage]:
        result = await session.execute(
            select(ChatMessage).where(ChatMessage.conversation_id == conversation_id).order_by(ChatMessage.id)
        )
        return list(result.scalars())

    async def _latest_for_session(self, session: AsyncSession, session_id: str) -> Conversation | None:
        result = await session.execute(
            select(Conversation)
            .where(Conversation.session_id == session_id)
            .order_by(Conversation.updated_at.desc(), Conversation.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get(self, conversation_id: str) -> Conversation:
        async with self.session_factory() as session:
            conversation = await session.get(Conversation, conversation_id)
        if conversation is None:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return conversation

    async def resolve_for_chat(
        self,
        *,
        user: AuthUser | None,
        session_id: str | None,
        conversation_id: str | None,
        message: str,
        persona: str,
    ) -> tuple[Conversation, list[ChatMessage]]:
        """Find or create the conversation a chat turn belongs to, with its history.

        Raises:
            HTTPException(404): ``conversation_id`` does not exist
            HTTPException(403/401): Ownership check failed
        """
        async with self.session_factory() as session:
            if conversation_id:
                conversation = await session.get(Conversation, conversation_id)
                if conversation is None:
                    raise HTTPException(status_code=404, detail="Conversation not found")
                check_access(conversation, user, session_id)
                return conversation, await self._messages(session, conversation.id)

            if user is None and not session_id:
                raise HTTPException(status_code=401, detail="Login or a session id is required")

            if user is None:
                existing = await self._latest_for_session(session, session_id)
                if existing is not None:
                    return existing, await self._messages(session, existing.id)

            conversation = Conversation(
                user_id=user.user_id if user else None,
                session_id=None if user else session_id,
                title=message[:TITLE_LENGTH],
                ai_persona=persona,
            )
            session.add(conversation)
            await session.commit()
            return conversation, []

    async def record_turn(
        self, conversation_id: str, user_message: str, reply: str, persona: str
    ) -> list[ChatMessage]:
        """Store both sides of a turn, persist a persona switch, bump ``updated_at``."""
        async with self.session_factory() as session:
            conversation = await session.get(Conversation, conversation_id)
            session.add(ChatMessage(conversation_id=conversation_id, role="user", content=user_message))
            session.add(ChatMessage(conversation_id=conversation_id, role="assistant", content=reply))
            if conversation.ai_persona != persona:
                conversation.ai_persona = persona
            conversation.updated_at = datetime.now(UTC)
            await session.commit()
            return await self._messages(session, conversation_id)

    async def resolve_for_report(
        self,
        *,
        user: AuthUser | None,
        session_id: str | None,
        conversation_id: str | None,
    ) -> tuple[Conversation, list[ChatMessage]]:
        """Conversation plus transcript for report generation or a report request.

        Raises:
            HTTPException(400): Neither id supplied, or no conversation for the session
            HTTPException(404): ``conversation_id`` does not exist
            HTTPException(403/401): Ownership check failed
        """
        if not conversation_id and not session_id:
            raise HTTPException(status_code=400, detail="conversationId or sessionId is required")

        async with self.session_factory() as session:
            if conversation_id:
                conversation = await session.get(Conversation, conversation_id)
                if conversation is None:
                    raise HTTPException(status_code=404, detail="Conversation not found")
                check_access(conversation, user, session_id)
            else:
                conversation = await self._latest_for_session(session, session_id)
                if conversation is None:
                    raise HTTPException(status_code=400, detail="No conversation found for this session")
            return conversation, await self._messages(session, conversation.id)

    async def messages_for(
        self, conversation_id: str, user: AuthUser | None, session_id: str | None
    ) -> tuple[Conversation, list[ChatMessage]]:
        async with self.session_factory() as session:
            conversation = await session.get(Conversation, conversation_id)
            if conversation is None:
                raise HTTPException(status_code=404, detail="Conversation not found")
            check_access(conversation, user, session_id)
            return conversation, await self._messages(session, conversation_id)

    async def transcript(self, conversation_id: str) -> tuple[Conversation | None, list[ChatMessage]]:
        async with self.session_factory() as session:
            conversation = await session.get(Conversation, conversation_id)
            if conversation is None:
                return None, []
            return conversation, await self._messages(session, conversation_id)

    async def list_for_user(self, user_id: str) -> list[Conversation]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Conversation).where(Conversation.user_id == user_id).order_by(Conversation.updated_at.desc())
            )
            return list(result.scalars())

    async def request_report(self, conversation_id: str, email: str) -> None:
        async with self.session_factory() as session:
            conversation = await session.get(Conversation, conversation_id)
            conversation.email = email
            conversation.report_requested_at = datetime.now(UTC)
            await session.commit()

    async def associate(self, user_id: str, conversation_id: str | None, session_id: str | None) -> None:
        """Attach an anonymous conversation to ``user_id``.

        Raises:
            HTTPException(400): Missing ids
            HTTPException(404): Unknown conversation
            HTTPException(403): Session id does not match
        """
        if not conversation_id or not session_id:
            raise HTTPException(status_code=400, detail="conversationId and sessionId are required")
        async with self.session_factory() as session:
            conversation = await session.get(Conversation, conversation_id)
            if conversation is None:
                raise HTTPException(status_code=404, detail="Conversation not found")
            if conversation.session_id != session_id:
                raise HTTPException(status_code=403, detail="Cannot associate this conversation")
            conversation.user_id = user_id
            await session.commit()
