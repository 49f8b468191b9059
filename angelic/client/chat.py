"""Client-side chat orchestration.

One ChatOrchestrator per conversation. ``send`` moves the state machine
IDLE -> SENDING -> SUCCEEDED | FAILED; any later send starts from the last
terminal state.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog

from angelic.client.api import AngelicClient
from angelic.client.errors import APIRequestError
from angelic.client.messages import Toast, toast_for
from angelic.core.exceptions import ErrorKind
from angelic.domain.language import detect_text_language

logger = structlog.get_logger(__name__)


class ChatState(StrEnum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ChatMessage:
    role: str
    content: str


@dataclass
class ChatOrchestrator:
    client: AngelicClient
    # None uses Settings.cjk_language_threshold
    language_threshold: float | None = None
    state: ChatState = ChatState.IDLE
    messages: list[ChatMessage] = field(default_factory=list)
    conversation_id: str | None = None
    follow_up_questions: list[str] = field(default_factory=list)
    analysis_data: Any = None
    toast: Toast | None = None

    @property
    def language(self) -> str:
        return self.client.context.language

    async def send(self, text: str) -> bool:
        """Send one user message.

        Returns:
            True when the turn succeeded; False when it failed or was ignored
        """
        message = text.strip()
        if not message or self.state == ChatState.SENDING:
            return False

        if not any(m.role == "user" for m in self.messages):
            detected = detect_text_language(message, self.language_threshold)
            if detected != self.client.context.language:
                self.client.context = self.client.context.with_language(detected)

        history = [{"role": m.role, "content": m.content} for m in self.messages]
        self.messages.append(ChatMessage("user", message))
        self.state = ChatState.SENDING
        self.toast = None

        try:
            data = await self.client.chat(message, conversation_id=self.conversation_id, history=history)
        except APIRequestError as exc:
            self._fail(exc.kind)
            return False

        reply = data.get("response") if isinstance(data, dict) else None
        if not reply:
            self._fail(ErrorKind.SERVER)
            return False

        self.messages.append(ChatMessage("assistant", reply))
        self.conversation_id = data.get("conversationId") or self.conversation_id
        if data.get("analysisData") is not None:
            self.analysis_data = data["analysisData"]
        self.follow_up_questions = list(data.get("followUpQuestions") or [])
        self.state = ChatState.SUCCEEDED
        return True

    def _fail(self, kind: ErrorKind) -> None:
        # Roll back the optimistic user message
        if self.messages and self.messages[-1].role == "user":
            self.messages.pop()
        self.toast = toast_for(kind, self.language)
        self.state = ChatState.FAILED
        logger.info("chat_send_failed", kind=kind.value, language=self.language)
