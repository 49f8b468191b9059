"""Chat and conversation API Pydantic schemas."""

from typing import Literal

from pydantic import Field, field_validator

from angelic.api.schemas.common import CamelModel


class ChatRequest(CamelModel):
    message: str = Field(min_length=1, max_length=1000)
    # Accepted for compatibility; history is rebuilt from storage.
    conversation_history: list[dict] | None = None
    conversation_id: str | None = None
    session_id: str | None = None
    ui_language: Literal["zh", "en"] = "zh"
    ai_persona: Literal["consultant", "customer"] = "consultant"

    @field_validator("message", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class AssociateRequest(CamelModel):
    conversation_id: str | None = None
    session_id: str | None = None
