"""Feedback API Pydantic schemas."""

from typing import Literal

from pydantic import EmailStr, Field, field_validator

from angelic.api.schemas.common import CamelModel


class FeedbackRequest(CamelModel):
    feedback_type: Literal["general", "report", "bug", "feature"] = "general"
    subject: str | None = None
    content: str
    rating: int | None = Field(default=None, ge=1, le=5)
    email: EmailStr | None = None
    report_id: str | None = None
    conversation_id: str | None = None

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Feedback content is required")
        return value


class FeedbackNotesRequest(CamelModel):
    notes: str | None = None
