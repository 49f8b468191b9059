"""Feedback model: user-submitted feedback reviewed by admins."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from angelic.db.base import Base


class Feedback(Base):
    __tablename__ = "feedbacks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=True, index=True)
    email = Column(String(255), nullable=True)
    feedback_type = Column(String(20), nullable=False, default="general")
    subject = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)
    report_id = Column(String(36), nullable=True)
    conversation_id = Column(String(36), nullable=True)

    is_read = Column(Boolean, nullable=False, default=False)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "email": self.email,
            "feedbackType": self.feedback_type,
            "subject": self.subject,
            "content": self.content,
            "rating": self.rating,
            "reportId": self.report_id,
            "conversationId": self.conversation_id,
            "isRead": self.is_read,
            "adminNotes": self.admin_notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
