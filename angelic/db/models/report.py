"""Report model: generated DetailedReport plus payment and sharing state."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from angelic.db.base import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    conversation_id = Column(String(36), ForeignKey("conversations.id"), nullable=False, index=True)
    email = Column(String(255), nullable=True)

    # None while a paid report is waiting to be generated
    full_report = Column(JSON(none_as_null=True), nullable=True)
    language = Column(String(5), nullable=True)
    report_type = Column(String(50), nullable=False, default="angelic")

    share_token = Column(String(64), nullable=True, unique=True, index=True)
    share_count = Column(Integer, nullable=False, default=0)

    # Payment: "free" for unpaid-flow reports, then pending -> paid
    payment_status = Column(String(20), nullable=False, default="free")
    stripe_payment_intent_id = Column(String(255), nullable=True, unique=True, index=True)
    amount = Column(Integer, nullable=True)  # cents
    currency = Column(String(10), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    sent_at = Column(DateTime(timezone=True), nullable=True)
    viewed_at = Column(DateTime(timezone=True), nullable=True)

    def to_summary_dict(self) -> dict:
        report = self.full_report or {}
        return {
            "id": self.id,
            "conversationId": self.conversation_id,
            "reportType": self.report_type,
            "idea": report.get("idea"),
            "overallScore": report.get("overallScore"),
            "language": self.language,
            "paymentStatus": self.payment_status,
            "shareToken": self.share_token,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "viewedAt": self.viewed_at.isoformat() if self.viewed_at else None,
        }
