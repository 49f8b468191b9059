"""Report and payment API Pydantic schemas."""

from pydantic import EmailStr

from angelic.api.schemas.common import CamelModel


class GenerateReportRequest(CamelModel):
    conversation_id: str | None = None
    session_id: str | None = None
    # The paid report a checkout is unlocking
    report_id: str | None = None


class RequestReportRequest(CamelModel):
    email: EmailStr
    session_id: str | None = None
    conversation_id: str | None = None


class CreatePaymentRequest(CamelModel):
    conversation_id: str | None = None
    report_type: str = "angelic"
