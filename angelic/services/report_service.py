"""ReportService: report persistence, payment state and viewer access.

Generation itself lives in ``report_generator``; this module decides which
report row a generated report lands in and who may read it.
"""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from angelic.agent.llm import LLMClient
from angelic.core.auth import AuthUser, is_admin_user
from angelic.core.config import get_settings
from angelic.core.exceptions import PaymentRequiredError
from angelic.db.models.conversation import ChatMessage, Conversation
from angelic.db.models.report import Report
from angelic.domain.language import contains_cjk, detect_language
from angelic.integrations.market_insights import (
    MarketInsightsProvider,
    gather_market_insights,
    get_market_insights_provider,
)
from angelic.services.conversation_service import ConversationService, to_conversation_data
from angelic.services.email_service import send_report_email
from angelic.services.report_generator import generate_detailed_report

logger = structlog.get_logger(__name__)


def new_share_token() -> str:
    return secrets.token_urlsafe(16)


@dataclass
class ReportView:
    report: dict | None
    language: str
    share_token: str | None
    report_id: str


class ReportService:
    """Service layer for reports.

    ``llm`` is only needed for generation; read paths may pass None.
    """

    def __init__(
        self,
        llm: LLMClient | None,
        session_factory: async_sessionmaker[AsyncSession],
        insights_provider: MarketInsightsProvider | None = None,
    ):
        self.llm = llm
        self.session_factory = session_factory
        self.insights_provider = insights_provider

    async def _paid_unfilled(self, session: AsyncSession, conversation_id: str) -> Report | None:
        result = await session.execute(
            select(Report)
            .where(
                Report.conversation_id == conversation_id,
                Report.payment_status == "paid",
                Report.full_report.is_(None),
            )
            .order_by(Report.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _target_report(
        self, session: AsyncSession, conversation_id: str, report_id: str | None
    ) -> Report | None:
        """The report a generation should land in, or None for a new free report."""
        if report_id is None:
            return await self._paid_unfilled(session, conversation_id)
        report = await session.get(Report, report_id)
        if report is None or report.conversation_id != conversation_id:
            raise HTTPException(status_code=404, detail="Report not found")
        if report.payment_status != "paid":
            raise PaymentRequiredError("Payment is required before generating this report")
        return report

    async def generate_for_conversation(
        self,
        conversation: Conversation,
        messages: list[ChatMessage],
        *,
        report_id: str | None = None,
    ) -> Report:
        """Generate a report and store it.

        With ``report_id`` (a checkout unlocking the report it paid for) that
        report is used. If the payment webhook already filled it, it is returned
        without another generation. Without ``report_id``, a paid report that
        is still empty is filled first. Otherwise a new free report is created,
        unless payment is required.

        Raises:
            HTTPException(400): Empty transcript or no user message
            HTTPException(404): ``report_id`` unknown or from another conversation
            PaymentRequiredError: The report is unpaid, or payment is required and
                no paid report is waiting
            ReportGenerationError / AIServiceUnavailableError: Generation failed
        """
        data = to_conversation_data(messages)
        settings = get_settings()

        async with self.session_factory() as session:
            target = await self._target_report(session, conversation.id, report_id)
        if target is not None and target.full_report is not None:
            logger.info("report_already_filled", report_id=target.id, conversation_id=conversation.id)
            return target
        if target is None and settings.report_payment_required:
            raise PaymentRequiredError("Payment is required before generating this report")

        language = detect_language(data.messages, settings.cjk_language_threshold)
        provider = self.insights_provider or get_market_insights_provider(self.llm)
        insights = await gather_market_insights(
            provider, data.idea, language, settings.market_insights_timeout_seconds
        )
        generated = await generate_detailed_report(data, self.llm, insights)

        async with self.session_factory() as session:
            if target is not None:
                report = await session.get(Report, target.id)
                if report.full_report is not None:
                    # Filled concurrently by the webhook's background job
                    logger.info("report_filled_concurrently", report_id=report.id)
                    return report
                report.full_report = generated.report.to_json_dict()
                report.language = generated.language
                report.email = report.email or conversation.email
                if not report.share_token:
                    report.share_token = new_share_token()
            else:
                report = Report(
                    conversation_id=conversation.id,
                    email=conversation.email,
                    full_report=generated.report.to_json_dict(),
                    language=generated.language,
                    report_type="angelic",
                    share_token=new_share_token(),
                )
                session.add(report)
            await session.commit()

        logger.info("report_stored", report_id=report.id, conversation_id=conversation.id, filled_paid=target is not None)
        return report

    async def notify(self, report: Report, email: str | None) -> bool:
        """Email the report link once; failures are logged, never raised."""
        if not email or not report.full_report:
            return False
        if report.sent_at is not None:
            logger.info("report_email_skipped", report_id=report.id, reason="already_sent")
            return False
        try:
            sent = await send_report_email(email, report.full_report, report.id, report.language or "en")
        except Exception as exc:
            logger.error("report_email_failed", report_id=report.id, error=str(exc), error_type=type(exc).__name__)
            return False
        if sent:
            async with self.session_factory() as session:
                stored = await session.get(Report, report.id)
                stored.sent_at = datetime.now(UTC)
                await session.commit()
        return sent

    async def generate_and_send(self, conversation_id: str, email: str | None = None) -> None:
        """Background job: generate the report for a conversation and email it.

        Never raises; every failure is logged.
        """
        try:
            conversation, messages = await ConversationService(self.session_factory).transcript(conversation_id)
            if conversation is None:
                logger.warning("background_report_skipped", conversation_id=conversation_id, reason="not_found")
                return
            report = await self.generate_for_conversation(conversation, messages)
            await self.notify(report, email or conversation.email)
        except Exception as exc:
            logger.error(
                "background_report_failed",
                conversation_id=conversation_id,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )

    async def view(
        self,
        report_id: str,
        *,
        user: AuthUser | None,
        admin: bool = False,
        token: str | None = None,
    ) -> ReportView:
        """Read a report as ``user``.

        Access: matching share token (counted), the owning user, or an admin
        asking for the admin view.

        Raises:
            HTTPException(404): Unknown report or conversation
            HTTPException(403): No access
            HTTPException(409): Paid report still being generated
        """
        async with self.session_factory() as session:
            report = await session.get(Report, report_id)
            if report is None:
                raise HTTPException(status_code=404, detail="Report not found")
            conversation = await session.get(Conversation, report.conversation_id)
            if conversation is None:
                raise HTTPException(status_code=404, detail="Conversation for this report not found")

            via_token = bool(token) and report.share_token == token
            granted = via_token
            if not granted and user is not None:
                granted = conversation.user_id == user.user_id or (admin and await is_admin_user(user))
            if not granted:
                raise HTTPException(status_code=403, detail="Access denied")

            if report.full_report is None:
                raise HTTPException(status_code=409, detail="report_pending")

            if report.viewed_at is None:
                report.viewed_at = datetime.now(UTC)
            if via_token:
                report.share_count = (report.share_count or 0) + 1
            await session.commit()

            language = report.language or ("zh" if contains_cjk(str(report.full_report.get("idea", ""))) else "en")
            return ReportView(
                report=report.full_report,
                language=language,
                share_token=report.share_token,
                report_id=report.id,
            )

    async def list_for_user(self, user_id: str) -> list[Report]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Report)
                .join(Conversation, Conversation.id == Report.conversation_id)
                .where(Conversation.user_id == user_id)
                .order_by(Report.created_at.desc())
            )
            return list(result.scalars())

    async def create_pending(
        self, conversation_id: str, payment_intent_id: str, amount: int, currency: str, report_type: str
    ) -> Report:
        async with self.session_factory() as session:
            report = Report(
                conversation_id=conversation_id,
                report_type=report_type,
                payment_status="pending",
                stripe_payment_intent_id=payment_intent_id,
                amount=amount,
                currency=currency,
            )
            session.add(report)
            await session.commit()
            return report

    async def get(self, report_id: str) -> Report:
        async with self.session_factory() as session:
            report = await session.get(Report, report_id)
        if report is None:
            raise HTTPException(status_code=404, detail="Report not found")
        return report

    async def mark_paid(self, payment_intent_id: str) -> Report | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Report).where(Report.stripe_payment_intent_id == payment_intent_id)
            )
            report = result.scalar_one_or_none()
            if report is None:
                return None
            report.payment_status = "paid"
            report.paid_at = datetime.now(UTC)
            await session.commit()
            return report
