"""Payment routes: Stripe PaymentIntent per report, status polling, webhook."""

import stripe
import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError

from angelic.agent.llm import LLMClient
from angelic.api.deps import get_llm
from angelic.api.schemas.reports import CreatePaymentRequest
from angelic.core.config import get_settings
from angelic.core.exceptions import PaymentNotConfiguredError
from angelic.db.base import get_session_factory
from angelic.db.models.stripe_event import StripeWebhookEvent
from angelic.services.conversation_service import ConversationService
from angelic.services.report_service import ReportService

logger = structlog.get_logger(__name__)

router = APIRouter()


# ── Helpers ─────────────────────────────────────────────────────────


def _get_stripe() -> None:
    """Configure the stripe module with the secret key."""
    stripe.api_key = get_settings().stripe_secret_key


def report_price(report_type: str) -> int:
    prices = get_settings().report_prices
    return prices.get(report_type, prices.get("angelic", 200))


async def _claim_event(event_id: str) -> bool:
    """Return True if event is new (claimed). False if duplicate."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            session.add(StripeWebhookEvent(event_id=event_id))
            await session.commit()
            return True
        except IntegrityError:
            await session.rollback()
            return False


# ── Endpoints ───────────────────────────────────────────────────────


@router.get("/payments/config")
async def payment_config():
    """Lets clients show a not-configured screen instead of starting checkout."""
    settings = get_settings()
    return {
        "enabled": settings.stripe_enabled,
        "publishableKey": settings.stripe_publishable_key or None,
    }


@router.post("/create-report-payment")
async def create_report_payment(body: CreatePaymentRequest):
    """Create a PaymentIntent and the pending report it will unlock."""
    settings = get_settings()
    if not settings.stripe_enabled:
        raise PaymentNotConfiguredError("Payment system is not configured")
    if not body.conversation_id:
        raise HTTPException(status_code=400, detail="Conversation ID is required")

    factory = get_session_factory()
    await ConversationService(factory).get(body.conversation_id)

    amount = report_price(body.report_type)
    _get_stripe()
    intent = await stripe.PaymentIntent.create_async(
        amount=amount,
        currency=settings.report_currency,
        metadata={"conversationId": body.conversation_id, "reportType": body.report_type},
    )

    report = await ReportService(None, factory).create_pending(
        body.conversation_id, intent.id, amount, settings.report_currency, body.report_type
    )
    logger.info("payment_intent_created", report_id=report.id, amount=amount, report_type=body.report_type)

    return {"clientSecret": intent.client_secret, "reportId": report.id, "amount": amount}


@router.get("/report-payment-status/{report_id}")
async def report_payment_status(report_id: str):
    report = await ReportService(None, get_session_factory()).get(report_id)
    return {
        "paymentStatus": report.payment_status,
        "paidAt": report.paid_at.isoformat() if report.paid_at else None,
        "amount": report.amount,
        "currency": report.currency,
    }


@router.post("/stripe-webhook")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    llm: LLMClient = Depends(get_llm),
):
    """Handle Stripe webhook events with signature verification."""
    settings = get_settings()
    if not settings.stripe_webhook_secret:
        logger.error("stripe_webhook_secret_missing")
        raise HTTPException(status_code=503, detail="Stripe webhook endpoint is not configured")
    _get_stripe()

    body = await request.body()
    sig_header = request.headers.get("stripe-signature")

    if not sig_header:
        raise HTTPException(status_code=400, detail="Missing stripe-signature header")

    try:
        event = stripe.Webhook.construct_event(body, sig_header, settings.stripe_webhook_secret)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError:
        raise HTTPException(status_code=400, detail="Invalid signature")

    if not await _claim_event(event["id"]):
        logger.info("stripe_duplicate_event_ignored", event_id=event["id"])
        return {"received": True}

    event_type = event["type"]
    logger.info("stripe_webhook_received", event_type=event_type)

    if event_type == "payment_intent.succeeded":
        await _handle_payment_succeeded(event["data"]["object"], background_tasks, llm)

    return {"received": True}


# ── Webhook handlers ────────────────────────────────────────────────


async def _handle_payment_succeeded(intent: dict, background_tasks: BackgroundTasks, llm: LLMClient) -> None:
    """Mark the report paid and, when we know where to send it, generate it."""
    factory = get_session_factory()
    report = await ReportService(llm, factory).mark_paid(intent["id"])
    if report is None:
        logger.warning("payment_succeeded_unknown_intent", payment_intent_id=intent["id"])
        return
    logger.info("report_payment_confirmed", report_id=report.id)

    metadata = intent.get("metadata") or {}
    if metadata.get("reportType", "angelic") != "angelic":
        return

    conversation, _ = await ConversationService(factory).transcript(report.conversation_id)
    if conversation is not None and conversation.email:
        background_tasks.add_task(ReportService(llm, factory).generate_and_send, conversation.id, conversation.email)
