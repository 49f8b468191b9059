"""Paid report checkout as a small state machine.

NOT_CONFIGURED is decided before any payment is attempted so callers can show
a dedicated "feature not configured" screen. Card collection itself happens in
Stripe's UI; this flow only hands out the client secret and waits for the
webhook to mark the report paid.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum

import structlog

from angelic.client.api import AngelicClient
from angelic.client.errors import APIRequestError
from angelic.core.exceptions import ErrorKind

logger = structlog.get_logger(__name__)

POLL_INTERVAL_SECONDS = 2.0
MAX_POLLS = 30


class CheckoutState(StrEnum):
    IDLE = "idle"
    NOT_CONFIGURED = "not_configured"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    UNLOCKED = "unlocked"
    FAILED = "failed"


class ReportCheckout:
    def __init__(
        self,
        client: AngelicClient,
        conversation_id: str,
        *,
        report_type: str = "angelic",
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_polls: int = MAX_POLLS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.conversation_id = conversation_id
        self.report_type = report_type
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._sleep = sleep

        self.state = CheckoutState.IDLE
        self.publishable_key: str | None = None
        self.client_secret: str | None = None
        self.report_id: str | None = None
        self.amount: int | None = None
        self.report: dict | None = None
        self.error_kind: ErrorKind | None = None

    def _fail(self, kind: ErrorKind) -> CheckoutState:
        self.error_kind = kind
        self.state = CheckoutState.FAILED
        logger.info("report_checkout_failed", kind=kind.value, report_id=self.report_id)
        return self.state

    async def start(self) -> CheckoutState:
        """Check configuration and create the payment intent."""
        try:
            config = await self.client.payment_config()
            if not config.get("enabled"):
                self.state = CheckoutState.NOT_CONFIGURED
                return self.state
            self.publishable_key = config.get("publishableKey")

            payment = await self.client.create_payment(self.conversation_id, self.report_type)
        except APIRequestError as exc:
            if exc.kind == ErrorKind.PAYMENT_NOT_CONFIGURED:
                self.state = CheckoutState.NOT_CONFIGURED
                return self.state
            return self._fail(exc.kind)

        self.client_secret = payment["clientSecret"]
        self.report_id = payment["reportId"]
        self.amount = payment.get("amount")
        self.state = CheckoutState.AWAITING_PAYMENT
        return self.state

    async def wait_for_payment(self) -> CheckoutState:
        """Poll the payment status until the report is marked paid."""
        if self.state != CheckoutState.AWAITING_PAYMENT:
            return self.state
        for attempt in range(self.max_polls):
            try:
                status = await self.client.payment_status(self.report_id)
            except APIRequestError as exc:
                return self._fail(exc.kind)
            if status.get("paymentStatus") == "paid":
                self.state = CheckoutState.PAID
                return self.state
            if attempt < self.max_polls - 1:
                await self._sleep(self.poll_interval)
        return self._fail(ErrorKind.PAYMENT_REQUIRED)

    async def unlock(self) -> CheckoutState:
        """Generate the paid report."""
        if self.state != CheckoutState.PAID:
            return self.state
        try:
            data = await self.client.generate_report(self.conversation_id, report_id=self.report_id)
        except APIRequestError as exc:
            return self._fail(exc.kind)
        self.report = data.get("report")
        self.report_id = data.get("reportId") or self.report_id
        self.state = CheckoutState.UNLOCKED
        return self.state

    async def run(self) -> CheckoutState:
        """start -> wait_for_payment -> unlock, stopping at the first non-advancing state."""
        if await self.start() != CheckoutState.AWAITING_PAYMENT:
            return self.state
        if await self.wait_for_payment() != CheckoutState.PAID:
            return self.state
        return await self.unlock()
