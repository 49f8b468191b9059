"""Async HTTP client for the Angelic API.

Every failure surfaces as ``APIRequestError`` tagged with an ``ErrorKind``:
transport problems are NETWORK, HTTP errors are classified from the status
code and the server's ``code`` field.
"""

from typing import Any

import httpx
import structlog

from angelic.client.errors import APIRequestError
from angelic.client.session import SessionContext

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 120.0


class AngelicClient:
    """Thin wrapper over ``httpx.AsyncClient`` bound to one SessionContext."""

    def __init__(
        self,
        base_url: str,
        context: SessionContext,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.context = context
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api",
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "AngelicClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        if self.context.auth_token:
            return {"Authorization": f"Bearer {self.context.auth_token}"}
        return {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TransportError as exc:
            logger.warning("api_request_transport_failed", method=method, path=path, error=str(exc))
            raise APIRequestError.from_transport(exc) from exc

        if response.is_error:
            error = APIRequestError.from_response(response)
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                kind=error.kind.value,
            )
            raise error
        return response.json()

    # ── Chat and conversations ──────────────────────────────────────

    async def chat(
        self,
        message: str,
        *,
        conversation_id: str | None = None,
        history: list[dict] | None = None,
    ) -> dict:
        return await self._request(
            "POST",
            "/chat",
            json={
                "message": message,
                "conversationHistory": history or [],
                "conversationId": conversation_id,
                "sessionId": self.context.session_id,
                "uiLanguage": self.context.language,
                "aiPersona": self.context.persona,
            },
        )

    async def conversation_messages(self, conversation_id: str) -> dict:
        return await self._request(
            "GET",
            f"/conversations/{conversation_id}/messages",
            params={"sessionId": self.context.session_id},
        )

    async def conversations(self) -> list[dict]:
        return await self._request("GET", "/conversations")

    async def associate_conversation(self, conversation_id: str | None = None) -> dict:
        return await self._request(
            "POST",
            "/conversations/associate",
            json={"conversationId": conversation_id, "sessionId": self.context.session_id},
        )

    # ── Reports ─────────────────────────────────────────────────────

    async def generate_report(self, conversation_id: str | None = None, report_id: str | None = None) -> dict:
        payload = {"conversationId": conversation_id, "sessionId": self.context.session_id}
        if report_id:
            payload["reportId"] = report_id
        return await self._request("POST", "/generate-angelic-report", json=payload)

    async def request_report(self, email: str, conversation_id: str | None = None) -> dict:
        return await self._request(
            "POST",
            "/request-report",
            json={"email": email, "conversationId": conversation_id, "sessionId": self.context.session_id},
        )

    async def get_report(self, report_id: str, *, token: str | None = None, admin: bool = False) -> dict:
        params: dict[str, Any] = {}
        if token:
            params["token"] = token
        if admin:
            params["admin"] = "true"
        return await self._request("GET", f"/reports/{report_id}", params=params)

    async def my_reports(self) -> list[dict]:
        return await self._request("GET", "/my-reports")

    # ── Payments ────────────────────────────────────────────────────

    async def payment_config(self) -> dict:
        return await self._request("GET", "/payments/config")

    async def create_payment(self, conversation_id: str, report_type: str = "angelic") -> dict:
        return await self._request(
            "POST",
            "/create-report-payment",
            json={"conversationId": conversation_id, "reportType": report_type},
        )

    async def payment_status(self, report_id: str) -> dict:
        return await self._request("GET", f"/report-payment-status/{report_id}")

    # ── Leaderboard and feedback ────────────────────────────────────

    async def top_ideas(self, limit: int = 20) -> dict:
        return await self._request("GET", "/top", params={"limit": limit})

    async def send_feedback(
        self,
        content: str,
        *,
        feedback_type: str = "general",
        subject: str | None = None,
        rating: int | None = None,
        email: str | None = None,
        report_id: str | None = None,
        conversation_id: str | None = None,
    ) -> dict:
        return await self._request(
            "POST",
            "/feedback",
            json={
                "feedbackType": feedback_type,
                "subject": subject,
                "content": content,
                "rating": rating,
                "email": email,
                "reportId": report_id,
                "conversationId": conversation_id,
            },
        )
