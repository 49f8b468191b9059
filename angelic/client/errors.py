"""Client-side error type tagged with an ErrorKind at the point of failure."""

import httpx

from angelic.core.exceptions import ErrorKind


class APIRequestError(Exception):
    """A request to the Angelic API failed.

    Attributes:
        kind: What went wrong, used to pick the user-facing message
        status_code: HTTP status, or None when the request never got a response
        detail: Server-provided detail or the transport error text
    """

    def __init__(self, kind: ErrorKind, detail: str, status_code: int | None = None, code: str | None = None):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        self.code = code

    @classmethod
    def from_transport(cls, exc: httpx.TransportError) -> "APIRequestError":
        return cls(ErrorKind.NETWORK, str(exc) or type(exc).__name__)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIRequestError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        detail = body.get("detail") or body.get("message") or response.reason_phrase or "Request failed"
        if not isinstance(detail, str):
            # FastAPI validation errors arrive as a list
            detail = "Invalid request"
        code = body.get("code")
        return cls(classify(response.status_code, code), detail, status_code=response.status_code, code=code)


def classify(status_code: int, code: str | None = None) -> ErrorKind:
    """ErrorKind for an HTTP failure; the server's ``code`` wins when recognised."""
    if code:
        try:
            return ErrorKind(code)
        except ValueError:
            pass
    if status_code >= 500:
        return ErrorKind.SERVER
    if status_code == 402:
        return ErrorKind.PAYMENT_REQUIRED
    return ErrorKind.CLIENT_INPUT
