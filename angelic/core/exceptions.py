"""Domain exceptions.

Every error carries an ``ErrorKind`` assigned where it is raised. The API
layer turns the kind into a status code and a ``code`` field, and the client
package classifies failures from that field instead of parsing messages.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    NETWORK = "network"
    SERVER = "server"
    CLIENT_INPUT = "client_input"
    AI_UNAVAILABLE = "ai_unavailable"
    MALFORMED_AI_OUTPUT = "malformed_ai_output"
    INCOMPLETE_REPORT = "incomplete_report"
    PAYMENT_NOT_CONFIGURED = "payment_not_configured"
    PAYMENT_REQUIRED = "payment_required"


# HTTP status returned for each kind raised server side.
KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.CLIENT_INPUT: 400,
    ErrorKind.PAYMENT_REQUIRED: 402,
    ErrorKind.SERVER: 500,
    ErrorKind.MALFORMED_AI_OUTPUT: 502,
    ErrorKind.INCOMPLETE_REPORT: 502,
    ErrorKind.AI_UNAVAILABLE: 503,
    ErrorKind.PAYMENT_NOT_CONFIGURED: 503,
}


class AngelicError(Exception):
    """Base exception for the Angelic application."""

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def status_code(self) -> int:
        return KIND_STATUS.get(self.kind, 500)


class ReportGenerationError(AngelicError):
    """Raised when a report cannot be produced from the model output."""


class ReportFormatError(ReportGenerationError):
    """Model output was not a JSON object."""

    kind = ErrorKind.MALFORMED_AI_OUTPUT


class IncompleteReportError(ReportGenerationError):
    """Model output lacked ``idea`` or a numeric ``overallScore``."""

    kind = ErrorKind.INCOMPLETE_REPORT


class AIServiceUnavailableError(AngelicError):
    """The LLM call failed or returned nothing usable."""

    kind = ErrorKind.AI_UNAVAILABLE


class PaymentNotConfiguredError(AngelicError):
    kind = ErrorKind.PAYMENT_NOT_CONFIGURED


class PaymentRequiredError(AngelicError):
    kind = ErrorKind.PAYMENT_REQUIRED
