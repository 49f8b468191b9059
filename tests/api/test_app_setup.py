"""Tests for startup validation, error responses and correlation ids."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from angelic.core.exceptions import (
    KIND_STATUS,
    AIServiceUnavailableError,
    ErrorKind,
    IncompleteReportError,
    PaymentNotConfiguredError,
    ReportFormatError,
)
from angelic.main import register_exception_handlers, validate_settings
from angelic.middleware.correlation import setup_correlation_middleware

pytestmark = pytest.mark.unit


def test_missing_jwt_secret_fails_outside_debug(settings_env):
    settings_env(DEBUG="false", JWT_SECRET="")

    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        validate_settings()


def test_debug_mode_skips_validation(settings_env):
    settings_env(DEBUG="true", JWT_SECRET="")

    validate_settings()


@pytest.mark.parametrize(
    "error,kind,status",
    [
        (ReportFormatError("x"), ErrorKind.MALFORMED_AI_OUTPUT, 502),
        (IncompleteReportError("x"), ErrorKind.INCOMPLETE_REPORT, 502),
        (AIServiceUnavailableError("x"), ErrorKind.AI_UNAVAILABLE, 503),
        (PaymentNotConfiguredError("x"), ErrorKind.PAYMENT_NOT_CONFIGURED, 503),
    ],
)
def test_error_kinds_map_to_status(error, kind, status):
    assert error.kind == kind
    assert error.status_code == status == KIND_STATUS[kind]


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    setup_correlation_middleware(app)
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise exc

    return app


def test_domain_error_response_carries_code_and_debug_id():
    client = TestClient(_app_raising(IncompleteReportError("Report data is incomplete, please retry")))

    response = client.get("/boom")

    assert response.status_code == 502
    body = response.json()
    assert body["code"] == "incomplete_report"
    assert body["detail"] == "Report data is incomplete, please retry"
    assert body["debug_id"]


def test_unhandled_error_is_sanitized():
    client = TestClient(_app_raising(ValueError("secret internals")), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert "secret internals" not in response.text


def test_correlation_id_is_echoed():
    client = TestClient(_app_raising(IncompleteReportError("x")))

    response = client.get("/boom", headers={"X-Request-ID": "3f2b8c1e-1a2b-4c3d-8e9f-0a1b2c3d4e5f"})

    assert response.headers["X-Request-ID"] == "3f2b8c1e-1a2b-4c3d-8e9f-0a1b2c3d4e5f"


def test_log_events_mask_email_addresses():
    from angelic.core.logging import mask_emails

    event = mask_emails(None, "info", {"event": "email_sent", "recipient": "founder@example.com", "email": "x"})

    assert event["recipient"] == "fo***@example.com"
    assert event["email"] == "***"
