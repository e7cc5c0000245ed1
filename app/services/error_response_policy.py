"""Maps billing failures to what external callers are allowed to see."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import status
from fastapi.responses import JSONResponse

from app.core.exceptions import BillingError, BillingErrorKind

logger = logging.getLogger(__name__)

NOT_FOUND = "not-found"
UNAVAILABLE = "unavailable"

NOT_FOUND_MESSAGE = "User subscription information not found"
AUTH_FAILED_MESSAGE = "Billing service authentication failed"
SERVICE_UNAVAILABLE_MESSAGE = "Service temporarily unavailable, internal team notified"

_STATUS_CODES = {
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@dataclass(frozen=True)
class ErrorPresentation:
    status_class: str
    message: str

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.status_class]


def present(error: BillingError) -> ErrorPresentation:
    if error.kind is BillingErrorKind.NOT_FOUND:
        return ErrorPresentation(NOT_FOUND, NOT_FOUND_MESSAGE)
    if error.kind is BillingErrorKind.UNAUTHORIZED:
        return ErrorPresentation(UNAVAILABLE, AUTH_FAILED_MESSAGE)
    return ErrorPresentation(UNAVAILABLE, SERVICE_UNAVAILABLE_MESSAGE)


def billing_error_response(error: BillingError, user_id: int) -> JSONResponse:
    """Log the full failure, then answer with the redacted message only."""
    logger.error(
        "Failed to get subscription status for user %s: [%s] %s",
        user_id,
        error.kind.value,
        error.message,
    )
    outcome = present(error)
    return JSONResponse(status_code=outcome.status_code, content={"error": outcome.message})
