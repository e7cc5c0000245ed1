"""Billing provider client: fetches and classifies subscription status."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from app.config import BillingConfig
from app.core.exceptions import BillingError, BillingErrorKind

logger = logging.getLogger(__name__)

# The provider answers 404 for low user ids when it is flaking, not when the
# user is really absent. Only ids above this are treated as genuinely missing.
NOT_FOUND_USER_ID_THRESHOLD = 100


class StatusSource(str, Enum):
    REMOTE = "remote"
    CACHE = "cache"
    STALE = "stale"


@dataclass(frozen=True)
class StatusResult:
    """Either a subscription status or the BillingError explaining its absence."""

    status: str | None = None
    error: BillingError | None = None
    source: StatusSource = StatusSource.REMOTE

    @classmethod
    def success(cls, status: str, source: StatusSource = StatusSource.REMOTE) -> "StatusResult":
        return cls(status=status, source=source)

    @classmethod
    def failure(cls, error: BillingError) -> "StatusResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        return self.status  # type: ignore[return-value]


def _fail(kind: BillingErrorKind, message: str) -> StatusResult:
    return StatusResult.failure(BillingError(kind, message))


class RemoteStatusClient:
    """Single-shot GET against ``{base_url}/users/{id}/billing``.

    Never retries and never caches. Every non-success outcome is returned as
    exactly one classified BillingError.
    """

    def __init__(self, config: BillingConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self._timeout())

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.config.open_timeout,
            read=self.config.read_timeout,
            write=self.config.read_timeout,
            pool=self.config.open_timeout,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.jwt_token}",
            "Content-Type": "application/json",
        }

    def url_for(self, user_id: int) -> str:
        return f"{self.config.base_url}/users/{user_id}/billing"

    async def fetch(self, user_id: int) -> StatusResult:
        if not self.config.has_credentials:
            return _fail(
                BillingErrorKind.CONFIGURATION_ERROR,
                "Missing required environment variable: BILLING_SERVICE_JWT_TOKEN. "
                "Check your .env file or credential store.",
            )

        logger.info("Calling billing service for user %s", user_id)
        try:
            response = await self._http.get(
                self.url_for(user_id),
                headers=self._headers(),
                timeout=self._timeout(),
            )
        except httpx.TimeoutException:
            return _fail(BillingErrorKind.TIMEOUT, "Billing service timeout")
        except httpx.HTTPError as exc:
            return _fail(
                BillingErrorKind.NETWORK_ERROR,
                f"Network error connecting to billing service: {exc}",
            )

        logger.info(
            "Billing service call completed for user %s - status %s",
            user_id,
            response.status_code,
        )
        return self.classify(response, user_id)

    def classify(self, response: httpx.Response, user_id: int) -> StatusResult:
        code = response.status_code
        logger.debug("Billing response for user %s: %s - %s", user_id, code, response.text)

        if code == 200:
            return self._parse_status(response)
        if code == 401:
            return _fail(BillingErrorKind.UNAUTHORIZED, "Unauthorized access to billing service")
        if code == 404:
            if user_id > NOT_FOUND_USER_ID_THRESHOLD:
                return _fail(BillingErrorKind.NOT_FOUND, "User not found in billing system")
            return _fail(
                BillingErrorKind.INTERMITTENT_FAILURE,
                "Intermittent billing service failure",
            )
        if code == 503:
            return _fail(
                BillingErrorKind.SERVICE_UNAVAILABLE,
                "Billing service temporarily unavailable",
            )
        if code in (500, 502, 504):
            return _fail(BillingErrorKind.SERVICE_UNAVAILABLE, "Billing service error")
        return _fail(
            BillingErrorKind.UNEXPECTED,
            f"Unexpected billing service response: {code}",
        )

    @staticmethod
    def _parse_status(response: httpx.Response) -> StatusResult:
        try:
            body: Any = response.json()
        except ValueError:
            return _fail(BillingErrorKind.PARSE_ERROR, "Invalid JSON response from billing service")

        status = body.get("subscription_status") if isinstance(body, dict) else None
        if not isinstance(status, str):
            return _fail(
                BillingErrorKind.PARSE_ERROR,
                "Billing service response is missing subscription_status",
            )
        return StatusResult.success(status)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
