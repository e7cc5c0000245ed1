"""Custom exception types for domain and API layers."""
from __future__ import annotations

from enum import Enum


class AppError(Exception):
    """Base app exception."""


class BillingErrorKind(str, Enum):
    """Closed set of billing failure categories."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INTERMITTENT_FAILURE = "intermittent_failure"
    SERVICE_UNAVAILABLE = "service_unavailable"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"
    NETWORK_ERROR = "network_error"
    CONFIGURATION_ERROR = "configuration_error"
    UNEXPECTED = "unexpected_error"


class BillingError(AppError):
    """Classified failure of a single billing provider call."""

    def __init__(self, kind: BillingErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"BillingError({self.kind.value!r}, {self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BillingError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))
