"""External integration adapters."""

from .billing import RemoteStatusClient, StatusResult, StatusSource

__all__ = [
    "RemoteStatusClient",
    "StatusResult",
    "StatusSource",
]
