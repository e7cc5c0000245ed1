"""
Admin Activity Log
Keeps the most recent administrative actions in memory for the console.
"""
from __future__ import annotations

import json
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500


class ActivityLog:
    """Bounded audit trail of admin actions, oldest entries dropped first."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def record(
        self,
        admin: str | None,
        action: str,
        resource_type: str,
        resource_id: int | str,
        details: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        entry = {
            "admin": admin or "Unknown Admin",
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "details": details or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        with self._lock:
            self._entries.append(entry)
        logger.info("Admin Activity: %s", json.dumps(entry, default=str))
        return entry

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest first."""
        with self._lock:
            entries = list(self._entries)
        entries.reverse()
        return entries[:limit]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
