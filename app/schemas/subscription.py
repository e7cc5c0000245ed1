from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class SubscriptionStatusOut(BaseModel):
    user_id: int
    subscription_status: str
    source: str


class CacheClearOut(BaseModel):
    user_id: int
    cleared: bool
    subscription_status: Optional[str] = None
    source: Optional[str] = None
    error: Optional[str] = None


class ActivityEntry(BaseModel):
    admin: str
    action: str
    resource_type: str
    resource_id: int | str
    details: Dict[str, Any]
    timestamp: str


class ActivityOut(BaseModel):
    items: List[ActivityEntry]
