"""Shared API dependencies."""
from fastapi import Request

from app.core.security import get_current_user
from app.services.activity_log import ActivityLog
from app.services.subscription_resolver import SubscriptionResolver


def get_resolver(request: Request) -> SubscriptionResolver:
    return request.app.state.subscription_resolver


def get_activity_log(request: Request) -> ActivityLog:
    return request.app.state.activity_log


__all__ = ["get_current_user", "get_resolver", "get_activity_log"]
