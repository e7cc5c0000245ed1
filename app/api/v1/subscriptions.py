from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_activity_log, get_current_user, get_resolver
from app.integrations.billing import StatusResult
from app.schemas.subscription import ActivityOut, CacheClearOut, SubscriptionStatusOut
from app.services.activity_log import ActivityLog
from app.services.error_response_policy import billing_error_response, present
from app.services.subscription_resolver import SubscriptionResolver

router = APIRouter()


def _respond(result: StatusResult, user_id: int):
    if not result.ok:
        return billing_error_response(result.error, user_id)
    return SubscriptionStatusOut(
        user_id=user_id,
        subscription_status=result.status,
        source=result.source.value,
    )


@router.get("/activity", response_model=ActivityOut)
async def recent_activity(
    limit: int = Query(default=50, ge=1, le=500),
    activity: ActivityLog = Depends(get_activity_log),
) -> ActivityOut:
    return ActivityOut(items=activity.recent(limit))


@router.get("/{user_id}", response_model=SubscriptionStatusOut)
async def get_subscription_status(
    user_id: int,
    resolver: SubscriptionResolver = Depends(get_resolver),
):
    result = await resolver.resolve(user_id)
    return _respond(result, user_id)


@router.post("/{user_id}/refresh", response_model=SubscriptionStatusOut)
async def refresh_subscription_status(
    user_id: int,
    resolver: SubscriptionResolver = Depends(get_resolver),
    activity: ActivityLog = Depends(get_activity_log),
    user: Dict[str, Any] = Depends(get_current_user),
):
    result = await resolver.force_refresh(user_id)
    activity.record(
        user.get("email"),
        "refresh_subscription",
        "user",
        user_id,
        {"ok": result.ok, "source": result.source.value if result.ok else None},
    )
    return _respond(result, user_id)


@router.delete("/{user_id}/cache", response_model=CacheClearOut)
async def clear_subscription_cache(
    user_id: int,
    refresh: bool = Query(default=False),
    resolver: SubscriptionResolver = Depends(get_resolver),
    activity: ActivityLog = Depends(get_activity_log),
    user: Dict[str, Any] = Depends(get_current_user),
) -> CacheClearOut:
    cleared = resolver.invalidate_cache(user_id)
    out = CacheClearOut(user_id=user_id, cleared=cleared)

    if refresh:
        result = await resolver.force_refresh(user_id)
        if result.ok:
            out.subscription_status = result.status
            out.source = result.source.value
        else:
            out.error = present(result.error).message

    activity.record(
        user.get("email"),
        "clear_subscription_cache",
        "user",
        user_id,
        {"had_entry": cleared, "refreshed": refresh},
    )
    return out
