"""
Health API Routes
"""
from fastapi import APIRouter, Depends

from app.api.dependencies import get_resolver
from app.config import settings
from app.services.subscription_resolver import SubscriptionResolver

router = APIRouter()


@router.get("/health")
async def health_check(resolver: SubscriptionResolver = Depends(get_resolver)) -> dict:
    """Service status and billing client readiness"""
    billing_configured = resolver.client.config.has_credentials
    return {
        "status": "healthy" if billing_configured else "degraded",
        "environment": settings.app_env,
        "billing": {
            "configured": billing_configured,
            "base_url": resolver.client.config.base_url,
            "cached_entries": len(resolver.cache),
        },
    }
