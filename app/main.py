"""
Game Tracker Billing - FastAPI Application
Subscription status lookups for the API and admin console
"""
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from datetime import datetime, timezone
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.config import BillingConfig, settings
from app.core.security import get_current_user
from app.integrations.billing import RemoteStatusClient
from app.services.activity_log import ActivityLog
from app.services.status_cache import StatusCache
from app.services.subscription_resolver import SubscriptionResolver

from app.api.routes import health
from app.api.v1 import subscriptions

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    logger.info("Starting %s...", settings.app_name)

    billing_config = BillingConfig.from_settings(settings)
    if not billing_config.has_credentials:
        logger.error(
            "BILLING_SERVICE_JWT_TOKEN is not configured; subscription lookups will fail"
        )

    client = RemoteStatusClient(billing_config)
    cache = StatusCache(max_entries=billing_config.cache_max_entries)
    app.state.subscription_resolver = SubscriptionResolver(
        client, cache, ttl_seconds=billing_config.cache_ttl_seconds
    )
    app.state.activity_log = ActivityLog()

    logger.info("Billing service at %s", billing_config.base_url)
    logger.info("API running on %s environment", settings.app_env)
    yield
    # Shutdown
    await client.aclose()
    logger.info("Shutting down %s...", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Subscription status API for Game Tracker",
    version="1.0.0",
    lifespan=lifespan,
)

# Respect forwarded proto/host from the load balancer.
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(health.router, prefix=settings.api_v1_prefix, tags=["Health"])
app.include_router(
    subscriptions.router,
    prefix=f"{settings.api_v1_prefix}/subscriptions",
    tags=["Subscriptions"],
    dependencies=[Depends(get_current_user)],
)
