"""Compare cached and fresh subscription lookups against the live billing service.

Usage: python scripts/check_billing_status.py 5 101 250
"""
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import BillingConfig, settings  # noqa: E402
from app.integrations.billing import RemoteStatusClient, StatusResult  # noqa: E402
from app.services.error_response_policy import present  # noqa: E402
from app.services.status_cache import StatusCache  # noqa: E402
from app.services.subscription_resolver import SubscriptionResolver  # noqa: E402


def describe(result: StatusResult) -> str:
    if result.ok:
        return f"{result.status} (source: {result.source.value})"
    shown = present(result.error)
    return (
        f"ERROR {result.error.kind.value}: {result.error.message} "
        f"-> {shown.status_code} {shown.message!r}"
    )


async def check(user_ids: list[int]) -> None:
    config = BillingConfig.from_settings(settings)
    print("=== BILLING SERVICE CHECK ===")
    print(f"Base URL: {config.base_url}")
    print(f"Credential configured: {config.has_credentials}")
    print(f"Timeouts: open {config.open_timeout}s / read {config.read_timeout}s")
    print(f"Cache TTL: {config.cache_ttl_seconds / 3600:g}h")
    print("")

    client = RemoteStatusClient(config)
    resolver = SubscriptionResolver(client, StatusCache(), config.cache_ttl_seconds)
    try:
        for user_id in user_ids:
            print(f"User {user_id}:")
            print(f"  resolve:        {describe(await resolver.resolve(user_id))}")
            print(f"  resolve again:  {describe(await resolver.resolve(user_id))}")
            print(f"  force refresh:  {describe(await resolver.force_refresh(user_id))}")
    finally:
        await client.aclose()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(check([int(arg) for arg in sys.argv[1:]]))
