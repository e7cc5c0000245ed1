from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_resolver
from app.config import settings
from app.core.exceptions import BillingErrorKind
from app.main import app
from app.services.status_cache import StatusCache
from app.services.subscription_resolver import SubscriptionResolver
from tests.fakes import DAY, FakeStatusClient, admin_token, failed, make_config, ok

PREFIX = settings.api_v1_prefix


@pytest.fixture
def fake_client():
    return FakeStatusClient(ok("active"))


@pytest.fixture
def resolver(fake_client):
    return SubscriptionResolver(fake_client, StatusCache(), ttl_seconds=DAY)


@pytest.fixture
def client(resolver):
    app.dependency_overrides[get_resolver] = lambda: resolver
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = admin_token()
    return {"Authorization": f"Bearer {token}"}


def test_requires_token(client):
    response = client.get(f"{PREFIX}/subscriptions/1")
    assert response.status_code == 401


def test_rejects_token_for_other_subject(client):
    token = admin_token("someone@example.com")
    response = client.get(
        f"{PREFIX}/subscriptions/1", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


@pytest.mark.parametrize("token", [admin_token(expires_in=-60), admin_token(expires_in=None), "not-a-jwt"])
def test_rejects_expired_or_malformed_token(client, token):
    response = client.get(
        f"{PREFIX}/subscriptions/1", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_resolve_returns_status_then_cache(client, auth_headers, fake_client):
    first = client.get(f"{PREFIX}/subscriptions/1", headers=auth_headers)
    second = client.get(f"{PREFIX}/subscriptions/1", headers=auth_headers)

    assert first.status_code == 200
    assert first.json() == {"user_id": 1, "subscription_status": "active", "source": "remote"}
    assert second.json()["source"] == "cache"
    assert fake_client.calls == [1]


def test_not_found_maps_to_404(client, auth_headers, fake_client):
    fake_client.will_return(failed(BillingErrorKind.NOT_FOUND, "User not found in billing system"))

    response = client.get(f"{PREFIX}/subscriptions/200", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "User subscription information not found"}


def test_provider_failure_maps_to_generic_503(client, auth_headers, fake_client):
    fake_client.will_return(failed(BillingErrorKind.TIMEOUT, "Billing service timeout"))

    response = client.get(f"{PREFIX}/subscriptions/5", headers=auth_headers)

    assert response.status_code == 503
    assert response.json() == {"error": "Service temporarily unavailable, internal team notified"}


def test_refresh_bypasses_cache_and_logs_activity(client, auth_headers, fake_client, resolver):
    resolver.cache.write(3, "expired", ttl=3600)

    response = client.post(f"{PREFIX}/subscriptions/3/refresh", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["subscription_status"] == "active"
    assert fake_client.calls == [3]

    activity = client.get(f"{PREFIX}/subscriptions/activity", headers=auth_headers).json()
    assert activity["items"][0]["action"] == "refresh_subscription"
    assert activity["items"][0]["resource_id"] == 3
    assert activity["items"][0]["admin"] == settings.admin_email


def test_clear_cache_forces_next_lookup_remote(client, auth_headers, fake_client, resolver):
    client.get(f"{PREFIX}/subscriptions/1", headers=auth_headers)

    cleared = client.delete(f"{PREFIX}/subscriptions/1/cache", headers=auth_headers)
    assert cleared.json() == {
        "user_id": 1,
        "cleared": True,
        "subscription_status": None,
        "source": None,
        "error": None,
    }
    assert resolver.cache.read_stale(1) is None

    client.get(f"{PREFIX}/subscriptions/1", headers=auth_headers)
    assert fake_client.calls == [1, 1]


def test_clear_cache_with_refresh_reports_redacted_error(client, auth_headers, fake_client):
    fake_client.will_return(failed(BillingErrorKind.INTERMITTENT_FAILURE))

    response = client.delete(
        f"{PREFIX}/subscriptions/5/cache", params={"refresh": "true"}, headers=auth_headers
    )

    body = response.json()
    assert response.status_code == 200
    assert body["cleared"] is False
    assert body["subscription_status"] is None
    assert body["error"] == "Service temporarily unavailable, internal team notified"


def test_health_reports_shared_resolver_state(client, resolver):
    resolver.cache.write(4, "active", ttl=3600)

    response = client.get(f"{PREFIX}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["billing"]["configured"] is True
    assert body["billing"]["base_url"] == "https://billing.test/api/v1"
    assert body["billing"]["cached_entries"] == 1


def test_health_degraded_without_billing_credential(client, fake_client):
    fake_client.config = make_config(jwt_token=None)

    body = client.get(f"{PREFIX}/health").json()

    assert body["status"] == "degraded"
    assert body["billing"]["configured"] is False
