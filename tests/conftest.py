import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ.setdefault('ADMIN_EMAIL', 'admin@example.com')
os.environ.setdefault('BILLING_SERVICE_BASE_URL', 'https://billing.test/api/v1')
os.environ.setdefault('BILLING_SERVICE_JWT_TOKEN', 'test-billing-token')

from app.services.status_cache import StatusCache  # noqa: E402
from tests.fakes import FakeClock  # noqa: E402


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return StatusCache(clock=clock)
