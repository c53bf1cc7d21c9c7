"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from django.core.cache import caches
from tenant.managers import set_current_tenant


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_tenant_context():
    """
    Reset tenant context after each test.

    Tenant context leaking between tests would let tenant-scoped queries
    pass when they should come back empty.
    """
    yield
    set_current_tenant(None)


@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear every cache alias after each test.

    Covers the default cache (rate limit counters) and the prep estimate
    cache, so tests don't interfere with each other through cached data.
    """
    yield
    for alias in caches:
        caches[alias].clear()


@pytest.fixture(autouse=True)
def eager_celery(settings):
    """Run Celery tasks inline so post-commit notifications are observable."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    from core_backend.celery import app
    app.conf.task_always_eager = True
    yield
    app.conf.task_always_eager = False


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def staff_client_a(staff_user_a):
    """API client logged in as a POS staff member of tenant A."""
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=staff_user_a)
    return client


@pytest.fixture
def staff_client_b(staff_user_b):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=staff_user_b)
    return client


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *  # noqa: E402,F401,F403
