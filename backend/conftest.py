"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from django.core import mail


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_outbox():
    """
    Start every test with an empty locmem outbox so email assertions only
    see messages sent by the test itself.
    """
    mail.outbox = []
    yield


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/dishes/menu/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def authenticated_client():
    """
    Factory returning an API client logged in as the given user.

    Usage:
        def test_protected_endpoint(authenticated_client, customer):
            client = authenticated_client(customer)
            response = client.get('/api/orders/')
            assert response.status_code == 200
    """
    from django.conf import settings
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    def _make(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        # CookieJWTAuthentication reads the token from cookies, not the header
        client.cookies[settings.SIMPLE_JWT.get("AUTH_COOKIE", "access_token")] = str(refresh.access_token)
        return client

    return _make


@pytest.fixture
def customer_client(authenticated_client, customer):
    return authenticated_client(customer)


@pytest.fixture
def admin_client(authenticated_client, admin_user):
    return authenticated_client(admin_user)


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *  # noqa
