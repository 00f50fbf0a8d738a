import pytest
from django.conf import settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.accounts.services import GoogleIdentity
from apps.accounts.tokens import SessionToken


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a Google-linked test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        name='Test User',
        google_id='google-sub-1',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        name='Inactive User',
        google_id='google-sub-inactive',
        is_active=False,
    )


@pytest.fixture
def staff_user(db):
    """Staff account created before ever signing in with Google."""
    return User.objects.create_user(
        email='staff@example.com',
        password='StaffPass123!',
        is_staff=True,
    )


@pytest.fixture
def identity():
    """Verified identity for a brand new Google account."""
    return GoogleIdentity(
        google_id='google-sub-new',
        email='newuser@example.com',
        name='New User',
        picture='https://example.com/avatar.png',
        email_verified=True,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def session_client(api_client, user):
    """Return an API client authenticated with the session cookie."""
    api_client.cookies[settings.TIPJAR_SESSION_COOKIE] = str(SessionToken.for_user(user))
    return api_client
