import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.jars.models import JarMembership, JarRole
from apps.jars.services import create_jar


def make_client(user):
    """Return an API client authenticated as user via JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def jar_admin(db):
    """Create and return the user who creates the jar."""
    return User.objects.create_user(
        email='admin@example.com',
        name='Jar Admin',
        google_id='google-sub-admin',
    )


@pytest.fixture
def member_user(db):
    """Create and return a regular jar member."""
    return User.objects.create_user(
        email='member@example.com',
        name='Jar Member',
        google_id='google-sub-member',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user not in any jar."""
    return User.objects.create_user(
        email='other@example.com',
        name='Other User',
        google_id='google-sub-other',
    )


@pytest.fixture
def jar(jar_admin):
    """Create a jar with a known invite code; jar_admin is its admin."""
    return create_jar(
        name='Office',
        description='Office swear jar',
        invite_code='ABCD1234',
        creator=jar_admin,
    )


@pytest.fixture
def jar_with_member(jar, member_user):
    """Jar with one regular member besides the admin."""
    JarMembership.objects.create(jar=jar, user=member_user, role=JarRole.MEMBER)
    return jar


@pytest.fixture
def default_offense_type(jar):
    """The offense type seeded on jar creation."""
    return jar.offense_types.get()


@pytest.fixture
def admin_client(jar_admin):
    return make_client(jar_admin)


@pytest.fixture
def member_client(member_user):
    return make_client(member_user)


@pytest.fixture
def other_client(other_user):
    return make_client(other_user)
