import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.jars.models import JarMembership, JarRole
from apps.jars.services import create_jar
from apps.offenses.models import CostType
from apps.offenses.services import create_offense_type, report_offense


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
    return User.objects.create_user(
        email='admin@example.com',
        name='Jar Admin',
        google_id='google-sub-admin',
    )


@pytest.fixture
def member_user(db):
    return User.objects.create_user(
        email='member@example.com',
        name='Jar Member',
        google_id='google-sub-member',
    )


@pytest.fixture
def second_member(db):
    return User.objects.create_user(
        email='second@example.com',
        name='Second Member',
        google_id='google-sub-second',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user not in the jar."""
    return User.objects.create_user(
        email='other@example.com',
        name='Other User',
        google_id='google-sub-other',
    )


@pytest.fixture
def jar(jar_admin, member_user):
    """Jar administered by jar_admin with member_user as a regular member."""
    jar = create_jar(name='Office', invite_code='ABCD1234', creator=jar_admin)
    JarMembership.objects.create(jar=jar, user=member_user, role=JarRole.MEMBER)
    return jar


@pytest.fixture
def default_offense_type(jar):
    """General Offense seeded on jar creation ($5.00)."""
    return jar.offense_types.get()


@pytest.fixture
def beer_offense_type(jar):
    """Offense type costing beers instead of money."""
    return create_offense_type(
        jar_id=jar.id,
        name='Broke the build',
        cost_type=CostType.ITEM,
        cost_amount_cents=200,
        cost_unit='beers',
    )


@pytest.fixture
def free_offense_type(jar):
    """Offense type without a default cost or unit."""
    return create_offense_type(
        jar_id=jar.id,
        name='Push-ups',
        cost_type=CostType.ACTION,
        cost_action='20 push-ups',
    )


@pytest.fixture
def offense(jar, jar_admin, member_user, default_offense_type):
    """Pending offense against member_user."""
    return report_offense(
        jar_id=jar.id,
        offense_type_id=default_offense_type.id,
        reporter=jar_admin,
        offender_id=member_user.id,
        notes='Late to standup',
    )


@pytest.fixture
def admin_client(jar_admin):
    return make_client(jar_admin)


@pytest.fixture
def member_client(member_user):
    return make_client(member_user)


@pytest.fixture
def other_client(other_user):
    return make_client(other_user)
