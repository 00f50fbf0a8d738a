import pytest
from uuid import uuid4
from unittest.mock import patch
from django.conf import settings
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from apps.jars.models import TipJar, JarMembership, JarRole
from apps.jars.services import create_jar
from apps.offenses.models import Offense, OffenseStatus, OffenseType
from apps.offenses.services import create_offense_type, report_offense


# =============================================================================
# Jar CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestJarList:
    """Tests for GET /api/jars/"""

    def test_list_returns_user_jars(self, admin_client, jar):
        url = reverse('jars:jar-list')
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['name'] == 'Office'
        assert response.data[0]['user_role'] == JarRole.ADMIN
        assert response.data[0]['member_count'] == 1

    def test_list_member_count_includes_everyone(self, member_client, jar_with_member):
        url = reverse('jars:jar-list')
        response = member_client.get(url)

        assert response.data[0]['member_count'] == 2
        assert response.data[0]['user_role'] == JarRole.MEMBER

    def test_list_excludes_non_member_jars(self, other_client, jar):
        url = reverse('jars:jar-list')
        response = other_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_list_unauthenticated(self, api_client):
        url = reverse('jars:jar-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestJarCreate:
    """Tests for POST /api/jars/"""

    def test_create_jar(self, admin_client, jar_admin):
        url = reverse('jars:jar-list')
        response = admin_client.post(url, {'name': 'Office', 'invite_code': 'ABCD1234'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True

        jar = TipJar.objects.get(id=response.data['jar_id'])
        assert response.data['redirect'] == f'/jars/{jar.id}'
        assert jar.invite_code == 'ABCD1234'
        assert jar.is_admin(jar_admin)
        assert jar.offense_types.count() == 1

    def test_create_jar_generates_invite_code(self, admin_client):
        url = reverse('jars:jar-list')
        response = admin_client.post(url, {'name': 'Generated', 'invite_code': ''}, format='json')

        assert response.status_code == status.HTTP_200_OK
        jar = TipJar.objects.get(id=response.data['jar_id'])
        assert len(jar.invite_code) == 8

    def test_create_jar_duplicate_invite_code(self, other_client, jar):
        url = reverse('jars:jar-list')
        response = other_client.post(url, {'name': 'Copycat', 'invite_code': 'ABCD1234'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invite code already exists. Please generate a new one.'
        assert not TipJar.objects.filter(name='Copycat').exists()

    def test_create_jar_invalid_invite_code(self, admin_client):
        url = reverse('jars:jar-list')
        response = admin_client.post(url, {'name': 'Bad', 'invite_code': 'abc!'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'invite_code' in response.data

    def test_create_jar_requires_name(self, admin_client):
        url = reverse('jars:jar-list')
        response = admin_client.post(url, {'description': 'No name'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data

    def test_create_jar_unauthenticated(self, api_client):
        url = reverse('jars:jar-list')
        response = api_client.post(url, {'name': 'Nope'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestJarRetrieve:
    """Tests for GET /api/jars/{id}/"""

    def test_retrieve_as_member(self, member_client, jar_with_member, jar_admin, member_user):
        offense_type = jar_with_member.offense_types.get()
        report_offense(
            jar_id=jar_with_member.id,
            offense_type_id=offense_type.id,
            reporter=jar_admin,
            offender_id=member_user.id,
        )

        url = reverse('jars:jar-detail', args=[jar_with_member.id])
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['jar']['name'] == 'Office'
        assert response.data['is_admin'] is False
        assert len(response.data['members']) == 2
        assert len(response.data['activity']) == 1

        balances = {b['user']['id']: b for b in response.data['balances']}
        assert balances[str(member_user.id)]['total_owed_cents'] == 500
        assert balances[str(member_user.id)]['pending_count'] == 1
        assert balances[str(jar_admin.id)]['total_owed_cents'] == 0

    def test_retrieve_as_admin(self, admin_client, jar):
        url = reverse('jars:jar-detail', args=[jar.id])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_admin'] is True

    def test_retrieve_as_non_member(self, other_client, jar):
        url = reverse('jars:jar-detail', args=[jar.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'You are not a member of this jar'

    def test_retrieve_unknown_jar(self, admin_client, jar):
        url = reverse('jars:jar-detail', args=[uuid4()])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Jar not found'

    def test_retrieve_degrades_when_activity_fails(self, admin_client, jar):
        url = reverse('jars:jar-detail', args=[jar.id])
        with patch('apps.jars.views.get_jar_activity', side_effect=DatabaseError('boom')):
            response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['activity'] == []
        assert len(response.data['balances']) == 1

    def test_retrieve_degrades_when_balances_fail(self, admin_client, jar):
        url = reverse('jars:jar-detail', args=[jar.id])
        with patch('apps.jars.views.get_member_balances', side_effect=DatabaseError('boom')):
            response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['balances'] == []
        assert response.data['jar']['name'] == 'Office'


# =============================================================================
# Invite Code Tests
# =============================================================================

@pytest.mark.django_db
class TestJarLookup:
    """Tests for GET /api/jars/lookup/"""

    def test_lookup_by_invite_code(self, other_client, jar):
        url = reverse('jars:jar-lookup')
        response = other_client.get(url, {'invite_code': 'ABCD1234'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['jar']['name'] == 'Office'
        assert response.data['jar']['is_member'] is False
        assert 'invite_code' not in response.data['jar']
        assert response.data['jar']['member_count'] == 1

    def test_lookup_as_member(self, admin_client, jar):
        url = reverse('jars:jar-lookup')
        response = admin_client.get(url, {'invite_code': 'ABCD1234'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['jar']['is_member'] is True

    def test_lookup_unknown_code(self, other_client, jar):
        url = reverse('jars:jar-lookup')
        response = other_client.get(url, {'invite_code': 'ZZZZ9999'})

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestJarJoin:
    """Tests for POST /api/jars/join/"""

    def test_join_jar(self, member_client, jar, member_user):
        url = reverse('jars:jar-join')
        response = member_client.post(url, {'invite_code': 'ABCD1234'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['jar_id'] == jar.id
        assert response.data['redirect'] == f'/jars/{jar.id}'
        assert JarMembership.objects.get(jar=jar, user=member_user).role == JarRole.MEMBER

    def test_join_twice(self, member_client, jar):
        url = reverse('jars:jar-join')
        member_client.post(url, {'invite_code': 'ABCD1234'}, format='json')
        response = member_client.post(url, {'invite_code': 'ABCD1234'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'You are already a member of this jar'

    def test_join_unknown_code(self, member_client, jar):
        url = reverse('jars:jar-join')
        response = member_client.post(url, {'invite_code': 'ZZZZ9999'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_join_malformed_code(self, member_client, jar):
        url = reverse('jars:jar-join')
        response = member_client.post(url, {'invite_code': 'ABC'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'invite_code' in response.data


# =============================================================================
# Jar Sub-resource Tests
# =============================================================================

@pytest.mark.django_db
class TestJarMembersAndBalances:
    """Tests for members, balances and activity actions."""

    def test_members(self, member_client, jar_with_member, jar_admin, member_user):
        url = reverse('jars:jar-members', args=[jar_with_member.id])
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [m['user']['id'] for m in response.data] == [str(jar_admin.id), str(member_user.id)]
        assert response.data[0]['role'] == JarRole.ADMIN

    def test_members_as_non_member(self, other_client, jar):
        url = reverse('jars:jar-members', args=[jar.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_balances(self, admin_client, jar_with_member, jar_admin, member_user):
        offense_type = jar_with_member.offense_types.get()
        report_offense(
            jar_id=jar_with_member.id,
            offense_type_id=offense_type.id,
            reporter=jar_admin,
            offender_id=member_user.id,
            cost_override_cents=250,
        )

        url = reverse('jars:jar-balances', args=[jar_with_member.id])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        member_row = response.data[1]
        assert member_row['user']['id'] == str(member_user.id)
        assert member_row['total_owed_cents'] == 250
        assert member_row['total_owed'] == '2.50'
        assert member_row['total_owed_display'] == '$2.50'

    def test_balances_add_up_mixed_units(self, admin_client, jar_with_member, jar_admin, member_user):
        beers = create_offense_type(
            jar_id=jar_with_member.id,
            name='Late to standup',
            cost_type='item',
            cost_amount_cents=200,
            cost_unit='beers',
        )
        for offense_type_id, override in [(jar_with_member.offense_types.get(name='General Offense').id, 250),
                                          (beers.id, None)]:
            report_offense(
                jar_id=jar_with_member.id,
                offense_type_id=offense_type_id,
                reporter=jar_admin,
                offender_id=member_user.id,
                cost_override_cents=override,
            )

        url = reverse('jars:jar-balances', args=[jar_with_member.id])
        response = admin_client.get(url)

        member_row = response.data[1]
        assert member_row['total_owed_cents'] == 450
        assert member_row['total_owed_display'] == '$4.50'
        assert member_row['pending_count'] == 2

    def test_balance_schema_describes_unit_mixing(self, admin_client):
        response = admin_client.get(reverse('api-schema'), {'format': 'json'})

        assert response.status_code == status.HTTP_200_OK
        balance = response.data['components']['schemas']['MemberBalance']
        assert 'regardless of the' in balance['description']
        assert 'other units' in balance['properties']['total_owed_display']['description']

    def test_activity_limit(self, admin_client, jar_with_member, jar_admin, member_user):
        offense_type = jar_with_member.offense_types.get()
        for _ in range(3):
            report_offense(
                jar_id=jar_with_member.id,
                offense_type_id=offense_type.id,
                reporter=jar_admin,
                offender_id=member_user.id,
            )

        url = reverse('jars:jar-activity', args=[jar_with_member.id])
        response = admin_client.get(url, {'limit': 2})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2
        assert response.data[0]['offense_type_name'] == 'General Offense'
        assert response.data[0]['offender_name'] == 'Jar Member'

    def test_activity_bad_limit(self, admin_client, jar):
        url = reverse('jars:jar-activity', args=[jar.id])
        response = admin_client.get(url, {'limit': 'many'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Offense Type Catalog Tests
# =============================================================================

@pytest.mark.django_db
class TestJarOffenseTypes:
    """Tests for GET/POST /api/jars/{id}/offense_types/"""

    def test_list_active_only(self, member_client, jar_with_member):
        create_offense_type(jar_id=jar_with_member.id, name='Retired', cost_amount_cents=100)
        OffenseType.objects.filter(name='Retired').update(is_active=False)

        url = reverse('jars:jar-offense-types', args=[jar_with_member.id])
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [t['name'] for t in response.data] == ['General Offense']
        assert response.data[0]['cost_amount'] == '5.00'
        assert response.data[0]['cost_display'] == '$5.00'

    def test_list_including_inactive(self, member_client, jar_with_member):
        create_offense_type(jar_id=jar_with_member.id, name='Retired', cost_amount_cents=100)
        OffenseType.objects.filter(name='Retired').update(is_active=False)

        url = reverse('jars:jar-offense-types', args=[jar_with_member.id])
        response = member_client.get(url, {'include_inactive': 'true'})

        assert [t['name'] for t in response.data] == ['General Offense', 'Retired']

    def test_admin_adds_offense_type(self, admin_client, jar):
        url = reverse('jars:jar-offense-types', args=[jar.id])
        data = {
            'name': 'Late to standup',
            'cost_type': 'item',
            'cost_amount': '2',
            'cost_unit': 'beers',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        offense_type = OffenseType.objects.get(id=response.data['id'])
        assert offense_type.jar == jar
        assert offense_type.cost_amount_cents == 200
        assert response.data['cost_display'] == '2.00 beers'

    def test_action_type_requires_action(self, admin_client, jar):
        url = reverse('jars:jar-offense-types', args=[jar.id])
        response = admin_client.post(url, {'name': 'Push-ups', 'cost_type': 'action'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'cost_action' in response.data

    def test_member_cannot_add_offense_type(self, member_client, jar_with_member):
        url = reverse('jars:jar-offense-types', args=[jar_with_member.id])
        response = member_client.post(url, {'name': 'Sneaky'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not OffenseType.objects.filter(name='Sneaky').exists()


# =============================================================================
# Offense Reporting Tests
# =============================================================================

@pytest.mark.django_db
class TestJarOffenses:
    """Tests for GET/POST /api/jars/{id}/offenses/"""

    def test_report_offense(self, member_client, jar_with_member, jar_admin, member_user):
        offense_type = jar_with_member.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        data = {
            'offender_id': str(jar_admin.id),
            'offense_type_id': str(offense_type.id),
            'notes': 'Forgot the meeting',
        }
        response = member_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['redirect'] == f'/jars/{jar_with_member.id}'

        offense = Offense.objects.get(id=response.data['offense_id'])
        assert offense.status == OffenseStatus.PENDING
        assert offense.reporter == member_user
        assert offense.offender == jar_admin
        assert offense.cost_override_cents is None

    def test_report_with_cost_override(self, admin_client, jar_with_member, member_user):
        offense_type = jar_with_member.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        data = {
            'offender_id': str(member_user.id),
            'offense_type_id': str(offense_type.id),
            'cost_override': '7.25',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert Offense.objects.get(id=response.data['offense_id']).cost_override_cents == 725

    def test_report_blank_cost_override_uses_default(self, admin_client, jar_with_member, member_user):
        offense_type = jar_with_member.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        data = {
            'offender_id': str(member_user.id),
            'offense_type_id': str(offense_type.id),
            'cost_override': '',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        offense = Offense.objects.get(id=response.data['offense_id'])
        assert offense.cost_override_cents is None
        assert offense.get_amount_cents() == 500

    @pytest.mark.parametrize('cost_override', ['-1', 'abc', '1.234', '1e30', '21474836.48'])
    def test_report_invalid_cost_override(self, admin_client, jar_with_member, member_user, cost_override):
        offense_type = jar_with_member.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        data = {
            'offender_id': str(member_user.id),
            'offense_type_id': str(offense_type.id),
            'cost_override': cost_override,
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'cost_override' in response.data
        assert Offense.objects.count() == 0

    def test_report_malformed_offender_id(self, admin_client, jar):
        offense_type = jar.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar.id])
        data = {'offender_id': 'not-a-uuid', 'offense_type_id': str(offense_type.id)}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'offender_id' in response.data

    def test_report_offender_not_member(self, admin_client, jar, other_user):
        offense_type = jar.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar.id])
        data = {'offender_id': str(other_user.id), 'offense_type_id': str(offense_type.id)}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'Offender is not a member of this jar'
        assert Offense.objects.count() == 0

    def test_report_reporter_not_member(self, other_client, jar, jar_admin):
        offense_type = jar.offense_types.get()
        url = reverse('jars:jar-offenses', args=[jar.id])
        data = {'offender_id': str(jar_admin.id), 'offense_type_id': str(offense_type.id)}
        response = other_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Offense.objects.count() == 0

    def test_report_inactive_offense_type(self, admin_client, jar_with_member, member_user):
        offense_type = jar_with_member.offense_types.get()
        offense_type.is_active = False
        offense_type.save()

        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        data = {'offender_id': str(member_user.id), 'offense_type_id': str(offense_type.id)}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'offense_type_id' in response.data

    def test_report_offense_type_from_other_jar(self, admin_client, jar_with_member, member_user, other_user):
        other_jar = create_jar(name='Home', creator=other_user, invite_code='HOME0001')
        foreign_type = other_jar.offense_types.get()

        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        data = {'offender_id': str(member_user.id), 'offense_type_id': str(foreign_type.id)}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'offense_type_id' in response.data

    def test_list_offenses_with_status_filter(self, admin_client, jar_with_member, jar_admin, member_user):
        offense_type = jar_with_member.offense_types.get()
        first = report_offense(
            jar_id=jar_with_member.id,
            offense_type_id=offense_type.id,
            reporter=jar_admin,
            offender_id=member_user.id,
        )
        report_offense(
            jar_id=jar_with_member.id,
            offense_type_id=offense_type.id,
            reporter=jar_admin,
            offender_id=member_user.id,
        )
        Offense.objects.filter(id=first.id).update(status=OffenseStatus.PAID)

        url = reverse('jars:jar-offenses', args=[jar_with_member.id])
        all_response = admin_client.get(url)
        paid_response = admin_client.get(url, {'status': 'paid'})

        assert len(all_response.data) == 2
        assert [o['id'] for o in paid_response.data] == [str(first.id)]
        assert paid_response.data[0]['amount_cents'] == 500
        assert paid_response.data[0]['unit'] == settings.TIPJAR_DEFAULT_CURRENCY
