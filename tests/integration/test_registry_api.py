"""
HTTP API tests for the certified farm registry.

Exercises /api/registry/ through DRF's APIClient: status codes, error
bodies, pause behaviour and admin transfer.
"""

import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework import status

from registry.constants import MAX_HISTORY_ENTRIES
from registry.errors import RegistryErrorCode


pytestmark = pytest.mark.django_db

EXPIRY = '2030-01-01T00:00:00Z'


def assert_error(response, http_status, kind, code):
    assert response.status_code == http_status
    assert response.data['success'] is False
    assert response.data['error'] == kind
    assert response.data['code'] == code


class TestAuthentication:

    def test_token_obtain_and_use(self, api_client, owner_user, registry_state):
        response = api_client.post(
            '/api/auth/token/', {'username': 'kofi', 'password': 'testpass123'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        token = response.data['access']

        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = api_client.post(
            '/api/registry/farms/', {'name': 'Token Farm', 'location': 'Ho'}, format='json'
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['farm']['owner'] == 'kofi'

    def test_anonymous_write_rejected(self, api_client, registry_state):
        response = api_client.post(
            '/api/registry/farms/', {'name': 'Farm', 'location': 'Accra'}, format='json'
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_anonymous_reads_allowed(self, api_client, farm_id):
        response = api_client.get(f'/api/registry/farms/{farm_id}/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['farm']['name'] == 'Sunrise Poultry'


class TestFarmEndpoints:

    def test_register_farm(self, client_for, owner_user, registry_state):
        client = client_for(owner_user)
        response = client.post('/api/registry/farms/', {
            'name': 'Sunrise Poultry',
            'location': 'Kumasi',
            'category': 'Poultry',
            'tags': ['layers'],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['farm_id'] == 1
        assert response.data['farm']['owner'] == 'kofi'

        response = client.get('/api/registry/farms/1/category/')
        assert response.data['category'] == {
            'farm_id': 1, 'primary_category': 'Poultry', 'tags': ['layers'],
        }

    def test_register_empty_name(self, client_for, owner_user, registry_state):
        response = client_for(owner_user).post(
            '/api/registry/farms/', {'name': '', 'location': 'Kumasi'}, format='json'
        )
        assert_error(response, 400, 'InvalidDetails', RegistryErrorCode.INVALID_DETAILS)

    def test_register_missing_field(self, client_for, owner_user, registry_state):
        response = client_for(owner_user).post(
            '/api/registry/farms/', {'name': 'Farm'}, format='json'
        )
        assert_error(response, 400, 'InvalidDetails', 102)
        assert 'location' in response.data['fields']

    def test_unknown_farm_reads_null(self, api_client, registry_state):
        for path in ('', 'category/', 'certification/', 'status/', 'history/1/',
                     'collaborators/ama/', 'revenue-shares/ama/'):
            response = api_client.get(f'/api/registry/farms/99/{path}')
            assert response.status_code == status.HTTP_200_OK
            assert list(response.data.values()) == [None]

    def test_update_details_by_non_owner(self, client_for, other_user, farm_id):
        response = client_for(other_user).put(
            f'/api/registry/farms/{farm_id}/', {'name': 'Mine', 'location': 'Here'}, format='json'
        )
        assert_error(response, 403, 'Unauthorized', 100)

    def test_update_details_unknown_farm(self, client_for, owner_user, registry_state):
        response = client_for(owner_user).put(
            '/api/registry/farms/12/', {'name': 'A', 'location': 'B'}, format='json'
        )
        assert_error(response, 404, 'NotFound', 103)

    def test_update_details(self, client_for, owner_user, farm_id):
        response = client_for(owner_user).put(
            f'/api/registry/farms/{farm_id}/', {'name': 'Sunset', 'location': 'Obuasi'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['farm']['name'] == 'Sunset'


class TestCertificationEndpoints:

    def test_owner_self_certifies(self, client_for, owner_user, farm_id):
        response = client_for(owner_user).post(
            f'/api/registry/farms/{farm_id}/certification/',
            {'level': 'Gold', 'expiry': EXPIRY, 'notes': 'Self assessed'},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['certification']['certified'] is True
        assert response.data['certification']['certifier'] == 'kofi'

    def test_third_party_cannot_certify(self, client_for, other_user, farm_id):
        response = client_for(other_user).post(
            f'/api/registry/farms/{farm_id}/certification/',
            {'level': 'Gold', 'expiry': EXPIRY}, format='json',
        )
        assert_error(response, 403, 'Unauthorized', 100)

    def test_revoke_without_certification(self, client_for, admin_user, farm_id):
        response = client_for(admin_user).post(
            f'/api/registry/farms/{farm_id}/certification/revoke/', {'reason': 'x'}, format='json'
        )
        assert_error(response, 404, 'NotFound', 103)

    def test_admin_revokes(self, client_for, admin_user, service, farm_id):
        service.certify_farm('kofi', farm_id, 'Gold', timezone.now() + timedelta(days=365))

        client = client_for(admin_user)
        response = client.post(
            f'/api/registry/farms/{farm_id}/certification/revoke/',
            {'reason': 'Failed audit'}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK

        response = client.get(f'/api/registry/farms/{farm_id}/certification/')
        assert response.data['certification']['certified'] is False
        assert response.data['certification']['level'] == 'Gold'


class TestCollaboratorEndpoints:

    def test_add_and_read(self, client_for, owner_user, farm_id):
        client = client_for(owner_user)
        response = client.post(
            f'/api/registry/farms/{farm_id}/collaborators/',
            {'collaborator': 'ama', 'role': 'Manager', 'permissions': ['read']},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED

        response = client.get(f'/api/registry/farms/{farm_id}/collaborators/ama/')
        assert response.data['collaborator']['role'] == 'Manager'
        assert response.data['collaborator']['permissions'] == ['read']

    def test_duplicate_conflicts(self, client_for, owner_user, farm_id):
        client = client_for(owner_user)
        payload = {'collaborator': 'ama', 'role': 'Manager'}
        client.post(f'/api/registry/farms/{farm_id}/collaborators/', payload, format='json')

        response = client.post(f'/api/registry/farms/{farm_id}/collaborators/', payload, format='json')
        assert_error(response, 409, 'AlreadyRegistered', 101)


class TestStatusAndRevenueEndpoints:

    def test_admin_updates_status(self, client_for, admin_user, farm_id):
        response = client_for(admin_user).put(
            f'/api/registry/farms/{farm_id}/status/',
            {'status': 'Suspended', 'visible': False}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status']['status'] == 'Suspended'
        assert response.data['status']['visible'] is False

    def test_set_revenue_share(self, client_for, owner_user, farm_id):
        response = client_for(owner_user).put(
            f'/api/registry/farms/{farm_id}/revenue-shares/ama/', {'percentage': 100}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['revenue_share']['percentage'] == 100
        assert response.data['revenue_share']['total_received'] == '0.00'

    def test_percentage_over_limit(self, client_for, owner_user, farm_id):
        response = client_for(owner_user).put(
            f'/api/registry/farms/{farm_id}/revenue-shares/ama/', {'percentage': 101}, format='json'
        )
        assert_error(response, 400, 'InvalidPercentage', 106)

    def test_non_numeric_percentage(self, client_for, owner_user, farm_id):
        response = client_for(owner_user).put(
            f'/api/registry/farms/{farm_id}/revenue-shares/ama/', {'percentage': 'lots'}, format='json'
        )
        assert_error(response, 400, 'InvalidPercentage', 106)


class TestMalformedRequests:
    """Existence and authorization are reported ahead of request-shape errors."""

    def test_unknown_farm_wins_over_bad_percentage(self, client_for, owner_user, registry_state):
        response = client_for(owner_user).put(
            '/api/registry/farms/99/revenue-shares/ama/', {'percentage': 'lots'}, format='json'
        )
        assert_error(response, 404, 'NotFound', 103)

    def test_unknown_farm_wins_over_missing_fields(self, client_for, owner_user, registry_state):
        client = client_for(owner_user)

        response = client.put('/api/registry/farms/99/', {}, format='json')
        assert_error(response, 404, 'NotFound', 103)

        response = client.put('/api/registry/farms/99/status/', {'visible': 'maybe'}, format='json')
        assert_error(response, 404, 'NotFound', 103)

    def test_non_owner_wins_over_missing_expiry(self, client_for, other_user, farm_id):
        response = client_for(other_user).post(
            f'/api/registry/farms/{farm_id}/certification/', {'level': 'Gold'}, format='json'
        )
        assert_error(response, 403, 'Unauthorized', 100)

    def test_non_owner_wins_over_bad_body(self, client_for, other_user, farm_id):
        client = client_for(other_user)

        response = client.put(f'/api/registry/farms/{farm_id}/', {'name': 'Mine'}, format='json')
        assert_error(response, 403, 'Unauthorized', 100)

        response = client.post(f'/api/registry/farms/{farm_id}/collaborators/', {}, format='json')
        assert_error(response, 403, 'Unauthorized', 100)

        response = client.put(
            f'/api/registry/farms/{farm_id}/revenue-shares/ama/', {'percentage': 'lots'}, format='json'
        )
        assert_error(response, 403, 'Unauthorized', 100)

    def test_non_admin_wins_over_missing_new_admin(self, client_for, owner_user, registry_state):
        response = client_for(owner_user).post('/api/registry/state/transfer-admin/', {}, format='json')
        assert_error(response, 403, 'Unauthorized', 100)

    def test_permitted_caller_gets_shape_error(self, client_for, owner_user, farm_id):
        response = client_for(owner_user).post(
            f'/api/registry/farms/{farm_id}/certification/', {'level': 'Gold'}, format='json'
        )
        assert_error(response, 400, 'InvalidDetails', 102)
        assert 'expiry' in response.data['fields']


class TestHistoryEndpoints:

    def test_history_list(self, api_client, service, farm_id):
        service.update_farm_status('kofi', farm_id, 'Active', True)

        response = api_client.get(f'/api/registry/farms/{farm_id}/history/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [e['action'] for e in response.data['entries']] == ['Registered', 'Status Updated']

    def test_history_entry(self, api_client, farm_id):
        response = api_client.get(f'/api/registry/farms/{farm_id}/history/1/')
        assert response.data['entry']['details'] == 'Initial farm registration'

    def test_full_history_rejects_update(self, client_for, owner_user, service, farm_id):
        for _ in range(MAX_HISTORY_ENTRIES - 1):
            service.update_farm_status('kofi', farm_id, 'Active', True)

        response = client_for(owner_user).put(
            f'/api/registry/farms/{farm_id}/status/', {'status': 'Closed', 'visible': False}, format='json'
        )
        assert_error(response, 400, 'InvalidDetails', 102)
        assert service.get_status(farm_id).status == 'Active'


class TestRegistryStateEndpoints:

    def test_state(self, api_client, farm_id):
        response = api_client.get('/api/registry/state/')
        assert response.data == {'admin': 'deployer', 'paused': False, 'farm_counter': 1}

    def test_non_admin_cannot_pause(self, client_for, owner_user, registry_state):
        response = client_for(owner_user).post('/api/registry/state/pause/')
        assert_error(response, 403, 'Unauthorized', 100)

    def test_paused_registry(self, client_for, admin_user, owner_user, farm_id):
        response = client_for(admin_user).post('/api/registry/state/pause/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['state']['paused'] is True

        client = client_for(owner_user)
        response = client.post(
            '/api/registry/farms/', {'name': 'Farm', 'location': 'Accra'}, format='json'
        )
        assert_error(response, 503, 'Paused', 107)

        # Malformed input still reports the pause
        response = client.put(
            f'/api/registry/farms/{farm_id}/revenue-shares/ama/', {'percentage': 'lots'}, format='json'
        )
        assert_error(response, 503, 'Paused', 107)

        response = client.get(f'/api/registry/farms/{farm_id}/')
        assert response.status_code == status.HTTP_200_OK

        client = client_for(admin_user)
        assert client.post('/api/registry/state/unpause/').status_code == status.HTTP_200_OK
        assert client.get('/api/registry/state/').data['paused'] is False

    def test_transfer_admin(self, client_for, admin_user, owner_user, registry_state):
        client = client_for(admin_user)
        response = client.post(
            '/api/registry/state/transfer-admin/', {'new_admin': 'kofi'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['state']['admin'] == 'kofi'

        response = client.post('/api/registry/state/pause/')
        assert_error(response, 403, 'Unauthorized', 100)

        response = client_for(owner_user).post('/api/registry/state/pause/')
        assert response.status_code == status.HTTP_200_OK
