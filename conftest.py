"""
Shared pytest fixtures for registry tests.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from registry.models import RegistryState
from registry.services import RegistryService

User = get_user_model()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def service():
    return RegistryService()


@pytest.fixture
def registry_state(db):
    """Registry state with the initial admin from settings ('deployer')."""
    return RegistryState.get_state()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='deployer', password='testpass123')


@pytest.fixture
def owner_user(db):
    return User.objects.create_user(username='kofi', password='testpass123')


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username='ama', password='testpass123')


@pytest.fixture
def farm_id(service, registry_state):
    """A farm registered by 'kofi'."""
    return service.register_farm(
        'kofi', 'Sunrise Poultry', 'Kumasi, Ashanti', 'Poultry', ['layers', 'organic']
    )


@pytest.fixture
def client_for(api_client):
    """Return an APIClient authenticated as the given user."""
    def _client_for(user):
        api_client.force_authenticate(user=user)
        return api_client
    return _client_for
