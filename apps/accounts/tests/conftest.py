import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User, Role


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def donor(db):
    """Create and return a donor."""
    return User.objects.create_user(
        email='donor@example.com',
        password='TestPass123!',
        display_name='Dana Donor',
        roles=[Role.DONOR],
        blood_type='A+',
    )
