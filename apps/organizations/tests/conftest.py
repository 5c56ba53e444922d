import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.ledger.store import LedgerStore
from apps.organizations.models import Organization, OrganizationStatus


@pytest.fixture
def store():
    """Return a ledger store bound to the default database."""
    return LedgerStore()


@pytest.fixture
def client_for():
    """Return a factory building an API client authenticated as a user."""
    def make(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return make


@pytest.fixture
def pending_organization(db):
    """Create and return an organization awaiting verification."""
    return Organization.objects.create(
        name='New Blood Center',
        city='Ostrava',
        contact_email='intake@newcenter.example',
    )


@pytest.fixture
def active_organization(db):
    """Create and return a verified organization."""
    return Organization.objects.create(
        name='City Hospital',
        city='Brno',
        status=OrganizationStatus.ACTIVE,
    )


@pytest.fixture
def staff_member(db, active_organization):
    return User.objects.create_user(
        email='staff@cityhospital.example',
        password='TestPass123!',
        roles=[Role.ORGANIZATION],
        organization=active_organization,
    )


@pytest.fixture
def donor(db):
    return User.objects.create_user(
        email='donor@example.com',
        password='TestPass123!',
        roles=[Role.DONOR],
    )


@pytest.fixture
def government_officer(db):
    return User.objects.create_user(
        email='officer@health.gov.example',
        password='TestPass123!',
        roles=[Role.GOVERNMENT],
    )


@pytest.fixture
def ledger_admin(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        roles=[Role.ADMIN],
    )
