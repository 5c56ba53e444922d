import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.ledger.changesets import ConsentContext
from apps.ledger.services import record_donation, create_consent_request
from apps.ledger.store import LedgerStore
from apps.organizations.models import Organization, OrganizationStatus


@pytest.fixture
def store():
    """Return a ledger store bound to the default database."""
    return LedgerStore()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


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
def hospital(db):
    """Create and return an active hospital."""
    return Organization.objects.create(
        name='City Hospital',
        city='Brno',
        contact_email='bank@cityhospital.example',
        status=OrganizationStatus.ACTIVE,
    )


@pytest.fixture
def other_hospital(db):
    """Create and return a second active hospital."""
    return Organization.objects.create(
        name='River Clinic',
        city='Olomouc',
        status=OrganizationStatus.ACTIVE,
    )


@pytest.fixture
def donor(db):
    """Create and return a donor with no credits."""
    return User.objects.create_user(
        email='donor@example.com',
        password='TestPass123!',
        display_name='Dana Donor',
        roles=[Role.DONOR],
        blood_type='O+',
    )


@pytest.fixture
def recipient(db):
    """Create and return a recipient."""
    return User.objects.create_user(
        email='recipient@example.com',
        password='TestPass123!',
        display_name='Rene Recipient',
        roles=[Role.RECIPIENT],
        blood_type='O+',
    )


@pytest.fixture
def outsider(db):
    """Create and return a donor unrelated to any request."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        roles=[Role.DONOR],
    )


@pytest.fixture
def hospital_staff(db, hospital):
    """Create and return a staff member of the hospital."""
    return User.objects.create_user(
        email='staff@cityhospital.example',
        password='TestPass123!',
        display_name='Hospital Staff',
        roles=[Role.ORGANIZATION],
        organization=hospital,
    )


@pytest.fixture
def government_officer(db):
    """Create and return a government officer."""
    return User.objects.create_user(
        email='officer@health.gov.example',
        password='TestPass123!',
        roles=[Role.GOVERNMENT],
    )


@pytest.fixture
def ledger_admin(db):
    """Create and return a ledger administrator."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        roles=[Role.ADMIN],
    )


@pytest.fixture
def funded_donor(store, donor, hospital):
    """Donor holding 5 O+ credits from one donation at the hospital."""
    record_donation(
        store=store,
        donor_id=donor.id,
        organization_id=hospital.id,
        blood_type='O+',
        component='whole_blood',
        credits=5,
    )
    donor.refresh_from_db()
    return donor


@pytest.fixture
def pending_request(store, funded_donor, recipient, hospital):
    """Pending request for 3 of the funded donor's credits, O+ requested."""
    receipt = create_consent_request(
        store=store,
        credit_owner_id=funded_donor.id,
        beneficiary_id=recipient.id,
        organization_id=hospital.id,
        credits=3,
        context=ConsentContext(requested_blood_type='O+', reason='Surgery'),
    )
    return receipt['request_id']
