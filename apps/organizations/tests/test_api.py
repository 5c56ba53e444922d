import pytest
from django.urls import reverse
from rest_framework import status
from apps.ledger.services import record_donation
from apps.organizations.models import Organization, OrganizationStatus


@pytest.mark.django_db
class TestInventoryAPI:
    """Tests for GET /api/organizations/{id}/inventory/"""

    def test_staff_reads_own_inventory(self, client_for, store, staff_member, active_organization, donor):
        record_donation(
            store=store,
            donor_id=donor.id,
            organization_id=active_organization.id,
            blood_type='O-',
            component='packed_rbc',
            credits=3,
        )
        url = reverse('organizations:organization-inventory', kwargs={'organization_id': active_organization.id})
        response = client_for(staff_member).get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['organization_id'] == str(active_organization.id)
        assert len(response.data['inventory']) == 1
        assert response.data['inventory'][0]['blood_type'] == 'O-'
        assert response.data['inventory'][0]['available_credits'] == 3
        assert response.data['inventory'][0]['total_donated_credits'] == 3

    def test_government_reads_any_inventory(self, client_for, government_officer, active_organization):
        url = reverse('organizations:organization-inventory', kwargs={'organization_id': active_organization.id})
        response = client_for(government_officer).get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['inventory'] == []

    def test_donor_forbidden(self, client_for, donor, active_organization):
        url = reverse('organizations:organization-inventory', kwargs={'organization_id': active_organization.id})
        response = client_for(donor).get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'FORBIDDEN'

    def test_staff_of_other_organization_forbidden(self, client_for, staff_member, pending_organization):
        url = reverse('organizations:organization-inventory', kwargs={'organization_id': pending_organization.id})
        response = client_for(staff_member).get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestActivateAPI:
    """Tests for POST /api/organizations/{id}/activate/"""

    def test_admin_activates(self, client_for, ledger_admin, pending_organization):
        url = reverse('organizations:organization-activate', kwargs={'organization_id': pending_organization.id})
        response = client_for(ledger_admin).post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == OrganizationStatus.ACTIVE
        assert Organization.objects.get(id=pending_organization.id).is_active

    def test_second_activation_conflicts(self, client_for, ledger_admin, active_organization):
        url = reverse('organizations:organization-activate', kwargs={'organization_id': active_organization.id})
        response = client_for(ledger_admin).post(url)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data == {'error': 'Organization is already active', 'code': 'CONFLICT'}

    def test_government_cannot_activate(self, client_for, government_officer, pending_organization):
        url = reverse('organizations:organization-activate', kwargs={'organization_id': pending_organization.id})
        response = client_for(government_officer).post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Organization.objects.get(id=pending_organization.id).status == OrganizationStatus.PENDING
