from django.urls import path
from . import views

app_name = 'organizations'

urlpatterns = [
    # GET    /api/organizations/{id}/inventory/  - Inventory by blood type
    # POST   /api/organizations/{id}/activate/   - Activate pending organization
    path(
        '<uuid:organization_id>/inventory/',
        views.OrganizationInventoryView.as_view(),
        name='organization-inventory'
    ),
    path(
        '<uuid:organization_id>/activate/',
        views.OrganizationActivateView.as_view(),
        name='organization-activate'
    ),
]
