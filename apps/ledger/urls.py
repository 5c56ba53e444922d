from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    # Donations
    # POST   /api/ledger/donations/                      - Record donation
    path('donations/', views.DonationView.as_view(), name='donation-create'),

    # Consent workflow
    # POST   /api/ledger/consents/                       - Create consent request
    # GET    /api/ledger/consents/{id}/                  - Get consent request
    # POST   /api/ledger/consents/{id}/decision/         - Approve or decline
    path('consents/', views.ConsentRequestCreateView.as_view(), name='consent-create'),
    path('consents/<uuid:request_id>/', views.ConsentRequestDetailView.as_view(), name='consent-detail'),
    path(
        'consents/<uuid:request_id>/decision/',
        views.ConsentDecisionView.as_view(),
        name='consent-decision'
    ),

    # Emergency overrides and exchanges
    path('emergency-overrides/', views.EmergencyOverrideView.as_view(), name='emergency-override'),
    path('exchanges/', views.ExchangeProposalView.as_view(), name='exchange-create'),

    # Credit record
    path('users/<uuid:user_id>/', views.LedgerSummaryView.as_view(), name='ledger-summary'),
]
