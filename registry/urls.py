"""
URL configuration for the Certified Farm Registry app.

All endpoints are prefixed with /api/registry/
"""

from django.urls import path
from .views import (
    # Farms
    FarmRegisterView,
    FarmDetailView,
    FarmCategoryView,

    # Certification
    CertificationView,
    RevokeCertificationView,

    # Status
    FarmStatusView,

    # Collaborators
    CollaboratorCreateView,
    CollaboratorDetailView,

    # Revenue shares
    RevenueShareView,

    # History
    FarmHistoryView,
    HistoryEntryView,

    # Registry state
    RegistryStateView,
    PauseRegistryView,
    UnpauseRegistryView,
    TransferAdminView,
)

app_name = 'registry'

urlpatterns = [
    # ==========================================================================
    # FARMS
    # ==========================================================================
    path('farms/', FarmRegisterView.as_view(), name='farm-register'),
    path('farms/<int:farm_id>/', FarmDetailView.as_view(), name='farm-detail'),
    path('farms/<int:farm_id>/category/', FarmCategoryView.as_view(), name='farm-category'),

    # ==========================================================================
    # CERTIFICATION
    # ==========================================================================
    path('farms/<int:farm_id>/certification/', CertificationView.as_view(), name='certification'),
    path('farms/<int:farm_id>/certification/revoke/', RevokeCertificationView.as_view(), name='certification-revoke'),

    # ==========================================================================
    # STATUS
    # ==========================================================================
    path('farms/<int:farm_id>/status/', FarmStatusView.as_view(), name='farm-status'),

    # ==========================================================================
    # COLLABORATORS
    # ==========================================================================
    path('farms/<int:farm_id>/collaborators/', CollaboratorCreateView.as_view(), name='collaborator-create'),
    path('farms/<int:farm_id>/collaborators/<str:actor>/', CollaboratorDetailView.as_view(), name='collaborator-detail'),

    # ==========================================================================
    # REVENUE SHARES
    # ==========================================================================
    path('farms/<int:farm_id>/revenue-shares/<str:actor>/', RevenueShareView.as_view(), name='revenue-share'),

    # ==========================================================================
    # HISTORY
    # ==========================================================================
    path('farms/<int:farm_id>/history/', FarmHistoryView.as_view(), name='history-list'),
    path('farms/<int:farm_id>/history/<int:entry_id>/', HistoryEntryView.as_view(), name='history-entry'),

    # ==========================================================================
    # REGISTRY STATE
    # ==========================================================================
    path('state/', RegistryStateView.as_view(), name='state'),
    path('state/pause/', PauseRegistryView.as_view(), name='pause'),
    path('state/unpause/', UnpauseRegistryView.as_view(), name='unpause'),
    path('state/transfer-admin/', TransferAdminView.as_view(), name='transfer-admin'),
]
