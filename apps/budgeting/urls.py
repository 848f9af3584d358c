"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the budgeting module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.budgeting.views import (
    AllocationSanctionView,
    AllocationSummaryAPIView,
    ProposalSubmitView,
)

app_name = 'budgeting'

urlpatterns = [
    path('proposals/<int:pk>/submit/', ProposalSubmitView.as_view(), name='proposal_submit'),
    path('proposals/<int:pk>/allocation/', AllocationSanctionView.as_view(), name='allocation_sanction'),
    path('allocations/<int:pk>/', AllocationSummaryAPIView.as_view(), name='allocation_summary'),
]
