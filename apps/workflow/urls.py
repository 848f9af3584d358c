"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the approval workflow endpoints.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.workflow.views import (
    PendingApprovalsAPIView,
    StageActionView,
    WorkflowDetailAPIView,
    WorkflowResubmitView,
)

app_name = 'workflow'

urlpatterns = [
    path('pending/', PendingApprovalsAPIView.as_view(), name='pending'),
    path('<int:pk>/stages/<int:stage_number>/<str:action>/', StageActionView.as_view(), name='stage_action'),
    path('<int:pk>/resubmit/', WorkflowResubmitView.as_view(), name='resubmit'),
    path('<slug:entity_slug>/<str:entity_id>/', WorkflowDetailAPIView.as_view(), name='detail'),
]
