"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the expenditure module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.expenditure.views import ExpenditureCreateView, ExpenditureSubmitView

app_name = 'expenditure'

urlpatterns = [
    path('', ExpenditureCreateView.as_view(), name='expenditure_create'),
    path('<int:pk>/submit/', ExpenditureSubmitView.as_view(), name='expenditure_submit'),
]
