"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the approval workflow engine.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class WorkflowConfig(AppConfig):
    """Configuration for the workflow application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.workflow'
    verbose_name = 'Approval Workflow'
