"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the expenditure module.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ExpenditureConfig(AppConfig):
    """Configuration for the expenditure application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.expenditure'
    verbose_name = 'Expenditure Management'

    def ready(self):
        """Import signal handlers when app is ready."""
        import apps.expenditure.signals  # noqa
