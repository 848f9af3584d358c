"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the budgeting module.
             Handles schemes, budget proposals and allocations.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class BudgetingConfig(AppConfig):
    """
    Configuration class for the budgeting application.

    This app manages:
    - Government schemes per ministry
    - Budget proposals and their line items
    - Allocations sanctioned from approved proposals
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.budgeting'
    verbose_name = 'Budgeting Module'
