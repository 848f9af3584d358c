"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Organizational hierarchy models (Ministry, Department)
             and the status vocabulary shared by every record that
             passes through an approval workflow.
-------------------------------------------------------------------------
"""
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import TimeStampedMixin, StatusMixin


class ProposalStatus(models.TextChoices):
    """
    Status of a budget proposal, an expenditure, or the approval
    workflow that gates them.
    """
    DRAFT = 'Draft', _('Draft')
    SUBMITTED = 'Submitted', _('Submitted')
    UNDER_REVIEW = 'Under Review', _('Under Review')
    APPROVED = 'Approved', _('Approved')
    REJECTED = 'Rejected', _('Rejected')
    REVISION_REQUESTED = 'Revision Requested', _('Revision Requested')


class Ministry(TimeStampedMixin, StatusMixin):
    """
    Ministry of the Government.

    Top level of the organizational hierarchy. Schemes, budget
    proposals and expenditures are all scoped to a ministry.
    """

    name = models.CharField(
        max_length=200,
        unique=True,
        verbose_name=_('Ministry Name')
    )
    code = models.CharField(
        max_length=10,
        unique=True,
        blank=True,
        verbose_name=_('Ministry Code'),
        help_text=_('Short code used in proposal numbers (e.g., "MOH").')
    )
    minister_name = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Minister')
    )
    secretary_name = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Secretary')
    )

    class Meta:
        verbose_name = _('Ministry')
        verbose_name_plural = _('Ministries')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs) -> None:
        """Auto-generate code from name if not provided."""
        if not self.code:
            self.code = self.name[:3].upper()
        super().save(*args, **kwargs)


class Department(TimeStampedMixin, StatusMixin):
    """
    Department within a ministry.

    A department belongs to exactly one ministry. Department Heads
    approve the first stage of every workflow raised in their department.
    """

    ministry = models.ForeignKey(
        Ministry,
        on_delete=models.PROTECT,
        related_name='departments',
        verbose_name=_('Ministry')
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_('Department Name')
    )
    code = models.CharField(
        max_length=20,
        verbose_name=_('Department Code')
    )
    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )

    class Meta:
        verbose_name = _('Department')
        verbose_name_plural = _('Departments')
        ordering = ['ministry__name', 'name']
        unique_together = ['ministry', 'code']

    def __str__(self) -> str:
        return f"{self.name} ({self.ministry.code})"
