"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Database models for the multi-stage approval workflow:
             ApprovalWorkflow (one approval run per record),
             ApprovalStage (one row per stage) and WorkflowAction
             (append-only history of every decision).
-------------------------------------------------------------------------
"""
from typing import Optional
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import TimeStampedMixin
from apps.core.models import ProposalStatus
from apps.users.models import UserRole


class EntityType(models.TextChoices):
    """Kinds of records that can be routed through an approval workflow."""
    BUDGET_PROPOSAL = 'Budget Proposal', _('Budget Proposal')
    EXPENDITURE = 'Expenditure', _('Expenditure')
    REALLOCATION = 'Reallocation', _('Reallocation')
    SCHEME = 'Scheme', _('Scheme')


class ApprovalStatus(models.TextChoices):
    """
    Status of a single approval stage.

    DELEGATED is reserved; no workflow operation produces it.
    """
    PENDING = 'Pending', _('Pending')
    APPROVED = 'Approved', _('Approved')
    REJECTED = 'Rejected', _('Rejected')
    DELEGATED = 'Delegated', _('Delegated')


class ActionType(models.TextChoices):
    """Decisions recorded in the workflow history."""
    SUBMITTED = 'Submitted', _('Submitted')
    APPROVED = 'Approved', _('Approved')
    REJECTED = 'Rejected', _('Rejected')
    REVISION_REQUESTED = 'Revision Requested', _('Revision Requested')
    RESUBMITTED = 'Resubmitted', _('Resubmitted')


# Workflow statuses an approver can still act on
OPEN_STATUSES = (ProposalStatus.SUBMITTED, ProposalStatus.UNDER_REVIEW)

# Workflow statuses that carry a completed_at timestamp
TERMINAL_STATUSES = (ProposalStatus.APPROVED, ProposalStatus.REJECTED)


class ApprovalWorkflow(TimeStampedMixin):
    """
    One approval run for one record.

    The workflow references its record weakly through
    (entity_type, entity_id); the record is owned by another app.

    Attributes:
        entity_type: Kind of record being approved.
        entity_id: Primary key of the record, stored as text.
        current_stage: Stage number awaiting a decision (1-based).
        total_stages: Number of stages in the template for entity_type.
        status: Workflow status (shares the ProposalStatus vocabulary).
        submitted_by: User who submitted the record.
        submitted_at: When the record was (re)submitted.
        completed_at: Set once the workflow is Approved or Rejected.
    """

    entity_type = models.CharField(
        max_length=30,
        choices=EntityType.choices,
        verbose_name=_('Entity Type')
    )
    entity_id = models.CharField(
        max_length=64,
        verbose_name=_('Entity ID')
    )
    current_stage = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_('Current Stage')
    )
    total_stages = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Total Stages')
    )
    status = models.CharField(
        max_length=30,
        choices=ProposalStatus.choices,
        default=ProposalStatus.SUBMITTED,
        verbose_name=_('Status')
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='submitted_workflows',
        verbose_name=_('Submitted By')
    )
    submitted_at = models.DateTimeField(
        default=timezone.now,
        verbose_name=_('Submitted At')
    )
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Completed At')
    )

    class Meta:
        verbose_name = _('Approval Workflow')
        verbose_name_plural = _('Approval Workflows')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='workflow_entity_idx'),
            models.Index(fields=['status'], name='workflow_status_idx'),
        ]

    def __str__(self) -> str:
        return (
            f"{self.entity_type} #{self.entity_id} - "
            f"Stage {self.current_stage}/{self.total_stages} ({self.status})"
        )

    def clean(self) -> None:
        """Validate stage bounds and the completed_at/status pairing."""
        if self.total_stages and self.current_stage > self.total_stages:
            raise ValidationError({
                'current_stage': _('Current stage cannot exceed total stages.')
            })
        is_terminal = self.status in TERMINAL_STATUSES
        if is_terminal != (self.completed_at is not None):
            raise ValidationError({
                'completed_at': _('Completed date must be set only for approved or rejected workflows.')
            })

    @property
    def is_open(self) -> bool:
        """Whether an approver can still act on this workflow."""
        return self.status in OPEN_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def get_current_stage(self) -> Optional['ApprovalStage']:
        """Return the stage awaiting a decision, if it exists."""
        return self.stages.filter(stage_number=self.current_stage).first()


class ApprovalStage(TimeStampedMixin):
    """
    One checkpoint of a workflow, gated to a single role.

    All stages of a workflow are created together with the workflow.
    """

    workflow = models.ForeignKey(
        ApprovalWorkflow,
        on_delete=models.CASCADE,
        related_name='stages',
        verbose_name=_('Workflow')
    )
    stage_number = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Stage Number')
    )
    stage_name = models.CharField(
        max_length=100,
        verbose_name=_('Stage Name')
    )
    approver_role = models.CharField(
        max_length=30,
        choices=UserRole.choices,
        verbose_name=_('Approver Role')
    )
    approver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approval_stages',
        verbose_name=_('Approver')
    )
    status = models.CharField(
        max_length=20,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
        verbose_name=_('Status')
    )
    comments = models.TextField(
        blank=True,
        null=True,
        verbose_name=_('Comments')
    )
    action_date = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Action Date')
    )

    class Meta:
        verbose_name = _('Approval Stage')
        verbose_name_plural = _('Approval Stages')
        ordering = ['workflow', 'stage_number']
        unique_together = ['workflow', 'stage_number']

    def __str__(self) -> str:
        return f"Stage {self.stage_number}: {self.stage_name} ({self.status})"


class WorkflowAction(models.Model):
    """
    Append-only history of workflow decisions.

    Stage rows are reset on resubmission; this table keeps every
    decision taken before the reset.
    """

    workflow = models.ForeignKey(
        ApprovalWorkflow,
        on_delete=models.CASCADE,
        related_name='actions',
        verbose_name=_('Workflow')
    )
    stage_number = models.PositiveSmallIntegerField(
        verbose_name=_('Stage Number')
    )
    action = models.CharField(
        max_length=30,
        choices=ActionType.choices,
        verbose_name=_('Action')
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='workflow_actions',
        verbose_name=_('Actor')
    )
    comments = models.TextField(
        blank=True,
        verbose_name=_('Comments')
    )
    from_status = models.CharField(
        max_length=30,
        blank=True,
        verbose_name=_('From Status')
    )
    to_status = models.CharField(
        max_length=30,
        verbose_name=_('To Status')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    class Meta:
        verbose_name = _('Workflow Action')
        verbose_name_plural = _('Workflow Actions')
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.action} at stage {self.stage_number} ({self.from_status} -> {self.to_status})"
