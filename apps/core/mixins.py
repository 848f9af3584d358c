"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Abstract model mixins shared by the GBMS apps: public
             identifiers, created/updated timestamps, the user audit
             trail and soft deactivation of master data.
-------------------------------------------------------------------------
"""
import uuid
from typing import Optional
from django.db import models
from django.conf import settings


class UUIDMixin(models.Model):
    """
    Adds a random public_id next to the integer primary key.

    Integer keys stay internal (foreign keys, workflow entity ids);
    public_id is what leaves the system.
    """

    public_id = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        db_index=True,
        verbose_name="Public ID",
        help_text="Stable identifier for use outside GBMS."
    )

    class Meta:
        abstract = True


class TimeStampedMixin(UUIDMixin):
    """Adds created_at and updated_at, maintained by Django."""

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At"
    )

    class Meta:
        abstract = True


class AuditLogMixin(TimeStampedMixin):
    """
    Timestamps plus the users who created and last changed a record.

    Budget proposals and expenditures carry this trail; approval
    decisions are tracked separately in the workflow history.
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_created",
        null=True,
        blank=True,
        verbose_name="Created By"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_updated",
        null=True,
        blank=True,
        verbose_name="Updated By"
    )

    class Meta:
        abstract = True

    def save_with_user(self, user: Optional[object] = None, *args, **kwargs) -> None:
        """
        Save and stamp the audit trail.

        created_by is only set on the first save of a new record.
        """
        if user is not None:
            if self.pk is None:
                self.created_by = user
            self.updated_by = user
        self.save(*args, **kwargs)


class StatusMixin(models.Model):
    """Master data is deactivated with is_active rather than deleted."""

    is_active = models.BooleanField(
        default=True,
        verbose_name="Is Active"
    )

    class Meta:
        abstract = True
