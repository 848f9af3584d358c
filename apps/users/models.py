"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Custom User model with role-based access control (RBAC).
             Each user holds exactly one role and is scoped to a
             ministry and/or department.
-------------------------------------------------------------------------
"""
import uuid
from typing import Optional, List
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserRole(models.TextChoices):
    """
    Enumeration of user roles in the budget hierarchy.

    - Finance Ministry Admin: Final approval authority, full access
    - Budget Division Officer: Sanctions allocations, views all data
    - Ministry Secretary: Second-stage approver within a ministry
    - Department Head: First-stage approver within a department
    - Section Officer: Prepares proposals and records expenditure
    - Auditor: Read-only oversight across all ministries
    """

    FINANCE_MINISTRY_ADMIN = 'Finance Ministry Admin', _('Finance Ministry Admin')
    BUDGET_DIVISION_OFFICER = 'Budget Division Officer', _('Budget Division Officer')
    MINISTRY_SECRETARY = 'Ministry Secretary', _('Ministry Secretary')
    DEPARTMENT_HEAD = 'Department Head', _('Department Head')
    SECTION_OFFICER = 'Section Officer', _('Section Officer')
    AUDITOR = 'Auditor', _('Auditor')


class CustomUserManager(BaseUserManager):
    """
    Custom manager for CustomUser model.

    Provides methods to create regular users and superusers with
    proper validation of required fields.
    """

    def create_user(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields
    ) -> 'CustomUser':
        """
        Create and return a regular user.

        Args:
            email: User's email address (login identifier).
            password: User's password.
            **extra_fields: Additional fields for the user model.

        Returns:
            The created CustomUser instance.

        Raises:
            ValueError: If email is not provided.
        """
        if not email:
            raise ValueError(_('Email is required for user creation.'))

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields
    ) -> 'CustomUser':
        """
        Create and return a superuser.

        Superusers are always Finance Ministry Admins.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', UserRole.FINANCE_MINISTRY_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Custom User model for GBMS.

    Uses email as the unique identifier instead of username.

    Attributes:
        email: Login identifier.
        role: User's role in the budget hierarchy.
        ministry: Ministry this user works in (null for central staff).
        department: Department this user heads or works in.
        designation: Official job title.
        phone: Contact phone number.
    """

    # Remove username field, use email instead
    username = None

    public_id = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        db_index=True,
        verbose_name=_('Public ID'),
        help_text=_('Unique UUID for external reference.')
    )
    email = models.EmailField(
        unique=True,
        verbose_name=_('Email Address')
    )
    role = models.CharField(
        max_length=30,
        choices=UserRole.choices,
        default=UserRole.SECTION_OFFICER,
        verbose_name=_('Role')
    )
    ministry = models.ForeignKey(
        'core.Ministry',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
        verbose_name=_('Ministry'),
        help_text=_('Ministry this user belongs to. Null for central Finance Ministry staff.')
    )
    department = models.ForeignKey(
        'core.Department',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
        verbose_name=_('Department'),
        help_text=_('Department this user belongs to for access control.')
    )
    designation = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Designation')
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Phone Number')
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name']

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['first_name', 'last_name']

    def __str__(self) -> str:
        """Return user's full name and role."""
        return f"{self.get_full_name() or self.email} ({self.role})"

    def get_full_name(self) -> str:
        """Return the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    def has_any_role(self, roles: List[str]) -> bool:
        """
        Check if user has any of the specified roles.

        Superusers pass every role check.
        """
        if self.is_superuser:
            return True
        return self.role in roles

    def is_admin(self) -> bool:
        """Check if user is a Finance Ministry Admin."""
        return self.is_superuser or self.role == UserRole.FINANCE_MINISTRY_ADMIN

    def can_view_all_data(self) -> bool:
        """Check if user has oversight across all ministries."""
        return self.has_any_role([
            UserRole.FINANCE_MINISTRY_ADMIN,
            UserRole.BUDGET_DIVISION_OFFICER,
            UserRole.AUDITOR,
        ])
