"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Permission helpers and view mixins for role-based access
             control, scoped by ministry and department.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, List, Optional
from django.contrib.auth.mixins import UserPassesTestMixin
from django.core.exceptions import PermissionDenied

from apps.core.exceptions import UnauthorizedRoleException
from apps.users.models import UserRole


PROPOSAL_MAKER_ROLES = [
    UserRole.FINANCE_MINISTRY_ADMIN,
    UserRole.MINISTRY_SECRETARY,
    UserRole.DEPARTMENT_HEAD,
    UserRole.SECTION_OFFICER,
]

EXPENDITURE_RECORDER_ROLES = [
    UserRole.FINANCE_MINISTRY_ADMIN,
    UserRole.DEPARTMENT_HEAD,
    UserRole.SECTION_OFFICER,
]

ALLOCATION_ROLES = [
    UserRole.FINANCE_MINISTRY_ADMIN,
    UserRole.BUDGET_DIVISION_OFFICER,
]

OVERSIGHT_ROLES = [
    UserRole.FINANCE_MINISTRY_ADMIN,
    UserRole.BUDGET_DIVISION_OFFICER,
    UserRole.AUDITOR,
]

# Roles allowed at each approval level
APPROVAL_LEVEL_ROLES = {
    'department': [
        UserRole.DEPARTMENT_HEAD,
        UserRole.MINISTRY_SECRETARY,
        UserRole.FINANCE_MINISTRY_ADMIN,
    ],
    'ministry': [UserRole.MINISTRY_SECRETARY, UserRole.FINANCE_MINISTRY_ADMIN],
    'central': [UserRole.FINANCE_MINISTRY_ADMIN],
}


def _is_present(user: Any) -> bool:
    return user is not None and getattr(user, 'is_authenticated', True)


def has_role(user: Any, roles: List[str]) -> bool:
    """
    Check if user has any of the specified roles.

    Args:
        user: The user object to check (None or anonymous fails).
        roles: List of role values to check against.

    Returns:
        True if user has any of the specified roles or is superuser.
    """
    if not _is_present(user):
        return False

    if getattr(user, 'is_superuser', False):
        return True

    return user.role in roles


def is_admin(user: Any) -> bool:
    """Check if user is a Finance Ministry Admin."""
    return has_role(user, [UserRole.FINANCE_MINISTRY_ADMIN])


def can_manage_ministry(user: Any, ministry_id: Optional[int] = None) -> bool:
    """Admins manage every ministry; secretaries manage their own."""
    if not _is_present(user):
        return False
    if is_admin(user):
        return True
    return (
        user.role == UserRole.MINISTRY_SECRETARY
        and ministry_id is not None
        and user.ministry_id == ministry_id
    )


def can_manage_department(
    user: Any,
    department_id: Optional[int] = None,
    ministry_id: Optional[int] = None
) -> bool:
    """Admins, the owning ministry's secretary, or the department's head."""
    if can_manage_ministry(user, ministry_id):
        return True
    if not _is_present(user):
        return False
    return (
        user.role == UserRole.DEPARTMENT_HEAD
        and department_id is not None
        and user.department_id == department_id
    )


def can_approve_budget(user: Any, level: str) -> bool:
    """
    Check if user can approve budgets at the given level.

    Args:
        user: The user attempting to approve.
        level: One of 'department', 'ministry' or 'central'.
    """
    return has_role(user, APPROVAL_LEVEL_ROLES.get(level, []))


def can_record_expenditure(user: Any) -> bool:
    """Check if user can record expenditure."""
    return has_role(user, EXPENDITURE_RECORDER_ROLES)


def can_sanction_allocation(user: Any) -> bool:
    """Check if user can sanction budget allocations."""
    return has_role(user, ALLOCATION_ROLES)


def can_view_all_data(user: Any) -> bool:
    """Check if user has oversight access across all ministries."""
    return has_role(user, OVERSIGHT_ROLES)


def get_user_scope(user: Any) -> Dict[str, Any]:
    """
    Get the organizational scope a user can access.

    Returns:
        Dictionary with can_access_all_ministries, ministry_id, department_id.
    """
    if not _is_present(user):
        return {
            'can_access_all_ministries': False,
            'ministry_id': None,
            'department_id': None,
        }

    return {
        'can_access_all_ministries': can_view_all_data(user),
        'ministry_id': user.ministry_id,
        'department_id': user.department_id,
    }


def can_edit_budget_proposal(user: Any, proposal: Any) -> bool:
    """
    Check if user can edit a budget proposal.

    Creators edit their own drafts; admins edit anything; secretaries
    and department heads edit proposals inside their scope.
    """
    from apps.core.models import ProposalStatus

    if not _is_present(user):
        return False

    if proposal.created_by_id == user.pk and proposal.status == ProposalStatus.DRAFT:
        return True

    if is_admin(user):
        return True

    if user.role == UserRole.MINISTRY_SECRETARY and user.ministry_id == proposal.ministry_id:
        return True

    if user.role == UserRole.DEPARTMENT_HEAD and user.department_id == proposal.department_id:
        return True

    return False


class RoleRequiredMixin(UserPassesTestMixin):
    """
    Base mixin for role-based view access control.

    Subclasses should define the `required_roles` attribute as a list
    of roles that are allowed to access the view.

    Attributes:
        required_roles: List of roles that can access this view.
    """

    required_roles: List[str] = []

    def test_func(self) -> bool:
        """
        Test if the current user has the required role.

        Returns:
            True if user has any of the required roles, False otherwise.
        """
        if not self.request.user.is_authenticated:
            return False

        return has_role(self.request.user, self.required_roles)

    def handle_no_permission(self) -> None:
        """Handle unauthorized access attempt."""
        raise PermissionDenied(
            UnauthorizedRoleException(
                f"This action requires one of the following roles: {self.required_roles}"
            ).message
        )


class ProposalMakerRequiredMixin(RoleRequiredMixin):
    """Restricts access to roles that prepare and submit proposals."""

    required_roles = PROPOSAL_MAKER_ROLES


class ExpenditureRecorderRequiredMixin(RoleRequiredMixin):
    """Restricts access to roles that record expenditure."""

    required_roles = EXPENDITURE_RECORDER_ROLES


class AllocationOfficerRequiredMixin(RoleRequiredMixin):
    """
    Restricts access to the Budget Division and Finance Ministry Admins.

    Used for sanctioning allocations out of approved proposals.
    """

    required_roles = ALLOCATION_ROLES
