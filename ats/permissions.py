"""
ATS permission classes.
"""

from rest_framework import permissions

from ats.directory import (
    ROLE_ADMIN,
    ROLE_HIRING_MANAGER,
    ROLE_RECRUITER,
    UserDirectory,
)


class IsRecruiterOrHiringManager(permissions.BasePermission):
    """
    RBAC permission class for recruiter and hiring manager roles.

    Checks:
    - User is authenticated
    - Read operations are open to any authenticated user
    - Writes require recruiter, hiring_manager or admin role (via groups or staff flag)
    """

    required_roles = {ROLE_RECRUITER, ROLE_HIRING_MANAGER, ROLE_ADMIN}

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        return bool(UserDirectory.get_roles(request.user) & self.required_roles)


class CanSendFeedbackReminder(IsRecruiterOrHiringManager):
    """Only recruiters, hiring managers and admins may chase feedback."""

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return bool(UserDirectory.get_roles(request.user) & self.required_roles)
