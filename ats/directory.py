"""
User Directory

Resolves interviewer ids to display names and email addresses for invite
attendee lists, and derives an actor's platform roles from Django groups.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError


ROLE_ADMIN = 'admin'
ROLE_RECRUITER = 'recruiter'
ROLE_HIRING_MANAGER = 'hiring_manager'
ROLE_INTERVIEWER = 'interviewer'


@dataclass(frozen=True)
class DirectoryEntry:
    user_id: str
    name: str
    email: str


class UserDirectory:
    """Lookup of platform users by primary key."""

    def __init__(self):
        self.user_model = get_user_model()

    def resolve(self, user_ids: Iterable) -> Dict[str, DirectoryEntry]:
        """
        Map each known id (as a string) to its directory entry.

        Unknown or malformed ids are simply absent from the result.
        """
        wanted = {str(user_id) for user_id in user_ids}
        pk_field = self.user_model._meta.pk
        valid_pks = []
        for user_id in wanted:
            try:
                valid_pks.append(pk_field.to_python(user_id))
            except ValidationError:
                continue

        entries = {}
        for user in self.user_model.objects.filter(pk__in=valid_pks):
            entries[str(user.pk)] = DirectoryEntry(
                user_id=str(user.pk),
                name=user.get_full_name() or user.get_username(),
                email=user.email or '',
            )
        return entries

    def get(self, user_id) -> Optional[DirectoryEntry]:
        return self.resolve([user_id]).get(str(user_id))

    @staticmethod
    def get_roles(user) -> Set[str]:
        """
        Roles held by `user`, derived from group names.

        Staff and superusers always hold the admin role.
        """
        roles = set()
        if not user or not user.is_authenticated:
            return roles

        for group in user.groups.values_list('name', flat=True):
            group_lower = group.lower()
            if 'recruiter' in group_lower:
                roles.add(ROLE_RECRUITER)
            if 'hiring_manager' in group_lower or 'hiring-manager' in group_lower:
                roles.add(ROLE_HIRING_MANAGER)
            if 'interviewer' in group_lower:
                roles.add(ROLE_INTERVIEWER)
            if 'admin' in group_lower:
                roles.add(ROLE_ADMIN)

        if user.is_staff or user.is_superuser:
            roles.add(ROLE_ADMIN)

        return roles
