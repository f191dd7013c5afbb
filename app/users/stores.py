"""
Access and mirror user profiles.
"""

import logging
from typing import Optional

from django.conf import settings
from rest_framework.exceptions import ValidationError

from core.abstracts.stores import StoreBase
from core.abstracts.tables import RecordDoesNotExist, TableBase
from users.models import Profile, Role
from users.serializers import ProfileRowSerializer

logger = logging.getLogger(__name__)


class ProfileTable(TableBase[Profile]):
    """Rows in the profiles table."""

    table_name = "profiles"
    serializer_class = ProfileRowSerializer

    def find_by_email(self, email: str) -> Optional[Profile]:
        return self.find_one(email=email.strip().lower())


class UserStore(StoreBase[Profile]):
    """Newest active profiles, shown in the user list."""

    table_class = ProfileTable
    cache_key = "users"
    filters = {"is_active": True}
    order_by = "created_at"
    order_desc = True

    table: ProfileTable

    def get_page_size(self):
        return settings.USERS_PAGE_SIZE

    def update_user(self, id: str, **changes) -> Profile:
        """Update profile fields."""

        return self.update(id, success_message="User was updated.", **changes)

    def deactivate_user(self, id: str) -> Profile:
        """Soft delete profile, it is removed from the list."""

        return self.deactivate(id, success_message="User was deactivated.")

    def set_active(self, id: str, is_active: bool) -> Profile:
        message = "User was activated." if is_active else "User was deactivated."
        return self.update(id, success_message=message, is_active=is_active)

    def set_roles(self, id: str, roles: list[Role | str]) -> Profile:
        """Replace all roles of a profile, at least one known role is required."""

        with self.handle_errors("Error updating roles"):
            parsed = dict.fromkeys(Role.parse(role) for role in roles or [])
            roles = [role for role in parsed if role is not None]
            self.require({"roles": roles}, "roles")

        return self.update(id, success_message="Roles were updated.", roles=roles)

    def set_parent_of(self, id: str, children: list[str]) -> Profile:
        """Replace the profiles this user is the guardian of."""

        with self.handle_errors("Error updating guardian"):
            if id in children:
                raise ValidationError("Users cannot be their own guardian.")

        return self.update(
            id,
            success_message="Guardian was updated.",
            parent_of=list(dict.fromkeys(children)),
        )

    def make_admin(self, email: str) -> Profile:
        """Grant the admin role to the profile with the email."""

        with self.handle_errors("Error granting admin role"):
            self.require({"email": email}, "email")
            profile = self.table.find_by_email(email)

            if profile is None:
                raise RecordDoesNotExist(f"No user with email {email}.")

        if profile.is_admin:
            return profile

        return self.update(
            profile.id,
            success_message=f"{profile} is now an administrator.",
            roles=[*profile.roles, Role.ADMIN],
        )

    def get_users_by_role(self, role: Role | str) -> list[Profile]:
        return [profile for profile in self.items if role in profile.roles]

    def matches(self, profile: Profile, term: str) -> bool:
        return term in profile.name.lower() or term in profile.email.lower()

    def search_users(self, term: Optional[str]) -> list[Profile]:
        """Find profiles by name or email, ignoring case."""

        term = (term or "").strip().lower()
        if not term:
            return self.items

        return [profile for profile in self.items if self.matches(profile, term)]


class AllUsersStore(UserStore):
    """All profiles including inactive ones, shown to admins."""

    cache_key = "users:all"
    filters = {}

    def get_page_size(self):
        return None

    def matches(self, profile: Profile, term: str) -> bool:
        return super().matches(profile, term) or any(
            term in role.value for role in profile.roles
        )
