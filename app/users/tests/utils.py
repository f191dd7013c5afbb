from typing import Optional

from django.urls import reverse

from core.backend import get_client
from lib.faker import fake
from users.models import Profile, Role
from users.serializers import ProfileRowSerializer

USERS_URL = reverse("api-users:user-list")
ME_URL = reverse("api-users:me")
LOGIN_URL = reverse("api-users:auth-login")
SIGNUP_URL = reverse("api-users:auth-signup")
LOGOUT_URL = reverse("api-users:auth-logout")
OAUTH_URL = reverse("api-users:auth-oauth")
OAUTH_CALLBACK_URL = reverse("api-users:auth-oauth-callback")
SESSION_URL = reverse("api-users:auth-session")
MAKE_ADMIN_URL = reverse("api-users:user-make-admin")


def user_detail_url(user_id: str):
    return reverse("api-users:user-detail", args=[user_id])


def user_roles_url(user_id: str):
    return reverse("api-users:user-roles", args=[user_id])


def user_active_url(user_id: str):
    return reverse("api-users:user-active", args=[user_id])


def user_parent_of_url(user_id: str):
    return reverse("api-users:user-parent-of", args=[user_id])


def create_test_profile(roles: Optional[list[Role | str]] = None, **kwargs) -> Profile:
    """
    Create profile for testing purposes.

    The row is inserted directly into the current backend, no mirrors are patched.
    """

    payload = {
        "name": fake.name(),
        "email": fake.unique.safe_email().lower(),
        "roles": [Role(role).value for role in (roles or [Role.PLAYER])],
        "teams": [],
        "assigned_teams": [],
        "parent_of": [],
        "is_active": True,
        **kwargs,
    }

    rows = get_client().table("profiles").insert(payload).execute()
    return ProfileRowSerializer().to_record(rows[0])


def create_test_profiles(count=5, **kwargs) -> list[Profile]:
    """Create multiple test profiles."""

    return [create_test_profile(**kwargs) for _ in range(count)]
