"""
Role based permission checks.
"""

from typing import Optional

from django.db import models
from rest_framework import permissions

from users.models import Profile, Role


class Action(models.TextChoices):
    """Actions a profile can be granted."""

    CREATE_EVENT = "create_event"
    EDIT_EVENT = "edit_event"
    DELETE_EVENT = "delete_event"
    MANAGE_USERS = "manage_users"
    MANAGE_TEAMS = "manage_teams"
    JOIN_EVENT = "join_event"
    MANAGE_HELPER_TASKS = "manage_helper_tasks"
    EDIT_PROFILE = "edit_profile"


ACTION_ROLES: dict[str, frozenset[Role]] = {
    Action.CREATE_EVENT: frozenset({Role.ADMIN, Role.TRAINER}),
    Action.EDIT_EVENT: frozenset({Role.ADMIN, Role.TRAINER}),
    Action.DELETE_EVENT: frozenset({Role.ADMIN}),
    Action.MANAGE_USERS: frozenset({Role.ADMIN}),
    Action.MANAGE_TEAMS: frozenset({Role.ADMIN, Role.TRAINER}),
    Action.JOIN_EVENT: frozenset({Role.PLAYER, Role.TRAINER, Role.ADMIN}),
    Action.MANAGE_HELPER_TASKS: frozenset({Role.ADMIN, Role.TRAINER}),
    Action.EDIT_PROFILE: frozenset({Role.ADMIN}),
}
"""Roles granted each action."""

SELF_ACTIONS = frozenset({Action.EDIT_PROFILE})
"""Actions any profile can perform on itself."""


def has_permission(
    profile: Optional[Profile],
    action: str,
    target_user_id: Optional[str] = None,
    team_id: Optional[str] = None,
) -> bool:
    """
    Check if a profile can perform an action.

    Parameters
    ----------
        profile (Profile) : Signed in profile, denied if none or inactive
        action (str) : Action name, unknown actions are denied
        target_user_id (str) : Profile the action is performed on
        team_id (str) : Accepted for call sites that pass it, does not change the result
    """

    if profile is None or not profile.is_active:
        return False

    granted_roles = ACTION_ROLES.get(action)
    if granted_roles is None:
        return False

    if any(role in granted_roles for role in profile.roles):
        return True

    return (
        action in SELF_ACTIONS
        and target_user_id is not None
        and target_user_id == profile.id
    )


def get_permissions(profile: Optional[Profile]) -> list[str]:
    """List all actions granted to a profile, not including self actions."""

    return [action for action in ACTION_ROLES if has_permission(profile, action)]


class HasActionPermission(permissions.BasePermission):
    """
    Check role permissions via api.

    Viewsets define ``action_permissions``, mapping viewset actions
    to permission actions. Viewset actions not in the map are allowed.
    """

    message = "You do not have permission to perform this action."

    def get_profile(self, request) -> Optional[Profile]:
        user = getattr(request, "user", None)
        return user if isinstance(user, Profile) else None

    def has_permission(self, request, view):
        action_map = getattr(view, "action_permissions", {})
        action = action_map.get(getattr(view, "action", None))

        if action is None:
            return True

        target_user_id = view.kwargs.get("pk") if action in SELF_ACTIONS else None

        return has_permission(
            self.get_profile(request), action, target_user_id=target_user_id
        )
