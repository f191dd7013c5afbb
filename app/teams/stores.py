"""
Access and mirror teams.
"""

import logging
from typing import Optional

from rest_framework.exceptions import ValidationError

from core.abstracts.stores import STORE_ERRORS, StoreBase
from core.abstracts.tables import TableBase
from teams.models import Team
from teams.serializers import TeamRowSerializer
from users.models import Profile
from users.services import AuthService
from users.stores import UserStore

logger = logging.getLogger(__name__)


def toggle_item(items: list[str], item: str, present: bool) -> list[str]:
    """Add or remove item from list, keeping order."""

    if present and item not in items:
        return [*items, item]
    elif not present:
        return [value for value in items if value != item]

    return list(items)


class TeamTable(TableBase[Team]):
    """Rows in the teams table."""

    table_name = "teams"
    serializer_class = TeamRowSerializer


class TeamStore(StoreBase[Team]):
    """Active teams ordered by name."""

    table_class = TeamTable
    cache_key = "teams"
    filters = {"is_active": True}
    order_by = "name"

    def create_team(self, **values) -> Team:
        """
        Create new team.

        If no name is given, the name is derived from category and gender.
        """

        with self.handle_errors("Error creating team"):
            self.require(values, "category", "gender")

        if not values.get("name"):
            values["name"] = Team.get_default_name(values["category"], values["gender"])

        values.setdefault("trainers", [])
        values.setdefault("players", [])
        values.setdefault("training_times", [])
        values.setdefault("is_active", True)

        return self.create(success_message=f"Team {values['name']} was created.", **values)

    def update_team(self, id: str, **changes) -> Team:
        return self.update(id, success_message="Team was updated.", **changes)

    def delete_team(self, id: str) -> Team:
        """Soft delete team, it is removed from the list."""

        return self.deactivate(id, success_message="Team was deleted.")

    # Members
    def get_team(self, id: str) -> Team:
        with self.handle_errors("Error loading team"):
            return self.get_or_fetch(id)

    def _set_member(self, team_id: str, field: str, profile_id: str, present: bool):
        team = self.get_team(team_id)
        members = getattr(team, field)

        if (profile_id in members) == present:
            return team

        changes = {field: toggle_item(members, profile_id, present)}
        if field == "players" and not present and team.captain == profile_id:
            changes["captain"] = None

        team = self.update(team_id, **changes)
        self.sync_profile(team, profile_id)

        return team

    def sync_profile(self, team: Team, profile_id: str):
        """
        Update the team lists on a member's profile.

        This is separate from the team update, if it fails the error
        is logged and the team change is kept.
        """

        users = UserStore(self.request, client=self.table._client)

        try:
            profile = users.get_or_fetch(profile_id)
        except STORE_ERRORS as e:
            logger.error("Error loading profile %s for team %s: %s", profile_id, team.id, e)
            self.notify_error(f"Error updating teams of user: {e}")
            return

        changes = {
            "teams": toggle_item(profile.teams, team.id, team.has_member(profile_id)),
            "assigned_teams": toggle_item(
                profile.assigned_teams, team.id, profile_id in team.trainers
            ),
        }
        changes = {
            key: value for key, value in changes.items() if value != getattr(profile, key)
        }

        if not changes:
            return

        try:
            users.update(profile_id, **changes)
        except STORE_ERRORS:
            # Logged and notified by the user store
            return

        AuthService.forget_profile(profile_id)

    def add_player(self, team_id: str, profile_id: str) -> Team:
        return self._set_member(team_id, "players", profile_id, True)

    def remove_player(self, team_id: str, profile_id: str) -> Team:
        return self._set_member(team_id, "players", profile_id, False)

    def add_trainer(self, team_id: str, profile_id: str) -> Team:
        return self._set_member(team_id, "trainers", profile_id, True)

    def remove_trainer(self, team_id: str, profile_id: str) -> Team:
        return self._set_member(team_id, "trainers", profile_id, False)

    def set_captain(self, team_id: str, profile_id: Optional[str]) -> Team:
        """Set captain of team, the captain must be a player."""

        team = self.get_team(team_id)

        with self.handle_errors("Error setting captain"):
            if profile_id is not None and profile_id not in team.players:
                raise ValidationError({"captain": ["Captain must be a player of the team."]})

        return self.update(team_id, success_message="Captain was updated.", captain=profile_id)

    # Lookups
    def get_teams_by_user(self, profile: Profile) -> list[Team]:
        """
        Teams visible to a profile.

        Admins see all teams, trainers see teams they train, and
        players see teams they play in.
        """

        if profile.is_admin:
            return self.items

        return [
            team
            for team in self.items
            if (profile.is_trainer and profile.id in team.trainers)
            or (profile.is_player and profile.id in team.players)
        ]

    def get_team_players(self, team_id: str, users: list[Profile]) -> list[Profile]:
        team = self.get_team(team_id)
        return [user for user in users if user.id in team.players]

    def get_team_trainers(self, team_id: str, users: list[Profile]) -> list[Profile]:
        team = self.get_team(team_id)
        return [user for user in users if user.id in team.trainers]
