from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action
from rest_framework.response import Response

from core.abstracts.viewsets import FilterBackendBase, StoreViewSetBase
from teams.models import Team
from teams.serializers import (
    CaptainSerializer,
    MemberSerializer,
    RosterSerializer,
    TeamSerializer,
)
from teams.stores import TeamStore
from users.permissions import Action
from users.stores import AllUsersStore


class TeamFilter(FilterBackendBase):
    """Filter teams by classification and membership."""

    filter_fields = [
        {"name": "category", "schema_type": "string"},
        {"name": "gender", "schema_type": "string"},
        {
            "name": "mine",
            "schema_type": "boolean",
            "description": "Only teams of the authenticated user.",
        },
    ]

    def filter_queryset(self, request, queryset: list[Team], view):
        if self.get_bool_param(request, "mine") and view.profile is not None:
            mine = {team.id for team in view.get_store().get_teams_by_user(view.profile)}
            queryset = [team for team in queryset if team.id in mine]

        category = self.get_query_param(request, "category")
        if category:
            queryset = [team for team in queryset if team.category == category]

        gender = self.get_query_param(request, "gender")
        if gender:
            queryset = [team for team in queryset if team.gender == gender]

        return queryset


class TeamViewSet(StoreViewSetBase[Team]):
    """Manage teams and their members."""

    serializer_class = TeamSerializer
    store_class = TeamStore
    filter_backends = [TeamFilter]

    action_permissions = {
        "create": Action.MANAGE_TEAMS,
        "update": Action.MANAGE_TEAMS,
        "partial_update": Action.MANAGE_TEAMS,
        "destroy": Action.MANAGE_TEAMS,
        "players": Action.MANAGE_TEAMS,
        "trainers": Action.MANAGE_TEAMS,
        "captain": Action.MANAGE_TEAMS,
    }

    def get_serializer_class(self):
        match self.action:
            case "players" | "trainers":
                return MemberSerializer
            case "captain":
                return CaptainSerializer
            case "roster":
                return RosterSerializer

        return super().get_serializer_class()

    def perform_create(self, data: dict) -> Team:
        return self.get_store().create_team(**data)

    def perform_update(self, record: Team, data: dict) -> Team:
        return self.get_store().update_team(record.id, **data)

    def perform_destroy(self, record: Team):
        self.get_store().delete_team(record.id)

    def get_member_id(self, request) -> str:
        data = request.data or request.query_params
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)

        return serializer.validated_data["profile_id"]

    @extend_schema(request=MemberSerializer, responses=TeamSerializer)
    @action(detail=True, methods=["post", "delete"])
    def players(self, request, *args, **kwargs):
        """Add (POST) or remove (DELETE) a player."""

        store = self.get_store()
        profile_id = self.get_member_id(request)

        if request.method == "POST":
            team = store.add_player(kwargs["pk"], profile_id)
        else:
            team = store.remove_player(kwargs["pk"], profile_id)

        return Response(TeamSerializer(team).data)

    @extend_schema(request=MemberSerializer, responses=TeamSerializer)
    @action(detail=True, methods=["post", "delete"])
    def trainers(self, request, *args, **kwargs):
        """Add (POST) or remove (DELETE) a trainer."""

        store = self.get_store()
        profile_id = self.get_member_id(request)

        if request.method == "POST":
            team = store.add_trainer(kwargs["pk"], profile_id)
        else:
            team = store.remove_trainer(kwargs["pk"], profile_id)

        return Response(TeamSerializer(team).data)

    @extend_schema(request=CaptainSerializer, responses=TeamSerializer)
    @action(detail=True, methods=["put"])
    def captain(self, request, *args, **kwargs):
        """Set or clear the captain."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        team = self.get_store().set_captain(
            kwargs["pk"], serializer.validated_data["profile_id"]
        )
        return Response(TeamSerializer(team).data)

    @action(detail=True, methods=["get"])
    def roster(self, request, *args, **kwargs):
        """Profiles of the team's trainers and players."""

        store = self.get_store()
        team = self.get_object()
        users = [user for user in AllUsersStore(request).items if user.is_active]
        players = store.get_team_players(team.id, users)

        payload = {
            "trainers": store.get_team_trainers(team.id, users),
            "players": players,
            "captain": next((user for user in players if user.id == team.captain), None),
        }

        return Response(RosterSerializer(payload).data)
