from typing import Optional

from django.urls import reverse

from core.backend import get_client
from lib.faker import fake
from teams.models import Category, Gender, Team
from teams.serializers import TeamRowSerializer

TEAMS_URL = reverse("api-teams:team-list")


def team_detail_url(team_id: str):
    return reverse("api-teams:team-detail", args=[team_id])


def team_players_url(team_id: str):
    return reverse("api-teams:team-players", args=[team_id])


def team_trainers_url(team_id: str):
    return reverse("api-teams:team-trainers", args=[team_id])


def team_captain_url(team_id: str):
    return reverse("api-teams:team-captain", args=[team_id])


def team_roster_url(team_id: str):
    return reverse("api-teams:team-roster", args=[team_id])


def create_test_team(
    trainers: Optional[list[str]] = None, players: Optional[list[str]] = None, **kwargs
) -> Team:
    """Create team for testing purposes, the row is inserted directly into the backend."""

    payload = {
        "name": f"{fake.city()} Volleys",
        "category": fake.random_element(Category.values),
        "gender": fake.random_element(Gender.values),
        "season": "2024/25",
        "trainers": trainers or [],
        "players": players or [],
        "training_times": [],
        "is_active": True,
        **kwargs,
    }

    rows = get_client().table("teams").insert(payload).execute()
    return TeamRowSerializer().to_record(rows[0])
