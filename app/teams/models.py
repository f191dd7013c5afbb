"""
Teams mirrored from the teams table.
"""

from dataclasses import dataclass, field
from datetime import time
from typing import Optional

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.abstracts.models import ModelBase


class Category(models.TextChoices):
    """Age group or league of a team."""

    U14 = "U14", _("U14")
    U16 = "U16", _("U16")
    U20 = "U20", _("U20")
    U23 = "U23", _("U23")
    LEAGUE_4 = "4. Liga", _("4. Liga")
    SENIORS = "Seniors", _("Seniors")


class Gender(models.TextChoices):
    MALE = "M", _("Male")
    FEMALE = "F", _("Female")
    MIXED = "Mixed", _("Mixed")


class Weekday(models.TextChoices):
    MONDAY = "monday", _("Monday")
    TUESDAY = "tuesday", _("Tuesday")
    WEDNESDAY = "wednesday", _("Wednesday")
    THURSDAY = "thursday", _("Thursday")
    FRIDAY = "friday", _("Friday")
    SATURDAY = "saturday", _("Saturday")
    SUNDAY = "sunday", _("Sunday")


@dataclass(kw_only=True)
class TrainingTime:
    """Weekly training slot."""

    day: Weekday
    start_time: time
    end_time: time
    location: str = ""


@dataclass(kw_only=True)
class Team(ModelBase):
    """Group of players managed by trainers."""

    name: str = ""
    category: Category = Category.SENIORS
    gender: Gender = Gender.MIXED
    season: str = ""
    trainers: list[str] = field(default_factory=list)
    """Profile ids of trainers."""

    players: list[str] = field(default_factory=list)
    """Profile ids of players."""

    captain: Optional[str] = None
    description: Optional[str] = None
    training_times: list[TrainingTime] = field(default_factory=list)
    is_active: bool = True

    @staticmethod
    def get_default_name(category: str, gender: str) -> str:
        return f"{category} {gender}"

    @property
    def members(self) -> list[str]:
        """Trainers and players, without duplicates."""

        return list(dict.fromkeys([*self.trainers, *self.players]))

    def has_member(self, profile_id: str) -> bool:
        return profile_id in self.trainers or profile_id in self.players
