"""
User profiles mirrored from the profiles table.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.abstracts.models import Color, ModelBase


class Role(models.TextChoices):
    """Role tags that govern permission checks."""

    ADMIN = "admin", _("Administrator")
    TRAINER = "trainer", _("Trainer")
    PLAYER = "player", _("Player")
    PARENT = "parent", _("Parent")

    @property
    def color(self) -> str:
        """Badge color shown next to the role."""
        return ROLE_COLORS.get(self, Color.GREY)

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Get role from tag, returns None for unknown tags."""

        try:
            return cls(value)
        except ValueError:
            return None


ROLE_COLORS = {
    Role.ADMIN: Color.RED,
    Role.TRAINER: Color.BLUE,
    Role.PLAYER: Color.GREEN,
    Role.PARENT: Color.PURPLE,
}


def default_roles():
    return [Role.PLAYER]


@dataclass(kw_only=True)
class Profile(ModelBase):
    """Application level user record."""

    name: str = ""
    email: str = ""
    roles: list[Role] = field(default_factory=default_roles)
    teams: list[str] = field(default_factory=list)
    assigned_teams: list[str] = field(default_factory=list)
    """Teams a trainer manages."""

    parent_of: list[str] = field(default_factory=list)
    """Profile ids of children, for parents."""

    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_image: Optional[str] = None
    is_active: bool = True

    # Django auth compatibility, allows profiles to be used as request.user
    is_authenticated = True
    is_anonymous = False

    def __str__(self):
        return self.name or self.email

    @property
    def registration_date(self):
        return self.created_at

    @property
    def pk(self):
        return self.id

    def has_role(self, *roles: Role | str) -> bool:
        """Profile has any of the given roles."""

        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    @property
    def is_trainer(self) -> bool:
        return self.has_role(Role.TRAINER)

    @property
    def is_player(self) -> bool:
        return self.has_role(Role.PLAYER)

    @property
    def role_labels(self) -> list[str]:
        return [str(role.label) for role in self.roles]
