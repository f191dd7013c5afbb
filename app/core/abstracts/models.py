"""
Abstract records for data mirrored from remote tables.
"""

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Self

from django.db import models
from django.utils.translation import gettext_lazy as _


@dataclass(kw_only=True)
class ModelBase:
    """
    Default fields for all records.

    Initializes id, created_at and updated_at fields,
    default __str__ method that returns name, title or task
    if the field exists on the record.
    """

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __str__(self) -> str:
        for field in ("name", "title", "task"):
            if getattr(self, field, None):
                return getattr(self, field)

        return f"{self.__class__.__name__} {self.id}"

    def copy(self, **changes) -> Self:
        """Return new record with fields replaced by changes."""

        return dataclasses.replace(self, **changes)

    @classmethod
    def get_fields_list(cls) -> list[str]:
        """Return a list of all field names."""

        return [field.name for field in dataclasses.fields(cls)]


class Color(models.TextChoices):
    """Badge colors used when displaying choices."""

    RED = "red", _("Red")
    ORANGE = "orange", _("Orange")
    YELLOW = "yellow", _("Yellow")
    GREEN = "green", _("Green")
    BLUE = "blue", _("Blue")
    PURPLE = "purple", _("Purple")
    GREY = "grey", _("Grey")
