"""
Events and helper tasks mirrored from the events and helper_tasks tables.
"""

import datetime
from dataclasses import dataclass, field
from typing import Optional

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.abstracts.models import Color, ModelBase


class EventType(models.TextChoices):
    """What kind of event is scheduled."""

    TRAINING = "training", _("Training")
    GAME = "game", _("Game")
    TOURNAMENT = "tournament", _("Tournament")
    HELPER = "helper", _("Helper task")

    @property
    def color(self) -> str:
        return EVENT_TYPE_COLORS.get(self, Color.GREY)


EVENT_TYPE_COLORS = {
    EventType.TRAINING: Color.BLUE,
    EventType.GAME: Color.RED,
    EventType.TOURNAMENT: Color.PURPLE,
    EventType.HELPER: Color.ORANGE,
}


class VenueType(models.TextChoices):
    INDOOR = "indoor", _("Indoor")
    BEACH = "beach", _("Beach")
    CLUB = "club", _("Club")


class TaskStatus(models.TextChoices):
    OPEN = "open", _("Open")
    COMPLETED = "completed", _("Completed")
    NO_SHOW = "no-show", _("No-show")


class TaskPriority(models.TextChoices):
    LOW = "low", _("Low")
    MEDIUM = "medium", _("Medium")
    HIGH = "high", _("High")


@dataclass(kw_only=True)
class Event(ModelBase):
    """Training, game, or tournament on the club calendar."""

    title: str = ""
    date: Optional[datetime.date] = None
    type: EventType = EventType.TRAINING
    time: Optional[datetime.time] = None
    """Start time, events without a time last all day."""

    location: Optional[str] = None
    venue_type: Optional[VenueType] = None
    opponent: Optional[str] = None
    description: Optional[str] = None
    max_participants: Optional[int] = None
    participants: list[str] = field(default_factory=list)
    """Profile ids of users that joined."""

    created_by: Optional[str] = None
    requires_approval: bool = False
    team_id: Optional[str] = None

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def is_full(self) -> bool:
        if self.max_participants is None:
            return False

        return self.participant_count >= self.max_participants

    @property
    def start_at(self) -> Optional[datetime.datetime]:
        """Start of event, none for all day events."""

        if self.date is None or self.time is None:
            return None

        return datetime.datetime.combine(self.date, self.time)


@dataclass(kw_only=True)
class HelperTask(ModelBase):
    """Volunteer job, usually linked to an event."""

    event_id: Optional[str] = None
    task: str = ""
    status: TaskStatus = TaskStatus.OPEN
    assigned_to: Optional[str] = None
    assigned_date: Optional[datetime.datetime] = None
    completed_date: Optional[datetime.datetime] = None
    created_by: Optional[str] = None
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM

    @property
    def is_open(self) -> bool:
        return self.status == TaskStatus.OPEN
