import io
from datetime import timedelta
from typing import Iterable, Literal, Optional

import icalendar
from django.utils import timezone

from core.abstracts.services import ServiceBase
from events.models import Event
from users.models import Profile

EVENT_DURATION = timedelta(minutes=90)
"""Length of events that have a start time."""


class EventService(ServiceBase[Event]):
    """Participation and calendar export of events."""

    model = Event

    def is_participating(self, profile: Optional[Profile]) -> bool:
        if profile is None or profile.id is None:
            return False

        return profile.id in self.obj.participants

    def can_join(self) -> bool:
        """If the event has capacity left, events without limit always do."""

        return not self.obj.is_full

    def participation_label(
        self, profile: Optional[Profile]
    ) -> Literal["leave", "join", "full"]:
        """Action offered to the profile for this event."""

        if self.is_participating(profile):
            return "leave"
        elif self.can_join():
            return "join"

        return "full"

    @staticmethod
    def create_calendar(name: str):
        cal = icalendar.Calendar()
        cal.add("PRODID", "-//Club Portal//Volleyball Club//EN")
        cal.add("VERSION", "2.0")
        cal.add("X-WR-CALNAME", name)
        # Suggest refresh interval of 1hr
        cal.add("X-PUBLISHED-TTL", "PT1H")
        return cal

    def create_calendar_event(self):
        event = self.obj

        e = icalendar.Event()
        e.add("UID", f"event-{event.id}@club-portal")
        e.add("SUMMARY", event.title)
        e.add("CATEGORIES", [event.type])

        if event.description:
            e.add("DESCRIPTION", event.description)
        if event.location:
            e.add("LOCATION", event.location)

        if event.start_at is not None:
            start_at = timezone.make_aware(event.start_at)
            e.add("DTSTART", start_at)
            e.add("DTEND", start_at + EVENT_DURATION)
        elif event.date is not None:
            # All day
            e.add("DTSTART", event.date)
            e.add("DTEND", event.date + timedelta(days=1))

        return e

    @classmethod
    def get_calendar(cls, events: Iterable[Event], name: str):
        """Generates an ICS file containing the events."""

        cal = cls.create_calendar(name)
        cal.add("X-WR-CALDESC", f"Calendar for {name}")

        for event in events:
            if event.date is None:
                continue

            cal.add_component(cls(event).create_calendar_event())

        cal.add_missing_timezones()

        buffer = io.BytesIO(cal.to_ical())
        buffer.seek(0)
        return buffer
