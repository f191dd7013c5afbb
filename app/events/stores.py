"""
Access and mirror events and helper tasks.
"""

from datetime import date
from typing import Optional

from django.conf import settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.abstracts.stores import StoreBase
from core.abstracts.tables import TableBase
from events.models import Event, HelperTask, TaskPriority, TaskStatus
from events.serializers import EventRowSerializer, HelperTaskRowSerializer
from events.services import EventService
from users.models import Profile
from utils.dates import get_month_range


class EventTable(TableBase[Event]):
    """Rows in the events table."""

    table_name = "events"
    serializer_class = EventRowSerializer


class EventStore(StoreBase[Event]):
    """Events ordered by date."""

    table_class = EventTable
    cache_key = "events"
    order_by = "date"

    def get_page_size(self):
        return settings.EVENTS_PAGE_SIZE

    def create_event(self, created_by: Optional[str] = None, **values) -> Event:
        """Create new event, nobody participates yet unless given."""

        with self.handle_errors("Error creating event"):
            self.require(values, "title", "date", "type")

        values.setdefault("participants", [])
        values.setdefault("requires_approval", False)
        if created_by is not None:
            values["created_by"] = created_by

        return self.create(success_message=f"Event {values['title']} was created.", **values)

    def update_event(self, id: str, **changes) -> Event:
        return self.update(id, success_message="Event was updated.", **changes)

    def delete_event(self, id: str):
        return self.remove(id, success_message="Event was deleted.")

    def get_event(self, id: str) -> Event:
        with self.handle_errors("Error loading event"):
            return self.get_or_fetch(id)

    # Participation
    def join_event(self, id: str, profile: Profile) -> Event:
        """Add profile to participants, refused if the event is full."""

        event = self.get_event(id)
        service = EventService(event)

        if service.is_participating(profile):
            return event

        with self.handle_errors("Error joining event"):
            if not service.can_join():
                raise ValidationError({"participants": ["Event is full."]})

        return self.update(
            id,
            success_message=f"Signed up for {event.title}.",
            participants=[*event.participants, profile.id],
        )

    def leave_event(self, id: str, profile: Profile) -> Event:
        event = self.get_event(id)

        if not EventService(event).is_participating(profile):
            return event

        return self.update(
            id,
            success_message=f"Signed off from {event.title}.",
            participants=[pid for pid in event.participants if pid != profile.id],
        )

    # Calendar
    def get_personal_events(self, profile: Profile) -> list[Event]:
        """
        Events shown in a user's calendar.

        Admins see every event, everyone else sees club wide events
        and events of their teams.
        """

        if profile.is_admin:
            return self.items

        teams = {*profile.teams, *profile.assigned_teams}
        return [
            event for event in self.items if not event.team_id or event.team_id in teams
        ]

    def events_on(self, day: date, events: Optional[list[Event]] = None) -> list[Event]:
        events = self.items if events is None else events
        return [event for event in events if event.date == day]

    def events_in_month(
        self, year: int, month: int, events: Optional[list[Event]] = None
    ) -> list[Event]:
        start, end = get_month_range(year, month)
        events = self.items if events is None else events

        return [
            event
            for event in events
            if event.date is not None and start <= event.date <= end
        ]

    def upcoming_events(
        self, limit: Optional[int] = 5, events: Optional[list[Event]] = None
    ) -> list[Event]:
        """Next events from today on, soonest first."""

        today = timezone.localdate()
        events = self.items if events is None else events

        upcoming = sorted(
            (event for event in events if event.date is not None and event.date >= today),
            key=lambda event: (event.date, event.time is not None, event.time),
        )
        return upcoming[:limit] if limit is not None else upcoming


class HelperTaskTable(TableBase[HelperTask]):
    """Rows in the helper_tasks table."""

    table_name = "helper_tasks"
    serializer_class = HelperTaskRowSerializer


class HelperTaskStore(StoreBase[HelperTask]):
    """Helper tasks, newest first."""

    table_class = HelperTaskTable
    cache_key = "helper_tasks"
    order_by = "created_at"
    order_desc = True

    def get_current_profile_id(self) -> Optional[str]:
        user = getattr(self.request, "user", None)
        return getattr(user, "id", None)

    def create_task(self, **values) -> HelperTask:
        """Create open task assigned now, created by the current user."""

        with self.handle_errors("Error creating helper task"):
            self.require(values, "task")

        values.setdefault("status", TaskStatus.OPEN)
        values.setdefault("priority", TaskPriority.MEDIUM)
        values.setdefault("assigned_date", timezone.now())
        values.setdefault("created_by", self.get_current_profile_id())

        return self.create(success_message=f"Task {values['task']} was created.", **values)

    def update_task(self, id: str, **changes) -> HelperTask:
        return self.update(id, success_message="Task was updated.", **changes)

    def delete_task(self, id: str):
        return self.remove(id, success_message="Task was deleted.")

    def complete_task(self, id: str) -> HelperTask:
        return self.update(
            id,
            success_message="Task was completed.",
            status=TaskStatus.COMPLETED,
            completed_date=timezone.now(),
        )

    def reopen_task(self, id: str) -> HelperTask:
        """Set task to open again, the completion date is kept as history."""

        return self.update(id, success_message="Task was reopened.", status=TaskStatus.OPEN)

    def mark_no_show(self, id: str) -> HelperTask:
        return self.update(
            id, success_message="Task was marked as no-show.", status=TaskStatus.NO_SHOW
        )

    def get_tasks_for_event(self, event_id: str) -> list[HelperTask]:
        return [task for task in self.items if task.event_id == event_id]

    def get_tasks_for_user(self, profile_id: str) -> list[HelperTask]:
        return [task for task in self.items if task.assigned_to == profile_id]

    def stats(self, tasks: Optional[list[HelperTask]] = None) -> dict[str, int]:
        """Count tasks per status."""

        tasks = self.items if tasks is None else tasks

        return {
            "total": len(tasks),
            "open": sum(1 for task in tasks if task.status == TaskStatus.OPEN),
            "completed": sum(1 for task in tasks if task.status == TaskStatus.COMPLETED),
            "no_show": sum(1 for task in tasks if task.status == TaskStatus.NO_SHOW),
        }
