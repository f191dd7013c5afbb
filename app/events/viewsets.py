from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import exceptions
from rest_framework.decorators import action
from rest_framework.response import Response

from core.abstracts.viewsets import FilterBackendBase, StoreViewSetBase
from events.models import Event, HelperTask
from events.serializers import (
    EventSerializer,
    HelperTaskSerializer,
    HelperTaskStatsSerializer,
)
from events.services import EventService
from events.stores import EventStore, HelperTaskStore
from users.permissions import Action
from utils.dates import parse_date, parse_month


class EventFilter(FilterBackendBase):
    """Filter events by day, month, or visibility."""

    filter_fields = [
        {
            "name": "date",
            "schema_type": "string",
            "description": "Only events on this day, YYYY-MM-DD.",
        },
        {
            "name": "month",
            "schema_type": "string",
            "description": "Only events in this month, YYYY-MM.",
        },
        {
            "name": "personal",
            "schema_type": "boolean",
            "description": "Only events in the calendar of the authenticated user.",
        },
        {
            "name": "upcoming",
            "schema_type": "boolean",
            "description": "Only events from today on, soonest first.",
        },
    ]

    def filter_queryset(self, request, queryset: list[Event], view):
        store: EventStore = view.get_store()

        if self.get_bool_param(request, "personal") and view.profile is not None:
            personal = {event.id for event in store.get_personal_events(view.profile)}
            queryset = [event for event in queryset if event.id in personal]

        day = self.get_query_param(request, "date")
        if day:
            parsed = parse_date(day)
            if parsed is None:
                raise exceptions.ValidationError({"date": ["Enter a valid date."]})

            queryset = store.events_on(parsed, events=queryset)

        month = self.get_query_param(request, "month")
        if month:
            try:
                year, month = parse_month(month)
            except ValueError:
                raise exceptions.ValidationError({"month": ["Enter a month as YYYY-MM."]})

            queryset = store.events_in_month(year, month, events=queryset)

        if self.get_bool_param(request, "upcoming"):
            queryset = store.upcoming_events(limit=None, events=queryset)

        return queryset


class EventViewSet(StoreViewSetBase[Event]):
    """Manage events and participation."""

    serializer_class = EventSerializer
    store_class = EventStore
    filter_backends = [EventFilter]

    action_permissions = {
        "create": Action.CREATE_EVENT,
        "update": Action.EDIT_EVENT,
        "partial_update": Action.EDIT_EVENT,
        "destroy": Action.DELETE_EVENT,
        "join": Action.JOIN_EVENT,
        "leave": Action.JOIN_EVENT,
    }

    def perform_create(self, data: dict) -> Event:
        return self.get_store().create_event(created_by=self.profile.id, **data)

    def perform_update(self, record: Event, data: dict) -> Event:
        return self.get_store().update_event(record.id, **data)

    def perform_destroy(self, record: Event):
        self.get_store().delete_event(record.id)

    @extend_schema(request=None)
    @action(detail=True, methods=["post"])
    def join(self, request, *args, **kwargs):
        """Sign up the authenticated user for the event."""

        event = self.get_store().join_event(kwargs["pk"], self.profile)
        return self.get_response(event)

    @extend_schema(request=None)
    @action(detail=True, methods=["post"])
    def leave(self, request, *args, **kwargs):
        """Sign off the authenticated user from the event."""

        event = self.get_store().leave_event(kwargs["pk"], self.profile)
        return self.get_response(event)

    @extend_schema(responses={(200, "text/calendar"): OpenApiTypes.BINARY})
    @action(detail=False, methods=["get"])
    def calendar(self, request, *args, **kwargs):
        """Download events as iCalendar file, accepts the list filters."""

        events = self.filter_records(self.get_records())
        file = EventService.get_calendar(events, "Club Events")

        return FileResponse(
            file,
            as_attachment=True,
            filename="events.ics",
            content_type="text/calendar",
        )


class HelperTaskFilter(FilterBackendBase):
    """Filter helper tasks by event, status, or assignee."""

    filter_fields = [
        {"name": "event", "schema_type": "string"},
        {"name": "status", "schema_type": "string"},
        {"name": "assigned_to", "schema_type": "string"},
    ]

    def filter_queryset(self, request, queryset: list[HelperTask], view):
        event_id = self.get_query_param(request, "event")
        if event_id:
            queryset = [task for task in queryset if task.event_id == event_id]

        status = self.get_query_param(request, "status")
        if status:
            queryset = [task for task in queryset if task.status == status]

        assigned_to = self.get_query_param(request, "assigned_to")
        if assigned_to:
            queryset = [task for task in queryset if task.assigned_to == assigned_to]

        return queryset


class HelperTaskViewSet(StoreViewSetBase[HelperTask]):
    """Manage helper tasks."""

    serializer_class = HelperTaskSerializer
    store_class = HelperTaskStore
    filter_backends = [HelperTaskFilter]

    action_permissions = {
        "create": Action.MANAGE_HELPER_TASKS,
        "update": Action.MANAGE_HELPER_TASKS,
        "partial_update": Action.MANAGE_HELPER_TASKS,
        "destroy": Action.MANAGE_HELPER_TASKS,
        "complete": Action.MANAGE_HELPER_TASKS,
        "reopen": Action.MANAGE_HELPER_TASKS,
        "no_show": Action.MANAGE_HELPER_TASKS,
    }

    def perform_create(self, data: dict) -> HelperTask:
        return self.get_store().create_task(**data)

    def perform_update(self, record: HelperTask, data: dict) -> HelperTask:
        return self.get_store().update_task(record.id, **data)

    def perform_destroy(self, record: HelperTask):
        self.get_store().delete_task(record.id)

    @extend_schema(request=None)
    @action(detail=True, methods=["post"])
    def complete(self, request, *args, **kwargs):
        return self.get_response(self.get_store().complete_task(kwargs["pk"]))

    @extend_schema(request=None)
    @action(detail=True, methods=["post"])
    def reopen(self, request, *args, **kwargs):
        """Open task again, keeps the completion date."""

        return self.get_response(self.get_store().reopen_task(kwargs["pk"]))

    @extend_schema(request=None)
    @action(detail=True, methods=["post"], url_path="no-show")
    def no_show(self, request, *args, **kwargs):
        return self.get_response(self.get_store().mark_no_show(kwargs["pk"]))

    @extend_schema(responses=HelperTaskStatsSerializer)
    @action(detail=False, methods=["get"])
    def stats(self, request, *args, **kwargs):
        """Count tasks per status, accepts the list filters."""

        tasks = self.filter_records(self.get_records())
        stats = self.get_store().stats(tasks)

        return Response(HelperTaskStatsSerializer(stats).data)
