import datetime
from typing import Optional

from django.urls import reverse

from core.backend import get_client
from events.models import Event, EventType, HelperTask
from events.serializers import EventRowSerializer, HelperTaskRowSerializer
from lib.faker import fake

EVENTS_URL = reverse("api-events:event-list")
EVENTS_CALENDAR_URL = reverse("api-events:event-calendar")
HELPER_TASKS_URL = reverse("api-events:helpertask-list")
HELPER_TASKS_STATS_URL = reverse("api-events:helpertask-stats")


def event_detail_url(event_id: str):
    return reverse("api-events:event-detail", args=[event_id])


def event_join_url(event_id: str):
    return reverse("api-events:event-join", args=[event_id])


def event_leave_url(event_id: str):
    return reverse("api-events:event-leave", args=[event_id])


def helper_task_detail_url(task_id: str):
    return reverse("api-events:helpertask-detail", args=[task_id])


def helper_task_complete_url(task_id: str):
    return reverse("api-events:helpertask-complete", args=[task_id])


def helper_task_reopen_url(task_id: str):
    return reverse("api-events:helpertask-reopen", args=[task_id])


def helper_task_no_show_url(task_id: str):
    return reverse("api-events:helpertask-no-show", args=[task_id])


def create_test_event(
    date: Optional[datetime.date] = None,
    time: Optional[datetime.time] = None,
    **kwargs,
) -> Event:
    """Create event for testing purposes, the row is inserted directly into the backend."""

    date = date or fake.date_between(start_date="+1d", end_date="+60d")

    payload = {
        "title": fake.sentence(nb_words=3),
        "date": date.isoformat(),
        "time": time.strftime("%H:%M") if time else None,
        "type": EventType.TRAINING.value,
        "participants": [],
        "requires_approval": False,
        **kwargs,
    }

    rows = get_client().table("events").insert(payload).execute()
    return EventRowSerializer().to_record(rows[0])


def create_test_helper_task(**kwargs) -> HelperTask:
    """Create helper task for testing purposes."""

    payload = {
        "task": fake.job(),
        "status": "open",
        "priority": "medium",
        "assigned_date": fake.date_time_this_month(tzinfo=datetime.UTC).isoformat(),
        **kwargs,
    }

    rows = get_client().table("helper_tasks").insert(payload).execute()
    return HelperTaskRowSerializer().to_record(rows[0])
