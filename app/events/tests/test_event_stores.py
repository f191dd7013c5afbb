import datetime
from unittest.mock import patch

from django.core.exceptions import ObjectDoesNotExist
from django.test import override_settings
from freezegun import freeze_time
from rest_framework.exceptions import ValidationError

from core.abstracts.tests import TestsBase
from events.models import EventType, TaskPriority, TaskStatus
from events.stores import EventStore, HelperTaskStore
from events.tests.utils import create_test_event, create_test_helper_task
from lib.supabase import SupabaseError
from users.models import Profile, Role


class EventStoreTests(TestsBase):
    """Unit tests for the event mirror."""

    def setUp(self):
        super().setUp()

        self.store = EventStore(self.create_request())
        self.player = Profile(id="3", roles=[Role.PLAYER], teams=["1"])

    def test_items_ordered_by_date(self):
        dates = [event.date for event in self.store.items]

        self.assertListEqual(dates, sorted(dates))
        self.assertEqual(self.store.items[0].time, datetime.time(19, 0))

    @override_settings(EVENTS_PAGE_SIZE=2)
    def test_items_page_size(self):
        self.assertLength(self.store.items, 2)

    def test_create_event(self):
        """Should create event without participants, and show it in the mirror."""

        self.store.items
        event = self.store.create_event(
            title="Beach Training",
            date=datetime.date(2025, 8, 1),
            type=EventType.TRAINING,
            time=datetime.time(18, 30),
            created_by="2",
        )

        self.assertListEqual(event.participants, [])
        self.assertFalse(event.requires_approval)
        self.assertEqual(event.created_by, "2")
        self.assertIn(event.id, [e.id for e in self.store.items])

        row = self.get_row("events", event.id)
        self.assertEqual(row["date"], "2025-08-01")
        self.assertEqual(row["time"], "18:30")

    def test_create_event_without_creator(self):
        event = self.store.create_event(
            title="Club Meeting", date=datetime.date(2025, 8, 1), type=EventType.GAME
        )

        self.assertIsNone(event.created_by)

    def test_create_event_requires_fields(self):
        with self.assertRaises(ValidationError):
            self.store.create_event(title="No date", type=EventType.GAME)

        with self.assertRaises(ValidationError):
            self.store.create_event(date=datetime.date(2025, 8, 1), type=EventType.GAME)

    def test_create_event_backend_failure(self):
        """Should not add events to the mirror if the backend fails."""

        before = self.store.items

        with patch.object(
            self.backend, "run_query", side_effect=SupabaseError("Network down")
        ):
            with self.assertRaises(SupabaseError):
                self.store.create_event(
                    title="Lost", date=datetime.date(2025, 8, 1), type=EventType.GAME
                )

        self.assertListEqual(self.store.items, before)

    def test_update_event(self):
        event = self.store.update_event("1", location="Beach Arena")

        self.assertEqual(event.location, "Beach Arena")
        self.assertEqual(self.store.get("1").location, "Beach Arena")

    def test_delete_event(self):
        """Should remove events from the backend and the mirror."""

        self.store.items
        self.store.delete_event("1")

        self.assertIsNone(self.get_row("events", "1"))
        self.assertIsNone(self.store.get("1"))

    def test_delete_missing_event(self):
        with self.assertRaises(ObjectDoesNotExist):
            self.store.delete_event("404")

    def test_join_and_leave_event(self):
        event = self.store.join_event("1", self.player)
        self.assertListEqual(event.participants, ["3"])

        event = self.store.join_event("1", self.player)
        self.assertListEqual(event.participants, ["3"])

        event = self.store.leave_event("1", self.player)
        self.assertListEqual(event.participants, [])

        event = self.store.leave_event("1", self.player)
        self.assertListEqual(event.participants, [])

    def test_join_full_event(self):
        """Should refuse to join events at capacity."""

        event = create_test_event(max_participants=1, participants=["2"])

        with self.assertRaises(ValidationError):
            self.store.join_event(event.id, self.player)

        self.assertListEqual(self.get_row("events", event.id)["participants"], ["2"])

    def test_get_personal_events(self):
        """Should show club wide events and events of the user's teams."""

        admin = Profile(id="1", roles=[Role.ADMIN])
        outsider = Profile(id="x", roles=[Role.PLAYER])

        self.assertListEqual(
            [e.id for e in self.store.get_personal_events(self.player)], ["1", "3"]
        )
        self.assertListEqual(
            [e.id for e in self.store.get_personal_events(outsider)], ["3"]
        )
        self.assertLength(self.store.get_personal_events(admin), 3)

    def test_events_on(self):
        events = self.store.events_on(datetime.date(2025, 7, 18))

        self.assertListEqual([e.id for e in events], ["2"])
        self.assertListEqual(self.store.events_on(datetime.date(2025, 7, 19)), [])

    def test_events_in_month(self):
        create_test_event(date=datetime.date(2025, 8, 1))
        create_test_event(date=datetime.date(2025, 6, 30))
        self.store.refresh()

        events = self.store.events_in_month(2025, 7)

        self.assertListEqual([e.id for e in events], ["1", "2", "3"])

    @freeze_time("2025-07-16 12:00:00")
    def test_upcoming_events(self):
        """Should list events from today on, soonest first."""

        today = create_test_event(date=datetime.date(2025, 7, 16))
        self.store.refresh()

        events = self.store.upcoming_events(limit=2)

        self.assertListEqual([e.id for e in events], [today.id, "2"])
        self.assertLength(self.store.upcoming_events(limit=None), 3)


class HelperTaskStoreTests(TestsBase):
    """Unit tests for the helper task mirror."""

    def setUp(self):
        super().setUp()

        self.profile = Profile(id="1", roles=[Role.ADMIN])
        self.store = HelperTaskStore(self.create_request(self.profile))

    @freeze_time("2025-07-10 08:00:00")
    def test_create_task(self):
        """Should create open task with medium priority, created by the current user."""

        task = self.store.create_task(task="Scoreboard", event_id="3")

        self.assertEqual(task.status, TaskStatus.OPEN)
        self.assertEqual(task.priority, TaskPriority.MEDIUM)
        self.assertEqual(task.created_by, "1")
        self.assertEqual(
            task.assigned_date, datetime.datetime(2025, 7, 10, 8, tzinfo=datetime.UTC)
        )
        self.assertIsNone(task.completed_date)

    def test_create_task_requires_task(self):
        with self.assertRaises(ValidationError):
            self.store.create_task(task="")

    def test_items_newest_first(self):
        task = create_test_helper_task()
        self.assertEqual(self.store.items[0].id, task.id)

    def test_complete_and_reopen(self):
        """Should set the completion date, and keep it when reopening."""

        task = create_test_helper_task()

        with freeze_time("2025-07-20 10:00:00"):
            completed = self.store.complete_task(task.id)

        self.assertEqual(completed.status, TaskStatus.COMPLETED)
        self.assertIsNotNone(completed.completed_date)

        reopened = self.store.reopen_task(task.id)

        self.assertEqual(reopened.status, TaskStatus.OPEN)
        self.assertEqual(reopened.completed_date, completed.completed_date)
        self.assertEqual(reopened.assigned_date, task.assigned_date)

    def test_mark_no_show(self):
        task = self.store.mark_no_show("1")

        self.assertEqual(task.status, TaskStatus.NO_SHOW)
        self.assertEqual(self.get_row("helper_tasks", "1")["status"], "no-show")

    def test_update_and_delete_task(self):
        task = self.store.update_task("1", priority=TaskPriority.LOW)
        self.assertEqual(task.priority, TaskPriority.LOW)

        self.store.items
        self.store.delete_task("1")
        self.assertIsNone(self.get_row("helper_tasks", "1"))
        self.assertIsNone(self.store.get("1"))

    def test_stats(self):
        self.assertDictEqual(
            self.store.stats(), {"total": 2, "open": 1, "completed": 1, "no_show": 0}
        )

        self.store.mark_no_show("1")

        self.assertDictEqual(
            self.store.stats(), {"total": 2, "open": 0, "completed": 1, "no_show": 1}
        )

    def test_tasks_for_event_and_user(self):
        self.assertLength(self.store.get_tasks_for_event("3"), 2)
        self.assertListEqual([t.id for t in self.store.get_tasks_for_user("3")], ["1"])
