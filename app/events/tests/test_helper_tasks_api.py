"""
Tests for the helper tasks API.
"""

from core.abstracts.tests import PrivateApiTestsBase
from events.tests.utils import (
    HELPER_TASKS_STATS_URL,
    HELPER_TASKS_URL,
    create_test_helper_task,
    helper_task_complete_url,
    helper_task_detail_url,
    helper_task_no_show_url,
    helper_task_reopen_url,
)
from users.models import Role


class TrainerHelperTaskApiTests(PrivateApiTestsBase):
    """Test managing helper tasks as a trainer."""

    roles = [Role.TRAINER]

    def test_list_tasks(self):
        res = self.client.get(HELPER_TASKS_URL)

        self.assertResOk(res)
        self.assertEqual(res.data["count"], 2)
        self.assertListEqual([t["id"] for t in res.data["results"]], ["1", "2"])

    def test_filter_tasks(self):
        create_test_helper_task(event_id="1")

        res = self.client.get(HELPER_TASKS_URL, {"event": "3"})
        self.assertListEqual([t["id"] for t in res.data["results"]], ["1", "2"])

        res = self.client.get(HELPER_TASKS_URL, {"status": "completed"})
        self.assertListEqual([t["id"] for t in res.data["results"]], ["2"])

        res = self.client.get(HELPER_TASKS_URL, {"assigned_to": "3"})
        self.assertListEqual([t["id"] for t in res.data["results"]], ["1"])

    def test_create_task(self):
        """Should create open task, created by the authenticated user."""

        payload = {"task": "Aufbau", "event_id": "3", "priority": "high"}

        res = self.client.post(HELPER_TASKS_URL, payload)

        self.assertResCreated(res)
        self.assertEqual(res.data["status"], "open")
        self.assertEqual(res.data["priority"], "high")
        self.assertEqual(res.data["created_by"], self.profile.id)
        self.assertIsNotNone(res.data["assigned_date"])
        self.assertIsNone(res.data["completed_date"])

    def test_create_task_missing_task(self):
        res = self.client.post(HELPER_TASKS_URL, {"event_id": "3"})
        self.assertResBadRequest(res)

    def test_complete_and_reopen(self):
        """Should complete task, reopening keeps the completion date."""

        res = self.client.post(helper_task_complete_url("1"))

        self.assertResOk(res)
        self.assertEqual(res.data["status"], "completed")
        completed_date = res.data["completed_date"]
        self.assertIsNotNone(completed_date)

        res = self.client.post(helper_task_reopen_url("1"))

        self.assertResOk(res)
        self.assertEqual(res.data["status"], "open")
        self.assertEqual(res.data["completed_date"], completed_date)

    def test_no_show(self):
        res = self.client.post(helper_task_no_show_url("1"))

        self.assertResOk(res)
        self.assertEqual(res.data["status"], "no-show")

    def test_complete_missing_task(self):
        res = self.client.post(helper_task_complete_url("404"))
        self.assertResNotFound(res)

    def test_update_task(self):
        res = self.client.patch(helper_task_detail_url("1"), {"assigned_to": "2"})

        self.assertResOk(res)
        self.assertEqual(self.get_row("helper_tasks", "1")["assigned_to"], "2")

    def test_delete_task(self):
        res = self.client.delete(helper_task_detail_url("2"))

        self.assertResNoContent(res)
        self.assertIsNone(self.get_row("helper_tasks", "2"))

    def test_stats(self):
        res = self.client.get(HELPER_TASKS_STATS_URL)

        self.assertResOk(res)
        self.assertDictEqual(
            dict(res.data), {"total": 2, "open": 1, "completed": 1, "no_show": 0}
        )

        res = self.client.get(HELPER_TASKS_STATS_URL, {"assigned_to": "2"})
        self.assertEqual(res.data["total"], 1)
        self.assertEqual(res.data["completed"], 1)


class PlayerHelperTaskApiTests(PrivateApiTestsBase):
    """Test the helper tasks API as a player."""

    roles = [Role.PLAYER]

    def test_list_tasks(self):
        res = self.client.get(HELPER_TASKS_URL)
        self.assertResOk(res)

        res = self.client.get(HELPER_TASKS_STATS_URL)
        self.assertResOk(res)

    def test_manage_tasks_forbidden(self):
        res = self.client.post(HELPER_TASKS_URL, {"task": "Aufbau"})
        self.assertResForbidden(res)

        res = self.client.post(helper_task_complete_url("1"))
        self.assertResForbidden(res)

        res = self.client.post(helper_task_no_show_url("1"))
        self.assertResForbidden(res)

        res = self.client.delete(helper_task_detail_url("1"))
        self.assertResForbidden(res)

        self.assertEqual(self.get_row("helper_tasks", "1")["status"], "open")
