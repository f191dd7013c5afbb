from unittest.mock import patch

from django.core.exceptions import ObjectDoesNotExist
from django.test import override_settings
from rest_framework.exceptions import ValidationError

from core.abstracts.tests import TestsBase
from lib.supabase import SupabaseError
from users.models import Role
from users.stores import AllUsersStore, UserStore
from users.tests.utils import create_test_profile, create_test_profiles


class UserStoreTests(TestsBase):
    """Unit tests for the user list mirror."""

    def setUp(self):
        super().setUp()
        self.store = UserStore(self.create_request())

    def test_items_newest_first(self):
        """Should list active users, newest registration first."""

        ids = [profile.id for profile in self.store.items]

        self.assertListEqual(ids, ["3", "2", "1"])

    @override_settings(USERS_PAGE_SIZE=2)
    def test_items_page_size(self):
        """Should only fetch one page of users."""

        self.assertLength(self.store.items, 2)

    def test_inactive_users_hidden(self):
        """Should not include deactivated users, unless all users are listed."""

        inactive = create_test_profile(is_active=False)

        self.assertNotIn(inactive.id, [p.id for p in self.store.items])
        self.assertIn(inactive.id, [p.id for p in AllUsersStore().items])

    def test_refresh_keeps_mirror_on_error(self):
        """Should keep the previous records if fetching fails."""

        before = self.store.items

        with patch.object(
            self.backend, "run_query", side_effect=SupabaseError("Network down")
        ):
            records = self.store.refresh()

        self.assertListEqual(records, before)
        self.assertListEqual(self.store.items, before)

    def test_refresh_without_mirror_on_error(self):
        """Should return an empty list if nothing was fetched before."""

        with patch.object(
            self.backend, "run_query", side_effect=SupabaseError("Network down")
        ):
            self.assertListEqual(self.store.refresh(), [])

    def test_update_patches_mirror(self):
        """Should apply updates to the mirror after the backend accepted them."""

        self.store.items
        self.store.update_user("3", name="Maximilian")

        self.assertEqual(self.store.get("3").name, "Maximilian")
        self.assertEqual(self.get_row("profiles", "3")["name"], "Maximilian")

    def test_failed_update_leaves_mirror(self):
        """Should not patch the mirror if the backend rejects the update."""

        self.store.items

        with patch.object(
            self.backend, "run_query", side_effect=SupabaseError("Permission denied")
        ):
            with self.assertRaises(SupabaseError):
                self.store.update_user("3", name="Maximilian")

        self.assertEqual(self.store.get("3").name, "Player Max")

    def test_update_missing_user(self):
        """Should raise not found for unknown ids."""

        with self.assertRaises(ObjectDoesNotExist):
            self.store.update_user("404", name="Nobody")

    def test_deactivate_user(self):
        """Should soft delete the user and drop them from the list."""

        self.store.items
        profile = self.store.deactivate_user("3")

        self.assertFalse(profile.is_active)
        self.assertFalse(self.get_row("profiles", "3")["is_active"])
        self.assertIsNone(self.store.get("3"))

    def test_set_roles(self):
        """Should replace roles, dropping unknown tags and duplicates."""

        profile = self.store.set_roles("3", ["trainer", "player", "trainer", "coach"])

        self.assertListEqual(profile.roles, [Role.TRAINER, Role.PLAYER])
        self.assertListEqual(self.get_row("profiles", "3")["roles"], ["trainer", "player"])

    def test_set_roles_requires_role(self):
        """Should refuse to remove every role from a user."""

        with self.assertRaises(ValidationError):
            self.store.set_roles("3", [])

        with self.assertRaises(ValidationError):
            self.store.set_roles("3", ["coach"])

    def test_set_parent_of(self):
        profile = self.store.set_parent_of("2", ["3"])

        self.assertListEqual(profile.parent_of, ["3"])
        self.assertListEqual(self.get_row("profiles", "2")["parent_of"], ["3"])

        with self.assertRaises(ValidationError):
            self.store.set_parent_of("3", ["3"])

    def test_make_admin(self):
        """Should add the admin role, keeping existing roles."""

        profile = self.store.make_admin("Trainer@Example.com")

        self.assertListEqual(profile.roles, [Role.TRAINER, Role.ADMIN])

    def test_make_admin_twice(self):
        """Should not change users that are already admins."""

        profile = self.store.make_admin("admin@example.com")

        self.assertListEqual(profile.roles, [Role.ADMIN])
        self.assertEqual(self.get_row("profiles", "1")["roles"], ["admin"])

    def test_make_admin_unknown_email(self):
        """Should raise not found for unknown emails."""

        with self.assertRaises(ObjectDoesNotExist):
            self.store.make_admin("nobody@example.com")

    def test_search_users(self):
        """Should search names and emails, ignoring case."""

        create_test_profiles(3)
        profile = create_test_profile(name="Lara Libero", email="lara@example.com")
        self.store.refresh()

        results = self.store.search_users("LIBERO")

        self.assertListEqual([p.id for p in results], [profile.id])
        self.assertEqual(len(self.store.search_users("")), len(self.store.items))

    def test_all_users_search_roles(self):
        """Should also match role tags when searching all users."""

        results = AllUsersStore().search_users("trainer")

        self.assertIn("2", [p.id for p in results])

    def test_get_users_by_role(self):
        """Should filter the mirror by role."""

        trainers = self.store.get_users_by_role(Role.TRAINER)

        self.assertListEqual([p.id for p in trainers], ["2"])
