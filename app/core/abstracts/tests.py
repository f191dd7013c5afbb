from typing import Optional

from django.core.cache import cache
from django.http import HttpResponse
from django.test import SimpleTestCase, override_settings
from requests import Response
from rest_framework import status
from rest_framework.test import APIClient, APIRequestFactory

from core.backend import reset_client, set_client
from core.mock.backend import DemoClient
from users.models import Profile, Role
from users.tests.utils import create_test_profile


@override_settings(BACKEND_DEMO_MODE=True)
class TestsBase(SimpleTestCase):
    """
    Abstract testing utilities.

    Each test runs against a fresh demo backend and an empty cache.
    """

    client_class = APIClient

    backend: DemoClient

    def setUp(self):
        super().setUp()

        self.backend = DemoClient()
        set_client(self.backend)

    def tearDown(self):
        reset_client()
        cache.clear()

        super().tearDown()

    def get_rows(self, table: str) -> list[dict]:
        """Rows currently stored in the demo backend."""

        return self.backend.tables.get(table, [])

    def get_row(self, table: str, id: str) -> Optional[dict]:
        for row in self.get_rows(table):
            if row["id"] == id:
                return row

        return None

    def create_request(self, profile: Optional[Profile] = None, path="/"):
        """Create request with session and messages, like the api would receive."""

        request = APIRequestFactory().get(path)
        request.session = {}
        request.user = profile
        request.auth = None

        return request

    def assertLength(self, target: list, length=1, msg=None):
        """Provided list should be specified length."""
        if msg is None:
            msg = f"Invalid length of {len(target)}, expected {length}."

        self.assertEqual(len(target), length, msg)

    def assertListEqual(self, list1: list, list2: list, sort_lists=False, msg=None):
        """Check if two lists are equal. Optionally sort the lists before checking."""

        if sort_lists:
            list1 = sorted(list1)
            list2 = sorted(list2)

        return super().assertListEqual(list1, list2, msg)


class APIClientWrapper(APIClient):
    def get(self, path, data=None, follow=False, **extra) -> Response:
        return super().get(path, data, follow, **extra)

    def post(
        self, path, data=None, format="json", content_type=None, follow=False, **extra
    ) -> Response:
        return super().post(path, data, format, content_type, follow, **extra)

    def put(
        self, path, data=None, format="json", content_type=None, follow=False, **extra
    ) -> Response:
        return super().put(path, data, format, content_type, follow, **extra)

    def patch(
        self, path, data=None, format="json", content_type=None, follow=False, **extra
    ) -> Response:
        return super().patch(path, data, format, content_type, follow, **extra)

    def delete(
        self, path, data=None, format=None, content_type=None, follow=False, **extra
    ) -> Response:
        return super().delete(path, data, format, content_type, follow, **extra)


class PublicApiTestsBase(TestsBase):
    """Abstract testing utilities for api testing."""

    client: APIClientWrapper

    def setUp(self):
        super().setUp()
        self.client = APIClientWrapper()

    def assertStatusCode(
        self, response: Response, status_code: int, message=None, **kwargs
    ):
        """Http Response should have status code."""

        if not message and hasattr(response, "content"):
            message = f"Responded with: {response.content}"
        elif not message:
            message = f"Responded with {response.status_code}"

        self.assertEqual(response.status_code, status_code, message, **kwargs)

    def assertResOk(self, response: HttpResponse, **kwargs):
        """Client response should be 200."""
        self.assertStatusCode(response, status.HTTP_200_OK, **kwargs)

    def assertResCreated(self, response: HttpResponse, **kwargs):
        """Client response should be 201."""
        self.assertStatusCode(response, status.HTTP_201_CREATED, **kwargs)

    def assertResNoContent(self, response: HttpResponse, **kwargs):
        """Client response should be 204."""
        self.assertStatusCode(response, status.HTTP_204_NO_CONTENT, **kwargs)

    def assertResBadRequest(self, response: HttpResponse, **kwargs):
        """Client response should be 400"""
        self.assertStatusCode(response, status.HTTP_400_BAD_REQUEST, **kwargs)

    def assertResUnauthorized(self, response: HttpResponse, **kwargs):
        """Client response should be 401."""
        self.assertStatusCode(response, status.HTTP_401_UNAUTHORIZED, **kwargs)

    def assertResForbidden(self, response: HttpResponse, **kwargs):
        """Client response should be 403."""
        self.assertStatusCode(response, status.HTTP_403_FORBIDDEN, **kwargs)

    def assertResNotFound(self, response: HttpResponse, **kwargs):
        """Client response should be 404."""
        self.assertStatusCode(response, status.HTTP_404_NOT_FOUND, **kwargs)

    def assertResBadGateway(self, response: HttpResponse, **kwargs):
        """Client response should be 502."""
        self.assertStatusCode(response, status.HTTP_502_BAD_GATEWAY, **kwargs)


class PrivateApiTestsBase(PublicApiTestsBase):
    """
    Testing utilities for apis where authentication is required.

    A profile is automatically set in each request.
    """

    roles: list[Role] = [Role.ADMIN]
    """Roles of the authenticated profile."""

    def create_authenticated_profile(self) -> Profile:
        """Create the profile that is authenticated in the api."""

        return create_test_profile(roles=self.roles)

    def authenticate(self, profile: Profile):
        self.profile = profile
        self.client.force_authenticate(user=profile, token=f"demo-{profile.id}")

    def setUp(self):
        super().setUp()

        self.authenticate(self.create_authenticated_profile())
