"""
Unit tests for the remote backend client, requests are mocked.
"""

import json
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import requests

from core.abstracts.tests import TestsBase
from lib.supabase import AuthSession, SupabaseClient, SupabaseError


def create_response(status_code=200, payload=None, reason="OK") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = json.dumps(payload).encode() if payload is not None else b""

    return response


class TableQueryTests(TestsBase):
    """Unit tests for building table queries."""

    def setUp(self):
        super().setUp()
        self.client = SupabaseClient("https://backend.example.com/", "anon-key")

    def test_get_params(self):
        query = (
            self.client.table("profiles")
            .select("id,name")
            .eq("is_active", True)
            .eq("email", "max@example.com")
            .order("registration_date", desc=True)
            .limit(50)
        )

        self.assertDictEqual(
            query.get_params(),
            {
                "select": "id,name",
                "is_active": "eq.true",
                "email": "eq.max@example.com",
                "order": "registration_date.desc",
                "limit": 50,
            },
        )

    def test_get_params_null(self):
        query = self.client.table("events").select().eq("team_id", None)

        self.assertEqual(query.get_params()["team_id"], "is.null")

    def test_update_params(self):
        """Should not select columns when updating rows."""

        query = self.client.table("teams").update({"name": "U14"}).eq("id", "1")

        self.assertDictEqual(query.get_params(), {"id": "eq.1"})


class SupabaseClientTests(TestsBase):
    """Unit tests for sending requests to the backend."""

    def setUp(self):
        super().setUp()
        self.client = SupabaseClient("https://backend.example.com/", "anon-key")

    def test_run_query(self):
        """Should send query to the rest endpoint and return rows."""

        rows = [{"id": "1", "name": "U14 M"}]

        with patch.object(
            self.client.session, "request", return_value=create_response(payload=rows)
        ) as request:
            result = self.client.table("teams").select("*").eq("id", "1").execute()

        self.assertListEqual(result, rows)

        args, kwargs = request.call_args
        self.assertEqual(args, ("GET", "https://backend.example.com/rest/v1/teams"))
        self.assertEqual(kwargs["params"], {"select": "*", "id": "eq.1"})
        self.assertEqual(kwargs["headers"]["apikey"], "anon-key")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer anon-key")

    def test_run_query_user_token(self):
        """Should send the user's token and ask for changed rows on writes."""

        with patch.object(
            self.client.session, "request", return_value=create_response(payload=[])
        ) as request:
            self.client.table("events", access_token="user-token").update(
                {"title": "Changed"}
            ).eq("id", "1").execute()

        headers = request.call_args.kwargs["headers"]
        self.assertEqual(headers["Authorization"], "Bearer user-token")
        self.assertEqual(headers["Prefer"], "return=representation")

    def test_empty_response(self):
        with patch.object(
            self.client.session, "request", return_value=create_response(204)
        ):
            result = self.client.table("events").delete().eq("id", "1").execute()

        self.assertListEqual(result, [])

    def test_error_response(self):
        """Should raise error with message and code of the backend."""

        payload = {
            "message": "JSON object requested, multiple (or no) rows returned",
            "code": "PGRST116",
        }

        with patch.object(
            self.client.session,
            "request",
            return_value=create_response(406, payload, reason="Not Acceptable"),
        ):
            with self.assertRaises(SupabaseError) as ctx:
                self.client.table("events").select().execute()

        self.assertEqual(ctx.exception.code, "PGRST116")
        self.assertEqual(ctx.exception.status_code, 406)
        self.assertTrue(ctx.exception.is_not_found)
        self.assertIn("no) rows", ctx.exception.message)

    def test_auth_error_response(self):
        payload = {
            "error": "invalid_grant",
            "error_description": "Invalid login credentials",
        }

        with patch.object(
            self.client.session,
            "request",
            return_value=create_response(400, payload, reason="Bad Request"),
        ):
            with self.assertRaises(SupabaseError) as ctx:
                self.client.auth.sign_in_with_password("max@example.com", "wrong")

        self.assertEqual(ctx.exception.message, "Invalid login credentials")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertFalse(ctx.exception.is_not_found)

    def test_error_without_payload(self):
        with patch.object(
            self.client.session,
            "request",
            return_value=create_response(503, reason="Service Unavailable"),
        ):
            with self.assertRaises(SupabaseError) as ctx:
                self.client.ping()

        self.assertEqual(ctx.exception.message, "Service Unavailable")

    def test_network_error(self):
        """Should raise backend errors for connection problems."""

        with patch.object(
            self.client.session,
            "request",
            side_effect=requests.ConnectionError("Connection refused"),
        ):
            with self.assertRaises(SupabaseError) as ctx:
                self.client.ping(timeout=1)

        self.assertIn("Unable to reach backend", ctx.exception.message)
        self.assertIsNone(ctx.exception.status_code)

    def test_sign_in_with_password(self):
        payload = {
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_in": 3600,
            "user": {"id": "user-1", "email": "max@example.com"},
        }

        with patch.object(
            self.client.session, "request", return_value=create_response(payload=payload)
        ) as request:
            session = self.client.auth.sign_in_with_password("max@example.com", "secret")

        self.assertIsInstance(session, AuthSession)
        self.assertEqual(session.user_id, "user-1")
        self.assertEqual(session.access_token, "access")
        self.assertFalse(session.is_expired)
        self.assertEqual(request.call_args.kwargs["params"], {"grant_type": "password"})

    def test_sign_in_with_oauth(self):
        """Should return the authorize url and the code verifier."""

        url, verifier = self.client.auth.sign_in_with_oauth(
            "google", "https://portal.example.com/callback"
        )

        parsed = urlparse(url)
        query = parse_qs(parsed.query)

        self.assertEqual(parsed.netloc, "backend.example.com")
        self.assertEqual(parsed.path, "/auth/v1/authorize")
        self.assertEqual(query["provider"], ["google"])
        self.assertEqual(query["redirect_to"], ["https://portal.example.com/callback"])
        self.assertEqual(query["code_challenge_method"], ["s256"])
        self.assertNotIn(verifier, url)
        self.assertGreater(len(verifier), 40)
