"""
REST client for the hosted backend (PostgREST tables + GoTrue auth).

Only the small surface the portal consumes is implemented: equality filters,
ordering and limits on tables, and password/OAuth/sign-up/sign-out session
handling on auth.

Reference:
- https://postgrest.org/en/stable/references/api/tables_views.html
- https://supabase.com/docs/reference/api/introduction
"""

import base64
import hashlib
import logging
import secrets
import time
from dataclasses import asdict, dataclass
from typing import Any, Literal, Optional
from urllib.parse import urlencode

import requests

logger = logging.getLogger(__name__)

NO_ROWS_CODE = "PGRST116"
"""PostgREST error code returned when a single row was requested, but none matched."""


class SupabaseError(Exception):
    """Raised when a remote call fails (network, validation, or authorization)."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.code == NO_ROWS_CODE or self.status_code == 404

    @classmethod
    def from_response(cls, response: requests.Response):
        """Parse PostgREST and GoTrue error payloads."""

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not isinstance(payload, dict):
            payload = {}

        message = (
            payload.get("message")
            or payload.get("msg")
            or payload.get("error_description")
            or payload.get("error")
            or response.reason
            or "Unknown error"
        )
        code = payload.get("code") or payload.get("error_code")

        return cls(str(message), code=str(code) if code else None, status_code=response.status_code)


@dataclass
class AuthSession:
    """Tokens issued by the auth service for a signed in user."""

    access_token: str
    refresh_token: str
    expires_at: int
    user_id: str
    email: Optional[str] = None

    @property
    def is_expired(self) -> bool:
        # Refresh slightly early so tokens don't expire mid request
        return self.expires_at <= int(time.time()) + 10

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict):
        return cls(**data)

    @classmethod
    def from_payload(cls, payload: dict):
        """Create session from token endpoint response."""

        user = payload.get("user") or {}
        expires_at = payload.get("expires_at")
        if expires_at is None:
            expires_at = int(time.time()) + int(payload.get("expires_in", 3600))

        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token", ""),
            expires_at=int(expires_at),
            user_id=user.get("id", ""),
            email=user.get("email"),
        )


class TableQuery:
    """
    Fluent query against a single table.

    Mirrors the shape of the official clients, ex:
    ``client.table("profiles").select("*").eq("is_active", True).limit(50).execute()``
    """

    def __init__(self, client, table: str, access_token: Optional[str] = None):
        self.client = client
        self.table = table
        self.access_token = access_token

        self.method: Literal["GET", "POST", "PATCH", "DELETE"] = "GET"
        self.columns = "*"
        self.filters: list[tuple[str, Any]] = []
        self.ordering: list[tuple[str, bool]] = []
        self.row_limit: Optional[int] = None
        self.payload: Optional[dict | list[dict]] = None

    def select(self, columns="*"):
        self.method = "GET"
        self.columns = columns
        return self

    def insert(self, rows: dict | list[dict]):
        self.method = "POST"
        self.payload = rows
        return self

    def update(self, values: dict):
        self.method = "PATCH"
        self.payload = values
        return self

    def delete(self):
        self.method = "DELETE"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    def execute(self) -> list[dict]:
        """Run query, return affected or selected rows."""

        return self.client.run_query(self)

    def get_params(self) -> dict:
        """Convert query to PostgREST url parameters."""

        params = {}

        if self.method == "GET":
            params["select"] = self.columns

        for column, value in self.filters:
            if value is None:
                params[column] = "is.null"
            elif isinstance(value, bool):
                params[column] = "eq.%s" % str(value).lower()
            else:
                params[column] = "eq.%s" % value

        if self.ordering:
            params["order"] = ",".join(
                "%s.%s" % (column, "desc" if desc else "asc")
                for column, desc in self.ordering
            )

        if self.row_limit is not None:
            params["limit"] = self.row_limit

        return params

    def __repr__(self):
        return f"<TableQuery {self.method} {self.table} {self.get_params()}>"


class SupabaseAuth:
    """Wrapper around the GoTrue auth endpoints."""

    def __init__(self, client: "SupabaseClient"):
        self.client = client

    def _token(self, grant_type: str, payload: dict) -> AuthSession:
        data = self.client.request(
            "POST", "/auth/v1/token", params={"grant_type": grant_type}, json=payload
        )
        return AuthSession.from_payload(data)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        return self._token("password", {"email": email, "password": password})

    def refresh_session(self, refresh_token: str) -> AuthSession:
        return self._token("refresh_token", {"refresh_token": refresh_token})

    def exchange_code_for_session(self, auth_code: str, code_verifier: str):
        return self._token(
            "pkce", {"auth_code": auth_code, "code_verifier": code_verifier}
        )

    def sign_in_with_oauth(self, provider: str, redirect_to: str) -> tuple[str, str]:
        """
        Start PKCE flow with a third party provider.

        Returns the url to send the user to, and the code verifier
        needed to exchange the returned code for a session.
        """

        verifier = secrets.token_urlsafe(48)
        challenge = (
            base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest())
            .decode()
            .rstrip("=")
        )
        query = urlencode(
            {
                "provider": provider,
                "redirect_to": redirect_to,
                "code_challenge": challenge,
                "code_challenge_method": "s256",
            }
        )

        return f"{self.client.url}/auth/v1/authorize?{query}", verifier

    def sign_up(
        self, email: str, password: str, data: Optional[dict] = None
    ) -> tuple[dict, Optional[AuthSession]]:
        """
        Register new user. If email confirmation is enabled, no session
        is returned until the user confirms their email.
        """

        payload = self.client.request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": data or {}},
        )

        if "access_token" in payload:
            return payload.get("user") or {}, AuthSession.from_payload(payload)

        return payload, None

    def sign_out(self, access_token: str):
        self.client.request("POST", "/auth/v1/logout", access_token=access_token)

    def get_user(self, access_token: str) -> dict:
        return self.client.request("GET", "/auth/v1/user", access_token=access_token)


class SupabaseClient:
    """Client for the remote database and auth service."""

    offline = False
    name = "supabase"

    def __init__(self, url: str, key: str, timeout: float = 10):
        self.url = url.rstrip("/")
        self.key = key
        self.timeout = timeout
        self.session = requests.Session()
        self.auth = SupabaseAuth(self)

    def get_headers(self, access_token: Optional[str] = None) -> dict:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {access_token or self.key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[Any] = None,
        headers: Optional[dict] = None,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Send request to backend, raise SupabaseError if anything fails."""

        try:
            response = self.session.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                headers={**self.get_headers(access_token), **(headers or {})},
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            raise SupabaseError(f"Unable to reach backend: {e}") from e

        if response.status_code >= 400:
            raise SupabaseError.from_response(response)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise SupabaseError(
                "Backend returned invalid json.", status_code=response.status_code
            ) from e

    def table(self, name: str, access_token: Optional[str] = None) -> TableQuery:
        return TableQuery(self, name, access_token=access_token)

    def run_query(self, query: TableQuery) -> list[dict]:
        headers = {}
        if query.method != "GET":
            headers["Prefer"] = "return=representation"

        logger.debug("Running query %r", query)

        rows = self.request(
            query.method,
            f"/rest/v1/{query.table}",
            params=query.get_params(),
            json=query.payload,
            headers=headers,
            access_token=query.access_token,
        )

        return rows or []

    def ping(self, timeout: Optional[float] = None):
        """Cheap request to check the backend is reachable."""

        self.request(
            "GET",
            "/rest/v1/profiles",
            params={"select": "id", "limit": 1},
            timeout=timeout,
        )
