"""
In-memory stand-in for the remote backend, used for offline/demo mode.

Implements the same table and auth surface as ``lib.supabase.SupabaseClient``,
the tables are the only state.
"""

import copy
import threading
import time
import uuid
from typing import Optional

from django.utils import timezone

from core.mock.fixtures import get_demo_dataset
from lib.supabase import AuthSession, SupabaseError, TableQuery

DEMO_TOKEN_PREFIX = "demo-"
DEMO_SESSION_LENGTH = 60 * 60 * 24


class DemoAuth:
    """Sign in demo users by email, everything else is unavailable."""

    def __init__(self, client: "DemoClient"):
        self.client = client

    def _find_profile(self, **kwargs) -> Optional[dict]:
        for row in self.client.tables.get("profiles", []):
            if all(row.get(key) == value for key, value in kwargs.items()):
                return row

        return None

    def _create_session(self, profile: dict):
        return AuthSession(
            access_token=DEMO_TOKEN_PREFIX + profile["id"],
            refresh_token=DEMO_TOKEN_PREFIX + profile["id"],
            expires_at=int(time.time()) + DEMO_SESSION_LENGTH,
            user_id=profile["id"],
            email=profile.get("email"),
        )

    def _profile_from_token(self, token: str):
        if not token or not token.startswith(DEMO_TOKEN_PREFIX):
            raise SupabaseError("Invalid demo token.", status_code=401)

        profile = self._find_profile(id=token.removeprefix(DEMO_TOKEN_PREFIX))
        if profile is None:
            raise SupabaseError("User not found in demo mode", status_code=401)

        return profile

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        profile = self._find_profile(email=(email or "").lower(), is_active=True)
        if profile is None:
            raise SupabaseError("User not found in demo mode", status_code=400)

        return self._create_session(profile)

    def refresh_session(self, refresh_token: str) -> AuthSession:
        return self._create_session(self._profile_from_token(refresh_token))

    def get_user(self, access_token: str) -> dict:
        profile = self._profile_from_token(access_token)
        return {"id": profile["id"], "email": profile.get("email")}

    def sign_in_with_oauth(self, provider: str, redirect_to: str):
        raise SupabaseError("Offline mode - cannot sign in", status_code=400)

    def exchange_code_for_session(self, auth_code: str, code_verifier: str):
        raise SupabaseError("Offline mode - cannot sign in", status_code=400)

    def sign_up(self, email: str, password: str, data: Optional[dict] = None):
        raise SupabaseError("Offline mode - cannot sign up", status_code=400)

    def sign_out(self, access_token: str):
        return


class DemoClient:
    """Backend client over a static in-memory dataset."""

    offline = True
    name = "demo"

    def __init__(self, dataset: Optional[dict[str, list[dict]]] = None):
        self.tables = copy.deepcopy(dataset) if dataset else get_demo_dataset()
        self.auth = DemoAuth(self)
        self._lock = threading.Lock()

    def table(self, name: str, access_token: Optional[str] = None) -> TableQuery:
        return TableQuery(self, name, access_token=access_token)

    def ping(self, timeout: Optional[float] = None):
        return

    def _select_columns(self, row: dict, columns: str) -> dict:
        if columns.strip() == "*":
            return copy.deepcopy(row)

        keys = [column.strip() for column in columns.split(",")]
        return {key: copy.deepcopy(row.get(key)) for key in keys}

    def _sort(self, rows: list[dict], ordering: list[tuple[str, bool]]):
        # Apply least significant ordering first, sorts are stable
        for column, desc in reversed(ordering):
            present = [row for row in rows if row.get(column) is not None]
            missing = [row for row in rows if row.get(column) is None]
            present.sort(key=lambda row: row[column], reverse=desc)
            rows = present + missing

        return rows

    def run_query(self, query: TableQuery) -> list[dict]:
        with self._lock:
            table = self.tables.setdefault(query.table, [])
            matched = [
                row
                for row in table
                if all(row.get(column) == value for column, value in query.filters)
            ]

            match query.method:
                case "GET":
                    rows = self._sort(matched, query.ordering)
                    if query.row_limit is not None:
                        rows = rows[: query.row_limit]

                    return [self._select_columns(row, query.columns) for row in rows]

                case "POST":
                    payload = query.payload
                    new_rows = payload if isinstance(payload, list) else [payload]
                    now = timezone.now().isoformat()
                    created = []

                    for values in new_rows:
                        row = {
                            "id": str(uuid.uuid4()),
                            "created_at": now,
                            "updated_at": now,
                            **copy.deepcopy(values),
                        }
                        table.append(row)
                        created.append(copy.deepcopy(row))

                    return created

                case "PATCH":
                    for row in matched:
                        row.update(copy.deepcopy(query.payload or {}))

                    return copy.deepcopy(matched)

                case "DELETE":
                    removed = {id(row) for row in matched}
                    self.tables[query.table] = [
                        row for row in table if id(row) not in removed
                    ]
                    return copy.deepcopy(matched)

                case _:
                    raise SupabaseError(f"Unsupported method: {query.method}")
