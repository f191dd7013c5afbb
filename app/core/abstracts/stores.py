"""
In-memory mirrors of remote tables.

A store holds the last fetched page of a table in the django cache.
Reads are served from the mirror, writes go to the remote backend first
and are only applied to the mirror once the backend accepted them.
"""

import logging
from contextlib import contextmanager
from typing import Any, Optional

from django.contrib import messages
from django.core.exceptions import ObjectDoesNotExist
from django.http import HttpRequest
from rest_framework.exceptions import ValidationError

from core.abstracts.models import ModelBase
from core.abstracts.tables import RecordDoesNotExist, TableBase
from core.backend import BackendClient
from lib.supabase import SupabaseError
from utils.cache import check_cache, clear_cache, set_cache

logger = logging.getLogger(__name__)

STORE_ERRORS = (SupabaseError, ObjectDoesNotExist, ValidationError)
"""Errors that are logged and shown to the user before being raised again."""


def get_access_token(request: Optional[HttpRequest]) -> Optional[str]:
    """Get the backend access token a request was authenticated with."""

    token = getattr(request, "auth", None)
    return token if isinstance(token, str) else None


class StoreBase[T: ModelBase]:
    """Cache the last fetched page of records from a table."""

    table_class: type[TableBase[T]]

    cache_key: str
    """Unique key for the mirror in the cache."""

    filters: dict[str, Any] = {}
    """Equality filters applied when fetching, column names to values."""

    order_by: Optional[str] = None
    order_desc = False

    page_size: Optional[int] = None
    """Max rows fetched, none fetches all rows."""

    def __init__(
        self,
        request: Optional[HttpRequest] = None,
        client: Optional[BackendClient] = None,
    ):
        self.request = request
        self.table = self.table_class(
            client=client, access_token=get_access_token(request)
        )

    # Mirror
    def get_page_size(self) -> Optional[int]:
        return self.page_size

    def get_filters(self) -> dict[str, Any]:
        return dict(self.filters)

    def fetch(self) -> list[T]:
        """Get current page from remote backend."""

        return self.table.find(
            order_by=self.order_by,
            desc=self.order_desc,
            limit=self.get_page_size(),
            **self.get_filters(),
        )

    def refresh(self) -> list[T]:
        """
        Fetch records and replace the mirror.

        If the fetch fails, the previous records are kept.
        """

        try:
            records = self.fetch()
        except SupabaseError as e:
            logger.warning("Error fetching %s, keeping cached records: %s", self.cache_key, e)
            return self.get_cached() or []

        self.set_cached(records)
        return records

    def get_cached(self) -> Optional[list[T]]:
        return check_cache(self.cache_key)

    def set_cached(self, records: list[T]):
        set_cache(records, self.cache_key)

    def clear(self):
        """Drop the mirror, the next access fetches again."""

        clear_cache(self.cache_key)

    @property
    def items(self) -> list[T]:
        """Mirrored records, fetched on first access."""

        records = self.get_cached()
        if records is None:
            records = self.refresh()

        return records

    def get(self, id: str) -> Optional[T]:
        """Find record in mirror."""

        for record in self.items:
            if record.id == id:
                return record

        return None

    def get_or_fetch(self, id: str) -> T:
        """Find record in mirror, otherwise get it from the backend."""

        record = self.get(id)
        if record is not None:
            return record

        return self.table.get_by_id(id)

    def includes(self, record: T) -> bool:
        """If a record belongs in the mirror."""

        for column, value in self.get_filters().items():
            if getattr(record, column, value) != value:
                return False

        return True

    # Local patches, only applied when a page was fetched before
    def _patch(self, fn):
        records = self.get_cached()
        if records is None:
            return

        self.set_cached(fn(list(records)))

    def _append(self, record: T):
        if not self.includes(record):
            return

        self._patch(lambda records: [*records, record])

    def _replace(self, record: T):
        if not self.includes(record):
            return self._discard(record.id)

        def replace(records: list[T]):
            if not any(r.id == record.id for r in records):
                return [*records, record]

            return [record if r.id == record.id else r for r in records]

        self._patch(replace)

    def _discard(self, id: str):
        self._patch(lambda records: [r for r in records if r.id != id])

    # Notifications
    def notify(self, level: int, message: str):
        """Add a notification for the current user."""

        if self.request is None:
            return

        messages.add_message(self.request, level, message, fail_silently=True)

    def notify_success(self, message: str):
        self.notify(messages.SUCCESS, message)

    def notify_error(self, message: str):
        self.notify(messages.ERROR, message)

    @contextmanager
    def handle_errors(self, message: str):
        """
        Log failed remote calls and notify the user, then raise the error again.
        """

        try:
            yield
        except STORE_ERRORS as e:
            logger.error("%s: %s", message, e)
            self.notify_error(f"{message}: {self.get_error_message(e)}")
            raise e

    def get_error_message(self, exc: Exception) -> str:
        if isinstance(exc, ValidationError):
            fields = exc.detail if isinstance(exc.detail, dict) else {}
            if fields:
                return ", ".join(f"{field} is required" for field in fields)

        return str(exc)

    def require(self, values: dict[str, Any], *fields: str):
        """Raise validation error if any of the fields are empty."""

        missing = {
            field: ["This field is required."]
            for field in fields
            if values.get(field) in (None, "", [])
        }

        if missing:
            raise ValidationError(missing)

    # Mutations
    def create(self, success_message: Optional[str] = None, **values) -> T:
        """Insert record in backend, then append to mirror."""

        with self.handle_errors(f"Error creating {self.table.table_name}"):
            record = self.table.create(**values)

        self._append(record)
        if success_message:
            self.notify_success(success_message)

        return record

    def update(self, id: str, success_message: Optional[str] = None, **values) -> T:
        """Update record in backend, then patch mirror."""

        with self.handle_errors(f"Error updating {self.table.table_name}"):
            record = self.table.update_one(id, **values)

        self._replace(record)
        if success_message:
            self.notify_success(success_message)

        return record

    def remove(self, id: str, success_message: Optional[str] = None) -> Optional[T]:
        """Delete record in backend, then drop it from mirror."""

        with self.handle_errors(f"Error deleting {self.table.table_name}"):
            record = self.table.delete_one(id)
            if record is None:
                raise RecordDoesNotExist(f"No {self.table.table_name} row with id {id}.")

        self._discard(id)
        if success_message:
            self.notify_success(success_message)

        return record

    def deactivate(self, id: str, success_message: Optional[str] = None) -> T:
        """Soft delete record, it is dropped from the mirror."""

        with self.handle_errors(f"Error deactivating {self.table.table_name}"):
            record = self.table.update_one(id, is_active=False)

        self._discard(id)
        if success_message:
            self.notify_success(success_message)

        return record
