"""
Access remote tables, convert rows to records.
"""

import logging
from typing import Any, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.abstracts.models import ModelBase
from core.abstracts.serializers import RowSerializerBase
from core.backend import BackendClient, get_client
from lib.supabase import SupabaseError, TableQuery

logger = logging.getLogger(__name__)


class RecordDoesNotExist(ObjectDoesNotExist):
    """Operation referenced a row that does not exist."""


class TableBase[T: ModelBase]:
    """
    Extends the remote table client for record access.

    Filters are given as column names, values are given as record fields
    and converted with ``serializer_class``.
    """

    table_name: str
    serializer_class: type[RowSerializerBase[T]]

    def __init__(
        self,
        client: Optional[BackendClient] = None,
        access_token: Optional[str] = None,
    ):
        self._client = client
        self.access_token = access_token

    @property
    def client(self) -> BackendClient:
        return self._client or get_client()

    @property
    def serializer(self) -> RowSerializerBase[T]:
        return self.serializer_class()

    def query(self) -> TableQuery:
        return self.client.table(self.table_name, access_token=self.access_token)

    def to_record(self, row: dict) -> T:
        return self.serializer.to_record(row)

    def to_records(self, rows: list[dict]) -> list[T]:
        """Convert rows to records, rows that cannot be read are skipped."""

        serializer = self.serializer
        records = []

        for row in rows:
            try:
                records.append(serializer.to_record(row))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid %s row %s: %s", self.table_name, row.get("id"), e
                )

        return records

    def find(
        self,
        order_by: Optional[str] = None,
        desc=False,
        limit: Optional[int] = None,
        **filters,
    ) -> list[T]:
        """Return records matching filters."""

        query = self.query().select("*")

        for column, value in filters.items():
            query = query.eq(column, value)

        if order_by:
            query = query.order(order_by, desc=desc)

        if limit is not None:
            query = query.limit(limit)

        return self.to_records(query.execute())

    def find_one(self, **filters) -> Optional[T]:
        """Return first record matching query, or none."""

        records = self.find(limit=1, **filters)
        return records[0] if records else None

    def find_by_id(self, id: str) -> Optional[T]:
        """Return record if exists, or none."""

        return self.find_one(id=id)

    def get_by_id(self, id: str) -> T:
        """Return record with id, throw error if not found."""

        try:
            record = self.find_by_id(id)
        except SupabaseError as e:
            if e.is_not_found:
                raise RecordDoesNotExist(f"No {self.table_name} row with id {id}.") from e
            raise e

        if record is None:
            raise RecordDoesNotExist(f"No {self.table_name} row with id {id}.")

        return record

    def create(self, record: Optional[T] = None, **values) -> T:
        """Insert new row, return created record."""

        row = self.serializer.record_to_row(record) if record else {}
        row.update(self.serializer.to_row(values))

        rows = self.query().insert(row).execute()
        if not rows:
            raise SupabaseError(f"Insert into {self.table_name} returned no rows.")

        return self.to_record(rows[0])

    def update_one(self, id: str, touch=True, **values) -> T:
        """
        Update row with id, return updated record.

        The ``updated_at`` column is set unless touch is false.
        """

        if touch:
            values.setdefault("updated_at", timezone.now())

        rows = self.query().update(self.serializer.to_row(values)).eq("id", id).execute()
        if not rows:
            raise RecordDoesNotExist(f"No {self.table_name} row with id {id}.")

        return self.to_record(rows[0])

    def update_many(self, query: dict[str, Any], **values) -> list[T]:
        """Update rows matching query with values."""

        request = self.query().update(self.serializer.to_row(values))
        for column, value in query.items():
            request = request.eq(column, value)

        return self.to_records(request.execute())

    def delete_one(self, id: str) -> Optional[T]:
        """Delete row if exists."""

        rows = self.query().delete().eq("id", id).execute()
        return self.to_record(rows[0]) if rows else None
