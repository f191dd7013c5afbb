from typing import Any, Optional

from django.utils.translation import gettext_lazy as _
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from core.abstracts.models import ModelBase
from utils.dates import parse_date


class SerializerBase(serializers.Serializer):
    """Wrapper around the base drf serializer."""


class RecordSerializer(SerializerBase):
    """Base fields for record serializers used in the api."""

    id = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True, required=False)
    updated_at = serializers.DateTimeField(read_only=True, required=False)


class RowSerializerBase[T: ModelBase](SerializerBase):
    """
    Translate between remote table rows and local records.

    Field names are the remote column names, the ``source`` of each field
    is the attribute on the record. All fields are optional so rows missing
    a column fall back to the record's defaults.
    """

    record_class: type[T]

    id = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_fields(self):
        fields = super().get_fields()

        for field in fields.values():
            field.required = False
            field.allow_null = True

        return fields

    def to_record(self, row: dict) -> T:
        """Convert a remote row to a record, null columns use record defaults."""

        values = self.to_internal_value(row)
        return self.record_class(
            **{key: value for key, value in values.items() if value is not None}
        )

    def to_records(self, rows: list[dict]) -> list[T]:
        return [self.to_record(row) for row in rows]

    def to_row(self, values: dict[str, Any]) -> dict[str, Any]:
        """
        Convert record attribute values to remote column values.

        Only attributes present in ``values`` are included, which allows
        the result to be used for partial updates.
        """

        row = {}

        for name, field in self.fields.items():
            if field.read_only or field.source not in values:
                continue

            value = values[field.source]
            row[name] = None if value is None else field.to_representation(value)

        return row

    def record_to_row(self, record: T) -> dict[str, Any]:
        """Convert all fields on a record to a remote row, excluding the id."""

        values = {
            field: getattr(record, field)
            for field in record.get_fields_list()
            if field not in ("id", "created_at", "updated_at")
        }
        return self.to_row(values)


@extend_schema_field(OpenApiTypes.DATE)
class FlexibleDateField(serializers.Field):
    """
    Represents a date, accepts date strings with or without a time part.
    """

    default_error_messages = {"invalid": _("Enter a valid date.")}

    def to_representation(self, value):
        if value is None:
            return None

        return value.isoformat()

    def to_internal_value(self, data) -> Optional[Any]:
        if data in (None, ""):
            return None

        value = parse_date(data)
        if value is None:
            self.fail("invalid")

        return value
