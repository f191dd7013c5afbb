from rest_framework import serializers

from core.abstracts.serializers import (
    FlexibleDateField,
    RecordSerializer,
    RowSerializerBase,
    SerializerBase,
)
from events.models import (
    Event,
    EventType,
    HelperTask,
    TaskPriority,
    TaskStatus,
    VenueType,
)
from events.services import EventService


class EventRowSerializer(RowSerializerBase[Event]):
    """Rows in the events table."""

    record_class = Event

    title = serializers.CharField(allow_blank=True)
    date = FlexibleDateField()
    type = serializers.ChoiceField(choices=EventType.choices)
    time = serializers.TimeField(format="%H:%M")
    location = serializers.CharField(allow_blank=True)
    venue_type = serializers.ChoiceField(choices=VenueType.choices, allow_blank=True)
    opponent = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    max_participants = serializers.IntegerField()
    participants = serializers.ListField(child=serializers.CharField())
    created_by = serializers.CharField()
    requires_approval = serializers.BooleanField()
    team_id = serializers.CharField(allow_blank=True)


class EventSerializer(RecordSerializer):
    """Represent an event in the api."""

    title = serializers.CharField()
    date = FlexibleDateField()
    type = serializers.ChoiceField(choices=EventType.choices)
    time = serializers.TimeField(format="%H:%M", required=False, allow_null=True)
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    venue_type = serializers.ChoiceField(
        choices=VenueType.choices, required=False, allow_null=True
    )
    opponent = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    description = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    max_participants = serializers.IntegerField(
        min_value=1, required=False, allow_null=True
    )
    participants = serializers.ListField(child=serializers.CharField(), required=False)
    participant_count = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)
    created_by = serializers.CharField(read_only=True)
    requires_approval = serializers.BooleanField(required=False)
    team_id = serializers.CharField(required=False, allow_null=True)
    participation = serializers.SerializerMethodField()

    def get_participation(self, obj: Event) -> str | None:
        """Join button state for the requesting user."""

        request = self.context.get("request", None)
        user = getattr(request, "user", None)
        if not getattr(user, "id", None):
            return None

        return EventService(obj).participation_label(user)


class HelperTaskRowSerializer(RowSerializerBase[HelperTask]):
    """Rows in the helper_tasks table."""

    record_class = HelperTask

    event_id = serializers.CharField(allow_blank=True)
    task = serializers.CharField(allow_blank=True)
    status = serializers.ChoiceField(choices=TaskStatus.choices)
    assigned_to = serializers.CharField(allow_blank=True)
    assigned_date = serializers.DateTimeField()
    completed_date = serializers.DateTimeField()
    created_by = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    priority = serializers.ChoiceField(choices=TaskPriority.choices)


class HelperTaskSerializer(RecordSerializer):
    """Represent a helper task in the api."""

    event_id = serializers.CharField(required=False, allow_null=True)
    task = serializers.CharField()
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    assigned_to = serializers.CharField(required=False, allow_null=True)
    assigned_date = serializers.DateTimeField(required=False)
    completed_date = serializers.DateTimeField(read_only=True)
    created_by = serializers.CharField(read_only=True)
    description = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    priority = serializers.ChoiceField(choices=TaskPriority.choices, required=False)


class HelperTaskStatsSerializer(SerializerBase):
    total = serializers.IntegerField()
    open = serializers.IntegerField()
    completed = serializers.IntegerField()
    no_show = serializers.IntegerField()
