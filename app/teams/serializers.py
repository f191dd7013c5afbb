from rest_framework import serializers

from core.abstracts.serializers import RecordSerializer, RowSerializerBase, SerializerBase
from teams.models import Category, Gender, Team, TrainingTime, Weekday
from users.serializers import ProfileSerializer


class TrainingTimeSerializer(SerializerBase):
    """Weekly training slot of a team."""

    day = serializers.ChoiceField(choices=Weekday.choices)
    start_time = serializers.TimeField(format="%H:%M")
    end_time = serializers.TimeField(format="%H:%M")
    location = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        return TrainingTime(**attrs)


class TeamRowSerializer(RowSerializerBase[Team]):
    """Rows in the teams table."""

    record_class = Team

    name = serializers.CharField(allow_blank=True)
    category = serializers.ChoiceField(choices=Category.choices)
    gender = serializers.ChoiceField(choices=Gender.choices)
    season = serializers.CharField(allow_blank=True)
    trainers = serializers.ListField(child=serializers.CharField())
    players = serializers.ListField(child=serializers.CharField())
    captain = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    training_times = TrainingTimeSerializer(many=True)
    is_active = serializers.BooleanField()


class TeamSerializer(RecordSerializer):
    """Represent a team in the api."""

    name = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=Category.choices)
    gender = serializers.ChoiceField(choices=Gender.choices)
    season = serializers.CharField(required=False, allow_blank=True)
    trainers = serializers.ListField(child=serializers.CharField(), required=False)
    players = serializers.ListField(child=serializers.CharField(), required=False)
    captain = serializers.CharField(required=False, allow_null=True)
    description = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    training_times = TrainingTimeSerializer(many=True, required=False)
    is_active = serializers.BooleanField(read_only=True)

    def validate_training_times(self, value: list[TrainingTime]):
        for slot in value:
            if slot.end_time <= slot.start_time:
                raise serializers.ValidationError(
                    "Training must end after it starts."
                )

        return value


class MemberSerializer(SerializerBase):
    """Add or remove a team member."""

    profile_id = serializers.CharField()


class CaptainSerializer(SerializerBase):
    """Set or clear the team captain."""

    profile_id = serializers.CharField(allow_null=True)


class RosterSerializer(SerializerBase):
    """Profiles of a team's members."""

    trainers = ProfileSerializer(many=True)
    players = ProfileSerializer(many=True)
    captain = ProfileSerializer(allow_null=True)
