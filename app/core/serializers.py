from rest_framework import serializers

from core.abstracts.serializers import SerializerBase


class BackendStatusSerializer(SerializerBase):
    """Which backend the api is connected to."""

    backend = serializers.CharField()
    offline = serializers.BooleanField()
    demo_mode = serializers.BooleanField()


class NotificationSerializer(SerializerBase):
    """Message queued for the user by a previous request."""

    level = serializers.CharField()
    message = serializers.CharField()
