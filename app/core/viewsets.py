from django.conf import settings
from django.contrib import messages
from drf_spectacular.utils import extend_schema
from rest_framework import permissions
from rest_framework.response import Response

from core.abstracts.viewsets import ViewSetBase
from core.backend import enable_demo_mode, get_client
from core.serializers import BackendStatusSerializer, NotificationSerializer
from users.authentication import BackendSessionAuthentication, BearerTokenAuthentication
from users.permissions import Action, has_permission


class StatusViewSet(ViewSetBase):
    """Report the backend mode."""

    authentication_classes = [BearerTokenAuthentication, BackendSessionAuthentication]
    permission_classes = [permissions.AllowAny]
    serializer_class = BackendStatusSerializer

    def get_status(self):
        client = get_client()
        payload = {
            "backend": client.name,
            "offline": client.offline,
            "demo_mode": settings.BACKEND_DEMO_MODE,
        }

        return Response(BackendStatusSerializer(payload).data)

    def list(self, request, *args, **kwargs):
        return self.get_status()

    @extend_schema(request=None, responses=BackendStatusSerializer)
    def create(self, request, *args, **kwargs):
        """Switch to offline mode, admins only."""

        if not has_permission(self.profile, Action.MANAGE_USERS):
            self.permission_denied(request)

        enable_demo_mode()
        return self.get_status()


class NotificationViewSet(ViewSetBase):
    """Success and error messages queued by previous requests."""

    authentication_classes = [BearerTokenAuthentication, BackendSessionAuthentication]
    permission_classes = [permissions.AllowAny]
    serializer_class = NotificationSerializer

    def list(self, request, *args, **kwargs):
        """Return pending notifications, they are removed once returned."""

        storage = messages.get_messages(request._request)
        payload = [
            {"level": message.level_tag, "message": str(message)} for message in storage
        ]

        return Response(NotificationSerializer(payload, many=True).data)
