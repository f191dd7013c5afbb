"""
URL Patterns for core REST API.
"""

from django.urls import path

from core import viewsets

app_name = "api-core"

urlpatterns = [
    path(
        "status/",
        viewsets.StatusViewSet.as_view({"get": "list", "post": "create"}),
        name="status",
    ),
    path(
        "notifications/",
        viewsets.NotificationViewSet.as_view({"get": "list"}),
        name="notifications",
    ),
]
