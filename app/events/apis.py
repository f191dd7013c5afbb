"""
URL Patterns for events REST API.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from events import viewsets

router = DefaultRouter()
router.include_root_view = False
router.register("events", viewsets.EventViewSet, basename="event")
router.register("helper-tasks", viewsets.HelperTaskViewSet, basename="helpertask")

app_name = "api-events"

urlpatterns = [path("", include(router.urls))]
