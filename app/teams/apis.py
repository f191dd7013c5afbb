"""
URL Patterns for teams REST API.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from teams import viewsets

router = DefaultRouter()
router.include_root_view = False
router.register("teams", viewsets.TeamViewSet, basename="team")

app_name = "api-teams"

urlpatterns = [
    path("", include(router.urls)),
]
