"""
URL Patterns for users REST API.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from users import viewsets

router = DefaultRouter()
router.include_root_view = False
router.register("users", viewsets.UserViewSet, basename="user")
router.register("auth", viewsets.AuthViewSet, basename="auth")

app_name = "api-users"

urlpatterns = [
    path("", include(router.urls)),
    path(
        "me/",
        viewsets.ManageProfileViewSet.as_view(
            {"get": "retrieve", "patch": "partial_update"}
        ),
        name="me",
    ),
]
