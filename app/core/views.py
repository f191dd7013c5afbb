"""
Api Views for core app functionalities.
"""

import logging

import sentry_sdk
from django.core.exceptions import ObjectDoesNotExist
from django.http import JsonResponse
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.status import (
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)
from rest_framework.views import exception_handler

from core.backend import get_client
from lib.supabase import SupabaseError
from utils.logging import print_error

logger = logging.getLogger(__name__)


def health_check(request):
    """API Health Check."""
    client = get_client()
    payload = {
        "status": 200,
        "message": "Systems operational.",
        "backend": client.name,
        "offline": client.offline,
    }

    return JsonResponse(payload, status=200)


def api_exception_handler(exc, context):
    """Custom exception handler for api."""

    if isinstance(exc, SupabaseError):
        logger.error("Backend error: %s", exc)
        sentry_sdk.capture_exception(exc)
        return Response(
            {"status_code": HTTP_502_BAD_GATEWAY, "detail": exc.message, "code": exc.code},
            status=HTTP_502_BAD_GATEWAY,
        )

    if isinstance(exc, ObjectDoesNotExist):
        exc = exceptions.NotFound(str(exc) or None)

    response = exception_handler(exc, context)

    if response is not None:
        response.data["status_code"] = response.status_code
    else:
        print_error(exc=exc)
        sentry_sdk.capture_exception(exc)
        response = Response(
            {"status_code": HTTP_500_INTERNAL_SERVER_ERROR, "detail": str(exc)},
            status=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
