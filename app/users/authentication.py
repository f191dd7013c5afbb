"""
Authenticate api requests against backend sessions.
"""

import logging
from typing import Optional

from rest_framework import authentication, exceptions
from rest_framework.request import Request

from core.backend import get_client
from lib.supabase import SupabaseError
from users.models import Profile
from users.services import AuthService

logger = logging.getLogger(__name__)


def get_active_profile(user_id: str, access_token: Optional[str] = None) -> Profile:
    profile = AuthService.get_profile(user_id, access_token=access_token)

    if profile is None:
        raise exceptions.AuthenticationFailed("User profile does not exist.")
    elif not profile.is_active:
        raise exceptions.AuthenticationFailed("User is inactive.")

    return profile


class BackendSessionAuthentication(authentication.SessionAuthentication):
    """
    Use the backend session stored in the django session.

    The access token is used as ``request.auth``.
    """

    def authenticate(self, request: Request):
        session = AuthService(request._request).get_session()
        if session is None:
            return None

        profile = get_active_profile(session.user_id, session.access_token)
        self.enforce_csrf(request)

        return (profile, session.access_token)


class LenientSessionAuthentication(BackendSessionAuthentication):
    """
    Session auth for the sign in endpoints.

    Sessions of missing or deactivated profiles are treated as anonymous,
    so the user can still sign out or sign in as someone else.
    """

    def authenticate(self, request: Request):
        try:
            return super().authenticate(request)
        except exceptions.AuthenticationFailed as e:
            logger.info("Ignoring session without active profile: %s", e.detail)
            return None


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """
    Clients authenticate by passing a backend access token in the header:

        Authorization: Bearer <access token>
    """

    keyword = "Bearer"

    def authenticate(self, request: Request):
        auth = authentication.get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed("Invalid token header.")

        try:
            token = auth[1].decode()
        except UnicodeError as e:
            raise exceptions.AuthenticationFailed("Invalid token header.") from e

        try:
            user = get_client().auth.get_user(token)
        except SupabaseError as e:
            raise exceptions.AuthenticationFailed("Invalid or expired token.") from e

        return (get_active_profile(user["id"], token), token)

    def authenticate_header(self, request):
        return self.keyword
