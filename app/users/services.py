"""
Session and current user business logic.
"""

import logging
from typing import Optional

from django.conf import settings
from django.db import models
from django.dispatch import Signal
from django.http import HttpRequest
from rest_framework.exceptions import ValidationError

from core.backend import BackendClient, get_client
from lib.supabase import AuthSession, SupabaseError
from users.models import Profile, Role
from users.stores import ProfileTable, UserStore
from utils.cache import check_cache, clear_cache, set_cache

logger = logging.getLogger(__name__)

SESSION_KEY = "backend_session"
OAUTH_VERIFIER_KEY = "backend_oauth_verifier"
PROFILE_CACHE_PREFIX = "profile"


class AuthEvent(models.TextChoices):
    """Changes to a user's session."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


auth_state_changed = Signal()
"""
Sent when a session changes.

Receives kwargs: event (AuthEvent), session (AuthSession or None), request.
"""


class AuthService:
    """Sign users in and out, keep track of the current profile."""

    def __init__(self, request: HttpRequest, client: Optional[BackendClient] = None):
        self.request = request
        self._client = client

    @property
    def client(self) -> BackendClient:
        return self._client or get_client()

    @property
    def auth(self):
        return self.client.auth

    # Profiles
    @classmethod
    def fetch_profile(
        cls,
        user_id: str,
        client: Optional[BackendClient] = None,
        access_token: Optional[str] = None,
    ) -> Optional[Profile]:
        """
        Get profile from backend and cache it.

        If the backend fails, the last cached profile is returned.
        """

        try:
            profile = ProfileTable(client, access_token=access_token).find_by_id(user_id)
        except SupabaseError as e:
            logger.warning("Error fetching profile %s: %s", user_id, e)
            return check_cache(PROFILE_CACHE_PREFIX, user_id=user_id)

        if profile is None:
            clear_cache(PROFILE_CACHE_PREFIX, user_id=user_id)
            return None

        set_cache(profile, PROFILE_CACHE_PREFIX, user_id=user_id)
        return profile

    @classmethod
    def get_profile(
        cls,
        user_id: str,
        client: Optional[BackendClient] = None,
        access_token: Optional[str] = None,
    ) -> Optional[Profile]:
        """Get cached profile, fetch if not cached."""

        profile = check_cache(PROFILE_CACHE_PREFIX, user_id=user_id)
        if profile is not None:
            return profile

        return cls.fetch_profile(user_id, client=client, access_token=access_token)

    @classmethod
    def forget_profile(cls, user_id: str):
        clear_cache(PROFILE_CACHE_PREFIX, user_id=user_id)

    @property
    def profile(self) -> Optional[Profile]:
        """Profile for the current session."""

        session = self.get_session()
        if session is None:
            return None

        return self.get_profile(
            session.user_id, client=self._client, access_token=session.access_token
        )

    # Sessions
    def _emit(self, event: AuthEvent, session: Optional[AuthSession] = None):
        auth_state_changed.send(
            sender=self.__class__, event=event, session=session, request=self.request
        )

    def _store_session(self, session: AuthSession):
        self.request.session[SESSION_KEY] = session.to_dict()

    def _clear_session(self):
        self.request.session.pop(SESSION_KEY, None)
        self.request.session.pop(OAUTH_VERIFIER_KEY, None)

    def _start_session(self, session: AuthSession) -> Optional[Profile]:
        self._store_session(session)
        self._emit(AuthEvent.SIGNED_IN, session)

        return self.get_profile(
            session.user_id, client=self._client, access_token=session.access_token
        )

    def get_stored_session(self) -> Optional[AuthSession]:
        data = self.request.session.get(SESSION_KEY)
        if not data:
            return None

        return AuthSession.from_dict(data)

    def get_session(self) -> Optional[AuthSession]:
        """Get current session, refresh tokens if expired."""

        session = self.get_stored_session()
        if session is None or not session.is_expired:
            return session

        try:
            session = self.auth.refresh_session(session.refresh_token)
        except SupabaseError as e:
            logger.warning("Error refreshing session, signing out: %s", e)
            self._clear_session()
            self._emit(AuthEvent.SIGNED_OUT, None)
            return None

        self._store_session(session)
        self._emit(AuthEvent.TOKEN_REFRESHED, session)

        return session

    def sign_in_with_email(self, email: str, password: str) -> Optional[Profile]:
        """Create session with email and password."""

        if not email or not password:
            raise ValidationError("Email and password are required.")

        session = self.auth.sign_in_with_password(email.strip().lower(), password)
        return self._start_session(session)

    def sign_in_with_google(self, redirect_to: Optional[str] = None) -> str:
        """Start oauth flow, returns the url to send the user to."""

        url, verifier = self.auth.sign_in_with_oauth(
            "google", redirect_to or settings.OAUTH_REDIRECT_URL
        )
        self.request.session[OAUTH_VERIFIER_KEY] = verifier

        return url

    def complete_oauth(self, code: str) -> Optional[Profile]:
        """Exchange code returned by the provider for a session."""

        verifier = self.request.session.pop(OAUTH_VERIFIER_KEY, None)
        if not verifier:
            raise ValidationError("Sign in with provider was not started.")

        session = self.auth.exchange_code_for_session(code, verifier)
        self.ensure_profile(session.user_id, email=session.email)

        return self._start_session(session)

    def ensure_profile(self, user_id: str, email: Optional[str] = None, name=None):
        """Create profile for new users, failures are logged."""

        table = ProfileTable(self._client)

        try:
            if table.find_by_id(user_id) is not None:
                return

            table.create(
                id=user_id,
                name=name or (email or "").split("@")[0],
                email=(email or "").lower(),
                roles=[Role.PLAYER],
                teams=[],
                is_active=True,
            )
        except SupabaseError as e:
            logger.error("Error creating profile for %s: %s", user_id, e)

    def sign_up(self, email: str, password: str, name: str) -> Optional[Profile]:
        """
        Register new account.

        Returns the profile if a session was created, or None if the
        user needs to confirm their email first.
        """

        user, session = self.auth.sign_up(
            email.strip().lower(), password, data={"name": name}
        )

        user_id = (session.user_id if session else None) or user.get("id")
        if user_id:
            self.ensure_profile(user_id, email=email, name=name)

        if session is None:
            return None

        return self._start_session(session)

    def sign_out(self):
        """End session, the local session is cleared even if the backend fails."""

        session = self.get_stored_session()

        if session is not None:
            try:
                self.auth.sign_out(session.access_token)
            except SupabaseError as e:
                logger.warning("Error signing out from backend: %s", e)

        self._clear_session()
        self._emit(AuthEvent.SIGNED_OUT, session)

    def get_user_id(self) -> Optional[str]:
        """Id of the signed in user, from the request or the session."""

        user = getattr(self.request, "user", None)
        if isinstance(user, Profile):
            return user.id

        session = self.get_session()
        return session.user_id if session else None

    def update_profile(self, **changes) -> Profile:
        """Update the current user's profile."""

        user_id = self.get_user_id()
        if user_id is None:
            raise ValidationError("Not signed in.")

        profile = UserStore(self.request, client=self._client).update_user(
            user_id, **changes
        )
        set_cache(profile, PROFILE_CACHE_PREFIX, user_id=profile.id)
        self._emit(AuthEvent.USER_UPDATED, self.get_stored_session())

        return profile
