from django.dispatch import receiver

from lib.supabase import AuthSession
from users.services import AuthEvent, AuthService, auth_state_changed
from users.stores import UserStore


@receiver(auth_state_changed)
def on_auth_state_changed(
    sender, event: AuthEvent, session: AuthSession | None = None, request=None, **kwargs
):
    """Runs when a user signs in, signs out, or their session changes."""

    match event:
        case AuthEvent.SIGNED_IN:
            # Load fresh profile and user list for the new user
            AuthService.fetch_profile(session.user_id, access_token=session.access_token)
            UserStore(request).refresh()

        case AuthEvent.SIGNED_OUT if session is not None:
            AuthService.forget_profile(session.user_id)

        case _:
            return
