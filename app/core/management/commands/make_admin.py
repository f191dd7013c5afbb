from django.core.management import BaseCommand, CommandError

from core.abstracts.stores import STORE_ERRORS
from core.backend import get_client
from users.stores import UserStore


class Command(BaseCommand):
    """Grant the admin role to an existing user."""

    help = "Grant the admin role to the user with the given email."

    def add_arguments(self, parser):
        parser.add_argument("email", help="Email of the user")
        return super().add_arguments(parser)

    def handle(self, *args, **options):
        email = options.get("email")
        client = get_client()

        if client.offline:
            self.stdout.write(
                self.style.WARNING("Backend is offline, changes only apply to demo data.")
            )

        try:
            profile = UserStore(client=client).make_admin(email)
        except STORE_ERRORS as e:
            raise CommandError(f"Unable to grant admin role: {e}") from e

        self.stdout.write(
            self.style.SUCCESS(f"{profile.name or profile.email} is an administrator.")
        )
