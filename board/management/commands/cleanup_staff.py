"""Management command to deactivate duplicate staff roster entries.

Duplicates share a name or an email; the earliest registered row is kept:
    python manage.py cleanup_staff
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from board.backends import IdentityError, get_backend
from board.roster import cleanup_duplicates

logger = logging.getLogger("board.management.cleanup_staff")


class Command(BaseCommand):
    help = "Deactivate duplicate active staff members (same name or email), keeping the earliest."

    def add_arguments(self, parser):
        parser.add_argument("--token", help="Supabase access token to act as (live mode only).")

    def handle(self, *args, **options):
        backend = get_backend()
        try:
            identity = backend.resolve_identity(options.get("token"))
        except IdentityError as e:
            raise CommandError(str(e))

        result = cleanup_duplicates(backend.staff(identity))
        if not result.ok:
            raise CommandError(result.message)

        summary = result.value
        logger.info(
            "Staff cleanup removed %d duplicate(s), %d remain",
            summary["removed_duplicates"], summary["remaining_staff"],
        )
        if not summary["removed_duplicates"]:
            self.stdout.write("No duplicate staff — nothing to do.")
            return
        self.stdout.write(
            f"Done — deactivated {summary['removed_duplicates']} duplicate(s), "
            f"{summary['remaining_staff']} staff remain."
        )
