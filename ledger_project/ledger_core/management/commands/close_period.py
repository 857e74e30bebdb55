from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from ledger_core.exceptions import LedgerError
from ledger_core.models import Company
from ledger_core.services import close_period, reopen_period

User = get_user_model()


class Command(BaseCommand):
    help = "Close (or with --reopen, reopen) an accounting period of a company."

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument("--company", required=True, help="Company slug.")
        parser.add_argument("--year", type=int, required=True)
        parser.add_argument("--month", type=int, required=True)
        parser.add_argument(
            "--reopen",
            action="store_true",
            help="Reopen a closed period instead of closing it.",
        )
        parser.add_argument(
            "--username", help="User recorded as the actor in the audit log.")

    def handle(self, *args, **options):
        slug = options["company"]
        try:
            company = Company.objects.get(slug=slug)
        except Company.DoesNotExist:
            raise CommandError(f"Company {slug!r} does not exist")

        user = None
        if options["username"]:
            try:
                user = User.objects.get(username=options["username"])
            except User.DoesNotExist:
                raise CommandError(f"User {options['username']!r} does not exist")

        action = reopen_period if options["reopen"] else close_period
        try:
            period = action(company, options["year"], options["month"], user=user)
        except (LedgerError, ValidationError) as exc:
            raise CommandError(str(exc))

        state = "closed" if period.is_closed else "reopened"
        self.stdout.write(self.style.SUCCESS(f"Period {period.name} {state} for {company}"))
