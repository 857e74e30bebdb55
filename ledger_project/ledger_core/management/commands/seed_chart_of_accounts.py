from django.core.management.base import BaseCommand, CommandError

from ledger_core.models import Company
from ledger_core.services import seed_from_template


class Command(BaseCommand):
    help = "Seed a company's chart of accounts from the PUC template (no-op if it has accounts)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--company", required=True, help="Slug of the company to seed.")

    def handle(self, *args, **options):
        slug = options["company"]
        try:
            company = Company.objects.get(slug=slug)
        except Company.DoesNotExist:
            raise CommandError(f"Company {slug!r} does not exist")

        result = seed_from_template(company)
        if result.initialized:
            self.stdout.write(self.style.SUCCESS(
                f"Created {result.count} accounts for {company}"))
        else:
            self.stdout.write(self.style.WARNING(
                f"{company} already has a chart of accounts, nothing to do"))
