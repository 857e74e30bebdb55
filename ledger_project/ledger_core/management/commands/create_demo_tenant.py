import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from django.utils.text import slugify

from ledger_core.models import Company
from ledger_core.services import (create_entry, get_account_by_code,
                                  seed_from_template, update_accounting_config)

User = get_user_model()


class Command(BaseCommand):
    help = (
        "Create a demo tenant (company), user, seeded chart of accounts "
        "and a few approved journal entries."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",  # Define flag
            default="Demo Company",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--username", default="demo", help="Username for the demo user."
        )
        parser.add_argument(
            "--password", default="demo123", help="Password for the demo user."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        company_name = options["company_name"]
        username = options["username"]
        password = options["password"]

        # Generate unique slug for company
        def unique_slug_for_company(name, max_tries=100):
            # Convert company name into a slug (e.g., "Test Ltd" → "test-ltd")
            base = slugify(name) or "company"
            slug = base
            i = 1  # add numbers if needed
            # If plain slug is taken, append -1, -2, etc.
            while Company.objects.filter(slug=slug).exists():
                slug = f"{base}-{i}"
                i += 1
                if i > max_tries:
                    raise RuntimeError("Couldn't generate unique slug")
            return slug

        # 1. Create company
        company = Company.objects.filter(name=company_name).first()
        if company is None:
            company = Company.objects.create(
                name=company_name, slug=unique_slug_for_company(company_name))
        self.stdout.write(self.style.SUCCESS(f"Company: {company} ({company.slug})"))

        # 2. Create user
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com"},
        )
        if created:  # if user newly created
            user.set_password(password)
            user.save()
        self.stdout.write(self.style.SUCCESS(f"User: {user.username}"))

        # 3. Seed chart of accounts
        result = seed_from_template(company, user=user)
        if not result.initialized:
            self.stdout.write(self.style.WARNING(
                "Chart of accounts already present, skipping sample data"))
            return
        self.stdout.write(self.style.SUCCESS(f"Seeded {result.count} accounts"))

        def acc(code):
            return get_account_by_code(company, code)

        update_accounting_config(
            company,
            user,
            cash_account=acc("110505"),
            bank_account=acc("111005"),
            receivable_account=acc("130505"),
            payable_account=acc("2205"),
            inventory_account=acc("1435"),
            sales_revenue_account=acc("4135"),
            vat_generated_account=acc("240805"),
            vat_deductible_account=acc("240810"),
            cost_of_sales_account=acc("6135"),
        )

        # 4. Sample approved entries in the current month
        today = timezone.localdate()
        first = today.replace(day=1)
        samples = [
            ("Owner contribution", datetime.timedelta(0), [
                {"account": acc("111005"), "debit": Decimal("10000000")},
                {"account": acc("3115"), "credit": Decimal("10000000")},
            ]),
            ("Inventory purchase", datetime.timedelta(0), [
                {"account": acc("1435"), "debit": Decimal("2000000")},
                {"account": acc("111005"), "credit": Decimal("2000000")},
            ]),
            ("Cash sale", datetime.timedelta(days=1), [
                {"account": acc("110505"), "debit": Decimal("1190000")},
                {"account": acc("4135"), "credit": Decimal("1000000")},
                {"account": acc("240805"), "credit": Decimal("190000")},
            ]),
            ("Cost of goods sold", datetime.timedelta(days=1), [
                {"account": acc("6135"), "debit": Decimal("600000")},
                {"account": acc("1435"), "credit": Decimal("600000")},
            ]),
        ]
        for description, offset, lines in samples:
            entry = create_entry(
                company,
                user,
                date=min(first + offset, today),
                description=description,
                lines=lines,
                approve=True,
            )
            self.stdout.write(self.style.SUCCESS(f"Approved entry {entry.number}: {description}"))

        self.stdout.write(self.style.SUCCESS("Demo tenant setup complete!"))
