import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model

from ..models import AccountType, Company
from ..services import create_entry, get_account_by_code, seed_from_template
from ..services.puc import TemplateAccount

A = AccountType

# Smallest chart that still has every account class
SMALL_CHART = (
    TemplateAccount("1", "Assets", A.ASSET),
    TemplateAccount("11", "Cash", A.ASSET),
    TemplateAccount("13", "Receivables", A.ASSET),
    TemplateAccount("2", "Liabilities", A.LIABILITY),
    TemplateAccount("21", "Payables", A.LIABILITY),
    TemplateAccount("3", "Equity", A.EQUITY),
    TemplateAccount("31", "Share capital", A.EQUITY),
    TemplateAccount("4", "Income", A.INCOME),
    TemplateAccount("41", "Sales", A.INCOME),
    TemplateAccount("5", "Expenses", A.EXPENSE),
    TemplateAccount("51", "Salaries", A.EXPENSE),
    TemplateAccount("6", "Cost of sales", A.COST_OF_SALES),
    TemplateAccount("61", "Merchandise", A.COST_OF_SALES),
)


def make_company(name="Test Co", slug=None):
    return Company.objects.create(name=name, slug=slug or name.lower().replace(" ", "-"))


def make_user(username="accountant"):
    return get_user_model().objects.create_user(username=username, password="x")


def seed_small_chart(company):
    seed_from_template(company, template=SMALL_CHART)
    return {t.code: get_account_by_code(company, t.code) for t in SMALL_CHART}


def post(company, user, date, lines, description="Test entry", approve=True, **kwargs):
    """
    Shortcut: `lines` is a list of (account, debit, credit) tuples.
    """
    return create_entry(
        company,
        user,
        date=date,
        description=description,
        lines=[
            {"account": acc, "debit": Decimal(str(d)), "credit": Decimal(str(c))}
            for acc, d, c in lines
        ],
        approve=approve,
        **kwargs,
    )


D = datetime.date
