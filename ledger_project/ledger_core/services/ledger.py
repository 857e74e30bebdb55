"""
General ledger aggregation.

Balances are always replayed from persisted APPROVED lines; nothing here
keeps or updates running totals between calls. Approved lines are
immutable, so reads need no locks.
"""
import datetime
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Sum

from ..models import Account, JournalLine
from .chart import get_account

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Movement:
    date: datetime.date
    entry_id: int
    entry_number: str
    entry_type: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal  # running balance after this line
    third_party_id: str = ""


@dataclass(frozen=True)
class AccountLedger:
    account_id: int
    code: str
    name: str
    ac_type: str
    nature: str
    initial_balance: Decimal
    total_debits: Decimal
    total_credits: Decimal
    final_balance: Decimal
    movements: tuple


def _signed_sum(qs):
    agg = qs.aggregate(debit=Sum("debit"), credit=Sum("credit"))
    return (agg["debit"] or ZERO) - (agg["credit"] or ZERO)


def _account_ledger(company, account, start_date=None, end_date=None):
    approved = JournalLine.objects.approved(company).filter(account=account)

    initial_balance = ZERO
    if start_date:
        initial_balance = _signed_sum(approved.filter(journal__date__lt=start_date))

    lines = (
        approved.in_range(start_date, end_date)
        .select_related("journal")
        .order_by("journal__date", "journal__number", "id")
    )

    running = initial_balance
    total_debits = ZERO
    total_credits = ZERO
    movements = []
    for line in lines:
        total_debits += line.debit
        total_credits += line.credit
        running += line.debit - line.credit
        movements.append(Movement(
            date=line.journal.date,
            entry_id=line.journal_id,
            entry_number=line.journal.number,
            entry_type=line.journal.entry_type,
            description=line.description or line.journal.description,
            debit=line.debit,
            credit=line.credit,
            balance=running,
            third_party_id=line.third_party_id,
        ))

    return AccountLedger(
        account_id=account.pk,
        code=account.code,
        name=account.name,
        ac_type=account.ac_type,
        nature=account.nature,
        initial_balance=initial_balance,
        total_debits=total_debits,
        total_credits=total_credits,
        final_balance=running,
        movements=tuple(movements),
    )


def get_account_movements(company, account_id, start_date=None, end_date=None):
    """
    Ledger of one account over [start_date, end_date].

    initial_balance carries forward every approved line dated before
    start_date; each movement's balance is the running sum of debit - credit.
    """
    account = get_account(company, account_id)
    return _account_ledger(company, account, start_date, end_date)


def get_general_ledger(company, account_id=None, start_date=None, end_date=None):
    """
    Ledger of one account or of every active account, by code.
    Accounts with no opening balance and no movements are left out.
    """
    accounts = Account.objects.active(company)
    if account_id is not None:
        accounts = accounts.filter(pk=account_id)

    results = []
    for account in accounts.order_by("code"):
        ledger = _account_ledger(company, account, start_date, end_date)
        if ledger.movements or ledger.initial_balance != 0:
            results.append(ledger)
    return results


def get_account_balance(company, account_id, start_date=None, end_date=None):
    """Net debit - credit of approved lines for the account in range."""
    account = get_account(company, account_id)
    return _signed_sum(
        JournalLine.objects.approved(company)
        .filter(account=account)
        .in_range(start_date, end_date)
    )
