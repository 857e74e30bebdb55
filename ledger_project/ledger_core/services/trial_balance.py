import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from ..conf import balance_epsilon
from ..models import Account, AccountType, JournalLine

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: int
    code: str
    name: str
    ac_type: str
    nature: str
    debit: Decimal
    credit: Decimal
    debit_balance: Decimal
    credit_balance: Decimal

    @property
    def balance(self):
        return self.debit - self.credit


@dataclass(frozen=True)
class TrialBalanceTotals:
    total_debits: Decimal
    total_credits: Decimal
    total_debit_balance: Decimal
    total_credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalance:
    as_of: datetime.date
    rows: tuple
    totals: TrialBalanceTotals


@dataclass(frozen=True)
class EquationCheck:
    assets: Decimal
    liabilities_and_equity: Decimal
    difference: Decimal
    # income - expenses - costs not yet closed into equity
    unclosed_result: Decimal
    is_balanced: bool


def get_trial_balance(company, as_of=None):
    """
    Accumulated debits/credits per active account up to as_of (today by default).

    The one-sided split is a presentation convention:
    debit_balance = max(debit - credit, 0), credit_balance = max(credit - debit, 0),
    regardless of the account's nature.
    """
    as_of = as_of or timezone.localdate()

    sums = (
        JournalLine.objects.approved(company)
        .filter(journal__date__lte=as_of, account__is_active=True)
        .values("account_id")
        .annotate(debit=Sum("debit"), credit=Sum("credit"))
    )
    by_account = {
        row["account_id"]: (row["debit"] or ZERO, row["credit"] or ZERO)
        for row in sums
    }
    accounts = Account.objects.filter(pk__in=by_account.keys()).order_by("code")

    rows = []
    total_debits = total_credits = ZERO
    total_debit_balance = total_credit_balance = ZERO
    for account in accounts:
        debit, credit = by_account[account.pk]
        # Only accounts with movements
        if debit == 0 and credit == 0:
            continue
        balance = debit - credit
        debit_balance = balance if balance > 0 else ZERO
        credit_balance = -balance if balance < 0 else ZERO
        rows.append(TrialBalanceRow(
            account_id=account.pk,
            code=account.code,
            name=account.name,
            ac_type=account.ac_type,
            nature=account.nature,
            debit=debit,
            credit=credit,
            debit_balance=debit_balance,
            credit_balance=credit_balance,
        ))
        total_debits += debit
        total_credits += credit
        total_debit_balance += debit_balance
        total_credit_balance += credit_balance

    return TrialBalance(
        as_of=as_of,
        rows=tuple(rows),
        totals=TrialBalanceTotals(
            total_debits=total_debits,
            total_credits=total_credits,
            total_debit_balance=total_debit_balance,
            total_credit_balance=total_credit_balance,
        ),
    )


def check_accounting_equation(trial_balance, epsilon=None):
    """
    Assets (debit balances) vs liabilities + equity (credit balances).

    Diagnostic only: a mismatch is reported and logged, never raised,
    since unclosed results, rounding and in-flight drafts cause transient gaps.
    """
    if epsilon is None:
        epsilon = balance_epsilon()

    assets = liabilities_and_equity = unclosed = ZERO
    for row in trial_balance.rows:
        if row.ac_type == AccountType.ASSET:
            assets += row.debit_balance
        elif row.ac_type in (AccountType.LIABILITY, AccountType.EQUITY):
            liabilities_and_equity += row.credit_balance
        else:
            # income is credit-natured: its contribution to equity is -(debit - credit)
            unclosed -= row.balance

    difference = assets - liabilities_and_equity
    check = EquationCheck(
        assets=assets,
        liabilities_and_equity=liabilities_and_equity,
        difference=difference,
        unclosed_result=unclosed,
        is_balanced=abs(difference) < epsilon,
    )
    if not check.is_balanced:
        logger.warning(
            "Accounting equation off by %s as of %s (unclosed result %s)",
            difference, trial_balance.as_of, unclosed,
        )
    return check
