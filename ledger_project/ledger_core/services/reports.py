"""
Financial statements built on top of the ledger aggregates.

Statements only sum ledger figures by account-code prefix; parents always
show their own balance plus every descendant's.
"""
import datetime
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Sum

from ..models import EntryStatus, JournalLine, Nature
from .chart import get_account_tree
from .journal import list_lines
from .trial_balance import get_trial_balance

ZERO = Decimal("0.00")

BALANCE_SHEET_CLASSES = ("1", "2", "3")
PROFIT_AND_LOSS_CLASSES = ("4", "5", "6", "7")


@dataclass(frozen=True)
class RolledBalance:
    code: str
    name: str
    level: int
    nature: str
    own: Decimal    # debit - credit posted on the account itself
    total: Decimal  # own + all descendants

    @property
    def natural_total(self):
        """Total in the account's natural sign (credit accounts flipped)."""
        return -self.total if self.nature == Nature.CREDIT else self.total


@dataclass(frozen=True)
class StatementLine:
    code: str
    name: str
    level: int
    amount: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    as_of: datetime.date
    lines: tuple
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal


@dataclass(frozen=True)
class ProfitAndLoss:
    start_date: datetime.date
    end_date: datetime.date
    lines: tuple
    total_income: Decimal
    total_expenses: Decimal
    total_cost_of_sales: Decimal
    net_income: Decimal


def sum_by_prefix(rows, prefix):
    """Signed (debit - credit) total of trial balance rows under a code prefix."""
    return sum((r.debit - r.credit for r in rows if r.code.startswith(prefix)), ZERO)


def _rollup(company, own_by_code):
    tree = get_account_tree(company)
    totals = {code: own_by_code.get(code, ZERO) for code in tree.nodes}
    # Children before parents: longest codes first
    for code in sorted(tree.nodes, key=len, reverse=True):
        parent_code = tree[code].parent_code
        if parent_code is not None:
            totals[parent_code] += totals[code]

    return {
        node.code: RolledBalance(
            code=node.code,
            name=node.name,
            level=node.level,
            nature=node.nature,
            own=own_by_code.get(node.code, ZERO),
            total=totals[node.code],
        )
        for node in tree.walk()
    }


def rollup_balances(company, as_of=None):
    """Balance of every account including its sub-accounts, keyed by code."""
    tb = get_trial_balance(company, as_of)
    return _rollup(company, {r.code: r.debit - r.credit for r in tb.rows})


def _statement_lines(rolled, classes):
    # Class and group levels are always shown, even at zero
    return tuple(
        StatementLine(code=r.code, name=r.name, level=r.level, amount=r.natural_total)
        for r in rolled.values()
        if r.code.startswith(classes) and (r.total != 0 or len(r.code) <= 4)
    )


def get_balance_sheet(company, as_of):
    tb = get_trial_balance(company, as_of)
    rolled = _rollup(company, {r.code: r.debit - r.credit for r in tb.rows})
    return BalanceSheet(
        as_of=tb.as_of,
        lines=_statement_lines(rolled, BALANCE_SHEET_CLASSES),
        total_assets=sum_by_prefix(tb.rows, "1"),
        total_liabilities=-sum_by_prefix(tb.rows, "2"),
        total_equity=-sum_by_prefix(tb.rows, "3"),
    )


def get_profit_and_loss(company, start_date, end_date):
    sums = (
        JournalLine.objects.approved(company)
        .in_range(start_date, end_date)
        .filter(account__is_active=True)
        .values("account__code")
        .annotate(debit=Sum("debit"), credit=Sum("credit"))
    )
    own = {
        row["account__code"]: (row["debit"] or ZERO) - (row["credit"] or ZERO)
        for row in sums
        if row["account__code"].startswith(PROFIT_AND_LOSS_CLASSES)
    }
    rolled = _rollup(company, own)

    def signed(prefix):
        return sum((v for code, v in own.items() if code.startswith(prefix)), ZERO)

    income = -signed("4")
    expenses = signed("5")
    costs = signed("6") + signed("7")
    return ProfitAndLoss(
        start_date=start_date,
        end_date=end_date,
        lines=_statement_lines(rolled, PROFIT_AND_LOSS_CLASSES),
        total_income=income,
        total_expenses=expenses,
        total_cost_of_sales=costs,
        net_income=income - expenses - costs,
    )


def get_third_party_auxiliary(company, third_party_id, start_date, end_date):
    """Approved lines carrying a third party, oldest first."""
    return list_lines(
        company,
        third_party_id=third_party_id,
        start_date=start_date,
        end_date=end_date,
        status=EntryStatus.APPROVED,
    )
