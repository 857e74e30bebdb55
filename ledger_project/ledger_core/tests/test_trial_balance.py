from decimal import Decimal

from django.test import TestCase

from ..models import AccountType
from ..services import (check_accounting_equation, deactivate_account,
                        get_account_by_code, get_trial_balance,
                        seed_from_template)
from ..services.puc import TemplateAccount
from .factories import D, make_company, make_user, post, seed_small_chart


class TrialBalanceScenarioTests(TestCase):
    """Cash bought on credit: debit "11" / credit "21" for 100000."""

    def setUp(self):
        self.company = make_company()
        self.user = make_user()
        seed_from_template(self.company, template=(
            TemplateAccount("1", "Assets", AccountType.ASSET),
            TemplateAccount("11", "Cash", AccountType.ASSET),
            TemplateAccount("2", "Liabilities", AccountType.LIABILITY),
            TemplateAccount("21", "Payables", AccountType.LIABILITY),
        ))
        self.cash = get_account_by_code(self.company, "11")
        self.payable = get_account_by_code(self.company, "21")
        post(self.company, self.user, D(2024, 3, 15),
             [(self.cash, 100000, 0), (self.payable, 0, 100000)])

    def test_rows_and_totals(self):
        tb = get_trial_balance(self.company, as_of=D(2024, 3, 31))
        rows = {r.code: r for r in tb.rows}

        # only accounts with movements appear
        self.assertEqual(list(rows), ["11", "21"])

        cash = rows["11"]
        self.assertEqual(cash.debit, Decimal("100000"))
        self.assertEqual(cash.credit, 0)
        self.assertEqual(cash.debit_balance, Decimal("100000"))
        self.assertEqual(cash.credit_balance, 0)

        payable = rows["21"]
        self.assertEqual(payable.debit, 0)
        self.assertEqual(payable.credit, Decimal("100000"))
        self.assertEqual(payable.credit_balance, Decimal("100000"))
        self.assertEqual(payable.debit_balance, 0)

        self.assertEqual(tb.totals.total_debits, Decimal("100000"))
        self.assertEqual(tb.totals.total_credits, Decimal("100000"))
        self.assertEqual(tb.totals.total_debit_balance, tb.totals.total_credit_balance)

    def test_as_of_excludes_later_entries(self):
        tb = get_trial_balance(self.company, as_of=D(2024, 3, 14))
        self.assertEqual(tb.rows, ())
        self.assertEqual(tb.totals.total_debits, 0)

    def test_equation_holds(self):
        check = check_accounting_equation(get_trial_balance(self.company, D(2024, 3, 31)))
        self.assertTrue(check.is_balanced)
        self.assertEqual(check.assets, Decimal("100000"))
        self.assertEqual(check.liabilities_and_equity, Decimal("100000"))
        self.assertEqual(check.difference, 0)


class TrialBalanceTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = make_user()
        self.acc = seed_small_chart(self.company)

    """ Each row is one-sided, whatever the account nature """
    def test_row_balances_are_one_sided(self):
        post(self.company, self.user, D(2024, 3, 1),
             [(self.acc["11"], 500, 0), (self.acc["31"], 0, 500)])
        # sales returned more than sold: income account ends debit-side
        post(self.company, self.user, D(2024, 3, 2),
             [(self.acc["41"], 80, 0), (self.acc["11"], 0, 80)])

        tb = get_trial_balance(self.company, D(2024, 3, 31))
        for row in tb.rows:
            self.assertTrue(row.debit_balance == 0 or row.credit_balance == 0)
            self.assertEqual(row.debit_balance - row.credit_balance, row.debit - row.credit)

        sales = next(r for r in tb.rows if r.code == "41")
        self.assertEqual(sales.debit_balance, Decimal("80.00"))
        self.assertEqual(tb.totals.total_debits, tb.totals.total_credits)

    def test_drafts_and_voids_are_excluded(self):
        post(self.company, self.user, D(2024, 3, 1),
             [(self.acc["11"], 10, 0), (self.acc["31"], 0, 10)], approve=False)
        tb = get_trial_balance(self.company, D(2024, 3, 31))
        self.assertEqual(tb.rows, ())

    def test_inactive_accounts_are_excluded(self):
        post(self.company, self.user, D(2024, 3, 1),
             [(self.acc["13"], 10, 0), (self.acc["31"], 0, 10)])
        deactivate_account(self.company, self.acc["13"].pk)
        codes = [r.code for r in get_trial_balance(self.company, D(2024, 3, 31)).rows]
        self.assertEqual(codes, ["31"])

    """ Unclosed income shows up as the equation difference """
    def test_equation_reports_unclosed_result(self):
        post(self.company, self.user, D(2024, 3, 1),
             [(self.acc["11"], 1000, 0), (self.acc["31"], 0, 1000)])
        post(self.company, self.user, D(2024, 3, 5),
             [(self.acc["11"], 300, 0), (self.acc["41"], 0, 300)])
        post(self.company, self.user, D(2024, 3, 6),
             [(self.acc["51"], 100, 0), (self.acc["11"], 0, 100)])

        with self.assertLogs("ledger_core.services.trial_balance", level="WARNING"):
            check = check_accounting_equation(get_trial_balance(self.company, D(2024, 3, 31)))

        self.assertFalse(check.is_balanced)
        self.assertEqual(check.assets, Decimal("1200.00"))
        self.assertEqual(check.liabilities_and_equity, Decimal("1000.00"))
        self.assertEqual(check.unclosed_result, Decimal("200.00"))
        self.assertEqual(check.difference, check.unclosed_result)

    def test_tenants_do_not_mix(self):
        other = make_company("Other Co")
        other_acc = seed_small_chart(other)
        post(other, self.user, D(2024, 3, 1),
             [(other_acc["11"], 7, 0), (other_acc["31"], 0, 7)])
        self.assertEqual(get_trial_balance(self.company, D(2024, 3, 31)).rows, ())
