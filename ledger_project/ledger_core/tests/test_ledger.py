from decimal import Decimal

from django.test import TestCase

from ..exceptions import AccountNotFoundError
from ..services import (get_account_balance, get_account_movements,
                        get_general_ledger, void_entry)
from .factories import D, make_company, make_user, post, seed_small_chart


class GeneralLedgerTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = make_user()
        self.acc = seed_small_chart(self.company)
        cash, capital, salaries = self.acc["11"], self.acc["31"], self.acc["51"]

        post(self.company, self.user, D(2024, 1, 10),
             [(cash, 100, 0), (capital, 0, 100)], description="Capital")
        post(self.company, self.user, D(2024, 2, 5),
             [(cash, 50, 0), (capital, 0, 50)], description="More capital")
        post(self.company, self.user, D(2024, 2, 20),
             [(salaries, 30, 0), (cash, 0, 30)], description="Salary")
        # drafts never reach the ledger
        post(self.company, self.user, D(2024, 2, 21),
             [(cash, 999, 0), (capital, 0, 999)], approve=False)

    def test_initial_balance_carries_forward(self):
        ledger = get_account_movements(
            self.company, self.acc["11"].pk, D(2024, 2, 1), D(2024, 2, 29))

        self.assertEqual(ledger.initial_balance, Decimal("100.00"))
        self.assertEqual([m.balance for m in ledger.movements],
                         [Decimal("150.00"), Decimal("120.00")])
        self.assertEqual(ledger.total_debits, Decimal("50.00"))
        self.assertEqual(ledger.total_credits, Decimal("30.00"))
        self.assertEqual(ledger.final_balance, Decimal("120.00"))

    """ final = initial + Σ(debit - credit) """
    def test_final_balance_identity(self):
        ledger = get_account_movements(self.company, self.acc["11"].pk, D(2024, 2, 1))
        net = sum(m.debit - m.credit for m in ledger.movements)
        self.assertEqual(ledger.final_balance, ledger.initial_balance + net)

    def test_without_range_starts_from_zero(self):
        ledger = get_account_movements(self.company, self.acc["11"].pk)
        self.assertEqual(ledger.initial_balance, 0)
        self.assertEqual(len(ledger.movements), 3)
        self.assertEqual(ledger.final_balance, Decimal("120.00"))

    def test_movements_are_ordered_by_date_then_number(self):
        first = post(self.company, self.user, D(2024, 1, 5),
                     [(self.acc["11"], 1, 0), (self.acc["31"], 0, 1)])
        second = post(self.company, self.user, D(2024, 1, 5),
                      [(self.acc["11"], 2, 0), (self.acc["31"], 0, 2)])

        ledger = get_account_movements(self.company, self.acc["11"].pk)
        self.assertEqual(
            [m.entry_number for m in ledger.movements[:2]],
            [first.number, second.number])
        self.assertEqual([m.date for m in ledger.movements],
                         sorted(m.date for m in ledger.movements))

    def test_reads_are_repeatable(self):
        args = (self.company, self.acc["11"].pk, D(2024, 2, 1), D(2024, 2, 29))
        self.assertEqual(get_account_movements(*args), get_account_movements(*args))

    def test_general_ledger_skips_idle_accounts(self):
        ledgers = get_general_ledger(self.company, start_date=D(2024, 2, 1),
                                     end_date=D(2024, 2, 29))
        codes = [l.code for l in ledgers]

        # capital has an opening balance and movements; receivables nothing
        self.assertEqual(codes, ["11", "31", "51"])
        self.assertNotIn("13", codes)

        march = get_general_ledger(self.company, start_date=D(2024, 3, 1))
        # no March movements, but opening balances keep accounts listed
        self.assertEqual([l.code for l in march], ["11", "31", "51"])
        self.assertTrue(all(not l.movements for l in march))

    def test_general_ledger_single_account(self):
        ledgers = get_general_ledger(self.company, account_id=self.acc["51"].pk)
        self.assertEqual(len(ledgers), 1)
        self.assertEqual(ledgers[0].final_balance, Decimal("30.00"))

    def test_reversal_nets_out(self):
        je = post(self.company, self.user, D(2024, 2, 25),
                  [(self.acc["13"], 40, 0), (self.acc["41"], 0, 40)])
        void_entry(self.company, self.user, je.pk, "error")

        self.assertEqual(get_account_balance(self.company, self.acc["13"].pk), 0)
        ledger = get_account_movements(self.company, self.acc["13"].pk)
        self.assertEqual(len(ledger.movements), 2)

    def test_account_balance_in_range(self):
        self.assertEqual(
            get_account_balance(self.company, self.acc["11"].pk, end_date=D(2024, 1, 31)),
            Decimal("100.00"))
        self.assertEqual(
            get_account_balance(self.company, self.acc["31"].pk),
            Decimal("-150.00"))

    def test_unknown_account(self):
        with self.assertRaises(AccountNotFoundError):
            get_account_movements(self.company, 987654)
