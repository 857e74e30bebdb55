from decimal import Decimal

from django.test import TestCase

from ..tasks import verify_books
from .factories import D, make_company, make_user, post, seed_small_chart


class VerifyBooksTaskTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = make_user()
        acc = seed_small_chart(self.company)
        post(self.company, self.user, D(2024, 3, 1),
             [(acc["11"], 500, 0), (acc["21"], 0, 500)])
        post(self.company, self.user, D(2024, 5, 1),
             [(acc["11"], 70, 0), (acc["41"], 0, 70)])

    def test_summary_of_balanced_books(self):
        # run synchronously, as the worker would
        result = verify_books.apply(args=(self.company.pk, "2024-03-31")).get()

        self.assertEqual(result["company_id"], self.company.pk)
        self.assertEqual(result["as_of"], "2024-03-31")
        self.assertEqual(result["accounts"], 2)
        self.assertEqual(Decimal(result["total_debits"]), Decimal("500"))
        self.assertTrue(result["totals_match"])
        self.assertTrue(result["equation_balanced"])

    def test_unclosed_income_is_reported(self):
        result = verify_books(self.company.pk, D(2024, 5, 31))

        self.assertTrue(result["totals_match"])
        self.assertFalse(result["equation_balanced"])
        self.assertEqual(Decimal(result["unclosed_result"]), Decimal("70"))
