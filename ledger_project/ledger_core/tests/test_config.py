from django.core.exceptions import ValidationError
from django.test import TestCase

from ..exceptions import AccountNotFoundError
from ..models import AuditAction, AuditLog
from ..models.config import REQUIRED_CONFIG_FIELDS
from ..services import (get_accounting_config, get_config_account,
                        update_accounting_config, validate_config)
from .factories import make_company, make_user, seed_small_chart


class AccountingConfigTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = make_user()
        self.acc = seed_small_chart(self.company)

    def test_missing_config_is_invalid(self):
        self.assertIsNone(get_accounting_config(self.company))
        check = validate_config(self.company)
        self.assertFalse(check.is_valid)
        self.assertEqual(check.missing, list(REQUIRED_CONFIG_FIELDS))

    def test_partial_then_complete_config(self):
        update_accounting_config(
            self.company, self.user,
            cash_account=self.acc["11"], receivable_account=self.acc["13"].pk)

        check = validate_config(self.company)
        self.assertFalse(check.is_valid)
        self.assertNotIn("cash_account", check.missing)
        self.assertIn("inventory_account", check.missing)

        update_accounting_config(
            self.company, self.user,
            sales_revenue_account=self.acc["41"],
            vat_generated_account=self.acc["21"],
            cost_of_sales_account=self.acc["61"],
            inventory_account=self.acc["13"],
        )
        self.assertTrue(validate_config(self.company).is_valid)
        self.assertEqual(get_config_account(self.company, "cash_account"), self.acc["11"])
        self.assertIsNone(get_config_account(self.company, "bank_account"))
        self.assertEqual(
            AuditLog.objects.filter(action=AuditAction.CONFIG_UPDATED).count(), 2)

    def test_unchanged_update_writes_no_audit(self):
        update_accounting_config(self.company, self.user, cash_account=self.acc["11"])
        update_accounting_config(self.company, self.user, cash_account=self.acc["11"])
        self.assertEqual(
            AuditLog.objects.filter(action=AuditAction.CONFIG_UPDATED).count(), 1)

    def test_clearing_a_mapping(self):
        update_accounting_config(self.company, self.user, cash_account=self.acc["11"])
        update_accounting_config(self.company, self.user, cash_account=None)
        self.assertIsNone(get_config_account(self.company, "cash_account"))

    def test_accounts_must_belong_to_company(self):
        other = make_company("Other Co")
        other_acc = seed_small_chart(other)
        with self.assertRaises(AccountNotFoundError):
            update_accounting_config(self.company, self.user, cash_account=other_acc["11"])

    def test_unknown_fields_are_rejected(self):
        with self.assertRaises(ValidationError):
            update_accounting_config(self.company, self.user, petty_cash=self.acc["11"])
        with self.assertRaises(ValidationError):
            get_config_account(self.company, "petty_cash")
