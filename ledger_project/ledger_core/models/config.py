from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company

# Default accounts upstream producers (sales, purchases, payroll) post to
CONFIG_ACCOUNT_FIELDS = (
    "cash_account",
    "bank_account",
    "receivable_account",
    "payable_account",
    "inventory_account",
    "sales_revenue_account",
    "vat_generated_account",
    "vat_deductible_account",
    "cost_of_sales_account",
)

# Accounts a company must map before automatic postings are possible
REQUIRED_CONFIG_FIELDS = (
    "cash_account",
    "receivable_account",
    "sales_revenue_account",
    "vat_generated_account",
    "cost_of_sales_account",
    "inventory_account",
)


def _account_fk(label):
    return models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="+",
        verbose_name=label,
    )


class AccountingConfig(models.Model):
    """One row per company mapping the default posting accounts"""

    company = models.OneToOneField(
        Company, on_delete=models.CASCADE, related_name="accounting_config")

    cash_account = _account_fk("cash")
    bank_account = _account_fk("bank")
    receivable_account = _account_fk("accounts receivable")
    payable_account = _account_fk("accounts payable")
    inventory_account = _account_fk("inventory")
    sales_revenue_account = _account_fk("sales revenue")
    vat_generated_account = _account_fk("VAT generated")
    vat_deductible_account = _account_fk("VAT deductible")
    cost_of_sales_account = _account_fk("cost of sales")

    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    def __str__(self):
        return f"Accounting config for {self.company}"

    def clean(self):
        for field in CONFIG_ACCOUNT_FIELDS:
            account = getattr(self, field)
            if account is not None and account.company_id != self.company_id:
                raise ValidationError(
                    f"{field} must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
