from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# Classify general ledger accounts
class AccountType(models.TextChoices):
    ASSET = "asset", "Asset"
    LIABILITY = "liability", "Liability"
    EQUITY = "equity", "Equity"
    INCOME = "income", "Income"
    EXPENSE = "expense", "Expense"
    COST_OF_SALES = "cost_of_sales", "Cost of sales"


# Define whether the account increases on the debit side or credit side
class Nature(models.TextChoices):
    DEBIT = "debit", "Debit"
    CREDIT = "credit", "Credit"


DEBIT_TYPES = (AccountType.ASSET, AccountType.EXPENSE, AccountType.COST_OF_SALES)


def default_nature(ac_type):
    """Assets/Expenses/Costs → Debit, Liabilities/Equity/Income → Credit."""
    return Nature.DEBIT if ac_type in DEBIT_TYPES else Nature.CREDIT


def validate_account_code(code):
    if not code or not code.isdigit():
        raise ValidationError(f"Account code {code!r} must contain only digits")
    if len(code) > 1 and len(code) % 2:
        raise ValidationError(
            f"Account code {code!r} has an invalid length {len(code)}; "
            "expected 1, 2, 4, 6, ... digits"
        )


def level_for_code(code):
    """Hierarchy level from code length: 1→1, 2→2, 4→3, 6→4, 8→5 ..."""
    validate_account_code(code)
    if len(code) == 1:
        return 1
    return len(code) // 2 + 1


def parent_code_for(code):
    """Code of the parent bucket, or None for a class (1-digit) account."""
    validate_account_code(code)
    if len(code) == 1:
        return None
    if len(code) == 2:
        return code[:1]
    return code[:-2]


class Account(models.Model):
    """
    Ledger account in the Chart of Accounts.
    - code is unique per company; its length encodes the tree level
    - ac_type: determines reporting -BS vs P&L
    - nature: which side increases the balance
    """

    company = models.ForeignKey(  # Each account belongs to one company
        Company,
        on_delete=models.CASCADE,
    )
    code = models.CharField(max_length=32, validators=[validate_account_code])
    name = models.CharField(max_length=200)

    ac_type = models.CharField(max_length=16, choices=AccountType.choices)
    nature = models.CharField(
        max_length=6,
        choices=Nature.choices,
        default=Nature.DEBIT,
    )
    # Always recomputed from code on save
    level = models.PositiveSmallIntegerField(editable=False)

    # Parent is resolved by code prefix, never chosen freely
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="children",
    )
    # Semantic markers (CASH, BANK, RECEIVABLE, VAT ...) for downstream reports
    tags = models.JSONField(default=list, blank=True)

    # “soft deactivate” accounts (hide in reports, stop new postings)
    # without deleting history
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    # Only these may change once the account exists
    MUTABLE_FIELDS = ("name", "tags", "is_active")
    IMMUTABLE_FIELDS = ("company_id", "code", "ac_type", "nature", "parent_id")

    class Meta:
        ordering = ("company", "code")
        indexes = [
            models.Index(fields=["company", "ac_type"], name="acct_company_type_idx"),
            models.Index(fields=["company", "parent"], name="acct_company_parent_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        validate_account_code(self.code)
        expected = parent_code_for(self.code)

        if self.parent_id is None:
            if expected is not None:
                raise ValidationError(
                    f"Account {self.code} needs parent account {expected}")
            return

        # Parent must be the prefix bucket of the same company
        if self.parent.company_id != self.company_id:
            raise ValidationError(
                "Parent & child accounts must belong to the same company")
        if self.parent.code != expected:
            raise ValidationError(
                f"Parent of {self.code} must be {expected}, "
                f"not {self.parent.code}"
            )

    def save(self, *args, **kwargs):
        """Recompute level and enforce immutability of the account's identity."""
        self.level = level_for_code(self.code)
        if self.pk:
            old = Account.objects.filter(pk=self.pk).values(
                *self.IMMUTABLE_FIELDS).first()
            if old:
                changed = [
                    f for f in self.IMMUTABLE_FIELDS
                    if old[f] != getattr(self, f)
                ]
                if changed:
                    raise ValidationError(
                        f"Account fields {', '.join(changed)} cannot be changed"
                    )
        self.full_clean()
        return super().save(*args, **kwargs)
