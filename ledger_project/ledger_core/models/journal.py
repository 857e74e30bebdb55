from decimal import ROUND_HALF_UP, Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..conf import TWOPLACES, balance_epsilon
from ..managers import JournalLineManager, TenantManager
from .account import Account
from .company import Company


class EntryStatus(models.TextChoices):
    DRAFT = "draft", "Draft"  # still editable, may be unbalanced
    APPROVED = "approved", "Approved"  # finalized, counts in the ledger
    VOID = "void", "Void"  # discarded draft, never counted


class EntryType(models.TextChoices):
    JOURNAL = "journal", "Journal"
    RECEIPT = "receipt", "Receipt"
    PAYMENT = "payment", "Payment"
    SALE = "sale", "Sale"
    PURCHASE = "purchase", "Purchase"
    ADJUSTMENT = "adjustment", "Adjustment"
    PAYROLL = "payroll", "Payroll"
    REVERSAL = "reversal", "Reversal"
    OPENING = "opening", "Opening balance"


# Control status changes; APPROVED and VOID are terminal
ALLOWED_TRANSITIONS = {
    EntryStatus.DRAFT: frozenset({EntryStatus.APPROVED, EntryStatus.VOID}),
    EntryStatus.APPROVED: frozenset(),
    EntryStatus.VOID: frozenset(),
}

# Header fields frozen once the entry leaves DRAFT
CONTENT_FIELDS = (
    "date", "period", "entry_type", "description", "reference",
    "total_debit", "total_credit",
)


# ---------- Journal (Header) & JournalLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    # Multi-tenant: every entry belongs to a company
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # Sequential per company, e.g. "2024-03-0001"
    number = models.CharField(max_length=20)
    date = models.DateField()
    # "YYYY-MM", always derived from date
    period = models.CharField(max_length=7, editable=False)
    entry_type = models.CharField(
        max_length=16, choices=EntryType.choices, default=EntryType.JOURNAL)
    description = models.TextField(blank=True, default="")
    reference = models.CharField(max_length=200, blank=True, default="")
    status = models.CharField(
        max_length=10, choices=EntryStatus.choices, default=EntryStatus.DRAFT)

    # Header copy of the line sums, refreshed on every write
    total_debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="+",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    voided_at = models.DateTimeField(null=True, blank=True)
    void_reason = models.TextField(blank=True, default="")

    # Set on a reversal entry, pointing at the approved entry it cancels
    reverses = models.OneToOneField(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversal",
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Speed up listing & filtering
        # (e.g. show all approved entries this month)
        indexes = [
            models.Index(fields=["company", "date"], name="je_company_date_idx"),
            models.Index(fields=["company", "period", "status"],
                         name="je_company_period_status_idx"),
        ]
        constraints = [
            # Numbers never repeat inside a company
            models.UniqueConstraint(
                fields=["company", "number"], name="uq_je_company_number"
            )
        ]
        verbose_name_plural = "journal entries"

    def __str__(self):
        return f"JE {self.number} {self.date} [{self.status}]"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        """Return debits, credits sums for lines"""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit"),
            total_credit=models.Sum("credit"),
        )
        return tuple(
            (aggs[key] or Decimal("0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
            for key in ("total_debit", "total_credit")
        )

    # True if double-entry rule holds: |debits - credits| < epsilon
    def is_balanced(self, epsilon=None):
        debit, credit = self.compute_totals()
        if epsilon is None:
            epsilon = balance_epsilon()
        return abs(debit - credit) < epsilon

    def can_transition_to(self, new_status):
        return new_status in ALLOWED_TRANSITIONS[EntryStatus(self.status)]

    @property
    def is_draft(self):
        return self.status == EntryStatus.DRAFT

    def save(self, *args, **kwargs):
        self.period = self.date.strftime("%Y-%m")

        if self.pk:  # Does this row already exist in DB?
            # Fetch "original" row to update
            orig = JournalEntry.objects.filter(pk=self.pk).first()
            if orig and orig.status != self.status and not orig.can_transition_to(self.status):
                raise ValidationError(
                    f"Cannot go from {orig.status} to {self.status}")
            # Content of approved/void entries is frozen
            if orig and orig.status != EntryStatus.DRAFT:
                changed = [
                    f for f in CONTENT_FIELDS
                    if getattr(orig, f) != getattr(self, f)
                ]
                if changed:
                    raise ValidationError(
                        "Cannot modify a non-draft JournalEntry. "
                        f"Changed: {', '.join(changed)}"
                    )

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f"Journal entry {self.number} cannot be deleted. Void it instead.")


class JournalLine(models.Model):  # Stores Lines ( credits / debits )
    """
    Each line belongs to a journal entry and to a GL account.
    Signed contribution to the account is always debit - credit.
    """

    # Belongs to company & a journal entry
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    journal = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    # Must point to one Account (can’t delete account if lines exist → PROTECT)
    account = models.ForeignKey(Account, on_delete=models.PROTECT)

    description = models.TextField(blank=True, default="")

    debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    # Optional third party (customer, supplier, employee) owned by callers
    third_party_id = models.CharField(max_length=64, blank=True, default="")
    third_party_name = models.CharField(max_length=200, blank=True, default="")

    objects = JournalLineManager()  # Enforce tenant scoping

    class Meta:
        # For fast queries like “all lines for this account” /
        # “all lines in this JE.”
        indexes = [
            models.Index(fields=["company", "account"], name="jl_company_account_idx"),
            models.Index(fields=["company", "journal"], name="jl_company_journal_idx"),
            models.Index(fields=["company", "third_party_id"],
                         name="jl_company_third_party_idx"),
        ]

        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(debit__gte=0) &
                    models.Q(credit__gte=0)
                ),
                name="jl_non_negative_amounts",
            ),
            models.CheckConstraint(
                condition=~(models.Q(debit=0) &
                            models.Q(credit=0)),
                name="jl_debit_or_credit_nonzero",
            ),
        ]

    # Show journal, account, and amounts in admin dropdowns and debug logs
    def __str__(self):
        jid = self.journal_id
        acc = self.account.code
        acn = self.account.name
        return f"{jid} | {acc} {acn} | D:{self.debit} C:{self.credit}"

    def clean(self):
        if self.debit < 0 or self.credit < 0:
            raise ValidationError("Debit and credit must be >= 0")
        if (self.debit == 0) and (self.credit == 0):
            raise ValidationError(
                "JournalLine requires a non-0 amount on either debit or credit"
            )

        # Every line must belong to same company as its parent journal
        if self.journal_id and self.company_id != self.journal.company_id:
            raise ValidationError(
                "JournalLine.company must equal JournalEntry.company"
            )
        if self.account_id and self.account.company_id != self.company_id:
            raise ValidationError(
                "JournalLine.account must belong to the same company.")

        # Lines of an approved or void entry are frozen
        if self.journal_id and not self.journal.is_draft:
            if self.pk:
                orig = JournalLine.objects.filter(pk=self.pk).first()
                changed = orig is None or (
                    orig.debit != self.debit
                    or orig.credit != self.credit
                    or orig.account_id != self.account_id
                )
                if changed:
                    raise ValidationError(
                        "Cannot modify JournalLine: "
                        "parent JournalEntry is not a draft."
                    )
            else:
                raise ValidationError(
                    "Cannot add JournalLine: parent journal is not a draft."
                )

    def delete(self, *args, **kwargs):
        # Prevent deletion if parent journal left draft
        if self.journal_id and not JournalEntry.objects.filter(
            pk=self.journal_id, status=EntryStatus.DRAFT
        ).exists():
            raise ValidationError(
                "Cannot delete JournalLine: parent JournalEntry is not a draft."
            )
        return super().delete(*args, **kwargs)

    def save(self, *args, **kwargs):
        # If company not set but JE is known, get company from JE
        if not getattr(self, "company_id", None) and getattr(self, "journal", None):
            self.company_id = self.journal.company_id

        # clean()+field validation always run whenever
        # you save a JournalLine programmatically
        self.full_clean()
        return super().save(*args, **kwargs)
