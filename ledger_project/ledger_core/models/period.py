from django.conf import settings
from django.core.exceptions import ValidationError  # Built-in way to raise validation errors
from django.db import models        # ORM base classes to define database tables as Python classes
from ..managers import TenantManager
from .company import Company


def period_label(year, month):
    """Human-readable period string used on entries, e.g. "2024-03"."""
    return f"{year:04d}-{month:02d}"


# ---------- Period (accounting period lock) ----------
class Period(models.Model): # Lock state of one (year, month) bucket

    # Every company has its own independent calendar of periods
    company = models.ForeignKey(Company,
                                # Prevent accidental deletion of period locks
                                on_delete=models.PROTECT
                                )
    """
        Tenant isolation:
        "Company A" can close July while "Company B" is still open.
        A row only exists once a period has been closed at least once;
        no row means the period is open.
    """

    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()

    # Indicate whether the books for this period are closed
    is_closed = models.BooleanField(default=False)
    """
        When is_closed=True:
            No new entries or approvals allowed.
            Prevents backdating transactions that could corrupt finalized reports.
    """
    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="+",
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
                    models.Index(fields=["company", "is_closed"], name="period_company_closed_idx"),
                ]

        # One lock row per (company, year, month)
        constraints = [
          models.UniqueConstraint(fields=["company", "year", "month"],
                                  name="uq_company_period_year_month"),
      ]

        # Most recent first
        ordering = ("company", "-year", "-month")

    def __str__(self):
        return f"{self.company.slug} {self.name}" # Example: "acme 2025-07".

    @property
    def name(self):
        return period_label(self.year, self.month)

    def clean(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(f"month must be between 1 and 12, got {self.month}")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.is_closed:
            raise ValidationError(f"Cannot delete closed period {self.name}.")
        return super().delete(*args, **kwargs)
